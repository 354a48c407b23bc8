# tests/core/test_merger.py  # apply_rsvp: actualización del invitado y deduplicación por email.

from datetime import datetime, timezone

import pytest

from wedsite.core.merger import DEFAULT_PLUS_ONE_NAME, apply_rsvp
from wedsite.errors import GuestNotInListError
from wedsite.models import RsvpStatus
from wedsite.schemas import GuestRecord, RsvpSubmission

NOW = datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)


def _submission(**overrides) -> RsvpSubmission:
    data = {"email": "bob@x.com", "attending": True, "number_of_guests": 1}
    data.update(overrides)
    return RsvpSubmission(**data)


# =======================
# Actualización del registro
# =======================
def test_overwrites_mutable_fields_and_keeps_canonical_name():
    guests = [GuestRecord(name="Bob Lee"), GuestRecord(name="Ana Ruiz")]
    result = apply_rsvp(
        GuestRecord(name="bob lee"),
        _submission(number_of_guests=2, plus_one_name="Sue", dietary_restrictions="Vegan", song_suggestion="Dancing Queen"),
        guests,
        now=NOW,
    )

    bob = result[0]
    assert bob.name == "Bob Lee"
    assert bob.email == "bob@x.com"
    assert bob.rsvp_status == RsvpStatus.yes
    assert bob.plus_one is True
    assert bob.plus_one_name == "Sue"
    assert bob.dietary_restrictions == "Vegan"
    assert bob.song_suggestion == "Dancing Queen"
    assert bob.submitted_at == NOW
    assert result[1] == guests[1]


def test_not_attending_clears_plus_one():
    guests = [GuestRecord(name="Bob Lee", plus_one=True, plus_one_name="Sue")]
    result = apply_rsvp(guests[0], _submission(attending=False), guests, now=NOW)
    assert result[0].rsvp_status == RsvpStatus.no
    assert result[0].plus_one is False
    assert result[0].plus_one_name is None


def test_plus_one_without_name_gets_default():
    guests = [GuestRecord(name="Bob Lee")]
    result = apply_rsvp(guests[0], _submission(number_of_guests=2), guests, now=NOW)
    assert result[0].plus_one_name == DEFAULT_PLUS_ONE_NAME


def test_input_list_is_not_mutated():
    guests = [GuestRecord(name="Bob Lee")]
    apply_rsvp(guests[0], _submission(), guests, now=NOW)
    assert guests[0].email is None
    assert guests[0].rsvp_status == RsvpStatus.pending


def test_repeated_submission_keeps_length_and_refreshes_timestamp():
    guests = [GuestRecord(name="Bob Lee"), GuestRecord(name="Ana Ruiz")]
    later = datetime(2026, 5, 2, tzinfo=timezone.utc)

    once = apply_rsvp(guests[0], _submission(), guests, now=NOW)
    twice = apply_rsvp(once[0], _submission(), once, now=later)

    assert len(once) == len(twice) == 2
    assert twice[0].submitted_at == later


# =======================
# Deduplicación por email
# =======================
def test_removes_other_record_with_same_email():
    guests = [GuestRecord(name="Bob Lee", email=None), GuestRecord(name="Robert Lee", email="bob@x.com")]
    result = apply_rsvp(GuestRecord(name="Bob Lee"), _submission(email="bob@x.com"), guests, now=NOW)

    assert [g.name for g in result] == ["Bob Lee"]
    assert result[0].email == "bob@x.com"


def test_removes_every_duplicate_and_compares_case_insensitively():
    guests = [
        GuestRecord(name="Robert Lee", email="BOB@x.com"),
        GuestRecord(name="Bob Lee"),
        GuestRecord(name="Ana Ruiz", email="ana@x.com"),
        GuestRecord(name="Bobby Lee", email="bob@X.com"),
    ]
    result = apply_rsvp(guests[1], _submission(email="bob@x.com"), guests, now=NOW)
    assert [g.name for g in result] == ["Bob Lee", "Ana Ruiz"]


def test_missing_guest_raises_without_side_effects():
    guests = [GuestRecord(name="Ana Ruiz", email="bob@x.com")]
    snapshot = [g.model_copy() for g in guests]

    with pytest.raises(GuestNotInListError) as exc:
        apply_rsvp(GuestRecord(name="Bob Lee"), _submission(), guests, now=NOW)

    assert exc.value.name == "Bob Lee"
    assert guests == snapshot
