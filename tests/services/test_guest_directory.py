# tests/services/test_guest_directory.py  # Servicio del directorio: migración perezosa, RSVP, panel admin.

import pytest
from sqlalchemy.orm import sessionmaker

from wedsite.errors import DuplicateGuestError, GuestNotInListError
from wedsite.models import RsvpStatus
from wedsite.schemas import GuestRecord, GuestUpdate, LegacyRsvpRecord, RsvpSubmission
from wedsite.services.guest_directory import GuestDirectory, compute_stats, export_csv
from wedsite.store import SqlGuestListStore


# =======================
# Lectura / migración
# =======================
def test_first_read_migrates_and_persists(directory, store, make_wedding):
    make_wedding(legacy_rsvps=[LegacyRsvpRecord(guest_name="Luis Perez", attending=True, email="luis@x.com")])

    guests, version = directory.get_guest_list("ana-luis")

    assert [(g.name, g.rsvp_status) for g in guests] == [
        ("Ana Garcia", RsvpStatus.pending),
        ("Luis Perez", RsvpStatus.yes),
    ]
    assert version == 1
    assert store.load("ana-luis").unified_list == guests


def test_later_reads_do_not_write(directory, make_wedding):
    make_wedding()
    _, v1 = directory.get_guest_list("ana-luis")
    _, v2 = directory.get_guest_list("ana-luis")
    assert v1 == v2 == 1


def test_new_names_in_name_list_are_synced(directory, store, make_wedding):
    make_wedding()
    directory.get_guest_list("ana-luis")
    store.append_guest_names("ana-luis", ["Carol Diaz"])

    guests, version = directory.get_guest_list("ana-luis")
    assert [g.name for g in guests][-1] == "Carol Diaz"
    assert version == 2


def test_concurrent_first_read_returns_stored_list(engine, directory, make_wedding):
    make_wedding("race")
    other_db = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        other_store = SqlGuestListStore(other_db)
        assert other_store.load("race").version == 0          # Esta petición aún ve la boda sin migrar.

        directory.get_guest_list("race")                        # La otra la migra y guarda v1.

        guest = GuestDirectory(other_store).search("race", "Ana Garcia")
        assert guest is not None and guest.name == "Ana Garcia"
        guests, version = GuestDirectory(other_store).get_guest_list("race")
        assert [g.name for g in guests] == ["Ana Garcia", "Luis Perez"]
        assert version == 1
    finally:
        other_db.close()


# =======================
# Búsqueda y RSVP
# =======================
def test_search_uses_matcher(directory, make_wedding):
    make_wedding()
    assert directory.search("ana-luis", "garcia ana").name == "Ana Garcia"
    assert directory.search("ana-luis", "Zara") is None


def test_submit_rsvp_saves_and_deduplicates(directory, store, make_wedding):
    make_wedding(guest_names=["Bob Lee", "Robert Lee"])
    guests, _ = directory.get_guest_list("ana-luis")
    store.save("ana-luis", [guests[0], guests[1].model_copy(update={"email": "bob@x.com"})])

    record = directory.submit_rsvp("ana-luis", "bob lee", RsvpSubmission(email="bob@x.com", attending=True))

    assert record.name == "Bob Lee"
    assert record.rsvp_status == RsvpStatus.yes
    data = store.load("ana-luis")
    assert [g.name for g in data.unified_list] == ["Bob Lee"]
    assert data.guest_name_list == ["Bob Lee"]

    guests, _ = directory.get_guest_list("ana-luis")
    assert [g.name for g in guests] == ["Bob Lee"]


def test_submit_rsvp_unknown_guest_returns_none(directory, make_wedding):
    make_wedding()
    assert directory.submit_rsvp("ana-luis", "Zara Khan", RsvpSubmission(email="z@x.com", attending=False)) is None


# =======================
# Panel de administración
# =======================
def test_add_guest_rejects_duplicate_names(directory, make_wedding):
    make_wedding()
    added = directory.add_guest("ana-luis", "Carol Diaz", "carol@x.com")
    assert added.rsvp_status == RsvpStatus.pending

    with pytest.raises(DuplicateGuestError):
        directory.add_guest("ana-luis", "  carol   DIAZ ")


def test_update_guest_changes_only_sent_fields(directory, make_wedding):
    make_wedding()
    directory.add_guest("ana-luis", "Carol Diaz", "carol@x.com")

    updated = directory.update_guest("ana-luis", "carol diaz", GuestUpdate(rsvp_status=RsvpStatus.no))
    assert updated.email == "carol@x.com"
    assert updated.rsvp_status == RsvpStatus.no

    cleared = directory.update_guest("ana-luis", "Carol Diaz", GuestUpdate.model_validate({"email": ""}))
    assert cleared.email is None


def test_update_guest_rename_onto_existing_name_fails(directory, make_wedding):
    make_wedding()
    with pytest.raises(DuplicateGuestError):
        directory.update_guest("ana-luis", "Ana Garcia", GuestUpdate(name="luis perez"))


def test_remove_guest(directory, make_wedding):
    make_wedding()
    directory.remove_guest("ana-luis", "ANA GARCIA")
    guests, _ = directory.get_guest_list("ana-luis")
    assert [g.name for g in guests] == ["Luis Perez"]

    with pytest.raises(GuestNotInListError):
        directory.remove_guest("ana-luis", "Ana Garcia")


def test_removed_guest_is_not_resynced_from_name_list(directory, make_wedding):
    make_wedding()
    directory.remove_guest("ana-luis", "Ana Garcia")
    directory.remove_guest("ana-luis", "Luis Perez")
    guests, _ = directory.get_guest_list("ana-luis")
    assert guests == []


def test_import_skips_existing_names_exactly(directory, store, make_wedding):
    make_wedding()
    outcome = directory.import_guests(
        "ana-luis",
        [("ana garcia", None), ("Carol Diaz", "carol@x.com"), ("Ana G", None), ("CAROL DIAZ", None)],
    )

    assert (outcome.imported, outcome.skipped_existing) == (2, 2)
    guests, _ = directory.get_guest_list("ana-luis")
    assert [g.name for g in guests] == ["Ana Garcia", "Luis Perez", "Carol Diaz", "Ana G"]
    assert guests[2].email == "carol@x.com"
    assert store.load("ana-luis").guest_name_list[-2:] == ["Carol Diaz", "Ana G"]


# =======================
# Estadísticas y CSV
# =======================
def test_compute_stats():
    guests = [
        GuestRecord(name="A", rsvp_status="yes"),
        GuestRecord(name="B", rsvp_status="no"),
        GuestRecord(name="C"),
    ]
    stats = compute_stats(guests)
    assert (stats.total, stats.attending, stats.not_attending, stats.pending) == (3, 1, 1, 1)
    assert stats.response_rate == 66.7
    assert compute_stats([]).response_rate == 0.0


def test_export_csv_uses_panel_labels():
    csv_text = export_csv([GuestRecord(name="Ana Garcia", email="ana@x.com", rsvp_status="yes"), GuestRecord(name="Luis")])
    lines = csv_text.strip().splitlines()
    assert lines[0] == "Name,Email,RSVP Status"
    assert lines[1] == "Ana Garcia,ana@x.com,Attending"
    assert lines[2] == "Luis,,Pending"


def test_renamed_guest_keeps_answer_and_old_name_stays_gone(directory, store, make_wedding):
    make_wedding()
    directory.update_guest("ana-luis", "Ana Garcia", GuestUpdate(name="Ana Garcia Ruiz", rsvp_status=RsvpStatus.yes))

    guests, _ = directory.get_guest_list("ana-luis")
    assert [(g.name, g.rsvp_status) for g in guests] == [
        ("Ana Garcia Ruiz", RsvpStatus.yes),
        ("Luis Perez", RsvpStatus.pending),
    ]
    assert store.load("ana-luis").guest_name_list == ["Luis Perez", "Ana Garcia Ruiz"]
