# tests/core/test_matcher.py  # Buscador en cascada: exact → tokens → anchored → loose → email.

import pytest

from wedsite.core.matcher import MATCH_STRATEGIES, find_guest, find_guest_with_strategy
from wedsite.schemas import GuestRecord


def _guests(*names, emails=None):
    emails = emails or {}
    return [GuestRecord(name=n, email=emails.get(n)) for n in names]


# =======================
# Entradas vacías
# =======================
@pytest.mark.parametrize("query", ["", "   ", None])
def test_empty_query_returns_none(query):
    assert find_guest(query, _guests("Ana Garcia")) is None


def test_empty_list_returns_none():
    assert find_guest("Ana Garcia", []) is None


# =======================
# Orden de la cascada
# =======================
def test_strategy_order_is_fixed():
    assert [name for name, _ in MATCH_STRATEGIES] == ["exact", "tokens", "anchored", "loose", "email"]


def test_exact_match_is_case_insensitive():
    guests = _guests("Ana Garcia", "Luis Perez")
    guest, strategy = find_guest_with_strategy("  luis PEREZ ", guests)
    assert guest.name == "Luis Perez"
    assert strategy == "exact"


def test_exact_match_wins_over_earlier_token_match():
    # "Ana" está contenido como token en el primer invitado, pero el exacto es el segundo.
    guests = _guests("Ana Garcia", "Ana")
    guest, strategy = find_guest_with_strategy("ana", guests)
    assert guest.name == "Ana"
    assert strategy == "exact"


def test_token_set_match_is_order_independent():
    guest, strategy = find_guest_with_strategy("John Smith", _guests("Smith John"))
    assert guest.name == "Smith John"
    assert strategy == "tokens"


def test_token_set_requires_whole_tokens():
    assert find_guest_with_strategy("Jo", _guests("John Smith")) == (None, None)


def test_anchored_match_requires_equal_first_token():
    guests = _guests("John Smithson", "Jane Smith")
    guest, strategy = find_guest_with_strategy("John Sm", guests)
    assert guest.name == "John Smithson"
    assert strategy == "anchored"

    assert find_guest("John Sm", _guests("Jane Smith")) is None


def test_anchored_match_needs_two_query_tokens():
    # Con un solo token solo queda tokens/email; "smi" no es un token completo.
    assert find_guest("Smi", _guests("John Smithson")) is None


def test_loose_match_compares_first_and_last_tokens_both_ways():
    guest, strategy = find_guest_with_strategy("Jon Smithers", _guests("Jonathan Smith"))
    assert guest.name == "Jonathan Smith"
    assert strategy == "loose"


def test_loose_match_needs_two_guest_tokens():
    assert find_guest("Jon Smith", _guests("Jonathan")) is None


def test_email_match_is_last_and_case_insensitive():
    guests = _guests("Ana Garcia", "Luis Perez", emails={"Luis Perez": "Luis@Example.com"})
    guest, strategy = find_guest_with_strategy("luis@example.COM", guests)
    assert guest.name == "Luis Perez"
    assert strategy == "email"


def test_first_guest_in_list_order_wins_within_a_strategy():
    guests = _guests("Maria Lopez Ruiz", "Maria Lopez")
    guest, strategy = find_guest_with_strategy("maria lopez", guests)
    # "maria lopez" es exacto para el segundo: exact gana a tokens.
    assert guest.name == "Maria Lopez"
    assert strategy == "exact"

    guest, strategy = find_guest_with_strategy("lopez maria", guests)
    assert guest.name == "Maria Lopez Ruiz"
    assert strategy == "tokens"


def test_no_match_returns_none():
    assert find_guest_with_strategy("Zara Khan", _guests("Ana Garcia", "Luis Perez")) == (None, None)
