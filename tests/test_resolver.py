import pytest

from cerebro.models import CardCollection
from cerebro.resolver import match_collections, name_matches
from cerebro.text import has_alphanumeric, normalize, strip_diacritics


@pytest.mark.parametrize("raw", ["Spider-Man", "  Rise of   Red Skull ", "Ms. Marvel!", "Élodie's Café", "---", ""])
def test_normalize_is_idempotent(raw):
    once = normalize(raw)
    assert normalize(once.full) == once


def test_normalize_forms():
    result = normalize("Spider-Man (Peter Parker)!")
    assert result.full == "spider-man peter parker"
    assert result.tokens == ["spider", "man", "peter", "parker"]
    assert result.stripped == "spidermanpeterparker"


def test_normalize_drops_diacritics():
    assert normalize("Pokémon").full == "pokemon"
    assert strip_diacritics("Éclair") == "eclair"


def test_has_alphanumeric():
    assert has_alphanumeric("a")
    assert not has_alphanumeric("!!! --")
    assert not has_alphanumeric("")


@pytest.mark.parametrize("query, name, expected", [
    ("Rise of Red Skull", "Rise of Red Skull", True),
    ("red skull", "Rise of Red Skull", True),
    ("RiseOfRed", "Rise of Red Skull", True),
    ("red hulk", "Rise of Red Skull", False),
    ("!!!", "Rise of Red Skull", False),
])
def test_name_matches(query, name, expected):
    assert name_matches(query, name) is expected


def test_exact_match_is_the_only_result(reference):
    results = match_collections("rise of red skull", reference.packs, True)
    assert [pack.id for pack in results] == ["rise"]


def test_partial_match_returns_every_candidate(reference):
    results = match_collections("red skull", reference.packs, True)
    assert {pack.id for pack in results} == {"rise", "rise-plus"}


def test_official_flag_scopes_candidates(reference):
    results = match_collections("Rise of Red Skull", reference.packs, False)
    assert [pack.id for pack in results] == ["fanpack"]


def test_no_match_returns_empty():
    packs = [CardCollection("core", "Core Set", "Pack")]
    assert match_collections("galactus", packs, True) == []
