"""Test del motore di abbinamento."""

import pytest

from abbinacodici.matching.resolver import best_candidate, lookup, resolve_matches
from abbinacodici.matching.schema import (
    NO_MATCH_DESCRIPTION,
    CodeRecord,
    LookupResult,
    MatchResult,
    to_percent,
)


@pytest.fixture
def codes() -> list[CodeRecord]:
    return [
        CodeRecord("P000000001", "Direttore Tecnico Cantiere", "a.pdf"),
        CodeRecord("P000000002", "Capo squadra elettricisti", "a.pdf"),
        CodeRecord("BONI.AB1.CD2", "Coordinatore della sicurezza in fase di esecuzione", "b.xlsx"),
    ]


def test_resolve_role_description() -> None:
    codes = [CodeRecord("P000000001", "Direttore Tecnico Cantiere", "cat.pdf")]
    results = resolve_matches(codes, ["Direttore tecnico del cantiere"])
    assert len(results) == 1
    r = results[0]
    assert r.matched
    assert r.matched_code == "P000000001"
    assert r.matched_description == "Direttore Tecnico Cantiere"
    assert r.source == "cat.pdf"
    assert r.similarity >= 0.3


def test_resolve_no_match() -> None:
    codes = [CodeRecord("X1", "Apple", "cat.xlsx")]
    results = resolve_matches(codes, ["Zebra unrelated text"])
    assert results == [MatchResult.unmatched("Zebra unrelated text")]
    r = results[0]
    assert not r.matched
    assert r.matched_code == "-"
    assert r.matched_description == NO_MATCH_DESCRIPTION
    assert r.similarity == 0.0
    assert r.source is None


def test_resolve_order_and_length(codes: list[CodeRecord]) -> None:
    descriptions = ["capo squadra", "zebra lontana", "coordinatore sicurezza", "capo squadra"]
    results = resolve_matches(codes, descriptions)
    assert [r.original_description for r in results] == descriptions
    assert [r.matched_code for r in results] == ["P000000002", "-", "BONI.AB1.CD2", "P000000002"]


def test_resolve_matched_iff_threshold(codes: list[CodeRecord]) -> None:
    # "capo squadra" è contenuto nella descrizione: punteggio 0.9
    assert resolve_matches(codes, ["capo squadra"], threshold=0.9)[0].matched
    strict = resolve_matches(codes, ["capo squadra"], threshold=0.95)[0]
    assert not strict.matched
    assert strict.matched_code == "-"


def test_resolve_tie_first_record_wins() -> None:
    codes = [
        CodeRecord("AA111111", "Geometra", "primo.pdf"),
        CodeRecord("BB222222", "Geometra", "secondo.pdf"),
    ]
    r = resolve_matches(codes, ["geometra"])[0]
    assert r.matched_code == "AA111111"
    assert r.source == "primo.pdf"


def test_resolve_no_codes() -> None:
    results = resolve_matches([], ["qualcosa"])
    assert len(results) == 1
    assert not results[0].matched


def test_resolve_idempotent(codes: list[CodeRecord]) -> None:
    descriptions = ["direttore tecnico", "capo", "architetto"]
    assert resolve_matches(codes, descriptions) == resolve_matches(codes, descriptions)


def test_best_candidate_empty_catalog() -> None:
    assert best_candidate("x", []) == (None, 0.0)


def test_lookup_found(codes: list[CodeRecord]) -> None:
    found = lookup("coordinatore sicurezza esecuzione", codes)
    assert isinstance(found, LookupResult)
    assert found.code == "BONI.AB1.CD2"
    assert found.source == "b.xlsx"


def test_lookup_none(codes: list[CodeRecord]) -> None:
    assert lookup("   ", codes) is None
    assert lookup("capo", []) is None
    assert lookup("zzz yyy", codes) is None


def test_match_result_percent() -> None:
    r = MatchResult("a", "C1", "b", 0.8379, True, "f.pdf")
    assert r.percent == 84


def test_percent_rounds_halves_up() -> None:
    assert MatchResult("a", "C1", "b", 0.665, True).percent == 67
    assert MatchResult("a", "C1", "b", 0.125, True).percent == 13
    assert to_percent(0.004) == 0
    assert to_percent(1.0) == 100
