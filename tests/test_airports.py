"""Tests for cargorate.airports."""

import pytest

from cargorate.airports import (
    active_codes,
    is_known_code,
    normalize_airport_code,
)


class TestNormalize:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("USFRAT", "FRA"),
            ("DEFRAX", "FRA"),
            ("lvrixx", "RIX"),
            ("ABCDE", "CDE"),
            ("PRG", "PRG"),
            ("prg", "PRG"),
            ("ABCD", "ABCD"),
        ],
    )
    def test_normalize(self, raw, expected):
        assert normalize_airport_code(raw) == expected

    def test_empty_and_none(self):
        assert normalize_airport_code("") == ""
        assert normalize_airport_code(None) == ""

    def test_unknown_code_passes_through(self):
        """No registry validation: unknown codes come back unchanged."""
        assert normalize_airport_code("XXZZZX") == "ZZZ"

    def test_idempotent_on_examples(self):
        for raw in ("USFRAT", "PRG", "abcd", "ZZ"):
            once = normalize_airport_code(raw)
            assert normalize_airport_code(once) == once


class TestRegistryLookups:
    def test_active_codes_exclude_inactive(self, snapshot):
        codes = active_codes(snapshot.airport_codes)
        assert "FRA" in codes
        assert "LHR" not in codes

    def test_is_known_code_normalizes(self, snapshot):
        assert is_known_code("USFRAT", snapshot.airport_codes)
        assert not is_known_code("GBLHRX", snapshot.airport_codes)
        assert not is_known_code("QQQ", snapshot.airport_codes)
