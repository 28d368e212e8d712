"""
tests/test_formatting.py — Canonical number rendering and digests.
"""

from __future__ import annotations

import hashlib

import pytest

from roadstats.formatting import canonical_float, sha256_text


class TestCanonicalFloat:

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (1234.5, "1234.50"),
            (0, "0.00"),
            (0.0, "0.00"),
            (987.65, "987.65"),
            (12.125, "12.13"),
            (2.675, "2.68"),
            (0.005, "0.01"),
            (-0.125, "-0.13"),
            (-0.001, "0.00"),
            (-0.0, "0.00"),
            (1e20, "100000000000000000000.00"),
            (1e-7, "0.00"),
        ],
    )
    def test_two_decimals_half_away_from_zero(self, value, expected):
        assert canonical_float(value) == expected

    def test_no_scientific_notation(self):
        """Large and tiny magnitudes stay fixed-point."""
        for value in (1.5e16, 3e-12, 123456789012.345):
            rendered = canonical_float(value)
            assert "e" not in rendered.lower()
            assert len(rendered.split(".")[1]) == 2

    def test_deterministic(self):
        assert canonical_float(1 / 3) == canonical_float(1 / 3) == "0.33"

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_rejected(self, value):
        with pytest.raises(ValueError):
            canonical_float(value)


class TestSha256Text:

    def test_matches_hashlib(self):
        assert sha256_text("{}\n") == hashlib.sha256(b"{}\n").hexdigest()

    def test_utf8_encoded(self):
        assert sha256_text("é") == hashlib.sha256("é".encode("utf-8")).hexdigest()
