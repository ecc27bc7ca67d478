"""Tests for key normalization helpers."""

import pytest

from industry_interview.keys import KEY_MAX_LENGTH, normalize_key, safe_trim, title_from_key


class TestNormalizeKey:
    """Tests for normalize_key."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("Auto Detailing", "auto_detailing"),
            ("auto-detailing", "auto_detailing"),
            ("  auto_detailing  ", "auto_detailing"),
            ("Heating & Cooling", "heating_and_cooling"),
            ("__HVAC!!__", "hvac"),
            ("a   --  b", "a_b"),
        ],
    )
    def test_normalizes_variants(self, raw, expected):
        """Spacing, case, punctuation and ampersands collapse to one key."""
        assert normalize_key(raw) == expected

    def test_empty_and_none(self):
        """Blank input normalizes to the empty string."""
        assert normalize_key(None) == ""
        assert normalize_key("   ") == ""
        assert normalize_key("!!!") == ""

    def test_length_cap(self):
        """Keys are capped and never end with an underscore."""
        raw = "a" * 63 + " b" + "c" * 20
        key = normalize_key(raw)
        assert len(key) <= KEY_MAX_LENGTH
        assert not key.endswith("_")

    def test_idempotent(self):
        """Normalizing a key twice changes nothing."""
        key = normalize_key("Auto Body & Collision")
        assert normalize_key(key) == key


class TestLabelHelpers:
    """Tests for safe_trim and title_from_key."""

    def test_safe_trim(self):
        """Non-strings are stringified, None becomes empty."""
        assert safe_trim(None) == ""
        assert safe_trim("  x ") == "x"
        assert safe_trim(42) == "42"

    def test_title_from_key(self):
        """Underscores and hyphens become spaces and words are capitalized."""
        assert title_from_key("auto_detailing") == "Auto Detailing"
        assert title_from_key("paving-contractor") == "Paving Contractor"

    def test_title_from_empty_key(self):
        """An empty key falls back to the generic label."""
        assert title_from_key("") == "Service"
        assert title_from_key(None) == "Service"
