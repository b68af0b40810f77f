"""
Unit Tests for the Anamnesis Text Normalizer

Tests accent folding, payload flattening and keyword detection.
"""
import pytest

from app.core.diagnosis.text import (
    extract_response_text,
    format_number,
    has_any_keyword,
    normalize_text,
)


class TestNormalizeText:
    """Tests for normalize_text."""

    def test_strips_accents_and_case(self):
        assert normalize_text("  Insônia  ") == "insonia"
        assert normalize_text("Proteína C Reativa") == "proteina c reativa"

    def test_accented_and_plain_compare_equal(self):
        assert normalize_text("CANSAÇO") == normalize_text("cansaco")

    @pytest.mark.parametrize("value", ["", None])
    def test_empty_input(self, value):
        assert normalize_text(value) == ""


class TestFormatNumber:
    """Tests for number rendering."""

    def test_integral_float_drops_fraction(self):
        assert format_number(15.0) == "15"

    def test_fractional_float_kept(self):
        assert format_number(5.5) == "5.5"

    def test_int_unchanged(self):
        assert format_number(100) == "100"


class TestExtractResponseText:
    """Tests for intake payload flattening."""

    def test_values_not_keys(self):
        text = extract_response_text({"fadiga": "nao", "sono": "bom"})
        assert text == "nao bom"
        assert "fadiga" not in text

    def test_nested_mixed_payload(self):
        responses = {
            "q1": "Insônia",
            "q2": [1, True, {"detail": "Cansado"}],
            "q3": None,
            "q4": 2.0,
        }
        assert extract_response_text(responses) == "insonia 1 true cansado 2"

    @pytest.mark.parametrize("responses", [None, {}])
    def test_absent_responses(self, responses):
        assert extract_response_text(responses) == ""

    def test_very_deep_nesting_terminates(self):
        """Nesting far beyond the recursion limit is still flattened."""
        payload = "fadiga"
        for _ in range(5000):
            payload = [payload]
        assert extract_response_text({"q": payload}) == "fadiga"


class TestHasAnyKeyword:
    """Tests for keyword detection."""

    def test_substring_match(self):
        assert has_any_keyword("estou com muita fadiga", ["fadiga", "fatigue"])

    def test_keyword_is_normalized(self):
        assert has_any_keyword("tenho insonia", ["Insônia"])

    def test_no_match(self):
        assert not has_any_keyword("tudo bem", ["fadiga", "sleep"])

    def test_empty_haystack(self):
        assert not has_any_keyword("", ["fadiga"])
