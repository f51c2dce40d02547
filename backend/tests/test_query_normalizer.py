"""
Tests for wine list query normalization.
"""

import pytest

from app.services.query_normalizer import normalize_query


class TestNormalizeQuery:
    """Tests for normalize_query()."""

    @pytest.mark.parametrize("raw,expected", [
        ("Ch. Margaux", "Château Margaux"),
        ("CH MARGAUX", "Château MARGAUX"),
        ("Ch.Margaux", "Château Margaux"),
        ("Dom. Leflaive", "Domaine Leflaive"),
        ("St. Emilion Grand Cru", "Saint Emilion Grand Cru"),
        ("st julien", "Saint julien"),
    ])
    def test_abbreviations_expand(self, raw, expected):
        assert normalize_query(raw) == expected

    def test_abbreviation_inside_word_untouched(self):
        """Only whole-word abbreviations expand."""
        assert normalize_query("Chablis Stag's Leap") == "Chablis Stag's Leap"

    def test_noise_characters_removed(self):
        assert normalize_query("• Opus One $") == "Opus One"
        assert normalize_query("Sassicaia€2016") == "Sassicaia 2016"

    def test_whitespace_collapsed(self):
        assert normalize_query("  Opus   One\t 2015 ") == "Opus One 2015"

    def test_quote_variants_unified(self):
        assert normalize_query("Stag’s Leap") == "Stag's Leap"
        assert normalize_query("“Insignia”") == '"Insignia"'

    def test_standalone_ocr_confusions(self):
        assert normalize_query("Clos 0 Vougeot") == "Clos O Vougeot"
        assert normalize_query("Henri l Reserve") == "Henri I Reserve"

    def test_expansion_exposes_ocr_token(self):
        assert normalize_query("Dom.0 Blanc") == "Domaine O Blanc"
        assert normalize_query("Ch.l Reserve") == "Château I Reserve"

    def test_digits_inside_tokens_untouched(self):
        assert normalize_query("Opus One 2010") == "Opus One 2010"

    @pytest.mark.parametrize("raw", ["", "   ", None, 42])
    def test_empty_or_non_string(self, raw):
        assert normalize_query(raw) == ""

    @pytest.mark.parametrize("raw", [
        "Ch. Margaux 2015",
        "• Dom. de la Romanée-Conti $",
        "St.Estèphe 0 l",
        "CH   Lynch-Bages “Pauillac”",
        "Dom.0 Blanc",
        "Ch.l Reserve",
        "St.0",
    ])
    def test_idempotent(self, raw):
        once = normalize_query(raw)
        assert normalize_query(once) == once
