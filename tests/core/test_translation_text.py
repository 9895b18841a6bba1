"""
Test suite for provider output cleanup and language code handling.

System role: Verification of translation text utilities
"""

import pytest

from chatrelay.core.translation.cleaning import clean_tone_label, strip_translation_wrapping
from chatrelay.core.translation.languages import deepl_code, language_name, normalize_language


class TestStripTranslationWrapping:
    """Test suite for strip_translation_wrapping()."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ('"Hola"', "Hola"),
            ("Translation: Hola", "Hola"),
            ('Here is the translation: "Hola"', "Hola"),
            ("Translated text - «Bonjour»", "Bonjour"),
            ("  'Ciao'  ", "Ciao"),
            ('He said "hi" to me', 'He said "hi" to me'),
        ],
    )
    def test_strip_translation_wrapping_should_remove_incidental_wrapping(self, raw, expected) -> None:
        assert strip_translation_wrapping(raw) == expected

    def test_strip_translation_wrapping_should_return_empty_for_quotes_only(self) -> None:
        assert strip_translation_wrapping('""') == ""


class TestCleanToneLabel:
    """Test suite for clean_tone_label()."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("Friendly", "friendly"),
            ("The tone is: sarcastic.", "sarcastic"),
            ("Tone: Excited!", "excited"),
            ("  formal  ", "formal"),
        ],
    )
    def test_clean_tone_label_should_reduce_to_single_word(self, raw, expected) -> None:
        assert clean_tone_label(raw) == expected

    def test_clean_tone_label_should_return_none_without_words(self) -> None:
        assert clean_tone_label("...") is None


class TestLanguages:
    """Test suite for language code helpers."""

    @pytest.mark.parametrize("code", ["es", " ES ", "es-MX", "es_mx"])
    def test_normalize_language_should_return_uppercase_base_code(self, code) -> None:
        assert normalize_language(code) == "ES"

    def test_deepl_code_should_map_regional_variants(self) -> None:
        assert deepl_code("EN") == "EN-US"
        assert deepl_code("PT") == "PT-BR"
        assert deepl_code("DE") == "DE"

    def test_deepl_code_should_fall_back_for_unsupported_language(self) -> None:
        assert deepl_code("HI") == "EN-US"

    def test_language_name_should_pass_unknown_codes_through(self) -> None:
        assert language_name("KO") == "Korean"
        assert language_name("XX") == "XX"
