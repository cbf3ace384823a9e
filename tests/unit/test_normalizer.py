"""Unit tests for language normalization and script heuristics.

Tests:
  - Region/script subtags are stripped and codes lowercased
  - Names and aliases map to supported codes
  - Unsupported and empty values fall back
  - normalize_lang is idempotent over every supported code
  - Accept-Language parsing picks the first supported entry
  - Romanized input under a non-English language switches to auto-detect
"""

from __future__ import annotations

import pytest

from lingolive.services.language.normalizer import (
    AUTO_DETECT,
    SUPPORTED_LANGUAGES,
    browser_language,
    is_mostly_ascii,
    is_supported_language,
    matches_expected_script,
    normalize_lang,
    safe_language_code,
    source_language_for,
)


class TestNormalizeLang:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("en-US", "en"),
            ("EN", "en"),
            ("hi_IN", "hi"),
            ("zh-Hans-CN", "zh"),
            ("Hindi", "hi"),
            ("bengali", "bn"),
            (" es ", "es"),
        ],
    )
    def test_maps_to_supported_code(self, value: str, expected: str) -> None:
        assert normalize_lang(value) == expected

    @pytest.mark.parametrize("value", ["klingon", "xx-YY", "", None, 42])
    def test_unsupported_falls_back_to_english(self, value: object) -> None:
        assert normalize_lang(value) == "en"

    def test_custom_fallback(self) -> None:
        assert normalize_lang(None, fallback=AUTO_DETECT) == "auto"
        assert normalize_lang("klingon", fallback=None) is None

    @pytest.mark.parametrize("code", SUPPORTED_LANGUAGES)
    def test_idempotent(self, code: str) -> None:
        once = normalize_lang(code)
        assert once == code
        assert normalize_lang(once) == once

    def test_supported_checks(self) -> None:
        assert is_supported_language("ta-IN")
        assert not is_supported_language("fr")
        assert safe_language_code("fr", fallback="hi") == "hi"


class TestBrowserLanguage:
    def test_first_supported_entry_wins(self) -> None:
        assert browser_language("fr-FR,es-MX;q=0.9,en;q=0.8") == "es"

    def test_missing_header_uses_fallback(self) -> None:
        assert browser_language(None) == "en"
        assert browser_language("fr,de", fallback="hi") == "hi"


class TestScriptHeuristics:
    def test_mostly_ascii(self) -> None:
        assert is_mostly_ascii("mera order kab aayega?")
        assert not is_mostly_ascii("मेरा ऑर्डर कहाँ है")
        assert is_mostly_ascii("")
        assert is_mostly_ascii("?!...")

    def test_matches_expected_script(self) -> None:
        assert matches_expected_script("नमस्ते", "hi")
        assert not matches_expected_script("namaste", "hi")
        assert matches_expected_script("hola amigo", "es")
        assert matches_expected_script("আমার অর্ডার", "bn")

    def test_unknown_language_never_matches(self) -> None:
        assert not matches_expected_script("hello", "xx")

    def test_romanized_hindi_becomes_auto(self) -> None:
        assert source_language_for("mera order kab ayega", "hi") == AUTO_DETECT

    def test_native_script_keeps_declared_language(self) -> None:
        assert source_language_for("मेरा ऑर्डर", "hi") == "hi"

    def test_english_is_never_overridden(self) -> None:
        assert source_language_for("where is my order", "en") == "en"

    def test_latin_script_language_is_not_overridden(self) -> None:
        assert source_language_for("donde esta mi pedido", "es") == "es"
