"""Unit tests for curated phrase tables.

Tests:
  - Lookup normalization (case, whitespace, trailing punctuation)
  - Dice word similarity
  - Exact and fuzzy whole-phrase matching
  - Containment and word substitution only on transliteration tables
  - Offline fuzzy matching against phrases over 10 characters
  - X->en inversion of en->X tables
"""

from __future__ import annotations

from lingolive.services.translation.phrases import (
    PhraseBook,
    PhraseTable,
    default_phrasebook,
    normalize_phrase,
    offline_dictionary,
    word_similarity,
)


class TestNormalizePhrase:
    def test_lowercases_and_collapses_whitespace(self) -> None:
        assert normalize_phrase("  Where   IS my\torder ") == "where is my order"

    def test_strips_trailing_punctuation(self) -> None:
        assert normalize_phrase("Where is my order?") == "where is my order"
        assert normalize_phrase("धन्यवाद।") == "धन्यवाद"
        assert normalize_phrase("hello!!!") == "hello"

    def test_keeps_inner_punctuation(self) -> None:
        assert normalize_phrase("Hi, there.") == "hi, there"


class TestWordSimilarity:
    def test_identical(self) -> None:
        assert word_similarity("track my order", "track my order") == 1.0

    def test_partial_overlap(self) -> None:
        assert word_similarity("where is my order now", "where is my order") == 8 / 9

    def test_empty(self) -> None:
        assert word_similarity("", "order") == 0.0


class TestPhraseMatch:
    def test_exact_en_to_hi(self) -> None:
        table = default_phrasebook().table_for("en", "hi")
        assert table.match("Where is my order?") == "मेरा ऑर्डर कहाँ है"
        assert table.match("order") == "ऑर्डर"

    def test_fuzzy_long_phrase(self) -> None:
        table = default_phrasebook().table_for("en", "hi")
        assert table.match("where is my order now") == "मेरा ऑर्डर कहाँ है"

    def test_fuzzy_ignores_short_phrases(self) -> None:
        table = PhraseTable({"thank you": "धन्यवाद"})
        assert table.match("thank you all") is None

    def test_non_transliterated_table_has_no_containment(self) -> None:
        table = default_phrasebook().table_for("en", "hi")
        assert table.match("my order please") is None

    def test_transliterated_exact(self) -> None:
        table = default_phrasebook().table_for("auto", "en")
        assert table.match("namaste") == "Hello"
        assert table.match("Mera order ka status kya hai?") == "What is my order status?"

    def test_transliterated_containment_prefers_longest(self) -> None:
        table = default_phrasebook().table_for("auto", "en")
        assert table.match("mera order") == "What is my order status?"

    def test_word_substitution(self) -> None:
        table = default_phrasebook().table_for("auto", "en")
        assert table.match("paisa kab") == "money when"
        assert table.match("refund kab milega") == "refund when will get"

    def test_word_substitution_keeps_unknown_words(self) -> None:
        table = default_phrasebook().table_for("auto", "en")
        assert table.match("Rahul ka paisa") == "Rahul ka money"

    def test_word_substitution_needs_a_known_word(self) -> None:
        table = default_phrasebook().table_for("auto", "en")
        assert table.match("xyz abc") is None

    def test_word_substitution_limited_to_three_words(self) -> None:
        table = default_phrasebook().table_for("auto", "en")
        assert table.match("paisa taka samaan item") is None

    def test_blank_text(self) -> None:
        table = default_phrasebook().table_for("auto", "en")
        assert table.match("  ?  ") is None


class TestOfflineMatch:
    def test_offline_only_entry(self) -> None:
        table = offline_dictionary().table_for("auto", "en")
        assert table.match_offline("mera order ka kya hua") == "What happened to my order?"

    def test_pattern_tier_does_not_know_offline_entries(self) -> None:
        table = default_phrasebook().table_for("auto", "en")
        assert table.match("mera order ka kya hua") is None

    def test_offline_fuzzy(self) -> None:
        table = offline_dictionary().table_for("en", "hi")
        assert table.match_offline("your order has been shipped today") == "आपका ऑर्डर भेज दिया गया है"

    def test_offline_fuzzy_skips_short_phrases(self) -> None:
        table = PhraseTable({"thank you": "धन्यवाद"})
        assert table.match_offline("thank you so") is None


class TestPhraseBook:
    def test_inverted_tables(self) -> None:
        book = default_phrasebook()
        assert book.table_for("hi", "en").match("नमस्ते") == "Hello"
        assert book.table_for("bn", "en").match("আমার অর্ডার কোথায়") == "Where is my order"

    def test_pairs(self) -> None:
        assert default_phrasebook().pairs() == ["auto->en", "bn->en", "en->bn", "en->hi", "hi->en"]

    def test_unknown_pair(self) -> None:
        assert default_phrasebook().table_for("ta", "en") is None

    def test_extra_entries_create_missing_tables(self) -> None:
        book = PhraseBook.from_mappings({}, extra={"auto->en": {"theek hai": "Okay"}})
        table = book.table_for("auto", "en")
        assert table.transliterated
        assert table.match("theek hai") == "Okay"
