"""Curated phrase tables for zero-latency translation.

Tables are keyed ``"{source}->{target}"``. The ``auto->en`` table holds
romanized Hindi/Bengali ("Hinglish") input and is the only *transliteration*
table: it additionally allows substring containment and word-by-word
substitution, because romanized input is fragmentary and rarely matches a
catalogued sentence exactly.

Every ``en->X`` table also yields an ``X->en`` table by inversion, so the
tables work in both directions.
"""

import re
from collections.abc import Iterable, Mapping

AUTO_SOURCE = "auto"

PATTERN_FUZZY_THRESHOLD = 0.75
PATTERN_FUZZY_MIN_WORDS = 4
OFFLINE_FUZZY_THRESHOLD = 0.8
OFFLINE_FUZZY_MIN_CHARS = 10
WORD_SUBSTITUTION_MAX_WORDS = 3

_TRAILING_PUNCTUATION = ".?!,;:।॥؟。？！"
_WHITESPACE = re.compile(r"\s+")


CURATED_PHRASES: dict[str, dict[str, str]] = {
    "en->hi": {
        "hello": "नमस्ते",
        "hi": "नमस्ते",
        "thank you": "धन्यवाद",
        "thanks": "धन्यवाद",
        "order": "ऑर्डर",
        "status": "स्थिति",
        "delivery": "डिलीवरी",
        "delivered": "डिलीवर हो गया",
        "yes": "हाँ",
        "no": "नहीं",
        "help": "मदद",
        "support": "सहायता",
        "when will my order come": "मेरा ऑर्डर कब आएगा",
        "what is my order status": "मेरे ऑर्डर की क्या स्थिति है",
        "what is the order status": "ऑर्डर की क्या स्थिति है",
        "track my order": "मेरे ऑर्डर को ट्रैक करें",
        "cancel my order": "मेरा ऑर्डर रद्द करें",
        "where is my order": "मेरा ऑर्डर कहाँ है",
        "i need help": "मुझे मदद चाहिए",
        "order not received": "ऑर्डर नहीं मिला",
        "refund request": "रिफंड का अनुरोध",
        "payment issue": "भुगतान की समस्या",
        "product damaged": "उत्पाद क्षतिग्रस्त",
    },
    "en->bn": {
        "hello": "হ্যালো",
        "hi": "হাই",
        "thank you": "ধন্যবাদ",
        "thanks": "ধন্যবাদ",
        "order": "অর্ডার",
        "status": "অবস্থা",
        "delivery": "ডেলিভারি",
        "delivered": "ডেলিভার হয়েছে",
        "yes": "হ্যাঁ",
        "no": "না",
        "help": "সাহায্য",
        "support": "সহায়তা",
        "when will my order come": "আমার অর্ডার কখন আসবে",
        "what is my order status": "আমার অর্ডারের স্ট্যাটাস কী",
        "what is the order status": "অর্ডারের স্ট্যাটাস কী",
        "track my order": "আমার অর্ডার ট্র্যাক করুন",
        "cancel my order": "আমার অর্ডার বাতিল করুন",
        "where is my order": "আমার অর্ডার কোথায়",
        "i need help": "আমার সাহায্য দরকার",
    },
    "auto->en": {
        # Greetings
        "hello": "Hello",
        "helloo": "Hello",
        "hellooo": "Hello",
        "hi": "Hi",
        "hii": "Hi",
        "namaste": "Hello",
        "namaskar": "Hello",
        "dhanyawad": "Thank you",
        "dhanyabad": "Thank you",
        "dhonnobad": "Thank you",
        "shukriya": "Thank you",
        # Complete sentences
        "mera order ka status kya hai": "What is my order status?",
        "mera order ka status kya hain": "What is my order status?",
        "mera order status kya hai": "What is my order status?",
        "order ka status kya hai": "What is the order status?",
        "order status kya hai": "What is the order status?",
        "mera order kab tak aeyga": "When will my order arrive?",
        "mera order kab ayega": "When will my order arrive?",
        "mera order kab tak ayega": "When will my order arrive?",
        "amar order kobe ashbe": "When will my order arrive?",
        "amar order er status ki": "What is my order status?",
        "mera order kaha hai": "Where is my order?",
        "order track karna hai": "I want to track my order",
        "order cancel karna hai": "I want to cancel my order",
        "refund chahiye": "I want a refund",
        "paisa wapas chahiye": "I want money back",
        "product kharab hai": "Product is damaged",
        "delivery nahi hui": "Delivery not received",
        "help chahiye": "I need help",
        "problem hai": "There is a problem",
        # Words and short phrases
        "mera": "my",
        "amar": "my",
        "order": "order",
        "kab": "when",
        "kobe": "when",
        "kab tak": "when will",
        "kya": "what",
        "ki": "what",
        "kya hua": "what happened",
        "kaise hai": "how is",
        "kaha": "where",
        "kothay": "where",
        "ayega": "will come",
        "aeyga": "will come",
        "ashbe": "will come",
        "hoga": "will be",
        "hobe": "will be",
        "milega": "will get",
        "pabo": "will get",
        "chahiye": "need",
        "dorkar": "need",
        "status": "status",
        "delivery": "delivery",
        "track": "track",
        "cancel": "cancel",
        "return": "return",
        "refund": "refund",
        "problem": "problem",
        "issue": "issue",
        "help": "help",
        "support": "support",
        "payment": "payment",
        "paisa": "money",
        "taka": "money",
        "product": "product",
        "item": "item",
        "samaan": "item",
    },
}

# Entries only the offline dictionary knows about.
OFFLINE_ONLY_PHRASES: dict[str, dict[str, str]] = {
    "auto->en": {
        "mera order ka kya hua": "What happened to my order?",
        "mera order abhi tak nahi aaya": "My order has not arrived yet",
        "amar order ekhono ashe ni": "My order has not arrived yet",
    },
    "en->hi": {
        "your order has been shipped": "आपका ऑर्डर भेज दिया गया है",
        "your refund has been processed": "आपका रिफंड प्रोसेस हो गया है",
    },
}


def normalize_phrase(text: str) -> str:
    """Lower-case, collapse whitespace and drop trailing sentence punctuation."""
    collapsed = _WHITESPACE.sub(" ", text).strip()
    return collapsed.rstrip(_TRAILING_PUNCTUATION).strip().lower()


def word_similarity(first: str, second: str) -> float:
    """Dice-style word overlap: ``2 * |common| / (|w1| + |w2|)``."""
    words1 = first.split()
    words2 = second.split()
    if not words1 or not words2:
        return 0.0
    common = [w for w in words1 if w in words2]
    return (len(common) * 2) / (len(words1) + len(words2))


def _capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]


class PhraseTable:
    """One direction of a curated phrase mapping."""

    def __init__(self, entries: Mapping[str, str], transliterated: bool = False) -> None:
        self._entries = {normalize_phrase(k): v for k, v in entries.items()}
        self.transliterated = transliterated
        # Longest first so complete phrases beat their fragments.
        self._long_phrases = sorted(
            (
                (phrase, translation)
                for phrase, translation in self._entries.items()
                if len(phrase.split()) >= PATTERN_FUZZY_MIN_WORDS
            ),
            key=lambda item: len(item[0]),
            reverse=True,
        )

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, phrase: object) -> bool:
        return isinstance(phrase, str) and normalize_phrase(phrase) in self._entries

    def exact(self, text: str) -> str | None:
        return self._entries.get(normalize_phrase(text))

    def _best_fuzzy(
        self,
        needle: str,
        threshold: float,
        candidates: Iterable[tuple[str, str]],
    ) -> str | None:
        best: tuple[float, str] | None = None
        for phrase, translation in candidates:
            score = word_similarity(needle, phrase)
            if score > threshold and (best is None or score > best[0]):
                best = (score, translation)
        return best[1] if best else None

    def match(self, text: str) -> str | None:
        """Pattern-tier lookup.

        Priority: exact phrase, fuzzy whole phrase (4+ words), then for
        transliteration tables substring containment (longest phrase first)
        and word-by-word substitution for inputs of at most three words.
        """
        needle = normalize_phrase(text)
        if not needle:
            return None

        found = self._entries.get(needle)
        if found is not None:
            return found

        found = self._best_fuzzy(needle, PATTERN_FUZZY_THRESHOLD, self._long_phrases)
        if found is not None:
            return found

        if not self.transliterated:
            return None

        for phrase, translation in self._long_phrases:
            if f" {phrase} " in f" {needle} " or f" {needle} " in f" {phrase} ":
                return translation

        return self._substitute_words(text)

    def _substitute_words(self, text: str) -> str | None:
        raw_words = _WHITESPACE.sub(" ", text).strip().rstrip(_TRAILING_PUNCTUATION).split()
        if not raw_words or len(raw_words) > WORD_SUBSTITUTION_MAX_WORDS:
            return None

        words = [w.lower() for w in raw_words]
        translated: list[str] = []
        substitutions = 0
        i = 0
        while i < len(words):
            if i + 1 < len(words):
                pair = f"{words[i]} {words[i + 1]}"
                if pair in self._entries:
                    translated.append(self._entries[pair])
                    substitutions += 1
                    i += 2
                    continue
            single = self._entries.get(words[i])
            if single is not None:
                translated.append(single)
                substitutions += 1
            else:
                translated.append(raw_words[i])
            i += 1

        if substitutions == 0:
            return None
        return " ".join(translated)

    def match_offline(self, text: str) -> str | None:
        """Last-resort lookup: exact, then fuzzy against phrases over 10 chars."""
        needle = normalize_phrase(text)
        if not needle:
            return None
        found = self._entries.get(needle)
        if found is not None:
            return found
        candidates = (
            (phrase, translation)
            for phrase, translation in self._entries.items()
            if len(phrase) > OFFLINE_FUZZY_MIN_CHARS
        )
        return self._best_fuzzy(needle, OFFLINE_FUZZY_THRESHOLD, candidates)

    def inverted(self) -> "PhraseTable":
        """Reverse table; the first source phrase wins on duplicate targets."""
        reverse: dict[str, str] = {}
        for phrase, translation in self._entries.items():
            reverse.setdefault(normalize_phrase(translation), _capitalize(phrase))
        return PhraseTable(reverse)

    def merged(self, extra: Mapping[str, str]) -> "PhraseTable":
        combined = dict(self._entries)
        combined.update({normalize_phrase(k): v for k, v in extra.items()})
        return PhraseTable(combined, transliterated=self.transliterated)


class PhraseBook:
    """All phrase tables, addressed by language pair."""

    def __init__(self, tables: Mapping[str, PhraseTable]) -> None:
        self._tables = dict(tables)

    @classmethod
    def from_mappings(
        cls,
        mappings: Mapping[str, Mapping[str, str]],
        extra: Mapping[str, Mapping[str, str]] | None = None,
    ) -> "PhraseBook":
        """Build tables, add ``X->en`` inversions, then merge ``extra`` entries."""
        tables: dict[str, PhraseTable] = {}
        for pair, entries in mappings.items():
            source, _, _ = pair.partition("->")
            tables[pair] = PhraseTable(entries, transliterated=source == AUTO_SOURCE)

        for pair, table in list(tables.items()):
            source, _, target = pair.partition("->")
            if source == "en" and f"{target}->en" not in tables:
                tables[f"{target}->en"] = table.inverted()

        for pair, entries in (extra or {}).items():
            source, _, _ = pair.partition("->")
            if pair in tables:
                tables[pair] = tables[pair].merged(entries)
            else:
                tables[pair] = PhraseTable(entries, transliterated=source == AUTO_SOURCE)
        return cls(tables)

    def table_for(self, source: str, target: str) -> PhraseTable | None:
        return self._tables.get(f"{source}->{target}")

    def pairs(self) -> list[str]:
        return sorted(self._tables)


def default_phrasebook() -> PhraseBook:
    """Tables used by the pattern tier."""
    return PhraseBook.from_mappings(CURATED_PHRASES)


def offline_dictionary() -> PhraseBook:
    """Pattern tables plus offline-only entries, used as the last resort."""
    return PhraseBook.from_mappings(CURATED_PHRASES, extra=OFFLINE_ONLY_PHRASES)
