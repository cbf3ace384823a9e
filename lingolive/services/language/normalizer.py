"""Language tag normalization and script heuristics.

Every language code that enters the system passes through ``normalize_lang``
so downstream code only ever sees members of ``SUPPORTED_LANGUAGES``.

The script helpers detect romanized input: users often type Hindi or Bengali
in Latin letters ("mera order kab ayega"). Treating such text as Devanagari
source would corrupt translation, so ``source_language_for`` switches the
source to auto-detection when the declared language expects a non-Latin
script but the text is mostly ASCII.
"""

import re
import unicodedata

import structlog

logger = structlog.get_logger(__name__)

AUTO_DETECT = "auto"

SUPPORTED_LANGUAGES: tuple[str, ...] = ("en", "hi", "bn", "ta", "es", "ar", "zh")

LANGUAGE_METADATA: dict[str, dict[str, str]] = {
    "en": {"name": "English", "native_name": "English", "script": "Latin"},
    "hi": {"name": "Hindi", "native_name": "हिंदी", "script": "Devanagari"},
    "bn": {"name": "Bengali", "native_name": "বাংলা", "script": "Bengali"},
    "ta": {"name": "Tamil", "native_name": "தமிழ்", "script": "Tamil"},
    "es": {"name": "Spanish", "native_name": "Español", "script": "Latin"},
    "ar": {"name": "Arabic", "native_name": "العربية", "script": "Arabic"},
    "zh": {"name": "Chinese", "native_name": "中文", "script": "Han"},
}

_ALIASES: dict[str, str] = {
    "english": "en",
    "eng": "en",
    "hindi": "hi",
    "hin": "hi",
    "bengali": "bn",
    "bangla": "bn",
    "ben": "bn",
    "tamil": "ta",
    "tam": "ta",
    "spanish": "es",
    "espanol": "es",
    "español": "es",
    "spa": "es",
    "arabic": "ar",
    "arb": "ar",
    "ara": "ar",
    "chinese": "zh",
    "mandarin": "zh",
    "cmn": "zh",
    "zho": "zh",
}

# Latin covers Basic Latin through Latin Extended-B so accented Spanish
# still counts as Latin script.
_LATIN = re.compile(r"^[\u0000-\u024F]+$")
_SCRIPT_PATTERNS: dict[str, re.Pattern[str]] = {
    "Devanagari": re.compile(r"[\u0900-\u097F]"),
    "Bengali": re.compile(r"[\u0980-\u09FF]"),
    "Tamil": re.compile(r"[\u0B80-\u0BFF]"),
    "Arabic": re.compile(r"[\u0600-\u06FF\u0750-\u077F]"),
    "Han": re.compile(r"[\u4E00-\u9FFF\u3400-\u4DBF]"),
}
_ASCII_ALNUM = re.compile(r"[A-Za-z0-9]")


def normalize_lang(value: object, fallback: str | None = "en") -> str | None:
    """Map an arbitrary language tag or name to a supported code.

    Examples:
        normalize_lang("en-US")    -> "en"
        normalize_lang("hi_IN")    -> "hi"
        normalize_lang("Hindi")    -> "hi"
        normalize_lang("klingon")  -> "en"
        normalize_lang(None, fallback="auto") -> "auto"
    """
    if not value or not isinstance(value, str):
        return fallback

    normalized = value.lower().strip()
    if normalized in _ALIASES:
        return _ALIASES[normalized]

    normalized = re.split(r"[-_]", normalized, maxsplit=1)[0]
    if normalized in SUPPORTED_LANGUAGES:
        return normalized
    if normalized in _ALIASES:
        return _ALIASES[normalized]

    logger.debug("language_unsupported", value=value, fallback=fallback)
    return fallback


def is_supported_language(value: object) -> bool:
    return normalize_lang(value, fallback=None) is not None


def safe_language_code(value: object, fallback: str = "en") -> str:
    code = normalize_lang(value, fallback=None)
    return code if code is not None else fallback


def browser_language(accept_language: str | None, fallback: str = "en") -> str:
    """First supported language from an Accept-Language header.

    ``"es-MX,es;q=0.9,en;q=0.8"`` → ``"es"``.
    """
    if not accept_language:
        return fallback
    for part in accept_language.split(","):
        code = normalize_lang(part.split(";")[0].strip(), fallback=None)
        if code is not None:
            return code
    return fallback


def _strip_marks(text: str) -> str:
    """Drop whitespace and punctuation characters."""
    return "".join(
        ch
        for ch in text
        if not ch.isspace() and not unicodedata.category(ch).startswith("P")
    )


def is_mostly_ascii(text: str, threshold: float = 0.7) -> bool:
    """True when at least ``threshold`` of the letters/digits are ASCII.

    Empty and punctuation-only text counts as ASCII.
    """
    if not text:
        return True
    remaining = _strip_marks(text)
    if not remaining:
        return True
    ascii_count = len(_ASCII_ALNUM.findall(remaining))
    return ascii_count / len(remaining) >= threshold


def matches_expected_script(text: str, lang: str) -> bool:
    """Test text against the Unicode block of the language's script."""
    if not text or not lang:
        return False
    metadata = LANGUAGE_METADATA.get(lang)
    if metadata is None:
        return False

    remaining = _strip_marks(text)
    if not remaining:
        return True

    script = metadata["script"]
    if script == "Latin":
        return bool(_LATIN.match(remaining))
    return bool(_SCRIPT_PATTERNS[script].search(text))


def source_language_for(text: str, declared: object) -> str:
    """Effective source language for text typed under a declared language.

    Returns ``"auto"`` for transliterated input (declared non-English,
    mostly-ASCII text that does not match the declared script).
    """
    lang = normalize_lang(declared)
    if lang == "en":
        return lang
    if is_mostly_ascii(text) and not matches_expected_script(text, lang):
        logger.debug("language_transliteration_detected", declared=lang)
        return AUTO_DETECT
    return lang
