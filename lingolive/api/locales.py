"""Localized UI strings for the chat widget."""

import json
from pathlib import Path
from typing import Any

import structlog
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from lingolive.core.config import settings
from lingolive.core.exceptions import LocaleNotFoundError, UnsupportedLanguageError
from lingolive.services.language.normalizer import normalize_lang

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["locales"])

FALLBACK_LOCALE = "en"
CACHE_CONTROL = "public, max-age=3600"


def load_locale(lang: str, locales_dir: str | Path) -> dict[str, Any]:
    """Read ``<lang>.json``, falling back to English when the file is missing.

    Raises:
        LocaleNotFoundError: Neither the requested nor the English file loads.
    """
    directory = Path(locales_dir)
    path = directory / f"{lang}.json"
    if not path.is_file():
        logger.info("locale_fallback", lang=lang, fallback=FALLBACK_LOCALE)
        path = directory / f"{FALLBACK_LOCALE}.json"

    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.error("locale_load_failed", lang=lang, path=str(path), error=str(e))
        raise LocaleNotFoundError() from e


@router.get("/locales/{lang}")
async def get_locale(lang: str) -> JSONResponse:
    code = normalize_lang(lang, fallback=None)
    if code is None:
        logger.warning("locale_unsupported", lang=lang)
        raise UnsupportedLanguageError(f"Language '{lang}' is not supported")

    strings = load_locale(code, settings.locales_dir)
    return JSONResponse(content=strings, headers={"Cache-Control": CACHE_CONTROL})
