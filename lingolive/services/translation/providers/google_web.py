"""Google Translate mobile-page provider.

Fetches ``https://translate.google.com/m`` and extracts the text of the
``result-container`` div. Needs no API key. An unparseable page is a
provider failure like any other.
"""

import html
import re

import httpx
import structlog

from lingolive.core.exceptions import TranslationProviderError
from lingolive.services.translation.providers.base import TranslationProvider

logger = structlog.get_logger(__name__)

_TIMEOUT_SECONDS = 10.0
_URL = "https://translate.google.com/m"
_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)
_RESULT_PATTERNS = (
    re.compile(r'<div[^>]*class="result-container"[^>]*>(.*?)</div>', re.DOTALL),
    re.compile(r'class="t0">(.*?)</div>', re.DOTALL),
)
_TAG = re.compile(r"<[^>]*>")


def extract_translation(page: str) -> str | None:
    """Pull the translated text out of the mobile result page."""
    for pattern in _RESULT_PATTERNS:
        match = pattern.search(page)
        if match:
            text = html.unescape(_TAG.sub("", match.group(1))).strip()
            if text:
                return text
    return None


class GoogleWebProvider(TranslationProvider):
    """Scrapes the public Google Translate mobile page."""

    def __init__(self, client: httpx.AsyncClient | None = None) -> None:
        self._client = client or httpx.AsyncClient(
            timeout=_TIMEOUT_SECONDS,
            headers={"User-Agent": _USER_AGENT},
        )
        logger.info("google_web_provider_initialized")

    async def translate(self, text: str, source: str, target: str) -> str:
        params = {"hl": target, "sl": source, "tl": target, "q": text}
        try:
            response = await self._client.get(_URL, params=params)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(
                "google_web_request_failed",
                error=str(e),
                source=source,
                target=target,
            )
            raise TranslationProviderError(f"Google web translate failed: {e}") from e

        translated = extract_translation(response.text)
        if translated is None:
            logger.warning("google_web_unparseable_page", source=source, target=target)
            raise TranslationProviderError("Could not extract translation from page")

        logger.debug("google_web_ok", source=source, target=target, text_len=len(text))
        return translated

    async def aclose(self) -> None:
        await self._client.aclose()
