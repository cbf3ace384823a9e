"""LibreTranslate-compatible HTTP provider.

POSTs ``{q, source, target, format, api_key}`` and reads ``translatedText``.
The per-request timeout here only bounds the HTTP exchange; the resolver
applies its own overall deadline on top.
"""

import httpx
import structlog

from lingolive.core.exceptions import TranslationProviderError
from lingolive.services.translation.providers.base import TranslationProvider

logger = structlog.get_logger(__name__)

_TIMEOUT_SECONDS = 10.0


class LibreTranslateProvider(TranslationProvider):
    """Calls a LibreTranslate ``/translate`` endpoint."""

    def __init__(
        self,
        url: str,
        api_key: str = "",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._url = url
        self._api_key = api_key
        self._client = client or httpx.AsyncClient(timeout=_TIMEOUT_SECONDS)
        logger.info("libretranslate_provider_initialized", url=url)

    async def translate(self, text: str, source: str, target: str) -> str:
        payload = {
            "q": text,
            "source": source,
            "target": target,
            "format": "text",
        }
        if self._api_key:
            payload["api_key"] = self._api_key

        try:
            response = await self._client.post(self._url, json=payload)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(
                "libretranslate_request_failed",
                error=str(e),
                source=source,
                target=target,
            )
            raise TranslationProviderError(f"LibreTranslate failed: {e}") from e

        translated = data.get("translatedText") if isinstance(data, dict) else None
        if not translated or not isinstance(translated, str):
            raise TranslationProviderError("LibreTranslate returned no translation")

        logger.debug("libretranslate_ok", source=source, target=target, text_len=len(text))
        return translated

    async def aclose(self) -> None:
        await self._client.aclose()
