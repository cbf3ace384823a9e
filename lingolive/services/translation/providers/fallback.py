"""Fallback translation provider: tries primary, falls back to secondary on failure.

Google web (primary) needs no key; LibreTranslate (secondary) is used when
the primary errors or returns an unparseable page.
"""

import structlog

from lingolive.services.translation.providers.base import TranslationProvider

logger = structlog.get_logger(__name__)


class FallbackTranslationProvider(TranslationProvider):
    """Tries primary provider first; falls back to secondary on any error."""

    def __init__(self, primary: TranslationProvider, secondary: TranslationProvider) -> None:
        self._primary = primary
        self._secondary = secondary
        logger.info(
            "fallback_provider_initialized",
            primary=type(primary).__name__,
            secondary=type(secondary).__name__,
        )

    async def translate(self, text: str, source: str, target: str) -> str:
        """Try primary translate(); fall back to secondary on failure."""
        try:
            return await self._primary.translate(text, source, target)
        except Exception as primary_err:
            logger.warning(
                "primary_translate_failed_falling_back",
                primary=type(self._primary).__name__,
                error=str(primary_err),
            )
            return await self._secondary.translate(text, source, target)

    async def aclose(self) -> None:
        await self._primary.aclose()
        await self._secondary.aclose()
