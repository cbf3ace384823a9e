"""Translation tiers.

Each tier implements ``attempt(text, source, target)`` and returns the
translation or ``None``. The resolver walks them in order and stops at the
first non-``None`` result. A tier signals "no answer" by returning ``None``;
exceptions that escape a tier are logged by the resolver and treated the same
way.
"""

import asyncio
from abc import ABC, abstractmethod

import structlog

from lingolive.services.translation.phrases import PhraseBook
from lingolive.services.translation.providers.base import TranslationProvider

logger = structlog.get_logger(__name__)


class TranslationStrategy(ABC):
    """One tier of the fallback chain."""

    name: str = "strategy"

    @abstractmethod
    async def attempt(self, text: str, source: str, target: str) -> str | None:
        """Return a translation, or ``None`` to let the next tier try."""
        ...


class PhraseMatchStrategy(TranslationStrategy):
    """Curated phrase/pattern tables. Deterministic, no I/O."""

    name = "phrase_match"

    def __init__(self, phrasebook: PhraseBook) -> None:
        self._phrasebook = phrasebook

    async def attempt(self, text: str, source: str, target: str) -> str | None:
        table = self._phrasebook.table_for(source, target)
        if table is None:
            return None
        return table.match(text)


class ExternalServiceStrategy(TranslationStrategy):
    """Remote provider call bounded by an overall deadline.

    Errors and timeouts are logged and reported as ``None``; there is no
    inline retry.
    """

    name = "external_service"

    def __init__(self, provider: TranslationProvider, timeout_seconds: float = 10.0) -> None:
        self._provider = provider
        self._timeout_seconds = timeout_seconds

    async def attempt(self, text: str, source: str, target: str) -> str | None:
        try:
            translated = await asyncio.wait_for(
                self._provider.translate(text, source, target),
                timeout=self._timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "external_translation_timeout",
                source=source,
                target=target,
                timeout_seconds=self._timeout_seconds,
            )
            return None
        except Exception as e:
            logger.warning(
                "external_translation_failed",
                source=source,
                target=target,
                error=str(e),
            )
            return None
        return translated or None


class OfflineDictionaryStrategy(TranslationStrategy):
    """Last-resort exact/fuzzy lookup that works without network access."""

    name = "offline_dictionary"

    def __init__(self, dictionary: PhraseBook) -> None:
        self._dictionary = dictionary

    async def attempt(self, text: str, source: str, target: str) -> str | None:
        table = self._dictionary.table_for(source, target)
        if table is None:
            return None
        return table.match_offline(text)
