"""Layered translation resolution.

IMPORTANT: Every user message passes through ``user_to_agent`` before it
reaches an agent, and every agent reply passes through ``agent_to_user``
before it reaches the widget. ``resolve`` never raises: when every tier
fails the original text is delivered unchanged.

Order of resolution:
1. identity (source == target)
2. script override (romanized input → auto-detect)
3. cache
4. phrase/pattern tables
5. external provider (bounded by a timeout)
6. offline dictionary
7. passthrough
"""

from collections.abc import Sequence

import structlog

from lingolive.services.language.normalizer import (
    AUTO_DETECT,
    normalize_lang,
    source_language_for,
)
from lingolive.services.translation.cache import TranslationCache
from lingolive.services.translation.phrases import default_phrasebook, offline_dictionary
from lingolive.services.translation.providers.base import TranslationProvider
from lingolive.services.translation.strategies import (
    ExternalServiceStrategy,
    OfflineDictionaryStrategy,
    PhraseMatchStrategy,
    TranslationStrategy,
)

logger = structlog.get_logger(__name__)


def default_strategies(
    provider: TranslationProvider | None,
    timeout_seconds: float = 10.0,
) -> list[TranslationStrategy]:
    """Phrase tables → external provider (if any) → offline dictionary."""
    strategies: list[TranslationStrategy] = [PhraseMatchStrategy(default_phrasebook())]
    if provider is not None:
        strategies.append(ExternalServiceStrategy(provider, timeout_seconds=timeout_seconds))
    strategies.append(OfflineDictionaryStrategy(offline_dictionary()))
    return strategies


class TranslationResolver:
    """Resolves text through an ordered list of strategies with a FIFO cache."""

    def __init__(
        self,
        strategies: Sequence[TranslationStrategy],
        cache: TranslationCache | None = None,
        agent_language: str = "en",
    ) -> None:
        self._strategies = list(strategies)
        self._cache = cache if cache is not None else TranslationCache()
        self._agent_language = normalize_lang(agent_language)

    @property
    def agent_language(self) -> str:
        return self._agent_language

    @property
    def cache(self) -> TranslationCache:
        return self._cache

    @property
    def strategies(self) -> list[TranslationStrategy]:
        return list(self._strategies)

    async def resolve(
        self,
        text: str,
        source_lang: str | None,
        target_lang: str | None,
        declared_lang: str | None = None,
    ) -> str:
        """Translate text, degrading to the original text on total failure.

        Args:
            text: Text to translate.
            source_lang: Source language tag, or ``"auto"``.
            target_lang: Target language tag.
            declared_lang: Language the author selected. When it is the
                source side, romanized text switches the source to auto-detect.
        """
        source = normalize_lang(source_lang, fallback=AUTO_DETECT)
        target = normalize_lang(target_lang, fallback="en")

        if source == target and source != AUTO_DETECT:
            return text
        if not text or not text.strip():
            return text

        effective_source = source
        if declared_lang is not None:
            declared = normalize_lang(declared_lang, fallback="en")
            if declared == source:
                effective_source = source_language_for(text, declared)

        cached = self._cache.get(effective_source, target, text)
        if cached is not None:
            logger.debug(
                "translation_cache_hit",
                source=effective_source,
                target=target,
                text=text[:50],
            )
            return cached

        for strategy in self._strategies:
            try:
                translated = await strategy.attempt(text, effective_source, target)
            except Exception as e:
                logger.warning(
                    "translation_tier_failed",
                    tier=strategy.name,
                    source=effective_source,
                    target=target,
                    error=str(e),
                )
                continue
            if translated:
                logger.info(
                    "translation_resolved",
                    tier=strategy.name,
                    source=effective_source,
                    target=target,
                    text=text[:50],
                )
                self._cache.put(effective_source, target, text, translated)
                return translated

        logger.info(
            "translation_passthrough",
            source=effective_source,
            target=target,
            text=text[:50],
        )
        return text

    async def user_to_agent(self, text: str, user_lang: str | None) -> str:
        """Translate a widget message into the agent language."""
        return await self.resolve(text, user_lang, self._agent_language, user_lang)

    async def agent_to_user(self, text: str, user_lang: str | None) -> str:
        """Translate an agent reply into the user's language."""
        lang = normalize_lang(user_lang, fallback=self._agent_language)
        if lang == self._agent_language:
            return text
        return await self.resolve(text, self._agent_language, lang, lang)
