"""Abstract external translation provider interface.

All network translation backends inherit from this class.
The resolver never imports a concrete provider directly: the provider is
instantiated once in the FastAPI lifespan and handed to the resolver's
external-service strategy.
"""

from abc import ABC, abstractmethod


class TranslationProvider(ABC):
    """Abstract base class for external translation providers."""

    @abstractmethod
    async def translate(self, text: str, source: str, target: str) -> str:
        """Translate text with a remote service.

        Args:
            text: Text to translate.
            source: Source language code, or ``"auto"`` to let the service detect it.
            target: Target language code.

        Returns:
            The translated text. Never empty.

        Raises:
            TranslationProviderError: On network errors, non-2xx responses,
                rate limiting or an unparseable/empty response.
        """
        ...

    async def aclose(self) -> None:
        """Release pooled connections. Default: nothing to release."""
        return None
