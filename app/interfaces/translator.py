"""Abstract base class for translation providers."""

from abc import ABC, abstractmethod


class BaseTranslator(ABC):
    """Abstract base class for machine translation strategies.

    Example:
        ```python
        class DeepLTranslator(BaseTranslator):
            async def translate(self, text: str, target_lang: str) -> str:
                # Implementation here
                pass
        ```
    """

    @abstractmethod
    async def translate(self, text: str, target_lang: str) -> str:
        """Translate text into the target language.

        Args:
            text: The text to translate.
            target_lang: Upper-case target language code (e.g. 'FR').

        Returns:
            The translated text.

        Raises:
            TranslationError: If the provider is unavailable or answers
                with an unexpected payload.
        """
        ...

    @property
    @abstractmethod
    def supported_languages(self) -> set[str]:
        """Return the target language codes this provider accepts."""
        ...


class TranslationError(Exception):
    """Exception raised when a translation cannot be produced."""

    pass
