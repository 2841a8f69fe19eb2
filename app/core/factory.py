"""Component Factory for strategy instantiation.

The Factory Pattern allows the application to instantiate
different strategy implementations at runtime based on
configuration or environment variables.
"""

import logging

from app.core.config import Settings, get_settings
from app.interfaces.language import BaseLanguageDetector
from app.interfaces.parser import BaseNoteParser
from app.interfaces.template import BasePlaceholderEngine
from app.interfaces.translator import BaseTranslator
from app.strategies.language import KeywordLanguageDetector
from app.strategies.parsers import KeepNoteParser
from app.strategies.template_engine import PlaceholderEngine
from app.strategies.translators import DeepLTranslator

logger = logging.getLogger(__name__)


class ComponentFactory:
    """Factory for creating component instances based on configuration.

    Example:
        ```python
        settings = get_settings()
        factory = ComponentFactory(settings)

        engine = factory.get_placeholder_engine()
        parser = factory.get_note_parser()
        translator = factory.get_translator()
        ```
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the factory with optional settings.

        Args:
            settings: Application settings. If None, uses global settings.
        """
        self._settings = settings or get_settings()
        self._placeholder_engine_cache: BasePlaceholderEngine | None = None
        self._language_detector_cache: dict[str, BaseLanguageDetector] = {}
        self._note_parser_cache: dict[str, BaseNoteParser] = {}
        self._translator_cache: BaseTranslator | None = None

    def get_placeholder_engine(self) -> BasePlaceholderEngine:
        """Get the placeholder engine instance.

        Returns:
            A BasePlaceholderEngine implementation instance.
        """
        if self._placeholder_engine_cache is None:
            logger.info("Instantiating placeholder engine")
            self._placeholder_engine_cache = PlaceholderEngine()

        return self._placeholder_engine_cache

    def get_language_detector(self, profile: str | None = None) -> BaseLanguageDetector:
        """Get a language detector for the given keyword profile.

        Args:
            profile: 'basic' or 'extended'. If None, uses settings.

        Returns:
            A BaseLanguageDetector implementation instance.

        Raises:
            ValueError: If the profile is unknown.
        """
        profile = profile or self._settings.language_profile

        if profile not in self._language_detector_cache:
            logger.info(f"Instantiating language detector: {profile}")

            self._language_detector_cache[profile] = KeywordLanguageDetector.from_profile(profile)

        return self._language_detector_cache[profile]

    def get_note_parser(self, parser_type: str = "keep") -> BaseNoteParser:
        """Get a note parser instance based on the specified type.

        Args:
            parser_type: The export format to parse.

        Returns:
            A BaseNoteParser implementation instance.

        Raises:
            ValueError: If the parser type is unknown.
        """
        if parser_type not in self._note_parser_cache:
            logger.info(f"Instantiating note parser: {parser_type}")

            match parser_type:
                case "keep":
                    self._note_parser_cache[parser_type] = KeepNoteParser(
                        language_detector=self.get_language_detector(),
                        title_max_length=self._settings.note_title_max_length,
                    )
                case _:
                    raise ValueError(
                        f"Unknown note parser type: {parser_type}. "
                        f"Valid options: 'keep'"
                    )

        return self._note_parser_cache[parser_type]

    def get_translator(self) -> BaseTranslator:
        """Get the translator instance.

        Returns:
            A BaseTranslator implementation instance.
        """
        if self._translator_cache is None:
            logger.info("Instantiating translator: deepl")

            if not self._settings.deepl_api_key:
                logger.warning("DEEPL_API_KEY is not set; translations will be unavailable")

            self._translator_cache = DeepLTranslator(
                api_key=self._settings.deepl_api_key,
                api_url=self._settings.deepl_api_url,
                timeout=self._settings.translation_timeout,
            )

        return self._translator_cache

    def clear_cache(self) -> None:
        """Clear all cached component instances.

        This forces new instances to be created on next access.
        Useful for testing or when settings change.
        """
        self._placeholder_engine_cache = None
        self._language_detector_cache = {}
        self._note_parser_cache = {}
        self._translator_cache = None
        logger.debug("Component factory cache cleared")


# Global factory instance
_factory: ComponentFactory | None = None


def get_factory() -> ComponentFactory:
    """Get or create the global ComponentFactory instance.

    Returns:
        The singleton ComponentFactory instance.
    """
    global _factory
    if _factory is None:
        _factory = ComponentFactory()
    return _factory
