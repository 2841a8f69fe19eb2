"""Abstract base class for language detection strategies."""

from abc import ABC, abstractmethod


class BaseLanguageDetector(ABC):
    """Abstract base class for best-effort language classification.

    Detection only seeds an editable default, so implementations
    return a tag for every input instead of raising.
    """

    @abstractmethod
    def detect(self, text: str) -> str:
        """Guess the language tag of a text.

        Args:
            text: Free text in any language.

        Returns:
            One of the tags in `supported_languages`.
        """
        ...

    @property
    @abstractmethod
    def supported_languages(self) -> tuple[str, ...]:
        """Return the candidate tags, in tie-break order."""
        ...
