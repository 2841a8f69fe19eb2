"""Keyword-count language detector.

Guesses a template language by counting how many language-specific
keywords appear in the lower-cased text. Matching is plain substring
containment, so "thanks" counts for "thank" and "orders" for "order".
"""

import logging
from collections.abc import Mapping, Sequence

from app.interfaces.language import BaseLanguageDetector

logger = logging.getLogger(__name__)


# Profile order is the tie-break order: the first tag wins ties.
BASIC_KEYWORDS: dict[str, tuple[str, ...]] = {
    "ES": ("hola", "gracias", "pedido", "estimado", "saludo", "reembolso"),
    "EN": ("hello", "thank", "order", "dear", "regards", "refund"),
}

EXTENDED_KEYWORDS: dict[str, tuple[str, ...]] = {
    **BASIC_KEYWORDS,
    "FR": ("bonjour", "merci", "commande", "cordialement", "remboursement", "madame"),
    "DE": ("hallo", "danke", "bestellung", "sehr geehrte", "erstattung", "freundlichen"),
    "IT": ("ciao", "grazie", "ordine", "gentile", "rimborso", "cordiali saluti"),
}

KEYWORD_PROFILES: dict[str, Mapping[str, Sequence[str]]] = {
    "basic": BASIC_KEYWORDS,
    "extended": EXTENDED_KEYWORDS,
}


class KeywordLanguageDetector(BaseLanguageDetector):
    """Language detector based on per-language keyword sets.

    The tag with the strictly highest count wins. Ties, including
    text with no keyword at all, resolve to the earliest tag in
    profile order.
    """

    def __init__(self, keywords: Mapping[str, Sequence[str]] | None = None) -> None:
        """Initialize the detector.

        Args:
            keywords: Ordered mapping of tag to keywords. Defaults to
                the two-way ES/EN profile.

        Raises:
            ValueError: If the mapping is empty.
        """
        keywords = keywords if keywords is not None else BASIC_KEYWORDS
        if not keywords:
            raise ValueError("At least one language keyword set is required")

        self._keywords = {
            tag: tuple(word.lower() for word in words) for tag, words in keywords.items()
        }

        logger.info(
            f"KeywordLanguageDetector initialized: languages={list(self._keywords)}"
        )

    @classmethod
    def from_profile(cls, profile: str) -> "KeywordLanguageDetector":
        """Build a detector from a named keyword profile.

        Args:
            profile: 'basic' (ES/EN) or 'extended' (adds FR, DE, IT).

        Raises:
            ValueError: If the profile is unknown.
        """
        try:
            return cls(KEYWORD_PROFILES[profile])
        except KeyError as e:
            raise ValueError(
                f"Unknown language profile: {profile}. "
                f"Valid options: {', '.join(KEYWORD_PROFILES)}"
            ) from e

    def score(self, text: str) -> dict[str, int]:
        """Count matched keywords per tag."""
        lowered = text.lower()
        return {
            tag: sum(1 for word in words if word in lowered)
            for tag, words in self._keywords.items()
        }

    def detect(self, text: str) -> str:
        """Return the best-scoring tag for text."""
        scores = self.score(text)

        best_tag, best_count = None, -1
        for tag, count in scores.items():
            if count > best_count:
                best_tag, best_count = tag, count

        return best_tag

    @property
    def supported_languages(self) -> tuple[str, ...]:
        """Return the candidate tags in tie-break order."""
        return tuple(self._keywords)


_default_detector: KeywordLanguageDetector | None = None


def detect_language(text: str) -> str:
    """Guess 'ES' or 'EN' for text with the default keyword profile."""
    global _default_detector
    if _default_detector is None:
        _default_detector = KeywordLanguageDetector()
    return _default_detector.detect(text)
