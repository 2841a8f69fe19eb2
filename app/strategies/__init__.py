"""Concrete strategy implementations."""

from app.strategies.language import (
    KeywordLanguageDetector,
)
from app.strategies.parsers import (
    KeepNoteParser,
)
from app.strategies.template_engine import (
    PlaceholderEngine,
)
from app.strategies.translators import (
    DeepLTranslator,
)

__all__ = [
    "KeywordLanguageDetector",
    "KeepNoteParser",
    "PlaceholderEngine",
    "DeepLTranslator",
]
