"""Abstract base classes for template content strategies."""

from app.interfaces.language import BaseLanguageDetector
from app.interfaces.parser import BaseNoteParser, NoteFile, NoteParseResult, ParsedNote
from app.interfaces.template import BasePlaceholderEngine, PlaceholderToken
from app.interfaces.translator import BaseTranslator, TranslationError

__all__ = [
    "BaseLanguageDetector",
    "BaseNoteParser",
    "BasePlaceholderEngine",
    "BaseTranslator",
    "NoteFile",
    "NoteParseResult",
    "ParsedNote",
    "PlaceholderToken",
    "TranslationError",
]
