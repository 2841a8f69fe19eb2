"""Language detection implementations."""

from app.strategies.language.keyword import KeywordLanguageDetector, detect_language

__all__ = [
    "KeywordLanguageDetector",
    "detect_language",
]
