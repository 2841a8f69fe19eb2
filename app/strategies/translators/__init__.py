"""Concrete translator implementations."""

from app.strategies.translators.deepl import DeepLTranslator

__all__ = [
    "DeepLTranslator",
]
