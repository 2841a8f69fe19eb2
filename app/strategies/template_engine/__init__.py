"""Template engine strategies.

Implements placeholder extraction and substitution for template content.
"""

from app.strategies.template_engine.placeholders import (
    PlaceholderEngine,
    extract_variables,
    fill_variables,
    find_tokens,
    missing_variables,
)

__all__ = [
    "PlaceholderEngine",
    "extract_variables",
    "fill_variables",
    "find_tokens",
    "missing_variables",
]
