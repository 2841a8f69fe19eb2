"""Placeholder engine strategy.

Extracts `{variable}` names from template content and substitutes
values back into it. A token is an opening brace, one or more
characters other than `}`, and a closing brace; the variable identity
is the inner text with surrounding whitespace stripped.
"""

import logging
import re
from collections.abc import Mapping

from app.interfaces.template import BasePlaceholderEngine, PlaceholderToken

logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"\{([^}]+)\}")


def extract_variables(content: str) -> list[str]:
    """Return the distinct placeholder names found in content.

    Names are trimmed and reported once, in order of first occurrence.
    Unbalanced braces are ordinary text and never raise.

    Args:
        content: Template content.

    Returns:
        List of variable names without duplicates.
    """
    return list(dict.fromkeys(name.strip() for name in PLACEHOLDER_PATTERN.findall(content)))


def fill_variables(content: str, values: Mapping[str, str]) -> str:
    """Replace every placeholder whose trimmed name has a value.

    Each occurrence is handled independently. An empty string is a
    valid value. Tokens without a value are left as written, braces
    included. Replacement text is inserted verbatim and never
    re-scanned.

    Args:
        content: Template content.
        values: Mapping from variable name to replacement text.

    Returns:
        The filled content.
    """

    def _replace(match: re.Match[str]) -> str:
        key = match.group(1).strip()
        if key in values:
            return str(values[key])
        return match.group(0)

    return PLACEHOLDER_PATTERN.sub(_replace, content)


def find_tokens(content: str) -> list[PlaceholderToken]:
    """Return every placeholder occurrence with its span."""
    return [
        PlaceholderToken(
            raw=match.group(0),
            name=match.group(1).strip(),
            start=match.start(),
            end=match.end(),
        )
        for match in PLACEHOLDER_PATTERN.finditer(content)
    ]


def missing_variables(content: str, values: Mapping[str, str]) -> list[str]:
    """Return extracted names that have no entry in values."""
    return [name for name in extract_variables(content) if name not in values]


class PlaceholderEngine(BasePlaceholderEngine):
    """Placeholder engine backed by the module-level functions.

    Cheap enough to run on every keystroke: a single linear scan with
    a non-nested delimiter grammar.
    """

    def extract_variables(self, content: str) -> list[str]:
        """Return distinct variable names in first-occurrence order."""
        return extract_variables(content)

    def fill_variables(self, content: str, values: Mapping[str, str]) -> str:
        """Substitute supplied values into every placeholder occurrence."""
        filled = fill_variables(content, values)
        logger.debug(f"Filled content with {len(values)} supplied values")
        return filled

    def find_tokens(self, content: str) -> list[PlaceholderToken]:
        """Return every placeholder occurrence in order of appearance."""
        return find_tokens(content)

    def missing_variables(self, content: str, values: Mapping[str, str]) -> list[str]:
        """Return variables of content that values does not cover."""
        return missing_variables(content, values)
