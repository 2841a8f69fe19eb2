"""Template content interfaces.

Defines the abstract base class for the placeholder engine that derives
variable lists from template content and fills them at copy time.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass


@dataclass(frozen=True)
class PlaceholderToken:
    """A single `{name}` occurrence inside template content.

    Attributes:
        raw: The token exactly as written, braces included.
        name: The variable identity (inner text with whitespace stripped).
        start: Offset of the opening brace.
        end: Offset one past the closing brace.
    """

    raw: str
    name: str
    start: int
    end: int


class BasePlaceholderEngine(ABC):
    """Abstract base class for placeholder extraction and substitution.

    Implementations must never raise on any input: malformed braces are
    literal text and missing values pass through untouched.
    """

    @abstractmethod
    def extract_variables(self, content: str) -> list[str]:
        """Return distinct variable names in first-occurrence order.

        Args:
            content: Template content.

        Returns:
            List of trimmed variable names without duplicates.
        """

    @abstractmethod
    def fill_variables(self, content: str, values: Mapping[str, str]) -> str:
        """Substitute supplied values into every placeholder occurrence.

        Args:
            content: Template content.
            values: Mapping from variable name to replacement text.

        Returns:
            The content with known placeholders replaced.
        """

    @abstractmethod
    def find_tokens(self, content: str) -> list[PlaceholderToken]:
        """Return every placeholder occurrence in order of appearance."""

    def missing_variables(self, content: str, values: Mapping[str, str]) -> list[str]:
        """Return variables of content that values does not cover.

        Args:
            content: Template content.
            values: Mapping from variable name to replacement text.

        Returns:
            Variable names without a value, in first-occurrence order.
        """
        return [name for name in self.extract_variables(content) if name not in values]
