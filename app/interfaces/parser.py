"""Abstract base class for note export parsers.

The Strategy Pattern allows different notes-export formats
to be imported through the same preview/import workflow.
"""

import enum
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field


@dataclass(frozen=True)
class NoteFile:
    """An uploaded export file, already read into memory.

    Attributes:
        name: The original file name.
        content: The decoded file content.
    """

    name: str
    content: str


@dataclass(frozen=True)
class ParsedNote:
    """A template candidate produced from one note.

    Attributes:
        title: Explicit note title, or the first line of the body.
        content: The trimmed note body.
        tags: Label names attached to the note.
        detected_language: Language tag guessed from the body.
    """

    title: str
    content: str
    tags: list[str] = field(default_factory=list)
    detected_language: str = "ES"


class SkipReason(str, enum.Enum):
    """Why a file produced no note."""

    UNSUPPORTED_EXTENSION = "unsupported_extension"
    INVALID_JSON = "invalid_json"
    NOT_A_RECORD = "not_a_record"
    TRASHED = "trashed"
    ARCHIVED = "archived"
    EMPTY_BODY = "empty_body"


@dataclass(frozen=True)
class SkippedFile:
    """A file excluded from the parse output."""

    name: str
    reason: SkipReason


@dataclass(frozen=True)
class NoteParseResult:
    """Outcome of parsing one upload batch.

    Attributes:
        notes: Parsed notes, in input order.
        skipped: Files that were excluded, with the reason.
        total_files: Number of files submitted.
    """

    notes: list[ParsedNote] = field(default_factory=list)
    skipped: list[SkippedFile] = field(default_factory=list)
    total_files: int = 0


class BaseNoteParser(ABC):
    """Abstract base class for notes-export parsing strategies.

    Parsing is best-effort: a malformed file is skipped and
    never aborts the batch.

    Example:
        ```python
        class KeepNoteParser(BaseNoteParser):
            def parse(self, files: Sequence[NoteFile]) -> NoteParseResult:
                # Implementation here
                pass
        ```
    """

    @abstractmethod
    def parse(self, files: Sequence[NoteFile]) -> NoteParseResult:
        """Convert export files into template candidates.

        Args:
            files: The uploaded files with their content.

        Returns:
            A NoteParseResult with the parsed notes and skipped files.
        """
        ...

    @property
    @abstractmethod
    def supported_extensions(self) -> set[str]:
        """Return the set of file extensions supported by this parser.

        Returns:
            A set of file extensions (e.g., {'.json'}).
        """
        ...

    def supports_file(self, file_name: str) -> bool:
        """Check if this parser accepts the given file name.

        Args:
            file_name: The name of the uploaded file.

        Returns:
            True if the file extension is supported, False otherwise.
        """
        return any(file_name.endswith(ext) for ext in self.supported_extensions)
