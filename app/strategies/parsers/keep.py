"""Google Keep (Takeout) note parser.

Converts a Takeout export, one JSON record per note, into template
candidates. Parsing is best-effort: any file that cannot produce a
note is skipped with a reason and the batch carries on.
"""

import json
import logging
from collections.abc import Sequence
from typing import Any

from app.interfaces.language import BaseLanguageDetector
from app.interfaces.parser import (
    BaseNoteParser,
    NoteFile,
    NoteParseResult,
    ParsedNote,
    SkippedFile,
    SkipReason,
)
from app.strategies.language import KeywordLanguageDetector

logger = logging.getLogger(__name__)

DEFAULT_TITLE_MAX_LENGTH = 60

# Export versions disagree on the body field; earlier names win.
BODY_FIELDS = ("textContent", "text")


class _SkipNote(Exception):
    """Raised internally to drop the current file."""

    def __init__(self, reason: SkipReason) -> None:
        super().__init__(reason.value)
        self.reason = reason


class KeepNoteParser(BaseNoteParser):
    """Parser for Google Keep Takeout `.json` note files.

    Record fields used:
        isTrashed / isArchived: optional flags, either one drops the note.
        textContent / text: the body, in that order of preference.
        title: optional explicit title.
        labels: optional list of strings or `{"name": ...}` objects.
    """

    def __init__(
        self,
        language_detector: BaseLanguageDetector | None = None,
        title_max_length: int = DEFAULT_TITLE_MAX_LENGTH,
    ) -> None:
        """Initialize the parser.

        Args:
            language_detector: Detector used to seed each note's language.
            title_max_length: Cap for titles derived from the body.
        """
        self._language_detector = language_detector or KeywordLanguageDetector()
        self._title_max_length = title_max_length

    def parse(self, files: Sequence[NoteFile]) -> NoteParseResult:
        """Parse an upload batch into notes and skipped files.

        Args:
            files: The uploaded files with their content.

        Returns:
            A NoteParseResult; notes keep the input order.
        """
        notes: list[ParsedNote] = []
        skipped: list[SkippedFile] = []

        for file in files:
            try:
                notes.append(self._parse_file(file))
            except _SkipNote as skip:
                logger.debug(f"Skipping {file.name}: {skip.reason.value}")
                skipped.append(SkippedFile(name=file.name, reason=skip.reason))

        logger.info(
            f"Parsed {len(notes)} notes from {len(files)} files "
            f"({len(skipped)} skipped)"
        )
        return NoteParseResult(notes=notes, skipped=skipped, total_files=len(files))

    def _parse_file(self, file: NoteFile) -> ParsedNote:
        """Build a note from one file or raise _SkipNote."""
        if not self.supports_file(file.name):
            raise _SkipNote(SkipReason.UNSUPPORTED_EXTENSION)

        try:
            record = json.loads(file.content)
        except (TypeError, ValueError):
            raise _SkipNote(SkipReason.INVALID_JSON) from None

        if not isinstance(record, dict):
            raise _SkipNote(SkipReason.NOT_A_RECORD)
        if record.get("isTrashed"):
            raise _SkipNote(SkipReason.TRASHED)
        if record.get("isArchived"):
            raise _SkipNote(SkipReason.ARCHIVED)

        body = self._extract_body(record).strip()
        if not body:
            raise _SkipNote(SkipReason.EMPTY_BODY)

        return ParsedNote(
            title=self._derive_title(record, body),
            content=body,
            tags=self._extract_labels(record),
            detected_language=self._language_detector.detect(body),
        )

    @staticmethod
    def _extract_body(record: dict[str, Any]) -> str:
        """Return the first non-empty string body field."""
        for field_name in BODY_FIELDS:
            value = record.get(field_name)
            if isinstance(value, str) and value:
                return value
        return ""

    def _derive_title(self, record: dict[str, Any], body: str) -> str:
        """Use the explicit title, else the capped first body line."""
        title = record.get("title")
        if isinstance(title, str) and title.strip():
            return title.strip()
        return body.split("\n")[0][: self._title_max_length]

    @staticmethod
    def _extract_labels(record: dict[str, Any]) -> list[str]:
        """Map label entries (strings or {name} objects) to strings."""
        labels = record.get("labels")
        if not isinstance(labels, list):
            return []

        tags = []
        for label in labels:
            if isinstance(label, dict):
                name = label.get("name")
                if name:
                    tags.append(str(name))
            elif isinstance(label, str) and label:
                tags.append(label)
        return tags

    @property
    def supported_extensions(self) -> set[str]:
        """Return supported file extensions."""
        return {".json"}


_default_parser: KeepNoteParser | None = None


def parse_note_files(files: Sequence[NoteFile]) -> list[ParsedNote]:
    """Parse Keep export files into notes, silently dropping the rest.

    Args:
        files: The uploaded files with their content.

    Returns:
        The parsed notes in input order.
    """
    global _default_parser
    if _default_parser is None:
        _default_parser = KeepNoteParser()
    return _default_parser.parse(files).notes
