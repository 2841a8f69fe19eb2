"""Concrete note parser implementations."""

from app.strategies.parsers.keep import KeepNoteParser, parse_note_files

__all__ = [
    "KeepNoteParser",
    "parse_note_files",
]
