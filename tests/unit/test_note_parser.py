"""Unit tests for the Google Keep note parser."""

import json

import pytest

from app.interfaces.parser import NoteFile, SkipReason
from app.strategies.language import KeywordLanguageDetector
from app.strategies.parsers import KeepNoteParser, parse_note_files


def keep_file(name: str = "note.json", **record) -> NoteFile:
    """Build an in-memory Keep export file."""
    return NoteFile(name=name, content=json.dumps(record))


class TestParseNoteFiles:
    """Behaviour of the plain note list."""

    def test_trashed_note_excluded(self):
        assert parse_note_files([keep_file(isTrashed=True, textContent="hello")]) == []

    def test_spanish_note_with_label_object(self):
        """Test language, tags and title derived from a minimal record."""
        notes = parse_note_files(
            [keep_file(textContent="Hola, gracias por tu pedido", labels=[{"name": "support"}])]
        )

        assert len(notes) == 1
        note = notes[0]
        assert note.detected_language == "ES"
        assert note.tags == ["support"]
        assert note.title == "Hola, gracias por tu pedido"
        assert note.content == "Hola, gracias por tu pedido"

    def test_invalid_json_does_not_abort_batch(self):
        files = [
            NoteFile(name="broken.json", content="{not json"),
            keep_file(name="ok.json", textContent="Hello there"),
        ]

        notes = parse_note_files(files)

        assert [n.content for n in notes] == ["Hello there"]

    def test_empty_bodies_skipped(self):
        assert parse_note_files([keep_file(textContent="", text="")]) == []

    def test_output_keeps_input_order(self):
        files = [keep_file(name=f"{i}.json", textContent=f"note {i}") for i in range(5)]
        assert [n.content for n in parse_note_files(files)] == [f"note {i}" for i in range(5)]


class TestKeepNoteParser:
    """Test suite for KeepNoteParser."""

    @pytest.fixture
    def parser(self):
        return KeepNoteParser(language_detector=KeywordLanguageDetector())

    # =========================================================================
    # Validation Tests
    # =========================================================================

    def test_supported_extensions(self, parser):
        assert parser.supported_extensions == {".json"}

    def test_supports_file(self, parser):
        assert parser.supports_file("Takeout/Keep/note.json")
        assert not parser.supports_file("Takeout/Keep/note.html")

    # =========================================================================
    # Skip Tests
    # =========================================================================

    @pytest.mark.parametrize(
        ("file", "reason"),
        [
            (NoteFile(name="note.html", content="<p>hi</p>"), SkipReason.UNSUPPORTED_EXTENSION),
            (NoteFile(name="bad.json", content="{"), SkipReason.INVALID_JSON),
            (NoteFile(name="list.json", content="[1, 2]"), SkipReason.NOT_A_RECORD),
            (keep_file(isTrashed=True, textContent="x"), SkipReason.TRASHED),
            (keep_file(isArchived=True, textContent="x"), SkipReason.ARCHIVED),
            (keep_file(textContent="   \n  "), SkipReason.EMPTY_BODY),
            (keep_file(title="Only a title"), SkipReason.EMPTY_BODY),
        ],
    )
    def test_skip_reasons(self, parser, file, reason):
        result = parser.parse([file])

        assert result.notes == []
        assert [(s.name, s.reason) for s in result.skipped] == [(file.name, reason)]
        assert result.total_files == 1

    def test_counts_found_against_total(self, parser):
        files = [
            keep_file(name="a.json", textContent="one"),
            NoteFile(name="b.json", content="oops"),
            keep_file(name="c.json", textContent="two", isArchived=False),
        ]

        result = parser.parse(files)

        assert len(result.notes) == 2
        assert result.total_files == 3
        assert [s.name for s in result.skipped] == ["b.json"]

    # =========================================================================
    # Field Derivation Tests
    # =========================================================================

    def test_text_field_used_when_text_content_missing(self, parser):
        result = parser.parse([keep_file(text="Fallback body")])
        assert result.notes[0].content == "Fallback body"

    def test_text_content_preferred(self, parser):
        result = parser.parse([keep_file(textContent="Primary", text="Secondary")])
        assert result.notes[0].content == "Primary"

    def test_body_is_trimmed(self, parser):
        result = parser.parse([keep_file(textContent="\n  Hello {name}  \n")])
        assert result.notes[0].content == "Hello {name}"

    def test_explicit_title_wins(self, parser):
        result = parser.parse([keep_file(title="  Refund reply ", textContent="Body")])
        assert result.notes[0].title == "Refund reply"

    def test_blank_title_falls_back_to_first_line(self, parser):
        result = parser.parse([keep_file(title="   ", textContent="First line\nSecond line")])
        assert result.notes[0].title == "First line"

    def test_derived_title_capped_at_sixty_chars(self, parser):
        body = "x" * 100
        result = parser.parse([keep_file(textContent=body)])
        assert result.notes[0].title == "x" * 60

    def test_custom_title_cap(self):
        parser = KeepNoteParser(title_max_length=5)
        result = parser.parse([keep_file(textContent="Hello world")])
        assert result.notes[0].title == "Hello"

    def test_mixed_label_shapes(self, parser):
        record = {"textContent": "Body", "labels": ["vip", {"name": "refund"}, {"id": 3}, 7, ""]}
        result = parser.parse([NoteFile(name="n.json", content=json.dumps(record))])
        assert result.notes[0].tags == ["vip", "refund"]

    def test_labels_not_a_list(self, parser):
        result = parser.parse([keep_file(textContent="Body", labels="vip")])
        assert result.notes[0].tags == []

    def test_language_detected_from_body(self, parser):
        result = parser.parse([keep_file(textContent="Dear customer, thank you for your order")])
        assert result.notes[0].detected_language == "EN"

    def test_extended_detector(self):
        parser = KeepNoteParser(language_detector=KeywordLanguageDetector.from_profile("extended"))
        result = parser.parse([keep_file(textContent="Ciao, grazie per il tuo ordine")])
        assert result.notes[0].detected_language == "IT"

    def test_empty_batch(self, parser):
        result = parser.parse([])
        assert result.notes == [] and result.skipped == [] and result.total_files == 0
