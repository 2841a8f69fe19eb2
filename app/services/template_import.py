"""Bulk import of parsed notes into the template library.

Rows are inserted in fixed-size batches, each committed on its own.
A failed batch counts its rows as skipped, is not retried and does
not stop later batches.
"""

import logging
import uuid
from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import AuditAction, Profile, Template, TemplateLanguage
from app.interfaces.parser import ParsedNote
from app.services.audit import record_audit
from app.services.catalog import normalize_tags, set_template_content

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 50
IMPORT_SOURCE_LABEL = "Google Keep"


@dataclass(frozen=True)
class ImportResult:
    """Counts reported when an import finishes."""

    imported: int
    skipped: int


def build_template(
    note: ParsedNote,
    category_id: uuid.UUID | None = None,
    created_by: uuid.UUID | None = None,
) -> Template:
    """Turn a parsed note into an unsaved Template row.

    The variables are recomputed from the note content and the tags
    are normalized like tags entered through the API.
    """
    try:
        language = TemplateLanguage(note.detected_language)
    except ValueError:
        language = TemplateLanguage.ES

    template = Template(
        title=note.title[:255],
        content="",
        language=language,
        tags=normalize_tags(note.tags),
        category_id=category_id,
        created_by=created_by,
    )
    set_template_content(template, note.content, {language.value.lower(): note.content})
    return template


async def import_notes(
    session: AsyncSession,
    notes: Sequence[ParsedNote],
    category_id: uuid.UUID | None = None,
    actor: Profile | None = None,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> ImportResult:
    """Insert notes as templates in batches and audit the import.

    Args:
        session: Database session.
        notes: Notes selected for import.
        category_id: Category assigned to every imported template.
        actor: Profile running the import.
        batch_size: Rows per insert batch.

    Returns:
        ImportResult with imported and skipped counts.

    Raises:
        ValueError: If batch_size is not positive.
    """
    if batch_size < 1:
        raise ValueError("batch_size must be at least 1")

    created_by = actor.id if actor else None
    rows = [build_template(note, category_id, created_by) for note in notes]
    imported = skipped = 0

    logger.info(f"Importing {len(rows)} templates in batches of {batch_size}")

    for start in range(0, len(rows), batch_size):
        batch = rows[start:start + batch_size]
        try:
            session.add_all(batch)
            await session.commit()
            imported += len(batch)
            logger.debug(f"Batch at offset {start} imported: {len(batch)} rows")
        except SQLAlchemyError as e:
            logger.error(f"Import batch at offset {start} failed: {e}", exc_info=True)
            await session.rollback()
            skipped += len(batch)
            if actor is not None and actor in session:
                # Rollback expired the actor; reload it before the audit entry reads it
                await session.refresh(actor)

    try:
        record_audit(
            session,
            actor,
            AuditAction.IMPORT,
            entity_type="template",
            entity_id=str(created_by) if created_by else "import",
            entity_title=f"Import of {imported} templates from {IMPORT_SOURCE_LABEL}",
        )
        await session.commit()
    except SQLAlchemyError as e:
        logger.error(f"Failed to record import audit entry: {e}", exc_info=True)
        await session.rollback()

    logger.info(f"Import finished: imported={imported}, skipped={skipped}")
    return ImportResult(imported=imported, skipped=skipped)
