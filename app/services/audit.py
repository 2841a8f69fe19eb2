"""Audit log recording."""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models import AuditAction, AuditLog, Profile

audit_logger = structlog.get_logger("app.audit")


def record_audit(
    session: AsyncSession,
    actor: Profile | None,
    action: AuditAction,
    entity_type: str,
    entity_id: str,
    entity_title: str | None = None,
) -> AuditLog:
    """Stage an audit entry on the session.

    The entry is committed together with the caller's change.

    Args:
        session: The session carrying the audited change.
        actor: Profile performing the action, if known.
        action: What happened.
        entity_type: Kind of entity (e.g. 'template').
        entity_id: Identifier of the entity.
        entity_title: Human-readable label kept with the entry.

    Returns:
        The staged AuditLog row.
    """
    entry = AuditLog(
        user_id=actor.id if actor else None,
        user_email=actor.email if actor else None,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        entity_title=entity_title,
    )
    session.add(entry)

    audit_logger.info(
        "audit_event",
        action=action.value,
        entity_type=entity_type,
        entity_id=entity_id,
        user_id=str(entry.user_id) if entry.user_id else None,
    )
    return entry
