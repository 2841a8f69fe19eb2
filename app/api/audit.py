"""Audit log and admin dashboard routes."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, require_admin
from app.api.schemas import AdminStatsResponse, AuditLogListResponse, AuditLogResponse
from app.core.config import Settings, get_settings
from app.db.models import AuditAction, AuditLog, Profile, Template

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin"])


@router.get("/audit", response_model=AuditLogListResponse)
async def list_audit_entries(
    limit: int | None = Query(default=None, ge=1, le=1000),
    current_user: Profile = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AuditLogListResponse:
    """List audit entries, newest first.

    Args:
        limit: Maximum entries; defaults to the configured audit limit.
        current_user: The calling admin.
        session: Database session.
        settings: Application settings.

    Returns:
        The latest audit entries.
    """
    try:
        query = (
            select(AuditLog)
            .order_by(AuditLog.created_at.desc())
            .limit(limit or settings.audit_log_limit)
        )
        result = await session.execute(query)
        entries = result.scalars().all()

        return AuditLogListResponse(
            entries=[AuditLogResponse.model_validate(e) for e in entries],
            total=len(entries),
        )

    except Exception as e:
        logger.error(f"Error listing audit entries: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error fetching audit log",
        ) from e


@router.get("/admin/stats", response_model=AdminStatsResponse)
async def get_stats(
    current_user: Profile = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> AdminStatsResponse:
    """Count active templates, profiles and recorded copies."""
    try:
        templates = await session.scalar(
            select(func.count()).select_from(Template).where(Template.is_active.is_(True))
        )
        users = await session.scalar(select(func.count()).select_from(Profile))
        copies = await session.scalar(
            select(func.count()).select_from(AuditLog).where(AuditLog.action == AuditAction.COPY)
        )

        return AdminStatsResponse(templates=templates or 0, users=users or 0, copies=copies or 0)

    except Exception as e:
        logger.error(f"Error computing stats: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error fetching stats",
        ) from e
