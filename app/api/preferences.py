"""Per-user preference routes.

Pins, hidden templates, tag colors and dark mode are written through
on every change.
"""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_db
from app.api.schemas import DarkModeUpdate, PreferenceResponse, TagColorUpdate
from app.db.models import Profile, UserPreference, utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/preferences", tags=["preferences"])


async def _get_or_create(session: AsyncSession, user_id: uuid.UUID) -> UserPreference:
    preference = await session.get(UserPreference, user_id)
    if preference is None:
        preference = UserPreference(user_id=user_id)
        session.add(preference)
    return preference


def _toggle(ids: list[str], template_id: uuid.UUID) -> list[str]:
    """Return a new list with the id added or removed."""
    key = str(template_id)
    if key in ids:
        return [i for i in ids if i != key]
    return [*ids, key]


async def _save(session: AsyncSession, preference: UserPreference) -> PreferenceResponse:
    try:
        preference.updated_at = utcnow()
        await session.commit()
        await session.refresh(preference)
        return PreferenceResponse.model_validate(preference)
    except SQLAlchemyError as e:
        logger.error(f"Database error saving preferences: {e}", exc_info=True)
        await session.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save preferences",
        ) from e


@router.get("", response_model=PreferenceResponse)
async def get_preferences(
    current_user: Profile = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> PreferenceResponse:
    """Return the caller's preferences, or defaults when none are stored."""
    preference = await session.get(UserPreference, current_user.id)
    if preference is None:
        return PreferenceResponse(
            pinned_template_ids=[],
            hidden_template_ids=[],
            tag_colors={},
            dark_mode=False,
        )
    return PreferenceResponse.model_validate(preference)


@router.post("/pins/{template_id}", response_model=PreferenceResponse)
async def toggle_pin(
    template_id: uuid.UUID,
    current_user: Profile = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> PreferenceResponse:
    """Pin or unpin a template."""
    preference = await _get_or_create(session, current_user.id)
    preference.pinned_template_ids = _toggle(preference.pinned_template_ids, template_id)
    logger.info(f"User {current_user.id} toggled pin on {template_id}")
    return await _save(session, preference)


@router.post("/hidden/{template_id}", response_model=PreferenceResponse)
async def toggle_hidden(
    template_id: uuid.UUID,
    current_user: Profile = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> PreferenceResponse:
    """Hide or unhide a template for the caller."""
    preference = await _get_or_create(session, current_user.id)
    preference.hidden_template_ids = _toggle(preference.hidden_template_ids, template_id)
    logger.info(f"User {current_user.id} toggled hidden on {template_id}")
    return await _save(session, preference)


@router.put("/tag-colors/{tag}", response_model=PreferenceResponse)
async def set_tag_color(
    tag: str,
    update: TagColorUpdate,
    current_user: Profile = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> PreferenceResponse:
    """Set the display color of a tag."""
    preference = await _get_or_create(session, current_user.id)
    preference.tag_colors = {**preference.tag_colors, tag.strip().lower(): update.color}
    return await _save(session, preference)


@router.put("/dark-mode", response_model=PreferenceResponse)
async def set_dark_mode(
    update: DarkModeUpdate,
    current_user: Profile = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> PreferenceResponse:
    """Turn dark mode on or off."""
    preference = await _get_or_create(session, current_user.id)
    preference.dark_mode = update.dark_mode
    return await _save(session, preference)
