"""User management API routes.

Profiles are provisioned by admins; authentication itself happens
upstream and reaches the API as the X-User-ID header.
"""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_db, require_admin
from app.api.schemas import ProfileCreate, ProfileListResponse, ProfileResponse, RoleUpdate
from app.db.models import AuditAction, Profile
from app.services.audit import record_audit

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=ProfileResponse)
async def get_me(current_user: Profile = Depends(get_current_user)) -> ProfileResponse:
    """Return the calling profile."""
    return ProfileResponse.model_validate(current_user)


@router.get("", response_model=ProfileListResponse)
async def list_users(
    current_user: Profile = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> ProfileListResponse:
    """List all profiles, newest first."""
    try:
        result = await session.execute(select(Profile).order_by(Profile.created_at.desc()))
        users = result.scalars().all()

        logger.info(f"Found {len(users)} users")

        return ProfileListResponse(
            users=[ProfileResponse.model_validate(u) for u in users],
            total=len(users),
        )

    except Exception as e:
        logger.error(f"Error listing users: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error fetching users",
        ) from e


@router.post("", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: ProfileCreate,
    current_user: Profile = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> ProfileResponse:
    """Provision a profile.

    Args:
        user_data: Profile creation data.
        current_user: The calling admin.
        session: Database session.

    Returns:
        The created profile.

    Raises:
        HTTPException: 409 if the email is already registered.
    """
    try:
        email = user_data.email.lower()
        logger.info(f"Creating user: {email}")

        existing = await session.execute(select(Profile).where(Profile.email == email))
        if existing.scalar_one_or_none():
            logger.warning(f"User with email '{email}' already exists")
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"User with email '{email}' already exists",
            )

        profile = Profile(
            email=email,
            full_name=user_data.full_name,
            avatar_url=user_data.avatar_url,
            role=user_data.role,
        )
        session.add(profile)
        await session.commit()
        await session.refresh(profile)

        logger.info(f"Created user: {profile.id}")
        return ProfileResponse.model_validate(profile)

    except HTTPException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Database error creating user: {e}", exc_info=True)
        await session.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create user",
        ) from e


@router.patch("/{user_id}/role", response_model=ProfileResponse)
async def change_role(
    user_id: uuid.UUID,
    role_data: RoleUpdate,
    current_user: Profile = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> ProfileResponse:
    """Change another profile's role.

    Args:
        user_id: The profile to change.
        role_data: The new role.
        current_user: The calling admin.
        session: Database session.

    Returns:
        The updated profile.

    Raises:
        HTTPException: 400 when admins target themselves, 404 if the
            profile does not exist.
    """
    try:
        if user_id == current_user.id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="You cannot change your own role",
            )

        profile = await session.get(Profile, user_id)
        if profile is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"User with id '{user_id}' not found",
            )

        previous = profile.role
        profile.role = role_data.role
        record_audit(
            session,
            current_user,
            AuditAction.ROLE_CHANGE,
            entity_type="user",
            entity_id=str(profile.id),
            entity_title=f"{profile.email}: {previous.value} -> {role_data.role.value}",
        )
        await session.commit()
        await session.refresh(profile)

        logger.info(f"Changed role of {profile.id} from {previous.value} to {profile.role.value}")
        return ProfileResponse.model_validate(profile)

    except HTTPException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Database error changing role: {e}", exc_info=True)
        await session.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to change role",
        ) from e
