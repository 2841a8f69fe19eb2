"""FastAPI dependencies for dependency injection.

Provides reusable dependencies for routes including:
- Database sessions
- Caller identity (profile resolved from the X-User-ID header)
- Role checks
- Strategy components from the factory
"""

import logging
import uuid
from collections.abc import AsyncGenerator, Callable, Coroutine
from typing import Any

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings, get_settings
from app.core.factory import ComponentFactory, get_factory
from app.db.models import Profile, UserRole
from app.db.session import get_async_session

logger = logging.getLogger(__name__)


async def get_db(
    settings: Settings = Depends(get_settings),
) -> AsyncGenerator[AsyncSession, None]:
    """Dependency for getting async database sessions.

    Args:
        settings: Application settings.

    Yields:
        An async database session.
    """
    try:
        async for session in get_async_session(settings):
            yield session
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error getting database session: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Database connection error",
        ) from e


def get_component_factory() -> ComponentFactory:
    """Dependency returning the shared component factory."""
    return get_factory()


async def get_current_user(
    x_user_id: str | None = Header(default=None, description="Authenticated profile ID"),
    session: AsyncSession = Depends(get_db),
) -> Profile:
    """Dependency for resolving the calling profile.

    Authentication is done upstream; the gateway forwards the
    authenticated profile ID in the X-User-ID header.

    Args:
        x_user_id: The profile ID from X-User-ID header.
        session: Database session.

    Returns:
        The calling profile.

    Raises:
        HTTPException: If the header is missing, malformed or unknown.
    """
    if not x_user_id:
        logger.warning("X-User-ID header is missing")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    try:
        user_id = uuid.UUID(x_user_id)
    except ValueError as e:
        logger.warning(f"Invalid user ID format: {x_user_id}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid user ID format",
        ) from e

    try:
        profile = await session.get(Profile, user_id)
    except Exception as e:
        logger.error(f"Unexpected error in get_current_user: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error processing authentication",
        ) from e

    if profile is None:
        logger.warning(f"Unknown profile: {user_id}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unknown user",
        )

    return profile


def require_roles(*roles: UserRole) -> Callable[..., Coroutine[Any, Any, Profile]]:
    """Build a dependency that only lets the given roles through.

    Args:
        *roles: Roles allowed to call the route.

    Returns:
        A dependency returning the calling profile.
    """

    async def _require_roles(current_user: Profile = Depends(get_current_user)) -> Profile:
        if current_user.role not in roles:
            logger.warning(
                f"Profile {current_user.id} with role {current_user.role.value} "
                f"denied; requires {[role.value for role in roles]}"
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return current_user

    return _require_roles


require_admin = require_roles(UserRole.ADMIN)
require_editor = require_roles(UserRole.ADMIN, UserRole.EDITOR)
