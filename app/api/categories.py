"""Category API routes."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, get_db, require_admin
from app.api.schemas import CategoryCreate, CategoryResponse
from app.db.models import Category, Profile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=list[CategoryResponse])
async def list_categories(
    current_user: Profile = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> list[CategoryResponse]:
    """List categories ordered by name."""
    try:
        result = await session.execute(select(Category).order_by(Category.name))
        return [CategoryResponse.model_validate(c) for c in result.scalars().all()]
    except Exception as e:
        logger.error(f"Error listing categories: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error fetching categories",
        ) from e


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    category_data: CategoryCreate,
    current_user: Profile = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> CategoryResponse:
    """Create a category.

    Args:
        category_data: Category creation data.
        current_user: The calling admin.
        session: Database session.

    Returns:
        The created category.

    Raises:
        HTTPException: 409 if the name is already taken.
    """
    try:
        name = category_data.name.strip()
        logger.info(f"Creating category: {name}")

        existing = await session.execute(select(Category).where(Category.name == name))
        if existing.scalar_one_or_none():
            logger.warning(f"Category '{name}' already exists")
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Category '{name}' already exists",
            )

        category = Category(name=name, color=category_data.color, icon=category_data.icon)
        session.add(category)
        await session.commit()
        await session.refresh(category)

        logger.info(f"Created category: {category.id}")
        return CategoryResponse.model_validate(category)

    except HTTPException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Database error creating category: {e}", exc_info=True)
        await session.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create category",
        ) from e
