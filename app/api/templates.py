"""Template management API routes.

Handles the template library: listing with filters, CRUD with role
checks, live variable preview and copy-time variable filling.
"""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import (
    get_component_factory,
    get_current_user,
    get_db,
    require_admin,
    require_editor,
)
from app.api.schemas import (
    CategoryResponse,
    CopyTemplateRequest,
    CopyTemplateResponse,
    PlaceholderTokenResponse,
    TemplateCreate,
    TemplateListResponse,
    TemplateResponse,
    TemplateUpdate,
    VariablePreviewRequest,
    VariablePreviewResponse,
)
from app.core.factory import ComponentFactory
from app.db.models import (
    AuditAction,
    Category,
    Profile,
    Template,
    TemplateLanguage,
    UserPreference,
    UserRole,
    utcnow,
)
from app.services.audit import record_audit
from app.services.catalog import (
    collect_tags,
    exclude_hidden,
    filter_templates,
    normalize_shortcut,
    normalize_tags,
    order_by_pins,
    replace_main_content,
    resolve_main_content,
    set_template_content,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/templates", tags=["templates"])


# =============================================================================
# Helper Functions
# =============================================================================


async def _get_template_or_404(session: AsyncSession, template_id: uuid.UUID) -> Template:
    """Load an active template or raise 404."""
    template = await session.get(Template, template_id)
    if template is None or not template.is_active:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Template with id '{template_id}' not found",
        )
    return template


async def _ensure_category_exists(session: AsyncSession, category_id: uuid.UUID | None) -> None:
    """Raise 404 when a category id does not exist."""
    if category_id is None:
        return
    if await session.get(Category, category_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Category with id '{category_id}' not found",
        )


async def _load_categories(session: AsyncSession) -> dict[uuid.UUID, Category]:
    result = await session.execute(select(Category))
    return {category.id: category for category in result.scalars().all()}


def _to_response(
    template: Template,
    categories: dict[uuid.UUID, Category] | None = None,
    pinned_ids: set[str] | None = None,
) -> TemplateResponse:
    response = TemplateResponse.model_validate(template)
    if categories and template.category_id in categories:
        response.category = CategoryResponse.model_validate(categories[template.category_id])
    response.is_pinned = str(template.id) in (pinned_ids or set())
    return response


def _resolve_content(content: str | None, localized_content: dict[str, str]) -> str:
    """Canonical content: localized first, explicit content as fallback."""
    main_content = resolve_main_content(localized_content)
    if main_content:
        return main_content
    return content or ""


# =============================================================================
# Endpoints
# =============================================================================


@router.get("", response_model=TemplateListResponse)
async def list_templates(
    search: str | None = Query(default=None, description="Matches title, content, shortcut and tags"),
    language: TemplateLanguage | None = None,
    category_id: uuid.UUID | None = None,
    tags: list[str] = Query(default=[]),
    include_hidden: bool = False,
    current_user: Profile = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> TemplateListResponse:
    """List active templates, most recently updated first.

    Pinned templates come first; templates hidden by the caller are
    excluded unless include_hidden is set.

    Args:
        search: Free-text filter.
        language: Language filter.
        category_id: Category filter.
        tags: Every tag must be present.
        include_hidden: Keep templates the caller has hidden.
        current_user: The calling profile.
        session: Database session.

    Returns:
        The matching templates.
    """
    try:
        logger.info(
            f"Listing templates: user={current_user.id}, search={search!r}, "
            f"language={language}, category={category_id}, tags={tags}"
        )

        query = (
            select(Template)
            .where(Template.is_active.is_(True))
            .order_by(Template.updated_at.desc())
        )
        result = await session.execute(query)
        templates = list(result.scalars().all())

        preference = await session.get(UserPreference, current_user.id)
        pinned_ids = set(preference.pinned_template_ids) if preference else set()
        hidden_ids = set(preference.hidden_template_ids) if preference else set()

        templates = filter_templates(
            templates,
            search=search,
            language=language,
            category_id=category_id,
            tags=normalize_tags(tags),
        )
        if not include_hidden:
            templates = exclude_hidden(templates, hidden_ids)
        templates = order_by_pins(templates, pinned_ids)

        categories = await _load_categories(session)

        logger.info(f"Found {len(templates)} templates")

        return TemplateListResponse(
            templates=[_to_response(t, categories, pinned_ids) for t in templates],
            total=len(templates),
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error listing templates: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error fetching templates",
        ) from e


@router.get("/tags", response_model=list[str])
async def list_tags(
    current_user: Profile = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> list[str]:
    """Return the sorted distinct tags of active templates."""
    try:
        result = await session.execute(select(Template).where(Template.is_active.is_(True)))
        return collect_tags(result.scalars().all())
    except Exception as e:
        logger.error(f"Error listing tags: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error fetching tags",
        ) from e


@router.post("/variables", response_model=VariablePreviewResponse)
async def preview_variables(
    request: VariablePreviewRequest,
    current_user: Profile = Depends(get_current_user),
    factory: ComponentFactory = Depends(get_component_factory),
) -> VariablePreviewResponse:
    """Detect variables in draft content and render a filled preview.

    Args:
        request: Draft content and optional values.
        current_user: The calling profile.
        factory: Component factory.

    Returns:
        Variables, token spans, filled preview and missing names.
    """
    engine = factory.get_placeholder_engine()
    variables = engine.extract_variables(request.content)

    return VariablePreviewResponse(
        variables=variables,
        tokens=[
            PlaceholderTokenResponse(raw=t.raw, name=t.name, start=t.start, end=t.end)
            for t in engine.find_tokens(request.content)
        ],
        preview=engine.fill_variables(request.content, request.values),
        missing=engine.missing_variables(request.content, request.values),
    )


@router.get("/shortcut/{shortcut:path}", response_model=TemplateResponse)
async def get_template_by_shortcut(
    shortcut: str,
    current_user: Profile = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> TemplateResponse:
    """Look up an active template by its shortcut (e.g. '/refund').

    The leading slash may be omitted.
    """
    try:
        wanted = shortcut.strip()
        candidates = {wanted, f"/{wanted.lstrip('/')}"}

        query = (
            select(Template)
            .where(Template.is_active.is_(True), Template.shortcut.in_(candidates))
            .order_by(Template.updated_at.desc())
            .limit(1)
        )
        result = await session.execute(query)
        template = result.scalar_one_or_none()

        if template is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"No template with shortcut '{shortcut}'",
            )

        return _to_response(template, await _load_categories(session))

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error looking up shortcut {shortcut}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error fetching template",
        ) from e


@router.get("/{template_id}", response_model=TemplateResponse)
async def get_template(
    template_id: uuid.UUID,
    current_user: Profile = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
) -> TemplateResponse:
    """Get one active template with its category."""
    try:
        template = await _get_template_or_404(session, template_id)
        preference = await session.get(UserPreference, current_user.id)
        pinned_ids = set(preference.pinned_template_ids) if preference else set()
        return _to_response(template, await _load_categories(session), pinned_ids)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching template {template_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error fetching template",
        ) from e


@router.post("", response_model=TemplateResponse, status_code=status.HTTP_201_CREATED)
async def create_template(
    template_data: TemplateCreate,
    current_user: Profile = Depends(require_editor),
    session: AsyncSession = Depends(get_db),
) -> TemplateResponse:
    """Create a template.

    The canonical content is the first non-empty localized body
    (es, en, fr, de, it), falling back to `content`. Variables are
    derived from it.

    Args:
        template_data: Template creation data.
        current_user: The calling admin or editor.
        session: Database session.

    Returns:
        The created template.

    Raises:
        HTTPException: If content is empty, the category is unknown or
            the insert fails.
    """
    try:
        title = template_data.title.strip()
        content = _resolve_content(template_data.content, template_data.localized_content)

        if not title:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="Title is required",
            )
        if not content.strip():
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="At least one language content is required",
            )

        await _ensure_category_exists(session, template_data.category_id)

        logger.info(f"Creating template '{title}' for user {current_user.id}")

        try:
            template = Template(
                title=title,
                content="",
                language=template_data.language,
                category_id=template_data.category_id,
                tags=normalize_tags(template_data.tags),
                shortcut=normalize_shortcut(template_data.shortcut),
                created_by=current_user.id,
            )
            set_template_content(template, content, template_data.localized_content)

            session.add(template)
            record_audit(
                session,
                current_user,
                AuditAction.CREATE,
                entity_type="template",
                entity_id=str(template.id),
                entity_title=template.title,
            )
            await session.commit()
            await session.refresh(template)

            logger.info(f"Created template: {template.id} with variables {template.variables}")

            return _to_response(template, await _load_categories(session))

        except SQLAlchemyError as e:
            logger.error(f"Database error creating template: {e}", exc_info=True)
            await session.rollback()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to create template",
            ) from e

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error in create_template: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred",
        ) from e


@router.patch("/{template_id}", response_model=TemplateResponse)
async def update_template(
    template_id: uuid.UUID,
    template_data: TemplateUpdate,
    current_user: Profile = Depends(require_editor),
    session: AsyncSession = Depends(get_db),
) -> TemplateResponse:
    """Update a template.

    Editors may only change templates they created. Any content change
    re-derives the variables.

    Args:
        template_id: The template to update.
        template_data: Fields to change.
        current_user: The calling admin or editor.
        session: Database session.

    Returns:
        The updated template.
    """
    try:
        template = await _get_template_or_404(session, template_id)

        if current_user.role == UserRole.EDITOR and template.created_by != current_user.id:
            logger.warning(f"Editor {current_user.id} tried to edit template {template_id}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Editors can only edit their own templates",
            )

        changes = template_data.model_dump(exclude_unset=True)

        if "title" in changes:
            title = (template_data.title or "").strip()
            if not title:
                raise HTTPException(
                    status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                    detail="Title is required",
                )
            template.title = title

        if "content" in changes or "localized_content" in changes:
            if template_data.localized_content is not None:
                localized = template_data.localized_content
            elif "content" in changes:
                if not (template_data.content or "").strip():
                    raise HTTPException(
                        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                        detail="Content cannot be empty",
                    )
                # A bare content edit only replaces the body it was derived from
                localized = replace_main_content(template, template_data.content)
            else:
                localized = dict(template.localized_content)
            content = _resolve_content(template_data.content, localized)
            if not content.strip():
                raise HTTPException(
                    status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                    detail="At least one language content is required",
                )
            set_template_content(template, content, localized)

        if "language" in changes and template_data.language is not None:
            template.language = template_data.language
        if "category_id" in changes:
            await _ensure_category_exists(session, template_data.category_id)
            template.category_id = template_data.category_id
        if "tags" in changes:
            template.tags = normalize_tags(template_data.tags or [])
        if "shortcut" in changes:
            template.shortcut = normalize_shortcut(template_data.shortcut)

        template.updated_at = utcnow()

        try:
            record_audit(
                session,
                current_user,
                AuditAction.UPDATE,
                entity_type="template",
                entity_id=str(template.id),
                entity_title=template.title,
            )
            await session.commit()
            await session.refresh(template)

            logger.info(f"Updated template: {template.id}")

            return _to_response(template, await _load_categories(session))

        except SQLAlchemyError as e:
            logger.error(f"Database error updating template: {e}", exc_info=True)
            await session.rollback()
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to update template",
            ) from e

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error in update_template: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred",
        ) from e


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_template(
    template_id: uuid.UUID,
    current_user: Profile = Depends(require_admin),
    session: AsyncSession = Depends(get_db),
) -> None:
    """Soft-delete a template by marking it inactive."""
    try:
        template = await _get_template_or_404(session, template_id)

        template.is_active = False
        template.updated_at = utcnow()
        record_audit(
            session,
            current_user,
            AuditAction.DELETE,
            entity_type="template",
            entity_id=str(template.id),
            entity_title=template.title,
        )
        await session.commit()

        logger.info(f"Deleted template: {template_id}")

    except HTTPException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Database error deleting template: {e}", exc_info=True)
        await session.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete template",
        ) from e


@router.post("/{template_id}/copy", response_model=CopyTemplateResponse)
async def copy_template(
    template_id: uuid.UUID,
    request: CopyTemplateRequest,
    current_user: Profile = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
    factory: ComponentFactory = Depends(get_component_factory),
) -> CopyTemplateResponse:
    """Fill a template's variables and count the copy.

    Variables without a value keep their `{name}` token in the output.

    Args:
        template_id: The template being copied.
        request: Values for the template variables.
        current_user: The calling profile.
        session: Database session.
        factory: Component factory.

    Returns:
        The filled text and the variables left unfilled.
    """
    try:
        template = await _get_template_or_404(session, template_id)
        engine = factory.get_placeholder_engine()

        filled = engine.fill_variables(template.content, request.values)
        missing = engine.missing_variables(template.content, request.values)

        template.use_count = (template.use_count or 0) + 1
        record_audit(
            session,
            current_user,
            AuditAction.COPY,
            entity_type="template",
            entity_id=str(template.id),
            entity_title=template.title,
        )
        await session.commit()

        logger.info(f"Copied template {template_id}: use_count={template.use_count}")

        return CopyTemplateResponse(
            template_id=template.id,
            content=filled,
            missing_variables=missing,
            use_count=template.use_count,
        )

    except HTTPException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Database error copying template: {e}", exc_info=True)
        await session.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to record template copy",
        ) from e
