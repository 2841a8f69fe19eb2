"""Translation proxy route.

Forwards text to the configured translator so the provider key never
reaches the browser.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_component_factory, get_current_user, get_db
from app.api.schemas import TranslateRequest, TranslateResponse, TranslationItem
from app.core.factory import ComponentFactory
from app.db.models import AuditAction, Profile, Template
from app.interfaces.translator import TranslationError
from app.services.audit import record_audit

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/translate", tags=["translation"])


@router.post("", response_model=TranslateResponse)
async def translate(
    request: TranslateRequest,
    current_user: Profile = Depends(get_current_user),
    session: AsyncSession = Depends(get_db),
    factory: ComponentFactory = Depends(get_component_factory),
) -> TranslateResponse:
    """Translate a text.

    When `template_id` is given the translation is recorded in the
    audit log against that template.

    Args:
        request: Text and target language.
        current_user: The calling profile.
        session: Database session.
        factory: Component factory.

    Returns:
        The translations in the provider's response shape.

    Raises:
        HTTPException: 502 if the translator fails.
    """
    translator = factory.get_translator()

    try:
        translated = await translator.translate(request.text, request.target_lang.value)
    except TranslationError as e:
        logger.error(f"Translation to {request.target_lang.value} failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Translation unavailable",
        ) from e

    if request.template_id is not None:
        try:
            template = await session.get(Template, request.template_id)
            record_audit(
                session,
                current_user,
                AuditAction.TRANSLATE,
                entity_type="template",
                entity_id=str(request.template_id),
                entity_title=(
                    f"{template.title} -> {request.target_lang.value}"
                    if template
                    else request.target_lang.value
                ),
            )
            await session.commit()
        except SQLAlchemyError as e:
            # The translation already succeeded; a lost audit entry is only logged
            logger.error(f"Failed to audit translation: {e}", exc_info=True)
            await session.rollback()

    return TranslateResponse(translations=[TranslationItem(text=translated)])
