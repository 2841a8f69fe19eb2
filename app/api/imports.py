"""Note import API routes.

Upload -> preview -> import. Previews are parsed in memory and never
stored; the import itself runs inline or on the Celery worker.
"""

import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_component_factory, get_db, require_editor
from app.api.schemas import (
    ImportPreviewResponse,
    ImportRequest,
    ImportResultResponse,
    ImportTaskResponse,
    ImportTaskStatusResponse,
    ParsedNoteResponse,
    SkippedFileResponse,
)
from app.core.config import Settings, get_settings
from app.core.factory import ComponentFactory
from app.db.models import Category, Profile
from app.interfaces.parser import NoteFile, ParsedNote
from app.services.template_import import import_notes
from app.worker import celery_app, import_notes_task

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/imports", tags=["imports"])


@router.post("/preview", response_model=ImportPreviewResponse)
async def preview_import(
    files: list[UploadFile] = File(..., description="Google Keep JSON exports"),
    current_user: Profile = Depends(require_editor),
    factory: ComponentFactory = Depends(get_component_factory),
) -> ImportPreviewResponse:
    """Parse uploaded Keep exports and return the importable notes.

    Args:
        files: Uploaded files; non-JSON files are reported as skipped.
        current_user: The calling admin or editor.
        factory: Component factory.

    Returns:
        Parsed notes, skipped files and counts.

    Raises:
        HTTPException: 415 if no uploaded file is a JSON export.
    """
    try:
        parser = factory.get_note_parser()

        if not any(parser.supports_file(f.filename or "") for f in files):
            logger.warning(f"No supported files among {len(files)} uploads")
            raise HTTPException(
                status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
                detail=f"Unsupported file type. Supported: {sorted(parser.supported_extensions)}",
            )

        note_files = []
        for upload in files:
            raw = await upload.read()
            note_files.append(
                NoteFile(
                    name=upload.filename or "",
                    content=raw.decode("utf-8", errors="replace"),
                )
            )

        result = parser.parse(note_files)

        logger.info(
            f"Import preview for user {current_user.id}: "
            f"{len(result.notes)} notes from {result.total_files} files"
        )

        return ImportPreviewResponse(
            notes=[
                ParsedNoteResponse(
                    title=note.title,
                    content=note.content,
                    tags=list(note.tags),
                    detected_language=note.detected_language,
                )
                for note in result.notes
            ],
            skipped=[
                SkippedFileResponse(name=s.name, reason=s.reason.value) for s in result.skipped
            ],
            total_files=result.total_files,
            found=len(result.notes),
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error previewing import: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error reading uploaded files",
        ) from e


@router.post(
    "",
    response_model=ImportResultResponse | ImportTaskResponse,
    status_code=status.HTTP_200_OK,
)
async def run_import(
    request: ImportRequest,
    current_user: Profile = Depends(require_editor),
    session: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> ImportResultResponse | ImportTaskResponse:
    """Import the selected notes as templates.

    With `background` set the import is queued on the worker and a task
    handle is returned instead of the counts.

    Args:
        request: Selected notes and import options.
        current_user: The calling admin or editor.
        session: Database session.
        settings: Application settings.

    Returns:
        Imported and skipped counts, or the queued task handle.
    """
    try:
        if request.category_id is not None and await session.get(Category, request.category_id) is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Category with id '{request.category_id}' not found",
            )

        if request.background:
            task = import_notes_task.delay(
                {
                    "notes": [note.model_dump(mode="json") for note in request.notes],
                    "category_id": str(request.category_id) if request.category_id else None,
                    "actor_id": str(current_user.id),
                }
            )
            logger.info(f"Queued import of {len(request.notes)} notes as task {task.id}")
            return ImportTaskResponse(task_id=task.id)

        notes = [
            ParsedNote(
                title=note.title,
                content=note.content,
                tags=list(note.tags),
                detected_language=note.detected_language.value,
            )
            for note in request.notes
        ]
        result = await import_notes(
            session,
            notes,
            category_id=request.category_id,
            actor=current_user,
            batch_size=settings.import_batch_size,
        )
        return ImportResultResponse(imported=result.imported, skipped=result.skipped)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error in run_import: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred",
        ) from e


@router.get("/tasks/{task_id}", response_model=ImportTaskStatusResponse)
async def get_import_task(
    task_id: str,
    current_user: Profile = Depends(require_editor),
) -> ImportTaskStatusResponse:
    """Report the state of a background import."""
    try:
        async_result = celery_app.AsyncResult(task_id)
        response = ImportTaskStatusResponse(task_id=task_id, status=async_result.status.lower())

        if async_result.successful():
            payload = async_result.result or {}
            if payload.get("status") == "completed":
                response.result = ImportResultResponse(
                    imported=payload.get("imported", 0),
                    skipped=payload.get("skipped", 0),
                )
            else:
                response.status = "failed"
                response.error = payload.get("error")
        elif async_result.failed():
            response.error = str(async_result.result)

        return response

    except Exception as e:
        logger.error(f"Error fetching import task {task_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Error fetching import status",
        ) from e
