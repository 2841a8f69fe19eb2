"""Celery worker entry point.

Background worker for bulk note imports.
Uses an event loop to run async tasks within Celery workers.
"""

import asyncio
import logging
import uuid

from celery import Celery, shared_task
from celery.signals import worker_ready
from sqlalchemy import text

from app.core.config import Settings, get_settings
from app.db.models import Profile, TemplateLanguage
from app.db.session import get_async_session
from app.interfaces.parser import ParsedNote
from app.services.template_import import import_notes

logger = logging.getLogger(__name__)

# Initialize Celery app
settings: Settings = get_settings()

celery_app = Celery(
    "canned_responses_worker",
    broker=settings.celery_broker_url,
    backend=settings.celery_result_backend,
    include=["app.worker"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=600,
    task_soft_time_limit=540,
    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=50,
)


@worker_ready.connect
def on_worker_ready(**kwargs):
    """Log when worker is ready."""
    logger.info("Celery worker is ready and listening for tasks")


def run_async(coro):
    """Run an async coroutine in a new event loop.

    Celery workers don't have a running event loop, so we need
    to create one for async operations.

    Args:
        coro: The async coroutine to run.

    Returns:
        The result of the coroutine.
    """
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def notes_from_payload(raw_notes: list[dict]) -> list[ParsedNote]:
    """Rebuild ParsedNote values from their JSON task payload."""
    notes = []
    for raw in raw_notes:
        language = str(raw.get("detected_language") or TemplateLanguage.ES.value)
        notes.append(
            ParsedNote(
                title=str(raw.get("title", "")),
                content=str(raw.get("content", "")),
                tags=[str(tag) for tag in raw.get("tags") or []],
                detected_language=language,
            )
        )
    return notes


@shared_task(bind=True, name="app.worker.import_notes")
def import_notes_task(self, payload: dict) -> dict:
    """Import selected notes as templates.

    Args:
        self: Celery task instance (for bind=True).
        payload: Dict with `notes`, optional `category_id` and `actor_id`.

    Returns:
        Dict with the import counts.
    """
    try:
        logger.info(f"Starting note import task {self.request.id}")
        return run_async(_import_notes_async(payload))
    except Exception as e:
        logger.exception(f"Fatal error in import_notes_task: {e}")
        return {
            "status": "failed",
            "error": f"Fatal error: {str(e)}",
        }


async def _import_notes_async(payload: dict) -> dict:
    """Async implementation of the note import.

    Args:
        payload: The task payload.

    Returns:
        Dict with the import counts.
    """
    settings = get_settings()
    notes = notes_from_payload(payload.get("notes") or [])
    category_id = uuid.UUID(payload["category_id"]) if payload.get("category_id") else None

    async for session in get_async_session(settings):
        actor = None
        if payload.get("actor_id"):
            actor = await session.get(Profile, uuid.UUID(payload["actor_id"]))
            if actor is None:
                logger.warning(f"Import actor {payload['actor_id']} not found; importing without owner")

        result = await import_notes(
            session,
            notes,
            category_id=category_id,
            actor=actor,
            batch_size=settings.import_batch_size,
        )

        return {
            "status": "completed",
            "imported": result.imported,
            "skipped": result.skipped,
        }

    return {"status": "failed", "error": "No database session available"}


@shared_task(name="app.worker.health_check")
def health_check_task() -> dict:
    """Health check task for monitoring worker status.

    Returns:
        Dict with worker health status.
    """
    try:
        logger.debug("Running health check")
        return run_async(_health_check_async())
    except Exception as e:
        logger.exception(f"Health check failed: {e}")
        return {
            "status": "unhealthy",
            "error": str(e),
        }


async def _health_check_async() -> dict:
    """Async health check implementation.

    Returns:
        Dict with worker health status.
    """
    settings = get_settings()

    try:
        async for session in get_async_session(settings):
            await session.execute(text("SELECT 1"))
        logger.debug("Database health check passed")
    except Exception as e:
        logger.error(f"Database health check failed: {e}", exc_info=True)
        return {
            "status": "unhealthy",
            "database": "disconnected",
            "error": str(e),
        }

    return {
        "status": "healthy",
        "database": "connected",
    }
