"""Unit tests for the Celery worker tasks."""

from unittest.mock import AsyncMock, MagicMock, patch

from app.worker import health_check_task, import_notes_task, notes_from_payload


def test_notes_from_payload():
    notes = notes_from_payload(
        [
            {"title": "A", "content": "Hi {name}", "tags": ["vip"], "detected_language": "EN"},
            {"title": "B", "content": "Hola"},
        ]
    )

    assert [(n.title, n.tags, n.detected_language) for n in notes] == [
        ("A", ["vip"], "EN"),
        ("B", [], "ES"),
    ]


def test_import_task_returns_counts():
    expected = {"status": "completed", "imported": 2, "skipped": 0}

    with patch("app.worker._import_notes_async", AsyncMock(return_value=expected)) as run:
        result = import_notes_task.apply(args=[{"notes": []}]).get()

    assert result == expected
    run.assert_awaited_once_with({"notes": []})


def test_import_task_reports_failure():
    with patch("app.worker._import_notes_async", AsyncMock(side_effect=RuntimeError("db down"))):
        result = import_notes_task.apply(args=[{"notes": []}]).get()

    assert result["status"] == "failed"
    assert "db down" in result["error"]


def test_health_check():
    session = MagicMock()
    session.execute = AsyncMock()

    async def fake_sessions(settings=None):
        yield session

    with patch("app.worker.get_async_session", fake_sessions):
        assert health_check_task.apply().get() == {"status": "healthy", "database": "connected"}
