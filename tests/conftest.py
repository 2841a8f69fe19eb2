"""Shared fixtures: a temporary SQLite database behind the FastAPI app."""

import asyncio
import os
import tempfile
import uuid
from collections.abc import AsyncGenerator

import pytest

# Keep log files out of the working tree before the app configures logging
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="canned-responses-logs-"))

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import NullPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

from app.api.deps import get_component_factory, get_db  # noqa: E402
from app.core.config import Settings  # noqa: E402
from app.core.factory import ComponentFactory  # noqa: E402
from app.db.models import Profile, UserRole  # noqa: E402
from app.db.session import DEFAULT_ADMIN_ID, seed_defaults  # noqa: E402
from app.main import app  # noqa: E402

EDITOR_ID = uuid.UUID("11111111-1111-4111-8111-111111111111")
OTHER_EDITOR_ID = uuid.UUID("22222222-2222-4222-8222-222222222222")
VIEWER_ID = uuid.UUID("33333333-3333-4333-8333-333333333333")


async def _prepare_database(engine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        await seed_defaults(session)
        session.add_all(
            [
                Profile(id=EDITOR_ID, email="editor@example.com", role=UserRole.EDITOR),
                Profile(id=OTHER_EDITOR_ID, email="other@example.com", role=UserRole.EDITOR),
                Profile(id=VIEWER_ID, email="viewer@example.com", role=UserRole.VIEWER),
            ]
        )
        await session.commit()


@pytest.fixture
def session_maker(tmp_path):
    """Session maker bound to a fresh file database."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    asyncio.run(_prepare_database(engine))

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    asyncio.run(engine.dispose())


@pytest.fixture
def factory():
    return ComponentFactory(Settings(deepl_api_key="test-key"))


@pytest.fixture
def client(session_maker, factory):
    """TestClient with the database and factory dependencies overridden."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_component_factory] = lambda: factory

    yield TestClient(app)

    app.dependency_overrides.clear()


def auth(user_id: uuid.UUID) -> dict[str, str]:
    return {"X-User-ID": str(user_id)}


@pytest.fixture
def admin_headers():
    return auth(DEFAULT_ADMIN_ID)


@pytest.fixture
def editor_headers():
    return auth(EDITOR_ID)


@pytest.fixture
def other_editor_headers():
    return auth(OTHER_EDITOR_ID)


@pytest.fixture
def viewer_headers():
    return auth(VIEWER_ID)


@pytest.fixture
def create_template(client, editor_headers):
    """Create a template through the API and return its JSON."""

    def _create(headers=None, **overrides):
        payload = {
            "title": "Refund confirmation",
            "localized_content": {"es": "Hola {nombre}, tu reembolso del pedido {pedido} está en camino."},
            "tags": ["Refund"],
            "shortcut": "/refund",
        }
        payload.update(overrides)
        response = client.post("/templates", json=payload, headers=headers or editor_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def ids():
    """Profile ids seeded in the test database."""
    return {
        "admin": DEFAULT_ADMIN_ID,
        "editor": EDITOR_ID,
        "other_editor": OTHER_EDITOR_ID,
        "viewer": VIEWER_ID,
    }
