"""FastAPI routers and dependencies."""

from app.api.audit import router as audit_router
from app.api.categories import router as categories_router
from app.api.deps import get_current_user, get_db, require_admin, require_editor
from app.api.imports import router as imports_router
from app.api.preferences import router as preferences_router
from app.api.templates import router as templates_router
from app.api.translate import router as translate_router
from app.api.users import router as users_router

__all__ = [
    "audit_router",
    "categories_router",
    "get_current_user",
    "get_db",
    "imports_router",
    "preferences_router",
    "require_admin",
    "require_editor",
    "templates_router",
    "translate_router",
    "users_router",
]
