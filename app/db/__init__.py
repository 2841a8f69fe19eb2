"""Database models and session management."""

from app.db.models import (
    AuditAction,
    AuditLog,
    Category,
    Profile,
    Template,
    TemplateLanguage,
    UserPreference,
    UserRole,
)
from app.db.session import (
    AsyncSession,
    create_all_tables,
    get_async_session,
    init_db,
)

__all__ = [
    # Models
    "AuditAction",
    "AuditLog",
    "Category",
    "Profile",
    "Template",
    "TemplateLanguage",
    "UserPreference",
    "UserRole",
    # Session
    "AsyncSession",
    "get_async_session",
    "create_all_tables",
    "init_db",
]
