"""Database models using SQLModel.

Defines the core data models for the canned response library:
- Profile: Team members and their editing role
- Category: Grouping for templates
- Template: Reusable message with placeholders
- AuditLog: Who did what to which template
- UserPreference: Per-user pins, hidden items and tag colors
"""

import datetime
import enum
import uuid

from pydantic import EmailStr
from sqlalchemy import JSON, Column, DateTime, ForeignKey, Uuid, func
from sqlmodel import Field, SQLModel


class UserRole(str, enum.Enum):
    """Editing permissions of a profile.

    admin: full access, including deletion and user management.
    editor: creates templates and edits their own.
    viewer: reads and copies templates.
    """

    ADMIN = "admin"
    EDITOR = "editor"
    VIEWER = "viewer"


class TemplateLanguage(str, enum.Enum):
    """Primary language of a template.

    ES and EN are the core pair; FR, DE and IT come from the
    extended detection profile.
    """

    ES = "ES"
    EN = "EN"
    FR = "FR"
    DE = "DE"
    IT = "IT"


class TranslationLanguage(str, enum.Enum):
    """Target languages offered by the translation proxy."""

    ES = "ES"
    EN = "EN"
    FR = "FR"
    DE = "DE"
    PT = "PT"
    IT = "IT"


class AuditAction(str, enum.Enum):
    """Actions recorded in the audit log."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    COPY = "COPY"
    IMPORT = "IMPORT"
    TRANSLATE = "TRANSLATE"
    ROLE_CHANGE = "ROLE_CHANGE"


# Localized bodies are tried in this order to pick the canonical content.
CONTENT_LANGUAGES = ("es", "en", "fr", "de", "it")


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def _id_column() -> Column:
    return Column(Uuid, primary_key=True)


def _created_at_column() -> Column:
    return Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


def _updated_at_column() -> Column:
    # Set explicitly by writers; no server-side onupdate to refetch
    return Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


# =============================================================================
# Shared Models (for API responses, not database tables)
# =============================================================================


class ProfileBase(SQLModel):
    """Base profile fields."""

    email: EmailStr = Field(unique=True, index=True, max_length=255)
    full_name: str | None = Field(default=None, max_length=255)
    avatar_url: str | None = Field(default=None, max_length=1024)
    role: UserRole = Field(default=UserRole.VIEWER)


class CategoryBase(SQLModel):
    """Base category fields."""

    name: str = Field(min_length=1, max_length=100, unique=True)
    color: str = Field(default="#6366f1", max_length=20)
    icon: str = Field(default="folder", max_length=50)


# =============================================================================
# Database Models
# =============================================================================


class Profile(ProfileBase, table=True):
    """Profile of an authenticated team member.

    Authentication happens upstream; the profile carries the role
    used for authorization.
    """

    __tablename__ = "profiles"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, sa_column=_id_column())
    created_at: datetime.datetime = Field(
        default_factory=utcnow,
        sa_column=_created_at_column(),
    )


class Category(CategoryBase, table=True):
    """Category grouping related templates."""

    __tablename__ = "categories"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, sa_column=_id_column())


class Template(SQLModel, table=True):
    """Canned response template.

    `variables` is derived from `content` by the placeholder engine on
    every write and must never be set independently.
    """

    __tablename__ = "templates"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, sa_column=_id_column())
    title: str = Field(max_length=255)
    content: str
    localized_content: dict[str, str] = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False),
    )
    language: TemplateLanguage = Field(default=TemplateLanguage.ES)
    category_id: uuid.UUID | None = Field(
        default=None,
        sa_column=Column(
            Uuid,
            ForeignKey("categories.id", ondelete="SET NULL"),
            nullable=True,
            index=True,
        ),
    )
    tags: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    shortcut: str | None = Field(default=None, max_length=100, index=True)
    variables: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    is_active: bool = Field(default=True, index=True)
    use_count: int = Field(default=0, ge=0)
    created_by: uuid.UUID | None = Field(
        default=None,
        sa_column=Column(
            Uuid,
            ForeignKey("profiles.id", ondelete="SET NULL"),
            nullable=True,
            index=True,
        ),
    )
    created_at: datetime.datetime = Field(
        default_factory=utcnow,
        sa_column=_created_at_column(),
    )
    updated_at: datetime.datetime = Field(
        default_factory=utcnow,
        sa_column=_updated_at_column(),
    )


class AuditLog(SQLModel, table=True):
    """Audit trail entry.

    User email and entity title are denormalized so entries stay
    readable after the profile or template changes.
    """

    __tablename__ = "audit_log"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, sa_column=_id_column())
    user_id: uuid.UUID | None = Field(
        default=None,
        sa_column=Column(Uuid, nullable=True, index=True),
    )
    user_email: str | None = Field(default=None, max_length=255)
    action: AuditAction = Field(index=True)
    entity_type: str = Field(max_length=50)
    entity_id: str = Field(max_length=64)
    entity_title: str | None = Field(default=None, max_length=512)
    created_at: datetime.datetime = Field(
        default_factory=utcnow,
        sa_column=_created_at_column(),
    )


class UserPreference(SQLModel, table=True):
    """Per-user client preferences, written through on every change."""

    __tablename__ = "user_preferences"

    user_id: uuid.UUID = Field(
        sa_column=Column(
            Uuid,
            ForeignKey("profiles.id", ondelete="CASCADE"),
            primary_key=True,
        )
    )
    pinned_template_ids: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )
    hidden_template_ids: list[str] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )
    tag_colors: dict[str, str] = Field(
        default_factory=dict,
        sa_column=Column(JSON, nullable=False),
    )
    dark_mode: bool = Field(default=False)
    updated_at: datetime.datetime = Field(
        default_factory=utcnow,
        sa_column=_updated_at_column(),
    )
