"""API request and response schemas.

Pydantic v2 models for API serialization/deserialization.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.db.models import (
    AuditAction,
    CONTENT_LANGUAGES,
    TemplateLanguage,
    TranslationLanguage,
    UserRole,
)


# =============================================================================
# Common Schemas
# =============================================================================


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str
    error_code: str | None = None


# =============================================================================
# Category Schemas
# =============================================================================


class CategoryCreate(BaseModel):
    """Request schema for creating a category."""

    name: str = Field(min_length=1, max_length=100, description="Category name")
    color: str = Field(default="#6366f1", max_length=20)
    icon: str = Field(default="folder", max_length=50)


class CategoryResponse(BaseModel):
    """Response schema for a category."""

    id: uuid.UUID
    name: str
    color: str
    icon: str

    model_config = {"from_attributes": True}


# =============================================================================
# Template Schemas
# =============================================================================


class _TemplateContentMixin(BaseModel):
    """Validation shared by create and update payloads."""

    @field_validator("localized_content", check_fields=False)
    @classmethod
    def validate_languages(cls, v: dict[str, str] | None) -> dict[str, str] | None:
        """Accept only known content language codes."""
        if v is None:
            return v
        normalized = {code.lower(): text for code, text in v.items()}
        unknown = set(normalized) - set(CONTENT_LANGUAGES)
        if unknown:
            raise ValueError(
                f"Unknown content languages: {sorted(unknown)}. "
                f"Valid options: {', '.join(CONTENT_LANGUAGES)}"
            )
        return normalized


class TemplateCreate(_TemplateContentMixin):
    """Request schema for creating a template.

    Either `content` or at least one `localized_content` entry is required.
    """

    title: str = Field(min_length=1, max_length=255)
    content: str | None = Field(default=None, description="Body when no localized content is given")
    localized_content: dict[str, str] = Field(
        default_factory=dict,
        description="Bodies keyed by language code (es, en, fr, de, it)",
    )
    language: TemplateLanguage = TemplateLanguage.ES
    category_id: uuid.UUID | None = None
    tags: list[str] = Field(default_factory=list)
    shortcut: str | None = Field(default=None, max_length=100)

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Refund confirmation",
                "localized_content": {
                    "es": "Hola {nombre}, tu reembolso del pedido {pedido} está en camino.",
                    "en": "Hello {name}, the refund for order {order} is on its way.",
                },
                "language": "ES",
                "tags": ["refund"],
                "shortcut": "/refund",
            }
        }


class TemplateUpdate(_TemplateContentMixin):
    """Request schema for partially updating a template."""

    title: str | None = Field(default=None, min_length=1, max_length=255)
    content: str | None = None
    localized_content: dict[str, str] | None = None
    language: TemplateLanguage | None = None
    category_id: uuid.UUID | None = None
    tags: list[str] | None = None
    shortcut: str | None = Field(default=None, max_length=100)


class TemplateResponse(BaseModel):
    """Response schema for a template."""

    id: uuid.UUID
    title: str
    content: str
    localized_content: dict[str, str]
    language: TemplateLanguage
    category_id: uuid.UUID | None
    category: CategoryResponse | None = None
    tags: list[str]
    shortcut: str | None
    variables: list[str]
    is_active: bool
    use_count: int
    created_by: uuid.UUID | None
    created_at: datetime
    updated_at: datetime
    is_pinned: bool = False

    model_config = {"from_attributes": True}


class TemplateListResponse(BaseModel):
    """Response for listing templates."""

    templates: list[TemplateResponse]
    total: int


class VariablePreviewRequest(BaseModel):
    """Live preview request from the template editor."""

    content: str
    values: dict[str, str] = Field(default_factory=dict)


class PlaceholderTokenResponse(BaseModel):
    """One placeholder occurrence."""

    raw: str
    name: str
    start: int
    end: int


class VariablePreviewResponse(BaseModel):
    """Variables and filled preview for a piece of content."""

    variables: list[str]
    tokens: list[PlaceholderTokenResponse]
    preview: str
    missing: list[str]


class CopyTemplateRequest(BaseModel):
    """Values used to fill a template at copy time."""

    values: dict[str, str] = Field(default_factory=dict)


class CopyTemplateResponse(BaseModel):
    """Filled template text ready for the clipboard."""

    template_id: uuid.UUID
    content: str
    missing_variables: list[str]
    use_count: int


# =============================================================================
# Import Schemas
# =============================================================================


class ParsedNoteResponse(BaseModel):
    """A note ready for preview and selection."""

    title: str
    content: str
    tags: list[str]
    detected_language: str


class SkippedFileResponse(BaseModel):
    """A file that produced no note."""

    name: str
    reason: str


class ImportPreviewResponse(BaseModel):
    """Parser output shown before importing."""

    notes: list[ParsedNoteResponse]
    skipped: list[SkippedFileResponse]
    total_files: int
    found: int


class ImportNote(BaseModel):
    """A note selected for import, possibly edited in the preview."""

    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)
    tags: list[str] = Field(default_factory=list)
    detected_language: TemplateLanguage = TemplateLanguage.ES


class ImportRequest(BaseModel):
    """Request to import selected notes."""

    notes: list[ImportNote] = Field(min_length=1)
    category_id: uuid.UUID | None = None
    background: bool = Field(default=False, description="Queue the import on the worker")


class ImportResultResponse(BaseModel):
    """Result of a finished import."""

    imported: int
    skipped: int


class ImportTaskResponse(BaseModel):
    """Handle for a queued background import."""

    task_id: str
    status: str = "queued"


class ImportTaskStatusResponse(BaseModel):
    """State of a background import."""

    task_id: str
    status: str
    result: ImportResultResponse | None = None
    error: str | None = None


# =============================================================================
# Translation Schemas
# =============================================================================


class TranslateRequest(BaseModel):
    """Translation proxy request."""

    text: str = Field(min_length=1)
    target_lang: TranslationLanguage = Field(alias="targetLang")
    template_id: uuid.UUID | None = Field(default=None, alias="templateId")

    model_config = {"populate_by_name": True}


class TranslationItem(BaseModel):
    """A single translated text."""

    text: str


class TranslateResponse(BaseModel):
    """Translation proxy response, shaped like the provider's."""

    translations: list[TranslationItem]


# =============================================================================
# User Schemas
# =============================================================================


class ProfileCreate(BaseModel):
    """Request schema for provisioning a profile."""

    email: EmailStr = Field(description="User email address")
    full_name: str | None = Field(default=None, max_length=255)
    avatar_url: str | None = Field(default=None, max_length=1024)
    role: UserRole = UserRole.VIEWER


class ProfileResponse(BaseModel):
    """Response schema for a profile."""

    id: uuid.UUID
    email: str
    full_name: str | None
    avatar_url: str | None
    role: UserRole
    created_at: datetime

    model_config = {"from_attributes": True}


class ProfileListResponse(BaseModel):
    """Response for listing profiles."""

    users: list[ProfileResponse]
    total: int


class RoleUpdate(BaseModel):
    """Request schema for changing a role."""

    role: UserRole


# =============================================================================
# Audit & Admin Schemas
# =============================================================================


class AuditLogResponse(BaseModel):
    """Response schema for an audit entry."""

    id: uuid.UUID
    user_id: uuid.UUID | None
    user_email: str | None
    action: AuditAction
    entity_type: str
    entity_id: str
    entity_title: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class AuditLogListResponse(BaseModel):
    """Response for listing audit entries."""

    entries: list[AuditLogResponse]
    total: int


class AdminStatsResponse(BaseModel):
    """Dashboard counters."""

    templates: int
    users: int
    copies: int


# =============================================================================
# Preference Schemas
# =============================================================================


class PreferenceResponse(BaseModel):
    """Per-user preferences."""

    pinned_template_ids: list[str]
    hidden_template_ids: list[str]
    tag_colors: dict[str, str]
    dark_mode: bool

    model_config = {"from_attributes": True}


class TagColorUpdate(BaseModel):
    """Request schema for a tag color."""

    color: str = Field(min_length=1, max_length=20)


class DarkModeUpdate(BaseModel):
    """Request schema for the dark mode flag."""

    dark_mode: bool
