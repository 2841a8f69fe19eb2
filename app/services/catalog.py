"""Template catalog helpers.

Pure functions over in-memory template lists: content derivation,
tag normalization, filtering and pin ordering.
"""

from collections.abc import Iterable, Mapping, Sequence
import uuid

from app.db.models import CONTENT_LANGUAGES, Template
from app.strategies.template_engine import extract_variables


def normalize_tags(tags: Iterable[str]) -> list[str]:
    """Trim, lower-case and de-duplicate tags, keeping insertion order."""
    normalized = (tag.strip().lower() for tag in tags)
    return list(dict.fromkeys(tag for tag in normalized if tag))


def normalize_shortcut(shortcut: str | None) -> str | None:
    """Trim a shortcut; blank becomes None."""
    if shortcut is None:
        return None
    return shortcut.strip() or None


def resolve_main_content(localized_content: Mapping[str, str]) -> str:
    """Pick the canonical body: the first non-blank localized content.

    Languages are tried in CONTENT_LANGUAGES order. Returns "" when
    every entry is blank.
    """
    for code in CONTENT_LANGUAGES:
        value = localized_content.get(code)
        if value and value.strip():
            return value
    return ""


def main_content_language(template: Template) -> str:
    """Return the localized_content key the canonical body comes from.

    Falls back to the template language when no localized body is set.
    """
    for code in CONTENT_LANGUAGES:
        value = template.localized_content.get(code)
        if value and value.strip():
            return code
    return template.language.value.lower()


def replace_main_content(template: Template, content: str) -> dict[str, str]:
    """Localized bodies with only the canonical entry replaced by content."""
    return {**template.localized_content, main_content_language(template): content}


def set_template_content(
    template: Template,
    content: str,
    localized_content: Mapping[str, str] | None = None,
) -> None:
    """Write content and re-derive variables in one step.

    Every content write goes through here so `variables` always
    matches the placeholders of `content`.
    """
    template.content = content
    if localized_content is not None:
        template.localized_content = {
            code: text for code, text in localized_content.items() if text
        }
    template.variables = extract_variables(content)


def filter_templates(
    templates: Iterable[Template],
    search: str | None = None,
    language: str | None = None,
    category_id: uuid.UUID | None = None,
    tags: Sequence[str] | None = None,
) -> list[Template]:
    """Filter templates the way the library search box does.

    Args:
        templates: Candidate templates.
        search: Case-insensitive text matched against title, content,
            shortcut and tags.
        language: Exact language tag.
        category_id: Exact category.
        tags: Every tag must be present on the template, ignoring case.

    Returns:
        Matching templates in their original order.
    """
    query = search.strip().lower() if search else ""
    required_tags = [tag.strip().lower() for tag in tags or []]

    def _matches(template: Template) -> bool:
        if query:
            haystacks = [template.title, template.content, template.shortcut or "", *template.tags]
            if not any(query in text.lower() for text in haystacks):
                return False
        if language and template.language != language:
            return False
        if category_id and template.category_id != category_id:
            return False
        if required_tags and not set(required_tags) <= {tag.lower() for tag in template.tags}:
            return False
        return True

    return [template for template in templates if _matches(template)]


def collect_tags(templates: Iterable[Template]) -> list[str]:
    """Return the sorted set of tags used by templates."""
    return sorted({tag for template in templates for tag in template.tags})


def order_by_pins(templates: Sequence[Template], pinned_ids: Iterable[str]) -> list[Template]:
    """Move pinned templates to the front, keeping relative order."""
    pinned = set(pinned_ids)
    return sorted(templates, key=lambda template: str(template.id) not in pinned)


def exclude_hidden(templates: Iterable[Template], hidden_ids: Iterable[str]) -> list[Template]:
    """Drop templates the user has hidden."""
    hidden = set(hidden_ids)
    return [template for template in templates if str(template.id) not in hidden]
