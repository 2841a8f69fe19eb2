"""Application services shared by the API and the worker."""

from app.services.audit import record_audit
from app.services.template_import import ImportResult, import_notes

__all__ = [
    "ImportResult",
    "import_notes",
    "record_audit",
]
