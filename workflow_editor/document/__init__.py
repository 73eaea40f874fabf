"""Canonical workflow document and integration catalog."""

from workflow_editor.document.models import (
    DEFAULT_PORT,
    EXPORT_FORMATS,
    ConnectionTarget,
    NodeRecord,
    WorkflowDocument,
)
from workflow_editor.document.catalog import (
    Action,
    Integration,
    IntegrationCatalog,
)
from workflow_editor.document.loader import (
    load_session_payload,
    read_catalog,
    read_document,
    safe_json_parse,
)

__all__ = [
    "DEFAULT_PORT",
    "EXPORT_FORMATS",
    "ConnectionTarget",
    "NodeRecord",
    "WorkflowDocument",
    "Action",
    "Integration",
    "IntegrationCatalog",
    "load_session_payload",
    "read_catalog",
    "read_document",
    "safe_json_parse",
]
