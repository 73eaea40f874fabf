"""Loading host-supplied payloads."""

import json
from pathlib import Path
from typing import Any, Optional, Tuple, Union

import structlog

from workflow_editor.document.catalog import IntegrationCatalog
from workflow_editor.document.models import WorkflowDocument
from workflow_editor.exceptions import DocumentError

logger = structlog.get_logger(__name__)


def safe_json_parse(text: Optional[str], fallback: Any) -> Any:
    """Parse JSON, returning ``fallback`` for empty, null or invalid input."""
    try:
        value = json.loads(text or "null")
    except json.JSONDecodeError as e:
        logger.warning("host_payload_invalid_json", error=str(e))
        return fallback
    return fallback if value is None else value


def load_session_payload(
    workflow_text: Optional[str],
    integrations_text: Optional[str]
) -> Tuple[WorkflowDocument, IntegrationCatalog]:
    """Build the initial document and catalog for an editing session.

    Invalid payloads degrade to an empty document or catalog so the editor
    can still open.
    """
    raw_workflow = safe_json_parse(workflow_text, {})
    raw_integrations = safe_json_parse(integrations_text, [])

    try:
        document = WorkflowDocument.from_dict(raw_workflow)
    except DocumentError as e:
        logger.warning("host_workflow_rejected", error=str(e))
        document = WorkflowDocument()

    try:
        catalog = IntegrationCatalog.from_list(raw_integrations)
    except DocumentError as e:
        logger.warning("host_catalog_rejected", error=str(e))
        catalog = IntegrationCatalog()

    return document, catalog


def read_document(path: Union[str, Path]) -> WorkflowDocument:
    """Read a workflow document from a ``.json``, ``.yaml`` or ``.yml`` file."""
    path = Path(path)
    fmt = "yaml" if path.suffix.lower() in (".yaml", ".yml") else "json"
    return WorkflowDocument.parse(path.read_text(encoding="utf-8"), fmt)


def read_catalog(path: Optional[Union[str, Path]]) -> IntegrationCatalog:
    """Read an integration catalog from a JSON file; ``None`` gives an empty catalog."""
    if path is None:
        return IntegrationCatalog()
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise DocumentError(f"invalid JSON: {e.msg}", str(path))
    return IntegrationCatalog.from_list(data)
