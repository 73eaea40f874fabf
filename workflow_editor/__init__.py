"""Workflow Editor sync engine."""

__version__ = "1.0.0"

from workflow_editor.document import IntegrationCatalog, NodeRecord, WorkflowDocument
from workflow_editor.exceptions import DocumentError, WorkflowEditorError
from workflow_editor.sync import DocumentTextView, SyncCoordinator
from workflow_editor.visual import VisualGraph, get_node_ports, to_document, to_graph

__all__ = [
    "IntegrationCatalog",
    "NodeRecord",
    "WorkflowDocument",
    "DocumentError",
    "WorkflowEditorError",
    "DocumentTextView",
    "SyncCoordinator",
    "VisualGraph",
    "get_node_ports",
    "to_document",
    "to_graph",
]
