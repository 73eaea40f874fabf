"""Edit events accepted by the synchronization coordinator."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Union

from workflow_editor.document.catalog import IntegrationCatalog
from workflow_editor.document.models import NodeRecord, WorkflowDocument
from workflow_editor.visual.flow import FlowEdge, FlowNode


class EditSource(Enum):
    """Views that originate edits."""
    GRAPH = "graph"
    DOCUMENT = "document"
    TITLE = "title"


@dataclass(frozen=True)
class Initialized:
    """Host supplied the initial document and catalog."""
    document: WorkflowDocument
    catalog: IntegrationCatalog


@dataclass(frozen=True)
class GraphEdited:
    """Visual graph changed (drag, connect, disconnect)."""
    nodes: List[FlowNode]
    edges: List[FlowEdge]


@dataclass(frozen=True)
class DocumentEdited:
    """Raw document text was replaced."""
    document: WorkflowDocument


@dataclass(frozen=True)
class TitleEdited:
    title: str


@dataclass(frozen=True)
class NodeAdded:
    node: NodeRecord


@dataclass(frozen=True)
class NodeUpdated:
    """Partial update of a visual node: ``position`` and/or ``data`` keys."""
    node_id: str
    changes: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class NodeDeleted:
    node_id: str


@dataclass(frozen=True)
class LockReleased:
    """Unlock timer fired."""
    pass


EditEvent = Union[
    Initialized,
    GraphEdited,
    DocumentEdited,
    TitleEdited,
    NodeAdded,
    NodeUpdated,
    NodeDeleted,
    LockReleased,
]
