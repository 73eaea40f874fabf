"""Editor state and its transition function."""

from dataclasses import dataclass, field, replace
from typing import Callable, Dict, FrozenSet, Type

import structlog

from workflow_editor.document.catalog import IntegrationCatalog
from workflow_editor.document.models import WorkflowDocument
from workflow_editor.sync.events import (
    DocumentEdited,
    EditEvent,
    EditSource,
    GraphEdited,
    Initialized,
    LockReleased,
    NodeAdded,
    NodeDeleted,
    NodeUpdated,
    TitleEdited,
)
from workflow_editor.visual.converter import generate_node_id, to_document, to_graph
from workflow_editor.visual.flow import VisualGraph
from workflow_editor.visual.nodes import add_node_to_document

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class SyncLock:
    """Reentrancy lock: idle, or locked for the sources that edited last.

    An edit from a locked source is dropped; edits from other sources are
    applied and join the lock. The whole lock is released at once.
    """
    held: FrozenSet[EditSource] = frozenset()

    @property
    def is_idle(self) -> bool:
        return not self.held

    def holds(self, source: EditSource) -> bool:
        return source in self.held

    def acquire(self, source: EditSource) -> "SyncLock":
        return SyncLock(self.held | {source})

    def __repr__(self) -> str:
        if self.is_idle:
            return "SyncLock(IDLE)"
        return f"SyncLock(locked={sorted(s.value for s in self.held)})"


IDLE = SyncLock()


@dataclass(frozen=True)
class EditorState:
    """Everything the coordinator owns. Replaced, never mutated."""
    document: WorkflowDocument = field(default_factory=WorkflowDocument)
    graph: VisualGraph = field(default_factory=VisualGraph)
    title: str = ""
    catalog: IntegrationCatalog = field(default_factory=IntegrationCatalog)
    lock: SyncLock = IDLE


def assign_missing_ids(document: WorkflowDocument) -> WorkflowDocument:
    """Give id-less nodes a permanent id so later conversions reuse it."""
    if all(node.id for node in document.nodes):
        return document

    nodes = []
    for node in document.nodes:
        if not node.id:
            node_id = generate_node_id()
            node = replace(node, id=node_id, key=node.key or node_id)
        nodes.append(node)
    return replace(document, nodes=nodes)


def reduce(state: EditorState, event: EditEvent) -> EditorState:
    """Apply one edit event. Returns ``state`` itself when nothing changes."""
    handler = _HANDLERS.get(type(event))
    if handler is None:
        raise TypeError(f"Unhandled edit event: {type(event).__name__}")
    return handler(state, event)


def _initialized(state: EditorState, event: Initialized) -> EditorState:
    document = assign_missing_ids(event.document)
    return replace(
        state,
        document=document,
        graph=to_graph(document, event.catalog),
        title=document.name,
        catalog=event.catalog,
    )


def _graph_edited(state: EditorState, event: GraphEdited) -> EditorState:
    if state.lock.holds(EditSource.GRAPH):
        return state

    keys = [node.node_key for node in event.nodes]
    if len(keys) != len(set(keys)):
        logger.warning("node_key_conflict", node_keys=keys)
        return state

    graph = VisualGraph(nodes=list(event.nodes), edges=list(event.edges))
    return replace(
        state,
        graph=graph,
        document=to_document(state.document, graph),
        lock=state.lock.acquire(EditSource.GRAPH),
    )


def _document_edited(state: EditorState, event: DocumentEdited) -> EditorState:
    if state.lock.holds(EditSource.DOCUMENT):
        return state

    document = assign_missing_ids(event.document)
    return replace(
        state,
        document=document,
        graph=to_graph(document, state.catalog),
        # a document without a name keeps the current title
        title=document.name or state.title,
        lock=state.lock.acquire(EditSource.DOCUMENT),
    )


def _title_edited(state: EditorState, event: TitleEdited) -> EditorState:
    if state.lock.holds(EditSource.TITLE):
        return state

    return replace(
        state,
        title=event.title,
        document=replace(state.document, name=event.title),
        lock=state.lock.acquire(EditSource.TITLE),
    )


def _node_added(state: EditorState, event: NodeAdded) -> EditorState:
    document = add_node_to_document(state.document, event.node)
    return replace(state, document=document, graph=to_graph(document, state.catalog))


def _node_updated(state: EditorState, event: NodeUpdated) -> EditorState:
    node = state.graph.get_node(event.node_id)
    if node is None:
        return state

    data_changes = event.changes.get("data") or {}
    data = {**node.data, **data_changes}
    data["node_key"] = data_changes.get("node_key") or node.data.get("node_key") or node.id
    data["node_id"] = data_changes.get("node_id") or node.data.get("node_id") or node.id

    if any(other.id != node.id and other.node_key == data["node_key"] for other in state.graph.nodes):
        logger.warning("node_key_conflict", node_id=node.id, node_key=data["node_key"])
        return state

    updated = replace(
        node,
        position=dict(event.changes.get("position") or node.position),
        data=data,
    )
    graph = VisualGraph(
        nodes=[updated if other.id == node.id else other for other in state.graph.nodes],
        edges=list(state.graph.edges),
    )
    return replace(state, graph=graph, document=to_document(state.document, graph))


def _node_deleted(state: EditorState, event: NodeDeleted) -> EditorState:
    if state.graph.get_node(event.node_id) is None:
        return state

    graph = state.graph.without_node(event.node_id)
    return replace(state, graph=graph, document=to_document(state.document, graph))


def _lock_released(state: EditorState, event: LockReleased) -> EditorState:
    if state.lock.is_idle:
        return state
    return replace(state, lock=IDLE)


_HANDLERS: Dict[Type, Callable[[EditorState, EditEvent], EditorState]] = {
    Initialized: _initialized,
    GraphEdited: _graph_edited,
    DocumentEdited: _document_edited,
    TitleEdited: _title_edited,
    NodeAdded: _node_added,
    NodeUpdated: _node_updated,
    NodeDeleted: _node_deleted,
    LockReleased: _lock_released,
}
