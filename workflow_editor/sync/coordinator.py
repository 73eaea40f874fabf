"""Synchronization coordinator for the graph, document and title views."""

import copy
from typing import Any, Callable, Iterable, List, Mapping, Optional, Union

import structlog

from workflow_editor.config import Settings, get_settings
from workflow_editor.document.catalog import IntegrationCatalog
from workflow_editor.document.models import NodeRecord, WorkflowDocument
from workflow_editor.exceptions import DocumentError, UnknownIntegrationError
from workflow_editor.sync.events import (
    DocumentEdited,
    EditEvent,
    GraphEdited,
    Initialized,
    LockReleased,
    NodeAdded,
    NodeDeleted,
    NodeUpdated,
    TitleEdited,
)
from workflow_editor.sync.state import EditorState, SyncLock, reduce
from workflow_editor.sync.timers import AsyncioScheduler, CancellableTimer, Scheduler
from workflow_editor.visual.flow import FlowEdge, FlowNode, VisualGraph
from workflow_editor.visual.nodes import create_node_from_action

logger = structlog.get_logger(__name__)

Listener = Callable[[EditorState], None]
NodeLike = Union[FlowNode, Mapping[str, Any]]
EdgeLike = Union[FlowEdge, Mapping[str, Any]]


class SyncCoordinator:
    """Owns the canonical document and the derived visual graph.

    Every mutation goes through this class. Edits from the graph, the raw
    document and the title are guarded by a ``SyncLock``: while a source
    holds the lock its further edits are dropped, so an edit cannot
    re-trigger itself through the render cycle. The lock is released by a
    single timer ``guard_reset_delay`` seconds after the last acquisition.

    Listeners registered with ``subscribe`` are called synchronously with a
    snapshot after each change and may call back into the coordinator.
    """

    def __init__(
        self,
        scheduler: Optional[Scheduler] = None,
        settings: Optional[Settings] = None
    ):
        """Initialize the coordinator.

        Args:
            scheduler: Runs the unlock timer; defaults to the running asyncio loop
            settings: Delays and defaults; defaults to ``get_settings()``
        """
        self.settings = settings or get_settings()
        self.scheduler: Scheduler = scheduler or AsyncioScheduler()
        self._unlock_timer = CancellableTimer(self.scheduler, self.settings.guard_reset_delay)
        self._state = EditorState()
        self._listeners: List[Listener] = []

    # State access

    @property
    def state(self) -> EditorState:
        return self._state

    @property
    def document(self) -> WorkflowDocument:
        return self._state.document

    @property
    def graph(self) -> VisualGraph:
        return self._state.graph

    @property
    def title(self) -> str:
        return self._state.title

    @property
    def catalog(self) -> IntegrationCatalog:
        return self._state.catalog

    @property
    def lock(self) -> SyncLock:
        return self._state.lock

    def snapshot(self) -> EditorState:
        """Deep copy of the current state, safe to hand to other components."""
        return copy.deepcopy(self._state)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener. Returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # Dispatch

    def dispatch(self, event: EditEvent) -> bool:
        """Apply an event. Returns whether the state changed."""
        previous = self._state
        state = reduce(previous, event)

        if state is previous:
            logger.debug("edit_ignored", event_type=type(event).__name__, lock=repr(previous.lock))
            return False

        # The unlock timer is armed before the commit so a scheduler failure
        # leaves the previous state in place
        if state.lock != previous.lock and not state.lock.is_idle:
            self._unlock_timer.schedule(self._release_lock)
            logger.debug("sync_lock_acquired", lock=repr(state.lock))

        self._state = state
        if not isinstance(event, LockReleased):
            self._notify()
        return True

    def _release_lock(self) -> None:
        if self.dispatch(LockReleased()):
            logger.debug("sync_lock_released")

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self.snapshot())
            except Exception as e:
                logger.exception("listener_failed", error=str(e))

    # Operations

    def initialize(
        self,
        document: Union[WorkflowDocument, Mapping[str, Any]],
        catalog: Union[IntegrationCatalog, Iterable[Any], None] = None
    ) -> None:
        """Load the host's initial document and integration catalog.

        Raises:
            DocumentError: if ``document`` or ``catalog`` is malformed.
        """
        if not isinstance(document, WorkflowDocument):
            document = WorkflowDocument.from_dict(document)
        if not isinstance(catalog, IntegrationCatalog):
            catalog = IntegrationCatalog.from_list(list(catalog) if catalog is not None else None)

        self.dispatch(Initialized(document=document, catalog=catalog))
        logger.info(
            "editor_initialized",
            workflow_id=document.id,
            nodes=len(document.nodes),
            integrations=len(catalog)
        )

    def apply_graph_edit(self, nodes: Iterable[NodeLike], edges: Iterable[EdgeLike]) -> bool:
        """Replace the visual graph and re-derive the document."""
        try:
            flow_nodes = [node if isinstance(node, FlowNode) else FlowNode.from_dict(node) for node in nodes]
            flow_edges = [edge if isinstance(edge, FlowEdge) else FlowEdge.from_dict(edge) for edge in edges]
        except DocumentError as e:
            logger.warning("graph_edit_rejected", error=str(e))
            return False

        return self.dispatch(GraphEdited(nodes=flow_nodes, edges=flow_edges))

    def apply_document_edit(self, new_document: Union[WorkflowDocument, Mapping[str, Any]]) -> bool:
        """Replace the document and re-derive the visual graph.

        A malformed document is rejected and the current state kept.
        """
        if not isinstance(new_document, WorkflowDocument):
            try:
                new_document = WorkflowDocument.from_dict(new_document)
            except DocumentError as e:
                logger.warning("document_edit_rejected", error=str(e))
                return False

        return self.dispatch(DocumentEdited(document=new_document))

    def apply_title_edit(self, title: str) -> bool:
        """Rename the workflow."""
        return self.dispatch(TitleEdited(title=title))

    def add_node(self, action_key: str, integration_name: str) -> Optional[NodeRecord]:
        """Add a node for an integration action at the default position.

        Returns the new node record, or ``None`` for an unknown integration.
        """
        try:
            integration = self.catalog.require_integration(integration_name)
        except UnknownIntegrationError as e:
            logger.warning("add_node_skipped", error=str(e), action=action_key)
            return None

        node = create_node_from_action(
            action_key,
            integration,
            existing_keys=self.document.node_keys(),
            x=self.settings.default_node_x,
            y=self.settings.default_node_y,
        )
        self.dispatch(NodeAdded(node=node))
        logger.info("node_added", node_id=node.id, node_key=node.key, type=node.type)
        return node

    def update_node(self, node_id: str, changes: Mapping[str, Any]) -> bool:
        """Merge ``position``/``data`` changes into a visual node."""
        return self.dispatch(NodeUpdated(node_id=node_id, changes=dict(changes)))

    def delete_node(self, node_id: str) -> bool:
        """Remove a node and every edge touching it."""
        return self.dispatch(NodeDeleted(node_id=node_id))

    def export_document(self, fmt: str = "json") -> str:
        """Serialize the current document."""
        return self.document.export(fmt, indent=self.settings.export_indent)

    def dispose(self) -> None:
        """Cancel the pending unlock and drop listeners."""
        self._unlock_timer.cancel()
        self._listeners.clear()
