"""
Tests for the editor state reducer.
"""

from dataclasses import dataclass, replace

import pytest

from workflow_editor.document.models import NodeRecord, WorkflowDocument
from workflow_editor.sync.events import (
    DocumentEdited,
    EditSource,
    GraphEdited,
    Initialized,
    LockReleased,
    NodeAdded,
    NodeDeleted,
    NodeUpdated,
    TitleEdited,
)
from workflow_editor.sync.state import IDLE, EditorState, SyncLock, assign_missing_ids, reduce


@pytest.fixture
def state(document, catalog):
    return reduce(EditorState(), Initialized(document=document, catalog=catalog))


class TestSyncLock:
    """Test SyncLock values."""

    def test_idle(self):
        assert IDLE.is_idle
        assert not IDLE.holds(EditSource.GRAPH)
        assert repr(IDLE) == "SyncLock(IDLE)"

    def test_acquire_accumulates(self):
        lock = IDLE.acquire(EditSource.DOCUMENT).acquire(EditSource.GRAPH)
        assert lock.holds(EditSource.DOCUMENT)
        assert lock.holds(EditSource.GRAPH)
        assert not lock.holds(EditSource.TITLE)
        assert repr(lock) == "SyncLock(locked=['document', 'graph'])"

    def test_value_equality(self):
        assert IDLE.acquire(EditSource.TITLE) == SyncLock(frozenset({EditSource.TITLE}))
        assert IDLE == SyncLock()


class TestReduce:
    """Test reduce transitions."""

    def test_initialized(self, state, document):
        assert state.title == "Demo"
        assert state.document == document
        assert [edge.id for edge in state.graph.edges] == ["en1-main-n2-main"]
        assert state.lock == IDLE

    def test_initialized_assigns_permanent_ids(self, catalog):
        document = WorkflowDocument.from_dict({"nodes": [{"type": "http.request"}]})
        state = reduce(EditorState(), Initialized(document=document, catalog=catalog))

        node_id = state.document.nodes[0].id
        assert node_id.startswith("node_")
        assert state.document.nodes[0].key == node_id
        assert state.graph.nodes[0].id == node_id

    def test_assign_missing_ids_noop(self, document):
        assert assign_missing_ids(document) is document

    def test_document_edit_acquires_lock(self, state, document):
        renamed = WorkflowDocument.from_dict({**document.to_dict(), "name": "Renamed"})
        new_state = reduce(state, DocumentEdited(document=renamed))

        assert new_state.title == "Renamed"
        assert new_state.lock.holds(EditSource.DOCUMENT)

    def test_document_edit_without_name_keeps_title(self, state):
        new_state = reduce(state, DocumentEdited(document=WorkflowDocument()))
        assert new_state.title == "Demo"
        assert new_state.document.name == ""
        assert new_state.graph.nodes == []

    def test_same_source_dropped(self, state):
        locked = reduce(state, DocumentEdited(document=WorkflowDocument(name="One")))
        assert reduce(locked, DocumentEdited(document=WorkflowDocument(name="Two"))) is locked

    def test_other_source_joins_lock(self, state):
        locked = reduce(state, DocumentEdited(document=state.document))
        graph = locked.graph
        both = reduce(locked, GraphEdited(nodes=graph.nodes, edges=[]))

        assert both.lock.holds(EditSource.DOCUMENT)
        assert both.lock.holds(EditSource.GRAPH)
        assert both.document.connections == {}

    def test_graph_edit_duplicate_key_rejected(self, state):
        nodes = [replace(node, data=dict(node.data)) for node in state.graph.nodes]
        nodes[1].data["node_key"] = "n1"

        assert reduce(state, GraphEdited(nodes=nodes, edges=state.graph.edges)) is state

    def test_title_edit(self, state):
        new_state = reduce(state, TitleEdited(title="New title"))
        assert new_state.title == "New title"
        assert new_state.document.name == "New title"
        assert new_state.lock.holds(EditSource.TITLE)

    def test_lock_released(self, state):
        locked = reduce(state, TitleEdited(title="x"))
        released = reduce(locked, LockReleased())
        assert released.lock == IDLE
        assert reduce(released, LockReleased()) is released

    def test_node_added_not_guarded(self, state):
        locked = reduce(state, GraphEdited(nodes=state.graph.nodes, edges=state.graph.edges))
        node = NodeRecord(id="n3", key="n3", name="New", type="http.request")
        new_state = reduce(locked, NodeAdded(node=node))

        assert [n.id for n in new_state.document.nodes] == ["n3", "n1", "n2"]
        assert new_state.graph.nodes[0].id == "n3"

    def test_node_updated_key_conflict(self, state):
        assert reduce(state, NodeUpdated(node_id="n2", changes={"data": {"node_key": "n1"}})) is state

    def test_node_updated_unknown(self, state):
        assert reduce(state, NodeUpdated(node_id="missing", changes={"position": {"x": 1, "y": 1}})) is state

    def test_node_deleted(self, state):
        new_state = reduce(state, NodeDeleted(node_id="n1"))
        assert [n.id for n in new_state.graph.nodes] == ["n2"]
        assert new_state.graph.edges == []
        assert new_state.document.connections == {}

    def test_unknown_event(self, state):
        @dataclass(frozen=True)
        class Zoomed:
            level: float

        with pytest.raises(TypeError, match="Zoomed"):
            reduce(state, Zoomed(level=2.0))

    def test_state_not_mutated(self, state):
        before = state.document.to_dict()
        reduce(state, NodeDeleted(node_id="n2"))
        reduce(state, TitleEdited(title="changed"))
        assert state.document.to_dict() == before
        assert state.title == "Demo"
