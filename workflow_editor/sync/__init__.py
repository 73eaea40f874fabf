"""Synchronization of the graph, document and title views."""

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
from workflow_editor.sync.state import (
    IDLE,
    EditorState,
    SyncLock,
    assign_missing_ids,
    reduce,
)
from workflow_editor.sync.timers import (
    AsyncioScheduler,
    CancellableTimer,
    Debouncer,
    Scheduler,
    TimerHandle,
)
from workflow_editor.sync.coordinator import SyncCoordinator
from workflow_editor.sync.text_view import DocumentTextView

__all__ = [
    # Events
    "DocumentEdited",
    "EditEvent",
    "EditSource",
    "GraphEdited",
    "Initialized",
    "LockReleased",
    "NodeAdded",
    "NodeDeleted",
    "NodeUpdated",
    "TitleEdited",

    # State
    "IDLE",
    "EditorState",
    "SyncLock",
    "assign_missing_ids",
    "reduce",

    # Timers
    "AsyncioScheduler",
    "CancellableTimer",
    "Debouncer",
    "Scheduler",
    "TimerHandle",

    # Views
    "SyncCoordinator",
    "DocumentTextView",
]
