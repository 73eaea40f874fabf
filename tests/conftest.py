"""
Pytest configuration and fixtures for the workflow editor.
"""

import sys
import json
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest

from workflow_editor.config import Settings
from workflow_editor.document.catalog import IntegrationCatalog
from workflow_editor.document.models import WorkflowDocument
from workflow_editor.sync.coordinator import SyncCoordinator


class ManualHandle:
    """Timer handle for ``ManualScheduler``."""

    def __init__(self, when, seq, callback):
        self.when = when
        self.seq = seq
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Scheduler driven by a fake clock; time only moves on ``advance()``."""

    def __init__(self):
        self.now = 0.0
        self._handles = []
        self._seq = 0

    def call_later(self, delay, callback):
        self._seq += 1
        handle = ManualHandle(self.now + delay, self._seq, callback)
        self._handles.append(handle)
        return handle

    @property
    def pending(self):
        return [h for h in self._handles if not h.cancelled]

    def advance(self, seconds):
        """Move the clock forward, firing due callbacks in order."""
        target = self.now + seconds
        while True:
            due = [h for h in self.pending if h.when <= target]
            if not due:
                break
            handle = min(due, key=lambda h: (h.when, h.seq))
            self._handles.remove(handle)
            self.now = handle.when
            handle.callback()
        self.now = target


CATALOG_DATA = [
    {
        "name": "http",
        "display_name": "HTTP",
        "actions": [
            {
                "key": "request",
                "display_name": "HTTP Request",
                "description": "Send an HTTP request to any URL",
            }
        ],
    },
    {
        "name": "slack",
        "display_name": "Slack",
        "actions": [
            {
                "key": "send_message",
                "display_name": "Send Message",
                "description": "Post a message to a channel",
                "input_ports": ["main"],
                "output_ports": ["main"],
            },
            {
                "key": "create_channel",
                "display_name": "Create Channel",
            },
        ],
    },
]


DOCUMENT_DATA = {
    "id": "wf_1",
    "name": "Demo",
    "version": 1,
    "variables": {"env": "test"},
    "nodes": [
        {"id": "n1", "key": "n1", "name": "Start", "type": "manual.trigger", "params": {}, "x": 0, "y": 0},
        {
            "id": "n2",
            "key": "n2",
            "name": "Fetch",
            "type": "http.request",
            "params": {"url": "https://example.com"},
            "x": 200,
            "y": 0,
        },
    ],
    "connections": {
        "n1": {"main": [{"to": "n2", "from": "n1", "to_port": "main", "from_port": "main"}]},
    },
}


@pytest.fixture
def scheduler():
    """Manual-clock scheduler."""
    return ManualScheduler()


@pytest.fixture
def settings():
    """Settings with the default delays."""
    return Settings(guard_reset_delay=0.05, text_edit_debounce=0.5)


@pytest.fixture
def catalog_data():
    return json.loads(json.dumps(CATALOG_DATA))


@pytest.fixture
def catalog(catalog_data):
    return IntegrationCatalog.from_list(catalog_data)


@pytest.fixture
def document_data():
    return json.loads(json.dumps(DOCUMENT_DATA))


@pytest.fixture
def document(document_data):
    """Two nodes, n1.main -> n2.main."""
    return WorkflowDocument.from_dict(document_data)


@pytest.fixture
def coordinator(scheduler, settings, document, catalog):
    """Coordinator initialized with the sample document."""
    coordinator = SyncCoordinator(scheduler=scheduler, settings=settings)
    coordinator.initialize(document, catalog)
    yield coordinator
    coordinator.dispose()


@pytest.fixture
def document_file(tmp_path, document_data):
    path = tmp_path / "workflow.json"
    path.write_text(json.dumps(document_data))
    return path


@pytest.fixture
def catalog_file(tmp_path, catalog_data):
    path = tmp_path / "integrations.json"
    path.write_text(json.dumps(catalog_data))
    return path
