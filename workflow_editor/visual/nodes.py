"""Node creation helpers."""

import re
import time
from dataclasses import replace
from typing import Iterable, Optional

from workflow_editor.config import get_settings
from workflow_editor.document.catalog import Integration
from workflow_editor.document.models import NodeRecord, WorkflowDocument
from workflow_editor.visual.converter import generate_node_id


def generate_node_key(action_key: str, existing_keys: Iterable[str] = ()) -> str:
    """Generate a node key from the action name and the current time.

    A numeric suffix is appended if the key is already taken.
    """
    slug = re.sub(r"\s+", "_", action_key.strip().lower()) or "node"
    base = f"{slug}_{int(time.time() * 1000)}"

    taken = set(existing_keys)
    key = base
    suffix = 2
    while key in taken:
        key = f"{base}_{suffix}"
        suffix += 1
    return key


def create_node_from_action(
    action_key: str,
    integration: Integration,
    existing_keys: Iterable[str] = (),
    x: Optional[float] = None,
    y: Optional[float] = None
) -> NodeRecord:
    """Create a new node record for an integration action.

    The position defaults to the configured ``default_node_x``/``default_node_y``.
    """
    if x is None or y is None:
        settings = get_settings()
        x = settings.default_node_x if x is None else x
        y = settings.default_node_y if y is None else y

    action = integration.get_action(action_key)
    return NodeRecord(
        id=generate_node_id(),
        key=generate_node_key(action_key, existing_keys),
        name=action.label if action else action_key,
        type=f"{integration.name}.{action_key}",
        params={},
        x=x,
        y=y,
    )


def add_node_to_document(document: WorkflowDocument, node: NodeRecord) -> WorkflowDocument:
    """Copy of the document with ``node`` prepended."""
    return replace(document, nodes=[node] + list(document.nodes))
