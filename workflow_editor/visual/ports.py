"""Port resolution for node types."""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from workflow_editor.document.catalog import IntegrationCatalog

DEFAULT_INPUT_PORTS = ["main"]
DEFAULT_OUTPUT_PORTS = ["main", "error"]


@dataclass(frozen=True)
class NodePorts:
    """Resolved ports and label for a node type."""
    input_ports: List[str] = field(default_factory=lambda: list(DEFAULT_INPUT_PORTS))
    output_ports: List[str] = field(default_factory=lambda: list(DEFAULT_OUTPUT_PORTS))
    action_display_name: str = ""


# Ports for well-known action types missing from the catalog
KNOWN_ACTION_PORTS: Dict[str, Tuple[List[str], List[str]]] = {
    "logic.if_condition": (["main"], ["true", "false"]),
    "data.merge": (["input_a", "input_b"], ["main", "error"]),
    "manual.trigger": ([], ["main"]),
}


def split_node_type(node_type: str) -> Tuple[str, str]:
    """Split ``"<integration>.<action>"`` at the first dot."""
    integration, _, action = (node_type or "").partition(".")
    return integration, action


def get_default_ports(node_type: str) -> Tuple[List[str], List[str]]:
    """Default (inputs, outputs) for a node type without a catalog entry."""
    inputs, outputs = KNOWN_ACTION_PORTS.get(
        node_type, (DEFAULT_INPUT_PORTS, DEFAULT_OUTPUT_PORTS)
    )
    return list(inputs), list(outputs)


def get_node_ports(node_type: str, catalog: IntegrationCatalog) -> NodePorts:
    """Resolve input/output ports and display name for a node type.

    Catalog declarations win; ports an action omits default to
    ``["main"]`` in and ``["main", "error"]`` out. Types unknown to the
    catalog fall back to ``KNOWN_ACTION_PORTS`` and then to the defaults.
    """
    integration_name, action_key = split_node_type(node_type)
    action = catalog.get_action(integration_name, action_key)

    if action is None:
        inputs, outputs = get_default_ports(node_type)
        return NodePorts(
            input_ports=inputs,
            output_ports=outputs,
            action_display_name=action_key or node_type,
        )

    return NodePorts(
        input_ports=list(action.input_ports) if action.input_ports is not None else list(DEFAULT_INPUT_PORTS),
        output_ports=list(action.output_ports) if action.output_ports is not None else list(DEFAULT_OUTPUT_PORTS),
        action_display_name=action.label,
    )
