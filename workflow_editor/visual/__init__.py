"""Visual graph models and document conversion."""

from workflow_editor.visual.flow import (
    NODE_TYPE,
    FlowEdge,
    FlowNode,
    VisualGraph,
    edge_id,
)
from workflow_editor.visual.ports import (
    KNOWN_ACTION_PORTS,
    NodePorts,
    get_default_ports,
    get_node_ports,
    split_node_type,
)
from workflow_editor.visual.converter import (
    connections_to_edges,
    edges_to_connections,
    generate_node_id,
    to_document,
    to_graph,
)
from workflow_editor.visual.nodes import (
    add_node_to_document,
    create_node_from_action,
    generate_node_key,
)
from workflow_editor.visual.validation import ValidationReport, validate_document

__all__ = [
    # Flow
    "NODE_TYPE",
    "FlowEdge",
    "FlowNode",
    "VisualGraph",
    "edge_id",

    # Ports
    "KNOWN_ACTION_PORTS",
    "NodePorts",
    "get_default_ports",
    "get_node_ports",
    "split_node_type",

    # Conversion
    "connections_to_edges",
    "edges_to_connections",
    "generate_node_id",
    "to_document",
    "to_graph",

    # Nodes
    "add_node_to_document",
    "create_node_from_action",
    "generate_node_key",

    # Validation
    "ValidationReport",
    "validate_document",
]
