# workflow_editor/visual/converter.py
"""Bidirectional conversion between workflow documents and visual graphs.

Both directions are pure apart from id synthesis for nodes that arrive
without an id. Node keys address nodes inside ``connections``; visual node
ids equal the document node ids, so ``key -> id`` and ``id -> key`` maps
built while converting translate between the two.
"""

import copy
import secrets
import string
import time
from dataclasses import replace
from typing import Dict, List

import structlog

from workflow_editor.document.catalog import IntegrationCatalog
from workflow_editor.document.models import (
    DEFAULT_PORT,
    ConnectionTarget,
    Connections,
    NodeRecord,
    WorkflowDocument,
)
from workflow_editor.visual.flow import FlowEdge, FlowNode, VisualGraph, edge_id
from workflow_editor.visual.ports import get_node_ports

logger = structlog.get_logger(__name__)

_BASE36 = string.digits + string.ascii_lowercase


def to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


def generate_node_id() -> str:
    """Generate a unique node id: random base-36 suffix plus a timestamp."""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"node_{suffix}_{to_base36(int(time.time() * 1000))}"


def to_graph(document: WorkflowDocument, catalog: IntegrationCatalog) -> VisualGraph:
    """Convert a workflow document to its visual graph."""
    key_to_id: Dict[str, str] = {}
    nodes: List[FlowNode] = []

    for record in document.nodes:
        ports = get_node_ports(record.type, catalog)

        # Only documents authored outside the editor lack ids
        node_id = record.id or generate_node_id()
        node_key = record.key or node_id
        key_to_id[node_key] = node_id

        nodes.append(FlowNode(
            id=node_id,
            position={"x": record.x, "y": record.y},
            data={
                "type": "action",
                "label": record.name,
                "action_display_name": ports.action_display_name,
                "node_key": node_key,
                "node_id": node_id,
                "integration_type": record.type,
                "params": copy.deepcopy(record.params),
                "input_ports": ports.input_ports,
                "output_ports": ports.output_ports,
            },
        ))

    edges = connections_to_edges(document.connections, key_to_id)
    return VisualGraph(nodes=nodes, edges=edges)


def connections_to_edges(
    connections: Connections,
    key_to_id: Dict[str, str]
) -> List[FlowEdge]:
    """Convert document connections to visual edges.

    Keys missing from ``key_to_id`` are used as ids directly, which may
    leave an edge pointing at no node. A connection whose derived edge id
    was already emitted is dropped.
    """
    edges: List[FlowEdge] = []
    seen = set()

    for source_key, ports in connections.items():
        source_id = key_to_id.get(source_key, source_key)

        for source_port, targets in ports.items():
            source_port = source_port or DEFAULT_PORT

            for target in targets:
                target_id = key_to_id.get(target.to, target.to)
                target_port = target.to_port or DEFAULT_PORT
                derived_id = edge_id(source_id, source_port, target_id, target_port)

                if derived_id in seen:
                    logger.warning(
                        "duplicate_connection_dropped",
                        edge_id=derived_id,
                        source=source_key,
                        target=target.to
                    )
                    continue
                seen.add(derived_id)

                edges.append(FlowEdge(
                    id=derived_id,
                    source=source_id,
                    target=target_id,
                    source_handle=source_port,
                    target_handle=target_port,
                ))

    return edges


def to_document(base_document: WorkflowDocument, graph: VisualGraph) -> WorkflowDocument:
    """Convert a visual graph back to a workflow document.

    Only ``nodes`` and ``connections`` are taken from the graph; every other
    field comes from ``base_document``, so pass the most recent document.
    """
    id_to_key = {node.id: node.node_key for node in graph.nodes}

    nodes = [
        NodeRecord(
            id=node.node_id,
            key=node.node_key,
            name=node.data.get("label") or "",
            type=node.data.get("integration_type") or "",
            params=copy.deepcopy(node.data.get("params") or {}),
            x=node.position.get("x", 0),
            y=node.position.get("y", 0),
        )
        for node in graph.nodes
    ]

    connections = edges_to_connections(graph.edges, id_to_key)
    return replace(base_document, nodes=nodes, connections=connections)


def edges_to_connections(edges: List[FlowEdge], id_to_key: Dict[str, str]) -> Connections:
    """Group visual edges by source key and source port."""
    connections: Connections = {}

    for edge in edges:
        source_key = id_to_key.get(edge.source, edge.source)
        target_key = id_to_key.get(edge.target, edge.target)
        source_handle = edge.source_handle or DEFAULT_PORT

        connections.setdefault(source_key, {}).setdefault(source_handle, []).append(
            ConnectionTarget(
                to=target_key,
                from_node=source_key,
                to_port=edge.target_handle or DEFAULT_PORT,
                from_port=source_handle,
            )
        )

    return connections
