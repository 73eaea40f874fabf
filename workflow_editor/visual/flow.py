# workflow_editor/visual/flow.py
"""Flow data models for the visual graph."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from workflow_editor.document.models import DEFAULT_PORT
from workflow_editor.exceptions import DocumentError

NODE_TYPE = "custom"


def edge_id(source: str, source_handle: str, target: str, target_handle: str) -> str:
    """Deterministic edge id derived from endpoints and ports."""
    return f"e{source}-{source_handle}-{target}-{target_handle}"


@dataclass
class FlowNode:
    """Represents a node in the visual flow.

    ``data`` carries the label, ``node_key``, ``node_id``,
    ``integration_type``, ``params`` and the resolved port lists.
    """
    id: str
    position: Dict[str, float] = field(default_factory=lambda: {"x": 0, "y": 0})
    data: Dict[str, Any] = field(default_factory=dict)
    type: str = NODE_TYPE

    @property
    def node_key(self) -> str:
        return self.data.get("node_key") or self.id

    @property
    def node_id(self) -> str:
        return self.data.get("node_id") or self.id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "position": dict(self.position),
            "data": dict(self.data),
        }

    @classmethod
    def from_dict(cls, data: Any) -> "FlowNode":
        """Create from dictionary, ignoring view-only fields such as ``width`` or ``selected``."""
        if not isinstance(data, Mapping) or not data.get("id"):
            raise DocumentError("visual node needs an 'id'")

        position = data.get("position") or {}
        return cls(
            id=str(data["id"]),
            type=data.get("type") or NODE_TYPE,
            position={"x": position.get("x", 0), "y": position.get("y", 0)},
            data=dict(data.get("data") or {}),
        )


@dataclass
class FlowEdge:
    """Represents an edge (connection) in the visual flow."""
    id: str
    source: str
    target: str
    source_handle: str = DEFAULT_PORT
    target_handle: str = DEFAULT_PORT

    def __post_init__(self):
        """Default missing handles."""
        self.source_handle = self.source_handle or DEFAULT_PORT
        self.target_handle = self.target_handle or DEFAULT_PORT

    def touches(self, node_id: str) -> bool:
        return self.source == node_id or self.target == node_id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "sourceHandle": self.source_handle,
            "targetHandle": self.target_handle,
        }

    @classmethod
    def from_dict(cls, data: Any) -> "FlowEdge":
        """Create from dictionary; a missing id is derived from the endpoints."""
        if not isinstance(data, Mapping) or not data.get("source") or not data.get("target"):
            raise DocumentError("visual edge needs a 'source' and a 'target'")

        source_handle = data.get("sourceHandle") or DEFAULT_PORT
        target_handle = data.get("targetHandle") or DEFAULT_PORT
        return cls(
            id=data.get("id") or edge_id(data["source"], source_handle, data["target"], target_handle),
            source=data["source"],
            target=data["target"],
            source_handle=source_handle,
            target_handle=target_handle,
        )


@dataclass
class VisualGraph:
    """Node/edge structure rendered by the editor view."""
    nodes: List[FlowNode] = field(default_factory=list)
    edges: List[FlowEdge] = field(default_factory=list)

    def get_node(self, node_id: str) -> Optional[FlowNode]:
        """Get node by ID."""
        return next((node for node in self.nodes if node.id == node_id), None)

    def without_node(self, node_id: str) -> "VisualGraph":
        """Copy of the graph without the node and its connected edges."""
        return VisualGraph(
            nodes=[node for node in self.nodes if node.id != node_id],
            edges=[edge for edge in self.edges if not edge.touches(node_id)],
        )

    def without_dangling_edges(self) -> "VisualGraph":
        """Copy of the graph keeping only edges whose endpoints both exist."""
        node_ids = {node.id for node in self.nodes}
        return VisualGraph(
            nodes=list(self.nodes),
            edges=[
                edge for edge in self.edges
                if edge.source in node_ids and edge.target in node_ids
            ],
        )

    def validate(self) -> List[str]:
        """Validate flow for common issues."""
        errors = []

        # Check for orphaned edges
        node_ids = {node.id for node in self.nodes}
        for edge in self.edges:
            if edge.source not in node_ids:
                errors.append(f"Edge {edge.id} references unknown source node: {edge.source}")
            if edge.target not in node_ids:
                errors.append(f"Edge {edge.id} references unknown target node: {edge.target}")

        return errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
        }

    @classmethod
    def from_dict(cls, data: Any) -> "VisualGraph":
        if not isinstance(data, Mapping):
            raise DocumentError("visual graph must be an object")
        return cls(
            nodes=[FlowNode.from_dict(node) for node in data.get("nodes") or []],
            edges=[FlowEdge.from_dict(edge) for edge in data.get("edges") or []],
        )
