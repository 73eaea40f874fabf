# workflow_editor/document/models.py
"""Canonical workflow document models.

The workflow document is the persistable, server-friendly form of a
workflow: an ordered list of node records plus a ``connections`` map keyed
by source node key and source port. Everything the editor shows is derived
from it.
"""

import copy
import json
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

import structlog
import yaml

from workflow_editor.exceptions import DocumentError, ExportFormatError

logger = structlog.get_logger(__name__)

DEFAULT_PORT = "main"

EXPORT_FORMATS = ("json", "yaml")

# (from key, from port, to key, to port)
ConnectionTuple = Tuple[str, str, str, str]

_DOCUMENT_FIELDS = ("id", "name", "version", "variables", "nodes", "connections")


@dataclass
class ConnectionTarget:
    """One directed connection out of a source port."""
    to: str
    from_node: str
    to_port: str = DEFAULT_PORT
    from_port: str = DEFAULT_PORT

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format."""
        return {
            "to": self.to,
            "from": self.from_node,
            "to_port": self.to_port,
            "from_port": self.from_port,
        }

    @classmethod
    def from_dict(
        cls,
        data: Any,
        source_key: str,
        source_port: str,
        path: str = ""
    ) -> "ConnectionTarget":
        """Create from dictionary, filling ``from``/``from_port`` from the enclosing map."""
        if not isinstance(data, Mapping):
            raise DocumentError("connection target must be an object", path)

        to = data.get("to")
        if not isinstance(to, str) or not to:
            raise DocumentError("connection target needs a 'to' node key", path)

        return cls(
            to=to,
            from_node=data.get("from") or source_key,
            to_port=data.get("to_port") or DEFAULT_PORT,
            from_port=data.get("from_port") or source_port,
        )


Connections = Dict[str, Dict[str, List[ConnectionTarget]]]


@dataclass
class NodeRecord:
    """A single action instance in a workflow document."""
    id: Optional[str] = None
    key: Optional[str] = None
    name: str = ""
    type: str = ""
    params: Dict[str, Any] = field(default_factory=dict)
    x: float = 0
    y: float = 0

    def __post_init__(self):
        # The id doubles as the key when no key was given
        if self.key is None:
            self.key = self.id

    @property
    def integration(self) -> str:
        return self.type.partition(".")[0]

    @property
    def action(self) -> str:
        return self.type.partition(".")[2]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format."""
        return {
            "id": self.id,
            "key": self.key,
            "name": self.name,
            "type": self.type,
            "params": self.params,
            "x": self.x,
            "y": self.y,
        }

    @classmethod
    def from_dict(cls, data: Any, path: str = "") -> "NodeRecord":
        """Create from dictionary."""
        if not isinstance(data, Mapping):
            raise DocumentError("node must be an object", path)

        node_type = data.get("type")
        if not isinstance(node_type, str) or not node_type:
            raise DocumentError("node needs a string 'type'", path)

        params = data.get("params")
        if params is None:
            params = {}
        elif not isinstance(params, Mapping):
            raise DocumentError("node 'params' must be an object", path)

        position = {}
        for axis in ("x", "y"):
            value = data.get(axis, 0)
            if value is None:
                value = 0
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise DocumentError(f"node '{axis}' must be a number", path)
            position[axis] = value

        node_id = data.get("id")
        node_key = data.get("key")

        return cls(
            id=str(node_id) if node_id not in (None, "") else None,
            key=str(node_key) if node_key not in (None, "") else None,
            name=data.get("name") or "",
            type=node_type,
            params=dict(params),
            x=position["x"],
            y=position["y"],
        )


@dataclass
class WorkflowDocument:
    """Canonical workflow document.

    ``extra`` carries top-level fields this model does not know about so
    they survive a load/export cycle unchanged.
    """
    id: Any = ""
    name: str = ""
    version: int = 1
    variables: Dict[str, Any] = field(default_factory=dict)
    nodes: List[NodeRecord] = field(default_factory=list)
    connections: Connections = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)

    def get_node(self, node_id: str) -> Optional[NodeRecord]:
        """Get node by ID."""
        return next((node for node in self.nodes if node.id == node_id), None)

    def node_keys(self) -> List[str]:
        """Keys of all nodes, in document order."""
        return [node.key for node in self.nodes if node.key is not None]

    def connection_tuples(self) -> "Counter[ConnectionTuple]":
        """Connections as a multiset of (from, from_port, to, to_port)."""
        return Counter(
            (source_key, source_port, target.to, target.to_port)
            for source_key, ports in self.connections.items()
            for source_port, targets in ports.items()
            for target in targets
        )

    def copy(self) -> "WorkflowDocument":
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary format."""
        data = {
            "id": self.id,
            "name": self.name,
            "version": self.version,
            "variables": self.variables,
            "nodes": [node.to_dict() for node in self.nodes],
            "connections": {
                source_key: {
                    source_port: [target.to_dict() for target in targets]
                    for source_port, targets in ports.items()
                }
                for source_key, ports in self.connections.items()
            },
        }
        data.update(self.extra)
        return data

    @classmethod
    def from_dict(cls, data: Any) -> "WorkflowDocument":
        """Create from dictionary.

        Raises:
            DocumentError: if the structure is not a valid workflow document,
                including duplicate node keys or duplicate connection targets.
        """
        if not isinstance(data, Mapping):
            raise DocumentError("workflow document must be an object")

        raw_nodes = data.get("nodes") or []
        if not isinstance(raw_nodes, list):
            raise DocumentError("'nodes' must be a list", "nodes")

        nodes = [
            NodeRecord.from_dict(raw_node, f"nodes[{index}]")
            for index, raw_node in enumerate(raw_nodes)
        ]

        seen_keys = set()
        for index, node in enumerate(nodes):
            if node.key is None:
                continue
            if node.key in seen_keys:
                raise DocumentError(f"duplicate node key '{node.key}'", f"nodes[{index}]")
            seen_keys.add(node.key)

        connections = cls._parse_connections(data.get("connections") or {})

        variables = data.get("variables")
        if variables is None:
            variables = {}
        elif not isinstance(variables, Mapping):
            raise DocumentError("'variables' must be an object", "variables")

        version = data.get("version", 1)
        try:
            version = int(version)
        except (TypeError, ValueError):
            raise DocumentError("'version' must be an integer", "version")

        return cls(
            id=data.get("id", ""),
            name=data.get("name") or "",
            version=version,
            variables=dict(variables),
            nodes=nodes,
            connections=connections,
            extra={
                key: value for key, value in data.items()
                if key not in _DOCUMENT_FIELDS
            },
        )

    @staticmethod
    def _parse_connections(raw: Any) -> Connections:
        if not isinstance(raw, Mapping):
            raise DocumentError("'connections' must be an object", "connections")

        connections: Connections = {}
        seen = set()

        for source_key, ports in raw.items():
            path = f"connections.{source_key}"
            if not isinstance(ports, Mapping):
                raise DocumentError("ports must be an object", path)

            connections[source_key] = {}
            for source_port, targets in ports.items():
                port_path = f"{path}.{source_port}"
                if not isinstance(targets, list):
                    raise DocumentError("connection targets must be a list", port_path)

                parsed = []
                for index, raw_target in enumerate(targets):
                    target = ConnectionTarget.from_dict(
                        raw_target, source_key, source_port, f"{port_path}[{index}]"
                    )
                    identity = (source_key, source_port, target.to, target.to_port)
                    if identity in seen:
                        raise DocumentError(
                            f"duplicate connection to '{target.to}.{target.to_port}'",
                            f"{port_path}[{index}]"
                        )
                    seen.add(identity)
                    parsed.append(target)

                connections[source_key][source_port] = parsed

        return connections

    def export(self, fmt: str = "json", indent: int = 2) -> str:
        """Serialize the document as text."""
        if fmt == "json":
            return json.dumps(self.to_dict(), indent=indent)
        if fmt == "yaml":
            return yaml.safe_dump(self.to_dict(), default_flow_style=False, sort_keys=False)
        raise ExportFormatError(fmt)

    @classmethod
    def parse(cls, text: str, fmt: str = "json") -> "WorkflowDocument":
        """Parse raw text into a document.

        Raises:
            DocumentError: for unparseable text or an invalid structure.
        """
        if fmt == "json":
            try:
                data = json.loads(text)
            except json.JSONDecodeError as e:
                raise DocumentError(f"invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})")
        elif fmt == "yaml":
            try:
                data = yaml.safe_load(text)
            except yaml.YAMLError as e:
                raise DocumentError(f"invalid YAML: {e}")
        else:
            raise ExportFormatError(fmt)

        return cls.from_dict(data)
