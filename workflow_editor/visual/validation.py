"""Document checks shared by the command line and the REST surface."""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from workflow_editor.document.catalog import IntegrationCatalog
from workflow_editor.document.models import WorkflowDocument
from workflow_editor.visual.converter import to_document, to_graph
from workflow_editor.visual.ports import split_node_type


@dataclass
class ValidationReport:
    """Result of checking a workflow document."""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    stats: Dict[str, int] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.is_valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "stats": dict(self.stats),
        }


def validate_document(document: WorkflowDocument, catalog: IntegrationCatalog) -> ValidationReport:
    """Check that a document converts to a graph and back without loss.

    Dangling edges and node types missing from the catalog are reported as
    warnings; the editor tolerates both.
    """
    report = ValidationReport()
    graph = to_graph(document, catalog)
    rebuilt = to_document(document, graph)

    # Nodes without key or id get a fresh one, anything else must survive
    expected_keys = [node.key or node.id for node in document.nodes]
    rebuilt_keys = [node.key for node in rebuilt.nodes]
    if len(expected_keys) != len(rebuilt_keys) or any(
        expected is not None and expected != actual
        for expected, actual in zip(expected_keys, rebuilt_keys)
    ):
        report.errors.append("Node keys changed during graph conversion")
    if rebuilt.connection_tuples() != document.connection_tuples():
        report.errors.append("Connections changed during graph conversion")

    report.warnings.extend(graph.validate())

    for node in document.nodes:
        integration_name, action_key = split_node_type(node.type)
        if catalog.get_action(integration_name, action_key) is None:
            report.warnings.append(f"Node {node.key} has a type not in the catalog: {node.type}")

    connected = set()
    for edge in graph.edges:
        connected.add(edge.source)
        connected.add(edge.target)
    disconnected = [node.node_key for node in graph.nodes if node.id not in connected]
    if disconnected and len(graph.nodes) > 1:
        report.warnings.append(f"Disconnected nodes found: {', '.join(disconnected)}")

    report.stats = {
        "nodes": len(graph.nodes),
        "edges": len(graph.edges),
        "node_types": len({node.type for node in document.nodes if node.type}),
    }
    return report
