"""
Tests for workflow_editor.document models and catalog.
"""

import json

import pytest
import yaml

from workflow_editor.document.catalog import Action, IntegrationCatalog
from workflow_editor.document.models import ConnectionTarget, NodeRecord, WorkflowDocument
from workflow_editor.exceptions import DocumentError, ExportFormatError, UnknownIntegrationError


# ============================================================================
# NODE RECORDS
# ============================================================================

class TestNodeRecord:
    """Test NodeRecord parsing."""

    def test_key_defaults_to_id(self):
        node = NodeRecord.from_dict({"id": "n1", "type": "http.request"})
        assert node.key == "n1"

    def test_type_split(self):
        node = NodeRecord(id="n1", type="logic.if.nested")
        assert node.integration == "logic"
        assert node.action == "if.nested"

    def test_numeric_ids_become_strings(self):
        node = NodeRecord.from_dict({"id": 7, "key": 8, "type": "a.b"})
        assert node.id == "7"
        assert node.key == "8"

    def test_missing_type_rejected(self):
        with pytest.raises(DocumentError, match="type"):
            NodeRecord.from_dict({"id": "n1"}, "nodes[0]")

    def test_boolean_position_rejected(self):
        with pytest.raises(DocumentError, match="'x'"):
            NodeRecord.from_dict({"id": "n1", "type": "a.b", "x": True})

    def test_params_must_be_object(self):
        with pytest.raises(DocumentError, match="params"):
            NodeRecord.from_dict({"id": "n1", "type": "a.b", "params": [1, 2]})


# ============================================================================
# DOCUMENTS
# ============================================================================

class TestWorkflowDocument:
    """Test WorkflowDocument parsing and export."""

    def test_from_dict(self, document):
        assert document.id == "wf_1"
        assert document.name == "Demo"
        assert document.node_keys() == ["n1", "n2"]
        assert document.get_node("n2").params == {"url": "https://example.com"}
        target = document.connections["n1"]["main"][0]
        assert target == ConnectionTarget(to="n2", from_node="n1")

    def test_to_dict_round_trip(self, document_data):
        assert WorkflowDocument.from_dict(document_data).to_dict() == document_data

    def test_unknown_fields_preserved(self, document_data):
        document_data["settings"] = {"timezone": "UTC"}
        document = WorkflowDocument.from_dict(document_data)
        assert document.extra == {"settings": {"timezone": "UTC"}}
        assert document.to_dict()["settings"] == {"timezone": "UTC"}

    def test_connection_defaults_filled(self):
        document = WorkflowDocument.from_dict({
            "nodes": [],
            "connections": {"a": {"error": [{"to": "b"}]}},
        })
        target = document.connections["a"]["error"][0]
        assert target.from_node == "a"
        assert target.from_port == "error"
        assert target.to_port == "main"

    def test_empty_document(self):
        document = WorkflowDocument.from_dict({})
        assert document.nodes == []
        assert document.connections == {}
        assert document.version == 1

    def test_not_an_object(self):
        with pytest.raises(DocumentError):
            WorkflowDocument.from_dict([1, 2, 3])

    def test_nodes_must_be_list(self):
        with pytest.raises(DocumentError, match="nodes"):
            WorkflowDocument.from_dict({"nodes": {"n1": {}}})

    def test_duplicate_node_key_rejected(self):
        with pytest.raises(DocumentError, match="duplicate node key"):
            WorkflowDocument.from_dict({
                "nodes": [
                    {"id": "a", "key": "same", "type": "x.y"},
                    {"id": "b", "key": "same", "type": "x.y"},
                ]
            })

    def test_duplicate_connection_rejected(self):
        with pytest.raises(DocumentError, match="duplicate connection"):
            WorkflowDocument.from_dict({
                "connections": {"a": {"main": [{"to": "b"}, {"to": "b", "to_port": "main"}]}}
            })

    def test_target_without_to_rejected(self):
        with pytest.raises(DocumentError, match="connections.a.main\\[0\\]"):
            WorkflowDocument.from_dict({"connections": {"a": {"main": [{"to_port": "main"}]}}})

    def test_bad_version_rejected(self):
        with pytest.raises(DocumentError, match="version"):
            WorkflowDocument.from_dict({"version": "latest"})

    def test_connection_tuples(self, document):
        assert document.connection_tuples() == {("n1", "main", "n2", "main"): 1}

    def test_export_json(self, document):
        exported = document.export("json")
        assert json.loads(exported) == document.to_dict()
        assert '\n  "id": "wf_1"' in exported

    def test_export_yaml(self, document):
        assert yaml.safe_load(document.export("yaml")) == document.to_dict()

    def test_export_unknown_format(self, document):
        with pytest.raises(ExportFormatError):
            document.export("xml")

    def test_parse_invalid_json(self):
        with pytest.raises(DocumentError, match="invalid JSON"):
            WorkflowDocument.parse('{"nodes": [')

    def test_parse_yaml(self, document):
        assert WorkflowDocument.parse(document.export("yaml"), "yaml") == document

    def test_copy_is_deep(self, document):
        copied = document.copy()
        copied.nodes[1].params["url"] = "changed"
        assert document.nodes[1].params["url"] == "https://example.com"


# ============================================================================
# CATALOG
# ============================================================================

class TestIntegrationCatalog:
    """Test IntegrationCatalog lookups and search."""

    def test_lookup(self, catalog):
        assert len(catalog) == 2
        assert catalog.get_action("slack", "send_message").display_name == "Send Message"
        assert catalog.get_action("slack", "missing") is None
        assert catalog.get_action("missing", "send_message") is None

    def test_require_integration(self, catalog):
        assert catalog.require_integration("http").display_name == "HTTP"
        with pytest.raises(UnknownIntegrationError):
            catalog.require_integration("github")

    def test_declared_ports(self, catalog):
        action = catalog.get_action("slack", "send_message")
        assert action.input_ports == ["main"]
        assert action.output_ports == ["main"]
        assert catalog.get_action("http", "request").output_ports is None

    def test_actions_as_mapping(self):
        catalog = IntegrationCatalog.from_list([
            {"name": "github", "actions": {"create_issue": {"display_name": "Create Issue"}}}
        ])
        action = catalog.get_action("github", "create_issue")
        assert action.key == "create_issue"
        assert action.label == "Create Issue"

    def test_bare_action_keys(self):
        catalog = IntegrationCatalog.from_list([{"name": "github", "actions": ["star"]}])
        assert catalog.get_action("github", "star") == Action(key="star", display_name="star")

    def test_search_display_name_and_description(self, catalog):
        assert list(catalog.search("message")) == ["slack"]
        results = catalog.search("url")
        assert [action.key for action in results["http"]] == ["request"]

    def test_search_case_insensitive(self, catalog):
        assert [action.key for action in catalog.search("CREATE")["slack"]] == ["create_channel"]

    def test_search_empty_query_returns_all(self, catalog):
        results = catalog.search("")
        assert sum(len(actions) for actions in results.values()) == 3

    def test_search_no_match(self, catalog):
        assert catalog.search("nothing like this") == {}

    def test_malformed_catalog(self):
        with pytest.raises(DocumentError):
            IntegrationCatalog.from_list({"name": "http"})
        with pytest.raises(DocumentError):
            IntegrationCatalog.from_list([{"display_name": "No name"}])

    def test_to_list_round_trip(self, catalog):
        assert IntegrationCatalog.from_list(catalog.to_list()).to_list() == catalog.to_list()
