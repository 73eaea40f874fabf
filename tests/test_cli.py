"""
Tests for the workflow-editor command line.
"""

import json

import pytest
import yaml
from click.testing import CliRunner

from cli.main import cli


@pytest.fixture
def runner():
    return CliRunner()


def run(runner, *args):
    return runner.invoke(cli, [str(arg) for arg in args], catch_exceptions=False)


def test_version(runner):
    result = run(runner, "--version")
    assert result.exit_code == 0
    assert "1.0.0" in result.output


def test_graph(runner, document_file, catalog_file):
    result = run(runner, "graph", document_file, "--catalog", catalog_file)

    assert result.exit_code == 0
    graph = json.loads(result.stdout)
    assert [edge["id"] for edge in graph["edges"]] == ["en1-main-n2-main"]
    assert graph["nodes"][1]["data"]["action_display_name"] == "HTTP Request"


def test_graph_invalid_document(runner, tmp_path):
    path = tmp_path / "broken.json"
    path.write_text('{"nodes": [')

    result = run(runner, "graph", path)
    assert result.exit_code == 1


def test_document_from_graph(runner, tmp_path, document_file):
    graph_file = tmp_path / "graph.json"
    graph_file.write_text(json.dumps({
        "nodes": [
            {"id": "n1", "position": {"x": 5, "y": 6}, "data": {"node_key": "n1", "integration_type": "manual.trigger"}},
            {"id": "n2", "position": {"x": 7, "y": 8}, "data": {"node_key": "n2", "integration_type": "http.request"}},
        ],
        "edges": [{"source": "n1", "target": "n2", "sourceHandle": "main", "targetHandle": "main"}],
    }))

    result = run(runner, "document", graph_file, "--base", document_file)

    assert result.exit_code == 0
    document = json.loads(result.stdout)
    assert document["id"] == "wf_1"
    assert document["variables"] == {"env": "test"}
    assert [node["x"] for node in document["nodes"]] == [5, 7]
    assert document["connections"]["n1"]["main"][0]["to"] == "n2"


def test_ports(runner, catalog_file):
    result = run(runner, "ports", "slack.send_message", "--catalog", catalog_file)

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {
        "type": "slack.send_message",
        "input_ports": ["main"],
        "output_ports": ["main"],
        "action_display_name": "Send Message",
    }


def test_ports_static_table(runner):
    result = run(runner, "ports", "logic.if_condition")
    assert json.loads(result.stdout)["output_ports"] == ["true", "false"]


def test_check_valid(runner, document_file, catalog_file):
    result = run(runner, "check", document_file, "--catalog", catalog_file, "--verbose")

    assert result.exit_code == 0
    assert "is valid" in result.stdout
    assert "manual.trigger" in result.stdout


def test_check_invalid(runner, tmp_path):
    path = tmp_path / "dupes.json"
    path.write_text(json.dumps({
        "nodes": [
            {"id": "a", "key": "same", "type": "x.y"},
            {"id": "b", "key": "same", "type": "x.y"},
        ]
    }))

    result = run(runner, "check", path)
    assert result.exit_code == 1


def test_export_default_file(runner, document_file):
    with runner.isolated_filesystem():
        result = run(runner, "export", document_file)

        assert result.exit_code == 0
        assert "workflow.json" in result.stdout
        with open("workflow.json") as f:
            assert json.load(f)["id"] == "wf_1"


def test_export_yaml_stdout(runner, document_file):
    result = run(runner, "export", document_file, "--format", "yaml", "-o", "-")

    assert result.exit_code == 0
    assert yaml.safe_load(result.stdout)["name"] == "Demo"


def test_add_node(runner, document_file, catalog_file, tmp_path):
    output = tmp_path / "out.json"
    result = run(
        runner, "add-node", document_file,
        "--integration", "slack", "--action", "send_message",
        "--catalog", catalog_file, "-o", output
    )

    assert result.exit_code == 0
    document = json.loads(output.read_text())
    assert len(document["nodes"]) == 3
    assert document["nodes"][0]["type"] == "slack.send_message"
    assert document["nodes"][0]["name"] == "Send Message"
    assert document["nodes"][0]["key"].startswith("send_message_")


def test_add_node_unknown_integration(runner, document_file, catalog_file):
    result = run(
        runner, "add-node", document_file,
        "--integration", "github", "--action", "create_issue",
        "--catalog", catalog_file
    )
    assert result.exit_code == 1


def test_search(runner, catalog_file):
    result = run(runner, "search", "message", "--catalog", catalog_file)

    assert result.exit_code == 0
    assert "Send Message [slack.send_message]" in result.stdout
    assert "HTTP Request" not in result.stdout


def test_search_no_results(runner, catalog_file):
    result = run(runner, "search", "nothing-matches", "--catalog", catalog_file)
    assert "No actions found" in result.stdout
