# cli/commands/convert.py
"""Document and visual graph conversion commands."""

import json
import sys
from pathlib import Path
from typing import Any, Optional

import click

from workflow_editor.config import get_settings
from workflow_editor.document.loader import read_catalog, read_document
from workflow_editor.document.models import EXPORT_FORMATS, WorkflowDocument
from workflow_editor.exceptions import WorkflowEditorError
from workflow_editor.visual.converter import to_document, to_graph
from workflow_editor.visual.flow import VisualGraph
from workflow_editor.visual.ports import get_node_ports
from workflow_editor.visual.validation import validate_document


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=get_settings().export_indent))


def _fail(message: str) -> None:
    click.echo(f"❌ {message}", err=True)
    sys.exit(1)


@click.command()
@click.argument('document_file', type=click.Path(exists=True, path_type=Path))
@click.option('--catalog', '-c', 'catalog_file', type=click.Path(exists=True, path_type=Path),
              help='Integration catalog JSON file')
def graph(document_file: Path, catalog_file: Optional[Path]):
    """Print the visual graph for a workflow document."""
    try:
        workflow = read_document(document_file)
        catalog = read_catalog(catalog_file)
    except WorkflowEditorError as e:
        _fail(f"Could not load workflow: {e}")
        return

    _echo_json(to_graph(workflow, catalog).to_dict())


@click.command()
@click.argument('graph_file', type=click.Path(exists=True, path_type=Path))
@click.option('--base', '-b', 'base_file', type=click.Path(exists=True, path_type=Path),
              help='Document supplying id, name, version and variables')
def document(graph_file: Path, base_file: Optional[Path]):
    """Print the workflow document rebuilt from a visual graph file."""
    try:
        base = read_document(base_file) if base_file else WorkflowDocument()
        visual_graph = VisualGraph.from_dict(json.loads(graph_file.read_text(encoding="utf-8")))
    except json.JSONDecodeError as e:
        _fail(f"Invalid graph JSON: {e.msg}")
        return
    except WorkflowEditorError as e:
        _fail(f"Could not load graph: {e}")
        return

    _echo_json(to_document(base, visual_graph).to_dict())


@click.command()
@click.argument('node_type')
@click.option('--catalog', '-c', 'catalog_file', type=click.Path(exists=True, path_type=Path),
              help='Integration catalog JSON file')
def ports(node_type: str, catalog_file: Optional[Path]):
    """Print the input/output ports resolved for NODE_TYPE (integration.action)."""
    try:
        catalog = read_catalog(catalog_file)
    except WorkflowEditorError as e:
        _fail(f"Could not load catalog: {e}")
        return

    resolved = get_node_ports(node_type, catalog)
    _echo_json({
        "type": node_type,
        "input_ports": resolved.input_ports,
        "output_ports": resolved.output_ports,
        "action_display_name": resolved.action_display_name,
    })


@click.command()
@click.argument('document_file', type=click.Path(exists=True, path_type=Path))
@click.option('--catalog', '-c', 'catalog_file', type=click.Path(exists=True, path_type=Path),
              help='Integration catalog JSON file')
@click.option('--verbose', '-v', is_flag=True, help='Show statistics')
def check(document_file: Path, catalog_file: Optional[Path], verbose: bool):
    """Check that a workflow document survives graph conversion."""
    try:
        workflow = read_document(document_file)
        catalog = read_catalog(catalog_file)
    except WorkflowEditorError as e:
        _fail(f"Workflow check failed: {e}")
        return

    report = validate_document(workflow, catalog)

    for warning in report.warnings:
        click.echo(f"⚠️  {warning}")
    for error in report.errors:
        click.echo(f"❌ {error}", err=True)

    if verbose:
        for name, value in report.stats.items():
            click.echo(f"   {name}: {value}")

    if not report.is_valid:
        sys.exit(1)
    click.echo(f"✅ Workflow '{workflow.name or workflow.id}' is valid")


@click.command()
@click.argument('document_file', type=click.Path(exists=True, path_type=Path))
@click.option('--format', '-f', 'fmt', type=click.Choice(EXPORT_FORMATS), default='json',
              help='Output format')
@click.option('--output', '-o', help="Output file, or '-' for stdout (default: workflow.json)")
def export(document_file: Path, fmt: str, output: Optional[str]):
    """Export a workflow document as JSON or YAML."""
    try:
        workflow = read_document(document_file)
    except WorkflowEditorError as e:
        _fail(f"Could not load workflow: {e}")
        return

    settings = get_settings()
    content = workflow.export(fmt, indent=settings.export_indent)

    if output == '-':
        click.echo(content)
        return

    target = Path(output or settings.export_filename)
    if output is None and fmt == 'yaml':
        target = target.with_suffix('.yaml')

    target.write_text(content if content.endswith('\n') else content + '\n', encoding="utf-8")
    click.echo(f"✅ Exported to {target}")
