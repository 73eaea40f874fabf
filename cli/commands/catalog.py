# cli/commands/catalog.py
"""Integration catalog commands."""

import sys
from pathlib import Path
from typing import Optional

import click

from workflow_editor.config import get_settings
from workflow_editor.document.loader import read_catalog, read_document
from workflow_editor.exceptions import WorkflowEditorError
from workflow_editor.visual.nodes import add_node_to_document, create_node_from_action


@click.command(name='add-node')
@click.argument('document_file', type=click.Path(exists=True, path_type=Path))
@click.option('--integration', '-i', required=True, help='Integration name')
@click.option('--action', '-a', 'action_key', required=True, help='Action key')
@click.option('--catalog', '-c', 'catalog_file', required=True,
              type=click.Path(exists=True, path_type=Path), help='Integration catalog JSON file')
@click.option('--output', '-o', type=click.Path(path_type=Path), help='Write the document here instead of stdout')
def add_node(document_file: Path, integration: str, action_key: str, catalog_file: Path, output: Optional[Path]):
    """Add a node for an integration action to a workflow document."""
    settings = get_settings()

    try:
        workflow = read_document(document_file)
        catalog = read_catalog(catalog_file)
        node = create_node_from_action(
            action_key,
            catalog.require_integration(integration),
            existing_keys=workflow.node_keys(),
            x=settings.default_node_x,
            y=settings.default_node_y,
        )
    except WorkflowEditorError as e:
        click.echo(f"❌ Could not add node: {e}", err=True)
        sys.exit(1)

    content = add_node_to_document(workflow, node).export("json", indent=settings.export_indent)

    if output:
        output.write_text(content + "\n", encoding="utf-8")
        click.echo(f"✅ Added node '{node.key}' ({node.type}) to {output}")
    else:
        click.echo(content)


@click.command()
@click.argument('query', default='')
@click.option('--catalog', '-c', 'catalog_file', required=True,
              type=click.Path(exists=True, path_type=Path), help='Integration catalog JSON file')
def search(query: str, catalog_file: Path):
    """Search catalog actions by display name or description."""
    try:
        catalog = read_catalog(catalog_file)
    except WorkflowEditorError as e:
        click.echo(f"❌ Could not load catalog: {e}", err=True)
        sys.exit(1)

    results = catalog.search(query)
    if not results:
        click.echo(f"No actions found matching '{query}'")
        return

    for integration_name, actions in results.items():
        integration = catalog.get_integration(integration_name)
        click.echo(f"{integration.display_name} ({integration_name})")
        for action in actions:
            line = f"  • {action.label} [{integration_name}.{action.key}]"
            if action.description:
                line += f" - {action.description}"
            click.echo(line)
