# cli/main.py
"""Main CLI entry point for the Workflow Editor."""

import click

from workflow_editor import __version__
from workflow_editor.config import get_settings
from workflow_editor.utils.logging import setup_logging


@click.group()
@click.version_option(version=__version__)
@click.option('--log-level', default=None, help='Log level (defaults to WORKFLOW_EDITOR_LOG_LEVEL)')
@click.option('--json-logs', is_flag=True, help='Emit logs as JSON')
def cli(log_level, json_logs):
    """Workflow Editor CLI - Convert, inspect and edit workflow documents."""
    settings = get_settings()
    setup_logging(log_level or settings.log_level, json_logs or settings.log_json)


# Import and register commands
def register_commands():
    """Register all CLI commands."""
    # Conversion commands
    from cli.commands.convert import graph, document, ports, check, export
    for command in (graph, document, ports, check, export):
        cli.add_command(command)

    # Catalog commands
    from cli.commands.catalog import add_node, search
    cli.add_command(add_node)
    cli.add_command(search)


# Register all commands
register_commands()


if __name__ == '__main__':
    cli()
