"""REST API for the workflow editor."""

from workflow_editor.api.rest.app import create_app
from workflow_editor.api.rest.router import router

__all__ = ["create_app", "router"]
