"""Exceptions raised by the workflow editor core."""


class WorkflowEditorError(Exception):
    """Base exception for workflow editor errors."""
    pass


class DocumentError(WorkflowEditorError):
    """Raised when a workflow document is structurally invalid."""

    def __init__(self, message: str, path: str = ""):
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


class UnknownIntegrationError(WorkflowEditorError):
    """Raised when an integration is missing from the catalog."""

    def __init__(self, integration_name: str):
        self.integration_name = integration_name
        super().__init__(f"Unknown integration: {integration_name}")


class ExportFormatError(WorkflowEditorError):
    """Raised for an unsupported export format."""

    def __init__(self, fmt: str):
        self.format = fmt
        super().__init__(f"Unsupported export format: {fmt}")
