"""Pydantic models for REST API."""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ToGraphRequest(BaseModel):
    """Convert document to visual graph request."""
    document: Dict[str, Any]
    catalog: List[Dict[str, Any]] = Field(default_factory=list)


class ToDocumentRequest(BaseModel):
    """Convert visual graph to document request."""
    graph: Dict[str, Any]
    base: Dict[str, Any] = Field(default_factory=dict)


class PortsRequest(BaseModel):
    """Resolve ports for a node type request."""
    node_type: str
    catalog: List[Dict[str, Any]] = Field(default_factory=list)


class PortsResponse(BaseModel):
    """Resolved ports response."""
    node_type: str
    input_ports: List[str]
    output_ports: List[str]
    action_display_name: str


class ExportRequest(BaseModel):
    """Export document request."""
    document: Dict[str, Any]
    format: str = "json"
    filename: Optional[str] = None


class ExportResponse(BaseModel):
    """Exported document response."""
    filename: str
    format: str
    content: str


class ValidateRequest(BaseModel):
    """Validate document request."""
    document: Dict[str, Any]
    catalog: List[Dict[str, Any]] = Field(default_factory=list)


class ValidationResult(BaseModel):
    """Validation result."""
    valid: bool
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    stats: Dict[str, int] = Field(default_factory=dict)
