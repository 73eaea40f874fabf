"""Stateless conversion endpoints for editor hosts."""

from typing import Any, Dict, List

import structlog
from fastapi import APIRouter, HTTPException

from workflow_editor.api.rest.models import (
    ExportRequest,
    ExportResponse,
    PortsRequest,
    PortsResponse,
    ToDocumentRequest,
    ToGraphRequest,
    ValidateRequest,
    ValidationResult,
)
from workflow_editor.config import get_settings
from workflow_editor.document.catalog import IntegrationCatalog
from workflow_editor.document.models import EXPORT_FORMATS, WorkflowDocument
from workflow_editor.exceptions import DocumentError
from workflow_editor.visual.converter import to_document, to_graph
from workflow_editor.visual.flow import VisualGraph
from workflow_editor.visual.ports import get_node_ports
from workflow_editor.visual.validation import validate_document

logger = structlog.get_logger(__name__)
router = APIRouter(tags=["workflow-editor"])


def _parse_document(data: Dict[str, Any]) -> WorkflowDocument:
    try:
        return WorkflowDocument.from_dict(data)
    except DocumentError as e:
        logger.info("request_document_rejected", error=str(e))
        raise HTTPException(status_code=400, detail=f"Invalid workflow document: {e}")


def _parse_catalog(data: List[Dict[str, Any]]) -> IntegrationCatalog:
    try:
        return IntegrationCatalog.from_list(data)
    except DocumentError as e:
        raise HTTPException(status_code=400, detail=f"Invalid integration catalog: {e}")


@router.post("/to-graph")
async def document_to_graph(request: ToGraphRequest):
    """Convert a workflow document to its visual graph."""
    document = _parse_document(request.document)
    catalog = _parse_catalog(request.catalog)
    return to_graph(document, catalog).to_dict()


@router.post("/to-document")
async def graph_to_document(request: ToDocumentRequest):
    """Rebuild a workflow document from a visual graph."""
    base = _parse_document(request.base)
    try:
        graph = VisualGraph.from_dict(request.graph)
    except DocumentError as e:
        raise HTTPException(status_code=400, detail=f"Invalid visual graph: {e}")
    return to_document(base, graph).to_dict()


@router.post("/ports", response_model=PortsResponse)
async def resolve_ports(request: PortsRequest):
    """Resolve input/output ports and label for a node type."""
    catalog = _parse_catalog(request.catalog)
    ports = get_node_ports(request.node_type, catalog)
    return PortsResponse(
        node_type=request.node_type,
        input_ports=ports.input_ports,
        output_ports=ports.output_ports,
        action_display_name=ports.action_display_name,
    )


@router.post("/export", response_model=ExportResponse)
async def export_document(request: ExportRequest):
    """Serialize a workflow document for download."""
    if request.format not in EXPORT_FORMATS:
        raise HTTPException(status_code=400, detail=f"Unsupported export format: {request.format}")

    settings = get_settings()
    document = _parse_document(request.document)
    return ExportResponse(
        filename=request.filename or settings.export_filename,
        format=request.format,
        content=document.export(request.format, indent=settings.export_indent),
    )


@router.post("/validate", response_model=ValidationResult)
async def validate(request: ValidateRequest):
    """Check a workflow document against the converter."""
    catalog = _parse_catalog(request.catalog)
    try:
        document = WorkflowDocument.from_dict(request.document)
    except DocumentError as e:
        return ValidationResult(valid=False, errors=[str(e)])

    return ValidationResult(**validate_document(document, catalog).to_dict())
