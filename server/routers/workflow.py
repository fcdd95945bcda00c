"""Workflow execution routes."""

from typing import Dict, Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ValidationError

from core.container import container
from services.execution import CyclePolicy
from services.workflow import WorkflowService
from core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/api/workflow", tags=["workflow"])


class WorkflowGraphRequest(BaseModel):
    nodes: List[Dict[str, Any]] = []
    edges: List[Dict[str, Any]] = []


class WorkflowExecutionRequest(WorkflowGraphRequest):
    cycle_policy: Optional[CyclePolicy] = None


class ExtractRequest(BaseModel):
    nodes: List[Dict[str, Any]] = []


def _invalid_graph(e: ValidationError) -> HTTPException:
    return HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))


@router.post("/execute")
async def execute_workflow(
    request: WorkflowExecutionRequest,
    workflow_service: WorkflowService = Depends(lambda: container.workflow_service())
):
    """Run a workflow once from its trigger node."""
    logger.info("Workflow execution requested",
                node_count=len(request.nodes), edge_count=len(request.edges))
    try:
        return await workflow_service.execute_workflow(
            nodes=request.nodes,
            edges=request.edges,
            cycle_policy=request.cycle_policy,
        )
    except ValidationError as e:
        raise _invalid_graph(e) from e


@router.post("/resolve-connections")
async def resolve_connections(
    request: WorkflowGraphRequest,
    workflow_service: WorkflowService = Depends(lambda: container.workflow_service())
):
    """Attach connection info and propagated fields to every node."""
    try:
        return {"nodes": workflow_service.resolve_connections(request.nodes, request.edges)}
    except ValidationError as e:
        raise _invalid_graph(e) from e


@router.post("/extract")
async def extract_workflow_data(
    request: ExtractRequest,
    workflow_service: WorkflowService = Depends(lambda: container.workflow_service())
):
    """Summarize each node's canonical fields."""
    try:
        return {"data": workflow_service.extract_workflow_data(request.nodes)}
    except ValidationError as e:
        raise _invalid_graph(e) from e
