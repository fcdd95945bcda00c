"""Workflow Service - Facade for workflow execution.

Thin facade over the execution package:
- resolve_connections: connection maps and idea -> draft propagation
- WorkflowExecutor: one run from trigger to end
- extract_workflow_data: reporting snapshot

Converts execution errors into result dicts so callers get partial progress
alongside the failure.
"""

import time
from datetime import datetime
from typing import Dict, Any, List, Optional, Union, TYPE_CHECKING

from core.logging import get_logger
from models.nodes import node_to_dict, parse_nodes
from services.execution import (
    CyclePolicy,
    WorkflowExecutor,
    WorkflowError,
    resolve_connections,
    extract_workflow_data,
    extract_node_data_map,
)

if TYPE_CHECKING:
    from core.config import Settings
    from services.content_client import ContentCollaborators
    from services.execution.executor import StatusCallback

logger = get_logger(__name__)


class WorkflowService:
    """Workflow execution service."""

    def __init__(self, collaborators: "ContentCollaborators", settings: "Settings"):
        self.collaborators = collaborators
        self.settings = settings

    # =========================================================================
    # WORKFLOW EXECUTION
    # =========================================================================

    async def execute_workflow(
        self,
        nodes: List[Dict[str, Any]],
        edges: List[Dict[str, Any]],
        status_callback: Optional["StatusCallback"] = None,
        cycle_policy: Optional[Union[CyclePolicy, str]] = None,
    ) -> Dict[str, Any]:
        """Resolve connections, then run the workflow once.

        Args:
            nodes: Workflow nodes
            edges: Workflow edges
            status_callback: Status update callback
            cycle_policy: Override the configured cycle policy

        Raises:
            ValidationError: A node of a known type has invalid data
        """
        start_time = time.time()
        # Validate strictly here; resolution alone tolerates bad payloads
        resolved = resolve_connections(parse_nodes(nodes), edges)
        executor = WorkflowExecutor(
            resolved,
            edges,
            self.collaborators,
            cycle_policy=cycle_policy or self.settings.cycle_policy,
            status_callback=status_callback,
        )

        try:
            await executor.execute_workflow()
        except WorkflowError as e:
            logger.error("Workflow execution failed", error=str(e),
                         error_type=type(e).__name__, node_id=e.node_id)
            return self._error_result(executor, resolved, e, start_time)

        results = executor.get_execution_results()
        return {
            "success": True,
            "execution_id": results["execution_id"],
            "node_data": results["node_data"],
            "summary": extract_node_data_map(resolved, results["node_data"],
                                             results["branch_results"]),
            "exec_path": results["exec_path"],
            "execution_state": results["execution_state"],
            "errors": results["errors"],
            "execution_time": time.time() - start_time,
            "timestamp": datetime.now().isoformat(),
        }

    # =========================================================================
    # GRAPH HELPERS
    # =========================================================================

    def resolve_connections(self, nodes: List[Dict[str, Any]],
                            edges: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Resolve connections and return JSON-ready node dicts."""
        return [node_to_dict(node) for node in resolve_connections(nodes, edges)]

    def extract_workflow_data(self, nodes: List[Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
        """Summarize nodes for reporting."""
        return extract_workflow_data(nodes)

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _error_result(self, executor: WorkflowExecutor, resolved, error: WorkflowError,
                      start_time: float) -> Dict:
        """Build error result, keeping whatever the run completed."""
        results = executor.get_execution_results()
        return {
            "success": False,
            "error": str(error),
            "error_type": type(error).__name__,
            "node_id": error.node_id,
            "execution_id": results["execution_id"],
            "node_data": results["node_data"],
            "summary": extract_node_data_map(resolved, results["node_data"],
                                             results["branch_results"]),
            "exec_path": results["exec_path"],
            "execution_state": results["execution_state"],
            "errors": results["errors"],
            "execution_time": time.time() - start_time,
            "timestamp": datetime.now().isoformat(),
        }
