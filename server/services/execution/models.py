"""Execution engine state models.

All models are JSON-serializable so a run's state can be returned to the
client as-is.
"""

import copy
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List, Optional, Set

from core.logging import get_logger
from constants import is_trigger_type
from models.nodes import WorkflowNode, Edge, node_data_dict

logger = get_logger(__name__)


class TaskStatus(str, Enum):
    """Node execution states.

    State transitions:
        PENDING -> RUNNING -> COMPLETED
                           -> FAILED
    """
    PENDING = "pending"        # Not visited (yet)
    RUNNING = "running"        # Awaiting its collaborator call
    COMPLETED = "completed"    # Action applied to node data
    FAILED = "failed"          # Collaborator call raised


class CyclePolicy(str, Enum):
    """What to do when execution would revisit a node."""
    LENIENT = "lenient"        # Stop silently, run counts as completed
    STRICT = "strict"          # Raise CycleDetectedError


@dataclass
class NodeExecution:
    """Tracks execution state for a single node."""
    node_id: str
    node_type: str
    status: TaskStatus = TaskStatus.PENDING
    error: Optional[str] = None
    started_at: Optional[float] = None
    completed_at: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "node_id": self.node_id,
            "node_type": self.node_type,
            "status": self.status.value,
            "error": self.error,
            "started_at": self.started_at,
            "completed_at": self.completed_at,
        }


@dataclass
class ExecutionContext:
    """Isolated execution context for one workflow run.

    Owns the run's node_data map exclusively. Nodes and edges are the
    snapshot taken at construction; node_data starts as a deep copy of each
    node's payload and is the only thing actions write to.
    """
    execution_id: str
    nodes: List[WorkflowNode] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)

    node_data: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    current_node_id: Optional[str] = None

    # Execution tracking
    node_executions: Dict[str, NodeExecution] = field(default_factory=dict)
    visited: Set[str] = field(default_factory=set)
    exec_path: List[str] = field(default_factory=list)
    # Conditional node id -> last evaluated condition result
    branch_results: Dict[str, bool] = field(default_factory=dict)
    errors: List[Dict[str, Any]] = field(default_factory=list)

    created_at: float = field(default_factory=time.time)
    started_at: Optional[float] = None
    completed_at: Optional[float] = None

    @classmethod
    def create(cls, nodes: List[WorkflowNode], edges: List[Edge]) -> "ExecutionContext":
        """Factory method to create a new execution context.

        The start node is the first trigger node in node order. Extra trigger
        nodes are ignored.
        """
        ctx = cls(
            execution_id=str(uuid.uuid4())[:8],
            nodes=list(nodes),
            edges=list(edges),
        )

        for node in ctx.nodes:
            ctx.node_data[node.id] = copy.deepcopy(node_data_dict(node))
            ctx.node_executions[node.id] = NodeExecution(node_id=node.id, node_type=node.type)

        triggers = [n.id for n in ctx.nodes if is_trigger_type(n.type)]
        if triggers:
            ctx.current_node_id = triggers[0]
        if len(triggers) > 1:
            logger.warning("Multiple trigger nodes, using the first",
                           execution_id=ctx.execution_id,
                           start_node=triggers[0],
                           ignored=triggers[1:])

        return ctx

    def get_node(self, node_id: str) -> Optional[WorkflowNode]:
        """Look up a node by id."""
        return next((n for n in self.nodes if n.id == node_id), None)

    def get_outgoing_edges(self, node_id: str) -> List[Edge]:
        """All edges leaving a node, in edge list order."""
        return [e for e in self.edges if e.source == node_id]

    def set_node_status(self, node_id: str, status: TaskStatus, error: Optional[str] = None) -> None:
        """Update node execution status."""
        node_exec = self.node_executions.get(node_id)
        if node_exec is None:
            return
        node_exec.status = status
        if status == TaskStatus.RUNNING:
            node_exec.started_at = time.time()
        elif status in (TaskStatus.COMPLETED, TaskStatus.FAILED):
            node_exec.completed_at = time.time()
        if error is not None:
            node_exec.error = error

    def execution_state(self) -> Dict[str, Dict[str, Any]]:
        """Per-node execution state as plain dicts."""
        return {nid: ne.to_dict() for nid, ne in self.node_executions.items()}
