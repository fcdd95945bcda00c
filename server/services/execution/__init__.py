"""Execution engine package.

Single-path workflow interpretation with:
- Connection resolution (upstream/downstream maps, idea -> draft prompt)
- Trigger-to-end state machine with conditional branching
- Configurable cycle policy
- Node data extraction for reporting
"""

from .models import (
    TaskStatus,
    CyclePolicy,
    ExecutionContext,
    NodeExecution,
)
from .exceptions import (
    WorkflowError,
    NoStartNodeError,
    ActionFailedError,
    CycleDetectedError,
)
from .connections import (
    build_connection_map,
    resolve_connections,
)
from .conditions import (
    evaluate_condition,
)
from .executor import WorkflowExecutor
from .extractor import (
    extract_workflow_data,
    extract_node_data_map,
)

__all__ = [
    # Models
    "TaskStatus",
    "CyclePolicy",
    "ExecutionContext",
    "NodeExecution",
    # Errors
    "WorkflowError",
    "NoStartNodeError",
    "ActionFailedError",
    "CycleDetectedError",
    # Connections
    "build_connection_map",
    "resolve_connections",
    # Conditions
    "evaluate_condition",
    # Executor
    "WorkflowExecutor",
    # Extraction
    "extract_workflow_data",
    "extract_node_data_map",
]
