"""Workflow execution exception hierarchy."""

from typing import List, Optional


class WorkflowError(Exception):
    """Base exception for all workflow execution errors."""

    node_id: Optional[str] = None


class NoStartNodeError(WorkflowError):
    """The workflow graph has no trigger node to start from."""

    def __init__(self, message: str = "No start node found in workflow"):
        super().__init__(message)


class ActionFailedError(WorkflowError):
    """A node's collaborator call failed; the run stops at that node."""

    def __init__(self, node_id: str, cause: BaseException):
        self.node_id = node_id
        self.cause = cause
        super().__init__(f"Node '{node_id}' failed: {cause}")


class CycleDetectedError(WorkflowError):
    """Execution would revisit a node (strict cycle policy only)."""

    def __init__(self, node_id: str, path: List[str]):
        self.node_id = node_id
        self.path = list(path)
        trail = " -> ".join(self.path + [node_id])
        super().__init__(f"Cycle detected at node '{node_id}': {trail}")
