"""Workflow executor - single-path state machine over node ids.

Starts at the trigger node, runs each node's action, then follows exactly one
outgoing edge until the path ends or would revisit a node:
- Idea/draft/media nodes call a content collaborator and merge the result
  into their own node data
- Conditional nodes pick their "true" or "false" edge from a global condition
- Every other node forwards along its first outgoing edge (no fan-out)

Actions run strictly one at a time; the only suspension point is the awaited
collaborator call.
"""

import time
from typing import Dict, Any, List, Optional, Callable, Awaitable, Iterable, Union, TYPE_CHECKING

from core.logging import get_logger, log_execution_time
from constants import BRANCH_TRUE_HANDLE, BRANCH_FALSE_HANDLE
from models.nodes import (
    WorkflowNode,
    Edge,
    TriggerNode,
    IdeaNode,
    DraftNode,
    MediaNode,
    PlatformNode,
    ConditionalNode,
    parse_nodes,
    parse_edges,
)
from .models import ExecutionContext, TaskStatus, CyclePolicy
from .conditions import evaluate_condition
from .exceptions import NoStartNodeError, ActionFailedError, CycleDetectedError

if TYPE_CHECKING:
    from services.content_client import ContentCollaborators

logger = get_logger(__name__)

StatusCallback = Callable[[str, str, Dict[str, Any]], Awaitable[None]]


class WorkflowExecutor:
    """Executes one workflow run over a private node data map.

    Features:
    - Isolated ExecutionContext per executor instance
    - Per-node execution state and execution path for reporting
    - Configurable cycle policy (lenient stop or strict error)
    - Optional async status callback (running / completed / error)
    """

    def __init__(self,
                 nodes: Iterable[Union[Dict[str, Any], WorkflowNode]],
                 edges: Iterable[Union[Dict[str, Any], Edge]],
                 collaborators: "ContentCollaborators",
                 cycle_policy: Union[CyclePolicy, str] = CyclePolicy.LENIENT,
                 status_callback: Optional[StatusCallback] = None):
        """Initialize executor.

        Args:
            nodes: Workflow nodes (models or dicts), usually already resolved
            edges: Edges connecting nodes
            collaborators: Idea, draft and image suggestion services
            cycle_policy: Behaviour when a node would be visited twice
            status_callback: Optional async callback for status updates
                            Signature: async def callback(node_id, status, data)
        """
        self.collaborators = collaborators
        self.cycle_policy = CyclePolicy(cycle_policy)
        self.status_callback = status_callback
        self.context = ExecutionContext.create(parse_nodes(nodes), parse_edges(edges))
        self._start_node_id = self.context.current_node_id

    # =========================================================================
    # EXECUTION ENTRY POINT
    # =========================================================================

    async def execute_workflow(self) -> Dict[str, Dict[str, Any]]:
        """Run the workflow from its trigger node to completion.

        Returns:
            The run's node data map (node id -> payload dict)

        Raises:
            NoStartNodeError: The graph has no trigger node
            ActionFailedError: A collaborator call failed
            CycleDetectedError: A node would be revisited under STRICT policy
        """
        ctx = self.context
        ctx.current_node_id = self._start_node_id
        if ctx.current_node_id is None:
            raise NoStartNodeError()

        ctx.visited.clear()
        ctx.exec_path.clear()
        ctx.started_at = time.time()

        logger.info("Starting workflow execution",
                    execution_id=ctx.execution_id,
                    start_node=ctx.current_node_id,
                    node_count=len(ctx.nodes),
                    edge_count=len(ctx.edges))

        try:
            while ctx.current_node_id is not None:
                node_id = ctx.current_node_id
                if node_id in ctx.visited:
                    self._handle_revisit(node_id)
                    break

                ctx.visited.add(node_id)
                ctx.exec_path.append(node_id)

                await self._execute_node_actions(node_id)
                ctx.current_node_id = self.determine_next_node(node_id)
        finally:
            ctx.completed_at = time.time()
            log_execution_time(logger, "execute_workflow", ctx.started_at, ctx.completed_at,
                               execution_id=ctx.execution_id, path=ctx.exec_path)

        return ctx.node_data

    def _handle_revisit(self, node_id: str) -> None:
        """Apply the cycle policy when execution reaches a visited node."""
        ctx = self.context
        if self.cycle_policy == CyclePolicy.STRICT:
            error = CycleDetectedError(node_id, ctx.exec_path)
            ctx.errors.append({"node_id": node_id, "error": str(error), "timestamp": time.time()})
            logger.error("Cycle detected", execution_id=ctx.execution_id,
                         node_id=node_id, path=ctx.exec_path)
            raise error

        logger.warning("Cycle detected, stopping execution",
                       execution_id=ctx.execution_id,
                       node_id=node_id,
                       path=ctx.exec_path)

    # =========================================================================
    # NODE ACTIONS
    # =========================================================================

    async def _execute_node_actions(self, node_id: str) -> None:
        """Run a node's action and merge its result into that node's data."""
        ctx = self.context
        node = ctx.get_node(node_id)
        if node is None:
            logger.warning("Edge points to unknown node", execution_id=ctx.execution_id,
                           node_id=node_id)
            return

        data = ctx.node_data.get(node_id, {})
        ctx.set_node_status(node_id, TaskStatus.RUNNING)
        await self._notify_status(node_id, "running", {"node_type": node.type})
        logger.info("Executing node", execution_id=ctx.execution_id,
                    node_id=node_id, node_type=node.type)

        try:
            updates = await self._run_action(node, data)
        except Exception as e:
            ctx.set_node_status(node_id, TaskStatus.FAILED, error=str(e))
            ctx.errors.append({"node_id": node_id, "error": str(e), "timestamp": time.time()})
            logger.error("Node failed", execution_id=ctx.execution_id,
                         node_id=node_id, node_type=node.type, error=str(e))
            await self._notify_status(node_id, "error", {"error": str(e)})
            raise ActionFailedError(node_id, e) from e

        if updates:
            ctx.node_data[node_id] = {**data, **updates}

        ctx.set_node_status(node_id, TaskStatus.COMPLETED)
        await self._notify_status(node_id, "completed", ctx.node_data[node_id])

    async def _run_action(self, node: WorkflowNode, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Call the collaborator for a node type.

        Reads from the node's working data, not from the node model, so
        values written earlier in the run are seen.

        Returns:
            Fields to merge into the node's data, or None when nothing ran
        """
        match node:
            case IdeaNode():
                topic = data.get("topic")
                if not topic:
                    return None
                ideas = await self.collaborators.generate_ideas(topic)
                return {"ideas": list(ideas), "hasGenerated": True}

            case DraftNode():
                prompt = data.get("prompt")
                if not prompt:
                    return None
                draft = await self.collaborators.generate_draft(prompt)
                return {"draft": draft, "hasGenerated": True}

            case MediaNode():
                query = data.get("query")
                if not query or data.get("hasSearched"):
                    return None
                images = await self.collaborators.suggest_images(query)
                return {"images": list(images), "hasSearched": True}

            case TriggerNode() | PlatformNode() | ConditionalNode():
                # Trigger starts the flow, platform holds data,
                # conditional is evaluated during transition
                return None

            case _:
                logger.debug("No actions defined for node type", node_id=node.id,
                             node_type=node.type)
                return None

    # =========================================================================
    # TRANSITIONS
    # =========================================================================

    def determine_next_node(self, node_id: str) -> Optional[str]:
        """Pick the single node to run after ``node_id``.

        Conditional nodes with both a "true" and a "false" edge follow the
        branch selected by their condition. Any other node, or a conditional
        missing one of its branch edges, follows its first outgoing edge.

        Returns:
            Next node id, or None when the path ends here
        """
        ctx = self.context
        node = ctx.get_node(node_id)
        if node is None:
            return None

        outgoing = ctx.get_outgoing_edges(node_id)
        if not outgoing:
            return None
        next_nodes = [edge.target for edge in outgoing]

        if isinstance(node, ConditionalNode):
            true_edge = next((e for e in outgoing if e.source_handle == BRANCH_TRUE_HANDLE), None)
            false_edge = next((e for e in outgoing if e.source_handle == BRANCH_FALSE_HANDLE), None)

            if true_edge is None or false_edge is None:
                logger.warning("Conditional node missing branch edge, following first edge",
                               execution_id=ctx.execution_id, node_id=node_id,
                               next_node=next_nodes[0])
                return next_nodes[0]

            condition = ctx.node_data.get(node_id, {}).get("condition")
            result = evaluate_condition(condition, ctx.nodes, ctx.node_data)
            ctx.branch_results[node_id] = result
            logger.info("Conditional branch evaluated", execution_id=ctx.execution_id,
                        node_id=node_id, condition=condition, result=result)
            return true_edge.target if result else false_edge.target

        if len(next_nodes) > 1:
            logger.debug("Multiple outgoing edges, following first only",
                         node_id=node_id, targets=next_nodes)
        return next_nodes[0]

    # =========================================================================
    # RESULTS
    # =========================================================================

    def get_node_data(self) -> Dict[str, Dict[str, Any]]:
        """Current node data map, including partial progress after a failure."""
        return self.context.node_data

    def get_execution_results(self) -> Dict[str, Any]:
        """Detailed results of the last run."""
        ctx = self.context
        return {
            "execution_id": ctx.execution_id,
            "node_data": ctx.node_data,
            "execution_state": ctx.execution_state(),
            "exec_path": list(ctx.exec_path),
            "branch_results": dict(ctx.branch_results),
            "errors": list(ctx.errors),
        }

    @property
    def exec_path(self) -> List[str]:
        return list(self.context.exec_path)

    async def _notify_status(self, node_id: str, status: str,
                             data: Dict[str, Any]) -> None:
        """Send status notification via callback.

        Args:
            node_id: Node ID
            status: Status string
            data: Additional data
        """
        if self.status_callback:
            try:
                await self.status_callback(node_id, status, data)
            except Exception as e:
                logger.warning("Status callback failed", node_id=node_id, error=str(e))
