"""Condition evaluation for conditional branching.

Conditional nodes name one of a fixed set of conditions. Each condition is a
global check over the run's node data: it looks at every node of the
relevant type in the graph, not just the nodes upstream of the conditional.

Supported conditions:
- hasDraft: some draft node has non-empty ``draft``
- hasImage: some media node has a ``selectedImage``
- isPlatformSelected: some platform node has non-empty ``platform``
"""

from typing import Dict, Any, List, Optional

from core.logging import get_logger
from constants import (
    DRAFT_NODE,
    MEDIA_NODE,
    PLATFORM_NODE,
    CONDITION_HAS_DRAFT,
    CONDITION_HAS_IMAGE,
    CONDITION_IS_PLATFORM_SELECTED,
)
from models.nodes import WorkflowNode

logger = get_logger(__name__)


# condition name -> (node type to scan, data field that must be non-empty)
CONDITION_FIELDS = {
    CONDITION_HAS_DRAFT: (DRAFT_NODE, "draft"),
    CONDITION_HAS_IMAGE: (MEDIA_NODE, "selectedImage"),
    CONDITION_IS_PLATFORM_SELECTED: (PLATFORM_NODE, "platform"),
}


def any_node_has_field(nodes: List[WorkflowNode], node_data: Dict[str, Dict[str, Any]],
                       node_type: str, field: str) -> bool:
    """True iff any node of ``node_type`` has a truthy ``field`` in node_data."""
    return any(
        bool(node_data.get(node.id, {}).get(field))
        for node in nodes
        if node.type == node_type
    )


def evaluate_condition(condition: Optional[str], nodes: List[WorkflowNode],
                       node_data: Dict[str, Dict[str, Any]]) -> bool:
    """Evaluate a named condition against the whole graph's node data.

    Args:
        condition: Condition name from a conditional node's data
        nodes: All nodes of the workflow
        node_data: Current per-node working data

    Returns:
        Condition result. A missing or unknown condition is False.
    """
    entry = CONDITION_FIELDS.get(condition)
    if entry is None:
        logger.debug("Unknown or missing condition", condition=condition)
        return False

    node_type, field = entry
    result = any_node_has_field(nodes, node_data, node_type, field)
    logger.debug("Condition result", condition=condition, result=result)
    return result
