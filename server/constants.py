"""Centralized constants for workflow node types, conditions and handles.

Single source of truth for the node type strings shared with the React Flow
client, so the executor, extractor and routers never repeat string literals.
"""

from typing import FrozenSet

# =============================================================================
# NODE TYPES
# =============================================================================

TRIGGER_NODE = 'triggerNode'
IDEA_NODE = 'ideaNode'
DRAFT_NODE = 'draftNode'
MEDIA_NODE = 'mediaNode'
PLATFORM_NODE = 'platformNode'
CONDITIONAL_NODE = 'conditionalNode'

WORKFLOW_NODE_TYPES: FrozenSet[str] = frozenset([
    TRIGGER_NODE,
    IDEA_NODE,
    DRAFT_NODE,
    MEDIA_NODE,
    PLATFORM_NODE,
    CONDITIONAL_NODE,
])

# =============================================================================
# CONDITIONS
# =============================================================================

CONDITION_HAS_DRAFT = 'hasDraft'
CONDITION_HAS_IMAGE = 'hasImage'
CONDITION_IS_PLATFORM_SELECTED = 'isPlatformSelected'

# =============================================================================
# EDGE HANDLES
# =============================================================================

# sourceHandle values marking a conditional node's two branches
BRANCH_TRUE_HANDLE = 'true'
BRANCH_FALSE_HANDLE = 'false'

# Fields injected by the connection resolver, dropped from sourceNodes snapshots
TRANSIENT_DATA_FIELDS: FrozenSet[str] = frozenset([
    'connections',
    'sourceNodes',
])


def is_trigger_type(node_type: str) -> bool:
    """Check if a node type is the workflow entry point."""
    return node_type == TRIGGER_NODE
