"""Node data extraction for reporting.

Snapshots each node's canonical per-type fields into a flat map keyed by node
id. Resolver-injected fields (``connections``, ``sourceNodes``) and any UI
extras are never included.
"""

from typing import Dict, Any, Iterable, Optional, Tuple, Union

from constants import IDEA_NODE, DRAFT_NODE, MEDIA_NODE, PLATFORM_NODE, CONDITIONAL_NODE
from models.nodes import WorkflowNode, parse_nodes, node_data_dict

# node type -> fields reported for it; unlisted types report only "type"
EXTRACTED_FIELDS: Dict[str, Tuple[str, ...]] = {
    IDEA_NODE: ("topic", "ideas", "selectedIdea"),
    DRAFT_NODE: ("prompt", "draft"),
    MEDIA_NODE: ("query", "selectedImage"),
    PLATFORM_NODE: ("platform",),
    CONDITIONAL_NODE: ("condition", "result"),
}


def summarize_node(node_type: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """Build the summary record for one node."""
    summary = {"type": node_type}
    for field in EXTRACTED_FIELDS.get(node_type, ()):
        summary[field] = data.get(field)
    return summary


def extract_workflow_data(nodes: Iterable[Union[Dict[str, Any], WorkflowNode]]) -> Dict[str, Dict[str, Any]]:
    """Map each node id to its type-tagged summary."""
    return {
        node.id: summarize_node(node.type, node_data_dict(node))
        for node in parse_nodes(nodes, strict=False)
    }


def extract_node_data_map(nodes: Iterable[Union[Dict[str, Any], WorkflowNode]],
                          node_data: Dict[str, Dict[str, Any]],
                          branch_results: Optional[Dict[str, bool]] = None) -> Dict[str, Dict[str, Any]]:
    """Summarize an executor result.

    Uses the run's node data in place of each node's authored data, and
    reports evaluated conditional results when given.
    """
    branch_results = branch_results or {}
    summaries = {}
    for node in parse_nodes(nodes, strict=False):
        data = dict(node_data.get(node.id, node_data_dict(node)))
        if node.id in branch_results:
            data["result"] = branch_results[node.id]
        summaries[node.id] = summarize_node(node.type, data)
    return summaries
