"""Connection resolution for workflow graphs.

Computes each node's upstream/downstream neighbours from the edge list and
passes selected data along edges, e.g. an idea node's selected idea becomes
a connected draft node's prompt.

Pure functions: inputs are never mutated and nothing is cached, so callers
recompute the map whenever the graph changes. Node payloads that fail
validation for their type are handled as free-form dicts rather than
rejected.
"""

import copy
from typing import Dict, Any, List, Iterable, Optional, Union

from constants import IDEA_NODE, DRAFT_NODE, TRANSIENT_DATA_FIELDS
from models.nodes import (
    WorkflowNode,
    Edge,
    parse_node,
    parse_nodes,
    parse_edges,
    node_data_dict,
    node_to_dict,
)

ConnectionMap = Dict[str, Dict[str, List[str]]]


def build_connection_map(nodes: Iterable[Union[Dict[str, Any], WorkflowNode]],
                         edges: Iterable[Union[Dict[str, Any], Edge]]) -> ConnectionMap:
    """Map every node id to its ``{"sources": [...], "targets": [...]}``.

    Lists keep edge order and are not de-duplicated. Edges whose endpoint is
    not a known node are skipped for that endpoint.

    Examples:
        >>> build_connection_map([{"id": "a", "type": "triggerNode"},
        ...                       {"id": "b", "type": "ideaNode"}],
        ...                      [{"source": "a", "target": "b"}])
        {'a': {'sources': [], 'targets': ['b']}, 'b': {'sources': ['a'], 'targets': []}}
    """
    parsed_nodes = parse_nodes(nodes, strict=False)
    connections: ConnectionMap = {
        node.id: {"sources": [], "targets": []} for node in parsed_nodes
    }

    for edge in parse_edges(edges):
        if edge.source in connections:
            connections[edge.source]["targets"].append(edge.target)
        if edge.target in connections:
            connections[edge.target]["sources"].append(edge.source)

    return connections


def _propagated_prompt(source_nodes: List[WorkflowNode]) -> Optional[str]:
    """Selected idea of the first idea-type source, if it has one.

    Only the first idea source is consulted; a later idea source is never
    used even when the first has nothing selected.
    """
    idea_node = next((n for n in source_nodes if n.type == IDEA_NODE), None)
    if idea_node is None:
        return None
    return node_data_dict(idea_node).get("selectedIdea") or None


def _source_snapshot(node_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Upstream node as a plain dict, minus resolver-injected fields.

    Stripping keeps repeated resolution from nesting snapshots inside
    snapshots.
    """
    snapshot = copy.deepcopy(node_dict)
    snapshot["data"] = {k: v for k, v in snapshot.get("data", {}).items()
                        if k not in TRANSIENT_DATA_FIELDS}
    return snapshot


def resolve_connections(nodes: Iterable[Union[Dict[str, Any], WorkflowNode]],
                        edges: Iterable[Union[Dict[str, Any], Edge]]) -> List[WorkflowNode]:
    """Return new nodes whose data carries their resolved connections.

    Every node gains ``connections``. Nodes with at least one resolvable
    upstream node also gain ``sourceNodes``, snapshots taken after prompt
    propagation. A draft node with an empty prompt takes the ``selectedIdea``
    of its first upstream idea node, when that node has one.

    Idempotent, and never raises for dangling or duplicate edges or for
    loosely typed node data.
    """
    parsed_nodes = parse_nodes(nodes, strict=False)
    connections = build_connection_map(parsed_nodes, edges)
    by_id = {node.id: node for node in parsed_nodes}

    def sources_of(node_id: str) -> List[str]:
        return [sid for sid in connections[node_id]["sources"] if sid in by_id]

    # Pass 1: prompt propagation
    propagated: List[Dict[str, Any]] = []
    for node in parsed_nodes:
        node_dict = node_to_dict(node)
        data = node_dict.setdefault("data", {})
        if node.type == DRAFT_NODE and not data.get("prompt"):
            prompt = _propagated_prompt([by_id[sid] for sid in sources_of(node.id)])
            if prompt:
                data["prompt"] = prompt
        propagated.append(node_dict)
    propagated_by_id = {node_dict["id"]: node_dict for node_dict in propagated}

    # Pass 2: connections and snapshots of the propagated nodes
    snapshots = {node_id: _source_snapshot(node_dict)
                 for node_id, node_dict in propagated_by_id.items()}
    resolved: List[WorkflowNode] = []
    for node_dict in propagated:
        node_connections = connections[node_dict["id"]]
        data = node_dict["data"]
        data["connections"] = {
            "sources": list(node_connections["sources"]),
            "targets": list(node_connections["targets"]),
        }
        if node_connections["sources"]:
            data["sourceNodes"] = [copy.deepcopy(snapshots[sid])
                                   for sid in sources_of(node_dict["id"])]

        resolved.append(parse_node(node_dict, strict=False))

    return resolved
