"""Tree Snapshot: export of the decision graph and persistence of exploration state.

Invariants:
    - All functions are read-only with respect to their inputs
    - graph_to_export emits the extraction schema, so an export re-ingests unchanged
    - exploration_state_to_snapshot produces a JSON-safe dict (no tuples, no dataclasses)
    - Missing or null snapshot keys fall back to ExplorationState defaults

Design Decisions:
    - camelCase snapshot keys: the shape renderers already consume
    - Export covers every node, not just the explored path
"""

from flowdoc.core.decision_graph import DecisionGraph, TreeNode
from flowdoc.core.domain_types import BranchKey, NodeId
from flowdoc.core.exploration_state import ArchivedBranch, ExplorationState


def node_to_export(node: TreeNode) -> dict:
    """One node in extraction-schema form."""
    data: dict = {"id": node.id, "type": node.kind}
    if node.category is not None:
        data["category"] = node.category
    data["question"] = node.prompt
    data["next"] = [
        {"on": option.label, "id": option.target_id} for option in node.options
    ]
    return data


def graph_to_export(graph: DecisionGraph) -> dict:
    """Full node set, independent of exploration state."""
    return {"nodes": [node_to_export(node) for node in graph.nodes.values()]}


def _branch_to_snapshot(branch: ArchivedBranch) -> dict:
    return {
        "sourceNodeId": branch.source_node_id,
        "option": branch.option,
        "pathNodes": list(branch.path_nodes),
        "nodeHistory": list(branch.node_history),
    }


def _branch_from_snapshot(data: dict) -> ArchivedBranch:
    return ArchivedBranch(
        source_node_id=NodeId(data["sourceNodeId"]),
        option=data["option"],
        path_nodes=tuple(NodeId(n) for n in data.get("pathNodes") or []),
        node_history=tuple(NodeId(n) for n in data.get("nodeHistory") or []),
    )


def exploration_state_to_snapshot(state: ExplorationState) -> dict:
    """Serialize ExplorationState to a JSON-safe dict. Pure, no IO."""
    return {
        "currentNodeId": state.current_node_id,
        "pathNodes": list(state.path_nodes),
        "nodeHistory": list(state.node_history),
        "selectedOptions": dict(state.selected_options),
        "collapsedBranches": {
            key: _branch_to_snapshot(branch)
            for key, branch in state.collapsed_branches.items()
        },
        "treeExpandedState": state.expanded,
    }


def exploration_state_from_snapshot(data: dict | None) -> ExplorationState:
    """Reconstruct ExplorationState from a snapshot dict. Pure, no IO."""
    state = ExplorationState()
    if not data:
        return state

    if data.get("pathNodes"):
        state.path_nodes = [NodeId(n) for n in data["pathNodes"]]
    if data.get("nodeHistory"):
        state.node_history = [NodeId(n) for n in data["nodeHistory"]]
    if data.get("currentNodeId"):
        state.current_node_id = NodeId(data["currentNodeId"])
    state.selected_options = {
        NodeId(k): v for k, v in (data.get("selectedOptions") or {}).items()
    }
    state.collapsed_branches = {
        BranchKey(k): _branch_from_snapshot(v)
        for k, v in (data.get("collapsedBranches") or {}).items()
    }
    expanded = data.get("treeExpandedState")
    state.expanded = True if expanded is None else bool(expanded)
    return state
