"""Branch Archive: key derivation and downstream capture for abandoned choices.

Invariants:
    - branch_key(source, label) is the only way keys are built
    - capture_downstream is PURE: it reads state, returns a record, mutates nothing
    - A captured suffix is exactly what truncate_to would drop

Design Decisions:
    - "Downstream" is defined by history position, not graph topology:
      a path entry is downstream when it never occurs at or before the source index
    - The first occurrence of the source in node_history is the revision point
"""

from flowdoc.core.domain_types import BRANCH_KEY_SEPARATOR, BranchKey, NodeId
from flowdoc.core.exploration_state import ArchivedBranch, ExplorationState


def branch_key(source_node_id: str, option_label: str) -> BranchKey:
    return BranchKey(f"{source_node_id}{BRANCH_KEY_SEPARATOR}{option_label}")


def capture_downstream(
    state: ExplorationState, source_node_id: NodeId, option: str,
) -> ArchivedBranch:
    """Snapshot everything after source_node_id's history position."""
    source_index = state.history_index(source_node_id)
    kept = set(state.node_history[:source_index + 1])
    return ArchivedBranch(
        source_node_id=source_node_id,
        option=option,
        path_nodes=tuple(n for n in state.path_nodes if n not in kept),
        node_history=tuple(state.node_history[source_index + 1:]),
    )


def truncate_to(state: ExplorationState, source_node_id: NodeId) -> None:
    """Drop history and path entries downstream of source_node_id."""
    source_index = state.history_index(source_node_id)
    state.node_history = state.node_history[:source_index + 1]
    kept = set(state.node_history)
    state.path_nodes = [n for n in state.path_nodes if n in kept]


def archive(state: ExplorationState, branch: ArchivedBranch) -> BranchKey:
    """Store branch under its key, replacing any earlier one for that label."""
    key = branch_key(branch.source_node_id, branch.option)
    state.collapsed_branches[key] = branch
    return key
