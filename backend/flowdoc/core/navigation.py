"""Navigation Engine: the only code that mutates ExplorationState.

Invariants:
    - After every operation: current_node_id in path_nodes, path_nodes distinct,
      path_nodes[0] == START_NODE_ID
    - Revising a choice archives the abandoned suffix; nothing explored is dropped
    - Re-choosing the label already selected at a node never creates an archive entry
    - Options are not validated against the graph: dangling targets are the
      renderer's concern ("no content" node)
    - Missing archive keys and off-path navigation are silent no-ops

Design Decisions:
    - Operations mutate in place and return the state so callers can chain
      (restart is the exception: it always returns a fresh state)
    - Graph accepted by select_option for signature symmetry with apply_command;
      edges are never looked up
"""

from flowdoc.core.branch_archive import archive, capture_downstream, truncate_to
from flowdoc.core.decision_graph import DecisionGraph, TreeOption
from flowdoc.core.domain_types import BranchKey, NodeId
from flowdoc.core.exploration_state import ExplorationState


def select_option(
    state: ExplorationState,
    graph: DecisionGraph | None,
    option: TreeOption,
    source_node_id: str | None = None,
) -> ExplorationState:
    """Choose `option` at source_node_id (default: the current node).

    Re-confirming the label already selected at source_node_id, while its target
    is still on the path, only moves current_node_id: node_history is not appended.
    """
    from_id = NodeId(source_node_id) if source_node_id else state.current_node_id
    target = option.target_id

    if source_node_id and from_id in state.node_history:
        previous = state.selected_options.get(from_id)
        if previous == option.label and target in state.path_nodes:
            # Re-confirming: keep the existing downstream branch as is.
            state.current_node_id = target
            return state
        if previous is not None and previous != option.label:
            archive(state, capture_downstream(state, from_id, previous))
        truncate_to(state, from_id)

    state.selected_options[from_id] = option.label
    state.current_node_id = target
    if target not in state.path_nodes:
        state.path_nodes.append(target)
    state.node_history.append(target)
    return state


def navigate_to_node(state: ExplorationState, node_id: str) -> ExplorationState:
    """Focus a node already on the active path. No-op otherwise."""
    if node_id == state.current_node_id or node_id not in state.path_nodes:
        return state
    state.current_node_id = NodeId(node_id)
    return state


def toggle_collapsed_branch(state: ExplorationState, key: str) -> ExplorationState:
    """Swap the active branch at an archive's source node for the archived one.

    When the source node is not current, only focuses it; the archive stays put
    and a second toggle performs the swap.
    """
    branch = state.collapsed_branches.get(BranchKey(key))
    if branch is None:
        return state

    source = branch.source_node_id
    if state.current_node_id != source:
        return navigate_to_node(state, source)

    current_option = state.selected_options.get(source)
    displaced = (
        capture_downstream(state, source, current_option)
        if current_option is not None else None
    )

    state.selected_options[source] = branch.option
    truncate_to(state, source)
    state.node_history.extend(branch.node_history)
    state.path_nodes.extend(
        n for n in branch.path_nodes if n not in state.path_nodes
    )
    state.current_node_id = branch.resume_node_id
    if state.current_node_id not in state.path_nodes:
        state.path_nodes.append(state.current_node_id)

    del state.collapsed_branches[BranchKey(key)]
    if displaced is not None:
        archive(state, displaced)
    return state


def set_expanded(state: ExplorationState, expanded: bool) -> ExplorationState:
    state.expanded = expanded
    return state


def restart(state: ExplorationState | None = None) -> ExplorationState:
    """Fresh exploration rooted at the start node. No partial restarts."""
    return ExplorationState()
