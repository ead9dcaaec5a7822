"""Tree View: read model handed to renderers after every navigation command.

Invariants:
    - build_tree_view is PURE: never mutates state or graph
    - One entry per active-path node that resolves in the graph, ordered by path level
    - Options are listed only for active entries (current node and everything above it)
    - Path ids missing from the graph are reported, never rendered
    - pristine mirrors ExplorationState.is_pristine (renderers disable "restart")

Design Decisions:
    - Entries are discovered by walking node_history, not path_nodes, so that stale
      tail entries (explored beyond the current node) keep their history position
    - An option whose label has an archived branch carries that branch key: renderers
      offer "restore" for it instead of a fresh selection
"""

from dataclasses import dataclass

from flowdoc.core.branch_archive import branch_key
from flowdoc.core.decision_graph import DecisionGraph, TreeNode
from flowdoc.core.exploration_state import ExplorationState


@dataclass(frozen=True)
class OptionView:
    label: str
    target_id: str
    selected: bool = False
    archived_branch_key: str | None = None
    target_missing: bool = False


@dataclass(frozen=True)
class NodeView:
    node_id: str
    kind: str
    prompt: str
    level: int
    is_current: bool
    is_active: bool
    is_navigable: bool
    selected_option: str | None = None
    restorable_branches: tuple[str, ...] = ()
    options: tuple[OptionView, ...] = ()


@dataclass(frozen=True)
class TreeView:
    current_node_id: str
    expanded: bool
    nodes: tuple[NodeView, ...]
    unresolved_node_ids: tuple[str, ...] = ()
    archived_branch_count: int = 0
    pristine: bool = True

    @property
    def current_node_missing(self) -> bool:
        """Current node has no content in the graph (dangling option target)."""
        return self.current_node_id in self.unresolved_node_ids


def build_tree_view(graph: DecisionGraph, state: ExplorationState) -> TreeView:
    """Project (graph, state) into what a renderer needs to draw the tree."""
    current_index = state.history_index(state.current_node_id)
    entries: list[NodeView] = []
    unresolved: list[str] = []
    seen: set[str] = set()

    for history_index, node_id in enumerate(state.node_history):
        if node_id in seen or node_id not in state.path_nodes:
            continue
        seen.add(node_id)
        node = graph.get(node_id)
        if node is None:
            unresolved.append(node_id)
            continue
        is_current = node_id == state.current_node_id
        entries.append(_node_view(
            graph, state, node,
            is_current=is_current,
            is_active=is_current or history_index <= current_index,
        ))

    entries.sort(key=lambda entry: entry.level)
    return TreeView(
        current_node_id=state.current_node_id,
        expanded=state.expanded,
        nodes=tuple(entries),
        unresolved_node_ids=tuple(unresolved),
        archived_branch_count=len(state.collapsed_branches),
        pristine=state.is_pristine,
    )


def _node_view(
    graph: DecisionGraph,
    state: ExplorationState,
    node: TreeNode,
    is_current: bool,
    is_active: bool,
) -> NodeView:
    selected = state.selected_options.get(node.id)
    alternatives = state.archived_alternatives(node.id)
    options = tuple(
        OptionView(
            label=option.label,
            target_id=option.target_id,
            selected=option.label == selected,
            archived_branch_key=alternatives.get(option.label),
            target_missing=option.target_id not in graph,
        )
        for option in node.options
    ) if is_active else ()

    restorable = ()
    if selected is not None and selected in alternatives:
        restorable = (branch_key(node.id, selected),)

    return NodeView(
        node_id=node.id,
        kind=node.kind,
        prompt=node.prompt,
        level=state.path_nodes.index(node.id),
        is_current=is_current,
        is_active=is_active,
        is_navigable=not is_current,
        selected_option=selected,
        restorable_branches=restorable,
        options=options,
    )
