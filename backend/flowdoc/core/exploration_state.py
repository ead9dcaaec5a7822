"""Exploration State: per-page record of where the user is in a decision tree.

Invariants:
    - current_node_id is always a member of path_nodes
    - path_nodes holds distinct ids and starts with START_NODE_ID
    - node_history is append-mostly: truncated only at a revision point
    - collapsed_branches holds at most one archived branch per (node, label)

Design Decisions:
    - Mutable dataclass owned by the navigation engine; renderers only read it
    - ArchivedBranch is frozen: an archive entry is replaced, never edited
    - expanded is presentation-only and never consulted by navigation
"""

from dataclasses import dataclass, field

from flowdoc.core.domain_types import (
    BRANCH_KEY_SEPARATOR, BranchKey, NodeId, START_NODE_ID,
)


@dataclass(frozen=True)
class ArchivedBranch:
    """Downstream suffix abandoned at `source_node_id` when `option` was replaced."""
    source_node_id: NodeId
    option: str
    path_nodes: tuple[NodeId, ...] = ()
    node_history: tuple[NodeId, ...] = ()

    @property
    def resume_node_id(self) -> NodeId:
        """Node that becomes current when this branch is restored."""
        return self.node_history[-1] if self.node_history else self.source_node_id


@dataclass
class ExplorationState:
    """Per-page navigation state: plain dataclass, no IO."""

    current_node_id: NodeId = START_NODE_ID
    path_nodes: list[NodeId] = field(default_factory=lambda: [START_NODE_ID])
    node_history: list[NodeId] = field(default_factory=lambda: [START_NODE_ID])
    selected_options: dict[NodeId, str] = field(default_factory=dict)
    collapsed_branches: dict[BranchKey, ArchivedBranch] = field(default_factory=dict)
    expanded: bool = True

    # --- Computed properties ---------------------------------------------------

    @property
    def is_pristine(self) -> bool:
        """Whether the state equals a fresh restart (ignoring the expanded flag)."""
        return (
            self.current_node_id == START_NODE_ID
            and self.path_nodes == [START_NODE_ID]
            and self.node_history == [START_NODE_ID]
            and not self.selected_options
            and not self.collapsed_branches
        )

    def structural_problems(self) -> list[str]:
        """Violated path invariants, empty when the state is well formed."""
        problems = []
        if not self.path_nodes or self.path_nodes[0] != START_NODE_ID:
            problems.append("pathNodes must start with the start node")
        if len(set(self.path_nodes)) != len(self.path_nodes):
            problems.append("pathNodes must not repeat a node")
        if self.current_node_id not in self.path_nodes:
            problems.append("currentNodeId must be on pathNodes")
        if not self.node_history or self.node_history[0] != START_NODE_ID:
            problems.append("nodeHistory must start with the start node")
        for key, branch in self.collapsed_branches.items():
            if key != f"{branch.source_node_id}{BRANCH_KEY_SEPARATOR}{branch.option}":
                problems.append(f"collapsedBranches key {key!r} does not match its branch")
        return problems

    def history_index(self, node_id: str) -> int:
        """First position of node_id in node_history, or -1."""
        try:
            return self.node_history.index(NodeId(node_id))
        except ValueError:
            return -1

    def archived_alternatives(self, node_id: str) -> dict[str, BranchKey]:
        """Archived option labels at node_id mapped to their branch keys."""
        return {
            branch.option: key
            for key, branch in self.collapsed_branches.items()
            if branch.source_node_id == node_id
        }
