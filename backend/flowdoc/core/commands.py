"""Navigation Commands: explicit user intents consumed by a single apply_command.

Invariants:
    - Commands are frozen value objects; applying one never mutates the command
    - A missing state or graph turns every command into a no-op
    - Unknown command types raise TypeError (programming error, not user input)

Design Decisions:
    - Command objects instead of per-node callbacks
    - kind is a class-level tag used by logging and by the API discriminator
"""

from dataclasses import dataclass
from typing import ClassVar, Union

from flowdoc.core.decision_graph import DecisionGraph, TreeOption
from flowdoc.core.exploration_state import ExplorationState
from flowdoc.core.navigation import (
    navigate_to_node, restart, select_option, set_expanded, toggle_collapsed_branch,
)


@dataclass(frozen=True)
class SelectOption:
    option: TreeOption
    source_node_id: str | None = None
    kind: ClassVar[str] = "select_option"


@dataclass(frozen=True)
class NavigateTo:
    node_id: str
    kind: ClassVar[str] = "navigate_to"


@dataclass(frozen=True)
class ToggleBranch:
    branch_key: str
    kind: ClassVar[str] = "toggle_branch"


@dataclass(frozen=True)
class Restart:
    kind: ClassVar[str] = "restart"


@dataclass(frozen=True)
class SetExpanded:
    expanded: bool
    kind: ClassVar[str] = "set_expanded"


NavigationCommand = Union[SelectOption, NavigateTo, ToggleBranch, Restart, SetExpanded]


def apply_command(
    state: ExplorationState | None,
    graph: DecisionGraph | None,
    command: NavigationCommand,
) -> ExplorationState | None:
    """Apply one command and return the resulting state."""
    if state is None or graph is None:
        return state

    if isinstance(command, SelectOption):
        return select_option(state, graph, command.option, command.source_node_id)
    if isinstance(command, NavigateTo):
        return navigate_to_node(state, command.node_id)
    if isinstance(command, ToggleBranch):
        return toggle_collapsed_branch(state, command.branch_key)
    if isinstance(command, Restart):
        return restart(state)
    if isinstance(command, SetExpanded):
        return set_expanded(state, command.expanded)
    raise TypeError(f"Unknown navigation command: {command!r}")
