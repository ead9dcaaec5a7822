"""Tree Schemas: Pydantic models for decision-tree delivery, commands and views.

Invariants:
    - TreeDelivery.nodes is passed to DecisionGraph.from_payload untouched
      (structural validation lives in the core, not here)
    - NavigationCommandRequest is discriminated on `type`
    - View models are built from core dataclasses via from_attributes
    - ExplorationSnapshot mirrors the camelCase snapshot; invariants are checked in the core

Design Decisions:
    - Literal discriminators over str enums: Pydantic validates natively
    - to_command() keeps HTTP shapes out of core/commands.py
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from flowdoc.core.commands import (
    NavigateTo, NavigationCommand, Restart, SelectOption, SetExpanded, ToggleBranch,
)
from flowdoc.core.decision_graph import TreeOption
from flowdoc.core.domain_types import NodeId


# --- Delivery ------------------------------------------------------------------

class TreeDelivery(BaseModel):
    """Decision graph for one page, in extraction-schema form."""
    nodes: list[dict[str, Any]]


class BatchTreeItem(TreeDelivery):
    page_number: int = Field(ge=1)


class BatchTreeDelivery(BaseModel):
    pages: list[BatchTreeItem] = Field(min_length=1)

    @field_validator("pages")
    @classmethod
    def unique_pages(cls, v: list[BatchTreeItem]) -> list[BatchTreeItem]:
        numbers = [item.page_number for item in v]
        if len(numbers) != len(set(numbers)):
            raise ValueError("page_number must be unique within a batch")
        return v


# --- Commands --------------------------------------------------------------------

class SelectOptionRequest(BaseModel):
    type: Literal["select_option"]
    label: str = Field(min_length=1)
    target_id: str = Field(min_length=1)
    source_node_id: str | None = None

    def to_command(self) -> NavigationCommand:
        return SelectOption(
            option=TreeOption(label=self.label, target_id=NodeId(self.target_id)),
            source_node_id=self.source_node_id,
        )


class NavigateToRequest(BaseModel):
    type: Literal["navigate_to"]
    node_id: str = Field(min_length=1)

    def to_command(self) -> NavigationCommand:
        return NavigateTo(node_id=self.node_id)


class ToggleBranchRequest(BaseModel):
    type: Literal["toggle_branch"]
    branch_key: str = Field(min_length=1)

    def to_command(self) -> NavigationCommand:
        return ToggleBranch(branch_key=self.branch_key)


class RestartRequest(BaseModel):
    type: Literal["restart"]

    def to_command(self) -> NavigationCommand:
        return Restart()


class SetExpandedRequest(BaseModel):
    type: Literal["set_expanded"]
    expanded: bool

    def to_command(self) -> NavigationCommand:
        return SetExpanded(expanded=self.expanded)


NavigationCommandRequest = Annotated[
    Union[
        SelectOptionRequest, NavigateToRequest, ToggleBranchRequest,
        RestartRequest, SetExpandedRequest,
    ],
    Field(discriminator="type"),
]


class CommandEnvelope(BaseModel):
    command: NavigationCommandRequest


# --- Views -----------------------------------------------------------------------

class OptionViewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    label: str
    target_id: str
    selected: bool = False
    archived_branch_key: str | None = None
    target_missing: bool = False


class NodeViewResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    node_id: str
    kind: str
    prompt: str
    level: int
    is_current: bool
    is_active: bool
    is_navigable: bool
    selected_option: str | None = None
    restorable_branches: list[str] = []
    options: list[OptionViewResponse] = []


class TreeViewResponse(BaseModel):
    """Everything a renderer needs after a navigation command."""
    model_config = ConfigDict(from_attributes=True)

    current_node_id: str
    expanded: bool
    nodes: list[NodeViewResponse] = []
    unresolved_node_ids: list[str] = []
    current_node_missing: bool = False
    archived_branch_count: int = 0
    pristine: bool = True


class Notice(BaseModel):
    """Recoverable, user-visible message (never an HTTP error)."""
    code: str
    message: str
    severity: Literal["info", "warning"] = "warning"


class CommandResponse(BaseModel):
    changed: bool = False
    view: TreeViewResponse | None = None
    notice: Notice | None = None


class TreeExport(BaseModel):
    filename: str
    tree: dict[str, list[dict[str, Any]]]


# --- Snapshot ------------------------------------------------------------------

class ArchivedBranchSnapshot(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    source_node_id: str = Field(alias="sourceNodeId")
    option: str
    path_nodes: list[str] = Field(default=[], alias="pathNodes")
    node_history: list[str] = Field(default=[], alias="nodeHistory")


class ExplorationSnapshot(BaseModel):
    """Persisted exploration state, as returned by GET .../tree/state."""
    model_config = ConfigDict(populate_by_name=True)

    current_node_id: str | None = Field(default=None, alias="currentNodeId")
    path_nodes: list[str] | None = Field(default=None, alias="pathNodes")
    node_history: list[str] | None = Field(default=None, alias="nodeHistory")
    selected_options: dict[str, str] | None = Field(default=None, alias="selectedOptions")
    collapsed_branches: dict[str, ArchivedBranchSnapshot] | None = Field(
        default=None, alias="collapsedBranches",
    )
    tree_expanded_state: bool | None = Field(default=None, alias="treeExpandedState")
