"""Decision Graph: immutable node graph delivered by the extraction collaborator.

Invariants:
    - A graph always contains START_NODE_ID
    - Node ids are unique; option order is preserved as extracted
    - Nodes, options and the node mapping are read-only once built
    - Dangling option targets are tolerated (reported, never rejected)

Design Decisions:
    - from_payload accepts both field spellings emitted by extractors
      (next/options, on/label, id/next, question/text)
    - kind kept as plain str: unknown tags survive a round trip through export
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from flowdoc.core.domain_types import NodeId, NodeKind, START_NODE_ID
from flowdoc.core.errors import GraphValidationError


@dataclass(frozen=True)
class TreeOption:
    """A labeled edge from one node to another."""
    label: str
    target_id: NodeId


@dataclass(frozen=True)
class TreeNode:
    """A single decision/information point."""
    id: NodeId
    kind: str = NodeKind.DECISION.value
    prompt: str = ""
    options: tuple[TreeOption, ...] = ()
    category: str | None = None


@dataclass(frozen=True)
class DecisionGraph:
    """Read-only mapping from node id to node, in extraction order."""
    nodes: Mapping[NodeId, TreeNode] = field(
        default_factory=lambda: MappingProxyType({}),
    )

    def __post_init__(self) -> None:
        if not isinstance(self.nodes, MappingProxyType):
            object.__setattr__(self, "nodes", MappingProxyType(dict(self.nodes)))

    def get(self, node_id: str) -> TreeNode | None:
        return self.nodes.get(NodeId(node_id))

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)

    def dangling_targets(self) -> list[tuple[NodeId, TreeOption]]:
        """(source node id, option) pairs whose target is not in the graph."""
        return [
            (node.id, option)
            for node in self.nodes.values()
            for option in node.options
            if option.target_id not in self.nodes
        ]

    @classmethod
    def from_payload(cls, payload: Any, max_nodes: int | None = None) -> "DecisionGraph":
        """Build a graph from extraction JSON (list of nodes or {"nodes": [...]}).

        Raises GraphValidationError for structurally unusable payloads.
        """
        raw_nodes = _unwrap_node_list(payload)
        if max_nodes is not None and len(raw_nodes) > max_nodes:
            raise GraphValidationError(
                f"Graph has {len(raw_nodes)} nodes (limit {max_nodes})",
                field="nodes",
            )

        nodes: dict[NodeId, TreeNode] = {}
        for index, raw in enumerate(raw_nodes):
            node = _parse_node(raw, index)
            if node.id in nodes:
                raise GraphValidationError(
                    f"Duplicate node id '{node.id}'", field=f"nodes.{index}.id",
                )
            nodes[node.id] = node

        if START_NODE_ID not in nodes:
            raise GraphValidationError(
                "No decision tree found: graph has no 'start' node",
                field="nodes",
            )
        return cls(nodes=MappingProxyType(nodes))


def _unwrap_node_list(payload: Any) -> list:
    if isinstance(payload, Mapping):
        payload = payload.get("nodes")
    if not isinstance(payload, list):
        raise GraphValidationError(
            "Decision tree payload must be a list of nodes", field="nodes",
        )
    return payload


def _parse_node(raw: Any, index: int) -> TreeNode:
    if not isinstance(raw, Mapping):
        raise GraphValidationError(
            f"Node #{index} is not an object", field=f"nodes.{index}",
        )
    node_id = raw.get("id")
    if not isinstance(node_id, str) or not node_id:
        raise GraphValidationError(
            f"Node #{index} has no id", field=f"nodes.{index}.id",
        )

    raw_options = raw.get("next") or raw.get("options") or []
    if not isinstance(raw_options, list):
        raise GraphValidationError(
            f"Options of node '{node_id}' must be a list",
            field=f"nodes.{index}.next",
        )
    options = tuple(
        _parse_option(raw_option, node_id, index, position)
        for position, raw_option in enumerate(raw_options)
    )
    return TreeNode(
        id=NodeId(node_id),
        kind=str(raw.get("type") or raw.get("kind") or NodeKind.DECISION.value),
        prompt=str(raw.get("question") or raw.get("text") or raw.get("prompt") or ""),
        options=options,
        category=raw.get("category"),
    )


def _parse_option(raw: Any, node_id: str, index: int, position: int) -> TreeOption:
    where = f"nodes.{index}.next.{position}"
    if not isinstance(raw, Mapping):
        raise GraphValidationError(
            f"Option #{position} of node '{node_id}' is not an object", field=where,
        )
    label = raw.get("on") or raw.get("label")
    target = raw.get("id") or raw.get("next") or raw.get("target_id")
    if not isinstance(label, str) or not isinstance(target, str):
        raise GraphValidationError(
            f"Option #{position} of node '{node_id}' needs a label and a target",
            field=where,
        )
    return TreeOption(label=label, target_id=NodeId(target))
