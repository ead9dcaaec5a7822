"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - NodeId, BranchKey, PageNumber wrap primitives: never mix them in signatures
    - START_NODE_ID is the sole graph entry point
    - Branch keys are always "<source node id><BRANCH_KEY_SEPARATOR><option label>"

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
    - NodeKind is advisory only: extraction may emit tags outside the enum
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

NodeId = NewType("NodeId", str)
BranchKey = NewType("BranchKey", str)
PageNumber = NewType("PageNumber", int)         # 1-based
DocumentId = NewType("DocumentId", str)


# ─── Constants ───────────────────────────────────────────────────

START_NODE_ID: NodeId = NodeId("start")
BRANCH_KEY_SEPARATOR: str = ":"


# ─── Enums ───────────────────────────────────────────────────────

class NodeKind(str, Enum):
    """Node tags the extraction prompt asks for. Open-ended: not enforced."""
    DECISION = "decision"
    YES_NO_N_A = "yes_no_n_a"
    INFO = "info"
    GOAL = "goal"
    ACTION = "action"
    RULE = "rule"
    CONCLUSION = "conclusion"
    END = "end"


class PageContentType(str, Enum):
    """Page classification produced by the (external) classifier."""
    STATIC = "static"
    DECISION_TREE = "decision-tree"


class OutcomeStatus(str, Enum):
    """Result of a workspace operation that must never raise."""
    OK = "ok"
    NOOP = "noop"
