"""Error Hierarchy: typed, categorized exceptions for all Flowdoc failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - WARNING-severity errors are user-facing notices, never fatal
    - to_response() produces the REST envelope
    - Navigation operations never raise these; only ingestion and page lookup do

Design Decisions:
    - Single hierarchy with FlowdocError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    document_id: str | None = None
    page_number: int | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class FlowdocError(Exception):
    """Base exception for all Flowdoc errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    @property
    def recoverable(self) -> bool:
        return self.severity in (ErrorSeverity.INFO, ErrorSeverity.WARNING)

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "recoverable": self.recoverable,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "document_id": self.context.document_id,
                    "page_number": self.context.page_number,
                },
            }
        }


# ─── Validation Errors (400-level) ──────────────────────────────

class GraphValidationError(FlowdocError):
    """Extraction payload cannot be turned into a decision graph."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_DECISION_TREE", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class SnapshotValidationError(FlowdocError):
    """Submitted exploration snapshot breaks the path invariants."""
    def __init__(self, problems: list[str], context: ErrorContext | None = None):
        super().__init__(
            "Invalid exploration state: " + "; ".join(problems),
            "INVALID_EXPLORATION_STATE", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.problems = problems


# ─── Lookup Errors (404/409) ────────────────────────────────────

class DocumentNotFoundError(FlowdocError):
    """Requested document does not exist."""
    def __init__(self, document_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.document_id = document_id
        super().__init__(
            f"Document '{document_id}' not found",
            "DOCUMENT_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )


class PageNotFoundError(FlowdocError):
    """Page number outside the document."""
    def __init__(self, page_number: int, page_count: int, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.page_number = page_number
        super().__init__(
            f"Page {page_number} not found (document has {page_count} pages)",
            "PAGE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.page_count = page_count


class TreeNotAvailableError(FlowdocError):
    """Decision-tree page whose graph has not been delivered yet."""
    def __init__(self, page_number: int, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.page_number = page_number
        super().__init__(
            "No decision tree available for this page",
            "TREE_NOT_AVAILABLE", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, ctx, 404,
        )


class NotADecisionTreePageError(FlowdocError):
    """Tree operation requested on a page classified as static."""
    def __init__(self, page_number: int, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.page_number = page_number
        super().__init__(
            "Current page does not contain a decision tree",
            "NOT_A_DECISION_TREE", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, ctx, 409,
        )
