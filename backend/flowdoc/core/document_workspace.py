"""Document Workspace: owns every page's graph and exploration state for one document.

Invariants:
    - Pages are numbered 1..page_count; any other number raises PageNotFoundError
    - A page's graph and state are created together, replaced together, discarded together
    - dispatch() never raises for missing trees: it returns a "noop" outcome
    - No state is shared between pages
    - Restart, resume and export require a delivered graph (TreeNotAvailableError otherwise)
    - A resumed snapshot is installed only if it satisfies the path invariants

Design Decisions:
    - Explicit per-document object instead of a process-wide appState
    - Outcome dicts in the enforce_* style: status + error_code + message, consumed by the API
    - Snapshot comparison decides "changed"
"""

import logging
from dataclasses import dataclass

from flowdoc.core.commands import NavigationCommand, apply_command
from flowdoc.core.decision_graph import DecisionGraph
from flowdoc.core.domain_types import (
    DocumentId, OutcomeStatus, PageContentType, PageNumber,
)
from flowdoc.core.errors import (
    ErrorContext, NotADecisionTreePageError, PageNotFoundError,
    SnapshotValidationError, TreeNotAvailableError,
)
from flowdoc.core.exploration_state import ExplorationState
from flowdoc.core.navigation import restart
from flowdoc.core.tree_snapshot import (
    exploration_state_from_snapshot, exploration_state_to_snapshot, graph_to_export,
)
from flowdoc.core.tree_view import TreeView, build_tree_view

logger = logging.getLogger(__name__)

DEFAULT_EXPORT_FILENAME = "decision-tree-page-{page_number}.json"


@dataclass
class PageRecord:
    """Classification and delivery status of one page."""
    page_number: PageNumber
    content_type: PageContentType | None = None
    processed: bool = False
    html: str | None = None

    @property
    def is_decision_tree(self) -> bool:
        return self.content_type == PageContentType.DECISION_TREE


class DocumentWorkspace:
    """Per-document page registry plus one ExplorationState per tree page."""

    def __init__(
        self, document_id: DocumentId, page_count: int, title: str | None = None,
    ):
        self.document_id = document_id
        self.title = title
        self.pages: dict[PageNumber, PageRecord] = {
            PageNumber(n): PageRecord(page_number=PageNumber(n))
            for n in range(1, page_count + 1)
        }
        self._trees: dict[PageNumber, DecisionGraph] = {}
        self._states: dict[PageNumber, ExplorationState] = {}

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def page(self, page_number: int) -> PageRecord:
        record = self.pages.get(PageNumber(page_number))
        if record is None:
            raise PageNotFoundError(
                page_number, self.page_count,
                ErrorContext(document_id=self.document_id),
            )
        return record

    def graph(self, page_number: int) -> DecisionGraph | None:
        return self._trees.get(PageNumber(page_number))

    def state(self, page_number: int) -> ExplorationState | None:
        return self._states.get(PageNumber(page_number))

    # --- Delivery (from the extraction / conversion collaborators) --------------

    def classify(self, page_number: int, content_type: PageContentType) -> PageRecord:
        """Record the classifier's verdict; content arrives later."""
        record = self.page(page_number)
        if record.content_type != content_type:
            self.invalidate(page_number)
            record.html = None
            record.processed = False
        record.content_type = content_type
        return record

    def deliver_static(self, page_number: int, html: str) -> PageRecord:
        """Store converted markup; drops any tree the page used to have."""
        record = self.page(page_number)
        self.invalidate(page_number)
        record.content_type = PageContentType.STATIC
        record.html = html
        record.processed = True
        return record

    def deliver_tree(self, page_number: int, graph: DecisionGraph) -> ExplorationState:
        """Install a graph and a fresh exploration state for the page."""
        record = self.page(page_number)
        page = PageNumber(page_number)
        record.content_type = PageContentType.DECISION_TREE
        record.html = None
        record.processed = True
        self._trees[page] = graph
        self._states[page] = restart()
        dangling = graph.dangling_targets()
        logger.info(
            f"Decision tree delivered ({len(graph)} nodes, {len(dangling)} dangling options)",
            extra={"document_id": self.document_id, "page_number": page_number},
        )
        return self._states[page]

    def deliver_trees(self, graphs: dict[int, DecisionGraph]) -> None:
        """Batch delivery. All page numbers are checked before anything is installed."""
        for page_number in graphs:
            self.page(page_number)
        for page_number, graph in graphs.items():
            self.deliver_tree(page_number, graph)

    def invalidate(self, page_number: int) -> None:
        page = PageNumber(page_number)
        self._trees.pop(page, None)
        self._states.pop(page, None)

    # --- Navigation --------------------------------------------------------------

    def dispatch(self, page_number: int, command: NavigationCommand) -> dict:
        """Apply a navigation command to the page's state. Never raises for missing trees."""
        self.page(page_number)
        page = PageNumber(page_number)
        state = self._states.get(page)
        graph = self._trees.get(page)
        if state is None or graph is None:
            logger.debug(
                "Navigation ignored: no decision tree",
                extra={
                    "document_id": self.document_id, "page_number": page_number,
                    "command": command.kind,
                },
            )
            return {
                "status": OutcomeStatus.NOOP.value,
                "error_code": "TREE_NOT_AVAILABLE",
                "message": "No decision tree available for this page",
            }

        before = exploration_state_to_snapshot(state)
        new_state = apply_command(state, graph, command)
        self._states[page] = new_state
        changed = exploration_state_to_snapshot(new_state) != before
        if not changed:
            logger.debug(
                "Navigation command left state unchanged",
                extra={
                    "document_id": self.document_id, "page_number": page_number,
                    "command": command.kind,
                },
            )
        return {"status": OutcomeStatus.OK.value, "changed": changed}

    def _require_tree(self, page_number: int) -> DecisionGraph:
        record = self.page(page_number)
        ctx = ErrorContext(document_id=self.document_id)
        if not record.is_decision_tree:
            raise NotADecisionTreePageError(page_number, ctx)
        graph = self.graph(page_number)
        if graph is None:
            raise TreeNotAvailableError(page_number, ctx)
        return graph

    def restart_page(self, page_number: int) -> ExplorationState:
        """Reset contract: fresh state for a decision-tree page."""
        self._require_tree(page_number)
        state = restart()
        self._states[PageNumber(page_number)] = state
        return state

    def resume_state(self, page_number: int, snapshot: dict | None) -> ExplorationState:
        """Replace the page's state with a previously persisted snapshot."""
        self._require_tree(page_number)
        state = exploration_state_from_snapshot(snapshot)
        problems = state.structural_problems()
        if problems:
            raise SnapshotValidationError(
                problems,
                ErrorContext(document_id=self.document_id, page_number=page_number),
            )
        self._states[PageNumber(page_number)] = state
        logger.info(
            "Exploration state resumed from snapshot",
            extra={"document_id": self.document_id, "page_number": page_number},
        )
        return state

    def view(self, page_number: int) -> TreeView | None:
        self.page(page_number)
        state = self.state(page_number)
        graph = self.graph(page_number)
        if state is None or graph is None:
            return None
        return build_tree_view(graph, state)

    # --- Export ----------------------------------------------------------------

    def export_tree(
        self, page_number: int, filename_template: str = DEFAULT_EXPORT_FILENAME,
    ) -> dict:
        """Named export artifact for a tree page."""
        graph = self._require_tree(page_number)
        return {
            "filename": filename_template.format(page_number=page_number),
            "tree": graph_to_export(graph),
        }

    def summary(self) -> list[dict]:
        return [
            {
                "page_number": record.page_number,
                "content_type": record.content_type.value if record.content_type else None,
                "processed": record.processed,
                "has_tree": record.page_number in self._trees,
            }
            for record in self.pages.values()
        ]
