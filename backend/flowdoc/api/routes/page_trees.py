"""Page Trees: decision-tree delivery, navigation commands, restart, and export.

Invariants:
    - Every navigation command responds 200: missing trees become a `notice`, not an error
    - Tree delivery always resets the page's exploration state
    - Batch delivery is all-or-nothing: every payload parses before any is installed
    - Export and restart on non-tree pages, or on tree pages still awaiting their graph,
      are WARNING errors (recoverable)
    - PUT .../tree/state accepts only snapshots that satisfy the path invariants

Design Decisions:
    - One POST /commands endpoint with a discriminated body, mirroring apply_command
    - /restart kept as its own route: the reset contract takes only a page identifier
"""

import logging

from fastapi import APIRouter

from flowdoc.api.routes.documents import (
    document_response, get_workspace_or_404, tree_view_response,
)
from flowdoc.config import get_settings
from flowdoc.core.decision_graph import DecisionGraph
from flowdoc.core.domain_types import OutcomeStatus
from flowdoc.core.errors import ErrorContext, GraphValidationError, TreeNotAvailableError
from flowdoc.core.tree_snapshot import exploration_state_to_snapshot
from flowdoc.infrastructure.observability import page_log_extra
from flowdoc.schemas.document import DocumentResponse
from flowdoc.schemas.tree import (
    BatchTreeDelivery, CommandEnvelope, CommandResponse, ExplorationSnapshot, Notice,
    TreeDelivery, TreeExport, TreeViewResponse,
)

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/api/v1/documents/{document_id}", tags=["decision-trees"],
)


def _parse_graph(document_id: str, page_number: int, nodes: list) -> DecisionGraph:
    try:
        return DecisionGraph.from_payload(
            nodes, max_nodes=get_settings().max_nodes_per_graph,
        )
    except GraphValidationError as e:
        e.context.document_id = document_id
        e.context.page_number = page_number
        raise


@router.put(
    "/pages/{page_number}/tree", response_model=TreeViewResponse,
)
async def deliver_tree(document_id: str, page_number: int, body: TreeDelivery):
    """Install an extracted graph for one page and start a fresh exploration."""
    workspace = get_workspace_or_404(document_id)
    workspace.page(page_number)
    graph = _parse_graph(document_id, page_number, body.nodes)
    workspace.deliver_tree(page_number, graph)
    return tree_view_response(workspace.view(page_number))


@router.post("/trees", response_model=DocumentResponse)
async def deliver_trees(document_id: str, body: BatchTreeDelivery):
    """Install graphs for several pages at once."""
    workspace = get_workspace_or_404(document_id)
    graphs = {
        item.page_number: _parse_graph(document_id, item.page_number, item.nodes)
        for item in body.pages
    }
    workspace.deliver_trees(graphs)
    return document_response(workspace)


@router.get(
    "/pages/{page_number}/tree/view", response_model=TreeViewResponse,
)
async def get_tree_view(document_id: str, page_number: int):
    workspace = get_workspace_or_404(document_id)
    view = workspace.view(page_number)
    if view is None:
        raise TreeNotAvailableError(
            page_number, ErrorContext(document_id=document_id),
        )
    return tree_view_response(view)


@router.post(
    "/pages/{page_number}/tree/commands", response_model=CommandResponse,
)
async def apply_tree_command(
    document_id: str, page_number: int, body: CommandEnvelope,
):
    """Apply one navigation command and return the refreshed view."""
    workspace = get_workspace_or_404(document_id)
    command = body.command.to_command()
    outcome = workspace.dispatch(page_number, command)
    if outcome["status"] == OutcomeStatus.NOOP.value:
        return CommandResponse(
            notice=Notice(code=outcome["error_code"], message=outcome["message"]),
        )

    logger.info(
        f"Applied {command.kind}",
        extra=page_log_extra(document_id, page_number, command=command.kind),
    )
    view = tree_view_response(workspace.view(page_number))
    notice = None
    if view is not None and view.current_node_missing:
        notice = Notice(
            code="NODE_NOT_FOUND",
            message=f"No content for node '{view.current_node_id}'",
        )
    return CommandResponse(changed=outcome["changed"], view=view, notice=notice)


@router.post(
    "/pages/{page_number}/tree/restart", response_model=CommandResponse,
)
async def restart_exploration(document_id: str, page_number: int):
    """Reset the page's exploration to the start node."""
    workspace = get_workspace_or_404(document_id)
    workspace.restart_page(page_number)
    logger.info(
        "Exploration restarted",
        extra=page_log_extra(document_id, page_number, command="restart"),
    )
    return CommandResponse(
        changed=True, view=tree_view_response(workspace.view(page_number)),
    )


@router.get(
    "/pages/{page_number}/tree/export", response_model=TreeExport,
)
async def export_tree(document_id: str, page_number: int):
    """Full graph as a named JSON artifact."""
    workspace = get_workspace_or_404(document_id)
    return workspace.export_tree(
        page_number, get_settings().export_filename_template,
    )


@router.get("/pages/{page_number}/tree/state")
async def get_exploration_state(document_id: str, page_number: int):
    """Raw exploration state snapshot (camelCase)."""
    workspace = get_workspace_or_404(document_id)
    workspace.page(page_number)
    state = workspace.state(page_number)
    if state is None:
        raise TreeNotAvailableError(
            page_number, ErrorContext(document_id=document_id),
        )
    return exploration_state_to_snapshot(state)


@router.put(
    "/pages/{page_number}/tree/state", response_model=TreeViewResponse,
)
async def resume_exploration_state(
    document_id: str, page_number: int, body: ExplorationSnapshot,
):
    """Resume a persisted exploration (the inverse of GET .../tree/state)."""
    workspace = get_workspace_or_404(document_id)
    workspace.resume_state(page_number, body.model_dump(by_alias=True))
    return tree_view_response(workspace.view(page_number))
