"""Documents: document registry, static page delivery, and page content.

Invariants:
    - DocumentWorkspace is per-document, in-memory (module-level dict)
    - _workspaces dict is the single source for in-memory state
    - Unknown document ids raise DocumentNotFoundError (404 via global handler)

Design Decisions:
    - _workspaces as module-level dict: single-process uvicorn, state lost on restart
    - get_workspace_or_404 exported for reuse by the tree routes
"""

import logging
from uuid import uuid4

from fastapi import APIRouter, HTTPException, status

from flowdoc.config import get_settings
from flowdoc.core.document_workspace import DocumentWorkspace
from flowdoc.core.domain_types import DocumentId, PageContentType
from flowdoc.core.errors import DocumentNotFoundError
from flowdoc.core.tree_view import TreeView
from flowdoc.infrastructure.observability import page_log_extra
from flowdoc.schemas.document import (
    DocumentCreate, DocumentResponse, PageClassification, PageContentResponse,
    PageSummary, StaticPageDelivery,
)
from flowdoc.schemas.tree import TreeViewResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/documents", tags=["documents"])

# Exploration state is in-memory (not DB/Redis)
_workspaces: dict[str, DocumentWorkspace] = {}


def get_workspace_or_404(document_id: str) -> DocumentWorkspace:
    """Get workspace or raise DocumentNotFoundError. Exported for tree routes."""
    workspace = _workspaces.get(document_id)
    if workspace is None:
        raise DocumentNotFoundError(document_id)
    return workspace


def tree_view_response(view: TreeView | None) -> TreeViewResponse | None:
    return TreeViewResponse.model_validate(view) if view is not None else None


def document_response(workspace: DocumentWorkspace) -> DocumentResponse:
    return DocumentResponse(
        id=workspace.document_id,
        title=workspace.title,
        page_count=workspace.page_count,
        pages=[PageSummary(**page) for page in workspace.summary()],
    )


@router.post(
    "", response_model=DocumentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_document(body: DocumentCreate):
    """Register a document and its (not yet processed) pages."""
    limit = get_settings().max_pages_per_document
    if body.page_count > limit:
        raise HTTPException(
            status.HTTP_400_BAD_REQUEST,
            detail=f"Documents are limited to {limit} pages",
        )
    document_id = DocumentId(str(uuid4()))
    workspace = DocumentWorkspace(document_id, body.page_count, title=body.title)
    _workspaces[document_id] = workspace
    logger.info(
        f"Document created with {body.page_count} pages",
        extra=page_log_extra(document_id),
    )
    return document_response(workspace)


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(document_id: str):
    return document_response(get_workspace_or_404(document_id))


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(document_id: str):
    """Discard a document with every page's graph and exploration state."""
    get_workspace_or_404(document_id)
    del _workspaces[document_id]
    logger.info("Document deleted", extra=page_log_extra(document_id))


@router.put(
    "/{document_id}/pages/{page_number}/static",
    response_model=PageContentResponse,
)
async def deliver_static_page(
    document_id: str, page_number: int, body: StaticPageDelivery,
):
    """Store converted markup for a page classified as static."""
    workspace = get_workspace_or_404(document_id)
    record = workspace.deliver_static(page_number, body.html)
    logger.info(
        "Static page delivered",
        extra=page_log_extra(document_id, page_number),
    )
    return PageContentResponse(
        page_number=record.page_number,
        content_type=record.content_type.value,
        processed=record.processed,
        html=record.html,
    )


@router.get(
    "/{document_id}/pages/{page_number}",
    response_model=PageContentResponse,
)
async def get_page(document_id: str, page_number: int):
    """Page as displayed: markup for static pages, tree view for tree pages."""
    workspace = get_workspace_or_404(document_id)
    record = workspace.page(page_number)
    return PageContentResponse(
        page_number=record.page_number,
        content_type=record.content_type.value if record.content_type else None,
        processed=record.processed,
        html=record.html,
        tree=tree_view_response(workspace.view(page_number)),
    )


@router.put(
    "/{document_id}/pages/{page_number}/classification",
    response_model=PageSummary,
)
async def classify_page(
    document_id: str, page_number: int, body: PageClassification,
):
    """Record whether a page is static markup or a decision tree."""
    workspace = get_workspace_or_404(document_id)
    workspace.classify(page_number, PageContentType(body.content_type))
    summary = next(
        page for page in workspace.summary() if page["page_number"] == page_number
    )
    return PageSummary(**summary)
