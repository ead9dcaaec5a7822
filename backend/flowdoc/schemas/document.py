"""Document Schemas: Pydantic models for documents and their pages.

Invariants:
    - DocumentCreate.page_count >= 1
    - StaticPageDelivery.html is stored verbatim (never sanitized or rewritten here)
"""

from typing import Literal

from pydantic import BaseModel, Field

from flowdoc.schemas.tree import TreeViewResponse


class DocumentCreate(BaseModel):
    page_count: int = Field(ge=1)
    title: str | None = Field(None, max_length=500)


class PageSummary(BaseModel):
    page_number: int
    content_type: Literal["static", "decision-tree"] | None = None
    processed: bool = False
    has_tree: bool = False


class DocumentResponse(BaseModel):
    id: str
    title: str | None = None
    page_count: int
    pages: list[PageSummary] = []


class StaticPageDelivery(BaseModel):
    html: str = Field(min_length=1)


class PageContentResponse(BaseModel):
    """A page as the viewer shows it: markup for static pages, a tree view otherwise."""
    page_number: int
    content_type: Literal["static", "decision-tree"] | None = None
    processed: bool = False
    html: str | None = None
    tree: TreeViewResponse | None = None


class PageClassification(BaseModel):
    content_type: Literal["static", "decision-tree"]
