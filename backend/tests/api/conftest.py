"""API test fixtures: FastAPI app over an in-process ASGI transport.

Invariants:
    - Every test starts with an empty document registry
    - No network: httpx talks to the app through ASGITransport
"""

import pytest
from httpx import ASGITransport, AsyncClient

from flowdoc.api.routes.documents import _workspaces
from flowdoc.main import app
from tests.tree_samples import TROUBLESHOOTING


@pytest.fixture
async def client():
    _workspaces.clear()
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
    _workspaces.clear()


@pytest.fixture
async def document_id(client):
    """Three-page document whose page 2 holds the troubleshooting tree."""
    res = await client.post("/api/v1/documents", json={"page_count": 3, "title": "Manual"})
    doc_id = res.json()["id"]
    await client.put(
        f"/api/v1/documents/{doc_id}/pages/2/tree", json={"nodes": TROUBLESHOOTING},
    )
    return doc_id
