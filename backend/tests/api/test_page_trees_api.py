"""Decision-Tree API: tests for delivery, commands, restart and export over HTTP.

Invariants:
    - Navigation commands never fail for missing trees (200 + notice)
    - Invalid extraction payloads are rejected with INVALID_DECISION_TREE
    - Export/restart on non-tree pages are recoverable warnings
"""

from tests.tree_samples import DANGLING, TROUBLESHOOTING


def _commands(document_id: str, page: int = 2) -> str:
    return f"/api/v1/documents/{document_id}/pages/{page}/tree/commands"


async def _send(client, document_id, command, page=2):
    res = await client.post(_commands(document_id, page), json={"command": command})
    assert res.status_code == 200
    return res.json()


async def test_delivery_returns_initial_view(client):
    doc = (await client.post("/api/v1/documents", json={"page_count": 1})).json()
    res = await client.put(
        f"/api/v1/documents/{doc['id']}/pages/1/tree", json={"nodes": TROUBLESHOOTING},
    )
    assert res.status_code == 200
    view = res.json()
    assert view["current_node_id"] == "start"
    assert [n["node_id"] for n in view["nodes"]] == ["start"]
    assert view["pristine"] is True


async def test_invalid_tree_is_rejected(client, document_id):
    res = await client.put(
        f"/api/v1/documents/{document_id}/pages/1/tree",
        json={"nodes": [{"id": "not-start"}]},
    )
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "INVALID_DECISION_TREE"
    assert error["context"]["page_number"] == 1


async def test_revision_and_restore_over_http(client, document_id):
    await _send(client, document_id, {"type": "select_option", "label": "Yes", "target_id": "n1"})
    await _send(client, document_id, {"type": "select_option", "label": "No", "target_id": "n2"})
    body = await _send(client, document_id, {
        "type": "select_option", "label": "Maybe", "target_id": "n3",
        "source_node_id": "n1",
    })
    assert body["changed"] is True
    assert body["view"]["current_node_id"] == "n3"
    n1 = next(n for n in body["view"]["nodes"] if n["node_id"] == "n1")
    assert {o["label"]: o["archived_branch_key"] for o in n1["options"]}["No"] == "n1:No"

    focus = await _send(client, document_id, {"type": "toggle_branch", "branch_key": "n1:No"})
    assert focus["view"]["current_node_id"] == "n1"
    restored = await _send(client, document_id, {"type": "toggle_branch", "branch_key": "n1:No"})
    assert restored["view"]["current_node_id"] == "n2"

    state = (await client.get(
        f"/api/v1/documents/{document_id}/pages/2/tree/state",
    )).json()
    assert state["pathNodes"] == ["start", "n1", "n2"]
    assert state["selectedOptions"]["n1"] == "No"
    assert "n1:Maybe" in state["collapsedBranches"]


async def test_noop_command_reports_unchanged(client, document_id):
    body = await _send(client, document_id, {"type": "navigate_to", "node_id": "start"})
    assert body["changed"] is False
    assert body["notice"] is None


async def test_command_on_page_without_tree_is_notice(client, document_id):
    body = await _send(client, document_id, {"type": "restart"}, page=1)
    assert body["view"] is None
    assert body["notice"]["code"] == "TREE_NOT_AVAILABLE"
    assert body["notice"]["severity"] == "warning"


async def test_unknown_command_type_is_validation_error(client, document_id):
    res = await client.post(_commands(document_id), json={"command": {"type": "jump"}})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_dangling_target_yields_no_content_notice(client, document_id):
    await client.put(f"/api/v1/documents/{document_id}/pages/3/tree", json={"nodes": DANGLING})
    body = await _send(
        client, document_id,
        {"type": "select_option", "label": "Go", "target_id": "ghost"}, page=3,
    )
    assert body["view"]["current_node_missing"] is True
    assert body["notice"]["code"] == "NODE_NOT_FOUND"


async def test_set_expanded(client, document_id):
    body = await _send(client, document_id, {"type": "set_expanded", "expanded": False})
    assert body["view"]["expanded"] is False


async def test_restart_route(client, document_id):
    await _send(client, document_id, {"type": "select_option", "label": "Yes", "target_id": "n1"})
    res = await client.post(f"/api/v1/documents/{document_id}/pages/2/tree/restart")
    assert res.status_code == 200
    assert res.json()["view"]["current_node_id"] == "start"


async def test_restart_static_page_is_warning(client, document_id):
    await client.put(
        f"/api/v1/documents/{document_id}/pages/1/static", json={"html": "<p/>"},
    )
    res = await client.post(f"/api/v1/documents/{document_id}/pages/1/tree/restart")
    assert res.status_code == 409
    error = res.json()["error"]
    assert error["code"] == "NOT_A_DECISION_TREE"
    assert error["recoverable"] is True


async def test_export(client, document_id):
    res = await client.get(f"/api/v1/documents/{document_id}/pages/2/tree/export")
    assert res.status_code == 200
    body = res.json()
    assert body["filename"] == "decision-tree-page-2.json"
    assert len(body["tree"]["nodes"]) == len(TROUBLESHOOTING)


async def test_export_without_tree_is_warning(client, document_id):
    await client.put(
        f"/api/v1/documents/{document_id}/pages/3/classification",
        json={"content_type": "decision-tree"},
    )
    res = await client.get(f"/api/v1/documents/{document_id}/pages/3/tree/export")
    assert res.status_code == 404
    assert res.json()["error"]["severity"] == "warning"


async def test_view_without_tree_is_404(client, document_id):
    res = await client.get(f"/api/v1/documents/{document_id}/pages/1/tree/view")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "TREE_NOT_AVAILABLE"


async def test_batch_delivery(client, document_id):
    res = await client.post(f"/api/v1/documents/{document_id}/trees", json={"pages": [
        {"page_number": 1, "nodes": TROUBLESHOOTING},
        {"page_number": 3, "nodes": DANGLING},
    ]})
    assert res.status_code == 200
    assert [p["has_tree"] for p in res.json()["pages"]] == [True, True, True]


async def test_batch_with_invalid_tree_installs_nothing(client, document_id):
    res = await client.post(f"/api/v1/documents/{document_id}/trees", json={"pages": [
        {"page_number": 1, "nodes": TROUBLESHOOTING},
        {"page_number": 3, "nodes": []},
    ]})
    assert res.status_code == 400
    doc = (await client.get(f"/api/v1/documents/{document_id}")).json()
    assert [p["has_tree"] for p in doc["pages"]] == [False, True, False]


async def test_restart_before_tree_arrives_is_warning(client, document_id):
    await client.put(
        f"/api/v1/documents/{document_id}/pages/3/classification",
        json={"content_type": "decision-tree"},
    )
    res = await client.post(f"/api/v1/documents/{document_id}/pages/3/tree/restart")
    assert res.status_code == 404
    error = res.json()["error"]
    assert error["code"] == "TREE_NOT_AVAILABLE"
    assert error["recoverable"] is True

    state = await client.get(f"/api/v1/documents/{document_id}/pages/3/tree/state")
    assert state.status_code == 404


async def test_state_snapshot_resumes_exploration(client, document_id):
    await _send(client, document_id, {"type": "select_option", "label": "Yes", "target_id": "n1"})
    await _send(client, document_id, {"type": "select_option", "label": "No", "target_id": "n2"})
    await _send(client, document_id, {
        "type": "select_option", "label": "Maybe", "target_id": "n3", "source_node_id": "n1",
    })
    state_url = f"/api/v1/documents/{document_id}/pages/2/tree/state"
    saved = (await client.get(state_url)).json()

    await client.post(f"/api/v1/documents/{document_id}/pages/2/tree/restart")
    res = await client.put(state_url, json=saved)

    assert res.status_code == 200
    view = res.json()
    assert view["current_node_id"] == "n3"
    assert view["archived_branch_count"] == 1
    assert view["pristine"] is False
    assert (await client.get(state_url)).json() == saved


async def test_resume_rejects_state_breaking_path_rules(client, document_id):
    res = await client.put(
        f"/api/v1/documents/{document_id}/pages/2/tree/state",
        json={"currentNodeId": "n9", "pathNodes": ["start", "n1"]},
    )
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "INVALID_EXPLORATION_STATE"
    assert error["context"]["page_number"] == 2


async def test_resume_rejects_malformed_branch(client, document_id):
    res = await client.put(
        f"/api/v1/documents/{document_id}/pages/2/tree/state",
        json={"collapsedBranches": {"n1:No": {"option": "No"}}},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"
