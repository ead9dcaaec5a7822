"""Exploration State: tests for defaults and read-only helpers."""

from flowdoc.core.exploration_state import ArchivedBranch, ExplorationState


def test_initial_state_is_rooted_at_start():
    state = ExplorationState()
    assert state.current_node_id == "start"
    assert state.path_nodes == ["start"]
    assert state.node_history == ["start"]
    assert state.selected_options == {}
    assert state.collapsed_branches == {}
    assert state.expanded is True


def test_instances_do_not_share_lists():
    a, b = ExplorationState(), ExplorationState()
    a.path_nodes.append("n1")
    assert b.path_nodes == ["start"]


def test_history_index_is_first_occurrence():
    state = ExplorationState(node_history=["start", "n1", "start"])
    assert state.history_index("start") == 0
    assert state.history_index("n1") == 1
    assert state.history_index("n9") == -1


def test_archived_alternatives_are_scoped_to_node():
    state = ExplorationState()
    state.collapsed_branches["n1:No"] = ArchivedBranch("n1", "No", ("n2",), ("n2",))
    state.collapsed_branches["start:No"] = ArchivedBranch("start", "No", ("n4",), ("n4",))
    assert state.archived_alternatives("n1") == {"No": "n1:No"}
    assert state.archived_alternatives("n2") == {}


def test_pristine_requires_a_fresh_path():
    assert ExplorationState().is_pristine
    assert ExplorationState(expanded=False).is_pristine
    moved = ExplorationState(path_nodes=["start", "n1", "n3"], current_node_id="n1")
    assert not moved.is_pristine
    archived = ExplorationState()
    archived.collapsed_branches["start:No"] = ArchivedBranch("start", "No", ("n4",), ("n4",))
    assert not archived.is_pristine


def test_well_formed_state_has_no_structural_problems():
    state = ExplorationState(
        current_node_id="n1", path_nodes=["start", "n1", "n3"],
        node_history=["start", "n1", "n3"],
    )
    assert state.structural_problems() == []


def test_structural_problems_name_each_violation():
    state = ExplorationState(
        current_node_id="n9", path_nodes=["n1", "n1"], node_history=[],
    )
    assert state.structural_problems() == [
        "pathNodes must start with the start node",
        "pathNodes must not repeat a node",
        "currentNodeId must be on pathNodes",
        "nodeHistory must start with the start node",
    ]


def test_resume_node_of_archived_branch():
    assert ArchivedBranch("n1", "No", ("n2",), ("n2", "n7")).resume_node_id == "n7"
    assert ArchivedBranch("n1", "No").resume_node_id == "n1"
