import pytest

from roast_rotation.engine_test_helpers import quick_data
from roast_rotation.roster import (
    add_member,
    add_task_label,
    add_team,
    delete_member,
    delete_task_label,
    delete_team,
    edit_task_label,
    ordered,
    rename_member,
    rename_team,
    set_excluded,
)


def _data():
    return quick_data(
        {"A": [("a", ["y"]), ("b", [])], "B": [("c", [])]},
        ["x", "y"],
        current={("A", "x"): "a", ("A", "y"): "b", ("B", "x"): "c"},
        history=[("A", "x", "a", "2025-11-07"), ("A", "y", "b", "2025-11-07"), ("B", "x", "c", "2025-11-07")],
    )


def test_add_team_member_label():
    data = add_team(quick_data({}, []), "Morning", team_id="T1")
    data = add_team(data, "Evening")
    assert [t.name for t in data.teams] == ["Morning", "Evening"]
    assert [t.order for t in data.teams] == [0, 1]
    assert data.teams[1].id

    data = add_member(data, " Alice ", "T1", member_id="m1")
    assert data.members[0].name == "Alice"
    assert data.members[0].team_id == "T1"

    data = add_task_label(data, "Roast", "Cool", label_id="L1")
    data = add_task_label(data, "Sweep", "  ")
    assert data.task_labels[0].display == "Roast / Cool"
    assert data.task_labels[1].right_label is None


def test_add_rejects_blank_and_unknown():
    data = _data()
    with pytest.raises(ValueError):
        add_team(data, "  ")
    with pytest.raises(ValueError):
        add_team(data, "Dup", team_id="A")
    with pytest.raises(KeyError):
        add_member(data, "Zed", "nope")
    with pytest.raises(ValueError):
        add_task_label(data, "")


def test_rename_and_edit():
    data = rename_team(_data(), "A", "Roasters")
    data = rename_member(data, "a", "Ann")
    data = edit_task_label(data, "x", "Pack", "Ship")
    assert data.team_by_id()["A"].name == "Roasters"
    assert data.member_by_id()["a"].name == "Ann"
    assert data.label_by_id()["x"].display == "Pack / Ship"
    with pytest.raises(KeyError):
        rename_team(data, "zz", "X")


def test_set_excluded_toggles():
    data = set_excluded(_data(), "b", "x", True)
    assert data.member_by_id()["b"].excluded_task_label_ids == ["x"]
    data = set_excluded(data, "b", "x", True)
    assert data.member_by_id()["b"].excluded_task_label_ids == ["x"]
    data = set_excluded(data, "b", "x", False)
    assert data.member_by_id()["b"].excluded_task_label_ids == []


def test_delete_team_cascades():
    data = delete_team(_data(), "A")
    assert [t.id for t in data.teams] == ["B"]
    assert [m.id for m in data.members] == ["c"]
    assert all(a.team_id == "B" for a in data.assignments)
    assert all(h.team_id == "B" for h in data.assignment_history)


def test_delete_member_empties_cells_and_strips_history():
    before = _data()
    data = delete_member(before, "a")
    assert "a" not in data.member_by_id()
    assert len(data.assignments) == len(before.assignments)
    assert [a.member_id for a in data.assignments if a.key == ("A", "x")] == [None]
    assert all(h.member_id != "a" for h in data.assignment_history)
    assert len(data.assignment_history) == 2


def test_delete_task_label_cascades():
    data = delete_task_label(_data(), "y")
    assert [lbl.id for lbl in data.task_labels] == ["x"]
    assert all(a.task_label_id == "x" for a in data.assignments)
    assert all(h.task_label_id == "x" for h in data.assignment_history)
    assert data.member_by_id()["a"].excluded_task_label_ids == []


def test_ordered_puts_unordered_last():
    data = _data()
    teams = [t.model_copy(update={"order": o}) for t, o in zip(data.teams, [None, 0])]
    assert [t.id for t in ordered(teams)] == ["B", "A"]
