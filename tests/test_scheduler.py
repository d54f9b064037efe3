from datetime import datetime, timezone

import numpy as np
import pytest

from roast_rotation.assignment import swap_members
from roast_rotation.engine_test_helpers import quick_data
from roast_rotation.fairness import local_today
from roast_rotation.models import AppConfig, ShuffleResult
from roast_rotation.scheduler import (
    already_shuffled,
    commit_shuffle,
    gate_error,
    is_weekend,
    schedule_shuffle,
)

MONDAY = "2025-11-10"
SATURDAY = "2025-11-08"


def _data(**kw):
    return quick_data({"A": [("a", []), ("b", [])], "B": []}, ["x", "y"], **kw)


def test_local_today_uses_timezone():
    late_utc = datetime(2025, 11, 10, 20, 30, tzinfo=timezone.utc)
    assert local_today("Asia/Tokyo", now=late_utc) == "2025-11-11"
    assert local_today("UTC", now=late_utc) == "2025-11-10"
    # naive times are read as local to the zone
    assert local_today("Asia/Tokyo", now=datetime(2025, 11, 10, 23, 59)) == "2025-11-10"


def test_weekend_gate():
    assert is_weekend(SATURDAY, [5, 6])
    assert is_weekend("2025-11-09", [5, 6])
    assert not is_weekend(MONDAY, [5, 6])
    assert not is_weekend(SATURDAY, [])


def test_already_shuffled_checks_current_grid_only():
    data = _data(current={("A", "x"): "a"}, current_date=MONDAY)
    assert already_shuffled(data.assignments, MONDAY)
    assert not already_shuffled(data.assignments, "2025-11-11")


def test_gate_error_messages():
    cfg = AppConfig()
    assert gate_error(_data(), MONDAY, cfg) is None
    assert "Sat" in gate_error(_data(), SATURDAY, cfg)
    shuffled = _data(current={("A", "x"): "a"}, current_date=MONDAY)
    assert "already" in gate_error(shuffled, MONDAY, cfg)


def test_schedule_shuffle_blocked_on_weekend():
    res = schedule_shuffle(_data(), AppConfig(), rng=np.random.default_rng(0), today=SATURDAY)
    assert not res.ok
    assert res.assignments == [] and res.history == []
    assert res.target_date == SATURDAY


def test_force_skips_gate():
    res = schedule_shuffle(_data(), AppConfig(), rng=np.random.default_rng(0), today=SATURDAY, force=True)
    assert res.ok
    assert len(res.assignments) == 4
    assert all(a.assigned_date == SATURDAY for a in res.assignments)


def test_commit_replaces_grid_and_appends_history():
    data = _data(
        current={("A", "x"): "a", ("A", "y"): "b"},
        history=[("A", "x", "a", "2025-11-07")],
        current_date="2025-11-07",
    )
    res = schedule_shuffle(data, AppConfig(), rng=np.random.default_rng(1), today=MONDAY)
    assert res.ok
    filled = [a for a in res.assignments if a.member_id is not None]
    assert len(res.history) == len(filled)

    committed = commit_shuffle(data, res)
    assert committed.assignments == res.assignments
    assert committed.assignment_history[:1] == data.assignment_history
    assert committed.assignment_history[1:] == res.history
    assert {(h.team_id, h.task_label_id, h.member_id, h.assigned_date) for h in res.history} == {
        (a.team_id, a.task_label_id, a.member_id, a.assigned_date) for a in filled
    }
    # empty team B left no history
    assert all(h.team_id == "A" for h in res.history)
    # once committed, the same day is blocked
    assert gate_error(committed, MONDAY, AppConfig()) is not None


def test_commit_blocked_result_raises():
    with pytest.raises(ValueError):
        commit_shuffle(_data(), ShuffleResult(target_date=SATURDAY, error="No shuffle on Sat"))


def test_cells_created_by_a_swap_do_not_close_the_gate():
    data = _data(current={("A", "x"): "a", ("A", "y"): "b"}, current_date="2025-11-07")
    swapped = swap_members(data.assignments, "B", "x", "y", MONDAY)
    assert not already_shuffled(swapped, MONDAY)

    # swap into a missing cell of a team shuffled earlier
    grid = [a for a in data.assignments if a.task_label_id == "x"]
    swapped = swap_members(grid, "A", "x", "y", MONDAY)
    assert not already_shuffled(swapped, MONDAY)
    assert gate_error(data.model_copy(update={"assignments": swapped}), MONDAY, AppConfig()) is None


def test_swap_after_todays_shuffle_keeps_gate_closed():
    res = schedule_shuffle(_data(), AppConfig(), rng=np.random.default_rng(0), today=MONDAY)
    committed = commit_shuffle(_data(), res)
    swapped = swap_members(committed.assignments, "A", "x", "y", MONDAY)
    assert already_shuffled(swapped, MONDAY)


def test_empty_grid_dated_today_is_not_shuffled():
    data = _data(current={("B", "x"): None, ("B", "y"): None}, current_date=MONDAY)
    assert not already_shuffled(data.assignments, MONDAY)
    assert not already_shuffled([], MONDAY)
