from datetime import date

from roast_rotation.fairness import candidate_pool, current_holder, lookback_cutoff, recent_member_ids
from roast_rotation.engine_test_helpers import quick_member
from roast_rotation.models import Assignment, AssignmentHistory


def _h(team, label, member, day):
    return AssignmentHistory(team_id=team, task_label_id=label, member_id=member, assigned_date=day)


def test_lookback_cutoff_is_plain_date_math():
    assert lookback_cutoff("2025-11-10") == date(2025, 11, 3)
    assert lookback_cutoff("2025-03-02", 7) == date(2025, 2, 23)
    assert lookback_cutoff("2025-11-10", 0) == date(2025, 11, 10)


def test_recent_member_ids_filters_key_and_window():
    history = [
        _h("A", "x", "a", "2025-11-03"),  # on the cutoff: recent
        _h("A", "x", "b", "2025-11-02"),  # too old
        _h("A", "y", "c", "2025-11-09"),  # other label
        _h("B", "x", "d", "2025-11-09"),  # other team
        _h("A", "x", "e", "2025-11-09"),
    ]
    assert recent_member_ids(history, "A", "x", "2025-11-10") == {"a", "e"}
    assert recent_member_ids(history, "A", "x", "2025-11-10", lookback_days=1) == {"e"}


def test_current_holder_first_row_wins():
    rows = [
        Assignment(team_id="A", task_label_id="x", member_id="a", assigned_date="2025-11-07"),
        Assignment(team_id="A", task_label_id="x", member_id="b", assigned_date="2025-11-07"),
        Assignment(team_id="A", task_label_id="y", member_id=None, assigned_date="2025-11-07"),
    ]
    assert current_holder(rows, "A", "x") == "a"
    assert current_holder(rows, "A", "y") is None
    assert current_holder(rows, "B", "x") is None


def test_candidate_pool_fallback_chain():
    a, b, c = quick_member("a", "T"), quick_member("b", "T"), quick_member("c", "T", excludes=["x"])
    members = [a, b, c]

    # preferred: not recent, not holder
    assert [m.id for m in candidate_pool(members, "y", set(), {"a"}, "b")] == ["c"]
    assert [m.id for m in candidate_pool(members, "x", set(), set(), "a")] == ["b"]
    # a recent, b holder: nobody preferred, fall back to not-holder
    assert [m.id for m in candidate_pool(members, "x", set(), {"a"}, "b")] == ["a"]
    # everyone recent: drop to not-holder
    assert [m.id for m in candidate_pool(members, "x", set(), {"a", "b"}, "a")] == ["b"]
    # only the holder left: take it
    assert [m.id for m in candidate_pool(members, "x", {"b"}, {"a"}, "a")] == ["a"]
    # exclusion is never relaxed
    assert candidate_pool(members, "x", {"a", "b"}, set(), None) == []
    assert [m.id for m in candidate_pool(members, "y", {"a", "b"}, {"c"}, "c")] == ["c"]
