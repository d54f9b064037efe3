"""
Internal helpers for tests (not imported by app).
"""
from __future__ import annotations
from typing import Dict, List, Optional, Sequence, Tuple

from .models import AppData, Assignment, AssignmentHistory, Member, TaskLabel, Team


def quick_member(mid: str, team_id: str, excludes: Sequence[str] = ()) -> Member:
    return Member(id=mid, name=mid.capitalize(), team_id=team_id, excluded_task_label_ids=list(excludes))


def quick_data(
    teams: Dict[str, List[Tuple[str, Sequence[str]]]],
    labels: Sequence[str],
    current: Optional[Dict[Tuple[str, str], Optional[str]]] = None,
    history: Sequence[Tuple[str, str, str, str]] = (),
    current_date: str = "2025-11-10",
) -> AppData:
    """
    teams: team_id -> [(member_id, excluded_label_ids), ...]
    current: (team_id, label_id) -> member_id
    history: (team_id, label_id, member_id, date)
    """
    return AppData(
        teams=[Team(id=tid, name=tid) for tid in teams],
        members=[quick_member(mid, tid, ex) for tid, ms in teams.items() for mid, ex in ms],
        task_labels=[TaskLabel(id=lid, left_label=lid) for lid in labels],
        assignments=[
            Assignment(team_id=t, task_label_id=lbl, member_id=m, assigned_date=current_date)
            for (t, lbl), m in (current or {}).items()
        ],
        assignment_history=[
            AssignmentHistory(team_id=t, task_label_id=lbl, member_id=m, assigned_date=d)
            for t, lbl, m, d in history
        ],
    )
