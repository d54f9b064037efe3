# FILE: roast_rotation/validation.py
from __future__ import annotations
from collections import Counter
from typing import List

from .constants import is_placeholder_label_id
from .models import AppData, Assignment


def exclusion_violations(data: AppData) -> List[Assignment]:
    """Grid rows that put a member on a label they are excluded from (manual swaps can do this)."""
    members = data.member_by_id()
    out = []
    for a in data.assignments:
        m = members.get(a.member_id) if a.member_id else None
        if m is not None and m.is_excluded_from(a.task_label_id):
            out.append(a)
    return out


def validate_snapshot(data: AppData) -> List[str]:
    errs = []
    team_ids = set(data.team_by_id())
    label_ids = set(data.label_by_id())
    members = data.member_by_id()

    for m in data.members:
        if m.team_id not in team_ids:
            errs.append(f"Member {m.name} ({m.id}) belongs to unknown team {m.team_id}")

    for a in data.assignments:
        if a.team_id not in team_ids:
            errs.append(f"Assignment references unknown team {a.team_id}")
        if a.task_label_id not in label_ids and not is_placeholder_label_id(a.task_label_id):
            errs.append(f"Assignment references missing task label {a.task_label_id} (shown as blank label)")
        if a.member_id and a.member_id not in members:
            errs.append(f"Assignment references unknown member {a.member_id}")

    for a in exclusion_violations(data):
        m = members[a.member_id]
        errs.append(f"{m.name} is assigned to excluded label {a.task_label_id} in team {a.team_id}")

    dupes = [k for k, n in Counter(a.key for a in data.assignments).items() if n > 1]
    if dupes:
        errs.append(f"Duplicate assignment rows for: {', '.join(f'{t}/{lbl}' for t, lbl in sorted(dupes))}")

    for h in data.assignment_history:
        if h.team_id not in team_ids:
            errs.append(f"History row {h.assigned_date} references unknown team {h.team_id}")

    return errs
