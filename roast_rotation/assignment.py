# roast_rotation/assignment.py
from __future__ import annotations
import logging
from typing import Dict, List, Optional, Tuple

from .models import Assignment

logger = logging.getLogger("roast_rotation.assignment")

Cell = Tuple[str, str]  # (team_id, task_label_id)


def find_assignment(assignments: List[Assignment], team_id: str, label_id: str) -> Optional[Assignment]:
    """First row for the cell; the store does not enforce one row per key."""
    for a in assignments:
        if a.team_id == team_id and a.task_label_id == label_id:
            return a
    return None


def grid_lookup(assignments: List[Assignment]) -> Dict[Cell, Optional[str]]:
    """(team_id, label_id) -> member_id, first row per key."""
    out: Dict[Cell, Optional[str]] = {}
    for a in assignments:
        out.setdefault(a.key, a.member_id)
    return out


def swap_cells(assignments: List[Assignment], first: Cell, second: Cell, today: str) -> List[Assignment]:
    """
    Exchange the members of two cells of the same team.

    Manual override: no history, no exclusion check. Cross-team pairs and
    a cell paired with itself leave the grid unchanged. Missing cells are
    created (empty, dated today) before the exchange.
    """
    rows = [a.model_copy() for a in assignments]
    if first[0] != second[0]:
        logger.info("ignoring cross-team swap %s <-> %s", first, second)
        return rows
    if first == second:
        return rows

    for team_id, label_id in (first, second):
        if find_assignment(rows, team_id, label_id) is None:
            rows.append(Assignment(
                team_id=team_id, task_label_id=label_id, member_id=None, assigned_date=today,
            ))

    first_member = find_assignment(rows, *first).member_id
    second_member = find_assignment(rows, *second).member_id

    out: List[Assignment] = []
    for a in rows:
        if a.key == first:
            out.append(a.model_copy(update={"member_id": second_member}))
        elif a.key == second:
            out.append(a.model_copy(update={"member_id": first_member}))
        else:
            out.append(a)
    return out


def swap_members(
    assignments: List[Assignment], team_id: str, first_label_id: str, second_label_id: str, today: str
) -> List[Assignment]:
    return swap_cells(assignments, (team_id, first_label_id), (team_id, second_label_id), today)
