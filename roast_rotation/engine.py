from __future__ import annotations
import logging
from typing import List, Optional, Set

import numpy as np

from .constants import is_placeholder_label_id, placeholder_label_id
from .fairness import candidate_pool, current_holder, local_today, recent_member_ids
from .models import AppConfig, AppData, Assignment, AssignmentHistory, Member, TaskLabel, Team
from .roster import ordered

logger = logging.getLogger("roast_rotation.engine")


# -----------------------
# Label sets
# -----------------------
def display_labels(
    task_labels: List[TaskLabel], assignments: List[Assignment], placeholders: bool = True
) -> List[TaskLabel]:
    """
    Stored labels first, then label ids only referenced by current assignments
    (e.g. a label deleted after it was assigned). Orphans get a placeholder so
    their slot keeps a row.

    With placeholders=False, padding slots left by an earlier run are skipped;
    team_labels rebuilds each team's own.
    """
    labels = list(task_labels)
    seen: Set[str] = {lbl.id for lbl in labels}
    for a in assignments:
        if a.task_label_id in seen:
            continue
        if not placeholders and is_placeholder_label_id(a.task_label_id):
            continue
        seen.add(a.task_label_id)
        labels.append(TaskLabel.placeholder(a.task_label_id))
    return labels


def team_labels(team: Team, labels: List[TaskLabel], member_count: int, pad: bool) -> List[TaskLabel]:
    if not pad or member_count <= len(labels):
        return list(labels)
    out = list(labels)
    for i in range(len(labels), member_count):
        out.append(TaskLabel.placeholder(placeholder_label_id(team.id, i)))
    return out


# -----------------------
# Shuffle
# -----------------------
def _empty_rows(team: Team, labels: List[TaskLabel], target_date: str) -> List[Assignment]:
    return [
        Assignment(team_id=team.id, task_label_id=lbl.id, member_id=None, assigned_date=target_date)
        for lbl in labels
    ]


def shuffle_team(
    team: Team,
    members: List[Member],
    labels: List[TaskLabel],
    current: List[Assignment],
    history: List[AssignmentHistory],
    target_date: str,
    rng: np.random.Generator,
    config: AppConfig,
) -> List[Assignment]:
    """One team's rows: each member holds at most one slot, overflow slots stay empty."""
    if not members:
        return _empty_rows(team, labels, target_date)

    order = rng.permutation(len(members))
    shuffled = [members[i] for i in order]
    slots = team_labels(team, labels, len(members), config.pad_labels_to_members)

    used: Set[str] = set()
    rows: List[Assignment] = []
    for lbl in slots:
        recent = recent_member_ids(history, team.id, lbl.id, target_date, config.lookback_days)
        holder = current_holder(current, team.id, lbl.id)
        pool = candidate_pool(shuffled, lbl.id, used, recent, holder)

        picked: Optional[str] = None
        if pool:
            picked = pool[int(rng.integers(len(pool)))].id
            used.add(picked)

        rows.append(Assignment(
            team_id=team.id, task_label_id=lbl.id, member_id=picked, assigned_date=target_date,
        ))

    logger.debug(
        "team %s: %d slots, %d filled, %d members unused",
        team.id, len(rows), len(used), len(members) - len(used),
    )
    return rows


def shuffle_assignments(
    data: AppData,
    target_date: Optional[str] = None,
    rng: Optional[np.random.Generator] = None,
    config: Optional[AppConfig] = None,
) -> List[Assignment]:
    """
    Compute a fresh assignment grid for target_date (defaults to today in config.timezone).

    Teams are independent. The input snapshot is not modified; calling twice
    simply draws again.
    """
    config = config or AppConfig()
    if rng is None:
        rng = np.random.default_rng(config.random_seed)
    target_date = target_date or local_today(config.timezone)

    labels = display_labels(ordered(data.task_labels), data.assignments, placeholders=False)
    result: List[Assignment] = []
    for team in data.teams:
        result.extend(shuffle_team(
            team,
            data.members_of(team.id),
            labels,
            data.assignments,
            data.assignment_history,
            target_date,
            rng,
            config,
        ))
    return result


def history_entries(assignments: List[Assignment]) -> List[AssignmentHistory]:
    """History rows for a committed grid; empty slots leave no trace."""
    return [
        AssignmentHistory(
            team_id=a.team_id,
            task_label_id=a.task_label_id,
            member_id=a.member_id,
            assigned_date=a.assigned_date,
        )
        for a in assignments
        if a.member_id is not None
    ]

