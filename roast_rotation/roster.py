"""
Roster editing: teams, members, task labels and per-member exclusions.

Every function takes an AppData snapshot and returns a new one; deletes cascade
into the assignment grid and the history log so no row points at a missing
team, member or label.
"""
from __future__ import annotations
import logging
import uuid
from typing import List, Optional, Sequence, TypeVar

from .models import AppData, Member, TaskLabel, Team

logger = logging.getLogger("roast_rotation.roster")

T = TypeVar("T", Team, Member, TaskLabel)


def ordered(items: Sequence[T]) -> List[T]:
    """Sort by `order`; items without one keep their relative position at the end."""
    return sorted(items, key=lambda x: (x.order is None, x.order if x.order is not None else 0))


def _next_order(items: Sequence[T]) -> int:
    orders = [x.order for x in items if x.order is not None]
    return (max(orders) + 1) if orders else 0


def _new_id() -> str:
    return uuid.uuid4().hex


def _require_text(value: str, what: str) -> str:
    v = (value or "").strip()
    if not v:
        raise ValueError(f"{what} must not be blank")
    return v


def _find(items: Sequence[T], item_id: str, what: str) -> T:
    for x in items:
        if x.id == item_id:
            return x
    raise KeyError(f"Unknown {what}: {item_id}")


# -----------------------
# Teams
# -----------------------
def add_team(data: AppData, name: str, team_id: Optional[str] = None) -> AppData:
    team = Team(id=team_id or _new_id(), name=_require_text(name, "Team name"), order=_next_order(data.teams))
    if any(t.id == team.id for t in data.teams):
        raise ValueError(f"Duplicate team id: {team.id}")
    return data.model_copy(update={"teams": data.teams + [team]})


def rename_team(data: AppData, team_id: str, name: str) -> AppData:
    _find(data.teams, team_id, "team")
    name = _require_text(name, "Team name")
    teams = [t.model_copy(update={"name": name}) if t.id == team_id else t for t in data.teams]
    return data.model_copy(update={"teams": teams})


def delete_team(data: AppData, team_id: str) -> AppData:
    _find(data.teams, team_id, "team")
    members = [m for m in data.members if m.team_id != team_id]
    logger.info(
        "deleting team %s with %d members", team_id, len(data.members) - len(members),
    )
    return data.model_copy(update={
        "teams": [t for t in data.teams if t.id != team_id],
        "members": members,
        "assignments": [a for a in data.assignments if a.team_id != team_id],
        "assignment_history": [h for h in data.assignment_history if h.team_id != team_id],
    })


# -----------------------
# Members
# -----------------------
def add_member(
    data: AppData,
    name: str,
    team_id: str,
    member_id: Optional[str] = None,
    excluded_task_label_ids: Optional[List[str]] = None,
) -> AppData:
    _find(data.teams, team_id, "team")
    member = Member(
        id=member_id or _new_id(),
        name=_require_text(name, "Member name"),
        team_id=team_id,
        excluded_task_label_ids=list(excluded_task_label_ids or []),
        order=_next_order(data.members_of(team_id)),
    )
    if any(m.id == member.id for m in data.members):
        raise ValueError(f"Duplicate member id: {member.id}")
    return data.model_copy(update={"members": data.members + [member]})


def rename_member(data: AppData, member_id: str, name: str) -> AppData:
    _find(data.members, member_id, "member")
    name = _require_text(name, "Member name")
    members = [m.model_copy(update={"name": name}) if m.id == member_id else m for m in data.members]
    return data.model_copy(update={"members": members})


def set_excluded(data: AppData, member_id: str, label_id: str, excluded: bool) -> AppData:
    """Add or remove one permanent exclusion (member never drawn for label)."""
    member = _find(data.members, member_id, "member")
    current = [x for x in member.excluded_task_label_ids if x != label_id]
    if excluded:
        current.append(label_id)
    updated = member.model_copy(update={"excluded_task_label_ids": current})
    members = [updated if m.id == member_id else m for m in data.members]
    return data.model_copy(update={"members": members})


def delete_member(data: AppData, member_id: str) -> AppData:
    """Remove the member; their grid cells become empty and their history goes."""
    _find(data.members, member_id, "member")
    assignments = [
        a.model_copy(update={"member_id": None}) if a.member_id == member_id else a
        for a in data.assignments
    ]
    logger.info("deleting member %s", member_id)
    return data.model_copy(update={
        "members": [m for m in data.members if m.id != member_id],
        "assignments": assignments,
        "assignment_history": [h for h in data.assignment_history if h.member_id != member_id],
    })


# -----------------------
# Task labels
# -----------------------
def add_task_label(
    data: AppData,
    left_label: str,
    right_label: Optional[str] = None,
    label_id: Optional[str] = None,
) -> AppData:
    label = TaskLabel(
        id=label_id or _new_id(),
        left_label=_require_text(left_label, "Left label"),
        right_label=(right_label or "").strip() or None,
        order=_next_order(data.task_labels),
    )
    if any(lbl.id == label.id for lbl in data.task_labels):
        raise ValueError(f"Duplicate task label id: {label.id}")
    return data.model_copy(update={"task_labels": data.task_labels + [label]})


def edit_task_label(data: AppData, label_id: str, left_label: str, right_label: Optional[str] = None) -> AppData:
    _find(data.task_labels, label_id, "task label")
    update = {
        "left_label": _require_text(left_label, "Left label"),
        "right_label": (right_label or "").strip() or None,
    }
    labels = [lbl.model_copy(update=update) if lbl.id == label_id else lbl for lbl in data.task_labels]
    return data.model_copy(update={"task_labels": labels})


def delete_task_label(data: AppData, label_id: str) -> AppData:
    _find(data.task_labels, label_id, "task label")
    members = [
        m.model_copy(update={"excluded_task_label_ids": [x for x in m.excluded_task_label_ids if x != label_id]})
        if m.is_excluded_from(label_id) else m
        for m in data.members
    ]
    logger.info("deleting task label %s", label_id)
    return data.model_copy(update={
        "task_labels": [lbl for lbl in data.task_labels if lbl.id != label_id],
        "members": members,
        "assignments": [a for a in data.assignments if a.task_label_id != label_id],
        "assignment_history": [h for h in data.assignment_history if h.task_label_id != label_id],
    })
