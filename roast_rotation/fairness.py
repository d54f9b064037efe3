from __future__ import annotations
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Set
from zoneinfo import ZoneInfo

from .constants import DATE_FORMAT, LOOKBACK_DAYS
from .models import Assignment, AssignmentHistory, Member


def parse_date(value: str) -> date:
    return datetime.strptime(value, DATE_FORMAT).date()


def local_today(tz: str, now: Optional[datetime] = None) -> str:
    """Wall-clock date in tz as YYYY-MM-DD."""
    zone = ZoneInfo(tz)
    if now is None:
        now = datetime.now(zone)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=zone)
    return now.astimezone(zone).date().strftime(DATE_FORMAT)


def lookback_cutoff(target_date: str, lookback_days: int = LOOKBACK_DAYS) -> date:
    """Earliest date (inclusive) that still counts as recent for target_date."""
    return parse_date(target_date) - timedelta(days=lookback_days)


def recent_member_ids(
    history: Iterable[AssignmentHistory],
    team_id: str,
    label_id: str,
    target_date: str,
    lookback_days: int = LOOKBACK_DAYS,
) -> Set[str]:
    cutoff = lookback_cutoff(target_date, lookback_days)
    out: Set[str] = set()
    for h in history:
        if h.team_id != team_id or h.task_label_id != label_id:
            continue
        if not h.member_id:
            continue
        if parse_date(h.assigned_date) >= cutoff:
            out.add(h.member_id)
    return out


def current_holder(assignments: Iterable[Assignment], team_id: str, label_id: str) -> Optional[str]:
    # first row wins when the grid carries duplicates for a key
    for a in assignments:
        if a.team_id == team_id and a.task_label_id == label_id:
            return a.member_id or None
    return None


def candidate_pool(
    members: List[Member],
    label_id: str,
    used: Set[str],
    recent: Set[str],
    holder: Optional[str],
) -> List[Member]:
    """
    Members eligible for one slot, narrowed by preference with fallback:
    - base: not used this run and not excluded from the label (never relaxed)
    - prefer: not recent and not the current holder
    - then: not the current holder
    - then: base
    Empty only when base is empty.
    """
    base = [m for m in members if m.id not in used and not m.is_excluded_from(label_id)]
    if not base:
        return []

    preferred = [m for m in base if m.id not in recent and m.id != holder]
    if preferred:
        return preferred

    not_holder = [m for m in base if m.id != holder]
    if not_holder:
        return not_holder

    return base
