# roast_rotation/scheduler.py
from __future__ import annotations
import logging
from typing import Iterable, List, Optional

import numpy as np

from .constants import WEEKDAY_NAMES
from .engine import history_entries, shuffle_assignments
from .fairness import local_today, parse_date
from .models import AppConfig, AppData, Assignment, ShuffleResult

logger = logging.getLogger("roast_rotation.scheduler")


def is_weekend(day: str, weekend_days: Iterable[int]) -> bool:
    return parse_date(day).weekday() in set(weekend_days)


def already_shuffled(assignments: List[Assignment], day: str) -> bool:
    """
    A committed shuffle rewrites every row with its own date, so the grid counts
    as shuffled for day only when all rows carry day and at least one is filled.
    Cells a manual swap creates are dated today too; on their own they do not
    close the gate.
    """
    if not assignments:
        return False
    if any(a.assigned_date != day for a in assignments):
        return False
    return any(a.member_id is not None for a in assignments)


def gate_error(data: AppData, day: str, config: AppConfig) -> Optional[str]:
    """Reason the daily shuffle may not run on day, or None."""
    if is_weekend(day, config.weekend_days):
        return f"No shuffle on {WEEKDAY_NAMES[parse_date(day).weekday()]} ({day})."
    if already_shuffled(data.assignments, day):
        return f"Assignments were already shuffled for {day}."
    return None


def schedule_shuffle(
    data: AppData,
    config: AppConfig,
    rng: Optional[np.random.Generator] = None,
    today: Optional[str] = None,
    force: bool = False,
) -> ShuffleResult:
    """
    Caller-side wrapper around the engine: one shuffle per local weekday.
    force skips the gate (developer mode). Nothing is committed here.
    """
    day = today or local_today(config.timezone)
    if not force:
        err = gate_error(data, day, config)
        if err:
            logger.warning("shuffle blocked: %s", err)
            return ShuffleResult(target_date=day, error=err)

    rows = shuffle_assignments(data, target_date=day, rng=rng, config=config)
    return ShuffleResult(target_date=day, assignments=rows, history=history_entries(rows))


def commit_shuffle(data: AppData, result: ShuffleResult) -> AppData:
    """Replace the grid, append history. A failed result is rejected."""
    if not result.ok:
        raise ValueError(f"Cannot commit a blocked shuffle: {result.error}")
    logger.info(
        "committing shuffle for %s: %d rows, %d history entries",
        result.target_date, len(result.assignments), len(result.history),
    )
    return data.model_copy(update={
        "assignments": list(result.assignments),
        "assignment_history": list(data.assignment_history) + list(result.history),
    })

