from __future__ import annotations
from typing import List

# --- Dates ---
DATE_FORMAT = "%Y-%m-%d"

# Fairness look-back: history rows on or after (target - N days) count as recent
LOOKBACK_DAYS = 7

# --- Daily gate (caller side) ---
DEFAULT_TIMEZONE = "Asia/Tokyo"
WEEKEND_DAYS: List[int] = [5, 6]  # date.weekday(): Sat, Sun
WEEKDAY_NAMES: List[str] = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

# --- Synthetic labels ---
PLACEHOLDER_LABEL_PREFIX = "empty-label"


def placeholder_label_id(team_id: str, index: int) -> str:
    return f"{PLACEHOLDER_LABEL_PREFIX}-{team_id}-{index}"


def is_placeholder_label_id(label_id: str) -> bool:
    return str(label_id).startswith(PLACEHOLDER_LABEL_PREFIX + "-")

