# roast_rotation/io.py
from __future__ import annotations
import io
import json
import logging
import os
import re
from typing import Dict, List

import pandas as pd
from pydantic import ValidationError

from .engine import display_labels
from .models import AppData
from .roster import ordered
from .assignment import grid_lookup

logger = logging.getLogger("roast_rotation.io")

USER_KEY = re.compile(r"^[A-Za-z0-9_.@-]+$")
HISTORY_COLUMNS = ["date", "team", "label", "member", "team_id", "task_label_id", "member_id"]


class DataStore:
    """
    One JSON document per user key, standing in for the hosted document store.
    Documents are stored with camelCase keys; missing collections load as empty.
    Saves merge into the existing document, so top-level keys this package does
    not model (roast schedules, tasting sessions, ...) are kept.
    """

    def __init__(self, root: str):
        self.root = root

    def path_for(self, user_key: str) -> str:
        if not USER_KEY.match(user_key or ""):
            raise ValueError(f"Invalid user key: {user_key!r}")
        return os.path.join(self.root, f"{user_key}.json")

    def exists(self, user_key: str) -> bool:
        return os.path.exists(self.path_for(user_key))

    def _read_doc(self, path: str) -> Dict:
        with open(path, "r", encoding="utf-8") as f:
            try:
                doc = json.load(f)
            except json.JSONDecodeError as e:
                logger.warning("corrupt store document %s: %s", path, e)
                raise ValueError(f"Store document {path} is not valid JSON: {e}") from e
        if not isinstance(doc, dict):
            raise ValueError(f"Store document {path} must be a JSON object.")
        return doc

    def load(self, user_key: str) -> AppData:
        path = self.path_for(user_key)
        if not os.path.exists(path):
            data = AppData()
            self.save(user_key, data)
            return data
        doc = self._read_doc(path)
        try:
            return AppData.model_validate(doc)
        except ValidationError as e:
            logger.warning("invalid store document %s", path)
            raise ValueError(f"Store document {path} failed validation: {e}") from e

    def save(self, user_key: str, data: AppData) -> None:
        path = self.path_for(user_key)
        os.makedirs(self.root, exist_ok=True)
        doc = self._read_doc(path) if os.path.exists(path) else {}
        doc.update(data.to_doc())
        tmp = path + ".tmp"
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(doc, f, ensure_ascii=False, indent=2)
        os.replace(tmp, path)


# -----------------------
# Tabular views
# -----------------------
def history_to_dataframe(data: AppData) -> pd.DataFrame:
    teams = {t.id: t.name for t in data.teams}
    labels = {lbl.id: lbl.display for lbl in data.task_labels}
    members = {m.id: m.name for m in data.members}
    rows: List[Dict] = []
    for h in data.assignment_history:
        rows.append({
            "date": h.assigned_date,
            "team": teams.get(h.team_id, h.team_id),
            "label": labels.get(h.task_label_id, h.task_label_id),
            "member": members.get(h.member_id, h.member_id),
            "team_id": h.team_id,
            "task_label_id": h.task_label_id,
            "member_id": h.member_id,
        })
    df = pd.DataFrame(rows, columns=HISTORY_COLUMNS)
    return df.sort_values(["date", "team", "label"], kind="stable").reset_index(drop=True)


def member_load_df(data: AppData) -> pd.DataFrame:
    """How often each member appears in history, per label (fairness check at a glance)."""
    hist = history_to_dataframe(data)
    if hist.empty:
        return pd.DataFrame()
    return pd.crosstab(hist["member"], hist["label"])


def assignment_grid_df(data: AppData) -> pd.DataFrame:
    """Labels as rows, teams as columns, member names (blank for empty) as cells."""
    members = {m.id: m.name for m in data.members}
    cells = grid_lookup(data.assignments)
    labels = display_labels(ordered(data.task_labels), data.assignments)
    teams = ordered(data.teams)

    names = [t.name for t in teams]
    names = [f"{t.name} ({t.id})" if names.count(t.name) > 1 else t.name for t in teams]

    grid = {}
    for team, name in zip(teams, names):
        col = []
        for lbl in labels:
            mid = cells.get((team.id, lbl.id))
            col.append(members.get(mid, "") if mid else "")
        grid[name] = col
    index = [lbl.display or lbl.id for lbl in labels]
    return pd.DataFrame(grid, index=index, columns=names)


def grid_to_csv_bytes(df: pd.DataFrame) -> bytes:
    buf = io.StringIO()
    df.to_csv(buf, index_label="Task")
    return buf.getvalue().encode("utf-8")
