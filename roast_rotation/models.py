# roast_rotation/models.py
from __future__ import annotations
from datetime import datetime
from typing import Dict, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import DATE_FORMAT, DEFAULT_TIMEZONE, LOOKBACK_DAYS, WEEKEND_DAYS


class StoreModel(BaseModel):
    """Base for documents persisted with camelCase keys."""
    model_config = ConfigDict(populate_by_name=True)

    def to_doc(self) -> Dict:
        return self.model_dump(by_alias=True, exclude_none=True)


def _check_date(v: str) -> str:
    try:
        datetime.strptime(str(v), DATE_FORMAT)
    except ValueError:
        raise ValueError(f"assignedDate must be YYYY-MM-DD, got {v!r}")
    return str(v)


class Team(StoreModel):
    id: str
    name: str
    order: Optional[int] = None


class Member(StoreModel):
    id: str
    name: str
    team_id: str = Field(alias="teamId")
    excluded_task_label_ids: List[str] = Field(default_factory=list, alias="excludedTaskLabelIds")
    active: Optional[bool] = None
    order: Optional[int] = None

    @field_validator("excluded_task_label_ids", mode="before")
    @classmethod
    def none_is_empty(cls, v):
        return [] if v is None else v

    def is_excluded_from(self, label_id: str) -> bool:
        return label_id in self.excluded_task_label_ids


class TaskLabel(StoreModel):
    id: str
    left_label: str = Field(alias="leftLabel")
    right_label: Optional[str] = Field(default=None, alias="rightLabel")
    order: Optional[int] = None

    @classmethod
    def placeholder(cls, label_id: str) -> "TaskLabel":
        # stands in for label ids with no TaskLabel record, and for padding slots
        return cls(id=label_id, left_label="", right_label=None)

    @property
    def display(self) -> str:
        if self.right_label:
            return f"{self.left_label} / {self.right_label}"
        return self.left_label


class Assignment(StoreModel):
    team_id: str = Field(alias="teamId")
    task_label_id: str = Field(alias="taskLabelId")
    member_id: Optional[str] = Field(default=None, alias="memberId")
    assigned_date: str = Field(alias="assignedDate")

    @field_validator("assigned_date")
    @classmethod
    def valid_date(cls, v):
        return _check_date(v)

    @property
    def key(self) -> Tuple[str, str]:
        return (self.team_id, self.task_label_id)

    def to_doc(self) -> Dict:
        # memberId: null is meaningful (empty slot), keep it
        return self.model_dump(by_alias=True)


class AssignmentHistory(StoreModel):
    team_id: str = Field(alias="teamId")
    task_label_id: str = Field(alias="taskLabelId")
    member_id: str = Field(alias="memberId")
    assigned_date: str = Field(alias="assignedDate")

    @field_validator("assigned_date")
    @classmethod
    def valid_date(cls, v):
        return _check_date(v)


class AppData(StoreModel):
    """Roster + assignment snapshot as read from / written to the store."""
    teams: List[Team] = Field(default_factory=list)
    members: List[Member] = Field(default_factory=list)
    task_labels: List[TaskLabel] = Field(default_factory=list, alias="taskLabels")
    assignments: List[Assignment] = Field(default_factory=list)
    assignment_history: List[AssignmentHistory] = Field(default_factory=list, alias="assignmentHistory")

    @field_validator("teams", "members", "task_labels", "assignments", "assignment_history", mode="before")
    @classmethod
    def list_or_empty(cls, v):
        # partially written documents: anything that is not a list becomes []
        return v if isinstance(v, list) else []

    def to_doc(self) -> Dict:
        doc = self.model_dump(by_alias=True, exclude_none=True)
        doc["assignments"] = [a.to_doc() for a in self.assignments]
        return doc

    def members_of(self, team_id: str) -> List[Member]:
        return [m for m in self.members if m.team_id == team_id]

    def team_by_id(self) -> Dict[str, Team]:
        return {t.id: t for t in self.teams}

    def member_by_id(self) -> Dict[str, Member]:
        return {m.id: m for m in self.members}

    def label_by_id(self) -> Dict[str, TaskLabel]:
        return {lbl.id: lbl for lbl in self.task_labels}


class AppConfig(BaseModel):
    lookback_days: int = LOOKBACK_DAYS
    pad_labels_to_members: bool = False
    timezone: str = DEFAULT_TIMEZONE
    weekend_days: List[int] = Field(default_factory=lambda: list(WEEKEND_DAYS))
    random_seed: Optional[int] = None
    data_dir: str = "data"

    @field_validator("lookback_days")
    @classmethod
    def non_negative(cls, v):
        if v < 0:
            raise ValueError("lookback_days must be >= 0")
        return v

    @field_validator("weekend_days")
    @classmethod
    def weekday_range(cls, v):
        if any((not isinstance(d, int)) or d < 0 or d > 6 for d in v):
            raise ValueError("weekend_days must be weekday numbers 0 (Mon) .. 6 (Sun)")
        return v


class ShuffleResult(BaseModel):
    target_date: Optional[str] = None
    assignments: List[Assignment] = Field(default_factory=list)
    history: List[AssignmentHistory] = Field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None
