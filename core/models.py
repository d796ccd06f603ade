"""Typed records for the employee/task dataset and the derived employee row.

The JSON dataset uses camelCase keys::

    employees: [{id, name, role, orgUnit, weeklyCapacity, secureReports?}]
    tasks:     [{id, title, pattern, assigneeId, orgUnit, effortHours,
                 createdAt, deadline, status, priority, offersAccepted?}]

Parsing is permissive: missing numeric fields become 0 and unparseable dates
become ``None``. No referential integrity is enforced.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pandas as pd


PATTERNS: Tuple[str, ...] = ("direct", "deferred", "offer")
STATUSES: Tuple[str, ...] = ("backlog", "offered", "in_progress", "done")
PRIORITIES: Tuple[str, ...] = ("high", "medium", "low")

PATTERN_LABELS = {
    "direct": "Direct assignment",
    "deferred": "Deferred assignment",
    "offer": "Work offer",
}


def parse_date(value: object) -> Optional[dt.date]:
    """Parse an ISO ``YYYY-MM-DD`` string to a calendar date (local, no time)."""
    if value is None or value == "":
        return None
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    ts = pd.to_datetime(str(value), errors="coerce", format="%Y-%m-%d")
    if pd.isna(ts):
        return None
    return ts.date()


def as_number(value: object, default: float = 0.0) -> float:
    if value is None or value == "":
        return default
    try:
        out = float(value)  # type: ignore[arg-type]
    except Exception:
        return default
    if pd.isna(out):
        return default
    return out


def round_half_up(value: object, ndigits: int = 0) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    q = Decimal(10) ** -ndigits
    return float(Decimal(str(value)).quantize(q, rounding=ROUND_HALF_UP))


def _opt_id(value: object) -> Optional[str]:
    """Identity as given; only ``None`` and ``""`` mean no reference."""
    if value is None or value == "":
        return None
    return str(value)


@dataclass(frozen=True)
class Employee:
    id: str
    name: str
    role: str
    org_unit: str
    weekly_capacity: float = 0.0
    secure_reports: float = 0.0

    @classmethod
    def from_record(cls, rec: Mapping[str, Any]) -> "Employee":
        return cls(
            id=str(rec.get("id", "")),
            name=str(rec.get("name") or ""),
            role=str(rec.get("role") or ""),
            org_unit=str(rec.get("orgUnit") or ""),
            weekly_capacity=as_number(rec.get("weeklyCapacity")),
            secure_reports=as_number(rec.get("secureReports")),
        )

    def capacity_or(self, default: float) -> float:
        return self.weekly_capacity or default


@dataclass(frozen=True)
class Task:
    id: str
    title: str
    pattern: str
    assignee_id: Optional[str]
    org_unit: str
    effort_hours: float = 0.0
    created_at: Optional[dt.date] = None
    deadline: Optional[dt.date] = None
    status: str = "backlog"
    priority: str = "medium"
    offers_accepted: int = 0

    @classmethod
    def from_record(cls, rec: Mapping[str, Any]) -> "Task":
        return cls(
            id=str(rec.get("id", "")),
            title=str(rec.get("title") or ""),
            pattern=str(rec.get("pattern") or ""),
            assignee_id=_opt_id(rec.get("assigneeId")),
            org_unit=str(rec.get("orgUnit") or ""),
            effort_hours=as_number(rec.get("effortHours")),
            created_at=parse_date(rec.get("createdAt")),
            deadline=parse_date(rec.get("deadline")),
            status=str(rec.get("status") or ""),
            priority=str(rec.get("priority") or ""),
            offers_accepted=int(as_number(rec.get("offersAccepted"))),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "pattern": self.pattern,
            "assigneeId": self.assignee_id,
            "orgUnit": self.org_unit,
            "effortHours": self.effort_hours,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "deadline": self.deadline.isoformat() if self.deadline else None,
            "status": self.status,
            "priority": self.priority,
            "offersAccepted": self.offers_accepted,
        }


ROW_COLUMNS: Tuple[str, ...] = (
    "id",
    "name",
    "role",
    "orgUnit",
    "weeklyCapacity",
    "assignedTasks",
    "assignedHours",
    "utilization",
    "risk",
    "riskBand",
    "secureReports",
)


@dataclass(frozen=True)
class EmployeeRow:
    id: str
    name: str
    role: str
    org_unit: str
    weekly_capacity: float
    assigned_tasks: int
    assigned_hours: float
    utilization: int
    risk: int
    risk_band: str
    secure_reports: float

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role,
            "orgUnit": self.org_unit,
            "weeklyCapacity": self.weekly_capacity,
            "assignedTasks": self.assigned_tasks,
            "assignedHours": self.assigned_hours,
            "utilization": self.utilization,
            "risk": self.risk,
            "riskBand": self.risk_band,
            "secureReports": self.secure_reports,
        }


@dataclass(frozen=True)
class Dataset:
    employees: Tuple[Employee, ...] = ()
    tasks: Tuple[Task, ...] = ()
    source: str = "empty"

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any], *, source: str = "inline") -> "Dataset":
        employees = [Employee.from_record(e) for e in (raw.get("employees") or []) if isinstance(e, Mapping)]
        tasks = [Task.from_record(t) for t in (raw.get("tasks") or []) if isinstance(t, Mapping)]
        return cls(employees=tuple(employees), tasks=tuple(tasks), source=source)

    @property
    def org_units(self) -> List[str]:
        out: List[str] = []
        for e in self.employees:
            if e.org_unit not in out:
                out.append(e.org_unit)
        return out
