from __future__ import annotations

import datetime as dt
import math
from typing import Any, Dict, Iterable, List, Optional, Sequence

import pandas as pd

from core.models import PATTERN_LABELS, PATTERNS, EmployeeRow, Task, round_half_up
from core.risk import days_until


def _tasks_frame(tasks: Iterable[Task]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "id": t.id,
                "pattern": t.pattern,
                "org_unit": t.org_unit,
                "assignee_id": t.assignee_id,
                "deadline": t.deadline,
                "status": t.status,
            }
            for t in tasks
        ],
        columns=["id", "pattern", "org_unit", "assignee_id", "deadline", "status"],
    )


def _rows_frame(rows: Iterable[EmployeeRow]) -> pd.DataFrame:
    return pd.DataFrame(
        [{"name": r.name, "org_unit": r.org_unit, "hours": r.assigned_hours, "capacity": r.weekly_capacity, "risk": r.risk} for r in rows],
        columns=["name", "org_unit", "hours", "capacity", "risk"],
    )


def workload_by_employee(rows: Sequence[EmployeeRow]) -> List[Dict[str, Any]]:
    return _rows_frame(rows)[["name", "hours", "capacity"]].to_dict(orient="records")


def tasks_by_pattern(tasks: Iterable[Task]) -> List[Dict[str, Any]]:
    df = _tasks_frame(tasks)
    counts = df["pattern"].value_counts().reindex(list(PATTERNS), fill_value=0)
    return [{"key": p, "name": PATTERN_LABELS[p], "value": int(counts[p])} for p in PATTERNS]


def tasks_by_org_unit(tasks: Iterable[Task]) -> List[Dict[str, Any]]:
    df = _tasks_frame(tasks)
    if df.empty:
        return []
    counts = df.groupby("org_unit", sort=False).size()
    return [{"name": str(name), "value": int(value)} for name, value in counts.items()]


def risk_by_org_unit(rows: Sequence[EmployeeRow]) -> List[Dict[str, Any]]:
    df = _rows_frame(rows)
    if df.empty:
        return []
    means = df.groupby("org_unit", sort=False)["risk"].mean()
    return [{"name": str(name), "risk": int(round_half_up(value))} for name, value in means.items()]


def week_key(day: dt.date) -> str:
    """Approximate ``YYYY-Www`` bucket: ceil((day of month + weekday from Monday) / 7)."""
    week = math.ceil((day.day + day.weekday()) / 7)
    return f"{day.year}-W{week}"


def deadline_trend(tasks: Iterable[Task]) -> List[Dict[str, Any]]:
    df = _tasks_frame(tasks).dropna(subset=["deadline"])
    if df.empty:
        return []
    counts = df.assign(week=df["deadline"].apply(week_key)).groupby("week", sort=False).size()
    return [{"name": str(name), "tasks": int(value)} for name, value in counts.items()]


def compute_kpis(tasks: Sequence[Task], now: Optional[dt.datetime] = None) -> Dict[str, int]:
    now = now or dt.datetime.now()
    df = _tasks_frame(tasks)
    unassigned = df["assignee_id"].isna()
    overdue = sum(1 for t in tasks if t.deadline is not None and days_until(t.deadline, now) < 0)
    return {
        "total": int(len(df)),
        "unassigned": int(unassigned.sum()),
        "offered": int((df["pattern"] == "offer").sum()),
        "offered_unclaimed": int(((df["pattern"] == "offer") & unassigned).sum()),
        "deferred": int((df["pattern"] == "deferred").sum()),
        "direct": int((df["pattern"] == "direct").sum()),
        "overdue": int(overdue),
    }


def risk_band_counts(rows: Sequence[EmployeeRow]) -> Dict[str, int]:
    counts = {"high": 0, "medium": 0, "low": 0}
    for r in rows:
        counts[r.risk_band] = counts.get(r.risk_band, 0) + 1
    return counts
