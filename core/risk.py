from __future__ import annotations

import datetime as dt
import math
from typing import Iterable, Optional

from core.filters import RiskPolicy
from core.models import Employee, Task, round_half_up


SECONDS_PER_DAY = 24 * 60 * 60
NEAR_DEADLINE_STATUSES = frozenset({"in_progress", "backlog"})


def days_until(deadline: dt.date, now: Optional[dt.datetime] = None) -> int:
    """Whole days from ``now`` until local midnight of ``deadline``, rounded up.

    A deadline later today is 0; a passed deadline is negative.
    """
    now = now or dt.datetime.now()
    midnight = dt.datetime.combine(deadline, dt.time.min)
    return math.ceil((midnight - now).total_seconds() / SECONDS_PER_DAY)


def utilization_ratio(employee: Employee, tasks: Iterable[Task], policy: RiskPolicy) -> float:
    hours = sum(t.effort_hours or 0 for t in tasks)
    return hours / employee.capacity_or(policy.default_capacity)


def utilization_points(ratio: float, policy: RiskPolicy) -> float:
    if ratio > policy.over_threshold:
        return policy.over_weight
    if ratio > policy.high_threshold:
        return policy.high_weight
    if ratio > policy.medium_threshold:
        return policy.medium_weight
    return 0.0


def is_near_deadline(task: Task, policy: RiskPolicy, now: Optional[dt.datetime] = None) -> bool:
    if task.deadline is None or task.status not in NEAR_DEADLINE_STATUSES:
        return False
    return days_until(task.deadline, now) <= policy.deadline_window_days


def score_employee(
    employee: Employee,
    tasks: Iterable[Task],
    policy: Optional[RiskPolicy] = None,
    now: Optional[dt.datetime] = None,
) -> int:
    """Psychosocial risk score in ``[0, policy.max_score]``.

    Additive over four signals: utilization tier, tasks in progress/backlog due
    within the deadline window (overdue included), high-priority tasks, and
    secure-channel reports.
    """
    policy = policy or RiskPolicy()
    now = now or dt.datetime.now()
    tasks = list(tasks)

    score = utilization_points(utilization_ratio(employee, tasks, policy), policy)
    score += sum(1 for t in tasks if is_near_deadline(t, policy, now)) * policy.deadline_weight
    score += sum(1 for t in tasks if t.priority == "high") * policy.high_priority_weight
    score += (employee.secure_reports or 0) * policy.secure_report_weight

    return max(0, min(policy.max_score, int(round_half_up(score))))


def risk_band(score: int, policy: Optional[RiskPolicy] = None) -> str:
    policy = policy or RiskPolicy()
    if score >= policy.band_high:
        return "high"
    if score >= policy.band_medium:
        return "medium"
    return "low"
