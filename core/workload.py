from __future__ import annotations

import datetime as dt
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from core.filters import DashboardFilters, RiskPolicy
from core.models import Employee, EmployeeRow, Task, round_half_up
from core.risk import risk_band, score_employee


def group_tasks_by_assignee(employees: Iterable[Employee], tasks: Iterable[Task]) -> Dict[str, Tuple[Task, ...]]:
    """Bucket tasks per known employee id.

    Every employee gets a bucket, empty when nothing is assigned. Tasks without
    an assignee, or whose assignee is unknown, are left out.
    """
    buckets: Dict[str, List[Task]] = {e.id: [] for e in employees}
    for t in tasks:
        if t.assignee_id is not None and t.assignee_id in buckets:
            buckets[t.assignee_id].append(t)
    return {emp_id: tuple(bucket) for emp_id, bucket in buckets.items()}


def assigned_hours(tasks: Iterable[Task]) -> float:
    return float(sum(t.effort_hours or 0 for t in tasks))


def utilization_pct(hours: float, weekly_capacity: float) -> int:
    if not weekly_capacity:
        return 0
    return int(round_half_up(hours / weekly_capacity * 100))


def employee_matches(employee: Employee, filters: DashboardFilters) -> bool:
    if filters.org_unit is not None and employee.org_unit != filters.org_unit:
        return False
    query = filters.name_query.lower()
    if query and query not in employee.name.lower():
        return False
    return True


def build_employee_row(
    employee: Employee,
    tasks: Sequence[Task],
    policy: RiskPolicy,
    now: Optional[dt.datetime] = None,
) -> EmployeeRow:
    hours = assigned_hours(tasks)
    score = score_employee(employee, tasks, policy, now)
    return EmployeeRow(
        id=employee.id,
        name=employee.name,
        role=employee.role,
        org_unit=employee.org_unit,
        weekly_capacity=employee.weekly_capacity,
        assigned_tasks=len(tasks),
        assigned_hours=hours,
        utilization=utilization_pct(hours, employee.weekly_capacity),
        risk=score,
        risk_band=risk_band(score, policy),
        secure_reports=employee.secure_reports or 0,
    )


def build_employee_rows(
    employees: Iterable[Employee],
    buckets: Dict[str, Tuple[Task, ...]],
    filters: DashboardFilters,
    now: Optional[dt.datetime] = None,
) -> List[EmployeeRow]:
    """Rows for employees passing the org-unit and name filters, highest risk first.

    ``sorted`` is stable, so employees with equal risk keep their input order.
    """
    now = now or dt.datetime.now()
    rows = [
        build_employee_row(e, buckets.get(e.id, ()), filters.policy, now)
        for e in employees
        if employee_matches(e, filters)
    ]
    return sorted(rows, key=lambda r: r.risk, reverse=True)
