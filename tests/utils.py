from __future__ import annotations

import datetime as dt
from typing import Optional

from core.models import Employee, Task

# Fixed "current moment" for deadline arithmetic: Wednesday 2025-08-20, 09:00 local.
NOW = dt.datetime(2025, 8, 20, 9, 0)


def make_employee(
    emp_id: str = "e1",
    *,
    name: str = "Test Person",
    org_unit: str = "TI",
    capacity: float = 40.0,
    secure_reports: float = 0,
    role: str = "Analista",
) -> Employee:
    return Employee(
        id=emp_id,
        name=name,
        role=role,
        org_unit=org_unit,
        weekly_capacity=capacity,
        secure_reports=secure_reports,
    )


def make_task(
    task_id: str = "t1",
    *,
    assignee_id: Optional[str] = "e1",
    hours: float = 0.0,
    deadline: Optional[dt.date] = None,
    status: str = "done",
    priority: str = "low",
    pattern: str = "direct",
    org_unit: str = "TI",
) -> Task:
    return Task(
        id=task_id,
        title=f"Task {task_id}",
        pattern=pattern,
        assignee_id=assignee_id,
        org_unit=org_unit,
        effort_hours=hours,
        created_at=dt.date(2025, 8, 1),
        deadline=deadline,
        status=status,
        priority=priority,
    )
