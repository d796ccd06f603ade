from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

from core.charts import (
    deadline_trend_chart,
    org_unit_risk_chart,
    org_unit_tasks_chart,
    pattern_chart,
    to_vega_spec,
    workload_chart,
)
from core.filters import DashboardFilters, facet_options
from core.metrics_series import (
    compute_kpis,
    deadline_trend,
    risk_by_org_unit,
    tasks_by_org_unit,
    tasks_by_pattern,
    workload_by_employee,
)


def compute_overview(filters: DashboardFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    tasks = ctx.get("filtered_tasks", ())
    rows = ctx.get("employee_rows", [])

    series = {
        "workload_by_employee": workload_by_employee(rows),
        "tasks_by_pattern": tasks_by_pattern(tasks),
        "tasks_by_org_unit": tasks_by_org_unit(tasks),
        "risk_by_org_unit": risk_by_org_unit(rows),
        "deadline_trend": deadline_trend(tasks),
    }
    charts = {
        "workload_by_employee": to_vega_spec(workload_chart(series["workload_by_employee"])),
        "tasks_by_pattern": to_vega_spec(pattern_chart(series["tasks_by_pattern"])),
        "tasks_by_org_unit": to_vega_spec(org_unit_tasks_chart(series["tasks_by_org_unit"])),
        "risk_by_org_unit": to_vega_spec(org_unit_risk_chart(series["risk_by_org_unit"])),
        "deadline_trend": to_vega_spec(deadline_trend_chart(series["deadline_trend"])),
    }

    return {
        "filters": asdict(filters),
        "org_units": facet_options(ctx.get("org_units", [])),
        "visible_tasks": len(tasks),
        "kpis": compute_kpis(tasks, ctx.get("now")),
        "series": series,
        "charts": charts,
    }
