from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

from core.filters import DashboardFilters
from core.metrics_series import risk_band_counts


def compute_employees(filters: DashboardFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    rows = ctx.get("employee_rows", [])
    return {
        "filters": asdict(filters),
        "rows": [r.to_record() for r in rows],
        "bands": risk_band_counts(rows),
    }
