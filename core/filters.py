from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from core.models import Task


ALL = "all"


@dataclass(frozen=True)
class RiskPolicy:
    default_capacity: float = 40.0
    over_threshold: float = 1.0
    high_threshold: float = 0.85
    medium_threshold: float = 0.6
    over_weight: float = 50.0
    high_weight: float = 30.0
    medium_weight: float = 15.0
    deadline_window_days: int = 5
    deadline_weight: float = 8.0
    high_priority_weight: float = 6.0
    secure_report_weight: float = 4.0
    max_score: int = 100
    band_high: int = 70
    band_medium: int = 40


@dataclass(frozen=True)
class DashboardFilters:
    org_unit: Optional[str] = None
    pattern: Optional[str] = None
    status: Optional[str] = None
    name_query: str = ""
    policy: RiskPolicy = field(default_factory=RiskPolicy)


def _facet(value: object) -> Optional[str]:
    """Map the facet value to ``None`` (unconstrained) or the exact value to match."""
    if value is None or value == "" or value == ALL:
        return None
    return str(value)


def _as_float(value: object, default: float) -> float:
    try:
        return float(value)  # type: ignore[arg-type]
    except Exception:
        return default


def _as_int(value: object, default: int) -> int:
    try:
        return int(value)  # type: ignore[arg-type]
    except Exception:
        return default


def normalize_policy(raw: Optional[dict]) -> RiskPolicy:
    p = raw or {}
    d = RiskPolicy()
    return RiskPolicy(
        default_capacity=_as_float(p.get("default_capacity"), d.default_capacity) or d.default_capacity,
        over_threshold=_as_float(p.get("over_threshold"), d.over_threshold),
        high_threshold=_as_float(p.get("high_threshold"), d.high_threshold),
        medium_threshold=_as_float(p.get("medium_threshold"), d.medium_threshold),
        over_weight=_as_float(p.get("over_weight"), d.over_weight),
        high_weight=_as_float(p.get("high_weight"), d.high_weight),
        medium_weight=_as_float(p.get("medium_weight"), d.medium_weight),
        deadline_window_days=_as_int(p.get("deadline_window_days"), d.deadline_window_days),
        deadline_weight=_as_float(p.get("deadline_weight"), d.deadline_weight),
        high_priority_weight=_as_float(p.get("high_priority_weight"), d.high_priority_weight),
        secure_report_weight=_as_float(p.get("secure_report_weight"), d.secure_report_weight),
        max_score=max(0, _as_int(p.get("max_score"), d.max_score)),
        band_high=_as_int(p.get("band_high"), d.band_high),
        band_medium=_as_int(p.get("band_medium"), d.band_medium),
    )


def normalize_filters(raw: dict) -> DashboardFilters:
    # Unknown facet values are kept; they simply match nothing.
    return DashboardFilters(
        org_unit=_facet(raw.get("org_unit")),
        pattern=_facet(raw.get("pattern")),
        status=_facet(raw.get("status")),
        name_query=str(raw.get("name_query") or ""),
        policy=normalize_policy(raw.get("policy")),
    )


def task_matches(task: Task, filters: DashboardFilters) -> bool:
    if filters.org_unit is not None and task.org_unit != filters.org_unit:
        return False
    if filters.pattern is not None and task.pattern != filters.pattern:
        return False
    if filters.status is not None and task.status != filters.status:
        return False
    return True


def filter_tasks(tasks: Iterable[Task], filters: DashboardFilters) -> Tuple[Task, ...]:
    return tuple(t for t in tasks if task_matches(t, filters))


def facet_options(values: Iterable[Optional[str]]) -> List[str]:
    """Distinct non-empty values in first-seen order, prefixed with the ``all`` option."""
    seen: List[str] = []
    for v in values:
        if v and v not in seen:
            seen.append(v)
    return [ALL, *seen]
