from __future__ import annotations

import datetime as dt
import json
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from core.filters import DashboardFilters, filter_tasks, normalize_filters
from core.models import Dataset
from core.workload import build_employee_rows, group_tasks_by_assignee


logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parents[1]
DATA_FILE = "nom035-data.json"
DATA_PATH = Path(os.environ.get("NOM035_DATA_PATH") or DATA_DIR / DATA_FILE)

SAMPLE_SOURCE = "sample"

# Known-good dataset used whenever the data file cannot be loaded.
SAMPLE_DATA: Dict[str, Any] = {
    "employees": [
        {"id": "e1", "name": "Ana López", "role": "Evaluadora", "orgUnit": "Académica", "weeklyCapacity": 40, "secureReports": 1},
        {"id": "e2", "name": "Luis Pérez", "role": "Coordinador", "orgUnit": "Académica", "weeklyCapacity": 38, "secureReports": 0},
        {"id": "e3", "name": "María Díaz", "role": "Analista", "orgUnit": "TI", "weeklyCapacity": 40, "secureReports": 2},
        {"id": "e4", "name": "Diego Flores", "role": "Analista", "orgUnit": "TI", "weeklyCapacity": 36, "secureReports": 0},
        {"id": "e5", "name": "Sofía Ramírez", "role": "Psicóloga Organizacional", "orgUnit": "RH", "weeklyCapacity": 35, "secureReports": 3},
    ],
    "tasks": [
        {"id": "t1", "title": "Evaluar plan de mejora - Nanotecnología", "pattern": "direct", "assigneeId": "e1", "orgUnit": "Académica", "effortHours": 8, "createdAt": "2025-08-01", "deadline": "2025-08-22", "status": "in_progress", "priority": "high"},
        {"id": "t2", "title": "Revisión de cargas Académicas", "pattern": "direct", "assigneeId": "e2", "orgUnit": "Académica", "effortHours": 10, "createdAt": "2025-08-02", "deadline": "2025-08-28", "status": "in_progress", "priority": "medium"},
        {"id": "t3", "title": "Evaluación de clima laboral Q3", "pattern": "deferred", "assigneeId": None, "orgUnit": "RH", "effortHours": 6, "createdAt": "2025-08-05", "deadline": "2025-09-15", "status": "backlog", "priority": "high"},
        {"id": "t4", "title": "Soporte de plataforma de workflow", "pattern": "offer", "assigneeId": None, "orgUnit": "TI", "effortHours": 6, "createdAt": "2025-08-05", "deadline": "2025-08-25", "status": "offered", "priority": "low", "offersAccepted": 0},
        {"id": "t5", "title": "Automatizar reporte NOM-035", "pattern": "direct", "assigneeId": "e3", "orgUnit": "TI", "effortHours": 12, "createdAt": "2025-08-06", "deadline": "2025-08-21", "status": "in_progress", "priority": "high"},
        {"id": "t6", "title": "Backlog auditoría de accesos", "pattern": "deferred", "assigneeId": None, "orgUnit": "TI", "effortHours": 5, "createdAt": "2025-08-10", "deadline": "2025-09-01", "status": "backlog", "priority": "medium"},
        {"id": "t7", "title": "Oferta: mejora de documentación", "pattern": "offer", "assigneeId": None, "orgUnit": "TI", "effortHours": 4, "createdAt": "2025-08-11", "deadline": "2025-08-29", "status": "offered", "priority": "low", "offersAccepted": 1},
        {"id": "t8", "title": "Entrevistas de atención temprana", "pattern": "direct", "assigneeId": "e5", "orgUnit": "RH", "effortHours": 14, "createdAt": "2025-08-03", "deadline": "2025-08-26", "status": "in_progress", "priority": "high"},
        {"id": "t9", "title": "Evaluar asignación diferida (NT)", "pattern": "deferred", "assigneeId": None, "orgUnit": "Académica", "effortHours": 7, "createdAt": "2025-08-12", "deadline": "2025-09-05", "status": "backlog", "priority": "medium"},
        {"id": "t10", "title": "Capacitación canal seguro", "pattern": "direct", "assigneeId": "e2", "orgUnit": "Académica", "effortHours": 6, "createdAt": "2025-08-08", "deadline": "2025-08-24", "status": "in_progress", "priority": "medium"},
    ],
}


def file_signature(path: Path) -> Tuple[str, float]:
    try:
        return str(path), path.stat().st_mtime
    except OSError:
        return str(path), -1.0


def _is_dataset(payload: object) -> bool:
    return isinstance(payload, dict) and isinstance(payload.get("employees"), list) and isinstance(payload.get("tasks"), list)


def load_raw_dataset(path: Optional[Path] = None) -> Tuple[Dict[str, Any], str]:
    """Read the dataset JSON, falling back to ``SAMPLE_DATA`` on any failure.

    Returns the raw payload and its source label (the file path or ``"sample"``).
    """
    path = Path(path or DATA_PATH)
    try:
        with path.open("r", encoding="utf-8") as fh:
            payload = json.load(fh)
    except (OSError, ValueError) as exc:
        logger.warning("Could not load %s (%s); using embedded sample dataset", path, exc)
        return SAMPLE_DATA, SAMPLE_SOURCE
    if not _is_dataset(payload):
        logger.warning("%s is not an employees/tasks dataset; using embedded sample dataset", path)
        return SAMPLE_DATA, SAMPLE_SOURCE
    return payload, str(path)


@lru_cache(maxsize=4)
def _load_dashboard_data_cached(file_sig: Tuple[str, float]) -> Dataset:
    raw, source = load_raw_dataset(Path(file_sig[0]))
    dataset = Dataset.from_dict(raw, source=source)
    logger.debug("Loaded %d employees and %d tasks from %s", len(dataset.employees), len(dataset.tasks), source)
    return dataset


def load_dashboard_data(path: Optional[Path] = None) -> Dataset:
    return _load_dashboard_data_cached(file_signature(Path(path or DATA_PATH)))


def clear_dashboard_cache() -> None:
    _load_dashboard_data_cached.cache_clear()


def prepare_context(
    filters: dict | DashboardFilters,
    dataset: Dataset,
    now: Optional[dt.datetime] = None,
) -> Dict[str, Any]:
    """Recompute every derived collection for one dataset snapshot and filter state."""
    now = now or dt.datetime.now()
    filt = filters if isinstance(filters, DashboardFilters) else normalize_filters(filters)

    filtered_tasks = filter_tasks(dataset.tasks, filt)
    buckets = group_tasks_by_assignee(dataset.employees, filtered_tasks)
    employee_rows = build_employee_rows(dataset.employees, buckets, filt, now)

    return {
        "filters": filt,
        "now": now,
        "dataset": dataset,
        "org_units": dataset.org_units,
        "filtered_tasks": filtered_tasks,
        "buckets": buckets,
        "employee_rows": employee_rows,
    }
