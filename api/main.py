from __future__ import annotations

import datetime as dt
import logging
import math

import numpy as np
import pandas as pd
from fastapi import FastAPI
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from api.schemas import DashboardFiltersModel, DatasetInfoResponse, OrgUnitsResponse
from core.data import clear_dashboard_cache, load_dashboard_data, prepare_context
from core.filters import DashboardFilters, normalize_filters
from core.metrics_employees import compute_employees
from core.metrics_overview import compute_overview
from core.models import ROW_COLUMNS, Dataset


app = FastAPI(title="NOM-035 Dashboard API", version="0.1.0")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _filters_from_model(model: DashboardFiltersModel) -> DashboardFilters:
    return normalize_filters(model.model_dump())


def _dataset_info(dataset: Dataset) -> DatasetInfoResponse:
    return DatasetInfoResponse(source=dataset.source, employees=len(dataset.employees), tasks=len(dataset.tasks))


def _error(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": str(exc), "type": type(exc).__name__})


def _json(data: object) -> JSONResponse:
    """Return JSON with safe encoding for pandas/numpy objects."""

    def _safe_float(value: object) -> float | None:
        try:
            out = float(value)  # type: ignore[arg-type]
        except Exception:
            return None
        if math.isnan(out) or math.isinf(out):
            return None
        return out

    return JSONResponse(
        content=jsonable_encoder(
            data,
            custom_encoder={
                type(pd.NA): lambda _: None,
                np.integer: int,
                float: _safe_float,
                np.floating: _safe_float,
                np.bool_: bool,
                dt.date: lambda d: d.isoformat(),
                pd.Timestamp: lambda ts: ts.isoformat(),
            },
        )
    )


@app.get("/meta/org-units", response_model=OrgUnitsResponse)
def meta_org_units():
    try:
        dataset = load_dashboard_data()
        return _json({"org_units": dataset.org_units})
    except Exception as exc:
        logger.exception("meta_org_units failed")
        return _error(exc)


@app.get("/meta/dataset", response_model=DatasetInfoResponse)
def meta_dataset():
    try:
        return _json(_dataset_info(load_dashboard_data()).model_dump())
    except Exception as exc:
        logger.exception("meta_dataset failed")
        return _error(exc)


@app.post("/meta/reload", response_model=DatasetInfoResponse)
def meta_reload():
    try:
        clear_dashboard_cache()
        dataset = load_dashboard_data()
        logger.info("Dataset reloaded from %s", dataset.source)
        return _json(_dataset_info(dataset).model_dump())
    except Exception as exc:
        logger.exception("meta_reload failed")
        return _error(exc)


@app.post("/overview")
def overview(filters: DashboardFiltersModel):
    try:
        f = _filters_from_model(filters)
        ctx = prepare_context(f, load_dashboard_data())
        return _json(compute_overview(f, ctx))
    except Exception as exc:
        logger.exception("overview failed")
        return _error(exc)


@app.post("/employees")
def employees(filters: DashboardFiltersModel):
    try:
        f = _filters_from_model(filters)
        ctx = prepare_context(f, load_dashboard_data())
        return _json(compute_employees(f, ctx))
    except Exception as exc:
        logger.exception("employees failed")
        return _error(exc)


@app.post("/export/employees")
def export_employees(filters: DashboardFiltersModel):
    f = _filters_from_model(filters)
    ctx = prepare_context(f, load_dashboard_data())
    export_df = pd.DataFrame([r.to_record() for r in ctx["employee_rows"]], columns=list(ROW_COLUMNS))
    csv_bytes = export_df.to_csv(index=False).encode("utf-8")
    return Response(
        content=csv_bytes,
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=employees.csv"},
    )
