from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class RiskPolicyModel(BaseModel):
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


class DashboardFiltersModel(BaseModel):
    org_unit: Optional[str] = "all"
    pattern: Optional[str] = "all"
    status: Optional[str] = "all"
    name_query: str = ""
    policy: RiskPolicyModel = Field(default_factory=RiskPolicyModel)


class OrgUnitsResponse(BaseModel):
    org_units: List[str]


class DatasetInfoResponse(BaseModel):
    source: str
    employees: int
    tasks: int
