from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class AnalysisSettingsModel(BaseModel):
    region_top_n: int = 10
    trend_margin: float = 0.5
    page_size: int = 10
    label_max_length: int = 15


class DashboardFiltersModel(BaseModel):
    search: str = ""
    region: str = "all"
    status: str = "all"
    sort_column: Optional[str] = None
    sort_direction: str = "asc"
    page: int = 1
    settings: AnalysisSettingsModel = Field(default_factory=AnalysisSettingsModel)


class UploadResponse(BaseModel):
    records: int
    source_name: Optional[str] = None
    columns: List[str] = Field(default_factory=list)
    loaded_at: Optional[datetime] = None


class MetaListResponse(BaseModel):
    values: List[str]
