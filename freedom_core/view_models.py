"""Derived, read-only structures rebuilt from the active record collection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Literal

Trend = Literal["improving", "declining", "stable"]


@dataclass(frozen=True)
class StatusShare:
    status: str
    count: int
    percentage: str


@dataclass(frozen=True)
class RegionSummary:
    region: str
    label: str
    count: int
    avg_political_rights: float
    avg_civil_liberties: float


@dataclass(frozen=True)
class YearSeriesPoint:
    year: int
    record_count: int
    political_rights_sum: int
    civil_liberties_sum: int
    total_score_sum: int
    avg_political_rights: float
    avg_civil_liberties: float
    avg_total_score: float
    free: int
    partly_free: int
    not_free: int
    other: int


@dataclass(frozen=True)
class HeadlineStats:
    total_records: int
    free_count: int
    partly_free_count: int
    not_free_count: int
    free_percentage: str
    partly_free_percentage: str
    not_free_percentage: str
    avg_political_rights: str
    avg_civil_liberties: str
    avg_total_score: str
    unique_regions: int
    unique_years: int
    trend: Trend


@dataclass(frozen=True)
class TablePage:
    rows: List[Dict[str, Any]]
    page: int
    page_size: int
    total_pages: int
    total_records: int
    # 1-based display bounds, both 0 when there is nothing to show
    start_index: int
    end_index: int
