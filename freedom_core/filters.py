from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from freedom_core.records import FreedomRecord

ALL = "all"
SORT_DIRECTIONS = ("asc", "desc")


@dataclass(frozen=True)
class AnalysisSettings:
    region_top_n: int = 10
    trend_margin: float = 0.5
    page_size: int = 10
    label_max_length: int = 15


@dataclass(frozen=True)
class DashboardFilters:
    search: str = ""
    region: str = ALL
    status: str = ALL
    sort_column: Optional[str] = None
    sort_direction: str = "asc"
    page: int = 1
    settings: AnalysisSettings = field(default_factory=AnalysisSettings)


def _as_int(value: object, default: int, lo: int, hi: int) -> int:
    try:
        out = int(value)  # type: ignore[arg-type]
    except Exception:
        out = default
    return max(lo, min(hi, out))


def _as_float(value: object, default: float) -> float:
    try:
        return float(value)  # type: ignore[arg-type]
    except Exception:
        return default


def normalize_filters(raw: Optional[dict]) -> DashboardFilters:
    raw = raw or {}
    defaults = AnalysisSettings()

    search = str(raw.get("search") or "").strip()
    region = str(raw.get("region") or ALL)
    status = str(raw.get("status") or ALL)

    sort_column = raw.get("sort_column") or None
    sort_column = str(sort_column) if sort_column is not None else None
    sort_direction = str(raw.get("sort_direction") or "asc").lower()
    if sort_direction not in SORT_DIRECTIONS:
        sort_direction = "asc"

    page = _as_int(raw.get("page", 1), 1, 1, 1_000_000)

    s = raw.get("settings") or {}
    settings = AnalysisSettings(
        region_top_n=_as_int(s.get("region_top_n", defaults.region_top_n), defaults.region_top_n, 1, 50),
        trend_margin=_as_float(s.get("trend_margin", defaults.trend_margin), defaults.trend_margin),
        page_size=_as_int(s.get("page_size", defaults.page_size), defaults.page_size, 1, 200),
        label_max_length=_as_int(s.get("label_max_length", defaults.label_max_length), defaults.label_max_length, 1, 200),
    )
    return DashboardFilters(
        search=search,
        region=region,
        status=status,
        sort_column=sort_column,
        sort_direction=sort_direction,
        page=page,
        settings=settings,
    )


def matches(record: FreedomRecord, filters: DashboardFilters) -> bool:
    if filters.search and filters.search.lower() not in record.country.lower():
        return False
    if filters.region != ALL and record.region != filters.region:
        return False
    if filters.status != ALL and record.status != filters.status:
        return False
    return True


def apply_filters(records: Iterable[FreedomRecord], filters: DashboardFilters) -> List[FreedomRecord]:
    return [r for r in records if matches(r, filters)]


def available_regions(records: Iterable[FreedomRecord]) -> List[str]:
    return list(dict.fromkeys(r.region for r in records))


def available_statuses(records: Iterable[FreedomRecord]) -> List[str]:
    return list(dict.fromkeys(r.status for r in records))
