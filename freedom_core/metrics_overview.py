from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Iterable, Optional

from freedom_core.data import format_ratio, records_to_frame
from freedom_core.filters import AnalysisSettings, DashboardFilters
from freedom_core.metrics_trends import classify_trend, compute_yearly_series
from freedom_core.records import STATUS_FREE, STATUS_NOT_FREE, STATUS_PARTLY_FREE, FreedomRecord
from freedom_core.view_models import HeadlineStats


def compute_headline_stats(
    records: Iterable[FreedomRecord],
    settings: Optional[AnalysisSettings] = None,
) -> Optional[HeadlineStats]:
    """Headline figures for the stats cards; None when there is no data.

    Free / partly free / not free use exact label equality, so records with
    any other status are counted in none of the three.
    """
    settings = settings or AnalysisSettings()
    records = list(records)
    df = records_to_frame(records)
    if df.empty:
        return None

    total = len(df)
    free = int((df["status"] == STATUS_FREE).sum())
    partly_free = int((df["status"] == STATUS_PARTLY_FREE).sum())
    not_free = int((df["status"] == STATUS_NOT_FREE).sum())

    trend = classify_trend(compute_yearly_series(records), settings.trend_margin)
    return HeadlineStats(
        total_records=total,
        free_count=free,
        partly_free_count=partly_free,
        not_free_count=not_free,
        free_percentage=format_ratio(free / total * 100),
        partly_free_percentage=format_ratio(partly_free / total * 100),
        not_free_percentage=format_ratio(not_free / total * 100),
        avg_political_rights=format_ratio(df["political_rights"].sum() / total),
        avg_civil_liberties=format_ratio(df["civil_liberties"].sum() / total),
        avg_total_score=format_ratio(df["total_score"].sum() / total),
        unique_regions=int(df["region"].nunique()),
        unique_years=int(df["year"].nunique()),
        trend=trend,
    )


def compute_overview(filters: DashboardFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    filtered = ctx.get("filtered", []) or []
    stats = compute_headline_stats(filtered, filters.settings)
    return {
        "filters": asdict(filters),
        "has_data": stats is not None,
        "total_loaded": len(ctx.get("records", []) or []),
        "kpis": asdict(stats) if stats is not None else None,
    }
