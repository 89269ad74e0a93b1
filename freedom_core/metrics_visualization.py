from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict

from freedom_core.charts import (
    region_count_chart,
    rights_comparison_chart,
    status_pie_chart,
    to_vega_spec,
    yearly_trend_chart,
)
from freedom_core.filters import DashboardFilters
from freedom_core.metrics_distribution import compute_region_summary, compute_status_distribution
from freedom_core.metrics_trends import compute_yearly_series


def compute_visualization(filters: DashboardFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    filtered = ctx.get("filtered", []) or []
    settings = filters.settings

    distribution = compute_status_distribution(filtered)
    regions = compute_region_summary(filtered, top_n=settings.region_top_n, label_max_length=settings.label_max_length)
    series = compute_yearly_series(filtered)

    charts: Dict[str, Any] = {}
    if filtered:
        charts = {
            "status_distribution": to_vega_spec(status_pie_chart(distribution)),
            "region_counts": to_vega_spec(region_count_chart(regions)),
            "rights_by_region": to_vega_spec(rights_comparison_chart(regions)),
        }
        # A single year has no trend line to draw.
        if len(series) > 1:
            charts["yearly_trend"] = to_vega_spec(yearly_trend_chart(series))

    return {
        "filters": asdict(filters),
        "has_data": bool(filtered),
        "status_distribution": [asdict(s) for s in distribution],
        "regions": [asdict(r) for r in regions],
        "yearly": [asdict(p) for p in series],
        "charts": charts,
    }
