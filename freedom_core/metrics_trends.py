from __future__ import annotations

from typing import Iterable, List, Sequence

import pandas as pd

from freedom_core.data import records_to_frame, round_half_up
from freedom_core.records import FreedomRecord, status_bucket
from freedom_core.view_models import Trend, YearSeriesPoint

STATUS_BUCKETS = ["free", "partly_free", "not_free", "other"]
DEFAULT_TREND_MARGIN = 0.5


def compute_yearly_series(records: Iterable[FreedomRecord]) -> List[YearSeriesPoint]:
    df = records_to_frame(records)
    if df.empty:
        return []
    df["bucket"] = df["status"].map(status_bucket)

    sums = df.groupby("year").agg(
        record_count=("country", "size"),
        political_rights_sum=("political_rights", "sum"),
        civil_liberties_sum=("civil_liberties", "sum"),
        total_score_sum=("total_score", "sum"),
    )
    buckets = pd.crosstab(df["year"], df["bucket"]).reindex(columns=STATUS_BUCKETS, fill_value=0)
    table = sums.join(buckets).fillna(0).sort_index()

    points: List[YearSeriesPoint] = []
    for year, row in table.iterrows():
        n = int(row["record_count"])
        points.append(
            YearSeriesPoint(
                year=int(year),
                record_count=n,
                political_rights_sum=int(row["political_rights_sum"]),
                civil_liberties_sum=int(row["civil_liberties_sum"]),
                total_score_sum=int(row["total_score_sum"]),
                avg_political_rights=round_half_up(row["political_rights_sum"] / n, 1),
                avg_civil_liberties=round_half_up(row["civil_liberties_sum"] / n, 1),
                avg_total_score=round_half_up(row["total_score_sum"] / n, 1),
                free=int(row["free"]),
                partly_free=int(row["partly_free"]),
                not_free=int(row["not_free"]),
                other=int(row["other"]),
            )
        )
    return points


def classify_trend(series: Sequence[YearSeriesPoint], margin: float = DEFAULT_TREND_MARGIN) -> Trend:
    """Compare the average total score of the latest year with the earliest one."""
    if len(series) < 2:
        return "stable"
    first, last = series[0], series[-1]
    first_avg = first.total_score_sum / first.record_count
    last_avg = last.total_score_sum / last.record_count
    if last_avg > first_avg + margin:
        return "improving"
    if last_avg < first_avg - margin:
        return "declining"
    return "stable"
