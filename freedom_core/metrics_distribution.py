from __future__ import annotations

from typing import Iterable, List

from freedom_core.data import format_ratio, records_to_frame, round_half_up
from freedom_core.records import FreedomRecord
from freedom_core.view_models import RegionSummary, StatusShare


def short_label(name: str, max_length: int = 15) -> str:
    return name if len(name) <= max_length else name[:max_length] + "..."


def compute_status_distribution(records: Iterable[FreedomRecord]) -> List[StatusShare]:
    """Count and share of every distinct status, in order of first appearance."""
    df = records_to_frame(records)
    if df.empty:
        return []
    total = len(df)
    counts = df.groupby("status", sort=False).size()
    return [
        StatusShare(status=str(status), count=int(count), percentage=format_ratio(count / total * 100))
        for status, count in counts.items()
    ]


def compute_region_summary(
    records: Iterable[FreedomRecord],
    *,
    top_n: int = 10,
    label_max_length: int = 15,
) -> List[RegionSummary]:
    """Largest regions by record count with their average rights scores.

    Equal counts keep the order in which regions first appear.
    """
    df = records_to_frame(records)
    if df.empty:
        return []
    grouped = (
        df.groupby("region", sort=False)
        .agg(
            record_count=("country", "size"),
            avg_political_rights=("political_rights", "mean"),
            avg_civil_liberties=("civil_liberties", "mean"),
        )
        .reset_index()
        .sort_values("record_count", ascending=False, kind="stable")
        .head(top_n)
    )
    return [
        RegionSummary(
            region=str(r.region),
            label=short_label(str(r.region), label_max_length),
            count=int(r.record_count),
            avg_political_rights=round_half_up(r.avg_political_rights, 1),
            avg_civil_liberties=round_half_up(r.avg_civil_liberties, 1),
        )
        for r in grouped.itertuples(index=False)
    ]
