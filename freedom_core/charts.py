from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, Sequence

import altair as alt
import pandas as pd

from freedom_core.view_models import RegionSummary, StatusShare, YearSeriesPoint

alt.data_transformers.disable_max_rows()

RIGHTS_SCALE = [0, 7]
RIGHTS_LABELS = {
    "avg_political_rights": "Droits politiques",
    "avg_civil_liberties": "Libertés civiles",
}


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def status_pie_chart(distribution: Sequence[StatusShare]) -> alt.Chart:
    df = pd.DataFrame([asdict(s) for s in distribution], columns=["status", "count", "percentage"])
    return (
        alt.Chart(df)
        .mark_arc(outerRadius=110)
        .encode(
            theta=alt.Theta("count:Q"),
            color=alt.Color("status:N", title="Statut", sort=df["status"].tolist()),
            tooltip=["status", "count", alt.Tooltip("percentage:N", title="%")],
        )
        .properties(height=300)
    )


def region_count_chart(regions: Sequence[RegionSummary]) -> alt.Chart:
    df = pd.DataFrame([asdict(r) for r in regions], columns=["region", "label", "count"])
    return (
        alt.Chart(df)
        .mark_bar(cornerRadiusTopLeft=4, cornerRadiusTopRight=4)
        .encode(
            x=alt.X("label:N", title="Région", sort=None, axis=alt.Axis(labelAngle=-45)),
            y=alt.Y("count:Q", title="Pays", axis=alt.Axis(gridDash=[3, 3])),
            tooltip=[alt.Tooltip("region:N", title="Région"), "count"],
        )
        .properties(height=300)
    )


def rights_comparison_chart(regions: Sequence[RegionSummary]) -> alt.Chart:
    df = pd.DataFrame([asdict(r) for r in regions], columns=["region", "label", "avg_political_rights", "avg_civil_liberties"])
    long = df.melt(id_vars=["region", "label"], var_name="measure", value_name="score")
    long["measure"] = long["measure"].map(RIGHTS_LABELS)
    return (
        alt.Chart(long)
        .mark_bar()
        .encode(
            x=alt.X("label:N", title="Région", sort=None, axis=alt.Axis(labelAngle=-45)),
            xOffset="measure:N",
            y=alt.Y("score:Q", title="Score moyen", scale=alt.Scale(domain=RIGHTS_SCALE)),
            color=alt.Color("measure:N", title=None),
            tooltip=[alt.Tooltip("region:N", title="Région"), "measure", "score"],
        )
        .properties(height=300)
    )


def yearly_trend_chart(series: Sequence[YearSeriesPoint]) -> alt.Chart:
    df = pd.DataFrame([asdict(p) for p in series], columns=["year", "avg_political_rights", "avg_civil_liberties"])
    long = df.melt(id_vars=["year"], var_name="measure", value_name="score")
    long["measure"] = long["measure"].map(RIGHTS_LABELS)
    hover = alt.selection_point(fields=["measure"], on="mouseover", empty="all")
    return (
        alt.Chart(long)
        .mark_line(point={"filled": True, "size": 60}, strokeWidth=3)
        .encode(
            x=alt.X("year:O", title="Année", axis=alt.Axis(grid=False)),
            y=alt.Y("score:Q", title="Score moyen", scale=alt.Scale(domain=RIGHTS_SCALE), axis=alt.Axis(gridDash=[4, 4])),
            color=alt.Color("measure:N", title=None),
            opacity=alt.condition(hover, alt.value(1), alt.value(0.2)),
            tooltip=["year", "measure", "score"],
        )
        .add_params(hover)
        .properties(height=300)
    )
