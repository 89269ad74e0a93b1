"""Unit tests for headline statistics and the overview payload."""

from __future__ import annotations

from freedom_core.data import prepare_context
from freedom_core.filters import AnalysisSettings, normalize_filters
from freedom_core.metrics_overview import compute_headline_stats, compute_overview
from record_factory import make_record


def test_canonical_status_percentages() -> None:
    statuses = ["Libre"] * 4 + ["Partiellement libre"] * 3 + ["Pas libre"] * 3
    records = [make_record(country=f"C{i}", status=s) for i, s in enumerate(statuses)]

    stats = compute_headline_stats(records)

    assert stats is not None
    assert stats.total_records == 10
    assert (stats.free_count, stats.partly_free_count, stats.not_free_count) == (4, 3, 3)
    assert stats.free_percentage == "40.0"
    assert stats.partly_free_percentage == "30.0"
    assert stats.not_free_percentage == "30.0"


def test_non_canonical_statuses_fall_in_no_bucket() -> None:
    records = [make_record(status="Libre"), make_record(status="Free"), make_record(status="Non spécifié")]

    stats = compute_headline_stats(records)

    assert stats is not None
    assert stats.free_count == 1
    assert stats.partly_free_count == 0
    assert stats.not_free_count == 0
    total = sum(float(p) for p in (stats.free_percentage, stats.partly_free_percentage, stats.not_free_percentage))
    assert total < 100.0


def test_averages_and_distinct_counts(sample_records) -> None:
    stats = compute_headline_stats(sample_records)

    assert stats is not None
    assert stats.avg_political_rights == "4.3"
    assert stats.avg_civil_liberties == "4.3"
    assert stats.avg_total_score == "8.7"
    assert stats.unique_regions == 2
    assert stats.unique_years == 2
    assert stats.trend == "stable"


def test_trend_margin_comes_from_settings(sample_records) -> None:
    stats = compute_headline_stats(sample_records[:3] + [make_record(year=2021, political_rights=7, civil_liberties=7)])

    assert stats is not None
    assert stats.trend == "improving"
    strict = compute_headline_stats(
        sample_records[:3] + [make_record(year=2021, political_rights=7, civil_liberties=7)],
        AnalysisSettings(trend_margin=10.0),
    )
    assert strict is not None and strict.trend == "stable"


def test_empty_collection_has_no_data() -> None:
    assert compute_headline_stats([]) is None


def test_overview_payload_reports_filtered_view(sample_records) -> None:
    filters = normalize_filters({"status": "Libre"})
    payload = compute_overview(filters, prepare_context(filters, sample_records))

    assert payload["has_data"] is True
    assert payload["total_loaded"] == 6
    assert payload["kpis"]["total_records"] == 3
    assert payload["kpis"]["free_percentage"] == "100.0"


def test_overview_payload_without_matches(sample_records) -> None:
    filters = normalize_filters({"search": "atlantis"})
    payload = compute_overview(filters, prepare_context(filters, sample_records))

    assert payload["has_data"] is False
    assert payload["kpis"] is None
