"""Unit tests for spreadsheet decoding and record loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from freedom_core.data import (
    csv_separator,
    format_ratio,
    load_records,
    prepare_context,
    records_to_frame,
    round_half_up,
)
from freedom_core.errors import DecodeFailure, ReadFailure, UnsupportedFileType
from freedom_core.records import CANONICAL_FIELDS
from record_factory import make_record


def test_load_records_reads_first_sheet_of_xlsx(xlsx_bytes) -> None:
    content = xlsx_bytes(
        [
            {"Pays": "Utopia", "Année": 2020, "Status": "Libre", "Droits politiques": 7, "Libertés civiles": 6},
            {"Pays": "Oceania", "Année": 2021, "Status": "Pas libre", "Droits politiques": 1, "Libertés civiles": 1},
        ]
    )

    records = load_records(content, "freedom.xlsx")

    assert [r.country for r in records] == ["Utopia", "Oceania"]
    assert records[0].total_score == 13
    assert records[1].year == 2021


def test_blank_rows_are_dropped_and_headers_stripped(xlsx_bytes) -> None:
    content = xlsx_bytes(
        [
            {" Country ": "A", "Year": 2019, "Note": "x"},
            {" Country ": None, "Year": None, "Note": None},
            {" Country ": "B", "Year": None, "Note": None},
        ]
    )

    records = load_records(content, "data.xlsx", current_year=2030)

    assert [r.country for r in records] == ["A", "B"]
    assert records[1].year == 2030
    assert records[0].extras == {"Note": "x"}
    assert records[1].extras == {}


def test_load_records_accepts_csv() -> None:
    content = "Country,Year,Status,Political Rights,Civil Liberties\nNorway,2021,Libre,7,7\n".encode("utf-8")

    [record] = load_records(content, "data.csv")

    assert (record.country, record.year, record.total_score) == ("Norway", 2021, 14)


def test_na_like_text_is_kept_verbatim_in_xlsx(xlsx_bytes) -> None:
    content = xlsx_bytes(
        [
            {"Country": "Puerto Rico", "Region": "NA", "Status": "N/A", "Year": 2020},
            {"Country": "Nowhere", "Region": "null", "Status": "None", "Year": 2020},
        ]
    )

    first, second = load_records(content, "f.xlsx")

    assert (first.region, first.status) == ("NA", "N/A")
    assert (second.region, second.status) == ("null", "None")


def test_na_like_text_and_leading_zeros_are_kept_in_csv() -> None:
    content = "Country,Region,Status,Year,Code\nPuerto Rico,NA,N/A,2020,007\n".encode("utf-8")

    [record] = load_records(content, "f.csv")

    assert (record.region, record.status, record.year) == ("NA", "N/A", 2020)
    assert record.extras == {"Code": "007"}


def test_semicolon_separated_csv_is_decoded() -> None:
    content = "Pays;Région;Statut;Année;Droits politiques;Libertés civiles\nFrance;Europe;Libre;2022;7;6\n".encode("utf-8")

    [record] = load_records(content, "export.csv")

    assert (record.country, record.region, record.year, record.total_score) == ("France", "Europe", 2022, 13)
    assert record.extras == {}


def test_csv_separator_picks_dominant_delimiter() -> None:
    assert csv_separator(b"Country\nA\n") == ","
    assert csv_separator(b"a;b,c;d\n1;2,3;4") == ";"


def test_load_records_from_path(tmp_path: Path, xlsx_bytes) -> None:
    path = tmp_path / "ratings.xlsx"
    path.write_bytes(xlsx_bytes([{"Country": "A"}]))

    assert len(load_records(path)) == 1


def test_unsupported_extension_is_rejected() -> None:
    with pytest.raises(UnsupportedFileType):
        load_records(b"whatever", "notes.txt")


def test_garbage_bytes_raise_decode_failure() -> None:
    with pytest.raises(DecodeFailure):
        load_records(b"this is not a workbook", "broken.xlsx")


def test_missing_file_raises_read_failure(tmp_path: Path) -> None:
    with pytest.raises(ReadFailure):
        load_records(tmp_path / "missing.xlsx")


def test_records_to_frame_has_canonical_columns() -> None:
    empty = records_to_frame([])
    full = records_to_frame([make_record(Code="NO")], include_extras=True)

    assert list(empty.columns) == list(CANONICAL_FIELDS)
    assert full.loc[0, "total_score"] == 14
    assert full.loc[0, "Code"] == "NO"


def test_rounding_is_half_up_to_one_decimal() -> None:
    assert round_half_up(0.25, 1) == 0.3
    assert format_ratio(40) == "40.0"
    assert format_ratio(100 / 3) == "33.3"
    assert format_ratio(None) == "N/A"


def test_prepare_context_applies_filters(sample_records) -> None:
    ctx = prepare_context({"region": "Africa"}, sample_records)

    assert len(ctx["records"]) == 6
    assert {r.country for r in ctx["filtered"]} == {"Chad", "Ghana"}
    assert ctx["regions"] == ["Europe", "Africa"]
