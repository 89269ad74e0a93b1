"""Unit tests for the session dataset store."""

from __future__ import annotations

import pytest

from freedom_core.errors import DecodeFailure, UnsupportedFileType
from freedom_core.session import DatasetStore
from record_factory import make_record


def test_ingest_replaces_collection_wholesale(xlsx_bytes) -> None:
    store = DatasetStore()
    store.ingest(xlsx_bytes([{"Country": "A"}, {"Country": "B"}]), "first.xlsx")

    dataset = store.ingest(xlsx_bytes([{"Country": "C", "Code": "CC"}]), "second.xlsx")

    assert [r.country for r in store.records] == ["C"]
    assert dataset.source_name == "second.xlsx"
    assert dataset.columns == ["Code"]


def test_failed_upload_keeps_previous_collection(xlsx_bytes) -> None:
    store = DatasetStore()
    store.ingest(xlsx_bytes([{"Country": "A"}]), "good.xlsx")

    with pytest.raises(DecodeFailure):
        store.ingest(b"garbage", "bad.xlsx")
    with pytest.raises(UnsupportedFileType):
        store.ingest(b"garbage", "bad.pdf")

    assert [r.country for r in store.records] == ["A"]
    assert store.current is not None and store.current.source_name == "good.xlsx"


def test_empty_store_has_no_records() -> None:
    store = DatasetStore()

    assert store.current is None
    assert store.records == ()


def test_replace_and_clear() -> None:
    store = DatasetStore()
    store.replace([make_record()], source_name="manual")
    store.clear()

    assert store.records == ()
