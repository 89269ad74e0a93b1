"""Shared fixtures for the freedom dashboard tests."""

from __future__ import annotations

import io
from typing import Callable, Dict, List

import pandas as pd
import pytest

from freedom_core.records import FreedomRecord
from record_factory import make_record


@pytest.fixture
def sample_records() -> List[FreedomRecord]:
    return [
        make_record("Norway", "Europe", 2019, "Libre", 7, 7),
        make_record("Hungary", "Europe", 2019, "Partiellement libre", 4, 5),
        make_record("Chad", "Africa", 2019, "Pas libre", 1, 2),
        make_record("Norway", "Europe", 2021, "Libre", 7, 6),
        make_record("Chad", "Africa", 2021, "Pas libre", 1, 1),
        make_record("Ghana", "Africa", 2021, "Libre", 6, 5),
    ]


@pytest.fixture
def xlsx_bytes() -> Callable[[List[Dict[str, object]]], bytes]:
    """Serialize rows into an in-memory single-sheet workbook."""

    def build(rows: List[Dict[str, object]]) -> bytes:
        buffer = io.BytesIO()
        pd.DataFrame(rows).to_excel(buffer, index=False)
        return buffer.getvalue()

    return build
