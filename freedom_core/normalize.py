from __future__ import annotations

import math
import re
from datetime import date
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Tuple

import numpy as np
import pandas as pd

from freedom_core.records import (
    COUNTRY_PLACEHOLDER,
    REGION_UNSPECIFIED,
    STATUS_UNSPECIFIED,
    FreedomRecord,
)

RawRow = Mapping[str, object]
Accessor = Callable[[RawRow], object]

# Probed in order; the first non-blank value wins.
COLUMN_SYNONYMS: Dict[str, Tuple[str, ...]] = {
    "country": ("Pays", "Country", "country"),
    "region": ("Region", "region", "Région"),
    "year": ("Année", "Year", "year"),
    "status": ("Status", "status", "Statut"),
    "political_rights": ("Droits politiques", "Political Rights", "politicalRights"),
    "civil_liberties": ("Libertés civiles", "Civil Liberties", "civilLiberties"),
}

MAPPED_COLUMNS = frozenset(name for names in COLUMN_SYNONYMS.values() for name in names)

_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")


def _column(name: str) -> Accessor:
    def read(row: RawRow) -> object:
        return row.get(name)

    return read


FIELD_ACCESSORS: Dict[str, Tuple[Accessor, ...]] = {
    field: tuple(_column(name) for name in names) for field, names in COLUMN_SYNONYMS.items()
}


def is_blank(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if pd.api.types.is_scalar(value) and pd.isna(value):
        return True
    return False


def first_present(row: RawRow, accessors: Iterable[Accessor]) -> Optional[object]:
    for accessor in accessors:
        value = accessor(row)
        if not is_blank(value):
            return value
    return None


def parse_int(value: object) -> Optional[int]:
    """Lenient integer parse: "7.5" -> 7, "12 pts" -> 12, 6.9 -> 6, "abc" -> None."""
    if is_blank(value) or isinstance(value, (bool, np.bool_)):
        return None
    if isinstance(value, (int, np.integer)):
        return int(value)
    if isinstance(value, (float, np.floating)):
        if not math.isfinite(float(value)):
            return None
        return int(value)
    match = _INT_PREFIX.match(str(value))
    if not match:
        return None
    return int(match.group(1))


def normalize_row(row: RawRow, index: int, *, current_year: int) -> FreedomRecord:
    country = first_present(row, FIELD_ACCESSORS["country"])
    region = first_present(row, FIELD_ACCESSORS["region"])
    status = first_present(row, FIELD_ACCESSORS["status"])
    year = parse_int(first_present(row, FIELD_ACCESSORS["year"]))
    political = parse_int(first_present(row, FIELD_ACCESSORS["political_rights"]))
    civil = parse_int(first_present(row, FIELD_ACCESSORS["civil_liberties"]))

    extras = {str(key): val for key, val in row.items() if key not in MAPPED_COLUMNS}
    return FreedomRecord(
        country=str(country) if country is not None else COUNTRY_PLACEHOLDER.format(index=index),
        region=str(region) if region is not None else REGION_UNSPECIFIED,
        year=year if year is not None else current_year,
        status=str(status) if status is not None else STATUS_UNSPECIFIED,
        political_rights=political if political is not None else 0,
        civil_liberties=civil if civil is not None else 0,
        extras=extras,
    )


def normalize_rows(rows: Iterable[RawRow], *, current_year: Optional[int] = None) -> List[FreedomRecord]:
    """Convert decoded spreadsheet rows into records, one per row, in input order.

    Unparsable or missing values fall back to defaults; a row never fails.
    """
    year = current_year if current_year is not None else date.today().year
    return [normalize_row(row, i, current_year=year) for i, row in enumerate(rows)]
