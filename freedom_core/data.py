from __future__ import annotations

import io
import logging
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import BinaryIO, Dict, Iterable, List, Optional, Sequence, Union

import pandas as pd

from freedom_core.errors import DecodeFailure, ReadFailure, UnsupportedFileType
from freedom_core.filters import DashboardFilters, apply_filters, available_regions, available_statuses, normalize_filters
from freedom_core.normalize import is_blank, normalize_rows
from freedom_core.records import CANONICAL_FIELDS, FreedomRecord

logger = logging.getLogger(__name__)

EXCEL_SUFFIXES = (".xlsx", ".xls")
CSV_SUFFIXES = (".csv",)
SUPPORTED_SUFFIXES = EXCEL_SUFFIXES + CSV_SUFFIXES

Source = Union[str, Path, bytes, BinaryIO]


def is_supported_filename(filename: Optional[str]) -> bool:
    if not filename:
        return False
    return Path(filename).suffix.lower() in SUPPORTED_SUFFIXES


def read_source(source: Source) -> bytes:
    """Return the raw bytes of a path, an open binary stream or bytes."""
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    try:
        if isinstance(source, (str, Path)):
            return Path(source).read_bytes()
        return source.read()
    except OSError as exc:
        raise ReadFailure(f"Could not read file: {exc}") from exc


def csv_separator(content: bytes) -> str:
    """Pick ';' when the header row uses it more than ',' (Excel exports in French locales)."""
    header = content.split(b"\n", 1)[0]
    return ";" if header.count(b";") > header.count(b",") else ","


def decode_first_sheet(content: bytes, filename: Optional[str] = None) -> pd.DataFrame:
    """Decode spreadsheet bytes into a frame holding the first sheet only.

    Only empty cells count as missing; text such as "N/A" or "NA" is kept.
    """
    suffix = Path(filename).suffix.lower() if filename else ""
    try:
        if suffix in CSV_SUFFIXES:
            df = pd.read_csv(
                io.BytesIO(content),
                sep=csv_separator(content),
                dtype=str,
                keep_default_na=False,
                na_values=[""],
            )
        else:
            df = pd.read_excel(io.BytesIO(content), sheet_name=0, keep_default_na=False, na_values=[""])
    except Exception as exc:
        raise DecodeFailure(f"Could not decode spreadsheet {filename or ''}: {exc}".strip()) from exc
    df.rename(columns={c: str(c).strip() for c in df.columns}, inplace=True)
    return df.dropna(how="all")


def frame_to_rows(df: pd.DataFrame) -> List[Dict[str, object]]:
    """Frame -> list of column/value dicts; blank cells are left out of each row."""
    rows: List[Dict[str, object]] = []
    for raw in df.to_dict(orient="records"):
        rows.append({str(k): v for k, v in raw.items() if not is_blank(v)})
    return rows


def load_records(
    source: Source,
    filename: Optional[str] = None,
    *,
    current_year: Optional[int] = None,
) -> List[FreedomRecord]:
    if filename is None and isinstance(source, (str, Path)):
        filename = Path(source).name
    if filename is not None and not is_supported_filename(filename):
        raise UnsupportedFileType(f"Unsupported file type: {filename} (expected .xlsx, .xls or .csv)")

    content = read_source(source)
    df = decode_first_sheet(content, filename)
    records = normalize_rows(frame_to_rows(df), current_year=current_year)
    logger.info("Loaded %d records from %s", len(records), filename or "<bytes>")
    return records


def records_to_frame(records: Iterable[FreedomRecord], *, include_extras: bool = False) -> pd.DataFrame:
    rows = [r.as_row(include_extras=include_extras) for r in records]
    if not rows:
        return pd.DataFrame(columns=list(CANONICAL_FIELDS))
    return pd.DataFrame(rows)


def round_half_up(value: object, ndigits: int = 0) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    q = Decimal(10) ** -ndigits
    return float(Decimal(str(value)).quantize(q, rounding=ROUND_HALF_UP))


def format_ratio(value: object, decimals: int = 1) -> str:
    """Display string with a fixed number of decimals: 40 -> "40.0"."""
    rounded = round_half_up(value, decimals)
    if rounded is None:
        return "N/A"
    return f"{rounded:.{decimals}f}"


def prepare_context(filters: dict | DashboardFilters, records: Sequence[FreedomRecord]) -> Dict[str, object]:
    """Apply filters once and hand every page the same filtered view."""
    filt = filters if isinstance(filters, DashboardFilters) else normalize_filters(filters)
    filtered = apply_filters(records, filt)
    return {
        "filters": filt,
        "records": list(records),
        "filtered": filtered,
        "regions": available_regions(records),
        "statuses": available_statuses(records),
    }
