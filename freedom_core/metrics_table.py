from __future__ import annotations

import math
from dataclasses import asdict
from numbers import Number
from typing import Any, Dict, Iterable, List, Optional, Tuple

from freedom_core.filters import DashboardFilters
from freedom_core.records import FreedomRecord
from freedom_core.view_models import TablePage


def _sort_key(value: object) -> Tuple[int, Any]:
    if isinstance(value, Number) and not isinstance(value, bool) and not (isinstance(value, float) and math.isnan(value)):
        return (0, value)
    if value is None:
        return (2, "")
    return (1, str(value).lower())


def sort_records(records: Iterable[FreedomRecord], column: Optional[str], direction: str = "asc") -> List[FreedomRecord]:
    """Stable sort by a canonical field or extra column; no column keeps input order."""
    records = list(records)
    if not column:
        return records
    return sorted(records, key=lambda r: _sort_key(r.value(column)), reverse=direction == "desc")


def paginate(records: List[FreedomRecord], page: int = 1, page_size: int = 10, *, include_extras: bool = False) -> TablePage:
    total = len(records)
    total_pages = math.ceil(total / page_size) if page_size > 0 else 0
    page = max(1, min(page, total_pages or 1))
    start = (page - 1) * page_size
    chunk = records[start : start + page_size]
    return TablePage(
        rows=[r.as_row(include_extras=include_extras) for r in chunk],
        page=page,
        page_size=page_size,
        total_pages=total_pages,
        total_records=total,
        start_index=start + 1 if chunk else 0,
        end_index=start + len(chunk),
    )


def compute_table(filters: DashboardFilters, ctx: Dict[str, Any]) -> Dict[str, Any]:
    filtered = ctx.get("filtered", []) or []
    ordered = sort_records(filtered, filters.sort_column, filters.sort_direction)
    page = paginate(ordered, filters.page, filters.settings.page_size)
    return {"filters": asdict(filters), "table": asdict(page)}
