from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

STATUS_FREE = "Libre"
STATUS_PARTLY_FREE = "Partiellement libre"
STATUS_NOT_FREE = "Pas libre"
CANONICAL_STATUSES: Tuple[str, ...] = (STATUS_FREE, STATUS_PARTLY_FREE, STATUS_NOT_FREE)

STATUS_UNSPECIFIED = "Non spécifié"
REGION_UNSPECIFIED = "Non spécifiée"
COUNTRY_PLACEHOLDER = "Country {index}"

CANONICAL_FIELDS: Tuple[str, ...] = (
    "country",
    "region",
    "year",
    "status",
    "political_rights",
    "civil_liberties",
    "total_score",
)


@dataclass(frozen=True)
class FreedomRecord:
    """One normalized country/year row.

    `total_score` is derived from the two rights scores and is never stored.
    Source columns that are not mapped to a field are kept in `extras`.
    """

    country: str
    region: str
    year: int
    status: str
    political_rights: int
    civil_liberties: int
    extras: Dict[str, Any] = field(default_factory=dict, hash=False)

    @property
    def total_score(self) -> int:
        return self.political_rights + self.civil_liberties

    def value(self, column: str) -> Optional[Any]:
        """Return a canonical field or an extra column by name (None if absent)."""
        if column in CANONICAL_FIELDS:
            return getattr(self, column)
        return self.extras.get(column)

    def as_row(self, *, include_extras: bool = False) -> Dict[str, Any]:
        row: Dict[str, Any] = {name: getattr(self, name) for name in CANONICAL_FIELDS}
        if include_extras:
            for key, val in self.extras.items():
                row.setdefault(key, val)
        return row


def status_bucket(status: str) -> str:
    """Map a status string to free / partly_free / not_free / other by exact label match."""
    if status == STATUS_FREE:
        return "free"
    if status == STATUS_PARTLY_FREE:
        return "partly_free"
    if status == STATUS_NOT_FREE:
        return "not_free"
    return "other"
