from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from freedom_core.data import Source, load_records
from freedom_core.errors import IngestionError
from freedom_core.records import FreedomRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Dataset:
    records: Tuple[FreedomRecord, ...]
    source_name: Optional[str] = None
    loaded_at: datetime = field(default_factory=datetime.now)

    @property
    def columns(self) -> List[str]:
        """Source column names seen across extras, in first-seen order."""
        seen: dict = {}
        for record in self.records:
            for key in record.extras:
                seen.setdefault(key, None)
        return list(seen)


class DatasetStore:
    """Owns the working record collection for one dashboard session.

    Each upload replaces the whole collection. A failed upload leaves the
    current one in place. The latest completed upload wins.
    """

    def __init__(self) -> None:
        self._current: Optional[Dataset] = None

    @property
    def current(self) -> Optional[Dataset]:
        return self._current

    @property
    def records(self) -> Tuple[FreedomRecord, ...]:
        return self._current.records if self._current is not None else ()

    def replace(self, records: Sequence[FreedomRecord], source_name: Optional[str] = None) -> Dataset:
        dataset = Dataset(records=tuple(records), source_name=source_name)
        self._current = dataset
        return dataset

    def ingest(self, source: Source, filename: Optional[str] = None) -> Dataset:
        try:
            records = load_records(source, filename)
        except IngestionError as exc:
            logger.warning("Upload rejected (%s): %s", type(exc).__name__, exc)
            raise
        return self.replace(records, source_name=filename)

    def clear(self) -> None:
        self._current = None
