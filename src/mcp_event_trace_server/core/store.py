"""In-memory ordered record store."""

from __future__ import annotations

from .errors import StoreAccessError
from .models import LogRecord


class RecordStore:
    """Hold parsed records and return them sorted by timestamp.

    Ties keep insertion order (the sort is stable). The sorted view is cached until the next
    insert, so repeated reads during analysis do not re-sort.
    """

    def __init__(self) -> None:
        self._records: list[LogRecord] = []
        self._ordered: list[LogRecord] | None = None

    def __len__(self) -> int:
        return len(self._records)

    def insert(self, record: LogRecord) -> None:
        if not isinstance(record, LogRecord):
            raise StoreAccessError(f"cannot store {type(record).__name__}; expected LogRecord")
        self._records.append(record)
        self._ordered = None

    def all_ordered(self) -> list[LogRecord]:
        """Return all records in non-decreasing timestamp order."""
        if self._ordered is None:
            try:
                self._ordered = sorted(self._records, key=lambda r: r.timestamp)
            except TypeError as e:
                # naive and aware datetimes cannot be compared
                raise StoreAccessError(f"cannot order records: {e}") from e
        return list(self._ordered)
