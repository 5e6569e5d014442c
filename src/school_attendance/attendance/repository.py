from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def list_range(self, *, school_id: int, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        """All rows of the school with start_date <= date <= end_date."""

        raise NotImplementedError

    def upsert_many(self, records: Sequence[AttendanceRecord]) -> int:
        """Insert or overwrite rows keyed by (student_id, date).

        An existing row keeps its school_id; only status and remarks change.

        Returns the number of records written.
        """

        raise NotImplementedError
