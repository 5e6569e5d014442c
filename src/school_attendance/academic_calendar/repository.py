from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AcademicYear, SchoolHoliday


class AcademicYearRepository(Protocol):
    def get(self, *, school_id: int, year_id: int) -> Optional[AcademicYear]:
        raise NotImplementedError


class HolidayRepository(Protocol):
    def list(
        self,
        *,
        school_id: int,
        holiday_type: Optional[str] = None,
        academic_year_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[SchoolHoliday]:
        """Holidays ordered by date ascending."""

        raise NotImplementedError

    def get(self, *, school_id: int, holiday_id: int) -> Optional[SchoolHoliday]:
        raise NotImplementedError

    def create(
        self,
        *,
        school_id: int,
        name: str,
        holiday_date: date,
        holiday_type: str,
        academic_year_id: Optional[int] = None,
        description: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def update(self, *, school_id: int, holiday_id: int, changes: dict) -> bool:
        """Apply a partial update; keys are column names. Returns False if no row matched."""

        raise NotImplementedError

    def delete(self, *, school_id: int, holiday_id: int) -> bool:
        raise NotImplementedError
