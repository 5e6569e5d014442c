from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.validators import require_non_empty, require_positive_id
from ..core.exceptions import NotFoundError, ValidationError
from .model import SchoolHoliday
from .repository import AcademicYearRepository, HolidayRepository

logger = logging.getLogger(__name__)

HOLIDAY_FIELDS = frozenset({"name", "date", "type", "academic_year_id", "description"})


class HolidayService:
    def __init__(self, holidays: HolidayRepository, academic_years: AcademicYearRepository):
        self._holidays = holidays
        self._academic_years = academic_years

    def _require_own_year(self, *, school_id: int, year_id) -> Optional[int]:
        if year_id is None:
            return None
        year_id = require_positive_id(year_id, "Academic year")
        try:
            year = self._academic_years.get(school_id=int(school_id), year_id=year_id)
        except Exception:
            logger.exception("Failed to fetch academic year %s (school_id=%s)", year_id, school_id)
            raise
        if year is None:
            raise ValidationError(f"Academic year {year_id} does not belong to this school")
        return year_id

    def list_holidays(
        self,
        *,
        school_id: int,
        holiday_type: Optional[str] = None,
        academic_year_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[SchoolHoliday]:
        try:
            return self._holidays.list(
                school_id=int(school_id),
                holiday_type=holiday_type,
                academic_year_id=academic_year_id,
                start_date=start_date,
                end_date=end_date,
            )
        except Exception:
            logger.exception("Failed to fetch school holidays (school_id=%s)", school_id)
            raise

    def create_holiday(
        self,
        *,
        school_id: int,
        name: str,
        holiday_date: date,
        holiday_type: str,
        academic_year_id: Optional[int] = None,
        description: Optional[str] = None,
    ) -> SchoolHoliday:
        name = require_non_empty(name, "Holiday name")
        holiday_type = require_non_empty(holiday_type, "Holiday type")
        academic_year_id = self._require_own_year(school_id=school_id, year_id=academic_year_id)

        try:
            holiday_id = self._holidays.create(
                school_id=int(school_id),
                name=name,
                holiday_date=holiday_date,
                holiday_type=holiday_type,
                academic_year_id=academic_year_id,
                description=(description or "").strip() or None,
            )
            created = self._holidays.get(school_id=int(school_id), holiday_id=holiday_id)
        except Exception:
            logger.exception("Failed to create holiday (school_id=%s)", school_id)
            raise

        if created is None:
            raise NotFoundError(f"Holiday {holiday_id} not found after insert")
        return created

    def update_holiday(self, *, school_id: int, holiday_id: int, changes: dict) -> SchoolHoliday:
        changes = dict(changes)
        unknown = set(changes) - HOLIDAY_FIELDS
        if unknown:
            raise ValidationError(f"Unknown holiday fields: {', '.join(sorted(unknown))}")
        for field in ("name", "type"):
            if field in changes:
                changes[field] = require_non_empty(changes[field], f"Holiday {field}")
        if "academic_year_id" in changes:
            changes["academic_year_id"] = self._require_own_year(school_id=school_id, year_id=changes["academic_year_id"])

        try:
            matched = self._holidays.update(school_id=int(school_id), holiday_id=int(holiday_id), changes=changes)
            updated = self._holidays.get(school_id=int(school_id), holiday_id=int(holiday_id)) if matched else None
        except Exception:
            logger.exception("Failed to update holiday %s (school_id=%s)", holiday_id, school_id)
            raise

        if updated is None:
            raise NotFoundError(f"Holiday {holiday_id} not found")
        return updated

    def delete_holiday(self, *, school_id: int, holiday_id: int) -> None:
        try:
            deleted = self._holidays.delete(school_id=int(school_id), holiday_id=int(holiday_id))
        except Exception:
            logger.exception("Failed to delete holiday %s (school_id=%s)", holiday_id, school_id)
            raise

        if not deleted:
            raise NotFoundError(f"Holiday {holiday_id} not found")
