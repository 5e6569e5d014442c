from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date
from typing import Optional, Sequence

from ..academic_calendar.repository import AcademicYearRepository
from ..common.datetime_utils import inclusive_day_count, month_label, start_of_year, today_local
from ..common.numbers import percentage, round_half_up
from ..common.validators import require_percentage
from ..core.constants import COUNTED_PRESENT, MONTH_LABELS
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..students.repository import StudentRepository
from .model import (
    AttendanceRecord,
    ClassComparisonPoint,
    DefaulterRecord,
    MonthlyAttendancePoint,
    YearAnalyticsOutcome,
    YearlyAttendance,
)
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def _group_by_student(rows: Sequence[AttendanceRecord]) -> dict[int, list[AttendanceRecord]]:
    grouped: dict[int, list[AttendanceRecord]] = defaultdict(list)
    for r in rows:
        grouped[r.student_id].append(r)
    return grouped


class AttendanceReportService:
    """Aggregated attendance views computed in memory from fetched rows.

    Every call is independent: rows are fetched for the given school and folded
    into derived read-models, nothing is cached between calls.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        academic_years: AcademicYearRepository,
    ):
        self._attendance = attendance
        self._students = students
        self._academic_years = academic_years

    def get_defaulter_students(
        self,
        *,
        school_id: int,
        threshold: float,
        class_name: Optional[str] = None,
        section: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        today: Optional[date] = None,
    ) -> list[DefaulterRecord]:
        """Students whose attendance percentage is strictly below ``threshold``.

        The window defaults to 1 January of the current year through today.
        Results are sorted worst attendance first.
        """

        threshold = require_percentage(threshold, "Threshold")
        today = today or today_local()
        start = start_date or start_of_year(today)
        end = end_date or today

        try:
            students = self._students.list_active(school_id=int(school_id), class_name=class_name, section=section)
            if not students:
                return []

            rows = self._attendance.list_range(school_id=int(school_id), start_date=start, end_date=end)
        except Exception:
            logger.exception("Failed to fetch defaulter students (school_id=%s)", school_id)
            raise

        by_student = _group_by_student(rows)
        total_days = inclusive_day_count(start, end)

        defaulters: list[DefaulterRecord] = []
        for student in students:
            records = by_student.get(student.id, [])
            present_days = sum(1 for r in records if r.status in COUNTED_PRESENT)
            absent_dates = [r.date for r in records if r.status == AttendanceStatus.ABSENT]
            attendance_percentage = present_days / total_days * 100 if total_days > 0 else 0.0

            if attendance_percentage >= threshold:
                continue

            defaulters.append(
                DefaulterRecord(
                    id=student.id,
                    name=student.name,
                    student_id=student.student_id,
                    class_name=student.class_name,
                    section=student.section,
                    guardian_phone=student.guardian_phone,
                    email=student.email,
                    attendance_percentage=round_half_up(attendance_percentage, 1),
                    days_present=present_days,
                    days_absent=len(absent_dates),
                    total_days=total_days,
                    last_absent_date=max(absent_dates) if absent_dates else None,
                )
            )

        defaulters.sort(key=lambda d: d.attendance_percentage)
        return defaulters

    def _build_year(self, *, school_id: int, year_id: int) -> YearlyAttendance:
        year = self._academic_years.get(school_id=school_id, year_id=year_id)
        if year is None:
            raise LookupError(f"academic year {year_id} not found")

        rows = self._attendance.list_range(school_id=school_id, start_date=year.start_date, end_date=year.end_date)

        present: dict[str, int] = defaultdict(int)
        total: dict[str, int] = defaultdict(int)
        for r in rows:
            label = month_label(r.date)
            total[label] += 1
            if r.status in COUNTED_PRESENT:
                present[label] += 1

        monthly = [
            MonthlyAttendancePoint(month=label, year=year.name, percentage=percentage(present[label], total[label]))
            for label in MONTH_LABELS
        ]
        average = round_half_up(sum(m.percentage for m in monthly) / len(MONTH_LABELS), 2)
        return YearlyAttendance(year_id=year.id, year_name=year.name, monthly_data=monthly, average_attendance=average)

    def get_attendance_analytics_outcomes(
        self,
        *,
        school_id: int,
        academic_year_ids: Sequence[int],
    ) -> list[YearAnalyticsOutcome]:
        """Year-over-year analytics with an explicit outcome per requested year."""

        if not academic_year_ids:
            raise ValidationError("At least one academic year is required")

        outcomes: list[YearAnalyticsOutcome] = []
        for year_id in academic_year_ids:
            try:
                analytics = self._build_year(school_id=int(school_id), year_id=int(year_id))
            except Exception as e:
                logger.warning(
                    "Skipping academic year %s in analytics (school_id=%s): %s",
                    year_id,
                    school_id,
                    e,
                    exc_info=True,
                )
                outcomes.append(YearAnalyticsOutcome(year_id=int(year_id), error=str(e) or type(e).__name__))
                continue
            outcomes.append(YearAnalyticsOutcome(year_id=int(year_id), analytics=analytics))
        return outcomes

    def get_attendance_analytics(self, *, school_id: int, academic_year_ids: Sequence[int]) -> list[YearlyAttendance]:
        """Best-effort analytics: years that fail to load are omitted."""

        outcomes = self.get_attendance_analytics_outcomes(school_id=school_id, academic_year_ids=academic_year_ids)
        return [o.analytics for o in outcomes if o.analytics is not None]

    def get_classwise_comparison(
        self,
        *,
        school_id: int,
        start_date: date,
        end_date: date,
    ) -> list[ClassComparisonPoint]:
        try:
            students = self._students.list_active(school_id=int(school_id))
            rows = self._attendance.list_range(school_id=int(school_id), start_date=start_date, end_date=end_date)
        except Exception:
            logger.exception("Failed to fetch class-wise comparison (school_id=%s)", school_id)
            raise

        by_student = _group_by_student(rows)

        # dicts keep first-seen label order
        present: dict[str, int] = {}
        total: dict[str, int] = {}
        for student in students:
            label = student.class_label
            records = by_student.get(student.id, [])
            total[label] = total.get(label, 0) + len(records)
            present[label] = present.get(label, 0) + sum(1 for r in records if r.status in COUNTED_PRESENT)

        return [
            ClassComparisonPoint(class_label=label, percentage=percentage(present[label], total[label]))
            for label in total
        ]
