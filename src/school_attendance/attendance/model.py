from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """One student's status for one day; (student_id, date) is unique."""

    student_id: int
    date: date
    status: AttendanceStatus
    school_id: int
    remarks: Optional[str] = None


@dataclass(frozen=True)
class DefaulterRecord:
    """Read-model: a student below the attendance threshold."""

    id: int
    name: str
    student_id: str
    class_name: Optional[str]
    section: Optional[str]
    guardian_phone: Optional[str]
    email: Optional[str]
    attendance_percentage: float
    days_present: int
    days_absent: int
    total_days: int
    last_absent_date: Optional[date]


@dataclass(frozen=True)
class MonthlyAttendancePoint:
    month: str
    year: str
    percentage: float


@dataclass(frozen=True)
class YearlyAttendance:
    year_id: int
    year_name: str
    monthly_data: list[MonthlyAttendancePoint]
    average_attendance: float


@dataclass(frozen=True)
class YearAnalyticsOutcome:
    """Per requested year: either the analytics or the reason it was skipped."""

    year_id: int
    analytics: Optional[YearlyAttendance] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.analytics is not None


@dataclass(frozen=True)
class ClassComparisonPoint:
    class_label: str
    percentage: float
