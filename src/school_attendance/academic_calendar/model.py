from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class AcademicYear:
    id: int
    name: str
    start_date: date
    end_date: date
    school_id: int


@dataclass(frozen=True)
class SchoolHoliday:
    """Reference data: filtered for display, never aggregated."""

    id: int
    name: str
    date: date
    type: str
    school_id: int
    academic_year_id: Optional[int] = None
    description: Optional[str] = None
