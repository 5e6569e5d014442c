from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterator, Optional

from ..core.constants import MONTH_LABELS


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_optional_date(value: Optional[str]) -> Optional[date]:
    v = (value or "").strip()
    return parse_iso_date(v) if v else None


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def today_local() -> date:
    return now_local().date()


def start_of_year(day: date) -> date:
    return date(day.year, 1, 1)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day in the closed interval [start, end].

    Yields nothing when end < start.
    """
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def inclusive_day_count(start: date, end: date) -> int:
    return (end - start).days + 1


def month_label(day: date) -> str:
    """English three-letter month label, independent of the process locale."""
    return MONTH_LABELS[day.month - 1]
