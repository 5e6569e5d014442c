from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_date, where_clause
from .model import AcademicYear, SchoolHoliday
from .repository import AcademicYearRepository, HolidayRepository

# Columns a partial holiday update may touch.
HOLIDAY_UPDATABLE_COLUMNS = ("name", "date", "type", "academic_year_id", "description")


def _to_holiday(r: dict) -> SchoolHoliday:
    return SchoolHoliday(
        id=int(r["id"]),
        name=r["name"],
        date=normalize_mysql_date(r["date"]),
        type=r["type"],
        school_id=int(r["school_id"]),
        academic_year_id=int(r["academic_year_id"]) if r.get("academic_year_id") is not None else None,
        description=r.get("description"),
    )


class MySQLAcademicYearRepository(AcademicYearRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, *, school_id: int, year_id: int) -> Optional[AcademicYear]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, name, start_date, end_date, school_id
                FROM academic_years
                WHERE id=%s AND school_id=%s
                """,
                (int(year_id), int(school_id)),
            )
            r = fetchone(cur)
            if not r:
                return None
            return AcademicYear(
                id=int(r["id"]),
                name=r["name"],
                start_date=normalize_mysql_date(r["start_date"]),
                end_date=normalize_mysql_date(r["end_date"]),
                school_id=int(r["school_id"]),
            )


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list(
        self,
        *,
        school_id: int,
        holiday_type: Optional[str] = None,
        academic_year_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[SchoolHoliday]:
        clauses = ["school_id=%s"]
        params: list[object] = [int(school_id)]

        if holiday_type:
            clauses.append("type=%s")
            params.append(holiday_type)
        if academic_year_id is not None:
            clauses.append("academic_year_id=%s")
            params.append(int(academic_year_id))
        if start_date is not None:
            clauses.append("date>=%s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("date<=%s")
            params.append(end_date)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT id, name, date, type, academic_year_id, description, school_id
                FROM school_holidays
                WHERE {where_clause(clauses)}
                ORDER BY date ASC
                """,
                tuple(params),
            )
            return [_to_holiday(r) for r in fetchall(cur)]

    def get(self, *, school_id: int, holiday_id: int) -> Optional[SchoolHoliday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, name, date, type, academic_year_id, description, school_id
                FROM school_holidays
                WHERE id=%s AND school_id=%s
                """,
                (int(holiday_id), int(school_id)),
            )
            r = fetchone(cur)
            return _to_holiday(r) if r else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO school_holidays(name, date, type, academic_year_id, description, school_id)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (name, holiday_date, holiday_type, academic_year_id, description, int(school_id)),
            )
            return int(cur.lastrowid)

    def update(self, *, school_id: int, holiday_id: int, changes: dict) -> bool:
        columns = [c for c in HOLIDAY_UPDATABLE_COLUMNS if c in changes]
        if not columns:
            return self.get(school_id=school_id, holiday_id=holiday_id) is not None

        assignments = ", ".join(f"{c}=%s" for c in columns)
        params = [changes[c] for c in columns] + [int(holiday_id), int(school_id)]

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE school_holidays SET {assignments} WHERE id=%s AND school_id=%s",
                tuple(params),
            )
            return cur.rowcount > 0

    def delete(self, *, school_id: int, holiday_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM school_holidays WHERE id=%s AND school_id=%s",
                (int(holiday_id), int(school_id)),
            )
            return cur.rowcount > 0
