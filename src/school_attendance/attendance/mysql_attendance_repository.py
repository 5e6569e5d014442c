from __future__ import annotations

from datetime import date
from typing import Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, normalize_mysql_date
from .model import AttendanceRecord
from .repository import AttendanceRepository


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        student_id=int(r["student_id"]),
        date=normalize_mysql_date(r["date"]),
        status=AttendanceStatus(r["status"]),
        school_id=int(r["school_id"]),
        remarks=r.get("remarks"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_range(self, *, school_id: int, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT student_id, date, status, remarks, school_id
                FROM attendance
                WHERE school_id=%s AND date>=%s AND date<=%s
                """,
                (int(school_id), start_date, end_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def upsert_many(self, records: Sequence[AttendanceRecord]) -> int:
        if not records:
            return 0

        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO attendance(student_id, date, status, remarks, school_id)
                VALUES(%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE status=VALUES(status), remarks=VALUES(remarks)
                """,
                [
                    (int(rec.student_id), rec.date, rec.status.value, rec.remarks, int(rec.school_id))
                    for rec in records
                ],
            )
            return len(records)
