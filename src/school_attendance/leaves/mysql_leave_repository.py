from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import LeaveStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_date, where_clause
from .model import LeaveRequest, LeaveRequestView
from .repository import LeaveRepository

LEAVE_COLUMNS = """
    r.id, r.student_id, r.start_date, r.end_date, r.leave_type, r.reason,
    r.status, r.school_id, r.created_at, r.approved_by, r.approved_at,
    r.rejection_reason, r.attendance_synced_at
"""


def _to_leave(r: dict) -> LeaveRequest:
    return LeaveRequest(
        id=int(r["id"]),
        student_id=int(r["student_id"]),
        start_date=normalize_mysql_date(r["start_date"]),
        end_date=normalize_mysql_date(r["end_date"]),
        leave_type=r["leave_type"],
        status=LeaveStatus(r["status"]),
        school_id=int(r["school_id"]),
        reason=r.get("reason"),
        created_at=r.get("created_at"),
        approved_by=int(r["approved_by"]) if r.get("approved_by") is not None else None,
        approved_at=r.get("approved_at"),
        rejection_reason=r.get("rejection_reason"),
        attendance_synced_at=r.get("attendance_synced_at"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list(
        self,
        *,
        school_id: int,
        status: Optional[LeaveStatus] = None,
        student_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = 500,
    ) -> Sequence[LeaveRequestView]:
        clauses = ["r.school_id=%s"]
        params: list[object] = [int(school_id)]

        if status is not None:
            clauses.append("r.status=%s")
            params.append(status.value)
        if student_id is not None:
            clauses.append("r.student_id=%s")
            params.append(int(student_id))
        if start_date is not None:
            clauses.append("r.start_date>=%s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("r.end_date<=%s")
            params.append(end_date)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {LEAVE_COLUMNS},
                       s.name AS student_name, s.student_id AS student_code,
                       s.class AS class_name, s.section
                FROM leave_requests r
                JOIN students s ON s.id = r.student_id AND s.school_id = r.school_id
                WHERE {where_clause(clauses)}
                ORDER BY r.created_at DESC, r.id DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [
                LeaveRequestView(
                    leave=_to_leave(r),
                    student_name=r["student_name"],
                    student_code=r["student_code"],
                    class_name=r.get("class_name"),
                    section=r.get("section"),
                )
                for r in fetchall(cur)
            ]

    def get(self, *, school_id: int, leave_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {LEAVE_COLUMNS} FROM leave_requests r WHERE r.id=%s AND r.school_id=%s",
                (int(leave_id), int(school_id)),
            )
            r = fetchone(cur)
            return _to_leave(r) if r else None

    def create(
        self,
        *,
        school_id: int,
        student_id: int,
        start_date: date,
        end_date: date,
        leave_type: str,
        reason: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(student_id, start_date, end_date, leave_type, reason, status, school_id)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(student_id),
                    start_date,
                    end_date,
                    leave_type,
                    reason,
                    LeaveStatus.PENDING.value,
                    int(school_id),
                ),
            )
            return int(cur.lastrowid)

    def decide(
        self,
        *,
        school_id: int,
        leave_id: int,
        status: LeaveStatus,
        decided_by: int,
        decided_at: datetime,
        rejection_reason: Optional[str] = None,
    ) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            if status == LeaveStatus.REJECTED:
                cur.execute(
                    """
                    UPDATE leave_requests
                    SET status=%s, approved_by=%s, approved_at=%s, rejection_reason=%s
                    WHERE id=%s AND school_id=%s
                    """,
                    (status.value, int(decided_by), decided_at, rejection_reason, int(leave_id), int(school_id)),
                )
            else:
                cur.execute(
                    """
                    UPDATE leave_requests
                    SET status=%s, approved_by=%s, approved_at=%s, attendance_synced_at=NULL
                    WHERE id=%s AND school_id=%s
                    """,
                    (status.value, int(decided_by), decided_at, int(leave_id), int(school_id)),
                )
            if cur.rowcount <= 0:
                return None

            cur.execute(
                f"SELECT {LEAVE_COLUMNS} FROM leave_requests r WHERE r.id=%s AND r.school_id=%s",
                (int(leave_id), int(school_id)),
            )
            r = fetchone(cur)
            return _to_leave(r) if r else None

    def mark_attendance_synced(self, *, school_id: int, leave_id: int, synced_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE leave_requests SET attendance_synced_at=%s WHERE id=%s AND school_id=%s",
                (synced_at, int(leave_id), int(school_id)),
            )
            return cur.rowcount > 0

    def list_awaiting_attendance_sync(self, *, school_id: int) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {LEAVE_COLUMNS}
                FROM leave_requests r
                WHERE r.school_id=%s AND r.status=%s AND r.attendance_synced_at IS NULL
                ORDER BY r.approved_at ASC
                """,
                (int(school_id), LeaveStatus.APPROVED.value),
            )
            return [_to_leave(r) for r in fetchall(cur)]
