from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import StudentStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, where_clause
from .model import Student
from .repository import StudentRepository

STUDENT_COLUMNS = "id, name, student_id, class, section, guardian_phone, email, status, school_id"


def _to_student(r: dict) -> Student:
    return Student(
        id=int(r["id"]),
        name=r["name"],
        student_id=r["student_id"],
        class_name=r.get("class"),
        section=r.get("section"),
        school_id=int(r["school_id"]),
        status=StudentStatus(r["status"]),
        guardian_phone=r.get("guardian_phone"),
        email=r.get("email"),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active(
        self,
        *,
        school_id: int,
        class_name: Optional[str] = None,
        section: Optional[str] = None,
    ) -> Sequence[Student]:
        clauses = ["school_id=%s", "status=%s"]
        params: list[object] = [int(school_id), StudentStatus.ACTIVE.value]

        if class_name:
            clauses.append("class=%s")
            params.append(class_name)
        if section:
            clauses.append("section=%s")
            params.append(section)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {STUDENT_COLUMNS}
                FROM students
                WHERE {where_clause(clauses)}
                ORDER BY id ASC
                """,
                tuple(params),
            )
            return [_to_student(r) for r in fetchall(cur)]

    def get(self, *, school_id: int, student_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {STUDENT_COLUMNS} FROM students WHERE id=%s AND school_id=%s",
                (int(student_id), int(school_id)),
            )
            r = fetchone(cur)
            return _to_student(r) if r else None
