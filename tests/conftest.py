from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest

from school_attendance.academic_calendar.model import AcademicYear, SchoolHoliday
from school_attendance.attendance.model import AttendanceRecord
from school_attendance.core.enums import AttendanceStatus, LeaveStatus, StudentStatus
from school_attendance.leaves.model import LeaveRequest, LeaveRequestView
from school_attendance.students.model import Student


class StoreError(Exception):
    """Stands in for a failure raised by the database driver."""


class InMemoryStudents:
    def __init__(self):
        self.rows: dict[int, Student] = {}
        self.calls = 0

    def add(self, student_id: int, *, school_id: int = 1, class_name="6", section="A", status=StudentStatus.ACTIVE, name=None):
        self.rows[student_id] = Student(
            id=student_id,
            name=name or f"Student {student_id}",
            student_id=f"S-{student_id}",
            class_name=class_name,
            section=section,
            school_id=school_id,
            status=status,
            guardian_phone="0170000000",
        )
        return self.rows[student_id]

    def list_active(self, *, school_id: int, class_name: Optional[str] = None, section: Optional[str] = None):
        self.calls += 1
        return [
            s
            for s in self.rows.values()
            if s.school_id == school_id
            and s.status == StudentStatus.ACTIVE
            and (class_name is None or s.class_name == class_name)
            and (section is None or s.section == section)
        ]

    def get(self, *, school_id: int, student_id: int):
        s = self.rows.get(student_id)
        return s if s and s.school_id == school_id else None


class InMemoryAttendance:
    def __init__(self):
        self.rows: dict[tuple[int, date], AttendanceRecord] = {}
        self.list_calls = 0
        self.upsert_calls = 0
        self.fail_list = False
        self.fail_upsert = False

    def add(self, student_id: int, day: date, status: AttendanceStatus, *, school_id: int = 1):
        self.rows[(student_id, day)] = AttendanceRecord(student_id=student_id, date=day, status=status, school_id=school_id)

    def list_range(self, *, school_id: int, start_date: date, end_date: date):
        self.list_calls += 1
        if self.fail_list:
            raise StoreError("attendance query failed")
        return [r for r in self.rows.values() if r.school_id == school_id and start_date <= r.date <= end_date]

    def upsert_many(self, records):
        self.upsert_calls += 1
        if self.fail_upsert:
            raise StoreError("attendance upsert failed")
        for rec in records:
            existing = self.rows.get((rec.student_id, rec.date))
            if existing is not None:
                # the unique key is global; an existing row keeps its school
                rec = replace(rec, school_id=existing.school_id)
            self.rows[(rec.student_id, rec.date)] = rec
        return len(records)


class InMemoryAcademicYears:
    def __init__(self):
        self.rows: dict[int, AcademicYear] = {}
        self.failing_ids: set[int] = set()

    def add(self, year_id: int, name: str, start: date, end: date, *, school_id: int = 1):
        self.rows[year_id] = AcademicYear(id=year_id, name=name, start_date=start, end_date=end, school_id=school_id)

    def get(self, *, school_id: int, year_id: int):
        if year_id in self.failing_ids:
            raise StoreError("academic year query failed")
        y = self.rows.get(year_id)
        return y if y and y.school_id == school_id else None


class InMemoryHolidays:
    def __init__(self):
        self.rows: dict[int, SchoolHoliday] = {}
        self._next_id = 1

    def list(self, *, school_id, holiday_type=None, academic_year_id=None, start_date=None, end_date=None):
        out = [
            h
            for h in self.rows.values()
            if h.school_id == school_id
            and (holiday_type is None or h.type == holiday_type)
            and (academic_year_id is None or h.academic_year_id == academic_year_id)
            and (start_date is None or h.date >= start_date)
            and (end_date is None or h.date <= end_date)
        ]
        return sorted(out, key=lambda h: h.date)

    def get(self, *, school_id, holiday_id):
        h = self.rows.get(holiday_id)
        return h if h and h.school_id == school_id else None

    def create(self, *, school_id, name, holiday_date, holiday_type, academic_year_id=None, description=None):
        hid = self._next_id
        self._next_id += 1
        self.rows[hid] = SchoolHoliday(
            id=hid,
            name=name,
            date=holiday_date,
            type=holiday_type,
            school_id=school_id,
            academic_year_id=academic_year_id,
            description=description,
        )
        return hid

    def update(self, *, school_id, holiday_id, changes):
        h = self.get(school_id=school_id, holiday_id=holiday_id)
        if h is None:
            return False
        self.rows[holiday_id] = replace(h, **changes)
        return True

    def delete(self, *, school_id, holiday_id):
        if self.get(school_id=school_id, holiday_id=holiday_id) is None:
            return False
        del self.rows[holiday_id]
        return True


class InMemoryLeaves:
    def __init__(self, students: InMemoryStudents):
        self._students = students
        self.rows: dict[int, LeaveRequest] = {}
        self._next_id = 1

    def add(self, *, student_id, start, end, leave_type="sick_leave", school_id=1, leave_id=None, created_at=None):
        lid = leave_id or self._next_id
        self._next_id = max(self._next_id, lid) + 1
        self.rows[lid] = LeaveRequest(
            id=lid,
            student_id=student_id,
            start_date=start,
            end_date=end,
            leave_type=leave_type,
            status=LeaveStatus.PENDING,
            school_id=school_id,
            created_at=created_at or datetime(2024, 6, 1, 8, 0),
        )
        return self.rows[lid]

    def list(self, *, school_id, status=None, student_id=None, start_date=None, end_date=None, limit=500):
        out = []
        for r in self.rows.values():
            s = self._students.rows.get(r.student_id)
            if s is None or s.school_id != r.school_id or r.school_id != school_id:
                continue
            if status is not None and r.status != status:
                continue
            if student_id is not None and r.student_id != student_id:
                continue
            if start_date is not None and r.start_date < start_date:
                continue
            if end_date is not None and r.end_date > end_date:
                continue
            out.append(LeaveRequestView(leave=r, student_name=s.name, student_code=s.student_id, class_name=s.class_name, section=s.section))
        out.sort(key=lambda v: (v.leave.created_at, v.leave.id), reverse=True)
        return out[:limit]

    def get(self, *, school_id, leave_id):
        r = self.rows.get(leave_id)
        return r if r and r.school_id == school_id else None

    def create(self, *, school_id, student_id, start_date, end_date, leave_type, reason=None):
        r = self.add(student_id=student_id, start=start_date, end=end_date, leave_type=leave_type, school_id=school_id)
        self.rows[r.id] = replace(r, reason=reason)
        return r.id

    def decide(self, *, school_id, leave_id, status, decided_by, decided_at, rejection_reason=None):
        r = self.get(school_id=school_id, leave_id=leave_id)
        if r is None:
            return None
        changes = dict(status=status, approved_by=decided_by, approved_at=decided_at)
        if status == LeaveStatus.REJECTED:
            changes["rejection_reason"] = rejection_reason
        else:
            changes["attendance_synced_at"] = None
        self.rows[leave_id] = replace(r, **changes)
        return self.rows[leave_id]

    def mark_attendance_synced(self, *, school_id, leave_id, synced_at):
        r = self.get(school_id=school_id, leave_id=leave_id)
        if r is None:
            return False
        self.rows[leave_id] = replace(r, attendance_synced_at=synced_at)
        return True

    def list_awaiting_attendance_sync(self, *, school_id):
        return [r for r in self.rows.values() if r.school_id == school_id and r.awaiting_attendance_sync]


@pytest.fixture
def store_error():
    return StoreError


@pytest.fixture
def fixed_today() -> date:
    return date(2024, 6, 30)


@pytest.fixture
def students() -> InMemoryStudents:
    return InMemoryStudents()


@pytest.fixture
def attendance() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def academic_years() -> InMemoryAcademicYears:
    return InMemoryAcademicYears()


@pytest.fixture
def holidays() -> InMemoryHolidays:
    return InMemoryHolidays()


@pytest.fixture
def leaves(students) -> InMemoryLeaves:
    return InMemoryLeaves(students)
