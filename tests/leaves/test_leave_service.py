from __future__ import annotations

from datetime import date, datetime

import pytest

from school_attendance.core.enums import AttendanceStatus, LeaveStatus, StudentStatus
from school_attendance.core.exceptions import AttendanceSyncError, NotFoundError, ValidationError
from school_attendance.leaves import service as leave_service_module
from school_attendance.leaves.service import LeaveService, excused_records_for

APPROVED_AT = datetime(2024, 6, 9, 9, 30)


@pytest.fixture(autouse=True)
def fixed_clock(monkeypatch):
    monkeypatch.setattr(leave_service_module, "now_local", lambda: APPROVED_AT)


@pytest.fixture
def svc(leaves, attendance, students):
    return LeaveService(leaves, attendance, students)


def test_approve_marks_every_leave_day_excused(svc, students, leaves, attendance):
    students.add(42)
    leaves.add(leave_id=7, student_id=42, start=date(2024, 6, 10), end=date(2024, 6, 12), leave_type="sick_leave")

    leave = svc.approve_leave(school_id=1, leave_id=7, approver_id=3)

    assert leave.status == LeaveStatus.APPROVED
    assert leave.approved_by == 3
    assert leave.approved_at == APPROVED_AT
    assert leave.attendance_synced_at == APPROVED_AT

    days = sorted(d for (sid, d) in attendance.rows if sid == 42)
    assert days == [date(2024, 6, 10), date(2024, 6, 11), date(2024, 6, 12)]
    for d in days:
        rec = attendance.rows[(42, d)]
        assert rec.status == AttendanceStatus.EXCUSED
        assert rec.remarks == "Leave approved: sick_leave"
        assert rec.school_id == 1


def test_single_day_leave_excuses_exactly_that_day(svc, students, leaves, attendance):
    students.add(1)
    leaves.add(leave_id=1, student_id=1, start=date(2024, 3, 5), end=date(2024, 3, 5))

    svc.approve_leave(school_id=1, leave_id=1, approver_id=9)

    assert list(attendance.rows) == [(1, date(2024, 3, 5))]


def test_reversed_leave_range_writes_nothing(svc, students, leaves, attendance):
    students.add(1)
    leaves.add(leave_id=1, student_id=1, start=date(2024, 3, 6), end=date(2024, 3, 5))

    leave = svc.approve_leave(school_id=1, leave_id=1, approver_id=9)

    assert leave.status == LeaveStatus.APPROVED
    assert attendance.rows == {}


def test_approve_overwrites_existing_attendance(svc, students, leaves, attendance):
    students.add(1)
    attendance.add(1, date(2024, 3, 5), AttendanceStatus.ABSENT)
    leaves.add(leave_id=1, student_id=1, start=date(2024, 3, 5), end=date(2024, 3, 5))

    svc.approve_leave(school_id=1, leave_id=1, approver_id=9)

    assert attendance.rows[(1, date(2024, 3, 5))].status == AttendanceStatus.EXCUSED


def test_approve_twice_reruns_upsert(svc, students, leaves, attendance):
    students.add(1)
    leaves.add(leave_id=1, student_id=1, start=date(2024, 3, 4), end=date(2024, 3, 5))

    svc.approve_leave(school_id=1, leave_id=1, approver_id=9)
    svc.approve_leave(school_id=1, leave_id=1, approver_id=9)

    assert attendance.upsert_calls == 2
    assert len(attendance.rows) == 2


def test_approve_missing_leave_raises_not_found_without_writes(svc, attendance):
    with pytest.raises(NotFoundError):
        svc.approve_leave(school_id=1, leave_id=404, approver_id=9)
    assert attendance.upsert_calls == 0


def test_approve_other_schools_leave_is_not_found(svc, students, leaves, attendance):
    students.add(1, school_id=1)
    leaves.add(leave_id=1, student_id=1, start=date(2024, 3, 4), end=date(2024, 3, 5), school_id=1)

    with pytest.raises(NotFoundError):
        svc.approve_leave(school_id=2, leave_id=1, approver_id=9)

    assert leaves.rows[1].status == LeaveStatus.PENDING
    assert attendance.upsert_calls == 0


def test_failed_attendance_step_leaves_approval_awaiting_sync(svc, students, leaves, attendance, store_error):
    students.add(1)
    leaves.add(leave_id=1, student_id=1, start=date(2024, 3, 4), end=date(2024, 3, 5))
    attendance.fail_upsert = True

    with pytest.raises(AttendanceSyncError) as exc_info:
        svc.approve_leave(school_id=1, leave_id=1, approver_id=9)

    assert isinstance(exc_info.value.__cause__, store_error)
    assert exc_info.value.leave.id == 1
    assert leaves.rows[1].status == LeaveStatus.APPROVED
    assert [r.id for r in svc.list_awaiting_attendance_sync(school_id=1)] == [1]

    attendance.fail_upsert = False
    synced = svc.sync_excused_attendance(school_id=1, leave_id=1)

    assert synced.attendance_synced_at == APPROVED_AT
    assert len(attendance.rows) == 2
    assert svc.list_awaiting_attendance_sync(school_id=1) == []


def test_sync_requires_approved_leave(svc, students, leaves):
    students.add(1)
    leaves.add(leave_id=1, student_id=1, start=date(2024, 3, 4), end=date(2024, 3, 5))

    with pytest.raises(ValidationError):
        svc.sync_excused_attendance(school_id=1, leave_id=1)


def test_reject_sets_reason_and_writes_no_attendance(svc, students, leaves, attendance):
    students.add(1)
    leaves.add(leave_id=1, student_id=1, start=date(2024, 3, 4), end=date(2024, 3, 5))

    leave = svc.reject_leave(school_id=1, leave_id=1, approver_id=9, reason="  No document  ")

    assert leave.status == LeaveStatus.REJECTED
    assert leave.rejection_reason == "No document"
    assert leave.approved_by == 9
    assert attendance.upsert_calls == 0


def test_reject_requires_reason(svc, students, leaves):
    students.add(1)
    leaves.add(leave_id=1, student_id=1, start=date(2024, 3, 4), end=date(2024, 3, 5))

    with pytest.raises(ValidationError):
        svc.reject_leave(school_id=1, leave_id=1, approver_id=9, reason="   ")
    assert leaves.rows[1].status == LeaveStatus.PENDING


def test_reject_missing_leave_raises_not_found(svc):
    with pytest.raises(NotFoundError):
        svc.reject_leave(school_id=1, leave_id=404, approver_id=9, reason="x")


def test_list_is_scoped_to_school(svc, students, leaves):
    students.add(1, school_id=1)
    leaves.add(student_id=1, start=date(2024, 3, 4), end=date(2024, 3, 5), school_id=1)

    assert len(svc.list_leave_requests(school_id=1)) == 1
    assert svc.list_leave_requests(school_id=2) == []


def test_list_drops_leaves_without_student(svc, students, leaves):
    students.add(1)
    leaves.add(student_id=1, start=date(2024, 3, 4), end=date(2024, 3, 5))
    leaves.add(student_id=999, start=date(2024, 3, 4), end=date(2024, 3, 5))

    rows = svc.list_leave_requests(school_id=1)

    assert [r.leave.student_id for r in rows] == [1]
    assert rows[0].student_name == "Student 1"


def test_list_filters_and_orders_newest_first(svc, students, leaves):
    students.add(1)
    students.add(2)
    leaves.add(leave_id=1, student_id=1, start=date(2024, 3, 4), end=date(2024, 3, 5), created_at=datetime(2024, 3, 1))
    leaves.add(leave_id=2, student_id=2, start=date(2024, 4, 1), end=date(2024, 4, 2), created_at=datetime(2024, 3, 20))
    leaves.add(leave_id=3, student_id=1, start=date(2024, 5, 1), end=date(2024, 5, 9), created_at=datetime(2024, 3, 10))
    svc.reject_leave(school_id=1, leave_id=3, approver_id=9, reason="no")

    assert [r.leave.id for r in svc.list_leave_requests(school_id=1)] == [2, 3, 1]
    assert [r.leave.id for r in svc.list_leave_requests(school_id=1, status=LeaveStatus.PENDING)] == [2, 1]
    assert [r.leave.id for r in svc.list_leave_requests(school_id=1, student_id=1)] == [3, 1]
    assert [r.leave.id for r in svc.list_leave_requests(school_id=1, start_date=date(2024, 4, 1))] == [2, 3]
    assert [r.leave.id for r in svc.list_leave_requests(school_id=1, end_date=date(2024, 4, 30))] == [2, 1]


def test_list_propagates_store_errors(attendance, students, store_error):
    class BrokenLeaves:
        def list(self, **kwargs):
            raise store_error("connection lost")

    svc = LeaveService(BrokenLeaves(), attendance, students)

    with pytest.raises(store_error, match="connection lost"):
        svc.list_leave_requests(school_id=1)


def test_create_leave_request_validates_dates(svc, students):
    students.add(1)

    with pytest.raises(ValidationError):
        svc.create_leave_request(
            school_id=1,
            student_id=1,
            start_date=date(2024, 3, 5),
            end_date=date(2024, 3, 4),
            leave_type="sick_leave",
        )


def test_create_leave_request_starts_pending(svc, students):
    students.add(1)

    leave = svc.create_leave_request(
        school_id=1,
        student_id=1,
        start_date=date(2024, 3, 4),
        end_date=date(2024, 3, 5),
        leave_type="family",
        reason=" Wedding ",
    )

    assert leave.status == LeaveStatus.PENDING
    assert leave.reason == "Wedding"
    assert leave.school_id == 1


def test_create_leave_for_other_schools_student_is_not_found(svc, students, leaves, attendance):
    students.add(1, school_id=1)
    attendance.add(1, date(2024, 6, 10), AttendanceStatus.ABSENT, school_id=1)

    with pytest.raises(NotFoundError, match="Student 1"):
        svc.create_leave_request(
            school_id=2,
            student_id=1,
            start_date=date(2024, 6, 10),
            end_date=date(2024, 6, 10),
            leave_type="sick_leave",
        )

    assert leaves.rows == {}
    assert attendance.rows[(1, date(2024, 6, 10))].status == AttendanceStatus.ABSENT
    assert attendance.rows[(1, date(2024, 6, 10))].school_id == 1


def test_create_leave_for_inactive_student_of_same_school(svc, students):
    students.add(1, status=StudentStatus.INACTIVE)

    leave = svc.create_leave_request(
        school_id=1,
        student_id=1,
        start_date=date(2024, 6, 10),
        end_date=date(2024, 6, 10),
        leave_type="sick_leave",
    )

    assert leave.student_id == 1


def test_excused_records_cover_month_boundary(leaves, students):
    students.add(1)
    leave = leaves.add(student_id=1, start=date(2024, 2, 28), end=date(2024, 3, 1))

    assert [r.date for r in excused_records_for(leave)] == [date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)]
