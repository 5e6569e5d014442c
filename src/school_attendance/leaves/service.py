from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import iter_days, now_local
from ..common.validators import require_non_empty, require_positive_id
from ..core.constants import DEFAULT_LEAVE_LIST_LIMIT, LEAVE_APPROVED_REMARKS
from ..core.enums import AttendanceStatus, LeaveStatus
from ..core.exceptions import AttendanceSyncError, NotFoundError, ValidationError
from ..students.repository import StudentRepository
from .model import LeaveRequest, LeaveRequestView
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


def excused_records_for(leave: LeaveRequest) -> list[AttendanceRecord]:
    """One excused record per day of the leave, both ends included."""

    remarks = LEAVE_APPROVED_REMARKS.format(leave_type=leave.leave_type)
    return [
        AttendanceRecord(
            student_id=leave.student_id,
            date=day,
            status=AttendanceStatus.EXCUSED,
            school_id=leave.school_id,
            remarks=remarks,
        )
        for day in iter_days(leave.start_date, leave.end_date)
    ]


class LeaveService:
    def __init__(self, leaves: LeaveRepository, attendance: AttendanceRepository, students: StudentRepository):
        self._leaves = leaves
        self._attendance = attendance
        self._students = students

    def list_leave_requests(
        self,
        *,
        school_id: int,
        status: Optional[LeaveStatus] = None,
        student_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[LeaveRequestView]:
        try:
            return self._leaves.list(
                school_id=int(school_id),
                status=status,
                student_id=int(student_id) if student_id is not None else None,
                start_date=start_date,
                end_date=end_date,
                limit=DEFAULT_LEAVE_LIST_LIMIT,
            )
        except Exception:
            logger.exception("Failed to fetch leave requests (school_id=%s)", school_id)
            raise

    def create_leave_request(
        self,
        *,
        school_id: int,
        student_id: int,
        start_date: date,
        end_date: date,
        leave_type: str,
        reason: Optional[str] = None,
    ) -> LeaveRequest:
        student_id = require_positive_id(student_id, "Student")
        if end_date < start_date:
            raise ValidationError("End date must be on or after start date")
        leave_type = require_non_empty(leave_type, "Leave type")

        try:
            student = self._students.get(school_id=int(school_id), student_id=student_id)
        except Exception:
            logger.exception("Failed to fetch student %s (school_id=%s)", student_id, school_id)
            raise

        if student is None:
            raise NotFoundError(f"Student {student_id} not found")

        try:
            leave_id = self._leaves.create(
                school_id=int(school_id),
                student_id=student_id,
                start_date=start_date,
                end_date=end_date,
                leave_type=leave_type,
                reason=(reason or "").strip() or None,
            )
            created = self._leaves.get(school_id=int(school_id), leave_id=leave_id)
        except Exception:
            logger.exception("Failed to create leave request (school_id=%s)", school_id)
            raise

        if created is None:
            raise NotFoundError(f"Leave request {leave_id} not found after insert")
        return created

    def approve_leave(self, *, school_id: int, leave_id: int, approver_id: int) -> LeaveRequest:
        """Approve a leave and mark every day of it as excused.

        The two writes are not atomic. If the attendance step fails the leave
        stays approved with ``attendance_synced_at`` unset and
        ``AttendanceSyncError`` is raised; ``sync_excused_attendance`` resumes it.
        """

        try:
            leave = self._leaves.decide(
                school_id=int(school_id),
                leave_id=int(leave_id),
                status=LeaveStatus.APPROVED,
                decided_by=int(approver_id),
                decided_at=now_local(),
            )
        except Exception:
            logger.exception("Failed to approve leave %s (school_id=%s)", leave_id, school_id)
            raise

        if leave is None:
            raise NotFoundError(f"Leave request {leave_id} not found")

        return self._write_excused_attendance(leave)

    def sync_excused_attendance(self, *, school_id: int, leave_id: int) -> LeaveRequest:
        """Re-run the attendance step for an approved leave. Safe to repeat."""

        try:
            leave = self._leaves.get(school_id=int(school_id), leave_id=int(leave_id))
        except Exception:
            logger.exception("Failed to load leave %s (school_id=%s)", leave_id, school_id)
            raise

        if leave is None:
            raise NotFoundError(f"Leave request {leave_id} not found")
        if leave.status != LeaveStatus.APPROVED:
            raise ValidationError("Only approved leave requests can be synced to attendance")

        return self._write_excused_attendance(leave)

    def list_awaiting_attendance_sync(self, *, school_id: int) -> Sequence[LeaveRequest]:
        try:
            return self._leaves.list_awaiting_attendance_sync(school_id=int(school_id))
        except Exception:
            logger.exception("Failed to fetch unsynced approvals (school_id=%s)", school_id)
            raise

    def _write_excused_attendance(self, leave: LeaveRequest) -> LeaveRequest:
        records = excused_records_for(leave)
        try:
            self._attendance.upsert_many(records)
            synced_at = now_local()
            self._leaves.mark_attendance_synced(school_id=leave.school_id, leave_id=leave.id, synced_at=synced_at)
        except Exception as e:
            logger.exception(
                "Leave %s approved but excused attendance not written (school_id=%s, days=%s)",
                leave.id,
                leave.school_id,
                len(records),
            )
            raise AttendanceSyncError(
                f"Leave request {leave.id} approved but attendance was not updated",
                leave=leave,
            ) from e

        logger.info("Leave %s excused %s day(s) for student %s", leave.id, len(records), leave.student_id)
        return replace(leave, attendance_synced_at=synced_at)

    def reject_leave(self, *, school_id: int, leave_id: int, approver_id: int, reason: str) -> LeaveRequest:
        reason = require_non_empty(reason, "Rejection reason")

        try:
            leave = self._leaves.decide(
                school_id=int(school_id),
                leave_id=int(leave_id),
                status=LeaveStatus.REJECTED,
                decided_by=int(approver_id),
                decided_at=now_local(),
                rejection_reason=reason,
            )
        except Exception:
            logger.exception("Failed to reject leave %s (school_id=%s)", leave_id, school_id)
            raise

        if leave is None:
            raise NotFoundError(f"Leave request {leave_id} not found")
        return leave
