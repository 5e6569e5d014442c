from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveStatus


@dataclass(frozen=True)
class LeaveRequest:
    id: int
    student_id: int
    start_date: date
    end_date: date
    leave_type: str
    status: LeaveStatus
    school_id: int
    reason: Optional[str] = None
    created_at: Optional[datetime] = None
    approved_by: Optional[int] = None
    approved_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    attendance_synced_at: Optional[datetime] = None

    @property
    def awaiting_attendance_sync(self) -> bool:
        """Approved, but the excused attendance rows are not confirmed written."""
        return self.status == LeaveStatus.APPROVED and self.attendance_synced_at is None


@dataclass(frozen=True)
class LeaveRequestView:
    """Read-model for listings: the leave joined with its student."""

    leave: LeaveRequest
    student_name: str
    student_code: str
    class_name: Optional[str]
    section: Optional[str]
