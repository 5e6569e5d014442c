from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus
from .model import LeaveRequest, LeaveRequestView


class LeaveRepository(Protocol):
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
        """Leaves inner-joined with students, newest first."""

        raise NotImplementedError

    def get(self, *, school_id: int, leave_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

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
        raise NotImplementedError

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
        """Set the decision and return the updated row, or None if no row matched."""

        raise NotImplementedError

    def mark_attendance_synced(self, *, school_id: int, leave_id: int, synced_at: datetime) -> bool:
        raise NotImplementedError

    def list_awaiting_attendance_sync(self, *, school_id: int) -> Sequence[LeaveRequest]:
        raise NotImplementedError
