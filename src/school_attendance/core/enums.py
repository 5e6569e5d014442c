from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles stored in the session, used for authorization."""

    ADMIN = "admin"
    TEACHER = "teacher"
    STAFF = "staff"


class AttendanceStatus(str, Enum):
    """Daily attendance status as stored in the attendance table."""

    PRESENT = "present"
    ABSENT = "absent"
    EXCUSED = "excused"


class LeaveStatus(str, Enum):
    """Leave request lifecycle: pending moves once to approved or rejected."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class StudentStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
