"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from .enums import AttendanceStatus

DEFAULT_DEFAULTER_THRESHOLD = 75
DEFAULT_LEAVE_LIST_LIMIT = 500

# Statuses that count towards attendance.
COUNTED_PRESENT = frozenset({AttendanceStatus.PRESENT, AttendanceStatus.EXCUSED})

MONTH_LABELS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

LEAVE_APPROVED_REMARKS = "Leave approved: {leave_type}"
