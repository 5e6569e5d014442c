class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a row scoped by id and school does not exist."""


class AttendanceSyncError(DomainError):
    """Raised when a leave was approved but its excused attendance was not written.

    The leave stays ``approved`` with ``attendance_synced_at`` unset until
    ``LeaveService.sync_excused_attendance`` succeeds.
    """

    def __init__(self, message: str, *, leave):
        super().__init__(message)
        self.leave = leave
