from __future__ import annotations

from dataclasses import dataclass

from .academic_calendar.mysql_calendar_repository import MySQLAcademicYearRepository, MySQLHolidayRepository
from .academic_calendar.service import HolidayService
from .alerts.service import AlertSettingsService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceReportService
from .database.connection import DBConfig, DatabaseConnection
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.service import LeaveService
from .students.mysql_student_repository import MySQLStudentRepository


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    students_repo: MySQLStudentRepository
    academic_years_repo: MySQLAcademicYearRepository
    holidays_repo: MySQLHolidayRepository
    attendance_repo: MySQLAttendanceRepository
    leaves_repo: MySQLLeaveRepository

    attendance_report_service: AttendanceReportService
    leave_service: LeaveService
    holiday_service: HolidayService
    alert_settings_service: AlertSettingsService

    defaulter_threshold: float = 75.0


def build_container(*, db_config: dict, defaulter_threshold: float = 75.0) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    students_repo = MySQLStudentRepository(conn)
    academic_years_repo = MySQLAcademicYearRepository(conn)
    holidays_repo = MySQLHolidayRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    leaves_repo = MySQLLeaveRepository(conn)

    return Container(
        conn=conn,
        students_repo=students_repo,
        academic_years_repo=academic_years_repo,
        holidays_repo=holidays_repo,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        attendance_report_service=AttendanceReportService(attendance_repo, students_repo, academic_years_repo),
        leave_service=LeaveService(leaves_repo, attendance_repo, students_repo),
        holiday_service=HolidayService(holidays_repo, academic_years_repo),
        alert_settings_service=AlertSettingsService(),
        defaulter_threshold=float(defaulter_threshold),
    )
