"""Example: call the service layer directly, without Flask.

Controllers are a thin layer; the reports live in the services.
"""

import importlib

from school_attendance.container import build_container
from school_attendance.settings import get_settings_module


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    for d in container.attendance_report_service.get_defaulter_students(school_id=1, threshold=75):
        print(d.student_id, d.name, d.attendance_percentage)


if __name__ == "__main__":
    main()
