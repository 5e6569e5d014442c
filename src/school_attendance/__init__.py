"""School Attendance package.

Organised by feature modules (students, academic_calendar, attendance, leaves,
alerts) with a thin Flask controller layer over service/repository layers.
Every repository call is scoped by ``school_id``.
"""
