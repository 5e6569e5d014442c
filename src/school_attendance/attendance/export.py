from __future__ import annotations

import csv
import io
from typing import Sequence

import pandas as pd

from .model import DefaulterRecord

DEFAULTER_COLUMNS = [
    ("student_id", "Student ID"),
    ("name", "Name"),
    ("class_name", "Class"),
    ("section", "Section"),
    ("guardian_phone", "Guardian Phone"),
    ("email", "Email"),
    ("attendance_percentage", "Attendance %"),
    ("days_present", "Days Present"),
    ("days_absent", "Days Absent"),
    ("total_days", "Total Days"),
    ("last_absent_date", "Last Absent"),
]


def _defaulter_row(d: DefaulterRecord) -> dict:
    return {
        "student_id": d.student_id,
        "name": d.name,
        "class_name": d.class_name or "-",
        "section": d.section or "-",
        "guardian_phone": d.guardian_phone or "",
        "email": d.email or "",
        "attendance_percentage": d.attendance_percentage,
        "days_present": d.days_present,
        "days_absent": d.days_absent,
        "total_days": d.total_days,
        "last_absent_date": d.last_absent_date.strftime("%Y-%m-%d") if d.last_absent_date else "-",
    }


def defaulters_to_csv(defaulters: Sequence[DefaulterRecord]) -> bytes:
    """CSV with a header row, UTF-8 with BOM so spreadsheet apps detect the encoding."""

    out = io.StringIO()
    writer = csv.writer(out)
    writer.writerow([title for _, title in DEFAULTER_COLUMNS])
    for d in defaulters:
        row = _defaulter_row(d)
        writer.writerow([row[key] for key, _ in DEFAULTER_COLUMNS])
    return out.getvalue().encode("utf-8-sig")


def defaulters_to_xlsx(defaulters: Sequence[DefaulterRecord]) -> bytes:
    df = pd.DataFrame(
        [_defaulter_row(d) for d in defaulters],
        columns=[key for key, _ in DEFAULTER_COLUMNS],
    )
    df = df.rename(columns=dict(DEFAULTER_COLUMNS))

    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name="Defaulters")
    return out.getvalue()
