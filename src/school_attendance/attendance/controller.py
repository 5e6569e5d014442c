from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import today_local
from ..common.web import arg_date, current_school_id, json_errors, school_required, to_json
from ..core.exceptions import ValidationError
from ..container import Container
from .export import defaulters_to_csv, defaulters_to_xlsx

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def register(app: Flask, container: Container) -> None:
    def _defaulters():
        threshold = request.args.get("threshold")
        return container.attendance_report_service.get_defaulter_students(
            school_id=current_school_id(),
            threshold=float(threshold) if threshold else container.defaulter_threshold,
            class_name=request.args.get("class") or None,
            section=request.args.get("section") or None,
            start_date=arg_date("start"),
            end_date=arg_date("end"),
        )

    def _export_filename(ext: str) -> str:
        return f"attendance_defaulters_{today_local().strftime('%Y%m%d')}.{ext}"

    @app.route("/api/attendance/defaulters", methods=["GET"], endpoint="attendance_defaulters")
    @school_required
    @json_errors
    def attendance_defaulters():
        return jsonify(to_json(_defaulters()))

    @app.route("/api/attendance/defaulters.csv", methods=["GET"], endpoint="attendance_defaulters_csv")
    @school_required
    @json_errors
    def attendance_defaulters_csv():
        return app.response_class(
            defaulters_to_csv(_defaulters()),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={_export_filename('csv')}"},
        )

    @app.route("/api/attendance/defaulters.xlsx", methods=["GET"], endpoint="attendance_defaulters_xlsx")
    @school_required
    @json_errors
    def attendance_defaulters_xlsx():
        return app.response_class(
            defaulters_to_xlsx(_defaulters()),
            mimetype=XLSX_MIMETYPE,
            headers={"Content-Disposition": f"attachment; filename={_export_filename('xlsx')}"},
        )

    @app.route("/api/attendance/analytics", methods=["GET"], endpoint="attendance_analytics")
    @school_required
    @json_errors
    def attendance_analytics():
        year_ids = [int(v) for v in request.args.getlist("year_id") if v.strip()]
        svc = container.attendance_report_service

        if request.args.get("detailed") == "1":
            outcomes = svc.get_attendance_analytics_outcomes(school_id=current_school_id(), academic_year_ids=year_ids)
            return jsonify(to_json(outcomes))

        analytics = svc.get_attendance_analytics(school_id=current_school_id(), academic_year_ids=year_ids)
        return jsonify(to_json(analytics))

    @app.route("/api/attendance/class-comparison", methods=["GET"], endpoint="attendance_class_comparison")
    @school_required
    @json_errors
    def attendance_class_comparison():
        start = arg_date("start")
        end = arg_date("end")
        if start is None or end is None:
            raise ValidationError("Missing start/end parameters")

        points = container.attendance_report_service.get_classwise_comparison(
            school_id=current_school_id(),
            start_date=start,
            end_date=end,
        )
        return jsonify(to_json(points))
