from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import (
    admin_required,
    arg_date,
    arg_int,
    current_school_id,
    json_body,
    json_errors,
    school_required,
    to_json,
)
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/holidays", methods=["GET"], endpoint="list_holidays")
    @school_required
    @json_errors
    def list_holidays():
        holidays = container.holiday_service.list_holidays(
            school_id=current_school_id(),
            holiday_type=request.args.get("type") or None,
            academic_year_id=arg_int("academic_year_id"),
            start_date=arg_date("start"),
            end_date=arg_date("end"),
        )
        return jsonify(to_json(holidays))

    @app.route("/api/holidays", methods=["POST"], endpoint="create_holiday")
    @admin_required
    @json_errors
    def create_holiday():
        data = json_body()
        year_id = data.get("academic_year_id")
        holiday = container.holiday_service.create_holiday(
            school_id=current_school_id(),
            name=str(data.get("name") or ""),
            holiday_date=parse_iso_date(str(data.get("date") or "")),
            holiday_type=str(data.get("type") or ""),
            academic_year_id=int(year_id) if year_id else None,
            description=data.get("description"),
        )
        return jsonify(to_json(holiday)), 201

    @app.route("/api/holidays/<int:holiday_id>", methods=["PATCH"], endpoint="update_holiday")
    @admin_required
    @json_errors
    def update_holiday(holiday_id: int):
        changes = json_body()
        if changes.get("date"):
            changes["date"] = parse_iso_date(str(changes["date"]))
        holiday = container.holiday_service.update_holiday(
            school_id=current_school_id(),
            holiday_id=holiday_id,
            changes=changes,
        )
        return jsonify(to_json(holiday))

    @app.route("/api/holidays/<int:holiday_id>", methods=["DELETE"], endpoint="delete_holiday")
    @admin_required
    @json_errors
    def delete_holiday(holiday_id: int):
        container.holiday_service.delete_holiday(school_id=current_school_id(), holiday_id=holiday_id)
        return "", 204
