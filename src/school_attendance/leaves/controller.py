from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import (
    admin_required,
    arg_date,
    arg_int,
    current_school_id,
    current_user_id,
    json_body,
    json_errors,
    school_required,
    to_json,
)
from ..core.enums import LeaveStatus
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/leaves", methods=["GET"], endpoint="list_leaves")
    @school_required
    @json_errors
    def list_leaves():
        status = request.args.get("status")
        rows = container.leave_service.list_leave_requests(
            school_id=current_school_id(),
            status=LeaveStatus(status) if status else None,
            student_id=arg_int("student_id"),
            start_date=arg_date("start"),
            end_date=arg_date("end"),
        )
        return jsonify(to_json(rows))

    @app.route("/api/leaves", methods=["POST"], endpoint="create_leave")
    @school_required
    @json_errors
    def create_leave():
        data = json_body()
        leave = container.leave_service.create_leave_request(
            school_id=current_school_id(),
            student_id=data.get("student_id"),
            start_date=parse_iso_date(str(data.get("start_date") or "")),
            end_date=parse_iso_date(str(data.get("end_date") or "")),
            leave_type=str(data.get("leave_type") or ""),
            reason=data.get("reason"),
        )
        return jsonify(to_json(leave)), 201

    @app.route("/api/leaves/<int:leave_id>/approve", methods=["POST"], endpoint="approve_leave")
    @admin_required
    @json_errors
    def approve_leave(leave_id: int):
        leave = container.leave_service.approve_leave(
            school_id=current_school_id(),
            leave_id=leave_id,
            approver_id=current_user_id(),
        )
        return jsonify(to_json(leave))

    @app.route("/api/leaves/<int:leave_id>/reject", methods=["POST"], endpoint="reject_leave")
    @admin_required
    @json_errors
    def reject_leave(leave_id: int):
        data = request.get_json(silent=True) or {}
        leave = container.leave_service.reject_leave(
            school_id=current_school_id(),
            leave_id=leave_id,
            approver_id=current_user_id(),
            reason=str(data.get("reason") or ""),
        )
        return jsonify(to_json(leave))

    @app.route("/api/leaves/<int:leave_id>/sync-attendance", methods=["POST"], endpoint="sync_leave_attendance")
    @admin_required
    @json_errors
    def sync_leave_attendance(leave_id: int):
        leave = container.leave_service.sync_excused_attendance(school_id=current_school_id(), leave_id=leave_id)
        return jsonify(to_json(leave))

    @app.route("/api/leaves/awaiting-sync", methods=["GET"], endpoint="leaves_awaiting_sync")
    @admin_required
    @json_errors
    def leaves_awaiting_sync():
        rows = container.leave_service.list_awaiting_attendance_sync(school_id=current_school_id())
        return jsonify(to_json(rows))
