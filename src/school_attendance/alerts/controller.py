from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import admin_required, current_school_id, json_body, json_errors, school_required, to_json
from ..common.validators import require_percentage
from ..container import Container
from .model import AlertSettings


def register(app: Flask, container: Container) -> None:
    @app.route("/api/alerts/settings", methods=["GET"], endpoint="get_alert_settings")
    @school_required
    @json_errors
    def get_alert_settings():
        settings = container.alert_settings_service.get_alert_settings(school_id=current_school_id())
        return jsonify(to_json(settings))

    @app.route("/api/alerts/settings", methods=["PUT"], endpoint="save_alert_settings")
    @admin_required
    @json_errors
    def save_alert_settings():
        data = json_body()
        current = container.alert_settings_service.get_alert_settings(school_id=current_school_id())
        settings = AlertSettings(
            threshold=require_percentage(data.get("threshold", current.threshold), "Threshold"),
            frequency=str(data.get("frequency") or current.frequency),
            recipients=str(data.get("recipients") or current.recipients),
            methods=list(data.get("methods") or current.methods),
            message_template=str(data.get("message_template") or current.message_template),
            message_template_bn=str(data.get("message_template_bn") or current.message_template_bn),
            last_alert_sent=current.last_alert_sent,
        )
        saved = container.alert_settings_service.save_alert_settings(school_id=current_school_id(), settings=settings)
        return jsonify(to_json(saved))
