"""Low-attendance alert settings.

This is a placeholder with no storage behind it: ``get_alert_settings``
always returns the built-in defaults and ``save_alert_settings`` only logs
what it was given. There is no table for per-school alert settings yet.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, replace

from ..core.constants import DEFAULT_DEFAULTER_THRESHOLD
from .model import AlertSettings

logger = logging.getLogger(__name__)

DEFAULT_ALERT_SETTINGS = AlertSettings(
    threshold=DEFAULT_DEFAULTER_THRESHOLD,
    frequency="weekly",
    recipients="both",
    methods=["in-app"],
    message_template="Your child {studentName} has low attendance ({percentage}%)",
    message_template_bn="আপনার সন্তান {studentName} এর উপস্থিতি কম ({percentage}%)",
    last_alert_sent=None,
)


class AlertSettingsService:
    def get_alert_settings(self, *, school_id: int) -> AlertSettings:
        return replace(DEFAULT_ALERT_SETTINGS, methods=list(DEFAULT_ALERT_SETTINGS.methods))

    def save_alert_settings(self, *, school_id: int, settings: AlertSettings) -> AlertSettings:
        # Not persisted.
        logger.info("Alert settings saved (school_id=%s, not persisted): %s", school_id, asdict(settings))
        return settings
