from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class AlertSettings:
    threshold: float
    frequency: str
    recipients: str
    methods: list[str] = field(default_factory=list)
    message_template: str = ""
    message_template_bn: str = ""
    last_alert_sent: Optional[datetime] = None
