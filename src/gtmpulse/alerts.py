from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional
from uuid import uuid4

from gtmpulse.models.config_models import AlertThresholds
from gtmpulse.models.structured_data import ValidationReport
from gtmpulse.utils.datetime_utils import iso_timestamp
from gtmpulse.utils.log import get_logger

logger = get_logger(__name__)

ALERT_TYPES = ("error", "warning", "info", "success")
SEVERITIES = ("high", "medium", "low")


@dataclass
class Alert:
    type: str
    title: str
    message: str
    severity: str = "medium"
    source: str = "manual"
    timestamp: str = field(default_factory=iso_timestamp)
    resolved: bool = False
    alert_id: str = field(default_factory=lambda: f"alert-{uuid4().hex[:12]}")

    def __post_init__(self):
        if self.type not in ALERT_TYPES:
            raise ValueError(f"alert type must be one of {ALERT_TYPES}")
        if self.severity not in SEVERITIES:
            raise ValueError(f"alert severity must be one of {SEVERITIES}")
        if not self.title:
            raise ValueError("alert title cannot be empty")

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["id"] = data.pop("alert_id")
        return data


def create_alert(
    type: Optional[str],
    title: str,
    message: str,
    severity: Optional[str] = None,
    source: Optional[str] = None,
) -> Alert:
    """Build an alert, filling in the defaults used for manually raised alerts."""
    alert = Alert(
        type=type or "info",
        title=title,
        message=message,
        severity=severity or "medium",
        source=source or "manual",
    )
    logger.info("Alert %s [%s/%s]: %s", alert.alert_id, alert.type, alert.severity, alert.title)
    return alert


def check_alerts(report: ValidationReport, thresholds: Optional[AlertThresholds] = None) -> List[Alert]:
    """Alerts raised by a schema validation run."""
    thresholds = thresholds or AlertThresholds()
    alerts = []
    if report.error_count >= thresholds.error_count:
        alerts.append(
            create_alert(
                "error",
                "Schema Validation Errors",
                f"{report.error_count} schema validation errors detected",
                severity="high",
                source="schema_monitor",
            )
        )
    if report.warning_count >= thresholds.warning_count:
        alerts.append(
            create_alert(
                "warning",
                "Schema Validation Warnings",
                f"{report.warning_count} schema validation warnings detected",
                source="schema_monitor",
            )
        )
    return alerts


def check_performance_drop(
    metric: str, previous: float, current: float, thresholds: Optional[AlertThresholds] = None
) -> Optional[Alert]:
    """Warning alert when ``current`` fell by at least the configured share of ``previous``."""
    thresholds = thresholds or AlertThresholds()
    if previous <= 0:
        return None
    drop = (previous - current) / previous
    if drop < thresholds.performance_drop:
        return None
    return create_alert(
        "warning",
        f"{metric} Drop",
        f"{metric} decreased by {drop:.0%} compared to the previous period",
        source="conversion_monitor",
    )
