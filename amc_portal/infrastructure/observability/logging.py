"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger.json import JsonFormatter
from amc_portal.config import settings
from amc_portal.domain.models import ClientHealth


class CustomJsonFormatter(JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_assessment(request_id: str, health: ClientHealth, duration_ms: float) -> None:
    """Log structured health outcome for one client"""
    logging.info(
        "Client health assessed",
        extra={
            "request_id": request_id,
            "client_id": str(health.client.id),
            "step": "health_assessed",
            "outcome": "at_risk" if health.risk.is_at_risk else "healthy",
            "is_expiring_soon": health.risk.is_expiring_soon,
            "is_low_hours": health.risk.is_low_hours,
            "days_until_expiry": health.risk.days_until_expiry,
            "hours_remaining": health.utilization.hours_remaining,
            "duration_ms": duration_ms,
        },
    )
