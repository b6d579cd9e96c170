"""
Structured logging setup.
Emits one JSON document per line so logs can be shipped to any aggregator,
with correlation IDs for request tracing and a dedicated audit channel.
"""
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from app.core.config import settings


class JsonFormatter(logging.Formatter):
    """Serializes log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", None),
        }

        audit = getattr(record, "audit", None)
        if audit is not None:
            payload["audit"] = audit

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logger(name: str, level: str = "INFO") -> logging.Logger:
    """Builds an idempotent stdout logger. Re-imports never duplicate handlers."""
    log = logging.getLogger(name)
    log.setLevel(level.upper())

    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JsonFormatter())
        log.addHandler(handler)
        log.propagate = False

    return log


logger = setup_logger("calculadora", settings.LOG_LEVEL)
audit_logger = setup_logger("calculadora.audit", settings.LOG_LEVEL)


def get_logger_with_correlation(correlation_id: str) -> logging.LoggerAdapter:
    """Returns a logger adapter that stamps every record with the given correlation ID."""
    return logging.LoggerAdapter(logger, {"correlation_id": correlation_id})


def audit_log(action: str, user: str, resource: str, details: Optional[Dict[str, Any]] = None) -> None:
    """Records a business event on the audit channel."""
    details = details or {}
    audit_logger.info(
        f"AUDIT: {action}",
        extra={
            "correlation_id": details.get("correlation_id"),
            "audit": {
                "action": action,
                "user": user,
                "resource": resource,
                "details": details,
            },
        },
    )
