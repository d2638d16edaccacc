"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from finance_tracker.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter adding timestamp, level and service name"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


QUIET_LOGGERS = ("sqlalchemy.engine",)


def setup_logging(level: str = "INFO") -> None:
    """
    Route every log record through one JSON handler on stdout.

    SQL statement logging is held at WARNING.
    """
    root = logging.getLogger()
    root.setLevel(level.upper())
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def log_projection(
    request_id: str,
    user_id: str,
    view: str,
    period: str,
    expense_count: int,
    income_count: int,
    skipped: int,
    duration_ms: float,
) -> None:
    """Log one projection-backed view for analysis"""
    logging.info(
        "Projection completed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "projection_complete",
            "view": view,
            "period": period,
            "expense_count": expense_count,
            "income_count": income_count,
            "skipped_records": skipped,
            "duration_ms": duration_ms,
        },
    )


def log_mutation(request_id: str, user_id: str, entity: str, action: str, record_id: str) -> None:
    logging.info(
        f"{entity} {action}",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "record_mutation",
            "entity": entity,
            "action": action,
            "record_id": record_id,
        },
    )
