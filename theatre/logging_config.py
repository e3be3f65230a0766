# theatre/logging_config.py
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger.json import JsonFormatter

SERVICE_NAME = "theatre-booking"

# Extra fields callers may pass through ``logger.info(..., extra={...})``
CONTEXT_FIELDS = ("user_id", "show_id", "booking_id", "review_id")


class CustomJsonFormatter(JsonFormatter):
    """JSON formatter that stamps the service name and booking context"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = SERVICE_NAME

        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                log_record[field] = getattr(record, field)


def setup_logging(level: str = "INFO", json_format: bool = True) -> logging.Logger:
    """Configure the root logger once; safe to call again (handlers are replaced)"""
    handler = logging.StreamHandler(sys.stdout)
    if json_format:
        handler.setFormatter(CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))

    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper())
    for existing in list(root_logger.handlers):
        if getattr(existing, "_theatre_handler", False):
            root_logger.removeHandler(existing)
    handler._theatre_handler = True
    root_logger.addHandler(handler)

    # Reduce noise from libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)

    return root_logger
