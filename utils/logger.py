"""Logging configuration"""
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

LOGGER_NAMES = ("api", "models", "services", "utils")


class JSONFormatter(logging.Formatter):
    """One JSON object per line"""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in ("user_id", "path", "method"):
            if hasattr(record, key):
                log_data[key] = getattr(record, key)
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data)


def setup_logging(log_level: str = "INFO", log_format: str = "text") -> None:
    """Attach a single stdout handler to the application's package loggers."""
    handler = logging.StreamHandler(sys.stdout)
    if log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))

    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        logger.setLevel(log_level)
        logger.handlers = [handler]
