"""
Logging setup.

Modules log through logging.getLogger(__name__) and attach structured data
with extra={"extra_fields": {...}}. In json mode each record becomes one
JSON object; in text mode the extra fields are appended as key=value pairs.
"""
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from core.config import settings

QUIET_LOGGERS = ("sqlalchemy.engine", "uvicorn.access", "alembic.runtime.migration")


class JSONFormatter(logging.Formatter):
    """One JSON object per record, tagged with the deployment environment."""

    def __init__(self, environment: str = "development"):
        super().__init__()
        self.environment = environment

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "environment": self.environment,
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        entry.update(getattr(record, "extra_fields", None) or {})
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable lines for local development."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)-7s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = getattr(record, "extra_fields", None)
        if fields:
            line += " | " + " ".join(f"{k}={v}" for k, v in fields.items())
        return line


def setup_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> logging.Logger:
    """
    Configure the root logger. Safe to call more than once.

    Defaults come from settings: LOG_LEVEL, and LOG_FORMAT (forced to json
    when ENVIRONMENT is production).
    """
    log_level = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO)
    fmt = fmt or ("json" if settings.ENVIRONMENT == "production" else settings.LOG_FORMAT)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter(settings.ENVIRONMENT) if fmt == "json" else TextFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(log_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root
