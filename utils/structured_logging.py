"""
Structured logging setup for the projects tracker.

This module configures:
- RotatingFileHandler <log_dir>/projects.log (1 MB max, 5 backups)
- StreamHandler to stderr
- JSON log formatter (stdlib json)

Usage:
    from utils.structured_logging import setup_logging
    setup_logging(app_name="projects-tracker", log_dir=Path("logs"), level="INFO")
"""

from __future__ import annotations

import json
import logging
import logging.handlers
import sys
from pathlib import Path

_CONFIGURED_FLAG = "_projects_structured_logging_configured"

# Extra record attributes copied into the JSON payload when present
EXTRA_FIELDS = ("project_id", "operation")


class JsonFormatter(logging.Formatter):
    """Minimal JSON formatter with core fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "module": record.module,
            "funcName": record.funcName,
        }
        for name in EXTRA_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                payload[name] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def is_structured_logging_configured(logger: logging.Logger) -> bool:
    return getattr(logger, _CONFIGURED_FLAG, False)


def set_structured_logging_configured(logger: logging.Logger) -> None:
    setattr(logger, _CONFIGURED_FLAG, True)


def setup_logging(
    app_name: str = "projects-tracker", log_dir: Path | str = "logs", level: str = "INFO"
) -> None:
    """Configure structured logging with rotation.

    Args:
        app_name: Name used for top-level logger.
        log_dir: Directory where logs will be stored.
        level: Logging level string ("DEBUG", "INFO", "WARNING", "ERROR").
    """
    root = logging.getLogger()
    if is_structured_logging_configured(root):
        return

    logs_path = Path(log_dir)
    logs_path.mkdir(parents=True, exist_ok=True)

    file_handler = logging.handlers.RotatingFileHandler(
        filename=str(logs_path / "projects.log"),
        maxBytes=1_000_000,
        backupCount=5,
        encoding="utf-8",
    )
    stream_handler = logging.StreamHandler(stream=sys.stderr)

    formatter = JsonFormatter()
    file_handler.setFormatter(formatter)
    stream_handler.setFormatter(formatter)

    lvl = getattr(logging, level.upper(), logging.INFO)
    root.setLevel(lvl)
    root.handlers = [file_handler, stream_handler]

    set_structured_logging_configured(root)

    app_logger = logging.getLogger(app_name)
    app_logger.propagate = True
    app_logger.debug("Structured logging configured")
