# src/logging/logger.py — v3
"""Log formatters and the one-call logging setup used by the CLI.

Every record carries the folder, batch and stage currently being processed
(see logging/context.py). Operators read the text format in the nightly log
file; the JSON format is one object per line for log shippers.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from ftpbatch.logging.context import get_context

ROOT_LOGGER = "ftpbatch"

# Third-party loggers held at WARNING
QUIET_LOGGERS = ("paramiko",)


class JsonFormatter(logging.Formatter):
    """One JSON object per record: timestamp, level, logger, message, context."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = get_context().as_dict()
        if context:
            entry["context"] = context

        # logger.info("...", extra={"data": {...}})
        data = getattr(record, "data", None)
        if data:
            entry["data"] = data

        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """``2026-10-16 22:00:04 [INFO    ] ftpbatch.x [batch] (stage) - message``"""

    def format(self, record: logging.LogRecord) -> str:
        ctx = get_context()
        stamp = datetime.fromtimestamp(record.created).astimezone()
        line = f"{stamp:%Y-%m-%d %H:%M:%S} [{record.levelname:8s}] {record.name}"

        tag = ctx.batch or ctx.folder
        if tag:
            line += f" [{tag}]"
        if ctx.stage:
            line += f" ({ctx.stage})"
        line += f" - {record.getMessage()}"

        if record.exc_info and record.exc_info[1] is not None:
            line += "\n" + self.formatException(record.exc_info)
        return line


_FORMATTERS: dict[str, type[logging.Formatter]] = {
    "json": JsonFormatter,
    "text": TextFormatter,
}


def setup_logging(
    level: str = "INFO",
    log_format: str = "text",
    log_file: str | None = None,
    rotation: str = "10MB",
    retention: int = 30,
) -> logging.Logger:
    """Configure the ``ftpbatch`` logger tree and return its root.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        log_format: Output format ("json" or "text").
        log_file: Path to log file (None = stdout only).
        rotation: Max file size before rotation (e.g. "10MB").
        retention: Number of rotated files to keep.
    """
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Re-init replaces handlers, e.g. when a scheduled pass reloads settings
    for handler in root.handlers:
        handler.close()
    root.handlers.clear()

    formatter = _FORMATTERS.get(log_format, TextFormatter)()

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    root.addHandler(console)

    if log_file:
        from ftpbatch.logging.handlers import create_rotating_handler

        file_handler = create_rotating_handler(
            log_file, rotation=rotation, retention=retention
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root
