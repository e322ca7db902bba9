"""
Asset Sanity - Logging.

============================================================
RESPONSIBILITY
============================================================
Log records go to stderr, one per line, as json or text.

stdout is reserved for the command's report so that
`asset-sanity check --json` stays machine readable at any
log level.

============================================================
"""

import json
import logging
import sys
from typing import Optional, TextIO


TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(run_id)s | %(message)s"


class RunIdFilter(logging.Filter):
    """Stamps every record with the id of the current run."""

    def __init__(self, run_id: Optional[str] = None) -> None:
        super().__init__()
        self.run_id = run_id or ""

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = self.run_id
        return True


class JsonLogFormatter(logging.Formatter):
    """One JSON object per record; message text is escaped, not templated."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "run_id": getattr(record, "run_id", ""),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(
    level: str = "INFO",
    log_format: str = "text",
    run_id: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Route all logging to a single stderr handler.

    Args:
        level: Log level name
        log_format: Output format (json or text)
        run_id: Identifier attached to every record
        stream: Target stream (default: sys.stderr)

    Returns:
        The package logger
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if log_format == "json":
        formatter: logging.Formatter = JsonLogFormatter()
    else:
        formatter = logging.Formatter(TEXT_FORMAT)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(formatter)
    handler.addFilter(RunIdFilter(run_id))

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = [handler]

    return logging.getLogger("asset_sanity")
