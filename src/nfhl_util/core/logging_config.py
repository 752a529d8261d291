"""
Logging setup for the nfhl_util command line tool.

Human-readable lines go to stderr (colored when running in development).
``--log-file`` adds a rotating file that can hold JSON lines, which keeps
per-state context such as ``state_fips`` searchable after a long MSC run.
"""

import json
import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from nfhl_util.core.config import settings

CONSOLE_FORMAT = "%(levelname)s - %(asctime)s - %(name)s - %(message)s"
DEV_CONSOLE_FORMAT = "%(levelname)s | %(asctime)s | %(name)s:%(lineno)d | %(message)s"
FILE_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(funcName)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

# Attributes every LogRecord carries; anything else was attached as context
_RECORD_ATTRIBUTES = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__
) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """Render each record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": self.formatTime(record, DATE_FORMAT),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "function": record.funcName,
            "line": record.lineno,
        }
        entry.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRIBUTES
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class ColoredFormatter(logging.Formatter):
    """Console formatter that colors the level name."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        original = record.levelname
        color = self.COLORS.get(original)
        if color:
            record.levelname = f"{color}{original}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original


def get_log_level(level_name: str) -> int:
    """Map a level name to its logging constant; unknown names give INFO."""
    level = logging.getLevelName(level_name.upper())
    return level if isinstance(level, int) else logging.INFO


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    if settings.environment == "development":
        handler.setFormatter(ColoredFormatter(DEV_CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _file_handler(log_file: Path, level: int, json_logs: bool) -> logging.Handler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    if json_logs:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(
    log_level: Optional[str] = None,
    log_file: Optional[Path] = None,
    json_logs: bool = False,
    enable_console: bool = True,
) -> None:
    """
    Configure the root logger for a CLI run.

    Replaces any handlers already installed on the root logger.

    Args:
        log_level: Level name; defaults to settings.log_level
        log_file: Optional rotating log file
        json_logs: Write the log file as JSON lines
        enable_console: Log to stderr
    """
    level_name = log_level or settings.log_level
    level = get_log_level(level_name)

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    if enable_console:
        root.addHandler(_console_handler(level))
    if log_file:
        root.addHandler(_file_handler(log_file, level, json_logs))

    # httpx logs one INFO line per request
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    root.debug(
        f"Logging configured: level={level_name}, environment={settings.environment}, "
        f"log_file={log_file}, json_logs={json_logs}"
    )


class LogContext:
    """
    Attach extra fields to every record created inside the block.

    Usage:
        with LogContext(state="FL", state_fips="12"):
            logger.info("Searching MSC")
    """

    def __init__(self, **fields: Any):
        self.fields = fields
        self._previous_factory: Optional[Any] = None

    def __enter__(self) -> "LogContext":
        previous = logging.getLogRecordFactory()
        fields = self.fields

        def factory(*args: Any, **kwargs: Any) -> logging.LogRecord:
            record = previous(*args, **kwargs)
            record.__dict__.update(fields)
            return record

        self._previous_factory = previous
        logging.setLogRecordFactory(factory)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._previous_factory is not None:
            logging.setLogRecordFactory(self._previous_factory)


def add_log_context(**fields: Any) -> LogContext:
    """Shorthand for ``LogContext(**fields)``."""
    return LogContext(**fields)
