"""Structured logging configuration.

Log output goes to stderr: stdout is reserved for the MCP stdio transport.
"""

import json
import logging
import sys
from typing import Any

from hn_mcp.utils.config import get_settings


class JsonFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON string with log data
        """
        settings = get_settings()

        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
            "server_name": settings.SERVER_NAME,
            "server_version": settings.SERVER_VERSION,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra_fields"):
            log_data.update(record.extra_fields)

        return json.dumps(log_data)


class StandardFormatter(logging.Formatter):
    """Standard text formatter with consistent format."""

    def __init__(self) -> None:
        """Initialize with standard format."""
        fmt = "[%(asctime)s] %(levelname)s - %(name)s - %(message)s"
        datefmt = "%Y-%m-%d %H:%M:%S"
        super().__init__(fmt=fmt, datefmt=datefmt)


# Track if logging has been configured
_logging_configured = False


def setup_logging(use_json: bool | None = None, force_reconfigure: bool = False) -> None:
    """
    Configure server logging.

    Sets up stderr logging with the LOG_LEVEL from settings.
    Prevents duplicate handlers by checking if already configured.

    Args:
        use_json: If True, use JSON format. If False, use standard text format.
            None follows the LOG_FORMAT setting.
        force_reconfigure: If True, force reconfiguration even if already set up.
    """
    global _logging_configured

    if _logging_configured and not force_reconfigure:
        return

    settings = get_settings()
    if use_json is None:
        use_json = settings.LOG_FORMAT == "json"

    root_logger = logging.getLogger()

    # Remove only our own StreamHandler to prevent duplicates
    # Preserve other handlers (like pytest's caplog handler)
    handlers_to_remove = [
        h for h in root_logger.handlers
        if isinstance(h, logging.StreamHandler) and h.stream == sys.stderr
    ]
    for handler in handlers_to_remove:
        root_logger.removeHandler(handler)

    log_level = getattr(logging, settings.LOG_LEVEL)
    root_logger.setLevel(log_level)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)

    if use_json:
        formatter = JsonFormatter()
    else:
        formatter = StandardFormatter()

    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    _logging_configured = True

    logger = logging.getLogger(__name__)
    logger.debug(
        f"Logging configured: level={settings.LOG_LEVEL}, "
        f"format={'json' if use_json else 'standard'}"
    )


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance with the given name.

    Ensures logging is set up before returning the logger.

    Args:
        name: Name for the logger (typically __name__ from calling module)

    Returns:
        Logger instance
    """
    if not _logging_configured:
        setup_logging()

    return logging.getLogger(name)


def reset_logging() -> None:
    """
    Reset logging configuration.

    Useful for testing to clear state between tests.
    """
    global _logging_configured

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(logging.WARNING)

    _logging_configured = False
