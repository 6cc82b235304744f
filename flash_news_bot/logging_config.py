"""Logging configuration for Flash News Bot."""

import json
import logging
import sys
import time
from datetime import UTC, datetime
from typing import Any

# Attributes every LogRecord carries; anything else arrived through ``extra``.
_RESERVED_ATTRS = set(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def _context_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RESERVED_ATTRS and key not in ("execution_id", "component")
    }


class ConsoleFormatter(logging.Formatter):
    """Human-readable, timestamped console lines."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime(
            "%Y-%m-%d %H:%M:%S"
        )
        component = getattr(record, "component", record.name)
        line = f"[{timestamp}] {record.levelname} {component}: {record.getMessage()}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class StructuredFormatter(logging.Formatter):
    """Custom formatter for structured JSON logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured JSON."""
        log_entry = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if hasattr(record, "execution_id"):
            log_entry["execution_id"] = record.execution_id

        if hasattr(record, "component"):
            log_entry["component"] = record.component

        context = _context_fields(record)
        if context:
            log_entry["context"] = context

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


class ExecutionLogger:
    """Logger with execution context and structured logging."""

    def __init__(self, execution_id: str, component: str = "main"):
        """Initialize execution logger.

        Args:
            execution_id: Unique identifier for this execution
            component: Component name (e.g., 'feed_fetcher', 'notifier')
        """
        self.execution_id = execution_id
        self.component = component
        self.logger = logging.getLogger(f"flash_news_bot.{component}")
        self.cycle_started: float | None = None

    def _log_with_context(self, level: int, message: str, **kwargs) -> None:
        """Log message with execution context."""
        extra = {
            "execution_id": self.execution_id,
            "component": self.component,
            **kwargs,
        }
        self.logger.log(level, message, extra=extra)

    def info(self, message: str, **kwargs) -> None:
        """Log info message with context."""
        self._log_with_context(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        """Log warning message with context."""
        self._log_with_context(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs) -> None:
        """Log error message with context."""
        self._log_with_context(logging.ERROR, message, **kwargs)

    def debug(self, message: str, **kwargs) -> None:
        """Log debug message with context."""
        self._log_with_context(logging.DEBUG, message, **kwargs)

    def start_cycle(self) -> None:
        """Mark the start of a fetch cycle."""
        self.cycle_started = time.monotonic()

    def finish_cycle(self, metrics: dict[str, Any]) -> None:
        """Log the cycle outcome and how long it took.

        A failed fetch is reported at WARNING so it stands out from the
        routine DEBUG summary.
        """
        duration = None
        if self.cycle_started is not None:
            duration = round(time.monotonic() - self.cycle_started, 3)

        level = logging.WARNING if metrics.get("fetch_failed") else logging.DEBUG
        self._log_with_context(
            level,
            f"Cycle finished: {metrics.get('new_items', 0)} new of "
            f"{metrics.get('items_found', 0)} fetched",
            duration_seconds=duration,
            metrics=metrics,
        )


def setup_structured_logging(log_level: str = "INFO", log_format: str = "text") -> None:
    """Setup logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_format: ``text`` for console lines, ``json`` for structured output
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    if log_format.lower() == "json":
        console_handler.setFormatter(StructuredFormatter())
    else:
        console_handler.setFormatter(ConsoleFormatter())
    root_logger.addHandler(console_handler)

    # urllib3 logs every connection at DEBUG
    logging.getLogger("urllib3").setLevel(max(level, logging.INFO))


def create_execution_logger(
    component: str, execution_id: str | None = None
) -> ExecutionLogger:
    """Create an execution logger for a component.

    Args:
        component: Component name
        execution_id: Optional execution ID (will generate one if not provided)

    Returns:
        ExecutionLogger instance
    """
    if not execution_id:
        execution_id = f"exec_{datetime.now(UTC).strftime('%Y%m%d_%H%M%S_%f')}"

    return ExecutionLogger(execution_id, component)
