"""
Structured logging utility for the difference engine.

Every record is one JSON object carrying the emitting component, so
comparison traces from several engines can be filtered and parsed by
tooling. Compared values go through describe_value() before they reach a
record.
"""

import json
import logging
import os
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from functools import wraps

MAX_VALUE_LENGTH = 80
LOG_LEVEL = os.getenv("XMLDIFF_LOG_LEVEL", "INFO").upper()


def describe_value(value: Any, max_length: int = MAX_VALUE_LENGTH) -> str:
    """
    Render a compared value for log output.

    Long values are truncated so that text nodes of large documents
    don't flood the log.

    Args:
        value: Control or test value of a comparison (may be None)
        max_length: Maximum number of characters kept

    Returns:
        Printable representation of the value

    Example:
        >>> describe_value(None)
        "null"
        >>> describe_value("a" * 100, max_length=5)
        "'aaa...(102 chars)"
    """
    if value is None:
        return "null"

    text = repr(value)
    if len(text) <= max_length:
        return text

    return f"{text[:max_length - 1]}...({len(text)} chars)"


class StructuredLogger:
    """
    JSON-formatted logger bound to one component.

    The level comes from XMLDIFF_LOG_LEVEL (INFO by default). Records
    propagate to the root logger as well as going to the component's own
    stream handler.
    """

    def __init__(self, name: str):
        """
        Args:
            name: Logger name (typically __name__ from calling module)
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(LOG_LEVEL)

        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter("%(message)s"))
            self.logger.addHandler(handler)

    def _format_log(
        self,
        level: str,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        duration_ms: Optional[float] = None,
        error: Optional[str] = None,
    ) -> str:
        """
        Format log entry as JSON.

        Optional fields are left out when empty. Values json can't encode
        (enums, nodes) are rendered with str().
        """
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": level,
            "logger": self.logger.name,
            "message": message,
        }
        optional = {
            "operation": operation,
            "context": context,
            "error": error,
        }
        log_entry.update({key: value for key, value in optional.items() if value})

        if duration_ms is not None:
            log_entry["duration_ms"] = round(duration_ms, 2)

        return json.dumps(log_entry, ensure_ascii=False, default=str)

    def _log(self, level: int, message: str, **fields: Any) -> None:
        if self.logger.isEnabledFor(level):
            record = self._format_log(logging.getLevelName(level), message, **fields)
            self.logger.log(level, record)

    def is_enabled_for(self, level: int) -> bool:
        """Check whether messages of the given level would be emitted."""
        return self.logger.isEnabledFor(level)

    def debug(self, message: str, operation: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        self._log(logging.DEBUG, message, operation=operation, context=context)

    def info(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        duration_ms: Optional[float] = None,
    ):
        self._log(logging.INFO, message, operation=operation, context=context, duration_ms=duration_ms)

    def warning(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
    ):
        self._log(logging.WARNING, message, operation=operation, context=context, error=error)

    def error(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        error: Optional[str] = None,
        duration_ms: Optional[float] = None,
    ):
        self._log(
            logging.ERROR,
            message,
            operation=operation,
            context=context,
            error=error,
            duration_ms=duration_ms,
        )


def log_operation(operation_name: str):
    """
    Decorator timing a setup-level operation such as loading configuration.

    Logs start at DEBUG, completion at INFO and failure at ERROR (with the
    exception type), then re-raises.

    Usage:
        @log_operation("load_engine_settings")
        def load(path):
            ...
    """

    def decorator(func):
        logger = StructuredLogger(func.__module__)

        @wraps(func)
        def wrapper(*args, **kwargs):
            context: Dict[str, Any] = {"function": func.__qualname__}
            if kwargs.get("path") is not None:
                context["path"] = str(kwargs["path"])

            logger.debug(f"Starting {operation_name}", operation=operation_name, context=context)

            started = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error(
                    f"Failed {operation_name}",
                    operation=operation_name,
                    context={**context, "exception": type(e).__name__},
                    error=str(e),
                    duration_ms=(time.perf_counter() - started) * 1000,
                )
                raise

            logger.info(
                f"Completed {operation_name}",
                operation=operation_name,
                context=context,
                duration_ms=(time.perf_counter() - started) * 1000,
            )
            return result

        return wrapper

    return decorator


def get_logger(name: str) -> StructuredLogger:
    """Return a StructuredLogger for name (typically the caller's __name__)."""
    return StructuredLogger(name)
