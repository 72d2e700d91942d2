"""
Copyright (c) 2025 Eric C. Mumford (@heymumford)
This file is part of IMPORTORDER, licensed under the MIT License.
See LICENSE file for details.
"""

"""Logging infrastructure with contextual error tracking.

This module provides structured logging with context data, per-thread
correlation IDs (one per formatted file), Rich console output, JSON output and
an error tracker that collects per-file failures of a batch run.
"""

import json
import logging
import os
import sys
import threading
import time
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from typing import Any

from rich.logging import RichHandler

# Thread-local storage for context data
_context_local = threading.local()

PLAIN_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
PLAIN_FORMAT_NO_TIME = "[%(levelname)s] %(name)s: %(message)s"


class CorrelationIdManager:
    """
    Manages correlation IDs across threads using thread-local storage.

    Every worker thread gets its own ID, so log lines of concurrently formatted
    files can be told apart.
    """

    def get_correlation_id(self) -> str:
        """Get the current correlation ID or generate a new one."""
        if not getattr(_context_local, "correlation_id", None):
            _context_local.correlation_id = f"importorder-{uuid.uuid4()}"
        return _context_local.correlation_id

    def has_correlation_id(self) -> bool:
        return bool(getattr(_context_local, "correlation_id", None))

    def set_correlation_id(self, correlation_id: str) -> None:
        _context_local.correlation_id = correlation_id

    def clear_correlation_id(self) -> None:
        if hasattr(_context_local, "correlation_id"):
            delattr(_context_local, "correlation_id")


# Global correlation ID manager instance
correlation_manager = CorrelationIdManager()


class StructuredLogger(logging.Logger):
    """
    Logger that accepts a ``context`` keyword with extra key-value data.

    The context ends up on the record as ``context_data`` next to the
    ``correlation_id`` of the current thread.
    """

    def _log(
        self,
        level: int,
        msg: Any,
        args: tuple,
        exc_info: bool | tuple | BaseException | None = None,
        extra: dict[str, Any] | None = None,
        stack_info: bool = False,
        stacklevel: int = 1,
        context: dict[str, Any] | None = None,
    ) -> None:
        extra = dict(extra or {})
        if context:
            # "context" itself would clash with nothing, but keep the name unambiguous
            extra["context_data"] = context
        extra["correlation_id"] = correlation_manager.get_correlation_id()
        super()._log(level, msg, args, exc_info, extra, stack_info, stacklevel + 1)


class JSONFormatter(logging.Formatter):
    """Formatter that outputs log records as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now().isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if hasattr(record, "correlation_id"):
            log_data["correlation_id"] = record.correlation_id

        if getattr(record, "context_data", None):
            log_data["context"] = record.context_data

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(log_data, default=str)


class RichContextFormatter(logging.Formatter):
    """Formatter for Rich console output that appends context data."""

    def __init__(self, fmt: str | None = None, show_correlation_id: bool = False) -> None:
        super().__init__(fmt)
        self.show_correlation_id = show_correlation_id

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)

        context_data = getattr(record, "context_data", None)
        if context_data:
            context_str = " ".join(f"[{k}={v}]" for k, v in context_data.items())
            message = f"{message} {context_str}"

        if self.show_correlation_id and hasattr(record, "correlation_id"):
            message = f"{message} [correlation_id={record.correlation_id}]"

        return message


@contextmanager
def log_operation(
    logger: logging.Logger,
    operation_name: str,
    level: int = logging.INFO,
    context: dict[str, Any] | None = None,
) -> Iterator[None]:
    """
    Context manager logging the start, end and duration of an operation.

    Args:
    ----
        logger: A logger obtained from get_logger
        operation_name: Name of the operation being performed
        level: Log level to use
        context: Additional context data to include in the logs

    Raises:
    ------
        Exception: Re-raises any exception that occurs within the context

    """
    start_time = time.time()
    context = dict(context or {})
    context["operation_id"] = str(uuid.uuid4())[:8]

    logger.log(level, f"Starting {operation_name}", context=context)
    try:
        yield
    except Exception as e:
        duration = time.time() - start_time
        logger.log(
            logging.ERROR,
            f"Failed {operation_name} after {duration:.2f}s",
            context={**context, "error_type": type(e).__name__, "error": str(e)},
            exc_info=True,
        )
        raise
    duration = time.time() - start_time
    logger.log(level, f"Completed {operation_name} in {duration:.2f}s", context=context)


@contextmanager
def correlation_id(correlation_id: str | None = None) -> Iterator[str]:
    """
    Context manager for setting a correlation ID for the current thread.

    Args:
    ----
        correlation_id: ID to use, or None to generate a new one

    Yields:
    ------
        str: The current correlation ID

    """
    previous_id = (
        correlation_manager.get_correlation_id()
        if correlation_manager.has_correlation_id()
        else None
    )
    correlation_manager.set_correlation_id(correlation_id or f"importorder-{uuid.uuid4()}")

    try:
        yield correlation_manager.get_correlation_id()
    finally:
        if previous_id:
            correlation_manager.set_correlation_id(previous_id)
        else:
            correlation_manager.clear_correlation_id()


class ErrorTracker:
    """
    Tracks errors and their context for later analysis.

    Used to collect the per-file failures of a batch so they can be reported
    together at the end instead of aborting the batch.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.errors: list[dict[str, Any]] = []
        self.logger = logger or get_logger("importorder.error_tracker")
        self._lock = threading.Lock()

    def add_error(
        self,
        error: Exception | str,
        context: dict[str, Any] | None = None,
        log: bool = True,
    ) -> None:
        """
        Add an error to the tracker.

        Args:
        ----
            error: The exception that occurred, or its message
            context: Additional context information, such as the file name
            log: Whether to log the error as well as tracking it

        """
        error_info = {
            "error_type": type(error).__name__ if isinstance(error, Exception) else "Error",
            "message": str(error),
            "timestamp": datetime.now().isoformat(),
            "correlation_id": correlation_manager.get_correlation_id(),
            "context": context or {},
        }
        with self._lock:
            self.errors.append(error_info)

        if log:
            self.logger.error(
                f"Error tracked: {error_info['error_type']}: {error_info['message']}",
                context=context,
            )

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def get_error_summary(self) -> dict[str, Any]:
        """
        Get a summary of tracked errors.

        Returns
        -------
            A dictionary containing total_errors, error_types (count per type),
            first_error and last_error

        """
        error_types: dict[str, int] = {}
        for error in self.errors:
            error_type = error["error_type"]
            error_types[error_type] = error_types.get(error_type, 0) + 1

        return {
            "total_errors": len(self.errors),
            "error_types": error_types,
            "first_error": self.errors[0] if self.errors else None,
            "last_error": self.errors[-1] if self.errors else None,
        }


def _plain_formatter(json_format: bool, include_timestamp: bool) -> logging.Formatter:
    if json_format:
        return JSONFormatter()
    return logging.Formatter(PLAIN_FORMAT if include_timestamp else PLAIN_FORMAT_NO_TIME)


def configure_logging(
    level: int | str = logging.INFO,
    log_file: str | None = None,
    json_format: bool = False,
    include_timestamp: bool = True,
    use_rich: bool = True,
    debug: bool = False,
) -> None:
    """
    Configure application logging.

    Args:
    ----
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL or integer)
        log_file: Optional path to log file
        json_format: Whether to use JSON format for logs
        include_timestamp: Whether to include timestamps in logs
        use_rich: Whether to use Rich for console output
        debug: Whether to force debug mode

    """
    if isinstance(level, str):
        level = getattr(logging, level.upper())

    if debug:
        level = logging.DEBUG

    logging.setLoggerClass(StructuredLogger)

    handlers: list[logging.Handler] = []

    if use_rich and not json_format:
        rich_handler = RichHandler(rich_tracebacks=True, markup=False, show_time=include_timestamp)
        rich_handler.setFormatter(RichContextFormatter("%(message)s", show_correlation_id=debug))
        handlers.append(rich_handler)
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(_plain_formatter(json_format, include_timestamp))
        handlers.append(console_handler)

    if log_file:
        os.makedirs(os.path.dirname(os.path.abspath(log_file)), exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(_plain_formatter(json_format, include_timestamp))
        handlers.append(file_handler)

    # Root logger should be at least WARNING so third-party chatter stays quiet
    root = logging.getLogger()
    root.setLevel(max(level, logging.WARNING))
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)

    logger = logging.getLogger("importorder")
    logger.setLevel(level)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    for handler in handlers:
        logger.addHandler(handler)

    logger.debug(f"Logging configured with level {logging.getLevelName(level)}")


def get_logger(name: str) -> StructuredLogger:
    """
    Get a structured logger, whatever logger class is currently registered.

    Args:
    ----
        name: Name of the logger, typically the dotted module path

    Returns:
    -------
        A structured logger instance

    """
    existing = logging.Logger.manager.loggerDict.get(name)
    if isinstance(existing, StructuredLogger):
        return existing

    previous_class = logging.getLoggerClass()
    logging.setLoggerClass(StructuredLogger)
    try:
        return logging.getLogger(name)
    finally:
        logging.setLoggerClass(previous_class)
