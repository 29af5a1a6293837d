"""
Logging configuration for the Translation Table Validator.

This module provides structured logging with performance metrics, contextual information,
and configurable output formats for validation runs over many translation tables.
"""

import logging
import logging.handlers
import json
import sys
import time
from datetime import datetime
from pathlib import Path
import psutil
import os

from .config import LoggingConfig


_STANDARD_RECORD_ATTRIBUTES = frozenset([
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname',
    'filename', 'module', 'exc_info', 'exc_text', 'stack_info',
    'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
    'thread', 'threadName', 'processName', 'process', 'message',
    'taskName',
])

_PERFORMANCE_ATTRIBUTES = frozenset([
    'cpu_percent', 'memory_mb', 'uptime_seconds', 'process_id',
    'thread_id', 'iso_timestamp',
])


class PerformanceFilter(logging.Filter):
    """Filter to add performance metrics to log records."""

    def __init__(self):
        super().__init__()
        self.process = psutil.Process()
        self.start_time = time.time()

    def filter(self, record):
        """Add performance metrics to the log record."""
        try:
            record.cpu_percent = self.process.cpu_percent()
            record.memory_mb = self.process.memory_info().rss / 1024 / 1024
            record.uptime_seconds = time.time() - self.start_time
            record.process_id = os.getpid()
            record.thread_id = record.thread
            record.iso_timestamp = datetime.fromtimestamp(record.created).isoformat()
        except psutil.Error:
            # Metrics are best effort; the record is still emitted
            pass

        return True


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    def __init__(self, include_performance=True):
        super().__init__()
        self.include_performance = include_performance

    def format(self, record):
        """Format log record as JSON."""
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        extra_fields = {
            key: value for key, value in record.__dict__.items()
            if key not in _STANDARD_RECORD_ATTRIBUTES and key not in _PERFORMANCE_ATTRIBUTES
        }
        if extra_fields:
            log_entry["extra"] = extra_fields

        if self.include_performance and hasattr(record, 'cpu_percent'):
            log_entry["performance"] = {
                "cpu_percent": getattr(record, 'cpu_percent', 0),
                "memory_mb": getattr(record, 'memory_mb', 0),
                "uptime_seconds": getattr(record, 'uptime_seconds', 0),
                "process_id": getattr(record, 'process_id', 0),
                "thread_id": getattr(record, 'thread_id', 0)
            }

        return json.dumps(log_entry, default=str)


class ContextualFormatter(logging.Formatter):
    """Human-readable formatter with contextual information."""

    def __init__(self, include_performance=False):
        super().__init__()
        self.include_performance = include_performance

        format_str = (
            "%(iso_timestamp)s [%(levelname)s] %(name)s:%(funcName)s:%(lineno)d - %(message)s"
        )

        if include_performance:
            format_str += " [CPU: %(cpu_percent).1f%% MEM: %(memory_mb).1fMB]"

        self._formatter = logging.Formatter(format_str)

    def format(self, record):
        """Format log record with contextual information."""
        # Records that bypassed PerformanceFilter still need these attributes
        if not hasattr(record, 'iso_timestamp'):
            record.iso_timestamp = datetime.fromtimestamp(record.created).isoformat()
        if not hasattr(record, 'cpu_percent'):
            record.cpu_percent = 0.0
        if not hasattr(record, 'memory_mb'):
            record.memory_mb = 0.0

        return self._formatter.format(record)


def _build_formatter(config: LoggingConfig) -> logging.Formatter:
    if config.format.lower() == 'json' and config.structured:
        return JSONFormatter(include_performance=True)
    return ContextualFormatter(include_performance=False)


def setup_logging(config: LoggingConfig) -> None:
    """
    Set up logging for a validation run.

    Log records go to stderr so that stdout stays reserved for reports.

    Args:
        config: Logging configuration object
    """
    level = getattr(logging, config.level.upper())

    if config.log_file:
        Path(config.log_file).parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    perf_filter = PerformanceFilter()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.addFilter(perf_filter)
    console_handler.setFormatter(_build_formatter(config))
    root_logger.addHandler(console_handler)

    if config.log_file:
        file_handler = logging.handlers.RotatingFileHandler(
            filename=config.log_file,
            maxBytes=config.max_file_size_mb * 1024 * 1024,
            backupCount=config.backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(level)
        file_handler.addFilter(perf_filter)
        file_handler.setFormatter(_build_formatter(config))
        root_logger.addHandler(file_handler)

    _configure_library_loggers()

    logger = logging.getLogger(__name__)
    logger.debug(
        "Logging system initialized",
        extra={
            "log_level": config.level,
            "log_format": config.format,
            "structured": config.structured,
            "file_logging": bool(config.log_file)
        }
    )


def _configure_library_loggers():
    """Configure logging levels for third-party libraries."""
    logging.getLogger('asyncio').setLevel(logging.WARNING)
    logging.getLogger('openpyxl').setLevel(logging.WARNING)


def log_performance_metrics(logger: logging.Logger, operation: str, duration: float, **kwargs):
    """
    Log performance metrics for an operation.

    Args:
        logger: Logger instance
        operation: Operation name
        duration: Operation duration in seconds
        **kwargs: Additional metrics to log
    """
    logger.info(
        f"Performance: {operation} completed",
        extra={
            "operation": operation,
            "duration_seconds": duration,
            "duration_ms": duration * 1000,
            **kwargs
        }
    )


def log_validation_result(logger: logging.Logger, table_id: str, passed: bool,
                          violation_count: int, **kwargs):
    """
    Log the outcome of validating one translation table.

    Args:
        logger: Logger instance
        table_id: Identifier of the validated table (usually its file name)
        passed: Whether the table conforms
        violation_count: Number of violations reported
        **kwargs: Additional context
    """
    level = logging.INFO if passed else logging.WARNING

    logger.log(
        level,
        f"Validated {table_id}: {'passed' if passed else 'failed'}",
        extra={
            "table_id": table_id,
            "passed": passed,
            "violation_count": violation_count,
            **kwargs
        }
    )


def log_error_with_context(logger: logging.Logger, error: Exception,
                           operation: str, **context):
    """
    Log error with full context information.

    The traceback is taken from the exception itself, so this can be called
    outside the except block that caught it.

    Args:
        logger: Logger instance
        error: Exception that occurred
        operation: Operation that failed
        **context: Additional context information
    """
    logger.error(
        f"Error in {operation}: {str(error)}",
        exc_info=error,
        extra={
            "operation": operation,
            "error_type": type(error).__name__,
            "error_message": str(error),
            **context
        }
    )
