"""
Error handling for the Translation Table Validator.

Malformed table contents are never raised: they are reported as violations
inside a ValidationResult. The exceptions here cover the faults that sit
outside the validation core, such as unreadable input files, failed
spreadsheet exports and broken configuration.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple
from dataclasses import dataclass, field
from datetime import datetime


class ErrorCategory(Enum):
    """Categories of errors that can occur in the system."""
    IO = "io"
    DATA = "data"
    EXPORT = "export"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorAction(Enum):
    """Actions to take when an error occurs."""
    SKIP = "skip"
    FAIL = "fail"
    LOG_AND_CONTINUE = "log_and_continue"


@dataclass
class ErrorContext:
    """Contextual information about an error."""
    operation: str
    path: Optional[str] = None
    table_id: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)
    additional_data: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ErrorInfo:
    """Complete information about an error occurrence."""
    category: ErrorCategory
    severity: ErrorSeverity
    action: ErrorAction
    message: str
    original_exception: Exception
    context: ErrorContext
    recovery_suggestions: List[str] = field(default_factory=list)


class TranslationValidatorError(Exception):
    """Base exception class for Translation Table Validator errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        context: Optional[ErrorContext] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext(operation="unknown")
        self.original_exception = original_exception


class TableReadError(TranslationValidatorError):
    """A translation table could not be read from its source."""

    def __init__(self, message: str, context: Optional[ErrorContext] = None, original_exception: Optional[Exception] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.IO,
            severity=ErrorSeverity.HIGH,
            context=context,
            original_exception=original_exception
        )


class ExportError(TranslationValidatorError):
    """A spreadsheet rendition of a table could not be produced."""

    def __init__(self, message: str, context: Optional[ErrorContext] = None, original_exception: Optional[Exception] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.EXPORT,
            severity=ErrorSeverity.HIGH,
            context=context,
            original_exception=original_exception
        )


class ConfigurationError(TranslationValidatorError):
    """Errors related to system configuration."""

    def __init__(self, message: str, context: Optional[ErrorContext] = None, original_exception: Optional[Exception] = None):
        super().__init__(
            message=message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.CRITICAL,
            context=context,
            original_exception=original_exception
        )


class ErrorHandler:
    """
    Error handler with classification and recovery suggestions.

    Keeps per-operation error counts so that a batch run can summarize how
    many tables could not be read or exported.
    """

    def __init__(self):
        """Initialize error handler with logger."""
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self._error_counts = {}

    def classify_error(self, exception: Exception, context: ErrorContext) -> ErrorInfo:
        """
        Classify an exception and determine appropriate handling strategy.

        Args:
            exception: The exception to classify
            context: Contextual information about the error

        Returns:
            ErrorInfo with classification and recommended action
        """
        if isinstance(exception, TranslationValidatorError):
            category, severity = exception.category, exception.severity
            message = exception.message
        else:
            category, severity = self._classify_standard_exception(exception)
            message = str(exception)

        return ErrorInfo(
            category=category,
            severity=severity,
            action=self._determine_action(category),
            message=message,
            original_exception=exception,
            context=context,
            recovery_suggestions=self._get_recovery_suggestions(category)
        )

    def _classify_standard_exception(self, exception: Exception) -> Tuple[ErrorCategory, ErrorSeverity]:
        """Classify standard Python exceptions."""
        if isinstance(exception, (FileNotFoundError, IsADirectoryError, PermissionError)):
            return ErrorCategory.IO, ErrorSeverity.HIGH
        if isinstance(exception, UnicodeDecodeError):
            return ErrorCategory.DATA, ErrorSeverity.HIGH
        if isinstance(exception, OSError):
            return ErrorCategory.IO, ErrorSeverity.HIGH
        if isinstance(exception, (ValueError, KeyError, IndexError)):
            return ErrorCategory.DATA, ErrorSeverity.MEDIUM

        return ErrorCategory.UNKNOWN, ErrorSeverity.MEDIUM

    def _determine_action(self, category: ErrorCategory) -> ErrorAction:
        """Determine appropriate action based on error category."""
        if category in (ErrorCategory.IO, ErrorCategory.DATA, ErrorCategory.EXPORT):
            return ErrorAction.SKIP  # move on to the next table
        elif category == ErrorCategory.CONFIGURATION:
            return ErrorAction.FAIL
        else:
            return ErrorAction.LOG_AND_CONTINUE

    def _get_recovery_suggestions(self, category: ErrorCategory) -> List[str]:
        """Get recovery suggestions for different error categories."""
        suggestions = {
            ErrorCategory.IO: [
                "Check that the file exists and is readable",
                "Verify the path points to a file, not a directory"
            ],
            ErrorCategory.DATA: [
                "Check that the file is UTF-8 encoded text",
                "Verify the file is a tab-separated translation table"
            ],
            ErrorCategory.EXPORT: [
                "Check that the output directory exists and is writable",
                "Verify the source file has the expected extension"
            ],
            ErrorCategory.CONFIGURATION: [
                "Verify configuration file format and syntax",
                "Review environment variable settings"
            ]
        }
        return suggestions.get(category, ["Review error details and system logs"])

    def handle_error(self, exception: Exception, context: ErrorContext) -> ErrorInfo:
        """
        Handle an error with appropriate logging and classification.

        Args:
            exception: The exception to handle
            context: Contextual information about the error

        Returns:
            ErrorInfo with handling details
        """
        error_info = self.classify_error(exception, context)

        error_key = f"{error_info.category.value}:{error_info.context.operation}"
        self._error_counts[error_key] = self._error_counts.get(error_key, 0) + 1

        self._log_error(error_info)

        return error_info

    def _log_error(self, error_info: ErrorInfo) -> None:
        """Log error with contextual information."""
        log_data = {
            "error_category": error_info.category.value,
            "error_severity": error_info.severity.value,
            "recommended_action": error_info.action.value,
            "operation": error_info.context.operation,
            "path": error_info.context.path,
            "table_id": error_info.context.table_id,
            "exception_type": type(error_info.original_exception).__name__,
            "recovery_suggestions": error_info.recovery_suggestions
        }

        if error_info.context.additional_data:
            log_data.update(error_info.context.additional_data)

        if error_info.severity == ErrorSeverity.CRITICAL:
            self.logger.critical("Critical error occurred: %s", error_info.message, extra=log_data)
        elif error_info.severity == ErrorSeverity.HIGH:
            self.logger.error("High severity error: %s", error_info.message, extra=log_data)
        elif error_info.severity == ErrorSeverity.MEDIUM:
            self.logger.warning("Medium severity error: %s", error_info.message, extra=log_data)
        else:
            self.logger.info("Low severity error: %s", error_info.message, extra=log_data)

    def get_error_statistics(self) -> Dict[str, int]:
        """Get error count statistics."""
        return self._error_counts.copy()

    def reset_error_statistics(self) -> None:
        """Reset error count statistics."""
        self._error_counts.clear()


# Global error handler instance
_error_handler: Optional[ErrorHandler] = None


def get_error_handler() -> ErrorHandler:
    """Get the global error handler instance."""
    global _error_handler
    if _error_handler is None:
        _error_handler = ErrorHandler()
    return _error_handler


def set_error_handler(handler: Optional[ErrorHandler]) -> None:
    """Set the global error handler instance."""
    global _error_handler
    _error_handler = handler


def handle_error(exception: Exception, context: ErrorContext) -> ErrorInfo:
    """Convenience function to handle errors using the global error handler."""
    return get_error_handler().handle_error(exception, context)


def create_error_context(
    operation: str,
    path: Optional[str] = None,
    table_id: Optional[str] = None,
    **additional_data
) -> ErrorContext:
    """
    Convenience function to create error context.

    Args:
        operation: Name of the operation being performed
        path: Filesystem path involved in the operation
        table_id: Identifier of the translation table being processed
        **additional_data: Additional contextual data

    Returns:
        ErrorContext instance
    """
    return ErrorContext(
        operation=operation,
        path=path,
        table_id=table_id,
        additional_data=additional_data
    )
