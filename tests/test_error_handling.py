"""
Tests for the error handling system.

Tests error classification, logging, and recovery strategies for faults
that occur around validation: unreadable tables, failed exports and bad
configuration.
"""

import logging

import pytest

from translation_validator.errors import (
    ErrorHandler, ErrorContext, ErrorCategory, ErrorSeverity, ErrorAction,
    TableReadError, ExportError, ConfigurationError, TranslationValidatorError,
    get_error_handler, handle_error, create_error_context
)


@pytest.fixture
def context():
    return ErrorContext(operation="read_table", path="/data/CYP2D6.tsv", table_id="CYP2D6.tsv")


class TestErrorClassification:
    """Test error classification and handling strategies."""

    @pytest.mark.parametrize("error", [
        FileNotFoundError("missing"),
        IsADirectoryError("a directory"),
        PermissionError("denied"),
        OSError("disk failure"),
    ])
    def test_os_errors_are_io(self, error, context):
        error_info = ErrorHandler().classify_error(error, context)

        assert error_info.category == ErrorCategory.IO
        assert error_info.severity == ErrorSeverity.HIGH
        assert error_info.action == ErrorAction.SKIP
        assert "readable" in " ".join(error_info.recovery_suggestions)

    def test_decode_error_is_data(self, context):
        error = UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")
        error_info = ErrorHandler().classify_error(error, context)

        assert error_info.category == ErrorCategory.DATA
        assert error_info.severity == ErrorSeverity.HIGH
        assert error_info.action == ErrorAction.SKIP
        assert "UTF-8" in " ".join(error_info.recovery_suggestions)

    def test_value_error_is_medium_data(self, context):
        error_info = ErrorHandler().classify_error(ValueError("bad value"), context)
        assert error_info.category == ErrorCategory.DATA
        assert error_info.severity == ErrorSeverity.MEDIUM

    def test_custom_errors_keep_their_classification(self, context):
        handler = ErrorHandler()

        read_info = handler.classify_error(TableReadError("cannot read", context=context), context)
        export_info = handler.classify_error(ExportError("cannot write"), context)
        config_info = handler.classify_error(ConfigurationError("bad config"), context)

        assert (read_info.category, read_info.action) == (ErrorCategory.IO, ErrorAction.SKIP)
        assert read_info.message == "cannot read"
        assert (export_info.category, export_info.action) == (ErrorCategory.EXPORT, ErrorAction.SKIP)
        assert config_info.severity == ErrorSeverity.CRITICAL
        assert config_info.action == ErrorAction.FAIL

    def test_unknown_error_classification(self, context):
        error_info = ErrorHandler().classify_error(RuntimeError("Unknown error"), context)

        assert error_info.category == ErrorCategory.UNKNOWN
        assert error_info.severity == ErrorSeverity.MEDIUM
        assert error_info.action == ErrorAction.LOG_AND_CONTINUE
        assert error_info.recovery_suggestions == ["Review error details and system logs"]


class TestExceptions:
    """Test the custom exception hierarchy."""

    def test_default_context(self):
        error = TranslationValidatorError("boom")
        assert error.context.operation == "unknown"
        assert error.category == ErrorCategory.UNKNOWN
        assert str(error) == "boom"

    def test_original_exception_is_kept(self):
        cause = FileNotFoundError("missing")
        error = TableReadError("cannot read", original_exception=cause)
        assert error.original_exception is cause
        assert isinstance(error, TranslationValidatorError)


class TestErrorHandling:
    """Test error handling, logging and statistics."""

    def test_statistics_are_counted_per_category_and_operation(self, context):
        handler = ErrorHandler()

        handler.handle_error(FileNotFoundError("a"), context)
        handler.handle_error(FileNotFoundError("b"), context)
        handler.handle_error(ExportError("c"), create_error_context("export_table"))

        assert handler.get_error_statistics() == {
            "io:read_table": 2,
            "export:export_table": 1,
        }

        handler.reset_error_statistics()
        assert handler.get_error_statistics() == {}

    def test_severity_selects_log_level(self, context, caplog):
        handler = ErrorHandler()

        with caplog.at_level(logging.INFO):
            handler.handle_error(ConfigurationError("bad config"), context)
            handler.handle_error(TableReadError("cannot read"), context)
            handler.handle_error(ValueError("odd value"), context)

        assert [r.levelno for r in caplog.records] == [logging.CRITICAL, logging.ERROR, logging.WARNING]
        record = caplog.records[1]
        assert record.error_category == "io"
        assert record.table_id == "CYP2D6.tsv"
        assert record.exception_type == "TableReadError"

    def test_additional_data_is_logged(self, caplog):
        context = create_error_context("export_table", path="out/x.xlsx", attempt=2)

        with caplog.at_level(logging.INFO):
            ErrorHandler().handle_error(ExportError("cannot write"), context)

        assert caplog.records[-1].attempt == 2

    def test_global_handler(self, context):
        handle_error(TableReadError("cannot read"), context)
        assert get_error_handler().get_error_statistics() == {"io:read_table": 1}


class TestErrorContext:
    """Test error context creation."""

    def test_create_error_context(self):
        context = create_error_context(
            "read_table", path="/data/CYP2D6.tsv", table_id="CYP2D6.tsv", encoding="utf-8"
        )

        assert context.operation == "read_table"
        assert context.path == "/data/CYP2D6.tsv"
        assert context.table_id == "CYP2D6.tsv"
        assert context.additional_data == {"encoding": "utf-8"}
        assert context.timestamp is not None
