"""
Data models for the Translation Table Validator.

This package provides Pydantic models for translation table entities and
dataclass records for violations and validation results.
"""

from .entities import TranslationTable, HeaderMetadata, PopulationColumn
from .validation import (
    ViolationKind,
    Violation,
    RowViolation,
    ValidationResult
)

__all__ = [
    # Entity models
    "TranslationTable",
    "HeaderMetadata",
    "PopulationColumn",

    # Validation
    "ViolationKind",
    "Violation",
    "RowViolation",
    "ValidationResult",
]
