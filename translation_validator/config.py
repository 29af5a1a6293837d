"""
Configuration management for the Translation Table Validator.

This module provides configuration classes and utilities for managing
validation rules, spreadsheet export settings, and logging parameters.
"""

import os
from dataclasses import dataclass, field, fields
from typing import Optional
import json


@dataclass
class ValidationConfig:
    """Validation behavior configuration."""
    translations_dir: str = "translations"
    file_extension: str = ".tsv"
    expected_build: str = "b38"
    min_line_count: int = 7  # tables must be strictly longer than this
    fail_fast: bool = False
    max_workers: int = 4
    assembly_map_file: Optional[str] = None  # JSON {accession: build} override


@dataclass
class ExportConfig:
    """Spreadsheet export configuration."""
    output_dir: str = "out"
    sheet_name: str = "Translations"
    first_column_width: int = 15
    header_row_count: int = 7


@dataclass
class LoggingConfig:
    """Logging system configuration."""
    level: str = "INFO"
    format: str = "text"
    log_file: Optional[str] = None
    max_file_size_mb: int = 100
    backup_count: int = 5
    structured: bool = True


def _coerce_value(value, expected):
    """
    Convert a JSON value to a config field's type.

    Numeric strings become ints and "true"/"false" become bools; anything
    else of the wrong type raises ValueError.
    """
    if expected == Optional[str]:
        if value is None:
            return None
        expected = str

    if expected is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.lower() in ("true", "false"):
            return value.lower() == "true"
    elif expected is int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, str):
            return int(value)
    elif expected is str:
        if isinstance(value, str):
            return value

    raise ValueError(f"expected {expected.__name__}, got {value!r}")


@dataclass
class SystemConfig:
    """Main system configuration combining all subsystem configs."""
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_env(cls) -> "SystemConfig":
        """Create configuration from environment variables."""
        config = cls()

        # Validation configuration from environment
        if os.getenv("TRANSLATIONS_DIR"):
            config.validation.translations_dir = os.getenv("TRANSLATIONS_DIR")
        if os.getenv("TRANSLATION_FILE_EXTENSION"):
            config.validation.file_extension = os.getenv("TRANSLATION_FILE_EXTENSION")
        if os.getenv("EXPECTED_GENOME_BUILD"):
            config.validation.expected_build = os.getenv("EXPECTED_GENOME_BUILD")
        if os.getenv("VALIDATION_FAIL_FAST"):
            config.validation.fail_fast = os.getenv("VALIDATION_FAIL_FAST").lower() == "true"
        if os.getenv("VALIDATION_MAX_WORKERS"):
            config.validation.max_workers = int(os.getenv("VALIDATION_MAX_WORKERS"))
        if os.getenv("ASSEMBLY_MAP_FILE"):
            config.validation.assembly_map_file = os.getenv("ASSEMBLY_MAP_FILE")

        # Export configuration from environment
        if os.getenv("EXPORT_OUTPUT_DIR"):
            config.export.output_dir = os.getenv("EXPORT_OUTPUT_DIR")
        if os.getenv("EXPORT_SHEET_NAME"):
            config.export.sheet_name = os.getenv("EXPORT_SHEET_NAME")

        # Logging configuration from environment
        if os.getenv("LOG_LEVEL"):
            config.logging.level = os.getenv("LOG_LEVEL")
        if os.getenv("LOG_FORMAT"):
            config.logging.format = os.getenv("LOG_FORMAT")
        if os.getenv("LOG_FILE"):
            config.logging.log_file = os.getenv("LOG_FILE")

        return config

    @classmethod
    def from_file(cls, config_path: str) -> "SystemConfig":
        """
        Load configuration from JSON file.

        Raises:
            ConfigurationError: If the file cannot be read, is not a JSON object,
                or holds a value of the wrong type
        """
        from .errors import ConfigurationError, create_error_context

        try:
            with open(config_path, 'r') as f:
                config_data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(
                f"Cannot load configuration from {config_path}: {e}",
                context=create_error_context("load_config", path=str(config_path)),
                original_exception=e
            ) from e
        if not isinstance(config_data, dict):
            raise ConfigurationError(
                f"Configuration in {config_path} must be a JSON object",
                context=create_error_context("load_config", path=str(config_path))
            )

        config = cls()

        # Update configuration with file data
        for section in ("validation", "export", "logging"):
            if section not in config_data:
                continue
            values = config_data[section]
            if not isinstance(values, dict):
                raise ConfigurationError(
                    f"Section '{section}' in {config_path} must be a JSON object",
                    context=create_error_context("load_config", path=str(config_path), section=section)
                )

            target = getattr(config, section)
            field_types = {f.name: f.type for f in fields(target)}
            for key, value in values.items():
                if key not in field_types:
                    continue
                try:
                    setattr(target, key, _coerce_value(value, field_types[key]))
                except ValueError as e:
                    raise ConfigurationError(
                        f"Invalid value for {section}.{key} in {config_path}: {e}",
                        context=create_error_context("load_config", path=str(config_path), section=section, key=key),
                        original_exception=e
                    ) from e

        return config

    def to_dict(self) -> dict:
        """Serialize configuration to a JSON-compatible dictionary."""
        return {
            "validation": {
                "translations_dir": self.validation.translations_dir,
                "file_extension": self.validation.file_extension,
                "expected_build": self.validation.expected_build,
                "min_line_count": self.validation.min_line_count,
                "fail_fast": self.validation.fail_fast,
                "max_workers": self.validation.max_workers,
                "assembly_map_file": self.validation.assembly_map_file
            },
            "export": {
                "output_dir": self.export.output_dir,
                "sheet_name": self.export.sheet_name,
                "first_column_width": self.export.first_column_width,
                "header_row_count": self.export.header_row_count
            },
            "logging": {
                "level": self.logging.level,
                "format": self.logging.format,
                "log_file": self.logging.log_file,
                "max_file_size_mb": self.logging.max_file_size_mb,
                "backup_count": self.logging.backup_count
            }
        }

    def to_file(self, config_path: str) -> None:
        """Save configuration to JSON file."""
        with open(config_path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)


# Global configuration instance
_config: Optional[SystemConfig] = None


def get_config() -> SystemConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = SystemConfig.from_env()
    return _config


def set_config(config: Optional[SystemConfig]) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config


def load_config_from_file(config_path: str) -> SystemConfig:
    """Load and set configuration from file."""
    config = SystemConfig.from_file(config_path)
    set_config(config)
    return config
