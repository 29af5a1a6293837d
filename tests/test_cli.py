"""
Tests for the command-line interface.
"""

import json
import logging

import pytest
from click.testing import CliRunner

from translation_validator.cli import cli


@pytest.fixture
def runner(monkeypatch):
    """CLI runner with quiet logging and the root logger restored afterwards."""
    monkeypatch.setenv("LOG_LEVEL", "CRITICAL")
    monkeypatch.delenv("TRANSLATIONS_DIR", raising=False)
    monkeypatch.delenv("VALIDATION_FAIL_FAST", raising=False)
    monkeypatch.delenv("EXPORT_OUTPUT_DIR", raising=False)

    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield CliRunner()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def translations(valid_lines, write_table, tmp_path):
    bad_lines = list(valid_lines)
    bad_lines[7] = "*1\tNormal function\tXYZ\tC\tA"
    write_table(valid_lines, "CYP2D6.tsv")
    write_table(bad_lines, "CYP2C9.tsv")
    return tmp_path / "translations"


class TestValidateCommand:
    """Test the validate command."""

    def test_valid_file_exits_zero(self, runner, valid_lines, write_table):
        path = write_table(valid_lines)

        result = runner.invoke(cli, ["validate", str(path)])

        assert result.exit_code == 0
        assert "PASS CYP2D6.tsv" in result.output
        assert "Passed: 1" in result.output

    def test_failures_exit_one(self, runner, translations):
        result = runner.invoke(cli, ["validate", str(translations)])

        assert result.exit_code == 1
        assert "FAIL CYP2C9.tsv" in result.output
        assert "[invalid_allele_token] line 8, column 3" in result.output
        assert "*1 has bad base pair values XYZ" in result.output

    def test_json_output(self, runner, translations):
        result = runner.invoke(cli, ["validate", "--format", "json", str(translations / "CYP2C9.tsv")])

        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["failed"] == 1
        violation = data["results"][0]["violations"][0]
        assert violation["kind"] == "invalid_allele_token"
        assert violation["line"] == 8

    def test_summary_output(self, runner, translations):
        result = runner.invoke(cli, ["validate", "--format", "summary", str(translations)])

        assert result.exit_code == 1
        assert "=== Validation Summary ===" in result.output
        assert "FAIL CYP2C9.tsv (1 violations)" in result.output
        assert "CYP2D6.tsv" not in result.output

    def test_translations_dir_from_environment(self, runner, translations, monkeypatch):
        monkeypatch.setenv("TRANSLATIONS_DIR", str(translations))

        result = runner.invoke(cli, ["validate", "--format", "summary"])

        assert result.exit_code == 1
        assert "Tables checked: 2" in result.output

    def test_missing_directory_exits_two(self, runner, tmp_path, monkeypatch):
        monkeypatch.setenv("TRANSLATIONS_DIR", str(tmp_path / "nowhere"))

        result = runner.invoke(cli, ["validate"])

        assert result.exit_code == 2
        assert "Not a directory" in result.output

    def test_empty_directory(self, runner, tmp_path):
        result = runner.invoke(cli, ["validate", str(tmp_path)])

        assert result.exit_code == 0
        assert "No .tsv files found." in result.output

    def test_fail_fast_flag(self, runner, valid_lines, write_table):
        valid_lines[0] = "CYP2D6\t01/01/20"
        valid_lines[6] = "Allele\tStatus\tEuropean Allele Frequency"
        path = write_table(valid_lines)

        result = runner.invoke(cli, ["validate", "--fail-fast", "--format", "json", str(path)])

        kinds = [v["kind"] for v in json.loads(result.stdout)["results"][0]["violations"]]
        assert kinds == ["malformed_gene_field"]

    def test_unreadable_file_is_reported(self, runner, tmp_path):
        result = runner.invoke(cli, ["validate", str(tmp_path / "missing.tsv")])

        assert result.exit_code == 1
        assert "[io_failure]" in result.output


class TestExportCommand:
    """Test the export command."""

    def test_exports_directory(self, runner, translations, tmp_path):
        output_dir = tmp_path / "xlsx"

        result = runner.invoke(cli, ["export", "-i", str(translations), "-o", str(output_dir)])

        assert result.exit_code == 0
        assert sorted(p.name for p in output_dir.iterdir()) == ["CYP2C9.xlsx", "CYP2D6.xlsx"]
        assert "Export completed: 2 of 2 tables" in result.output

    def test_missing_input_directory(self, runner, tmp_path):
        result = runner.invoke(cli, ["export", "-i", str(tmp_path / "nowhere")])

        assert result.exit_code == 2
        assert "Export failed" in result.output


class TestConfigExportCommand:
    """Test the config-export command."""

    def test_prints_configuration(self, runner):
        result = runner.invoke(cli, ["config-export"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["validation"]["expected_build"] == "b38"

    def test_writes_configuration(self, runner, tmp_path):
        output = tmp_path / "config.json"

        result = runner.invoke(cli, ["config-export", "-o", str(output)])

        assert result.exit_code == 0
        assert json.loads(output.read_text())["logging"]["level"] == "CRITICAL"

    def test_loads_configuration_file(self, runner, tmp_path):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"validation": {"expected_build": "b37"}}))

        result = runner.invoke(cli, ["-c", str(config_path), "config-export"])

        assert json.loads(result.stdout)["validation"]["expected_build"] == "b37"

    def test_broken_configuration_file_exits_two(self, runner, tmp_path):
        config_path = tmp_path / "config.json"
        config_path.write_text("{not json")

        result = runner.invoke(cli, ["-c", str(config_path), "config-export"])

        assert result.exit_code == 2
        assert "Configuration error" in result.output

    def test_wrongly_typed_configuration_value_exits_two(self, runner, tmp_path):
        config_path = tmp_path / "config.json"
        config_path.write_text(json.dumps({"validation": {"max_workers": "many"}}))

        result = runner.invoke(cli, ["-c", str(config_path), "config-export"])

        assert result.exit_code == 2
        assert "validation.max_workers" in result.output
