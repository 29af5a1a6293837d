"""
Command-line interface for the Translation Table Validator.

This module provides CLI commands for validating translation tables,
exporting them to Excel, and inspecting the active configuration.
"""

import click
import json
import sys
from pathlib import Path
from typing import List

from .config import SystemConfig, load_config_from_file, set_config
from .errors import ConfigurationError, TableReadError
from .logging_config import setup_logging


@click.group()
@click.option('--config', '-c', type=click.Path(exists=True),
              help='Configuration file path')
@click.option('--verbose', '-v', is_flag=True,
              help='Enable verbose logging')
@click.pass_context
def cli(ctx, config, verbose):
    """Translation Table Validator - checks allele translation tables."""
    ctx.ensure_object(dict)

    if config:
        try:
            system_config = load_config_from_file(config)
        except ConfigurationError as e:
            click.echo(f"Configuration error: {e.message}", err=True)
            sys.exit(2)
    else:
        system_config = SystemConfig.from_env()
        set_config(system_config)

    if verbose:
        system_config.logging.level = "DEBUG"

    setup_logging(system_config.logging)

    ctx.obj['config'] = system_config


def _collect_paths(paths: List[str], extension: str) -> List[Path]:
    """Expand directories into their table files; keep files as given."""
    from .validation.validator import find_translation_files

    collected = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            collected.extend(find_translation_files(path, extension))
        else:
            collected.append(path)
    return collected


@cli.command()
@click.argument('paths', nargs=-1, type=click.Path())
@click.option('--extension', help='Table file extension to look for in directories')
@click.option('--format', 'output_format', type=click.Choice(['table', 'json', 'summary']),
              default='table', help='Output format')
@click.option('--fail-fast', is_flag=True,
              help='Stop checking a table at its first failing stage')
@click.option('--workers', type=int, help='Number of tables validated concurrently')
@click.pass_context
def validate(ctx, paths, extension, output_format, fail_fast, workers):
    """Validate translation tables (files or directories)."""
    from .validation.validator import TranslationTableValidator, find_translation_files
    from .validation.report import (
        format_report_summary, format_result_text, report_to_dict
    )

    config = ctx.obj['config']
    if fail_fast:
        config.validation.fail_fast = True
    extension = extension or config.validation.file_extension

    try:
        if paths:
            table_paths = _collect_paths(list(paths), extension)
        else:
            table_paths = find_translation_files(config.validation.translations_dir, extension)
    except TableReadError as e:
        click.echo(f"Validation failed: {e.message}", err=True)
        sys.exit(2)

    if not table_paths:
        click.echo(f"No {extension} files found.")
        return

    validator = TranslationTableValidator(config.validation)
    report = validator.validate_files(table_paths, max_workers=workers)

    if output_format == 'json':
        click.echo(json.dumps(report_to_dict(report), indent=2, default=str))
    elif output_format == 'summary':
        click.echo("=== Validation Summary ===")
        for line in format_report_summary(report):
            click.echo(line)
        for result in report.results:
            if not result.passed:
                click.echo(f"  FAIL {result.table_id} ({len(result.violations)} violations)")
    else:
        click.echo(f"=== Validation Results ({report.total} tables) ===")
        for result in report.results:
            for line in format_result_text(result):
                click.echo(line)
        click.echo("")
        for line in format_report_summary(report):
            click.echo(line)

    if not report.all_passed:
        sys.exit(1)


@cli.command()
@click.option('--input-dir', '-i', type=click.Path(),
              help='Directory holding translation tables')
@click.option('--output-dir', '-o', type=click.Path(),
              help='Directory to write Excel workbooks to')
@click.pass_context
def export(ctx, input_dir, output_dir):
    """Export every translation table in a directory to Excel."""
    from .export.excel import TranslationSheetExporter
    from .validation.validator import find_translation_files

    config = ctx.obj['config']
    input_dir = input_dir or config.validation.translations_dir
    output_dir = output_dir or config.export.output_dir

    try:
        sources = find_translation_files(input_dir, config.validation.file_extension)
    except TableReadError as e:
        click.echo(f"Export failed: {e.message}", err=True)
        sys.exit(2)

    exporter = TranslationSheetExporter(config.export, config.validation.file_extension)
    report = exporter.export_all(sources, output_dir)

    for path in report.written:
        click.echo(f"Wrote {path}")
    for path in report.failed:
        click.echo(f"Failed to export {path}", err=True)

    click.echo(f"\nExport completed: {len(report.written)} of {len(sources)} tables")
    if not report.all_succeeded:
        sys.exit(1)


@cli.command()
@click.option('--output', '-o', type=click.Path(),
              help='Output configuration file path')
@click.pass_context
def config_export(ctx, output):
    """Export current configuration to file."""
    config = ctx.obj['config']

    if output:
        config.to_file(output)
        click.echo(f"Configuration exported to: {output}")
    else:
        click.echo(json.dumps(config.to_dict(), indent=2))


def main():
    """Main entry point for the CLI."""
    try:
        cli()
    except KeyboardInterrupt:
        click.echo("\nOperation cancelled by user.", err=True)
        sys.exit(1)


if __name__ == '__main__':
    main()
