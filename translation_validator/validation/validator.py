"""
Translation table validation orchestrator.

This module runs the validation stages over a table (structure, header,
population row, variant rows), aggregates their violations into one
ValidationResult per table, and validates whole directories of tables
concurrently.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ..config import ValidationConfig, get_config
from ..errors import TableReadError, create_error_context, handle_error
from ..logging_config import log_error_with_context, log_performance_metrics, log_validation_result
from ..models.entities import TranslationTable
from ..models.validation import ValidationResult, Violation, ViolationKind
from .assembly import AssemblyMap, get_assembly_map
from .header import HeaderGrammarParser, HeaderParseResult
from .populations import PopulationColumnValidator, PopulationParseResult
from .tabular import FIRST_VARIANT_COLUMN, LINE_CHROMO, LINE_POPS, line_at
from .variants import VariantRowValidator

logger = logging.getLogger(__name__)


@dataclass
class TableContext:
    """State carried between the validation stages of a single table."""
    table: TranslationTable
    result: ValidationResult
    structure_ok: bool = False
    header: Optional[HeaderParseResult] = None
    populations: Optional[PopulationParseResult] = None
    variant_column_end: Optional[int] = None


@dataclass
class ValidationReport:
    """Aggregated results of validating a set of tables."""
    results: List[ValidationResult] = field(default_factory=list)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def passed_count(self) -> int:
        return sum(1 for result in self.results if result.passed)

    @property
    def failed_count(self) -> int:
        return self.total - self.passed_count

    @property
    def all_passed(self) -> bool:
        return self.failed_count == 0

    @property
    def success_rate(self) -> float:
        """Percentage of tables that passed."""
        if not self.results:
            return 0.0
        return self.passed_count / self.total * 100

    @property
    def duration_seconds(self) -> float:
        if self.start_time and self.end_time:
            return (self.end_time - self.start_time).total_seconds()
        return 0.0


def _dependency_unmet(stage: str, requires: str) -> Violation:
    return Violation(
        kind=ViolationKind.DEPENDENCY_UNMET,
        message=f"{stage} skipped: {requires}",
        context={"stage": stage, "requires": requires}
    )


class TranslationTableValidator:
    """
    Validates translation tables against the fixed table grammar.

    A validator holds no per-table state, so one instance can validate many
    tables, including concurrently.
    """

    def __init__(self, config: Optional[ValidationConfig] = None,
                 assembly_map: Optional[AssemblyMap] = None):
        """
        Initialize the validator.

        Args:
            config: Validation settings; defaults to the global configuration
            assembly_map: Accession to build lookup; defaults to the map named
                by the configuration, or the embedded one
        """
        self.config = config or get_config().validation
        if assembly_map is None:
            assembly_map = get_assembly_map(self.config.assembly_map_file)
        self.assembly_map = assembly_map
        self.header_parser = HeaderGrammarParser(self.assembly_map, self.config.expected_build)
        self.population_validator = PopulationColumnValidator()
        self.variant_validator = VariantRowValidator(fail_fast=self.config.fail_fast)

    def validate(self, table: TranslationTable) -> ValidationResult:
        """
        Validate one table.

        Malformed content never raises; every problem is reported as a
        violation in the returned result.

        Args:
            table: The table to validate

        Returns:
            ValidationResult for the table
        """
        context = TableContext(table=table, result=ValidationResult(table_id=table.table_id))
        logger.info("Checking %s", table.table_id)

        stages = (
            self._check_structure,
            self._check_header,
            self._check_populations,
            self._check_variants,
        )
        for stage in stages:
            stage(context)
            if self.config.fail_fast and not context.result.passed:
                break

        result = context.result
        log_validation_result(
            logger,
            result.table_id,
            result.passed,
            len(result.violations),
            violation_kinds=[kind.value for kind in result.kinds]
        )
        return result

    def _check_structure(self, context: TableContext) -> None:
        line_count = len(context.table.lines)
        if line_count > self.config.min_line_count:
            context.structure_ok = True
            return

        context.result.add_violation(Violation(
            kind=ViolationKind.STRUCTURAL_TOO_SHORT,
            message=(
                f"Not enough lines in the file, expecting more than "
                f"{self.config.min_line_count}, found {line_count}"
            ),
            value=line_count
        ))

    def _check_header(self, context: TableContext) -> None:
        if not context.structure_ok:
            context.result.add_violation(_dependency_unmet("header check", "table is too short"))
            return

        header = self.header_parser.parse(context.table.lines, table_id=context.table.table_id)
        context.header = header
        context.variant_column_end = header.variant_column_end
        context.result.extend(header.violations)
        context.result.metadata = header.metadata

        if header.metadata:
            metadata = header.metadata
            logger.info(
                "Header of %s: gene %s, chromosome %s (%s), build %s",
                context.table.table_id,
                metadata.gene_name,
                metadata.chromosome_name,
                metadata.chromosome_refseq,
                metadata.genome_build
            )

    def _check_populations(self, context: TableContext) -> None:
        if not context.structure_ok:
            context.result.add_violation(_dependency_unmet("population check", "table is too short"))
            return

        populations = self.population_validator.parse(line_at(context.table.lines, LINE_POPS))
        context.populations = populations
        context.result.populations = list(populations.populations)
        context.result.extend(populations.violations)

    def _check_variants(self, context: TableContext) -> None:
        if not context.structure_ok:
            context.result.add_violation(_dependency_unmet("variant scan", "table is too short"))
            return
        if context.variant_column_end is None:
            context.result.add_violation(_dependency_unmet(
                "variant scan",
                f"chromosome line {LINE_CHROMO + 1} did not yield the variant columns"
            ))
            return

        variant_count = context.variant_column_end - FIRST_VARIANT_COLUMN
        if variant_count == 0:
            context.result.add_warning(f"No variant columns declared on line {LINE_CHROMO + 1}")
        logger.debug("%s declares %d variants", context.table.table_id, variant_count)

        row_violations = self.variant_validator.scan(
            context.table.lines[LINE_POPS:],
            context.variant_column_end,
            first_line_number=LINE_POPS + 1
        )
        context.result.extend([row.to_violation() for row in row_violations])

    def validate_path(self, path: Union[str, Path]) -> ValidationResult:
        """
        Read and validate one table file.

        A file that cannot be read yields a failing result with a single
        IO_FAILURE violation instead of an exception.
        """
        path = Path(path)
        try:
            table = TranslationTable.from_path(path)
        except TableReadError as e:
            handle_error(e, e.context)
            result = ValidationResult(table_id=path.name)
            result.add_violation(Violation(
                kind=ViolationKind.IO_FAILURE,
                message=e.message,
                value=str(path)
            ))
            return result
        return self.validate(table)

    def _unexpected_failure(self, path: Path, error: Exception) -> ValidationResult:
        """Result for a file whose validation raised instead of reporting."""
        log_error_with_context(logger, error, "validate_path", path=str(path), table_id=path.name)
        result = ValidationResult(table_id=path.name)
        result.add_violation(Violation(
            kind=ViolationKind.IO_FAILURE,
            message=f"Unexpected error while validating {path.name}: {error}",
            value=str(path),
            context={"error_type": type(error).__name__}
        ))
        return result

    async def validate_files_async(self, paths: Iterable[Union[str, Path]],
                                   max_workers: Optional[int] = None) -> ValidationReport:
        """
        Validate many files concurrently, one task per file.

        Files are processed in batches of max_workers; results keep the input
        order.
        """
        paths = [Path(p) for p in paths]
        max_workers = max(1, max_workers or self.config.max_workers)
        report = ValidationReport(start_time=datetime.now())
        started = time.perf_counter()

        for i in range(0, len(paths), max_workers):
            batch = paths[i:i + max_workers]
            logger.debug(
                "Validating batch %d with %d files",
                i // max_workers + 1,
                len(batch),
                extra={"batch_size": len(batch)}
            )
            batch_results = await asyncio.gather(
                *(asyncio.to_thread(self.validate_path, path) for path in batch),
                return_exceptions=True
            )
            for path, outcome in zip(batch, batch_results):
                if isinstance(outcome, Exception):
                    outcome = self._unexpected_failure(path, outcome)
                report.results.append(outcome)

        report.end_time = datetime.now()
        log_performance_metrics(
            logger,
            "validate_files",
            time.perf_counter() - started,
            file_count=report.total,
            passed=report.passed_count,
            failed=report.failed_count
        )
        return report

    def validate_files(self, paths: Iterable[Union[str, Path]],
                       max_workers: Optional[int] = None) -> ValidationReport:
        """Synchronous wrapper around validate_files_async."""
        return asyncio.run(self.validate_files_async(paths, max_workers))


def find_translation_files(directory: Union[str, Path], extension: str = ".tsv") -> List[Path]:
    """
    List the translation table files in a directory.

    Args:
        directory: Directory to scan (not recursive)
        extension: File name suffix to match, e.g. ".tsv"

    Returns:
        Matching file paths sorted by name

    Raises:
        TableReadError: If the directory does not exist or is not a directory
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise TableReadError(
            f"Not a directory: {directory.absolute()}",
            context=create_error_context("find_translation_files", path=str(directory))
        )
    return sorted(
        p for p in directory.iterdir()
        if p.is_file() and p.name.endswith(extension)
    )
