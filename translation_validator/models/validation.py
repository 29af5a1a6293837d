"""
Violation taxonomy and validation results for translation tables.

Every problem found in a table is captured as a Violation value with enough
context (line, column, offending value) for a curator to locate and fix it.
"""

from typing import Dict, Any, List, Optional, FrozenSet, Tuple
from dataclasses import dataclass, field
from enum import Enum


class ViolationKind(Enum):
    """Kinds of problems a translation table can have."""
    STRUCTURAL_TOO_SHORT = "structural_too_short"
    MALFORMED_GENE_FIELD = "malformed_gene_field"
    INVALID_DATE = "invalid_date"
    NAMING_ROW_NOT_BLANK = "naming_row_not_blank"
    MISSING_PROTEIN_ACCESSION = "missing_protein_accession"
    MISSING_CHROMOSOME_ACCESSION = "missing_chromosome_accession"
    UNRECOGNIZED_CHROMOSOME_NUMBER = "unrecognized_chromosome_number"
    UNKNOWN_ASSEMBLY = "unknown_assembly"
    WRONG_ASSEMBLY_BUILD = "wrong_assembly_build"
    MISSING_GENOME_BUILD = "missing_genome_build"
    MISSING_GENE_ACCESSION = "missing_gene_accession"
    UNEXPECTED_HEADER_TITLES = "unexpected_header_titles"
    MALFORMED_POPULATION_TITLE = "malformed_population_title"
    NO_POPULATIONS_DECLARED = "no_populations_declared"
    INVALID_ALLELE_TOKEN = "invalid_allele_token"
    DEPENDENCY_UNMET = "dependency_unmet"
    IO_FAILURE = "io_failure"


@dataclass(frozen=True)
class Violation:
    """
    A single rule violation in a translation table.

    Line and column numbers are 1-based, as a curator would count them in a
    spreadsheet or text editor.
    """
    kind: ViolationKind
    message: str
    line: Optional[int] = None
    column: Optional[int] = None
    value: Any = None
    context: Dict[str, Any] = field(default_factory=dict)

    @property
    def location(self) -> str:
        """Human readable location, e.g. 'line 4, column 2'."""
        parts = []
        if self.line is not None:
            parts.append(f"line {self.line}")
        if self.column is not None:
            parts.append(f"column {self.column}")
        return ", ".join(parts)


@dataclass(frozen=True)
class RowViolation:
    """Invalid allele tokens found in one variant row."""
    row_label: str
    line: int
    bad_tokens: FrozenSet[str]
    columns: Tuple[int, ...] = ()

    def to_violation(self) -> Violation:
        tokens = ";".join(sorted(self.bad_tokens))
        return Violation(
            kind=ViolationKind.INVALID_ALLELE_TOKEN,
            message=f"{self.row_label} has bad base pair values {tokens}",
            line=self.line,
            column=self.columns[0] if self.columns else None,
            value=sorted(self.bad_tokens),
            context={"row_label": self.row_label, "columns": list(self.columns)}
        )


@dataclass
class ValidationResult:
    """Result of validating one translation table."""
    table_id: str
    passed: bool = True
    violations: List[Violation] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    metadata: Optional[Any] = None
    populations: List[Any] = field(default_factory=list)

    @property
    def error_message(self) -> str:
        """Get formatted error message."""
        return "; ".join(violation.message for violation in self.violations)

    @property
    def kinds(self) -> List[ViolationKind]:
        """Violation kinds in report order."""
        return [violation.kind for violation in self.violations]

    def add_violation(self, violation: Violation) -> None:
        """Add a violation and mark the table as failing."""
        self.violations.append(violation)
        self.passed = False

    def extend(self, violations: List[Violation]) -> None:
        for violation in violations:
            self.add_violation(violation)

    def add_warning(self, warning: str) -> None:
        """Add a validation warning."""
        self.warnings.append(warning)
