"""
Header grammar parsing for translation tables.

The first five lines of a table carry its identity: the gene and version
date, a blank naming row, and the protein, chromosome and gene sequence
titles with their embedded RefSeq accessions. The chromosome line also
declares the variant columns, and its last populated cell bounds the
columns that are scanned in every variant row.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from pydantic import ValidationError as ModelValidationError

from ..models.entities import HeaderMetadata
from ..models.validation import Violation, ViolationKind
from .assembly import AssemblyMap, get_assembly_map
from .tabular import (
    FIRST_VARIANT_COLUMN, LINE_CHROMO, LINE_GENE, LINE_GENESEQ, LINE_NAMING,
    LINE_PROTEIN, field_at, is_blank, line_at, split_line,
)

logger = logging.getLogger(__name__)

GENE_FIELD_PATTERN = re.compile(r"GENE:\s*(\w+)")
REFSEQ_PATTERN = re.compile(r"(N\w_(\d+)\.\d+)")
GENOME_BUILD_PATTERN = re.compile(r"(GRCh\d+(?:\.p\d+)?)")
DATE_FORMAT = "%m/%d/%y"

MIN_CHROMOSOME_NUMBER = 1
MAX_CHROMOSOME_NUMBER = 24

# Metadata field -> (violation kind, 0-based line, 1-based column) it is read from
METADATA_FIELD_SOURCES = {
    "gene_name": (ViolationKind.MALFORMED_GENE_FIELD, LINE_GENE, 1),
    "version_date": (ViolationKind.INVALID_DATE, LINE_GENE, 2),
    "protein_refseq": (ViolationKind.MISSING_PROTEIN_ACCESSION, LINE_PROTEIN, 2),
    "chromosome_refseq": (ViolationKind.MISSING_CHROMOSOME_ACCESSION, LINE_CHROMO, 2),
    "chromosome_number": (ViolationKind.UNRECOGNIZED_CHROMOSOME_NUMBER, LINE_CHROMO, 2),
    "genome_build": (ViolationKind.MISSING_GENOME_BUILD, LINE_CHROMO, 2),
    "gene_refseq": (ViolationKind.MISSING_GENE_ACCESSION, LINE_GENESEQ, 2),
}


@dataclass
class HeaderParseResult:
    """Outcome of parsing the header lines of one table."""
    metadata: Optional[HeaderMetadata] = None
    violations: List[Violation] = field(default_factory=list)
    variant_column_end: Optional[int] = None
    extracted: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.violations


class HeaderGrammarParser:
    """
    Parser for the fixed header lines of a translation table.

    Every line is checked even when an earlier one is malformed, so a single
    pass reports all header problems. HeaderMetadata is only built when the
    whole header conforms.
    """

    def __init__(self, assembly_map: Optional[AssemblyMap] = None, expected_build: str = "b38"):
        """
        Args:
            assembly_map: Accession to build lookup; defaults to the embedded map
            expected_build: Build tag the chromosome accession must map to
        """
        self.assembly_map = assembly_map if assembly_map is not None else get_assembly_map()
        self.expected_build = expected_build

    def parse(self, lines: Sequence[str], table_id: Optional[str] = None) -> HeaderParseResult:
        """
        Parse the header lines of a table.

        Args:
            lines: Table lines; only the first five are read
            table_id: Table identifier used in log messages

        Returns:
            HeaderParseResult with metadata (when valid), violations and the
            variant column bound
        """
        result = HeaderParseResult()

        self._parse_gene_line(split_line(line_at(lines, LINE_GENE)), result)
        self._parse_naming_line(split_line(line_at(lines, LINE_NAMING)), result)
        self._parse_protein_line(split_line(line_at(lines, LINE_PROTEIN)), result)
        self._parse_chromosome_line(split_line(line_at(lines, LINE_CHROMO)), result)
        self._parse_gene_sequence_line(split_line(line_at(lines, LINE_GENESEQ)), result)

        if result.is_valid:
            try:
                result.metadata = HeaderMetadata(**result.extracted)
            except ModelValidationError as e:
                logger.warning("Header metadata rejected for %s: %s", table_id, e)
                result.violations.extend(self._model_violations(e, result.extracted))

        logger.debug(
            "Parsed header of %s",
            table_id,
            extra={
                "table_id": table_id,
                "header_valid": result.is_valid,
                "violation_count": len(result.violations),
                **{k: str(v) for k, v in result.extracted.items()}
            }
        )
        return result

    def _parse_gene_line(self, fields: List[str], result: HeaderParseResult) -> None:
        gene_field = field_at(fields, 0)
        m = GENE_FIELD_PATTERN.fullmatch(gene_field)
        if m:
            result.extracted["gene_name"] = m.group(1)
        else:
            result.violations.append(Violation(
                kind=ViolationKind.MALFORMED_GENE_FIELD,
                message=f"Gene field not in expected format 'GENE: <name>': {gene_field!r}",
                line=LINE_GENE + 1,
                column=1,
                value=gene_field
            ))

        date_field = field_at(fields, 1)
        try:
            result.extracted["version_date"] = datetime.strptime(date_field, DATE_FORMAT).date()
        except ValueError:
            result.violations.append(Violation(
                kind=ViolationKind.INVALID_DATE,
                message=f"Version date not a valid MM/DD/YY date: {date_field!r}",
                line=LINE_GENE + 1,
                column=2,
                value=date_field
            ))

    def _parse_naming_line(self, fields: List[str], result: HeaderParseResult) -> None:
        first = field_at(fields, 0)
        if not is_blank(first):
            result.violations.append(Violation(
                kind=ViolationKind.NAMING_ROW_NOT_BLANK,
                message=f"Row {LINE_NAMING + 1}, column 1: expected to be blank",
                line=LINE_NAMING + 1,
                column=1,
                value=first
            ))

    def _find_accession(self, fields: List[str], line_index: int, kind: ViolationKind,
                        description: str, result: HeaderParseResult) -> Optional[re.Match]:
        """Search the title field of a sequence line for a RefSeq accession."""
        title = field_at(fields, 1)
        if is_blank(title):
            message = f"No {description} description specified"
        else:
            m = REFSEQ_PATTERN.search(title)
            if m:
                return m
            message = f"No RefSeq identifier for {description} line {line_index + 1}"

        result.violations.append(Violation(
            kind=kind,
            message=message,
            line=line_index + 1,
            column=2,
            value=title
        ))
        return None

    def _parse_protein_line(self, fields: List[str], result: HeaderParseResult) -> None:
        m = self._find_accession(
            fields, LINE_PROTEIN, ViolationKind.MISSING_PROTEIN_ACCESSION, "protein", result
        )
        if m:
            result.extracted["protein_refseq"] = m.group(1)

    def _parse_gene_sequence_line(self, fields: List[str], result: HeaderParseResult) -> None:
        m = self._find_accession(
            fields, LINE_GENESEQ, ViolationKind.MISSING_GENE_ACCESSION, "gene sequence", result
        )
        if m:
            result.extracted["gene_refseq"] = m.group(1)

    def _parse_chromosome_line(self, fields: List[str], result: HeaderParseResult) -> None:
        line_number = LINE_CHROMO + 1
        m = self._find_accession(
            fields, LINE_CHROMO, ViolationKind.MISSING_CHROMOSOME_ACCESSION, "chromosomal position", result
        )
        if m:
            accession = m.group(1)
            result.extracted["chromosome_refseq"] = accession
            self._check_assembly(accession, line_number, result)

            # Accession numbers are zero padded; always read them as base 10
            chromosome_number = int(m.group(2), 10)
            if MIN_CHROMOSOME_NUMBER <= chromosome_number <= MAX_CHROMOSOME_NUMBER:
                result.extracted["chromosome_number"] = chromosome_number
            else:
                result.violations.append(Violation(
                    kind=ViolationKind.UNRECOGNIZED_CHROMOSOME_NUMBER,
                    message=(
                        f"Unknown or unsupported chromosome number {chromosome_number} "
                        f"on chromosomal line {line_number}"
                    ),
                    line=line_number,
                    column=2,
                    value=chromosome_number
                ))

            result.variant_column_end = self.variant_column_end(fields)

        title = field_at(fields, 1)
        if not is_blank(title):
            build = GENOME_BUILD_PATTERN.search(title)
            if build:
                result.extracted["genome_build"] = build.group(1)
            else:
                result.violations.append(Violation(
                    kind=ViolationKind.MISSING_GENOME_BUILD,
                    message=f"No genome build identifier for chromosomal line {line_number}",
                    line=line_number,
                    column=2,
                    value=title
                ))

    def _check_assembly(self, accession: str, line_number: int, result: HeaderParseResult) -> None:
        build = self.assembly_map.lookup(accession)
        if build is None:
            result.violations.append(Violation(
                kind=ViolationKind.UNKNOWN_ASSEMBLY,
                message=f"Unrecognized chromosome identifier {accession}",
                line=line_number,
                column=2,
                value=accession
            ))
        elif build != self.expected_build:
            result.violations.append(Violation(
                kind=ViolationKind.WRONG_ASSEMBLY_BUILD,
                message=f"Chromosome identifier {accession} is on {build}, expected {self.expected_build}",
                line=line_number,
                column=2,
                value=accession,
                context={"build": build, "expected_build": self.expected_build}
            ))

    @staticmethod
    def _model_violations(error: ModelValidationError, extracted: Dict[str, Any]) -> List[Violation]:
        """Report fields the metadata model rejected against the header cell they came from."""
        violations = []
        for detail in error.errors():
            name = str(detail["loc"][0]) if detail["loc"] else ""
            kind, line_index, column = METADATA_FIELD_SOURCES.get(
                name, (ViolationKind.MALFORMED_GENE_FIELD, LINE_GENE, 1)
            )
            violations.append(Violation(
                kind=kind,
                message=f"Header value for {name or 'metadata'} rejected: {detail['msg']}",
                line=line_index + 1,
                column=column,
                value=extracted.get(name),
                context={"field": name}
            ))
        return violations

    @staticmethod
    def variant_column_end(fields: Sequence[str]) -> int:
        """
        Exclusive end of the variant columns declared on the chromosome line.

        This is one past the last non-blank cell from the first variant column
        on; it equals FIRST_VARIANT_COLUMN when no variant is declared.
        """
        end = FIRST_VARIANT_COLUMN
        for i in range(FIRST_VARIANT_COLUMN, len(fields)):
            if not is_blank(fields[i]):
                end = i + 1
        return end
