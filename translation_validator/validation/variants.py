"""
Allele token validation for the variant rows of a translation table.

Rows are scanned from the population header row (first cell "Allele") up to
the first "Notes:" line. Only the variant columns declared on the chromosome
line are examined; cells beyond them are ignored.
"""

import logging
import re
from enum import Enum
from typing import List, Sequence

from ..models.validation import RowViolation
from .tabular import FIRST_VARIANT_COLUMN, field_at, is_blank, split_line

logger = logging.getLogger(__name__)

ALLELE_TOKEN_PATTERN = re.compile(r"del[ACGT]*|ins[ACGT]*|[ACGTMRWSYKVHDBN]+")
BLOCK_START_TITLE = "Allele"
NOTES_PREFIX = "notes:"


def is_valid_allele_token(token: str) -> bool:
    """True for blank cells, deletions, insertions and IUPAC nucleotide strings."""
    return is_blank(token) or ALLELE_TOKEN_PATTERN.fullmatch(token) is not None


class ScanState(Enum):
    BEFORE_VARIANT_BLOCK = "before_variant_block"
    IN_VARIANT_BLOCK = "in_variant_block"
    DONE = "done"


class VariantRowValidator:
    """State machine that collects invalid allele tokens row by row."""

    def __init__(self, fail_fast: bool = False):
        """
        Args:
            fail_fast: Stop after the first row with invalid tokens
        """
        self.fail_fast = fail_fast

    def scan(self, lines: Sequence[str], variant_column_end: int,
             first_line_number: int = 1) -> List[RowViolation]:
        """
        Scan lines for invalid allele tokens.

        Args:
            lines: Table lines, starting at or before the population header row
            variant_column_end: Exclusive end of the variant columns
            first_line_number: 1-based line number of lines[0] in the table

        Returns:
            One RowViolation per offending row; empty when every token is valid
        """
        state = ScanState.BEFORE_VARIANT_BLOCK
        violations: List[RowViolation] = []
        rows_scanned = 0

        for offset, line in enumerate(lines):
            if line.lower().startswith(NOTES_PREFIX):
                state = ScanState.DONE
                break

            fields = split_line(line)
            if field_at(fields, 0) == BLOCK_START_TITLE:
                state = ScanState.IN_VARIANT_BLOCK
                continue

            if state != ScanState.IN_VARIANT_BLOCK or len(fields) <= FIRST_VARIANT_COLUMN:
                continue

            rows_scanned += 1
            violation = self._check_row(fields, variant_column_end, first_line_number + offset)
            if violation:
                violations.append(violation)
                if self.fail_fast:
                    break

        logger.debug(
            "Scanned %d variant rows, %d with invalid tokens",
            rows_scanned,
            len(violations),
            extra={"scan_state": state.value, "variant_column_end": variant_column_end}
        )
        return violations

    @staticmethod
    def _check_row(fields: List[str], variant_column_end: int, line_number: int):
        bad_tokens = set()
        columns = []
        for index in range(FIRST_VARIANT_COLUMN, variant_column_end):
            token = field_at(fields, index)
            if not is_valid_allele_token(token):
                bad_tokens.add(token)
                columns.append(index + 1)

        if not bad_tokens:
            return None
        return RowViolation(
            row_label=fields[0],
            line=line_number,
            bad_tokens=frozenset(bad_tokens),
            columns=tuple(columns)
        )
