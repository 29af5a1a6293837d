"""Helpers for reading tab-separated translation table lines."""

from typing import List, Sequence

SEPARATOR = "\t"

# 0-based positions of the fixed header lines
LINE_GENE = 0
LINE_NAMING = 1
LINE_PROTEIN = 2
LINE_CHROMO = 3
LINE_GENESEQ = 4
LINE_POPS = 6

# Columns before this index hold the allele name and functional status
FIRST_VARIANT_COLUMN = 2


def split_line(line: str) -> List[str]:
    return line.split(SEPARATOR)


def field_at(fields: Sequence[str], index: int) -> str:
    """Field at index, or an empty string when the row is shorter."""
    return fields[index] if index < len(fields) else ""


def line_at(lines: Sequence[str], index: int) -> str:
    return lines[index] if index < len(lines) else ""


# str.isspace() accepts these, but they are content in a table cell
NOT_WHITESPACE = frozenset("\u00a0\u2007\u202f\u0085")


def is_blank(value: str) -> bool:
    """
    True for empty cells and cells holding only whitespace.

    Non-breaking spaces and NEL are content, not whitespace, so a cell holding
    only those is not blank.
    """
    return not value or (value.isspace() and NOT_WHITESPACE.isdisjoint(value))
