"""Validation of the population header row of a translation table."""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Sequence, Union

from ..models.entities import PopulationColumn
from ..models.validation import Violation, ViolationKind
from .tabular import FIRST_VARIANT_COLUMN, LINE_POPS, field_at, is_blank, split_line

logger = logging.getLogger(__name__)

ALLELE_TITLE = "Allele"
FUNCTIONAL_STATUS_TITLE = "Allele Functional Status"
POPULATION_TITLE_PATTERN = re.compile(r"(.*) Allele Frequency")


@dataclass
class PopulationParseResult:
    """Populations declared on the header row, plus any problems found."""
    populations: List[PopulationColumn] = field(default_factory=list)
    violations: List[Violation] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.violations

    @property
    def names(self) -> List[str]:
        return [population.name for population in self.populations]


class PopulationColumnValidator:
    """Checks the fixed titles and population columns of the population header row."""

    def __init__(self, line_number: int = LINE_POPS + 1):
        self.line_number = line_number

    def parse(self, row: Union[str, Sequence[str]]) -> PopulationParseResult:
        """
        Parse the population header row.

        Args:
            row: The raw line, or its already split fields

        Returns:
            PopulationParseResult with the populations in column order
        """
        fields = split_line(row) if isinstance(row, str) else list(row)
        result = PopulationParseResult()

        first, second = field_at(fields, 0), field_at(fields, 1)
        if first != ALLELE_TITLE or second != FUNCTIONAL_STATUS_TITLE:
            result.violations.append(Violation(
                kind=ViolationKind.UNEXPECTED_HEADER_TITLES,
                message=(
                    f"Expected the titles '{ALLELE_TITLE}' and '{FUNCTIONAL_STATUS_TITLE}' "
                    f"in the first two columns of row {self.line_number}"
                ),
                line=self.line_number,
                column=1 if first != ALLELE_TITLE else 2,
                value=[first, second]
            ))

        for index in range(FIRST_VARIANT_COLUMN, len(fields)):
            title = fields[index]
            if is_blank(title):
                continue

            m = POPULATION_TITLE_PATTERN.fullmatch(title)
            if m:
                result.populations.append(PopulationColumn(name=m.group(1), title=title, column=index))
            else:
                result.violations.append(Violation(
                    kind=ViolationKind.MALFORMED_POPULATION_TITLE,
                    message=f"Allele frequency column title should end in 'Allele Frequency': {title!r}",
                    line=self.line_number,
                    column=index + 1,
                    value=title
                ))

        if not result.populations and not any(
            v.kind == ViolationKind.MALFORMED_POPULATION_TITLE for v in result.violations
        ):
            result.violations.append(Violation(
                kind=ViolationKind.NO_POPULATIONS_DECLARED,
                message="No populations specified",
                line=self.line_number
            ))

        logger.debug("Populations declared: %s", ", ".join(result.names))
        return result
