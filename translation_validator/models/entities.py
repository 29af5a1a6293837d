"""
Pydantic models for translation table entities.

This module defines the immutable records produced while reading and
validating a translation table: the raw table itself, the metadata parsed
from its header, and the population columns it declares.
"""

import re
from datetime import date
from pathlib import Path
from typing import Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..errors import TableReadError, create_error_context

REFSEQ_ACCESSION = re.compile(r"N\w_\d+\.\d+")
# Only CR, LF and CRLF end a line; other Unicode separators stay inside cells
LINE_BREAK = re.compile(r"\r\n|\r|\n")


class TranslationTable(BaseModel):
    """The raw lines of one translation table file."""

    table_id: str = Field(..., min_length=1, description="Table identifier, usually the file name")
    lines: Tuple[str, ...] = Field(default_factory=tuple, description="Raw text lines in file order")
    source: Optional[Path] = Field(None, description="File the table was loaded from")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_text(cls, text: str, table_id: str, source: Optional[Path] = None) -> "TranslationTable":
        """Build a table from the full text of a file."""
        lines = LINE_BREAK.split(text)
        if lines[-1] == "":
            lines.pop()
        return cls(table_id=table_id, lines=tuple(lines), source=source)

    @classmethod
    def from_path(cls, path: Union[str, Path], encoding: str = "utf-8") -> "TranslationTable":
        """
        Load a table from disk.

        Args:
            path: Path to a tab-separated translation table
            encoding: Text encoding of the file

        Returns:
            TranslationTable with the file's lines

        Raises:
            TableReadError: If the file is missing, unreadable or not valid text
        """
        path = Path(path)
        try:
            text = path.read_text(encoding=encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise TableReadError(
                f"Cannot read translation table {path}: {e}",
                context=create_error_context("read_table", path=str(path), table_id=path.name),
                original_exception=e
            ) from e
        return cls.from_text(text, table_id=path.name, source=path)

    def __len__(self) -> int:
        return len(self.lines)


class HeaderMetadata(BaseModel):
    """Metadata extracted from the seven-line header of a translation table."""

    gene_name: str = Field(..., min_length=1, description="Gene symbol from the GENE: field")
    version_date: date = Field(..., description="Table version date")
    protein_refseq: str = Field(..., description="RefSeq accession of the protein sequence")
    chromosome_refseq: str = Field(..., description="RefSeq accession of the chromosome sequence")
    gene_refseq: str = Field(..., description="RefSeq accession of the gene sequence")
    chromosome_number: int = Field(..., ge=1, le=24, description="Chromosome number, 23 = X, 24 = Y")
    genome_build: str = Field(..., description="Genome build named in the chromosome title, e.g. GRCh38")

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "gene_name": "CYP2D6",
                "version_date": "2020-01-01",
                "protein_refseq": "NP_000097.3",
                "chromosome_refseq": "NC_000022.11",
                "gene_refseq": "NG_008376.4",
                "chromosome_number": 22,
                "genome_build": "GRCh38.p2"
            }
        }
    )

    @field_validator('protein_refseq', 'chromosome_refseq', 'gene_refseq')
    @classmethod
    def validate_accession(cls, v):
        """Accessions must look like N?_<digits>.<version>."""
        if not REFSEQ_ACCESSION.fullmatch(v):
            raise ValueError(f"Not a RefSeq accession: {v}")
        return v

    @property
    def chromosome_name(self) -> str:
        """UCSC-style chromosome name derived from the chromosome number."""
        if self.chromosome_number == 23:
            return "chrX"
        if self.chromosome_number == 24:
            return "chrY"
        return f"chr{self.chromosome_number}"


class PopulationColumn(BaseModel):
    """An allele frequency column declared on the population header row."""

    name: str = Field(..., description="Population name, e.g. European")
    title: str = Field(..., description="Full column title, e.g. 'European Allele Frequency'")
    column: int = Field(..., ge=2, description="0-based column index in the table")

    model_config = ConfigDict(frozen=True)
