"""
Pytest configuration and shared fixtures for the test suite.
"""

import pytest
from pathlib import Path
from typing import List

from translation_validator.config import SystemConfig, ValidationConfig, ExportConfig, LoggingConfig, set_config
from translation_validator.errors import set_error_handler
from translation_validator.models.entities import TranslationTable


VALID_TABLE_LINES = [
    "GENE: CYP2D6\t01/01/20",
    "\tNucleotide change to gene from http://www.cypalleles.ki.se/\tc.100C>T\tc.-1584C>G\tc.2549delA",
    "\tNucleotide change to protein (NP_000097.3)\tp.P34S\t\tp.R259fs",
    "\tNucleotide change on GRCh38.p2 chromosome 22 (NC_000022.11)\tg.42130692G>A\tg.42128945C>G\tg.42127941delA",
    "\tNucleotide change to CYP2D6 gene (NG_008376.4)\tg.5100C>T\tg.9181C>G\tg.6866delA",
    "\trsID\trs1065852\trs1080985\trs35742686",
    "Allele\tAllele Functional Status\tEuropean Allele Frequency\t\tAfrican Allele Frequency",
    "*1\tNormal function\tC\tC\tA",
    "*4\tNo function\tT\tS\tdel",
    "*10\tDecreased function\tT\t\t",
    "NOTES:",
    "*99\tNot a real allele\tXYZ\t123\tQQQ",
]


def _make_table(lines: List[str], table_id: str = "CYP2D6.tsv") -> TranslationTable:
    return TranslationTable(table_id=table_id, lines=tuple(lines))


@pytest.fixture
def make_table():
    """Build an in-memory table from a list of lines."""
    return _make_table


@pytest.fixture
def valid_lines() -> List[str]:
    """A fresh copy of a conforming table's lines, safe to modify."""
    return list(VALID_TABLE_LINES)


@pytest.fixture
def valid_table(valid_lines) -> TranslationTable:
    return _make_table(valid_lines)


@pytest.fixture
def write_table(tmp_path):
    """Write table lines to a .tsv file under a temporary directory."""
    def _write(lines: List[str], name: str = "CYP2D6.tsv", directory: Path = None) -> Path:
        directory = directory or tmp_path / "translations"
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path
    return _write


@pytest.fixture(autouse=True)
def setup_test_config():
    """Automatically set up test configuration for all tests."""
    test_config = SystemConfig(
        validation=ValidationConfig(max_workers=2),
        export=ExportConfig(),
        logging=LoggingConfig(level="DEBUG")
    )
    set_config(test_config)

    yield test_config

    set_config(None)
    set_error_handler(None)
