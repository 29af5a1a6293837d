"""
Translation table validation.

This package contains the genome assembly lookup, the header grammar parser,
the population row and variant row validators, and the orchestrator that
combines them into one result per table.
"""

from .assembly import AssemblyMap, get_assembly_map
from .header import HeaderGrammarParser, HeaderParseResult
from .populations import PopulationColumnValidator, PopulationParseResult
from .variants import VariantRowValidator, is_valid_allele_token
from .validator import (
    TranslationTableValidator,
    ValidationReport,
    find_translation_files
)

__all__ = [
    "AssemblyMap",
    "get_assembly_map",
    "HeaderGrammarParser",
    "HeaderParseResult",
    "PopulationColumnValidator",
    "PopulationParseResult",
    "VariantRowValidator",
    "is_valid_allele_token",
    "TranslationTableValidator",
    "ValidationReport",
    "find_translation_files",
]
