"""
Spreadsheet export of translation tables.
"""

from .excel import TranslationSheetExporter, ExportReport

__all__ = ["TranslationSheetExporter", "ExportReport"]
