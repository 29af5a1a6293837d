"""
Excel export of translation tables.

Writes the raw contents of a translation table into an .xlsx workbook with
light formatting: bold header rows and first column, a frozen header pane
and a wider first column. The export does not depend on the table passing
validation.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from ..config import ExportConfig, get_config
from ..errors import ExportError, TranslationValidatorError, create_error_context, handle_error
from ..models.entities import TranslationTable
from ..validation.tabular import SEPARATOR

logger = logging.getLogger(__name__)

EXCEL_EXTENSION = ".xlsx"


@dataclass
class ExportReport:
    """Outcome of exporting a directory of tables."""
    written: List[Path] = field(default_factory=list)
    failed: List[Path] = field(default_factory=list)

    @property
    def all_succeeded(self) -> bool:
        return not self.failed


class TranslationSheetExporter:
    """
    Exporter that renders translation tables as Excel workbooks.

    Each source file becomes one workbook named after it, with the source
    extension replaced by .xlsx.
    """

    def __init__(self, config: Optional[ExportConfig] = None, file_extension: Optional[str] = None):
        """
        Args:
            config: Export settings; defaults to the global configuration
            file_extension: Required source extension; defaults to the
                configured translation file extension
        """
        system_config = get_config()
        self.config = config or system_config.export
        self.file_extension = file_extension or system_config.validation.file_extension
        self.logger = logging.getLogger(__name__)

    def output_path_for(self, source: Path, output_dir: Union[str, Path]) -> Path:
        """Destination of the workbook for a source file."""
        name = source.name
        if name.endswith(self.file_extension):
            name = name[:-len(self.file_extension)]
        return Path(output_dir) / f"{name}{EXCEL_EXTENSION}"

    def _check_source(self, source: Path) -> None:
        context = create_error_context("export_table", path=str(source), table_id=source.name)
        if not source.exists():
            raise ExportError(f"{source} does not exist", context=context)
        if not source.is_file():
            raise ExportError(f"{source} is not a file", context=context)
        if not source.name.endswith(self.file_extension):
            raise ExportError(f"{source} is not a {self.file_extension} file", context=context)

    def build_workbook(self, table: TranslationTable) -> Workbook:
        """Render the table's lines into a formatted workbook."""
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = self.config.sheet_name

        head_font = Font(bold=True)
        header_rows = self.config.header_row_count

        sheet.column_dimensions[get_column_letter(1)].width = self.config.first_column_width
        sheet.freeze_panes = f"{get_column_letter(2)}{header_rows + 1}"

        for row_number, line in enumerate(table.lines, start=1):
            for column_number, value in enumerate(line.split(SEPARATOR), start=1):
                if not value:
                    continue
                cell = sheet.cell(row=row_number, column=column_number, value=value)
                if row_number <= header_rows or column_number == 1:
                    cell.font = head_font

        return workbook

    def export(self, source: Union[str, Path], output_dir: Optional[Union[str, Path]] = None) -> Path:
        """
        Export one table file to Excel.

        Args:
            source: Path to a translation table file
            output_dir: Directory to write to; defaults to the configured one

        Returns:
            Path of the written workbook

        Raises:
            ExportError: If the source is unusable or the workbook cannot be written
        """
        source = Path(source)
        self._check_source(source)

        out_path = self.output_path_for(source, output_dir or self.config.output_dir)
        self.logger.debug("Will convert %s and write to %s", source.absolute(), out_path)

        table = TranslationTable.from_path(source)
        workbook = self.build_workbook(table)

        try:
            out_path.parent.mkdir(parents=True, exist_ok=True)
            workbook.save(out_path)
        except OSError as e:
            raise ExportError(
                f"Error writing {out_path}",
                context=create_error_context("export_table", path=str(out_path), table_id=table.table_id),
                original_exception=e
            ) from e

        self.logger.info("Wrote %s", out_path, extra={"table_id": table.table_id, "row_count": len(table)})
        return out_path

    def export_all(self, sources: List[Path], output_dir: Optional[Union[str, Path]] = None) -> ExportReport:
        """Export several tables, continuing past files that fail."""
        report = ExportReport()
        for source in sources:
            try:
                report.written.append(self.export(source, output_dir))
            except TranslationValidatorError as e:
                handle_error(e, e.context)
                report.failed.append(Path(source))
        return report
