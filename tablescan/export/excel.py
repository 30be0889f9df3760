"""
Excel export module for extracted tables.

Handles:
- Writing table rows to an in-memory workbook for download
- Header row styling and frozen pane
- Ragged rows (shorter rows leave trailing cells empty)
- Saving the same workbook to disk
"""

import logging
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Union

from openpyxl import Workbook
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE, TYPE_STRING
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from tablescan.errors import ExportError
from tablescan.models.table import Table

logger = logging.getLogger(__name__)

XLSX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@dataclass(frozen=True)
class SpreadsheetFile:
    """A generated workbook ready to be offered as a download."""
    filename: str
    data: bytes
    mime_type: str = XLSX_MIME_TYPE


class ExcelExporter:
    """
    Exports tables to Excel workbooks.

    Features:
    - First row styled as a header
    - Column widths sized to content
    - Cells written as text, in order
    """

    SHEET_TITLE = "Extracted Data"
    MIN_COLUMN_WIDTH = 8
    MAX_COLUMN_WIDTH = 60

    def __init__(self):
        """Initialize the Excel exporter."""
        self._setup_styles()

    def _setup_styles(self):
        """Set up Excel styles for formatting."""
        # Header style
        self.header_font = Font(bold=True, color="FFFFFF")
        self.header_fill = PatternFill(start_color="1F4E79", end_color="1F4E79", fill_type="solid")
        self.header_alignment = Alignment(horizontal="center", vertical="center", wrap_text=True)

        # Border style
        thin_border = Side(style="thin", color="CCCCCC")
        self.cell_border = Border(
            left=thin_border,
            right=thin_border,
            top=thin_border,
            bottom=thin_border,
        )

    def export(self, table: Table, filename: str) -> SpreadsheetFile:
        """
        Serialize a table into an in-memory .xlsx file.

        Args:
            table: Extracted table
            filename: Download file name; ".xlsx" is appended if missing

        Returns:
            SpreadsheetFile with the workbook bytes

        Raises:
            ExportError: If the workbook cannot be generated
        """
        filename = self._ensure_suffix(filename)
        try:
            wb = self._build_workbook(table)
            buffer = BytesIO()
            wb.save(buffer)
        except Exception as e:
            logger.exception("Excel export failed")
            raise ExportError(f"Excel export failed: {e}")

        data = buffer.getvalue()
        logger.info(f"Exported {len(table)} rows to {filename} ({len(data):,} bytes)")
        return SpreadsheetFile(filename=filename, data=data)

    def save(self, table: Table, file_path: Union[str, Path]) -> Path:
        """
        Write a table to an .xlsx file on disk.

        Args:
            table: Extracted table
            file_path: Destination path

        Returns:
            Path to the written file
        """
        file_path = Path(self._ensure_suffix(str(file_path)))
        spreadsheet = self.export(table, file_path.name)
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_bytes(spreadsheet.data)
        except OSError as e:
            raise ExportError(f"Could not write {file_path}: {e}")
        return file_path

    def _build_workbook(self, table: Table) -> Workbook:
        wb = Workbook()
        ws = wb.active
        ws.title = self.SHEET_TITLE

        for row_num, row in enumerate(table.rows, start=1):
            self._write_row(ws, row_num, row)

        if table.rows:
            self._style_header(ws, len(table.header))

        self._set_column_widths(ws, table)
        return wb

    def _write_row(self, ws, row_num: int, row: list[str]):
        """Write one row; missing trailing cells stay empty."""
        for col, value in enumerate(row, start=1):
            cell = ws.cell(row=row_num, column=col, value=self._clean(value))
            # openpyxl treats a leading "=" as a formula
            cell.data_type = TYPE_STRING
            cell.border = self.cell_border
            cell.number_format = "@"

    def _style_header(self, ws, width: int):
        """Style the first row and freeze it."""
        for col in range(1, width + 1):
            cell = ws.cell(row=1, column=col)
            cell.font = self.header_font
            cell.fill = self.header_fill
            cell.alignment = self.header_alignment

        ws.freeze_panes = "A2"

    def _set_column_widths(self, ws, table: Table):
        for col in range(1, table.column_count + 1):
            longest = max(
                (len(row[col - 1]) for row in table.rows if len(row) >= col),
                default=0,
            )
            width = min(max(longest + 2, self.MIN_COLUMN_WIDTH), self.MAX_COLUMN_WIDTH)
            ws.column_dimensions[get_column_letter(col)].width = width

    @staticmethod
    def _clean(value: str) -> str:
        """Strip characters openpyxl refuses to store."""
        return ILLEGAL_CHARACTERS_RE.sub("", value)

    @staticmethod
    def _ensure_suffix(filename: str) -> str:
        if not filename.lower().endswith(".xlsx"):
            return f"{filename}.xlsx"
        return filename


def export_table(table: Table, filename: str) -> SpreadsheetFile:
    """
    Convenience function to export a table.

    Args:
        table: Extracted table
        filename: Download file name

    Returns:
        SpreadsheetFile
    """
    exporter = ExcelExporter()
    return exporter.export(table, filename)
