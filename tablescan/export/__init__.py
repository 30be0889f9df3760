"""Export module for writing extracted tables to Excel spreadsheets."""

from .excel import ExcelExporter, SpreadsheetFile

__all__ = ["ExcelExporter", "SpreadsheetFile"]
