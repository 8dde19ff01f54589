"""Export encoders."""

from .spreadsheet_exporter import SpreadsheetExporter, collect_headers

__all__ = ["SpreadsheetExporter", "collect_headers"]
