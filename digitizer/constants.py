from __future__ import annotations

# Single source of truth for static constants.

PDF_MEDIA_TYPE = "application/pdf"
PNG_MEDIA_TYPE = "image/png"
IMAGE_MEDIA_PREFIX = "image/"

# Display label for a rasterized PDF page (1-indexed).
PDF_PAGE_NAME_TEMPLATE = "{file_name} - Page {page_number}"

# Excel limits sheet titles to 31 characters.
MAX_SHEET_TITLE_LENGTH = 31
MULTI_SHEET_TITLE_TEMPLATE = "Page {index}"
MASTER_SHEET_TITLE = "Master Data"
MASTER_PAGE_NUMBER_COLUMN = "Page Number"
MASTER_SOURCE_FILE_COLUMN = "Source File"

DEFAULT_MULTI_SHEET_FILENAME = "digitized_data.xlsx"
DEFAULT_MASTER_SHEET_FILENAME = "master_data.xlsx"
DEFAULT_CSV_FILENAME = "data.csv"

NOTHING_TO_EXPORT_MESSAGE = "No extracted data available to export."

# Filler for columns a row is missing after schema reconciliation.
MISSING_CELL_VALUE = ""

# Pixel filter bounds.
VALID_ROTATIONS = (0, 90, 180, 270)
ADJUSTMENT_LIMIT = 255
MAX_THRESHOLD = 255
