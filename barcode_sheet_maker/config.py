"""
Shared configuration and constants.
"""

import dataclasses
import pathlib


PAGE_WIDTH = 612.0
PAGE_HEIGHT = 792.0
PAGE_MARGIN = 20.0
ITEMS_PER_ROW = 3

DEFAULT_ITEM_WIDTH = 180.0
DEFAULT_ITEM_HEIGHT = 120.0
DEFAULT_LABEL_HEIGHT = 20.0
DEFAULT_COLUMN_GAP = 10.0
DEFAULT_ROW_GAP = 20.0

DEFAULT_SCALE = 3
LINEAR_BAR_HEIGHT = 32
LINEAR_QUIET_ZONE = 10
MATRIX_QUIET_ZONE = 4

DEFAULT_SYMBOLOGY = "item-code128"
ITEM_CODE_LENGTH = 8
OCR_CODE_PATTERN = r"\b\d{8}\b"

DEFAULT_FONT_REGULAR = "Helvetica"
DEFAULT_LABEL_FONT_SIZE = 12.0
IMAGE_SCALE = 0.95
PROGRESS_BAR_WIDTH = 20
PROGRESS_UPDATE_EVERY = 10

# fraction of a full run spent encoding, the rest goes to layout and rendering
ENCODE_PROGRESS_SHARE = 0.8

TEXT_FILE_SUFFIXES = {".txt", ".csv"}
SPREADSHEET_SUFFIXES = {".xlsx", ".xlsm"}
PDF_SUFFIXES = {".pdf"}
IMAGE_SUFFIXES = {".png", ".jpg", ".jpeg", ".tif", ".tiff", ".bmp"}


@dataclasses.dataclass(frozen=True)
class LayoutConfig:
	page_width: float
	page_height: float
	margin: float
	items_per_row: int
	item_width: float
	item_height: float
	label_height: float
	column_gap: float
	row_gap: float


@dataclasses.dataclass
class RenderResult:
	output_path: pathlib.Path
	pages: int
	placed_items: int


#============================================
def default_layout_config() -> LayoutConfig:
	"""
	Build the default single-page letter layout.

	Returns:
		LayoutConfig with three 180x120 cells per row.
	"""
	return LayoutConfig(
		page_width=PAGE_WIDTH,
		page_height=PAGE_HEIGHT,
		margin=PAGE_MARGIN,
		items_per_row=ITEMS_PER_ROW,
		item_width=DEFAULT_ITEM_WIDTH,
		item_height=DEFAULT_ITEM_HEIGHT,
		label_height=DEFAULT_LABEL_HEIGHT,
		column_gap=DEFAULT_COLUMN_GAP,
		row_gap=DEFAULT_ROW_GAP,
	)
