"""
PDF rendering, preview images and run manifests.
"""

# Standard Library
import json
import pathlib

# PIP3 modules
import reportlab.lib.utils
import reportlab.pdfbase.pdfmetrics
import reportlab.pdfgen.canvas

# local repo modules
import barcode_sheet_maker as bsm
import barcode_sheet_maker.batch
import barcode_sheet_maker.config
import barcode_sheet_maker.errors
import barcode_sheet_maker.layout


BatchResult = bsm.batch.BatchResult
EncodedItem = bsm.batch.EncodedItem
Document = bsm.layout.Document
PagePlacement = bsm.layout.PagePlacement
LayoutConfig = bsm.config.LayoutConfig
RenderResult = bsm.config.RenderResult
RenderFailed = bsm.errors.RenderFailed

DEFAULT_FONT_REGULAR = bsm.config.DEFAULT_FONT_REGULAR
DEFAULT_LABEL_FONT_SIZE = bsm.config.DEFAULT_LABEL_FONT_SIZE
IMAGE_SCALE = bsm.config.IMAGE_SCALE


#============================================
def fit_font_size(text: str, font_name: str, font_size: float, max_width: float) -> float:
	"""
	Shrink a font size until the text fits the given width.

	Args:
		text: Text content.
		font_name: ReportLab font name.
		font_size: Preferred size in points.
		max_width: Available width in points.

	Returns:
		Font size in points.
	"""
	width = reportlab.pdfbase.pdfmetrics.stringWidth(text, font_name, font_size)
	if width <= max_width or width <= 0:
		return font_size
	return font_size * max_width / width


#============================================
def draw_placement(
	pdf: reportlab.pdfgen.canvas.Canvas,
	placement: PagePlacement,
	page_height: float,
) -> None:
	"""
	Draw one encoded item and its code label.

	Args:
		pdf: ReportLab canvas.
		placement: Placement in top-left page coordinates.
		page_height: Page height used to flip into PDF coordinates.
	"""
	img_x, img_y, img_width, img_height = placement.image_rect
	pdf_y = page_height - img_y - img_height
	inset_x = img_width * (1.0 - IMAGE_SCALE) / 2.0
	inset_y = img_height * (1.0 - IMAGE_SCALE) / 2.0
	pdf.drawImage(
		reportlab.lib.utils.ImageReader(placement.image),
		img_x + inset_x,
		pdf_y + inset_y,
		width=img_width * IMAGE_SCALE,
		height=img_height * IMAGE_SCALE,
		preserveAspectRatio=True,
		anchor="c",
	)

	label_x, label_y, label_width, label_height = placement.label_rect
	font_size = fit_font_size(placement.code, DEFAULT_FONT_REGULAR, DEFAULT_LABEL_FONT_SIZE, label_width)
	font_size = min(font_size, label_height)
	ascent = reportlab.pdfbase.pdfmetrics.getAscent(DEFAULT_FONT_REGULAR) * font_size / 1000.0
	descent = reportlab.pdfbase.pdfmetrics.getDescent(DEFAULT_FONT_REGULAR) * font_size / 1000.0
	label_bottom = page_height - label_y - label_height
	baseline = label_bottom + (label_height - (ascent - descent)) / 2.0 - descent
	pdf.setFont(DEFAULT_FONT_REGULAR, font_size)
	pdf.setFillColorRGB(0.0, 0.0, 0.0)
	pdf.drawCentredString(label_x + label_width / 2.0, baseline, placement.code)


#============================================
def render_document(document: Document, output_path: pathlib.Path) -> RenderResult:
	"""
	Render a laid-out document to a PDF file.

	Args:
		document: Document from layout().
		output_path: Output PDF path.

	Returns:
		RenderResult.

	Raises:
		RenderFailed: Nothing to render or the file could not be written.
	"""
	output_path = pathlib.Path(output_path)
	if not document.pages:
		raise RenderFailed("Failed to save PDF: the document has no pages.")
	try:
		pdf = reportlab.pdfgen.canvas.Canvas(
			str(output_path),
			pagesize=(document.page_width, document.page_height),
		)
		for page in document.pages:
			for placement in page.placements:
				draw_placement(pdf, placement, document.page_height)
			pdf.showPage()
		pdf.save()
	except (OSError, ValueError) as error:
		raise RenderFailed(f"Failed to save PDF: {error}") from error
	return RenderResult(
		output_path=output_path,
		pages=len(document.pages),
		placed_items=document.placement_count,
	)


#============================================
def save_preview(item: EncodedItem, output_path: pathlib.Path) -> pathlib.Path:
	"""
	Write an encoded item's image as a PNG preview.

	Args:
		item: Successful encoded item.
		output_path: PNG path.

	Returns:
		The written path.
	"""
	output_path = pathlib.Path(output_path)
	try:
		output_path.write_bytes(item.png_bytes())
	except OSError as error:
		raise RenderFailed(f"Failed to save preview {output_path.name}: {error}") from error
	return output_path


#============================================
def write_manifest(
	manifest_path: pathlib.Path,
	batch: BatchResult,
	result: RenderResult,
	config: LayoutConfig,
) -> None:
	"""
	Write a manifest JSON file.

	Args:
		manifest_path: Output path.
		batch: Encoded batch.
		result: Render result.
		config: Layout configuration.
	"""
	data = {
		"output": str(result.output_path),
		"symbology": batch.symbology.identifier,
		"codes": batch.codes(),
		"failures": [
			{"position": item.position, "code": item.code, "error": item.error}
			for item in batch.failures
		],
		"total_items": batch.total,
		"placed_items": result.placed_items,
		"failed_items": batch.failure_count,
		"pages": result.pages,
		"layout": {
			"page_width": config.page_width,
			"page_height": config.page_height,
			"margin": config.margin,
			"items_per_row": config.items_per_row,
			"item_width": config.item_width,
			"item_height": config.item_height,
			"label_height": config.label_height,
			"column_gap": config.column_gap,
			"row_gap": config.row_gap,
		},
		"fonts": {
			"label": DEFAULT_FONT_REGULAR,
			"label_size": DEFAULT_LABEL_FONT_SIZE,
		},
	}
	with manifest_path.open("w", encoding="utf-8") as handle:
		json.dump(data, handle, indent=2, sort_keys=True)
