"""
Grid packing of encoded items onto fixed-size pages.

Coordinates use a top-left origin with y growing down the page; the renderer
converts to PDF space.
"""

# Standard Library
import dataclasses

# PIP3 modules
import PIL.Image

# local repo modules
import barcode_sheet_maker as bsm
import barcode_sheet_maker.batch
import barcode_sheet_maker.config
import barcode_sheet_maker.progress


BatchResult = bsm.batch.BatchResult
LayoutConfig = bsm.config.LayoutConfig
ProgressSink = bsm.progress.ProgressSink

Rect = tuple[float, float, float, float]


@dataclasses.dataclass(frozen=True)
class PagePlacement:
	page_index: int
	position: int
	x: float
	y: float
	width: float
	height: float
	code: str
	image: PIL.Image.Image
	label_height: float

	@property
	def rect(self) -> Rect:
		return (self.x, self.y, self.width, self.height)

	@property
	def image_rect(self) -> Rect:
		return (self.x, self.y, self.width, self.height - self.label_height)

	@property
	def label_rect(self) -> Rect:
		return (self.x, self.y + self.height - self.label_height, self.width, self.label_height)


@dataclasses.dataclass
class Page:
	index: int
	placements: list[PagePlacement] = dataclasses.field(default_factory=list)


@dataclasses.dataclass
class Document:
	page_width: float
	page_height: float
	pages: list[Page] = dataclasses.field(default_factory=list)

	@property
	def placement_count(self) -> int:
		return sum(len(page.placements) for page in self.pages)


#============================================
def check_layout_config(config: LayoutConfig) -> None:
	"""
	Reject layouts whose cells cannot fit the content area.

	Args:
		config: Layout configuration.
	"""
	if config.items_per_row < 1:
		raise ValueError(f"items_per_row must be >= 1, got {config.items_per_row}")
	if config.item_width <= 0 or config.item_height <= 0:
		raise ValueError("item cell size must be positive")
	if not 0 <= config.label_height < config.item_height:
		raise ValueError("label strip must be shorter than the item cell")
	content_width = config.page_width - 2.0 * config.margin
	content_height = config.page_height - 2.0 * config.margin
	row_width = (
		config.items_per_row * config.item_width
		+ (config.items_per_row - 1) * config.column_gap
	)
	if row_width > content_width:
		raise ValueError(
			f"{config.items_per_row} items per row need {row_width:.1f} units, "
			f"page content is {content_width:.1f} wide"
		)
	if config.item_height > content_height:
		raise ValueError(
			f"item height {config.item_height:.1f} exceeds page content height {content_height:.1f}"
		)


#============================================
def layout(
	batch: BatchResult,
	config: LayoutConfig | None = None,
	progress: ProgressSink | None = None,
) -> Document:
	"""
	Place the batch's encoded items in a row-major grid across pages.

	After every completed row the cursor moves down one cell height plus the
	row gap. When the next row would cross the bottom margin a new page is
	started, but only while items remain, so no page is ever empty.

	Args:
		batch: Batch result; only successes are placed.
		config: Layout configuration, defaults to default_layout_config().
		progress: Optional progress sink, updated after each placement.

	Returns:
		Document with ordered pages of placements.
	"""
	if config is None:
		config = bsm.config.default_layout_config()
	check_layout_config(config)

	document = Document(page_width=config.page_width, page_height=config.page_height)
	items = batch.successes
	total = len(items)
	if total == 0:
		return document

	bottom = config.page_height - config.margin
	page = Page(index=0)
	document.pages.append(page)
	x = config.margin
	y = config.margin
	column = 0
	for index, item in enumerate(items):
		page.placements.append(
			PagePlacement(
				page_index=page.index,
				position=item.position,
				x=x,
				y=y,
				width=config.item_width,
				height=config.item_height,
				code=item.code,
				image=item.image,
				label_height=config.label_height,
			)
		)
		column += 1
		if column == config.items_per_row:
			column = 0
			x = config.margin
			y += config.item_height + config.row_gap
		else:
			x += config.item_width + config.column_gap

		if y + config.item_height > bottom and index < total - 1:
			page = Page(index=page.index + 1)
			document.pages.append(page)
			x = config.margin
			y = config.margin
			column = 0

		if progress is not None:
			progress.update((index + 1) / total)
	return document
