"""
Stateless generate/layout/render pipeline plus a caller-owned session.
"""

# Standard Library
import concurrent.futures
import dataclasses
import pathlib
import queue

# local repo modules
import barcode_sheet_maker as bsm
import barcode_sheet_maker.batch
import barcode_sheet_maker.config
import barcode_sheet_maker.errors
import barcode_sheet_maker.extract
import barcode_sheet_maker.layout
import barcode_sheet_maker.progress
import barcode_sheet_maker.render
import barcode_sheet_maker.symbology
import barcode_sheet_maker.validate


BatchResult = bsm.batch.BatchResult
Document = bsm.layout.Document
InputSource = bsm.extract.InputSource
LayoutConfig = bsm.config.LayoutConfig
RenderResult = bsm.config.RenderResult
ProgressReporter = bsm.progress.ProgressReporter
ProgressSink = bsm.progress.ProgressSink
Symbology = bsm.symbology.Symbology
EmptyBatch = bsm.errors.EmptyBatch
NoValidCodes = bsm.errors.NoValidCodes

DEFAULT_SCALE = bsm.config.DEFAULT_SCALE
ENCODE_PROGRESS_SHARE = bsm.config.ENCODE_PROGRESS_SHARE


#============================================
def resolve_symbology(symbology: Symbology | str | None) -> Symbology:
	"""
	Accept a Symbology entry, an identifier, or None for the default.
	"""
	if isinstance(symbology, Symbology):
		return symbology
	return bsm.symbology.get_symbology(symbology)


#============================================
def generate(
	source: InputSource,
	symbology: Symbology | str | None = None,
	scale: int = DEFAULT_SCALE,
	progress: ProgressSink | None = None,
	verbose: bool = False,
) -> BatchResult:
	"""
	Extract, validate and encode one batch.

	Args:
		source: Input source.
		symbology: Symbology entry or identifier, default when None.
		scale: Module magnification.
		progress: Optional progress sink; a reporter is reset once validation passes.
		verbose: Print stage summaries.

	Returns:
		BatchResult with at least one success.

	Raises:
		EmptyBatch: The source held no candidates.
		NoValidCodes: Nothing passed validation, the symbology has no encoder,
			or nothing could be encoded.
	"""
	active = resolve_symbology(symbology)

	candidates = bsm.extract.extract(source, active.recognition_pattern)
	if verbose:
		print(f"Candidates extracted: {len(candidates)}")
	if not candidates:
		raise EmptyBatch()

	validated = bsm.validate.validate(candidates, active)
	if verbose:
		print(f"Codes accepted for {active.label}: {len(validated)}")
	if not active.implemented:
		raise NoValidCodes(active.label)

	if isinstance(progress, ProgressReporter):
		progress.reset()
	# 1.0 is held back until the batch is known to have a success
	encode_progress = None
	if progress is not None:
		encode_progress = progress.span(0.0, len(validated) / (len(validated) + 1))
	batch = bsm.batch.encode_batch(validated, active, scale, encode_progress, verbose)
	if not batch.successes:
		raise NoValidCodes(active.label)
	if progress is not None:
		progress.update(1.0)
	if verbose:
		print(f"Barcodes encoded: {len(batch.successes)}")
	return batch


#============================================
def build_document(
	batch: BatchResult,
	config: LayoutConfig | None = None,
	progress: ProgressSink | None = None,
) -> Document:
	"""
	Lay out a batch onto pages.
	"""
	return bsm.layout.layout(batch, config, progress)


#============================================
def save_pdf(
	batch: BatchResult,
	output_path: pathlib.Path,
	config: LayoutConfig | None = None,
	progress: ProgressSink | None = None,
) -> tuple[Document, RenderResult]:
	"""
	Lay out a batch and render it to a PDF.

	Args:
		batch: Encoded batch.
		output_path: Output PDF path.
		config: Layout configuration.
		progress: Optional progress sink for the layout stage.

	Returns:
		Tuple of (document, render result).
	"""
	document = build_document(batch, config, progress)
	result = bsm.render.render_document(document, pathlib.Path(output_path))
	return document, result


@dataclasses.dataclass
class RunOutput:
	batch: BatchResult
	document: Document
	result: RenderResult


@dataclasses.dataclass
class BackgroundRun:
	future: "concurrent.futures.Future[RunOutput]"
	progress: "queue.Queue[float]"


#============================================
def run_to_pdf(
	source: InputSource,
	output_path: pathlib.Path,
	symbology: Symbology | str | None = None,
	config: LayoutConfig | None = None,
	scale: int = DEFAULT_SCALE,
	progress: ProgressReporter | None = None,
) -> RunOutput:
	"""
	Run generate and save as one run with a single progress scale.

	Encoding covers the first ENCODE_PROGRESS_SHARE of the progress range,
	layout covers the rest.
	"""
	if progress is None:
		progress = ProgressReporter()
	progress.reset()
	batch = generate(source, symbology, scale, progress.span(0.0, ENCODE_PROGRESS_SHARE))
	document, result = save_pdf(
		batch,
		output_path,
		config,
		progress.span(ENCODE_PROGRESS_SHARE, 1.0),
	)
	return RunOutput(batch=batch, document=document, result=result)


#============================================
def run_in_background(
	source: InputSource,
	output_path: pathlib.Path,
	symbology: Symbology | str | None = None,
	config: LayoutConfig | None = None,
	scale: int = DEFAULT_SCALE,
	executor: concurrent.futures.Executor | None = None,
) -> BackgroundRun:
	"""
	Run the whole pipeline on a single background worker.

	The returned future resolves to a RunOutput or raises the run's
	BarcodeBatchError. Progress values arrive on the queue as they are
	produced. There is no cancellation once the worker has started.

	Args:
		source: Input source.
		output_path: Output PDF path.
		symbology: Symbology entry or identifier.
		config: Layout configuration.
		scale: Module magnification.
		executor: Executor to submit to; a one-worker pool is created when None.

	Returns:
		BackgroundRun with the future and the progress queue.
	"""
	reporter = ProgressReporter()
	channel = reporter.subscribe_queue()
	owned_executor = executor is None
	if executor is None:
		executor = concurrent.futures.ThreadPoolExecutor(max_workers=1)
	future = executor.submit(run_to_pdf, source, output_path, symbology, config, scale, reporter)
	if owned_executor:
		executor.shutdown(wait=False)
	return BackgroundRun(future=future, progress=channel)


class BatchSession:
	"""
	Caller-owned state for an interactive generate/save workflow.

	A successful generate replaces the batch wholesale; a failed one leaves
	the previous batch untouched.
	"""

	def __init__(self, progress: ProgressReporter | None = None) -> None:
		self.batch: BatchResult | None = None
		self.progress = progress or ProgressReporter()

	def generate(
		self,
		source: InputSource,
		symbology: Symbology | str | None = None,
		scale: int = DEFAULT_SCALE,
	) -> BatchResult:
		batch = generate(source, symbology, scale, self.progress)
		self.batch = batch
		return batch

	def generate_from_text(self, text: str, symbology: Symbology | str | None = None) -> BatchResult:
		source = InputSource(kind=bsm.extract.SourceKind.TEXT, payload=text)
		return self.generate(source, symbology)

	def save_pdf(
		self,
		output_path: pathlib.Path,
		config: LayoutConfig | None = None,
		clear_after_save: bool = False,
	) -> RenderResult:
		if self.batch is None:
			raise EmptyBatch("Nothing to save: generate barcodes first.")
		_document, result = save_pdf(self.batch, output_path, config)
		if clear_after_save:
			self.reset()
		return result

	def reset(self) -> None:
		self.batch = None
		self.progress.reset()

	@property
	def preview(self) -> tuple[bsm.batch.EncodedItem | None, bsm.batch.EncodedItem | None]:
		if self.batch is None:
			return (None, None)
		return (self.batch.first, self.batch.last)
