"""
Batch encoding of validated codes.
"""

# Standard Library
import dataclasses
import io

# PIP3 modules
import PIL.Image

# local repo modules
import barcode_sheet_maker as bsm
import barcode_sheet_maker.config
import barcode_sheet_maker.errors
import barcode_sheet_maker.progress
import barcode_sheet_maker.symbology


EncodingFailed = bsm.errors.EncodingFailed
Symbology = bsm.symbology.Symbology
ProgressSink = bsm.progress.ProgressSink

DEFAULT_SCALE = bsm.config.DEFAULT_SCALE


@dataclasses.dataclass(frozen=True)
class EncodedItem:
	position: int
	code: str
	image: PIL.Image.Image | None = None
	error: str | None = None
	unimplemented: bool = False

	@property
	def ok(self) -> bool:
		return self.image is not None

	def png_bytes(self) -> bytes:
		if self.image is None:
			raise ValueError(f"item {self.position} ({self.code!r}) has no image")
		buffer = io.BytesIO()
		self.image.save(buffer, format="PNG")
		return buffer.getvalue()


@dataclasses.dataclass(frozen=True)
class BatchResult:
	symbology: Symbology
	successes: tuple[EncodedItem, ...]
	failures: tuple[EncodedItem, ...] = ()

	@property
	def failure_count(self) -> int:
		return len(self.failures)

	@property
	def total(self) -> int:
		return len(self.successes) + len(self.failures)

	@property
	def first(self) -> EncodedItem | None:
		if not self.successes:
			return None
		return self.successes[0]

	@property
	def last(self) -> EncodedItem | None:
		if not self.successes:
			return None
		return self.successes[-1]

	def codes(self) -> list[str]:
		return [item.code for item in self.successes]


#============================================
def encode_batch(
	validated: list[str],
	symbology: Symbology,
	scale: int = DEFAULT_SCALE,
	progress: ProgressSink | None = None,
	verbose: bool = False,
) -> BatchResult:
	"""
	Encode every validated code in order.

	A code that fails to encode is recorded as a failure and the batch
	continues. Progress receives processed/total after each item.

	Args:
		validated: Validated codes.
		symbology: Active symbology.
		scale: Module magnification.
		progress: Optional progress sink.
		verbose: Print per-item failures.

	Returns:
		BatchResult with successes and failures in input order.
	"""
	successes: list[EncodedItem] = []
	failures: list[EncodedItem] = []
	total = len(validated)
	for position, code in enumerate(validated):
		try:
			image = bsm.symbology.encode(code, symbology, scale)
		except EncodingFailed as error:
			failures.append(
				EncodedItem(
					position=position,
					code=code,
					error=error.reason,
					unimplemented=error.unimplemented,
				)
			)
			if verbose:
				print(error.message)
		else:
			successes.append(EncodedItem(position=position, code=code, image=image))
		if progress is not None:
			progress.update((position + 1) / total)
	if verbose and failures:
		print(f"Encoding failures: {len(failures)} of {total}")
	return BatchResult(
		symbology=symbology,
		successes=tuple(successes),
		failures=tuple(failures),
	)
