"""
Symbology registry and pure code-to-image encoders.
"""

# Standard Library
import dataclasses
import typing

# PIP3 modules
import barcode
import barcode.errors
import PIL.Image
import qrcode
import qrcode.constants
import qrcode.exceptions

# local repo modules
import barcode_sheet_maker as bsm
import barcode_sheet_maker.config
import barcode_sheet_maker.errors


EncodingFailed = bsm.errors.EncodingFailed

DEFAULT_SCALE = bsm.config.DEFAULT_SCALE
DEFAULT_SYMBOLOGY = bsm.config.DEFAULT_SYMBOLOGY
ITEM_CODE_LENGTH = bsm.config.ITEM_CODE_LENGTH
LINEAR_BAR_HEIGHT = bsm.config.LINEAR_BAR_HEIGHT
LINEAR_QUIET_ZONE = bsm.config.LINEAR_QUIET_ZONE
MATRIX_QUIET_ZONE = bsm.config.MATRIX_QUIET_ZONE
OCR_CODE_PATTERN = bsm.config.OCR_CODE_PATTERN

ALPHANUMERIC_PATTERN = r"[A-Za-z0-9]+"

Encoder = typing.Callable[[str, int], PIL.Image.Image]


@dataclasses.dataclass(frozen=True)
class CodeGrammarRule:
	exact_length: int | None = None
	description: str = "a non-empty code"

	def matches(self, code: str) -> bool:
		if self.exact_length is not None:
			return len(code) == self.exact_length
		return len(code) > 0


class UnimplementedEncoder:
	"""
	Encoder placeholder for symbologies without an implementation.

	Every call fails with an EncodingFailed marked as unimplemented so the
	batch encoder counts it like any other per-item failure.
	"""

	def __init__(self, name: str) -> None:
		self.name = name

	def __call__(self, code: str, scale: int) -> PIL.Image.Image:
		raise EncodingFailed(code, f"{self.name} encoding is not implemented", unimplemented=True)


@dataclasses.dataclass(frozen=True)
class Symbology:
	identifier: str
	label: str
	rule: CodeGrammarRule
	encoder: Encoder
	recognition_pattern: str = OCR_CODE_PATTERN

	@property
	def implemented(self) -> bool:
		return not isinstance(self.encoder, UnimplementedEncoder)


#============================================
def paint_modules(rows: list[list[bool]], scale: int) -> PIL.Image.Image:
	"""
	Paint a module matrix as a grayscale image.

	Args:
		rows: Module rows, True for a dark module.
		scale: Integer magnification applied to every module.

	Returns:
		PIL image, black modules on white.
	"""
	if scale < 1:
		raise ValueError(f"scale must be >= 1, got {scale}")
	height = len(rows)
	width = len(rows[0])
	image = PIL.Image.new("L", (width, height), 255)
	pixels: list[int] = []
	for row in rows:
		pixels.extend(0 if dark else 255 for dark in row)
	image.putdata(pixels)
	if scale == 1:
		return image
	return image.resize((width * scale, height * scale), PIL.Image.Resampling.NEAREST)


#============================================
def code128_modules(code: str) -> str:
	"""
	Build the Code 128 module string for a code.

	Args:
		code: ASCII code text.

	Returns:
		String of '1' (bar) and '0' (space) modules, check symbol and stop
		pattern included.
	"""
	if not code:
		raise EncodingFailed(code, "empty code")
	if not code.isascii():
		raise EncodingFailed(code, "Code 128 only encodes ASCII characters")
	code128_class = barcode.get_barcode_class("code128")
	try:
		modules = code128_class(code).build()[0]
	except (barcode.errors.BarcodeError, KeyError, ValueError) as error:
		raise EncodingFailed(code, str(error)) from error
	return modules


#============================================
def encode_code128(code: str, scale: int) -> PIL.Image.Image:
	"""
	Encode a code as a Code 128 linear barcode.
	"""
	modules = code128_modules(code)
	quiet = [False] * LINEAR_QUIET_ZONE
	row = quiet + [module == "1" for module in modules] + quiet
	return paint_modules([row] * LINEAR_BAR_HEIGHT, scale)


#============================================
def encode_qr(code: str, scale: int) -> PIL.Image.Image:
	"""
	Encode a code as a QR matrix code with medium error correction.
	"""
	if not code:
		raise EncodingFailed(code, "empty code")
	qr = qrcode.QRCode(
		error_correction=qrcode.constants.ERROR_CORRECT_M,
		box_size=1,
		border=MATRIX_QUIET_ZONE,
	)
	try:
		qr.add_data(code)
		qr.make(fit=True)
	except (qrcode.exceptions.DataOverflowError, ValueError) as error:
		raise EncodingFailed(code, str(error)) from error
	return paint_modules(qr.get_matrix(), scale)


SYMBOLOGIES: dict[str, Symbology] = {
	symbology.identifier: symbology
	for symbology in (
		Symbology(
			identifier="item-code128",
			label="8-digit item number (Code 128)",
			rule=CodeGrammarRule(ITEM_CODE_LENGTH, f"exactly {ITEM_CODE_LENGTH} characters"),
			encoder=encode_code128,
		),
		Symbology(
			identifier="code128",
			label="Code 128",
			rule=CodeGrammarRule(),
			encoder=encode_code128,
			recognition_pattern=ALPHANUMERIC_PATTERN,
		),
		Symbology(
			identifier="qr",
			label="QR Code",
			rule=CodeGrammarRule(),
			encoder=encode_qr,
			recognition_pattern=ALPHANUMERIC_PATTERN,
		),
		Symbology(
			identifier="pdf417",
			label="PDF417",
			rule=CodeGrammarRule(),
			encoder=UnimplementedEncoder("PDF417"),
			recognition_pattern=ALPHANUMERIC_PATTERN,
		),
		Symbology(
			identifier="aztec",
			label="Aztec Code",
			rule=CodeGrammarRule(),
			encoder=UnimplementedEncoder("Aztec"),
			recognition_pattern=ALPHANUMERIC_PATTERN,
		),
	)
}


#============================================
def get_symbology(identifier: str | None = None) -> Symbology:
	"""
	Look up a symbology by identifier.

	Args:
		identifier: Registry key, or None for the default symbology.

	Returns:
		Symbology entry.
	"""
	if identifier is None:
		identifier = DEFAULT_SYMBOLOGY
	key = identifier.strip().lower()
	if key not in SYMBOLOGIES:
		known = ", ".join(sorted(SYMBOLOGIES))
		raise ValueError(f"Unknown symbology {identifier!r} (known: {known})")
	return SYMBOLOGIES[key]


#============================================
def encode(code: str, symbology: Symbology, scale: int = DEFAULT_SCALE) -> PIL.Image.Image:
	"""
	Encode one validated code with the given symbology.

	The result depends only on the arguments, so repeated calls return
	identical pixels.

	Args:
		code: Validated code.
		symbology: Symbology entry.
		scale: Module magnification.

	Returns:
		Encoded PIL image.

	Raises:
		EncodingFailed: The code cannot be encoded with this symbology.
	"""
	return symbology.encoder(code, scale)
