"""
Candidate code extraction from typed text, files and recognized image text.
"""

# Standard Library
import dataclasses
import enum
import io
import pathlib
import re
import xml.etree.ElementTree as StdElementTree
import zipfile

# PIP3 modules
import openpyxl
import openpyxl.utils.exceptions
import PIL.Image
import pypdf
import pypdf.errors

# local repo modules
import barcode_sheet_maker as bsm
import barcode_sheet_maker.config
import barcode_sheet_maker.errors


UnsupportedInputFormat = bsm.errors.UnsupportedInputFormat
ResourceAccessDenied = bsm.errors.ResourceAccessDenied

OCR_CODE_PATTERN = bsm.config.OCR_CODE_PATTERN
TEXT_FILE_SUFFIXES = bsm.config.TEXT_FILE_SUFFIXES
SPREADSHEET_SUFFIXES = bsm.config.SPREADSHEET_SUFFIXES
PDF_SUFFIXES = bsm.config.PDF_SUFFIXES
IMAGE_SUFFIXES = bsm.config.IMAGE_SUFFIXES

TYPED_DELIMITERS = re.compile(r"[,\s\-]+")
FILE_DELIMITERS = re.compile(r"[^0-9A-Za-z]+")

# sheet XML is parsed lazily while rows are read; lxml parse errors also derive from SyntaxError
SPREADSHEET_ERRORS = (
	zipfile.BadZipFile,
	openpyxl.utils.exceptions.InvalidFileException,
	StdElementTree.ParseError,
	SyntaxError,
	KeyError,
	ValueError,
	OSError,
)


class SourceKind(enum.Enum):
	TEXT = "text"
	TEXT_FILE = "text_file"
	SPREADSHEET = "spreadsheet"
	PDF = "pdf"
	IMAGE = "image"
	OBSERVATIONS = "observations"


@dataclasses.dataclass(frozen=True)
class RecognizedText:
	text: str
	confidence: float


@dataclasses.dataclass(frozen=True)
class TextObservation:
	candidates: tuple[RecognizedText, ...]

	def top_candidate(self) -> RecognizedText | None:
		if not self.candidates:
			return None
		return max(self.candidates, key=lambda candidate: candidate.confidence)


@dataclasses.dataclass(frozen=True)
class InputSource:
	kind: SourceKind
	payload: object
	name: str = ""


#============================================
def extract_from_text(text: str) -> list[str]:
	"""
	Split typed input on commas, whitespace and hyphens.

	Args:
		text: Typed or pasted text.

	Returns:
		Non-empty tokens in left-to-right order.
	"""
	return [token for token in TYPED_DELIMITERS.split(text) if token]


#============================================
def extract_from_file_text(text: str) -> list[str]:
	"""
	Split file text on every character that is not a letter or digit.
	"""
	return [token for token in FILE_DELIMITERS.split(text) if token]


#============================================
def extract_from_text_file(data: bytes) -> list[str]:
	"""
	Extract candidates from text file bytes.

	Args:
		data: File content, decoded as UTF-8 with undecodable bytes replaced.

	Returns:
		Alphanumeric tokens in file order.
	"""
	return extract_from_file_text(data.decode("utf-8", errors="replace"))


#============================================
def extract_from_pdf(data: bytes) -> list[str]:
	"""
	Extract candidates from the embedded text of every PDF page.

	Args:
		data: PDF file content.

	Returns:
		Alphanumeric tokens in page order, empty for unreadable PDFs.
	"""
	try:
		reader = pypdf.PdfReader(io.BytesIO(data))
		page_texts = [page.extract_text() or "" for page in reader.pages]
	except (pypdf.errors.PyPdfError, AttributeError, KeyError, TypeError, ValueError, OSError):
		return []
	return extract_from_file_text("\n".join(page_texts))


#============================================
def render_cell_value(value: object) -> str:
	"""
	Render a spreadsheet cell value as the text a user would see.

	Args:
		value: Cell value from openpyxl.

	Returns:
		String value, integral floats without a decimal part.
	"""
	if value is None:
		return ""
	if isinstance(value, bool):
		return str(value).upper()
	if isinstance(value, float) and value.is_integer():
		return str(int(value))
	return str(value).strip()


#============================================
def extract_from_spreadsheet(data: bytes) -> list[str]:
	"""
	Walk every cell of every sheet and keep the all-digit values.

	Args:
		data: XLSX workbook content.

	Returns:
		Digit-only cell strings in sheet, row, cell order.
	"""
	workbook = None
	candidates: list[str] = []
	try:
		workbook = openpyxl.load_workbook(io.BytesIO(data), read_only=True, data_only=True)
		for sheet in workbook.worksheets:
			for row in sheet.iter_rows(values_only=True):
				for value in row:
					text = render_cell_value(value)
					if text and text.isdecimal() and text.isascii():
						candidates.append(text)
	except SPREADSHEET_ERRORS:
		return []
	finally:
		if workbook is not None:
			workbook.close()
	return candidates


#============================================
def extract_from_observations(
	observations: list[TextObservation],
	pattern: str = OCR_CODE_PATTERN,
) -> list[str]:
	"""
	Scan recognized text regions for code-shaped matches.

	Only the highest-confidence candidate of each region is scanned. Regions
	are taken in detection order, which is not necessarily reading order.

	Args:
		observations: Recognized regions.
		pattern: Regular expression a code must match.

	Returns:
		Every non-overlapping match in region order.
	"""
	regex = re.compile(pattern)
	candidates: list[str] = []
	for observation in observations:
		top = observation.top_candidate()
		if top is None:
			continue
		candidates.extend(match.group(0) for match in regex.finditer(top.text))
	return candidates


#============================================
def recognize_image(data: bytes) -> list[TextObservation]:
	"""
	Run Tesseract OCR over an image and group words into line regions.

	pytesseract is imported here so the rest of the package works without a
	Tesseract install.

	Args:
		data: Encoded image bytes.

	Returns:
		One observation per recognized line, confidence averaged over words.
	"""
	import pytesseract

	try:
		image = PIL.Image.open(io.BytesIO(data))
		image.load()
	except (PIL.UnidentifiedImageError, OSError):
		return []
	try:
		table = pytesseract.image_to_data(image, output_type=pytesseract.Output.DICT)
	except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError, OSError):
		return []

	lines: dict[tuple[int, int, int], list[tuple[str, float]]] = {}
	for index, word in enumerate(table["text"]):
		word = (word or "").strip()
		confidence = float(table["conf"][index])
		if not word or confidence < 0:
			continue
		key = (table["block_num"][index], table["par_num"][index], table["line_num"][index])
		lines.setdefault(key, []).append((word, confidence))

	observations: list[TextObservation] = []
	for words in lines.values():
		text = " ".join(word for word, _confidence in words)
		confidence = sum(confidence for _word, confidence in words) / len(words)
		observations.append(TextObservation((RecognizedText(text, confidence / 100.0),)))
	return observations


#============================================
def extract(source: InputSource, pattern: str = OCR_CODE_PATTERN) -> list[str]:
	"""
	Extract candidate codes from any supported input source.

	Args:
		source: Input source.
		pattern: Code pattern used for recognized image text.

	Returns:
		Candidate codes in source order, possibly empty.
	"""
	if source.kind is SourceKind.TEXT:
		return extract_from_text(str(source.payload))
	if source.kind is SourceKind.TEXT_FILE:
		return extract_from_text_file(bytes(source.payload))
	if source.kind is SourceKind.SPREADSHEET:
		return extract_from_spreadsheet(bytes(source.payload))
	if source.kind is SourceKind.PDF:
		return extract_from_pdf(bytes(source.payload))
	if source.kind is SourceKind.IMAGE:
		return extract_from_observations(recognize_image(bytes(source.payload)), pattern)
	if source.kind is SourceKind.OBSERVATIONS:
		return extract_from_observations(list(source.payload), pattern)
	raise UnsupportedInputFormat(source.name or str(source.kind))


#============================================
def source_kind_for_path(path: pathlib.Path) -> SourceKind:
	"""
	Map a file suffix to a source kind.

	Args:
		path: Input file path.

	Returns:
		SourceKind for the suffix.
	"""
	suffix = path.suffix.lower()
	if suffix in TEXT_FILE_SUFFIXES:
		return SourceKind.TEXT_FILE
	if suffix in SPREADSHEET_SUFFIXES:
		return SourceKind.SPREADSHEET
	if suffix in PDF_SUFFIXES:
		return SourceKind.PDF
	if suffix in IMAGE_SUFFIXES:
		return SourceKind.IMAGE
	raise UnsupportedInputFormat(path.name)


#============================================
def load_source(path: str | pathlib.Path) -> InputSource:
	"""
	Read an input file into an InputSource.

	Args:
		path: File path.

	Returns:
		InputSource holding the raw file bytes.
	"""
	path = pathlib.Path(path).expanduser()
	kind = source_kind_for_path(path)
	try:
		data = path.read_bytes()
	except OSError as error:
		raise ResourceAccessDenied(path.name, error.strerror or str(error)) from error
	return InputSource(kind=kind, payload=data, name=path.name)
