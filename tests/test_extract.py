import io
import pathlib
import zipfile

import openpyxl
import pytest
import reportlab.pdfgen.canvas

import barcode_sheet_maker.errors
import barcode_sheet_maker.extract


extract = barcode_sheet_maker.extract
RecognizedText = extract.RecognizedText
TextObservation = extract.TextObservation


#============================================
def _build_workbook(rows_by_sheet: list[list[list[object]]]) -> bytes:
	"""
	Build an XLSX workbook in memory.

	Args:
		rows_by_sheet: Rows for each sheet, in sheet order.

	Returns:
		Workbook bytes.
	"""
	workbook = openpyxl.Workbook()
	workbook.remove(workbook.active)
	for index, rows in enumerate(rows_by_sheet):
		sheet = workbook.create_sheet(f"Sheet{index + 1}")
		for row in rows:
			sheet.append(row)
	buffer = io.BytesIO()
	workbook.save(buffer)
	return buffer.getvalue()


#============================================
def test_typed_text_keeps_token_order() -> None:
	"""
	Tokens come back left to right with delimiters removed.
	"""
	text = "12345678, 1234567-87654321\tABC\n\n00000001"
	assert extract.extract_from_text(text) == ["12345678", "1234567", "87654321", "ABC", "00000001"]


#============================================
def test_typed_text_empty_and_delimiters_only() -> None:
	"""
	Empty input and pure delimiters produce no candidates.
	"""
	assert extract.extract_from_text("") == []
	assert extract.extract_from_text(" ,- ,\n") == []


#============================================
def test_text_file_splits_on_punctuation() -> None:
	"""
	File text is split on anything that is not a letter or digit.
	"""
	data = b"Item: 12345678.\r\nnext=87654321;"
	assert extract.extract_from_text_file(data) == ["Item", "12345678", "next", "87654321"]


#============================================
def test_spreadsheet_keeps_digit_cells_only() -> None:
	"""
	Non-digit cells are discarded at extraction time.
	"""
	data = _build_workbook([[["50591532", "ABC", "00000001"]]])
	assert extract.extract_from_spreadsheet(data) == ["50591532", "00000001"]


#============================================
def test_spreadsheet_walks_sheets_rows_and_numbers() -> None:
	"""
	Sheets, rows and cells are walked in document order; integral numbers render plainly.
	"""
	data = _build_workbook([
		[[12345678, None, 1.5], ["87654321"]],
		[["11112222", "12-34"]],
	])
	assert extract.extract_from_spreadsheet(data) == ["12345678", "87654321", "11112222"]


#============================================
def test_spreadsheet_corrupt_bytes_yield_nothing() -> None:
	"""
	Unreadable workbooks surface as an empty candidate list.
	"""
	assert extract.extract_from_spreadsheet(b"not a workbook") == []


#============================================
def test_spreadsheet_truncated_sheet_yields_nothing() -> None:
	"""
	A worksheet whose XML is cut short is treated as unreadable.
	"""
	data = _build_workbook([[[12345678], [87654321], ["11112222"]]])
	damaged = io.BytesIO()
	with zipfile.ZipFile(io.BytesIO(data)) as source, zipfile.ZipFile(damaged, "w") as target:
		for name in source.namelist():
			content = source.read(name)
			if name == "xl/worksheets/sheet1.xml":
				content = content[: len(content) // 2]
			target.writestr(name, content)
	assert extract.extract_from_spreadsheet(damaged.getvalue()) == []


#============================================
def test_pdf_text_is_extracted(tmp_path: pathlib.Path) -> None:
	"""
	Embedded PDF text is scanned like a text file.
	"""
	pdf_path = tmp_path / "codes.pdf"
	pdf = reportlab.pdfgen.canvas.Canvas(str(pdf_path))
	pdf.drawString(72, 720, "Order 12345678 and 87654321")
	pdf.save()
	candidates = extract.extract_from_pdf(pdf_path.read_bytes())
	assert "12345678" in candidates
	assert "87654321" in candidates
	assert candidates.index("12345678") < candidates.index("87654321")


#============================================
def test_pdf_corrupt_bytes_yield_nothing() -> None:
	"""
	A broken PDF does not raise.
	"""
	assert extract.extract_from_pdf(b"%PDF-garbage") == []


#============================================
def test_observations_use_top_candidate_and_digit_runs() -> None:
	"""
	Only the best candidate per region is scanned for 8-digit runs.
	"""
	observations = [
		TextObservation((
			RecognizedText("ITEM 1234S678", 0.40),
			RecognizedText("ITEM 12345678 / 87654321", 0.92),
		)),
		TextObservation((RecognizedText("123456789 is too long", 0.99),)),
		TextObservation(()),
		TextObservation((RecognizedText("lot 55556666", 0.70),)),
	]
	assert extract.extract_from_observations(observations) == ["12345678", "87654321", "55556666"]


#============================================
def test_observations_custom_pattern() -> None:
	"""
	A symbology-specific pattern replaces the default 8-digit rule.
	"""
	observations = [TextObservation((RecognizedText("SKU-AB12 x", 0.9),))]
	assert extract.extract_from_observations(observations, r"[A-Z]{2}\d{2}") == ["AB12"]


#============================================
def test_extract_dispatches_observations() -> None:
	"""
	Observation sources go through the recognized-text scanner.
	"""
	source = extract.InputSource(
		kind=extract.SourceKind.OBSERVATIONS,
		payload=[TextObservation((RecognizedText("87654321", 1.0),))],
	)
	assert extract.extract(source) == ["87654321"]


#============================================
def test_load_source_by_suffix(tmp_path: pathlib.Path) -> None:
	"""
	Known suffixes map to source kinds and the raw bytes are kept.
	"""
	path = tmp_path / "codes.TXT"
	path.write_bytes(b"12345678")
	source = extract.load_source(path)
	assert source.kind is extract.SourceKind.TEXT_FILE
	assert source.payload == b"12345678"
	assert source.name == "codes.TXT"
	assert extract.extract(source) == ["12345678"]


#============================================
def test_load_source_unsupported_suffix(tmp_path: pathlib.Path) -> None:
	"""
	Unknown file types raise UnsupportedInputFormat.
	"""
	path = tmp_path / "codes.docx"
	path.write_bytes(b"")
	with pytest.raises(barcode_sheet_maker.errors.UnsupportedInputFormat):
		extract.load_source(path)


#============================================
def test_load_source_unreadable(tmp_path: pathlib.Path) -> None:
	"""
	Missing files raise ResourceAccessDenied.
	"""
	with pytest.raises(barcode_sheet_maker.errors.ResourceAccessDenied) as info:
		extract.load_source(tmp_path / "missing.xlsx")
	assert "missing.xlsx" in info.value.message
