import barcode_sheet_maker.batch
import barcode_sheet_maker.progress
import barcode_sheet_maker.symbology


encode_batch = barcode_sheet_maker.batch.encode_batch
get_symbology = barcode_sheet_maker.symbology.get_symbology


#============================================
def test_scenario_first_and_last() -> None:
	"""
	Two valid item numbers give two successes with first/last accessors.
	"""
	result = encode_batch(["12345678", "87654321"], get_symbology(None))
	assert len(result.successes) == 2
	assert result.failure_count == 0
	assert result.first.code == "12345678"
	assert result.last.code == "87654321"
	assert result.codes() == ["12345678", "87654321"]


#============================================
def test_failures_are_counted_not_dropped() -> None:
	"""
	Every validated code yields exactly one success or failure.
	"""
	validated = ["ABC", "café", "XYZ", "über", "12"]
	result = encode_batch(validated, get_symbology("code128"))
	assert len(result.successes) + result.failure_count == len(validated)
	assert [item.code for item in result.successes] == ["ABC", "XYZ", "12"]
	assert [item.position for item in result.failures] == [1, 3]
	assert all(item.error for item in result.failures)
	assert all(item.ok for item in result.successes)


#============================================
def test_duplicates_each_get_an_image() -> None:
	"""
	Duplicate codes are encoded once per occurrence.
	"""
	result = encode_batch(["12345678", "12345678"], get_symbology(None))
	assert [item.position for item in result.successes] == [0, 1]
	assert result.successes[0].png_bytes() == result.successes[1].png_bytes()


#============================================
def test_stub_symbology_fails_every_item() -> None:
	"""
	A stub symbology produces an empty success list and counts every failure.
	"""
	result = encode_batch(["A", "B", "C"], get_symbology("pdf417"))
	assert result.successes == ()
	assert result.failure_count == 3
	assert result.first is None
	assert result.last is None
	assert all(item.unimplemented for item in result.failures)


#============================================
def test_progress_reaches_one_monotonically() -> None:
	"""
	Progress is reported after every item and ends at exactly 1.0.
	"""
	reporter = barcode_sheet_maker.progress.ProgressReporter()
	values: list[float] = []
	reporter.subscribe(values.append)
	encode_batch(["A", "café", "C", "D"], get_symbology("code128"), progress=reporter)
	assert values == [0.25, 0.5, 0.75, 1.0]
