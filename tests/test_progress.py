import pytest

import barcode_sheet_maker.progress


ProgressReporter = barcode_sheet_maker.progress.ProgressReporter


#============================================
def test_values_never_decrease() -> None:
	"""
	Lower or repeated values are not emitted again.
	"""
	reporter = ProgressReporter()
	values: list[float] = []
	reporter.subscribe(values.append)
	for fraction in (0.1, 0.3, 0.2, 0.3, 1.5):
		reporter.update(fraction)
	assert values == [0.1, 0.3, 1.0]
	assert reporter.value == 1.0


#============================================
def test_reset_starts_a_new_run_silently() -> None:
	"""
	Reset returns to zero without notifying observers.
	"""
	reporter = ProgressReporter()
	values: list[float] = []
	reporter.subscribe(values.append)
	reporter.update(1.0)
	reporter.reset()
	assert reporter.value == 0.0
	assert values == [1.0]
	reporter.update(0.5)
	assert values == [1.0, 0.5]


#============================================
def test_span_maps_into_parent_range() -> None:
	"""
	A span scales its stage progress into a slice and ends exactly on its end.
	"""
	reporter = ProgressReporter()
	values: list[float] = []
	reporter.subscribe(values.append)
	first = reporter.span(0.0, 0.8)
	second = reporter.span(0.8, 1.0)
	first.update(0.5)
	first.update(1.0)
	second.update(0.5)
	second.update(1.0)
	assert values[0] == pytest.approx(0.4)
	assert values[1] == 0.8
	assert values[2] == pytest.approx(0.9)
	assert values[3] == 1.0


#============================================
def test_nested_span_maps_through_both_slices() -> None:
	"""
	A span of a span lands inside the outer slice.
	"""
	reporter = ProgressReporter()
	values: list[float] = []
	reporter.subscribe(values.append)
	inner = reporter.span(0.0, 0.8).span(0.5, 1.0)
	inner.update(0.5)
	inner.update(1.0)
	assert values[0] == pytest.approx(0.6)
	assert values[1] == pytest.approx(0.8)


#============================================
def test_invalid_span_rejected() -> None:
	"""
	Spans must lie inside [0, 1] in order.
	"""
	with pytest.raises(ValueError):
		ProgressReporter().span(0.6, 0.4)


#============================================
def test_queue_channel_receives_values() -> None:
	"""
	Queue subscribers receive every emitted value without blocking.
	"""
	reporter = ProgressReporter()
	channel = reporter.subscribe_queue()
	reporter.update(0.5)
	reporter.update(1.0)
	assert channel.get_nowait() == 0.5
	assert channel.get_nowait() == 1.0
	assert channel.empty()


#============================================
def test_print_progress_bar(capsys: pytest.CaptureFixture[str]) -> None:
	"""
	The console bar shows counts and percent.
	"""
	barcode_sheet_maker.progress.print_progress("Encoding", 5, 10)
	output = capsys.readouterr().out
	assert "Encoding [##########----------] 5/10 (50%)" in output
