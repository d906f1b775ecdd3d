"""
Progress reporting for batch encoding and layout.
"""

# Standard Library
import queue
import typing

# local repo modules
import barcode_sheet_maker as bsm
import barcode_sheet_maker.config


PROGRESS_BAR_WIDTH = bsm.config.PROGRESS_BAR_WIDTH
PROGRESS_UPDATE_EVERY = bsm.config.PROGRESS_UPDATE_EVERY

ProgressCallback = typing.Callable[[float], None]


class ProgressReporter:
	"""
	Monotonic completion fraction for one run.

	The value only moves forward between resets. Observers are called on the
	worker thread; use subscribe_queue() to hand values to another thread
	without blocking the worker.
	"""

	def __init__(self) -> None:
		self.value = 0.0
		self._emitted = False
		self._observers: list[ProgressCallback] = []

	def subscribe(self, callback: ProgressCallback) -> None:
		self._observers.append(callback)

	def subscribe_queue(self) -> "queue.Queue[float]":
		channel: "queue.Queue[float]" = queue.Queue()
		self.subscribe(channel.put_nowait)
		return channel

	def reset(self) -> None:
		self.value = 0.0
		self._emitted = False

	def update(self, fraction: float) -> None:
		fraction = min(1.0, max(0.0, fraction))
		if self._emitted and fraction <= self.value:
			return
		self.value = fraction
		self._emitted = True
		for callback in self._observers:
			callback(fraction)

	def span(self, start: float, end: float) -> "ProgressSpan":
		return ProgressSpan(self, start, end)


class ProgressSpan:
	"""
	Maps a stage's own 0..1 progress into a slice of a parent reporter.
	"""

	def __init__(self, parent: ProgressReporter, start: float, end: float) -> None:
		if not 0.0 <= start <= end <= 1.0:
			raise ValueError(f"invalid progress span {start}..{end}")
		self.parent = parent
		self.start = start
		self.end = end

	def update(self, fraction: float) -> None:
		if fraction >= 1.0:
			self.parent.update(self.end)
			return
		self.parent.update(self.start + (self.end - self.start) * max(0.0, fraction))

	def span(self, start: float, end: float) -> "ProgressSpan":
		if not 0.0 <= start <= end <= 1.0:
			raise ValueError(f"invalid progress span {start}..{end}")
		width = self.end - self.start
		return ProgressSpan(self.parent, self.start + width * start, self.start + width * end)


ProgressSink = ProgressReporter | ProgressSpan


#============================================
def print_progress(prefix: str, current: int, total: int) -> None:
	"""
	Print a simple progress bar.

	Args:
		prefix: Label text.
		current: Current count.
		total: Total count.
	"""
	if total <= 0:
		return
	percent = int(round((current / total) * 100.0))
	filled = int(round(PROGRESS_BAR_WIDTH * percent / 100.0))
	bar = "#" * filled + "-" * (PROGRESS_BAR_WIDTH - filled)
	print(f"{prefix} [{bar}] {current}/{total} ({percent}%)", end="\r")


#============================================
def console_observer(prefix: str, total: int) -> ProgressCallback:
	"""
	Build an observer that draws the console progress bar.

	Args:
		prefix: Label text.
		total: Number of steps shown in the bar.

	Returns:
		Callback accepting a completion fraction.
	"""
	def observe(fraction: float) -> None:
		current = int(round(fraction * total))
		if current % PROGRESS_UPDATE_EVERY == 0 or fraction >= 1.0:
			print_progress(prefix, current, total)
		if fraction >= 1.0:
			print()
	return observe
