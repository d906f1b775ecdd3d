"""
Labeled error conditions for the barcode batch pipeline.
"""


class BarcodeBatchError(Exception):
	"""
	Base class for every condition reported to the caller.
	"""

	def __init__(self, message: str) -> None:
		super().__init__(message)
		self.message = message


class EmptyBatch(BarcodeBatchError):
	"""Raised when extraction produced no candidate codes."""

	def __init__(self, message: str = "No item codes found in the input.") -> None:
		super().__init__(message)


class NoValidCodes(BarcodeBatchError):
	"""Raised when no candidate survives validation or encoding."""

	def __init__(self, symbology_label: str) -> None:
		super().__init__(f"No valid codes found for {symbology_label}.")
		self.symbology_label = symbology_label


class EncodingFailed(BarcodeBatchError):
	"""
	Raised when a single code cannot be encoded.

	The batch encoder absorbs this per item; it never aborts a run.
	"""

	def __init__(self, code: str, reason: str, unimplemented: bool = False) -> None:
		super().__init__(f"Could not encode {code!r}: {reason}")
		self.code = code
		self.reason = reason
		self.unimplemented = unimplemented


class UnsupportedInputFormat(BarcodeBatchError):
	"""Raised when an input file type is not recognized."""

	def __init__(self, name: str) -> None:
		super().__init__(f"Unsupported file type: {name}")
		self.name = name


class RenderFailed(BarcodeBatchError):
	"""Raised when the PDF document could not be written."""


class ResourceAccessDenied(BarcodeBatchError):
	"""Raised when an input source could not be opened or read."""

	def __init__(self, name: str, reason: str = "") -> None:
		message = f"Failed to access file: {name}"
		if reason:
			message += f" ({reason})"
		super().__init__(message)
		self.name = name
