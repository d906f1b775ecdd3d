"""
Grammar validation of candidate codes.
"""

# local repo modules
import barcode_sheet_maker as bsm
import barcode_sheet_maker.errors
import barcode_sheet_maker.symbology


NoValidCodes = bsm.errors.NoValidCodes
Symbology = bsm.symbology.Symbology


#============================================
def normalize_code(candidate: str) -> str:
	"""
	Normalize a candidate before the grammar check.

	Args:
		candidate: Raw candidate string.

	Returns:
		Candidate without surrounding whitespace.
	"""
	return candidate.strip()


#============================================
def validate(candidates: list[str], symbology: Symbology) -> list[str]:
	"""
	Keep the candidates accepted by the symbology's grammar rule.

	Order and duplicates are preserved.

	Args:
		candidates: Candidate codes in extraction order.
		symbology: Active symbology.

	Returns:
		Validated codes.

	Raises:
		NoValidCodes: No candidate passed the rule.
	"""
	validated: list[str] = []
	for candidate in candidates:
		code = normalize_code(candidate)
		if symbology.rule.matches(code):
			validated.append(code)
	if not validated:
		raise NoValidCodes(symbology.label)
	return validated
