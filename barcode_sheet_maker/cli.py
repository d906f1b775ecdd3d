"""
CLI entry points for barcode sheet generation.
"""

# Standard Library
import argparse
import dataclasses
import pathlib
import time

# local repo modules
import barcode_sheet_maker as bsm
import barcode_sheet_maker.batch
import barcode_sheet_maker.config
import barcode_sheet_maker.errors
import barcode_sheet_maker.extract
import barcode_sheet_maker.layout
import barcode_sheet_maker.pipeline
import barcode_sheet_maker.progress
import barcode_sheet_maker.render
import barcode_sheet_maker.symbology


LayoutConfig = bsm.config.LayoutConfig
BatchResult = bsm.batch.BatchResult
InputSource = bsm.extract.InputSource
SourceKind = bsm.extract.SourceKind
BarcodeBatchError = bsm.errors.BarcodeBatchError

ITEMS_PER_ROW = bsm.config.ITEMS_PER_ROW
DEFAULT_SCALE = bsm.config.DEFAULT_SCALE
DEFAULT_SYMBOLOGY = bsm.config.DEFAULT_SYMBOLOGY


#============================================
def build_layout_config(args: argparse.Namespace) -> LayoutConfig:
	"""
	Build layout config from CLI args.

	Args:
		args: Parsed argparse namespace.

	Returns:
		LayoutConfig.
	"""
	config = bsm.config.default_layout_config()
	return dataclasses.replace(config, items_per_row=args.items_per_row)


#============================================
def build_source(args: argparse.Namespace, pattern: str) -> InputSource:
	"""
	Build a single input source from typed codes and input files.

	Typed codes come first, then each file's codes in argument order.

	Args:
		args: Parsed argparse namespace.
		pattern: Code pattern for recognized image text.

	Returns:
		InputSource of already extracted candidates, joined as typed text.
	"""
	candidates: list[str] = []
	if args.codes:
		candidates.extend(bsm.extract.extract_from_text(args.codes))
	for entry in args.inputs:
		source = bsm.extract.load_source(entry)
		found = bsm.extract.extract(source, pattern)
		print(f"{source.name}: {len(found)} candidates")
		candidates.extend(found)
	return InputSource(kind=SourceKind.TEXT, payload=",".join(candidates), name="command line")


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(description="Generate barcode sheets as a paginated PDF.")
	parser.add_argument("inputs", nargs="*", help="Text, PDF, spreadsheet or image files with item codes.")

	input_group = parser.add_argument_group("Input")
	input_group.add_argument("-t", "--codes", dest="codes", default=None, help="Codes separated by commas, spaces or hyphens.")
	input_group.add_argument(
		"-s", "--symbology", dest="symbology", default=DEFAULT_SYMBOLOGY,
		choices=sorted(bsm.symbology.SYMBOLOGIES), help="Barcode symbology.",
	)

	output_group = parser.add_argument_group("Output")
	output_group.add_argument("-o", "--output", dest="output_path", default=None, help="Output PDF path.")
	output_group.add_argument("-m", "--manifest", dest="manifest_path", default=None, help="Output manifest JSON path.")
	output_group.add_argument("-v", "--preview-dir", dest="preview_dir", default=None, help="Write first/last preview PNGs here.")

	layout_group = parser.add_argument_group("Layout")
	layout_group.add_argument("-r", "--items-per-row", dest="items_per_row", type=int, default=ITEMS_PER_ROW, help="Barcodes per row.")
	layout_group.add_argument("-x", "--scale", dest="scale", type=int, default=DEFAULT_SCALE, help="Module magnification.")

	parser.add_argument("-L", "--list-symbologies", dest="list_symbologies", action="store_true", help="List symbologies and exit.")

	args = parser.parse_args(argv)
	if not args.list_symbologies and args.output_path is None:
		parser.error("the following arguments are required: -o/--output")
	if args.scale < 1:
		parser.error(f"argument -x/--scale: must be >= 1, got {args.scale}")
	try:
		bsm.layout.check_layout_config(build_layout_config(args))
	except ValueError as error:
		parser.error(f"argument -r/--items-per-row: {error}")
	return args


#============================================
def list_symbologies() -> None:
	"""
	Print the symbology table.
	"""
	for identifier, symbology in sorted(bsm.symbology.SYMBOLOGIES.items()):
		status = "" if symbology.implemented else " (not implemented)"
		default = " [default]" if identifier == DEFAULT_SYMBOLOGY else ""
		print(f"{identifier}: {symbology.label}, {symbology.rule.description}{status}{default}")


#============================================
def write_previews(batch: BatchResult, preview_dir: pathlib.Path) -> None:
	"""
	Write first and last barcode previews.

	Args:
		batch: Encoded batch.
		preview_dir: Output directory.
	"""
	preview_dir.mkdir(parents=True, exist_ok=True)
	for name, item in (("first", batch.first), ("last", batch.last)):
		if item is None:
			continue
		path = bsm.render.save_preview(item, preview_dir / f"{name}_barcode.png")
		print(f"{name.capitalize()} barcode: {item.code} ({path})")


#============================================
def run_pipeline(args: argparse.Namespace) -> None:
	"""
	Run the full pipeline from input codes to PDF.

	Args:
		args: Parsed argparse namespace.
	"""
	symbology = bsm.symbology.get_symbology(args.symbology)
	print("Barcode sheet pipeline")
	print(f"Symbology: {symbology.label}")
	print(f"Output PDF: {args.output_path}")
	if args.manifest_path:
		print(f"Manifest: {args.manifest_path}")

	start_time = time.perf_counter()
	source = build_source(args, symbology.recognition_pattern)

	encode_reporter = bsm.progress.ProgressReporter()
	encode_reporter.subscribe(bsm.progress.console_observer("Encoding", 100))
	encode_start = time.perf_counter()
	batch = bsm.pipeline.generate(source, symbology, args.scale, encode_reporter, verbose=True)
	encode_end = time.perf_counter()
	print(f"Failed to encode: {batch.failure_count}")

	if args.preview_dir:
		write_previews(batch, pathlib.Path(args.preview_dir))

	config = build_layout_config(args)
	layout_reporter = bsm.progress.ProgressReporter()
	layout_reporter.subscribe(bsm.progress.console_observer("Layout", 100))
	output_path = pathlib.Path(args.output_path)
	render_start = time.perf_counter()
	_document, result = bsm.pipeline.save_pdf(batch, output_path, config, layout_reporter)
	render_end = time.perf_counter()
	print(f"Pages written: {result.pages}")
	print(f"Barcodes placed: {result.placed_items}")

	manifest_path = args.manifest_path
	if manifest_path is None:
		manifest_path = f"{output_path}.json"
	bsm.render.write_manifest(pathlib.Path(manifest_path), batch, result, config)

	total_time = time.perf_counter() - start_time
	print(
		"Timing: encode={:.2f}s render={:.2f}s total={:.2f}s".format(
			encode_end - encode_start,
			render_end - render_start,
			total_time,
		)
	)
	print(f"Manifest written: {manifest_path}")


#============================================
def main(argv: list[str] | None = None) -> int:
	"""
	Main entry point.

	Returns:
		Process exit status.
	"""
	args = parse_args(argv)
	if args.list_symbologies:
		list_symbologies()
		return 0
	try:
		run_pipeline(args)
	except BarcodeBatchError as error:
		print(f"Error: {error.message}")
		return 1
	return 0
