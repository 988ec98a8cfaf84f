"""
CLI entry point for laying out and emitting label sheets.
"""

# Standard Library
import argparse
import pathlib
import time

# local repo modules
import label_sheet_layout as lsl
import label_sheet_layout.config
import label_sheet_layout.grid
import label_sheet_layout.render
import label_sheet_layout.scene
import label_sheet_layout.templates


LabelStyle = lsl.scene.LabelStyle
Typeface = lsl.scene.Typeface

DEFAULT_TEMPLATE = lsl.config.DEFAULT_TEMPLATE
DEFAULT_TEXT_SIZE = lsl.config.DEFAULT_TEXT_SIZE
DEFAULT_TEXT_COLOUR = lsl.config.DEFAULT_TEXT_COLOUR
DEFAULT_FONT_REGULAR = lsl.config.DEFAULT_FONT_REGULAR


#============================================
def build_style(args: argparse.Namespace) -> LabelStyle:
	"""
	Build the label style from CLI args.

	Args:
		args: Parsed argparse namespace.

	Returns:
		LabelStyle.
	"""
	typeface = Typeface(
		family=args.font,
		size=args.size,
		weight="bold" if args.bold else "normal",
		slant="italic" if args.italic else "roman",
	)
	return LabelStyle(colour=args.colour, typeface=typeface)


#============================================
def read_label_text(args: argparse.Namespace) -> str:
	"""
	Read the label text from the CLI args.

	Args:
		args: Parsed argparse namespace.

	Returns:
		Label text.
	"""
	if args.text_file:
		return pathlib.Path(args.text_file).read_text(encoding="utf-8")
	if args.text is not None:
		# allow literal \n separators on the command line
		return args.text.replace("\\n", "\n")
	return ""


#============================================
def build_parser() -> argparse.ArgumentParser:
	"""
	Build the argument parser.

	Returns:
		ArgumentParser.
	"""
	parser = argparse.ArgumentParser(description="Lay out address labels on a sheet and write a PDF.")

	layout_group = parser.add_argument_group("Layout")
	layout_group.add_argument("-t", "--template", dest="template", default=DEFAULT_TEMPLATE, help="Template name or product code.")
	layout_group.add_argument("--templates", dest="templates_path", default=None, help="JSON file of templates to use instead of the built-ins.")
	layout_group.add_argument("-s", "--slot", dest="slots", type=int, action="append", default=None, help="Slot number to fill (repeatable).")
	layout_group.add_argument("-u", "--used", dest="used", type=int, action="append", default=None, help="Slot already used on the sheet (repeatable).")
	layout_group.add_argument("--fill", dest="fill", action="store_true", help="Fill every free slot with the text.")

	text_group = parser.add_argument_group("Text")
	text_group.add_argument("-x", "--text", dest="text", default=None, help="Label text, use \\n between lines.")
	text_group.add_argument("-f", "--text-file", dest="text_file", default=None, help="File holding the label text.")
	text_group.add_argument("-c", "--colour", dest="colour", default=DEFAULT_TEXT_COLOUR, help="Text colour name.")
	text_group.add_argument("--font", dest="font", default=DEFAULT_FONT_REGULAR, help="Font family.")
	text_group.add_argument("--size", dest="size", type=float, default=DEFAULT_TEXT_SIZE, help="Font size in points.")
	text_group.add_argument("--bold", dest="bold", action="store_true", help="Bold text.")
	text_group.add_argument("--italic", dest="italic", action="store_true", help="Italic text.")

	output_group = parser.add_argument_group("Output")
	output_group.add_argument("-o", "--output", dest="output_path", default=None, help="Output PDF path.")
	output_group.add_argument("-g", "--guides", dest="guides", action="store_true", help="Draw label guide outlines.")
	output_group.add_argument("-G", "--no-guides", dest="guides", action="store_false", help="Omit label guide outlines.")
	output_group.add_argument("--list-templates", dest="list_templates", action="store_true", help="List templates and exit.")
	output_group.add_argument("--print-grid", dest="print_grid", action="store_true", help="Print the label box corners and exit.")
	output_group.add_argument("-v", "--verbose", dest="verbose", action="store_true", help="Print progress details.")

	parser.set_defaults(
		guides=False,
		fill=False,
		bold=False,
		italic=False,
		list_templates=False,
		print_grid=False,
		verbose=False,
	)
	return parser


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Args:
		argv: Argument list, defaults to sys.argv.

	Returns:
		Parsed argparse namespace.
	"""
	parser = build_parser()
	args = parser.parse_args(argv)
	if not (args.list_templates or args.print_grid) and not args.output_path:
		parser.error("the following arguments are required: -o/--output")
	if args.text is not None and args.text_file is not None:
		parser.error("use only one of --text and --text-file")
	return args


#============================================
def list_templates(registry: lsl.templates.TemplateRegistry) -> None:
	"""
	Print the registered templates.

	Args:
		registry: Template registry.
	"""
	codes_by_template: dict[str, list[str]] = {}
	for code, name in registry.product_codes.items():
		codes_by_template.setdefault(name, []).append(code)
	for name in registry.names():
		template = registry.get(name)
		codes = ", ".join(sorted(codes_by_template.get(name, [])))
		line = f"{name:10s} {template.slots:3d} labels"
		if codes:
			line += f"  ({codes})"
		print(line)


#============================================
def choose_slots(page: lsl.grid.Page, args: argparse.Namespace) -> list[int]:
	"""
	Decide which slots receive the label text when not filling the page.

	Args:
		page: Page of label boxes.
		args: Parsed argparse namespace.

	Returns:
		Slot numbers in order.

	Raises:
		ValueError: If an explicit slot is also marked as used.
	"""
	used = set(args.used or [])
	if args.slots:
		clashes = sorted(set(args.slots) & used)
		if clashes:
			raise ValueError(f"slots already used: {', '.join(str(slot) for slot in clashes)}")
		return list(args.slots)
	slot = lsl.grid.find_free_slot(page, used)
	if slot is None:
		return []
	return [slot]


#============================================
def build_scene(page: lsl.grid.Page, args: argparse.Namespace, text: str) -> lsl.scene.Scene:
	"""
	Build the label scene from CLI args.

	Args:
		page: Page of label boxes.
		args: Parsed argparse namespace.
		text: Label text.

	Returns:
		Scene.
	"""
	style = build_style(args)
	if not text:
		return lsl.scene.build_label_scene(page, {}, style, guides=args.guides)
	if args.fill:
		return lsl.scene.fill_page(page, text, style, occupied=args.used or (), guides=args.guides)
	contents = {slot: text for slot in choose_slots(page, args)}
	return lsl.scene.build_label_scene(page, contents, style, guides=args.guides)


#============================================
def run_pipeline(args: argparse.Namespace) -> int:
	"""
	Lay out the sheet and write the document.

	Args:
		args: Parsed argparse namespace.

	Returns:
		Number of primitives written.
	"""
	registry = lsl.templates.DEFAULT_REGISTRY
	if args.templates_path:
		registry = lsl.templates.load_registry(pathlib.Path(args.templates_path))

	if args.list_templates:
		list_templates(registry)
		return 0

	page = lsl.grid.compute_grid(args.template, 1.0, registry)
	if args.print_grid:
		for line in lsl.grid.format_grid(page):
			print(line)
		return 0

	start_time = time.perf_counter()
	text = read_label_text(args)
	scene = build_scene(page, args, text)

	print(f"Template: {page.template.name} ({len(page)} labels)")
	print(f"Output PDF: {args.output_path}")
	if args.verbose:
		print(f"Slots filled: {len(scene.texts)}")
		print(f"Guides: {args.guides}")
	count = lsl.render.emit_document(
		scene,
		lsl.render.DEFAULT_COLOUR_TABLE,
		pathlib.Path(args.output_path),
		verbose=args.verbose,
	)
	total_time = time.perf_counter() - start_time
	print(f"Primitives written: {count}")
	print(f"Timing: total={total_time:.2f}s")
	return count


#============================================
def main(argv: list[str] | None = None) -> None:
	"""
	Main entry point.
	"""
	args = parse_args(argv)
	try:
		run_pipeline(args)
	except lsl.templates.UnknownTemplateError as error:
		raise SystemExit(f"Error: {error}") from error
	except lsl.scene.MalformedSceneError as error:
		raise SystemExit(f"Error: bad label content: {error}") from error
	except (IndexError, ValueError, OSError) as error:
		raise SystemExit(f"Error: {error}") from error


if __name__ == "__main__":
	main()
