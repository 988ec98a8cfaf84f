"""
Document emission: scenes to PDF pages.
"""

# Standard Library
import io
import pathlib
import re
import types

# PIP3 modules
import PIL.Image
import reportlab.lib.colors
import reportlab.lib.utils
import reportlab.pdfbase.pdfmetrics
import reportlab.pdfgen.canvas

# local repo modules
import label_sheet_layout as lsl
import label_sheet_layout.config
import label_sheet_layout.scene


Scene = lsl.scene.Scene
Typeface = lsl.scene.Typeface
RectInstruction = lsl.scene.RectInstruction
TextInstruction = lsl.scene.TextInstruction
ImageInstruction = lsl.scene.ImageInstruction
MalformedSceneError = lsl.scene.MalformedSceneError

PAGE_WIDTH = lsl.config.PAGE_WIDTH
PAGE_HEIGHT = lsl.config.PAGE_HEIGHT
DEFAULT_FONT_REGULAR = lsl.config.DEFAULT_FONT_REGULAR
DEFAULT_FONT_BOLD = lsl.config.DEFAULT_FONT_BOLD
DEFAULT_FONT_ITALIC = lsl.config.DEFAULT_FONT_ITALIC
DEFAULT_FONT_BOLD_ITALIC = lsl.config.DEFAULT_FONT_BOLD_ITALIC

STANDARD_FONTS = {
	"Courier",
	"Courier-Bold",
	"Courier-BoldOblique",
	"Courier-Oblique",
	"Helvetica",
	"Helvetica-Bold",
	"Helvetica-BoldOblique",
	"Helvetica-Oblique",
	"Symbol",
	"Times-Bold",
	"Times-BoldItalic",
	"Times-Italic",
	"Times-Roman",
	"ZapfDingbats",
}

GREY_LEVEL_PATTERN = re.compile(r"^gr[ae]y(\d{1,3})$")


class ColourTable:
	"""
	Named colours replaced by explicit RGB triples at emission time.

	Names missing from the table fall through to hex, Tk grey levels and
	the named colours reportlab understands.
	"""

	def __init__(self, substitutions: dict[str, tuple[float, float, float]] | None = None) -> None:
		entries = {}
		for name, rgb in (substitutions or {}).items():
			if len(rgb) != 3 or any(channel < 0.0 or channel > 1.0 for channel in rgb):
				raise ValueError(f"colour {name!r} needs three channels in 0.0-1.0, got {rgb!r}")
			entries[name.lower()] = tuple(float(channel) for channel in rgb)
		self._entries = types.MappingProxyType(entries)

	def __contains__(self, name: object) -> bool:
		return isinstance(name, str) and name.lower() in self._entries

	def __len__(self) -> int:
		return len(self._entries)

	def names(self) -> list[str]:
		return sorted(self._entries)

	def resolve(self, name: str) -> reportlab.lib.colors.Color:
		"""
		Resolve a colour name to a device colour.

		Args:
			name: Colour name, "#RRGGBB" or a Tk grey level like "grey64".

		Returns:
			ReportLab Color.

		Raises:
			MalformedSceneError: If the colour is not understood.
		"""
		key = name.strip().lower()
		if key in self._entries:
			red, green, blue = self._entries[key]
			return reportlab.lib.colors.Color(red, green, blue)
		if key.startswith("#"):
			red, green, blue = parse_hex_color(key)
			return reportlab.lib.colors.Color(red, green, blue)
		match = GREY_LEVEL_PATTERN.match(key)
		if match:
			level = int(match.group(1))
			if level > 100:
				raise MalformedSceneError(f"grey level out of range: {name!r}")
			return reportlab.lib.colors.Color(level / 100.0, level / 100.0, level / 100.0)
		try:
			return reportlab.lib.colors.toColor(key)
		except ValueError as error:
			raise MalformedSceneError(f"unknown colour: {name!r}") from error


DEFAULT_COLOUR_TABLE = ColourTable(lsl.config.DEFAULT_COLOUR_SUBSTITUTIONS)


#============================================
def parse_hex_color(value: str) -> tuple[float, float, float]:
	"""
	Parse a hex color string into RGB floats.

	Args:
		value: Color string like "#AABBCC".

	Returns:
		Tuple of (r, g, b) in 0.0-1.0 range.
	"""
	if len(value) != 7:
		raise MalformedSceneError(f"bad hex colour: {value!r}")
	try:
		red = int(value[1:3], 16) / 255.0
		green = int(value[3:5], 16) / 255.0
		blue = int(value[5:7], 16) / 255.0
	except ValueError as error:
		raise MalformedSceneError(f"bad hex colour: {value!r}") from error
	return (red, green, blue)


#============================================
def map_font_name(typeface: Typeface) -> str:
	"""
	Map a typeface to a font name reportlab can set.

	Registered fonts are used as given; anything else falls back to a
	Helvetica face with the requested weight and slant.

	Args:
		typeface: Typeface descriptor.

	Returns:
		ReportLab font name.
	"""
	known = STANDARD_FONTS | set(reportlab.pdfbase.pdfmetrics.getRegisteredFontNames())
	if typeface.family in known:
		return typeface.family
	is_bold = typeface.weight.lower() == "bold"
	italic = typeface.slant.lower() in ("italic", "oblique")
	if italic and is_bold:
		return DEFAULT_FONT_BOLD_ITALIC
	if italic:
		return DEFAULT_FONT_ITALIC
	if is_bold:
		return DEFAULT_FONT_BOLD
	return DEFAULT_FONT_REGULAR


#============================================
def compute_canvas_scale(canvas_width: float, canvas_height: float) -> float:
	"""
	Compute the uniform scale from canvas units to page points.

	Args:
		canvas_width: Width of the source canvas.
		canvas_height: Height of the source canvas.

	Returns:
		Scale factor.
	"""
	if canvas_width <= 0 or canvas_height <= 0:
		raise ValueError(f"canvas size must be positive, got {canvas_width}x{canvas_height}")
	return min(PAGE_WIDTH / canvas_width, PAGE_HEIGHT / canvas_height)


#============================================
def draw_rect_instruction(
	pdf: reportlab.pdfgen.canvas.Canvas,
	rect: RectInstruction,
	colour_table: ColourTable,
) -> int:
	"""
	Draw a filled and/or outlined rectangle onto the PDF canvas.

	Args:
		pdf: ReportLab canvas.
		rect: Rectangle instruction.
		colour_table: Colour substitutions.

	Returns:
		Number of primitives drawn.
	"""
	if rect.fill is not None:
		pdf.setFillColor(colour_table.resolve(rect.fill))
	if rect.outline is not None:
		pdf.setStrokeColor(colour_table.resolve(rect.outline))
		pdf.setLineWidth(rect.line_width)
	box = rect.box
	pdf.rect(
		box.x0,
		box.y0,
		box.width,
		box.height,
		stroke=int(rect.outline is not None),
		fill=int(rect.fill is not None),
	)
	return 1


#============================================
def draw_text_instruction(
	pdf: reportlab.pdfgen.canvas.Canvas,
	text: TextInstruction,
	colour_table: ColourTable,
) -> int:
	"""
	Draw each line of a text block onto the PDF canvas.

	With the "nw" anchor the first baseline sits one font size below the
	anchor; with "center" the block is centred on the anchor.

	Args:
		pdf: ReportLab canvas.
		text: Text instruction.
		colour_table: Colour substitutions.

	Returns:
		Number of lines drawn.
	"""
	lines = text.lines
	if not lines:
		return 0
	font_name = map_font_name(text.typeface)
	font_size = text.typeface.size
	leading = text.typeface.leading
	pdf.setFont(font_name, font_size)
	pdf.setFillColor(colour_table.resolve(text.colour))

	if text.anchor == "center":
		block_height = font_size + leading * (len(lines) - 1)
		first_baseline = text.y + block_height / 2.0 - font_size
	else:
		first_baseline = text.y - font_size

	for index, line in enumerate(lines):
		baseline = first_baseline - index * leading
		if text.anchor == "center":
			pdf.drawCentredString(text.x, baseline, line)
		else:
			pdf.drawString(text.x, baseline, line)
	return len(lines)


#============================================
def load_image_reader(source: str) -> reportlab.lib.utils.ImageReader:
	"""
	Load an image file for drawing.

	Args:
		source: Image path.

	Returns:
		ImageReader instance.
	"""
	image = PIL.Image.open(source)
	image.load()
	return reportlab.lib.utils.ImageReader(image)


#============================================
def draw_image_instruction(
	pdf: reportlab.pdfgen.canvas.Canvas,
	image: ImageInstruction,
	image_cache: dict[str, reportlab.lib.utils.ImageReader],
) -> int:
	"""
	Draw a raster image onto the PDF canvas.

	Args:
		pdf: ReportLab canvas.
		image: Image instruction.
		image_cache: Readers already loaded in this pass, keyed by source.

	Returns:
		Number of primitives drawn.
	"""
	source = str(image.source)
	if source not in image_cache:
		image_cache[source] = load_image_reader(source)
	pdf.drawImage(
		image_cache[source],
		image.x,
		image.y,
		width=image.width,
		height=image.height,
		mask=None,
		preserveAspectRatio=False,
		anchor="sw",
	)
	return 1


#============================================
def write_document(data: bytes, destination) -> None:
	"""
	Write document bytes to a path or binary file object.

	Args:
		data: Document bytes.
		destination: Path, or object with a write() method.
	"""
	if callable(getattr(destination, "write", None)):
		destination.write(data)
		return
	pathlib.Path(destination).write_bytes(data)


#============================================
def render_scene(
	scene: Scene,
	colour_table: ColourTable,
	canvas_width: float,
	canvas_height: float,
) -> tuple[bytes, int]:
	"""
	Render a scene to PDF bytes.

	Args:
		scene: Scene to draw.
		colour_table: Colour substitutions.
		canvas_width: Width of the source canvas.
		canvas_height: Height of the source canvas.

	Returns:
		Tuple of (pdf_bytes, primitive_count).
	"""
	scene.validate()
	scale = compute_canvas_scale(canvas_width, canvas_height)

	buffer = io.BytesIO()
	pdf = reportlab.pdfgen.canvas.Canvas(buffer, pagesize=(PAGE_WIDTH, PAGE_HEIGHT))
	pdf.setCreator("label_sheet_layout")
	pdf.saveState()
	if scale != 1.0:
		pdf.scale(scale, scale)

	count = 0
	image_cache: dict[str, reportlab.lib.utils.ImageReader] = {}
	# images sit underneath the rectangles and text
	for image in scene.images:
		count += draw_image_instruction(pdf, image, image_cache)
	for rect in scene.rects:
		count += draw_rect_instruction(pdf, rect, colour_table)
	for text in scene.texts:
		count += draw_text_instruction(pdf, text, colour_table)

	pdf.restoreState()
	pdf.showPage()
	pdf.save()
	return (buffer.getvalue(), count)


#============================================
def emit_document(
	scene: Scene,
	colour_table: ColourTable | dict | None,
	destination,
	canvas_width: float = PAGE_WIDTH,
	canvas_height: float = PAGE_HEIGHT,
	verbose: bool = False,
) -> int:
	"""
	Emit a scene as a single A4 PDF page.

	Args:
		scene: Scene to draw.
		colour_table: ColourTable, plain dict of RGB triples, or None for
			the default substitutions.
		destination: Output path or binary file object.
		canvas_width: Width of the source canvas.
		canvas_height: Height of the source canvas.
		verbose: Print a short summary.

	Returns:
		Number of primitives written.

	Raises:
		MalformedSceneError: If the scene cannot be drawn.
		OSError: If the destination cannot be written.
	"""
	if colour_table is None:
		colour_table = DEFAULT_COLOUR_TABLE
	elif not isinstance(colour_table, ColourTable):
		colour_table = ColourTable(colour_table)

	data, count = render_scene(scene, colour_table, canvas_width, canvas_height)
	write_document(data, destination)
	if verbose:
		print(f"Document written: {destination}")
		print(f"Primitives: {count} (rects={len(scene.rects)} texts={len(scene.texts)} images={len(scene.images)})")
	return count
