"""
Shared configuration and constants.
"""

import dataclasses
import math


POINTS_PER_MM = 2.8346
PAGE_WIDTH = 595.0
PAGE_HEIGHT = 842.0

# preview icon grid placement on the setup canvas
PREVIEW_SCALE = 0.27
PREVIEW_OFFSET_X = 20
PREVIEW_OFFSET_Y = 4
PREVIEW_INSET = 2.0

DEFAULT_FONT_REGULAR = "Helvetica"
DEFAULT_FONT_BOLD = "Helvetica-Bold"
DEFAULT_FONT_ITALIC = "Helvetica-Oblique"
DEFAULT_FONT_BOLD_ITALIC = "Helvetica-BoldOblique"
DEFAULT_TEXT_SIZE = 12.0
LEADING_FACTOR = 1.2
DEFAULT_TEXT_COLOUR = "black"
GUIDE_COLOUR = "grey64"
GUIDE_LINE_WIDTH = 0.5
SANE_COORD_LIMIT = 10000.0

DEFAULT_TEMPLATE = "3x7"

# name: (columns, rows, width, height, left margin, gap, bottom margin) in mm
DEFAULT_TEMPLATES_MM = {
	"3x7": (3, 7, 63.5, 38.1, 7.0, 3.0, 13.5),
	"2x7": (2, 7, 97.8, 38.8, 4.8, 2.1, 15.0),
	"5x13": (5, 13, 38.1, 21.2, 2.5, 2.625, 11.0),
	"2x4": (2, 4, 99.1, 67.7, 4.5, 2.8, 13.0),
	"long": (1, 1, 220.0, 110.0, 0.0, 0.0, 0.0),
	"envelope": (1, 1, 229.0, 162.0, 0.0, 0.0, 0.0),
	"4x8": (4, 8, 51.0, 34.0, 5.0, 0.0, 19.0),
}

# horizontal and vertical text registration in points; vertical counts down the sheet
TEXT_REGISTRATION = {
	"3x7": (-8.0, 0.0),
	"2x7": (-5.0, 5.0),
	"2x4": (-11.0, 2.0),
}

PRODUCT_CODES = {
	"L7159": "3x7",
	"J8160": "3x7",
	"L7163": "2x7",
	"J8163": "2x7",
	"L7651": "5x13",
	"J8551": "5x13",
	"L7165": "2x4",
	"J7165": "2x4",
}

# device colours substituted for a few named colours at emission time
DEFAULT_COLOUR_SUBSTITUTIONS = {
	"blue": (0.1, 0.1, 0.9),
	"green": (0.1, 0.7, 0.1),
	"red": (0.9, 0.1, 0.1),
}


@dataclasses.dataclass(frozen=True)
class Template:
	name: str
	rows: int
	columns: int
	cell_width: float
	cell_height: float
	left_margin: float
	gap: float
	bottom_margin: float
	text_dx: float = 0.0
	text_dy: float = 0.0

	def __post_init__(self) -> None:
		for field_name in ("rows", "columns"):
			value = getattr(self, field_name)
			if isinstance(value, bool) or not isinstance(value, int) or value < 1:
				raise ValueError(f"Template {self.name!r}: {field_name} must be a positive integer, got {value!r}")
		for field_name in ("cell_width", "cell_height", "left_margin", "gap", "bottom_margin"):
			value = getattr(self, field_name)
			if not math.isfinite(value) or value < 0.0:
				raise ValueError(f"Template {self.name!r}: {field_name} must be a non-negative length, got {value!r}")
		if self.cell_width <= 0.0 or self.cell_height <= 0.0:
			raise ValueError(f"Template {self.name!r}: cell size must be positive")

	@property
	def slots(self) -> int:
		if self.columns <= 1:
			return 1
		return self.rows * self.columns


#============================================
def mm_to_points(value: float) -> float:
	"""
	Convert millimetres to points.

	Args:
		value: Millimetre value.

	Returns:
		Points value.
	"""
	return value * POINTS_PER_MM


#============================================
def template_from_mm(
	name: str,
	columns: int,
	rows: int,
	cell_width: float,
	cell_height: float,
	left_margin: float,
	gap: float,
	bottom_margin: float,
	text_dx: float = 0.0,
	text_dy: float = 0.0,
) -> Template:
	"""
	Build a Template from physical millimetre dimensions.

	Args:
		name: Template name.
		columns: Labels across the sheet.
		rows: Labels down the sheet.
		cell_width: Label width in mm.
		cell_height: Label height in mm.
		left_margin: Left page margin in mm.
		gap: Horizontal gap between labels in mm.
		bottom_margin: Bottom page margin in mm.
		text_dx: Horizontal text registration in points.
		text_dy: Vertical text registration in points.

	Returns:
		Template with lengths in points.
	"""
	return Template(
		name=name,
		rows=rows,
		columns=columns,
		cell_width=mm_to_points(cell_width),
		cell_height=mm_to_points(cell_height),
		left_margin=mm_to_points(left_margin),
		gap=mm_to_points(gap),
		bottom_margin=mm_to_points(bottom_margin),
		text_dx=text_dx,
		text_dy=text_dy,
	)
