"""
Label grid geometry for full pages and preview icons.

All coordinates are points with the origin at the lower-left page corner.
Boxes are enumerated bottom row first, left to right within a row, and the
enumeration index is the slot number used everywhere else.
"""

# Standard Library
import dataclasses
import math

# local repo modules
import label_sheet_layout as lsl
import label_sheet_layout.config
import label_sheet_layout.templates


Template = lsl.config.Template
TemplateRegistry = lsl.templates.TemplateRegistry
DEFAULT_REGISTRY = lsl.templates.DEFAULT_REGISTRY

PREVIEW_SCALE = lsl.config.PREVIEW_SCALE
PREVIEW_OFFSET_X = lsl.config.PREVIEW_OFFSET_X
PREVIEW_OFFSET_Y = lsl.config.PREVIEW_OFFSET_Y
PREVIEW_INSET = lsl.config.PREVIEW_INSET


@dataclasses.dataclass(frozen=True)
class Box:
	x0: float
	y0: float
	x1: float
	y1: float

	@property
	def width(self) -> float:
		return self.x1 - self.x0

	@property
	def height(self) -> float:
		return self.y1 - self.y0

	@property
	def center(self) -> tuple[float, float]:
		return ((self.x0 + self.x1) / 2.0, (self.y0 + self.y1) / 2.0)

	def as_tuple(self) -> tuple[float, float, float, float]:
		return (self.x0, self.y0, self.x1, self.y1)

	def scaled(self, factor: float) -> "Box":
		return Box(self.x0 * factor, self.y0 * factor, self.x1 * factor, self.y1 * factor)

	def translated(self, dx: float, dy: float) -> "Box":
		return Box(self.x0 + dx, self.y0 + dy, self.x1 + dx, self.y1 + dy)


@dataclasses.dataclass(frozen=True)
class Page:
	template: Template
	scale: float
	boxes: tuple[Box, ...]

	def __len__(self) -> int:
		return len(self.boxes)

	def __getitem__(self, slot: int) -> Box:
		return self.boxes[slot]

	def __iter__(self):
		return iter(self.boxes)

	def row_of(self, slot: int) -> int:
		"""
		Return the row index (0 = bottom row) of a slot.
		"""
		if slot < 0 or slot >= len(self.boxes):
			raise IndexError(f"slot {slot} out of range for {len(self.boxes)} boxes")
		if self.template.columns <= 1:
			return 0
		return slot // self.template.columns


#============================================
def check_scale(scale: float) -> None:
	"""
	Reject scale factors that are not finite and positive.

	Args:
		scale: Scale factor.
	"""
	if not math.isfinite(scale) or scale <= 0.0:
		raise ValueError(f"scale must be a positive number, got {scale!r}")


#============================================
def layout_boxes(template: Template, scale: float) -> tuple[Box, ...]:
	"""
	Tile the template cells across the page.

	Args:
		template: Template to lay out.
		scale: Uniform scale factor.

	Returns:
		Boxes in slot order.
	"""
	width = template.cell_width * scale
	height = template.cell_height * scale
	margin = template.left_margin * scale
	gap = template.gap * scale
	bottom = template.bottom_margin * scale

	# single region sheets
	if template.columns <= 1:
		return (Box(margin, bottom, margin + width, bottom + height),)

	boxes: list[Box] = []
	y0 = bottom
	for _row in range(template.rows):
		x0 = margin
		for _col in range(template.columns):
			boxes.append(Box(x0, y0, x0 + width, y0 + height))
			x0 += width + gap
		# rows are packed with no vertical gap
		y0 += height
	return tuple(boxes)


#============================================
def compute_grid(
	name: str,
	scale: float = 1.0,
	registry: TemplateRegistry = DEFAULT_REGISTRY,
) -> Page:
	"""
	Compute the label boxes for a template.

	Args:
		name: Template name or product code.
		scale: Uniform scale factor, 1.0 for the printed page.
		registry: Template registry to look up the name in.

	Returns:
		Page of boxes in slot order.

	Raises:
		UnknownTemplateError: If the template is not registered.
	"""
	template = registry.get(name)
	check_scale(scale)
	return Page(template=template, scale=scale, boxes=layout_boxes(template, scale))


#============================================
def compute_preview_grid(
	name: str,
	scale: float = PREVIEW_SCALE,
	offset_x: float = PREVIEW_OFFSET_X,
	offset_y: float = PREVIEW_OFFSET_Y,
	registry: TemplateRegistry = DEFAULT_REGISTRY,
) -> Page:
	"""
	Compute the shrunken icon grid shown in the sheet setup canvas.

	Each icon loses PREVIEW_INSET on its right and top edges so that
	neighbouring icons stay visibly apart, then the whole grid is moved by
	the canvas offset.

	Args:
		name: Template name or product code.
		scale: Preview scale factor.
		offset_x: Canvas x offset in pixels.
		offset_y: Canvas y offset in pixels.
		registry: Template registry.

	Returns:
		Page of preview boxes in slot order.
	"""
	page = compute_grid(name, scale, registry)
	boxes: list[Box] = []
	for box in page.boxes:
		if box.width <= PREVIEW_INSET or box.height <= PREVIEW_INSET:
			raise ValueError(f"scale {scale} is too small to preview template {page.template.name!r}")
		icon = Box(box.x0, box.y0, box.x1 - PREVIEW_INSET, box.y1 - PREVIEW_INSET)
		boxes.append(icon.translated(offset_x, offset_y))
	return Page(template=page.template, scale=scale, boxes=tuple(boxes))


#============================================
def find_free_slot(page: Page, occupied) -> int | None:
	"""
	Find the first slot not already used.

	Args:
		page: Page to search.
		occupied: Collection of used slot numbers.

	Returns:
		Slot number, or None when the page is full.
	"""
	used = set(occupied)
	for slot in range(len(page.boxes)):
		if slot not in used:
			return slot
	return None


#============================================
def round_half_up(value: float) -> int:
	return int(math.floor(value + 0.5))


#============================================
def format_grid(page: Page) -> list[str]:
	"""
	Format box corners as text, one row of labels per block.

	Args:
		page: Page to format.

	Returns:
		Lines of text; rows are separated by blank lines.
	"""
	lines: list[str] = []
	per_row = page.template.columns if page.template.columns > 1 else 1
	for slot, box in enumerate(page.boxes):
		corners = [round_half_up(value) for value in box.as_tuple()]
		lines.append("{:2d} : {:6d} {:6d}  {:6d} {:6d}".format(slot, *corners))
		if (slot + 1) % per_row == 0:
			lines.append("")
	return lines
