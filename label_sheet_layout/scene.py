"""
Immutable scenes of draw instructions for one emission pass.
"""

# Standard Library
import dataclasses
import math

# local repo modules
import label_sheet_layout as lsl
import label_sheet_layout.config
import label_sheet_layout.grid
import label_sheet_layout.text


Box = lsl.grid.Box
Page = lsl.grid.Page

DEFAULT_FONT_REGULAR = lsl.config.DEFAULT_FONT_REGULAR
DEFAULT_TEXT_SIZE = lsl.config.DEFAULT_TEXT_SIZE
DEFAULT_TEXT_COLOUR = lsl.config.DEFAULT_TEXT_COLOUR
GUIDE_COLOUR = lsl.config.GUIDE_COLOUR
GUIDE_LINE_WIDTH = lsl.config.GUIDE_LINE_WIDTH
SANE_COORD_LIMIT = lsl.config.SANE_COORD_LIMIT

GUIDE_TAG = "guide"
LABEL_TAG = "label"
TEXT_ANCHORS = ("nw", "center")


class MalformedSceneError(ValueError):
	"""
	Raised when a scene instruction cannot be drawn.
	"""


@dataclasses.dataclass(frozen=True)
class Typeface:
	family: str = DEFAULT_FONT_REGULAR
	size: float = DEFAULT_TEXT_SIZE
	weight: str = "normal"
	slant: str = "roman"

	@property
	def leading(self) -> float:
		return self.size * lsl.config.LEADING_FACTOR


@dataclasses.dataclass(frozen=True)
class LabelStyle:
	colour: str = DEFAULT_TEXT_COLOUR
	typeface: Typeface = Typeface()


@dataclasses.dataclass(frozen=True)
class RectInstruction:
	box: Box
	fill: str | None = None
	outline: str | None = None
	line_width: float = 1.0
	tag: str | None = None
	slot: int | None = None


@dataclasses.dataclass(frozen=True)
class TextInstruction:
	x: float
	y: float
	text: str
	colour: str = DEFAULT_TEXT_COLOUR
	typeface: Typeface = Typeface()
	anchor: str = "nw"
	tag: str | None = None
	slot: int | None = None

	@property
	def lines(self) -> list[str]:
		return lsl.text.split_lines(self.text)


@dataclasses.dataclass(frozen=True)
class ImageInstruction:
	x: float
	y: float
	width: float
	height: float
	source: str
	tag: str | None = None
	slot: int | None = None


@dataclasses.dataclass(frozen=True)
class Scene:
	rects: tuple[RectInstruction, ...] = ()
	texts: tuple[TextInstruction, ...] = ()
	images: tuple[ImageInstruction, ...] = ()

	def instructions(self) -> list:
		return list(self.rects) + list(self.texts) + list(self.images)

	def tags(self) -> set[str]:
		return {item.tag for item in self.instructions() if item.tag is not None}

	def primitive_count(self, tag: str | None = None) -> int:
		"""
		Count the primitives the scene emits, optionally for one tag only.

		Rectangles and images are one primitive each; text is one per line.
		"""
		count = 0
		for rect in self.rects:
			if tag is None or rect.tag == tag:
				count += 1
		for text in self.texts:
			if tag is None or text.tag == tag:
				count += len(text.lines)
		for image in self.images:
			if tag is None or image.tag == tag:
				count += 1
		return count

	def without_tag(self, tag: str) -> "Scene":
		return Scene(
			rects=tuple(item for item in self.rects if item.tag != tag),
			texts=tuple(item for item in self.texts if item.tag != tag),
			images=tuple(item for item in self.images if item.tag != tag),
		)

	def without_slot(self, slot: int) -> "Scene":
		return Scene(
			rects=tuple(item for item in self.rects if item.slot != slot),
			texts=tuple(item for item in self.texts if item.slot != slot),
			images=tuple(item for item in self.images if item.slot != slot),
		)

	def validate(self) -> None:
		"""
		Check every instruction for drawable geometry.

		Raises:
			MalformedSceneError: On the first bad instruction.
		"""
		for index, rect in enumerate(self.rects):
			check_coords(f"rect {index}", rect.box.as_tuple())
			if rect.box.x1 <= rect.box.x0 or rect.box.y1 <= rect.box.y0:
				raise MalformedSceneError(f"rect {index}: box has no area")
			if rect.fill is None and rect.outline is None:
				raise MalformedSceneError(f"rect {index}: neither fill nor outline set")
			for colour in (rect.fill, rect.outline):
				if colour is not None and not isinstance(colour, str):
					raise MalformedSceneError(f"rect {index}: colour must be a name, got {colour!r}")
		for index, text in enumerate(self.texts):
			check_coords(f"text {index}", (text.x, text.y))
			if not isinstance(text.text, str):
				raise MalformedSceneError(f"text {index}: text must be a string, got {text.text!r}")
			if not isinstance(text.colour, str):
				raise MalformedSceneError(f"text {index}: colour must be a name, got {text.colour!r}")
			if not math.isfinite(text.typeface.size) or text.typeface.size <= 0.0:
				raise MalformedSceneError(f"text {index}: font size must be positive")
			if text.anchor not in TEXT_ANCHORS:
				raise MalformedSceneError(f"text {index}: unsupported anchor {text.anchor!r}")
		for index, image in enumerate(self.images):
			check_coords(f"image {index}", (image.x, image.y, image.width, image.height))
			if image.width <= 0.0 or image.height <= 0.0:
				raise MalformedSceneError(f"image {index}: size must be positive")


#============================================
def check_coords(label: str, values) -> None:
	"""
	Reject coordinates that are not finite or far off any page.

	Args:
		label: Instruction description for the error message.
		values: Coordinates to check.
	"""
	for value in values:
		if not math.isfinite(value) or abs(value) > SANE_COORD_LIMIT:
			raise MalformedSceneError(f"{label}: coordinate {value!r} out of bounds")


#============================================
def build_guide_rects(page: Page, colour: str = GUIDE_COLOUR) -> tuple[RectInstruction, ...]:
	"""
	Outline every label box with a guide rectangle.

	Args:
		page: Page of boxes.
		colour: Outline colour name.

	Returns:
		Guide rectangles tagged GUIDE_TAG.
	"""
	return tuple(
		RectInstruction(box=box, outline=colour, line_width=GUIDE_LINE_WIDTH, tag=GUIDE_TAG, slot=slot)
		for slot, box in enumerate(page.boxes)
	)


#============================================
def label_text_instruction(page: Page, slot: int, text: str, style: LabelStyle) -> TextInstruction:
	"""
	Centre a text block on a label box, applying template registration.

	Vertical registration counts down the sheet, so a positive text_dy
	lowers the text.

	Args:
		page: Page of boxes.
		slot: Slot number of the target box.
		text: Label text, one address line per text line.
		style: Colour and typeface.

	Returns:
		TextInstruction tagged LABEL_TAG.
	"""
	box = page[slot]
	center_x, center_y = box.center
	template = page.template
	return TextInstruction(
		x=center_x + template.text_dx * page.scale,
		y=center_y - template.text_dy * page.scale,
		text=text,
		colour=style.colour,
		typeface=style.typeface,
		anchor="center",
		tag=LABEL_TAG,
		slot=slot,
	)


#============================================
def build_label_scene(
	page: Page,
	contents: dict[int, str],
	style: LabelStyle = LabelStyle(),
	guides: bool = True,
) -> Scene:
	"""
	Build a scene placing text in selected label slots.

	Args:
		page: Page of boxes.
		contents: Text by slot number.
		style: Colour and typeface for every label.
		guides: Draw guide outlines around every box.

	Returns:
		Scene.
	"""
	rects = build_guide_rects(page) if guides else ()
	texts = []
	for slot in sorted(contents):
		if slot < 0 or slot >= len(page):
			raise IndexError(f"slot {slot} out of range for template {page.template.name!r}")
		texts.append(label_text_instruction(page, slot, contents[slot], style))
	return Scene(rects=rects, texts=tuple(texts))


#============================================
def fill_page(
	page: Page,
	text: str,
	style: LabelStyle = LabelStyle(),
	occupied=(),
	guides: bool = True,
) -> Scene:
	"""
	Repeat the same text in every slot not already used.

	Args:
		page: Page of boxes.
		text: Label text.
		style: Colour and typeface.
		occupied: Slot numbers to leave empty.
		guides: Draw guide outlines around every box.

	Returns:
		Scene.
	"""
	used = set(occupied)
	contents = {slot: text for slot in range(len(page)) if slot not in used}
	return build_label_scene(page, contents, style, guides)
