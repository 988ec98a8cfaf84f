import pytest

import label_sheet_layout as lsl
import label_sheet_layout.grid
import label_sheet_layout.scene


Scene = lsl.scene.Scene
Box = lsl.grid.Box


#============================================
def test_label_scene_counts() -> None:
	"""
	Guides give one primitive per box and text one per line.
	"""
	page = lsl.grid.compute_grid("2x4")
	scene = lsl.scene.build_label_scene(page, {0: "Jane Doe\n1 High St\n", 5: "Bob"})
	assert len(scene.rects) == 8
	assert len(scene.texts) == 2
	assert scene.primitive_count() == 8 + 2 + 1
	assert scene.primitive_count(lsl.scene.GUIDE_TAG) == 8
	assert scene.primitive_count(lsl.scene.LABEL_TAG) == 3
	assert scene.tags() == {lsl.scene.GUIDE_TAG, lsl.scene.LABEL_TAG}


#============================================
def test_without_tag_removes_only_that_tag() -> None:
	"""
	Removing the guides leaves the label text untouched.
	"""
	page = lsl.grid.compute_grid("3x7")
	scene = lsl.scene.fill_page(page, "A\nB")
	trimmed = scene.without_tag(lsl.scene.GUIDE_TAG)
	assert trimmed.rects == ()
	assert trimmed.texts == scene.texts
	expected = scene.primitive_count() - scene.primitive_count(lsl.scene.GUIDE_TAG)
	assert trimmed.primitive_count() == expected
	assert len(scene.rects) == 21


#============================================
def test_without_slot() -> None:
	"""
	Removing a slot drops its guide and its text.
	"""
	page = lsl.grid.compute_grid("2x7")
	scene = lsl.scene.build_label_scene(page, {0: "a", 1: "b"})
	trimmed = scene.without_slot(1)
	assert [text.slot for text in trimmed.texts] == [0]
	assert all(rect.slot != 1 for rect in trimmed.rects)
	assert len(trimmed.rects) == len(scene.rects) - 1


#============================================
def test_fill_page_skips_occupied_slots() -> None:
	"""
	Filling the page leaves used slots empty.
	"""
	page = lsl.grid.compute_grid("2x4")
	scene = lsl.scene.fill_page(page, "x", occupied={1, 2}, guides=False)
	assert scene.rects == ()
	assert [text.slot for text in scene.texts] == [0, 3, 4, 5, 6, 7]


#============================================
def test_label_text_is_centred_with_registration() -> None:
	"""
	Text anchors at the box centre moved by the template registration.
	"""
	page = lsl.grid.compute_grid("2x7")
	style = lsl.scene.LabelStyle(colour="blue")
	instruction = lsl.scene.label_text_instruction(page, 3, "x", style)
	center_x, center_y = page[3].center
	assert instruction.anchor == "center"
	assert instruction.x == pytest.approx(center_x - 5.0)
	assert instruction.y == pytest.approx(center_y - 5.0)
	assert instruction.colour == "blue"
	assert instruction.slot == 3


#============================================
def test_registration_scales_with_page() -> None:
	"""
	Registration offsets shrink with the grid scale.
	"""
	page = lsl.grid.compute_grid("3x7", 0.5)
	instruction = lsl.scene.label_text_instruction(page, 0, "x", lsl.scene.LabelStyle())
	assert instruction.x == pytest.approx(page[0].center[0] - 4.0)


#============================================
def test_slot_out_of_range() -> None:
	"""
	Contents for a slot the page does not have are rejected.
	"""
	page = lsl.grid.compute_grid("long")
	with pytest.raises(IndexError):
		lsl.scene.build_label_scene(page, {1: "x"})


#============================================
@pytest.mark.parametrize(
	"scene",
	[
		Scene(rects=(lsl.scene.RectInstruction(Box(0, 0, 10, 10)),)),
		Scene(rects=(lsl.scene.RectInstruction(Box(0, 0, 1e6, 10), fill="red"),)),
		Scene(rects=(lsl.scene.RectInstruction(Box(5, 0, 5, 10), fill="red"),)),
		Scene(texts=(lsl.scene.TextInstruction(float("nan"), 0, "x"),)),
		Scene(texts=(lsl.scene.TextInstruction(0, 0, "x", typeface=lsl.scene.Typeface(size=0)),)),
		Scene(texts=(lsl.scene.TextInstruction(0, 0, "x", anchor="se"),)),
		Scene(images=(lsl.scene.ImageInstruction(0, 0, 0, 10, "a.png"),)),
		Scene(texts=(lsl.scene.TextInstruction(0, 0, "x", colour=None),)),
		Scene(rects=(lsl.scene.RectInstruction(Box(0, 0, 10, 10), fill=(1, 0, 0)),)),
	],
)
def test_validate_rejects_malformed(scene: Scene) -> None:
	"""
	Instructions with unusable geometry fail validation.
	"""
	with pytest.raises(lsl.scene.MalformedSceneError):
		scene.validate()


#============================================
def test_validate_accepts_label_scene() -> None:
	"""
	Scenes from the builders are valid.
	"""
	page = lsl.grid.compute_grid("5x13")
	lsl.scene.fill_page(page, "Jane\nDoe").validate()
	Scene().validate()
