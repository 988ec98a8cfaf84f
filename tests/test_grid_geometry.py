import pytest

import label_sheet_layout as lsl
import label_sheet_layout.config
import label_sheet_layout.grid
import label_sheet_layout.templates


POINTS_PER_MM = lsl.config.POINTS_PER_MM


#============================================
def make_registry(**overrides) -> lsl.templates.TemplateRegistry:
	"""
	Build a one-template registry for tests.

	Args:
		overrides: Template field overrides in points.

	Returns:
		TemplateRegistry holding the template "test".
	"""
	fields = {
		"name": "test",
		"rows": 3,
		"columns": 7,
		"cell_width": 63.5 * POINTS_PER_MM,
		"cell_height": 38.1 * POINTS_PER_MM,
		"left_margin": 7.0 * POINTS_PER_MM,
		"gap": 3.0 * POINTS_PER_MM,
		"bottom_margin": 13.5 * POINTS_PER_MM,
	}
	fields.update(overrides)
	template = lsl.config.Template(**fields)
	return lsl.templates.TemplateRegistry({"test": template})


#============================================
def test_box_count_matches_template() -> None:
	"""
	Every template yields rows * columns boxes, or one for single sheets.
	"""
	registry = lsl.templates.DEFAULT_REGISTRY
	for name in registry.names():
		template = registry.get(name)
		page = lsl.grid.compute_grid(name)
		if template.columns <= 1:
			assert len(page) == 1
		else:
			assert len(page) == template.rows * template.columns
		for box in page:
			assert box.x1 > box.x0
			assert box.y1 > box.y0


#============================================
def test_grid_boxes_within_a4_page() -> None:
	"""
	Ensure all label slots of the multi-label sheets are on-page.
	"""
	registry = lsl.templates.DEFAULT_REGISTRY
	for name in registry.names():
		if registry.get(name).columns <= 1:
			continue
		for box in lsl.grid.compute_grid(name):
			assert 0.0 <= box.x0 < box.x1 <= lsl.config.PAGE_WIDTH
			assert 0.0 <= box.y0 < box.y1 <= lsl.config.PAGE_HEIGHT


#============================================
def test_row_major_horizontal_spacing() -> None:
	"""
	Neighbours in a row are separated by exactly the template gap.
	"""
	for name in ("3x7", "2x7", "5x13", "2x4", "4x8"):
		page = lsl.grid.compute_grid(name)
		template = page.template
		for slot in range(len(page) - 1):
			if page.row_of(slot) != page.row_of(slot + 1):
				continue
			left_box = page[slot]
			right_box = page[slot + 1]
			assert right_box.x0 == pytest.approx(left_box.x1 + template.gap)
			assert right_box.y0 == pytest.approx(left_box.y0)


#============================================
def test_rows_stack_without_gap() -> None:
	"""
	The first box of each row starts where the row below ends.
	"""
	page = lsl.grid.compute_grid("3x7")
	columns = page.template.columns
	for row in range(page.template.rows - 1):
		lower_box = page[row * columns]
		upper_box = page[(row + 1) * columns]
		assert upper_box.y0 == pytest.approx(lower_box.y1)
		assert upper_box.x0 == pytest.approx(lower_box.x0)


#============================================
def test_bottom_row_comes_first() -> None:
	"""
	Slot 0 is the bottom-left box and the last slot is top-right.
	"""
	page = lsl.grid.compute_grid("2x4")
	first = page[0]
	last = page[len(page) - 1]
	assert first.y0 == pytest.approx(min(box.y0 for box in page))
	assert first.x0 == pytest.approx(min(box.x0 for box in page))
	assert last.y1 == pytest.approx(max(box.y1 for box in page))
	assert last.x1 == pytest.approx(max(box.x1 for box in page))


#============================================
@pytest.mark.parametrize("scale", [0.27, 0.5, 2.0])
def test_scale_is_linear(scale: float) -> None:
	"""
	Scaled grids equal the full-size grid scaled about the origin.
	"""
	full = lsl.grid.compute_grid("5x13", 1.0)
	scaled = lsl.grid.compute_grid("5x13", scale)
	assert len(full) == len(scaled)
	for full_box, scaled_box in zip(full, scaled):
		assert scaled_box.as_tuple() == pytest.approx(full_box.scaled(scale).as_tuple())


#============================================
def test_avery_3x7_first_boxes() -> None:
	"""
	The 3x7 sheet starts at the physical margins and steps by width + gap.
	"""
	page = lsl.grid.compute_grid("3x7", 1.0)
	box0 = page[0]
	box1 = page[1]
	assert box0.x0 == pytest.approx(7.0 * POINTS_PER_MM)
	assert box0.y0 == pytest.approx(13.5 * POINTS_PER_MM)
	assert box0.width == pytest.approx(63.5 * POINTS_PER_MM)
	assert box0.height == pytest.approx(38.1 * POINTS_PER_MM)
	assert box1.x0 - box0.x0 == pytest.approx((63.5 + 3.0) * POINTS_PER_MM)
	assert box1.y0 == pytest.approx(box0.y0)


#============================================
def test_three_rows_of_seven() -> None:
	"""
	A template with rows=3 and columns=7 lays out three rows of seven.
	"""
	registry = make_registry()
	page = lsl.grid.compute_grid("test", 1.0, registry)
	assert len(page) == 21
	assert page[0].x0 == pytest.approx(7.0 * POINTS_PER_MM)
	assert page[0].y0 == pytest.approx(13.5 * POINTS_PER_MM)
	assert page[1].x0 == pytest.approx(page[0].x0 + (63.5 + 3.0) * POINTS_PER_MM)
	assert page[7].y0 == pytest.approx(page[0].y1)
	assert page[7].x0 == pytest.approx(page[0].x0)


#============================================
def test_single_column_template_is_one_box() -> None:
	"""
	Templates with one column produce a single box whatever the row count.
	"""
	registry = make_registry(rows=4, columns=1)
	page = lsl.grid.compute_grid("test", 1.0, registry)
	assert len(page) == 1
	box = page[0]
	assert box.x0 == pytest.approx(7.0 * POINTS_PER_MM)
	assert box.y0 == pytest.approx(13.5 * POINTS_PER_MM)
	assert box.x1 == pytest.approx(box.x0 + 63.5 * POINTS_PER_MM)
	assert box.y1 == pytest.approx(box.y0 + 38.1 * POINTS_PER_MM)


#============================================
def test_envelope_box_at_origin() -> None:
	"""
	The envelope template has no margins.
	"""
	page = lsl.grid.compute_grid("envelope")
	assert len(page) == 1
	assert page[0].x0 == 0.0
	assert page[0].y0 == 0.0
	assert page[0].width == pytest.approx(229.0 * POINTS_PER_MM)


#============================================
def test_product_code_matches_template() -> None:
	"""
	Product codes resolve to the same grid as the template name.
	"""
	assert lsl.grid.compute_grid("L7159") == lsl.grid.compute_grid("3x7")
	assert lsl.grid.compute_grid("J8551") == lsl.grid.compute_grid("5x13")


#============================================
def test_unknown_template_raises() -> None:
	"""
	An unregistered name fails before any boxes are produced.
	"""
	with pytest.raises(lsl.templates.UnknownTemplateError):
		lsl.grid.compute_grid("9x9")
	with pytest.raises(KeyError):
		lsl.grid.compute_grid("")


#============================================
@pytest.mark.parametrize("scale", [0.0, -1.0, float("nan"), float("inf")])
def test_bad_scale_raises(scale: float) -> None:
	"""
	Scale factors must be finite and positive.
	"""
	with pytest.raises(ValueError):
		lsl.grid.compute_grid("3x7", scale)


#============================================
def test_find_free_slot_follows_slot_order() -> None:
	"""
	The first unused slot is returned, or None for a full page.
	"""
	page = lsl.grid.compute_grid("2x4")
	assert lsl.grid.find_free_slot(page, []) == 0
	assert lsl.grid.find_free_slot(page, {0, 1, 3}) == 2
	assert lsl.grid.find_free_slot(page, range(len(page))) is None


#============================================
def test_format_grid_rows() -> None:
	"""
	The corner listing has one line per box and a blank line per row.
	"""
	page = lsl.grid.compute_grid("3x7")
	lines = lsl.grid.format_grid(page)
	assert len(lines) == 21 + 7
	assert lines[0].startswith(" 0 : ")
	assert lines[3] == ""
	x0, y0 = lines[0].split(":")[1].split()[:2]
	assert int(x0) == round(page[0].x0)
	assert int(y0) == round(page[0].y0)
