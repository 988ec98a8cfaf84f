"""
Read-only registry of label sheet templates.
"""

# Standard Library
import json
import pathlib
import types

# local repo modules
import label_sheet_layout as lsl
import label_sheet_layout.config


Template = lsl.config.Template

TEMPLATE_FIELDS_MM = (
	"cell_width_mm",
	"cell_height_mm",
	"left_margin_mm",
	"gap_mm",
	"bottom_margin_mm",
)


class UnknownTemplateError(KeyError):
	"""
	Raised when a template name or product code is not registered.
	"""

	def __init__(self, name: str) -> None:
		super().__init__(name)
		self.name = name

	def __str__(self) -> str:
		return f"Unknown label template: {self.name!r}"


class TemplateRegistry:
	"""
	Immutable mapping of template names to Template records.

	Product codes (for example "L7159") resolve to the template they print on.
	"""

	def __init__(
		self,
		templates: dict[str, Template],
		product_codes: dict[str, str] | None = None,
	) -> None:
		aliases = dict(product_codes or {})
		for code, target in aliases.items():
			if target not in templates:
				raise ValueError(f"Product code {code!r} refers to unknown template {target!r}")
		self._templates = types.MappingProxyType(dict(templates))
		self._product_codes = types.MappingProxyType(aliases)

	def __contains__(self, name: object) -> bool:
		return name in self._templates or name in self._product_codes

	def __len__(self) -> int:
		return len(self._templates)

	def __iter__(self):
		return iter(self._templates)

	@property
	def product_codes(self) -> types.MappingProxyType:
		return self._product_codes

	def names(self) -> list[str]:
		return list(self._templates)

	def get(self, name: str) -> Template:
		"""
		Look up a template by name or product code.

		Args:
			name: Template name or product code.

		Returns:
			Template.

		Raises:
			UnknownTemplateError: If the name is not registered.
		"""
		if name in self._templates:
			return self._templates[name]
		target = self._product_codes.get(name)
		if target is None:
			raise UnknownTemplateError(name)
		return self._templates[target]

	@classmethod
	def from_mm_table(
		cls,
		table: dict[str, tuple],
		product_codes: dict[str, str] | None = None,
		registration: dict[str, tuple[float, float]] | None = None,
	) -> "TemplateRegistry":
		"""
		Build a registry from a millimetre table.

		Args:
			table: Mapping of name to (columns, rows, width, height,
				left margin, gap, bottom margin) in mm.
			product_codes: Optional product code aliases.
			registration: Optional (text_dx, text_dy) by template name.

		Returns:
			TemplateRegistry.
		"""
		registration = registration or {}
		templates = {}
		for name, values in table.items():
			text_dx, text_dy = registration.get(name, (0.0, 0.0))
			templates[name] = lsl.config.template_from_mm(name, *values, text_dx=text_dx, text_dy=text_dy)
		return cls(templates, product_codes)


#============================================
def build_default_registry() -> TemplateRegistry:
	"""
	Build the registry of the built-in templates.

	Returns:
		TemplateRegistry.
	"""
	return TemplateRegistry.from_mm_table(
		lsl.config.DEFAULT_TEMPLATES_MM,
		lsl.config.PRODUCT_CODES,
		lsl.config.TEXT_REGISTRATION,
	)


#============================================
def read_count(name: str, entry: dict, key: str) -> int:
	"""
	Read a whole-number label count from a template entry.

	Args:
		name: Template name.
		entry: Template entry dict.
		key: "rows" or "columns".

	Returns:
		Count as int.
	"""
	value = entry[key]
	if isinstance(value, bool) or not isinstance(value, (int, float)) or not float(value).is_integer():
		raise ValueError(f"Template {name!r}: {key} must be a whole number, got {value!r}")
	return int(value)


#============================================
def parse_template_entry(name: str, entry: dict) -> Template:
	"""
	Parse one template entry from a registry JSON document.

	Args:
		name: Template name.
		entry: Dict with rows, columns and *_mm lengths.

	Returns:
		Template.
	"""
	if not isinstance(entry, dict):
		raise ValueError(f"Template {name!r} must be an object, got {type(entry).__name__}")
	missing = [key for key in ("rows", "columns") + TEMPLATE_FIELDS_MM if key not in entry]
	if missing:
		raise ValueError(f"Template {name!r} is missing fields: {', '.join(missing)}")
	return lsl.config.template_from_mm(
		name,
		read_count(name, entry, "columns"),
		read_count(name, entry, "rows"),
		float(entry["cell_width_mm"]),
		float(entry["cell_height_mm"]),
		float(entry["left_margin_mm"]),
		float(entry["gap_mm"]),
		float(entry["bottom_margin_mm"]),
		text_dx=float(entry.get("text_dx", 0.0)),
		text_dy=float(entry.get("text_dy", 0.0)),
	)


#============================================
def load_registry(path: pathlib.Path) -> TemplateRegistry:
	"""
	Load a template registry from a JSON file.

	The file holds a "templates" object keyed by template name and an
	optional "product_codes" object mapping codes to template names.

	Args:
		path: JSON path.

	Returns:
		TemplateRegistry.
	"""
	text = pathlib.Path(path).read_text(encoding="utf-8")
	data = json.loads(text)
	if not isinstance(data, dict):
		raise ValueError(f"{path}: top level must be an object, got {type(data).__name__}")
	entries = data.get("templates")
	if not isinstance(entries, dict) or not entries:
		raise ValueError(f"{path}: no templates defined")
	product_codes = data.get("product_codes", {})
	if not isinstance(product_codes, dict):
		raise ValueError(f"{path}: product_codes must be an object")
	templates = {}
	for name, entry in entries.items():
		templates[name] = parse_template_entry(name, entry)
	return TemplateRegistry(templates, product_codes)


DEFAULT_REGISTRY = build_default_registry()
