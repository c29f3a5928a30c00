# Copyright (c) 2026, Ciavaglia Timepieces and contributors
# For license information, please see license.txt

"""
Preview layer derivation for the live watch preview.

Each selected option may carry an image layer. Layers are composited back to
front by z-index: an option's explicit ``layer_z_index`` wins when positive,
otherwise the step's default slot applies:

    function (0) < size (5) < case (10) < dial (20) < hands (30) < strap (40) < extra (50)

Functions such as GMT and Submariner carry an overlay (bezel insert) that is
stacked on top of everything at ``OVERLAY_Z_INDEX`` once at least one other
layer exists.
"""

from dataclasses import asdict, dataclass
from typing import Any

from ciavaglia_atelier.ciavaglia_atelier.api.configurator_catalog import (
	FUNCTION_STEP_KEY,
	CatalogSnapshot,
	ConfiguratorOption,
)

DEFAULT_Z_INDEX = {
	FUNCTION_STEP_KEY: 0,
	"size": 5,
	"case": 10,
	"dial": 20,
	"hands": 30,
	"strap": 40,
	"extra": 50,
}

OVERLAY_Z_INDEX = 55


@dataclass
class PreviewLayer:
	key: str
	url: str
	z_index: int
	step_key: str

	def as_dict(self) -> dict[str, Any]:
		return asdict(self)


def resolve_z_index(option: ConfiguratorOption, step_key: str) -> int:
	if (option.layer_z_index or 0) > 0:
		return option.layer_z_index
	return DEFAULT_Z_INDEX.get(step_key, 0)


def derive_layers(
	catalog: CatalogSnapshot,
	function_id: str | None,
	selections: dict[str, str | None],
) -> list[PreviewLayer]:
	"""
	Build the ordered layer stack for the current selection.

	Args:
		catalog: Catalog snapshot the selection refers to
		function_id: Selected function, or None
		selections: step key -> option id

	Returns:
		list[PreviewLayer]: Sorted ascending by z-index (ties keep step order).
	"""
	function = catalog.get_function(function_id)
	if not function:
		return []

	layers = []
	if function.image_url:
		layers.append(
			PreviewLayer(
				key=f"{FUNCTION_STEP_KEY}-{function.id}",
				url=function.image_url,
				z_index=DEFAULT_Z_INDEX[FUNCTION_STEP_KEY],
				step_key=FUNCTION_STEP_KEY,
			)
		)

	for step in catalog.steps_for_function(function.id):
		option = catalog.find_option(step.key, selections.get(step.key), function.id)
		if not option:
			continue

		url = option.layer_url
		if not url and step.key == "extra":
			url = function.overlay_image_url
		if not url:
			continue

		layers.append(
			PreviewLayer(
				key=f"{step.key}-{option.id}",
				url=url,
				z_index=resolve_z_index(option, step.key),
				step_key=step.key,
			)
		)

	if function.overlay_image_url and layers:
		layers.append(
			PreviewLayer(
				key=f"overlay-{function.id}",
				url=function.overlay_image_url,
				z_index=OVERLAY_Z_INDEX,
				step_key="overlay",
			)
		)

	return sorted(layers, key=lambda layer: layer.z_index)
