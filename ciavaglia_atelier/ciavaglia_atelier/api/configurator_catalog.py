# Copyright (c) 2026, Ciavaglia Timepieces and contributors
# For license information, please see license.txt

"""
Configurator Catalog

Read-only snapshot of everything the configurator needs: watch functions
(families), the ordered steps each function walks through, the options of every
step and the add-ons offered on top of some options.

The snapshot is built once per configurator session, either from the catalog
DocTypes (see ``api/configurator.py``) or from a plain dict in the
``get_configurator_init`` response shape:

    {
        "functions": [{"id", "labels", "letter", "price", "steps": [step_key, ...],
                       "image_url", "overlay_image_url"}],
        "steps":     [{"key", "labels", "optional"}],
        "options":   [{"id", "step", "labels", "letter", "price", "parent_option_id",
                       "image_url", "preview_image_url", "layer_image_url", "layer_z_index"}],
        "addons":    [{"id", "step", "labels", "price", "option_ids": [...]}]
    }

This module has no Frappe dependency so the engine can run anywhere.
"""

from dataclasses import dataclass, field
from typing import Any

from ciavaglia_atelier.ciavaglia_atelier.api.locale_labels import resolve_label

# Step 0 of every session: choosing the watch function itself
FUNCTION_STEP_KEY = "function"


@dataclass
class WatchFunction:
	id: str
	labels: dict[str, str] = field(default_factory=dict)
	letter: str = ""
	price: float = 0
	step_keys: list[str] = field(default_factory=list)
	# Base watch silhouette, the bottom preview layer
	image_url: str | None = None
	# Function-wide overlay stacked above every layer (e.g. GMT bezel insert)
	overlay_image_url: str | None = None

	def label(self, locale: str | None = None) -> str:
		return resolve_label(self.labels, locale) or self.id


@dataclass
class ConfiguratorStep:
	key: str
	labels: dict[str, str] = field(default_factory=dict)
	optional: bool = False

	def label(self, locale: str | None = None) -> str:
		return resolve_label(self.labels, locale) or self.key


@dataclass
class ConfiguratorOption:
	id: str
	step_key: str
	labels: dict[str, str] = field(default_factory=dict)
	letter: str = ""
	price: float = 0
	parent_option_id: str | None = None
	image_url: str | None = None
	preview_image_url: str | None = None
	layer_image_url: str | None = None
	layer_z_index: int = 0

	def label(self, locale: str | None = None) -> str:
		return resolve_label(self.labels, locale) or self.id

	def is_visible_for(self, function_id: str | None) -> bool:
		"""An option is visible when unscoped or scoped to the selected function."""
		return not self.parent_option_id or self.parent_option_id == function_id

	@property
	def layer_url(self) -> str | None:
		return self.layer_image_url or self.image_url or self.preview_image_url


@dataclass
class ConfiguratorAddon:
	id: str
	step_key: str
	labels: dict[str, str] = field(default_factory=dict)
	price: float = 0
	# Empty means the add-on is offered for any selection on its step
	option_ids: list[str] = field(default_factory=list)

	def label(self, locale: str | None = None) -> str:
		return resolve_label(self.labels, locale) or self.id

	def is_eligible(self, selected_option_id: str | None) -> bool:
		if not selected_option_id:
			return False
		if not self.option_ids:
			return True
		return selected_option_id in self.option_ids


class CatalogSnapshot:
	"""Immutable-by-convention view over functions, steps, options and add-ons."""

	def __init__(
		self,
		functions: list[WatchFunction] | None = None,
		steps: list[ConfiguratorStep] | None = None,
		options: list[ConfiguratorOption] | None = None,
		addons: list[ConfiguratorAddon] | None = None,
	):
		self.functions = list(functions or [])
		self.steps = list(steps or [])
		self.options = list(options or [])
		self.addons = list(addons or [])

		self._functions_by_id = {f.id: f for f in self.functions}
		self._steps_by_key = {s.key: s for s in self.steps}
		self._addons_by_id = {a.id: a for a in self.addons}

	@property
	def is_empty(self) -> bool:
		return not self.functions

	def get_function(self, function_id: str | None) -> WatchFunction | None:
		if not function_id:
			return None
		return self._functions_by_id.get(function_id)

	def get_step(self, step_key: str) -> ConfiguratorStep | None:
		return self._steps_by_key.get(step_key)

	def get_addon(self, addon_id: str) -> ConfiguratorAddon | None:
		return self._addons_by_id.get(addon_id)

	def steps_for_function(self, function_id: str | None) -> list[ConfiguratorStep]:
		"""Ordered steps after the function step; unknown functions have none."""
		function = self.get_function(function_id)
		if not function:
			return []
		return [self._steps_by_key[key] for key in function.step_keys if key in self._steps_by_key]

	def options_for_step(self, step_key: str, function_id: str | None) -> list[ConfiguratorOption]:
		"""Options of a step that are visible for the given function."""
		return [
			option
			for option in self.options
			if option.step_key == step_key and option.is_visible_for(function_id)
		]

	def find_option(
		self, step_key: str, option_id: str | None, function_id: str | None
	) -> ConfiguratorOption | None:
		"""Resolve a selected id against the step's scoped options, or None."""
		if not option_id:
			return None
		for option in self.options_for_step(step_key, function_id):
			if option.id == option_id:
				return option
		return None

	def addons_for_step(self, step_key: str) -> list[ConfiguratorAddon]:
		return [addon for addon in self.addons if addon.step_key == step_key]

	def eligible_addons(self, step_key: str, selected_option_id: str | None) -> list[ConfiguratorAddon]:
		"""Add-ons to display for the current selection on a step."""
		return [addon for addon in self.addons_for_step(step_key) if addon.is_eligible(selected_option_id)]

	# -------------------------------------------------------------------------
	# Serialization
	# -------------------------------------------------------------------------

	@classmethod
	def from_dict(cls, data: dict[str, Any] | None) -> "CatalogSnapshot":
		data = data or {}

		functions = [
			WatchFunction(
				id=row["id"],
				labels=_labels(row),
				letter=row.get("letter") or "",
				price=float(row.get("price") or 0),
				step_keys=list(row.get("steps") or []),
				image_url=row.get("image_url"),
				overlay_image_url=row.get("overlay_image_url"),
			)
			for row in data.get("functions") or []
		]
		steps = [
			ConfiguratorStep(
				key=row["key"],
				labels=_labels(row),
				optional=bool(row.get("optional")),
			)
			for row in data.get("steps") or []
		]
		options = [
			ConfiguratorOption(
				id=row["id"],
				step_key=row["step"],
				labels=_labels(row),
				letter=row.get("letter") or "",
				price=float(row.get("price") or 0),
				parent_option_id=row.get("parent_option_id"),
				image_url=row.get("image_url"),
				preview_image_url=row.get("preview_image_url"),
				layer_image_url=row.get("layer_image_url"),
				layer_z_index=int(row.get("layer_z_index") or 0),
			)
			for row in data.get("options") or []
		]
		addons = [
			ConfiguratorAddon(
				id=row["id"],
				step_key=row["step"],
				labels=_labels(row),
				price=float(row.get("price") or 0),
				option_ids=list(row.get("option_ids") or []),
			)
			for row in data.get("addons") or []
		]
		return cls(functions, steps, options, addons)

	def to_dict(self) -> dict[str, Any]:
		return {
			"functions": [
				{
					"id": f.id,
					"labels": dict(f.labels),
					"letter": f.letter,
					"price": f.price,
					"steps": list(f.step_keys),
					"image_url": f.image_url,
					"overlay_image_url": f.overlay_image_url,
				}
				for f in self.functions
			],
			"steps": [
				{
					"key": s.key,
					"labels": dict(s.labels),
					"optional": s.optional,
				}
				for s in self.steps
			],
			"options": [
				{
					"id": o.id,
					"step": o.step_key,
					"labels": dict(o.labels),
					"letter": o.letter,
					"price": o.price,
					"parent_option_id": o.parent_option_id,
					"image_url": o.image_url,
					"preview_image_url": o.preview_image_url,
					"layer_image_url": o.layer_image_url,
					"layer_z_index": o.layer_z_index,
				}
				for o in self.options
			],
			"addons": [
				{
					"id": a.id,
					"step": a.step_key,
					"labels": dict(a.labels),
					"price": a.price,
					"option_ids": list(a.option_ids),
				}
				for a in self.addons
			],
		}


def _labels(row: dict) -> dict[str, str]:
	labels = row.get("labels")
	if isinstance(labels, dict):
		return dict(labels)
	if row.get("label"):
		return {"en": row["label"]}
	return {}
