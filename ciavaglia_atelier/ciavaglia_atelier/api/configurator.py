# Copyright (c) 2026, Ciavaglia Timepieces and contributors
# For license information, please see license.txt

"""
Configurator API

Guest endpoints behind the storefront configurator:

- get_configurator_init: the full catalog (functions, steps, options,
  add-ons) in the CatalogSnapshot dict shape
- preview_configuration: server-side total, line items and preview layers
  for the client's current state

The catalog is assembled from the CT-* doctypes and cached until any of them
changes.
"""

import json

import frappe

from ciavaglia_atelier.ciavaglia_atelier.api.configurator_catalog import CatalogSnapshot
from ciavaglia_atelier.ciavaglia_atelier.api.configurator_engine import ConfiguratorSession
from ciavaglia_atelier.ciavaglia_atelier.api.configurator_pricing import format_price
from ciavaglia_atelier.ciavaglia_atelier.api.locale_labels import (
	LOCALE_DISPLAY_NAMES,
	UI_LABELS,
	labels_from_fields,
	normalize_locale,
	resolve_label,
)
from ciavaglia_atelier.ciavaglia_atelier.utils import parse_json_arg

CATALOG_CACHE_KEY = "ciavaglia_atelier:catalog_snapshot"
CATALOG_CACHE_TTL_SECONDS = 6 * 60 * 60


# =============================================================================
# PUBLIC API ENDPOINTS
# =============================================================================


@frappe.whitelist(allow_guest=True)
def get_configurator_init(locale: str | None = None) -> dict:
	"""
	Catalog snapshot for the configurator.

	Returns:
		dict: ``functions``, ``steps``, ``options`` and ``addons`` with their
		      label mappings, plus ``is_empty`` and the localized UI labels
	"""
	locale = normalize_locale(locale)
	catalog = get_catalog_snapshot()

	return {
		"success": True,
		"locale": locale,
		"locales": LOCALE_DISPLAY_NAMES,
		"is_empty": catalog.is_empty,
		"ui_labels": {key: resolve_label(labels, locale) for key, labels in UI_LABELS.items()},
		**catalog.to_dict(),
	}


@frappe.whitelist(allow_guest=True)
def preview_configuration(
	function_id: str | None = None,
	selections: str | dict | None = None,
	addons: str | list | None = None,
	locale: str | None = None,
	step_index: int = 0,
) -> dict:
	"""
	Price and layer a configuration without persisting anything.

	Args:
		function_id: Selected function (watch family)
		selections: JSON object of step key -> option id
		addons: JSON list of checked add-on ids
		locale: Language for line item labels
		step_index: Client cursor, clamped to the function's step count

	Returns:
		dict: Session state including ``total``, ``line_items`` and ``layers``
	"""
	try:
		selections = parse_json_arg(selections, {})
		addons = parse_json_arg(addons, [])
	except json.JSONDecodeError:
		return {"success": False, "error": "Invalid JSON in selections or addons"}

	if not isinstance(selections, dict) or not isinstance(addons, (list, dict)):
		return {"success": False, "error": "Selections must be an object and addons a list"}

	session = ConfiguratorSession.from_state(
		get_catalog_snapshot(),
		function_id=function_id,
		selections=selections,
		addons=addons,
		step_index=step_index,
		locale=locale,
	)
	state = session.to_dict()

	return {
		"success": True,
		**state,
		"formatted_total": format_price(state["total"]),
	}


# =============================================================================
# CATALOG LOADING
# =============================================================================


def get_catalog_snapshot() -> CatalogSnapshot:
	"""Cached catalog snapshot; rebuilt from the doctypes on a cache miss."""
	cached = frappe.cache().get_value(CATALOG_CACHE_KEY)
	if cached:
		return CatalogSnapshot.from_dict(cached)

	data = load_catalog_data()
	frappe.cache().set_value(CATALOG_CACHE_KEY, data, expires_in_sec=CATALOG_CACHE_TTL_SECONDS)
	return CatalogSnapshot.from_dict(data)


def clear_catalog_cache():
	frappe.cache().delete_value(CATALOG_CACHE_KEY)


def load_catalog_data() -> dict:
	"""Read active functions, steps, options and add-ons in display order."""
	function_rows = frappe.get_all(
		"CT-Watch-Function",
		filters={"is_active": 1},
		fields=["function_id", "label_en", "label_fr", "letter", "price", "image_url", "overlay_image_url"],
		order_by="sort_order asc, function_id asc",
	)
	function_steps = _child_values("CT-Child-Function-Step", "CT-Watch-Function", "step")

	step_rows = frappe.get_all(
		"CT-Configurator-Step",
		fields=["step_key", "label_en", "label_fr", "is_optional"],
		order_by="sort_order asc, step_key asc",
	)

	option_rows = frappe.get_all(
		"CT-Configurator-Option",
		filters={"is_active": 1},
		fields=[
			"option_id",
			"step",
			"parent_function",
			"label_en",
			"label_fr",
			"letter",
			"price",
			"image_url",
			"preview_image_url",
			"layer_image_url",
			"layer_z_index",
		],
		order_by="sort_order asc, option_id asc",
	)

	addon_rows = frappe.get_all(
		"CT-Configurator-Addon",
		filters={"is_active": 1},
		fields=["addon_id", "step", "label_en", "label_fr", "price"],
		order_by="sort_order asc, addon_id asc",
	)
	addon_options = _child_values("CT-Child-Addon-Option", "CT-Configurator-Addon", "option")

	return {
		"functions": [
			{
				"id": row.function_id,
				"labels": labels_from_fields(row),
				"letter": row.letter or "",
				"price": row.price or 0,
				"steps": function_steps.get(row.function_id, []),
				"image_url": row.image_url,
				"overlay_image_url": row.overlay_image_url,
			}
			for row in function_rows
		],
		"steps": [
			{
				"key": row.step_key,
				"labels": labels_from_fields(row),
				"optional": bool(row.is_optional),
			}
			for row in step_rows
		],
		"options": [
			{
				"id": row.option_id,
				"step": row.step,
				"labels": labels_from_fields(row),
				"letter": row.letter or "",
				"price": row.price or 0,
				"parent_option_id": row.parent_function or None,
				"image_url": row.image_url,
				"preview_image_url": row.preview_image_url,
				"layer_image_url": row.layer_image_url,
				"layer_z_index": row.layer_z_index or 0,
			}
			for row in option_rows
		],
		"addons": [
			{
				"id": row.addon_id,
				"step": row.step,
				"labels": labels_from_fields(row),
				"price": row.price or 0,
				"option_ids": addon_options.get(row.addon_id, []),
			}
			for row in addon_rows
		],
	}


def _child_values(child_doctype: str, parent_doctype: str, fieldname: str) -> dict[str, list]:
	"""Map parent name -> child ``fieldname`` values in row order."""
	rows = frappe.get_all(
		child_doctype,
		filters={"parenttype": parent_doctype},
		fields=["parent", fieldname],
		order_by="parent asc, idx asc",
		parent_doctype=parent_doctype,
	)
	result: dict[str, list] = {}
	for row in rows:
		result.setdefault(row.parent, []).append(row.get(fieldname))
	return result
