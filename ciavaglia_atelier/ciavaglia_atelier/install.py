# Copyright (c) 2026, Ciavaglia Timepieces and contributors
# For license information, please see license.txt

"""
Installation and setup utilities for Ciavaglia Atelier.

Creates the Atelier Admin role and seeds the configurator catalog
(functions, steps, options, add-ons) on a fresh site.
"""

import frappe

from ciavaglia_atelier.ciavaglia_atelier.api.catalog_seed import default_catalog_data
from ciavaglia_atelier.ciavaglia_atelier.utils import ATELIER_ADMIN_ROLE


def after_install():
	create_atelier_admin_role()
	seed_configurator_catalog()
	frappe.db.commit()


def create_atelier_admin_role():
	"""Create the Atelier Admin role (order follow-up and built-watch catalog)."""
	if frappe.db.exists("Role", ATELIER_ADMIN_ROLE):
		frappe.logger("ciavaglia_atelier").info(f"{ATELIER_ADMIN_ROLE} role already exists, skipping creation")
		return

	role = frappe.new_doc("Role")
	role.role_name = ATELIER_ADMIN_ROLE
	role.desk_access = 1
	role.disabled = 0
	role.insert(ignore_permissions=True)

	frappe.logger("ciavaglia_atelier").info(f"Created {ATELIER_ADMIN_ROLE} role")


def seed_configurator_catalog(force: bool = False):
	"""
	Load the default catalog into the configurator doctypes.

	Skipped when functions already exist unless ``force`` is set; existing
	records are never overwritten.
	"""
	if frappe.db.count("CT-Watch-Function") and not force:
		frappe.logger("ciavaglia_atelier").info("Configurator catalog already present, skipping seed")
		return

	data = default_catalog_data()

	for sort_order, step in enumerate(data["steps"]):
		_insert_if_missing(
			"CT-Configurator-Step",
			step["key"],
			{
				"step_key": step["key"],
				"label_en": step["labels"].get("en"),
				"label_fr": step["labels"].get("fr"),
				"is_optional": int(step.get("optional", False)),
				"sort_order": sort_order,
			},
		)

	for sort_order, function in enumerate(data["functions"]):
		_insert_if_missing(
			"CT-Watch-Function",
			function["id"],
			{
				"function_id": function["id"],
				"label_en": function["labels"].get("en"),
				"label_fr": function["labels"].get("fr"),
				"letter": function.get("letter"),
				"price": function.get("price") or 0,
				"sort_order": sort_order,
				"is_active": 1,
				"image_url": function.get("image_url"),
				"overlay_image_url": function.get("overlay_image_url"),
				"steps": [{"step": step_key} for step_key in function["steps"]],
			},
		)

	for sort_order, option in enumerate(data["options"]):
		_insert_if_missing(
			"CT-Configurator-Option",
			option["id"],
			{
				"option_id": option["id"],
				"step": option["step"],
				"parent_function": option.get("parent_option_id"),
				"label_en": option["labels"].get("en"),
				"label_fr": option["labels"].get("fr"),
				"letter": option.get("letter"),
				"price": option.get("price") or 0,
				"sort_order": sort_order,
				"is_active": 1,
				"image_url": option.get("image_url"),
				"preview_image_url": option.get("preview_image_url"),
				"layer_image_url": option.get("layer_image_url"),
				"layer_z_index": option.get("layer_z_index") or 0,
			},
		)

	for sort_order, addon in enumerate(data["addons"]):
		_insert_if_missing(
			"CT-Configurator-Addon",
			addon["id"],
			{
				"addon_id": addon["id"],
				"step": addon["step"],
				"label_en": addon["labels"].get("en"),
				"label_fr": addon["labels"].get("fr"),
				"price": addon.get("price") or 0,
				"sort_order": sort_order,
				"is_active": 1,
				"eligible_options": [{"option": option_id} for option_id in addon.get("option_ids") or []],
			},
		)

	frappe.logger("ciavaglia_atelier").info(
		f"Seeded configurator catalog: {len(data['functions'])} functions, {len(data['options'])} options"
	)


def _insert_if_missing(doctype: str, name: str, values: dict):
	if frappe.db.exists(doctype, name):
		return
	doc = frappe.get_doc({"doctype": doctype, **values})
	doc.insert(ignore_permissions=True)
