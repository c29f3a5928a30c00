# Copyright (c) 2026, Ciavaglia Timepieces and contributors
# For license information, please see license.txt

import frappe
from frappe import _
from frappe.model.document import Document

from ciavaglia_atelier.ciavaglia_atelier.utils import slugify


class CTConfiguratorAddon(Document):
	"""
	An optional extra offered on one step, e.g. a frosted finish on gold cases.

	Eligibility is limited to the options listed in ``eligible_options``; an
	empty table offers the add-on for any selection on the step.
	"""

	def before_insert(self):
		self.addon_id = slugify(self.addon_id)

	def validate(self):
		if not self.addon_id:
			frappe.throw(_("Add-on ID is required"))

		if (self.price or 0) < 0:
			frappe.throw(_("Price delta cannot be negative"))

		self._validate_eligible_options()

	def _validate_eligible_options(self):
		seen = set()
		for row in self.eligible_options or []:
			if row.option in seen:
				frappe.throw(_("Option {0} is listed more than once").format(row.option))
			seen.add(row.option)

			option_step = frappe.db.get_value("CT-Configurator-Option", row.option, "step")
			if option_step != self.step:
				frappe.throw(
					_("Option {0} belongs to step {1}, not {2}").format(row.option, option_step, self.step)
				)

	def get_option_ids(self) -> list[str]:
		return [row.option for row in self.eligible_options or []]

	def on_update(self):
		from ciavaglia_atelier.ciavaglia_atelier.api.configurator import clear_catalog_cache

		clear_catalog_cache()

	def on_trash(self):
		from ciavaglia_atelier.ciavaglia_atelier.api.configurator import clear_catalog_cache

		clear_catalog_cache()
