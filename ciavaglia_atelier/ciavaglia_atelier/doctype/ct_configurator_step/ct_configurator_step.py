# Copyright (c) 2026, Ciavaglia Timepieces and contributors
# For license information, please see license.txt

import frappe
from frappe import _
from frappe.model.document import Document

from ciavaglia_atelier.ciavaglia_atelier.api.configurator_catalog import FUNCTION_STEP_KEY
from ciavaglia_atelier.ciavaglia_atelier.utils import slugify


class CTConfiguratorStep(Document):
	def before_insert(self):
		self.step_key = slugify(self.step_key)

	def validate(self):
		if not self.step_key:
			frappe.throw(_("Step Key is required"))
		if self.step_key == FUNCTION_STEP_KEY:
			frappe.throw(_("'{0}' is reserved for the function step").format(FUNCTION_STEP_KEY))

	def on_update(self):
		from ciavaglia_atelier.ciavaglia_atelier.api.configurator import clear_catalog_cache

		clear_catalog_cache()

	def on_trash(self):
		from ciavaglia_atelier.ciavaglia_atelier.api.configurator import clear_catalog_cache

		clear_catalog_cache()
