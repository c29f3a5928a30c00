# Copyright (c) 2026, Ciavaglia Timepieces and contributors
# For license information, please see license.txt

import frappe
from frappe import _
from frappe.model.document import Document

from ciavaglia_atelier.ciavaglia_atelier.utils import slugify


class CTConfiguratorOption(Document):
	def before_insert(self):
		self.option_id = slugify(self.option_id)

	def validate(self):
		if not self.option_id:
			frappe.throw(_("Option ID is required"))

		if (self.price or 0) < 0:
			frappe.throw(_("Price delta cannot be negative"))

		if (self.layer_z_index or 0) < 0:
			frappe.throw(_("Layer Z-Index cannot be negative; use 0 for the step default"))

		if self.letter:
			self.letter = self.letter.strip().upper()[:1]
		elif self.label_en:
			self.letter = self.label_en.strip()[:1].upper()

	def on_update(self):
		from ciavaglia_atelier.ciavaglia_atelier.api.configurator import clear_catalog_cache

		clear_catalog_cache()

	def on_trash(self):
		from ciavaglia_atelier.ciavaglia_atelier.api.configurator import clear_catalog_cache

		clear_catalog_cache()
