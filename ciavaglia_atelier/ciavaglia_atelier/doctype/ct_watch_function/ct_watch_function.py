# Copyright (c) 2026, Ciavaglia Timepieces and contributors
# For license information, please see license.txt

import frappe
from frappe import _
from frappe.model.document import Document

from ciavaglia_atelier.ciavaglia_atelier.utils import slugify


class CTWatchFunction(Document):
	"""
	A watch family ("function") such as Oak, Skeleton or GMT.

	The ``steps`` child table lists the configurator steps that follow the
	function step, in order. Options can be scoped to a single function via
	CT-Configurator-Option.parent_function.
	"""

	def before_insert(self):
		self.function_id = slugify(self.function_id)

	def validate(self):
		if not self.function_id:
			frappe.throw(_("Function ID is required"))

		if self.letter:
			self.letter = self.letter.strip().upper()[:1]
		elif self.label_en:
			self.letter = self.label_en.strip()[:1].upper()

		if (self.price or 0) < 0:
			frappe.throw(_("Base price cannot be negative"))

		seen = set()
		for row in self.steps or []:
			if row.step in seen:
				frappe.throw(_("Step {0} is listed more than once").format(row.step))
			seen.add(row.step)

	def get_step_keys(self) -> list[str]:
		return [row.step for row in sorted(self.steps or [], key=lambda r: r.idx)]

	def on_update(self):
		from ciavaglia_atelier.ciavaglia_atelier.api.configurator import clear_catalog_cache

		clear_catalog_cache()

	def on_trash(self):
		from ciavaglia_atelier.ciavaglia_atelier.api.configurator import clear_catalog_cache

		clear_catalog_cache()
