# Copyright (c) 2026, Ciavaglia Timepieces and contributors
# For license information, please see license.txt

import frappe
from frappe import _
from frappe.model.document import Document

from ciavaglia_atelier.ciavaglia_atelier.utils import slugify

MAX_WATCH_ID_LENGTH = 100
MAX_WATCH_NAME_LENGTH = 200
MAX_PRICE = 1_000_000
MAX_STOCK = 100_000


class CTBuiltWatch(Document):
	"""A ready-made watch sold from the shop with its own stock count."""

	def before_insert(self):
		self.watch_id = slugify(self.watch_id or self.watch_name)

	def validate(self):
		self.watch_name = (self.watch_name or "").strip()
		if not self.watch_name or len(self.watch_name) > MAX_WATCH_NAME_LENGTH:
			frappe.throw(_("Invalid product name"))

		if not self.watch_id or len(self.watch_id) > MAX_WATCH_ID_LENGTH:
			frappe.throw(_("Invalid product ID"))

		if not 0 <= (self.price or 0) <= MAX_PRICE:
			frappe.throw(_("Price must be between 0 and 1,000,000"))

		if not 0 <= (self.stock or 0) <= MAX_STOCK:
			frappe.throw(_("Stock must be between 0 and 100,000"))


def decrement_stock(watch_id: str) -> bool:
	"""
	Take one unit out of stock.

	The update is guarded on ``stock > 0`` so concurrent webhooks can never
	push the count below zero.

	Returns:
		bool: True when a unit was taken
	"""
	stock = frappe.db.get_value("CT-Built-Watch", watch_id, "stock", for_update=True) or 0
	if stock < 1:
		return False

	frappe.db.sql(
		"""
		UPDATE `tabCT-Built-Watch`
		SET stock = stock - 1, modified = %(modified)s
		WHERE name = %(name)s AND stock > 0
		""",
		{"name": watch_id, "modified": frappe.utils.now()},
	)
	return True
