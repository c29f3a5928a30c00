# Copyright (c) 2026, Ciavaglia Timepieces and contributors
# For license information, please see license.txt

import frappe
from frappe import _
from frappe.model.document import Document

ORDER_NUMBER_PREFIX = "CT-"
ORDER_STATUSES = ("paid", "new", "shipped", "completed")


def generate_order_number() -> str:
	"""``CT-`` followed by eight upper-case hex characters, unique among orders."""
	while True:
		order_number = ORDER_NUMBER_PREFIX + frappe.generate_hash(length=8).upper()
		if not frappe.db.exists("CT-Watch-Order", order_number):
			return order_number


class CTWatchOrder(Document):
	def autoname(self):
		if not self.order_number:
			self.order_number = generate_order_number()
		self.order_number = self.order_number.strip().upper()
		self.name = self.order_number

	def validate(self):
		self.status = (self.status or "paid").strip().lower()
		if self.status not in ORDER_STATUSES:
			frappe.throw(
				_("Invalid order status {0}. Allowed: {1}").format(self.status, ", ".join(ORDER_STATUSES))
			)

		if (self.total or 0) < 0:
			frappe.throw(_("Order total cannot be negative"))

		self._set_tracking_url()

	def _set_tracking_url(self):
		if self.tracking_url or not self.tracking_number:
			return

		from ciavaglia_atelier.ciavaglia_atelier.api.order_admin import build_tracking_url

		self.tracking_url = build_tracking_url(self.tracking_carrier, self.tracking_number)

	def get_public_status(self) -> dict:
		"""Fields a customer may see when looking an order up by number."""
		return {
			"order_number": self.order_number,
			"status": self.status or "new",
			"summary": self.summary or "",
			"total": self.total,
			"created_at": str(self.creation) if self.creation else None,
			"tracking_number": self.tracking_number or None,
			"tracking_carrier": self.tracking_carrier or None,
			"tracking_url": self.tracking_url or None,
		}
