# Copyright (c) 2026, Ciavaglia Timepieces and contributors
# For license information, please see license.txt

import json

import frappe
from frappe import _
from frappe.model.document import Document


class CTWatchConfiguration(Document):
	"""
	A configuration submitted to checkout.

	Custom builds store the checkout payload (``steps``, ``addons``, ``price``)
	in ``options_json``; built watches store ``product_id`` and ``title``.
	``price`` is always the server-computed amount, ``client_price`` what the
	browser claimed.
	"""

	def validate(self):
		if self.configuration_type not in ("custom", "built"):
			frappe.throw(_("Invalid configuration type: {0}").format(self.configuration_type))

		if self.configuration_type == "built" and not self.built_watch:
			frappe.throw(_("Built Watch is required for built configurations"))

		if (self.price or 0) < 0:
			frappe.throw(_("Price cannot be negative"))

	def get_configuration(self) -> dict:
		if not self.options_json:
			return {}
		if isinstance(self.options_json, str):
			return json.loads(self.options_json)
		return self.options_json

	def set_configuration(self, configuration: dict):
		self.options_json = json.dumps(configuration or {})

	def mark_paid(self):
		"""Flag the configuration as paid; repeated calls are no-ops."""
		if self.status == "Paid":
			return False
		self.status = "Paid"
		self.save(ignore_permissions=True)
		return True
