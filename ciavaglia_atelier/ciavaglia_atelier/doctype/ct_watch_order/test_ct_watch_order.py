# Copyright (c) 2026, Ciavaglia Timepieces and Contributors
# See license.txt

import re

import frappe
from frappe.tests.utils import FrappeTestCase


class TestCTWatchOrder(FrappeTestCase):
	def _new_order(self, **values):
		return frappe.get_doc(
			{
				"doctype": "CT-Watch-Order",
				"summary": "Built watch · Heritage Oak",
				"total": 4200,
				"stripe_session_id": f"cs_test_{frappe.generate_hash(length=12)}",
				**values,
			}
		)

	def test_order_number_format(self):
		order = self._new_order().insert(ignore_permissions=True)

		self.assertRegex(order.order_number, re.compile(r"^CT-[0-9A-F]{8}$"))
		self.assertEqual(order.name, order.order_number)

	def test_status_normalized(self):
		order = self._new_order(status="Shipped").insert(ignore_permissions=True)
		self.assertEqual(order.status, "shipped")

	def test_invalid_status(self):
		self.assertRaises(frappe.ValidationError, self._new_order(status="lost").insert)

	def test_tracking_url_from_carrier(self):
		order = self._new_order(tracking_carrier="Purolator", tracking_number="329000000000").insert(
			ignore_permissions=True
		)
		self.assertEqual(
			order.tracking_url,
			"https://www.purolator.com/en/ship-track/tracking-search.page?q=329000000000",
		)

	def test_public_status_defaults(self):
		order = self._new_order().insert(ignore_permissions=True)
		order.status = ""

		status = order.get_public_status()

		self.assertEqual(status["status"], "new")
		self.assertIsNone(status["tracking_number"])
		self.assertEqual(status["summary"], "Built watch · Heritage Oak")
