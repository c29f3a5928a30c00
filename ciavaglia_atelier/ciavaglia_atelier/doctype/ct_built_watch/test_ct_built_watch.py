# Copyright (c) 2026, Ciavaglia Timepieces and Contributors
# See license.txt

import frappe
from frappe.tests.utils import FrappeTestCase

from ciavaglia_atelier.ciavaglia_atelier.doctype.ct_built_watch.ct_built_watch import decrement_stock


class TestCTBuiltWatch(FrappeTestCase):
	def _new_watch(self, **values):
		return frappe.get_doc(
			{
				"doctype": "CT-Built-Watch",
				"watch_name": f"Test GMT Meridian {frappe.generate_hash(length=6)}",
				"price": 6400,
				"stock": 2,
				**values,
			}
		)

	def test_id_slugified_from_name(self):
		watch = self._new_watch().insert(ignore_permissions=True)

		self.assertEqual(watch.name, watch.watch_id)
		self.assertTrue(watch.watch_id.startswith("test-gmt-meridian-"))

	def test_explicit_id_is_slugified(self):
		suffix = frappe.generate_hash(length=6)
		watch = self._new_watch(watch_id=f"Heritage Oak #{suffix}").insert(ignore_permissions=True)

		self.assertEqual(watch.name, f"heritage-oak-{suffix}")

	def test_id_length_limit(self):
		watch = self._new_watch(watch_id="a" * 101)
		self.assertRaises(frappe.ValidationError, watch.insert, ignore_permissions=True)

	def test_price_and_stock_limits(self):
		self.assertRaises(frappe.ValidationError, self._new_watch(price=1_000_000.01).insert)
		self.assertRaises(frappe.ValidationError, self._new_watch(stock=-1).insert)

	def test_decrement_stock_stops_at_zero(self):
		watch = self._new_watch(stock=1).insert(ignore_permissions=True)

		self.assertTrue(decrement_stock(watch.name))
		self.assertFalse(decrement_stock(watch.name))
		self.assertEqual(frappe.db.get_value("CT-Built-Watch", watch.name, "stock"), 0)
