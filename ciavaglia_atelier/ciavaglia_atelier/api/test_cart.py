# Copyright (c) 2026, Ciavaglia Timepieces and Contributors
# See license.txt

"""
Tests for the session cart
"""

import unittest
from unittest.mock import MagicMock, patch

import frappe
from frappe.tests.utils import FrappeTestCase

from ciavaglia_atelier.ciavaglia_atelier.api.cart import (
	add_cart_item,
	cart_count,
	cart_total,
	remove_cart_item,
	update_cart_quantity,
)
from ciavaglia_atelier.ciavaglia_atelier.api.catalog_seed import default_catalog
from ciavaglia_atelier.ciavaglia_atelier.api.configurator_catalog import CatalogSnapshot

BUILT_ITEM = {"product_id": "heritage-oak", "quantity": 1, "price": 4200, "title": "Heritage Oak"}
CUSTOM_ITEM = {
	"product_id": "custom-oak",
	"quantity": 1,
	"price": 1230,
	"configuration": {"steps": ["oak", "black", "onyx-black", "sword-black", "rubber-sport"], "addons": []},
}


class TestCartHelpers(unittest.TestCase):
	def test_built_items_merge(self):
		cart = add_cart_item([], BUILT_ITEM)
		cart = add_cart_item(cart, dict(BUILT_ITEM, quantity=2))

		self.assertEqual(len(cart), 1)
		self.assertEqual(cart[0]["quantity"], 3)
		self.assertEqual(cart_total(cart), 12600)

	def test_custom_items_never_merge(self):
		cart = add_cart_item([], CUSTOM_ITEM)
		cart = add_cart_item(cart, CUSTOM_ITEM)

		self.assertEqual(len(cart), 2)
		self.assertNotEqual(cart[0]["id"], cart[1]["id"])

	def test_different_configuration_does_not_merge(self):
		cart = add_cart_item([], dict(BUILT_ITEM, configuration={"engraving": "A"}))
		cart = add_cart_item(cart, dict(BUILT_ITEM, configuration={"engraving": "B"}))
		self.assertEqual(len(cart), 2)

	def test_update_quantity(self):
		cart = add_cart_item([], BUILT_ITEM)
		item_id = cart[0]["id"]

		cart = update_cart_quantity(cart, item_id, 4)
		self.assertEqual(cart_count(cart), 4)

		self.assertEqual(update_cart_quantity(cart, item_id, 0), [])
		self.assertEqual(update_cart_quantity(cart, item_id, "-3"), [])

	def test_remove_and_input_not_mutated(self):
		original = add_cart_item(add_cart_item([], BUILT_ITEM), CUSTOM_ITEM)

		cart = remove_cart_item(original, original[0]["id"])

		self.assertEqual([item["product_id"] for item in cart], ["custom-oak"])
		self.assertEqual(len(original), 2)
		self.assertEqual(cart_count([]), 0)


class TestCartEndpoints(FrappeTestCase):
	def setUp(self):
		frappe.set_user("Administrator")
		catalog_patch = patch(
			"ciavaglia_atelier.ciavaglia_atelier.api.cart.get_catalog_snapshot",
			return_value=default_catalog(),
		)
		catalog_patch.start()
		self.addCleanup(catalog_patch.stop)

		from ciavaglia_atelier.ciavaglia_atelier.api.cart import _user_cart_key

		frappe.cache().delete_value(_user_cart_key("Administrator"))

	def test_custom_build_priced_server_side(self):
		from ciavaglia_atelier.ciavaglia_atelier.api.cart import add_to_cart, get_cart

		result = add_to_cart("custom-oak", configuration=dict(CUSTOM_ITEM["configuration"], price=5))

		self.assertTrue(result["success"])
		self.assertEqual(result["items"][0]["price"], 1230)
		self.assertEqual(result["items"][0]["title"], "Oak · Black / Onyx Black / Sword Black / Rubber Sport")
		self.assertEqual(get_cart()["count"], 1)

	def test_unknown_product(self):
		from ciavaglia_atelier.ciavaglia_atelier.api.cart import add_to_cart

		result = add_to_cart("no-such-watch")
		self.assertFalse(result["success"])
		self.assertEqual(result["error"], "Unknown product")

	def test_custom_without_configuration(self):
		from ciavaglia_atelier.ciavaglia_atelier.api.cart import add_to_cart

		result = add_to_cart("custom-oak")
		self.assertEqual(result["error"], "Missing configuration")

	def test_built_watch_round_trip(self):
		from ciavaglia_atelier.ciavaglia_atelier.api.cart import add_to_cart, remove_from_cart, update_cart_item

		watch = frappe.get_doc(
			{
				"doctype": "CT-Built-Watch",
				"watch_name": f"Test Cart Chronograph {frappe.generate_hash(length=6)}",
				"price": 3900,
				"stock": 5,
			}
		).insert(ignore_permissions=True)

		add_to_cart(watch.name, quantity=1)
		result = add_to_cart(watch.name, quantity=2)
		self.assertEqual(result["count"], 3)
		self.assertEqual(result["total"], 11700)

		item_id = result["items"][0]["id"]
		self.assertEqual(update_cart_item(item_id, 1)["total"], 3900)
		self.assertEqual(remove_from_cart(item_id)["items"], [])

	def test_incomplete_custom_build_rejected(self):
		"""A build that checkout would refuse never reaches the cart"""
		from ciavaglia_atelier.ciavaglia_atelier.api.cart import add_to_cart, get_cart

		result = add_to_cart("custom-oak", configuration={"steps": ["oak"], "addons": [], "price": 0})

		self.assertFalse(result["success"])
		self.assertEqual(result["error"], "Configuration is incomplete: case, dial, hands, strap")
		self.assertEqual(get_cart()["count"], 0)

	def test_unpriced_custom_build_rejected(self):
		from ciavaglia_atelier.ciavaglia_atelier.api.cart import add_to_cart

		catalog = CatalogSnapshot.from_dict(
			{
				"functions": [{"id": "plain", "steps": ["case"]}],
				"steps": [{"key": "case"}],
				"options": [{"id": "bare", "step": "case", "price": 0}],
			}
		)
		with patch("ciavaglia_atelier.ciavaglia_atelier.api.cart.get_catalog_snapshot", return_value=catalog):
			result = add_to_cart("custom-plain", configuration={"steps": ["plain", "bare"], "addons": []})

		self.assertEqual(result["error"], "Configuration has no price")


class TestCartOwnership(FrappeTestCase):
	"""Guests share the Guest session, so carts follow the cart token"""

	def setUp(self):
		frappe.set_user("Administrator")
		catalog_patch = patch(
			"ciavaglia_atelier.ciavaglia_atelier.api.cart.get_catalog_snapshot",
			return_value=default_catalog(),
		)
		catalog_patch.start()
		self.addCleanup(catalog_patch.stop)

		from ciavaglia_atelier.ciavaglia_atelier.api.cart import _user_cart_key

		frappe.cache().delete_value(_user_cart_key("Administrator"))

	def _as_guest(self):
		return patch.object(frappe, "session", MagicMock(user="Guest", sid="Guest"))

	def test_guests_do_not_share_a_cart(self):
		from ciavaglia_atelier.ciavaglia_atelier.api.cart import add_to_cart, get_cart, remove_from_cart

		with self._as_guest():
			first = add_to_cart("custom-oak", configuration=CUSTOM_ITEM["configuration"])
			second = get_cart()

			self.assertTrue(first["cart_token"])
			self.assertNotEqual(first["cart_token"], second["cart_token"])
			self.assertEqual(second["items"], [])

			item_id = first["items"][0]["id"]
			remove_from_cart(item_id, cart_token=second["cart_token"])
			self.assertEqual(get_cart(first["cart_token"])["count"], 1)

	def test_malformed_token_gets_a_new_cart(self):
		from ciavaglia_atelier.ciavaglia_atelier.api.cart import get_cart

		with self._as_guest():
			result = get_cart("../other:cart")

		self.assertNotEqual(result["cart_token"], "../other:cart")
		self.assertEqual(result["items"], [])

	def test_login_merges_guest_cart(self):
		from ciavaglia_atelier.ciavaglia_atelier.api.cart import add_to_cart, get_cart

		with self._as_guest():
			token = add_to_cart("custom-oak", configuration=CUSTOM_ITEM["configuration"])["cart_token"]

		merged = get_cart(token)
		self.assertIsNone(merged["cart_token"])
		self.assertEqual(merged["count"], 1)
		self.assertEqual(get_cart()["count"], 1)

		with self._as_guest():
			self.assertEqual(get_cart(token)["items"], [])
