# Copyright (c) 2026, Ciavaglia Timepieces and Contributors
# See license.txt

"""
Tests for the Configurator Engine (step state machine, pricing, add-ons).
"""

import unittest

from ciavaglia_atelier.ciavaglia_atelier.api.catalog_seed import default_catalog
from ciavaglia_atelier.ciavaglia_atelier.api.configurator_catalog import CatalogSnapshot
from ciavaglia_atelier.ciavaglia_atelier.api.configurator_engine import (
	BUSY_SUBMISSION_ERROR,
	DEFAULT_SUBMISSION_ERROR,
	CheckoutSubmissionError,
	ConfiguratorSession,
)
from ciavaglia_atelier.ciavaglia_atelier.api.configurator_pricing import price_payload


class TestConfiguratorEngine(unittest.TestCase):
	"""State machine and pricing behaviour against the default catalog"""

	def setUp(self):
		self.catalog = default_catalog()
		self.session = ConfiguratorSession(self.catalog)

	def _configure_oak(self):
		self.session.select_function("oak")
		self.session.set_step_selection("case", "black")
		self.session.set_step_selection("dial", "onyx-black")
		self.session.set_step_selection("hands", "sword-black")
		self.session.set_step_selection("strap", "rubber-sport")

	def test_initial_state(self):
		"""A fresh session sits on the function step with nothing selected"""
		self.assertEqual(self.session.step_index, 0)
		self.assertEqual(self.session.step_keys, ["function"])
		self.assertFalse(self.session.can_advance())
		self.assertEqual(self.session.compute_total(), 0)
		self.assertEqual(self.session.derive_line_items(), [])

	def test_step_sequence_depends_on_function(self):
		"""Each function has its own step sequence"""
		self.session.select_function("oak")
		self.assertEqual(self.session.step_keys, ["function", "case", "dial", "hands", "strap", "extra"])

		self.session.select_function("classic-date")
		self.assertEqual(self.session.step_keys, ["function", "size", "case", "dial", "hands", "strap"])

		self.session.select_function("naut")
		self.assertEqual(self.session.step_keys, ["function", "case", "dial", "hands", "strap"])

	def test_unknown_function_has_no_steps(self):
		"""An unknown function id yields an empty sequence, not an error"""
		self.session.select_function("pocket-watch")
		self.assertEqual(self.session.step_keys, ["function"])
		self.assertTrue(self.session.can_advance())
		self.assertEqual(self.session.compute_total(), 0)
		self.assertEqual(self.session.derive_layers(), [])

	def test_select_function_clears_line_items(self):
		"""No selection survives a function change, for every function"""
		for function in self.catalog.functions:
			self._configure_oak()
			self.session.toggle_addon("frosted-finish", True)
			self.session.step_index = 3

			self.session.select_function(function.id)

			self.assertEqual(self.session.derive_line_items(), [], function.id)
			self.assertEqual(self.session.selections, {})
			self.assertEqual(self.session.addon_checks, {})
			self.assertEqual(self.session.step_index, 0)

	def test_oak_scenario_total(self):
		"""Oak with black/onyx/sword/rubber and no extra totals 1230"""
		self._configure_oak()
		self.session.step_index = self.session.step_keys.index("extra")

		self.assertTrue(self.session.is_last_step)
		self.assertTrue(self.session.can_advance())
		self.assertEqual(self.session.compute_total(), 1230)

		labels = [item.label for item in self.session.derive_line_items()]
		self.assertEqual(labels, ["Black", "Onyx Black", "Sword Black", "Rubber Sport"])

	def test_can_advance_tracks_selection(self):
		"""can_advance is re-derived immediately after each mutation"""
		self.session.select_function("oak")
		self.assertTrue(self.session.can_advance())
		self.assertTrue(self.session.advance())
		self.assertEqual(self.session.current_step_key, "case")

		self.assertFalse(self.session.can_advance())
		self.session.set_step_selection("case", "black")
		self.assertTrue(self.session.can_advance())
		self.session.set_step_selection("case", None)
		self.assertFalse(self.session.can_advance())

	def test_advance_blocked_without_selection(self):
		"""advance is a no-op on a required step with no selection"""
		self.session.select_function("naut")
		self.session.advance()
		self.assertFalse(self.session.advance())
		self.assertEqual(self.session.current_step_key, "case")

	def test_go_back_floors_at_zero(self):
		self.session.select_function("oak")
		self.session.advance()
		self.session.go_back()
		self.session.go_back()
		self.assertEqual(self.session.step_index, 0)

	def test_out_of_scope_option_never_prices(self):
		"""A skeleton-only case selected under another function is ignored"""
		self.session.select_function("oak")
		self.session.set_step_selection("case", "exhibition-back")

		self.assertEqual(self.session.compute_total(), 0)
		self.assertEqual(self.session.derive_line_items(), [])
		# The raw selection still counts for navigation
		self.session.step_index = 1
		self.assertTrue(self.session.can_advance())

	def test_skeleton_switch_requires_case_reselection(self):
		"""Switching away from skeleton and back drops the exhibition case"""
		self.session.select_function("skeleton")
		self.session.set_step_selection("case", "exhibition-back")
		self.assertEqual(self.session.compute_total(), 400)

		self.session.select_function("oak")
		self.session.select_function("skeleton")
		self.session.advance()

		self.assertEqual(self.session.current_step_key, "case")
		self.assertIsNone(self.session.selection_for("case"))
		self.assertFalse(self.session.can_advance())
		self.assertEqual(self.session.compute_total(), 0)

	def test_skeleton_visible_options(self):
		self.session.select_function("skeleton")
		case_ids = [option.id for option in self.session.visible_options("case")]
		self.assertIn("exhibition-back", case_ids)

		self.session.select_function("gmt")
		case_ids = [option.id for option in self.session.visible_options("case")]
		self.assertNotIn("exhibition-back", case_ids)

	def test_addon_out_of_scope_does_not_price(self):
		"""frosted-finish toggled on a black case leaves the total unchanged"""
		self._configure_oak()
		before = self.session.compute_total()

		self.session.toggle_addon("frosted-finish", True)

		self.assertEqual(self.session.compute_total(), before)
		self.assertEqual(self.session.visible_addons("case"), [])

	def test_addon_in_scope_prices(self):
		self.session.select_function("oak")
		self.session.set_step_selection("case", "rose-gold")
		self.session.toggle_addon("frosted-finish", True)

		self.assertEqual(self.session.compute_total(), 1700)
		kinds = [item.kind for item in self.session.derive_line_items()]
		self.assertEqual(kinds, ["option", "addon"])

		self.session.toggle_addon("frosted-finish", False)
		self.assertEqual(self.session.compute_total(), 1500)

	def test_addon_cleared_when_case_changes_out_of_scope(self):
		"""Switching to a case the add-on does not cover unchecks it"""
		self.session.select_function("oak")
		self.session.set_step_selection("case", "yellow-gold")
		self.session.toggle_addon("frosted-finish", True)

		self.session.set_step_selection("case", "stainless-steel")
		self.assertNotIn("frosted-finish", self.session.addon_checks)

		self.session.set_step_selection("case", "yellow-gold")
		self.assertEqual(self.session.compute_total(), 1500)

	def test_addon_kept_when_case_changes_within_scope(self):
		self.session.select_function("oak")
		self.session.set_step_selection("case", "yellow-gold")
		self.session.toggle_addon("frosted-finish", True)

		self.session.set_step_selection("case", "rose-gold")
		self.assertEqual(self.session.compute_total(), 1700)

	def test_line_items_localized(self):
		self._configure_oak()
		labels = [item.label for item in self.session.derive_line_items("fr")]
		self.assertEqual(labels[0], "Noir")
		self.assertEqual(self.session.derive_line_items("fr")[0].step_label, "Boîtier")

	def test_reset(self):
		self._configure_oak()
		self.session.reset()
		self.assertIsNone(self.session.function_id)
		self.assertEqual(self.session.selections, {})
		self.assertEqual(self.session.step_index, 0)

	def test_payload_round_trip(self):
		"""Re-pricing the payload reproduces the session total"""
		self.session.select_function("classic-date")
		self.session.set_step_selection("size", "41mm")
		self.session.set_step_selection("case", "rose-gold")
		self.session.toggle_addon("frosted-finish", True)
		self.session.set_step_selection("dial", "champagne")
		self.session.set_step_selection("hands", "cathedral-rose")
		self.session.set_step_selection("strap", "steel-bracelet")

		payload = self.session.build_payload()

		self.assertEqual(
			payload["steps"],
			["classic-date", "41mm", "rose-gold", "champagne", "cathedral-rose", "steel-bracelet"],
		)
		self.assertEqual(payload["addons"], ["frosted-finish"])
		self.assertEqual(payload["price"], 150 + 1500 + 200 + 220 + 110 + 280)
		self.assertEqual(price_payload(self.catalog, payload), self.session.compute_total())

	def test_from_state_rebuilds_session(self):
		session = ConfiguratorSession.from_state(
			self.catalog,
			function_id="oak",
			selections={"case": "black", "dial": "onyx-black", "size": "41mm"},
			addons=["frosted-finish"],
			step_index=99,
		)
		self.assertEqual(session.selections, {"case": "black", "dial": "onyx-black"})
		self.assertEqual(session.step_index, session.step_count - 1)
		self.assertEqual(session.compute_total(), 1060)


class TestConfiguratorSubmission(unittest.TestCase):
	"""Terminal advance and checkout gateway handling"""

	def setUp(self):
		self.session = ConfiguratorSession(default_catalog(), locale="fr-CA")
		self.session.select_function("naut")
		self.session.set_step_selection("case", "black")
		self.session.set_step_selection("dial", "onyx-black")
		self.session.set_step_selection("hands", "sword-black")
		self.session.set_step_selection("strap", "rubber-sport")
		self.session.step_index = self.session.step_count - 1

	def test_successful_submission(self):
		received = []

		def gateway(request):
			received.append(request)
			return {"url": "https://checkout.stripe.com/c/pay/cs_test"}

		self.assertTrue(self.session.advance(gateway))
		self.assertEqual(self.session.redirect_url, "https://checkout.stripe.com/c/pay/cs_test")
		self.assertEqual(received[0]["type"], "custom")
		self.assertEqual(received[0]["locale"], "fr")
		self.assertEqual(received[0]["configuration"]["price"], 1230)
		self.assertFalse(self.session.busy)

	def test_gateway_error_preserves_state(self):
		"""A failed submission keeps selections and the cursor"""
		before = dict(self.session.selections)
		index = self.session.step_index

		self.assertFalse(self.session.advance(lambda request: {"error": "Out of stock"}))

		self.assertEqual(self.session.last_error, "Out of stock")
		self.assertEqual(self.session.selections, before)
		self.assertEqual(self.session.step_index, index)
		self.assertFalse(self.session.busy)

	def test_gateway_exception_is_surfaced(self):
		def gateway(request):
			raise CheckoutSubmissionError("Card network unavailable")

		result = self.session.submit(gateway)

		self.assertFalse(result.success)
		self.assertEqual(result.error, "Card network unavailable")
		self.assertFalse(self.session.busy)

	def test_empty_gateway_reply(self):
		result = self.session.submit(lambda request: {})
		self.assertEqual(result.error, DEFAULT_SUBMISSION_ERROR)

	def test_busy_blocks_resubmission(self):
		self.session.busy = True
		result = self.session.submit(lambda request: {"url": "https://example.com"})
		self.assertEqual(result.error, BUSY_SUBMISSION_ERROR)
		self.assertEqual(self.session.last_error, BUSY_SUBMISSION_ERROR)
		self.assertIsNone(self.session.redirect_url)


class TestEmptyCatalog(unittest.TestCase):
	def test_empty_catalog_degrades(self):
		session = ConfiguratorSession(CatalogSnapshot())
		self.assertTrue(session.is_empty)
		self.assertEqual(session.visible_options(), [])
		self.assertEqual(session.to_dict()["step_keys"], ["function"])
