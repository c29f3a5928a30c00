# Copyright (c) 2026, Ciavaglia Timepieces and Contributors
# See license.txt

from unittest.mock import patch

import frappe
from frappe.tests.utils import FrappeTestCase

from ciavaglia_atelier.ciavaglia_atelier.doctype.ct_atelier_settings.ct_atelier_settings import (
	DEFAULT_NOTIFY_EMAIL,
	get_atelier_settings,
)


class TestCTAtelierSettings(FrappeTestCase):
	def test_currency_normalized(self):
		settings = frappe.get_doc("CT-Atelier-Settings")
		settings.currency = " CAD "
		settings.site_url = "https://shop.example.com/ "
		settings.validate()

		self.assertEqual(settings.currency, "cad")
		self.assertEqual(settings.site_url, "https://shop.example.com")

	def test_invalid_currency(self):
		settings = frappe.get_doc("CT-Atelier-Settings")
		settings.currency = "dollars"
		self.assertRaises(frappe.ValidationError, settings.validate)

	def test_site_config_fallback(self):
		conf = frappe._dict(
			stripe_secret_key="sk_test_conf",
			atelier_site_url="https://conf.example.com",
		)
		with patch.object(frappe, "conf", conf):
			with patch.object(frappe, "get_cached_doc", return_value=_EmptySettings()):
				settings = get_atelier_settings()

		self.assertEqual(settings.stripe_secret_key, "sk_test_conf")
		self.assertEqual(settings.site_url, "https://conf.example.com")
		self.assertEqual(settings.order_notify_email, DEFAULT_NOTIFY_EMAIL)
		self.assertEqual(settings.currency, "usd")


class _EmptySettings(frappe._dict):
	def get_password(self, fieldname, raise_exception=True):
		return None
