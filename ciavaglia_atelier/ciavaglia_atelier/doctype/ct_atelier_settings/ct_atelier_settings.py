# Copyright (c) 2026, Ciavaglia Timepieces and contributors
# For license information, please see license.txt

import frappe
from frappe import _
from frappe.model.document import Document

DEFAULT_NOTIFY_EMAIL = "atelier@civagliatimepieces.com"
DEFAULT_CURRENCY = "usd"


class CTAtelierSettings(Document):
	def validate(self):
		if self.currency:
			self.currency = self.currency.strip().lower()
			if len(self.currency) != 3:
				frappe.throw(_("Currency must be a 3-letter ISO code, e.g. usd"))

		if self.site_url:
			self.site_url = self.site_url.strip().rstrip("/")


def get_atelier_settings() -> frappe._dict:
	"""
	Resolve storefront settings.

	Values set on CT-Atelier-Settings win; otherwise the matching site_config.json
	key is used:

	- stripe_secret_key      -> ``stripe_secret_key``
	- stripe_webhook_secret  -> ``stripe_webhook_secret``
	- site_url               -> ``atelier_site_url``
	- order_notify_email     -> ``order_notify_email``
	"""
	settings = frappe.get_cached_doc("CT-Atelier-Settings")
	conf = frappe.conf or {}

	return frappe._dict(
		stripe_secret_key=settings.get_password("stripe_secret_key", raise_exception=False)
		or conf.get("stripe_secret_key"),
		stripe_webhook_secret=settings.get_password("stripe_webhook_secret", raise_exception=False)
		or conf.get("stripe_webhook_secret"),
		currency=settings.currency or DEFAULT_CURRENCY,
		site_url=settings.site_url or conf.get("atelier_site_url"),
		order_notify_email=settings.order_notify_email or conf.get("order_notify_email") or DEFAULT_NOTIFY_EMAIL,
		send_order_emails=bool(settings.send_order_emails),
	)
