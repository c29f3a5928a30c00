# Copyright (c) 2026, Ciavaglia Timepieces and contributors
# For license information, please see license.txt

"""
Checkout API

Turns a configurator payload (custom build) or a shop product (built watch)
into a pending CT-Watch-Configuration and a Stripe Checkout Session.

Custom builds are always re-priced from the catalog; the price the browser
sends is only recorded as ``client_price`` and logged when it differs.
"""

import json

import frappe
import stripe
from frappe import _

from ciavaglia_atelier.ciavaglia_atelier.api.configurator import get_catalog_snapshot
from ciavaglia_atelier.ciavaglia_atelier.api.configurator_engine import (
	DEFAULT_SUBMISSION_ERROR,
	ConfiguratorSession,
)
from ciavaglia_atelier.ciavaglia_atelier.api.configurator_pricing import (
	describe_payload,
	missing_required_steps,
	selections_from_payload,
)
from ciavaglia_atelier.ciavaglia_atelier.api.locale_labels import normalize_locale, ui_label
from ciavaglia_atelier.ciavaglia_atelier.doctype.ct_atelier_settings.ct_atelier_settings import (
	get_atelier_settings,
)
from ciavaglia_atelier.ciavaglia_atelier.utils import get_site_url, parse_json_arg

CHECKOUT_TYPES = ("custom", "built")
SHIPPING_COUNTRIES = ["CA", "US", "FR", "BE", "CH", "GB"]


class CheckoutRequestError(Exception):
	"""A checkout request the customer can correct; the message is returned as-is."""


# =============================================================================
# PUBLIC API ENDPOINTS
# =============================================================================


@frappe.whitelist(allow_guest=True, methods=["POST"])
def create_checkout_session(
	locale: str | None = None,
	type: str | None = None,
	configuration: str | dict | None = None,
	product_id: str | None = None,
) -> dict:
	"""
	Create a Stripe Checkout Session for a custom build or a built watch.

	Args:
		locale: Storefront locale, used for labels and the return URLs
		type: "custom" or "built"
		configuration: Custom build payload ``{"steps", "addons", "price"}``
		product_id: CT-Built-Watch name for built watches

	Returns:
		dict: ``{"success": True, "url": ...}`` or ``{"success": False, "error": ...}``
	"""
	locale = normalize_locale(locale)

	if type not in CHECKOUT_TYPES:
		return {"success": False, "error": "Invalid checkout type"}

	try:
		if type == "custom":
			config_doc = _prepare_custom_configuration(configuration, locale)
		else:
			config_doc = _prepare_built_configuration(product_id, locale)

		config_doc.insert(ignore_permissions=True)

		checkout_session = _create_stripe_session(config_doc, locale)
		frappe.db.commit()

	except CheckoutRequestError as e:
		frappe.db.rollback()
		return {"success": False, "error": str(e)}
	except Exception:
		frappe.db.rollback()
		frappe.log_error(title="Checkout Session Error", message=frappe.get_traceback())
		return {"success": False, "error": DEFAULT_SUBMISSION_ERROR}

	frappe.logger("ciavaglia_atelier").info(
		f"Checkout session {checkout_session.id} created for configuration {config_doc.name}"
	)
	return {"success": True, "url": checkout_session.url, "configuration_id": config_doc.name}


def checkout_gateway(request: dict) -> dict:
	"""Adapter so a server-side ConfiguratorSession can submit straight to Stripe."""
	return create_checkout_session(
		locale=request.get("locale"),
		type=request.get("type"),
		configuration=request.get("configuration"),
		product_id=request.get("product_id"),
	)


def get_stripe():
	"""Return the ``stripe`` module with the configured secret key applied."""
	settings = get_atelier_settings()
	if not settings.stripe_secret_key:
		frappe.throw(_("Stripe secret key is not configured"))

	stripe.api_key = settings.stripe_secret_key
	return stripe


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================


def _prepare_custom_configuration(configuration, locale: str):
	try:
		payload = parse_json_arg(configuration)
	except json.JSONDecodeError:
		raise CheckoutRequestError("Invalid configuration")

	if not isinstance(payload, dict) or not payload.get("steps"):
		raise CheckoutRequestError("Missing configuration")

	catalog = get_catalog_snapshot()
	function_id, selections, addons = selections_from_payload(catalog, payload)
	if not catalog.get_function(function_id):
		raise CheckoutRequestError("Unknown watch function")

	missing = missing_required_steps(catalog, function_id, selections)
	if missing:
		raise CheckoutRequestError(f"Configuration is incomplete: {', '.join(missing)}")

	session = ConfiguratorSession.from_state(
		catalog, function_id=function_id, selections=selections, addons=addons, locale=locale
	)
	normalized = session.build_payload()
	amount = normalized["price"]
	if amount <= 0:
		raise CheckoutRequestError("Configuration has no price")

	client_price = payload.get("price")
	if client_price is not None and _to_float(client_price) != amount:
		frappe.logger("ciavaglia_atelier").warning(
			f"Client price {client_price} differs from server price {amount} for {normalized['steps']}"
		)

	summary = f"{ui_label('custom_build', locale)} · {describe_payload(catalog, normalized, locale)}"

	doc = frappe.new_doc("CT-Watch-Configuration")
	doc.configuration_type = "custom"
	doc.status = "Pending"
	doc.summary = summary
	doc.price = amount
	doc.client_price = _to_float(client_price)
	doc.locale = locale
	doc.user = _session_user()
	doc.set_configuration(normalized)
	return doc


def _prepare_built_configuration(product_id: str | None, locale: str):
	if not product_id:
		raise CheckoutRequestError("Missing product")

	watch = frappe.db.get_value(
		"CT-Built-Watch",
		{"name": product_id, "is_active": 1},
		["name", "watch_name", "price", "stock"],
		as_dict=True,
	)
	if not watch:
		raise CheckoutRequestError("Unknown product")
	if (watch.stock or 0) < 1:
		raise CheckoutRequestError("Out of stock")

	doc = frappe.new_doc("CT-Watch-Configuration")
	doc.configuration_type = "built"
	doc.status = "Pending"
	doc.summary = f"Built watch · {watch.watch_name}"
	doc.price = watch.price or 0
	doc.locale = locale
	doc.user = _session_user()
	doc.built_watch = watch.name
	doc.set_configuration({"product_id": watch.name, "title": watch.watch_name})
	return doc


def _create_stripe_session(config_doc, locale: str):
	settings = get_atelier_settings()
	site_url = get_site_url()

	return get_stripe().checkout.Session.create(
		mode="payment",
		line_items=[
			{
				"quantity": 1,
				"price_data": {
					"currency": settings.currency,
					"product_data": {"name": config_doc.summary},
					"unit_amount": int(round((config_doc.price or 0) * 100)),
				},
			}
		],
		success_url=f"{site_url}/{locale}/checkout/success?session_id={{CHECKOUT_SESSION_ID}}",
		cancel_url=f"{site_url}/{locale}/checkout/cancel",
		metadata={
			"configuration_id": config_doc.name,
			"summary": config_doc.summary,
			"locale": locale,
			"type": config_doc.configuration_type,
			"user": config_doc.user or "",
		},
		billing_address_collection="required",
		shipping_address_collection={"allowed_countries": SHIPPING_COUNTRIES},
		allow_promotion_codes=True,
	)


def _session_user() -> str | None:
	user = frappe.session.user
	return None if not user or user == "Guest" else user


def _to_float(value) -> float | None:
	try:
		return float(value)
	except (TypeError, ValueError):
		return None
