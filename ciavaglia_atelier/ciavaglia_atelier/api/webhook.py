# Copyright (c) 2026, Ciavaglia Timepieces and contributors
# For license information, please see license.txt

"""
Stripe Webhook

Receives Stripe events at
``/api/method/ciavaglia_atelier.ciavaglia_atelier.api.webhook.stripe_webhook``.

On ``checkout.session.completed``:
    1. Mark the CT-Watch-Configuration as Paid
    2. Take one unit of stock for built watches (never below zero)
    3. Insert the CT-Watch-Order
    4. Send the order emails

Stripe retries deliveries, so processing is keyed on the checkout session id
and a repeated event returns the existing order.
"""

import frappe
import stripe

from ciavaglia_atelier.ciavaglia_atelier.api.locale_labels import normalize_locale
from ciavaglia_atelier.ciavaglia_atelier.api.order_emails import send_order_emails
from ciavaglia_atelier.ciavaglia_atelier.doctype.ct_atelier_settings.ct_atelier_settings import (
	get_atelier_settings,
)
from ciavaglia_atelier.ciavaglia_atelier.doctype.ct_built_watch.ct_built_watch import decrement_stock

DEFAULT_ORDER_SUMMARY = "Ciavaglia order"


@frappe.whitelist(allow_guest=True, methods=["POST"])
def stripe_webhook() -> dict:
	signature = frappe.get_request_header("Stripe-Signature")
	if not signature:
		frappe.local.response.http_status_code = 400
		return {"error": "Missing Stripe signature"}

	payload = frappe.request.get_data()
	settings = get_atelier_settings()

	try:
		event = stripe.Webhook.construct_event(payload, signature, settings.stripe_webhook_secret or "")
	except (ValueError, stripe.SignatureVerificationError):
		frappe.local.response.http_status_code = 400
		return {"error": "Invalid webhook signature"}

	frappe.logger("ciavaglia_atelier").info(f"Stripe event {event['id']} ({event['type']}) received")

	if event["type"] == "checkout.session.completed":
		handle_checkout_completed(event["data"]["object"])

	return {"received": True}


def handle_checkout_completed(session) -> str:
	"""
	Record a paid checkout session.

	Returns:
		str: Name of the CT-Watch-Order (new or already recorded)
	"""
	session_id = session.get("id")
	existing = frappe.db.get_value("CT-Watch-Order", {"stripe_session_id": session_id}, "name")
	if existing:
		frappe.logger("ciavaglia_atelier").info(f"Session {session_id} already recorded as {existing}")
		return existing

	metadata = session.get("metadata") or {}
	configuration_id = metadata.get("configuration_id") or None
	customer_details = session.get("customer_details") or {}

	if configuration_id and frappe.db.exists("CT-Watch-Configuration", configuration_id):
		config = frappe.get_doc("CT-Watch-Configuration", configuration_id)
		config.mark_paid()
		if config.configuration_type == "built" and config.built_watch:
			if not decrement_stock(config.built_watch):
				frappe.logger("ciavaglia_atelier").warning(
					f"Built watch {config.built_watch} sold with no stock left (session {session_id})"
				)
	else:
		configuration_id = None

	order = frappe.get_doc(
		{
			"doctype": "CT-Watch-Order",
			"status": "paid",
			"summary": metadata.get("summary") or DEFAULT_ORDER_SUMMARY,
			"total": (session.get("amount_total") or 0) / 100,
			"configuration": configuration_id,
			"user": _existing_user(metadata.get("user")),
			"customer_email": customer_details.get("email") or session.get("customer_email"),
			"locale": normalize_locale(metadata.get("locale")),
			"stripe_session_id": session_id,
			**extract_shipping(session),
		}
	)
	order.insert(ignore_permissions=True)
	frappe.db.commit()

	frappe.logger("ciavaglia_atelier").info(f"Order {order.name} created from session {session_id}")

	if order.customer_email:
		try:
			send_order_emails(order)
		except Exception:
			frappe.log_error(title="Order Email Error", message=frappe.get_traceback())

	return order.name


def extract_shipping(session) -> dict:
	"""Map the collected shipping (or billing) address onto CT-Watch-Order fields."""
	collected = session.get("collected_information") or {}
	shipping = collected.get("shipping_details") or session.get("shipping_details") or {}
	customer_details = session.get("customer_details") or {}
	address = shipping.get("address") or customer_details.get("address") or {}

	return {
		"shipping_name": shipping.get("name") or customer_details.get("name"),
		"shipping_line1": address.get("line1"),
		"shipping_line2": address.get("line2"),
		"shipping_city": address.get("city"),
		"shipping_state": address.get("state"),
		"shipping_postal_code": address.get("postal_code"),
		"shipping_country": address.get("country"),
	}


def _existing_user(user: str | None) -> str | None:
	if user and frappe.db.exists("User", user):
		return user
	return None
