# Copyright (c) 2026, Ciavaglia Timepieces and contributors
# For license information, please see license.txt

"""
Order Admin API

Endpoints for the atelier team to follow up orders (status, tracking,
shipping address) and to maintain the built-watch catalog. Every endpoint
requires the Atelier Admin role.
"""

import json
from urllib.parse import quote

import frappe

from ciavaglia_atelier.ciavaglia_atelier.utils import parse_json_arg, require_atelier_admin

ADMIN_ORDER_STATUSES = ("new", "shipped", "completed")

CARRIER_TRACKING_URLS = {
	"Canada Post": "https://www.canadapost-postescanada.ca/track-reperage/en#/search?searchFor={tracking}",
	"UPS": "https://www.ups.com/track?tracknum={tracking}",
	"DHL": "https://www.dhl.com/en/express/tracking.html?AWB={tracking}",
	"FedEx": "https://www.fedex.com/fedextrack/?trknbr={tracking}",
	"Purolator": "https://www.purolator.com/en/ship-track/tracking-search.page?q={tracking}",
	"USPS": "https://tools.usps.com/go/TrackConfirmAction?tLabels={tracking}",
}

ORDER_LIST_FIELDS = [
	"name",
	"order_number",
	"status",
	"summary",
	"total",
	"customer_email",
	"locale",
	"creation",
	"shipping_name",
	"shipping_line1",
	"shipping_line2",
	"shipping_city",
	"shipping_state",
	"shipping_postal_code",
	"shipping_country",
	"tracking_carrier",
	"tracking_number",
	"tracking_url",
]

BUILT_WATCH_FIELDS = ("watch_name", "description", "price", "stock", "is_active", "image")


def build_tracking_url(carrier: str | None, tracking_number: str | None) -> str | None:
	"""Carrier tracking page for a number; None for unknown carriers or a blank number."""
	tracking_number = (tracking_number or "").strip()
	template = CARRIER_TRACKING_URLS.get((carrier or "").strip())
	if not template or not tracking_number:
		return None
	return template.format(tracking=quote(tracking_number, safe=""))


def format_shipping_address(order) -> str:
	"""Multi-line postal address of an order document or row; empty when none was collected."""
	get = order.get if hasattr(order, "get") else lambda key: getattr(order, key, None)

	lines = [get("shipping_name"), get("shipping_line1"), get("shipping_line2")]
	lines.append(
		", ".join(
			part for part in (get("shipping_city"), get("shipping_state"), get("shipping_postal_code")) if part
		)
	)
	lines.append(get("shipping_country"))
	return "\n".join(line for line in lines if line)


# =============================================================================
# ORDERS
# =============================================================================


@frappe.whitelist()
def get_admin_orders(status: str | None = None, limit: int = 100) -> dict:
	require_atelier_admin()

	filters = {}
	if status:
		filters["status"] = status

	orders = frappe.get_all(
		"CT-Watch-Order",
		filters=filters,
		fields=ORDER_LIST_FIELDS,
		order_by="creation desc",
		limit_page_length=int(limit or 100),
	)
	for order in orders:
		order["shipping_address"] = format_shipping_address(order)

	return {"success": True, "orders": orders}


@frappe.whitelist(methods=["POST"])
def update_order_status(order_number: str, status: str) -> dict:
	require_atelier_admin()

	status = (status or "").strip().lower()
	if status not in ADMIN_ORDER_STATUSES:
		return {"success": False, "error": f"Invalid status. Allowed: {', '.join(ADMIN_ORDER_STATUSES)}"}

	order = _get_order(order_number)
	if not order:
		return {"success": False, "error": "Order not found"}

	order.status = status
	order.save(ignore_permissions=True)
	return {"success": True, "order_number": order.name, "status": order.status}


@frappe.whitelist(methods=["POST"])
def update_order_tracking(
	order_number: str,
	tracking_number: str | None = None,
	tracking_carrier: str | None = None,
	tracking_url: str | None = None,
) -> dict:
	"""
	Set or clear the tracking details of an order.

	When ``tracking_url`` is blank it is derived from the carrier's tracking
	page; clearing the number clears the URL too.
	"""
	require_atelier_admin()

	order = _get_order(order_number)
	if not order:
		return {"success": False, "error": "Order not found"}

	tracking_number = (tracking_number or "").strip() or None
	tracking_carrier = (tracking_carrier or "").strip() or None
	tracking_url = (tracking_url or "").strip() or None

	order.tracking_number = tracking_number
	order.tracking_carrier = tracking_carrier
	order.tracking_url = tracking_url if tracking_number else None
	order.save(ignore_permissions=True)

	return {
		"success": True,
		"order_number": order.name,
		"tracking_number": order.tracking_number,
		"tracking_carrier": order.tracking_carrier,
		"tracking_url": order.tracking_url,
	}


@frappe.whitelist(methods=["POST"])
def delete_order(order_number: str) -> dict:
	require_atelier_admin()

	order = _get_order(order_number)
	if not order:
		return {"success": False, "error": "Order not found"}

	frappe.delete_doc("CT-Watch-Order", order.name, ignore_permissions=True)
	frappe.logger("ciavaglia_atelier").info(f"Order {order.name} deleted by {frappe.session.user}")
	return {"success": True, "order_number": order.name}


def _get_order(order_number: str | None):
	order_number = (order_number or "").strip().upper()
	if not order_number or not frappe.db.exists("CT-Watch-Order", order_number):
		return None
	return frappe.get_doc("CT-Watch-Order", order_number)


# =============================================================================
# BUILT WATCHES
# =============================================================================


@frappe.whitelist()
def get_admin_built_watches() -> dict:
	require_atelier_admin()

	watches = frappe.get_all(
		"CT-Built-Watch",
		fields=["name", "watch_id", *BUILT_WATCH_FIELDS, "modified"],
		order_by="creation desc",
	)
	return {"success": True, "watches": watches}


@frappe.whitelist(methods=["POST"])
def save_built_watch(watch: str | dict) -> dict:
	"""
	Create or update a built watch.

	Args:
		watch: JSON object with ``watch_id`` (omit to create) and any of
		       watch_name, description, price, stock, is_active, image

	Returns:
		dict: ``{"success": True, "watch_id": ...}``
	"""
	require_atelier_admin()

	try:
		data = parse_json_arg(watch, {})
	except json.JSONDecodeError:
		return {"success": False, "error": "Invalid JSON"}
	if not isinstance(data, dict):
		return {"success": False, "error": "Invalid JSON"}

	watch_id = (data.get("watch_id") or "").strip()
	if watch_id and frappe.db.exists("CT-Built-Watch", watch_id):
		doc = frappe.get_doc("CT-Built-Watch", watch_id)
	else:
		doc = frappe.new_doc("CT-Built-Watch")
		doc.watch_id = watch_id

	for fieldname in BUILT_WATCH_FIELDS:
		if fieldname in data:
			doc.set(fieldname, data[fieldname])

	try:
		doc.save(ignore_permissions=True)
	except frappe.ValidationError as e:
		frappe.db.rollback()
		return {"success": False, "error": str(e)}

	return {"success": True, "watch_id": doc.name}


@frappe.whitelist(methods=["POST"])
def delete_built_watch(watch_id: str) -> dict:
	"""
	Delete a built watch.

	A watch referenced by a configuration is deactivated instead so paid
	orders keep their link.
	"""
	require_atelier_admin()

	watch_id = (watch_id or "").strip()
	if not watch_id or not frappe.db.exists("CT-Built-Watch", watch_id):
		return {"success": False, "error": "Built watch not found"}

	try:
		frappe.delete_doc("CT-Built-Watch", watch_id, ignore_permissions=True)
	except frappe.LinkExistsError:
		frappe.db.set_value("CT-Built-Watch", watch_id, "is_active", 0)
		frappe.logger("ciavaglia_atelier").info(f"Built watch {watch_id} is referenced; deactivated instead")
		return {"success": True, "watch_id": watch_id, "deactivated": True}

	return {"success": True, "watch_id": watch_id, "deactivated": False}
