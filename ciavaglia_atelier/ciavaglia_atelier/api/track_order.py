# Copyright (c) 2026, Ciavaglia Timepieces and contributors
# For license information, please see license.txt

import frappe


@frappe.whitelist(allow_guest=True)
def get_order_status(order_number: str | None = None) -> dict:
	"""
	Public order lookup by order number, e.g. ``CT-1A2B3C4D``.

	No login is needed; only the status, summary, total and tracking
	fields are exposed.
	"""
	order_number = (order_number or "").strip().upper()
	if not order_number:
		return {"success": False, "error": "Missing order_number"}

	if not frappe.db.exists("CT-Watch-Order", order_number):
		return {"success": False, "error": "Order not found"}

	order = frappe.get_doc("CT-Watch-Order", order_number)
	return {"success": True, **order.get_public_status()}
