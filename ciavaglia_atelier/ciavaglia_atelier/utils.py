# Copyright (c) 2026, Ciavaglia Timepieces and contributors
# For license information, please see license.txt

"""
Shared utility functions for Ciavaglia Atelier.

Input parsing for whitelisted endpoints, admin role checks and site URL
resolution.
"""

import json
import re

import frappe
from frappe import _

ATELIER_ADMIN_ROLE = "Atelier Admin"

_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


def parse_json_arg(value, default=None):
	"""
	Parse an endpoint argument that may arrive as a JSON string or as an object.

	Frappe passes form-encoded arguments as strings and JSON bodies as
	objects, so endpoints accept both.

	Raises:
		json.JSONDecodeError: If a string value is not valid JSON
	"""
	if value is None or value == "":
		return default
	if isinstance(value, str):
		return json.loads(value)
	return value


def parse_positive_int(value, default: int = 1, minimum: int = 1) -> int:
	"""Parse a quantity, clamping to ``minimum``; unparseable input gives ``default``."""
	try:
		return max(minimum, int(value))
	except (ValueError, TypeError):
		return default


def slugify(text: str) -> str:
	"""``"Black DLC Case"`` -> ``"black-dlc-case"``"""
	return _SLUG_PATTERN.sub("-", (text or "").lower()).strip("-")


def is_atelier_admin(user: str | None = None) -> bool:
	user = user or frappe.session.user
	if not user or user == "Guest":
		return False
	if user == "Administrator":
		return True
	return ATELIER_ADMIN_ROLE in frappe.get_roles(user)


def require_atelier_admin():
	if not is_atelier_admin():
		frappe.throw(_("Not permitted"), frappe.PermissionError)


def get_site_url() -> str:
	"""Public base URL of the storefront, without a trailing slash."""
	from ciavaglia_atelier.ciavaglia_atelier.doctype.ct_atelier_settings.ct_atelier_settings import (
		get_atelier_settings,
	)

	url = get_atelier_settings().site_url or frappe.utils.get_url()
	return url.rstrip("/")
