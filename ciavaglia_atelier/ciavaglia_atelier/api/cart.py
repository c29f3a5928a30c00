# Copyright (c) 2026, Ciavaglia Timepieces and contributors
# For license information, please see license.txt

"""
Session Cart

A cart per shopper, kept in the Frappe cache so guests can shop without an
account. Every anonymous visitor shares the Guest session, so guests hold a
client-side ``cart_token`` instead; signed-in users are keyed by user.
Items look like::

    {
        "id": "cart-3f2a...",
        "product_id": "heritage-oak-01" | "custom-oak",
        "quantity": 1,
        "price": 1230.0,
        "title": "...",
        "image_url": "...",
        "configuration": {...} | None,
    }

Custom builds use a ``custom-`` product id and never merge; built watches
with the same configuration add up their quantities.
"""

import json
import re
import uuid

import frappe

from ciavaglia_atelier.ciavaglia_atelier.api.configurator import get_catalog_snapshot
from ciavaglia_atelier.ciavaglia_atelier.api.configurator_pricing import (
	describe_payload,
	missing_required_steps,
	price_payload,
	selections_from_payload,
)
from ciavaglia_atelier.ciavaglia_atelier.api.locale_labels import normalize_locale
from ciavaglia_atelier.ciavaglia_atelier.utils import parse_json_arg, parse_positive_int

CUSTOM_PRODUCT_PREFIX = "custom-"
CART_CACHE_PREFIX = "ciavaglia_atelier:cart:"
CART_TTL_SECONDS = 7 * 24 * 60 * 60
CART_TOKEN_LENGTH = 32
CART_TOKEN_PATTERN = re.compile(r"[A-Za-z0-9]{16,64}")


# =============================================================================
# CART HELPERS
# =============================================================================


def is_custom_item(product_id: str | None) -> bool:
	return (product_id or "").startswith(CUSTOM_PRODUCT_PREFIX)


def _same_configuration(a, b) -> bool:
	return json.dumps(a, sort_keys=True) == json.dumps(b, sort_keys=True)


def add_cart_item(cart: list[dict], item: dict) -> list[dict]:
	"""Add ``item`` to a copy of ``cart``; equal built items merge their quantities."""
	cart = [dict(existing) for existing in cart]
	quantity = parse_positive_int(item.get("quantity"))

	if not is_custom_item(item.get("product_id")):
		for existing in cart:
			if existing["product_id"] == item["product_id"] and _same_configuration(
				existing.get("configuration"), item.get("configuration")
			):
				existing["quantity"] += quantity
				return cart

	cart.append(
		{
			"id": f"cart-{uuid.uuid4().hex}",
			"product_id": item["product_id"],
			"quantity": quantity,
			"price": float(item.get("price") or 0),
			"title": item.get("title"),
			"image_url": item.get("image_url"),
			"configuration": item.get("configuration"),
		}
	)
	return cart


def update_cart_quantity(cart: list[dict], item_id: str, quantity) -> list[dict]:
	"""Set an item's quantity; anything below 1 removes it."""
	quantity = parse_positive_int(quantity, default=0, minimum=0)
	if quantity < 1:
		return remove_cart_item(cart, item_id)

	return [dict(item, quantity=quantity) if item["id"] == item_id else dict(item) for item in cart]


def remove_cart_item(cart: list[dict], item_id: str) -> list[dict]:
	return [dict(item) for item in cart if item["id"] != item_id]


def cart_count(cart: list[dict]) -> int:
	return sum(item["quantity"] for item in cart)


def cart_total(cart: list[dict]) -> float:
	return sum(item["price"] * item["quantity"] for item in cart)


# =============================================================================
# PUBLIC API ENDPOINTS
# =============================================================================


@frappe.whitelist(allow_guest=True)
def get_cart(cart_token: str | None = None) -> dict:
	"""
	Return the caller's cart.

	Guests are identified by ``cart_token``; a guest without a valid token is
	issued a new one in the reply. Signed-in users get their own cart, and a
	guest token sent after login merges that guest cart into it.
	"""
	cart_token, _key, cart = _open_cart(cart_token)
	return _cart_response(cart, cart_token)


@frappe.whitelist(allow_guest=True, methods=["POST"])
def add_to_cart(
	product_id: str,
	quantity: int = 1,
	configuration: str | dict | None = None,
	locale: str | None = None,
	cart_token: str | None = None,
) -> dict:
	"""
	Add a built watch or a custom build to the caller's cart.

	Built watches are priced from CT-Built-Watch; custom builds (``custom-``
	product ids) must be complete and are priced from the catalog.
	"""
	try:
		configuration = parse_json_arg(configuration)
	except json.JSONDecodeError:
		return {"success": False, "error": "Invalid configuration"}

	if is_custom_item(product_id):
		item = _custom_item(product_id, configuration, normalize_locale(locale))
	else:
		item = _built_item(product_id)

	if "error" in item:
		return {"success": False, "error": item["error"]}

	cart_token, key, cart = _open_cart(cart_token)
	item["quantity"] = quantity
	cart = add_cart_item(cart, item)
	_save_cart(key, cart)
	return _cart_response(cart, cart_token)


@frappe.whitelist(allow_guest=True, methods=["POST"])
def update_cart_item(item_id: str, quantity: int, cart_token: str | None = None) -> dict:
	cart_token, key, cart = _open_cart(cart_token)
	cart = update_cart_quantity(cart, item_id, quantity)
	_save_cart(key, cart)
	return _cart_response(cart, cart_token)


@frappe.whitelist(allow_guest=True, methods=["POST"])
def remove_from_cart(item_id: str, cart_token: str | None = None) -> dict:
	cart_token, key, cart = _open_cart(cart_token)
	cart = remove_cart_item(cart, item_id)
	_save_cart(key, cart)
	return _cart_response(cart, cart_token)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================


def _built_item(product_id: str) -> dict:
	watch = frappe.db.get_value(
		"CT-Built-Watch",
		{"name": product_id, "is_active": 1},
		["name", "watch_name", "price", "stock", "image"],
		as_dict=True,
	)
	if not watch:
		return {"error": "Unknown product"}
	if (watch.stock or 0) < 1:
		return {"error": "Out of stock"}

	return {
		"product_id": watch.name,
		"price": watch.price or 0,
		"title": watch.watch_name,
		"image_url": watch.image,
		"configuration": None,
	}


def _custom_item(product_id: str, configuration, locale: str) -> dict:
	if not isinstance(configuration, dict) or not configuration.get("steps"):
		return {"error": "Missing configuration"}

	catalog = get_catalog_snapshot()
	function_id, selections, _addons = selections_from_payload(catalog, configuration)
	function = catalog.get_function(function_id)
	if not function:
		return {"error": "Unknown watch function"}

	missing = missing_required_steps(catalog, function_id, selections)
	if missing:
		return {"error": f"Configuration is incomplete: {', '.join(missing)}"}

	price = price_payload(catalog, configuration)
	if price <= 0:
		return {"error": "Configuration has no price"}

	return {
		"product_id": product_id,
		"price": price,
		"title": describe_payload(catalog, configuration, locale),
		"image_url": function.image_url,
		"configuration": configuration,
	}


def _is_guest() -> bool:
	return not frappe.session.user or frappe.session.user == "Guest"


def _clean_token(cart_token: str | None) -> str | None:
	cart_token = (cart_token or "").strip()
	return cart_token if CART_TOKEN_PATTERN.fullmatch(cart_token) else None


def _guest_cart_key(cart_token: str) -> str:
	return f"{CART_CACHE_PREFIX}guest:{cart_token}"


def _user_cart_key(user: str) -> str:
	return f"{CART_CACHE_PREFIX}user:{user}"


def _open_cart(cart_token: str | None) -> tuple[str | None, str, list[dict]]:
	"""
	Resolve the caller's cart as ``(cart_token, cache_key, items)``.

	``cart_token`` is None for signed-in users.
	"""
	cart_token = _clean_token(cart_token)

	if _is_guest():
		cart_token = cart_token or frappe.generate_hash(length=CART_TOKEN_LENGTH)
		key = _guest_cart_key(cart_token)
		return cart_token, key, _load_cart(key)

	key = _user_cart_key(frappe.session.user)
	cart = _load_cart(key)
	if cart_token:
		guest_key = _guest_cart_key(cart_token)
		guest_cart = _load_cart(guest_key)
		if guest_cart:
			for item in guest_cart:
				cart = add_cart_item(cart, item)
			_save_cart(key, cart)
			frappe.cache().delete_value(guest_key)
	return None, key, cart


def _load_cart(key: str) -> list[dict]:
	return frappe.cache().get_value(key) or []


def _save_cart(key: str, cart: list[dict]):
	frappe.cache().set_value(key, cart, expires_in_sec=CART_TTL_SECONDS)


def _cart_response(cart: list[dict], cart_token: str | None = None) -> dict:
	return {
		"success": True,
		"cart_token": cart_token,
		"items": cart,
		"count": cart_count(cart),
		"total": cart_total(cart),
	}
