# Copyright (c) 2026, Ciavaglia Timepieces and contributors
# For license information, please see license.txt

"""
Configurator Pricing

Price and line-item derivation for a configured watch. Everything here is a
pure function of (catalog, function, selections, add-on checks):

    total = sum(selected option price deltas, scoped to the active function)
          + sum(checked add-on price deltas, eligible for the current selection)
          + function base price (0 for every observed function)

There are no discounts, taxes or quantity multipliers. Quantity is always 1;
several configured watches become separate cart entries.

The same traversal is used for the storefront preview and for the server-side
re-pricing of a checkout payload, so a client-supplied ``price`` is never
trusted.
"""

from dataclasses import asdict, dataclass
from typing import Any

from ciavaglia_atelier.ciavaglia_atelier.api.configurator_catalog import (
	FUNCTION_STEP_KEY,
	CatalogSnapshot,
	ConfiguratorAddon,
	ConfiguratorOption,
	ConfiguratorStep,
)


@dataclass
class LineItem:
	key: str
	kind: str  # "function", "option" or "addon"
	step_key: str
	label: str
	step_label: str
	price: float

	def as_dict(self) -> dict[str, Any]:
		return asdict(self)


# =============================================================================
# RESOLUTION
# =============================================================================

def resolve_selected_options(
	catalog: CatalogSnapshot,
	function_id: str | None,
	selections: dict[str, str | None],
) -> list[tuple[ConfiguratorStep, ConfiguratorOption]]:
	"""
	Resolve step selections against the active function's scoped options.

	Ids that are not visible for the function (wrong step, scoped to another
	function, unknown) resolve to nothing and therefore never contribute.
	"""
	resolved = []
	for step in catalog.steps_for_function(function_id):
		option = catalog.find_option(step.key, selections.get(step.key), function_id)
		if option:
			resolved.append((step, option))
	return resolved


def resolve_checked_addons(
	catalog: CatalogSnapshot,
	function_id: str | None,
	selections: dict[str, str | None],
	addon_checks: dict[str, bool],
) -> list[ConfiguratorAddon]:
	"""Checked add-ons whose step is active and whose option scope matches."""
	active_steps = {step.key for step in catalog.steps_for_function(function_id)}
	result = []
	for addon in catalog.addons:
		if not addon_checks.get(addon.id):
			continue
		if addon.step_key not in active_steps:
			continue
		option = catalog.find_option(addon.step_key, selections.get(addon.step_key), function_id)
		if option and addon.is_eligible(option.id):
			result.append(addon)
	return result


# =============================================================================
# LINE ITEMS & TOTAL
# =============================================================================

def derive_line_items(
	catalog: CatalogSnapshot,
	function_id: str | None,
	selections: dict[str, str | None],
	addon_checks: dict[str, bool],
	locale: str | None = None,
) -> list[LineItem]:
	items = []

	function = catalog.get_function(function_id)
	if function and function.price:
		items.append(
			LineItem(
				key=function.id,
				kind="function",
				step_key=FUNCTION_STEP_KEY,
				label=function.label(locale),
				step_label=FUNCTION_STEP_KEY,
				price=function.price,
			)
		)

	for step, option in resolve_selected_options(catalog, function_id, selections):
		items.append(
			LineItem(
				key=option.id,
				kind="option",
				step_key=step.key,
				label=option.label(locale),
				step_label=step.label(locale),
				price=option.price,
			)
		)

	for addon in resolve_checked_addons(catalog, function_id, selections, addon_checks):
		step = catalog.get_step(addon.step_key)
		items.append(
			LineItem(
				key=addon.id,
				kind="addon",
				step_key=addon.step_key,
				label=addon.label(locale),
				step_label=step.label(locale) if step else addon.step_key,
				price=addon.price,
			)
		)

	return items


def compute_total(
	catalog: CatalogSnapshot,
	function_id: str | None,
	selections: dict[str, str | None],
	addon_checks: dict[str, bool],
) -> float:
	return sum(item.price for item in derive_line_items(catalog, function_id, selections, addon_checks))


def format_price(amount: float, currency_symbol: str = "$") -> str:
	"""Format a whole-dollar style amount, e.g. ``1230`` -> ``$1,230``."""
	amount = float(amount or 0)
	if amount.is_integer():
		return f"{currency_symbol}{int(amount):,}"
	return f"{currency_symbol}{amount:,.2f}"


# =============================================================================
# CHECKOUT PAYLOAD
# =============================================================================

def build_payload(
	catalog: CatalogSnapshot,
	function_id: str | None,
	selections: dict[str, str | None],
	addon_checks: dict[str, bool],
) -> dict[str, Any]:
	"""
	Serialize a selection into the checkout payload.

	Returns:
		dict: ``{"steps": [function_id, *option_ids], "addons": [...], "price": total}``
		      with option ids in step order and only priced (resolved) entries.
	"""
	steps = [function_id] if function_id else []
	steps.extend(option.id for _step, option in resolve_selected_options(catalog, function_id, selections))
	addons = [addon.id for addon in resolve_checked_addons(catalog, function_id, selections, addon_checks)]

	return {
		"steps": steps,
		"addons": addons,
		"price": compute_total(catalog, function_id, selections, addon_checks),
	}


def selections_from_payload(
	catalog: CatalogSnapshot, payload: dict[str, Any]
) -> tuple[str | None, dict[str, str], dict[str, bool]]:
	"""
	Rebuild (function_id, selections, addon_checks) from a checkout payload.

	The first entry of ``steps`` is the function id; each following id is
	assigned to the first not-yet-filled step of that function that offers it.
	Ids matching no step are dropped.
	"""
	step_ids = [str(value) for value in (payload.get("steps") or []) if value]
	if not step_ids:
		return None, {}, {}

	function_id = step_ids[0]
	selections: dict[str, str] = {}
	for option_id in step_ids[1:]:
		for step in catalog.steps_for_function(function_id):
			if step.key in selections:
				continue
			if catalog.find_option(step.key, option_id, function_id):
				selections[step.key] = option_id
				break

	addon_checks = {str(addon_id): True for addon_id in (payload.get("addons") or []) if addon_id}
	return function_id, selections, addon_checks


def missing_required_steps(
	catalog: CatalogSnapshot, function_id: str | None, selections: dict[str, str]
) -> list[str]:
	"""Keys of the function's non-optional steps that have no selection."""
	return [
		step.key
		for step in catalog.steps_for_function(function_id)
		if not step.optional and step.key not in selections
	]


def price_payload(catalog: CatalogSnapshot, payload: dict[str, Any]) -> float:
	"""Recompute the total of a submitted payload from catalog prices."""
	function_id, selections, addon_checks = selections_from_payload(catalog, payload)
	return compute_total(catalog, function_id, selections, addon_checks)


def describe_payload(catalog: CatalogSnapshot, payload: dict[str, Any], locale: str | None = None) -> str:
	"""Short order summary, e.g. ``Oak · Black / Onyx Black / Sword Black / Rubber Sport``."""
	function_id, selections, addon_checks = selections_from_payload(catalog, payload)
	function = catalog.get_function(function_id)
	labels = [
		item.label
		for item in derive_line_items(catalog, function_id, selections, addon_checks, locale)
		if item.kind != "function"
	]
	head = function.label(locale) if function else (function_id or "")
	if not labels:
		return head
	return f"{head} · {' / '.join(labels)}"
