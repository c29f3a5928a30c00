# Copyright (c) 2026, Ciavaglia Timepieces and contributors
# For license information, please see license.txt

"""
Configurator Engine

Step/selection state machine behind the watch configurator. A session walks the
customer through:

    Function → [Size] → Case → Dial → Hands → Strap → [Extra] → checkout

Step 0 is always the function (watch family). The remaining steps depend on the
selected function; see ``CatalogSnapshot.steps_for_function``.

State:
    - function_id       selected function, or None
    - selections        step key -> option id
    - addon_checks      add-on id -> True for every checked add-on
    - step_index        cursor, 0..step_count-1

Rules:
    - Selecting a function clears every step selection and add-on and moves
      the cursor back to 0.
    - ``can_advance`` is re-derived on every call: the current step is optional
      or has a selection.
    - ``advance`` on the last step hands the checkout payload to a gateway
      callable. A failed submission keeps every selection and records the
      gateway's error verbatim in ``last_error``.

The engine is pure Python. It never raises on unknown ids: an unknown function
simply has no steps and an out-of-scope option id never prices.
"""

from dataclasses import dataclass
from typing import Any, Callable

from ciavaglia_atelier.ciavaglia_atelier.api import configurator_pricing, preview_layers
from ciavaglia_atelier.ciavaglia_atelier.api.configurator_catalog import (
	FUNCTION_STEP_KEY,
	CatalogSnapshot,
	ConfiguratorStep,
)
from ciavaglia_atelier.ciavaglia_atelier.api.locale_labels import normalize_locale

DEFAULT_SUBMISSION_ERROR = "Failed to create checkout session"
BUSY_SUBMISSION_ERROR = "A checkout request is already in progress"

# Gateway contract: takes {"type": "custom", "configuration": {...}} and returns
# {"url": ...} on success or {"error": ...} on failure.
CheckoutGateway = Callable[[dict[str, Any]], dict[str, Any]]


class CheckoutSubmissionError(Exception):
	"""Raised by gateways that prefer exceptions over an ``{"error": ...}`` reply."""


@dataclass
class SubmissionResult:
	success: bool
	url: str | None = None
	error: str | None = None


class ConfiguratorSession:
	"""In-memory configurator state for one customer session."""

	def __init__(self, catalog: CatalogSnapshot, locale: str | None = None):
		self.catalog = catalog
		self.locale = normalize_locale(locale)
		self.busy = False
		self.reset()

	# -------------------------------------------------------------------------
	# Derived structure
	# -------------------------------------------------------------------------

	@property
	def is_empty(self) -> bool:
		"""True when the catalog offers no function at all."""
		return self.catalog.is_empty

	@property
	def steps(self) -> list[ConfiguratorStep]:
		return self.catalog.steps_for_function(self.function_id)

	@property
	def step_keys(self) -> list[str]:
		return [FUNCTION_STEP_KEY] + [step.key for step in self.steps]

	@property
	def step_count(self) -> int:
		return len(self.step_keys)

	@property
	def current_step_key(self) -> str:
		return self.step_keys[self.step_index]

	@property
	def is_last_step(self) -> bool:
		return self.step_index >= self.step_count - 1

	def is_step_optional(self, step_key: str) -> bool:
		if step_key == FUNCTION_STEP_KEY:
			return False
		step = self.catalog.get_step(step_key)
		return bool(step and step.optional)

	def selection_for(self, step_key: str) -> str | None:
		if step_key == FUNCTION_STEP_KEY:
			return self.function_id
		return self.selections.get(step_key)

	# -------------------------------------------------------------------------
	# Mutations
	# -------------------------------------------------------------------------

	def reset(self):
		"""Start over: no function, no selections, no add-ons, cursor at 0."""
		self.function_id: str | None = None
		self.selections: dict[str, str] = {}
		self.addon_checks: dict[str, bool] = {}
		self.step_index = 0
		self.last_error: str | None = None
		self.redirect_url: str | None = None

	def select_function(self, function_id: str | None):
		self.reset()
		self.function_id = function_id or None

	def set_step_selection(self, step_key: str, option_id: str | None):
		"""
		Record or clear the chosen option of a step.

		The id is stored as given; ids outside the function's scope are kept
		but never priced or layered. Checked add-ons on this step that the new
		selection does not qualify for are cleared.
		"""
		if step_key == FUNCTION_STEP_KEY:
			self.select_function(option_id)
			return

		if option_id:
			self.selections[step_key] = option_id
		else:
			self.selections.pop(step_key, None)

		self._clear_ineligible_addons(step_key)

	def toggle_addon(self, addon_id: str, checked: bool):
		if checked:
			self.addon_checks[addon_id] = True
		else:
			self.addon_checks.pop(addon_id, None)

	def _clear_ineligible_addons(self, step_key: str):
		option = self.catalog.find_option(step_key, self.selections.get(step_key), self.function_id)
		for addon in self.catalog.addons_for_step(step_key):
			if not self.addon_checks.get(addon.id):
				continue
			if not option or not addon.is_eligible(option.id):
				self.addon_checks.pop(addon.id, None)

	# -------------------------------------------------------------------------
	# Navigation
	# -------------------------------------------------------------------------

	def can_advance(self) -> bool:
		step_key = self.current_step_key
		return self.is_step_optional(step_key) or bool(self.selection_for(step_key))

	def advance(self, gateway: CheckoutGateway | None = None) -> bool:
		"""
		Move to the next step, or submit the configuration from the last one.

		Returns:
			bool: True when the cursor moved or the submission produced a
			      redirect URL; False when blocked or the submission failed.
		"""
		if not self.can_advance():
			return False

		if not self.is_last_step:
			self.step_index += 1
			return True

		return self.submit(gateway).success

	def go_back(self):
		self.step_index = max(0, self.step_index - 1)

	# -------------------------------------------------------------------------
	# Derivations
	# -------------------------------------------------------------------------

	def compute_total(self) -> float:
		return configurator_pricing.compute_total(
			self.catalog, self.function_id, self.selections, self.addon_checks
		)

	def derive_line_items(self, locale: str | None = None) -> list[configurator_pricing.LineItem]:
		return configurator_pricing.derive_line_items(
			self.catalog,
			self.function_id,
			self.selections,
			self.addon_checks,
			locale or self.locale,
		)

	def derive_layers(self) -> list[preview_layers.PreviewLayer]:
		return preview_layers.derive_layers(self.catalog, self.function_id, self.selections)

	def visible_options(self, step_key: str | None = None) -> list:
		"""Functions for the function step, otherwise the step's scoped options."""
		step_key = step_key or self.current_step_key
		if step_key == FUNCTION_STEP_KEY:
			return list(self.catalog.functions)
		return self.catalog.options_for_step(step_key, self.function_id)

	def visible_addons(self, step_key: str | None = None) -> list:
		step_key = step_key or self.current_step_key
		option = self.catalog.find_option(step_key, self.selections.get(step_key), self.function_id)
		return self.catalog.eligible_addons(step_key, option.id if option else None)

	# -------------------------------------------------------------------------
	# Checkout
	# -------------------------------------------------------------------------

	def build_payload(self) -> dict[str, Any]:
		return configurator_pricing.build_payload(
			self.catalog, self.function_id, self.selections, self.addon_checks
		)

	def build_submission(self) -> dict[str, Any]:
		return {
			"type": "custom",
			"locale": self.locale,
			"configuration": self.build_payload(),
		}

	def submit(self, gateway: CheckoutGateway | None) -> SubmissionResult:
		"""
		Hand the configuration to the checkout gateway.

		Selections, add-ons and the cursor are left untouched whatever the
		outcome; the caller may retry or navigate back.
		"""
		if self.busy:
			self.last_error = BUSY_SUBMISSION_ERROR
			return SubmissionResult(success=False, error=self.last_error)
		if gateway is None:
			self.last_error = DEFAULT_SUBMISSION_ERROR
			return SubmissionResult(success=False, error=self.last_error)

		self.busy = True
		self.last_error = None
		try:
			response = gateway(self.build_submission()) or {}
		except Exception as e:
			response = {"error": str(e) or DEFAULT_SUBMISSION_ERROR}
		finally:
			self.busy = False

		url = response.get("url")
		if url:
			self.redirect_url = url
			return SubmissionResult(success=True, url=url)

		self.last_error = response.get("error") or DEFAULT_SUBMISSION_ERROR
		return SubmissionResult(success=False, error=self.last_error)

	# -------------------------------------------------------------------------
	# Serialization
	# -------------------------------------------------------------------------

	@classmethod
	def from_state(
		cls,
		catalog: CatalogSnapshot,
		function_id: str | None = None,
		selections: dict[str, str] | None = None,
		addons: list[str] | dict[str, bool] | None = None,
		step_index: int = 0,
		locale: str | None = None,
	) -> "ConfiguratorSession":
		"""Rebuild a session from client state, replaying it through the mutators."""
		session = cls(catalog, locale=locale)
		session.select_function(function_id)
		for step_key in session.step_keys[1:]:
			if selections and selections.get(step_key):
				session.set_step_selection(step_key, selections[step_key])

		if isinstance(addons, dict):
			addon_ids = [addon_id for addon_id, checked in addons.items() if checked]
		else:
			addon_ids = list(addons or [])
		for addon_id in addon_ids:
			session.toggle_addon(addon_id, True)

		session.step_index = min(max(0, int(step_index or 0)), session.step_count - 1)
		return session

	def to_dict(self, locale: str | None = None) -> dict[str, Any]:
		locale = locale or self.locale
		return {
			"function_id": self.function_id,
			"selections": dict(self.selections),
			"addons": sorted(self.addon_checks),
			"step_index": self.step_index,
			"step_keys": self.step_keys,
			"current_step": self.current_step_key,
			"is_last_step": self.is_last_step,
			"can_advance": self.can_advance(),
			"is_empty": self.is_empty,
			"total": self.compute_total(),
			"line_items": [item.as_dict() for item in self.derive_line_items(locale)],
			"layers": [layer.as_dict() for layer in self.derive_layers()],
			"last_error": self.last_error,
		}
