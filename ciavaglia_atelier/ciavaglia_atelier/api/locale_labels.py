# Copyright (c) 2026, Ciavaglia Timepieces and contributors
# For license information, please see license.txt

"""
Locale Labels

Every customer-facing label in the configurator is stored as a mapping of
locale key to text, e.g. ``{"en": "Case", "fr": "Boîtier"}``. All lookups go
through ``resolve_label`` so components never branch on the locale themselves.

Usage:
    from ciavaglia_atelier.ciavaglia_atelier.api.locale_labels import (
        resolve_label,
        normalize_locale,
    )
"""

from typing import Any

LOCALES = ("en", "fr")
DEFAULT_LOCALE = "en"

LOCALE_DISPLAY_NAMES = {
	"en": "English",
	"fr": "Francais",
}

# Fixed UI strings used by the engine when it builds line items and previews
UI_LABELS = {
	"function": {"en": "Function", "fr": "Fonction"},
	"case": {"en": "Case", "fr": "Boîtier"},
	"dial": {"en": "Dial", "fr": "Cadran"},
	"hands": {"en": "Hands", "fr": "Aiguilles"},
	"strap": {"en": "Strap", "fr": "Bracelet"},
	"size": {"en": "Size", "fr": "Taille"},
	"extra": {"en": "Extra", "fr": "Extra"},
	"addon": {"en": "Add-on", "fr": "Option"},
	"preview": {"en": "Preview", "fr": "Aperçu"},
	"custom_build": {"en": "Custom build", "fr": "Création sur mesure"},
}


def normalize_locale(locale: str | None) -> str:
	"""Return a supported locale key, falling back to English.

	Accepts region-qualified values such as ``fr-CA`` or ``en_US``.
	"""
	if not locale:
		return DEFAULT_LOCALE
	key = str(locale).strip().lower().replace("_", "-").split("-")[0]
	return key if key in LOCALES else DEFAULT_LOCALE


def resolve_label(labels: Any, locale: str | None = None) -> str:
	"""
	Resolve a localized label.

	Args:
		labels: Either a plain string (returned as-is) or a dict keyed by locale
		locale: Requested locale; unsupported values resolve to English

	Returns:
		str: The label for the locale, the English label when the locale has no
		     entry, or the first non-empty value as a last resort.
	"""
	if labels is None:
		return ""
	if isinstance(labels, str):
		return labels

	key = normalize_locale(locale)
	value = labels.get(key) or labels.get(DEFAULT_LOCALE)
	if value:
		return value

	for candidate in labels.values():
		if candidate:
			return candidate
	return ""


def ui_label(key: str, locale: str | None = None) -> str:
	"""Look up one of the fixed ``UI_LABELS`` strings; unknown keys echo back."""
	return resolve_label(UI_LABELS.get(key), locale) or key


def labels_from_fields(doc: Any, fieldname: str = "label") -> dict[str, str]:
	"""
	Build a locale mapping from ``<fieldname>_en`` / ``<fieldname>_fr`` attributes.

	Works on Frappe documents, ``frappe._dict`` rows and plain dicts.
	"""
	result = {}
	for locale in LOCALES:
		attr = f"{fieldname}_{locale}"
		if isinstance(doc, dict):
			value = doc.get(attr)
		else:
			value = getattr(doc, attr, None)
		if value:
			result[locale] = value
	return result
