# Copyright (c) 2026, Ciavaglia Timepieces and contributors
# For license information, please see license.txt

"""
Default configurator catalog.

Seeded into the catalog DocTypes on install (see ``install.py``) and used as a
fixture by the engine tests. Prices are in USD.
"""

from ciavaglia_atelier.ciavaglia_atelier.api.configurator_catalog import CatalogSnapshot

LAYER_ROOT = "/assets/ciavaglia_atelier/images/layers"

STEPS = [
	{"key": "size", "labels": {"en": "Size", "fr": "Taille"}, "optional": False},
	{"key": "case", "labels": {"en": "Case", "fr": "Boîtier"}, "optional": False},
	{"key": "dial", "labels": {"en": "Dial", "fr": "Cadran"}, "optional": False},
	{"key": "hands", "labels": {"en": "Hands", "fr": "Aiguilles"}, "optional": False},
	{"key": "strap", "labels": {"en": "Strap", "fr": "Bracelet"}, "optional": False},
	{"key": "extra", "labels": {"en": "Extra", "fr": "Extra"}, "optional": True},
]

_CORE_STEPS = ["case", "dial", "hands", "strap"]

FUNCTIONS = [
	{"id": "oak", "labels": {"en": "Oak"}, "letter": "O", "steps": _CORE_STEPS + ["extra"]},
	{"id": "naut", "labels": {"en": "Naut"}, "letter": "N", "steps": list(_CORE_STEPS)},
	{"id": "skeleton", "labels": {"en": "Skeleton", "fr": "Squelette"}, "letter": "S", "steps": list(_CORE_STEPS)},
	{
		"id": "classic-date",
		"labels": {"en": "Classic Date", "fr": "Date Classique"},
		"letter": "C",
		"steps": ["size"] + _CORE_STEPS,
	},
	{"id": "chronograph", "labels": {"en": "Chronograph", "fr": "Chronographe"}, "letter": "C", "steps": list(_CORE_STEPS)},
	{"id": "day-date", "labels": {"en": "Day-Date", "fr": "Jour-Date"}, "letter": "D", "steps": list(_CORE_STEPS)},
	{
		"id": "submariner",
		"labels": {"en": "Submariner"},
		"letter": "S",
		"steps": list(_CORE_STEPS),
		"overlay_image_url": f"{LAYER_ROOT}/submariner-bezel.png",
	},
	{
		"id": "gmt",
		"labels": {"en": "GMT"},
		"letter": "G",
		"steps": list(_CORE_STEPS),
		"overlay_image_url": f"{LAYER_ROOT}/gmt-bezel.png",
	},
]


def _option(step, option_id, en, price, letter=None, fr=None, parent=None):
	labels = {"en": en}
	if fr:
		labels["fr"] = fr
	return {
		"id": option_id,
		"step": step,
		"labels": labels,
		"letter": letter or en[0],
		"price": price,
		"parent_option_id": parent,
		"layer_image_url": f"{LAYER_ROOT}/{step}-{option_id}.png",
		"layer_z_index": 0,
	}


OPTIONS = [
	# Size (Classic Date only)
	_option("size", "36mm", "36 mm", 0, letter="3", parent="classic-date"),
	_option("size", "39mm", "39 mm", 0, letter="3", parent="classic-date"),
	_option("size", "41mm", "41 mm", 150, letter="4", parent="classic-date"),
	# Case
	_option("case", "yellow-gold", "Yellow Gold", 1500, fr="Or Jaune"),
	_option("case", "black", "Black", 900, fr="Noir"),
	_option("case", "rose-gold", "Rose Gold", 1500, fr="Or Rose"),
	_option("case", "stainless-steel", "Stainless Steel", 800, fr="Acier Inoxydable"),
	_option("case", "exhibition-back", "Exhibition Caseback", 400, letter="E", fr="Fond Saphir", parent="skeleton"),
	# Dial
	_option("dial", "arctic-white", "Arctic White", 150, fr="Blanc Arctique"),
	_option("dial", "onyx-black", "Onyx Black", 160, fr="Noir Onyx"),
	_option("dial", "midnight-blue", "Midnight Blue", 180, fr="Bleu Nuit"),
	_option("dial", "champagne", "Champagne Gold", 220, letter="C", fr="Or Champagne"),
	# Hands
	_option("hands", "sword-black", "Sword Black", 95, fr="Glaive Noir"),
	_option("hands", "dauphine-silver", "Dauphine Silver", 85, fr="Dauphine Argent"),
	_option("hands", "cathedral-rose", "Cathedral Rose", 110, fr="Cathédrale Rose"),
	# Strap
	_option("strap", "steel-bracelet", "Steel Bracelet", 280, fr="Bracelet Acier"),
	_option("strap", "italian-leather-black", "Italian Leather Black", 120, fr="Cuir Italien Noir"),
	_option("strap", "italian-leather-brown", "Italian Leather Brown", 120, fr="Cuir Italien Brun"),
	_option("strap", "rubber-sport", "Rubber Sport", 75, fr="Caoutchouc Sport"),
	# Extra
	_option("extra", "custom-rotor-1", "Custom Rotor (Engraved)", 500, letter="C", fr="Rotor Gravé"),
	_option("extra", "custom-rotor-2", "Custom Rotor (Gold)", 750, letter="C", fr="Rotor Or"),
	_option("extra", "custom-rotor-3", "Custom Rotor (Skeleton)", 600, letter="C", fr="Rotor Squelette"),
]

ADDONS = [
	{
		"id": "frosted-finish",
		"step": "case",
		"labels": {"en": "Frosted Finish", "fr": "Finition Givrée"},
		"price": 200,
		"option_ids": ["yellow-gold", "rose-gold"],
	},
]


def default_catalog_data() -> dict:
	return {
		"functions": [
			dict(row, price=0, image_url=f"{LAYER_ROOT}/function-{row['id']}.png") for row in FUNCTIONS
		],
		"steps": [dict(row) for row in STEPS],
		"options": [dict(row) for row in OPTIONS],
		"addons": [dict(row) for row in ADDONS],
	}


def default_catalog() -> CatalogSnapshot:
	return CatalogSnapshot.from_dict(default_catalog_data())
