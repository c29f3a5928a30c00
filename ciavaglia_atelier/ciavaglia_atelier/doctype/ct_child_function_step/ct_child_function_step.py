# Copyright (c) 2026, Ciavaglia Timepieces and contributors
# For license information, please see license.txt

from frappe.model.document import Document


class CTChildFunctionStep(Document):
	"""One configurator step of a watch function; row order is step order."""

	pass
