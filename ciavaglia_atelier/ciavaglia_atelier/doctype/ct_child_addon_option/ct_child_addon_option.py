# Copyright (c) 2026, Ciavaglia Timepieces and contributors
# For license information, please see license.txt

from frappe.model.document import Document


class CTChildAddonOption(Document):
	pass
