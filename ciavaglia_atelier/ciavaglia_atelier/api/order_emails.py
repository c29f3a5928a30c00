# Copyright (c) 2026, Ciavaglia Timepieces and contributors
# For license information, please see license.txt

"""
Order confirmation emails: one to the customer, one to the atelier.
"""

import frappe

from ciavaglia_atelier.ciavaglia_atelier.api.configurator_pricing import format_price
from ciavaglia_atelier.ciavaglia_atelier.doctype.ct_atelier_settings.ct_atelier_settings import (
	get_atelier_settings,
)
from ciavaglia_atelier.ciavaglia_atelier.utils import get_site_url

CUSTOMER_SUBJECTS = {
	"en": "Your Ciavaglia order {0} is confirmed",
	"fr": "Votre commande Ciavaglia {0} est confirmée",
}

CUSTOMER_BODY = {
	"en": """
<div style="font-family:Arial,sans-serif;line-height:1.6">
	<h2>Thank you for your Ciavaglia order.</h2>
	<p>We have received your payment and the atelier is preparing your build.</p>
	<p><strong>Order:</strong> {order_number}</p>
	<p><strong>Summary:</strong> {summary}</p>
	<p><strong>Total:</strong> {total}</p>
	<p>Follow your order at <a href="{tracking_page}">{tracking_page}</a>.</p>
</div>
""",
	"fr": """
<div style="font-family:Arial,sans-serif;line-height:1.6">
	<h2>Merci pour votre commande Ciavaglia.</h2>
	<p>Nous avons bien reçu votre paiement et l'atelier prépare votre montre.</p>
	<p><strong>Commande :</strong> {order_number}</p>
	<p><strong>Résumé :</strong> {summary}</p>
	<p><strong>Total :</strong> {total}</p>
	<p>Suivez votre commande sur <a href="{tracking_page}">{tracking_page}</a>.</p>
</div>
""",
}

ATELIER_BODY = """
<div style="font-family:Arial,sans-serif;line-height:1.6">
	<h2>New order received</h2>
	<p><strong>Order:</strong> {order_number}</p>
	<p><strong>Customer:</strong> {customer_email}</p>
	<p><strong>Summary:</strong> {summary}</p>
	<p><strong>Total:</strong> {total}</p>
	<p>Please check the desk for configuration details.</p>
</div>
"""


def send_order_emails(order) -> list[str]:
	"""
	Queue the customer confirmation and the atelier notification for an order.

	Returns:
		list: Recipients that were emailed (empty when order emails are disabled)
	"""
	settings = get_atelier_settings()
	if not settings.send_order_emails:
		return []

	locale = order.locale if order.locale in CUSTOMER_SUBJECTS else "en"
	context = {
		"order_number": order.order_number,
		"summary": frappe.utils.escape_html(order.summary or ""),
		"total": format_price(order.total),
		"customer_email": order.customer_email or "",
		"tracking_page": f"{get_site_url()}/{locale}/track-order?order_number={order.order_number}",
	}

	sent = []
	if order.customer_email:
		frappe.sendmail(
			recipients=[order.customer_email],
			subject=CUSTOMER_SUBJECTS[locale].format(order.order_number),
			message=CUSTOMER_BODY[locale].format(**context),
			reference_doctype="CT-Watch-Order",
			reference_name=order.name,
		)
		sent.append(order.customer_email)

	frappe.sendmail(
		recipients=[settings.order_notify_email],
		subject=f"New Ciavaglia order received: {order.order_number}",
		message=ATELIER_BODY.format(**context),
		reference_doctype="CT-Watch-Order",
		reference_name=order.name,
	)
	sent.append(settings.order_notify_email)

	return sent
