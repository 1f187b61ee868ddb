"""
Shortcuts for building and displaying invoices.
"""

from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal

from .models import DEFAULT_TAX_RATE, Customer, InvoiceRequest, LineItem, PaymentInfo
from .tax import calculate_tax


# (item_name, quantity, unit_price, tax_rate)
SimpleItem = tuple[str, Decimal, Decimal, Decimal]


def create_invoice_request(
    invoice_number: str,
    customer_name: str,
    items: Sequence[SimpleItem],
    payment_mode: str = "CASH",
    customer_pin: str | None = None,
) -> InvoiceRequest:
    """
    Create a ready-to-submit invoice from plain values.

    The invoice-level tax snapshot uses the first item's rate. Payment is
    assumed to cover the full amount including tax.
    """
    line_items = [
        LineItem(
            item_name=item_name,
            quantity=quantity,
            unit_price=unit_price,
            tax_rate=tax_rate,
        )
        for item_name, quantity, unit_price, tax_rate in items
    ]

    default_tax_rate = line_items[0].tax_rate if line_items else DEFAULT_TAX_RATE

    return InvoiceRequest(
        invoice_number=invoice_number,
        invoice_date=datetime.now(),
        customer=Customer(customer_name=customer_name, customer_pin=customer_pin),
        line_items=line_items,
        tax_info=calculate_tax(line_items, default_tax_rate),
        payment_info=PaymentInfo(
            payment_mode=payment_mode,
            payment_amount=sum(
                (item.line_total + item.tax_amount for item in line_items),
                Decimal(0),
            ),
        ),
    )


def format_invoice_summary(invoice: InvoiceRequest) -> str:
    """Render a short human-readable summary of an invoice."""
    customer_name = invoice.customer.customer_name if invoice.customer else ""
    return "\n".join([
        f"Invoice Number: {invoice.invoice_number}",
        f"Date: {invoice.invoice_date:%Y-%m-%d %H:%M:%S}",
        f"Customer: {customer_name}",
        f"Items: {len(invoice.line_items or ())}",
        f"Subtotal: {invoice.currency} {invoice.sub_total:,.2f}",
        f"Tax: {invoice.currency} {invoice.total_tax:,.2f}",
        f"Total: {invoice.currency} {invoice.total_amount:,.2f}",
    ])
