"""
Invoice-level tax calculation.

The TaxInfo produced here uses a single rate across the whole taxable
amount. Line items keep their own rates for their own tax amounts, so
with mixed rates TaxInfo.tax_amount differs from InvoiceRequest.total_tax.
Both figures are sent to KRA as-is.
"""

from collections.abc import Iterable
from decimal import Decimal

from .models import DEFAULT_TAX_CATEGORY, DEFAULT_TAX_RATE, LineItem, TaxInfo


def calculate_tax(
    line_items: Iterable[LineItem],
    tax_rate: Decimal = DEFAULT_TAX_RATE,
) -> TaxInfo:
    """
    Build a TaxInfo snapshot for a set of line items.

    Args:
        line_items: Items whose line totals form the taxable amount
        tax_rate: Rate applied to the taxable amount (percent)

    Returns:
        TaxInfo with taxable_amount and tax_amount filled in
    """
    taxable_amount = sum((item.line_total for item in line_items), Decimal(0))
    tax_amount = taxable_amount * (tax_rate / 100)

    return TaxInfo(
        tax_category=DEFAULT_TAX_CATEGORY,
        tax_rate=tax_rate,
        taxable_amount=taxable_amount,
        tax_amount=tax_amount,
    )
