"""
Pre-submission validation rules for invoices.

This module contains pure functions: no side effects, no I/O.
Every rule runs on every call so a single pass reports all problems,
except for a missing invoice, which short-circuits.

Decimal comparison uses explicit tolerance for rounding differences.
"""

from decimal import Decimal

from .models import InvoiceRequest, LineItem, ValidationResult


# Tolerance for decimal comparisons (one cent)
DECIMAL_TOLERANCE = Decimal("0.01")


def _validate_line_items(line_items: list[LineItem]) -> list[str]:
    """Check each line item, reporting positions 1-based."""
    errors: list[str] = []

    for i, item in enumerate(line_items, start=1):
        if not item.item_name or not item.item_name.strip():
            errors.append(f"Line item {i}: Item name is required")
        if item.quantity <= 0:
            errors.append(f"Line item {i}: Quantity must be greater than zero")
        if item.unit_price < 0:
            errors.append(f"Line item {i}: Unit price cannot be negative")

    return errors


def _validate_totals(invoice: InvoiceRequest) -> list[str]:
    """
    Recompute the aggregates straight from the line items and compare
    them against the invoice's own totals.
    """
    line_items = invoice.line_items or []
    calculated_sub_total = sum((item.line_total for item in line_items), Decimal(0))
    calculated_tax = sum((item.tax_amount for item in line_items), Decimal(0))
    calculated_total = calculated_sub_total + calculated_tax

    errors: list[str] = []

    if abs(invoice.sub_total - calculated_sub_total) > DECIMAL_TOLERANCE:
        errors.append("Subtotal calculation mismatch")

    if abs(invoice.total_tax - calculated_tax) > DECIMAL_TOLERANCE:
        errors.append("Tax calculation mismatch")

    if abs(invoice.total_amount - calculated_total) > DECIMAL_TOLERANCE:
        errors.append("Total amount calculation mismatch")

    return errors


def validate_invoice(invoice: InvoiceRequest | None) -> ValidationResult:
    """
    Validate an invoice before it is sent to KRA.

    Args:
        invoice: The populated invoice request

    Returns:
        ValidationResult listing every violation found
    """
    if invoice is None:
        return ValidationResult(
            is_valid=False,
            errors=["Invoice request cannot be null"],
        )

    errors: list[str] = []

    if not invoice.invoice_number or not invoice.invoice_number.strip():
        errors.append("Invoice number is required")

    customer = invoice.customer
    if customer is None or not customer.customer_name or not customer.customer_name.strip():
        errors.append("Customer name is required")

    if not invoice.line_items:
        errors.append("At least one line item is required")
    else:
        errors.extend(_validate_line_items(invoice.line_items))

    errors.extend(_validate_totals(invoice))

    return ValidationResult(is_valid=len(errors) == 0, errors=errors)
