"""
Domain models for KRA eTIMS invoices.

These models describe the invoice as the business sees it, plus the
response KRA returns for it.

Design Decisions:
- Using dataclasses for typed domain objects; serialization lives in codec
- Decimal for all monetary values to avoid floating-point errors
- Line and invoice totals are properties, recomputed on every access
- TaxInfo amounts are stored snapshots written once by calculate_tax(),
  so they can drift from the line items if those change afterwards
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal


DEFAULT_TAX_RATE = Decimal("16.0")  # Standard VAT rate in Kenya
DEFAULT_TAX_CATEGORY = "A"  # Standard VAT category
DEFAULT_CURRENCY = "KES"


@dataclass
class Customer:
    """Buyer of the invoiced goods."""
    customer_name: str = ""
    customer_pin: str | None = None  # KRA PIN of the buyer
    customer_address: str | None = None
    customer_phone: str | None = None
    customer_email: str | None = None


@dataclass
class TaxInfo:
    """
    Invoice-level tax summary.

    ``taxable_amount`` and ``tax_amount`` are stored, not derived.
    """
    tax_category: str = DEFAULT_TAX_CATEGORY
    tax_rate: Decimal = DEFAULT_TAX_RATE
    tax_amount: Decimal = Decimal(0)
    taxable_amount: Decimal = Decimal(0)

    def __post_init__(self) -> None:
        """Validate rate range."""
        if not Decimal(0) <= self.tax_rate <= Decimal(100):
            raise ValueError(f"Tax rate must be 0-100, got {self.tax_rate}")


@dataclass
class PaymentInfo:
    """How the invoice was paid."""
    payment_mode: str = "CASH"  # CASH, CARD, MOBILE, etc.
    payment_amount: Decimal = Decimal(0)
    payment_reference: str | None = None


@dataclass
class LineItem:
    """
    A single line on an invoice.

    Quantity and price limits are checked by validate_invoice() rather than
    at construction, so that one pass can report every bad line.
    """
    item_name: str = ""
    item_code: str | None = None
    quantity: Decimal = Decimal(0)
    unit_price: Decimal = Decimal(0)
    tax_rate: Decimal = DEFAULT_TAX_RATE
    discount: Decimal = Decimal(0)

    @property
    def line_total(self) -> Decimal:
        """Net amount of the line: quantity * unit_price - discount."""
        return self.quantity * self.unit_price - self.discount

    @property
    def tax_amount(self) -> Decimal:
        """Tax on the net amount at this line's own rate."""
        return self.line_total * (self.tax_rate / 100)


@dataclass
class InvoiceRequest:
    """
    Invoice submitted to KRA eTIMS.

    The invoice number doubles as the artifact file key; uniqueness is the
    caller's responsibility.
    """
    invoice_number: str = ""
    invoice_date: datetime = field(default_factory=datetime.now)
    customer: Customer | None = field(default_factory=Customer)
    line_items: list[LineItem] | None = field(default_factory=list)
    tax_info: TaxInfo = field(default_factory=TaxInfo)
    payment_info: PaymentInfo = field(default_factory=PaymentInfo)
    currency: str = DEFAULT_CURRENCY
    remarks: str | None = None

    @property
    def sub_total(self) -> Decimal:
        """Sum of all line totals."""
        return sum((item.line_total for item in self.line_items or ()), Decimal(0))

    @property
    def total_tax(self) -> Decimal:
        """Sum of all per-line tax amounts."""
        return sum((item.tax_amount for item in self.line_items or ()), Decimal(0))

    @property
    def total_amount(self) -> Decimal:
        return self.sub_total + self.total_tax


@dataclass
class InvoiceResponse:
    """
    Response from the KRA eTIMS API.

    KRA may omit any field except ``success``.
    """
    success: bool = False
    message: str | None = None
    invoice_number: str | None = None
    kra_invoice_number: str | None = None
    invoice_date: datetime | None = None
    qr_code: str | None = None
    qr_code_data: str | None = None
    digital_signature: str | None = None
    timestamp: datetime | None = None
    total_amount: Decimal | None = None
    tax_amount: Decimal | None = None
    errors: list[str] | None = None


@dataclass
class ValidationResult:
    """Outcome of validate_invoice()."""
    is_valid: bool
    errors: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ServiceResult[T]:
    """
    Outcome envelope returned by every EtimsService operation.

    Type Parameters:
        T: The payload type carried on success (or alongside a rejection)
    """
    success: bool
    data: T | None = None
    error_message: str | None = None
    exception: BaseException | None = None

    @classmethod
    def ok(cls, data: T | None) -> "ServiceResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(
        cls,
        error_message: str,
        data: T | None = None,
        exception: BaseException | None = None,
    ) -> "ServiceResult[T]":
        return cls(
            success=False,
            data=data,
            error_message=error_message,
            exception=exception,
        )
