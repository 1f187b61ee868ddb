"""
Pydantic schemas for API request/response validation.

Request bodies use the same lowerCamelCase keys as the KRA wire format
and are converted to domain dataclasses before reaching the service.
Derived totals sent by clients (lineTotal, subTotal, ...) are ignored;
the domain model always recomputes them.
"""

from dataclasses import asdict
from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from etims_worker.domain.models import (
    DEFAULT_CURRENCY,
    DEFAULT_TAX_CATEGORY,
    DEFAULT_TAX_RATE,
    Customer,
    InvoiceRequest,
    InvoiceResponse,
    LineItem,
    PaymentInfo,
    TaxInfo,
)


class CamelModel(BaseModel):
    """Base schema accepting camelCase keys (snake_case also allowed)."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# =============================================================================
# Request Schemas
# =============================================================================

class CustomerSchema(CamelModel):
    customer_name: str = ""
    customer_pin: str | None = None
    customer_address: str | None = None
    customer_phone: str | None = None
    customer_email: str | None = None


class TaxInfoSchema(CamelModel):
    tax_category: str = DEFAULT_TAX_CATEGORY
    tax_rate: Decimal = Field(default=DEFAULT_TAX_RATE, ge=0, le=100)
    tax_amount: Decimal = Decimal(0)
    taxable_amount: Decimal = Decimal(0)


class PaymentInfoSchema(CamelModel):
    payment_mode: str = "CASH"
    payment_amount: Decimal = Decimal(0)
    payment_reference: str | None = None


class LineItemSchema(CamelModel):
    """
    One invoice line.

    Quantity and price limits are left to the domain validator so that
    all problems come back in one error message.
    """
    item_name: str = ""
    item_code: str | None = None
    quantity: Decimal = Decimal(0)
    unit_price: Decimal = Decimal(0)
    tax_rate: Decimal = DEFAULT_TAX_RATE
    discount: Decimal = Decimal(0)


class InvoiceSubmitRequest(CamelModel):
    """Invoice submitted by a client of this service."""
    invoice_number: str = ""
    invoice_date: datetime = Field(default_factory=datetime.now)
    customer: CustomerSchema | None = Field(default_factory=CustomerSchema)
    line_items: list[LineItemSchema] = Field(default_factory=list)
    tax_info: TaxInfoSchema = Field(default_factory=TaxInfoSchema)
    payment_info: PaymentInfoSchema = Field(default_factory=PaymentInfoSchema)
    currency: str = DEFAULT_CURRENCY
    remarks: str | None = None

    def to_domain(self) -> InvoiceRequest:
        """Convert to the domain InvoiceRequest."""
        return InvoiceRequest(
            invoice_number=self.invoice_number,
            invoice_date=self.invoice_date,
            customer=Customer(**self.customer.model_dump()) if self.customer else None,
            line_items=[LineItem(**item.model_dump()) for item in self.line_items],
            tax_info=TaxInfo(**self.tax_info.model_dump()),
            payment_info=PaymentInfo(**self.payment_info.model_dump()),
            currency=self.currency,
            remarks=self.remarks,
        )


# =============================================================================
# Response Schemas
# =============================================================================

class InvoiceResponseSchema(CamelModel):
    """KRA response as returned to API clients."""
    success: bool
    message: str | None = None
    invoice_number: str | None = None
    kra_invoice_number: str | None = None
    invoice_date: datetime | None = None
    qr_code: str | None = None
    qr_code_data: str | None = None
    digital_signature: str | None = None
    timestamp: datetime | None = None
    # Floats so amounts stay JSON numbers (pydantic writes Decimal as str)
    total_amount: float | None = None
    tax_amount: float | None = None
    errors: list[str] | None = None

    @classmethod
    def from_domain(cls, response: InvoiceResponse) -> "InvoiceResponseSchema":
        return cls.model_validate(asdict(response))


class SubmitInvoiceResponse(CamelModel):
    success: bool = True
    message: str = "Invoice submitted successfully"
    data: InvoiceResponseSchema


class InvoiceStatusResponse(CamelModel):
    success: bool = True
    data: InvoiceResponseSchema


class FailureResponse(CamelModel):
    """Error body for 400/404 responses."""
    success: bool = False
    message: str
    errors: Any | None = None


class GeneratedFilesResponse(CamelModel):
    output_directory: str
    file_count: int
    files: list[str]


class ServiceInfoResponse(BaseModel):
    """Root endpoint response."""
    service: str = "KRA eTIMS Invoice Worker"
    status: str = "running"
    version: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "healthy"
    version: str
    kra_base_url: str
    output_directory: str


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: str | None = None
