"""
JSON codec for the KRA eTIMS wire format.

Requests are written as compact camelCase JSON with null fields left out.
Amounts go out as exact JSON numbers; no Decimal is ever rounded through
a float. Responses are read with case-insensitive key matching, since KRA
gateways are not consistent about key casing, and validated by pydantic.

Derived totals (lineTotal, subTotal, ...) are written next to the stored
fields so KRA receives the figures the invoice was validated against.
"""

import json
from dataclasses import fields, is_dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

import simplejson
from pydantic import TypeAdapter, ValidationError

from .models import InvoiceRequest, InvoiceResponse, LineItem


class ResponseDecodeError(ValueError):
    """Raised when a KRA response body cannot be decoded."""


# Properties written after the stored fields of each type
DERIVED_FIELDS: dict[type, tuple[str, ...]] = {
    LineItem: ("line_total", "tax_amount"),
    InvoiceRequest: ("sub_total", "total_tax", "total_amount"),
}


def to_camel(name: str) -> str:
    """Convert a snake_case attribute name to lowerCamelCase."""
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _to_wire(value: Any) -> Any:
    """Convert a domain value into plain JSON-ready structures."""
    if is_dataclass(value) and not isinstance(value, type):
        data: dict[str, Any] = {}
        names = [f.name for f in fields(value)]
        names.extend(DERIVED_FIELDS.get(type(value), ()))
        for name in names:
            item = getattr(value, name)
            if item is None:
                continue
            data[to_camel(name)] = _to_wire(item)
        return data
    if isinstance(value, list):
        return [_to_wire(item) for item in value]
    return value


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def serialize_invoice(obj: InvoiceRequest | InvoiceResponse) -> str:
    """
    Serialize an invoice request (or response) to canonical JSON.

    Returns:
        Compact JSON text with lowerCamelCase keys and no null values.
        Decimals are written digit for digit as JSON numbers.
    """
    return simplejson.dumps(
        _to_wire(obj),
        use_decimal=True,
        default=_json_default,
        separators=(",", ":"),
        ensure_ascii=False,
    )


# =============================================================================
# Response decoding
# =============================================================================

# Lax mode: KRA sends dates as ISO strings
_RESPONSE_ADAPTER = TypeAdapter(InvoiceResponse)

# Case-insensitive lookup: "KraInvoiceNumber" -> "kra_invoice_number"
_RESPONSE_KEYS = {
    f.name.replace("_", "").lower(): f.name for f in fields(InvoiceResponse)
}


def deserialize_response(text: str) -> InvoiceResponse | None:
    """
    Decode a KRA response body.

    Args:
        text: Raw response body

    Returns:
        InvoiceResponse, or None when the body is the JSON literal null

    Raises:
        ResponseDecodeError: If the body is not valid JSON or has the
            wrong shape
    """
    try:
        payload = json.loads(text, parse_float=Decimal)
    except json.JSONDecodeError as e:
        raise ResponseDecodeError(f"Malformed JSON in KRA response: {e}") from e

    if payload is None:
        return None

    if not isinstance(payload, dict):
        raise ResponseDecodeError(
            f"Expected a JSON object, got {type(payload).__name__}"
        )

    values: dict[str, Any] = {}
    for key, value in payload.items():
        name = _RESPONSE_KEYS.get(key.lower())
        if name is None or value is None:
            continue
        values[name] = value

    try:
        return _RESPONSE_ADAPTER.validate_python(values)
    except ValidationError as e:
        raise ResponseDecodeError(f"Invalid KRA response: {e}") from e
