"""Tests for the KRA eTIMS JSON codec."""

import json
from datetime import datetime
from decimal import Decimal

import pytest

from etims_worker.domain.codec import (
    ResponseDecodeError,
    deserialize_response,
    serialize_invoice,
    to_camel,
)
from etims_worker.domain.models import Customer, InvoiceRequest, InvoiceResponse, LineItem


def test_to_camel():
    assert to_camel("kra_invoice_number") == "kraInvoiceNumber"
    assert to_camel("currency") == "currency"


class TestSerializeInvoice:

    def test_camel_case_keys_and_derived_totals(self, invoice):
        payload = json.loads(serialize_invoice(invoice))

        assert payload["invoiceNumber"] == "INV-2024-001"
        assert payload["invoiceDate"] == "2024-01-15T10:30:00"
        assert payload["customer"]["customerName"] == "Acme Ltd"
        assert payload["taxInfo"]["taxCategory"] == "A"
        assert payload["paymentInfo"]["paymentMode"] == "MOBILE"
        assert payload["currency"] == "KES"
        assert payload["subTotal"] == 200
        assert payload["totalTax"] == 32
        assert payload["totalAmount"] == 232

        line = payload["lineItems"][0]
        assert line["itemName"] == "Widget"
        assert line["itemCode"] == "W-001"
        assert line["lineTotal"] == 200
        assert line["taxAmount"] == 32

    def test_null_fields_are_omitted(self, invoice):
        payload = json.loads(serialize_invoice(invoice))

        assert "remarks" not in payload
        assert "customerEmail" not in payload["customer"]
        assert "paymentReference" not in payload["paymentInfo"]

    def test_compact_output(self, invoice):
        text = serialize_invoice(invoice)
        assert "\n" not in text
        assert ": " not in text
        assert text.startswith('{"invoiceNumber":"INV-2024-001"')


class TestDeserializeResponse:

    def test_case_insensitive_keys(self):
        response = deserialize_response(
            '{"SUCCESS": true, "KraInvoiceNumber": "KRA-0001",'
            ' "qrcodedata": "https://etims.kra.go.ke/verify/KRA-0001",'
            ' "TotalAmount": 232.00, "errors": []}'
        )

        assert response.success is True
        assert response.kra_invoice_number == "KRA-0001"
        assert response.qr_code_data == "https://etims.kra.go.ke/verify/KRA-0001"
        assert response.total_amount == Decimal("232.00")
        assert response.errors == []

    def test_missing_fields_default(self):
        response = deserialize_response('{"success": false, "message": "PIN mismatch"}')

        assert response == InvoiceResponse(success=False, message="PIN mismatch")

    def test_dates_and_unknown_keys(self):
        response = deserialize_response(
            '{"success": true, "timestamp": "2024-01-15T10:31:02",'
            ' "invoiceDate": null, "resultCd": "000"}'
        )

        assert response.timestamp == datetime(2024, 1, 15, 10, 31, 2)
        assert response.invoice_date is None

    def test_null_document(self):
        assert deserialize_response("null") is None

    @pytest.mark.parametrize("body", ["<!DOCTYPE html><html></html>", "{", ""])
    def test_malformed_json_raises(self, body):
        with pytest.raises(ResponseDecodeError):
            deserialize_response(body)

    def test_non_object_raises(self):
        with pytest.raises(ResponseDecodeError):
            deserialize_response("[1, 2]")

    @pytest.mark.parametrize(
        "body",
        [
            '{"success": "maybe"}',
            '{"kraInvoiceNumber": 12}',
            '{"errors": "late submission"}',
            '{"totalAmount": "lots"}',
            '{"timestamp": "yesterday"}',
        ],
    )
    def test_wrong_type_raises(self, body):
        with pytest.raises(ResponseDecodeError, match="Invalid KRA response"):
            deserialize_response(body)


def test_response_round_trip():
    original = deserialize_response(
        '{"success": true, "message": "Accepted", "invoiceNumber": "INV-7",'
        ' "kraInvoiceNumber": "KRA-7", "invoiceDate": "2024-02-01T08:00:00",'
        ' "qrCode": "QR-7", "digitalSignature": "c2lnbmF0dXJl",'
        ' "timestamp": "2024-02-01T08:00:05+03:00", "totalAmount": 1160.50,'
        ' "taxAmount": 160.07, "errors": ["warning: late submission"]}'
    )

    assert deserialize_response(serialize_invoice(original)) == original


class TestExactAmounts:

    def test_high_precision_total_round_trips(self):
        original = InvoiceResponse(
            success=True,
            total_amount=Decimal("12345678901234567.89"),
            tax_amount=Decimal("0.000001"),
        )

        restored = deserialize_response(serialize_invoice(original))

        assert restored.total_amount == Decimal("12345678901234567.89")
        assert restored.tax_amount == Decimal("0.000001")

    def test_large_line_totals_are_not_rounded(self):
        invoice = InvoiceRequest(
            invoice_number="INV-BIG",
            customer=Customer(customer_name="Acme Ltd"),
            line_items=[
                LineItem(
                    item_name="Turbine",
                    quantity=Decimal("3"),
                    unit_price=Decimal("33333333333333333.33"),
                )
            ],
        )

        text = serialize_invoice(invoice)
        payload = json.loads(text, parse_float=Decimal)

        assert '"subTotal":99999999999999999.99' in text
        assert payload["subTotal"] == invoice.sub_total
        assert payload["totalTax"] == invoice.total_tax
        assert payload["lineItems"][0]["unitPrice"] == Decimal("33333333333333333.33")
