"""
QR proof generation for accepted invoices.

KRA normally returns the text to encode; when it doesn't, a short text
block is built from the response so every accepted invoice still gets a
scannable proof.
"""

import io
import logging

import qrcode
from qrcode.constants import ERROR_CORRECT_Q

from etims_worker.domain.models import InvoiceResponse

logger = logging.getLogger(__name__)


# Pixels per QR module
QR_BOX_SIZE = 20

# Quiet zone width in modules
QR_BORDER = 4


def build_qr_text(response: InvoiceResponse) -> str:
    """
    Build a QR text block from response fields.

    Format: invoice number, date, amount and (if present) signature,
    one per line.
    """
    invoice_number = response.kra_invoice_number or response.invoice_number or ""
    invoice_date = (
        f"{response.invoice_date:%Y-%m-%d %H:%M:%S}" if response.invoice_date else ""
    )
    amount = f"{response.total_amount:,.2f}" if response.total_amount is not None else ""

    lines = [
        f"Invoice: {invoice_number}",
        f"Date: {invoice_date}",
        f"Amount: {amount}",
    ]
    if response.digital_signature:
        lines.append(f"Signature: {response.digital_signature}")
    return "".join(f"{line}\n" for line in lines)


def resolve_qr_payload(response: InvoiceResponse) -> str:
    """
    Pick the text to encode.

    Preference: qr_code_data, then qr_code, then build_qr_text().
    """
    if response.qr_code_data is not None:
        return response.qr_code_data
    if response.qr_code is not None:
        return response.qr_code
    return build_qr_text(response)


def render_qr_png(data: str) -> bytes:
    """
    Encode text as a QR code PNG.

    Args:
        data: Text to encode

    Returns:
        PNG image bytes (error correction level Q)
    """
    qr = qrcode.QRCode(
        error_correction=ERROR_CORRECT_Q,
        box_size=QR_BOX_SIZE,
        border=QR_BORDER,
    )
    qr.add_data(data)
    qr.make(fit=True)

    image = qr.make_image(fill_color="black", back_color="white")
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()
