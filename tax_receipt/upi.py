"""
UPI payment link and QR code generation.

The receipt carries a QR code that opens the payer's UPI app with the payee,
amount and a note already filled in::

    upi://pay?pa=<vpa>&pn=<name>&am=<amount>&cu=INR&tn=<note>
"""

from __future__ import annotations

import base64
from io import BytesIO
from typing import Any, Optional
from urllib.parse import quote

import qrcode
from qrcode.constants import ERROR_CORRECT_M

from tax_receipt.config import PayeeConfig
from tax_receipt.logging_setup import get_logger
from tax_receipt.schema import PaymentRequest, format_amount

logger = get_logger("upi")

# Characters JavaScript's encodeURIComponent leaves untouched
_URI_COMPONENT_SAFE = "-_.!~*'()"

QR_BORDER = 4


def encode_uri_component(text: str) -> str:
    return quote(text, safe=_URI_COMPONENT_SAFE)


def transaction_note(milkat_id: Any) -> str:
    return f"Property Tax for Milkat ID {milkat_id}"


def build_upi_link(payee: PayeeConfig, amount: float, milkat_id: Any) -> str:
    """Return the ``upi://pay`` deep link for *amount* rupees."""
    return (
        f"upi://pay?pa={payee.upi_id}"
        f"&pn={encode_uri_component(payee.payee_name)}"
        f"&am={format_amount(amount)}"
        f"&cu={payee.currency}"
        f"&tn={encode_uri_component(transaction_note(milkat_id))}"
    )


def render_qr_png(data: str, size_px: int = 300) -> bytes:
    """Render *data* as a black-on-white PNG roughly *size_px* wide."""
    qr = qrcode.QRCode(error_correction=ERROR_CORRECT_M, border=QR_BORDER)
    qr.add_data(data)
    qr.make(fit=True)

    # Pick the largest box size that keeps the image within size_px
    modules = qr.modules_count + 2 * QR_BORDER
    qr.box_size = max(1, size_px // modules)

    img = qr.make_image(fill_color="black", back_color="white")
    buf = BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def build_payment_request(
    payee: PayeeConfig,
    amount: float,
    milkat_id: Any,
    with_qr: bool = True,
) -> Optional[PaymentRequest]:
    """Build the payment link and QR code, or ``None`` when nothing is due."""
    if amount <= 0:
        logger.info("No payment due for milkat %r; QR code skipped", milkat_id)
        return None

    link = build_upi_link(payee, amount, milkat_id)
    logger.info("Generated UPI link: %s", link)

    qr_b64 = ""
    if with_qr:
        png = render_qr_png(link, payee.qr_size_px)
        qr_b64 = base64.b64encode(png).decode("ascii")

    return PaymentRequest(
        upi_link=link,
        amount=amount,
        milkat_id="" if milkat_id is None else str(milkat_id),
        qr_png_base64=qr_b64,
    )
