"""
Unit tests for UPI link and QR generation.
"""

from __future__ import annotations

import base64
from urllib.parse import parse_qs, urlsplit

import pytest

from tax_receipt.config import PayeeConfig
from tax_receipt.upi import (
    build_payment_request,
    build_upi_link,
    encode_uri_component,
    render_qr_png,
    transaction_note,
)

PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


@pytest.fixture
def payee() -> PayeeConfig:
    return PayeeConfig(upi_id="panchayat@upi", payee_name="Meghraj Gram Panchayat")


# ======================================================================
# Link
# ======================================================================

class TestUpiLink:
    def test_exact_link(self, payee: PayeeConfig) -> None:
        link = build_upi_link(payee, 695.5, 101)
        assert link == (
            "upi://pay?pa=panchayat@upi"
            "&pn=Meghraj%20Gram%20Panchayat"
            "&am=695.50"
            "&cu=INR"
            "&tn=Property%20Tax%20for%20Milkat%20ID%20101"
        )

    def test_round_trips_through_query_parser(self, payee: PayeeConfig) -> None:
        link = build_upi_link(payee, 10, "A/12")
        query = parse_qs(urlsplit(link).query)
        assert query["pn"] == ["Meghraj Gram Panchayat"]
        assert query["tn"] == ["Property Tax for Milkat ID A/12"]
        assert query["am"] == ["10.00"]

    def test_encode_uri_component_matches_javascript(self) -> None:
        assert encode_uri_component("a b&c/d") == "a%20b%26c%2Fd"
        assert encode_uri_component("(x)!*'~-_.") == "(x)!*'~-_."

    def test_amount_rounds_half_up(self, payee: PayeeConfig) -> None:
        assert "&am=10.13&" in build_upi_link(payee, 10.125, 1)

    def test_transaction_note(self) -> None:
        assert transaction_note(7) == "Property Tax for Milkat ID 7"


# ======================================================================
# Payment request
# ======================================================================

class TestPaymentRequest:
    def test_nothing_due(self, payee: PayeeConfig) -> None:
        assert build_payment_request(payee, 0, "101") is None
        assert build_payment_request(payee, -5, "101") is None

    def test_without_qr(self, payee: PayeeConfig) -> None:
        req = build_payment_request(payee, 120, 101, with_qr=False)
        assert req is not None
        assert req.qr_png_base64 == ""
        assert req.milkat_id == "101"
        assert "am=120.00" in req.upi_link

    def test_with_qr_is_png(self, payee: PayeeConfig) -> None:
        req = build_payment_request(payee, 120, "101")
        assert req is not None
        assert base64.b64decode(req.qr_png_base64).startswith(PNG_MAGIC)
        assert req.qr_data_uri.startswith("data:image/png;base64,")

    def test_to_dict(self, payee: PayeeConfig) -> None:
        req = build_payment_request(payee, 99.999, "5", with_qr=False)
        d = req.to_dict()
        assert d["amount"] == 100.0
        assert d["milkat_id"] == "5"


class TestQrImage:
    def test_png_bytes(self) -> None:
        assert render_qr_png("upi://pay?pa=x@y").startswith(PNG_MAGIC)
