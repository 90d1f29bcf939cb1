"""
Receipt schema and data models.

Defines the static column map (which spreadsheet column feeds which receipt
field), the tax categories printed on the receipt, and the typed data
structures carried through the pipeline.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Optional


# ---------------------------------------------------------------------------
# Column map
# ---------------------------------------------------------------------------

# Receipt field → 0-based column index in the sheet row.
# Update the indices here if the sheet's columns move.
HEADER_MAP: dict[str, int] = {
    # Top section
    "name": 1,
    "valuationYear": 2,
    "owner_name": 3,
    "address": 4,
    "description": 15,
    "milkat_number": 5,
    "old_milkat_number": 6,
    "receipt_number": 31,
    "receipt_date": 32,

    # Current year taxes
    "houseTax": 19,
    "saPaTax": 20,
    "specialWaterTax": 21,
    "lightTax": 22,
    "cleaningTax": 23,
    "talukaTax": 24,

    # Previous year taxes
    "houseTaxPrevYear": 25,
    "saPaTaxPrevYear": 26,
    "specialWaterTaxPrevYear": 27,
    "lightTaxPrevYear": 28,
    "cleaningTaxPrevYear": 29,
    "talukaTaxPrevYear": 30,
}

# Locality shown in brackets after the address
ADDRESS_DETAIL_COLUMN = 14

PREV_YEAR_SUFFIX = "PrevYear"

# Printed in the payment-type box when a receipt number exists ("cash")
CASH_PAYMENT_TYPE = "રોકડ"

_CENTS = Decimal("0.01")


class TaxField(str, Enum):
    """
    Every tax category printed on the receipt, in receipt order.

    Categories without a column in ``HEADER_MAP`` are still printed and
    always contribute 0.
    """

    HOUSE = "houseTax"
    SA_PA = "saPaTax"
    SPECIAL_WATER = "specialWaterTax"
    CLEANING = "cleaningTax"
    SEWER = "sewerTax"
    LIGHT = "lightTax"
    ADVANCE = "advance"
    NOTICE_FEE = "noticeFee"
    OTHER = "otherTax"
    TALUKA = "talukaTax"
    BUSINESS = "businessTax"
    BUILDING = "buildingTax"
    EDUCATION = "educationTax"
    LAND = "landTax"

    @property
    def prev_year_key(self) -> str:
        return f"{self.value}{PREV_YEAR_SUFFIX}"


# Row captions printed on the receipt
TAX_LABELS: dict[TaxField, str] = {
    TaxField.HOUSE: "ઘર વેરો",
    TaxField.SA_PA: "સામાન્ય પાણી વેરો",
    TaxField.SPECIAL_WATER: "ખાસ પાણી વેરો",
    TaxField.CLEANING: "સફાઈ વેરો",
    TaxField.SEWER: "ગટર વેરો",
    TaxField.LIGHT: "દીવાબત્તી વેરો",
    TaxField.ADVANCE: "એડવાન્સ",
    TaxField.NOTICE_FEE: "નોટિસ ફી",
    TaxField.OTHER: "અન્ય વેરો",
    TaxField.TALUKA: "તાલુકા પંચાયત વેરો",
    TaxField.BUSINESS: "વ્યવસાય વેરો",
    TaxField.BUILDING: "બાંધકામ વેરો",
    TaxField.EDUCATION: "શિક્ષણ ઉપકર",
    TaxField.LAND: "જમીન મહેસૂલ",
}


# ---------------------------------------------------------------------------
# Pipeline Data Models
# ---------------------------------------------------------------------------

@dataclass
class SheetRow:
    """One fetched spreadsheet row.  Missing cells are ``""``."""

    record_id: int
    values: list[Any]
    headers: Optional[list[str]] = None

    def cell(self, index: int) -> Any:
        """Return the cell at *index*, or ``None`` if the row is shorter."""
        if 0 <= index < len(self.values):
            return self.values[index]
        return None


@dataclass
class TaxLine:
    """Current and previous-year amounts for one tax category."""

    field: TaxField
    current: float = 0.0
    previous: float = 0.0

    @property
    def total(self) -> float:
        return self.current + self.previous

    def to_dict(self) -> dict[str, Any]:
        return {
            "field": self.field.value,
            "current": self.current,
            "previous": self.previous,
            "total": self.total,
        }


@dataclass
class TaxTotals:
    """All tax lines plus the three receipt totals."""

    lines: list[TaxLine] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def current_total(self) -> float:
        return sum(line.current for line in self.lines)

    @property
    def previous_total(self) -> float:
        return sum(line.previous for line in self.lines)

    @property
    def grand_total(self) -> float:
        return self.current_total + self.previous_total

    def line(self, tax_field: TaxField) -> Optional[TaxLine]:
        for line in self.lines:
            if line.field is tax_field:
                return line
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "lines": [line.to_dict() for line in self.lines],
            "current_total": self.current_total,
            "previous_total": self.previous_total,
            "grand_total": self.grand_total,
        }


@dataclass
class PaymentRequest:
    """A UPI payment link and its QR code for the amount due."""

    upi_link: str
    amount: float
    milkat_id: str
    qr_png_base64: str = ""

    @property
    def qr_data_uri(self) -> str:
        return f"data:image/png;base64,{self.qr_png_base64}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "upi_link": self.upi_link,
            "amount": round(self.amount, 2),
            "milkat_id": self.milkat_id,
            "qr_png_base64": self.qr_png_base64,
        }


@dataclass
class Receipt:
    """Everything the receipt template needs for one milkat."""

    record_id: int
    fields: dict[str, str]
    village: str
    taluka: str
    district: str
    totals: TaxTotals
    total_in_words: str
    payment_type: str = ""
    payment: Optional[PaymentRequest] = None
    warnings: list[str] = field(default_factory=list)

    @property
    def milkat_number(self) -> str:
        return self.fields.get("milkat_number", "")

    def to_dict(self) -> dict[str, Any]:
        return {
            "record_id": self.record_id,
            "fields": dict(self.fields),
            "village": self.village,
            "taluka": self.taluka,
            "district": self.district,
            "payment_type": self.payment_type,
            "totals": self.totals.to_dict(),
            "total_in_words": self.total_in_words,
            "payment": self.payment.to_dict() if self.payment else None,
            "warnings": list(self.warnings),
        }


def format_amount(value: float) -> str:
    """Two-decimal display form used for every amount on the receipt.

    Ties round away from zero, as JavaScript's ``toFixed(2)`` does, on the
    exact binary value of *value* (so ``10.125`` gives ``"10.13"`` while
    ``1.005``, stored just below the tie, gives ``"1.00"``).
    """
    return str(Decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP))
