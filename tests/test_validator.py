"""
Unit tests for the ReceiptValidator.
"""

from __future__ import annotations

from typing import Any

import pytest

from tax_receipt.calculator import TaxCalculator
from tax_receipt.schema import TaxField, TaxLine, TaxTotals
from tax_receipt.validator import ReceiptValidator


@pytest.fixture
def validator() -> ReceiptValidator:
    return ReceiptValidator()


def _totals(**values: Any) -> TaxTotals:
    return TaxCalculator().calculate(values)


# ======================================================================
# Clean receipts
# ======================================================================

class TestClean:
    def test_no_warnings(self, validator: ReceiptValidator) -> None:
        report = validator.validate(
            {"milkat_number": "101"}, _totals(houseTax=100, houseTaxPrevYear=50)
        )
        assert report.is_clean


# ======================================================================
# Individual checks
# ======================================================================

class TestChecks:
    def test_missing_milkat_number(self, validator: ReceiptValidator) -> None:
        report = validator.validate({}, _totals(houseTax=100))
        assert any("Milkat number" in w for w in report.warnings)

    def test_blank_milkat_number(self, validator: ReceiptValidator) -> None:
        report = validator.validate({"milkat_number": "  "}, _totals())
        assert not report.is_clean

    def test_coerced_cell_reported(self, validator: ReceiptValidator) -> None:
        report = validator.validate({"milkat_number": "1"}, _totals(lightTax="abc"))
        assert any("lightTax" in w and "Treated as 0" in w for w in report.warnings)

    def test_negative_current(self, validator: ReceiptValidator) -> None:
        report = validator.validate({"milkat_number": "1"}, _totals(cleaningTax=-30))
        assert any("cleaningTax" in w and "negative" in w for w in report.warnings)

    def test_negative_previous(self, validator: ReceiptValidator) -> None:
        report = validator.validate(
            {"milkat_number": "1"}, _totals(talukaTaxPrevYear="(25)")
        )
        assert any("talukaTaxPrevYear" in w for w in report.warnings)

    def test_totals_consistent_for_calculated_lines(
        self, validator: ReceiptValidator
    ) -> None:
        totals = TaxTotals(lines=[
            TaxLine(field=TaxField.HOUSE, current=0.1, previous=0.2),
            TaxLine(field=TaxField.LIGHT, current=0.3, previous=0.4),
        ])
        report = validator.validate({"milkat_number": "1"}, totals)
        assert not any("Grand total" in w for w in report.warnings)
