"""
Tax Calculator.

Sums the receipt's tax categories into per-category row totals and the
current-year, previous-year and grand totals.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from tax_receipt.logging_setup import get_logger
from tax_receipt.normalizer import ValueNormalizer
from tax_receipt.schema import TaxField, TaxLine, TaxTotals

logger = get_logger("calculator")


class TaxCalculator:
    """Calculate receipt totals from populated field values.

    Parameters
    ----------
    normalizer:
        Used to read each amount; a fresh one is created if omitted.
    """

    def __init__(self, normalizer: Optional[ValueNormalizer] = None) -> None:
        self._normalizer = normalizer or ValueNormalizer()

    def calculate(self, values: Mapping[str, Any]) -> TaxTotals:
        """Build a ``TaxTotals`` from ``{field_name: raw_value}``.

        Every ``TaxField`` and its previous-year counterpart is looked up;
        absent or unreadable amounts count as 0.
        """
        totals = TaxTotals()

        for tax_field in TaxField:
            current = self._amount(values, tax_field.value, totals.warnings)
            previous = self._amount(values, tax_field.prev_year_key, totals.warnings)
            totals.lines.append(
                TaxLine(field=tax_field, current=current, previous=previous)
            )

        logger.info(
            "Totals — current=%.2f, previous=%.2f, grand=%.2f",
            totals.current_total,
            totals.previous_total,
            totals.grand_total,
        )
        return totals

    def _amount(
        self, values: Mapping[str, Any], key: str, warnings: list[str]
    ) -> float:
        value, value_warnings = self._normalizer.normalize_value(values.get(key))
        for w in value_warnings:
            warnings.append(f"'{key}': {w}")
        return value
