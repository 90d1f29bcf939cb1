"""
Validation Layer.

Post-calculation checks on a receipt *before* it is rendered.  None of
these checks fail the receipt; they produce warnings that are logged and
shown alongside the receipt so a clerk can fix the sheet.

Checks performed
----------------
1. **Identity** — the milkat number should be present.
2. **Coerced cells** — tax cells that were not numbers and counted as 0.
3. **Negative amounts** — a negative tax amount is almost always a typo.
4. **Totals** — grand total must equal current + previous and the sum of
   the row totals.
"""

from __future__ import annotations

import math
from typing import Mapping

from tax_receipt.logging_setup import get_logger
from tax_receipt.schema import TaxTotals

logger = get_logger("validator")

# Float tolerance for the totals invariant
_TOTAL_TOLERANCE = 1e-6


class ValidationReport:
    """Accumulates warnings during a validation pass."""

    def __init__(self) -> None:
        self.warnings: list[str] = []

    @property
    def is_clean(self) -> bool:
        return len(self.warnings) == 0

    def add_warning(self, msg: str) -> None:
        self.warnings.append(msg)
        logger.warning("Validation WARNING: %s", msg)


class ReceiptValidator:
    """Validates populated receipt fields and calculated totals."""

    def validate(
        self, fields: Mapping[str, str], totals: TaxTotals
    ) -> ValidationReport:
        """Run all checks and return a ``ValidationReport``."""
        report = ValidationReport()
        self._check_identity(fields, report)
        self._check_coerced(totals, report)
        self._check_negative(totals, report)
        self._check_totals(totals, report)
        return report

    # ------------------------------------------------------------------ #
    # Individual checks
    # ------------------------------------------------------------------ #

    def _check_identity(
        self, fields: Mapping[str, str], report: ValidationReport
    ) -> None:
        if not str(fields.get("milkat_number", "")).strip():
            report.add_warning("Milkat number is empty")

    def _check_coerced(self, totals: TaxTotals, report: ValidationReport) -> None:
        for w in totals.warnings:
            report.add_warning(f"Treated as 0 — {w}")

    def _check_negative(self, totals: TaxTotals, report: ValidationReport) -> None:
        for line in totals.lines:
            if line.current < 0:
                report.add_warning(
                    f"'{line.field.value}' has a negative amount: {line.current}"
                )
            if line.previous < 0:
                report.add_warning(
                    f"'{line.field.prev_year_key}' has a negative amount: {line.previous}"
                )

    def _check_totals(self, totals: TaxTotals, report: ValidationReport) -> None:
        row_sum = sum(line.total for line in totals.lines)
        if not math.isclose(
            totals.grand_total, row_sum, rel_tol=0.0, abs_tol=_TOTAL_TOLERANCE
        ):
            report.add_warning(
                f"Grand total {totals.grand_total:.2f} differs from the sum of "
                f"row totals {row_sum:.2f}"
            )
