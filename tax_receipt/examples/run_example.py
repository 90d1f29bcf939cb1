#!/usr/bin/env python3
"""
Example: Tax Receipt Pipeline Demo.

Builds a receipt from an in-memory sample row (no network) and prints the
full JSON, then shows how bad cells surface as warnings.

Run from the project root:
    python -m tax_receipt.examples.run_example
or:
    python tax_receipt/examples/run_example.py
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

# Ensure the project root is on sys.path when run as a script
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from tax_receipt.config import ReceiptConfig
from tax_receipt.pipeline import ReceiptPipeline
from tax_receipt.schema import HEADER_MAP, SheetRow


# ======================================================================
# Helper
# ======================================================================

def print_section(title: str) -> None:
    width = 72
    print("\n" + "=" * width)
    print(f"  {title}")
    print("=" * width)


def sample_row(record_id: int, **overrides) -> SheetRow:  # noqa: ANN003
    """A sheet row with plausible values in every mapped column."""
    values = [""] * 33
    sample = {
        "name": "મેઘરજ",
        "valuationYear": "2024-25",
        "owner_name": "પટેલ રમેશભાઈ",
        "address": "મુખ્ય બજાર",
        "description": "પાકું મકાન",
        "milkat_number": 101,
        "old_milkat_number": 87,
        "receipt_number": "",
        "receipt_date": "Date(2024,3,15)",
        "houseTax": 250,
        "saPaTax": 120,
        "specialWaterTax": 0,
        "lightTax": 50,
        "cleaningTax": 30,
        "talukaTax": 25,
        "houseTaxPrevYear": 250,
        "saPaTaxPrevYear": "1,20",
        "lightTaxPrevYear": "",
    }
    sample.update(overrides)
    for name, value in sample.items():
        values[HEADER_MAP[name]] = value
    values[14] = "વોર્ડ 3"
    return SheetRow(record_id=record_id, values=values)


# ======================================================================
# Demo
# ======================================================================

def main() -> None:
    pipeline = ReceiptPipeline(
        config=ReceiptConfig(log_level=logging.WARNING),
        source=None,
        with_qr=False,
    )

    print_section("1. Receipt for a clean row")
    receipt = pipeline.build_from_row(sample_row(7))
    print(json.dumps(receipt.to_dict(), indent=2, ensure_ascii=False))

    print_section("2. Bad cells are counted as 0 and reported")
    receipt = pipeline.build_from_row(
        sample_row(8, houseTax="N/A", cleaningTax="-30", milkat_number="")
    )
    print(f"  Grand total : {receipt.totals.grand_total:.2f}")
    print(f"  In words    : {receipt.total_in_words}")
    for w in receipt.warnings:
        print(f"  ⚠ {w}")

    print_section("3. Nothing due")
    receipt = pipeline.build_from_row(SheetRow(record_id=9, values=["", "મેઘરજ"]))
    print(f"  In words    : {receipt.total_in_words}")
    print(f"  Payment     : {receipt.payment}")


if __name__ == "__main__":
    main()
