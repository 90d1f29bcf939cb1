"""
Tax Receipt — Gram Panchayat Property Tax Receipt Renderer.

Fetches one milkat (property) row from a public Google Sheet, maps the
sheet's columns onto receipt fields, totals the current and previous-year
taxes, spells the amount due in Gujarati and attaches a UPI payment QR code.

Bad cells never abort a receipt: unreadable amounts count as 0 and are
reported as validation warnings.
"""

__version__ = "1.0.0"
__author__ = "Tax Receipt Team"

from tax_receipt.pipeline import ReceiptPipeline  # noqa: F401
