"""
Configuration module for the tax receipt renderer.

Sheet location, payee details, municipality names and matching thresholds
live here.  Nothing is hard-coded in business logic modules.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

DEFAULT_SHEET_ID = "1_bs5IQ0kDT_xVLwJdihe17yuyY_UfJRKCtwoGvO7T5Y"


@dataclass(frozen=True)
class SheetConfig:
    """Where receipt rows are read from."""

    sheet_id: str = DEFAULT_SHEET_ID

    # Sheet row = record id + row_offset.  The sheet carries two header rows
    # and spreadsheet rows are 1-based, so record 0 lives on row 3.
    row_offset: int = 3

    # Last column fetched for a row (gviz range is A<r>:<last_column><r>)
    last_column: str = "AZ"

    # Seconds before the single fetch attempt is abandoned
    timeout: float = 10.0

    base_url: str = "https://docs.google.com/spreadsheets/d"


@dataclass(frozen=True)
class PayeeConfig:
    """UPI payee printed into the payment QR code."""

    upi_id: str = "kiritporiya25-1@oksbi"
    payee_name: str = "Meghraj Gram Panchayat"
    currency: str = "INR"

    # Approximate edge length of the rendered QR image
    qr_size_px: int = 300


@dataclass(frozen=True)
class MunicipalityConfig:
    """Static names printed on every receipt."""

    village: str = "MEGHARAJ"
    taluka: str = "MEGHARAJ"
    district: str = "ARAVALLI"


@dataclass(frozen=True)
class MatchingConfig:
    """Controls header-label matching when columns are resolved by header."""

    # Fuzzy matching: minimum similarity score (0–100) to accept a match
    fuzzy_threshold: float = 80.0

    # If the two best headers are within this delta of each other the field
    # is treated as ambiguous and keeps its static column.
    fuzzy_ambiguity_delta: float = 5.0


@dataclass(frozen=True)
class ReceiptConfig:
    """Top-level configuration aggregating all sub-configs."""

    sheet: SheetConfig = field(default_factory=SheetConfig)
    payee: PayeeConfig = field(default_factory=PayeeConfig)
    municipality: MunicipalityConfig = field(default_factory=MunicipalityConfig)
    matching: MatchingConfig = field(default_factory=MatchingConfig)

    log_level: int = logging.INFO

    # When set, log records are also written to this file.
    log_file: Optional[Path] = None

    # When True, header labels (if the source provides them) may relocate
    # fields whose column moved in the sheet.
    resolve_columns_by_header: bool = False

    # When set, rows are read from this local workbook instead of Google.
    workbook_path: Optional[Path] = None
