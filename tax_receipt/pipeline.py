"""
Receipt Pipeline.

The central entry point that wires together every layer:

    m_id  →  parse record id  →  row source (gviz / workbook)
          →  (optional) column resolver  →  field population
          →  tax calculator  →  validator  →  words + UPI payment  →  Receipt

Usage
-----
>>> from tax_receipt.pipeline import ReceiptPipeline
>>> from tax_receipt.config import ReceiptConfig
>>>
>>> pipe = ReceiptPipeline(ReceiptConfig())
>>> receipt = pipe.build_receipt("12")
>>> print(receipt.totals.grand_total)
"""

from __future__ import annotations

import re
from typing import Any, Dict, Optional, Protocol

from tax_receipt.calculator import TaxCalculator
from tax_receipt.column_resolver import ColumnResolver
from tax_receipt.config import ReceiptConfig
from tax_receipt.errors import InvalidRecordIdError, MissingRecordIdError
from tax_receipt.logging_setup import configure_logging, get_logger
from tax_receipt.normalizer import ValueNormalizer
from tax_receipt.schema import (
    ADDRESS_DETAIL_COLUMN,
    CASH_PAYMENT_TYPE,
    HEADER_MAP,
    Receipt,
    SheetRow,
)
from tax_receipt.sheet_client import GvizSheetClient
from tax_receipt.upi import build_payment_request
from tax_receipt.validator import ReceiptValidator
from tax_receipt.words import amount_in_words
from tax_receipt.workbook_source import WorkbookSource

logger = get_logger("pipeline")

# Leading ASCII integer, read the way browsers read ``parseInt(m_id, 10)``
_RECORD_ID_RE = re.compile(r"^\s*([+-]?[0-9]+)")


class RowSource(Protocol):
    def fetch_row(self, record_id: int) -> SheetRow: ...


def parse_record_id(raw: Optional[str]) -> int:
    """Validate the ``m_id`` query value and return the record number.

    Raises
    ------
    MissingRecordIdError
        If *raw* is absent or blank.
    InvalidRecordIdError
        If *raw* does not start with an integer, or the integer is negative.
    """
    if raw is None or not str(raw).strip():
        raise MissingRecordIdError()

    m = _RECORD_ID_RE.match(str(raw))
    if not m:
        raise InvalidRecordIdError("Invalid Record ID. It must be a number.")

    record_id = int(m.group(1))
    if record_id < 0:
        raise InvalidRecordIdError("Invalid Record ID. It must not be negative.")
    return record_id


class ReceiptPipeline:
    """Builds a ``Receipt`` for one record id.

    Parameters
    ----------
    config:
        All tuneable knobs.  Defaults point at the deployed sheet.
    source:
        Row source override.  When omitted, a ``WorkbookSource`` is used if
        ``config.workbook_path`` is set, else a ``GvizSheetClient``.
    with_qr:
        When False the payment link is built but no QR image is rendered.
    """

    def __init__(
        self,
        config: Optional[ReceiptConfig] = None,
        source: Optional[RowSource] = None,
        with_qr: bool = True,
    ) -> None:
        self._config = config or ReceiptConfig()

        # Bootstrap logging before anything else
        configure_logging(level=self._config.log_level, log_file=self._config.log_file)

        if source is not None:
            self._source = source
        elif self._config.workbook_path:
            self._source = WorkbookSource(self._config.workbook_path, self._config.sheet)
        else:
            self._source = GvizSheetClient(self._config.sheet)

        self._normalizer = ValueNormalizer()
        self._resolver = ColumnResolver(config=self._config.matching)
        self._calculator = TaxCalculator(normalizer=self._normalizer)
        self._validator = ReceiptValidator()
        self._with_qr = with_qr

        logger.info(
            "Pipeline initialised — source=%s, resolve_by_header=%s",
            type(self._source).__name__,
            self._config.resolve_columns_by_header,
        )

    @property
    def config(self) -> ReceiptConfig:
        return self._config

    # ------------------------------------------------------------------ #
    # Entry points
    # ------------------------------------------------------------------ #

    def build_receipt(self, raw_record_id: Optional[str]) -> Receipt:
        """Validate *raw_record_id*, fetch its row and build the receipt.

        Nothing is fetched when the id is missing or malformed.
        """
        record_id = parse_record_id(raw_record_id)
        row = self._source.fetch_row(record_id)
        return self.build_from_row(row)

    def build_from_row(self, row: SheetRow) -> Receipt:
        """Build a receipt from an already-fetched row."""
        column_map = self._column_map(row)
        warnings: list[str] = []

        raw_values: Dict[str, Any] = {}
        for name, idx in column_map.items():
            cell = row.cell(idx)
            if cell is not None:
                raw_values[name] = cell

        fields = self._populate_fields(row, raw_values)

        totals = self._calculator.calculate(raw_values)
        report = self._validator.validate(fields, totals)
        warnings.extend(report.warnings)

        grand_total = totals.grand_total
        payment = build_payment_request(
            self._config.payee,
            grand_total,
            fields.get("milkat_number", ""),
            with_qr=self._with_qr,
        )

        municipality = self._config.municipality
        receipt = Receipt(
            record_id=row.record_id,
            fields=fields,
            village=municipality.village,
            taluka=municipality.taluka,
            district=municipality.district,
            totals=totals,
            total_in_words=amount_in_words(max(grand_total, 0.0)),
            payment_type=CASH_PAYMENT_TYPE if raw_values.get("receipt_number") else "",
            payment=payment,
            warnings=warnings,
        )

        logger.info(
            "Receipt built — record=%d, milkat=%r, grand_total=%.2f, warnings=%d",
            receipt.record_id,
            receipt.milkat_number,
            grand_total,
            len(warnings),
        )
        return receipt

    # ------------------------------------------------------------------ #
    # Steps
    # ------------------------------------------------------------------ #

    def _column_map(self, row: SheetRow) -> Dict[str, int]:
        if not (self._config.resolve_columns_by_header and row.headers):
            return dict(HEADER_MAP)
        resolution = self._resolver.resolve(row.headers)
        if resolution.relocated:
            logger.info("Columns relocated by header: %s", resolution.relocated)
        return resolution.column_map

    def _populate_fields(
        self, row: SheetRow, raw_values: Dict[str, Any]
    ) -> Dict[str, str]:
        fields = {
            name: self._normalizer.format_cell(value)
            for name, value in raw_values.items()
        }

        if "address" in fields:
            detail = self._normalizer.format_cell(row.cell(ADDRESS_DETAIL_COLUMN))
            if detail:
                fields["address"] = f"{fields['address']} ({detail})"

        return fields
