"""
Local Workbook Row Source.

Reads receipt rows from an exported copy of the sheet (.xlsx) so receipts
can be rendered without network access.  Rows are addressed exactly like
the gviz source: record id + ``row_offset``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union

import openpyxl

from tax_receipt.config import SheetConfig
from tax_receipt.errors import RecordNotFoundError, SheetFetchError
from tax_receipt.logging_setup import get_logger
from tax_receipt.schema import SheetRow
from tax_receipt.sheet_client import sheet_row_number

logger = get_logger("workbook_source")


def _cell_value(val: Any) -> Any:
    return "" if val is None else val


class WorkbookSource:
    """Row source backed by a local .xlsx file.

    Parameters
    ----------
    path:
        Workbook file.
    config:
        Row addressing (``row_offset``); the other sheet settings are unused.
    sheet_name:
        Worksheet to read; the active sheet when omitted.
    header_row:
        1-based row holding column labels, or ``None`` for no headers.
    """

    def __init__(
        self,
        path: Union[str, Path],
        config: Optional[SheetConfig] = None,
        sheet_name: Optional[str] = None,
        header_row: Optional[int] = 1,
    ) -> None:
        self._path = Path(path)
        self._config = config or SheetConfig()
        self._sheet_name = sheet_name
        self._header_row = header_row

    def fetch_row(self, record_id: int) -> SheetRow:
        row_number = sheet_row_number(record_id, self._config)
        logger.info("Reading row %d from %s", row_number, self._path)

        try:
            wb = openpyxl.load_workbook(self._path, read_only=True, data_only=True)
        except (OSError, ValueError, KeyError) as exc:
            raise SheetFetchError(f"Cannot open workbook {self._path}: {exc}") from exc

        try:
            if self._sheet_name:
                if self._sheet_name not in wb.sheetnames:
                    raise SheetFetchError(
                        f"Worksheet {self._sheet_name!r} not found in {self._path.name}"
                    )
                ws = wb[self._sheet_name]
            else:
                ws = wb.active

            values = self._read_row(ws, row_number)
            if not any(v != "" for v in values):
                raise RecordNotFoundError(record_id)

            headers = None
            if self._header_row:
                labels = [str(v) for v in self._read_row(ws, self._header_row)]
                headers = labels if any(labels) else None
        finally:
            wb.close()

        logger.info("Read record %d: %d cells", record_id, len(values))
        return SheetRow(record_id=record_id, values=values, headers=headers)

    @staticmethod
    def _read_row(ws: Any, row_number: int) -> list[Any]:
        for row in ws.iter_rows(min_row=row_number, max_row=row_number, values_only=True):
            values = [_cell_value(v) for v in row]
            # Drop trailing blanks so short rows read like gviz rows
            while values and values[-1] == "":
                values.pop()
            return values
        return []
