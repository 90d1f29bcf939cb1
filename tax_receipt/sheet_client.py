"""
Google Sheets gviz Row Source.

Reads one row of a *public* Google Sheet through the Visualization
("gviz") query endpoint.  The endpoint answers with JSON wrapped in a
JavaScript callback::

    /*O_o*/
    google.visualization.Query.setResponse({...});

The wrapper is fixed, so it is stripped by length after checking that it is
really there.
"""

from __future__ import annotations

import json
from typing import Any, Optional

import requests

from tax_receipt.config import SheetConfig
from tax_receipt.errors import RecordNotFoundError, SheetFetchError, SheetFormatError
from tax_receipt.logging_setup import get_logger
from tax_receipt.schema import SheetRow

logger = get_logger("sheet_client")

GVIZ_PREFIX = "/*O_o*/\ngoogle.visualization.Query.setResponse("
GVIZ_SUFFIX = ");"


def sheet_row_number(record_id: int, config: SheetConfig) -> int:
    """Spreadsheet row (1-based) that holds *record_id*."""
    return record_id + config.row_offset


def build_gviz_url(config: SheetConfig, record_id: int) -> str:
    row = sheet_row_number(record_id, config)
    cell_range = f"A{row}:{config.last_column}{row}"
    return (
        f"{config.base_url}/{config.sheet_id}/gviz/tq"
        f"?tqx=out:json&range={cell_range}"
    )


def strip_gviz_wrapper(text: str) -> dict[str, Any]:
    """Remove the JSONP callback and parse the JSON payload.

    Raises
    ------
    SheetFormatError
        If the wrapper is missing or the payload is not valid JSON.
    """
    body = text.lstrip("\ufeff")
    if not body.startswith(GVIZ_PREFIX):
        raise SheetFormatError(
            "Unexpected response from Google Sheets: the sheet may not be public."
        )

    payload = body[len(GVIZ_PREFIX):].rstrip()
    if not payload.endswith(GVIZ_SUFFIX):
        raise SheetFormatError("Unexpected response from Google Sheets: truncated body.")
    payload = payload[: -len(GVIZ_SUFFIX)]

    try:
        data = json.loads(payload)
    except ValueError as exc:
        raise SheetFormatError(f"Malformed JSON from Google Sheets: {exc}") from exc

    if not isinstance(data, dict):
        raise SheetFormatError("Malformed JSON from Google Sheets: expected an object.")
    return data


def parse_gviz_row(data: dict[str, Any], record_id: int) -> SheetRow:
    """Turn a parsed gviz response into a ``SheetRow``."""
    if data.get("status") == "error":
        details = "; ".join(
            e.get("detailed_message") or e.get("message") or e.get("reason", "")
            for e in data.get("errors", [])
        )
        raise SheetFetchError(f"Google Sheets query failed: {details or 'unknown error'}")

    table = data.get("table") or {}
    rows = table.get("rows") or []
    if not rows:
        raise RecordNotFoundError(record_id)

    cells = rows[0].get("c") or []
    values = [cell.get("v") if cell else "" for cell in cells]
    # A present cell with a null value still reads as blank
    values = ["" if v is None else v for v in values]

    labels = [(col or {}).get("label", "") for col in table.get("cols", [])]
    headers: Optional[list[str]] = labels if any(labels) else None

    return SheetRow(record_id=record_id, values=values, headers=headers)


class GvizSheetClient:
    """Fetch single rows from a public Google Sheet.

    Parameters
    ----------
    config:
        Sheet id, row offset, column span and timeout.
    session:
        Optional ``requests.Session`` (or anything with a compatible
        ``get``); a module-level ``requests.get`` is used otherwise.
    """

    def __init__(
        self,
        config: SheetConfig,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._config = config
        self._session = session

    def fetch_row(self, record_id: int) -> SheetRow:
        """Fetch the row for *record_id*.  One attempt, no retry."""
        url = build_gviz_url(self._config, record_id)
        logger.info("Fetching from URL: %s", url)

        getter = self._session.get if self._session is not None else requests.get
        try:
            response = getter(url, timeout=self._config.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            raise SheetFetchError(f"Network response was not ok: {exc}") from exc

        row = parse_gviz_row(strip_gviz_wrapper(response.text), record_id)
        logger.info(
            "Fetched record %d: %d cells, headers=%s",
            record_id,
            len(row.values),
            row.headers is not None,
        )
        logger.debug("Fetched record: %r", row.values)
        return row
