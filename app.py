"""
Gram Panchayat Tax Receipt — web front end.

Serves the printable receipt page (``/?m_id=<record>``) and the same data
as JSON for other clients.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Tuple

from flask import Flask, render_template, request

from tax_receipt.config import (
    DEFAULT_SHEET_ID,
    MunicipalityConfig,
    PayeeConfig,
    ReceiptConfig,
    SheetConfig,
)
from tax_receipt.errors import MissingRecordIdError, ReceiptError
from tax_receipt.pipeline import ReceiptPipeline
from tax_receipt.schema import TAX_LABELS, Receipt, format_amount

# -------------------------------------------------------
# App Setup
# -------------------------------------------------------

app = Flask(__name__)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# -------------------------------------------------------
# Pipeline Setup
# -------------------------------------------------------

_workbook = os.environ.get("TAX_RECEIPT_WORKBOOK")
_log_file = os.environ.get("TAX_RECEIPT_LOG_FILE")

pipeline = ReceiptPipeline(
    config=ReceiptConfig(
        sheet=SheetConfig(
            sheet_id=os.environ.get("TAX_RECEIPT_SHEET_ID", DEFAULT_SHEET_ID),
            timeout=10.0,
        ),
        payee=PayeeConfig(),
        municipality=MunicipalityConfig(),
        log_level=logging.INFO,
        workbook_path=Path(_workbook) if _workbook else None,
        log_file=Path(_log_file) if _log_file else None,
    )
)

# -------------------------------------------------------
# Helpers
# -------------------------------------------------------

def receipt_context(receipt: Receipt) -> Dict[str, Any]:
    """Template variables for the receipt page."""
    totals = receipt.totals
    return {
        "receipt": receipt,
        "fields": receipt.fields,
        "lines": [
            {
                "key": line.field.value,
                "label": TAX_LABELS[line.field],
                "current": format_amount(line.current),
                "previous": format_amount(line.previous),
                "total": format_amount(line.total),
            }
            for line in totals.lines
        ],
        "current_total": format_amount(totals.current_total),
        "previous_total": format_amount(totals.previous_total),
        "grand_total": format_amount(totals.grand_total),
    }


def error_response(m_id: Any, exc: ReceiptError) -> Tuple[str, int]:
    """Render the error page that replaces the receipt."""
    if isinstance(exc, MissingRecordIdError):
        return render_template("missing_id.html", alert_message=str(exc)), exc.status_code

    return (
        render_template(
            "error.html",
            m_id=m_id,
            message=str(exc),
            alert_message=f"Error: {exc}",
        ),
        exc.status_code,
    )


# -------------------------------------------------------
# Web Interface Routes
# -------------------------------------------------------

@app.route("/")
def receipt_page():
    """Printable receipt for ``?m_id=<record>``."""
    m_id = request.args.get("m_id")

    try:
        receipt = pipeline.build_receipt(m_id)
    except ReceiptError as e:
        logger.exception("Failed to generate receipt for m_id=%r", m_id)
        return error_response(m_id, e)
    except Exception as e:
        logger.exception("Unexpected error generating receipt for m_id=%r", m_id)
        return error_response(m_id, ReceiptError(str(e)))

    return render_template("receipt.html", **receipt_context(receipt))


# -------------------------------------------------------
# API
# -------------------------------------------------------

@app.route("/api/receipt", methods=["GET"])
def api_receipt():
    m_id = request.args.get("m_id")

    try:
        receipt = pipeline.build_receipt(m_id)
    except ReceiptError as e:
        logger.exception("API Error for m_id=%r", m_id)
        return {"success": False, "error": str(e), "m_id": m_id}, e.status_code
    except Exception as e:
        logger.exception("Unexpected API Error for m_id=%r", m_id)
        return {"success": False, "error": str(e), "m_id": m_id}, 500

    return {"success": True, "receipt": receipt.to_dict()}, 200


@app.route("/api/health", methods=["GET"])
def api_health():
    """Health check endpoint."""
    return {
        "status": "online",
        "version": "1.0.0",
        "api": "/api/receipt",
        "methods": ["GET"],
    }, 200


# -------------------------------------------------------
# Main
# -------------------------------------------------------

if __name__ == "__main__":
    print("=" * 60)
    print("Tax Receipt Server Running")
    print("http://localhost:5000/?m_id=1")
    print("=" * 60)

    app.run(host="0.0.0.0", port=5000, debug=True)

# Export for Vercel
handler = app
