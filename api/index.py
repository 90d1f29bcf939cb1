"""Serverless entry point: exposes the receipt Flask app as a WSGI callable."""

import sys
from pathlib import Path

# The receipt app and the tax_receipt package live one level up
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app import app  # noqa: E402

__all__ = ["app"]
