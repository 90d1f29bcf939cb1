"""
Exceptions raised while building a receipt.

Every error carries the HTTP status the web layer answers with, so the
Flask handlers only need to catch ``ReceiptError``.
"""

from __future__ import annotations


class ReceiptError(Exception):
    """Base class for all receipt failures."""

    status_code = 500


class MissingRecordIdError(ReceiptError):
    """No ``m_id`` was supplied."""

    status_code = 400

    def __init__(self, message: str = "Please provide a record ID in the URL!") -> None:
        super().__init__(message)


class InvalidRecordIdError(ReceiptError):
    """``m_id`` is present but is not a usable record number."""

    status_code = 400


class SheetFetchError(ReceiptError):
    """The row source could not be reached or answered with an error."""

    status_code = 502


class SheetFormatError(SheetFetchError):
    """The row source answered, but not in the expected format."""


class RecordNotFoundError(ReceiptError):
    """The row source has no data for the requested record."""

    status_code = 404

    def __init__(self, record_id: int) -> None:
        super().__init__(f"Record with ID '{record_id}' not found.")
        self.record_id = record_id
