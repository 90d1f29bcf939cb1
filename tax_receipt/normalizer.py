"""
Cell Normalization Layer.

Turns raw spreadsheet cells into values the receipt can use:

1. Tax amounts → ``float``.  Anything that cannot be read as a number
   becomes ``0.0``; a bad cell never aborts a receipt.
2. Display cells → ``str``.  gviz date literals are rendered as
   ``dd/mm/yyyy`` and whole floats lose their trailing ``.0``.
3. Header labels → lowercase, punctuation-free text for column matching.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from typing import Any, Tuple

from tax_receipt.logging_setup import get_logger

logger = get_logger("normalizer")


class ValueNormalizer:
    """Stateless cell normaliser.  All methods are pure functions."""

    # Currency symbols / prefixes to strip from values
    _CURRENCY_RE = re.compile(r"(₹|rs\.?|inr|\$)", re.IGNORECASE)

    # Parenthetical negative: ``(1234)`` → ``-1234``
    _PAREN_NEG_RE = re.compile(r"^\((.+)\)$")

    # gviz date / datetime literal: ``Date(2024,0,15)`` or ``Date(2024,0,15,10,30,0)``
    _GVIZ_DATE_RE = re.compile(r"^Date\((\d+),(\d+),(\d+)(?:,\d+)*\)$")

    # Characters to remove from labels (keep letters, digits, spaces)
    _PUNCT_RE = re.compile(r"[^\w\s]")

    # Collapse whitespace and underscores
    _MULTI_SPACE_RE = re.compile(r"[\s_]+")

    # ------------------------------------------------------------------ #
    # Amounts
    # ------------------------------------------------------------------ #

    def normalize_value(self, raw: Any) -> Tuple[float, list[str]]:
        """Parse a tax amount, falling back to ``0.0``.

        Handles:
        * Already-numeric inputs (int / float)
        * String numbers with commas: ``"1,23,456"``
        * Currency prefixes: ``"₹12000"``, ``"Rs. 500"``
        * Parenthetical negatives: ``"(5000)"``

        Returns
        -------
        tuple[float, list[str]]
            (parsed_value, list_of_warnings).  The value is ``0.0`` whenever
            parsing fails; the warnings say why.
        """
        warnings: list[str] = []

        if raw is None:
            return 0.0, warnings

        if isinstance(raw, bool):
            warnings.append(f"Unexpected boolean value: {raw!r}")
            return 0.0, warnings

        if isinstance(raw, (int, float)):
            value = float(raw)
            if math.isnan(value) or math.isinf(value):
                warnings.append(f"Non-finite value treated as 0: {raw!r}")
                return 0.0, warnings
            return value, warnings

        if not isinstance(raw, str):
            warnings.append(f"Unexpected value type: {type(raw).__name__}")
            return 0.0, warnings

        text = raw.strip()
        if not text:
            return 0.0, warnings

        text = self._CURRENCY_RE.sub("", text).strip()

        m = self._PAREN_NEG_RE.match(text)
        if m:
            text = "-" + m.group(1).strip()

        # Indian and Western thousands separators alike
        text = text.replace(",", "").replace(" ", "")

        try:
            value = float(text)
        except ValueError:
            warnings.append(f"Cannot parse numeric value from: {raw!r}")
            return 0.0, warnings

        if math.isnan(value) or math.isinf(value):
            warnings.append(f"Non-finite value treated as 0: {raw!r}")
            return 0.0, warnings

        logger.debug("normalize_value: %r → %s", raw, value)
        return value, warnings

    # ------------------------------------------------------------------ #
    # Display cells
    # ------------------------------------------------------------------ #

    def format_cell(self, raw: Any) -> str:
        """Return the text printed on the receipt for a cell."""
        if raw is None:
            return ""
        if isinstance(raw, datetime):
            return raw.strftime("%d/%m/%Y")
        if isinstance(raw, date):
            return raw.strftime("%d/%m/%Y")
        if isinstance(raw, float) and raw.is_integer():
            return str(int(raw))
        if isinstance(raw, str):
            m = self._GVIZ_DATE_RE.match(raw.strip())
            if m:
                year, month, day = (int(g) for g in m.groups())
                # gviz months are 0-based
                return f"{day:02d}/{month + 1:02d}/{year}"
            return raw
        return str(raw)

    # ------------------------------------------------------------------ #
    # Header labels
    # ------------------------------------------------------------------ #

    def normalize_label(self, raw: Any) -> str:
        """Return the comparable form of a header label."""
        if raw is None:
            return ""
        text = str(raw).strip().lower()
        text = self._PUNCT_RE.sub(" ", text)
        text = self._MULTI_SPACE_RE.sub(" ", text).strip()
        return text


_DEFAULT = ValueNormalizer()


def safe_number(raw: Any) -> float:
    """Parse a tax amount; missing or non-numeric cells become ``0.0``."""
    value, _ = _DEFAULT.normalize_value(raw)
    return value
