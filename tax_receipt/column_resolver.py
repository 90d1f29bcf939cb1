"""
Header-aware Column Resolution.

The receipt normally reads every field from the fixed column in
``HEADER_MAP``.  When the row source also supplies header labels, this
layer can confirm those columns or follow a field that moved:

1. **Synonym lookup** — the normalised header equals a known label for the
   field (confidence 100).
2. **Fuzzy match** — ``rapidfuzz`` token-sort similarity against the
   field's labels.  Matches below ``fuzzy_threshold`` are rejected; if the
   two best headers are within ``fuzzy_ambiguity_delta`` the field is
   left alone and a warning is logged.

Fields that cannot be resolved keep their static column.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from rapidfuzz import fuzz, process

from tax_receipt.config import MatchingConfig
from tax_receipt.logging_setup import get_logger
from tax_receipt.normalizer import ValueNormalizer
from tax_receipt.schema import HEADER_MAP

logger = get_logger("column_resolver")


# Known header labels per receipt field.  The first entry is the preferred
# label and is also the fuzzy-match query.
_BUILTIN_LABELS: Dict[str, List[str]] = {
    "name": ["name", "village name", "gram panchayat"],
    "valuationYear": ["valuation year", "assessment year", "year"],
    "owner_name": ["owner name", "owner", "occupier name", "property owner"],
    "address": ["address", "property address"],
    "description": ["description", "property description", "property type"],
    "milkat_number": ["milkat number", "milkat no", "milkat id", "property number"],
    "old_milkat_number": ["old milkat number", "old milkat no", "old property number"],
    "receipt_number": ["receipt number", "receipt no", "pavti number"],
    "receipt_date": ["receipt date", "payment date", "resolution date"],
    "houseTax": ["house tax", "property tax"],
    "saPaTax": ["sa pa tax", "general water tax", "water tax"],
    "specialWaterTax": ["special water tax"],
    "lightTax": ["light tax", "street light tax"],
    "cleaningTax": ["cleaning tax", "sanitation tax"],
    "talukaTax": ["taluka tax", "taluka panchayat tax"],
    "houseTaxPrevYear": ["house tax previous year", "house tax arrears"],
    "saPaTaxPrevYear": ["sa pa tax previous year", "water tax arrears"],
    "specialWaterTaxPrevYear": ["special water tax previous year", "special water tax arrears"],
    "lightTaxPrevYear": ["light tax previous year", "light tax arrears"],
    "cleaningTaxPrevYear": ["cleaning tax previous year", "cleaning tax arrears"],
    "talukaTaxPrevYear": ["taluka tax previous year", "taluka tax arrears"],
}


@dataclass
class ColumnResolution:
    """Outcome of resolving the column map against a header row."""

    column_map: Dict[str, int]
    methods: Dict[str, str] = field(default_factory=dict)
    warnings: List[str] = field(default_factory=list)

    @property
    def relocated(self) -> Dict[str, int]:
        """Fields whose column differs from the static map."""
        return {
            name: idx
            for name, idx in self.column_map.items()
            if HEADER_MAP.get(name) != idx
        }


class ColumnResolver:
    """Resolve receipt fields to column indices using header labels.

    Parameters
    ----------
    config:
        Fuzzy thresholds.
    extra_labels:
        Additional ``{field: [label, ...]}`` entries merged into the
        built-in label table.
    """

    def __init__(
        self,
        config: MatchingConfig,
        extra_labels: Optional[Dict[str, List[str]]] = None,
    ) -> None:
        self._config = config
        self._normalizer = ValueNormalizer()

        self._labels: Dict[str, List[str]] = {
            name: [self._normalizer.normalize_label(l) for l in labels]
            for name, labels in _BUILTIN_LABELS.items()
        }
        for name, labels in (extra_labels or {}).items():
            if name not in HEADER_MAP:
                raise ValueError(f"Unknown receipt field {name!r}")
            self._labels.setdefault(name, [])
            self._labels[name].extend(self._normalizer.normalize_label(l) for l in labels)

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def resolve(self, headers: Sequence[str]) -> ColumnResolution:
        """Return the column map for a row whose header labels are *headers*.

        Synonym hits are settled for every field first; fuzzy matching then
        only considers columns no other field has claimed.
        """
        norm_headers = [self._normalizer.normalize_label(h) for h in headers]
        resolution = ColumnResolution(column_map=dict(HEADER_MAP))
        claimed: Dict[int, str] = {}

        for name in HEADER_MAP:
            idx = self._synonym_hit(name, norm_headers)
            if idx is not None:
                self._claim(resolution, claimed, name, idx, "synonym")

        for name in HEADER_MAP:
            if name in resolution.methods:
                continue
            choices = {
                i: h for i, h in enumerate(norm_headers) if h and i not in claimed
            }
            idx = self._fuzzy_hit(name, choices, resolution.warnings)
            if idx is not None:
                self._claim(resolution, claimed, name, idx, "fuzzy")
            else:
                resolution.methods[name] = "static"

        return resolution

    # ------------------------------------------------------------------ #
    # Matching layers
    # ------------------------------------------------------------------ #

    def _claim(
        self,
        resolution: ColumnResolution,
        claimed: Dict[int, str],
        name: str,
        idx: int,
        method: str,
    ) -> None:
        static_idx = HEADER_MAP[name]
        if idx in claimed:
            msg = (
                f"Column {idx} matched both '{claimed[idx]}' and '{name}'; "
                f"'{name}' keeps static column {static_idx}"
            )
            resolution.warnings.append(msg)
            logger.warning(msg)
            resolution.methods[name] = "static"
            return

        claimed[idx] = name
        resolution.column_map[name] = idx
        resolution.methods[name] = method
        if idx != static_idx:
            logger.warning(
                "Field '%s' moved: column %d → %d (%s)", name, static_idx, idx, method
            )

    def _synonym_hit(self, name: str, norm_headers: List[str]) -> Optional[int]:
        labels = self._labels.get(name, [])
        hits = [i for i, h in enumerate(norm_headers) if h and h in labels]
        if not hits:
            return None
        # Prefer the static column when several headers match
        static_idx = HEADER_MAP[name]
        return static_idx if static_idx in hits else hits[0]

    def _fuzzy_hit(
        self, name: str, choices: Dict[int, str], warnings: List[str]
    ) -> Optional[int]:
        labels = self._labels.get(name, [])
        if not labels or not choices:
            return None

        results = process.extract(
            labels[0],
            choices,
            scorer=fuzz.token_sort_ratio,
            limit=2,
        )
        if not results:
            return None

        best_label, best_score, best_idx = results[0]
        if best_score < self._config.fuzzy_threshold:
            logger.debug(
                "Fuzzy best for '%s' is %r (%.1f) — below threshold %.1f",
                name,
                best_label,
                best_score,
                self._config.fuzzy_threshold,
            )
            return None

        if len(results) > 1:
            _, second_score, _ = results[1]
            if best_score - second_score <= self._config.fuzzy_ambiguity_delta:
                msg = (
                    f"Ambiguous header match for '{name}': "
                    f"{results[0][0]!r} ({best_score:.1f}) vs "
                    f"{results[1][0]!r} ({second_score:.1f})"
                )
                warnings.append(msg)
                logger.warning(msg)
                return None

        logger.info(
            "Fuzzy header match: '%s' → column %d %r (score=%.1f)",
            name,
            best_idx,
            best_label,
            best_score,
        )
        return best_idx
