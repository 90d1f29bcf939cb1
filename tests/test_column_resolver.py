"""
Unit tests for header-aware column resolution.
"""

from __future__ import annotations

import pytest

from tax_receipt.column_resolver import ColumnResolver
from tax_receipt.config import MatchingConfig
from tax_receipt.schema import HEADER_MAP


@pytest.fixture
def resolver() -> ColumnResolver:
    return ColumnResolver(config=MatchingConfig(fuzzy_threshold=80.0))


def _headers(**placed: int) -> list[str]:
    """33 blank headers with the given labels placed at the given columns."""
    headers = [""] * 33
    for label, idx in placed.items():
        headers[idx] = label.replace("_", " ")
    return headers


# ======================================================================
# Static fallback
# ======================================================================

class TestStatic:
    def test_blank_headers_keep_static_map(self, resolver: ColumnResolver) -> None:
        resolution = resolver.resolve([""] * 33)
        assert resolution.column_map == HEADER_MAP
        assert resolution.relocated == {}
        assert set(resolution.methods.values()) == {"static"}

    def test_unrelated_headers_keep_static_map(self, resolver: ColumnResolver) -> None:
        resolution = resolver.resolve(["foo", "bar", "baz"])
        assert resolution.column_map == HEADER_MAP


# ======================================================================
# Synonym and fuzzy matching
# ======================================================================

class TestMatching:
    def test_synonym_confirms_static_column(self, resolver: ColumnResolver) -> None:
        resolution = resolver.resolve(_headers(House_Tax=19))
        assert resolution.column_map["houseTax"] == 19
        assert resolution.methods["houseTax"] == "synonym"
        assert resolution.relocated == {}

    def test_synonym_relocates_moved_column(self, resolver: ColumnResolver) -> None:
        resolution = resolver.resolve(_headers(Milkat_No=8))
        assert resolution.column_map["milkat_number"] == 8
        assert resolution.relocated == {"milkat_number": 8}

    def test_fuzzy_match_with_typo(self, resolver: ColumnResolver) -> None:
        resolution = resolver.resolve(_headers(Ownr_Name=3))
        assert resolution.column_map["owner_name"] == 3
        assert resolution.methods["owner_name"] == "fuzzy"

    def test_previous_year_not_confused_with_current(
        self, resolver: ColumnResolver
    ) -> None:
        resolution = resolver.resolve(
            _headers(House_Tax=19, House_Tax_Previous_Year=25)
        )
        assert resolution.column_map["houseTax"] == 19
        assert resolution.column_map["houseTaxPrevYear"] == 25

    def test_extra_labels(self) -> None:
        resolver = ColumnResolver(
            config=MatchingConfig(),
            extra_labels={"houseTax": ["ઘર વેરો"]},
        )
        headers = [""] * 33
        headers[10] = "ઘર વેરો"
        resolution = resolver.resolve(headers)
        assert resolution.column_map["houseTax"] == 10

    def test_extra_labels_unknown_field(self) -> None:
        with pytest.raises(ValueError):
            ColumnResolver(config=MatchingConfig(), extra_labels={"nope": ["x"]})


# ======================================================================
# Conflicts
# ======================================================================

class TestConflicts:
    def test_same_column_not_claimed_twice(self) -> None:
        resolver = ColumnResolver(
            config=MatchingConfig(),
            extra_labels={"lightTax": ["house tax"]},
        )
        resolution = resolver.resolve(_headers(House_Tax=19))
        assert resolution.column_map["houseTax"] == 19
        assert resolution.column_map["lightTax"] == HEADER_MAP["lightTax"]
        assert resolution.methods["lightTax"] == "static"
        assert any("matched both" in w for w in resolution.warnings)

    def test_fuzzy_skips_claimed_columns(self, resolver: ColumnResolver) -> None:
        resolution = resolver.resolve(
            _headers(House_Tax=19, House_Tax_Previous_Year=25)
        )
        moved = {n for n, m in resolution.methods.items() if m == "fuzzy"}
        assert moved == set()
        assert resolution.warnings == []
