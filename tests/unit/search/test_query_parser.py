"""
Tests for SearchQueryParser and LIKE escaping.
"""
import pytest

from samla.search.search_engine import (
    FilterKind,
    SearchFilter,
    SearchQueryParser,
    SortKey,
    escape_like,
)


class TestParse:

    def test_prefix_with_extra_spaces(self):
        assert SearchQueryParser.parse("@Tag  minifig") == SearchFilter(FilterKind.TAG, "minifig")

    def test_plain_text(self):
        assert SearchQueryParser.parse("minifig") == SearchFilter(FilterKind.NONE, "minifig")

    @pytest.mark.parametrize(
        "query, kind",
        [
            ("@box b1", FilterKind.BOX),
            ("@produkt tower", FilterKind.PRODUCT),
            ("@product tower", FilterKind.PRODUCT),
            ("@hersteller acme", FilterKind.MANUFACTURER),
            ("@tag castle", FilterKind.TAG),
            ("@ort cellar", FilterKind.LOCATION),
            ("@STANDORT cellar", FilterKind.LOCATION),
        ],
    )
    def test_all_prefixes(self, query, kind):
        parsed = SearchQueryParser.parse(query)
        assert parsed.kind is kind
        assert parsed.is_structured

    def test_term_keeps_inner_spaces(self):
        assert SearchQueryParser.parse("@box  red crate ").term == "red crate"

    def test_prefix_without_term_is_free_text(self):
        assert SearchQueryParser.parse("@box") == SearchFilter(FilterKind.NONE, "@box")
        assert SearchQueryParser.parse("@box   ") == SearchFilter(FilterKind.NONE, "@box")

    def test_unknown_prefix_is_free_text(self):
        assert SearchQueryParser.parse("@foo bar") == SearchFilter(FilterKind.NONE, "@foo bar")

    @pytest.mark.parametrize("query", [None, "", "   "])
    def test_empty_query(self, query):
        parsed = SearchQueryParser.parse(query)
        assert parsed == SearchFilter(FilterKind.NONE, "")
        assert not parsed.is_structured


class TestSortKey:

    def test_known_values(self):
        assert SortKey.from_value("Box") is SortKey.BOX
        assert SortKey.from_value(SortKey.ADDED) is SortKey.ADDED

    @pytest.mark.parametrize("value", [None, "", "price"])
    def test_fallback_is_name(self, value):
        assert SortKey.from_value(value) is SortKey.NAME


class TestEscapeLike:

    def test_wildcards_are_escaped(self):
        assert escape_like("50%_off\\") == "50\\%\\_off\\\\"
