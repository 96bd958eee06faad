"""
Tests for SearchEngine compilation, execution and refinement.
"""
import pytest
from unittest.mock import MagicMock

from samla.core.logging_manager import SamlaLogger
from samla.search.search_engine import (
    SEARCH_LIMIT,
    FilterKind,
    SearchEngine,
    SearchFilter,
    SearchResult,
)


@pytest.fixture
def seeded_db(test_db):
    """
    Two locations, three boxes and four sets.

    Cellar/B1: 0001 "Castle Set" (Acme, tags castle+minifig, element Tower)
               0002 "Pirate Ship" (Brick Co, tag ship)
    Attic/A7:  0001 "Zoo" (no manufacturer, element "Keeper")
    Attic/B2 "Red crate": 0001 "100% Cotton_Bag"
    """
    with test_db.session_scope():
        cellar = test_db.locations.create({"name": "Cellar", "room": "Basement"})
        attic = test_db.locations.create({"name": "Attic"})
        b1 = test_db.boxes.create(cellar.id, "B1")
        a7 = test_db.boxes.create(attic.id, "A7")
        b2 = test_db.boxes.create(attic.id, "B2", "Red crate")

        castle = test_db.sets.create_bag_with_set(b1.id, "0001", "Castle Set", "Acme")
        ship = test_db.sets.create_bag_with_set(b1.id, "0002", "Pirate Ship", "Brick Co")
        zoo = test_db.sets.create_bag_with_set(a7.id, "0001", "Zoo")
        bag = test_db.sets.create_bag_with_set(b2.id, "0001", "100% Cotton_Bag")

        test_db.tags.set_tags(castle, ["castle", "minifig"])
        test_db.tags.set_tags(ship, ["ship"])
        test_db.sets.add_element(castle, "Tower")
        test_db.sets.add_element(zoo, "Keeper")

    return {"castle": castle, "ship": ship, "zoo": zoo, "bag": bag}


def _search(db, query, sort_key=None):
    with db.session_scope() as session:
        return SearchEngine(session).search(query, sort_key)


def _names(results):
    return [r.set_name for r in results]


class TestStructuredFilters:

    def test_box_filter_matches_code_and_name(self, test_db, seeded_db):
        assert _names(_search(test_db, "@box b1")) == ["Castle Set", "Pirate Ship"]
        assert _names(_search(test_db, "@box red")) == ["100% Cotton_Bag"]

    def test_product_filter_matches_elements(self, test_db, seeded_db):
        assert _names(_search(test_db, "@product keep")) == ["Zoo"]

    def test_manufacturer_filter(self, test_db, seeded_db):
        assert _names(_search(test_db, "@hersteller brick")) == ["Pirate Ship"]

    def test_tag_filter_returns_full_tag_list(self, test_db, seeded_db):
        results = _search(test_db, "@tag mini")

        assert _names(results) == ["Castle Set"]
        assert results[0].tags == ["castle", "minifig"]

    def test_location_filter_matches_room(self, test_db, seeded_db):
        assert _names(_search(test_db, "@ort basement")) == ["Castle Set", "Pirate Ship"]

    def test_structured_filters_skip_fuzzy_refinement(self, test_db, seeded_db):
        """A structured filter returns the SQL candidates unrefined."""
        results = _search(test_db, "@ort basement")

        assert len(results) == 2
        assert SearchEngine.refine(results, "basement") == []


class TestFreeText:

    def test_matches_across_fields(self, test_db, seeded_db):
        assert _names(_search(test_db, "acme")) == ["Castle Set"]
        assert _names(_search(test_db, "ship")) == ["Pirate Ship"]

    def test_element_only_match_is_refined_away(self, test_db, seeded_db):
        """Elements are searched in SQL but not re-checked by refinement."""
        assert _search(test_db, "keeper") == []
        assert _names(_search(test_db, "@produkt keeper")) == ["Zoo"]

    def test_like_wildcards_are_literal(self, test_db, seeded_db):
        assert _names(_search(test_db, "100%")) == ["100% Cotton_Bag"]
        assert _names(_search(test_db, "n_b")) == ["100% Cotton_Bag"]
        assert _names(_search(test_db, "%")) == ["100% Cotton_Bag"]

    def test_empty_query_returns_everything(self, test_db, seeded_db):
        assert len(_search(test_db, "")) == 4

    def test_result_fields(self, test_db, seeded_db):
        (result,) = _search(test_db, "castle")

        assert result == SearchResult(
            set_id=seeded_db["castle"],
            set_name="Castle Set",
            manufacturer_name="Acme",
            box_code="B1",
            box_name="",
            bag_serial="0001",
            location_name="Cellar",
            tags=["castle", "minifig"],
            thumbnail_path="",
        )


class TestNonAsciiNames:
    """SQL matching folds case the same way the refinement pass does."""

    @pytest.fixture
    def umlaut_db(self, test_db):
        with test_db.session_scope():
            kueche = test_db.locations.create({"name": "Küche"})
            box = test_db.boxes.create(kueche.id, "Ü1")
            test_db.sets.create_bag_with_set(box.id, "0001", "Äpfel Set", "Öko")
        return test_db

    def test_free_text(self, umlaut_db):
        assert _names(_search(umlaut_db, "äpfel")) == ["Äpfel Set"]

    def test_box_filter(self, umlaut_db):
        assert _names(_search(umlaut_db, "@box ü1")) == ["Äpfel Set"]

    def test_manufacturer_filter(self, umlaut_db):
        assert _names(_search(umlaut_db, "@hersteller öko")) == ["Äpfel Set"]

    def test_location_filter(self, umlaut_db):
        assert _names(_search(umlaut_db, "@ort KÜCHE")) == ["Äpfel Set"]


class TestSorting:

    def test_sort_by_name(self, test_db, seeded_db):
        assert _names(_search(test_db, "", "name")) == [
            "100% Cotton_Bag", "Castle Set", "Pirate Ship", "Zoo",
        ]

    def test_sort_by_box(self, test_db, seeded_db):
        assert _names(_search(test_db, "", "box")) == [
            "Zoo", "Castle Set", "Pirate Ship", "100% Cotton_Bag",
        ]

    def test_sort_by_location(self, test_db, seeded_db):
        assert _names(_search(test_db, "", "location")) == [
            "Zoo", "100% Cotton_Bag", "Castle Set", "Pirate Ship",
        ]

    def test_sort_by_added(self, test_db, seeded_db):
        assert _names(_search(test_db, "", "added")) == [
            "100% Cotton_Bag", "Zoo", "Pirate Ship", "Castle Set",
        ]


class TestLimit:

    def test_results_are_capped(self, test_db):
        with test_db.session_scope():
            location = test_db.locations.create({"name": "Hall"})
            box = test_db.boxes.create(location.id, "H1")
            for n in range(SEARCH_LIMIT + 5):
                test_db.sets.create_bag_with_set(box.id, f"{n + 1:04d}", f"Set {n:03d}")

        assert len(_search(test_db, "set")) == SEARCH_LIMIT
        assert len(_search(test_db, "@box h1")) == SEARCH_LIMIT


class TestRefine:

    def test_keeps_order_and_drops_non_matches(self):
        candidates = [
            SearchResult(set_id=1, set_name="Zoo"),
            SearchResult(set_id=2, set_name="Castle", tags=["bxc"]),
            SearchResult(set_id=3, set_name="Box Code"),
        ]

        refined = SearchEngine.refine(candidates, "bxc")

        assert [r.set_id for r in refined] == [2, 3]

    def test_empty_term_keeps_all(self):
        candidates = [SearchResult(set_id=1, set_name="Zoo")]
        assert SearchEngine.refine(candidates, "") == candidates


class TestCompile:

    def test_parameters_are_bound(self):
        engine = SearchEngine(MagicMock())
        stmt = engine.compile(SearchFilter(FilterKind.TAG, "x' OR 1=1 --"))

        sql = str(stmt)
        assert "x' OR 1=1" not in sql
        assert "LIMIT" in sql.upper()

    def test_search_logs_summary(self, test_db, seeded_db):
        mock_logger = MagicMock(spec=SamlaLogger)
        with test_db.session_scope() as session:
            SearchEngine(session, mock_logger).search("@tag ship")

        message, details = mock_logger.log_debug.call_args[0]
        assert message == "search"
        assert details["kind"] == "tag"
        assert details["results"] == 1
