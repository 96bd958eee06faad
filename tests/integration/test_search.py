#!/usr/bin/env python3
"""
End-to-end search tests through SamlaDB.search.

Seeds a store through the managers and checks fuzzy free text,
structured filters and the empty result.
"""
import pytest

from samla.search import SortKey


class TestCatalogScenario:
    """Location L1, box B1, bag 0001 holding "Castle Set" (no manufacturer)."""

    def test_fuzzy_free_text(self, test_db, catalog):
        results = test_db.search("cas", SortKey.NAME)

        assert [r.set_id for r in results] == [catalog["set_id"]]
        assert results[0].manufacturer_name == ""

    def test_box_filter(self, test_db, catalog):
        results = test_db.search("@box b1", "name")

        assert [r.set_name for r in results] == ["Castle Set"]
        assert results[0].location_name == "L1"
        assert results[0].bag_serial == "0001"

    def test_no_match(self, test_db, catalog):
        assert test_db.search("nomatch", "name") == []


class TestSearchAfterEdits:

    def test_tags_and_elements_are_searchable(self, test_db, catalog):
        with test_db.session_scope():
            test_db.tags.set_tags(catalog["set_id"], ["Minifig"])
            test_db.sets.add_element(catalog["set_id"], "Drawbridge")

        assert [r.set_name for r in test_db.search("@tag minifig")] == ["Castle Set"]
        assert [r.set_name for r in test_db.search("@product draw")] == ["Castle Set"]
        assert test_db.search("minifig")[0].tags == ["minifig"]

    def test_deleted_set_disappears(self, test_db, catalog):
        with test_db.session_scope():
            test_db.sets.delete(catalog["set_id"])

        assert test_db.search("") == []

    @pytest.mark.parametrize("sort_key", list(SortKey))
    def test_every_sort_key_runs(self, test_db, catalog, sort_key):
        assert len(test_db.search("", sort_key)) == 1
