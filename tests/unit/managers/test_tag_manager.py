"""
test_tag_manager.py
-------------------
Unit tests for TagManager CRUD operations and set links.
"""
import pytest

from samla.core.exceptions import DatabaseError, ValidationError


@pytest.fixture
def set_id(location_manager, box_manager, set_manager):
    location = location_manager.create({"name": "Cellar"})
    box = box_manager.create(location.id, "B1")
    return set_manager.create_bag_with_set(box.id, "0001", "Castle Set")


class TestTagManagerGet:

    def test_get_returns_none_when_not_found(self, tag_manager):
        assert tag_manager.get("nonexistent") is None

    def test_get_normalizes_input(self, tag_manager):
        tag_manager.create("Castle")
        assert tag_manager.get("  CASTLE ").name == "castle"

    def test_get_empty_returns_none(self, tag_manager):
        assert tag_manager.get("") is None
        assert tag_manager.get(None) is None


class TestTagManagerCreate:

    def test_create_lower_cases(self, tag_manager):
        assert tag_manager.create("Minifig").name == "minifig"

    def test_create_duplicate_raises(self, tag_manager):
        tag_manager.create("castle")
        with pytest.raises(DatabaseError, match="already exists"):
            tag_manager.create("Castle")

    def test_create_rejects_blank_and_commas(self, tag_manager):
        with pytest.raises(ValidationError):
            tag_manager.create("  ")
        with pytest.raises(ValidationError):
            tag_manager.create("red,blue")

    def test_get_or_create_returns_existing(self, tag_manager):
        first = tag_manager.get_or_create("castle")
        assert tag_manager.get_or_create("CASTLE") is first


class TestTagManagerUpdateDelete:

    def test_update_renames(self, tag_manager):
        tag = tag_manager.create("castel")
        tag_manager.update(tag.id, "Castle")
        assert tag.name == "castle"

    def test_update_to_existing_name_raises(self, tag_manager):
        tag_manager.create("castle")
        other = tag_manager.create("tower")
        with pytest.raises(DatabaseError):
            tag_manager.update(other.id, "castle")

    def test_delete_unlinks_sets(self, tag_manager, set_manager, set_id, db_session):
        tag_manager.set_tags(set_id, ["castle", "minifig"])
        castle = tag_manager.get("castle")

        tag_manager.delete(castle.id)

        db_session.expire_all()
        assert [t.name for t in set_manager.get(set_id).tags] == ["minifig"]


class TestSetTags:

    def test_set_tags_replaces(self, tag_manager, set_id):
        tag_manager.set_tags(set_id, ["Castle", "minifig", "castle"])
        tags = tag_manager.set_tags(set_id, ["tower", "minifig"])

        assert sorted(t.name for t in tags) == ["minifig", "tower"]
        assert [t.name for t in tag_manager.get_all()] == ["castle", "minifig", "tower"]

    def test_usage_count(self, tag_manager, set_id):
        tag_manager.set_tags(set_id, ["castle"])
        assert tag_manager.get("castle").usage_count == 1

    def test_set_tags_missing_set(self, tag_manager):
        with pytest.raises(DatabaseError, match="Set not found"):
            tag_manager.set_tags(99, ["castle"])
