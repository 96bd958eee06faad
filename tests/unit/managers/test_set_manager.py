"""
test_set_manager.py
-------------------
Unit tests for SetManager: bags, sets, details and elements.
"""
import warnings

import pytest
from sqlalchemy.exc import SAWarning

from samla.core.exceptions import DatabaseError, ValidationError
from samla.database.models import Bag, Element


@pytest.fixture
def location(location_manager):
    return location_manager.create({"name": "Cellar", "room": "Basement"})


@pytest.fixture
def box(box_manager, location):
    return box_manager.create(location.id, "B1", "Red crate")


class TestNextBagSerial:

    def test_empty_box_starts_at_one(self, set_manager, box):
        assert set_manager.next_bag_serial(box.id) == "0001"

    def test_increments_highest_numeric_serial(self, set_manager, box):
        set_manager.create_bag_with_set(box.id, "0001", "A")
        set_manager.create_bag_with_set(box.id, "0009", "B")
        set_manager.create_bag_with_set(box.id, "X-7", "C")

        assert set_manager.next_bag_serial(box.id) == "0010"

    def test_serials_are_per_box(self, set_manager, box_manager, location, box):
        other = box_manager.create(location.id, "B2")
        set_manager.create_bag_with_set(box.id, "0004", "A")

        assert set_manager.next_bag_serial(other.id) == "0001"

    @pytest.mark.parametrize("box_id", [0, -1, None])
    def test_invalid_box_gives_first_serial(self, set_manager, box_id):
        assert set_manager.next_bag_serial(box_id) == "0001"


class TestCreateBagWithSet:

    def test_creates_bag_and_set(self, set_manager, box, db_session):
        set_id = set_manager.create_bag_with_set(
            box.id, "0001", " Castle Set ", manufacturer="Acme", type_name="Stamp"
        )

        item_set = set_manager.get(set_id)
        assert item_set.name == "Castle Set"
        assert item_set.bag.serial_no == "0001"
        assert item_set.bag.box is box
        assert item_set.manufacturer.name == "Acme"
        assert item_set.item_type.name == "Stamp"
        assert db_session.query(Bag).count() == 1

    def test_new_lookups_do_not_autoflush_pending_bag(self, set_manager, box):
        with warnings.catch_warnings():
            warnings.simplefilter("error", SAWarning)
            set_id = set_manager.create_bag_with_set(box.id, "0001", "Castle Set", "Acme", "Kit")
            set_manager.update(set_id, "Castle Set", "Brick Co", "Bundle", box.id, "0001")

        item_set = set_manager.get(set_id)
        assert item_set.manufacturer.name == "Brick Co"
        assert item_set.item_type.name == "Bundle"

    def test_duplicate_serial_in_box_raises(self, set_manager, box):
        set_manager.create_bag_with_set(box.id, "0001", "A")
        with pytest.raises(DatabaseError, match="Data integrity violation"):
            set_manager.create_bag_with_set(box.id, "0001", "B")

    def test_missing_box_raises(self, set_manager):
        with pytest.raises(DatabaseError, match="Box not found"):
            set_manager.create_bag_with_set(12, "0001", "A")

    def test_blank_name_raises(self, set_manager, box):
        with pytest.raises(ValidationError):
            set_manager.create_bag_with_set(box.id, "0001", "  ")


class TestUpdateDelete:

    def test_update_moves_bag_and_clears_manufacturer(self, set_manager, box_manager, location, box):
        other = box_manager.create(location.id, "B2")
        set_id = set_manager.create_bag_with_set(box.id, "0001", "A", manufacturer="Acme")

        item_set = set_manager.update(set_id, "Renamed", "", None, other.id, "0003")

        assert item_set.name == "Renamed"
        assert item_set.manufacturer is None
        assert item_set.bag.box is other
        assert item_set.bag.serial_no == "0003"

    def test_delete_returns_photo_path(self, set_manager, box, db_session):
        set_id = set_manager.create_bag_with_set(box.id, "0001", "A")
        set_manager.get(set_id).photo_path = "Images/a.png"

        assert set_manager.delete(set_id) == "Images/a.png"
        assert db_session.query(Bag).count() == 0

    def test_require_missing_set(self, set_manager):
        with pytest.raises(DatabaseError, match="Set not found with id: 3"):
            set_manager.require(3)
        with pytest.raises(ValidationError):
            set_manager.require(0)


class TestDetails:

    def test_details_flatten_placement(self, set_manager, tag_manager, box, location):
        set_id = set_manager.create_bag_with_set(box.id, "0002", "Castle Set", manufacturer="Acme")
        set_manager.add_element(set_id, "Tower", "stempel")
        tag_manager.set_tags(set_id, ["minifig", "castle"])

        details = set_manager.get_details(set_id)

        assert details.name == "Castle Set"
        assert details.manufacturer_name == "Acme"
        assert details.type_name == ""
        assert details.bag_serial == "0002"
        assert (details.box_code, details.box_name) == ("B1", "Red crate")
        assert details.location_name == "Cellar"
        assert details.location_room == "Basement"
        assert details.tags == ["castle", "minifig"]
        assert [e.name for e in details.elements] == ["Tower"]
        assert details.photo_path == ""


class TestElements:

    def test_add_list_update_delete(self, set_manager, box, db_session):
        set_id = set_manager.create_bag_with_set(box.id, "0001", "A")
        tower = set_manager.add_element(set_id, "Tower", "Stempel")
        set_manager.add_element(set_id, "Gate")

        assert [e.name for e in set_manager.list_elements(set_id)] == ["Tower", "Gate"]
        assert tower.kind == "stempel"

        set_manager.update_element(tower.id, "Keep", "stanze")
        assert tower.name == "Keep"
        assert tower.kind == "stanze"

        set_manager.delete_element(tower.id)
        assert db_session.query(Element).count() == 1

    def test_invalid_kind_raises(self, set_manager, box):
        set_id = set_manager.create_bag_with_set(box.id, "0001", "A")
        with pytest.raises(ValidationError):
            set_manager.add_element(set_id, "Tower", "sticker")

    def test_deleting_set_removes_elements(self, set_manager, box, db_session):
        set_id = set_manager.create_bag_with_set(box.id, "0001", "A")
        set_manager.add_element(set_id, "Tower")

        set_manager.delete(set_id)

        assert db_session.query(Element).count() == 0
