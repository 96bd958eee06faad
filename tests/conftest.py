"""
conftest.py
-----------
Shared pytest fixtures for Samla tests.

Provides fixtures for:
- Temporary homes, stores and asset roots
- Managers bound to a live session
- A small seeded catalog (one location, box, bag and set)
"""
import pytest
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest.mock import MagicMock

from samla.core.logging_manager import SamlaLogger


# ----- Path Fixtures -----

@pytest.fixture
def tmp_dir():
    """Create a temporary directory for test file operations."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_home(tmp_dir):
    """Application home with an empty asset root."""
    home = tmp_dir / "Samla"
    (home / "Images").mkdir(parents=True)
    return home


@pytest.fixture
def test_db_path(test_home):
    """Create temporary test database path."""
    return test_home / "Data" / "samla.db"


@pytest.fixture
def mock_logger():
    """Logger double recording every call."""
    return MagicMock(spec=SamlaLogger)


# ----- Database Fixtures -----

@pytest.fixture
def test_db(test_db_path):
    """
    Create a migrated test store.

    Returns a SamlaDB at the latest schema version. The engine is
    disposed after the test.
    """
    from samla.database import SamlaDB

    db = SamlaDB(db_path=test_db_path)
    yield db
    db.close()


@pytest.fixture
def db_session(test_db):
    """
    Create a database session for tests.

    Provides a session with automatic rollback after test.
    """
    with test_db.session_scope() as session:
        yield session
        session.rollback()


@pytest.fixture
def location_manager(db_session):
    """Create LocationManager instance for testing."""
    from samla.database.managers import LocationManager
    return LocationManager(db_session)


@pytest.fixture
def box_manager(db_session):
    """Create BoxManager instance for testing."""
    from samla.database.managers import BoxManager
    return BoxManager(db_session)


@pytest.fixture
def set_manager(db_session):
    """Create SetManager instance for testing."""
    from samla.database.managers import SetManager
    return SetManager(db_session)


@pytest.fixture
def tag_manager(db_session):
    """Create TagManager instance for testing."""
    from samla.database.managers import TagManager
    return TagManager(db_session)


@pytest.fixture
def manufacturer_manager(db_session):
    """Create ManufacturerManager instance for testing."""
    from samla.database.managers import ManufacturerManager
    return ManufacturerManager(db_session)


@pytest.fixture
def type_manager(db_session):
    """Create TypeManager instance for testing."""
    from samla.database.managers import TypeManager
    return TypeManager(db_session)


# ----- Catalog Fixtures -----

@pytest.fixture
def catalog(test_db):
    """
    Seed the store with the minimal catalog.

    Location "L1" holding box "B1", bag "0001" and the set "Castle Set"
    without manufacturer. Returns the ids as a dict.
    """
    with test_db.session_scope():
        location = test_db.locations.create({"name": "L1"})
        box = test_db.boxes.create(location.id, "B1")
        set_id = test_db.sets.create_bag_with_set(box.id, "0001", "Castle Set")
        ids = {"location_id": location.id, "box_id": box.id, "set_id": set_id}
    return ids


# ----- Asset Fixtures -----

@pytest.fixture
def asset_storage(test_home):
    """AssetStorage rooted at the test home."""
    from samla.assets.storage import AssetStorage
    return AssetStorage(test_home)


@pytest.fixture
def photo_manager(test_db, asset_storage):
    """PhotoManager over the test store and asset root."""
    from samla.assets.photo_manager import PhotoManager
    return PhotoManager(test_db, asset_storage, timeout=2.0)
