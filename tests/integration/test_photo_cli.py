#!/usr/bin/env python3
"""
Integration tests for samla-photo.
"""
import pytest
from click.testing import CliRunner
from unittest.mock import MagicMock, patch

from samla.assets.cli import cli
from samla.database import SamlaDB


@pytest.fixture
def home(tmp_path):
    db = SamlaDB(tmp_path / "Data" / "samla.db")
    with db.session_scope():
        location = db.locations.create({"name": "L1"})
        box = db.boxes.create(location.id, "B1")
        db.sets.create_bag_with_set(box.id, "0001", "Castle Set")
    db.close()
    return tmp_path


def invoke(home, *args):
    return CliRunner().invoke(cli, ["--home", str(home)] + list(args))


class TestPhotoCLI:

    def test_attach_file_path_and_clear(self, home, tmp_path_factory):
        picture = tmp_path_factory.mktemp("pictures") / "castle.png"
        picture.write_bytes(b"png")

        result = invoke(home, "attach-file", "1", str(picture))
        assert result.exit_code == 0, result.output
        assert "Attached Images/" in result.output

        result = invoke(home, "path", "1")
        location = result.output.strip()
        assert location.startswith(str((home / "Images").resolve()))
        assert location.endswith(".png")

        result = invoke(home, "clear", "1")
        assert result.exit_code == 0
        assert "Removed Images/" in result.output
        assert list((home / "Images").iterdir()) == []

    def test_path_without_photo(self, home):
        result = invoke(home, "path", "1")
        assert "has no photo" in result.output

    @patch("samla.assets.photo_manager.requests.get")
    def test_attach_url(self, mock_get, home):
        response = MagicMock(status_code=200, content=b"gif", headers={"Content-Type": "image/gif"})
        mock_get.return_value = response

        result = invoke(home, "attach-url", "1", "https://example.com/photo")

        assert result.exit_code == 0, result.output
        assert ".gif" in result.output

    def test_missing_set_exits_with_error(self, home, tmp_path_factory):
        picture = tmp_path_factory.mktemp("pictures") / "castle.png"
        picture.write_bytes(b"png")

        result = invoke(home, "attach-file", "42", str(picture))

        assert result.exit_code == 1
        assert "Set not found with id: 42" in result.output
        assert list((home / "Images").iterdir()) == []
