"""
Tests for AssetStorage path handling, writes and guarded deletes.
"""
import io
import os
import pytest

from samla.assets.storage import AssetStorage
from samla.core.exceptions import AssetPathError, ValidationError


class TestPaths:

    def test_new_relative_path_shape(self, asset_storage):
        first = asset_storage.new_relative_path(".JPG")
        second = asset_storage.new_relative_path(".JPG")

        assert first.startswith("Images/")
        assert first.endswith(".jpg")
        assert first != second

    @pytest.mark.parametrize("ext, expected", [(None, ".png"), ("", ".png"), ("gif", ".gif")])
    def test_extension_defaults(self, ext, expected):
        assert AssetStorage.normalize_extension(ext) == expected

    def test_resolve_relative_and_absolute(self, asset_storage, test_home):
        assert asset_storage.resolve("Images/a.png") == (test_home / "Images" / "a.png").resolve()
        absolute = test_home / "Images" / "b.png"
        assert asset_storage.resolve(absolute) == absolute.resolve()

    @pytest.mark.parametrize(
        "path, inside",
        [
            ("Images/a.png", True),
            ("Images/sub/a.png", True),
            ("Images", False),
            ("Images/../samla.db", False),
            ("../../etc/passwd", False),
            ("Data/samla.db", False),
        ],
    )
    def test_contains(self, asset_storage, path, inside):
        assert asset_storage.contains(path) is inside

    def test_contains_rejects_symlink_escape(self, asset_storage, test_home, tmp_dir):
        outside = tmp_dir / "outside.png"
        outside.write_bytes(b"x")
        link = test_home / "Images" / "link.png"
        os.symlink(outside, link)

        assert asset_storage.contains("Images/link.png") is False

    def test_to_relative(self, asset_storage, test_home):
        assert asset_storage.to_relative(test_home / "Images" / "a.png") == "Images/a.png"
        with pytest.raises(AssetPathError):
            asset_storage.to_relative("Data/samla.db")


class TestWrite:

    def test_write_bytes(self, asset_storage):
        relative = asset_storage.write_new(b"png-bytes", ".png")

        assert asset_storage.exists(relative)
        assert asset_storage.resolve(relative).read_bytes() == b"png-bytes"

    def test_write_stream_creates_root(self, tmp_dir):
        storage = AssetStorage(tmp_dir / "fresh")
        relative = storage.write_new(io.BytesIO(b"abc"), "jpg")

        assert storage.resolve(relative).read_bytes() == b"abc"
        assert storage.count_files() == 1

    def test_failed_write_leaves_no_file(self, asset_storage):
        class BrokenStream:
            def read(self, *args):
                raise OSError("device gone")

        with pytest.raises(OSError, match="device gone"):
            asset_storage.write_new(BrokenStream(), ".png")

        assert asset_storage.count_files() == 0


class TestDelete:

    def test_delete_existing(self, asset_storage):
        relative = asset_storage.write_new(b"x")

        assert asset_storage.delete(relative) is True
        assert not asset_storage.exists(relative)

    def test_delete_missing_is_not_an_error(self, asset_storage):
        assert asset_storage.delete("Images/gone.png") is False

    def test_delete_outside_root_is_refused(self, asset_storage, test_home):
        victim = test_home / "keep.txt"
        victim.write_text("important")

        with pytest.raises(AssetPathError, match="outside asset root"):
            asset_storage.delete("Images/../keep.txt")

        assert victim.exists()

    def test_delete_blank_path(self, asset_storage):
        with pytest.raises(ValidationError):
            asset_storage.delete("")
