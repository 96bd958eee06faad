#!/usr/bin/env python3
"""
storage.py
-------------------
Filesystem side of set photos.

Every photo lives below one asset root (``<home>/Images``). Rows store
paths relative to the home directory with forward slashes, e.g.
``Images/0b7c....png``; absolute paths from older stores are still
understood.

New files always get a fresh uuid4 name and are opened in exclusive
create mode, so an existing asset is never overwritten.

Deletion is guarded: a path whose resolved location is not strictly
below the asset root is refused with AssetPathError.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import shutil
import uuid
from pathlib import Path
from typing import BinaryIO, Optional, Union

# --- Local imports ---
from samla.core import paths
from samla.core.exceptions import AssetPathError, ValidationError
from samla.core.logging_manager import SamlaLogger, safe_logger

DEFAULT_EXTENSION = ".png"


class AssetStorage:
    """
    Create, resolve and delete files under the asset root.

    Attributes:
        base_dir: Directory stored relative paths are resolved against
        subdir: Name of the asset root below ``base_dir``
    """

    def __init__(
        self,
        base_dir: Union[str, Path],
        subdir: str = paths.IMAGES_SUBDIR,
        logger: Optional[SamlaLogger] = None,
    ) -> None:
        self.base_dir = Path(base_dir).expanduser().resolve()
        self.subdir = subdir
        self.logger = logger

    @property
    def asset_root(self) -> Path:
        return self.base_dir / self.subdir

    def ensure_root(self) -> Path:
        self.asset_root.mkdir(parents=True, exist_ok=True)
        return self.asset_root

    # ---- Paths ----
    @staticmethod
    def normalize_extension(ext: Optional[str]) -> str:
        """'.JPG', 'jpg' → '.jpg'; empty → '.png'."""
        ext = (ext or "").strip().lower()
        if not ext:
            return DEFAULT_EXTENSION
        return ext if ext.startswith(".") else f".{ext}"

    def new_relative_path(self, ext: Optional[str] = None) -> str:
        """A fresh, collision-free relative path such as ``Images/<uuid>.png``."""
        return f"{self.subdir}/{uuid.uuid4()}{self.normalize_extension(ext)}"

    def resolve(self, path: Union[str, Path]) -> Path:
        """Absolute, symlink-free location of a stored path."""
        candidate = Path(path).expanduser()
        if not candidate.is_absolute():
            candidate = self.base_dir / candidate
        return candidate.resolve()

    def contains(self, path: Union[str, Path]) -> bool:
        """True if the path resolves strictly below the asset root."""
        root = self.asset_root.resolve()
        target = self.resolve(path)
        return target != root and target.is_relative_to(root)

    def to_relative(self, path: Union[str, Path]) -> str:
        """
        Stored form of a path under the asset root.

        Raises:
            AssetPathError: If the path is outside the asset root
        """
        if not self.contains(path):
            raise AssetPathError(f"Path is outside the asset root: {path}")
        return self.resolve(path).relative_to(self.base_dir).as_posix()

    def exists(self, path: Union[str, Path, None]) -> bool:
        if not path:
            return False
        return self.resolve(path).is_file()

    # ---- Files ----
    def write_new(self, data: Union[bytes, BinaryIO], ext: Optional[str] = None) -> str:
        """
        Write bytes (or copy a binary stream) to a fresh asset file.

        Returns:
            Relative path of the new file

        Raises:
            OSError: If the file cannot be written; a partially written
                file is removed first
        """
        self.ensure_root()
        relative_path = self.new_relative_path(ext)
        target = self.resolve(relative_path)

        handle = target.open("xb")
        try:
            with handle:
                if isinstance(data, (bytes, bytearray, memoryview)):
                    handle.write(data)
                else:
                    shutil.copyfileobj(data, handle)
        except Exception:
            target.unlink(missing_ok=True)
            raise

        safe_logger(self.logger).log_debug(
            "asset_written", {"path": relative_path, "bytes": target.stat().st_size}
        )
        return relative_path

    def delete(self, path: Union[str, Path]) -> bool:
        """
        Remove an asset file.

        Returns:
            True if a file was removed, False if it was already gone

        Raises:
            ValidationError: If the path is empty
            AssetPathError: If the path resolves outside the asset root
            OSError: If removal fails for another reason
        """
        if not path or not str(path).strip():
            raise ValidationError("Asset path is required")
        if not self.contains(path):
            raise AssetPathError(f"Refusing to delete outside asset root: {path}")

        try:
            self.resolve(path).unlink()
        except FileNotFoundError:
            return False

        safe_logger(self.logger).log_debug("asset_deleted", {"path": str(path)})
        return True

    def count_files(self) -> int:
        """Number of files below the asset root."""
        root = self.asset_root
        if not root.is_dir():
            return 0
        return sum(1 for p in root.rglob("*") if p.is_file())
