#!/usr/bin/env python3
"""
photo_manager.py
-------------------
Keeps set rows and photo files consistent.

Replacing a photo happens in three ordered steps:
    1. The new bytes go to a fresh file under the asset root. Nothing
       else changes, so a failure here leaves no trace.
    2. One transaction reads the previous ``photo_path`` and writes the
       new path and source. If it fails, the fresh file is removed.
    3. After the commit, the previous file is deleted best-effort. An
       OSError is logged and swallowed; the row never points at a
       missing file, at worst a stale file stays behind.

Clearing a photo and deleting a set follow the same commit-then-delete
order.

Usage:
    storage = AssetStorage(config.home, config.images_subdir)
    photos = PhotoManager(db, storage, timeout=config.download_timeout)
    path = photos.attach_file(set_id, "~/Pictures/castle.jpg")
    photos.clear_asset(set_id)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import base64
import binascii
from pathlib import Path
from typing import Optional, Tuple, Union
from urllib.parse import urlparse

# --- Third party imports ---
import requests

# --- Local imports ---
from samla.core.config import DEFAULT_DOWNLOAD_TIMEOUT
from samla.core.exceptions import AssetFetchError, AssetPathError, ValidationError
from samla.core.logging_manager import SamlaLogger, safe_logger
from samla.core.validators import DataValidator
from samla.database import SamlaDB
from samla.database.models import PhotoSource
from .storage import AssetStorage

CONTENT_TYPE_EXTENSIONS: Tuple[Tuple[str, str], ...] = (
    ("png", ".png"),
    ("jpeg", ".jpg"),
    ("jpg", ".jpg"),
    ("gif", ".gif"),
)
"""Content-Type fragment → file extension, checked in order."""


def extension_for_download(url: str, content_type: Optional[str]) -> str:
    """
    Pick a file extension for a downloaded photo.

    The URL path wins; otherwise the Content-Type header; otherwise '.png'.
    """
    suffix = Path(urlparse(url).path).suffix.lower()
    if suffix:
        return suffix
    content_type = (content_type or "").lower()
    for fragment, ext in CONTENT_TYPE_EXTENSIONS:
        if fragment in content_type:
            return ext
    return ".png"


class PhotoManager:
    """
    Coordinates photo files under the asset root with the ``sets`` rows.

    Args:
        db: Open store
        storage: Asset root access
        logger: Optional logger
        timeout: Seconds before a URL download is abandoned
    """

    def __init__(
        self,
        db: SamlaDB,
        storage: AssetStorage,
        logger: Optional[SamlaLogger] = None,
        timeout: float = DEFAULT_DOWNLOAD_TIMEOUT,
    ) -> None:
        self.db = db
        self.storage = storage
        self.logger = logger
        self.timeout = timeout

    # -------------------------------------------------------------------------
    # Internal steps
    # -------------------------------------------------------------------------

    @staticmethod
    def _validate_source(source: Union[PhotoSource, str]) -> PhotoSource:
        try:
            return PhotoSource(source)
        except ValueError:
            raise ValidationError(
                f"Invalid photo source '{source}'. Must be one of: {', '.join(PhotoSource.choices())}"
            ) from None

    def _commit_asset(
        self, set_id: int, relative_path: Optional[str], source: Optional[PhotoSource]
    ) -> Optional[str]:
        """Write path and source in one transaction; return the previous path."""
        with self.db.session_scope():
            item_set = self.db.sets.require(set_id)
            old_path = item_set.photo_path or None
            item_set.photo_path = relative_path
            item_set.photo_source = source.value if source else None

        safe_logger(self.logger).log_operation(
            "photo_row_committed",
            {"set_id": set_id, "path": relative_path, "previous": old_path},
        )
        return old_path

    def _discard_stale(self, old_path: Optional[str], current_path: Optional[str] = None) -> None:
        """
        Best-effort removal of a file no row references any more.

        Raises:
            AssetPathError: If the stale path escapes the asset root
        """
        if not old_path:
            return
        # Stored forms differ (absolute vs relative) for the same file
        if current_path and self.storage.resolve(old_path) == self.storage.resolve(current_path):
            return

        log = safe_logger(self.logger)
        try:
            self.storage.delete(old_path)
        except AssetPathError as e:
            log.log_error(e, {"operation": "discard_stale_photo", "path": old_path})
            raise
        except OSError as e:
            log.log_warning(
                "Could not remove stale photo", {"path": old_path, "error": str(e)}
            )

    def _discard_fresh(self, relative_path: str) -> None:
        """Remove a just-written file that never got referenced."""
        try:
            self.storage.delete(relative_path)
        except OSError as e:
            safe_logger(self.logger).log_warning(
                "Could not remove unreferenced photo",
                {"path": relative_path, "error": str(e)},
            )

    def _attach_new(self, set_id: int, relative_path: str, source: PhotoSource) -> str:
        """Steps 2 and 3 for a file written by this manager."""
        try:
            old_path = self._commit_asset(set_id, relative_path, source)
        except Exception:
            self._discard_fresh(relative_path)
            raise
        self._discard_stale(old_path, relative_path)
        return relative_path

    # -------------------------------------------------------------------------
    # Public operations
    # -------------------------------------------------------------------------

    def set_asset(
        self, set_id: int, relative_path: str, source: Union[PhotoSource, str]
    ) -> str:
        """
        Point a set at an existing file under the asset root.

        Args:
            set_id: Set to update
            relative_path: Stored or absolute path of a file under the root
            source: One of PhotoSource

        Returns:
            The stored relative path

        Raises:
            ValidationError: Bad id, empty path, unknown source or missing file
            AssetPathError: Path outside the asset root, or a previous path
                outside it (after the row was committed)
            DatabaseError: Missing set or store failure
        """
        set_id = DataValidator.validate_id(set_id, "Set id")
        relative_path = DataValidator.require_string(relative_path, "Photo path")
        photo_source = self._validate_source(source)

        stored_path = self.storage.to_relative(relative_path)
        if not self.storage.exists(stored_path):
            raise ValidationError(f"Photo file does not exist: {relative_path}")

        old_path = self._commit_asset(set_id, stored_path, photo_source)
        self._discard_stale(old_path, stored_path)
        return stored_path

    def attach_bytes(
        self,
        set_id: int,
        data: bytes,
        ext: Optional[str] = None,
        source: Union[PhotoSource, str] = PhotoSource.CROPPED,
    ) -> str:
        """Store raw image bytes as the set's photo."""
        set_id = DataValidator.validate_id(set_id, "Set id")
        photo_source = self._validate_source(source)
        if not data:
            raise ValidationError("Image data is empty")

        relative_path = self.storage.write_new(data, ext)
        return self._attach_new(set_id, relative_path, photo_source)

    def attach_base64(self, set_id: int, data: str, ext: Optional[str] = None) -> str:
        """
        Store a base64 image (a ``data:`` URL prefix is accepted).

        Raises:
            ValidationError: If the payload cannot be decoded
        """
        payload = (data or "").strip()
        if "," in payload:
            payload = payload.split(",", 1)[1]
        try:
            decoded = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValidationError(f"Unable to decode image: {e}") from e
        return self.attach_bytes(set_id, decoded, ext, PhotoSource.CROPPED)

    def attach_file(self, set_id: int, file_path: Union[str, Path]) -> str:
        """Copy a local image file into the asset root."""
        set_id = DataValidator.validate_id(set_id, "Set id")
        file_path = DataValidator.require_string(str(file_path or ""), "File path")
        source_file = Path(file_path).expanduser()
        if not source_file.is_file():
            raise ValidationError(f"File not found: {file_path}")

        with source_file.open("rb") as stream:
            relative_path = self.storage.write_new(stream, source_file.suffix)
        return self._attach_new(set_id, relative_path, PhotoSource.FILE)

    def attach_url(self, set_id: int, url: str) -> str:
        """
        Download an image and attach it.

        Raises:
            ValidationError: Bad id or a URL that is not http(s)
            AssetFetchError: Timeout, connection failure or non-2xx
                response; nothing was written
        """
        set_id = DataValidator.validate_id(set_id, "Set id")
        url = DataValidator.require_string(url, "URL")
        if urlparse(url).scheme.lower() not in ("http", "https"):
            raise ValidationError(f"Only http and https URLs are supported: {url}")

        log = safe_logger(self.logger)
        try:
            response = requests.get(url, timeout=self.timeout)
        except requests.Timeout as e:
            log.log_warning("Photo download timed out", {"url": url, "timeout": self.timeout})
            raise AssetFetchError(f"Timed out after {self.timeout}s: {url}", url=url) from e
        except requests.RequestException as e:
            log.log_warning("Photo download failed", {"url": url, "error": str(e)})
            raise AssetFetchError(f"Failed to download image: {e}", url=url) from e

        if not 200 <= response.status_code < 300:
            raise AssetFetchError(
                f"Failed to download image (status {response.status_code})",
                url=url,
                status_code=response.status_code,
            )

        ext = extension_for_download(url, response.headers.get("Content-Type"))
        relative_path = self.storage.write_new(response.content, ext)
        return self._attach_new(set_id, relative_path, PhotoSource.URL)

    def attach_scan(self, set_id: int, relative_path: str) -> str:
        """Attach a scan that was already saved under the asset root."""
        return self.set_asset(set_id, relative_path, PhotoSource.SCAN)

    def clear_asset(self, set_id: int) -> Optional[str]:
        """
        Remove a set's photo: null the row, then delete the file.

        Returns:
            The previous path, or None if the set had no photo
        """
        set_id = DataValidator.validate_id(set_id, "Set id")
        old_path = self._commit_asset(set_id, None, None)
        self._discard_stale(old_path)
        return old_path

    def delete_set(self, set_id: int) -> Optional[str]:
        """
        Delete a set and its bag, then its photo file.

        Returns:
            The deleted set's photo path, or None
        """
        with self.db.session_scope():
            old_path = self.db.sets.delete(set_id)
        self._discard_stale(old_path)
        return old_path

    def photo_path(self, set_id: int) -> Optional[Path]:
        """Absolute location of a set's photo, or None."""
        with self.db.session_scope():
            item_set = self.db.sets.require(set_id)
            if not item_set.has_photo:
                return None
            stored = item_set.photo_path
        return self.resolve(stored)

    def resolve(self, relative_path: Optional[str]) -> Optional[Path]:
        """Absolute location of a stored path; None for an empty one."""
        if not relative_path:
            return None
        return self.storage.resolve(relative_path)
