"""
Enumeration Types
------------------

Enum classes for the Samla catalog models.

Enums:
    - PhotoSource: Provenance of a set photo (file, url, cropped, scan)
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from enum import Enum
from typing import List


class PhotoSource(str, Enum):
    """
    Enumeration of photo provenance tags.
    - FILE: Copied from a local file
    - URL: Downloaded from a web address
    - CROPPED: Produced by the in-app cropper (raw bytes or data URL)
    - SCAN: Acquired from a scanner
    """

    FILE = "file"
    URL = "url"
    CROPPED = "cropped"
    SCAN = "scan"

    @classmethod
    def choices(cls) -> List[str]:
        """Get all available photo source choices."""
        return [source.value for source in cls]
