"""
Set photos: asset storage under the application home and the
coordinator that keeps files and rows consistent.
"""
from .photo_manager import PhotoManager
from .storage import AssetStorage

__all__ = ["AssetStorage", "PhotoManager"]
