# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .album_service import AlbumService
from .metadata_service import MetadataService
from .profile_service import ProfileService
from .storage_service import ImageUpload, StorageService

__all__ = [
    "AlbumService",
    "ImageUpload",
    "MetadataService",
    "ProfileService",
    "StorageService",
]
