# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Shared Supabase client singleton
# - storage_paths.py: Object key extraction from storage public URLs
# - utils.py: Shared utilities (error base class, form cleaning, UUIDs)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.storage_paths import StoragePathError, extract_object_path
from lib.utils import ApplicationError, clean_text, file_extension, normalize_uuid

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Storage paths
    "StoragePathError",
    "extract_object_path",
    # Utils
    "ApplicationError",
    "clean_text",
    "file_extension",
    "normalize_uuid",
]
