# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - album.py: Album CRUD schemas and collection stats
# - profile.py: User profile schemas
# - search.py: Metadata search and cover art schemas
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Album Models - Collection records
# -----------------------------------------------------------------------------
from .album import (
    AlbumCondition,
    AlbumDeleteResponse,
    AlbumFields,
    AlbumList,
    AlbumMutationResponse,
    AlbumResponse,
    AlbumStats,
    ArtistList,
)

# -----------------------------------------------------------------------------
# Profile Models - Account page
# -----------------------------------------------------------------------------
from .profile import (
    PROFILE_COLUMNS,
    ProfileResponse,
    ProfileUpdate,
)

# -----------------------------------------------------------------------------
# Search Models - MusicBrainz prefill
# -----------------------------------------------------------------------------
from .search import (
    VINYL_RELEASE_TYPES,
    CoverArtResponse,
    ReleaseSearchResult,
    SearchResponse,
)

__all__ = [
    # Album
    "AlbumCondition",
    "AlbumDeleteResponse",
    "AlbumFields",
    "AlbumList",
    "AlbumMutationResponse",
    "AlbumResponse",
    "AlbumStats",
    "ArtistList",
    # Profile
    "PROFILE_COLUMNS",
    "ProfileResponse",
    "ProfileUpdate",
    # Search
    "VINYL_RELEASE_TYPES",
    "CoverArtResponse",
    "ReleaseSearchResult",
    "SearchResponse",
]
