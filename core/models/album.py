# =============================================================================
# core/models/album.py - Album Schemas
# =============================================================================
# These models define the API contract for album operations:
# - AlbumCondition: Grading scale accepted by the albums table CHECK constraint
# - AlbumFields: Validated form input shared by create and update
# - AlbumResponse: One album row returned to clients
# - AlbumList / AlbumMutationResponse / AlbumStats: Response envelopes
#
# An album is one vinyl release owned by one user. All queries are scoped
# to the owner.
# =============================================================================

from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field


class AlbumCondition(str, Enum):
    """
    Record grading, best to worst.

    Values must match the database CHECK constraint exactly.
    """
    MINT = "Mint"
    NEAR_MINT = "Near Mint"
    VERY_GOOD = "Very Good"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"

    @classmethod
    def values(cls) -> list[str]:
        return [c.value for c in cls]


class AlbumFields(BaseModel):
    """
    Cleaned album fields, ready to be written to the albums table.

    Built by AlbumService from raw multipart form values, which arrive
    as strings (or not at all).

    Example:
        {
            "artist": "Miles Davis",
            "album_title": "Kind of Blue",
            "release_year": 1959,
            "condition": "Near Mint"
        }
    """

    artist: str = Field(..., min_length=1, description="Performing artist")
    album_title: str = Field(..., min_length=1, description="Release title")

    release_year: int | None = Field(
        default=None,
        ge=1000,
        le=9999,
        description="Year of release"
    )

    condition: AlbumCondition | None = Field(
        default=None,
        description="Record grading"
    )

    personal_notes: str | None = Field(default=None, description="Free-form notes")

    musicbrainz_release_id: str | None = Field(
        default=None,
        description="MusicBrainz release MBID when prefilled from search"
    )

    def to_row(self) -> dict:
        """Columns for insert/update, with the enum flattened to its value."""
        return self.model_dump(mode="json")


class AlbumResponse(BaseModel):
    """
    One album row as stored in the albums table.

    Returned by GET /albums/{id} and inside list/mutation envelopes.
    """

    id: UUID
    user_id: UUID
    musicbrainz_release_id: str | None = None
    artist: str
    album_title: str
    release_year: int | None = None
    cover_art_url: str | None = None
    condition: AlbumCondition | None = None
    personal_notes: str | None = None
    date_added: datetime | None = None
    date_removed: datetime | None = None
    is_active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        """Pydantic configuration for this model."""
        from_attributes = True


class AlbumList(BaseModel):
    """Returned by GET /albums, newest first."""

    albums: list[AlbumResponse] = Field(default_factory=list)


class AlbumMutationResponse(BaseModel):
    """Returned by POST /albums and PUT /albums/{id}."""

    success: bool = True
    album: AlbumResponse
    message: str


class AlbumDeleteResponse(BaseModel):
    """Returned by DELETE /albums/{id}."""

    message: str = "Album deleted successfully"


class AlbumStats(BaseModel):
    """Collection counters for the dashboard."""

    total_albums: int = Field(default=0, ge=0)
    this_month: int = Field(default=0, ge=0, description="Albums added in the current UTC month")


class ArtistList(BaseModel):
    """Distinct artists in the caller's collection, for autocomplete."""

    artists: list[str] = Field(default_factory=list)
