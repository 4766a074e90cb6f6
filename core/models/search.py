# =============================================================================
# core/models/search.py - Metadata Search Schemas
# =============================================================================
# Release search results from MusicBrainz, flattened to what the add-album
# form needs to prefill itself.
# =============================================================================

from pydantic import BaseModel, ConfigDict, Field


# Release-group primary types that can plausibly be pressed on vinyl.
# Releases with no primary type are kept too.
VINYL_RELEASE_TYPES = ("Album", "EP", "Single")


class ReleaseSearchResult(BaseModel):
    """
    One release from a MusicBrainz search.

    Example:
        {
            "id": "f5093c06-23e3-404f-aeaa-40f72885ee3a",
            "title": "Kind of Blue",
            "artist": "Miles Davis",
            "year": "1959",
            "type": "Album",
            "label": "Columbia"
        }
    """

    id: str
    title: str
    artist: str = "Unknown Artist"
    year: str | None = None
    type: str | None = None
    label: str | None = None
    barcode: str | None = None

    @property
    def is_vinyl_candidate(self) -> bool:
        return self.type is None or self.type in VINYL_RELEASE_TYPES


class SearchResponse(BaseModel):
    """Returned by GET /search-albums."""

    results: list[ReleaseSearchResult] = Field(default_factory=list)
    total: int = Field(default=0, ge=0, description="Total matches reported by MusicBrainz")


class CoverArtResponse(BaseModel):
    """Returned by GET /cover-art."""

    model_config = ConfigDict(populate_by_name=True)

    cover_art_url: str | None = Field(default=None, alias="coverArtUrl")
    available: bool = False
