# =============================================================================
# app/routers/search.py - Metadata Search Endpoints
# =============================================================================
# Public lookups against MusicBrainz and Cover Art Archive used to prefill
# the add-album form. No authentication required.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Query

from core.models.search import CoverArtResponse, SearchResponse
from core.services.metadata_service import MetadataService

router = APIRouter()


@router.get("/search-albums", response_model=SearchResponse)
async def search_albums(
    q: Annotated[str | None, Query(description="Search text, at least 2 characters")] = None,
):
    """
    Search MusicBrainz releases.

    Only releases typed Album, EP or Single (or untyped) are returned.
    """
    return await MetadataService.search_releases(q)


@router.get("/cover-art", response_model=CoverArtResponse)
async def cover_art(
    mbid: Annotated[str | None, Query(description="MusicBrainz release ID")] = None,
):
    """Look up a release's front cover on Cover Art Archive."""
    return await MetadataService.find_cover_art(mbid)
