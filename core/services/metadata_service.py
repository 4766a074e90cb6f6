# =============================================================================
# core/services/metadata_service.py - MusicBrainz & Cover Art Archive
# =============================================================================
# Read-only lookups used to prefill the add-album form:
# - search_releases: MusicBrainz release search, flattened and filtered
# - find_cover_art: whether Cover Art Archive has a front cover for a release
#
# MusicBrainz requires a descriptive User-Agent on every request.
# =============================================================================

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from app.config import settings
from app.exceptions import InvalidSearchQueryError, MetadataSearchError, MissingReleaseIdError
from core.models.search import CoverArtResponse, ReleaseSearchResult, SearchResponse

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2


def parse_release(release: dict[str, Any]) -> ReleaseSearchResult:
    """
    Flatten one MusicBrainz release into a search result.

    Example:
        parse_release({
            "id": "abc",
            "title": "Blue Train",
            "date": "1958-01",
            "artist-credit": [{"name": "John Coltrane"}],
        })
        # ReleaseSearchResult(id="abc", title="Blue Train", artist="John Coltrane", year="1958")
    """
    credits = release.get("artist-credit") or []
    artist = credits[0].get("name") if credits else None

    date = release.get("date")
    year = date.split("-")[0] if date else None

    labels = release.get("label-info") or []
    label = (labels[0].get("label") or {}).get("name") if labels else None

    return ReleaseSearchResult(
        id=release["id"],
        title=release.get("title") or "",
        artist=artist or "Unknown Artist",
        year=year or None,
        type=(release.get("release-group") or {}).get("primary-type"),
        label=label,
        barcode=release.get("barcode") or None,
    )


class MetadataService:
    """
    Service for third-party release metadata.

    `transport` lets tests route requests to an httpx.MockTransport.
    """

    transport: httpx.AsyncBaseTransport | None = None

    @classmethod
    def _client(cls) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=settings.METADATA_TIMEOUT_SECONDS,
            headers={"User-Agent": settings.METADATA_USER_AGENT},
            follow_redirects=True,
            transport=cls.transport,
        )

    @classmethod
    async def search_releases(cls, query: str | None) -> SearchResponse:
        """
        Search MusicBrainz releases and keep likely vinyl formats.

        Args:
            query: Free-text search, at least 2 characters after trimming

        Returns:
            SearchResponse with results and MusicBrainz's total match count

        Raises:
            InvalidSearchQueryError: If the query is too short
            MetadataSearchError: If MusicBrainz fails or answers garbage
        """
        query = (query or "").strip()
        if len(query) < MIN_QUERY_LENGTH:
            raise InvalidSearchQueryError(query)

        url = f"{settings.MUSICBRAINZ_BASE_URL.rstrip('/')}/release/"
        params = {"query": query, "fmt": "json", "limit": settings.SEARCH_RESULT_LIMIT}

        try:
            async with cls._client() as client:
                response = await client.get(
                    url,
                    params=params,
                    headers={"Accept": "application/json"},
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"MusicBrainz API error: {e.response.status_code}")
            raise MetadataSearchError(f"MusicBrainz API error: {e.response.status_code}")
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Search error: {e}")
            raise MetadataSearchError(str(e))

        try:
            releases = [parse_release(r) for r in data.get("releases", [])]
        except (KeyError, AttributeError, TypeError, ValidationError) as e:
            logger.error(f"Unexpected MusicBrainz payload: {e}")
            raise MetadataSearchError(f"Unexpected response format: {e}")

        results = [r for r in releases if r.is_vinyl_candidate]
        logger.debug(f"Search '{query}': {len(results)}/{len(releases)} releases kept")

        return SearchResponse(results=results, total=data.get("count", 0))

    @classmethod
    async def find_cover_art(cls, mbid: str | None) -> CoverArtResponse:
        """
        Check whether Cover Art Archive has a front cover for a release.

        Unavailability and network failures both answer available=False.

        Raises:
            MissingReleaseIdError: If mbid is blank
        """
        mbid = (mbid or "").strip()
        if not mbid:
            raise MissingReleaseIdError()

        cover_art_url = f"{settings.COVER_ART_ARCHIVE_URL.rstrip('/')}/release/{mbid}/front"

        try:
            async with cls._client() as client:
                response = await client.head(cover_art_url)
        except httpx.HTTPError as e:
            logger.info(f"Cover art not available for {mbid}: {e}")
            return CoverArtResponse(cover_art_url=None, available=False)

        if response.is_success:
            return CoverArtResponse(cover_art_url=cover_art_url, available=True)

        logger.debug(f"No cover art for {mbid} (HTTP {response.status_code})")
        return CoverArtResponse(cover_art_url=None, available=False)
