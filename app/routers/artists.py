# =============================================================================
# app/routers/artists.py - Artist Autocomplete
# =============================================================================

from fastapi import APIRouter, Depends

from app.auth import get_current_user, AuthUser
from core.models.album import ArtistList
from core.services.album_service import AlbumService

router = APIRouter()


@router.get("/artists", response_model=ArtistList)
async def list_artists(user: AuthUser = Depends(get_current_user)):
    """Distinct artists in the caller's collection, A-Z."""
    return ArtistList(artists=AlbumService.list_artists(user.id))
