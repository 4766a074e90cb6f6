# =============================================================================
# app/routers/albums.py - Album CRUD Endpoints
# =============================================================================
# Handles adding, listing, editing and deleting albums in the caller's
# collection. Create and update take multipart forms so a cover image can
# travel with the fields.
# All endpoints require authentication.
# =============================================================================

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Path, UploadFile

from app.auth import get_current_user, AuthUser
from app.dependencies import read_image
from core.models.album import (
    AlbumDeleteResponse,
    AlbumList,
    AlbumMutationResponse,
    AlbumResponse,
    AlbumStats,
)
from core.services.album_service import AlbumService

router = APIRouter()


# =============================================================================
# Endpoints
# =============================================================================

@router.post("", response_model=AlbumMutationResponse)
async def create_album(
    user: AuthUser = Depends(get_current_user),
    artist: Annotated[str | None, Form()] = None,
    album_title: Annotated[str | None, Form()] = None,
    release_year: Annotated[str | None, Form()] = None,
    condition: Annotated[str | None, Form()] = None,
    personal_notes: Annotated[str | None, Form()] = None,
    musicbrainz_release_id: Annotated[str | None, Form()] = None,
    cover_art_url: Annotated[str | None, Form(description="External cover URL used when no file is sent")] = None,
    cover_image: Annotated[UploadFile | None, File(description="Cover image")] = None,
):
    """
    Add an album to the collection.

    Artist and album title are required. An uploaded cover image is stored
    in the album-art bucket; if storage rejects it the album is saved
    without art.
    """
    fields = AlbumService.build_fields(
        artist=artist,
        album_title=album_title,
        release_year=release_year,
        condition=condition,
        personal_notes=personal_notes,
        musicbrainz_release_id=musicbrainz_release_id,
    )
    image = await read_image(cover_image)

    album = AlbumService.create_album(
        user_id=user.id,
        fields=fields,
        image=image,
        cover_art_url=cover_art_url,
    )

    return AlbumMutationResponse(
        album=AlbumResponse(**album),
        message="Album added successfully",
    )


@router.get("", response_model=AlbumList)
async def list_albums(user: AuthUser = Depends(get_current_user)):
    """List the caller's albums, most recently added first."""
    albums = AlbumService.list_albums(user.id)
    return AlbumList(albums=[AlbumResponse(**a) for a in albums])


@router.get("/stats", response_model=AlbumStats)
async def album_stats(user: AuthUser = Depends(get_current_user)):
    """Total albums and albums added this month."""
    return AlbumService.get_stats(user.id)


@router.get("/{album_id}", response_model=AlbumResponse)
async def get_album(
    album_id: Annotated[UUID, Path(description="Album UUID")],
    user: AuthUser = Depends(get_current_user),
):
    """Get one album. User must own it."""
    return AlbumResponse(**AlbumService.get_album(album_id, user.id))


@router.put("/{album_id}", response_model=AlbumMutationResponse)
async def update_album(
    album_id: Annotated[UUID, Path(description="Album UUID")],
    user: AuthUser = Depends(get_current_user),
    artist: Annotated[str | None, Form()] = None,
    album_title: Annotated[str | None, Form()] = None,
    release_year: Annotated[str | None, Form()] = None,
    condition: Annotated[str | None, Form()] = None,
    personal_notes: Annotated[str | None, Form()] = None,
    musicbrainz_release_id: Annotated[str | None, Form()] = None,
    cover_art_url: Annotated[str | None, Form(description="External cover URL used when no file is sent")] = None,
    remove_image: Annotated[str | None, Form(description="'true' clears the current cover")] = None,
    cover_image: Annotated[UploadFile | None, File(description="Replacement cover image")] = None,
):
    """
    Replace an album's fields.

    Fields left out of the form are cleared. A new cover image replaces the
    current one; remove_image=true drops it. Otherwise a cover_art_url
    replaces the cover. User must own the album.
    """
    fields = AlbumService.build_fields(
        artist=artist,
        album_title=album_title,
        release_year=release_year,
        condition=condition,
        personal_notes=personal_notes,
        musicbrainz_release_id=musicbrainz_release_id,
    )
    image = await read_image(cover_image)

    album = AlbumService.update_album(
        album_id=album_id,
        user_id=user.id,
        fields=fields,
        image=image,
        remove_image=(remove_image or "").strip().lower() == "true",
        cover_art_url=cover_art_url,
    )

    return AlbumMutationResponse(
        album=AlbumResponse(**album),
        message="Album updated successfully",
    )


@router.delete("/{album_id}", response_model=AlbumDeleteResponse)
async def delete_album(
    album_id: Annotated[UUID, Path(description="Album UUID")],
    user: AuthUser = Depends(get_current_user),
):
    """
    Permanently delete an album and its stored cover image.

    User must own the album.
    """
    AlbumService.delete_album(album_id, user.id)
    return AlbumDeleteResponse()
