# =============================================================================
# core/services/album_service.py - Album Business Logic
# =============================================================================
# Handles album CRUD, cover art handling, artist autocomplete and stats.
# Separates HTTP concerns from database/business logic.
#
# The shared Supabase client bypasses RLS, so every query here carries the
# ownership filter user_id = <caller>.
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import UUID, uuid4

from pydantic import ValidationError

from lib.supabase_client import SupabaseClient
from lib.utils import clean_text, normalize_uuid
from app.config import settings
from app.exceptions import (
    AlbumNotFoundError,
    DatabaseError,
    InvalidFieldError,
    MissingRequiredFieldsError,
    StorageUploadError,
)
from core.models.album import AlbumCondition, AlbumFields, AlbumStats
from core.services.storage_service import ImageUpload, StorageService

logger = logging.getLogger(__name__)

TABLE = "albums"


class AlbumService:
    """
    Service for album collection operations.

    Provides a clean interface between API routes and database.
    """

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    @staticmethod
    def build_fields(
        artist: str | None,
        album_title: str | None,
        release_year: str | int | None = None,
        condition: str | None = None,
        personal_notes: str | None = None,
        musicbrainz_release_id: str | None = None,
    ) -> AlbumFields:
        """
        Clean raw form values into AlbumFields.

        Blank optional values become None.

        Raises:
            MissingRequiredFieldsError: If artist or album_title is blank
            InvalidFieldError: If release_year isn't a year or condition isn't a known grade
        """
        artist = clean_text(artist)
        album_title = clean_text(album_title)

        missing = [
            name for name, value in (("artist", artist), ("album_title", album_title))
            if not value
        ]
        if missing:
            raise MissingRequiredFieldsError(missing)

        year = None
        if isinstance(release_year, int):
            year = release_year
        elif clean_text(release_year):
            try:
                year = int(release_year.strip())
            except ValueError:
                raise InvalidFieldError("release_year", release_year, "must be a whole number")

        grade = clean_text(condition)
        if grade is not None and grade not in AlbumCondition.values():
            raise InvalidFieldError(
                "condition",
                grade,
                f"must be one of {', '.join(AlbumCondition.values())}",
            )

        try:
            return AlbumFields(
                artist=artist,
                album_title=album_title,
                release_year=year,
                condition=grade,
                personal_notes=clean_text(personal_notes),
                musicbrainz_release_id=clean_text(musicbrainz_release_id),
            )
        except ValidationError as e:
            error = e.errors()[0]
            field = str(error["loc"][0]) if error.get("loc") else "album"
            raise InvalidFieldError(field, error.get("input"), error["msg"])

    # -------------------------------------------------------------------------
    # Cover Art
    # -------------------------------------------------------------------------

    @staticmethod
    def _upload_cover(user_id: UUID | str, image: ImageUpload) -> str | None:
        """
        Store a cover image at <user_id>/<uuid>.<ext>.

        Returns None when storage rejects the upload; the album is still
        saved, just without art.
        """
        StorageService.validate_image(image)
        path = f"{normalize_uuid(user_id)}/{uuid4()}{image.extension}"

        try:
            return StorageService.upload_image(settings.ALBUM_ART_BUCKET, path, image)
        except StorageUploadError as e:
            logger.warning(f"Continuing without cover art: {e.message}")
            return None

    # -------------------------------------------------------------------------
    # CRUD
    # -------------------------------------------------------------------------

    @staticmethod
    def create_album(
        user_id: UUID | str,
        fields: AlbumFields,
        image: ImageUpload | None = None,
        cover_art_url: str | None = None,
    ) -> dict[str, Any]:
        """
        Add an album to the user's collection.

        Args:
            user_id: Owner of the new album
            fields: Validated album fields
            image: Optional uploaded cover image (wins over cover_art_url)
            cover_art_url: Optional external cover URL, e.g. from Cover Art Archive

        Returns:
            Created album row

        Raises:
            DatabaseError: If the insert fails
        """
        client = SupabaseClient.get_client()

        if image is not None and image.size > 0:
            cover_art_url = AlbumService._upload_cover(user_id, image)
        else:
            cover_art_url = clean_text(cover_art_url)

        data = {
            **fields.to_row(),
            "user_id": normalize_uuid(user_id),
            "cover_art_url": cover_art_url,
            "is_active": True,
        }

        logger.debug(f"Inserting album for user {user_id}: {fields.artist} - {fields.album_title}")

        try:
            response = client.table(TABLE).insert(data).execute()
        except Exception as e:
            logger.error(f"Failed to create album: {e}")
            raise DatabaseError(f"Failed to save album: {e}", str(e))

        if not response.data:
            raise DatabaseError("Failed to save album: insert returned no data", "empty response")

        album = response.data[0]
        logger.info(f"Created album: {album['id']} for user: {user_id}")
        return album

    @staticmethod
    def get_album(
        album_id: str | UUID,
        user_id: UUID | str,
        columns: str = "*",
        not_found_message: str = "Album not found",
    ) -> dict[str, Any]:
        """
        Get an active album the user owns.

        Raises:
            AlbumNotFoundError: If it doesn't exist, is inactive, or belongs to someone else
        """
        client = SupabaseClient.get_client()
        album_id_str = normalize_uuid(album_id)

        try:
            response = (
                client.table(TABLE)
                .select(columns)
                .eq("id", album_id_str)
                .eq("user_id", normalize_uuid(user_id))
                .eq("is_active", True)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.warning(f"Album lookup failed for {album_id_str}: {e}")
            raise AlbumNotFoundError(album_id_str, not_found_message)

        if not response.data:
            raise AlbumNotFoundError(album_id_str, not_found_message)

        return response.data[0]

    @staticmethod
    def list_albums(user_id: UUID | str) -> list[dict[str, Any]]:
        """
        List the user's active albums, newest first.

        Raises:
            DatabaseError: If the query fails
        """
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table(TABLE)
                .select("*")
                .eq("user_id", normalize_uuid(user_id))
                .eq("is_active", True)
                .order("created_at", desc=True)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to list albums: {e}")
            raise DatabaseError("Failed to fetch albums", str(e))

        return response.data or []

    @staticmethod
    def update_album(
        album_id: str | UUID,
        user_id: UUID | str,
        fields: AlbumFields,
        image: ImageUpload | None = None,
        remove_image: bool = False,
        cover_art_url: str | None = None,
    ) -> dict[str, Any]:
        """
        Replace an album's editable fields.

        A new image replaces the current cover; remove_image clears it.
        Without either, a supplied cover_art_url (e.g. from Cover Art Archive)
        replaces the cover. The superseded storage object is removed after
        the row is saved.

        Raises:
            AlbumNotFoundError: If the album isn't the user's
            DatabaseError: If the update fails
        """
        album = AlbumService.get_album(album_id, user_id)
        album_id_str = normalize_uuid(album_id)

        current_url = album.get("cover_art_url")
        new_cover_art_url = current_url
        uploaded = None

        if image is not None and image.size > 0:
            uploaded = AlbumService._upload_cover(user_id, image)
            if uploaded:
                new_cover_art_url = uploaded
        elif remove_image:
            new_cover_art_url = None
        elif clean_text(cover_art_url):
            new_cover_art_url = clean_text(cover_art_url)

        data = {
            **fields.to_row(),
            "cover_art_url": new_cover_art_url,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }

        client = SupabaseClient.get_client()

        try:
            response = (
                client.table(TABLE)
                .update(data)
                .eq("id", album_id_str)
                .eq("user_id", normalize_uuid(user_id))
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to update album {album_id_str}: {e}")
            if uploaded:
                StorageService.delete_by_url(settings.ALBUM_ART_BUCKET, uploaded)
            raise DatabaseError(f"Failed to update album: {e}", str(e))

        if not response.data:
            if uploaded:
                StorageService.delete_by_url(settings.ALBUM_ART_BUCKET, uploaded)
            raise AlbumNotFoundError(album_id_str)

        if current_url and current_url != new_cover_art_url:
            StorageService.delete_by_url(settings.ALBUM_ART_BUCKET, current_url)

        logger.info(f"Updated album: {album_id_str}")
        return response.data[0]

    @staticmethod
    def delete_album(album_id: str | UUID, user_id: UUID | str) -> None:
        """
        Hard delete an album and its stored cover image.

        Storage cleanup is best effort; the row is deleted regardless.

        Raises:
            AlbumNotFoundError: If the album isn't the user's
            DatabaseError: If the delete fails
        """
        album = AlbumService.get_album(
            album_id,
            user_id,
            columns="id, cover_art_url, user_id",
            not_found_message="Album not found or you do not have permission to delete it",
        )
        album_id_str = normalize_uuid(album_id)

        if album.get("cover_art_url"):
            removed = StorageService.delete_by_url(settings.ALBUM_ART_BUCKET, album["cover_art_url"])
            if not removed:
                logger.warning(f"Cover art for album {album_id_str} was not removed from storage")

        client = SupabaseClient.get_client()

        try:
            (
                client.table(TABLE)
                .delete()
                .eq("id", album_id_str)
                .eq("user_id", normalize_uuid(user_id))
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to delete album {album_id_str}: {e}")
            raise DatabaseError(f"Failed to delete album: {e}", str(e))

        logger.info(f"Deleted album: {album_id_str}")

    # -------------------------------------------------------------------------
    # Collection Views
    # -------------------------------------------------------------------------

    @staticmethod
    def list_artists(user_id: UUID | str) -> list[str]:
        """
        Distinct artist names in the user's collection, A-Z.

        Raises:
            DatabaseError: If the query fails
        """
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table(TABLE)
                .select("artist")
                .eq("user_id", normalize_uuid(user_id))
                .not_.is_("artist", "null")
                .order("artist")
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to list artists: {e}")
            raise DatabaseError("Failed to fetch artists", str(e))

        # Rows arrive sorted, so first-seen order is alphabetical
        names = (row.get("artist") for row in response.data or [])
        return list(dict.fromkeys(name for name in names if name))

    @staticmethod
    def get_stats(user_id: UUID | str, now: datetime | None = None) -> AlbumStats:
        """
        Count active albums overall and added this calendar month (UTC).

        Raises:
            DatabaseError: If a count query fails
        """
        client = SupabaseClient.get_client()
        now = now or datetime.now(timezone.utc)
        month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

        def count_query():
            return (
                client.table(TABLE)
                .select("id", count="exact")
                .eq("user_id", normalize_uuid(user_id))
                .eq("is_active", True)
            )

        try:
            total = count_query().execute().count or 0
            this_month = (
                count_query()
                .gte("created_at", month_start.isoformat())
                .execute()
                .count
                or 0
            )
        except Exception as e:
            logger.error(f"Failed to compute album stats: {e}")
            raise DatabaseError("Failed to fetch album stats", str(e))

        return AlbumStats(total_albums=total, this_month=this_month)
