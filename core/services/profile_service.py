# =============================================================================
# core/services/profile_service.py - Profile Business Logic
# =============================================================================
# Handles the profiles table (one row per auth user, keyed by user id) and
# profile photo storage.
# =============================================================================

import logging
import time
from typing import Any
from uuid import UUID

from lib.supabase_client import SupabaseClient
from lib.utils import normalize_uuid
from app.config import settings
from app.exceptions import DatabaseError, NoFieldsToUpdateError
from core.models.profile import PROFILE_COLUMNS
from core.services.storage_service import ImageUpload, StorageService

logger = logging.getLogger(__name__)

TABLE = "profiles"


class ProfileService:
    """Service for user profile operations."""

    @staticmethod
    def fetch_profile(user_id: UUID | str) -> dict[str, Any] | None:
        """
        Fetch a profile row, or None if the user has none yet.

        Raises:
            DatabaseError: If the query fails
        """
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table(TABLE)
                .select(PROFILE_COLUMNS)
                .eq("id", normalize_uuid(user_id))
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to fetch profile: {e}")
            raise DatabaseError(f"Failed to fetch profile: {e}", str(e))

        return response.data[0] if response.data else None

    @staticmethod
    def get_or_create_profile(user_id: UUID | str) -> dict[str, Any]:
        """
        Fetch the user's profile, creating an empty one on first access.

        Raises:
            DatabaseError: If the query or insert fails
        """
        profile = ProfileService.fetch_profile(user_id)
        if profile:
            return profile

        client = SupabaseClient.get_client()
        data = {
            "id": normalize_uuid(user_id),
            "display_name": None,
            "avatar_url": None,
        }

        try:
            response = client.table(TABLE).insert(data).execute()
        except Exception as e:
            logger.error(f"Failed to create profile: {e}")
            raise DatabaseError(f"Failed to create profile: {e}", str(e))

        if not response.data:
            raise DatabaseError("Failed to create profile: insert returned no data", "empty response")

        logger.info(f"Created profile for user: {user_id}")
        return response.data[0]

    @staticmethod
    def update_profile(user_id: UUID | str, updates: dict[str, Any]) -> dict[str, Any]:
        """
        Upsert profile fields.

        Args:
            user_id: Profile owner
            updates: Columns to write (display_name and/or avatar_url)

        Raises:
            NoFieldsToUpdateError: If updates is empty
            DatabaseError: If the upsert fails
        """
        if not updates:
            raise NoFieldsToUpdateError()

        client = SupabaseClient.get_client()
        data = {"id": normalize_uuid(user_id), **updates}

        try:
            response = client.table(TABLE).upsert(data, on_conflict="id").execute()
        except Exception as e:
            logger.error(f"Failed to update profile: {e}")
            raise DatabaseError(f"Failed to update profile: {e}", str(e))

        if not response.data:
            raise DatabaseError("Failed to update profile: upsert returned no data", "empty response")

        logger.info(f"Updated profile for user {user_id}: {sorted(updates)}")
        return response.data[0]

    @staticmethod
    def upload_avatar(user_id: UUID | str, image: ImageUpload) -> dict[str, Any]:
        """
        Store a new profile photo and point the profile at it.

        The previous photo, if any, is removed once the profile is updated.

        Raises:
            InvalidImageTypeError / ImageTooLargeError: If the image is rejected
            StorageUploadError: If storage rejects the upload
        """
        StorageService.validate_image(image)

        previous = ProfileService.fetch_profile(user_id)
        path = f"{normalize_uuid(user_id)}/{int(time.time() * 1000)}{image.extension}"
        avatar_url = StorageService.upload_image(
            settings.PROFILE_PHOTO_BUCKET,
            path,
            image,
            upsert=True,
        )

        profile = ProfileService.update_profile(user_id, {"avatar_url": avatar_url})

        old_url = previous.get("avatar_url") if previous else None
        if old_url and old_url != avatar_url:
            StorageService.delete_by_url(settings.PROFILE_PHOTO_BUCKET, old_url)

        return profile

    @staticmethod
    def remove_avatar(user_id: UUID | str) -> dict[str, Any]:
        """Delete the stored profile photo and clear avatar_url."""
        profile = ProfileService.get_or_create_profile(user_id)

        if profile.get("avatar_url"):
            StorageService.delete_by_url(settings.PROFILE_PHOTO_BUCKET, profile["avatar_url"])

        return ProfileService.update_profile(user_id, {"avatar_url": None})
