# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Handles image upload/removal for the album-art and profile-photos buckets.
# Rows reference images by public URL; removal maps the URL back to an
# object key with lib.storage_paths.
# =============================================================================

import logging
from dataclasses import dataclass

from lib.supabase_client import SupabaseClient
from lib.storage_paths import StoragePathError, extract_object_path
from lib.utils import file_extension
from app.config import settings
from app.exceptions import ImageTooLargeError, InvalidImageTypeError, StorageUploadError

logger = logging.getLogger(__name__)


@dataclass
class ImageUpload:
    """An image read from a multipart request."""

    filename: str
    content: bytes
    content_type: str | None = None

    @property
    def extension(self) -> str:
        return file_extension(self.filename)

    @property
    def size(self) -> int:
        return len(self.content)


class StorageService:
    """
    Service for Supabase Storage operations.

    Handles uploading and deleting images in storage buckets.
    """

    @staticmethod
    def validate_image(image: ImageUpload) -> None:
        """
        Check an image's extension and size against the upload settings.

        Raises:
            InvalidImageTypeError: If the extension isn't allowed
            ImageTooLargeError: If the image exceeds MAX_IMAGE_SIZE_MB
        """
        allowed = settings.allowed_image_extensions_list
        if image.extension not in allowed:
            raise InvalidImageTypeError(image.filename, allowed)

        if image.size > settings.max_image_size_bytes:
            raise ImageTooLargeError(image.size / (1024 * 1024), settings.MAX_IMAGE_SIZE_MB)

    @staticmethod
    def upload_image(
        bucket: str,
        path: str,
        image: ImageUpload,
        upsert: bool = False,
    ) -> str:
        """
        Upload an image and return its public URL.

        Args:
            bucket: Storage bucket name
            path: Object key inside the bucket (e.g. "<user_id>/<uuid>.jpg")
            image: The image to store
            upsert: Overwrite an existing object at the same key

        Returns:
            Public URL of the uploaded object

        Raises:
            StorageUploadError: If upload fails
        """
        client = SupabaseClient.get_client()

        file_options = {
            "cache-control": settings.STORAGE_CACHE_CONTROL,
            "upsert": "true" if upsert else "false",
        }
        if image.content_type:
            file_options["content-type"] = image.content_type

        logger.debug(f"Uploading {bucket}/{path} ({image.size} bytes)")

        try:
            client.storage.from_(bucket).upload(
                path=path,
                file=image.content,
                file_options=file_options,
            )
        except Exception as e:
            logger.error(f"Storage upload failed for {bucket}/{path}: {e}")
            raise StorageUploadError(str(e))

        public_url = StorageService.get_public_url(bucket, path)
        logger.info(f"Uploaded image to storage: {bucket}/{path}")
        return public_url

    @staticmethod
    def get_public_url(bucket: str, path: str) -> str:
        """
        Get a public URL for a storage file.

        Args:
            bucket: Storage bucket name
            path: Object key inside the bucket

        Returns:
            Public URL string
        """
        client = SupabaseClient.get_client()
        return client.storage.from_(bucket).get_public_url(path)

    @staticmethod
    def delete_file(bucket: str, path: str) -> bool:
        """
        Delete a file from storage.

        Returns:
            True if deleted successfully
        """
        client = SupabaseClient.get_client()

        try:
            client.storage.from_(bucket).remove([path])
            logger.info(f"Deleted file from storage: {bucket}/{path}")
            return True

        except Exception as e:
            logger.error(f"Failed to delete file {bucket}/{path}: {e}")
            return False

    @staticmethod
    def delete_by_url(bucket: str, url: str | None) -> bool:
        """
        Delete the object a public URL points at.

        Images are secondary to the rows that reference them, so failures
        are logged and reported as False rather than raised.

        Args:
            bucket: Storage bucket the URL belongs to
            url: Public URL (or bare object key) stored on the row

        Returns:
            True if the object was removed
        """
        if not url:
            return False

        try:
            path = extract_object_path(url, bucket)
        except StoragePathError as e:
            logger.warning(f"Skipping storage cleanup: {e.message}")
            return False

        logger.debug(f"Extracted file path for deletion: {path}")
        return StorageService.delete_file(bucket, path)
