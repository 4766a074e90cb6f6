# =============================================================================
# app/dependencies.py - Shared Request Helpers
# =============================================================================
# Helpers shared by several routers.
# =============================================================================

from fastapi import UploadFile

from core.services.storage_service import ImageUpload


async def read_image(upload: UploadFile | None) -> ImageUpload | None:
    """
    Read an optional multipart file.

    Browsers submit an empty part for an untouched file input, so a part
    with no filename or no bytes counts as absent.
    """
    if upload is None or not upload.filename:
        return None

    content = await upload.read()
    if not content:
        return None

    return ImageUpload(
        filename=upload.filename,
        content=content,
        content_type=upload.content_type,
    )
