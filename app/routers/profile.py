# =============================================================================
# app/routers/profile.py - Profile Endpoints
# =============================================================================
# The caller's profile (display name and photo).
# All endpoints require authentication.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile

from app.auth import get_current_user, AuthUser
from app.exceptions import InvalidImageTypeError
from app.config import settings
from app.dependencies import read_image
from core.models.profile import ProfileResponse, ProfileUpdate
from core.services.profile_service import ProfileService

router = APIRouter()


@router.get("", response_model=ProfileResponse)
async def get_profile(user: AuthUser = Depends(get_current_user)):
    """Get the caller's profile, creating an empty one on first visit."""
    return ProfileResponse(**ProfileService.get_or_create_profile(user.id))


@router.patch("", response_model=ProfileResponse)
async def update_profile(
    body: ProfileUpdate,
    user: AuthUser = Depends(get_current_user),
):
    """
    Update display_name and/or avatar_url.

    Send "avatar_url": null to clear the photo reference.
    """
    return ProfileResponse(**ProfileService.update_profile(user.id, body.to_updates()))


@router.post("/avatar", response_model=ProfileResponse)
async def upload_avatar(
    file: Annotated[UploadFile, File(description="Profile photo")],
    user: AuthUser = Depends(get_current_user),
):
    """Upload a new profile photo and set it as the avatar."""
    image = await read_image(file)
    if image is None:
        raise InvalidImageTypeError(file.filename or "", settings.allowed_image_extensions_list)

    return ProfileResponse(**ProfileService.upload_avatar(user.id, image))


@router.delete("/avatar", response_model=ProfileResponse)
async def remove_avatar(user: AuthUser = Depends(get_current_user)):
    """Delete the stored profile photo and clear avatar_url."""
    return ProfileResponse(**ProfileService.remove_avatar(user.id))
