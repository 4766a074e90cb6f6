# =============================================================================
# core/models/profile.py - User Profile Schemas
# =============================================================================
# A profile row shares its id with the auth user and carries display
# details shown on the account page.
# =============================================================================

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


# Columns returned by every profile query
PROFILE_COLUMNS = "id, display_name, avatar_url, created_at"


class ProfileResponse(BaseModel):
    """Profile row returned by GET/PATCH /profile."""

    id: UUID
    display_name: str | None = None
    avatar_url: str | None = None
    created_at: datetime | None = None


class ProfileUpdate(BaseModel):
    """
    PATCH /profile body.

    display_name is applied only when it is a string. avatar_url is
    applied whenever the key is present, so an explicit null clears it.

    Example:
        {"display_name": "Crate Digger"}
        {"avatar_url": null}
    """

    display_name: str | None = None
    avatar_url: str | None = None

    def to_updates(self) -> dict:
        """Fields the client actually sent, filtered by the rules above."""
        updates = {}
        if isinstance(self.display_name, str):
            updates["display_name"] = self.display_name
        if "avatar_url" in self.model_fields_set:
            updates["avatar_url"] = self.avatar_url
        return updates
