# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Errors carry a machine-readable code and, where useful, how to fix them.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class VinylTrackerException(Exception):
    """
    Base exception for the Vinyl Tracker API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "VINYL_TRACKER_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Album Exceptions
# =============================================================================

class AlbumNotFoundError(VinylTrackerException):
    """Raised when an album doesn't exist, isn't active, or isn't owned by the caller."""

    def __init__(self, album_id: str, message: str = "Album not found"):
        super().__init__(
            message=message,
            code="ALBUM_NOT_FOUND",
            status_code=404,
            suggestion="Check that the album_id is correct and the album is in your collection",
            details={"album_id": album_id}
        )


class MissingRequiredFieldsError(VinylTrackerException):
    """Raised when artist or album title is blank."""

    def __init__(self, fields: list[str]):
        super().__init__(
            message="Artist and Album Title are required",
            code="MISSING_REQUIRED_FIELDS",
            status_code=400,
            suggestion="Provide a non-blank artist and album_title",
            details={"fields": fields}
        )


class InvalidFieldError(VinylTrackerException):
    """Raised when a form field can't be parsed or isn't an allowed value."""

    def __init__(self, field: str, value: Any, reason: str):
        super().__init__(
            message=f"Invalid {field}: {reason}",
            code="INVALID_FIELD",
            status_code=400,
            details={"field": field, "value": value}
        )


class DatabaseError(VinylTrackerException):
    """Raised when a Supabase query fails."""

    def __init__(self, message: str, error: str):
        super().__init__(
            message=message,
            code="DATABASE_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"error": error}
        )


# =============================================================================
# Profile Exceptions
# =============================================================================

class NoFieldsToUpdateError(VinylTrackerException):
    """Raised when a profile update carries nothing to change."""

    def __init__(self):
        super().__init__(
            message="No valid fields to update",
            code="NO_FIELDS_TO_UPDATE",
            status_code=400,
            suggestion="Send display_name (string) and/or avatar_url (string or null)",
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class InvalidImageTypeError(VinylTrackerException):
    """Raised when uploaded image type is not allowed."""

    def __init__(self, filename: str, allowed: list[str]):
        super().__init__(
            message=f"Invalid image type: {filename}",
            code="INVALID_IMAGE_TYPE",
            status_code=400,
            suggestion=f"Only these file types are supported: {', '.join(allowed)}",
            details={"filename": filename, "allowed_types": allowed}
        )


class ImageTooLargeError(VinylTrackerException):
    """Raised when uploaded image exceeds size limit."""

    def __init__(self, size_mb: float, max_mb: int):
        super().__init__(
            message=f"Image too large: {size_mb:.1f}MB (max: {max_mb}MB)",
            code="IMAGE_TOO_LARGE",
            status_code=413,
            suggestion=f"Upload an image smaller than {max_mb}MB",
            details={"size_mb": size_mb, "max_mb": max_mb}
        )


class StorageUploadError(VinylTrackerException):
    """Raised when file upload to storage fails."""

    def __init__(self, error: str):
        super().__init__(
            message=f"Failed to upload file to storage: {error}",
            code="STORAGE_UPLOAD_ERROR",
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"error": error}
        )


# =============================================================================
# Metadata Search Exceptions
# =============================================================================

class InvalidSearchQueryError(VinylTrackerException):
    """Raised when a search query is too short to be useful."""

    def __init__(self, query: str | None):
        super().__init__(
            message="Query must be at least 2 characters",
            code="INVALID_SEARCH_QUERY",
            status_code=400,
            details={"query": query}
        )


class MissingReleaseIdError(VinylTrackerException):
    """Raised when a cover art lookup has no MusicBrainz ID."""

    def __init__(self):
        super().__init__(
            message="Missing MusicBrainz ID",
            code="MISSING_RELEASE_ID",
            status_code=400,
            suggestion="Pass the release id as ?mbid=",
        )


class MetadataSearchError(VinylTrackerException):
    """Raised when MusicBrainz can't be reached or answers with an error."""

    def __init__(self, error: str):
        super().__init__(
            message="Failed to search albums",
            code="METADATA_SEARCH_ERROR",
            status_code=500,
            suggestion="MusicBrainz may be rate limiting; wait a moment and retry",
            details={"error": error}
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def vinyl_tracker_exception_handler(
    request: Request,
    exc: VinylTrackerException
) -> JSONResponse:
    """
    Convert VinylTrackerException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )
