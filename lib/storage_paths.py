# =============================================================================
# lib/storage_paths.py - Storage Object Keys from Public URLs
# =============================================================================
# Albums and profiles store the *public URL* of their image, but Supabase
# Storage removes objects by key. Public URLs look like:
#
#   https://<ref>.supabase.co/storage/v1/object/public/<bucket>/<key>
#
# so the key is everything after the bucket-name segment.
# =============================================================================

import re
from urllib.parse import unquote, urlparse

from lib.utils import ApplicationError


class StoragePathError(ApplicationError):
    """Raised when no object key can be found in a storage URL."""

    def __init__(self, url: str, bucket: str):
        super().__init__(
            message=f"Could not extract file path from URL: {url}",
            code="STORAGE_PATH_ERROR",
            suggestion=f"Expected a public URL containing '/{bucket}/<path>'",
            details={"url": url, "bucket": bucket},
        )


def extract_object_path(url_or_path: str, bucket: str) -> str:
    """
    Return the object key inside `bucket` referenced by a public URL.

    Values that aren't URLs are taken to be keys already.

    Example:
        extract_object_path(
            "https://x.supabase.co/storage/v1/object/public/album-art/u1/a.jpg",
            "album-art",
        )  # "u1/a.jpg"

    Raises:
        StoragePathError: If the URL doesn't contain the bucket segment
    """
    if not url_or_path.startswith("http"):
        return url_or_path

    path = urlparse(url_or_path).path
    parts = path.split("/")

    if bucket in parts:
        index = parts.index(bucket)
        key = "/".join(parts[index + 1:])
        if key:
            return unquote(key)

    match = re.search(rf"/{re.escape(bucket)}/(.+)$", path)
    if match:
        return unquote(match.group(1))

    raise StoragePathError(url_or_path, bucket)
