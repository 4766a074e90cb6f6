# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - albums.py: Album CRUD and collection stats
# - artists.py: Artist autocomplete
# - profile.py: Profile and profile photo endpoints
# - search.py: MusicBrainz search and cover art lookup
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import albums
from . import artists
from . import profile
from . import search

__all__ = [
    "health",
    "albums",
    "artists",
    "profile",
    "search",
]
