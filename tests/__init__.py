# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Vinyl Tracker API:
# - test_models.py: Unit tests for Pydantic model validation
# - test_album_service.py / test_albums_api.py: Album collection
# - test_auth.py / test_session_cookie.py: Authentication and sessions
# - test_metadata.py: MusicBrainz and Cover Art Archive lookups
# - test_dependencies.py: Shared request dependencies
#
# Run tests with: pytest
# =============================================================================
