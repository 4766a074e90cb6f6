# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Provides a chainable fake for Supabase query builders
# - Provides an authenticated TestClient
# =============================================================================

import os
import time

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-for-hs256-signing")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

from unittest.mock import MagicMock, patch
from uuid import UUID

import pytest
from fastapi.testclient import TestClient
from jose import jwt

USER_ID = UUID("11111111-1111-4111-8111-111111111111")
OTHER_USER_ID = UUID("22222222-2222-4222-8222-222222222222")
ALBUM_ID = UUID("33333333-3333-4333-8333-333333333333")

STORAGE_PUBLIC = "https://test-project.supabase.co/storage/v1/object/public"

# Builder methods that return the query itself in postgrest-py
QUERY_METHODS = (
    "select", "insert", "update", "upsert", "delete",
    "eq", "neq", "gte", "is_", "order", "limit",
)


def make_response(data=None, count=None):
    """Stand-in for a postgrest APIResponse."""
    return MagicMock(data=data, count=count)


def make_query(*responses):
    """
    Chainable fake query builder.

    Each execute() returns the next response in order.
    """
    query = MagicMock()
    for method in QUERY_METHODS:
        getattr(query, method).return_value = query
    query.not_ = query
    query.execute.side_effect = list(responses) or [make_response(data=[])]
    return query


def make_token(
    sub: str = str(USER_ID),
    email: str | None = "collector@example.com",
    expires_in: int = 3600,
    audience: str = "authenticated",
) -> str:
    """Sign an HS256 access token like Supabase Auth does."""
    now = int(time.time())
    claims = {
        "sub": sub,
        "aud": audience,
        "exp": now + expires_in,
        "iat": now,
        "role": "authenticated",
    }
    if email:
        claims["email"] = email
    return jwt.encode(claims, os.environ["SUPABASE_JWT_SECRET"], algorithm="HS256")


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def supabase():
    """
    Patch every service's Supabase client with one MagicMock.

    Tests set `supabase.table.return_value = make_query(...)` and inspect
    `supabase.storage.from_.return_value` (the bucket).
    """
    client = MagicMock()
    from_ = client.storage.from_
    from_.return_value.get_public_url.side_effect = (
        lambda path: f"{STORAGE_PUBLIC}/{from_.call_args[0][0]}/{path}"
    )

    targets = (
        "core.services.album_service.SupabaseClient",
        "core.services.profile_service.SupabaseClient",
        "core.services.storage_service.SupabaseClient",
    )
    patchers = [patch(target) for target in targets]
    for patcher in patchers:
        mock = patcher.start()
        mock.get_client.return_value = client

    yield client

    for patcher in patchers:
        patcher.stop()


@pytest.fixture
def app():
    from app.main import app as fastapi_app
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """Authenticated TestClient acting as USER_ID."""
    from app.auth import get_current_user, AuthUser

    app.dependency_overrides[get_current_user] = lambda: AuthUser(
        id=USER_ID, email="collector@example.com"
    )
    return TestClient(app)


@pytest.fixture
def anon_client(app):
    """TestClient with no auth override."""
    return TestClient(app)


@pytest.fixture
def sample_album():
    """Album row as returned by Supabase."""
    return {
        "id": str(ALBUM_ID),
        "user_id": str(USER_ID),
        "musicbrainz_release_id": None,
        "artist": "Miles Davis",
        "album_title": "Kind of Blue",
        "release_year": 1959,
        "cover_art_url": f"{STORAGE_PUBLIC}/album-art/{USER_ID}/cover.jpg",
        "condition": "Near Mint",
        "personal_notes": "Six-eye Columbia pressing",
        "date_added": "2024-01-15T10:30:00+00:00",
        "date_removed": None,
        "is_active": True,
        "created_at": "2024-01-15T10:30:00+00:00",
        "updated_at": "2024-01-15T10:30:00+00:00",
    }


@pytest.fixture
def sample_profile():
    """Profile row as returned by Supabase."""
    return {
        "id": str(USER_ID),
        "display_name": "Crate Digger",
        "avatar_url": f"{STORAGE_PUBLIC}/profile-photos/{USER_ID}/1700000000000.png",
        "created_at": "2024-01-01T00:00:00+00:00",
    }
