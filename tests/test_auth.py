# =============================================================================
# tests/test_auth.py - Authentication Tests
# =============================================================================
# This module contains tests for:
# - Access token verification
# - Cookie and Bearer token extraction through a protected route
# - The auth callback redirects and session cookie
# - Logout
# =============================================================================

import time
from unittest.mock import MagicMock, patch

import pytest
from fastapi import HTTPException
from jose import jwt

from app.auth.dependencies import verify_access_token
from app.auth.session import encode_session_value
from app.config import settings
from tests.conftest import OTHER_USER_ID, USER_ID, make_query, make_response, make_token

COOKIE = settings.session_cookie_name


# =============================================================================
# Token Verification
# =============================================================================

class TestVerifyAccessToken:
    """Test verify_access_token."""

    def test_valid_token(self):
        user = verify_access_token(make_token())

        assert user.id == USER_ID
        assert user.email == "collector@example.com"

    def test_expired_token(self):
        with pytest.raises(HTTPException) as exc_info:
            verify_access_token(make_token(expires_in=-60))

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Token has expired"

    def test_wrong_audience(self):
        with pytest.raises(HTTPException) as exc_info:
            verify_access_token(make_token(audience="anon"))
        assert exc_info.value.status_code == 401

    def test_non_uuid_subject(self):
        with pytest.raises(HTTPException) as exc_info:
            verify_access_token(make_token(sub="not-a-uuid"))
        assert exc_info.value.detail == "Invalid token: malformed user ID"

    def test_garbage_token(self):
        with pytest.raises(HTTPException) as exc_info:
            verify_access_token("abc.def.ghi")
        assert exc_info.value.status_code == 401

    def test_hs256_rejected_without_secret(self, monkeypatch):
        """An unset legacy secret must not turn into an empty HS256 key."""
        forged = jwt.encode(
            {"sub": str(USER_ID), "aud": "authenticated", "exp": int(time.time()) + 3600},
            "",
            algorithm="HS256",
        )
        monkeypatch.setattr(settings, "SUPABASE_JWT_SECRET", "")

        with pytest.raises(HTTPException) as exc_info:
            verify_access_token(forged)

        assert exc_info.value.status_code == 401

    def test_unknown_kid_rejected(self):
        """A kid missing from the JWKS is refused, not retried as HS256."""
        token = make_token()
        with patch("app.auth.dependencies.jwt.get_unverified_header",
                   return_value={"alg": "ES256", "kid": "rotated-away"}), \
             patch("app.auth.dependencies._fetch_jwks", return_value={"keys": []}):
            with pytest.raises(HTTPException) as exc_info:
                verify_access_token(token)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Invalid token: unknown signing key"


# =============================================================================
# Token Extraction
# =============================================================================

class TestProtectedRoute:
    """Auth through the real dependency on GET /api/auth/verify."""

    def test_session_cookie(self, anon_client):
        session = {"access_token": make_token(), "refresh_token": "r"}
        anon_client.cookies.set(COOKIE, encode_session_value(session))

        response = anon_client.get("/api/auth/verify")

        assert response.status_code == 200
        assert response.json() == {
            "valid": True,
            "user_id": str(USER_ID),
            "email": "collector@example.com",
        }

    def test_bearer_header(self, anon_client):
        response = anon_client.get(
            "/api/auth/verify",
            headers={"Authorization": f"Bearer {make_token()}"},
        )
        assert response.status_code == 200

    def test_cookie_wins_over_bearer(self, anon_client):
        session = {"access_token": make_token(), "refresh_token": "r"}
        anon_client.cookies.set(COOKIE, encode_session_value(session))

        response = anon_client.get(
            "/api/auth/verify",
            headers={"Authorization": f"Bearer {make_token(sub=str(OTHER_USER_ID))}"},
        )

        assert response.status_code == 200
        assert response.json()["user_id"] == str(USER_ID)

    def test_no_credentials(self, anon_client):
        response = anon_client.get("/api/auth/verify")

        assert response.status_code == 401
        assert response.json()["detail"] == "Not authenticated"

    def test_albums_require_auth(self, anon_client):
        assert anon_client.get("/api/albums").status_code == 401
        assert anon_client.get("/api/artists").status_code == 401
        assert anon_client.get("/api/profile").status_code == 401


class TestMe:
    """Test GET /api/auth/me."""

    def test_with_profile(self, client, supabase, sample_profile):
        supabase.table.return_value = make_query(make_response(data=[sample_profile]))

        body = client.get("/api/auth/me").json()

        assert body["id"] == str(USER_ID)
        assert body["display_name"] == "Crate Digger"

    def test_without_profile(self, client, supabase):
        supabase.table.return_value = make_query(make_response(data=[]))

        body = client.get("/api/auth/me").json()

        assert body["email"] == "collector@example.com"
        assert body["display_name"] is None


# =============================================================================
# Auth Callback
# =============================================================================

def _auth_client_with_session(access="new-access", refresh="new-refresh"):
    session = MagicMock(access_token=access, refresh_token=refresh)
    session.model_dump.return_value = {
        "access_token": access,
        "refresh_token": refresh,
        "token_type": "bearer",
    }
    auth_client = MagicMock()
    auth_client.auth.exchange_code_for_session.return_value = MagicMock(session=session)
    return auth_client


class TestAuthCallback:
    """Test GET /api/auth/callback."""

    def test_missing_code_redirects_to_login(self, anon_client):
        response = anon_client.get("/api/auth/callback", follow_redirects=False)

        assert response.status_code == 307
        assert response.headers["location"] == "http://testserver/auth/login?error=auth_callback_error"

    def test_success_sets_cookie_and_redirects(self, anon_client):
        auth_client = _auth_client_with_session()
        anon_client.cookies.set(f"{COOKIE}-code-verifier", '"verifier-123"')

        with patch("app.auth.routes.SupabaseClient") as mock:
            mock.create_auth_client.return_value = auth_client
            response = anon_client.get(
                "/api/auth/callback?code=abc",
                follow_redirects=False,
            )

        assert response.status_code == 307
        assert response.headers["location"] == "http://testserver/dashboard"
        auth_client.auth.exchange_code_for_session.assert_called_once_with(
            {"auth_code": "abc", "code_verifier": "verifier-123"}
        )

        set_cookies = response.headers.get_list("set-cookie")
        assert any(c.startswith(f"{COOKIE}=base64-") for c in set_cookies)

    def test_next_parameter(self, anon_client):
        with patch("app.auth.routes.SupabaseClient") as mock:
            mock.create_auth_client.return_value = _auth_client_with_session()
            response = anon_client.get(
                "/api/auth/callback?code=abc&next=/dashboard/collection",
                follow_redirects=False,
            )

        assert response.headers["location"] == "http://testserver/dashboard/collection"

    def test_offsite_next_is_ignored(self, anon_client):
        with patch("app.auth.routes.SupabaseClient") as mock:
            mock.create_auth_client.return_value = _auth_client_with_session()
            response = anon_client.get(
                "/api/auth/callback?code=abc&next=//evil.example.com",
                follow_redirects=False,
            )

        assert response.headers["location"] == "http://testserver/dashboard"

    def test_recovery_redirects_to_reset_page(self, anon_client):
        with patch("app.auth.routes.SupabaseClient") as mock:
            mock.create_auth_client.return_value = _auth_client_with_session("acc", "ref")
            response = anon_client.get(
                "/api/auth/callback?code=abc&type=recovery",
                follow_redirects=False,
            )

        assert response.headers["location"] == (
            "http://testserver/auth/reset-password?access_token=acc&refresh_token=ref"
        )

    def test_forwarded_host_outside_development(self, anon_client, monkeypatch):
        monkeypatch.setattr(settings, "ENVIRONMENT", "production")

        with patch("app.auth.routes.SupabaseClient") as mock:
            mock.create_auth_client.return_value = _auth_client_with_session()
            response = anon_client.get(
                "/api/auth/callback?code=abc",
                headers={"x-forwarded-host": "vinyl.example.com"},
                follow_redirects=False,
            )

        assert response.headers["location"] == "https://vinyl.example.com/dashboard"

    def test_exchange_failure_redirects_to_login(self, anon_client):
        auth_client = MagicMock()
        auth_client.auth.exchange_code_for_session.side_effect = Exception("invalid grant")

        with patch("app.auth.routes.SupabaseClient") as mock:
            mock.create_auth_client.return_value = auth_client
            response = anon_client.get("/api/auth/callback?code=bad", follow_redirects=False)

        assert response.headers["location"].endswith("/auth/login?error=auth_callback_error")

    def test_post_not_allowed(self, anon_client):
        assert anon_client.post("/api/auth/callback").status_code == 405


# =============================================================================
# Logout
# =============================================================================

class TestLogout:
    """Test /api/auth/logout."""

    def _login(self, client):
        client.cookies.set(COOKIE, encode_session_value({"access_token": "tok", "refresh_token": "r"}))

    def test_post_logout(self, anon_client):
        self._login(anon_client)

        with patch("app.auth.routes.SupabaseClient") as mock:
            response = anon_client.post("/api/auth/logout", follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "http://testserver/"
        mock.get_client.return_value.auth.admin.sign_out.assert_called_once_with("tok")
        assert any(
            c.startswith(f"{COOKIE}=") and "Max-Age=0" in c
            for c in response.headers.get_list("set-cookie")
        )

    def test_post_logout_failure(self, anon_client):
        self._login(anon_client)

        with patch("app.auth.routes.SupabaseClient") as mock:
            mock.get_client.return_value.auth.admin.sign_out.side_effect = Exception("down")
            response = anon_client.post("/api/auth/logout", follow_redirects=False)

        assert response.status_code == 500
        assert response.json()["detail"] == "Logout failed"

    def test_get_logout_redirects_even_on_failure(self, anon_client):
        self._login(anon_client)

        with patch("app.auth.routes.SupabaseClient") as mock:
            mock.get_client.return_value.auth.admin.sign_out.side_effect = Exception("down")
            response = anon_client.get("/api/auth/logout", follow_redirects=False)

        assert response.status_code == 303
