# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for authentication-related operations.
#
# Sign-up and password login are handled by Supabase Auth client-side.
# These routes cover what needs the server: the email/OAuth callback that
# turns an auth code into a session cookie, logout, and user info.
# =============================================================================

import logging
from typing import Annotated
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse, RedirectResponse

from app.auth.dependencies import extract_access_token, get_current_user
from app.auth.models import AuthUser, UserResponse
from app.auth.session import clear_session_cookie, write_session_cookie
from app.config import settings
from app.exceptions import VinylTrackerException
from core.services.profile_service import ProfileService
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

router = APIRouter()

DEFAULT_NEXT = "/dashboard"
LOGIN_ERROR_PATH = "/auth/login?error=auth_callback_error"
RESET_PASSWORD_PATH = "/auth/reset-password"


def _redirect_base(request: Request) -> str:
    """
    Origin to send the browser back to.

    Behind a proxy the request origin is the internal one, so outside
    development x-forwarded-host wins when present.
    """
    origin = f"{request.url.scheme}://{request.url.netloc}"
    forwarded_host = request.headers.get("x-forwarded-host")

    if settings.is_development or not forwarded_host:
        return origin
    return f"https://{forwarded_host}"


def _safe_next(next_path: str | None) -> str:
    """Only same-site relative paths are allowed as redirect targets."""
    if not next_path or not next_path.startswith("/") or next_path.startswith("//"):
        return DEFAULT_NEXT
    return next_path


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    user: AuthUser = Depends(get_current_user)
) -> UserResponse:
    """
    Get the current authenticated user with profile fields.

    Raises:
        401: If not authenticated
    """
    try:
        profile = ProfileService.fetch_profile(user.id)
        if profile:
            return UserResponse(
                id=user.id,
                email=user.email,
                display_name=profile.get("display_name"),
                avatar_url=profile.get("avatar_url"),
                created_at=profile.get("created_at"),
            )
    except VinylTrackerException as e:
        logger.warning(f"Could not fetch user profile: {e.message}")

    return UserResponse(id=user.id, email=user.email)


@router.get("/verify")
async def verify_token(
    user: AuthUser = Depends(get_current_user)
) -> dict:
    """
    Verify that the current session is valid.

    Raises:
        401: If token is invalid or expired
    """
    return {
        "valid": True,
        "user_id": str(user.id),
        "email": user.email
    }


@router.get("/callback")
async def auth_callback(
    request: Request,
    code: Annotated[str | None, Query(description="Auth code from Supabase")] = None,
    flow_type: Annotated[str | None, Query(alias="type", description="'recovery' for password reset")] = None,
    next_path: Annotated[str | None, Query(alias="next", description="Where to land after sign-in")] = None,
):
    """
    Handle Supabase auth callbacks (email confirmation, OAuth, password reset).

    Exchanges the code for a session, stores it in the session cookie, and
    redirects to `next` (default /dashboard). Password reset flows land on
    the reset page with the new tokens. Failures go to the login page.
    """
    origin = f"{request.url.scheme}://{request.url.netloc}"

    if not code:
        return RedirectResponse(f"{origin}{LOGIN_ERROR_PATH}")

    cookie_name = settings.session_cookie_name
    verifier_cookie = f"{cookie_name}-code-verifier"

    params = {"auth_code": code}
    code_verifier = request.cookies.get(verifier_cookie)
    if code_verifier:
        # The browser client stores the verifier JSON-encoded
        params["code_verifier"] = code_verifier.strip('"')

    try:
        client = SupabaseClient.create_auth_client()
        auth_response = client.auth.exchange_code_for_session(params)
        session = auth_response.session
    except Exception as e:
        logger.error(f"Auth callback error: {e}")
        return RedirectResponse(f"{origin}{LOGIN_ERROR_PATH}")

    if session is None:
        logger.error("Auth callback returned no session")
        return RedirectResponse(f"{origin}{LOGIN_ERROR_PATH}")

    base = _redirect_base(request)
    if flow_type == "recovery":
        query = urlencode({
            "access_token": session.access_token,
            "refresh_token": session.refresh_token,
        })
        target = f"{base}{RESET_PASSWORD_PATH}?{query}"
    else:
        target = f"{base}{_safe_next(next_path)}"

    response = RedirectResponse(target)
    write_session_cookie(
        response,
        session.model_dump(mode="json"),
        cookies=request.cookies,
        name=cookie_name,
    )
    response.delete_cookie(verifier_cookie, path="/")

    logger.info(f"Auth callback completed ({flow_type or 'signin'})")
    return response


def _sign_out(request: Request) -> None:
    """Revoke the caller's session at Supabase, if there is one."""
    token = extract_access_token(request)
    if token:
        SupabaseClient.get_client().auth.admin.sign_out(token)


def _home_redirect(request: Request) -> RedirectResponse:
    response = RedirectResponse(str(request.base_url), status_code=303)
    clear_session_cookie(response, request.cookies)
    return response


@router.post("/logout")
async def logout(request: Request):
    """
    Sign out and redirect to the home page.

    Returns 500 if Supabase refuses to revoke the session.
    """
    try:
        _sign_out(request)
    except Exception as e:
        logger.error(f"Logout error: {e}")
        return JSONResponse(
            status_code=500,
            content={"detail": "Logout failed", "code": "LOGOUT_FAILED"},
        )

    return _home_redirect(request)


@router.get("/logout")
async def logout_via_link(request: Request):
    """
    Sign out when the logout URL is visited directly.

    Always redirects home; the cookie is cleared even if revocation fails.
    """
    try:
        _sign_out(request)
    except Exception as e:
        logger.error(f"Logout error: {e}")

    return _home_redirect(request)
