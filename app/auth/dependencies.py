# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for authentication.
#
# The access token comes from the Supabase session cookie, or from an
# Authorization: Bearer header for non-browser clients.
#
# Supports both:
# - ES256 (new Supabase JWT signing keys) via JWKS
# - HS256 (legacy Supabase JWT secret), only when SUPABASE_JWT_SECRET is set
#
# Usage:
#   from app.auth import get_current_user, AuthUser
#
#   @router.get("/protected")
#   async def protected(user: AuthUser = Depends(get_current_user)):
#       return {"user_id": user.id}
# =============================================================================

import logging
import time
from typing import Optional
from uuid import UUID
import httpx

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError, ExpiredSignatureError
from pydantic import ValidationError

from app.config import settings
from app.auth.models import AuthUser, TokenPayload
from app.auth.session import read_session_cookie

logger = logging.getLogger(__name__)

# Bearer header is optional; the session cookie is checked first
security_optional = HTTPBearer(auto_error=False)

# Cache for JWKS keys
_jwks_cache: dict = {}
_jwks_cache_time: float = 0
JWKS_CACHE_TTL = 3600  # 1 hour
ASYMMETRIC_ALGORITHMS = ("ES256", "RS256")


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _get_jwks_url() -> str:
    """Get the JWKS URL from Supabase URL."""
    supabase_url = settings.SUPABASE_URL.rstrip('/')
    return f"{supabase_url}/auth/v1/.well-known/jwks.json"


def _fetch_jwks() -> dict:
    """Fetch JWKS from Supabase with caching."""
    global _jwks_cache, _jwks_cache_time

    current_time = time.time()

    # Return cached if valid
    if _jwks_cache and (current_time - _jwks_cache_time) < JWKS_CACHE_TTL:
        return _jwks_cache

    try:
        jwks_url = _get_jwks_url()
        response = httpx.get(jwks_url, timeout=10)
        response.raise_for_status()
        _jwks_cache = response.json()
        _jwks_cache_time = current_time
        logger.debug(f"Fetched JWKS from {jwks_url}")
        return _jwks_cache
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(f"Failed to fetch JWKS: {e}")
        # Return cached even if expired, as fallback
        if _jwks_cache:
            return _jwks_cache
        return {"keys": []}


def _get_signing_key(token: str) -> tuple[str | dict | None, str]:
    """
    Get the appropriate signing key for a token.

    HS256 is only accepted when SUPABASE_JWT_SECRET is configured, and a
    token whose kid isn't in the JWKS gets no key at all.

    Returns:
        Tuple of (key, algorithm) to use for verification; key is None
        when the token can't be verified
    """
    # Decode header without verification to get algorithm and key ID
    unverified_header = jwt.get_unverified_header(token)

    alg = unverified_header.get("alg", "HS256")
    kid = unverified_header.get("kid")

    if alg == "HS256":
        return settings.SUPABASE_JWT_SECRET or None, alg

    # ES256 (current Supabase signing keys) or RS256, from the JWKS
    if kid and alg in ASYMMETRIC_ALGORITHMS:
        for key in _fetch_jwks().get("keys", []):
            if key.get("kid") == kid:
                return key, alg

    logger.warning(f"No signing key for alg={alg}, kid={kid}")
    return None, alg


def extract_access_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = None,
) -> Optional[str]:
    """Access token from the session cookie, else from the Bearer header."""
    session = read_session_cookie(request.cookies)
    if session:
        return session.access_token
    if credentials:
        return credentials.credentials
    return None


def verify_access_token(token: str) -> AuthUser:
    """
    Verify a Supabase access token and return its user.

    Raises:
        HTTPException: 401 if token is invalid or expired
    """
    try:
        signing_key, algorithm = _get_signing_key(token)
        if signing_key is None:
            raise _unauthorized("Invalid token: unknown signing key")

        payload = jwt.decode(
            token,
            signing_key,
            algorithms=[algorithm],
            audience="authenticated"
        )

    except ExpiredSignatureError:
        logger.warning("JWT token has expired")
        raise _unauthorized("Token has expired")

    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise _unauthorized(f"Invalid token: {str(e)}")

    try:
        claims = TokenPayload(**payload)
    except ValidationError:
        logger.warning("JWT token missing required claims")
        raise _unauthorized("Invalid token: missing user ID")

    try:
        user_uuid = UUID(claims.sub)
    except ValueError:
        logger.warning(f"Invalid UUID in token: {claims.sub}")
        raise _unauthorized("Invalid token: malformed user ID")

    logger.debug(f"Authenticated user: {claims.sub}")
    return AuthUser(id=user_uuid, email=claims.email)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_optional),
) -> AuthUser:
    """
    Authenticate the caller from the session cookie or Bearer token.

    This dependency:
    1. Reads the access token from the sb-<ref>-auth-token cookie (or header)
    2. Verifies the JWT signature (supports ES256 and HS256)
    3. Validates the token hasn't expired
    4. Returns an AuthUser with the user's ID and email

    Raises:
        HTTPException: 401 if no token is present, or it is invalid or expired
    """
    token = extract_access_token(request, credentials)
    if not token:
        raise _unauthorized("Not authenticated")

    return verify_access_token(token)
