# =============================================================================
# app/auth/session.py - Supabase Session Cookies
# =============================================================================
# The Supabase SSR helpers keep the browser session in a cookie named
# sb-<project-ref>-auth-token. Large values are split across numbered
# chunks (<name>.0, <name>.1, ...). The value is either plain JSON or
# "base64-" followed by base64url-encoded JSON.
#
# Usage:
#   from app.auth.session import read_session_cookie
#   session = read_session_cookie(request.cookies, settings.session_cookie_name)
#   token = session.access_token if session else None
# =============================================================================

import base64
import binascii
import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping

from fastapi import Response

from app.config import settings

logger = logging.getLogger(__name__)

BASE64_PREFIX = "base64-"
MAX_CHUNK_SIZE = 3180
COOKIE_MAX_AGE = 400 * 24 * 60 * 60  # 400 days, the browser maximum


@dataclass(frozen=True)
class SessionTokens:
    """Tokens carried by the session cookie."""

    access_token: str
    refresh_token: str | None = None


def _b64url_decode(value: str) -> str:
    padded = value + "=" * (-len(value) % 4)
    return base64.urlsafe_b64decode(padded).decode("utf-8")


def _b64url_encode(value: str) -> str:
    return base64.urlsafe_b64encode(value.encode("utf-8")).decode("ascii").rstrip("=")


def _combine_chunks(cookies: Mapping[str, str], name: str) -> str | None:
    """Return the whole cookie value, joining <name>.0, <name>.1, ... if chunked."""
    if name in cookies:
        return cookies[name]

    chunks = []
    index = 0
    while f"{name}.{index}" in cookies:
        chunks.append(cookies[f"{name}.{index}"])
        index += 1

    return "".join(chunks) if chunks else None


def decode_session_value(raw: str) -> SessionTokens | None:
    """
    Parse a session cookie value into tokens.

    Accepts the session object form ({"access_token": ..., ...}) and the
    older array form ([access_token, refresh_token, ...]).
    Returns None for anything unreadable.
    """
    try:
        if raw.startswith(BASE64_PREFIX):
            raw = _b64url_decode(raw[len(BASE64_PREFIX):])
        payload: Any = json.loads(raw)
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        logger.debug(f"Unreadable session cookie: {e}")
        return None

    if isinstance(payload, dict) and payload.get("access_token"):
        return SessionTokens(payload["access_token"], payload.get("refresh_token"))

    if isinstance(payload, list) and payload and isinstance(payload[0], str):
        refresh = payload[1] if len(payload) > 1 and isinstance(payload[1], str) else None
        return SessionTokens(payload[0], refresh)

    return None


def read_session_cookie(cookies: Mapping[str, str], name: str | None = None) -> SessionTokens | None:
    """Find and decode the session cookie in a request's cookies."""
    name = name or settings.session_cookie_name
    raw = _combine_chunks(cookies, name)
    if not raw:
        return None
    return decode_session_value(raw)


def encode_session_value(session: Mapping[str, Any]) -> str:
    """Encode a session object the way the SSR helpers do."""
    return BASE64_PREFIX + _b64url_encode(json.dumps(session, separators=(",", ":")))


def write_session_cookie(
    response: Response,
    session: Mapping[str, Any],
    cookies: Mapping[str, str] | None = None,
    name: str | None = None,
) -> None:
    """
    Set the session cookie on a response, chunking values that are too
    long for one cookie. Stale chunks from `cookies` are expired.
    """
    name = name or settings.session_cookie_name
    value = encode_session_value(session)

    chunks = [value[i:i + MAX_CHUNK_SIZE] for i in range(0, len(value), MAX_CHUNK_SIZE)]
    written = {name} if len(chunks) == 1 else {f"{name}.{i}" for i in range(len(chunks))}

    if len(chunks) == 1:
        _set_cookie(response, name, value)
    else:
        for i, chunk in enumerate(chunks):
            _set_cookie(response, f"{name}.{i}", chunk)

    for stale in _cookie_names(cookies or {}, name) - written:
        response.delete_cookie(stale, path="/")


def clear_session_cookie(
    response: Response,
    cookies: Mapping[str, str],
    name: str | None = None,
) -> None:
    """Expire the session cookie and all of its chunks."""
    name = name or settings.session_cookie_name
    for cookie in _cookie_names(cookies, name):
        response.delete_cookie(cookie, path="/")


def _cookie_names(cookies: Mapping[str, str], name: str) -> set[str]:
    return {key for key in cookies if key == name or key.startswith(f"{name}.")}


def _set_cookie(response: Response, key: str, value: str) -> None:
    response.set_cookie(
        key,
        value,
        max_age=COOKIE_MAX_AGE,
        path="/",
        samesite="lax",
        secure=settings.is_production,
        # Browser-side Supabase clients read this cookie too
        httponly=False,
    )
