"""
Double-submit CSRF protection for the roster form posts.

The token lives in a readable cookie and is echoed back either as the
csrf_token form field or the x-csrf-token header. Cookie flags follow the
Settings the app was built with, not the process environment.
"""
from __future__ import annotations

import secrets
from urllib import parse as urlparse

from fastapi import HTTPException, Request, Response

from roster.core.config import Settings

CSRF_COOKIE_NAME = "csrf_token"
CSRF_HEADER_NAME = "x-csrf-token"
CSRF_COOKIE_MAX_AGE = 7 * 24 * 60 * 60
MIN_TOKEN_LENGTH = 16


def ensure_csrf_token(request: Request) -> str:
    """Reuse the visitor's cookie token when it looks sane, else mint one."""
    token = request.cookies.get(CSRF_COOKIE_NAME)
    if not token or len(token) < MIN_TOKEN_LENGTH:
        token = secrets.token_urlsafe(32)
    return token


def set_csrf_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        CSRF_COOKIE_NAME,
        token,
        max_age=CSRF_COOKIE_MAX_AGE,
        httponly=False,
        secure=settings.app_env == "prod",
        samesite="strict",
        path="/",
    )


def _same_origin(request: Request) -> bool:
    source = request.headers.get("origin") or request.headers.get("referer") or ""
    if not source:
        return True
    try:
        parsed = urlparse.urlparse(source)
    except ValueError:
        return False
    host = (request.headers.get("host") or "").split(":", 1)[0].lower()
    parsed_host = (parsed.hostname or "").lower()
    if parsed_host and host and parsed_host != host:
        return False
    return not parsed.scheme or parsed.scheme == request.url.scheme


def validate_csrf(request: Request, form_token: str | None) -> None:
    """Raise 403 unless the cookie token matches the form or header token and the origin is ours."""
    cookie_token = request.cookies.get(CSRF_COOKIE_NAME) or ""
    token = (form_token or "").strip() or (request.headers.get(CSRF_HEADER_NAME) or "").strip()
    if not cookie_token or not token:
        raise HTTPException(403, "Missing CSRF token.")
    if not secrets.compare_digest(cookie_token, token):
        raise HTTPException(403, "Invalid CSRF token.")
    if not _same_origin(request):
        raise HTTPException(403, "Invalid origin.")
