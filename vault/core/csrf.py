"""
Cross-site request forgery guard for the HTML forms.

Every rendered page puts the value of the ``csrf_token`` cookie in a hidden
field of its forms. A POST is accepted only when the field matches the cookie
and the browser did not send it from another site. Form endpoints opt in with
``dependencies=[Depends(require_form_token)]``.
"""

from __future__ import annotations

import logging
import secrets
from urllib.parse import urlsplit

from fastapi import HTTPException, Request, Response

from vault.core.config import get_settings

COOKIE_NAME = "csrf_token"
FIELD_NAME = "csrf_token"
COOKIE_MAX_AGE = 7 * 24 * 60 * 60
MIN_TOKEN_LENGTH = 16
TRUSTED_FETCH_SITES = {"same-origin", "none"}

logger = logging.getLogger(__name__)


class CsrfRejected(HTTPException):
    def __init__(self, reason: str, request: Request):
        logger.warning("Rejected form post to %s: %s", request.url.path, reason)
        super().__init__(status_code=403, detail=reason)


def page_token(request: Request) -> str:
    """Token for the forms of the page being rendered; reuses the cookie when it looks sane."""
    token = request.cookies.get(COOKIE_NAME) or ""
    if len(token) < MIN_TOKEN_LENGTH:
        token = secrets.token_urlsafe(32)
    return token


def remember(response: Response, token: str) -> None:
    response.set_cookie(
        COOKIE_NAME,
        token,
        max_age=COOKIE_MAX_AGE,
        httponly=False,
        secure=get_settings().app_env == "prod",
        samesite="strict",
        path="/",
    )


def _from_this_site(request: Request) -> bool:
    fetch_site = request.headers.get("sec-fetch-site")
    if fetch_site:
        return fetch_site in TRUSTED_FETCH_SITES
    source = request.headers.get("origin") or request.headers.get("referer")
    if not source or source == "null":
        return not source
    parts = urlsplit(source)
    return parts.scheme == request.url.scheme and parts.netloc.lower() == request.url.netloc.lower()


async def require_form_token(request: Request) -> None:
    form = await request.form()
    supplied = form.get(FIELD_NAME)
    expected = request.cookies.get(COOKIE_NAME) or ""
    if not isinstance(supplied, str) or not supplied or not expected:
        raise CsrfRejected("Missing form token.", request)
    if not secrets.compare_digest(expected, supplied):
        raise CsrfRejected("Invalid form token.", request)
    if not _from_this_site(request):
        raise CsrfRejected("Cross-site form post.", request)
