"""Session helpers (issue tokens, cookies, current user)."""
from __future__ import annotations

import secrets

from fastapi import Request, Response

from vault.core.config import get_settings
from vault.domain.accounts import User
from vault.repositories.kv_store import get_store
from vault.repositories.user_repository import UserRepository

SESSION_COOKIE_NAME = "session"
SESSION_KEY_PREFIX = "currentUser"

_repo = UserRepository()


def session_key(token: str) -> str:
    return f"{SESSION_KEY_PREFIX}:{token}"


def issue_session(email: str) -> str:
    """Create a session token; the store keeps the plain email under it. No expiry."""
    token = secrets.token_urlsafe(32)
    get_store().set(session_key(token), email)
    return token


def current_user_email(request: Request) -> str | None:
    """Return the e-mail associated with the current session cookie, if any."""
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if not token:
        return None
    return get_store().get(session_key(token)) or None


def current_user(request: Request) -> User | None:
    """Resolve the session against the user list; unknown e-mail means no user."""
    return _repo.get_user(current_user_email(request))


def set_session_cookie(response: Response, token: str) -> None:
    settings = get_settings()
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        httponly=True,
        secure=settings.app_env == "prod",
        samesite="strict",
        max_age=settings.session_cookie_max_age,
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(SESSION_COOKIE_NAME, path="/")


def delete_session(token: str | None) -> None:
    """Remove a session token from the store."""
    if not token:
        return
    get_store().delete(session_key(token))
