"""Page rendering: templates, theme preference, flash messages and CSRF cookie."""

from __future__ import annotations

from typing import Iterable

from fastapi import Request, Response
from fastapi.responses import RedirectResponse

from vault.core import csrf, notifications
from vault.core.config import get_settings
from vault.core.notifications import Notification

THEME_COOKIE_NAME = "theme"
THEMES = ("light", "dark")
DEFAULT_THEME = "light"
ENTRY_PAGE = "/index.html"
DASHBOARD_PAGE = "/dashboard.html"


def _templates(request: Request):
    tpl = getattr(getattr(request.app, "state", None), "templates", None)
    if tpl:
        return tpl
    raise RuntimeError("Templates are not configured")


def _css_href(request: Request) -> str:
    """Fingerprinted stylesheet href, or the plain fallback."""
    return getattr(getattr(request.app, "state", None), "css_href", "/static/vault.css")


def current_theme(request: Request) -> str:
    value = (request.cookies.get(THEME_COOKIE_NAME) or "").strip().lower()
    return value if value in THEMES else DEFAULT_THEME


def toggled_theme(theme: str) -> str:
    return "light" if theme == "dark" else "dark"


def set_theme_cookie(response: Response, theme: str) -> None:
    settings = get_settings()
    response.set_cookie(
        THEME_COOKIE_NAME,
        theme if theme in THEMES else DEFAULT_THEME,
        max_age=365 * 24 * 60 * 60,
        secure=settings.app_env == "prod",
        samesite="strict",
        path="/",
    )


def render(
    request: Request,
    name: str,
    context: dict | None = None,
    *,
    status_code: int = 200,
    notes: Iterable[Notification] = (),
) -> Response:
    """
    Render a page template with the shared chrome: theme, notifications
    (queued flashes first, then the ones raised while rendering) and a CSRF
    token for the forms on the page.
    """
    queued = notifications.pending(request)
    token = csrf.page_token(request)
    page_context = {
        "theme": current_theme(request),
        "css_href": _css_href(request),
        "csrf_token": token,
        "notifications": queued + [n for n in notes if n],
    }
    page_context.update(context or {})
    response = _templates(request).TemplateResponse(
        request, name, page_context, status_code=status_code
    )
    csrf.remember(response, token)
    if queued:
        notifications.clear(response)
    return response


def render_fragment(request: Request, name: str, context: dict | None = None) -> Response:
    """Render a partial template (no chrome, no cookies)."""
    return _templates(request).TemplateResponse(request, name, dict(context or {}))


def redirect(url: str, notes: Iterable[Notification] = (), *, status_code: int = 303) -> RedirectResponse:
    """Redirect (post/redirect/get by default), carrying notifications to the next page."""
    response = RedirectResponse(url, status_code=status_code)
    notifications.flash(response, notes)
    return response
