"""
Page router.

Every GET page is dispatched by the last segment of the path, the same
file names the pages have always had (index.html, dashboard.html, ...).
Exactly one handler runs per request; an unknown name runs none.
"""

from __future__ import annotations

from typing import Callable, Optional
from urllib.parse import urlparse

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, Response

from vault.core import csrf
from vault.core.rendering import ENTRY_PAGE, current_theme, redirect, render, set_theme_cookie, toggled_theme
from vault.routers import auth, dashboard, items, wallet

router = APIRouter(prefix="", tags=["pages"])

PageHandler = Callable[[Request], Response]

PAGE_HANDLERS: dict[str, PageHandler] = {
    "": auth.login_page,
    "index.html": auth.login_page,
    "signup.html": auth.signup_page,
    "dashboard.html": dashboard.dashboard_page,
    "add-item.html": items.add_item_page,
    "item-detail.html": items.item_detail_page,
    "purchase.html": wallet.purchase_page,
    "wallet-management.html": wallet.wallet_page,
}


def page_name(path: str) -> str:
    """Last path segment: "/a/dashboard.html" -> "dashboard.html", "/" -> ""."""
    return (path or "").split("/")[-1]


def resolve_page(path: str) -> Optional[PageHandler]:
    return PAGE_HANDLERS.get(page_name(path))


@router.post("/theme", dependencies=[Depends(csrf.require_form_token)])
def toggle_theme(request: Request, next: str = Form("")):
    dest = (next or "").strip()
    if not dest:
        ref = request.headers.get("referer") or ""
        dest = (urlparse(ref).path or "").strip() or ENTRY_PAGE
    if not dest.startswith("/") or dest.startswith("//"):
        dest = ENTRY_PAGE
    resp = redirect(dest)
    set_theme_cookie(resp, toggled_theme(current_theme(request)))
    return resp


@router.get("/", response_class=HTMLResponse)
@router.get("/{page:path}", response_class=HTMLResponse)
def dispatch(request: Request, page: str = ""):
    handler = resolve_page(request.url.path)
    if handler is None:
        return render(request, "base.html", {}, status_code=404)
    return handler(request)
