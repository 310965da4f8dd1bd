from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from vault.core.notifications import warning
from vault.core.rendering import ENTRY_PAGE, redirect, render, render_fragment
from vault.domain.items import ALL_CATEGORIES, CATEGORIES, filter_items, item_ref
from vault.services.session_service import current_user
from vault.services.wallet_service import LOW_BALANCE_MESSAGE

router = APIRouter(prefix="/dashboard.html", tags=["dashboard"])


def _filters(request: Request) -> tuple[str, str]:
    category = (request.query_params.get("category") or ALL_CATEGORIES).strip()
    return category, request.query_params.get("q", "")


def _listing(user, category: str, query: str) -> list[dict]:
    return [
        {"index": index, "ref": item_ref(item), "label": item.label, "summary": item.summary()}
        for index, item in filter_items(user.items, category, query)
    ]


def dashboard_page(request: Request):
    user = current_user(request)
    if not user:
        return redirect(ENTRY_PAGE, status_code=302)
    category, query = _filters(request)
    notes = [warning(LOW_BALANCE_MESSAGE)] if user.low_balance else []
    context = {
        "user": user,
        "categories": CATEGORIES,
        "category": category,
        "query": query,
        "entries": _listing(user, category, query),
    }
    return render(request, "dashboard.html", context, notes=notes)


@router.get("/items", response_class=HTMLResponse)
def dashboard_items(request: Request):
    """Item list fragment, re-requested by the page on every keystroke or filter change."""
    user = current_user(request)
    if not user:
        return HTMLResponse("", status_code=401)
    category, query = _filters(request)
    return render_fragment(request, "_items.html", {"entries": _listing(user, category, query)})
