from __future__ import annotations

from fastapi import APIRouter, Depends, Form, Request

from vault.core import csrf
from vault.core.notifications import danger, success, warning
from vault.core.rendering import ENTRY_PAGE, redirect, render
from vault.domain.catalog import PRODUCTS
from vault.services.session_service import current_user
from vault.services.wallet_service import LOW_BALANCE_MESSAGE, WalletError, WalletService

router = APIRouter(prefix="", tags=["wallet"])
wallet_service = WalletService()
FORM_GUARD = [Depends(csrf.require_form_token)]


def purchase_page(request: Request):
    user = current_user(request)
    if not user:
        return redirect(ENTRY_PAGE, status_code=302)
    return render(request, "purchase.html", {"user": user, "products": PRODUCTS})


@router.post("/purchase.html", dependencies=FORM_GUARD)
def do_purchase(request: Request, product: str = Form("")):
    user = current_user(request)
    if not user:
        return redirect(ENTRY_PAGE)
    try:
        result = wallet_service.purchase(user.email, product)
    except WalletError as exc:
        return redirect("/purchase.html", [danger(exc.message)])
    notes = [success(result.message)]
    if result.low_balance:
        notes.append(warning(LOW_BALANCE_MESSAGE))
    return redirect("/purchase.html", notes)


def wallet_page(request: Request):
    user = current_user(request)
    if not user:
        return redirect(ENTRY_PAGE, status_code=302)
    context = {"user": user, "transactions": user.transactions_newest_first()}
    return render(request, "wallet-management.html", context)


@router.post("/wallet-management.html", dependencies=FORM_GUARD)
def add_funds(request: Request, amount: str = Form("")):
    user = current_user(request)
    if not user:
        return redirect(ENTRY_PAGE)
    try:
        result = wallet_service.add_funds(user.email, amount)
    except WalletError as exc:
        return redirect("/wallet-management.html", [danger(exc.message)])
    return redirect("/wallet-management.html", [success(result.message)])
