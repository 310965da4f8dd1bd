from __future__ import annotations

from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, Request

from vault.core import csrf
from vault.core.notifications import danger, warning
from vault.core.rendering import DASHBOARD_PAGE, ENTRY_PAGE, redirect, render
from vault.services.auth_service import AuthService, InvalidCredentialsError, RegistrationError
from vault.services.session_service import (
    SESSION_COOKIE_NAME,
    clear_session_cookie,
    set_session_cookie,
)

router = APIRouter(prefix="", tags=["auth"])
auth_service = AuthService()
FORM_GUARD = [Depends(csrf.require_form_token)]

LOW_BALANCE_LOGIN_MESSAGE = "Please add more funds to your wallet."


def login_page(request: Request):
    email = request.query_params.get("email", "")
    return render(request, "index.html", {"email": email})


def signup_page(request: Request):
    context = {
        "name": request.query_params.get("name", ""),
        "email": request.query_params.get("email", ""),
    }
    return render(request, "signup.html", context)


@router.post("/index.html", dependencies=FORM_GUARD)
def do_login(request: Request, email: str = Form(""), password: str = Form("")):
    try:
        outcome = auth_service.login(email, password)
    except InvalidCredentialsError as exc:
        query = urlencode({"email": (email or "").strip()})
        return redirect(f"{ENTRY_PAGE}?{query}", [danger(str(exc))])
    notes = [warning(LOW_BALANCE_LOGIN_MESSAGE)] if outcome.low_balance else []
    resp = redirect(DASHBOARD_PAGE, notes)
    set_session_cookie(resp, outcome.session_token)
    return resp


@router.post("/signup.html", dependencies=FORM_GUARD)
def do_signup(
    request: Request,
    name: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    initial_balance: str = Form(""),
):
    try:
        result = auth_service.register(name, email, password, initial_balance)
    except RegistrationError as exc:
        query = urlencode({"name": (name or "").strip(), "email": (email or "").strip()})
        return redirect(f"/signup.html?{query}", [danger(exc.message)])
    resp = redirect(DASHBOARD_PAGE)
    set_session_cookie(resp, result.session_token)
    return resp


@router.post("/logout", dependencies=FORM_GUARD)
def logout(request: Request):
    auth_service.logout(request.cookies.get(SESSION_COOKIE_NAME))
    resp = redirect(ENTRY_PAGE)
    clear_session_cookie(resp)
    return resp
