"""
End-to-end page flows through the FastAPI app (TestClient keeps the cookies).
"""
from __future__ import annotations

import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from vault.app import app
from vault.services.auth_service import AuthService
from vault.services.wallet_service import LOW_BALANCE_MESSAGE, WalletService

EMAIL = "ana@example.com"


@pytest.fixture()
def client():
    with TestClient(app) as c:
        yield c


def _csrf(client: TestClient) -> str:
    token = client.cookies.get("csrf_token")
    if not token:
        client.get("/index.html")
        token = client.cookies.get("csrf_token")
    return token


def _signup(client: TestClient, balance: str = "6000"):
    return client.post(
        "/signup.html",
        data={"name": "Ana", "email": EMAIL, "password": "pw", "initial_balance": balance, "csrf_token": _csrf(client)},
        follow_redirects=False,
    )


def test_root_and_index_render_login(client):
    for path in ("/", "/index.html"):
        resp = client.get(path)
        assert resp.status_code == 200
        assert 'id="loginForm"' in resp.text


def test_unknown_page_is_404_with_chrome(client):
    resp = client.get("/nope.html")
    assert resp.status_code == 404
    assert "Pocket Vault" in resp.text


def test_protected_pages_redirect_when_logged_out(client):
    for path in ("/dashboard.html", "/add-item.html", "/item-detail.html", "/purchase.html", "/wallet-management.html"):
        resp = client.get(path, follow_redirects=False)
        assert resp.status_code == 302
        assert resp.headers["location"] == "/index.html"


def test_post_without_csrf_is_rejected(client):
    resp = client.post("/index.html", data={"email": EMAIL, "password": "pw"})
    assert resp.status_code == 403


def test_signup_opens_dashboard(client):
    resp = _signup(client)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/dashboard.html"

    page = client.get("/dashboard.html")
    assert page.status_code == 200
    assert 'id="userName">Ana<' in page.text
    assert "6,000" in page.text
    assert "No items found." in page.text


def test_signup_below_minimum_stays_on_signup(client):
    page = client.post(
        "/signup.html",
        data={"name": "Ana", "email": EMAIL, "password": "pw", "initial_balance": "4999", "csrf_token": _csrf(client)},
    )
    assert page.url.path == "/signup.html"
    assert "Initial balance must be at least Rs. 5,000." in page.text


def test_login_failure_and_low_balance_warning(client):
    AuthService().register("Ana", EMAIL, "pw", 5000)
    WalletService().purchase(EMAIL, "Pizza")

    bad = client.post("/index.html", data={"email": EMAIL, "password": "PW", "csrf_token": _csrf(client)})
    assert "Invalid email or password." in bad.text

    good = client.post("/index.html", data={"email": EMAIL, "password": "pw", "csrf_token": _csrf(client)})
    assert good.url.path == "/dashboard.html"
    assert "Please add more funds to your wallet." in good.text
    assert LOW_BALANCE_MESSAGE in good.text


def test_item_lifecycle(client):
    _signup(client)
    buf = io.BytesIO()
    Image.new("RGB", (8, 8), "green").save(buf, format="PNG")

    added = client.post(
        "/add-item.html",
        data={"category": "cards", "cardNumber": "4111", "expirationDate": "2027-05", "cvv": "123", "csrf_token": _csrf(client)},
        files={"image": ("card.png", buf.getvalue(), "image/png")},
    )
    assert added.url.path == "/dashboard.html"
    assert "Item added successfully." in added.text
    assert "Card Number: 4111" in added.text

    fragment = client.get("/dashboard.html/items", params={"q": "nothing-like-this"})
    assert "No items found." in fragment.text
    fragment = client.get("/dashboard.html/items", params={"category": "cards"})
    assert "Card Number: 4111" in fragment.text

    detail = client.get("/item-detail.html", params={"index": "0"})
    assert detail.status_code == 200
    assert "data:image/png;base64," in detail.text

    pdf = client.get("/item-detail.html/export", params={"index": "0"})
    assert pdf.headers["content-type"] == "application/pdf"
    assert 'filename="Item_Detail_1.pdf"' in pdf.headers["content-disposition"]
    assert pdf.content.startswith(b"%PDF")

    deleted = client.post("/item-detail.html/delete", data={"index": "0", "csrf_token": _csrf(client)})
    assert "Item deleted successfully." in deleted.text
    assert "No items found." in deleted.text


def test_add_item_missing_field_goes_back(client):
    _signup(client)
    page = client.post("/add-item.html", data={"category": "licenses", "licenseNumber": "DL", "csrf_token": _csrf(client)})
    assert page.url.path == "/add-item.html"
    assert "Please fill in: Expiry Date." in page.text


def test_invalid_item_index(client):
    _signup(client)
    resp = client.get("/item-detail.html", params={"index": "7"})
    assert resp.status_code == 404
    assert "Invalid item index." in resp.text


def test_purchase_and_wallet_pages(client):
    _signup(client, "5000")

    page = client.post("/purchase.html", data={"product": "Pizza", "csrf_token": _csrf(client)})
    assert "Purchase successful! Rs. 500 deducted from your wallet." in page.text
    assert LOW_BALANCE_MESSAGE in page.text

    wallet = client.post("/wallet-management.html", data={"amount": "abc", "csrf_token": _csrf(client)})
    assert "Please enter a valid amount." in wallet.text

    wallet = client.post("/wallet-management.html", data={"amount": "1500", "csrf_token": _csrf(client)})
    assert "Successfully added Rs. 1500 to your wallet." in wallet.text
    assert "6,000" in wallet.text
    assert wallet.text.index("Rs. 1500 <br>") < wallet.text.index("Rs. 500 <br>")


def test_logout_ends_the_session(client):
    _signup(client)
    client.post("/logout", data={"csrf_token": _csrf(client)})
    resp = client.get("/dashboard.html", follow_redirects=False)
    assert resp.status_code == 302


def test_theme_toggle_persists(client):
    assert "bg-light-mode" in client.get("/index.html").text
    page = client.post("/theme", data={"next": "/signup.html", "csrf_token": _csrf(client)})
    assert page.url.path == "/signup.html"
    assert "bg-dark-mode" in page.text


def test_non_ascii_digit_index_is_invalid(client):
    _signup(client)
    resp = client.get("/item-detail.html", params={"index": "²"})
    assert resp.status_code == 404
    assert "Invalid item index." in resp.text


def test_cross_site_post_is_rejected(client):
    resp = client.post(
        "/wallet-management.html",
        data={"amount": "100", "csrf_token": _csrf(client)},
        headers={"origin": "https://evil.example"},
    )
    assert resp.status_code == 403


def test_corrupt_data_file_is_not_overwritten(client, data_file):
    AuthService().register("Bob", "bob@example.com", "pw", 5000)
    torn = data_file.read_text(encoding="utf-8")[:-5]
    data_file.write_text(torn, encoding="utf-8")

    resp = _signup(client)
    assert resp.status_code == 503
    assert "Storage unavailable" in resp.text
    assert data_file.read_text(encoding="utf-8") == torn
