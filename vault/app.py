import hashlib
import logging
import os
import pathlib
import shutil

from fastapi import FastAPI, Request
from fastapi.responses import FileResponse, Response
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.middleware.base import BaseHTTPMiddleware

from vault.core.config import get_settings
from vault.core.log import configure_logging
from vault.core.rendering import render
from vault.core.utils import capitalize_first, format_amount, plain_amount
from vault.repositories.kv_store import StoreError
from vault.repositories.user_repository import UserNotFoundError
from vault.routers import auth as auth_router
from vault.routers import dashboard as dashboard_router
from vault.routers import items as items_router
from vault.routers import pages as pages_router
from vault.routers import wallet as wallet_router

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Inject baseline security headers (CSP, anti clickjacking, referrer policy)."""

    def __init__(self, app, *, enforce_hsts: bool) -> None:
        super().__init__(app)
        self._enforce_hsts = enforce_hsts

    async def dispatch(self, request, call_next):
        response = await call_next(request)
        response.headers.setdefault(
            "Content-Security-Policy",
            "default-src 'self'; "
            "img-src 'self' data:; "
            "style-src 'self' 'unsafe-inline'; "
            "script-src 'self' 'unsafe-inline'; "
            "connect-src 'self'",
        )
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("Referrer-Policy", "same-origin")
        if self._enforce_hsts:
            response.headers.setdefault("Strict-Transport-Security", "max-age=31536000; includeSubDomains")
        return response


settings = get_settings()
configure_logging(settings.log_level)

app = FastAPI(title="Pocket Vault")

BASE = os.path.dirname(__file__)
WEB = os.path.join(BASE, "..", "web")


class CachedStaticFiles(StaticFiles):
    def set_headers(self, scope, resp, path, stat_result):
        # fingerprinted names change with content, so cache them forever
        resp.headers["Cache-Control"] = "public, max-age=31536000, immutable"


app.mount("/static", CachedStaticFiles(directory=WEB), name="static")
templates = Jinja2Templates(directory=os.path.join(BASE, "..", "templates"))
templates.env.filters["amount"] = format_amount
templates.env.filters["capitalize_first"] = capitalize_first
templates.env.filters["plain_amount"] = plain_amount


def _fingerprint_asset(rel_path: str) -> str:
    """
    Copy an asset to a name carrying a short content hash:
    "vault.css" -> "vault.<hash8>.css". Returns the versioned file name.
    """
    src = pathlib.Path(WEB) / rel_path
    if not src.exists():
        return rel_path.replace("\\", "/")
    data = src.read_bytes()
    h = hashlib.sha1(data).hexdigest()[:8]
    dst = src.with_name(f"{src.stem}.{h}{src.suffix}")
    if not dst.exists():
        shutil.copy2(src, dst)
    return dst.name


try:
    _css_fp = _fingerprint_asset("vault.css")
except OSError as exc:
    logger.warning("Could not fingerprint vault.css: %s", exc)
    _css_fp = "vault.css"
app.state.css_href = f"/static/{_css_fp}"
app.state.templates = templates
app.add_middleware(SecurityHeadersMiddleware, enforce_hsts=settings.app_env == "prod")


@app.exception_handler(StoreError)
async def store_error_page(request: Request, exc: StoreError):
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
    return render(request, "error.html", {"heading": "Storage unavailable", "detail": str(exc)}, status_code=503)


@app.exception_handler(UserNotFoundError)
async def user_missing_page(request: Request, exc: UserNotFoundError):
    logger.warning("Session points at a missing user on %s", request.url.path)
    return render(request, "error.html", {"heading": "Account not found", "detail": ""}, status_code=404)


@app.get("/favicon.ico")
def favicon():
    ico_path = os.path.join(WEB, "favicon.ico")
    if os.path.exists(ico_path):
        return FileResponse(ico_path, media_type="image/x-icon")
    return Response(status_code=204)


app.include_router(auth_router.router)
app.include_router(dashboard_router.router)
app.include_router(items_router.router)
app.include_router(wallet_router.router)
app.include_router(pages_router.router)


def create_app() -> FastAPI:
    """Factory compatible with uvicorn/gunicorn."""
    return app
