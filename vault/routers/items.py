from __future__ import annotations

from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import Response
from starlette.datastructures import UploadFile

from vault.core import csrf
from vault.core.config import get_settings
from vault.core.notifications import danger, success
from vault.core.rendering import DASHBOARD_PAGE, ENTRY_PAGE, redirect, render
from vault.domain.items import CATEGORIES, CATEGORY_FIELDS, InvalidItemError, item_ref
from vault.services.pdf_export import export_filename, render_item_pdf
from vault.services.session_service import current_user
from vault.services.vault_service import ImageRejectedError, ItemNotFoundError, VaultService, encode_image

router = APIRouter(prefix="", tags=["items"])
vault_service = VaultService()
FORM_GUARD = [Depends(csrf.require_form_token)]


def _field_sets() -> dict:
    return {
        category: [{"name": s.name, "label": s.label, "type": s.input_type} for s in specs]
        for category, specs in CATEGORY_FIELDS.items()
    }


def add_item_page(request: Request):
    user = current_user(request)
    if not user:
        return redirect(ENTRY_PAGE, status_code=302)
    category = (request.query_params.get("category") or "").strip()
    if category not in CATEGORIES:
        category = ""
    context = {
        "user": user,
        "categories": CATEGORIES,
        "category": category,
        "field_sets": _field_sets(),
    }
    return render(request, "add-item.html", context)


@router.post("/add-item.html", dependencies=FORM_GUARD)
async def do_add_item(request: Request):
    form = await request.form()
    user = current_user(request)
    if not user:
        return redirect(ENTRY_PAGE)
    email = user.email
    category = str(form.get("category") or "").strip()
    back = f"/add-item.html?{urlencode({'category': category})}" if category in CATEGORIES else "/add-item.html"
    upload = form.get("image")
    image = None
    try:
        if isinstance(upload, UploadFile) and upload.filename:
            # the item is stored only after the whole upload has been read and encoded
            data = await upload.read()
            image = encode_image(data, upload.content_type or "", max_bytes=get_settings().max_upload_bytes)
        values = {k: v for k, v in form.items() if isinstance(v, str)}
        vault_service.add_item(email, category, values, image)
    except (InvalidItemError, ImageRejectedError) as exc:
        return redirect(back, [danger(str(exc))])
    return redirect(DASHBOARD_PAGE, [success("Item added successfully.")])


def item_detail_page(request: Request):
    user = current_user(request)
    if not user:
        return redirect(ENTRY_PAGE, status_code=302)
    raw_index = request.query_params.get("index")
    ref = request.query_params.get("ref") or None
    try:
        index, item = vault_service.resolve(user, raw_index, ref)
    except ItemNotFoundError as exc:
        return render(request, "item-detail.html", {"user": user, "item": None}, status_code=404, notes=[danger(exc.message)])
    context = {"user": user, "item": item, "index": index, "ref": item_ref(item)}
    return render(request, "item-detail.html", context)


@router.post("/item-detail.html/delete", dependencies=FORM_GUARD)
def delete_item(request: Request, index: str = Form(""), ref: str = Form("")):
    user = current_user(request)
    if not user:
        return redirect(ENTRY_PAGE)
    email = user.email
    try:
        vault_service.delete_item(email, index, ref or None)
    except ItemNotFoundError as exc:
        return redirect(DASHBOARD_PAGE, [danger(exc.message)])
    return redirect(DASHBOARD_PAGE, [success("Item deleted successfully.")])


@router.get("/item-detail.html/export")
def export_item(request: Request, index: str = "", ref: str = ""):
    user = current_user(request)
    if not user:
        return redirect(ENTRY_PAGE, status_code=302)
    try:
        position, item = vault_service.resolve(user, index, ref or None)
    except ItemNotFoundError as exc:
        return render(request, "item-detail.html", {"user": user, "item": None}, status_code=404, notes=[danger(exc.message)])
    payload = render_item_pdf(item)
    headers = {"Content-Disposition": f'attachment; filename="{export_filename(position)}"'}
    return Response(payload, media_type="application/pdf", headers=headers)
