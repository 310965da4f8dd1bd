"""
PDF export of a single vault item.

The page is drawn with Pillow (A4 at 150 dpi) and written with Pillow's PDF
writer. Layout, in millimetres: title centred at 20, rule at 25, one line
per field every 10 starting at 30, image 180 wide at x=15 below the text.
"""

from __future__ import annotations

import base64
import binascii
import io
import logging
from typing import Optional

from PIL import Image, ImageDraw, ImageFont, UnidentifiedImageError

from vault.core.utils import capitalize_first
from vault.domain.items import Item

logger = logging.getLogger(__name__)

DPI = 150
PX_PER_MM = DPI / 25.4
PAGE_MM = (210, 297)
IMAGE_WIDTH_MM = 180
MARGIN_MM = 10


def _mm(value: float) -> int:
    return int(round(value * PX_PER_MM))


def _font(points: int):
    return ImageFont.load_default(size=points * DPI / 72)


def export_filename(index: int) -> str:
    return f"Item_Detail_{index + 1}.pdf"


def decode_data_uri(value: str | None) -> Optional[Image.Image]:
    """Decode a data:...;base64 image, or None when it cannot be decoded."""
    if not value or not value.startswith("data:") or "," not in value:
        return None
    header, payload = value.split(",", 1)
    if ";base64" not in header:
        return None
    try:
        raw = base64.b64decode(payload, validate=False)
        image = Image.open(io.BytesIO(raw))
        image.load()
    except (binascii.Error, UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        logger.warning("Skipping undecodable item image: %s", exc)
        return None
    return image.convert("RGB")


def _new_page() -> tuple[Image.Image, ImageDraw.ImageDraw]:
    page = Image.new("RGB", (_mm(PAGE_MM[0]), _mm(PAGE_MM[1])), "white")
    return page, ImageDraw.Draw(page)


def render_item_pdf(item: Item) -> bytes:
    """Build the PDF document for one item; an undecodable image is left out."""
    page, draw = _new_page()
    pages = [page]

    title = "Item Detail"
    title_font = _font(18)
    width = draw.textlength(title, font=title_font)
    draw.text(((page.width - width) / 2, _mm(20) - _mm(6)), title, font=title_font, fill="black")
    draw.line([(_mm(10), _mm(25)), (_mm(200), _mm(25))], fill="black", width=max(1, _mm(0.5)))

    body_font = _font(14)
    y_mm = 30
    lines = [f"Category: {capitalize_first(item.category)}"]
    lines += [f"{label}: {value}" for label, value in item.details()]
    for line in lines:
        draw.text((_mm(10), _mm(y_mm) - _mm(5)), line, font=body_font, fill="black")
        y_mm += 10

    picture = decode_data_uri(item.image)
    if picture is not None and picture.width and picture.height:
        target_w = _mm(IMAGE_WIDTH_MM)
        target_h = max(1, int(picture.height * target_w / picture.width))
        usable_h = page.height - _mm(2 * MARGIN_MM)
        if target_h > usable_h:
            # taller than a whole page: shrink to the page height, same ratio
            target_w = max(1, int(target_w * usable_h / target_h))
            target_h = usable_h
        top = _mm(y_mm)
        if top + target_h > page.height - _mm(MARGIN_MM):
            page, draw = _new_page()
            pages.append(page)
            top = _mm(MARGIN_MM)
        page.paste(picture.resize((target_w, target_h), Image.LANCZOS), (_mm(15), top))

    buffer = io.BytesIO()
    pages[0].save(buffer, format="PDF", save_all=True, append_images=pages[1:], resolution=float(DPI))
    return buffer.getvalue()
