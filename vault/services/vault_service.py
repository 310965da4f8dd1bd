"""
Vault item use cases: add, look up by position, delete.

Items have no stored id; the position in the owner's list is the only
handle. Lookups accept an optional content reference (see item_ref) so a
page holding an old index does not act on whatever item moved into it.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass
import logging
from typing import Mapping, Optional

from vault.domain.accounts import User
from vault.domain.items import Item, build_item, item_ref
from vault.repositories.user_repository import UserNotFoundError, UserRepository

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {
    "image/jpeg": (b"\xFF\xD8\xFF",),
    "image/jpg": (b"\xFF\xD8\xFF",),
    "image/pjpeg": (b"\xFF\xD8\xFF",),
    "image/png": (b"\x89PNG\r\n\x1a\n",),
    "image/gif": (b"GIF87a", b"GIF89a"),
    "image/webp": (b"RIFF",),
}


class VaultError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ItemNotFoundError(VaultError):
    def __init__(self, message: str = "Invalid item index."):
        super().__init__(message)


class ImageRejectedError(VaultError):
    pass


def _has_valid_signature(data: bytes, content_type: str) -> bool:
    signatures = ALLOWED_IMAGE_TYPES.get(content_type, ())
    if content_type == "image/webp":
        return data.startswith(b"RIFF") and data[8:12] == b"WEBP"
    return any(data.startswith(sig) for sig in signatures)


def encode_image(data: bytes, content_type: str, *, max_bytes: int) -> str:
    """Validate an uploaded image and return it as a data URI."""
    ct = (content_type or "").lower()
    if ct not in ALLOWED_IMAGE_TYPES:
        raise ImageRejectedError("Unsupported image format (use JPEG, PNG, GIF or WebP).")
    if not data:
        raise ImageRejectedError("Empty image.")
    if max_bytes and len(data) > max_bytes:
        raise ImageRejectedError(f"Image exceeds {max_bytes // (1024 * 1024) or 1}MB.")
    if not _has_valid_signature(data, ct):
        raise ImageRejectedError("Invalid image file.")
    if ct in ("image/jpg", "image/pjpeg"):
        ct = "image/jpeg"
    return f"data:{ct};base64,{base64.b64encode(data).decode('ascii')}"


def parse_index(raw) -> Optional[int]:
    """Non-negative integer or None; "2abc", "-1" and "" are not indexes."""
    text = str(raw if raw is not None else "").strip()
    if not (text.isascii() and text.isdecimal()):
        return None
    return int(text)


@dataclass
class VaultService:
    repository: Optional[UserRepository] = None

    def __post_init__(self):
        self.repository = self.repository or UserRepository()

    def _load(self, email: str) -> tuple[list[User], User]:
        users = self.repository.list_users()
        user = self.repository.find_by_email(users, email)
        if not user:
            raise UserNotFoundError(email)
        return users, user

    @staticmethod
    def resolve(user: User, raw_index, ref: str | None = None) -> tuple[int, Item]:
        index = parse_index(raw_index)
        if index is None or index >= len(user.items):
            raise ItemNotFoundError()
        item = user.items[index]
        if ref and ref != item_ref(item):
            raise ItemNotFoundError()
        return index, item

    def add_item(self, email: str, category: str, values: Mapping[str, str], image: str | None = None) -> Item:
        """Append a new item; the image, when given, is already a complete data URI."""
        item = build_item(category, values, image)
        users, user = self._load(email)
        user.items.append(item)
        self.repository.persist(self.repository.replace(users, email, user))
        logger.info("%s added a %s item (image: %s)", email, item.category, bool(item.image))
        return item

    def delete_item(self, email: str, raw_index, ref: str | None = None) -> Item:
        users, user = self._load(email)
        index, item = self.resolve(user, raw_index, ref)
        del user.items[index]
        self.repository.persist(self.repository.replace(users, email, user))
        logger.info("%s deleted item %s (%s)", email, index, item.category)
        return item

