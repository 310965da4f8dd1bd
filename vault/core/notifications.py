"""
Transient user notifications.

Messages queued before a redirect travel in a short-lived flash cookie and
are rendered exactly once by the next page.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
from typing import Iterable
from urllib.parse import quote, unquote

from fastapi import Request, Response

FLASH_COOKIE_NAME = "flash"
KINDS = ("success", "warning", "danger", "info")


@dataclass(frozen=True)
class Notification:
    message: str
    kind: str = "success"

    def to_dict(self) -> dict:
        return {"message": self.message, "kind": self.kind}


def success(message: str) -> Notification:
    return Notification(message, "success")


def warning(message: str) -> Notification:
    return Notification(message, "warning")


def danger(message: str) -> Notification:
    return Notification(message, "danger")


def flash(response: Response, notifications: Iterable[Notification]) -> None:
    """Queue notifications for the next rendered page."""
    payload = [n.to_dict() for n in notifications if n and n.message]
    if not payload:
        return
    response.set_cookie(
        FLASH_COOKIE_NAME,
        quote(json.dumps(payload, ensure_ascii=False), safe=""),
        max_age=60,
        httponly=True,
        samesite="strict",
        path="/",
    )


def pending(request: Request) -> list[Notification]:
    """Read queued notifications; unreadable cookies are ignored."""
    raw = request.cookies.get(FLASH_COOKIE_NAME)
    if not raw:
        return []
    try:
        data = json.loads(unquote(raw))
    except ValueError:
        return []
    if not isinstance(data, list):
        return []
    result: list[Notification] = []
    for entry in data:
        if not isinstance(entry, dict):
            continue
        message = str(entry.get("message") or "").strip()
        kind = entry.get("kind") if entry.get("kind") in KINDS else "info"
        if message:
            result.append(Notification(message, kind))
    return result


def clear(response: Response) -> None:
    response.delete_cookie(FLASH_COOKIE_NAME, path="/")
