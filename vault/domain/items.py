"""
Vault items: a tagged union keyed by ``category``.

Stored flat, exactly like the legacy records:
  {"category": "cards", "cardNumber": "...", "expirationDate": "...", "cvv": "...", "image": "data:..."}
Keys this module does not know about are kept untouched so records written
by other versions round-trip unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import hashlib
import json
from typing import Any, Dict, List, Mapping, Optional

from vault.core.utils import capitalize_first


class InvalidItemError(ValueError):
    """Raised when a submitted item does not satisfy its category."""


@dataclass(frozen=True)
class FieldSpec:
    name: str
    label: str
    input_type: str = "text"


CATEGORY_FIELDS: Dict[str, List[FieldSpec]] = {
    "cards": [
        FieldSpec("cardNumber", "Card Number"),
        FieldSpec("expirationDate", "Expiration Date", "month"),
        FieldSpec("cvv", "CVV"),
    ],
    "licenses": [
        FieldSpec("licenseNumber", "License Number"),
        FieldSpec("expiryDate", "Expiry Date", "month"),
    ],
    "tickets": [
        FieldSpec("ticketType", "Ticket Type"),
        FieldSpec("date", "Date", "date"),
        FieldSpec("time", "Time", "time"),
        FieldSpec("place", "Place"),
    ],
    "passwords": [
        FieldSpec("website", "Website Name"),
        FieldSpec("username", "Username"),
        FieldSpec("password", "Password", "password"),
    ],
}
CATEGORIES = tuple(CATEGORY_FIELDS)
ALL_CATEGORIES = "all"

# Labels used on the detail page and in the PDF ("Website" rather than the form's "Website Name")
DETAIL_LABELS = {"website": "Website"}


@dataclass
class Item:
    category: str
    fields: Dict[str, Any] = field(default_factory=dict)
    image: Optional[str] = None

    @property
    def label(self) -> str:
        return capitalize_first(self.category)

    def field_specs(self) -> List[FieldSpec]:
        return CATEGORY_FIELDS.get(self.category, [])

    def details(self) -> List[tuple[str, str]]:
        """(label, value) pairs of the variant, in form order."""
        specs = self.field_specs()
        if not specs:
            return [(capitalize_first(k), str(v)) for k, v in self.fields.items() if isinstance(v, str)]
        return [
            (DETAIL_LABELS.get(spec.name, spec.label), str(self.fields.get(spec.name, "") or ""))
            for spec in specs
        ]

    def summary(self) -> str:
        f = self.fields
        if self.category == "cards":
            return f"Card Number: {f.get('cardNumber', '')}"
        if self.category == "licenses":
            return f"License Number: {f.get('licenseNumber', '')}"
        if self.category == "tickets":
            return f"Type: {f.get('ticketType', '')}, Date: {f.get('date', '')}"
        if self.category == "passwords":
            return f"Website: {f.get('website', '')}"
        return ""

    def matches(self, query: str) -> bool:
        """
        Case-insensitive substring match against every string value of the
        stored record: category, variant fields (passwords and CVVs too) and
        the image data URI.
        """
        needle = (query or "").lower()
        if not needle:
            return True
        return any(needle in value.lower() for value in self.to_dict().values() if isinstance(value, str))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"category": self.category}
        data.update(self.fields)
        if self.image is not None:
            data["image"] = self.image
        return data

    @staticmethod
    def from_dict(d: Mapping[str, Any]) -> "Item":
        rest = {k: v for k, v in d.items() if k not in ("category", "image")}
        image = d.get("image")
        return Item(
            category=str(d.get("category", "") or ""),
            fields=rest,
            image=image if isinstance(image, str) else None,
        )


def build_item(category: str, values: Mapping[str, Any], image: Optional[str] = None) -> Item:
    """
    Build an item from submitted form values. Only the fields of the chosen
    category are read; every one of them is required.
    """
    key = (category or "").strip()
    if not key:
        raise InvalidItemError("Please select a category.")
    specs = CATEGORY_FIELDS.get(key)
    if specs is None:
        raise InvalidItemError("Unknown category.")
    fields: Dict[str, str] = {}
    missing: List[str] = []
    for spec in specs:
        value = str(values.get(spec.name) or "").strip()
        if not value:
            missing.append(spec.label)
        fields[spec.name] = value
    if missing:
        raise InvalidItemError(f"Please fill in: {', '.join(missing)}.")
    return Item(category=key, fields=fields, image=image or None)


def item_ref(item: Item) -> str:
    """Short content digest; lets a page notice that an index now points at another item."""
    payload = json.dumps(item.to_dict(), sort_keys=True, ensure_ascii=False)
    return hashlib.sha1(payload.encode("utf-8")).hexdigest()[:12]


def filter_items(items: List[Item], category: str = ALL_CATEGORIES, query: str = "") -> List[tuple[int, Item]]:
    """
    Apply the category and search predicates (ANDed) and return
    (storage_index, item) pairs in storage order. The index always refers to
    the unfiltered list.
    """
    wanted = (category or ALL_CATEGORIES).strip()
    result: List[tuple[int, Item]] = []
    for index, item in enumerate(items):
        if wanted != ALL_CATEGORIES and item.category != wanted:
            continue
        if not item.matches(query):
            continue
        result.append((index, item))
    return result
