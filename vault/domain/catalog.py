"""Fixed product catalog offered on the purchase page (prices in Rs.)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Product:
    name: str
    price: int


PRODUCTS: tuple[Product, ...] = (
    Product("Pizza", 500),
    Product("Burger", 300),
    Product("Pasta", 400),
    Product("Fries", 200),
    Product("Soda", 100),
    Product("Salad", 250),
    Product("Sandwich", 150),
    Product("Ice Cream", 120),
    Product("Tacos", 350),
    Product("Noodles", 300),
    Product("Steak", 800),
    Product("Chicken Wings", 450),
    Product("Garlic Bread", 180),
    Product("Soup", 220),
    Product("Smoothie", 180),
)


def find_product(name: str | None) -> Optional[Product]:
    wanted = (name or "").strip()
    for product in PRODUCTS:
        if product.name == wanted:
            return product
    return None
