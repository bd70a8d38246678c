"""
Text codec for the "<name> - <qty> <unit>" lists stored on carts and orders.

Example: "Мандарин - 2 шт, Сыр - Гауда - 0.35 кг"

Entries are joined by ", ". Product names may themselves contain " - ", so the
LAST " - " of an entry separates the name from the quantity.
"""

import re
from typing import Iterable

from models.cart_item import CartItemDTO
from models.product import ProductDTO

ENTRY_SEPARATOR = ", "
NAME_SEPARATOR = " - "

_LEADING_NUMBER = re.compile(r'^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)')


def format_quantity(quantity: float) -> str:
    """Render a quantity the way the storefront writes it: 2, 0.5, 1.25."""
    value = round(float(quantity), 3)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def parse_number(text: str) -> float:
    """Leading number of a string ("2 шт" -> 2.0); anything unparsable is 0."""
    match = _LEADING_NUMBER.match(text or "")
    if not match:
        return 0.0
    try:
        return float(match.group(1))
    except ValueError:
        return 0.0


def encode_entry(item: CartItemDTO) -> str:
    return f"{item.name}{NAME_SEPARATOR}{format_quantity(item.quantity)} {item.unit}"


def encode_quantities(items: Iterable[CartItemDTO]) -> str:
    return ENTRY_SEPARATOR.join(encode_entry(item) for item in items)


def split_entries(text: str | None) -> list[tuple[str, float]]:
    """Split a quantity string into (name, quantity) pairs, skipping malformed entries."""
    entries = []
    if not text:
        return entries
    for raw_entry in text.split(ENTRY_SEPARATOR):
        name, separator, quantity_text = raw_entry.rpartition(NAME_SEPARATOR)
        if not separator:
            continue
        entries.append((name, parse_number(quantity_text)))
    return entries


def parse_quantities(text: str | None, products: Iterable[ProductDTO]) -> dict[str, float]:
    """
    Map product id -> quantity for the given quantity string.

    Names resolve to the first product carrying that exact name; entries naming
    no known product are ignored.
    """
    by_name: dict[str, str] = {}
    for product in products:
        by_name.setdefault(product.name, product.id)

    quantities: dict[str, float] = {}
    for name, quantity in split_entries(text):
        product_id = by_name.get(name)
        if product_id is not None:
            quantities[product_id] = quantity
    return quantities
