"""Read-only lookups over the menu catalog tree."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from order_cart.core.config import settings
from order_cart.schemas.cart import CartItemModifier
from order_cart.schemas.menu import MenuCategory, Product
from order_cart.services.pricing import sanitize_price

logger = logging.getLogger(__name__)


def iter_products(catalog: Iterable[MenuCategory] | None) -> Iterator[Product]:
    """Yield every product in the catalog, depth first."""
    for category in catalog or ():
        yield from category.products
        for subcategory in category.subcategories:
            yield from subcategory.products


def find_product_by_id(catalog: Iterable[MenuCategory] | None, product_id: str) -> Product | None:
    for product in iter_products(catalog):
        if product.id == product_id:
            return product
    return None


def find_modifier_by_id(catalog: Iterable[MenuCategory] | None, modifier_id: str) -> CartItemModifier | None:
    """Return a priced snapshot of the modifier with this id, or None."""
    for product in iter_products(catalog):
        for group in product.modifier_groups:
            for modifier in group.modifiers:
                if modifier.id == modifier_id:
                    return CartItemModifier(
                        id=modifier.id,
                        modifier_group_id=group.id,
                        name=modifier.name,
                        price=sanitize_price(modifier.price),
                    )
    return None


def build_modifier_index(catalog: Iterable[MenuCategory] | None) -> dict[str, CartItemModifier]:
    """Index every catalog modifier by id; the first occurrence wins."""
    index: dict[str, CartItemModifier] = {}
    for product in iter_products(catalog):
        for group in product.modifier_groups:
            for modifier in group.modifiers:
                if modifier.id in index:
                    continue
                index[modifier.id] = CartItemModifier(
                    id=modifier.id,
                    modifier_group_id=group.id,
                    name=modifier.name,
                    price=sanitize_price(modifier.price),
                )
    return index


def fallback_modifier(modifier_id: str, modifier_group_id: str | None = None) -> CartItemModifier:
    """Return a zero-priced stand-in so the cart stays renderable under partial catalog data."""
    return CartItemModifier(
        id=modifier_id,
        modifier_group_id=modifier_group_id or "",
        name=settings.fallback_modifier_name,
        price=0.0,
    )


def resolve_modifier(catalog: Iterable[MenuCategory] | None, modifier_id: str) -> CartItemModifier:
    """Resolve a modifier by id, degrading to a stub on a catalog miss."""
    modifier = find_modifier_by_id(catalog, modifier_id)
    if modifier is None:
        logger.debug("[MENU] Modifier %s not found in catalog; using stub.", modifier_id)
        return fallback_modifier(modifier_id)
    return modifier
