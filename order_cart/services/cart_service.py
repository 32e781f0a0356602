"""Cart mutation operations over lists of cart rows.

Every function is pure: it returns a new list and never mutates its input.
Operations the kitchen state forbids are reported through ``CartUpdate``
instead of raising.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, NamedTuple

from order_cart.core.config import settings
from order_cart.schemas.cart import CartItem, CartItemModifier, SelectedPizzaCustomization
from order_cart.schemas.menu import Product, ProductVariant
from order_cart.services.grouping import structurally_equivalent
from order_cart.services.pricing import reprice, sanitize_price, sanitize_quantity
from order_cart.utils.ids import generate_item_id, generate_temporary_item_id

logger = logging.getLogger(__name__)

ITEM_NOT_FOUND = "Item not found in cart."
ITEM_LOCKED = "Item is already {status} and can no longer be changed."


class CartUpdate(NamedTuple):
    items: list[CartItem]
    applied: bool
    reason: str | None = None


def _find_item(items: Sequence[CartItem], item_id: str) -> CartItem | None:
    for item in items:
        if item.id == item_id:
            return item
    return None


def _locked_reason(item: CartItem, is_edit_mode: bool) -> str | None:
    if is_edit_mode and item.is_locked:
        return ITEM_LOCKED.format(status=item.preparation_status)
    return None


def _replace(items: Sequence[CartItem], updated: CartItem) -> list[CartItem]:
    return [updated if item.id == updated.id else item for item in items]


def _resolve_variant(product: Product, variant_id: str | None) -> ProductVariant | None:
    if not variant_id:
        return None
    for variant in product.variants:
        if variant.id == variant_id:
            return variant
    logger.warning("[CART] Variant %s not offered by product %s; using product price.", variant_id, product.id)
    return None


def _clamp_quantity(value: Any) -> int:
    return max(1, sanitize_quantity(value))


def _sanitize_modifiers(modifiers: Sequence[CartItemModifier]) -> list[CartItemModifier]:
    unique: dict[str, CartItemModifier] = {}
    for modifier in modifiers:
        if modifier.id in unique:
            continue
        unique[modifier.id] = modifier.model_copy(update={"price": sanitize_price(modifier.price)})
    return list(unique.values())


def add_item(
    items: Sequence[CartItem],
    product: Product,
    quantity: Any = 1,
    variant_id: str | None = None,
    modifiers: Sequence[CartItemModifier] = (),
    preparation_notes: str | None = None,
    selected_pizza_customizations: Sequence[SelectedPizzaCustomization] | None = None,
    pizza_extra_cost: Any = 0,
    *,
    is_edit_mode: bool = False,
) -> CartUpdate:
    """Add a product to the cart.

    In creation mode a structurally equivalent row absorbs the new units. While
    editing an existing order every addition becomes its own row with a
    temporary id and status NEW, so it can be tracked and cancelled on its own.
    """
    variant = _resolve_variant(product, variant_id)
    unit_price = sanitize_price(variant.price if variant is not None else product.price)
    clean_modifiers = _sanitize_modifiers(modifiers)
    extra_cost = sanitize_price(pizza_extra_cost)
    units = _clamp_quantity(quantity)

    candidate = reprice(
        CartItem(
            id=generate_temporary_item_id() if is_edit_mode else generate_item_id(),
            product_id=product.id,
            product_name=product.name,
            variant_id=variant.id if variant is not None else None,
            variant_name=variant.name if variant is not None else None,
            quantity=units,
            unit_price=unit_price,
            modifiers=clean_modifiers,
            selected_pizza_customizations=list(selected_pizza_customizations or []),
            pizza_extra_cost=extra_cost,
            preparation_notes=preparation_notes or None,
            preparation_status="NEW" if is_edit_mode else None,
        )
    )

    if is_edit_mode:
        return CartUpdate(items=[*items, candidate], applied=True)

    for existing in items:
        if not structurally_equivalent(existing, candidate, compare_status=False):
            continue
        merged_quantity = min(existing.quantity + units, settings.max_item_quantity)
        merged = reprice(existing, quantity=merged_quantity, pizza_extra_cost=extra_cost)
        logger.debug("[CART] Merged %s units of %s into row %s.", units, product.id, existing.id)
        return CartUpdate(items=_replace(items, merged), applied=True)

    return CartUpdate(items=[*items, candidate], applied=True)


def remove_item(items: Sequence[CartItem], item_id: str, *, is_edit_mode: bool = False) -> CartUpdate:
    """Hard-delete a row unless the kitchen has already finished it."""
    item = _find_item(items, item_id)
    if item is None:
        return CartUpdate(items=list(items), applied=False, reason=ITEM_NOT_FOUND)
    reason = _locked_reason(item, is_edit_mode)
    if reason is not None:
        logger.info("[CART] Refused to remove locked row %s (%s).", item_id, item.preparation_status)
        return CartUpdate(items=list(items), applied=False, reason=reason)
    return CartUpdate(items=[row for row in items if row.id != item_id], applied=True)


def update_item_quantity(
    items: Sequence[CartItem],
    item_id: str,
    quantity: Any,
    *,
    is_edit_mode: bool = False,
) -> CartUpdate:
    """Set a row's quantity; zero or less removes the row."""
    units = sanitize_quantity(quantity)
    if units <= 0:
        return remove_item(items, item_id, is_edit_mode=is_edit_mode)

    item = _find_item(items, item_id)
    if item is None:
        return CartUpdate(items=list(items), applied=False, reason=ITEM_NOT_FOUND)
    reason = _locked_reason(item, is_edit_mode)
    if reason is not None:
        logger.info("[CART] Refused to change quantity of locked row %s (%s).", item_id, item.preparation_status)
        return CartUpdate(items=list(items), applied=False, reason=reason)

    return CartUpdate(items=_replace(items, reprice(item, quantity=units)), applied=True)


def update_item(
    items: Sequence[CartItem],
    item_id: str,
    quantity: Any,
    modifiers: Sequence[CartItemModifier],
    preparation_notes: str | None = None,
    variant_id: str | None = None,
    variant_name: str | None = None,
    unit_price: Any = None,
    selected_pizza_customizations: Sequence[SelectedPizzaCustomization] | None = None,
    pizza_extra_cost: Any = 0,
    *,
    is_edit_mode: bool = False,
) -> CartUpdate:
    """Replace a row's configuration after it was re-customized in the product editor.

    Optional fields left as None keep their current values; modifiers, quantity
    and pizza extra cost are always replaced.
    """
    item = _find_item(items, item_id)
    if item is None:
        return CartUpdate(items=list(items), applied=False, reason=ITEM_NOT_FOUND)
    reason = _locked_reason(item, is_edit_mode)
    if reason is not None:
        logger.info("[CART] Refused to update locked row %s (%s).", item_id, item.preparation_status)
        return CartUpdate(items=list(items), applied=False, reason=reason)

    changes: dict[str, Any] = {
        "quantity": _clamp_quantity(quantity),
        "modifiers": _sanitize_modifiers(modifiers),
        "pizza_extra_cost": sanitize_price(pizza_extra_cost),
    }
    if preparation_notes is not None:
        changes["preparation_notes"] = preparation_notes or None
    if variant_id is not None:
        changes["variant_id"] = variant_id
    if variant_name is not None:
        changes["variant_name"] = variant_name
    if unit_price is not None:
        changes["unit_price"] = sanitize_price(unit_price)
    if selected_pizza_customizations is not None:
        changes["selected_pizza_customizations"] = list(selected_pizza_customizations)

    return CartUpdate(items=_replace(items, reprice(item, **changes)), applied=True)
