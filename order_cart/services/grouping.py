"""Grouping of backend unit-rows into cart rows and expansion back into unit-rows.

The backend stores one order-item row per physical unit. The cart shows one row
per structurally identical configuration with a quantity, keeping every
backend id in ``CartItem.backend_ids`` so the rows can be expanded again with
existing ids reused before new rows are requested.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from order_cart.core.config import settings
from order_cart.schemas.cart import CartItem, CartItemModifier, SelectedPizzaCustomization
from order_cart.schemas.menu import MenuCategory
from order_cart.schemas.order import OrderItemDto, OrderItemRow, ProductModifierRef
from order_cart.services.menu_service import build_modifier_index
from order_cart.services.pricing import reprice, sanitize_price
from order_cart.utils.ids import is_temporary_id

logger = logging.getLogger(__name__)

GroupKey = tuple[str, str, str, str, str, str]


def modifier_ids_key(modifiers: Iterable[CartItemModifier]) -> str:
    return ",".join(sorted({modifier.id for modifier in modifiers}))


def pizza_customizations_key(customizations: Iterable[SelectedPizzaCustomization] | None) -> str:
    return ",".join(sorted({customization.key for customization in customizations or ()}))


def group_key(
    *,
    product_id: str,
    variant_id: str | None,
    modifiers: Iterable[CartItemModifier],
    customizations: Iterable[SelectedPizzaCustomization] | None,
    preparation_notes: str | None,
    preparation_status: str | None,
) -> GroupKey:
    """Build the key under which structurally identical rows collapse."""
    return (
        product_id,
        variant_id or "null",
        modifier_ids_key(modifiers),
        pizza_customizations_key(customizations),
        preparation_notes or "",
        preparation_status or "",
    )


def item_group_key(item: CartItem, *, include_status: bool = True) -> GroupKey:
    return group_key(
        product_id=item.product_id,
        variant_id=item.variant_id,
        modifiers=item.modifiers,
        customizations=item.selected_pizza_customizations,
        preparation_notes=item.preparation_notes,
        preparation_status=item.preparation_status if include_status else None,
    )


def structurally_equivalent(left: CartItem, right: CartItem, *, compare_status: bool = True) -> bool:
    """Return whether two rows may be merged into one displayed line."""
    return item_group_key(left, include_status=compare_status) == item_group_key(right, include_status=compare_status)


def normalize_row_modifiers(
    row: OrderItemRow,
    modifier_index: Mapping[str, CartItemModifier] | None = None,
) -> list[CartItemModifier]:
    """Convert either modifier shape of a backend row into unique CartItemModifier snapshots."""
    shape = row.modifier_shape
    modifiers: list[CartItemModifier] = []

    if shape == "embedded":
        for embedded in row.modifiers or []:
            info = embedded.product_modifier
            modifiers.append(
                CartItemModifier(
                    id=embedded.product_modifier_id,
                    modifier_group_id=(info.modifier_group_id if info else None) or "",
                    name=(info.name if info else None) or settings.fallback_modifier_name,
                    price=sanitize_price(embedded.price),
                )
            )
    elif shape == "reference":
        index = modifier_index or {}
        for reference in row.product_modifiers or []:
            resolved = index.get(reference.id)
            if resolved is None:
                logger.debug("[GROUPING] Modifier %s missing from catalog; using row data.", reference.id)
                resolved = CartItemModifier(
                    id=reference.id,
                    modifier_group_id=reference.modifier_group_id or "",
                    name=reference.name or settings.fallback_modifier_name,
                    price=sanitize_price(reference.price),
                )
            modifiers.append(resolved)

    unique: dict[str, CartItemModifier] = {}
    for modifier in modifiers:
        unique.setdefault(modifier.id, modifier)
    return list(unique.values())


def row_to_cart_item(row: OrderItemRow, modifiers: list[CartItemModifier]) -> CartItem:
    """Build a single-unit cart row from one backend row."""
    product_name = row.product.name if row.product and row.product.name else settings.fallback_product_name
    item = CartItem(
        id=row.id,
        backend_ids=[row.id],
        product_id=row.product_id,
        product_name=product_name,
        variant_id=row.product_variant_id or None,
        variant_name=row.product_variant.name if row.product_variant else None,
        quantity=1,
        unit_price=sanitize_price(row.base_price),
        modifiers=modifiers,
        selected_pizza_customizations=list(row.selected_pizza_customizations or []),
        pizza_extra_cost=sanitize_price(row.pizza_extra_cost),
        preparation_notes=row.preparation_notes or None,
        preparation_status=row.preparation_status or settings.default_preparation_status,
    )
    return reprice(item)


def group_order_items(
    rows: Iterable[OrderItemRow | Mapping[str, Any]],
    catalog: Sequence[MenuCategory] | None = None,
) -> list[CartItem]:
    """Collapse backend unit-rows into quantity-bearing cart rows in first-seen order."""
    modifier_index = build_modifier_index(catalog) if catalog else {}
    groups: dict[GroupKey, CartItem] = {}
    row_count = 0

    for raw_row in rows:
        row = raw_row if isinstance(raw_row, OrderItemRow) else OrderItemRow.model_validate(raw_row)
        row_count += 1
        modifiers = normalize_row_modifiers(row, modifier_index)
        key = group_key(
            product_id=row.product_id,
            variant_id=row.product_variant_id,
            modifiers=modifiers,
            customizations=row.selected_pizza_customizations,
            preparation_notes=row.preparation_notes,
            preparation_status=row.preparation_status or settings.default_preparation_status,
        )
        existing = groups.get(key)
        if existing is None:
            groups[key] = row_to_cart_item(row, modifiers)
            continue
        groups[key] = reprice(
            existing,
            quantity=existing.quantity + 1,
            backend_ids=[*existing.backend_ids, row.id],
        )

    logger.debug("[GROUPING] Grouped %s backend rows into %s cart rows.", row_count, len(groups))
    return list(groups.values())


def _per_unit_price(item: CartItem) -> float:
    per_unit = Decimal(str(item.total_price)) / Decimal(item.quantity)
    return float(per_unit.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def reusable_backend_ids(item: CartItem, *, is_edit_mode: bool) -> list[str]:
    """Return the backend ids expansion may reuse for this row, in order."""
    if not is_edit_mode or is_temporary_id(item.id):
        return []
    return [backend_id for backend_id in item.backend_ids if backend_id and not is_temporary_id(backend_id)]


def expand_item(item: CartItem, *, is_edit_mode: bool) -> list[OrderItemDto]:
    """Turn one cart row into one backend row per unit, reusing existing ids first."""
    existing_ids = reusable_backend_ids(item, is_edit_mode=is_edit_mode)
    fields: dict[str, Any] = {
        "product_id": item.product_id,
        "product_variant_id": item.variant_id or None,
        "quantity": 1,
        "base_price": item.unit_price,
        "final_price": _per_unit_price(item),
        "preparation_notes": item.preparation_notes or None,
    }
    if item.modifiers:
        fields["product_modifiers"] = [ProductModifierRef(modifier_id=modifier.id) for modifier in item.modifiers]
    if item.selected_pizza_customizations:
        fields["selected_pizza_customizations"] = list(item.selected_pizza_customizations)

    dtos: list[OrderItemDto] = []
    for index in range(item.quantity):
        if index < len(existing_ids):
            dtos.append(OrderItemDto(id=existing_ids[index], **fields))
        else:
            dtos.append(OrderItemDto(**fields))
    return dtos


def expand_items(items: Iterable[CartItem], *, is_edit_mode: bool) -> list[OrderItemDto]:
    dtos: list[OrderItemDto] = []
    for item in items:
        dtos.extend(expand_item(item, is_edit_mode=is_edit_mode))
    return dtos
