"""Snapshot capture and the unsaved-changes comparison for orders in edit mode."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from order_cart.schemas.adjustment import OrderAdjustment
from order_cart.schemas.cart import CartItem
from order_cart.schemas.form import DeliveryInfo
from order_cart.schemas.session import OrderSession, OriginalSnapshot
from order_cart.services.grouping import modifier_ids_key, pizza_customizations_key
from order_cart.utils.time import same_instant

NormalizedItem = tuple[Any, ...]
NormalizedAdjustment = tuple[Any, ...]


def _normalize_item(item: CartItem) -> NormalizedItem:
    return (
        item.product_id,
        item.variant_id or None,
        item.quantity,
        round(item.unit_price, 2),
        item.preparation_notes or None,
        modifier_ids_key(item.modifiers),
        pizza_customizations_key(item.selected_pizza_customizations),
        round(item.pizza_extra_cost, 2),
    )


def normalize_items_for_diff(items: Iterable[CartItem]) -> list[NormalizedItem]:
    """Project items onto the fields that matter for change detection, order independent."""
    return sorted((_normalize_item(item) for item in items), key=repr)


def normalize_adjustments_for_diff(adjustments: Iterable[OrderAdjustment]) -> list[NormalizedAdjustment]:
    normalized = [
        (
            adjustment.name,
            adjustment.is_percentage,
            adjustment.value if adjustment.is_percentage else None,
            None if adjustment.is_percentage else adjustment.amount,
        )
        for adjustment in adjustments
        if not adjustment.is_deleted
    ]
    return sorted(normalized, key=repr)


def _normalize_delivery_info(info: DeliveryInfo) -> tuple[str, ...]:
    return (
        info.recipient_name or "",
        info.recipient_phone or "",
        info.full_address or "",
        info.delivery_instructions or "",
    )


def capture_snapshot(session: OrderSession) -> OriginalSnapshot:
    """Freeze the current session as the baseline for the change comparison."""
    form = session.form
    return OriginalSnapshot(
        items=list(session.items),
        order_type=form.order_type,
        area_id=form.selected_area_id,
        table_id=form.selected_table_id,
        is_temporary_table=form.is_temporary_table,
        temporary_table_name=form.temporary_table_name,
        delivery_info=form.delivery_info,
        notes=form.order_notes,
        scheduled_at=form.scheduled_time,
        adjustments=list(session.adjustments),
    )


def has_unsaved_changes(session: OrderSession) -> bool:
    """Return whether an order being edited differs from its last saved state."""
    original = session.original
    if not session.is_edit_mode or original is None:
        return False

    form = session.form
    if normalize_items_for_diff(session.items) != normalize_items_for_diff(original.items):
        return True
    if form.order_type != original.order_type:
        return True
    if (form.selected_area_id or None) != (original.area_id or None):
        return True
    if (form.selected_table_id or None) != (original.table_id or None):
        return True
    if form.is_temporary_table != original.is_temporary_table:
        return True
    if (form.temporary_table_name or "") != (original.temporary_table_name or ""):
        return True
    if _normalize_delivery_info(form.delivery_info) != _normalize_delivery_info(original.delivery_info):
        return True
    if (form.order_notes or "") != (original.notes or ""):
        return True
    if not same_instant(form.scheduled_time, original.scheduled_at):
        return True
    return normalize_adjustments_for_diff(session.adjustments) != normalize_adjustments_for_diff(original.adjustments)
