"""Pure reducers over ``OrderSession``.

Every reducer returns a new session with ``has_unsaved_changes`` recomputed,
so exit and payment gating never reads a stale flag.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

from order_cart.schemas.adjustment import OrderAdjustment
from order_cart.schemas.cart import CartItem, CartItemModifier
from order_cart.schemas.form import DeliveryInfo, OrderFormState, OrderType, Prepayment, PrepaymentMethod
from order_cart.schemas.menu import MenuCategory, Product
from order_cart.schemas.order import OrderSnapshot
from order_cart.schemas.session import OrderSession, SessionUpdate
from order_cart.services import adjustment_service, cart_service, form_service
from order_cart.services.diff_service import capture_snapshot, has_unsaved_changes
from order_cart.services.grouping import group_order_items
from order_cart.services.pricing import sanitize_price

logger = logging.getLogger(__name__)


def _commit(state: OrderSession, **changes: Any) -> OrderSession:
    updated = state.model_copy(update=changes)
    return updated.model_copy(update={"has_unsaved_changes": has_unsaved_changes(updated)})


def _apply_cart(state: OrderSession, update: cart_service.CartUpdate) -> SessionUpdate:
    if not update.applied:
        return SessionUpdate(state=state, applied=False, reason=update.reason)
    return SessionUpdate(state=_commit(state, items=update.items), applied=True)


def new_session() -> OrderSession:
    return OrderSession()


# Items


def add_item(state: OrderSession, product: Product, quantity: Any = 1, **options: Any) -> SessionUpdate:
    update = cart_service.add_item(state.items, product, quantity, is_edit_mode=state.is_edit_mode, **options)
    return _apply_cart(state, update)


def remove_item(state: OrderSession, item_id: str) -> SessionUpdate:
    return _apply_cart(state, cart_service.remove_item(state.items, item_id, is_edit_mode=state.is_edit_mode))


def update_item_quantity(state: OrderSession, item_id: str, quantity: Any) -> SessionUpdate:
    update = cart_service.update_item_quantity(state.items, item_id, quantity, is_edit_mode=state.is_edit_mode)
    return _apply_cart(state, update)


def update_item(
    state: OrderSession,
    item_id: str,
    quantity: Any,
    modifiers: Sequence[CartItemModifier],
    **options: Any,
) -> SessionUpdate:
    update = cart_service.update_item(
        state.items, item_id, quantity, modifiers, is_edit_mode=state.is_edit_mode, **options
    )
    return _apply_cart(state, update)


def set_items(state: OrderSession, items: Sequence[CartItem]) -> OrderSession:
    return _commit(state, items=list(items))


def reset_cart(state: OrderSession) -> OrderSession:
    return _commit(state, items=[])


# Form


def _form(state: OrderSession, form: OrderFormState) -> OrderSession:
    return _commit(state, form=form)


def set_order_type(state: OrderSession, order_type: OrderType) -> OrderSession:
    return _form(state, form_service.set_order_type(state.form, order_type))


def set_selected_area_id(state: OrderSession, area_id: str | None) -> OrderSession:
    return _form(state, form_service.set_selected_area_id(state.form, area_id))


def set_selected_table_id(state: OrderSession, table_id: str | None) -> OrderSession:
    return _form(state, form_service.set_selected_table_id(state.form, table_id))


def set_is_temporary_table(state: OrderSession, is_temporary: bool) -> OrderSession:
    return _form(state, form_service.set_is_temporary_table(state.form, is_temporary))


def set_temporary_table_name(state: OrderSession, name: str) -> OrderSession:
    return _form(state, form_service.set_temporary_table_name(state.form, name))


def set_scheduled_time(state: OrderSession, scheduled_time: datetime | None) -> OrderSession:
    return _form(state, form_service.set_scheduled_time(state.form, scheduled_time))


def set_delivery_info(state: OrderSession, info: DeliveryInfo) -> OrderSession:
    return _form(state, form_service.set_delivery_info(state.form, info))


def set_order_notes(state: OrderSession, notes: str) -> OrderSession:
    return _form(state, form_service.set_order_notes(state.form, notes))


# Adjustments


def add_adjustment(state: OrderSession, adjustment: OrderAdjustment) -> OrderSession:
    return _commit(state, adjustments=adjustment_service.add_adjustment(state.adjustments, adjustment))


def update_adjustment(state: OrderSession, adjustment_id: str, **changes: Any) -> OrderSession:
    return _commit(
        state, adjustments=adjustment_service.update_adjustment(state.adjustments, adjustment_id, **changes)
    )


def remove_adjustment(state: OrderSession, adjustment_id: str) -> OrderSession:
    return _commit(state, adjustments=adjustment_service.remove_adjustment(state.adjustments, adjustment_id))


def restore_adjustment(state: OrderSession, adjustment_id: str) -> OrderSession:
    return _commit(state, adjustments=adjustment_service.restore_adjustment(state.adjustments, adjustment_id))


# Prepayment


def set_prepayment(
    state: OrderSession,
    prepayment_id: str,
    amount: Any,
    method: PrepaymentMethod | None = None,
) -> OrderSession:
    prepayment = Prepayment(id=prepayment_id, amount=sanitize_price(amount), method=method)
    return _commit(state, prepayment=prepayment)


def clear_prepayment(state: OrderSession) -> OrderSession:
    return _commit(state, prepayment=None)


# Lifecycle


def load_order_for_editing(
    order: OrderSnapshot | Mapping[str, Any],
    catalog: Sequence[MenuCategory] | None = None,
) -> OrderSession:
    """Build an edit-mode session from a backend order and capture its baseline."""
    snapshot = order if isinstance(order, OrderSnapshot) else OrderSnapshot.model_validate(order)
    table = snapshot.table
    is_temporary = bool(table and table.is_temporary)
    area_id = None
    if table is not None:
        area_id = table.area_id or (table.area.id if table.area else None)

    form = OrderFormState(
        order_type=snapshot.order_type,
        selected_area_id=area_id,
        selected_table_id=None if is_temporary else snapshot.table_id,
        is_temporary_table=is_temporary,
        temporary_table_name=(table.name or "") if is_temporary and table else "",
        scheduled_time=snapshot.scheduled_at,
        delivery_info=form_service.clean_delivery_info(snapshot.order_type, snapshot.delivery_info),
        order_notes=snapshot.notes or "",
    )
    adjustments = [
        OrderAdjustment(
            id=row.id,
            name=row.name,
            description=row.description or "",
            is_percentage=row.is_percentage,
            value=row.value,
            amount=row.amount,
        )
        for row in snapshot.adjustments
    ]
    state = OrderSession(
        order_id=snapshot.id,
        is_edit_mode=True,
        items=group_order_items(snapshot.order_items, catalog),
        form=form,
        adjustments=adjustments,
    )
    logger.info(
        "[SESSION] Loaded order %s for editing: %s rows in %s cart lines.",
        snapshot.id,
        len(snapshot.order_items),
        len(state.items),
    )
    return state.model_copy(update={"original": capture_snapshot(state), "has_unsaved_changes": False})


def reset_to_original_state(state: OrderSession) -> OrderSession:
    """Discard every edit and return to the captured baseline."""
    original = state.original
    if original is None:
        return state
    form = OrderFormState(
        order_type=original.order_type,
        selected_area_id=original.area_id,
        selected_table_id=original.table_id,
        is_temporary_table=original.is_temporary_table,
        temporary_table_name=original.temporary_table_name,
        scheduled_time=original.scheduled_at,
        delivery_info=original.delivery_info,
        order_notes=original.notes,
    )
    return _commit(state, items=list(original.items), form=form, adjustments=list(original.adjustments))


def mark_saved(state: OrderSession) -> OrderSession:
    """Adopt the current state as the new baseline after a successful save."""
    return state.model_copy(update={"original": capture_snapshot(state), "has_unsaved_changes": False})


def reset_order() -> OrderSession:
    """Close the session: drop items, form, adjustments, prepayment and baseline."""
    return new_session()
