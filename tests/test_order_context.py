"""Order context and confirmation flow tests."""

import pytest

from order_cart.schemas.adjustment import OrderAdjustment
from order_cart.schemas.form import OrderFormState
from order_cart.schemas.menu import Product
from order_cart.schemas.order import OrderPayload
from order_cart.schemas.session import OrderSession
from order_cart.services import order_session
from order_cart.services.cart_service import add_item
from order_cart.services.order_context import (
    ConfirmInProgressError,
    ConfirmPhase,
    MissingUserError,
    OrderContext,
)


def _build_ready_context() -> OrderContext:
    items = add_item([], Product(id="soup", name="Soup", price=40)).items
    return OrderContext(OrderSession(items=items, form=OrderFormState(selected_table_id="t1")))


def _build_edit_order() -> dict:
    return {
        "id": "order-1",
        "orderType": "DINE_IN",
        "tableId": "t1",
        "table": {"id": "t1", "areaId": "a1"},
        "orderItems": [{"id": "r1", "productId": "soup", "basePrice": 40, "product": {"name": "Soup"}}],
    }


def test_confirm_in_creation_mode_submits_and_resets() -> None:
    context = _build_ready_context()
    submitted: list[OrderPayload] = []

    result = context.confirm_order("user-1", submitted.append)

    assert result.confirmed is True
    assert submitted[0].user_id == "user-1"
    assert submitted[0].to_wire()["userId"] == "user-1"
    assert context.state.items == []
    assert context.phase == ConfirmPhase.IDLE


def test_confirm_returns_validation_error_without_submitting() -> None:
    context = OrderContext()

    result = context.confirm_order("user-1", lambda payload: pytest.fail("submit must not run"))

    assert result.confirmed is False
    assert result.error_message == "The cart is empty."


def test_confirm_requires_user_and_releases_guard() -> None:
    context = _build_ready_context()

    with pytest.raises(MissingUserError):
        context.confirm_order("", lambda payload: None)

    assert context.phase == ConfirmPhase.IDLE


def test_confirm_rejects_fully_discounted_order() -> None:
    context = OrderContext(order_session.load_order_for_editing(_build_edit_order()))
    context.apply(order_session.add_adjustment, OrderAdjustment(name="Comp", amount=-1000))

    result = context.confirm_order("user-1", lambda payload: pytest.fail("submit must not run"))

    assert result.confirmed is False
    assert result.error_message == "The order total must be greater than 0."


def test_second_confirm_while_confirming_is_refused() -> None:
    context = _build_ready_context()
    nested: list[Exception] = []

    def submit(payload: OrderPayload) -> None:
        assert context.phase == ConfirmPhase.CONFIRMING
        with pytest.raises(ConfirmInProgressError) as exc_info:
            context.confirm_order("user-1", lambda inner: None)
        nested.append(exc_info.value)

    result = context.confirm_order("user-1", submit)

    assert result.confirmed is True
    assert len(nested) == 1
    assert context.phase == ConfirmPhase.IDLE


def test_submit_failure_propagates_and_keeps_state() -> None:
    context = _build_ready_context()
    before = context.state

    def submit(payload: OrderPayload) -> None:
        raise RuntimeError("network down")

    with pytest.raises(RuntimeError, match="network down"):
        context.confirm_order("user-1", submit)

    assert context.state is before
    assert context.phase == ConfirmPhase.IDLE


def test_confirm_in_edit_mode_rebaselines_state() -> None:
    context = OrderContext()
    context.load_order_for_editing(_build_edit_order())
    context.apply(order_session.set_order_notes, "Window seat")
    assert context.has_unsaved_changes is True

    result = context.confirm_order("user-1", lambda payload: None)

    assert result.confirmed is True
    assert context.state.is_edit_mode is True
    assert context.has_unsaved_changes is False
    assert context.state.original.notes == "Window seat"


def test_confirm_in_edit_mode_reloads_saved_order() -> None:
    context = OrderContext(order_session.load_order_for_editing(_build_edit_order()))
    context.apply(order_session.update_item_quantity, context.state.items[0].id, 2)
    saved = _build_edit_order()
    saved["orderItems"].append({"id": "r2", "productId": "soup", "basePrice": 40, "product": {"name": "Soup"}})

    context.confirm_order("user-1", lambda payload: saved)

    assert context.state.items[0].backend_ids == ["r1", "r2"]
    assert context.has_unsaved_changes is False


def test_apply_keeps_refused_cart_update_state() -> None:
    context = _build_ready_context()
    before = context.state

    update = context.apply(order_session.remove_item, "missing")

    assert update.applied is False
    assert context.state is before
