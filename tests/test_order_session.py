"""Session reducer and unsaved-changes tests."""

from datetime import datetime, timezone

from order_cart.schemas.adjustment import OrderAdjustment
from order_cart.schemas.form import OrderType
from order_cart.schemas.menu import Product
from order_cart.services import order_session
from order_cart.services.diff_service import has_unsaved_changes


def _build_order(**overrides) -> dict:
    order = {
        "id": "order-1",
        "orderType": "DINE_IN",
        "tableId": "table-1",
        "table": {"id": "table-1", "name": "T1", "areaId": "area-1", "isTemporary": False},
        "scheduledAt": "2026-05-01T18:00:00Z",
        "notes": "Birthday",
        "adjustments": [{"id": "adj-1", "name": "Service", "isPercentage": False, "amount": 10}],
        "orderItems": [
            {"id": "r1", "productId": "pizza", "basePrice": 100, "preparationStatus": "PENDING", "product": {"name": "Pizza"}},
            {"id": "r2", "productId": "pizza", "basePrice": 100, "preparationStatus": "PENDING", "product": {"name": "Pizza"}},
            {"id": "r3", "productId": "soda", "basePrice": 3, "preparationStatus": "READY", "product": {"name": "Soda"}},
        ],
    }
    order.update(overrides)
    return order


def test_loaded_order_is_grouped_and_clean() -> None:
    state = order_session.load_order_for_editing(_build_order())

    assert state.is_edit_mode is True
    assert state.order_data_loaded is True
    assert state.has_unsaved_changes is False
    assert [item.quantity for item in state.items] == [2, 1]
    assert state.form.selected_area_id == "area-1"
    assert state.form.selected_table_id == "table-1"


def test_temporary_table_is_loaded_into_form() -> None:
    order = _build_order(tableId="tmp-1", table={"id": "tmp-1", "name": "Patio", "area": {"id": "area-2"}, "isTemporary": True})

    state = order_session.load_order_for_editing(order)

    assert state.form.is_temporary_table is True
    assert state.form.temporary_table_name == "Patio"
    assert state.form.selected_area_id == "area-2"
    assert state.form.selected_table_id is None


def test_each_single_field_change_is_detected() -> None:
    state = order_session.load_order_for_editing(_build_order())
    pizza_id = state.items[0].id

    changes = [
        order_session.update_item_quantity(state, pizza_id, 3).state,
        order_session.set_order_type(state, OrderType.TAKE_AWAY),
        order_session.set_selected_table_id(state, "table-2"),
        order_session.set_is_temporary_table(state, True),
        order_session.set_order_notes(state, "Anniversary"),
        order_session.set_scheduled_time(state, None),
        order_session.remove_adjustment(state, "adj-1"),
        order_session.add_adjustment(state, OrderAdjustment(name="Promo", amount=-5)),
    ]

    assert all(changed.has_unsaved_changes for changed in changes)


def test_toggling_temporary_table_flags_changes() -> None:
    state = order_session.load_order_for_editing(_build_order())

    toggled = order_session.set_is_temporary_table(state, True)

    assert state.has_unsaved_changes is False
    assert toggled.has_unsaved_changes is True


def test_quantity_round_trip_restores_price_and_clean_state() -> None:
    state = order_session.load_order_for_editing(_build_order())
    pizza = state.items[0]

    grown = order_session.update_item_quantity(state, pizza.id, 5).state
    restored = order_session.update_item_quantity(grown, pizza.id, pizza.quantity).state

    assert grown.has_unsaved_changes is True
    assert restored.items[0].total_price == pizza.total_price
    assert restored.has_unsaved_changes is False


def test_scheduled_time_compares_by_instant() -> None:
    state = order_session.load_order_for_editing(_build_order())

    same = order_session.set_scheduled_time(state, datetime(2026, 5, 1, 18, 0, tzinfo=timezone.utc))

    assert same.has_unsaved_changes is False


def test_item_order_does_not_count_as_change() -> None:
    state = order_session.load_order_for_editing(_build_order())

    reordered = order_session.set_items(state, list(reversed(state.items)))

    assert reordered.has_unsaved_changes is False


def test_reset_to_original_state_clears_changes() -> None:
    state = order_session.load_order_for_editing(_build_order())
    edited = order_session.set_order_notes(order_session.reset_cart(state), "changed")

    reset = order_session.reset_to_original_state(edited)

    assert edited.has_unsaved_changes is True
    assert reset.has_unsaved_changes is False
    assert reset.items == state.items


def test_mark_saved_adopts_current_state() -> None:
    state = order_session.load_order_for_editing(_build_order())
    edited = order_session.set_order_notes(state, "changed")

    saved = order_session.mark_saved(edited)

    assert saved.has_unsaved_changes is False
    assert saved.original.notes == "changed"


def test_creation_mode_never_reports_changes() -> None:
    state = order_session.new_session()

    update = order_session.add_item(state, Product(id="soda", name="Soda", price=3))

    assert update.applied is True
    assert update.state.has_unsaved_changes is False
    assert has_unsaved_changes(update.state) is False


def test_locked_item_refusal_keeps_state() -> None:
    state = order_session.load_order_for_editing(_build_order())
    soda_id = state.items[1].id

    update = order_session.remove_item(state, soda_id)

    assert update.applied is False
    assert update.state is state


def test_prepayment_is_sanitized_and_cleared() -> None:
    state = order_session.set_prepayment(order_session.new_session(), "pay-1", "12.345", "CASH")

    assert state.prepayment.amount == 12.35
    assert order_session.clear_prepayment(state).prepayment is None


def test_huge_prepayment_is_capped() -> None:
    state = order_session.set_prepayment(order_session.new_session(), "pay-1", "1e40")

    assert state.prepayment.amount == 999999.99
