"""Order form reducers.

Each reducer takes the current ``OrderFormState`` and returns a new one,
applying the clearing rules tied to the order type and table selection.
"""

from __future__ import annotations

from datetime import datetime

from order_cart.schemas.form import DeliveryInfo, OrderFormState, OrderType

_KEPT_DELIVERY_FIELDS: dict[OrderType, tuple[str, ...]] = {
    OrderType.DINE_IN: (),
    OrderType.TAKE_AWAY: ("recipient_name", "recipient_phone"),
    OrderType.DELIVERY: ("recipient_name", "recipient_phone", "full_address", "delivery_instructions"),
}


def clean_delivery_info(order_type: OrderType, info: DeliveryInfo | None) -> DeliveryInfo:
    """Keep only the delivery fields that matter for the order type."""
    if info is None:
        return DeliveryInfo()
    kept = {name: getattr(info, name) for name in _KEPT_DELIVERY_FIELDS[order_type]}
    return DeliveryInfo(**{name: value for name, value in kept.items() if value is not None})


def set_order_type(form: OrderFormState, order_type: OrderType) -> OrderFormState:
    changes: dict = {
        "order_type": order_type,
        "delivery_info": clean_delivery_info(order_type, form.delivery_info),
    }
    if order_type != OrderType.DINE_IN:
        changes.update(
            selected_area_id=None,
            selected_table_id=None,
            is_temporary_table=False,
            temporary_table_name="",
        )
    return form.model_copy(update=changes)


def set_selected_area_id(form: OrderFormState, area_id: str | None) -> OrderFormState:
    return form.model_copy(update={"selected_area_id": area_id or None})


def set_selected_table_id(form: OrderFormState, table_id: str | None) -> OrderFormState:
    """Select a real table; a real table replaces any temporary one."""
    changes: dict = {"selected_table_id": table_id or None}
    if table_id:
        changes.update(is_temporary_table=False, temporary_table_name="")
    return form.model_copy(update=changes)


def set_is_temporary_table(form: OrderFormState, is_temporary: bool) -> OrderFormState:
    if is_temporary:
        return form.model_copy(update={"is_temporary_table": True, "selected_table_id": None})
    return form.model_copy(update={"is_temporary_table": False, "temporary_table_name": ""})


def set_temporary_table_name(form: OrderFormState, name: str) -> OrderFormState:
    return form.model_copy(update={"temporary_table_name": name or ""})


def set_scheduled_time(form: OrderFormState, scheduled_time: datetime | None) -> OrderFormState:
    return form.model_copy(update={"scheduled_time": scheduled_time})


def set_delivery_info(form: OrderFormState, info: DeliveryInfo) -> OrderFormState:
    return form.model_copy(update={"delivery_info": info})


def set_order_notes(form: OrderFormState, notes: str) -> OrderFormState:
    return form.model_copy(update={"order_notes": notes or ""})
