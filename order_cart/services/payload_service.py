"""Builds the create/update request for an order session."""

from __future__ import annotations

import logging
from typing import Any

from order_cart.schemas.form import DeliveryInfo, OrderType
from order_cart.schemas.order import OrderAdjustmentDto, OrderPayload
from order_cart.schemas.session import OrderSession
from order_cart.services.adjustment_service import active_adjustments
from order_cart.services.form_service import clean_delivery_info
from order_cart.services.grouping import expand_items
from order_cart.services.pricing import compute_order_totals
from order_cart.services.validation import validate_order_for_confirmation

logger = logging.getLogger(__name__)


def _payload_delivery_info(session: OrderSession) -> DeliveryInfo:
    cleaned = clean_delivery_info(session.form.order_type, session.form.delivery_info)
    phone = (cleaned.recipient_phone or "").strip()
    fields = cleaned.model_dump(exclude_none=True)
    fields.pop("recipient_phone", None)
    if phone:
        fields["recipient_phone"] = phone
    return DeliveryInfo(**fields)


def _table_fields(session: OrderSession) -> dict[str, Any]:
    form = session.form
    if form.order_type != OrderType.DINE_IN:
        return {}
    if form.is_temporary_table:
        return {
            "is_temporary_table": True,
            "temporary_table_name": form.temporary_table_name,
            "temporary_table_area_id": form.selected_area_id or None,
        }
    return {"table_id": form.selected_table_id or None}


def _adjustment_dtos(session: OrderSession) -> list[OrderAdjustmentDto]:
    return [
        OrderAdjustmentDto(
            order_id=session.order_id,
            name=adjustment.name,
            is_percentage=adjustment.is_percentage,
            value=adjustment.value,
            amount=adjustment.amount,
        )
        for adjustment in active_adjustments(session.adjustments)
    ]


def prepare_order_payload(session: OrderSession) -> OrderPayload | None:
    """Return the backend request for the session, or None when it does not validate."""
    validation = validate_order_for_confirmation(session)
    if not validation.is_valid:
        logger.info("[PAYLOAD] Order not ready: %s", validation.error_message)
        return None

    form = session.form
    totals = compute_order_totals(session.items, session.adjustments)
    fields: dict[str, Any] = {
        "order_type": form.order_type,
        "subtotal": totals.subtotal,
        "total": totals.total,
        "items": expand_items(session.items, is_edit_mode=session.is_edit_mode),
        "delivery_info": _payload_delivery_info(session),
        **_table_fields(session),
    }
    if form.scheduled_time is not None:
        fields["scheduled_at"] = form.scheduled_time
    if form.order_notes:
        fields["notes"] = form.order_notes
    if session.is_edit_mode:
        adjustments = _adjustment_dtos(session)
        if adjustments:
            fields["adjustments"] = adjustments
    elif session.prepayment is not None:
        fields["prepayment_id"] = session.prepayment.id

    return OrderPayload(**fields)
