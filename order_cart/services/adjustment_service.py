"""Working-list reducers for order adjustments."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from order_cart.core.config import settings
from order_cart.schemas.adjustment import OrderAdjustment
from order_cart.utils.ids import generate_temporary_adjustment_id

logger = logging.getLogger(__name__)


def _is_unsaved(adjustment: OrderAdjustment) -> bool:
    return adjustment.is_new or not adjustment.id or adjustment.id.startswith(settings.temp_adjustment_prefix)


def add_adjustment(adjustments: Sequence[OrderAdjustment], adjustment: OrderAdjustment) -> list[OrderAdjustment]:
    """Append an adjustment created on the client, tagged with a temporary id."""
    created = adjustment.model_copy(
        update={"id": generate_temporary_adjustment_id(), "is_new": True, "is_deleted": False}
    )
    return [*adjustments, created]


def update_adjustment(
    adjustments: Sequence[OrderAdjustment],
    adjustment_id: str,
    **changes: Any,
) -> list[OrderAdjustment]:
    """Apply field changes to one adjustment; identity flags are never overwritten."""
    for protected in ("id", "is_new", "is_deleted"):
        changes.pop(protected, None)
    return [
        adjustment.model_copy(update=changes) if adjustment.id == adjustment_id else adjustment
        for adjustment in adjustments
    ]


def remove_adjustment(adjustments: Sequence[OrderAdjustment], adjustment_id: str) -> list[OrderAdjustment]:
    """Drop an unsaved adjustment; mark a persisted one deleted so it can be restored."""
    result: list[OrderAdjustment] = []
    for adjustment in adjustments:
        if adjustment.id != adjustment_id:
            result.append(adjustment)
        elif not _is_unsaved(adjustment):
            logger.debug("[ADJUSTMENTS] Soft-deleted persisted adjustment %s.", adjustment_id)
            result.append(adjustment.model_copy(update={"is_deleted": True}))
    return result


def restore_adjustment(adjustments: Sequence[OrderAdjustment], adjustment_id: str) -> list[OrderAdjustment]:
    return [
        adjustment.model_copy(update={"is_deleted": False}) if adjustment.id == adjustment_id else adjustment
        for adjustment in adjustments
    ]


def active_adjustments(adjustments: Sequence[OrderAdjustment]) -> list[OrderAdjustment]:
    return [adjustment for adjustment in adjustments if not adjustment.is_deleted]
