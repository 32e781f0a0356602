"""Price sanitation, line totals, adjustment amounts and order totals."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, NamedTuple

from order_cart.core.config import settings
from order_cart.schemas.adjustment import OrderAdjustment
from order_cart.schemas.cart import CartItem, CartItemModifier
from order_cart.schemas.payment import Payment, PaymentStatus, PaymentSummary

logger = logging.getLogger(__name__)

_CENT = Decimal("0.01")
_COUNTED_PAYMENT_STATUSES: set[PaymentStatus] = {PaymentStatus.COMPLETED, PaymentStatus.PENDING}


class OrderTotals(NamedTuple):
    subtotal: float
    adjustments_total: float
    total: float
    clamped: bool


def _to_decimal(value: Any) -> Decimal | None:
    """Parse value into a finite Decimal, or None when it is not a number."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite():
        return None
    return number


def _decimal_or_zero(value: Any) -> Decimal:
    number = _to_decimal(value)
    return number if number is not None else Decimal("0")


def _bounded(value: Any) -> Decimal:
    """Parse value and clamp it to plus or minus the configured money ceiling."""
    number = _decimal_or_zero(value)
    limit: Decimal = settings.max_money_amount
    return max(-limit, min(number, limit))


def _cents(number: Decimal) -> float:
    return float(number.quantize(_CENT, rounding=ROUND_HALF_UP))


def money(value: Any) -> float:
    """Round a signed amount to cents; non-numeric input becomes 0, huge input is capped."""
    return float(_bounded(value).quantize(_CENT, rounding=ROUND_HALF_UP))


def sanitize_price(value: Any) -> float:
    """Coerce user-typed price input into a non-negative, capped, 2-decimal amount."""
    number = _to_decimal(value)
    if number is None or number < 0:
        return 0.0
    if number >= settings.max_money_amount:
        return float(settings.max_money_amount)
    rounded: Decimal = number.quantize(_CENT, rounding=ROUND_HALF_UP)
    return float(min(rounded, settings.max_money_amount))


def sanitize_quantity(value: Any) -> int:
    """Round quantity input half-up to an integer capped at the configured maximum.

    Non-numeric or non-positive input yields 0 so callers treat it as a removal.
    """
    number = _to_decimal(value)
    if number is None or number <= 0:
        return 0
    if number >= settings.max_item_quantity:
        return settings.max_item_quantity
    whole = int(number.to_integral_value(rounding=ROUND_HALF_UP))
    return min(whole, settings.max_item_quantity)


def compute_total(
    unit_price: Any,
    modifiers: Sequence[CartItemModifier],
    pizza_extra_cost: Any,
    quantity: int,
) -> float:
    """Return (unit price + modifier prices + pizza extra cost) x quantity."""
    per_unit: Decimal = _bounded(unit_price) + _bounded(pizza_extra_cost)
    for modifier in modifiers:
        per_unit += _bounded(modifier.price)
    return _cents(per_unit * Decimal(quantity))


def reprice(item: CartItem, **changes: Any) -> CartItem:
    """Apply field changes to an item and recompute its total price."""
    updated: CartItem = item.model_copy(update=changes) if changes else item
    total_price = compute_total(updated.unit_price, updated.modifiers, updated.pizza_extra_cost, updated.quantity)
    return updated.model_copy(update={"total_price": total_price})


def cart_subtotal(items: Iterable[CartItem]) -> float:
    return _cents(sum((_decimal_or_zero(item.total_price) for item in items), Decimal("0")))


def items_count(items: Iterable[CartItem]) -> int:
    """Return the number of physical units in the cart."""
    return sum(item.quantity for item in items)


def resolve_adjustment_amount(adjustment: OrderAdjustment, subtotal: float) -> float:
    """Return the signed money amount an adjustment contributes to the order."""
    if adjustment.is_percentage:
        percentage: Decimal = _bounded(adjustment.value)
        return _cents(_decimal_or_zero(subtotal) * percentage / Decimal(100))
    return money(adjustment.amount)


def adjustments_total(adjustments: Iterable[OrderAdjustment], subtotal: float) -> float:
    """Sum adjustment amounts, skipping soft-deleted entries."""
    total = Decimal("0")
    for adjustment in adjustments:
        if adjustment.is_deleted:
            continue
        total += Decimal(str(resolve_adjustment_amount(adjustment, subtotal)))
    return _cents(total)


def compute_order_totals(items: Sequence[CartItem], adjustments: Sequence[OrderAdjustment]) -> OrderTotals:
    """Compute subtotal, adjustment sum and the final total, which never goes below zero."""
    subtotal: float = cart_subtotal(items)
    adjustment_sum: float = adjustments_total(adjustments, subtotal)
    raw_total: Decimal = Decimal(str(subtotal)) + Decimal(str(adjustment_sum))
    clamped: bool = raw_total < 0
    if clamped:
        logger.warning(
            "[PRICING] Adjustments %.2f exceed subtotal %.2f; total clamped to 0.",
            adjustment_sum,
            subtotal,
        )
    return OrderTotals(
        subtotal=subtotal,
        adjustments_total=adjustment_sum,
        total=_cents(max(raw_total, Decimal("0"))),
        clamped=clamped,
    )


def summarize_payments(total: float, payments: Iterable[Payment]) -> PaymentSummary:
    """Return how much of the order total is covered by completed or pending payments."""
    payment_list: list[Payment] = list(payments)
    paid = Decimal("0")
    for payment in payment_list:
        if payment.status in _COUNTED_PAYMENT_STATUSES:
            paid += _bounded(payment.amount)
    remaining: Decimal = max(Decimal(str(total)) - paid, Decimal("0"))
    return PaymentSummary(
        total_paid=_cents(paid),
        remaining_amount=_cents(remaining),
        has_payments=bool(payment_list),
        can_make_payment=total > 0 and remaining > 0,
    )
