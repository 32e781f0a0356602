"""Registered payment schemas."""

from enum import Enum

from pydantic import BaseModel

from order_cart.schemas.common import WireModel


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"


class Payment(WireModel):
    """Payment already registered against an order."""

    id: str | None = None
    amount: float
    status: PaymentStatus = PaymentStatus.PENDING
    method: str | None = None


class PaymentSummary(BaseModel):
    """Amounts derived from an order total and its payments."""

    total_paid: float
    remaining_amount: float
    has_payments: bool
    can_make_payment: bool
