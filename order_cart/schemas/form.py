"""Order form schemas."""

from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import Field

from order_cart.schemas.common import FrozenWireModel

PrepaymentMethod = Literal["CASH", "CARD", "TRANSFER"]


class OrderType(str, Enum):
    """How the order reaches the customer."""

    DINE_IN = "DINE_IN"
    TAKE_AWAY = "TAKE_AWAY"
    DELIVERY = "DELIVERY"


class DeliveryInfo(FrozenWireModel):
    """Recipient details; which fields matter depends on the order type."""

    recipient_name: str | None = None
    recipient_phone: str | None = None
    full_address: str | None = None
    delivery_instructions: str | None = None


class OrderFormState(FrozenWireModel):
    """Order header fields edited alongside the cart items."""

    order_type: OrderType = OrderType.DINE_IN
    selected_area_id: str | None = None
    selected_table_id: str | None = None
    is_temporary_table: bool = False
    temporary_table_name: str = ""
    scheduled_time: datetime | None = None
    delivery_info: DeliveryInfo = Field(default_factory=DeliveryInfo)
    order_notes: str = ""


class Prepayment(FrozenWireModel):
    """Payment registered before the order is confirmed."""

    id: str
    amount: Any = 0
    method: PrepaymentMethod | None = None
