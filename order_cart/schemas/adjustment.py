"""Order adjustment schemas."""

from order_cart.schemas.common import FrozenWireModel


class OrderAdjustment(FrozenWireModel):
    """Named discount or surcharge; a negative value or amount is a discount."""

    id: str | None = None
    name: str
    description: str = ""
    is_percentage: bool = False
    value: float | None = None
    amount: float | None = None
    is_new: bool = False
    is_deleted: bool = False
