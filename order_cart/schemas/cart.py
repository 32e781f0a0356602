"""Cart line item schemas."""

from typing import Literal

from pydantic import Field

from order_cart.schemas.common import FrozenWireModel

PreparationStatus = Literal["NEW", "PENDING", "IN_PROGRESS", "READY", "DELIVERED", "CANCELLED"]
PizzaHalf = Literal["FULL", "HALF_1", "HALF_2"]
PizzaAction = Literal["ADD", "REMOVE"]

LOCKED_PREPARATION_STATUSES: frozenset[str] = frozenset({"READY", "DELIVERED"})


class CartItemModifier(FrozenWireModel):
    """Priced add-on copied from the catalog at selection time."""

    id: str
    modifier_group_id: str = ""
    name: str
    price: float = 0.0


class SelectedPizzaCustomization(FrozenWireModel):
    """Pizza topping change applied to a whole pizza or one half."""

    pizza_customization_id: str
    half: PizzaHalf = "FULL"
    action: PizzaAction = "ADD"

    @property
    def key(self) -> str:
        return f"{self.pizza_customization_id}-{self.half}-{self.action}"


class CartItem(FrozenWireModel):
    """One displayed cart row, possibly standing for several backend unit-rows.

    ``total_price`` is derived; build and change items through
    ``order_cart.services.pricing`` so it is recomputed every time.
    """

    id: str
    backend_ids: list[str] = Field(default_factory=list)
    product_id: str
    product_name: str
    variant_id: str | None = None
    variant_name: str | None = None
    quantity: int = Field(default=1, ge=1)
    unit_price: float = 0.0
    modifiers: list[CartItemModifier] = Field(default_factory=list)
    selected_pizza_customizations: list[SelectedPizzaCustomization] = Field(default_factory=list)
    pizza_extra_cost: float = 0.0
    preparation_notes: str | None = None
    preparation_status: PreparationStatus | None = None
    total_price: float = 0.0

    @property
    def is_locked(self) -> bool:
        """Return whether the kitchen state forbids removing or resizing this row."""
        return self.preparation_status in LOCKED_PREPARATION_STATUSES
