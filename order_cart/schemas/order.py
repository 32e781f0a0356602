"""Order snapshot (inbound) and order mutation payload (outbound) schemas."""

from datetime import datetime
from typing import Any, Literal

from pydantic import Field

from order_cart.schemas.cart import PreparationStatus, SelectedPizzaCustomization
from order_cart.schemas.common import WireModel
from order_cart.schemas.form import DeliveryInfo, OrderType

ModifierShape = Literal["embedded", "reference", "none"]


class NamedRef(WireModel):
    id: str | None = None
    name: str | None = None


class EmbeddedModifierInfo(WireModel):
    name: str | None = None
    modifier_group_id: str | None = None


class EmbeddedOrderItemModifier(WireModel):
    """Legacy modifier row embedded in an order item, priced at order time."""

    product_modifier_id: str
    price: Any = 0
    product_modifier: EmbeddedModifierInfo | None = None


class ModifierReference(WireModel):
    """Current modifier shape: a reference by id with optional denormalized fields."""

    id: str
    modifier_group_id: str | None = None
    name: str | None = None
    price: Any = None


class OrderItemRow(WireModel):
    """One physical unit of an order as stored by the backend."""

    id: str
    product_id: str
    product_variant_id: str | None = None
    base_price: Any = 0
    preparation_notes: str | None = None
    preparation_status: PreparationStatus | None = None
    modifiers: list[EmbeddedOrderItemModifier] | None = None
    product_modifiers: list[ModifierReference] | None = None
    selected_pizza_customizations: list[SelectedPizzaCustomization] | None = None
    pizza_extra_cost: Any = 0
    product: NamedRef | None = None
    product_variant: NamedRef | None = None

    @property
    def modifier_shape(self) -> ModifierShape:
        """Tag which of the two modifier shapes this row carries."""
        if self.modifiers:
            return "embedded"
        if self.product_modifiers:
            return "reference"
        return "none"


class TableRow(WireModel):
    id: str | None = None
    name: str | None = None
    area_id: str | None = None
    area: NamedRef | None = None
    is_temporary: bool = False


class AdjustmentRow(WireModel):
    id: str | None = None
    name: str
    description: str | None = None
    is_percentage: bool = False
    value: float | None = None
    amount: float | None = None


class OrderSnapshot(WireModel):
    """Existing order as returned by the backend for editing."""

    id: str | None = None
    order_type: OrderType = OrderType.DINE_IN
    table_id: str | None = None
    table: TableRow | None = None
    scheduled_at: datetime | None = None
    delivery_info: DeliveryInfo | None = None
    notes: str | None = None
    adjustments: list[AdjustmentRow] = Field(default_factory=list)
    order_items: list[OrderItemRow] = Field(default_factory=list)


class ProductModifierRef(WireModel):
    modifier_id: str


class OrderItemDto(WireModel):
    """One backend order-item row; no id means the backend creates it."""

    id: str | None = None
    product_id: str
    product_variant_id: str | None = None
    quantity: int = 1
    base_price: float
    final_price: float
    preparation_notes: str | None = None
    product_modifiers: list[ProductModifierRef] | None = None
    selected_pizza_customizations: list[SelectedPizzaCustomization] | None = None


class OrderAdjustmentDto(WireModel):
    order_id: str | None = None
    name: str
    is_percentage: bool
    value: float | None = None
    amount: float | None = None


class OrderPayload(WireModel):
    """Full create/update request handed to the network layer."""

    order_type: OrderType
    subtotal: float
    total: float
    items: list[OrderItemDto]
    table_id: str | None = None
    is_temporary_table: bool | None = None
    temporary_table_name: str | None = None
    temporary_table_area_id: str | None = None
    scheduled_at: datetime | None = None
    delivery_info: DeliveryInfo = Field(default_factory=DeliveryInfo)
    notes: str | None = None
    adjustments: list[OrderAdjustmentDto] | None = None
    prepayment_id: str | None = None
    user_id: str | None = None

    def to_wire(self) -> dict[str, Any]:
        """Serialize to camelCase JSON-ready data, leaving out fields never set."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)
