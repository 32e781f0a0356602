"""Order session state records."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from order_cart.schemas.adjustment import OrderAdjustment
from order_cart.schemas.cart import CartItem
from order_cart.schemas.form import DeliveryInfo, OrderFormState, OrderType, Prepayment


class OriginalSnapshot(BaseModel):
    """Last known server state of an order being edited; the diff baseline."""

    model_config = ConfigDict(frozen=True)

    items: list[CartItem]
    order_type: OrderType
    area_id: str | None = None
    table_id: str | None = None
    is_temporary_table: bool = False
    temporary_table_name: str = ""
    delivery_info: DeliveryInfo = Field(default_factory=DeliveryInfo)
    notes: str = ""
    scheduled_at: datetime | None = None
    adjustments: list[OrderAdjustment] = Field(default_factory=list)


class OrderSession(BaseModel):
    """Complete state of one open order, replaced wholesale on every transition."""

    model_config = ConfigDict(frozen=True)

    order_id: str | None = None
    is_edit_mode: bool = False
    items: list[CartItem] = Field(default_factory=list)
    form: OrderFormState = Field(default_factory=OrderFormState)
    adjustments: list[OrderAdjustment] = Field(default_factory=list)
    prepayment: Prepayment | None = None
    original: OriginalSnapshot | None = None
    has_unsaved_changes: bool = False

    @property
    def order_data_loaded(self) -> bool:
        return self.original is not None


class SessionUpdate(BaseModel):
    """Outcome of a cart operation that may be refused."""

    model_config = ConfigDict(frozen=True)

    state: OrderSession
    applied: bool
    reason: str | None = None
