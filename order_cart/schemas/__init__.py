"""Schema exports."""

from order_cart.schemas.adjustment import OrderAdjustment
from order_cart.schemas.cart import CartItem, CartItemModifier, SelectedPizzaCustomization
from order_cart.schemas.form import DeliveryInfo, OrderFormState, OrderType, Prepayment
from order_cart.schemas.menu import MenuCategory, MenuModifier, MenuSubcategory, ModifierGroup, Product, ProductVariant
from order_cart.schemas.order import (
    OrderAdjustmentDto,
    OrderItemDto,
    OrderItemRow,
    OrderPayload,
    OrderSnapshot,
)
from order_cart.schemas.payment import Payment, PaymentStatus, PaymentSummary
from order_cart.schemas.session import OrderSession, OriginalSnapshot, SessionUpdate

__all__ = [
    "CartItem",
    "CartItemModifier",
    "SelectedPizzaCustomization",
    "OrderAdjustment",
    "DeliveryInfo",
    "OrderFormState",
    "OrderType",
    "Prepayment",
    "MenuCategory",
    "MenuModifier",
    "MenuSubcategory",
    "ModifierGroup",
    "Product",
    "ProductVariant",
    "OrderAdjustmentDto",
    "OrderItemDto",
    "OrderItemRow",
    "OrderPayload",
    "OrderSnapshot",
    "Payment",
    "PaymentStatus",
    "PaymentSummary",
    "OrderSession",
    "OriginalSnapshot",
    "SessionUpdate",
]
