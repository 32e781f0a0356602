"""Read-only menu catalog schemas."""

from typing import Any

from pydantic import Field

from order_cart.schemas.common import FrozenWireModel


class MenuModifier(FrozenWireModel):
    """Catalog modifier option."""

    id: str
    name: str
    price: Any = 0


class ModifierGroup(FrozenWireModel):
    """Group of modifier options attached to a product."""

    id: str
    name: str = ""
    modifiers: list[MenuModifier] = Field(default_factory=list)


class ProductVariant(FrozenWireModel):
    """Priced variant of a product, e.g. a size."""

    id: str
    name: str
    price: Any = None


class Product(FrozenWireModel):
    """Catalog product as offered to the cart."""

    id: str
    name: str
    price: Any = None
    variants: list[ProductVariant] = Field(default_factory=list)
    modifier_groups: list[ModifierGroup] = Field(default_factory=list)


class MenuSubcategory(FrozenWireModel):
    id: str
    name: str = ""
    products: list[Product] = Field(default_factory=list)


class MenuCategory(FrozenWireModel):
    """Top-level catalog node; products may hang off subcategories or the category itself."""

    id: str
    name: str = ""
    subcategories: list[MenuSubcategory] = Field(default_factory=list)
    products: list[Product] = Field(default_factory=list)
