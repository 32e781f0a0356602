"""Menu catalog lookup tests."""

from order_cart.schemas.menu import MenuCategory, MenuModifier, MenuSubcategory, ModifierGroup, Product
from order_cart.services.menu_service import find_modifier_by_id, find_product_by_id, resolve_modifier


def _build_catalog() -> list[MenuCategory]:
    pizza = Product(
        id="pizza",
        name="Pizza",
        price=100,
        modifier_groups=[ModifierGroup(id="extras", modifiers=[MenuModifier(id="cheese", name="Cheese", price="12.5")])],
    )
    soda = Product(id="soda", name="Soda", price=3)
    return [MenuCategory(id="food", subcategories=[MenuSubcategory(id="pizzas", products=[pizza])], products=[soda])]


def test_products_are_found_on_categories_and_subcategories() -> None:
    catalog = _build_catalog()

    assert find_product_by_id(catalog, "pizza").name == "Pizza"
    assert find_product_by_id(catalog, "soda").name == "Soda"
    assert find_product_by_id(catalog, "missing") is None


def test_modifier_lookup_returns_priced_snapshot() -> None:
    modifier = find_modifier_by_id(_build_catalog(), "cheese")

    assert modifier.modifier_group_id == "extras"
    assert modifier.price == 12.5


def test_resolve_modifier_falls_back_to_stub() -> None:
    modifier = resolve_modifier(None, "ghost")

    assert modifier.id == "ghost"
    assert modifier.name == "Modifier"
    assert modifier.price == 0.0
