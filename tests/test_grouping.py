"""Grouping of backend unit-rows and expansion back into unit-rows."""

from order_cart.schemas.cart import CartItem
from order_cart.schemas.menu import MenuCategory, MenuModifier, ModifierGroup, Product
from order_cart.services.grouping import expand_item, expand_items, group_order_items
from order_cart.services.pricing import reprice


def _build_row(row_id: str, **overrides) -> dict:
    row = {
        "id": row_id,
        "productId": "pizza",
        "productVariantId": "large",
        "basePrice": "120.00",
        "preparationStatus": "PENDING",
        "product": {"name": "Pizza"},
        "productVariant": {"name": "Large"},
        "modifiers": [
            {
                "productModifierId": "cheese",
                "price": "15",
                "productModifier": {"name": "Extra cheese", "modifierGroupId": "extras"},
            }
        ],
    }
    row.update(overrides)
    return row


def _build_catalog() -> list[MenuCategory]:
    product = Product(
        id="pizza",
        name="Pizza",
        price=100,
        modifier_groups=[ModifierGroup(id="extras", modifiers=[MenuModifier(id="olives", name="Olives", price=7)])],
    )
    return [MenuCategory(id="food", products=[product])]


def test_identical_rows_collapse_into_one_item() -> None:
    items = group_order_items([_build_row("r1"), _build_row("r2"), _build_row("r3")])

    assert len(items) == 1
    assert items[0].id == "r1"
    assert items[0].backend_ids == ["r1", "r2", "r3"]
    assert items[0].quantity == 3
    assert items[0].total_price == 405.0


def test_status_and_notes_split_groups_in_first_seen_order() -> None:
    rows = [
        _build_row("r1"),
        _build_row("r2", preparationStatus="READY"),
        _build_row("r3", preparationNotes="no onion"),
        _build_row("r4"),
    ]

    items = group_order_items(rows)

    assert [item.backend_ids for item in items] == [["r1", "r4"], ["r2"], ["r3"]]
    assert items[1].is_locked is True


def test_missing_status_groups_with_pending() -> None:
    items = group_order_items([_build_row("r1"), _build_row("r2", preparationStatus=None)])

    assert len(items) == 1
    assert items[0].preparation_status == "PENDING"


def test_reference_modifiers_resolve_against_catalog_and_fall_back() -> None:
    row = _build_row("r1", modifiers=[], productModifiers=[{"id": "olives"}, {"id": "ghost"}, {"id": "olives"}])

    items = group_order_items([row], _build_catalog())

    modifiers = {modifier.id: modifier for modifier in items[0].modifiers}
    assert set(modifiers) == {"olives", "ghost"}
    assert modifiers["olives"].price == 7.0
    assert modifiers["ghost"].name == "Modifier"
    assert modifiers["ghost"].price == 0.0


def test_embedded_and_reference_shapes_group_together() -> None:
    embedded = _build_row("r1")
    reference = _build_row(
        "r2",
        modifiers=None,
        productModifiers=[{"id": "cheese", "modifierGroupId": "extras", "name": "Extra cheese", "price": 15}],
    )

    items = group_order_items([embedded, reference])

    assert len(items) == 1
    assert items[0].quantity == 2


def test_unknown_product_name_falls_back() -> None:
    items = group_order_items([_build_row("r1", product=None)])

    assert items[0].product_name == "Unknown product"


def test_grouping_then_expansion_round_trips_ids() -> None:
    items = group_order_items([_build_row("r1"), _build_row("r2")])

    dtos = expand_items(items, is_edit_mode=True)

    assert [dto.id for dto in dtos] == ["r1", "r2"]
    assert all(dto.quantity == 1 for dto in dtos)
    assert dtos[0].final_price == 135.0
    assert [ref.modifier_id for ref in dtos[0].product_modifiers] == ["cheese"]


def test_expansion_reuses_existing_ids_before_new_ones() -> None:
    item = group_order_items([_build_row("r1"), _build_row("r2")])[0]
    grown = reprice(item, quantity=5)

    dtos = expand_item(grown, is_edit_mode=True)

    assert [dto.id for dto in dtos] == ["r1", "r2", None, None, None]


def test_expansion_drops_ids_beyond_the_new_quantity() -> None:
    item = group_order_items([_build_row("r1"), _build_row("r2"), _build_row("r3")])[0]

    dtos = expand_item(reprice(item, quantity=1), is_edit_mode=True)

    assert [dto.id for dto in dtos] == ["r1"]


def test_creation_mode_and_temporary_rows_never_carry_ids() -> None:
    item = group_order_items([_build_row("r1")])[0]
    temporary = reprice(
        CartItem(id="new-abc", backend_ids=["new-abc"], product_id="pizza", product_name="Pizza", quantity=2)
    )

    assert [dto.id for dto in expand_item(item, is_edit_mode=False)] == [None]
    assert [dto.id for dto in expand_item(temporary, is_edit_mode=True)] == [None, None]


def test_expansion_omits_empty_modifier_and_customization_fields() -> None:
    item = reprice(CartItem(id="x", product_id="soda", product_name="Soda", unit_price=3))

    wire = expand_item(item, is_edit_mode=False)[0].model_dump(by_alias=True, exclude_none=True)

    assert "productModifiers" not in wire
    assert "selectedPizzaCustomizations" not in wire
    assert wire["finalPrice"] == 3.0


def test_huge_row_prices_are_capped_on_load() -> None:
    row = _build_row("r1", basePrice="1e30", modifiers=[{"productModifierId": "cheese", "price": "1e45"}])

    item = group_order_items([row])[0]

    assert item.unit_price == 999999.99
    assert item.modifiers[0].price == 999999.99
    assert item.total_price == 1999999.98
