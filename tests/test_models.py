"""Unit tests for items, item stores and groups."""

from __future__ import annotations

from decimal import Decimal

import pytest

from force_planner.config import DEFAULT_ITEM_MAX, DEFAULT_UNIT_COST
from force_planner.models import (
    Group,
    Item,
    KeyedItemStore,
    OrderedItemStore,
    default_item,
    store_from_template,
)


def _item(**overrides) -> Item:
    values = {"name": "Tanks", "unit_cost": Decimal("100")}
    values.update(overrides)
    return Item(**values)


def test_from_mapping_converts_template_numbers() -> None:
    item = Item.from_mapping(
        {"budget": 300, "min": 0, "max": 1000, "quantity": 3.7, "unitCost": "100"},
        default_name="Tanks",
    )
    assert item.name == "Tanks"
    assert item.budget == Decimal("300")
    assert item.quantity == Decimal("3")
    assert item.unit_cost == Decimal("100")
    assert item.max == Decimal("1000")


def test_from_mapping_fills_defaults() -> None:
    item = Item.from_mapping({}, default_name="Blank")
    assert item.budget == Decimal(0)
    assert item.max == DEFAULT_ITEM_MAX
    assert item.unit_cost == DEFAULT_UNIT_COST


def test_with_budget_floors_quantity() -> None:
    updated = _item().with_budget("950")
    assert updated.budget == Decimal("950")
    assert updated.quantity == Decimal("9")


def test_with_budget_zero_unit_cost_gives_zero_units() -> None:
    updated = _item(unit_cost=Decimal(0)).with_budget(500)
    assert updated.quantity == Decimal(0)
    assert updated.budget == Decimal(500)


def test_with_budget_clamps_negative_to_zero() -> None:
    updated = _item().with_budget(-5)
    assert updated.budget == Decimal(0)
    assert updated.quantity == Decimal(0)


def test_with_quantity_truncates_and_reprices() -> None:
    updated = _item(unit_cost=Decimal("33.33")).with_quantity("3.9")
    assert updated.quantity == Decimal(3)
    assert updated.budget == Decimal("99.99")


def test_with_unit_cost_rounds_to_cents() -> None:
    updated = _item(quantity=Decimal(3)).with_unit_cost("12.345")
    assert updated.unit_cost == Decimal("12.35")
    assert updated.budget == Decimal("37.05")


def test_edits_do_not_mutate_original() -> None:
    original = _item()
    original.with_budget(500)
    assert original.budget == Decimal(0)


def test_ordered_store_get_set_and_resize() -> None:
    store = OrderedItemStore([default_item(1), default_item(2)])
    store.set(1, store.get(1).with_budget(10))
    assert store.get(1).budget == Decimal(10)
    assert store.keys() == [0, 1]

    store.resize(4)
    assert len(store) == 4
    assert [item.name for item in store] == ["Custom Item 1", "Custom Item 2", "Custom Item 3", "Custom Item 4"]

    store.resize(1)
    assert len(store) == 1
    assert 1 not in store


@pytest.mark.parametrize("key", [5, -1, True, "0"])
def test_ordered_store_rejects_bad_keys(key) -> None:
    store = OrderedItemStore([default_item(1)])
    with pytest.raises(KeyError):
        store.get(key)


def test_keyed_store_is_fixed_shape() -> None:
    store = KeyedItemStore({"Tanks": _item()})
    assert store.keys() == ["Tanks"]
    with pytest.raises(KeyError):
        store.set("Ships", _item(name="Ships"))
    assert not store.resizable


def test_store_from_template_picks_store_by_shape() -> None:
    ordered = store_from_template([{"name": "A"}, {}])
    keyed = store_from_template({"Tanks": {"budget": 5}})
    assert isinstance(ordered, OrderedItemStore)
    assert [item.name for item in ordered] == ["A", "Item 2"]
    assert isinstance(keyed, KeyedItemStore)
    assert keyed.get("Tanks").name == "Tanks"
    with pytest.raises(ValueError):
        store_from_template("nope")


def test_group_subtotal_and_custom_flags() -> None:
    template_group = Group.from_template(
        "army",
        {"name": "Army", "items": {"Tanks": {"budget": "10.10"}, "Trucks": {"budget": "0.20"}}},
    )
    assert not template_group.is_custom
    assert template_group.num_items is None
    assert template_group.subtotal == Decimal("10.30")

    custom = Group(id="custom_group_1", name="Custom Group 1", items=OrderedItemStore([default_item(1)]))
    assert custom.is_custom
    assert custom.num_items == 1
