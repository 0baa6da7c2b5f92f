"""Item and group models for the allocation ledger.

An :class:`Item` is an immutable budget line; edits build a replacement
item and swap it into its store in one step.  Groups hold their items in
one of two stores that share the same read/update surface:

* :class:`OrderedItemStore` - positional items of a user-created group,
  addressed by index, resizable and renamable.
* :class:`KeyedItemStore` - named items of a template group, addressed by
  item name, fixed in shape.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any, Dict, Hashable, Iterator, List, Mapping, Optional, Tuple

from .config import CUSTOM_GROUP_PREFIX, DEFAULT_ITEM_MAX, DEFAULT_UNIT_COST
from .decimal_math import (
    ZERO,
    Numeric,
    floor,
    floor_divide,
    multiply,
    non_negative,
    round_places,
    to_decimal,
    total,
)

# ---------------------------------------------------------------------------
# Items
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Item:
    name: str
    budget: Decimal = ZERO
    min: Decimal = ZERO
    max: Decimal = DEFAULT_ITEM_MAX
    quantity: Decimal = ZERO
    unit_cost: Decimal = DEFAULT_UNIT_COST

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], default_name: str = "") -> "Item":
        """Build an item from template data, converting numbers to Decimal.

        Accepts both ``unitCost`` (template files) and ``unit_cost`` keys.
        """
        unit_cost = data.get("unitCost", data.get("unit_cost", DEFAULT_UNIT_COST))
        return cls(
            name=str(data.get("name") or default_name),
            budget=non_negative(data.get("budget", ZERO)),
            min=to_decimal(data.get("min", ZERO)),
            max=to_decimal(data.get("max", DEFAULT_ITEM_MAX)),
            quantity=floor(non_negative(data.get("quantity", ZERO))),
            unit_cost=non_negative(unit_cost),
        )

    def with_budget(self, budget: Numeric) -> "Item":
        """Set the budget and derive whole units from it."""
        budget = non_negative(budget)
        return replace(self, budget=budget, quantity=floor_divide(budget, self.unit_cost))

    def with_quantity(self, quantity: Numeric) -> "Item":
        """Set the unit count and reprice the budget to the cent."""
        quantity = floor(non_negative(quantity))
        return replace(self, quantity=quantity, budget=round_places(multiply(quantity, self.unit_cost), 2))

    def with_unit_cost(self, unit_cost: Numeric) -> "Item":
        """Set the unit cost (to the cent) and reprice the budget."""
        unit_cost = round_places(non_negative(unit_cost), 2)
        return replace(self, unit_cost=unit_cost, budget=round_places(multiply(self.quantity, unit_cost), 2))

    def renamed(self, name: str) -> "Item":
        return replace(self, name=name)


def default_item(position: int) -> Item:
    """Blank item for slot ``position`` (1-based) of a custom group."""
    return Item(name=f"Custom Item {position}")


# ---------------------------------------------------------------------------
# Item stores
# ---------------------------------------------------------------------------


class ItemStore:
    """Common surface of the two item containers."""

    resizable = False

    def get(self, key: Hashable) -> Item:
        raise NotImplementedError

    def set(self, key: Hashable, item: Item) -> None:
        raise NotImplementedError

    def items(self) -> Iterator[Tuple[Hashable, Item]]:
        raise NotImplementedError

    def keys(self) -> List[Hashable]:
        return [key for key, _ in self.items()]

    def __iter__(self) -> Iterator[Item]:
        return (item for _, item in self.items())

    def __len__(self) -> int:
        return len(self.keys())

    def __contains__(self, key: object) -> bool:
        return key in self.keys()


class OrderedItemStore(ItemStore):
    """Items addressed by position."""

    resizable = True

    def __init__(self, items: Optional[List[Item]] = None) -> None:
        self._items: List[Item] = list(items or [])

    def _check(self, key: Hashable) -> int:
        if isinstance(key, bool) or not isinstance(key, int) or not 0 <= key < len(self._items):
            raise KeyError(key)
        return key

    def get(self, key: Hashable) -> Item:
        return self._items[self._check(key)]

    def set(self, key: Hashable, item: Item) -> None:
        self._items[self._check(key)] = item

    def items(self) -> Iterator[Tuple[Hashable, Item]]:
        return iter(list(enumerate(self._items)))

    def __len__(self) -> int:
        return len(self._items)

    def resize(self, count: int) -> None:
        """Truncate to ``count`` items or pad with default items."""
        if count < len(self._items):
            del self._items[count:]
        else:
            start = len(self._items)
            self._items.extend(default_item(position) for position in range(start + 1, count + 1))


class KeyedItemStore(ItemStore):
    """Items addressed by their template name."""

    def __init__(self, items: Optional[Mapping[str, Item]] = None) -> None:
        self._items: Dict[str, Item] = dict(items or {})

    def get(self, key: Hashable) -> Item:
        return self._items[key]

    def set(self, key: Hashable, item: Item) -> None:
        if key not in self._items:
            raise KeyError(key)
        self._items[key] = item

    def items(self) -> Iterator[Tuple[Hashable, Item]]:
        return iter(list(self._items.items()))

    def __len__(self) -> int:
        return len(self._items)


def store_from_template(items: Any) -> ItemStore:
    """Build the matching store for a template ``items`` value.

    Raises:
        ValueError: If ``items`` is neither a list nor a mapping of item data
    """
    if isinstance(items, list):
        return OrderedItemStore([
            Item.from_mapping(entry, default_name=f"Item {index + 1}")
            for index, entry in enumerate(items)
        ])
    if isinstance(items, Mapping):
        return KeyedItemStore({
            str(name): Item.from_mapping(entry, default_name=str(name))
            for name, entry in items.items()
        })
    raise ValueError(f"Group items must be a list or an object, got {type(items).__name__}")


# ---------------------------------------------------------------------------
# Groups
# ---------------------------------------------------------------------------


@dataclass
class Group:
    id: str
    name: str
    items: ItemStore = field(default_factory=OrderedItemStore)
    expanded: bool = True

    @classmethod
    def from_template(cls, group_id: str, payload: Mapping[str, Any]) -> "Group":
        return cls(
            id=str(group_id),
            name=str(payload.get("name") or group_id),
            items=store_from_template(payload.get("items", [])),
            expanded=bool(payload.get("expanded", True)),
        )

    @property
    def is_custom(self) -> bool:
        return self.id.startswith(CUSTOM_GROUP_PREFIX)

    @property
    def num_items(self) -> Optional[int]:
        """Active item count of a custom group; ``None`` for template groups."""
        return len(self.items) if self.is_custom else None

    @property
    def subtotal(self) -> Decimal:
        return total(item.budget for item in self.items)
