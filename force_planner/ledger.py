"""Allocation ledger: the budget-consistency engine behind the planner.

The ledger owns every group, the global budget limit and the one-shot
over-limit warning flag.  All edits go through its methods, which either
apply a complete replacement of the touched item/group or leave the state
untouched, and report what happened as an :class:`EditResult`.

The budget limit is advisory.  Edits that push the allocated total over it
are still applied; the first such edit of an over-limit episode carries an
``OVER_LIMIT`` event and the episode ends (``WITHIN_LIMIT``) as soon as the
total is back at or below the limit.  Presenting those events is left to
the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Hashable, List, Mapping, Optional, Tuple

from .config import (
    CUSTOM_GROUP_PREFIX,
    DEFAULT_BUDGET_LIMIT,
    DEFAULT_ITEMS_PER_GROUP,
    MAX_CUSTOM_GROUPS,
    MAX_ITEMS_PER_GROUP,
    MAX_TOTAL_BUDGET,
    MIN_ITEMS_PER_GROUP,
)
from .decimal_math import ZERO, Numeric, add, clamp, floor, gt, lte, subtract, to_decimal, total
from .models import Group, Item, OrderedItemStore

logger = logging.getLogger(__name__)


class LedgerError(Exception):
    """Base class for caller errors raised by the ledger."""


class UnknownGroupError(LedgerError, KeyError):
    pass


class UnknownItemError(LedgerError, KeyError):
    pass


class LedgerEvent(str, Enum):
    OVER_LIMIT = "over_limit"
    WITHIN_LIMIT = "within_limit"
    GROUP_LIMIT_REACHED = "group_limit_reached"
    STRUCTURE_LOCKED = "structure_locked"
    ITEM_COUNT_CLAMPED = "item_count_clamped"
    LIMIT_CLAMPED = "limit_clamped"
    EMPTY_NAME = "empty_name"


@dataclass
class EditResult:
    applied: bool
    events: List[LedgerEvent] = field(default_factory=list)
    message: Optional[str] = None
    group_id: Optional[str] = None

    @property
    def warned(self) -> bool:
        return LedgerEvent.OVER_LIMIT in self.events

    @property
    def rejected(self) -> bool:
        return not self.applied


class AllocationLedger:
    """Groups, budget limit and allocation bookkeeping for one session."""

    def __init__(
        self,
        groups: Optional[List[Group]] = None,
        budget_limit: Numeric = DEFAULT_BUDGET_LIMIT,
    ) -> None:
        self._groups: List[Group] = list(groups or [])
        self._budget_limit = clamp(budget_limit, ZERO, MAX_TOTAL_BUDGET)
        self._over_limit_warned = False
        self._group_count = sum(1 for group in self._groups if group.is_custom)
        self._group_sequence = self._group_count

    @classmethod
    def from_template(
        cls,
        template: Mapping[str, Mapping[str, Any]],
        budget_limit: Numeric = None,
    ) -> "AllocationLedger":
        """Create a ledger from a ``group id -> {name, items}`` mapping."""
        groups = [Group.from_template(group_id, payload) for group_id, payload in template.items()]
        limit = DEFAULT_BUDGET_LIMIT if budget_limit is None else budget_limit
        return cls(groups, budget_limit=limit)

    # Read API ---------------------------------------------------------------

    @property
    def groups(self) -> Tuple[Group, ...]:
        return tuple(self._groups)

    @property
    def budget_limit(self) -> Decimal:
        return self._budget_limit

    @property
    def allocated_total(self) -> Decimal:
        return total(group.subtotal for group in self._groups)

    @property
    def remaining_budget(self) -> Decimal:
        """Limit minus allocated total; negative while over the limit."""
        return subtract(self._budget_limit, self.allocated_total)

    @property
    def is_over_limit(self) -> bool:
        return gt(self.allocated_total, self._budget_limit)

    @property
    def group_count(self) -> int:
        return self._group_count

    @property
    def over_limit_warned(self) -> bool:
        return self._over_limit_warned

    @property
    def can_create_group(self) -> bool:
        return self._group_count < MAX_CUSTOM_GROUPS

    def group(self, group_id: str) -> Group:
        for group in self._groups:
            if group.id == group_id:
                return group
        raise UnknownGroupError(group_id)

    def item(self, group_id: str, item_key: Hashable) -> Item:
        group = self.group(group_id)
        try:
            return group.items.get(item_key)
        except (KeyError, IndexError):
            raise UnknownItemError((group_id, item_key)) from None

    # Item edits -------------------------------------------------------------

    def set_item_budget(self, group_id: str, item_key: Hashable, new_budget: Numeric) -> EditResult:
        return self._edit_item(group_id, item_key, lambda item: item.with_budget(new_budget))

    def set_item_quantity(self, group_id: str, item_key: Hashable, new_quantity: Numeric) -> EditResult:
        return self._edit_item(group_id, item_key, lambda item: item.with_quantity(new_quantity))

    def set_item_unit_cost(self, group_id: str, item_key: Hashable, new_unit_cost: Numeric) -> EditResult:
        return self._edit_item(group_id, item_key, lambda item: item.with_unit_cost(new_unit_cost))

    def rename_item(self, group_id: str, item_index: int, new_name: str) -> EditResult:
        group = self.group(group_id)
        if not group.items.resizable:
            return self._reject(group_id, LedgerEvent.STRUCTURE_LOCKED, f"Items of '{group.name}' cannot be renamed.")
        current = self.item(group_id, item_index)
        group.items.set(item_index, current.renamed(new_name))
        return EditResult(applied=True, group_id=group_id)

    def _edit_item(self, group_id: str, item_key: Hashable, build: Callable[[Item], Item]) -> EditResult:
        current = self.item(group_id, item_key)
        updated = build(current)
        projected = add(self.allocated_total, subtract(updated.budget, current.budget))

        events: List[LedgerEvent] = []
        message = None
        if gt(projected, self._budget_limit) and not self._over_limit_warned:
            self._over_limit_warned = True
            events.append(LedgerEvent.OVER_LIMIT)
            message = "Allocation exceeds the total budget limit."
            logger.warning(
                "Allocated total %s exceeds budget limit %s after editing %s/%s",
                projected, self._budget_limit, group_id, item_key,
            )

        self.group(group_id).items.set(item_key, updated)
        logger.debug(
            "Edited %s/%s: budget=%s quantity=%s unit_cost=%s",
            group_id, item_key, updated.budget, updated.quantity, updated.unit_cost,
        )
        events.extend(self._refresh_warning())
        return EditResult(applied=True, events=events, message=message, group_id=group_id)

    # Ledger-wide edits ------------------------------------------------------

    def set_budget_limit(self, new_limit: Numeric) -> EditResult:
        requested = to_decimal(new_limit)
        self._budget_limit = clamp(requested, ZERO, MAX_TOTAL_BUDGET)
        events: List[LedgerEvent] = []
        if self._budget_limit != requested:
            events.append(LedgerEvent.LIMIT_CLAMPED)
        events.extend(self._refresh_warning())
        return EditResult(applied=True, events=events)

    # Structural edits -------------------------------------------------------

    def create_custom_group(self) -> EditResult:
        if not self.can_create_group:
            logger.info("Custom group limit of %d reached", MAX_CUSTOM_GROUPS)
            return EditResult(
                applied=False,
                events=[LedgerEvent.GROUP_LIMIT_REACHED],
                message=f"You can only have up to {MAX_CUSTOM_GROUPS} custom groups.",
            )
        self._group_sequence += 1
        self._group_count += 1
        store = OrderedItemStore()
        store.resize(DEFAULT_ITEMS_PER_GROUP)
        group = Group(
            id=f"{CUSTOM_GROUP_PREFIX}_{self._group_sequence}",
            name=f"Custom Group {self._group_sequence}",
            items=store,
        )
        self._groups.append(group)
        return EditResult(applied=True, group_id=group.id)

    def delete_custom_group(self, group_id: str) -> EditResult:
        group = self.group(group_id)
        if not group.is_custom:
            return self._reject(group_id, LedgerEvent.STRUCTURE_LOCKED, f"'{group.name}' is a template group and cannot be deleted.")
        self._groups.remove(group)
        self._group_count -= 1
        return EditResult(applied=True, events=self._refresh_warning(), group_id=group_id)

    def resize_group(self, group_id: str, new_num_items: Numeric) -> EditResult:
        group = self.group(group_id)
        if not group.is_custom:
            return self._reject(group_id, LedgerEvent.STRUCTURE_LOCKED, f"'{group.name}' has a fixed set of items.")
        requested = floor(new_num_items)
        count = int(clamp(requested, MIN_ITEMS_PER_GROUP, MAX_ITEMS_PER_GROUP))
        events: List[LedgerEvent] = []
        message = None
        if count != requested:
            events.append(LedgerEvent.ITEM_COUNT_CLAMPED)
            message = f"Groups hold between {MIN_ITEMS_PER_GROUP} and {MAX_ITEMS_PER_GROUP} items."
        group.items.resize(count)
        events.extend(self._refresh_warning())
        return EditResult(applied=True, events=events, message=message, group_id=group_id)

    def rename_group(self, group_id: str, new_name: str) -> EditResult:
        group = self.group(group_id)
        if not group.is_custom:
            return self._reject(group_id, LedgerEvent.STRUCTURE_LOCKED, f"'{group.name}' cannot be renamed.")
        name = (new_name or "").strip()
        if not name:
            return EditResult(applied=False, events=[LedgerEvent.EMPTY_NAME], group_id=group_id)
        group.name = name
        return EditResult(applied=True, group_id=group_id)

    def toggle_expanded(self, group_id: str) -> EditResult:
        group = self.group(group_id)
        group.expanded = not group.expanded
        return EditResult(applied=True, group_id=group_id)

    # Internal ---------------------------------------------------------------

    def _refresh_warning(self) -> List[LedgerEvent]:
        if self._over_limit_warned and lte(self.allocated_total, self._budget_limit):
            self._over_limit_warned = False
            return [LedgerEvent.WITHIN_LIMIT]
        return []

    def _reject(self, group_id: str, event: LedgerEvent, message: str) -> EditResult:
        logger.info("Rejected edit on %s: %s", group_id, message)
        return EditResult(applied=False, events=[event], message=message, group_id=group_id)
