"""Derived views of ledger state for charts and headline metrics.

Nothing here is stored; every function projects the ledger as it is right
now.  ``Subtotal`` columns keep exact Decimals while ``Value`` columns hold
2dp floats for plotting.
"""

from __future__ import annotations

from typing import Any, Dict

import pandas as pd

from .decimal_math import ZERO, to_float
from .ledger import AllocationLedger

REMAINING_BUDGET_LABEL = "Remaining Budget"
BREAKDOWN_COLUMNS = ["Group ID", "Group", "Subtotal", "Value"]


def group_breakdown(ledger: AllocationLedger) -> pd.DataFrame:
    """One row per group with its subtotal, in ledger order."""
    rows = []
    for group in ledger.groups:
        subtotal = group.subtotal
        rows.append({
            "Group ID": group.id,
            "Group": group.name,
            "Subtotal": subtotal,
            "Value": to_float(subtotal),
        })
    return pd.DataFrame(rows, columns=BREAKDOWN_COLUMNS)


def distribution_breakdown(ledger: AllocationLedger) -> pd.DataFrame:
    """Group subtotals plus a ``Remaining Budget`` row.

    The remaining row is floored at zero, so an over-limit ledger shows an
    empty remainder rather than a negative slice.
    """
    remaining = max(ledger.remaining_budget, ZERO)
    remaining_row = pd.DataFrame([{
        "Group ID": None,
        "Group": REMAINING_BUDGET_LABEL,
        "Subtotal": remaining,
        "Value": to_float(remaining),
    }], columns=BREAKDOWN_COLUMNS)
    groups = group_breakdown(ledger)
    if groups.empty:
        return remaining_row
    return pd.concat([groups, remaining_row], ignore_index=True)


def budget_summary(ledger: AllocationLedger) -> Dict[str, Any]:
    """Headline numbers: limit, allocated, signed remainder and over-limit flag."""
    allocated = ledger.allocated_total
    return {
        "budget_limit": ledger.budget_limit,
        "allocated_total": allocated,
        "remaining": ledger.remaining_budget,
        "over_limit": ledger.is_over_limit,
    }
