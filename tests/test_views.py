from decimal import Decimal

from force_planner.ledger import AllocationLedger
from force_planner.views import (
    REMAINING_BUDGET_LABEL,
    budget_summary,
    distribution_breakdown,
    group_breakdown,
)

TEMPLATE = {
    "army": {"name": "Army", "items": {"Tanks": {"budget": 300, "quantity": 3, "unitCost": 100}}},
    "navy": {"name": "Navy", "items": {"Ships": {"budget": "200.25", "quantity": 1, "unitCost": "200.25"}}},
}


def _ledger(limit):
    return AllocationLedger.from_template(TEMPLATE, budget_limit=limit)


def test_group_breakdown_lists_subtotals_in_order():
    frame = group_breakdown(_ledger(1000))
    assert list(frame["Group"]) == ["Army", "Navy"]
    assert list(frame["Group ID"]) == ["army", "navy"]
    assert list(frame["Subtotal"]) == [Decimal(300), Decimal("200.25")]
    assert list(frame["Value"]) == [300.0, 200.25]
    assert REMAINING_BUDGET_LABEL not in set(frame["Group"])


def test_distribution_breakdown_appends_remaining_budget():
    frame = distribution_breakdown(_ledger(1000))
    assert list(frame["Group"]) == ["Army", "Navy", REMAINING_BUDGET_LABEL]
    remaining = frame.iloc[-1]
    assert remaining["Subtotal"] == Decimal("499.75")
    assert remaining["Value"] == 499.75


def test_distribution_breakdown_never_shows_negative_remaining():
    frame = distribution_breakdown(_ledger(100))
    assert frame.iloc[-1]["Subtotal"] == Decimal(0)
    assert frame.iloc[-1]["Value"] == 0.0


def test_breakdowns_follow_ledger_edits():
    ledger = _ledger(1000)
    ledger.set_item_budget("army", "Tanks", 0)
    group_id = ledger.create_custom_group().group_id
    ledger.set_item_budget(group_id, 0, 50)

    frame = distribution_breakdown(ledger)
    assert list(frame["Value"]) == [0.0, 200.25, 50.0, 749.75]


def test_distribution_breakdown_for_empty_ledger():
    frame = distribution_breakdown(AllocationLedger([], budget_limit=10))
    assert list(frame["Group"]) == [REMAINING_BUDGET_LABEL]
    assert frame.iloc[0]["Value"] == 10.0


def test_budget_summary_reports_signed_remainder():
    summary = budget_summary(_ledger(400))
    assert summary["budget_limit"] == Decimal(400)
    assert summary["allocated_total"] == Decimal("500.25")
    assert summary["remaining"] == Decimal("-100.25")
    assert summary["over_limit"] is True
