"""Streamlit app for the force structure planner.

The page keeps one :class:`~force_planner.ledger.AllocationLedger` per
browser session in ``st.session_state`` and routes every widget change
through a ledger operation in an ``on_change`` callback.  Before each
widget is drawn its session state value is refreshed from the ledger, so
derived values (a quantity recomputed from a budget, say) show up on the
next rerun without any bookkeeping in the callbacks.

To run the dashboard from the command line::

    streamlit run force_planner/dashboard.py

or use ``run_planner.py`` at the project root.
"""

from __future__ import annotations

import os
import sys
from typing import Hashable, List, Tuple

import streamlit as st

# Support both ``streamlit run force_planner/dashboard.py`` and package imports.
if __package__:
    from . import config
    from . import visualization as viz
    from .decimal_math import to_float
    from .ledger import AllocationLedger, EditResult, LedgerEvent
    from .models import Group
    from .scale import format_budget, scale_names, to_raw, to_scaled
    from .template_loader import TemplateError, load_template
    from .views import budget_summary, distribution_breakdown, group_breakdown
else:
    CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
    PARENT_DIR = os.path.dirname(CURRENT_DIR)
    if PARENT_DIR not in sys.path:
        sys.path.insert(0, PARENT_DIR)
    from force_planner import config  # type: ignore
    from force_planner import visualization as viz  # type: ignore
    from force_planner.decimal_math import to_float  # type: ignore
    from force_planner.ledger import AllocationLedger, EditResult, LedgerEvent  # type: ignore
    from force_planner.models import Group  # type: ignore
    from force_planner.scale import format_budget, scale_names, to_raw, to_scaled  # type: ignore
    from force_planner.template_loader import TemplateError, load_template  # type: ignore
    from force_planner.views import budget_summary, distribution_breakdown, group_breakdown  # type: ignore

LEDGER_KEY = "ledger"
ALERTS_KEY = "planner_alerts"
SCALE_KEY = "planner_scale"
TOTAL_BUDGET_KEY = "planner_total_budget"

BUDGET_STEP = 0.000001  # slider step in scaled units
SLIDER_PLACES = 6

EVENT_LEVELS = {
    LedgerEvent.OVER_LIMIT: "warning",
    LedgerEvent.WITHIN_LIMIT: "info",
    LedgerEvent.GROUP_LIMIT_REACHED: "warning",
    LedgerEvent.STRUCTURE_LOCKED: "warning",
    LedgerEvent.ITEM_COUNT_CLAMPED: "info",
    LedgerEvent.LIMIT_CLAMPED: "info",
    LedgerEvent.EMPTY_NAME: "info",
}

EVENT_MESSAGES = {
    LedgerEvent.OVER_LIMIT: "Allocation exceeds the total budget limit.",
    LedgerEvent.WITHIN_LIMIT: "Allocation is back within the total budget limit.",
    LedgerEvent.LIMIT_CLAMPED: "Total budget is capped at $1T.",
    LedgerEvent.EMPTY_NAME: "Group names cannot be empty.",
}


# ---------------------------------------------------------------------------
# Session state
# ---------------------------------------------------------------------------


def new_ledger() -> AllocationLedger:
    """Build a fresh ledger from the configured template."""
    return AllocationLedger.from_template(load_template(), budget_limit=config.DEFAULT_BUDGET_LIMIT)


def get_ledger() -> AllocationLedger:
    ledger = st.session_state.get(LEDGER_KEY)
    if ledger is None:
        ledger = new_ledger()
        st.session_state[LEDGER_KEY] = ledger
    return ledger


def current_scale() -> str:
    scale = st.session_state.get(SCALE_KEY, config.DEFAULT_SCALE)
    return scale if scale in scale_names() else "Standard"


def record_result(result: EditResult) -> None:
    """Queue a message for each user-facing event in ``result``."""
    alerts: List[Tuple[str, str]] = st.session_state.setdefault(ALERTS_KEY, [])
    for event in result.events:
        level = EVENT_LEVELS.get(event)
        if level is None:
            continue
        text = EVENT_MESSAGES.get(event) or result.message or event.value
        alerts.append((level, text))


def render_alerts() -> None:
    alerts = st.session_state.get(ALERTS_KEY) or []
    for level, text in alerts:
        getattr(st, level)(text)
    st.session_state[ALERTS_KEY] = []


def _item_widget_key(kind: str, group_id: str, item_key: Hashable) -> str:
    return f"{kind}::{group_id}::{item_key}"


# ---------------------------------------------------------------------------
# Callbacks
# ---------------------------------------------------------------------------


def _on_total_budget_change() -> None:
    raw = to_raw(st.session_state[TOTAL_BUDGET_KEY], current_scale())
    record_result(get_ledger().set_budget_limit(raw))


def _on_budget_change(group_id: str, item_key: Hashable) -> None:
    value = st.session_state[_item_widget_key("budget", group_id, item_key)]
    record_result(get_ledger().set_item_budget(group_id, item_key, to_raw(value, current_scale())))


def _on_quantity_change(group_id: str, item_key: Hashable) -> None:
    value = st.session_state[_item_widget_key("quantity", group_id, item_key)]
    record_result(get_ledger().set_item_quantity(group_id, item_key, value))


def _on_unit_cost_change(group_id: str, item_key: Hashable) -> None:
    value = st.session_state[_item_widget_key("unit_cost", group_id, item_key)]
    record_result(get_ledger().set_item_unit_cost(group_id, item_key, value))


def _on_item_rename(group_id: str, item_key: int) -> None:
    value = st.session_state[_item_widget_key("name", group_id, item_key)]
    record_result(get_ledger().rename_item(group_id, item_key, value))


def _on_group_rename(group_id: str) -> None:
    record_result(get_ledger().rename_group(group_id, st.session_state[f"group_name::{group_id}"]))


def _on_resize(group_id: str) -> None:
    record_result(get_ledger().resize_group(group_id, st.session_state[f"num_items::{group_id}"]))


def _on_delete_group(group_id: str) -> None:
    record_result(get_ledger().delete_custom_group(group_id))


def _on_toggle(group_id: str) -> None:
    record_result(get_ledger().toggle_expanded(group_id))


def _on_create_group() -> None:
    record_result(get_ledger().create_custom_group())


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def render_header(ledger: AllocationLedger, scale: str) -> None:
    summary = budget_summary(ledger)
    cols = st.columns(3)
    cols[0].metric("Total Budget", format_budget(summary["budget_limit"], scale))
    cols[1].metric("Allocated", format_budget(summary["allocated_total"], scale))
    cols[2].metric("Remaining", format_budget(summary["remaining"], scale))

    st.session_state[TOTAL_BUDGET_KEY] = to_float(to_scaled(ledger.budget_limit, scale), SLIDER_PLACES)
    st.number_input(
        f"Adjust Total Budget ({scale})",
        min_value=0.0,
        max_value=to_float(to_scaled(config.MAX_TOTAL_BUDGET, scale), SLIDER_PLACES),
        step=1.0,
        format="%.6f",
        key=TOTAL_BUDGET_KEY,
        on_change=_on_total_budget_change,
    )
    st.caption(f"Range: {format_budget(0, scale)} - {format_budget(config.MAX_TOTAL_BUDGET, scale)}")


def render_charts(ledger: AllocationLedger, scale: str) -> None:
    pie_col, bar_col = st.columns(2)
    with pie_col:
        st.plotly_chart(viz.create_allocation_pie_chart(distribution_breakdown(ledger), scale), use_container_width=True)
    with bar_col:
        st.plotly_chart(viz.create_allocation_bar_chart(group_breakdown(ledger), scale), use_container_width=True)


def render_item(group: Group, item_key: Hashable, scale: str) -> None:
    item = group.items.get(item_key)
    name_col, amount_col = st.columns([3, 1])
    if group.items.resizable:
        name_key = _item_widget_key("name", group.id, item_key)
        st.session_state[name_key] = item.name
        name_col.text_input("Item name", key=name_key, on_change=_on_item_rename, args=(group.id, item_key))
    else:
        name_col.markdown(f"**{item.name}**")
    amount_col.markdown(format_budget(item.budget, scale).replace("$", "\\$"))

    low = to_float(to_scaled(item.min, scale), SLIDER_PLACES)
    high = to_float(to_scaled(item.max, scale), SLIDER_PLACES)
    if high > low:
        budget_key = _item_widget_key("budget", group.id, item_key)
        current = to_float(to_scaled(item.budget, scale), SLIDER_PLACES)
        st.session_state[budget_key] = min(max(current, low), high)
        st.slider(
            f"Budget ({scale})",
            min_value=low,
            max_value=high,
            step=BUDGET_STEP,
            format="%.6f",
            key=budget_key,
            on_change=_on_budget_change,
            args=(group.id, item_key),
        )

    qty_col, cost_col = st.columns(2)
    quantity_key = _item_widget_key("quantity", group.id, item_key)
    st.session_state[quantity_key] = int(item.quantity)
    qty_col.number_input(
        "Quantity", min_value=0, step=1, key=quantity_key,
        on_change=_on_quantity_change, args=(group.id, item_key),
    )
    cost_key = _item_widget_key("unit_cost", group.id, item_key)
    st.session_state[cost_key] = to_float(item.unit_cost)
    cost_col.number_input(
        "Unit Cost ($)", min_value=0.0, step=0.01, format="%.2f", key=cost_key,
        on_change=_on_unit_cost_change, args=(group.id, item_key),
    )


def render_group(group: Group, scale: str) -> None:
    with st.container(border=True):
        title_col, toggle_col = st.columns([5, 1])
        if group.is_custom:
            name_key = f"group_name::{group.id}"
            st.session_state[name_key] = group.name
            title_col.text_input("Group name", key=name_key, on_change=_on_group_rename, args=(group.id,))
        else:
            title_col.subheader(group.name)
        toggle_col.button(
            "▾" if group.expanded else "▸", key=f"toggle::{group.id}",
            on_click=_on_toggle, args=(group.id,),
        )
        st.markdown(f"Subtotal: {format_budget(group.subtotal, scale)}".replace("$", "\\$"))

        if group.is_custom:
            count_col, delete_col = st.columns([3, 1])
            count_key = f"num_items::{group.id}"
            st.session_state[count_key] = group.num_items
            count_col.number_input(
                "Number of Items",
                min_value=config.MIN_ITEMS_PER_GROUP,
                max_value=config.MAX_ITEMS_PER_GROUP,
                step=1,
                key=count_key,
                on_change=_on_resize,
                args=(group.id,),
            )
            delete_col.button("🗑 Delete", key=f"delete::{group.id}", on_click=_on_delete_group, args=(group.id,))

        if group.expanded:
            for item_key in group.items.keys():
                render_item(group, item_key, scale)
                st.divider()


def main() -> None:
    """Entry point for the Streamlit app."""
    config.configure_logging()
    st.set_page_config(page_title="Force Structure Planner", page_icon="🎯", layout="wide")
    st.title("Force Structure Planning Tool")

    try:
        ledger = get_ledger()
    except TemplateError as exc:
        st.error(f"Failed to load the force structure template: {exc}")
        st.stop()

    names = scale_names()
    st.session_state.setdefault(SCALE_KEY, current_scale())
    st.sidebar.selectbox("Scale", options=names, key=SCALE_KEY)
    scale = current_scale()

    render_alerts()
    render_charts(ledger, scale)
    render_header(ledger, scale)
    st.divider()

    for group in ledger.groups:
        render_group(group, scale)

    st.button(
        "Create New Custom Group",
        on_click=_on_create_group,
        disabled=not ledger.can_create_group,
    )


if __name__ == "__main__":
    main()
