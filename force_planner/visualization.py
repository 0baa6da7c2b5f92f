"""Plotly chart builders for the allocation dashboard.

Each function takes a breakdown DataFrame from :mod:`force_planner.views`
(columns ``Group`` and ``Value``) and returns a
``plotly.graph_objects.Figure`` ready for ``st.plotly_chart``.  Amounts are
labelled in the currently selected display scale.
"""

from __future__ import annotations

from typing import List

import numpy as np
import pandas as pd
import plotly.graph_objects as go

from .scale import format_budget
from .views import REMAINING_BUDGET_LABEL

GOLDEN_ANGLE = 137.508
REMAINING_COLOR = "#d3d3d3"
PALETTE_SIZE = 50


def generate_color_palette(num_colors: int) -> List[str]:
    """Spread ``num_colors`` hues around the colour wheel by the golden angle.

    Example:
        >>> generate_color_palette(2)
        ['hsl(0.0, 65%, 50%)', 'hsl(137.508, 65%, 50%)']
    """
    hues = np.round((np.arange(max(num_colors, 0)) * GOLDEN_ANGLE) % 360, 3)
    return [f"hsl({hue}, 65%, 50%)" for hue in hues.tolist()]


def _empty_figure() -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title="No data to display")
    return fig


def _slice_colors(labels: pd.Series) -> List[str]:
    palette = generate_color_palette(PALETTE_SIZE)
    return [
        REMAINING_COLOR if label == REMAINING_BUDGET_LABEL else palette[index % len(palette)]
        for index, label in enumerate(labels)
    ]


def create_allocation_pie_chart(breakdown: pd.DataFrame, scale: str, title: str | None = None) -> go.Figure:
    """Pie chart of group subtotals, including the remaining budget slice.

    Parameters
    ----------
    breakdown : pandas.DataFrame
        Output of :func:`force_planner.views.distribution_breakdown`.
    scale : str
        Display scale used for hover labels.
    title : str, optional
        Chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        Pie chart with percentage labels.
    """
    if breakdown.empty or breakdown["Value"].sum() <= 0:
        return _empty_figure()
    hover = [format_budget(value, scale) for value in breakdown["Subtotal"]]
    fig = go.Figure(
        go.Pie(
            labels=breakdown["Group"],
            values=breakdown["Value"],
            customdata=hover,
            marker={"colors": _slice_colors(breakdown["Group"])},
            texttemplate="%{percent:.1%}",
            hovertemplate="%{label}<br>%{customdata}<extra></extra>",
            sort=False,
        )
    )
    fig.update_layout(title=title or "Budget Allocation - Pie Chart")
    return fig


def create_allocation_bar_chart(breakdown: pd.DataFrame, scale: str, title: str | None = None) -> go.Figure:
    """Bar chart of group subtotals.

    The y axis ticks are rendered with :func:`format_budget` at whole-number
    precision in ``scale`` units.
    """
    if breakdown.empty:
        return _empty_figure()
    hover = [format_budget(value, scale) for value in breakdown["Subtotal"]]
    palette = generate_color_palette(PALETTE_SIZE)
    colors = [palette[index % len(palette)] for index in range(len(breakdown))]
    fig = go.Figure(
        go.Bar(
            x=breakdown["Group"],
            y=breakdown["Value"],
            customdata=hover,
            marker={"color": colors},
            hovertemplate="%{x}<br>%{customdata}<extra></extra>",
        )
    )
    max_value = float(breakdown["Value"].max())
    tick_values = np.linspace(0, max_value, 5).tolist() if max_value > 0 else [0.0]
    fig.update_layout(
        title=title or "Budget Allocation - Bar Chart",
        xaxis={"showticklabels": False},
        yaxis={
            "tickmode": "array",
            "tickvals": tick_values,
            "ticktext": [format_budget(value, scale, decimal_places=0) for value in tick_values],
        },
        margin={"t": 60, "r": 20, "l": 80},
    )
    return fig
