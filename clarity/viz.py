"""Visualization utilities for Clarity."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

INCOME_COLOUR = "#10B981"
EXPENSE_COLOUR = "#EF4444"
PRIMARY_COLOUR = "#6366F1"


def _empty_figure(message: str) -> go.Figure:
    fig = go.Figure()
    fig.add_annotation(
        text=message,
        showarrow=False,
        x=0.5,
        y=0.5,
        xref="paper",
        yref="paper",
        font=dict(size=14, color="#6c757d"),
    )
    fig.update_layout(margin=dict(l=0, r=0, t=20, b=20))
    return fig


def plot_daily_activity(buckets: Iterable[Mapping[str, object]]) -> go.Figure:
    """Area chart of income and expense per day of the trailing window."""

    data = list(buckets)
    if not data:
        return _empty_figure("No activity to display.")

    df = pd.DataFrame(data)
    fig = go.Figure()
    for column, colour in (("income", INCOME_COLOUR), ("expense", EXPENSE_COLOUR)):
        fig.add_trace(
            go.Scatter(
                name=column.title(),
                x=df["label"],
                y=df[column],
                customdata=df["date"],
                mode="lines",
                fill="tozeroy",
                line=dict(color=colour, width=3, shape="spline"),
                hovertemplate="%{customdata}<br>%{y:$,.2f}<extra>%{fullData.name}</extra>",
            )
        )
    fig.update_layout(
        title=f"Last {len(df)} days activity",
        yaxis_title="Amount",
        margin=dict(l=0, r=0, t=45, b=0),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
    )
    return fig


def plot_category_breakdown(
    breakdown: Iterable[Mapping[str, object]],
    txn_type: str = "expense",
) -> go.Figure:
    """Horizontal bars of category totals, largest at the top."""

    data = list(breakdown)
    if not data:
        return _empty_figure(f"No data available for {txn_type}s")

    df = pd.DataFrame(data)
    heading = "Earnings" if txn_type == "income" else "Spending"
    fig = px.bar(
        df,
        x="total",
        y="name",
        orientation="h",
        labels={"name": "Category", "total": "Amount"},
        title=f"{heading} by category",
    )
    fig.update_traces(marker_color=INCOME_COLOUR if txn_type == "income" else EXPENSE_COLOUR)
    fig.update_yaxes(autorange="reversed")
    fig.update_layout(margin=dict(l=0, r=0, t=40, b=0))
    return fig


def plot_savings_rate(rate: int) -> go.Figure:
    """Gauge of the current month's savings rate."""

    if rate >= 20:
        colour = INCOME_COLOUR
    elif rate > 0:
        colour = PRIMARY_COLOUR
    else:
        colour = EXPENSE_COLOUR

    fig = go.Figure(
        go.Indicator(
            mode="gauge+number",
            value=rate,
            number=dict(suffix="%"),
            gauge=dict(axis=dict(range=[0, 100]), bar=dict(color=colour)),
            title=dict(text="Monthly savings rate"),
        )
    )
    fig.update_layout(margin=dict(l=20, r=20, t=50, b=0))
    return fig
