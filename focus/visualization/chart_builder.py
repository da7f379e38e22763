"""Chart building utilities for visualization."""
from typing import Optional, Sequence

import pandas as pd
import plotly.graph_objects as go

from focus.constants import INITIAL_LABEL, SNAPSHOT_TYPES, WALLET_TYPES
from focus.data.models import MarketCapSnapshot
from focus.data.transformer import snapshot_row
from focus.visualization.colors import color_for, wallet_type_color

_LAYOUT = dict(
    template="plotly_white",
    margin=dict(l=40, r=20, t=50, b=40),
    hovermode="closest",
)


def _empty_figure(message: str) -> go.Figure:
    fig = go.Figure()
    fig.update_layout(**_LAYOUT)
    fig.add_annotation(text=message, showarrow=False, xref="paper", yref="paper", x=0.5, y=0.5)
    fig.update_xaxes(visible=False)
    fig.update_yaxes(visible=False)
    return fig


def create_market_cap_figure(
    initial_market_cap: Optional[float],
    snapshots: Sequence[MarketCapSnapshot],
    token_id: str = "",
) -> go.Figure:
    """
    Plot market cap across snapshot intervals, starting from the initial value.

    Intervals with no snapshot are left as gaps in the line.

    Args:
        initial_market_cap: Market cap when the token was accepted (SOL)
        snapshots: Snapshots for the token, any order
        token_id: Used for a stable line color

    Returns:
        Plotly Figure
    """
    row = snapshot_row(snapshots)
    labels = [INITIAL_LABEL] + list(SNAPSHOT_TYPES)
    values = [initial_market_cap] + [
        row[kind].market_cap if row[kind] is not None else None for kind in SNAPSHOT_TYPES
    ]

    if all(v is None for v in values):
        return _empty_figure("No market cap data")

    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=labels,
            y=values,
            mode="lines+markers",
            name="Market Cap",
            connectgaps=False,
            line=dict(color=color_for(token_id or "market-cap"), width=2),
            hovertemplate="<b>%{x}</b><br>Market Cap: ◎ %{y:,.2f}<extra></extra>",
        )
    )
    fig.update_layout(
        title="Market Cap Snapshots",
        xaxis_title="Interval since acceptance",
        yaxis_title="Market Cap (SOL)",
        **_LAYOUT,
    )
    fig.update_xaxes(type="category", categoryorder="array", categoryarray=labels)
    return fig


def create_transactions_figure(frame: pd.DataFrame) -> go.Figure:
    """
    Scatter of transaction SOL volume over time, one trace per wallet type.

    Args:
        frame: Output of ``transactions_frame``

    Returns:
        Plotly Figure
    """
    if frame is None or frame.empty:
        return _empty_figure("No transactions")

    data = frame.dropna(subset=["created_at"])
    if data.empty:
        return _empty_figure("No dated transactions")

    wallet_types = data["wallet_type"].fillna("unknown")
    fig = go.Figure()
    for kind in WALLET_TYPES:
        subset = data[wallet_types == kind]
        if subset.empty:
            continue
        fig.add_trace(
            go.Scatter(
                x=subset["created_at"],
                y=subset["sol_volume"],
                mode="markers",
                name=kind.capitalize(),
                marker=dict(color=wallet_type_color(kind), size=7, opacity=0.75),
                customdata=subset[["traderpublickey", "txtype"]].fillna("null").values,
                hovertemplate=(
                    "<b>%{customdata[0]}</b><br>"
                    "Type: %{customdata[1]}<br>"
                    "Date: %{x}<br>"
                    "SOL: %{y:,.4f}<extra></extra>"
                ),
            )
        )
    fig.update_layout(
        title="Transactions by Wallet Type",
        xaxis_title="Time",
        yaxis_title="SOL Volume",
        legend_title="Wallet Type",
        **_LAYOUT,
    )
    return fig
