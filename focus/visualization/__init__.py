"""Visualization modules for charts and colors."""
from focus.visualization.chart_builder import create_market_cap_figure, create_transactions_figure
from focus.visualization.colors import color_for, wallet_type_color

__all__ = [
    "color_for",
    "create_market_cap_figure",
    "create_transactions_figure",
    "wallet_type_color",
]
