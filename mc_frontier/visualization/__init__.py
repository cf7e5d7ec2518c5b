"""Visualization modules for frontier sampling."""

from mc_frontier.visualization.plots import (
    plot_frontier_cloud,
    plot_portfolio_weights
)

__all__ = [
    "plot_frontier_cloud",
    "plot_portfolio_weights",
]
