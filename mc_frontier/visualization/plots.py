"""
Plotting Module for Monte Carlo Frontier Sampling
=================================================

This module provides visualization functions for a sampled frontier:
- The cloud of sampled portfolios on the risk-return plane
- Minimum volatility and maximum Sharpe ratio picks
- Individual asset positions
- Portfolio weight bar charts
"""

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.figure import Figure
from typing import List, Optional, Sequence, Tuple

from mc_frontier.core.optimizer import (
    MonteCarloOptimizer,
    ScoredPortfolio,
    max_sharpe_portfolio,
    min_volatility_portfolio,
)


def plot_frontier_cloud(
    frontier: Sequence[ScoredPortfolio],
    optimizer: Optional[MonteCarloOptimizer] = None,
    show_assets: bool = True,
    show_min_volatility: bool = True,
    show_max_sharpe: bool = True,
    figsize: Tuple[int, int] = (12, 8),
    save_path: Optional[str] = None,
    title: str = "Monte Carlo Efficient Frontier"
) -> Figure:
    """
    Scatter plot of sampled portfolios, coloured by Sharpe ratio.

    Portfolios with a non-finite Sharpe ratio are drawn in grey.

    Args:
        frontier: Ranked portfolios from generate_frontier
        optimizer: Optional optimizer, used to plot individual assets
        show_assets: If True and an optimizer is given, show individual assets
        show_min_volatility: If True, highlight the minimum volatility pick
        show_max_sharpe: If True, highlight the maximum Sharpe ratio pick
        figsize: Figure size (width, height)
        save_path: If provided, save the figure to this path
        title: Plot title

    Returns:
        matplotlib Figure object
    """
    if not frontier:
        raise ValueError("Cannot plot an empty frontier")

    fig, ax = plt.subplots(figsize=figsize)

    stds = np.array([p.volatility for p in frontier])
    returns = np.array([p.expected_return for p in frontier])
    sharpes = np.array([p.sharpe_ratio for p in frontier])
    finite = np.isfinite(sharpes)

    scatter = ax.scatter(stds[finite] * 100, returns[finite] * 100,
                         c=sharpes[finite], cmap='viridis', s=12, alpha=0.7,
                         label='Sampled Portfolios', zorder=2)
    if np.any(finite):
        fig.colorbar(scatter, ax=ax, label='Sharpe Ratio')
    if np.any(~finite):
        ax.scatter(stds[~finite] * 100, returns[~finite] * 100,
                   c='grey', s=12, alpha=0.7, label='Undefined Sharpe', zorder=2)

    if show_assets and optimizer is not None:
        asset_stats = optimizer.get_asset_stats()
        asset_stds = np.array([s['std'] for s in asset_stats.values()])
        asset_returns = np.array([s['mean'] for s in asset_stats.values()])

        ax.scatter(asset_stds * 100, asset_returns * 100,
                   c='red', s=100, marker='o', edgecolors='black',
                   label='Individual Assets', zorder=5)

        for i, name in enumerate(asset_stats):
            ax.annotate(name,
                        (asset_stds[i] * 100, asset_returns[i] * 100),
                        xytext=(5, 5), textcoords='offset points',
                        fontsize=9, fontweight='bold')

    if show_min_volatility:
        low = min_volatility_portfolio(frontier)
        ax.scatter([low.volatility * 100], [low.expected_return * 100],
                   c='purple', s=200, marker='*', edgecolors='black',
                   label=f"Min Volatility (σ={low.volatility*100:.2f}%, "
                         f"μ={low.expected_return*100:.2f}%)",
                   zorder=6)

    best = max_sharpe_portfolio(frontier)
    if show_max_sharpe and best is not None:
        ax.scatter([best.volatility * 100], [best.expected_return * 100],
                   c='gold', s=200, marker='D', edgecolors='black',
                   label=f"Max Sharpe (Sharpe={best.sharpe_ratio:.3f})",
                   zorder=6)

    ax.set_xlabel('Volatility (annualized) %', fontsize=12)
    ax.set_ylabel('Expected Return (annualized) %', fontsize=12)
    ax.set_title(title, fontsize=14, fontweight='bold')
    ax.legend(loc='upper left', fontsize=10)
    ax.grid(True, alpha=0.3)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')

    return fig


def plot_portfolio_weights(
    weights: np.ndarray,
    asset_names: List[str],
    title: str = "Portfolio Weights",
    figsize: Tuple[int, int] = (10, 6),
    save_path: Optional[str] = None
) -> Figure:
    """
    Create a bar chart of portfolio weights.

    Args:
        weights: Array of portfolio weights
        asset_names: List of asset names
        title: Plot title
        figsize: Figure size
        save_path: Optional path to save figure

    Returns:
        matplotlib Figure object
    """
    weights = np.asarray(weights, dtype=float)
    fig, ax = plt.subplots(figsize=figsize)

    bars = ax.bar(list(asset_names), weights * 100, color='steelblue', edgecolor='black')

    for bar, w in zip(bars, weights):
        ax.annotate(f'{w*100:.1f}%',
                    xy=(bar.get_x() + bar.get_width() / 2, bar.get_height()),
                    xytext=(0, 3),
                    textcoords='offset points',
                    ha='center', va='bottom',
                    fontsize=10, fontweight='bold')

    ax.set_xlabel('Assets', fontsize=12)
    ax.set_ylabel('Weight %', fontsize=12)
    ax.set_title(title, fontsize=14, fontweight='bold')
    ax.grid(True, axis='y', alpha=0.3)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=150, bbox_inches='tight')

    return fig
