"""
Monte Carlo Efficient Frontier
==============================

Estimates a portfolio's risk/return frontier from daily closing prices by
sampling random long-only weight vectors.

Usage:
    from mc_frontier import DataLoader, compute_stats_from_prices, generate_frontier
    from mc_frontier.visualization import plot_frontier_cloud

Classes:
    MonteCarloOptimizer - Scoring and frontier sampling for one set of moments
    DataLoader - Price loading from per-asset CSV files
    AssetUniverse - Ordered asset names fixing every vector index

Functions:
    build_returns - Simple returns from a price series
    estimate_moments - Annualized mean returns and covariance matrix
    sample_weights - Random long-only weight vector
    score_portfolio - Return, volatility and Sharpe ratio of a weight vector
    generate_frontier - Ranked cloud of sampled portfolios
    write_frontier - Export ranked portfolios to CSV or Excel
"""

from mc_frontier.core.errors import (
    DimensionMismatch,
    FrontierError,
    InsufficientData,
    InvalidDimension,
    LengthMismatch,
)
from mc_frontier.core.statistics import (
    ANNUALIZATION_FACTOR,
    AssetUniverse,
    build_returns,
    compute_stats_from_prices,
    estimate_moments,
)
from mc_frontier.core.optimizer import (
    MonteCarloOptimizer,
    ScoredPortfolio,
    generate_frontier,
    max_sharpe_portfolio,
    min_volatility_portfolio,
    sample_weights,
    score_portfolio,
)
from mc_frontier.core.loader import DataLoader, generate_sample_prices
from mc_frontier.core.export import frontier_to_dataframe, write_frontier

__version__ = "1.0.0"

__all__ = [
    "ANNUALIZATION_FACTOR",
    "AssetUniverse",
    "DataLoader",
    "DimensionMismatch",
    "FrontierError",
    "InsufficientData",
    "InvalidDimension",
    "LengthMismatch",
    "MonteCarloOptimizer",
    "ScoredPortfolio",
    "build_returns",
    "compute_stats_from_prices",
    "estimate_moments",
    "frontier_to_dataframe",
    "generate_frontier",
    "generate_sample_prices",
    "max_sharpe_portfolio",
    "min_volatility_portfolio",
    "sample_weights",
    "score_portfolio",
    "write_frontier",
]
