"""Core computational modules for frontier sampling."""

from mc_frontier.core.statistics import AssetUniverse, build_returns, estimate_moments, compute_stats_from_prices
from mc_frontier.core.optimizer import MonteCarloOptimizer, ScoredPortfolio, generate_frontier, sample_weights, score_portfolio
from mc_frontier.core.loader import DataLoader, generate_sample_prices
from mc_frontier.core.export import frontier_to_dataframe, write_frontier

__all__ = [
    "AssetUniverse",
    "DataLoader",
    "MonteCarloOptimizer",
    "ScoredPortfolio",
    "build_returns",
    "compute_stats_from_prices",
    "estimate_moments",
    "frontier_to_dataframe",
    "generate_frontier",
    "generate_sample_prices",
    "sample_weights",
    "score_portfolio",
    "write_frontier",
]
