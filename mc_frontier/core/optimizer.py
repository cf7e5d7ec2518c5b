"""
Monte Carlo Frontier Sampler
============================

This module estimates the efficient frontier by random sampling:
- Random long-only, fully-invested weight vectors
- Portfolio scoring (expected return, volatility, Sharpe ratio)
- A ranked cloud of sampled portfolios (ascending volatility)
- Frontier picks: minimum volatility and maximum Sharpe ratio

Sampling Policy:
----------------
Each weight vector is built by drawing n independent uniform(0,1) values
and dividing them by their sum. This is NOT a uniform draw over the simplex
(that would be Dirichlet(1,...,1)); portfolios near equal weighting are
over-represented. The policy is kept as-is so that a seed always reproduces
the same cloud of portfolios.

Reproducibility:
----------------
One numpy Generator is created from the seed and owned by the run. Trials
draw from it strictly in order, so the same inputs and seed give an
identical result.

Zero Volatility:
----------------
Sharpe = (mu_p - rf) / sigma_p follows IEEE-754 division. A zero-volatility
portfolio yields +inf, -inf or NaN, which are kept as valid results.
"""

import math
import warnings
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import numpy as np

from mc_frontier.core.errors import DimensionMismatch, InvalidDimension

DEFAULT_RISK_FREE_RATE = 0.02
DEFAULT_TRIALS = 1000
DEFAULT_SEED = 42


@dataclass(frozen=True, eq=False)
class ScoredPortfolio:
    """One sampled portfolio and its statistics. The weights are read-only."""

    expected_return: float
    volatility: float
    sharpe_ratio: float
    weights: np.ndarray


def _check_dimensions(weights: np.ndarray, mean_returns: np.ndarray, cov_matrix: np.ndarray):
    if cov_matrix.ndim != 2 or cov_matrix.shape[0] != cov_matrix.shape[1]:
        raise DimensionMismatch(
            f"Covariance matrix must be square, got shape {cov_matrix.shape}"
        )
    n_assets = len(mean_returns)
    if len(weights) != n_assets or cov_matrix.shape[0] != n_assets:
        raise DimensionMismatch(
            f"Dimension mismatch: {len(weights)} weights, {n_assets} expected "
            f"returns, {cov_matrix.shape} covariance matrix"
        )


def sample_weights(n: int, rng: np.random.Generator) -> np.ndarray:
    """
    Draw a random long-only weight vector that sums to 1.

    Args:
        n: Number of assets
        rng: Seeded numpy Generator; advanced by exactly n draws

    Returns:
        Weight vector of length n

    Raises:
        InvalidDimension: If n is zero or negative
    """
    if n < 1:
        raise InvalidDimension(f"Cannot sample a weight vector of dimension {n}")

    raw = rng.random(n)
    return raw / raw.sum()


def score_portfolio(
    weights: Sequence[float],
    mean_returns: Sequence[float],
    cov_matrix: np.ndarray,
    risk_free_rate: float = DEFAULT_RISK_FREE_RATE
) -> ScoredPortfolio:
    """
    Score a weight vector.

    Formulas:
        mu_p = w^T * mu
        sigma_p = sqrt(w^T * Sigma * w)
        Sharpe = (mu_p - rf) / sigma_p

    A radicand pushed slightly below zero by rounding is clamped to 0.

    Args:
        weights: Portfolio weights
        mean_returns: Annualized expected return per asset
        cov_matrix: Annualized covariance matrix (n x n)
        risk_free_rate: Annual risk-free rate

    Returns:
        ScoredPortfolio

    Raises:
        DimensionMismatch: If the lengths of weights, returns and matrix differ
    """
    weights = np.asarray(weights, dtype=float).ravel()
    mean_returns = np.asarray(mean_returns, dtype=float).ravel()
    cov_matrix = np.asarray(cov_matrix, dtype=float)
    _check_dimensions(weights, mean_returns, cov_matrix)

    expected_return = np.dot(weights, mean_returns)
    variance = np.dot(weights, np.dot(cov_matrix, weights))
    volatility = np.sqrt(np.maximum(variance, 0.0))

    with np.errstate(divide='ignore', invalid='ignore'):
        sharpe = np.divide(expected_return - risk_free_rate, volatility)

    frozen_weights = weights.copy()
    frozen_weights.setflags(write=False)

    return ScoredPortfolio(
        expected_return=float(expected_return),
        volatility=float(volatility),
        sharpe_ratio=float(sharpe),
        weights=frozen_weights
    )


def _volatility_sort_key(portfolio: ScoredPortfolio):
    # NaN volatility sorts after every number
    if math.isnan(portfolio.volatility):
        return (1, 0.0)
    return (0, portfolio.volatility)


def sort_by_volatility(portfolios: Sequence[ScoredPortfolio]) -> List[ScoredPortfolio]:
    """Stable sort by volatility ascending; ties keep their original order."""
    return sorted(portfolios, key=_volatility_sort_key)


def generate_frontier(
    mean_returns: Sequence[float],
    cov_matrix: np.ndarray,
    trials: int = DEFAULT_TRIALS,
    seed: Optional[int] = DEFAULT_SEED,
    risk_free_rate: float = DEFAULT_RISK_FREE_RATE
) -> List[ScoredPortfolio]:
    """
    Sample and score random portfolios, ranked by volatility.

    Args:
        mean_returns: Annualized expected return per asset
        cov_matrix: Annualized covariance matrix
        trials: Number of portfolios to sample (positive integer)
        seed: Seed of the run's random generator
        risk_free_rate: Annual risk-free rate (finite)

    Returns:
        List of ScoredPortfolio sorted by volatility ascending

    Example:
        >>> means = np.array([0.08, 0.12])
        >>> cov = np.array([[0.04, 0.01], [0.01, 0.09]])
        >>> frontier = generate_frontier(means, cov, trials=100, seed=7)
        >>> frontier[0].volatility <= frontier[-1].volatility
        True
    """
    if isinstance(trials, bool) or not isinstance(trials, (int, np.integer)) or trials < 1:
        raise ValueError(f"trials must be a positive integer, got {trials!r}")
    if not math.isfinite(risk_free_rate):
        raise ValueError(f"risk_free_rate must be finite, got {risk_free_rate!r}")

    mean_returns = np.asarray(mean_returns, dtype=float).ravel()
    cov_matrix = np.asarray(cov_matrix, dtype=float)
    n_assets = len(mean_returns)
    _check_dimensions(np.zeros(n_assets), mean_returns, cov_matrix)

    rng = np.random.default_rng(seed)

    portfolios = []
    for _ in range(trials):
        weights = sample_weights(n_assets, rng)
        portfolios.append(
            score_portfolio(weights, mean_returns, cov_matrix, risk_free_rate)
        )

    return sort_by_volatility(portfolios)


def min_volatility_portfolio(frontier: Sequence[ScoredPortfolio]) -> Optional[ScoredPortfolio]:
    """Lowest-volatility portfolio of a ranked frontier."""
    if not frontier:
        return None
    return frontier[0]


def max_sharpe_portfolio(frontier: Sequence[ScoredPortfolio]) -> Optional[ScoredPortfolio]:
    """
    Portfolio with the largest finite Sharpe ratio.

    Infinite and NaN Sharpe ratios are skipped. Ties go to the earliest
    entry. Returns None if no entry has a finite Sharpe ratio.
    """
    best = None
    for portfolio in frontier:
        if not math.isfinite(portfolio.sharpe_ratio):
            continue
        if best is None or portfolio.sharpe_ratio > best.sharpe_ratio:
            best = portfolio
    return best


class MonteCarloOptimizer:
    """
    Holds one run's moment estimates and samples its frontier.

    Attributes:
        expected_returns (np.ndarray): Annualized expected return per asset
        cov_matrix (np.ndarray): Annualized covariance matrix
        asset_names (List[str]): Names of the assets, index-aligned
        n_assets (int): Number of assets
        rf_rate (float): Annual risk-free rate (default: 0.02)

    Example:
        >>> means = np.array([0.08, 0.12, 0.10])
        >>> cov = np.array([[0.04, 0.01, 0.00],
        ...                 [0.01, 0.09, 0.02],
        ...                 [0.00, 0.02, 0.06]])
        >>> optimizer = MonteCarloOptimizer(means, cov, ["A", "B", "C"])
        >>> frontier = optimizer.generate_frontier(trials=500, seed=42)
    """

    def __init__(
        self,
        expected_returns: np.ndarray,
        cov_matrix: np.ndarray,
        asset_names: Optional[Sequence[str]] = None,
        rf_rate: float = DEFAULT_RISK_FREE_RATE
    ):
        """
        Args:
            expected_returns: Vector of annualized expected returns
            cov_matrix: Annualized covariance matrix (n x n)
            asset_names: Optional asset names (default: Asset_1, Asset_2, ...)
            rf_rate: Annual risk-free rate

        Raises:
            DimensionMismatch: If the matrix does not match the returns vector
        """
        self.expected_returns = np.array(expected_returns, dtype=float).flatten()
        self.cov_matrix = np.array(cov_matrix, dtype=float)
        self.n_assets = len(self.expected_returns)
        self.rf_rate = rf_rate

        self._validate_inputs()

        if asset_names is None:
            self.asset_names = [f"Asset_{i+1}" for i in range(self.n_assets)]
        else:
            self.asset_names = list(asset_names)
            if len(self.asset_names) != self.n_assets:
                raise DimensionMismatch(
                    f"{len(self.asset_names)} asset names for {self.n_assets} assets"
                )

    def _validate_inputs(self):
        """Validate that inputs are properly formatted."""
        if self.cov_matrix.shape != (self.n_assets, self.n_assets):
            raise DimensionMismatch(
                f"Covariance matrix shape {self.cov_matrix.shape} doesn't match "
                f"number of assets {self.n_assets}"
            )

        if not np.allclose(self.cov_matrix, self.cov_matrix.T):
            warnings.warn("Covariance matrix is not symmetric. Symmetrizing...")
            self.cov_matrix = (self.cov_matrix + self.cov_matrix.T) / 2

        eigenvalues = np.linalg.eigvalsh(self.cov_matrix)
        if np.any(eigenvalues < -1e-10):
            warnings.warn("Covariance matrix has negative eigenvalues. "
                          "Results may be unreliable.")

    def portfolio_return(self, weights: np.ndarray) -> float:
        """Expected portfolio return: mu_p = w^T * mu"""
        return float(np.dot(weights, self.expected_returns))

    def portfolio_variance(self, weights: np.ndarray) -> float:
        """Portfolio variance: sigma_p^2 = w^T * Sigma * w"""
        return float(np.dot(weights, np.dot(self.cov_matrix, weights)))

    def portfolio_std(self, weights: np.ndarray) -> float:
        return self.score(weights).volatility

    def portfolio_sharpe(self, weights: np.ndarray) -> float:
        return self.score(weights).sharpe_ratio

    def score(self, weights: np.ndarray) -> ScoredPortfolio:
        return score_portfolio(weights, self.expected_returns, self.cov_matrix, self.rf_rate)

    def generate_frontier(
        self,
        trials: int = DEFAULT_TRIALS,
        seed: Optional[int] = DEFAULT_SEED
    ) -> List[ScoredPortfolio]:
        """
        Sample the frontier for this optimizer's moments.

        Args:
            trials: Number of random portfolios
            seed: Random seed for reproducibility

        Returns:
            List of ScoredPortfolio sorted by volatility ascending
        """
        return generate_frontier(
            self.expected_returns,
            self.cov_matrix,
            trials=trials,
            seed=seed,
            risk_free_rate=self.rf_rate
        )

    def get_asset_stats(self) -> Dict[str, Dict[str, float]]:
        """
        Get individual asset statistics.

        Returns:
            Dictionary mapping asset names to their stats
        """
        stats = {}
        for i, name in enumerate(self.asset_names):
            stats[name] = {
                'mean': float(self.expected_returns[i]),
                'std': float(np.sqrt(max(self.cov_matrix[i, i], 0.0))),
                'variance': float(self.cov_matrix[i, i])
            }
        return stats

    def summary_report(self, frontier: Sequence[ScoredPortfolio]) -> str:
        """
        Generate a summary report of a sampled frontier.

        Args:
            frontier: Ranked portfolios from generate_frontier

        Returns:
            Formatted string report
        """
        lines = []
        lines.append("=" * 70)
        lines.append("MONTE CARLO FRONTIER SUMMARY REPORT")
        lines.append("=" * 70)

        lines.append("\n--- Individual Asset Statistics (annualized) ---")
        lines.append(f"{'Asset':<12} {'Mean':>12} {'Std Dev':>12} {'Variance':>12}")
        lines.append("-" * 50)

        for name, stats in self.get_asset_stats().items():
            lines.append(
                f"{name:<12} {stats['mean']:>12.6f} {stats['std']:>12.6f} "
                f"{stats['variance']:>12.6f}"
            )

        lines.append(f"\nRisk-free rate: {self.rf_rate:.4f} ({self.rf_rate*100:.2f}%)")
        lines.append(f"Portfolios sampled: {len(frontier)}")

        picks = [
            ("Minimum Volatility Portfolio", min_volatility_portfolio(frontier)),
            ("Maximum Sharpe Ratio Portfolio", max_sharpe_portfolio(frontier)),
        ]
        for title, portfolio in picks:
            lines.append(f"\n--- {title} ---")
            if portfolio is None:
                lines.append("Not available")
                continue
            lines.append("Weights:")
            for name, weight in zip(self.asset_names, portfolio.weights):
                lines.append(f"  {name}: {weight:.6f} ({weight*100:.2f}%)")
            lines.append(
                f"Expected Return: {portfolio.expected_return:.6f} "
                f"({portfolio.expected_return*100:.2f}%)"
            )
            lines.append(
                f"Volatility: {portfolio.volatility:.6f} "
                f"({portfolio.volatility*100:.2f}%)"
            )
            lines.append(f"Sharpe Ratio: {portfolio.sharpe_ratio:.6f}")

        lines.append("\n" + "=" * 70)

        return "\n".join(lines)
