"""
Return and Moment Statistics
============================

This module turns raw daily closing prices into the annualized statistics
the Monte Carlo frontier sampler consumes:

- Simple period returns from an ordered price series
- Annualized mean-return vector
- Annualized sample covariance matrix

Index Alignment:
----------------
Every vector and matrix produced here is index-aligned to an explicit
AssetUniverse. Index i always refers to universe[i]; the iteration order of
the mapping holding the return series is never used.

Annualization:
--------------
Daily statistics are scaled by ANNUALIZATION_FACTOR (252 trading days):
- mean_annual = mean_daily * 252
- cov_annual = cov_daily * 252
"""

import numpy as np
from typing import Any, Dict, Iterator, List, Mapping, Sequence, Tuple, Union

from mc_frontier.core.errors import (
    DimensionMismatch,
    InsufficientData,
    InvalidDimension,
    LengthMismatch,
)

ANNUALIZATION_FACTOR = 252

PriceSeries = Sequence[Tuple[Any, float]]


class AssetUniverse:
    """
    Ordered, named collection of assets.

    Defines the dimension n and the index-to-name mapping used by every
    vector and matrix in a run.

    Example:
        >>> universe = AssetUniverse(["AAPL", "MSFT"])
        >>> universe.index("MSFT")
        1
    """

    def __init__(self, names: Sequence[str]):
        names = list(names)
        if not names:
            raise InvalidDimension("Asset universe must contain at least one asset")

        seen = set()
        for name in names:
            if name in seen:
                raise ValueError(f"Duplicate asset in universe: {name}")
            seen.add(name)

        self._names = tuple(names)

    @property
    def names(self) -> List[str]:
        return list(self._names)

    def index(self, name: str) -> int:
        return self._names.index(name)

    def weight_columns(self) -> List[str]:
        """Column labels for per-asset weights, in universe order."""
        return [f"{name}_Weight" for name in self._names]

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __getitem__(self, i: int) -> str:
        return self._names[i]

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __eq__(self, other: object) -> bool:
        if isinstance(other, AssetUniverse):
            return self._names == other._names
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._names)

    def __repr__(self) -> str:
        return f"AssetUniverse({list(self._names)!r})"


def build_returns(price_series: PriceSeries) -> np.ndarray:
    """
    Convert an ordered price series into simple period returns.

    Formula: r[t] = (p[t] - p[t-1]) / p[t-1]

    Args:
        price_series: Sequence of (timestamp, price) pairs, ascending by date

    Returns:
        Array of returns, one element shorter than the price series

    Raises:
        InsufficientData: If fewer than 2 price points are given
    """
    if len(price_series) < 2:
        raise InsufficientData(
            f"At least 2 price points are required to compute returns, "
            f"got {len(price_series)}"
        )

    prices = np.array([price for _, price in price_series], dtype=float)
    return (prices[1:] - prices[:-1]) / prices[:-1]


def estimate_moments(
    returns_by_asset: Mapping[str, Sequence[float]],
    asset_universe: Union[AssetUniverse, Sequence[str]],
    annualization_factor: float = ANNUALIZATION_FACTOR
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Compute annualized mean returns and covariance matrix.

    The covariance uses the unbiased sample estimator:
        Cov = (R - mean)^T * (R - mean) / (T - 1)

    Only the upper triangle is kept and mirrored, so the result is exactly
    symmetric.

    Args:
        returns_by_asset: Mapping of asset name -> return series
        asset_universe: Ordered assets defining the output index order
        annualization_factor: Periods per year (default: 252 trading days)

    Returns:
        Tuple of (mean_returns, cov_matrix)

    Raises:
        DimensionMismatch: If an asset of the universe has no return series
        InsufficientData: If any series has fewer than 2 observations
        LengthMismatch: If the series are not all the same length
    """
    if not isinstance(asset_universe, AssetUniverse):
        asset_universe = AssetUniverse(asset_universe)

    missing = [name for name in asset_universe if name not in returns_by_asset]
    if missing:
        raise DimensionMismatch(
            f"No return series for assets in universe: {', '.join(missing)}"
        )

    series = [
        np.asarray(returns_by_asset[name], dtype=float).ravel()
        for name in asset_universe
    ]

    for name, values in zip(asset_universe, series):
        if len(values) == 0:
            raise InsufficientData(f"Return series for '{name}' is empty")
        if len(values) < 2:
            raise InsufficientData(
                f"Return series for '{name}' has {len(values)} observation; "
                f"the sample covariance needs at least 2"
            )

    lengths = {name: len(values) for name, values in zip(asset_universe, series)}
    if len(set(lengths.values())) > 1:
        detail = ", ".join(f"{name}={length}" for name, length in lengths.items())
        raise LengthMismatch(
            f"Return series must have equal length (synchronized calendars): {detail}"
        )

    returns = np.column_stack(series)
    n_periods = returns.shape[0]

    means = np.mean(returns, axis=0)
    demeaned = returns - means

    cov_matrix = np.dot(demeaned.T, demeaned) / (n_periods - 1)
    upper = np.triu(cov_matrix)
    cov_matrix = upper + np.triu(cov_matrix, 1).T

    return means * annualization_factor, cov_matrix * annualization_factor


def compute_stats_from_prices(
    prices_by_asset: Mapping[str, PriceSeries],
    asset_universe: Union[AssetUniverse, Sequence[str]],
    annualization_factor: float = ANNUALIZATION_FACTOR
) -> Tuple[np.ndarray, np.ndarray, Dict[str, np.ndarray]]:
    """
    Run the return builder and moment estimator over a set of price series.

    Args:
        prices_by_asset: Mapping of asset name -> price series
        asset_universe: Ordered assets defining the output index order
        annualization_factor: Periods per year

    Returns:
        Tuple of (mean_returns, cov_matrix, returns_by_asset)
    """
    if not isinstance(asset_universe, AssetUniverse):
        asset_universe = AssetUniverse(asset_universe)

    missing = [name for name in asset_universe if name not in prices_by_asset]
    if missing:
        raise DimensionMismatch(
            f"No price series for assets in universe: {', '.join(missing)}"
        )

    returns_by_asset = {
        name: build_returns(prices_by_asset[name]) for name in asset_universe
    }
    mean_returns, cov_matrix = estimate_moments(
        returns_by_asset, asset_universe, annualization_factor
    )
    return mean_returns, cov_matrix, returns_by_asset
