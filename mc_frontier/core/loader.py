"""
Data Loader Module for Frontier Sampling
========================================

This module loads daily closing prices for a set of assets:
- One CSV file per asset (e.g. AAPL_daily.csv with Date and Close columns)
- A directory of such files, one asset per file
- Synthetic price paths for demonstrations

The asset name is the part of the file stem before the first underscore:
    AAPL_daily.csv -> AAPL

Files are read in sorted name order so the asset universe (and therefore
every vector index) is the same on every run.
"""

import numpy as np
import pandas as pd
from typing import Any, Dict, List, Optional, Sequence, Tuple
from pathlib import Path

from mc_frontier.core.errors import InsufficientData
from mc_frontier.core.statistics import AssetUniverse, PriceSeries


class DataLoader:
    """
    A class for loading price data for frontier sampling.

    Example:
        >>> loader = DataLoader()
        >>> universe, prices = loader.load_price_directory("data")
    """

    def __init__(self, date_column: str = 'Date', price_column: str = 'Close'):
        """
        Initialize the DataLoader.

        Args:
            date_column: Name of the date column in price files
            price_column: Name of the closing price column in price files
        """
        self.date_column = date_column
        self.price_column = price_column

    def load_price_csv(self, file_path: str) -> List[Tuple[pd.Timestamp, float]]:
        """
        Load one asset's closing prices from a CSV file.

        Rows are sorted ascending by date.

        Args:
            file_path: Path to CSV file with a header row

        Returns:
            List of (date, close) pairs

        Raises:
            ValueError: On missing columns, invalid or duplicate dates, or
                invalid prices
            InsufficientData: If fewer than 2 price rows remain
        """
        df = pd.read_csv(file_path)

        for col in (self.date_column, self.price_column):
            if col not in df.columns:
                raise ValueError(f"{file_path}: missing column '{col}'")

        dates = pd.to_datetime(df[self.date_column])
        if dates.isna().any():
            raise ValueError(f"{file_path}: missing or invalid dates")
        closes = pd.to_numeric(df[self.price_column], errors='coerce')

        series = pd.Series(closes.values, index=dates).sort_index(kind='mergesort')

        if series.index.has_duplicates:
            duplicated = series.index[series.index.duplicated()][0]
            raise ValueError(f"{file_path}: duplicate date {duplicated.date()}")

        values = series.values.astype(float)
        if not np.all(np.isfinite(values)):
            raise ValueError(f"{file_path}: non-numeric or missing closing prices")
        if np.any(values <= 0):
            raise ValueError(f"{file_path}: closing prices must be positive")
        if len(series) < 2:
            raise InsufficientData(
                f"{file_path}: at least 2 price rows are required, got {len(series)}"
            )

        return [(date, float(price)) for date, price in series.items()]

    def load_price_directory(
        self,
        directory: str,
        pattern: str = '*_daily.csv',
        assets: Optional[Sequence[str]] = None
    ) -> Tuple[AssetUniverse, Dict[str, List[Tuple[pd.Timestamp, float]]]]:
        """
        Load every price file in a directory, one asset per file.

        Args:
            directory: Directory holding the price files
            pattern: Glob pattern selecting price files
            assets: Optional asset names to keep, in the order given

        Returns:
            Tuple of (asset_universe, prices_by_asset)

        Raises:
            FileNotFoundError: If no file matches the pattern
            ValueError: If a requested asset has no file
        """
        files = sorted(Path(directory).glob(pattern))
        if not files:
            raise FileNotFoundError(f"No files matching '{pattern}' in {directory}")

        paths = {}
        for path in files:
            name = path.stem.split('_')[0]
            if name in paths:
                raise ValueError(
                    f"Two price files map to asset '{name}': {paths[name].name}, {path.name}"
                )
            paths[name] = path

        if assets is None:
            names = list(paths)
        else:
            unknown = [name for name in assets if name not in paths]
            if unknown:
                raise ValueError(f"No price file for assets: {', '.join(unknown)}")
            names = list(assets)

        universe = AssetUniverse(names)
        prices = {name: self.load_price_csv(str(paths[name])) for name in universe}

        return universe, prices

    def validate_data(
        self,
        expected_returns: np.ndarray,
        cov_matrix: np.ndarray,
        asset_names: List[str]
    ) -> Dict[str, Any]:
        """
        Validate estimated statistics and return diagnostics.

        Checks:
        - Dimensions match
        - No NaN or Inf values
        - Covariance matrix is symmetric
        - Covariance matrix is positive semi-definite

        Args:
            expected_returns: Vector of expected returns
            cov_matrix: Covariance matrix
            asset_names: Asset names

        Returns:
            Dictionary with validation results
        """
        results = {
            'is_valid': True,
            'warnings': [],
            'errors': [],
            'n_assets': len(expected_returns),
            'asset_names': list(asset_names)
        }

        if cov_matrix.shape != (len(expected_returns), len(expected_returns)):
            results['errors'].append(
                f"Dimension mismatch: {len(expected_returns)} returns but "
                f"{cov_matrix.shape} covariance matrix"
            )
            results['is_valid'] = False
            return results

        if not np.all(np.isfinite(expected_returns)):
            results['errors'].append("Expected returns contain NaN or Inf")
            results['is_valid'] = False

        if not np.all(np.isfinite(cov_matrix)):
            results['errors'].append("Covariance matrix contains NaN or Inf")
            results['is_valid'] = False
            return results

        if not np.allclose(cov_matrix, cov_matrix.T):
            results['warnings'].append("Covariance matrix is not symmetric")

        eigenvalues = np.linalg.eigvalsh(cov_matrix)
        if np.any(eigenvalues < -1e-10):
            results['warnings'].append(
                f"Covariance matrix has negative eigenvalues: "
                f"min = {eigenvalues.min():.6e}"
            )

        results['return_stats'] = {
            'min': float(expected_returns.min()),
            'max': float(expected_returns.max()),
            'mean': float(expected_returns.mean())
        }

        stds = np.sqrt(np.clip(np.diag(cov_matrix), 0.0, None))
        results['std_stats'] = {
            'min': float(stds.min()),
            'max': float(stds.max()),
            'mean': float(stds.mean())
        }

        return results


def generate_sample_prices(
    n_assets: int = 4,
    n_days: int = 253,
    seed: int = 42
) -> Tuple[AssetUniverse, Dict[str, PriceSeries]]:
    """
    Generate synthetic daily closing prices for testing.

    Prices follow geometric Brownian motion with correlated shocks on a
    business-day calendar shared by all assets.

    Args:
        n_assets: Number of assets (default: 4)
        n_days: Number of price points per asset (default: 253, one year of returns)
        seed: Random seed for reproducibility

    Returns:
        Tuple of (asset_universe, prices_by_asset)
    """
    rng = np.random.default_rng(seed)

    if n_assets == 4:
        names = ['AAPL', 'AXP', 'BA', 'CAT']
    elif n_assets == 6:
        names = ['AAPL', 'AXP', 'BA', 'CAT', 'CSCO', 'CVX']
    else:
        names = [f'Stock_{i+1}' for i in range(n_assets)]

    # Annual drift and volatility, scaled to daily
    annual_mu = np.linspace(0.05, 0.15, n_assets)
    annual_sigma = np.linspace(0.15, 0.35, n_assets)
    daily_mu = annual_mu / 252
    daily_sigma = annual_sigma / np.sqrt(252)

    # Random correlation structure from a factor model
    loadings = rng.uniform(0.2, 0.8, n_assets)
    corr = np.outer(loadings, loadings)
    np.fill_diagonal(corr, 1.0)
    chol = np.linalg.cholesky(corr)

    shocks = rng.standard_normal((n_days - 1, n_assets)) @ chol.T
    log_returns = (daily_mu - 0.5 * daily_sigma ** 2) + daily_sigma * shocks

    start_prices = rng.uniform(20, 200, n_assets)
    paths = start_prices * np.exp(np.vstack([np.zeros(n_assets), np.cumsum(log_returns, axis=0)]))

    dates = pd.bdate_range(start='2023-01-02', periods=n_days)

    universe = AssetUniverse(names)
    prices = {
        name: [(date, float(price)) for date, price in zip(dates, paths[:, i])]
        for i, name in enumerate(names)
    }
    return universe, prices
