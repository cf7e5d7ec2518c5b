"""Shared pytest fixtures for the frontier test suite.

Synthetic price data with fixed seeds; nothing touches the network.
"""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest

from mc_frontier.core.statistics import AssetUniverse


def _as_price_series(prices, start="2024-01-02"):
    dates = pd.bdate_range(start=start, periods=len(prices))
    return [(date, float(price)) for date, price in zip(dates, prices)]


@pytest.fixture
def make_price_series():
    """Factory turning a list of closes into (date, close) pairs on business days."""
    return _as_price_series


# ---------------------------------------------------------------------------
# Two-asset example
# ---------------------------------------------------------------------------

@pytest.fixture
def two_asset_prices():
    """Two assets with three daily returns each."""
    universe = AssetUniverse(["AAA", "BBB"])
    prices = {
        "AAA": _as_price_series([100, 101, 102, 101]),
        "BBB": _as_price_series([50, 49, 50, 51]),
    }
    return universe, prices


# ---------------------------------------------------------------------------
# Annualized moments
# ---------------------------------------------------------------------------

@pytest.fixture
def three_asset_moments():
    """Annualized means and a positive definite covariance matrix."""
    means = np.array([0.08, 0.12, 0.10])
    cov = np.array([
        [0.040, 0.010, 0.004],
        [0.010, 0.090, 0.020],
        [0.004, 0.020, 0.060],
    ])
    return means, cov


@pytest.fixture
def write_price_csv(tmp_path):
    """Write a Date/Close CSV into tmp_path and return its path."""

    def _write(filename, prices, start="2024-01-02", reverse=False):
        dates = pd.bdate_range(start=start, periods=len(prices))
        df = pd.DataFrame({"Date": dates.strftime("%Y-%m-%d"), "Close": prices})
        if reverse:
            df = df.iloc[::-1]
        path = tmp_path / filename
        df.to_csv(path, index=False)
        return path

    return _write
