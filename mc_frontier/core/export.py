"""
Frontier export: one row per sampled portfolio.

Columns are Return, Volatility, SharpeRatio followed by one
{asset}_Weight column per asset in universe order. Row order is the
frontier's order (ascending volatility).
"""

import pandas as pd
from pathlib import Path
from typing import Sequence, Union

from mc_frontier.core.errors import DimensionMismatch
from mc_frontier.core.optimizer import ScoredPortfolio
from mc_frontier.core.statistics import AssetUniverse

SUMMARY_COLUMNS = ['Return', 'Volatility', 'SharpeRatio']


def frontier_to_dataframe(
    frontier: Sequence[ScoredPortfolio],
    asset_names: Union[AssetUniverse, Sequence[str]]
) -> pd.DataFrame:
    """
    Tabulate a ranked frontier.

    Args:
        frontier: Portfolios sorted by volatility
        asset_names: Asset names used to label weight columns

    Returns:
        DataFrame with one row per portfolio
    """
    if not isinstance(asset_names, AssetUniverse):
        asset_names = AssetUniverse(asset_names)
    weight_columns = asset_names.weight_columns()

    rows = []
    for position, portfolio in enumerate(frontier):
        if len(portfolio.weights) != len(asset_names):
            raise DimensionMismatch(
                f"Portfolio {position} has {len(portfolio.weights)} weights "
                f"for {len(asset_names)} assets"
            )
        row = [portfolio.expected_return, portfolio.volatility, portfolio.sharpe_ratio]
        row.extend(float(w) for w in portfolio.weights)
        rows.append(row)

    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS + weight_columns)


def write_frontier(
    frontier: Sequence[ScoredPortfolio],
    asset_names: Union[AssetUniverse, Sequence[str]],
    path: Union[str, Path]
) -> Path:
    """
    Write a ranked frontier to CSV or Excel, chosen by file suffix.

    Args:
        frontier: Portfolios sorted by volatility
        asset_names: Asset names used to label weight columns
        path: Output path ending in .csv or .xlsx

    Returns:
        The path written
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in ('.csv', '.xlsx'):
        raise ValueError(f"Unsupported output format '{path.suffix}'. Use .csv or .xlsx")

    df = frontier_to_dataframe(frontier, asset_names)
    path.parent.mkdir(parents=True, exist_ok=True)

    if suffix == '.csv':
        df.to_csv(path, index=False)
    else:
        df.to_excel(path, index=False, sheet_name='Frontier', engine='openpyxl')

    return path
