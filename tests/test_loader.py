"""Tests for mc_frontier.core.loader -- price files and sample data."""

import numpy as np
import pandas as pd
import pytest

from mc_frontier.core.errors import InsufficientData
from mc_frontier.core.loader import DataLoader, generate_sample_prices
from mc_frontier.core.statistics import AssetUniverse


class TestLoadPriceCsv:

    def test_sorted_ascending_by_date(self, write_price_csv):
        path = write_price_csv("AAPL_daily.csv", [10.0, 11.0, 12.0], reverse=True)
        series = DataLoader().load_price_csv(str(path))

        dates = [date for date, _ in series]
        assert dates == sorted(dates)
        assert [price for _, price in series] == [10.0, 11.0, 12.0]
        assert isinstance(dates[0], pd.Timestamp)

    def test_custom_columns(self, tmp_path):
        path = tmp_path / "prices.csv"
        pd.DataFrame({"day": ["2024-01-02", "2024-01-03"], "adj": [5.0, 5.5]}).to_csv(path, index=False)
        series = DataLoader(date_column="day", price_column="adj").load_price_csv(str(path))
        assert [price for _, price in series] == [5.0, 5.5]

    def test_missing_column(self, tmp_path):
        path = tmp_path / "bad.csv"
        pd.DataFrame({"Date": ["2024-01-02"], "Open": [1.0]}).to_csv(path, index=False)
        with pytest.raises(ValueError, match="Close"):
            DataLoader().load_price_csv(str(path))

    def test_non_positive_price(self, write_price_csv):
        path = write_price_csv("X_daily.csv", [10.0, 0.0, 12.0])
        with pytest.raises(ValueError, match="positive"):
            DataLoader().load_price_csv(str(path))

    def test_non_numeric_price(self, tmp_path):
        path = tmp_path / "X_daily.csv"
        pd.DataFrame({"Date": ["2024-01-02", "2024-01-03"], "Close": ["10", "n/a"]}).to_csv(path, index=False)
        with pytest.raises(ValueError, match="non-numeric"):
            DataLoader().load_price_csv(str(path))

    def test_duplicate_dates(self, tmp_path):
        path = tmp_path / "X_daily.csv"
        pd.DataFrame({"Date": ["2024-01-02", "2024-01-02"], "Close": [10.0, 11.0]}).to_csv(path, index=False)
        with pytest.raises(ValueError, match="duplicate"):
            DataLoader().load_price_csv(str(path))

    def test_blank_date_rejected(self, tmp_path):
        path = tmp_path / "X_daily.csv"
        path.write_text("Date,Close\n2024-01-02,10\n,11\n2024-01-04,12\n")
        with pytest.raises(ValueError, match="dates"):
            DataLoader().load_price_csv(str(path))

    def test_header_only_raises_insufficient_data(self, tmp_path):
        path = tmp_path / "X_daily.csv"
        path.write_text("Date,Close\n")
        with pytest.raises(InsufficientData):
            DataLoader().load_price_csv(str(path))

    def test_single_row_raises_insufficient_data(self, write_price_csv):
        path = write_price_csv("X_daily.csv", [10.0])
        with pytest.raises(InsufficientData, match="got 1"):
            DataLoader().load_price_csv(str(path))


class TestLoadPriceDirectory:

    def test_names_from_file_stems_in_sorted_order(self, write_price_csv, tmp_path):
        write_price_csv("MSFT_daily.csv", [300.0, 301.0, 302.0])
        write_price_csv("AAPL_daily.csv", [150.0, 151.0, 149.0])
        write_price_csv("notes.csv", [1.0, 2.0])

        universe, prices = DataLoader().load_price_directory(str(tmp_path))

        assert universe == AssetUniverse(["AAPL", "MSFT"])
        assert set(prices) == {"AAPL", "MSFT"}
        assert prices["MSFT"][0][1] == 300.0

    def test_asset_selection_order(self, write_price_csv, tmp_path):
        for name in ("A", "B", "C"):
            write_price_csv(f"{name}_daily.csv", [1.0, 2.0])

        universe, prices = DataLoader().load_price_directory(str(tmp_path), assets=["C", "A"])
        assert list(universe) == ["C", "A"]
        assert set(prices) == {"C", "A"}

    def test_unknown_asset(self, write_price_csv, tmp_path):
        write_price_csv("A_daily.csv", [1.0, 2.0])
        with pytest.raises(ValueError, match="ZZZ"):
            DataLoader().load_price_directory(str(tmp_path), assets=["ZZZ"])

    def test_no_matching_files(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            DataLoader().load_price_directory(str(tmp_path))

    def test_custom_pattern(self, write_price_csv, tmp_path):
        write_price_csv("SPY_prices.csv", [400.0, 401.0])
        universe, _ = DataLoader().load_price_directory(str(tmp_path), pattern="*_prices.csv")
        assert list(universe) == ["SPY"]


class TestValidateData:

    def test_valid(self):
        means = np.array([0.1, 0.2])
        cov = np.array([[0.04, 0.01], [0.01, 0.09]])
        result = DataLoader().validate_data(means, cov, ["A", "B"])

        assert result["is_valid"]
        assert result["errors"] == []
        assert result["std_stats"]["max"] == pytest.approx(0.3)

    def test_dimension_mismatch(self):
        result = DataLoader().validate_data(np.array([0.1, 0.2, 0.3]), np.eye(2), ["A", "B", "C"])
        assert not result["is_valid"]
        assert "Dimension mismatch" in result["errors"][0]

    def test_nan_values(self):
        cov = np.array([[np.nan, 0.0], [0.0, 0.1]])
        result = DataLoader().validate_data(np.array([0.1, 0.2]), cov, ["A", "B"])
        assert not result["is_valid"]

    def test_negative_eigenvalues_warn(self):
        cov = np.array([[0.01, 0.05], [0.05, 0.01]])
        result = DataLoader().validate_data(np.array([0.1, 0.2]), cov, ["A", "B"])
        assert result["is_valid"]
        assert any("negative eigenvalues" in w for w in result["warnings"])


class TestGenerateSamplePrices:

    def test_shape_and_names(self):
        universe, prices = generate_sample_prices(4, n_days=30, seed=1)
        assert list(universe) == ["AAPL", "AXP", "BA", "CAT"]
        assert all(len(prices[name]) == 30 for name in universe)

    def test_generic_names(self):
        universe, _ = generate_sample_prices(3, n_days=10)
        assert list(universe) == ["Stock_1", "Stock_2", "Stock_3"]

    def test_positive_prices_shared_calendar(self):
        universe, prices = generate_sample_prices(6, n_days=50, seed=8)
        calendars = {tuple(date for date, _ in prices[name]) for name in universe}
        assert len(calendars) == 1
        assert all(price > 0 for name in universe for _, price in prices[name])

    def test_reproducible(self):
        _, first = generate_sample_prices(seed=5)
        _, second = generate_sample_prices(seed=5)
        assert first == second
