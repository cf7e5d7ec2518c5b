"""
Main Runner Script for Monte Carlo Frontier Sampling
====================================================

This script runs the full workflow:
1. Loading daily closing prices (a directory of *_daily.csv files)
2. Computing daily returns and annualized statistics
3. Sampling and ranking random portfolios
4. Writing the ranked portfolios to CSV or Excel
5. Plotting the sampled frontier

Usage:
    mc-frontier                               # Run with synthetic sample prices
    mc-frontier --dir data/                   # Use data/*_daily.csv
    mc-frontier --dir data/ --assets AAPL,MSFT
    mc-frontier --trials 5000 --seed 7 --rf-rate 0.03
    mc-frontier --output results/frontier.xlsx
"""

import sys
import argparse
import logging
import traceback
from datetime import datetime
from typing import Optional, Sequence
from pathlib import Path

import matplotlib.pyplot as plt

from mc_frontier.core.export import write_frontier
from mc_frontier.core.loader import DataLoader, generate_sample_prices
from mc_frontier.core.optimizer import (
    DEFAULT_RISK_FREE_RATE,
    DEFAULT_SEED,
    DEFAULT_TRIALS,
    MonteCarloOptimizer,
    max_sharpe_portfolio,
    min_volatility_portfolio,
)
from mc_frontier.core.statistics import AssetUniverse, compute_stats_from_prices
from mc_frontier.visualization import plot_frontier_cloud, plot_portfolio_weights


# =============================================================================
# LOGGING SETUP
# =============================================================================

def setup_logger(
    script_name: str = "mc_frontier",
    log_dir: Optional[Path] = None
) -> logging.Logger:
    """
    Sets up a logger that writes to both file and console.

    Args:
        script_name: Name of the script (used in log filename)
        log_dir: Directory for log files (default: <package root>/logs)

    Returns:
        Configured logger instance
    """
    if log_dir is None:
        log_dir = Path(__file__).parent.parent.parent / "logs"
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y_%m_%d_%H%M")
    log_filename = log_dir / f"log_{script_name}_{timestamp}.txt"

    logger = logging.getLogger(script_name)
    logger.setLevel(logging.INFO)
    logger.propagate = False

    # Clear existing handlers (prevent duplicates)
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    file_handler = logging.FileHandler(log_filename, encoding='utf-8')
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger


# =============================================================================
# ANALYSIS CLASS
# =============================================================================

class AnalysisCheckpoint:
    """
    Tracks the progress of a frontier run.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self.steps_completed = {}
        self.results = {}
        self.start_time = datetime.now()
        self.current_step = None

    def start_step(self, step_name: str):
        """Mark a step as started."""
        self.current_step = step_name
        self.logger.info(f"[CHECKPOINT] Starting: {step_name}")

    def complete_step(self, step_name: str, result=None):
        """Mark a step as completed and save result."""
        self.steps_completed[step_name] = True
        if result is not None:
            self.results[step_name] = result
        self.logger.info(f"[CHECKPOINT] Completed: {step_name}")

    def get_progress_summary(self) -> dict:
        elapsed = (datetime.now() - self.start_time).total_seconds()
        return {
            'steps_completed': list(self.steps_completed.keys()),
            'current_step': self.current_step,
            'elapsed_seconds': elapsed
        }

    def log_final_report(self):
        summary = self.get_progress_summary()
        self.logger.info("=" * 60)
        self.logger.info("  ANALYSIS COMPLETE")
        self.logger.info("=" * 60)
        self.logger.info(f"  Steps completed: {len(summary['steps_completed'])}")
        self.logger.info(f"  Total time: {summary['elapsed_seconds']:.2f} seconds")
        self.logger.info("=" * 60)


# =============================================================================
# MAIN ANALYSIS FUNCTIONS
# =============================================================================

def get_output_dir() -> Path:
    """Get the output directory path."""
    package_root = Path(__file__).parent.parent.parent
    output_dir = package_root / "output"
    output_dir.mkdir(exist_ok=True)
    return output_dir


def _log_portfolio(logger: logging.Logger, title: str, portfolio, asset_names: Sequence[str]):
    logger.info(f"\n--- {title} ---")
    if portfolio is None:
        logger.info("No portfolio with a finite Sharpe ratio was sampled")
        return
    logger.info("Weights:")
    for name, weight in zip(asset_names, portfolio.weights):
        logger.info(f"  {name}: {weight*100:>8.2f}%")
    logger.info(f"Expected Return: {portfolio.expected_return*100:.4f}%")
    logger.info(f"Volatility: {portfolio.volatility*100:.4f}%")
    logger.info(f"Sharpe Ratio: {portfolio.sharpe_ratio:.4f}")


def run_full_analysis(
    prices_by_asset: dict,
    asset_universe: AssetUniverse,
    rf_rate: float = DEFAULT_RISK_FREE_RATE,
    trials: int = DEFAULT_TRIALS,
    seed: int = DEFAULT_SEED,
    output_file: Optional[str] = None,
    save_plots: bool = True,
    keep_figures: bool = False,
    output_dir: Optional[str] = None,
    logger: Optional[logging.Logger] = None
) -> dict:
    """
    Run the complete frontier sampling workflow.

    Args:
        prices_by_asset: Mapping of asset name -> (date, close) pairs
        asset_universe: Ordered assets; fixes every vector index
        rf_rate: Annual risk-free rate
        trials: Number of random portfolios
        seed: Random seed
        output_file: Result file name or path (.csv or .xlsx)
        save_plots: If True, save plots to files
        keep_figures: If True, leave the plot figures open for plt.show()
        output_dir: Directory for output files
        logger: Logger instance

    Returns:
        Dictionary containing all analysis results
    """
    if logger is None:
        logger = setup_logger()

    if output_dir is None:
        output_dir = get_output_dir()
    else:
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

    if output_file is None:
        output_file = "efficient_frontier.csv"
    output_path = Path(output_file)
    if not output_path.is_absolute():
        output_path = output_dir / output_path

    asset_names = asset_universe.names
    checkpoint = AnalysisCheckpoint(logger)
    results = {}

    logger.info("=" * 70)
    logger.info("  MONTE CARLO EFFICIENT FRONTIER")
    logger.info("=" * 70)
    logger.info(f"  Assets: {', '.join(asset_names)}")
    logger.info(f"  Risk-free rate: {rf_rate:.4f} ({rf_rate*100:.2f}%)")
    logger.info(f"  Trials: {trials}  Seed: {seed}")
    logger.info("=" * 70)

    # Step 1: Returns and moments
    checkpoint.start_step("Estimate Moments")
    mean_returns, cov_matrix, returns_by_asset = compute_stats_from_prices(
        prices_by_asset, asset_universe
    )
    n_periods = len(returns_by_asset[asset_names[0]])
    logger.info(f"Estimated statistics from {n_periods} daily returns per asset")
    results['mean_returns'] = mean_returns
    results['cov_matrix'] = cov_matrix
    checkpoint.complete_step("Estimate Moments")

    # Step 2: Validate
    checkpoint.start_step("Validate Statistics")
    validation = DataLoader().validate_data(mean_returns, cov_matrix, asset_names)
    for warning in validation['warnings']:
        logger.warning(warning)
    if not validation['is_valid']:
        for error in validation['errors']:
            logger.error(error)
        raise ValueError("Data validation failed")
    checkpoint.complete_step("Validate Statistics")

    # Step 3: Asset statistics
    checkpoint.start_step("Calculate Asset Statistics")
    optimizer = MonteCarloOptimizer(mean_returns, cov_matrix, asset_names, rf_rate)
    results['asset_stats'] = optimizer.get_asset_stats()

    logger.info("\n--- Individual Asset Statistics (annualized) ---")
    logger.info(f"{'Asset':<12} {'Mean':>12} {'Std Dev':>12}")
    logger.info("-" * 40)
    for name, stats in results['asset_stats'].items():
        logger.info(f"{name:<12} {stats['mean']*100:>11.4f}% {stats['std']*100:>11.4f}%")
    checkpoint.complete_step("Calculate Asset Statistics", results['asset_stats'])

    # Step 4: Sample frontier
    checkpoint.start_step("Sample Frontier")
    frontier = optimizer.generate_frontier(trials=trials, seed=seed)
    results['frontier'] = frontier
    logger.info(f"Sampled {len(frontier)} portfolios")

    low = min_volatility_portfolio(frontier)
    best = max_sharpe_portfolio(frontier)
    results['min_volatility'] = low
    results['max_sharpe'] = best
    _log_portfolio(logger, "Minimum Volatility Portfolio", low, asset_names)
    _log_portfolio(logger, "Maximum Sharpe Ratio Portfolio", best, asset_names)
    checkpoint.complete_step("Sample Frontier")

    # Step 5: Write results
    checkpoint.start_step("Write Results")
    results['output_file'] = write_frontier(frontier, asset_universe, output_path)
    logger.info(f"Saved: {results['output_file']}")
    checkpoint.complete_step("Write Results", results['output_file'])

    # Step 6: Plots
    if save_plots:
        checkpoint.start_step("Generate Plots")

        figures = [plot_frontier_cloud(
            frontier,
            optimizer,
            save_path=str(output_dir / "frontier_cloud.png")
        )]
        logger.info("Saved: frontier_cloud.png")

        if best is not None:
            figures.append(plot_portfolio_weights(
                best.weights, asset_names,
                title="Maximum Sharpe Ratio Portfolio Weights",
                save_path=str(output_dir / "max_sharpe_weights.png")
            ))
            logger.info("Saved: max_sharpe_weights.png")

        figures.append(plot_portfolio_weights(
            low.weights, asset_names,
            title="Minimum Volatility Portfolio Weights",
            save_path=str(output_dir / "min_volatility_weights.png")
        ))
        logger.info("Saved: min_volatility_weights.png")

        if not keep_figures:
            for fig in figures:
                plt.close(fig)

        checkpoint.complete_step("Generate Plots")

    checkpoint.log_final_report()

    results['optimizer'] = optimizer
    return results


def analyze_price_directory(
    directory: str,
    pattern: str = '*_daily.csv',
    assets: Optional[Sequence[str]] = None,
    logger: Optional[logging.Logger] = None,
    **kwargs
) -> dict:
    """
    Run the workflow on a directory of per-asset price files.

    Args:
        directory: Directory holding the price files
        pattern: Glob pattern selecting price files
        assets: Optional subset of assets, in the order to use
        logger: Logger instance
        **kwargs: Passed to run_full_analysis

    Returns:
        Analysis results dictionary
    """
    if logger is None:
        logger = setup_logger()

    logger.info(f"Loading prices from: {directory} ({pattern})")

    universe, prices = DataLoader().load_price_directory(directory, pattern, assets)
    for name in universe:
        series = prices[name]
        logger.info(
            f"  {name}: {len(series)} prices, "
            f"{series[0][0].date()} to {series[-1][0].date()}"
        )

    return run_full_analysis(prices, universe, logger=logger, **kwargs)


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Monte Carlo Efficient Frontier Tool',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  mc-frontier                                   # Run with sample data
  mc-frontier --dir data/                       # Analyze data/*_daily.csv
  mc-frontier --dir data/ --assets AAPL,MSFT --trials 5000
  mc-frontier --output frontier.xlsx
        """
    )

    parser.add_argument(
        '--dir', '-d',
        type=str,
        help='Directory of per-asset daily price CSV files'
    )
    parser.add_argument(
        '--pattern', '-p',
        type=str,
        default='*_daily.csv',
        help='Glob pattern for price files (default: *_daily.csv)'
    )
    parser.add_argument(
        '--assets', '-a',
        type=str,
        help='Comma-separated assets to use, in order (default: all files)'
    )
    parser.add_argument(
        '--rf-rate', '-r',
        type=float,
        default=DEFAULT_RISK_FREE_RATE,
        help='Annual risk-free rate (default: 0.02 = 2%%)'
    )
    parser.add_argument(
        '--trials', '-n',
        type=int,
        default=DEFAULT_TRIALS,
        help='Number of random portfolios (default: 1000)'
    )
    parser.add_argument(
        '--seed',
        type=int,
        default=DEFAULT_SEED,
        help='Random seed (default: 42)'
    )
    parser.add_argument(
        '--output', '-o',
        type=str,
        default='efficient_frontier.csv',
        help='Result file, .csv or .xlsx (default: efficient_frontier.csv)'
    )
    parser.add_argument(
        '--output-dir',
        type=str,
        help='Directory for results and plots (default: ./output)'
    )
    parser.add_argument(
        '--no-plots',
        action='store_true',
        help='Disable plot generation'
    )
    parser.add_argument(
        '--show-plots',
        action='store_true',
        help='Show plots interactively (default: just save)'
    )
    return parser


def main(argv: Optional[Sequence[str]] = None, logger: Optional[logging.Logger] = None) -> int:
    """Main entry point for the frontier sampling script."""
    args = build_parser().parse_args(argv)

    if logger is None:
        logger = setup_logger("mc_frontier_run")

    options = dict(
        rf_rate=args.rf_rate,
        trials=args.trials,
        seed=args.seed,
        output_file=args.output,
        save_plots=not args.no_plots,
        keep_figures=args.show_plots,
        output_dir=args.output_dir,
    )

    try:
        if args.dir:
            assets = None
            if args.assets:
                assets = [name.strip() for name in args.assets.split(',') if name.strip()]
            analyze_price_directory(
                args.dir, args.pattern, assets, logger=logger, **options
            )
        else:
            logger.info("No price directory specified. Using sample data...")
            universe, prices = generate_sample_prices(4)
            run_full_analysis(prices, universe, logger=logger, **options)

        if args.show_plots and not args.no_plots:
            plt.show()
        plt.close('all')

        logger.info("Analysis completed successfully!")
        return 0

    except Exception as e:
        plt.close('all')
        logger.error(f"Analysis failed: {e}")
        logger.error(traceback.format_exc())
        return 1


if __name__ == "__main__":
    sys.exit(main())
