"""
CLI entry point for Monte Carlo frontier sampling.

Usage:
    python run_cli.py                      # Run with sample data
    python run_cli.py --dir data/          # Use data/*_daily.csv
    python run_cli.py --trials 5000        # Sample more portfolios

For installed package, use: mc-frontier
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from mc_frontier.cli.main import main

if __name__ == "__main__":
    sys.exit(main())
