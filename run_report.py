#!/usr/bin/env python3
"""Run the full subscription KNN report.

Usage:
    python run_report.py                              # Default data path
    python run_report.py --data players.csv           # Explicit CSV
    python run_report.py --output-dir outputs         # Save figures + report

Examples:
    python run_report.py --seed 7 --no-plots
"""

import argparse
import sys

import matplotlib.pyplot as plt

from subscription_knn.config import DEFAULT_CONFIG, PipelineConfig
from subscription_knn.exceptions import PipelineError
from subscription_knn.model_evaluation import run_pipeline
from subscription_knn.utils import LOG_LEVELS, setup_logging


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Player subscription KNN report",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--data", default=None, help="Players CSV path")
    parser.add_argument("--seed", type=int, default=DEFAULT_CONFIG.seed, help="Split seed")
    parser.add_argument("--output-dir", default=None, help="Directory for figures and report")
    parser.add_argument("--no-plots", action="store_true", help="Skip the histograms")
    parser.add_argument(
        "--log-level", default="WARNING", choices=LOG_LEVELS, type=str.upper, help="Logging level"
    )
    args = parser.parse_args(argv)

    setup_logging(args.log_level)
    config = PipelineConfig(seed=args.seed)

    try:
        results = run_pipeline(
            args.data,
            config=config,
            output_dir=args.output_dir,
            make_plots=not args.no_plots,
        )
    except PipelineError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        plt.close("all")

    print(results["report"])
    if args.output_dir:
        print(f"Saved figures and report to {args.output_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
