#!/usr/bin/env python3
"""CLI tool for making subscription predictions.

Usage:
    python predict_player.py --age 21 --hours 3.5
    python predict_player.py --age 30 --hours 0 --data players.csv

The model is fitted on the training split of the dataset and the prediction
is shown with the neighbouring players that voted on it.
"""

import argparse
import sys

from subscription_knn.config import DEFAULT_CONFIG, PipelineConfig
from subscription_knn.data_pipeline import load_and_clean_data
from subscription_knn.exceptions import PipelineError
from subscription_knn.model_training import fit_model
from subscription_knn.prediction_engine import explain_prediction, format_prediction_report
from subscription_knn.utils import LOG_LEVELS, create_train_test_split, setup_logging


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Player subscription prediction CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--age", type=float, required=True, help="Player age")
    parser.add_argument("--hours", type=float, required=True, help="Played hours")
    parser.add_argument("--data", default=None, help="Players CSV path")
    parser.add_argument("--seed", type=int, default=DEFAULT_CONFIG.seed, help="Split seed")
    parser.add_argument(
        "--log-level", default="WARNING", choices=LOG_LEVELS, type=str.upper, help="Logging level"
    )
    args = parser.parse_args(argv)

    setup_logging(args.log_level)
    config = PipelineConfig(seed=args.seed)

    try:
        df = load_and_clean_data(args.data, config)
        train_df, _ = create_train_test_split(df, config.split_fraction, config.seed)
        pipeline = fit_model(train_df, config)
    except PipelineError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    result = explain_prediction(pipeline, train_df, {"age": args.age, "playedHours": args.hours})
    print(format_prediction_report(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
