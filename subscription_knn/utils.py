"""Utility functions for the subscription KNN pipeline."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Tuple

import pandas as pd
from sklearn.model_selection import train_test_split

from .config import SEED, SPLIT_FRACTION
from .exceptions import EmptyDatasetError


# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = PROJECT_ROOT / "data"
OUTPUTS_DIR = PROJECT_ROOT / "outputs"

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

logger = logging.getLogger(__name__)


def setup_logging(log_level: str = "INFO") -> logging.Logger:
    """Configure console logging for the package.

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR).

    Returns:
        The configured package logger.
    """
    level = getattr(logging, log_level.upper())
    package_logger = logging.getLogger("subscription_knn")
    package_logger.setLevel(level)

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))

    # Avoid duplicate handlers on repeated calls
    if not package_logger.handlers:
        package_logger.addHandler(handler)

    return package_logger


def ensure_directories(*dirs: Path):
    """Create output directories if they don't exist."""
    for dir_path in dirs or (OUTPUTS_DIR,):
        Path(dir_path).mkdir(parents=True, exist_ok=True)


def train_size_for(n_records: int, split_fraction: float = SPLIT_FRACTION) -> int:
    """Number of training records for a split, rounded half up."""
    return int(n_records * split_fraction + 0.5)


def create_train_test_split(
    df: pd.DataFrame,
    split_fraction: float = SPLIT_FRACTION,
    seed: int = SEED,
) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """Split data into train and test sets by uniform random sampling.

    The split is not stratified: records are drawn regardless of label, so
    the test set's class balance can differ from the full dataset's.

    Args:
        df: Cleaned dataset.
        split_fraction: Proportion of records placed in the training set.
        seed: Random seed; the same seed and input give the same partition.

    Returns:
        Tuple of (train_df, test_df). Both keep the index labels of ``df``.
    """
    n_train = train_size_for(len(df), split_fraction)
    n_test = len(df) - n_train

    if n_train == 0:
        raise EmptyDatasetError(
            f"Split of {len(df)} record(s) at {split_fraction} leaves no training records"
        )

    if n_test == 0:
        logger.warning(
            "Split of %d record(s) at %.2f leaves an empty test set", len(df), split_fraction
        )
        return df.copy(), df.iloc[0:0].copy()

    train_df, test_df = train_test_split(
        df,
        train_size=n_train,
        random_state=seed,
        shuffle=True,
        stratify=None,
    )

    logger.info("Split %d records into %d train / %d test", len(df), len(train_df), len(test_df))
    return train_df, test_df
