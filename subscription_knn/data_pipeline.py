"""Data pipeline for the subscription KNN model.

This module handles loading and cleaning the raw game-server player records
into the three-column dataset the classifier is trained on.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Optional

import numpy as np
import pandas as pd

from .config import DEFAULT_CONFIG, PipelineConfig
from .exceptions import EmptyDatasetError, SchemaError
from .utils import DATA_DIR


# Columns consumed by the model
FEATURE_COLUMNS = ["age", "playedHours"]
TARGET_COLUMN = "subscribed"
REQUIRED_COLUMNS = FEATURE_COLUMNS + [TARGET_COLUMN]

# Alternative header spellings, keyed by normalized name
COLUMN_ALIASES = {
    "age": "age",
    "playedhours": "playedHours",
    "subscribed": "subscribed",
    "subscribe": "subscribed",
}

TRUE_LITERALS = {"true", "1"}
FALSE_LITERALS = {"false", "0"}

logger = logging.getLogger(__name__)


def default_data_path() -> Path:
    """Path of the players CSV, overridable with PLAYERS_DATA_PATH."""
    return Path(os.getenv("PLAYERS_DATA_PATH", DATA_DIR / "players.csv"))


def load_raw_data(filepath: Optional[str] = None) -> pd.DataFrame:
    """Load raw player records from CSV.

    Args:
        filepath: Path to CSV file. Uses default path if None.

    Returns:
        Raw DataFrame with every source column.
    """
    if filepath is None:
        filepath = default_data_path()

    df = pd.read_csv(filepath)

    # Drop unnamed index column if present
    if "Unnamed: 0" in df.columns:
        df = df.drop(columns=["Unnamed: 0"])

    logger.info("Loaded %d raw records from %s", len(df), filepath)
    return df


def _normalize_name(name) -> str:
    return re.sub(r"[\s_\-]", "", str(name)).lower()


def resolve_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Project to the required columns under their canonical names.

    Header matching ignores case, spaces, underscores and hyphens.

    Raises:
        SchemaError: If any required column cannot be found.
    """
    found = {}
    for col in df.columns:
        canonical = COLUMN_ALIASES.get(_normalize_name(col))
        # First match wins when a header appears twice
        if canonical is not None and canonical not in found:
            found[canonical] = col

    missing = [col for col in REQUIRED_COLUMNS if col not in found]
    if missing:
        raise SchemaError(missing, available=df.columns)

    projected = df[[found[col] for col in REQUIRED_COLUMNS]].copy()
    projected.columns = REQUIRED_COLUMNS
    return projected


def _coerce_numeric_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Convert feature columns to numeric; unparseable or infinite values become NaN."""
    for col in FEATURE_COLUMNS:
        df[col] = pd.to_numeric(df[col], errors="coerce").replace([np.inf, -np.inf], np.nan)
    return df


def _parse_subscribed(value):
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if pd.isna(value):
        return np.nan
    if isinstance(value, (int, float, np.number)) and value in (0, 1):
        return bool(value)
    text = str(value).strip().lower()
    if text in TRUE_LITERALS:
        return True
    if text in FALSE_LITERALS:
        return False
    return np.nan


def _coerce_subscribed(df: pd.DataFrame) -> pd.DataFrame:
    """Recode the label from TRUE/FALSE literals; anything else becomes NaN."""
    df[TARGET_COLUMN] = df[TARGET_COLUMN].map(_parse_subscribed).astype(object)
    return df


def clean_data(df: pd.DataFrame, config: Optional[PipelineConfig] = None) -> pd.DataFrame:
    """Apply all cleaning operations to raw data.

    Args:
        df: Raw DataFrame.
        config: Outlier cutoffs; defaults to ``DEFAULT_CONFIG``.

    Returns:
        DataFrame with columns age, playedHours and a two-level categorical
        subscribed, indexed 0..n-1 in source order.

    Raises:
        SchemaError: If a required column is missing.
        EmptyDatasetError: If no records survive cleaning.
    """
    config = config or DEFAULT_CONFIG
    n_raw = len(df)

    df = resolve_columns(df)
    df = _coerce_numeric_columns(df)
    df = _coerce_subscribed(df)

    # Drop incomplete or malformed rows
    df = df.dropna(subset=REQUIRED_COLUMNS)
    n_complete = len(df)
    if n_complete < n_raw:
        logger.info("Dropped %d incomplete or malformed records", n_raw - n_complete)

    # Filter outliers
    in_range = (
        (df["playedHours"] >= 0)
        & (df["playedHours"] <= config.played_hours_max)
        & (df["age"] <= config.age_max)
    )
    df = df[in_range].copy()
    if len(df) < n_complete:
        logger.info(
            "Dropped %d records outside playedHours <= %s, age <= %s",
            n_complete - len(df), config.played_hours_max, config.age_max,
        )

    if df.empty:
        raise EmptyDatasetError(f"No records left after cleaning {n_raw} raw records")

    df[TARGET_COLUMN] = pd.Categorical(df[TARGET_COLUMN].astype(bool), categories=[False, True])
    df = df.reset_index(drop=True)

    logger.info("Cleaned dataset has %d records", len(df))
    return df


def load_and_clean_data(
    filepath: Optional[str] = None,
    config: Optional[PipelineConfig] = None,
) -> pd.DataFrame:
    """Convenience function to load and clean data in one step.

    Args:
        filepath: Path to CSV file. Uses default if None.
        config: Outlier cutoffs; defaults to ``DEFAULT_CONFIG``.

    Returns:
        Cleaned DataFrame ready for splitting.
    """
    raw_df = load_raw_data(filepath)
    return clean_data(raw_df, config)


def get_data_summary(df: pd.DataFrame) -> dict:
    """Generate summary statistics about the cleaned dataset.

    Args:
        df: Cleaned DataFrame.

    Returns:
        Dictionary with summary statistics.
    """
    labels = df[TARGET_COLUMN].astype(bool)
    return {
        "total_records": len(df),
        "subscribed": int(labels.sum()),
        "not_subscribed": int((~labels).sum()),
        "subscribed_rate": float(labels.mean()) if len(df) else float("nan"),
        "age_range": (float(df["age"].min()), float(df["age"].max())),
        "mean_played_hours": float(df["playedHours"].mean()),
        "median_played_hours": float(df["playedHours"].median()),
    }


if __name__ == "__main__":
    print("Loading and cleaning data...")
    df = load_and_clean_data()

    print("\nData Summary:")
    for key, value in get_data_summary(df).items():
        print(f"  {key}: {value}")
