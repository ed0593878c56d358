"""Model training for subscription prediction.

This module fits a k-nearest-neighbours classifier that predicts whether a
player subscribes from their age and played hours. Both features are
standardized with statistics from the training set only.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional

import numpy as np
import pandas as pd
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import StandardScaler

from .config import DEFAULT_CONFIG, N_NEIGHBORS, PipelineConfig
from .data_pipeline import FEATURE_COLUMNS, TARGET_COLUMN
from .exceptions import EmptyDatasetError
from .knn import StableKNeighborsClassifier


# Label names for display
SUBSCRIPTION_LABELS = {False: "NOT SUBSCRIBED", True: "SUBSCRIBED"}

logger = logging.getLogger(__name__)


def create_model_pipeline(k: int = N_NEIGHBORS) -> Pipeline:
    """Create the model pipeline with feature scaling.

    Args:
        k: Number of neighbours that vote on each prediction.

    Returns:
        Sklearn Pipeline with scaler and classifier.
    """
    return Pipeline([
        ("scaler", StandardScaler()),
        ("classifier", StableKNeighborsClassifier(n_neighbors=k)),
    ])


def split_features_target(df: pd.DataFrame):
    """Return (X, y) with y as a plain boolean array."""
    return df[FEATURE_COLUMNS], df[TARGET_COLUMN].astype(bool).to_numpy()


def fit_model(train_df: pd.DataFrame, config: Optional[PipelineConfig] = None) -> Pipeline:
    """Fit the scaler and classifier on the training set.

    Args:
        train_df: Training records with feature and target columns.
        config: Pipeline configuration; only ``k`` is used.

    Returns:
        Fitted pipeline.

    Raises:
        EmptyDatasetError: If the training set has no records.
    """
    config = config or DEFAULT_CONFIG
    if train_df.empty:
        raise EmptyDatasetError("Cannot fit a model on an empty training set")

    X_train, y_train = split_features_target(train_df)
    pipeline = create_model_pipeline(k=config.k)
    pipeline.fit(X_train, y_train)

    if len(train_df) < config.k:
        logger.warning(
            "Training set has %d records; all of them vote instead of k=%d",
            len(train_df), config.k,
        )
    logger.info("Fitted %d-NN model on %d training records", config.k, len(train_df))
    return pipeline


def predict_record(pipeline: Pipeline, record: Mapping[str, float]) -> bool:
    """Predict the subscription label of a single player record.

    Args:
        pipeline: Fitted pipeline.
        record: Mapping with at least ``age`` and ``playedHours``.

    Returns:
        True if the player is predicted to subscribe.
    """
    X = pd.DataFrame([{col: record[col] for col in FEATURE_COLUMNS}])
    return bool(pipeline.predict(X)[0])


def get_scaling_parameters(pipeline: Pipeline) -> pd.DataFrame:
    """Extract the per-feature mean and standard deviation used for scaling.

    Args:
        pipeline: Fitted pipeline.

    Returns:
        DataFrame indexed by feature with ``mean`` and ``std`` columns.
    """
    scaler = pipeline.named_steps["scaler"]
    return pd.DataFrame(
        {"mean": scaler.mean_, "std": scaler.scale_},
        index=pd.Index(FEATURE_COLUMNS, name="feature"),
    )


def majority_label(y: np.ndarray) -> bool:
    """Most common label in ``y``; ties go to True."""
    y = np.asarray(y, dtype=bool)
    return bool(y.sum() * 2 >= len(y))


if __name__ == "__main__":
    from .data_pipeline import load_and_clean_data
    from .utils import create_train_test_split

    print("=" * 60)
    print("SUBSCRIPTION KNN - TRAINING")
    print("=" * 60)

    df = load_and_clean_data()
    train_df, test_df = create_train_test_split(
        df, DEFAULT_CONFIG.split_fraction, DEFAULT_CONFIG.seed
    )
    print(f"\nTrain: {len(train_df)} records, Test: {len(test_df)} records")

    pipeline = fit_model(train_df)
    print("\nScaling parameters (training set):")
    print(get_scaling_parameters(pipeline).to_string())
