"""Prediction engine for the subscription KNN model.

This module explains a single prediction by listing the training records
that voted on it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping

import pandas as pd
from sklearn.pipeline import Pipeline

from .data_pipeline import FEATURE_COLUMNS, TARGET_COLUMN
from .model_training import SUBSCRIPTION_LABELS


@dataclass
class PredictionResult:
    """Container for a prediction and the neighbours behind it."""

    features: Dict[str, float]
    predicted_label: bool
    vote_share: float
    neighbors: List[Dict]

    @property
    def predicted_name(self) -> str:
        return SUBSCRIPTION_LABELS[self.predicted_label]


def explain_prediction(
    pipeline: Pipeline,
    train_df: pd.DataFrame,
    record: Mapping[str, float],
) -> PredictionResult:
    """Predict one record and collect the neighbours that voted.

    Args:
        pipeline: Fitted pipeline.
        train_df: The training records the pipeline was fitted on, in the
            same order.
        record: Mapping with at least ``age`` and ``playedHours``.

    Returns:
        PredictionResult with the label, its vote share and the neighbours.
    """
    features = {col: float(record[col]) for col in FEATURE_COLUMNS}
    X = pd.DataFrame([features])

    scaler = pipeline.named_steps["scaler"]
    classifier = pipeline.named_steps["classifier"]

    predicted = bool(pipeline.predict(X)[0])
    distances, indices = classifier.kneighbors(scaler.transform(X))

    neighbors = []
    for dist, pos in zip(distances[0], indices[0]):
        row = train_df.iloc[pos]
        neighbors.append({
            "index": train_df.index[pos],
            "age": float(row["age"]),
            "playedHours": float(row["playedHours"]),
            "subscribed": bool(row[TARGET_COLUMN]),
            "distance": float(dist),
        })

    agreeing = sum(n["subscribed"] == predicted for n in neighbors)

    return PredictionResult(
        features=features,
        predicted_label=predicted,
        vote_share=agreeing / len(neighbors),
        neighbors=neighbors,
    )


def format_prediction_report(result: PredictionResult) -> str:
    """Format prediction result as a readable report."""
    lines = [
        "=" * 60,
        f"SUBSCRIPTION PREDICTION: age {result.features['age']:g}, "
        f"{result.features['playedHours']:g} hours played",
        "=" * 60,
        "",
        f"Prediction: {result.predicted_name}",
        f"Neighbour vote: {result.vote_share:.0%}",
        "",
        "Nearest Players:",
    ]

    for n in result.neighbors:
        lines.append(
            f"  - #{n['index']}: age {n['age']:g}, {n['playedHours']:g} h, "
            f"{SUBSCRIPTION_LABELS[n['subscribed']]} (distance {n['distance']:.2f})"
        )

    lines.extend(["", "=" * 60])
    return "\n".join(lines)
