"""Model evaluation and visualization for the subscription KNN model.

This module scores the fitted model on the test set, renders the
exploratory histograms and ties the whole pipeline together in
``run_pipeline``.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional, Union

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import seaborn as sns
from sklearn.metrics import confusion_matrix
from sklearn.pipeline import Pipeline

from .config import AGE_BINS, DEFAULT_CONFIG, PLAYED_HOURS_BINS, PipelineConfig
from .data_pipeline import TARGET_COLUMN, get_data_summary, load_and_clean_data
from .model_training import (
    SUBSCRIPTION_LABELS,
    fit_model,
    get_scaling_parameters,
    majority_label,
    split_features_target,
)
from .utils import OUTPUTS_DIR, create_train_test_split, ensure_directories


# Set style for all plots
plt.style.use("seaborn-v0_8-whitegrid")

LABEL_ORDER = [False, True]
LABEL_COLORS = {"FALSE": "#FF6B6B", "TRUE": "#45B7D1"}

logger = logging.getLogger(__name__)


def compute_accuracy(y_true, y_pred) -> float:
    """Fraction of predictions equal to the true label.

    Returns:
        Accuracy in [0, 1], or NaN when there are no records.
    """
    y_true = np.asarray(y_true)
    y_pred = np.asarray(y_pred)
    if len(y_true) != len(y_pred):
        raise ValueError(f"Length mismatch: {len(y_true)} labels vs {len(y_pred)} predictions")
    if len(y_true) == 0:
        return float("nan")
    return float(np.mean(y_true == y_pred))


def evaluate_model(pipeline: Pipeline, test_df: pd.DataFrame) -> Dict:
    """Evaluate model on test set.

    Args:
        pipeline: Fitted pipeline.
        test_df: Test records.

    Returns:
        Dictionary with evaluation metrics.
    """
    X_test, y_test = split_features_target(test_df)
    classifier = pipeline.named_steps["classifier"]

    if len(test_df) == 0:
        logger.warning("Test set is empty; accuracy is undefined")
        y_pred = np.array([], dtype=bool)
    else:
        y_pred = pipeline.predict(X_test).astype(bool)

    # Majority class of the training labels, applied to every test record
    train_majority = majority_label(classifier.y_)
    baseline = compute_accuracy(y_test, np.full(len(y_test), train_majority))

    cm = (
        confusion_matrix(y_test, y_pred, labels=LABEL_ORDER).tolist()
        if len(y_test) else [[0, 0], [0, 0]]
    )

    results = {
        "accuracy": compute_accuracy(y_test, y_pred),
        "n_test": int(len(y_test)),
        "n_correct": int(np.sum(y_test == y_pred)),
        "baseline_accuracy": baseline,
        "baseline_label": train_majority,
        "confusion_matrix": cm,
        "predictions": y_pred.tolist(),
    }

    logger.info(
        "Accuracy %.3f on %d test records (baseline %.3f)",
        results["accuracy"], results["n_test"], baseline,
    )
    return results


def _label_frame(df: pd.DataFrame) -> pd.DataFrame:
    plot_df = df.copy()
    plot_df[TARGET_COLUMN] = np.where(plot_df[TARGET_COLUMN].astype(bool), "TRUE", "FALSE")
    return plot_df


def plot_feature_histogram(
    df: pd.DataFrame,
    feature: str,
    bins: int,
    save_path: Optional[Path] = None,
    title: Optional[str] = None,
) -> plt.Figure:
    """Plot a histogram of one feature, stacked by subscription label.

    Args:
        df: Records with ``feature`` and the subscribed column.
        feature: Column to plot.
        bins: Number of bins.
        save_path: Path to save figure (optional).
        title: Figure title; derived from the feature if None.

    Returns:
        Matplotlib figure.
    """
    fig, ax = plt.subplots(figsize=(8, 5))

    sns.histplot(
        data=_label_frame(df),
        x=feature,
        hue=TARGET_COLUMN,
        hue_order=["FALSE", "TRUE"],
        palette=LABEL_COLORS,
        bins=bins,
        multiple="stack",
        edgecolor="black",
        linewidth=0.5,
        ax=ax,
    )

    ax.set_xlabel(feature, fontsize=12)
    ax.set_ylabel("Count", fontsize=12)
    ax.set_title(title or f"Distribution of {feature} by subscription", fontsize=14)

    plt.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")

    return fig


def plot_played_hours_histogram(
    df: pd.DataFrame,
    bins: int = PLAYED_HOURS_BINS,
    save_path: Optional[Path] = None,
) -> plt.Figure:
    return plot_feature_histogram(
        df, "playedHours", bins, save_path, title="Played hours by subscription"
    )


def plot_age_histogram(
    df: pd.DataFrame,
    bins: int = AGE_BINS,
    save_path: Optional[Path] = None,
) -> plt.Figure:
    return plot_feature_histogram(df, "age", bins, save_path, title="Age by subscription")


def plot_confusion_matrix(
    y_true: np.ndarray,
    y_pred: np.ndarray,
    save_path: Optional[Path] = None,
) -> plt.Figure:
    """Plot confusion matrix heatmap.

    Args:
        y_true: True labels.
        y_pred: Predicted labels.
        save_path: Path to save figure (optional).

    Returns:
        Matplotlib figure.
    """
    fig, ax = plt.subplots(figsize=(6, 5))

    cm = confusion_matrix(y_true, y_pred, labels=LABEL_ORDER)
    labels = [SUBSCRIPTION_LABELS[label] for label in LABEL_ORDER]

    sns.heatmap(
        cm,
        annot=True,
        fmt="d",
        cmap="Blues",
        xticklabels=labels,
        yticklabels=labels,
        ax=ax,
    )

    ax.set_xlabel("Predicted", fontsize=12)
    ax.set_ylabel("Actual", fontsize=12)
    ax.set_title("Confusion Matrix - Subscription Predictions", fontsize=14)

    plt.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")

    return fig


def _format_rate(value: float) -> str:
    return "undefined (empty test set)" if np.isnan(value) else f"{value:.1%}"


def generate_model_report(
    summary: Dict,
    n_train: int,
    scaling: pd.DataFrame,
    evaluation: Dict,
    config: PipelineConfig = DEFAULT_CONFIG,
    save_path: Optional[Path] = None,
) -> str:
    """Generate markdown report of model performance.

    Args:
        summary: Output of ``get_data_summary`` for the cleaned dataset.
        n_train: Number of training records.
        scaling: Output of ``get_scaling_parameters``.
        evaluation: Output of ``evaluate_model``.
        config: Configuration used for the run.
        save_path: Path to save report (optional).

    Returns:
        Markdown report string.
    """
    report_lines = [
        "# Player Subscription KNN - Report",
        "",
        "## Data",
        "",
        f"- **Records after cleaning**: {summary['total_records']}",
        f"- **Subscribed**: {summary['subscribed']} ({summary['subscribed_rate']:.1%})",
        f"- **Not subscribed**: {summary['not_subscribed']}",
        f"- **Outlier cutoffs**: playedHours <= {config.played_hours_max}, age <= {config.age_max}",
        "",
        "## Model",
        "",
        f"- **Neighbours (k)**: {config.k}",
        f"- **Split**: {n_train} train / {evaluation['n_test']} test "
        f"(fraction {config.split_fraction}, seed {config.seed})",
        "",
        "### Scaling Parameters (training set)",
        "",
        "| Feature | Mean | Std |",
        "|---------|------|-----|",
    ]

    for feature, row in scaling.iterrows():
        report_lines.append(f"| {feature} | {row['mean']:.3f} | {row['std']:.3f} |")

    baseline_label = SUBSCRIPTION_LABELS[evaluation["baseline_label"]]
    report_lines.extend([
        "",
        "## Test Set Performance",
        "",
        f"- **Accuracy**: {_format_rate(evaluation['accuracy'])}",
        f"- **Correct**: {evaluation['n_correct']} / {evaluation['n_test']}",
        f"- **Majority-class baseline** ({baseline_label}): "
        f"{_format_rate(evaluation['baseline_accuracy'])}",
        "",
        "### Confusion Matrix",
        "",
        "| Actual \\ Predicted | NOT SUBSCRIBED | SUBSCRIBED |",
        "|--------------------|----------------|------------|",
    ])

    for label, row in zip(LABEL_ORDER, evaluation["confusion_matrix"]):
        report_lines.append(f"| {SUBSCRIPTION_LABELS[label]} | {row[0]} | {row[1]} |")

    report_str = "\n".join(report_lines) + "\n"

    if save_path:
        with open(save_path, "w") as f:
            f.write(report_str)

    return report_str


def run_pipeline(
    filepath: Optional[Union[str, Path]] = None,
    config: Optional[PipelineConfig] = None,
    output_dir: Optional[Union[str, Path]] = None,
    make_plots: bool = True,
    data: Optional[pd.DataFrame] = None,
) -> Dict:
    """Run the full load, split, fit and evaluate pass.

    Args:
        filepath: CSV to load. Ignored when ``data`` is given.
        config: Pipeline configuration; defaults to ``DEFAULT_CONFIG``.
        output_dir: Directory for figures and the markdown report (optional).
        make_plots: Whether to render the histograms and confusion matrix.
        data: Already-cleaned dataset to use instead of loading a file.

    Returns:
        Dictionary with the cleaned data, split, fitted pipeline, evaluation,
        report text and figures.
    """
    config = config or DEFAULT_CONFIG
    if output_dir is not None:
        output_dir = Path(output_dir)
        ensure_directories(output_dir)

    def _out(name: str) -> Optional[Path]:
        return output_dir / name if output_dir is not None else None

    df = data if data is not None else load_and_clean_data(filepath, config)
    train_df, test_df = create_train_test_split(df, config.split_fraction, config.seed)

    pipeline = fit_model(train_df, config)
    evaluation = evaluate_model(pipeline, test_df)
    scaling = get_scaling_parameters(pipeline)

    figures = {}
    if make_plots:
        figures["played_hours_histogram"] = plot_played_hours_histogram(
            df, config.played_hours_bins, save_path=_out("played_hours_histogram.png")
        )
        figures["age_histogram"] = plot_age_histogram(
            df, config.age_bins, save_path=_out("age_histogram.png")
        )
        if evaluation["n_test"]:
            figures["confusion_matrix"] = plot_confusion_matrix(
                test_df[TARGET_COLUMN].astype(bool).to_numpy(),
                np.asarray(evaluation["predictions"], dtype=bool),
                save_path=_out("confusion_matrix.png"),
            )

    report = generate_model_report(
        get_data_summary(df),
        len(train_df),
        scaling,
        evaluation,
        config,
        save_path=_out("model_report.md"),
    )

    return {
        "data": df,
        "train": train_df,
        "test": test_df,
        "pipeline": pipeline,
        "scaling": scaling,
        "evaluation": evaluation,
        "accuracy": evaluation["accuracy"],
        "report": report,
        "figures": figures,
    }


if __name__ == "__main__":
    results = run_pipeline(output_dir=OUTPUTS_DIR)
    print(results["report"])
    plt.close("all")
