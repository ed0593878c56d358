"""Player subscription KNN - exploratory classification of game-server players."""

__version__ = "1.0.0"

from .config import DEFAULT_CONFIG, PipelineConfig
from .data_pipeline import (
    FEATURE_COLUMNS,
    TARGET_COLUMN,
    clean_data,
    load_and_clean_data,
)
from .exceptions import EmptyDatasetError, PipelineError, SchemaError
from .model_evaluation import compute_accuracy, evaluate_model, run_pipeline
from .model_training import fit_model, get_scaling_parameters, predict_record
from .utils import create_train_test_split

__all__ = [
    "DEFAULT_CONFIG",
    "PipelineConfig",
    "FEATURE_COLUMNS",
    "TARGET_COLUMN",
    "clean_data",
    "load_and_clean_data",
    "EmptyDatasetError",
    "PipelineError",
    "SchemaError",
    "compute_accuracy",
    "evaluate_model",
    "run_pipeline",
    "fit_model",
    "get_scaling_parameters",
    "predict_record",
    "create_train_test_split",
]
