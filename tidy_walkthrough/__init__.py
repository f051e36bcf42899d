"""
A predictive-modeling walkthrough on built-in sample datasets.

This package contains dataset loaders, train/test splitting, declarative
preprocessing recipes, model specifications, metrics and plots used by main.py.
"""

from .constants import CLASSIFICATION, DEFAULT_PROP, RANDOM_STATE, REGRESSION
from .data_prep import DataSplit, describe_split, initial_split
from .datasets import available_datasets, dataset_outcome, load_dataset
from .metrics import (
    classification_metrics,
    compute_classification_metrics,
    metrics_table,
    regression_metrics,
    roc_auc,
    roc_curve_table,
)
from .models import FittedModel, ModelSpec, default_specs, fit_model
from .recipe import ALL_NOMINAL, ALL_NUMERIC, ALL_PREDICTORS, PreparedRecipe, Recipe
from .workflow import WalkthroughResult, default_recipe, predictions_table, run_walkthrough

__all__ = [
    "CLASSIFICATION",
    "DEFAULT_PROP",
    "RANDOM_STATE",
    "REGRESSION",
    "DataSplit",
    "describe_split",
    "initial_split",
    "available_datasets",
    "dataset_outcome",
    "load_dataset",
    "classification_metrics",
    "compute_classification_metrics",
    "metrics_table",
    "regression_metrics",
    "roc_auc",
    "roc_curve_table",
    "FittedModel",
    "ModelSpec",
    "default_specs",
    "fit_model",
    "ALL_NOMINAL",
    "ALL_NUMERIC",
    "ALL_PREDICTORS",
    "PreparedRecipe",
    "Recipe",
    "WalkthroughResult",
    "default_recipe",
    "predictions_table",
    "run_walkthrough",
]
