from __future__ import annotations

"""
Metric helpers: regression/classification metric sets, ROC curves and the long
per-model metrics table.
"""

import numpy as np
import pandas as pd
from sklearn import metrics

from .constants import CLASSIFICATION, CLASSIFICATION_METRICS, REGRESSION, REGRESSION_METRICS


def regression_metrics(truth, estimate) -> dict[str, float]:
    """rmse, rsq (squared Pearson correlation) and mae."""
    truth = np.asarray(truth, dtype=float)
    estimate = np.asarray(estimate, dtype=float)
    if np.std(truth) == 0 or np.std(estimate) == 0:
        rsq = float("nan")
    else:
        rsq = float(np.corrcoef(truth, estimate)[0, 1] ** 2)
    return {
        "rmse": float(np.sqrt(metrics.mean_squared_error(truth, estimate))),
        "rsq": rsq,
        "mae": float(metrics.mean_absolute_error(truth, estimate)),
    }


def classification_metrics(truth, estimate) -> dict[str, float]:
    """accuracy and kap (Cohen's kappa) for hard class predictions."""
    return {
        "accuracy": float(metrics.accuracy_score(truth, estimate)),
        "kap": float(metrics.cohen_kappa_score(truth, estimate)),
    }


def roc_auc(truth, probs, positive) -> float:
    y_true = (np.asarray(truth) == positive).astype(int)
    try:
        return float(metrics.roc_auc_score(y_true, probs))
    except ValueError:
        return float("nan")


def compute_classification_metrics(truth, probs, positive, threshold: float = 0.5):
    """Binary summary for probabilities of the `positive` class at a threshold."""
    y_true = (np.asarray(truth) == positive).astype(int)
    preds = (np.asarray(probs) >= threshold).astype(int)
    precision, recall, f1, _ = metrics.precision_recall_fscore_support(
        y_true, preds, average="binary", zero_division=0
    )
    return {
        "accuracy": metrics.accuracy_score(y_true, preds),
        "precision": precision,
        "recall": recall,
        "f1": f1,
        "roc_auc": roc_auc(truth, probs, positive),
        "confusion_matrix": metrics.confusion_matrix(y_true, preds, labels=[0, 1]),
    }


def roc_curve_table(truth, probs, positive) -> pd.DataFrame:
    """
    ROC points across thresholds: false/true positive rates plus the
    specificity/sensitivity view of the same curve.
    """
    y_true = (np.asarray(truth) == positive).astype(int)
    if y_true.min() == y_true.max():
        raise ValueError("ROC curve needs both classes present in the truth column.")
    fpr, tpr, thresholds = metrics.roc_curve(y_true, probs)
    return pd.DataFrame(
        {
            "threshold": thresholds,
            "fpr": fpr,
            "tpr": tpr,
            "specificity": 1.0 - fpr,
            "sensitivity": tpr,
        }
    )


def metrics_table(
    predictions: pd.DataFrame, truth_col: str, model_cols: list[str], mode: str
) -> pd.DataFrame:
    """Long table (model, metric, estimate) with one row per model and metric."""
    if mode == REGRESSION:
        metric_fn, names = regression_metrics, REGRESSION_METRICS
    elif mode == CLASSIFICATION:
        metric_fn, names = classification_metrics, CLASSIFICATION_METRICS
    else:
        raise ValueError(f"Unknown mode: {mode}")

    rows = []
    for model in model_cols:
        values = metric_fn(predictions[truth_col], predictions[model])
        rows.extend({"model": model, "metric": name, "estimate": values[name]} for name in names)
    return pd.DataFrame(rows, columns=["model", "metric", "estimate"])
