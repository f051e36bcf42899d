from __future__ import annotations

"""
matplotlib charts for walkthrough results; each function writes one PNG and
returns its path.
"""

from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from sklearn.metrics import auc


def plot_roc_curves(roc_curves: dict[str, pd.DataFrame], path: Path, title: str = "ROC Curves") -> Path:
    """One ROC line per model plus the chance diagonal."""
    path = Path(path)
    plt.figure(figsize=(8, 6))
    for label, curve in roc_curves.items():
        area = auc(curve["fpr"], curve["tpr"])
        plt.plot(curve["fpr"], curve["tpr"], lw=2, label=f"{label} (AUC = {area:.3f})")
    plt.plot([0, 1], [0, 1], color="navy", lw=2, linestyle="--")
    plt.xlim([0.0, 1.0])
    plt.ylim([0.0, 1.05])
    plt.xlabel("False Positive Rate")
    plt.ylabel("True Positive Rate")
    plt.title(title)
    plt.legend(loc="lower right")
    plt.grid(True)
    plt.tight_layout()
    plt.savefig(path)
    plt.close()
    return path


def plot_predicted_vs_actual(
    predictions: pd.DataFrame, outcome: str, model_cols: list[str], path: Path
) -> Path:
    """Scatter of predicted against observed outcome, one marker series per model."""
    path = Path(path)
    truth = predictions[outcome]
    low, high = truth.min(), truth.max()

    plt.figure(figsize=(8, 6))
    for col in model_cols:
        plt.scatter(truth, predictions[col], alpha=0.7, label=col)
    plt.plot([low, high], [low, high], color="gray", lw=1, linestyle="--")
    plt.xlabel(f"Observed {outcome}")
    plt.ylabel(f"Predicted {outcome}")
    plt.title("Predicted vs Observed (test set)")
    plt.legend()
    plt.grid(True)
    plt.tight_layout()
    plt.savefig(path)
    plt.close()
    return path


def plot_metric_comparison(metrics: pd.DataFrame, path: Path) -> Path:
    """Grouped bars: one group per metric, one bar per model."""
    path = Path(path)
    wide = metrics.pivot(index="metric", columns="model", values="estimate")
    x = np.arange(len(wide.index))
    width = 0.8 / max(len(wide.columns), 1)

    plt.figure(figsize=(8, 6))
    for i, model in enumerate(wide.columns):
        plt.bar(x + (i - (len(wide.columns) - 1) / 2) * width, wide[model], width, label=model)
    plt.ylabel("Estimate")
    plt.xlabel("Metric")
    plt.title("Model Comparison (test set)")
    plt.xticks(x, list(wide.index))
    plt.legend()
    plt.grid(axis="y", linestyle="--", alpha=0.7)
    plt.tight_layout()
    plt.savefig(path)
    plt.close()
    return path
