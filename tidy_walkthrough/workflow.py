from __future__ import annotations

"""
End-to-end walkthrough: split -> recipe -> fit each model -> predict -> metrics
(-> ROC curves for classification).
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Sequence

import pandas as pd
from pandas.api.types import is_numeric_dtype

from .constants import (
    CLASSIFICATION,
    DEFAULT_CORR_THRESHOLD,
    DEFAULT_PROP,
    DEFAULT_TREES,
    MODES,
    POSITIVE_CLASSES,
    RANDOM_STATE,
    REGRESSION,
)
from .data_prep import DataSplit, initial_split
from .datasets import dataset_outcome, load_dataset
from .metrics import metrics_table, roc_curve_table
from .models import FittedModel, ModelSpec, default_specs, fit_model
from .recipe import ALL_NOMINAL, ALL_NUMERIC, PreparedRecipe, Recipe


@dataclass
class WalkthroughResult:
    dataset: str
    mode: str
    outcome: str
    split: DataSplit
    prepared: PreparedRecipe
    models: list[FittedModel]
    predictions: pd.DataFrame
    metrics: pd.DataFrame
    positive: str | None = None
    roc_curves: dict[str, pd.DataFrame] = field(default_factory=dict)

    @property
    def model_labels(self) -> list[str]:
        return [m.label for m in self.models]


def infer_mode(data: pd.DataFrame, outcome: str) -> str:
    return REGRESSION if is_numeric_dtype(data[outcome]) else CLASSIFICATION


def default_recipe(outcome: str, threshold: float = DEFAULT_CORR_THRESHOLD) -> Recipe:
    """Correlation filter, center/scale numeric predictors, then dummy-encode nominal ones."""
    return (
        Recipe(outcome)
        .step_corr(ALL_NUMERIC, threshold=threshold)
        .step_center(ALL_NUMERIC)
        .step_scale(ALL_NUMERIC)
        .step_dummy(ALL_NOMINAL)
    )


def _check_unique_labels(labels: Sequence[str]):
    duplicates = sorted(label for label, count in Counter(labels).items() if count > 1)
    if duplicates:
        raise ValueError(
            f"Duplicate model labels: {duplicates}. Give each ModelSpec a distinct `name`."
        )


def predictions_table(
    models: Sequence[FittedModel],
    baked_test: pd.DataFrame,
    outcome: str,
    positive: str | None = None,
) -> pd.DataFrame:
    """
    Testing rows with one prediction column per model. Classification models
    also add `<model>_prob`, the probability of the `positive` class.
    """
    _check_unique_labels([m.label for m in models])
    clashes = [m.label for m in models if m.label in baked_test.columns]
    if clashes:
        raise ValueError(f"Model labels clash with data columns: {clashes}")

    table = baked_test.copy()
    for model in models:
        table[model.label] = model.predict(baked_test)
        if model.spec.mode == CLASSIFICATION and positive is not None:
            table[f"{model.label}_prob"] = model.predict_proba(baked_test)[positive]
    return table


def _positive_class(dataset: str, truth: pd.Series) -> str:
    if dataset in POSITIVE_CLASSES:
        return POSITIVE_CLASSES[dataset]
    return sorted(truth.unique())[-1]


def run_walkthrough(
    dataset: str,
    mode: str | None = None,
    specs: Sequence[ModelSpec] | None = None,
    recipe: Recipe | None = None,
    prop: float = DEFAULT_PROP,
    stratify: bool | None = None,
    threshold: float = DEFAULT_CORR_THRESHOLD,
    trees: int = DEFAULT_TREES,
    random_state: int | None = RANDOM_STATE,
) -> WalkthroughResult:
    """
    Run every stage on a built-in dataset.

    Stratification by the outcome is on by default for classification. The
    recipe is prepped on the training subset only and baked onto both subsets.
    """
    data = load_dataset(dataset)
    outcome = dataset_outcome(dataset)
    inferred = infer_mode(data, outcome)
    mode = mode or inferred
    if mode not in MODES:
        raise ValueError(f"Unknown mode: {mode}. Use one of {MODES}.")
    if mode != inferred:
        raise ValueError(f"Dataset {dataset} has a {inferred} outcome ({outcome}), not {mode}.")
    if stratify is None:
        stratify = mode == CLASSIFICATION

    split = initial_split(
        data, prop=prop, strata=outcome if stratify else None, random_state=random_state
    )

    recipe = recipe or default_recipe(outcome, threshold=threshold)
    prepared = recipe.prep(split.training())
    baked_train = prepared.juice()
    baked_test = prepared.bake(split.testing())

    specs = list(specs) if specs is not None else default_specs(mode, trees, random_state)
    _check_unique_labels([spec.label for spec in specs])
    models = [fit_model(spec, baked_train, outcome) for spec in specs]

    positive = _positive_class(dataset, data[outcome]) if mode == CLASSIFICATION else None
    predictions = predictions_table(models, baked_test, outcome, positive=positive)
    labels = [m.label for m in models]
    scores = metrics_table(predictions, outcome, labels, mode)

    roc_curves = {}
    if mode == CLASSIFICATION:
        roc_curves = {
            label: roc_curve_table(predictions[outcome], predictions[f"{label}_prob"], positive)
            for label in labels
        }

    return WalkthroughResult(
        dataset=dataset,
        mode=mode,
        outcome=outcome,
        split=split,
        prepared=prepared,
        models=models,
        predictions=predictions,
        metrics=scores,
        positive=positive,
        roc_curves=roc_curves,
    )
