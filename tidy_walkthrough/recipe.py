from __future__ import annotations

"""
Declarative preprocessing recipes.

A Recipe is an ordered list of steps (correlation filter, centering, scaling,
dummy encoding). `prep` fits every step on the training frame only, each step
seeing the output of the previous one; the resulting PreparedRecipe applies the
same learned parameters to any other frame via `bake`.
"""

from typing import Sequence, Union

import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator, TransformerMixin, clone
from sklearn.pipeline import Pipeline
from sklearn.preprocessing import OneHotEncoder, StandardScaler

from .constants import DEFAULT_CORR_THRESHOLD

ALL_PREDICTORS = "all_predictors"
ALL_NUMERIC = "all_numeric"
ALL_NOMINAL = "all_nominal"
SELECTORS = (ALL_PREDICTORS, ALL_NUMERIC, ALL_NOMINAL)

NOMINAL_DTYPES = ["object", "category", "bool", "string"]

Selector = Union[str, Sequence[str]]


def resolve_selector(selector: Selector, data: pd.DataFrame, outcome: str | None) -> list[str]:
    """Turn a selector into concrete column names; the outcome is never selected."""
    if isinstance(selector, str):
        if selector == ALL_PREDICTORS:
            cols = list(data.columns)
        elif selector == ALL_NUMERIC:
            cols = list(data.select_dtypes(include="number").columns)
        elif selector == ALL_NOMINAL:
            cols = list(data.select_dtypes(include=NOMINAL_DTYPES).columns)
        else:
            raise ValueError(f"Unknown selector: {selector}. Use one of {SELECTORS} or a column list.")
    else:
        missing = [c for c in selector if c not in data.columns]
        if missing:
            raise ValueError(f"Columns not found: {missing}")
        cols = list(selector)
    return [c for c in cols if c != outcome]


def _replace_columns(data: pd.DataFrame, values: np.ndarray, columns: list[str]) -> pd.DataFrame:
    out = data.copy()
    for i, col in enumerate(columns):
        out[col] = values[:, i]
    return out


class StepCorr(BaseEstimator, TransformerMixin):
    """
    Drop numeric columns until no pair has absolute correlation above `threshold`.

    For the most correlated pair, the column with the larger mean absolute
    correlation to the remaining columns is removed first.
    """

    name = "corr"

    def __init__(self, selector: Selector = ALL_NUMERIC, outcome: str | None = None,
                 threshold: float = DEFAULT_CORR_THRESHOLD):
        self.selector = selector
        self.outcome = outcome
        self.threshold = threshold

    def fit(self, X: pd.DataFrame, y=None):
        columns = resolve_selector(self.selector, X, self.outcome)
        numeric = X[columns].select_dtypes(include="number").columns.tolist()
        corr = X[numeric].corr().abs()

        remaining = list(numeric)
        removed = []
        while len(remaining) > 1:
            sub = np.nan_to_num(corr.loc[remaining, remaining].to_numpy(copy=True))
            np.fill_diagonal(sub, 0.0)
            if sub.max() <= self.threshold:
                break
            i, j = np.unravel_index(np.argmax(sub), sub.shape)
            mean_abs = sub.sum(axis=1) / (len(remaining) - 1)
            drop_idx = i if mean_abs[i] >= mean_abs[j] else j
            removed.append(remaining.pop(drop_idx))

        self.columns_ = numeric
        self.removed_ = removed
        return self

    def transform(self, X: pd.DataFrame) -> pd.DataFrame:
        return X.drop(columns=self.removed_)

    def learned(self) -> str:
        return f"removed {self.removed_}" if self.removed_ else "removed nothing"


class StepCenter(BaseEstimator, TransformerMixin):
    """Subtract the training mean of each selected column."""

    name = "center"

    def __init__(self, selector: Selector = ALL_NUMERIC, outcome: str | None = None):
        self.selector = selector
        self.outcome = outcome

    def _scaler(self) -> StandardScaler:
        return StandardScaler(with_mean=True, with_std=False)

    def fit(self, X: pd.DataFrame, y=None):
        self.columns_ = resolve_selector(self.selector, X, self.outcome)
        self.scaler_ = self._scaler()
        if self.columns_:
            self.scaler_.fit(X[self.columns_].to_numpy(dtype=float))
        return self

    def transform(self, X: pd.DataFrame) -> pd.DataFrame:
        if not self.columns_:
            return X.copy()
        values = self.scaler_.transform(X[self.columns_].to_numpy(dtype=float))
        return _replace_columns(X, values, self.columns_)

    def learned(self) -> str:
        if not self.columns_:
            return "no columns"
        means = dict(zip(self.columns_, np.round(self.scaler_.mean_, 4)))
        return f"means {means}"


class StepScale(StepCenter):
    """Divide each selected column by its training standard deviation."""

    name = "scale"

    def _scaler(self) -> StandardScaler:
        return StandardScaler(with_mean=False, with_std=True)

    def learned(self) -> str:
        if not self.columns_:
            return "no columns"
        sds = dict(zip(self.columns_, np.round(self.scaler_.scale_, 4)))
        return f"sds {sds}"


class StepDummy(BaseEstimator, TransformerMixin):
    """
    One-hot encode nominal columns, keeping one indicator fewer than levels.

    Indicators are named `<column>_<level>`; the first level (sorted) is the
    reference. A level not seen during fitting raises ValueError on transform.
    """

    name = "dummy"

    def __init__(self, selector: Selector = ALL_NOMINAL, outcome: str | None = None):
        self.selector = selector
        self.outcome = outcome

    def fit(self, X: pd.DataFrame, y=None):
        self.columns_ = resolve_selector(self.selector, X, self.outcome)
        self.encoder_ = OneHotEncoder(drop="first", sparse_output=False, handle_unknown="error")
        if self.columns_:
            self.encoder_.fit(X[self.columns_].astype(str))
        return self

    def transform(self, X: pd.DataFrame) -> pd.DataFrame:
        if not self.columns_:
            return X.copy()
        encoded = pd.DataFrame(
            self.encoder_.transform(X[self.columns_].astype(str)),
            index=X.index,
            columns=self.encoder_.get_feature_names_out(self.columns_),
        )
        return pd.concat([X.drop(columns=self.columns_), encoded], axis=1)

    def learned(self) -> str:
        if not self.columns_:
            return "no columns"
        levels = {c: list(cats) for c, cats in zip(self.columns_, self.encoder_.categories_)}
        return f"levels {levels}"


class Recipe:
    """
    Ordered preprocessing steps for predicting `outcome` from every other column.

    Builder methods return a new Recipe, so a base recipe can be shared.
    """

    def __init__(self, outcome: str, steps: tuple = ()):
        self.outcome = outcome
        self.steps = tuple(steps)

    def _add(self, step) -> "Recipe":
        return Recipe(self.outcome, self.steps + (step,))

    def step_corr(self, selector: Selector = ALL_NUMERIC, threshold: float = DEFAULT_CORR_THRESHOLD):
        return self._add(StepCorr(selector=selector, outcome=self.outcome, threshold=threshold))

    def step_center(self, selector: Selector = ALL_NUMERIC):
        return self._add(StepCenter(selector=selector, outcome=self.outcome))

    def step_scale(self, selector: Selector = ALL_NUMERIC):
        return self._add(StepScale(selector=selector, outcome=self.outcome))

    def step_dummy(self, selector: Selector = ALL_NOMINAL):
        return self._add(StepDummy(selector=selector, outcome=self.outcome))

    def prep(self, training: pd.DataFrame) -> "PreparedRecipe":
        """Fit all steps, in order, on the training frame."""
        if self.outcome not in training.columns:
            raise ValueError(f"Outcome column not found: {self.outcome}")
        pipeline = Pipeline(
            [(f"{i + 1}_{step.name}", clone(step)) for i, step in enumerate(self.steps)]
            or [("identity", "passthrough")]
        )
        baked_training = pipeline.fit_transform(training)
        predictors = [c for c in training.columns if c != self.outcome]
        return PreparedRecipe(self.outcome, pipeline, predictors, baked_training)

    def __repr__(self) -> str:
        names = ", ".join(step.name for step in self.steps) or "no steps"
        return f"Recipe(outcome={self.outcome!r}, steps=[{names}])"


class PreparedRecipe:
    """A recipe whose steps have learned their parameters from training data."""

    def __init__(self, outcome: str, pipeline: Pipeline, predictors: list[str],
                 baked_training: pd.DataFrame):
        self.outcome = outcome
        self.pipeline = pipeline
        self.predictors = predictors
        self._baked_training = baked_training

    def bake(self, new_data: pd.DataFrame) -> pd.DataFrame:
        """Apply the learned transform; the outcome column is optional."""
        missing = [c for c in self.predictors if c not in new_data.columns]
        if missing:
            raise ValueError(f"Columns not found in new data: {missing}")
        return self.pipeline.transform(new_data)

    def juice(self) -> pd.DataFrame:
        return self._baked_training.copy()

    def tidy(self) -> pd.DataFrame:
        rows = []
        for number, (_, step) in enumerate(self.pipeline.steps, start=1):
            if isinstance(step, str):
                continue
            rows.append(
                {
                    "number": number,
                    "step": step.name,
                    "columns": list(step.columns_),
                    "learned": step.learned(),
                }
            )
        return pd.DataFrame(rows, columns=["number", "step", "columns", "learned"])
