from __future__ import annotations

"""
Model specifications and fitted models.

A ModelSpec names a model family, a mode and an engine; `fit_model` builds the
matching scikit-learn estimator and fits `outcome ~ .` on a prepared frame.
"""

from dataclasses import dataclass

import pandas as pd
from sklearn.ensemble import (
    BaggingClassifier,
    BaggingRegressor,
    RandomForestClassifier,
    RandomForestRegressor,
)
from sklearn.linear_model import LinearRegression, LogisticRegression
from sklearn.tree import DecisionTreeClassifier, DecisionTreeRegressor

from .constants import CLASSIFICATION, DEFAULT_TREES, MODES, RANDOM_STATE, REGRESSION

LINEAR_REG = "linear_reg"
LOGISTIC_REG = "logistic_reg"
RAND_FOREST = "rand_forest"


def _linear_reg(spec: "ModelSpec"):
    return LinearRegression()


def _logistic_reg(spec: "ModelSpec"):
    return LogisticRegression(max_iter=5000)


def _forest_sklearn(spec: "ModelSpec"):
    forest_cls = RandomForestRegressor if spec.mode == REGRESSION else RandomForestClassifier
    return forest_cls(n_estimators=spec.trees, random_state=spec.random_state)


def _forest_bagging(spec: "ModelSpec"):
    """Random forest assembled from bagged trees that sample features at each split."""
    if spec.mode == REGRESSION:
        tree, bagging_cls = DecisionTreeRegressor(max_features=1.0 / 3.0), BaggingRegressor
    else:
        tree, bagging_cls = DecisionTreeClassifier(max_features="sqrt"), BaggingClassifier
    return bagging_cls(estimator=tree, n_estimators=spec.trees, random_state=spec.random_state)


# (family, mode, engine) -> estimator factory
ENGINES = {
    (LINEAR_REG, REGRESSION, "sklearn"): _linear_reg,
    (LOGISTIC_REG, CLASSIFICATION, "sklearn"): _logistic_reg,
    (RAND_FOREST, REGRESSION, "sklearn"): _forest_sklearn,
    (RAND_FOREST, CLASSIFICATION, "sklearn"): _forest_sklearn,
    (RAND_FOREST, REGRESSION, "bagging"): _forest_bagging,
    (RAND_FOREST, CLASSIFICATION, "bagging"): _forest_bagging,
}


@dataclass(frozen=True)
class ModelSpec:
    family: str
    mode: str
    engine: str = "sklearn"
    trees: int = DEFAULT_TREES
    random_state: int | None = RANDOM_STATE
    name: str | None = None

    def __post_init__(self):
        if self.mode not in MODES:
            raise ValueError(f"Unknown mode: {self.mode}. Use one of {MODES}.")
        if (self.family, self.mode, self.engine) not in ENGINES:
            supported = sorted(k for k in ENGINES if k[1] == self.mode)
            raise ValueError(
                f"Unsupported model: {self.family}/{self.mode}/{self.engine}. Supported: {supported}"
            )
        if self.trees < 1:
            raise ValueError(f"trees must be positive, got {self.trees}")

    @property
    def label(self) -> str:
        """Prediction column name; `name` overrides the `family_engine` default."""
        return self.name or f"{self.family}_{self.engine}"

    def build(self):
        return ENGINES[(self.family, self.mode, self.engine)](self)


def default_specs(mode: str, trees: int = DEFAULT_TREES, random_state: int | None = RANDOM_STATE):
    """The three model choices compared side by side for a mode."""
    baseline = LINEAR_REG if mode == REGRESSION else LOGISTIC_REG
    return [
        ModelSpec(baseline, mode, "sklearn", trees=trees, random_state=random_state),
        ModelSpec(RAND_FOREST, mode, "sklearn", trees=trees, random_state=random_state),
        ModelSpec(RAND_FOREST, mode, "bagging", trees=trees, random_state=random_state),
    ]


class FittedModel:
    """An estimator fitted for one spec, remembering its feature columns."""

    def __init__(self, spec: ModelSpec, estimator, outcome: str, features: list[str]):
        self.spec = spec
        self.estimator = estimator
        self.outcome = outcome
        self.features = features

    @property
    def label(self) -> str:
        return self.spec.label

    @property
    def classes_(self) -> list:
        if self.spec.mode != CLASSIFICATION:
            raise ValueError(f"{self.label} is a regression model and has no classes.")
        return list(self.estimator.classes_)

    def _features(self, new_data: pd.DataFrame) -> pd.DataFrame:
        missing = [c for c in self.features if c not in new_data.columns]
        if missing:
            raise ValueError(f"Columns not found in new data: {missing}")
        return new_data[self.features]

    def predict(self, new_data: pd.DataFrame) -> pd.Series:
        preds = self.estimator.predict(self._features(new_data))
        return pd.Series(preds, index=new_data.index, name=self.label)

    def predict_proba(self, new_data: pd.DataFrame) -> pd.DataFrame:
        """Class probabilities, one column per class."""
        if self.spec.mode != CLASSIFICATION:
            raise ValueError(f"{self.label} is a regression model; predict_proba needs classification.")
        probs = self.estimator.predict_proba(self._features(new_data))
        return pd.DataFrame(probs, index=new_data.index, columns=self.classes_)

    def __repr__(self) -> str:
        return f"FittedModel({self.label}, mode={self.spec.mode}, features={len(self.features)})"


def fit_model(spec: ModelSpec, data: pd.DataFrame, outcome: str) -> FittedModel:
    """Fit `outcome` from every other column of `data`."""
    if outcome not in data.columns:
        raise ValueError(f"Outcome column not found: {outcome}")
    features = [c for c in data.columns if c != outcome]
    if not features:
        raise ValueError("No predictor columns left to fit on.")
    estimator = spec.build()
    estimator.fit(data[features], data[outcome])
    return FittedModel(spec, estimator, outcome, features)
