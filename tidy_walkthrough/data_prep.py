from __future__ import annotations

"""
Train/test splitting at row level, optionally stratified by an outcome column.
"""

from typing import NamedTuple

import pandas as pd
from sklearn.model_selection import train_test_split

from .constants import DEFAULT_PROP, RANDOM_STATE


class DataSplit(NamedTuple):
    """Disjoint training/testing subsets of one dataset."""

    train: pd.DataFrame
    test: pd.DataFrame
    prop: float
    strata: str | None = None

    def training(self) -> pd.DataFrame:
        return self.train

    def testing(self) -> pd.DataFrame:
        return self.test


def initial_split(
    data: pd.DataFrame,
    prop: float = DEFAULT_PROP,
    strata: str | None = None,
    random_state: int | None = RANDOM_STATE,
) -> DataSplit:
    """
    Split rows into training (about `prop` of them) and testing subsets.

    With `strata`, class proportions of that column are preserved on both sides.
    """
    if not 0 < prop < 1:
        raise ValueError(f"prop must be between 0 and 1, got {prop}")
    if strata is not None and strata not in data.columns:
        raise ValueError(f"Unknown strata column: {strata}")

    stratify_target = data[strata] if strata is not None else None
    train, test = train_test_split(
        data, train_size=prop, random_state=random_state, stratify=stratify_target
    )
    return DataSplit(train=train.copy(), test=test.copy(), prop=prop, strata=strata)


def describe_split(split: DataSplit) -> dict:
    """Sizes, realised training share and, when stratified, class rates per side."""
    n_train, n_test = len(split.train), len(split.test)
    summary = {
        "train_rows": n_train,
        "test_rows": n_test,
        "train_share": n_train / (n_train + n_test),
    }
    if split.strata is not None:
        summary["train_rates"] = split.train[split.strata].value_counts(normalize=True).to_dict()
        summary["test_rates"] = split.test[split.strata].value_counts(normalize=True).to_dict()
    return summary
