from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from tidy_walkthrough import initial_split, load_dataset


@pytest.fixture
def mtcars():
    return load_dataset("mtcars")


@pytest.fixture
def credit():
    return load_dataset("credit")


@pytest.fixture
def credit_split(credit):
    return initial_split(credit, prop=0.75, strata="status", random_state=7)


@pytest.fixture
def mixed_frame():
    """Numeric + nominal predictors with a numeric outcome `y`."""
    rng = np.random.default_rng(0)
    n = 40
    a = rng.normal(10, 2, size=n)
    return pd.DataFrame(
        {
            "y": rng.normal(size=n),
            "a": a,
            "b": a * 2 + rng.normal(0, 0.01, size=n),
            "c": rng.normal(100, 15, size=n),
            "color": np.tile(["blue", "green", "red", "red"], n // 4),
        }
    )
