from __future__ import annotations

"""
Built-in sample datasets, loaded by name.

mtcars ships as a CSV next to this module, diabetes and breast_cancer come from
the tables bundled with scikit-learn, and credit and housing are simulated from
a fixed seed.
"""

from pathlib import Path

import numpy as np
import pandas as pd
from sklearn.datasets import load_breast_cancer, load_diabetes

from .constants import CREDIT_ROWS, DATASET_OUTCOMES, HOUSING_ROWS, RANDOM_STATE

DATA_DIR = Path(__file__).resolve().parent / "data"


def _clean_name(name: str) -> str:
    """Lightweight normalizer for column names."""
    return name.lower().strip().replace(" ", "_").replace("-", "_")


def _load_mtcars() -> pd.DataFrame:
    return pd.read_csv(DATA_DIR / "mtcars.csv", index_col="model")


def _load_diabetes() -> pd.DataFrame:
    bunch = load_diabetes(as_frame=True)
    df = bunch.frame.rename(columns={"target": "progression"})
    return df


def _load_breast_cancer() -> pd.DataFrame:
    bunch = load_breast_cancer(as_frame=True)
    df = bunch.frame.rename(columns=_clean_name)
    df["diagnosis"] = bunch.target_names[df.pop("target").to_numpy()]
    return df


def _load_credit(n_rows: int = CREDIT_ROWS, random_state: int = RANDOM_STATE) -> pd.DataFrame:
    """
    Simulated credit applications: categorical household/job attributes, numeric
    financials and a good/bad repayment status drawn from a logistic score.

    `price` is nearly collinear with `amount` so the correlation filter has work to do.
    """
    rng = np.random.default_rng(random_state)

    home = rng.choice(
        ["owner", "rent", "parents", "priv", "other"], size=n_rows, p=[0.45, 0.23, 0.18, 0.07, 0.07]
    )
    marital = rng.choice(["married", "single", "separated"], size=n_rows, p=[0.65, 0.28, 0.07])
    job = rng.choice(
        ["fixed", "freelance", "partime", "others"], size=n_rows, p=[0.62, 0.22, 0.10, 0.06]
    )

    age = rng.integers(18, 70, size=n_rows)
    seniority = np.minimum(rng.integers(0, 30, size=n_rows), age - 18)
    time = rng.choice([12, 24, 36, 48, 60], size=n_rows)
    expenses = rng.choice([35, 45, 60, 75, 90], size=n_rows)
    income = np.clip(rng.normal(140, 50, size=n_rows), 20, None).round()
    assets = rng.exponential(5000, size=n_rows).round()
    debt = np.where(rng.random(n_rows) < 0.75, 0.0, rng.exponential(1200, size=n_rows).round())
    amount = np.clip(rng.normal(1000, 450, size=n_rows), 100, None).round()
    price = (amount * 1.3 + rng.normal(0, 60, size=n_rows)).round()

    score = (
        -1.0
        - 0.05 * seniority
        + 0.8 * (home == "rent")
        + 0.4 * np.isin(home, ["priv", "other"])
        + 0.3 * (marital == "separated")
        + 0.9 * (job == "partime")
        + 0.5 * (job == "freelance")
        - 0.008 * (income - 140)
        + 0.0009 * (amount - 1000)
        + 0.0002 * debt
    )
    prob_bad = 1.0 / (1.0 + np.exp(-score))
    status = np.where(rng.random(n_rows) < prob_bad, "bad", "good")

    return pd.DataFrame(
        {
            "status": status,
            "seniority": seniority,
            "home": home,
            "time": time,
            "age": age,
            "marital": marital,
            "job": job,
            "expenses": expenses,
            "income": income,
            "assets": assets,
            "debt": debt,
            "amount": amount,
            "price": price,
        }
    )


def _load_housing(n_rows: int = HOUSING_ROWS, random_state: int = RANDOM_STATE) -> pd.DataFrame:
    """Simulated home sales: a nominal `type`, size and location columns, and a sale price."""
    rng = np.random.default_rng(random_state)

    home_type = rng.choice(
        ["Residential", "Condo", "Multi_Family"], size=n_rows, p=[0.86, 0.09, 0.05]
    )
    beds = rng.integers(1, 6, size=n_rows)
    baths = np.clip(np.round((beds * 0.6 + rng.normal(0.5, 0.4, size=n_rows)) * 2) / 2, 1, None)
    sqft = np.clip(400 + 380 * beds + rng.normal(0, 250, size=n_rows), 400, None).round()
    latitude = rng.normal(38.6, 0.15, size=n_rows).round(6)
    longitude = rng.normal(-121.4, 0.15, size=n_rows).round(6)

    price = (
        30000
        + 130 * sqft
        + 8000 * baths
        - 25000 * (home_type == "Condo")
        - 10000 * (home_type == "Multi_Family")
        - 40000 * (latitude - 38.6)
        + rng.normal(0, 40000, size=n_rows)
    )

    return pd.DataFrame(
        {
            "type": home_type,
            "beds": beds,
            "baths": baths,
            "sqft": sqft,
            "latitude": latitude,
            "longitude": longitude,
            "price": np.clip(price, 30000, None).round(),
        }
    )


_LOADERS = {
    "mtcars": _load_mtcars,
    "diabetes": _load_diabetes,
    "breast_cancer": _load_breast_cancer,
    "credit": _load_credit,
    "housing": _load_housing,
}


def available_datasets() -> list[str]:
    return sorted(_LOADERS)


def dataset_outcome(name: str) -> str:
    """Outcome column modelled for a built-in dataset."""
    if name not in DATASET_OUTCOMES:
        raise ValueError(f"Unknown dataset: {name}. Available: {available_datasets()}")
    return DATASET_OUTCOMES[name]


def load_dataset(name: str) -> pd.DataFrame:
    """Return a fresh copy of the named sample dataset."""
    try:
        loader = _LOADERS[name]
    except KeyError:
        raise ValueError(f"Unknown dataset: {name}. Available: {available_datasets()}") from None
    return loader().copy()
