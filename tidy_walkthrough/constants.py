"""
Shared settings for the walkthrough: split ratio, recipe defaults, engines and
the outcome column of every built-in dataset.
"""

DEFAULT_PROP = 0.75
DEFAULT_CORR_THRESHOLD = 0.9
DEFAULT_TREES = 100
RANDOM_STATE = 42

REGRESSION = "regression"
CLASSIFICATION = "classification"
MODES = (REGRESSION, CLASSIFICATION)

REGRESSION_METRICS = ("rmse", "rsq", "mae")
CLASSIFICATION_METRICS = ("accuracy", "kap")

DATASET_OUTCOMES = {
    "mtcars": "mpg",
    "diabetes": "progression",
    "breast_cancer": "diagnosis",
    "credit": "status",
    "housing": "price",
}

# Dataset used by each mode when none is given on the command line.
DEFAULT_DATASETS = {
    REGRESSION: "mtcars",
    CLASSIFICATION: "credit",
}

# Positive class of the binary outcomes (drives ROC curves and class probabilities).
POSITIVE_CLASSES = {
    "breast_cancer": "malignant",
    "credit": "bad",
}

CREDIT_ROWS = 1000
HOUSING_ROWS = 900
