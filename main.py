from __future__ import annotations

"""
CLI entrypoint for the modeling walkthrough. Pick the experiment via
--experiment: regression (mtcars by default) or classification (credit), or
name a --dataset and let its outcome decide.
"""

import argparse
from pathlib import Path

import pandas as pd

from tidy_walkthrough import (
    CLASSIFICATION,
    REGRESSION,
    available_datasets,
    compute_classification_metrics,
    describe_split,
    run_walkthrough,
)
from tidy_walkthrough.constants import (
    DEFAULT_CORR_THRESHOLD,
    DEFAULT_DATASETS,
    DEFAULT_PROP,
    DEFAULT_TREES,
    RANDOM_STATE,
)
from tidy_walkthrough.plots import (
    plot_metric_comparison,
    plot_predicted_vs_actual,
    plot_roc_curves,
)


def describe_data(result):
    """Print split sizes, class balance and what the recipe learned."""
    summary = describe_split(result.split)
    print(f"Dataset: {result.dataset} | outcome: {result.outcome} | mode: {result.mode}")
    print(
        f"Train size: {summary['train_rows']}, Test size: {summary['test_rows']} "
        f"(train share {summary['train_share']:.3f})"
    )
    if "train_rates" in summary:
        print(f"    Train class rates: {_rounded(summary['train_rates'])}")
        print(f"    Test class rates:  {_rounded(summary['test_rates'])}")

    print("\nRecipe steps (learned on training data):")
    for row in result.prepared.tidy().itertuples():
        print(f"  {row.number}. {row.step}: {row.learned}")
    print(f"Predictors after preprocessing: {result.prepared.juice().shape[1] - 1}")


def _rounded(rates: dict) -> dict:
    return {k: round(v, 3) for k, v in rates.items()}


def print_metrics(result):
    """Metric table in wide form, one row per model."""
    wide = result.metrics.pivot(index="model", columns="metric", values="estimate")
    print("\nTest-set metrics")
    print(wide.round(4).to_string())

    if result.mode == CLASSIFICATION:
        print(f"\nPositive class: {result.positive}")
        for label in result.model_labels:
            m = compute_classification_metrics(
                result.predictions[result.outcome],
                result.predictions[f"{label}_prob"],
                positive=result.positive,
            )
            print(
                f"[{label}] Prec {m['precision']:.3f} | Rec {m['recall']:.3f} | "
                f"F1 {m['f1']:.3f} | ROC-AUC {m['roc_auc']:.3f}"
            )
            print(f"    Confusion matrix [[TN, FP], [FN, TP]]: {m['confusion_matrix'].tolist()}")


def write_plots(result, plots_dir: Path):
    plots_dir.mkdir(parents=True, exist_ok=True)
    written = [plot_metric_comparison(result.metrics, plots_dir / f"metrics_{result.dataset}.png")]
    if result.mode == CLASSIFICATION:
        written.append(
            plot_roc_curves(
                result.roc_curves,
                plots_dir / f"roc_{result.dataset}.png",
                title=f"ROC Curves: {result.outcome} = {result.positive}",
            )
        )
    else:
        written.append(
            plot_predicted_vs_actual(
                result.predictions,
                result.outcome,
                result.model_labels,
                plots_dir / f"pred_vs_obs_{result.dataset}.png",
            )
        )
    for path in written:
        print(f"Saved plot: {path}")


def build_arg_parser():
    """CLI parser with knobs for the split, recipe, models and plots."""
    parser = argparse.ArgumentParser(
        description="Split, preprocess, fit and evaluate models on a sample dataset."
    )
    parser.add_argument(
        "--experiment",
        choices=[REGRESSION, CLASSIFICATION],
        default=None,
        help=(
            "regression: linear model vs two forest engines; classification: same plus ROC curves. "
            "Inferred from the dataset outcome when omitted (regression without --dataset)."
        ),
    )
    parser.add_argument(
        "--dataset",
        choices=available_datasets(),
        default=None,
        help="Defaults to mtcars for regression and credit for classification.",
    )
    parser.add_argument("--prop", type=float, default=DEFAULT_PROP, help="Training proportion.")
    parser.add_argument(
        "--no-stratify",
        action="store_true",
        help="Do not stratify classification splits by the outcome.",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=DEFAULT_CORR_THRESHOLD,
        help="Absolute correlation above which a predictor is filtered out.",
    )
    parser.add_argument("--trees", type=int, default=DEFAULT_TREES, help="Trees per forest.")
    parser.add_argument("--random-state", type=int, default=RANDOM_STATE, help="Random seed.")
    parser.add_argument(
        "--plots-dir",
        type=Path,
        default=None,
        help="Write PNG charts here when given.",
    )
    return parser


def main(args: argparse.Namespace | None = None):
    """Run the selected experiment and report."""
    args = args or build_arg_parser().parse_args()
    dataset = args.dataset or DEFAULT_DATASETS[args.experiment or REGRESSION]

    result = run_walkthrough(
        dataset,
        mode=args.experiment,
        prop=args.prop,
        stratify=False if args.no_stratify else None,
        threshold=args.threshold,
        trees=args.trees,
        random_state=args.random_state,
    )

    describe_data(result)
    print_metrics(result)

    with pd.option_context("display.width", 120, "display.max_columns", 12):
        print("\nFirst test-set predictions:")
        print(result.predictions[[result.outcome, *result.model_labels]].head())

    if args.plots_dir is not None:
        write_plots(result, args.plots_dir)
    return result


if __name__ == "__main__":
    main()
