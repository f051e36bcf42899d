import numpy as np
import pandas as pd
import pytest

from tidy_walkthrough import ALL_NOMINAL, ALL_NUMERIC, ALL_PREDICTORS, Recipe, initial_split
from tidy_walkthrough.recipe import resolve_selector


def test_selectors_never_pick_the_outcome(mixed_frame):
    assert resolve_selector(ALL_NUMERIC, mixed_frame, "y") == ["a", "b", "c"]
    assert resolve_selector(ALL_NOMINAL, mixed_frame, "y") == ["color"]
    assert resolve_selector(ALL_PREDICTORS, mixed_frame, "y") == ["a", "b", "c", "color"]
    assert resolve_selector(["a", "y"], mixed_frame, "y") == ["a"]


def test_unknown_selector_and_columns_raise(mixed_frame):
    with pytest.raises(ValueError, match="Unknown selector"):
        resolve_selector("all_dates", mixed_frame, "y")
    with pytest.raises(ValueError, match="Columns not found"):
        resolve_selector(["a", "zzz"], mixed_frame, "y")


def test_corr_filter_drops_one_of_a_correlated_pair(mixed_frame):
    prepared = Recipe("y").step_corr(threshold=0.9).prep(mixed_frame)
    removed = prepared.pipeline.named_steps["1_corr"].removed_

    assert len(removed) == 1
    assert removed[0] in {"a", "b"}
    assert "c" in prepared.juice().columns


def test_center_scale_use_training_statistics_only(mixed_frame):
    split = initial_split(mixed_frame, prop=0.75, random_state=1)
    train, test = split.training(), split.testing()
    prepared = Recipe("y").step_center().step_scale().prep(train)

    juiced = prepared.juice()
    assert np.allclose(juiced[["a", "b", "c"]].mean(), 0.0)
    assert np.allclose(juiced[["a", "b", "c"]].std(ddof=0), 1.0)

    baked = prepared.bake(test)
    expected = (test["c"] - train["c"].mean()) / train["c"].std(ddof=0)
    np.testing.assert_allclose(baked["c"], expected)
    # test-set statistics are not re-estimated
    assert not np.isclose(baked["c"].mean(), 0.0)


def test_outcome_left_untouched(mixed_frame):
    prepared = Recipe("y").step_center().step_scale().prep(mixed_frame)
    pd.testing.assert_series_equal(prepared.juice()["y"], mixed_frame["y"])


def test_dummy_encoding_and_column_counts(credit_split):
    recipe = Recipe("status").step_corr().step_center().step_scale().step_dummy()
    prepared = recipe.prep(credit_split.training())

    baked_train = prepared.juice()
    baked_test = prepared.bake(credit_split.testing())

    assert list(baked_train.columns) == list(baked_test.columns)
    assert {"home_owner", "home_rent", "job_partime", "marital_single"} <= set(baked_train.columns)
    # first level of each factor is the reference
    assert "home_other" not in baked_train.columns
    assert "job_fixed" not in baked_train.columns
    assert baked_train.select_dtypes(include="object").columns.tolist() == ["status"]


def test_unseen_level_raises(mixed_frame):
    prepared = Recipe("y").step_dummy().prep(mixed_frame)
    new = mixed_frame.head(3).copy()
    new.loc[new.index[0], "color"] = "purple"

    with pytest.raises(ValueError):
        prepared.bake(new)


def test_step_order_changes_surviving_columns():
    rng = np.random.default_rng(5)
    flag = np.tile(["x", "y"], 20)
    frame = pd.DataFrame(
        {
            "y": rng.normal(size=40),
            "flag": flag,
            "num": (flag == "y").astype(float),
            "other": rng.normal(size=40),
        }
    )

    corr_first = Recipe("y").step_corr().step_dummy().prep(frame)
    dummy_first = Recipe("y").step_dummy().step_corr().prep(frame)

    assert corr_first.pipeline.named_steps["1_corr"].removed_ == []
    assert len(dummy_first.pipeline.named_steps["2_corr"].removed_) == 1
    assert corr_first.juice().shape[1] == dummy_first.juice().shape[1] + 1


def test_bake_without_outcome_and_missing_predictor(mixed_frame):
    prepared = Recipe("y").step_center().prep(mixed_frame)

    baked = prepared.bake(mixed_frame.drop(columns=["y"]))
    assert "y" not in baked.columns
    assert len(baked) == len(mixed_frame)

    with pytest.raises(ValueError, match="Columns not found"):
        prepared.bake(mixed_frame.drop(columns=["a"]))


def test_builder_returns_new_recipe(mixed_frame):
    base = Recipe("y").step_corr()
    extended = base.step_center()

    assert len(base.steps) == 1
    assert len(extended.steps) == 2
    assert "corr, center" in repr(extended)


def test_prep_requires_outcome(mixed_frame):
    with pytest.raises(ValueError, match="Outcome column not found"):
        Recipe("missing").step_center().prep(mixed_frame)


def test_recipe_without_steps_passes_data_through(mixed_frame):
    prepared = Recipe("y").prep(mixed_frame)
    pd.testing.assert_frame_equal(prepared.bake(mixed_frame), mixed_frame)
    assert prepared.tidy().empty


def test_tidy_reports_each_step(mixed_frame):
    tidy = Recipe("y").step_corr().step_center().step_scale().step_dummy().prep(mixed_frame).tidy()

    assert tidy["step"].tolist() == ["corr", "center", "scale", "dummy"]
    assert tidy["number"].tolist() == [1, 2, 3, 4]
    assert tidy.loc[3, "columns"] == ["color"]
    assert tidy.loc[0, "learned"].startswith("removed")
