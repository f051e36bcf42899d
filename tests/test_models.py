import numpy as np
import pytest

from tidy_walkthrough import ModelSpec, Recipe, default_specs, fit_model, initial_split


@pytest.fixture
def baked_cars(mtcars):
    split = initial_split(mtcars, prop=0.75, random_state=11)
    prepared = Recipe("mpg").step_corr().step_center().step_scale().prep(split.training())
    return prepared.juice(), prepared.bake(split.testing())


@pytest.fixture
def baked_credit(credit_split):
    prepared = Recipe("status").step_center().step_scale().step_dummy().prep(credit_split.training())
    return prepared.juice(), prepared.bake(credit_split.testing())


@pytest.mark.parametrize(
    "family, mode, engine",
    [
        ("linear_reg", "classification", "sklearn"),
        ("logistic_reg", "regression", "sklearn"),
        ("rand_forest", "regression", "ranger"),
        ("boost_tree", "regression", "sklearn"),
    ],
)
def test_unsupported_specs_raise(family, mode, engine):
    with pytest.raises(ValueError, match="Unsupported model"):
        ModelSpec(family, mode, engine)


def test_unknown_mode_and_bad_trees_raise():
    with pytest.raises(ValueError, match="Unknown mode"):
        ModelSpec("rand_forest", "survival")
    with pytest.raises(ValueError, match="trees"):
        ModelSpec("rand_forest", "regression", trees=0)


def test_default_specs_labels():
    assert [s.label for s in default_specs("regression")] == [
        "linear_reg_sklearn",
        "rand_forest_sklearn",
        "rand_forest_bagging",
    ]
    assert default_specs("classification")[0].label == "logistic_reg_sklearn"


@pytest.mark.parametrize("spec", default_specs("regression", trees=25))
def test_regression_models_predict_every_test_row(spec, baked_cars):
    train, test = baked_cars
    model = fit_model(spec, train, "mpg")

    preds = model.predict(test.drop(columns=["mpg"]))

    assert len(preds) == len(test)
    assert list(preds.index) == list(test.index)
    assert preds.name == spec.label
    assert np.isfinite(preds).all()
    assert "mpg" not in model.features


@pytest.mark.parametrize("spec", default_specs("classification", trees=25))
def test_classification_models_predict_classes_and_probabilities(spec, baked_credit):
    train, test = baked_credit
    model = fit_model(spec, train, "status")

    classes = model.predict(test)
    probs = model.predict_proba(test)

    assert set(classes) <= {"good", "bad"}
    assert list(probs.columns) == ["bad", "good"]
    np.testing.assert_allclose(probs.sum(axis=1), 1.0)
    assert len(probs) == len(test)


def test_predict_proba_needs_classification(baked_cars):
    train, test = baked_cars
    model = fit_model(ModelSpec("linear_reg", "regression"), train, "mpg")

    with pytest.raises(ValueError, match="predict_proba"):
        model.predict_proba(test)


def test_missing_feature_or_outcome_raises(baked_cars):
    train, test = baked_cars
    spec = ModelSpec("rand_forest", "regression", trees=10)

    with pytest.raises(ValueError, match="Outcome column not found"):
        fit_model(spec, train, "price")

    model = fit_model(spec, train, "mpg")
    with pytest.raises(ValueError, match="Columns not found"):
        model.predict(test.drop(columns=[model.features[0]]))


def test_same_seed_same_forest(baked_cars):
    train, test = baked_cars
    spec = ModelSpec("rand_forest", "regression", "bagging", trees=15, random_state=3)

    first = fit_model(spec, train, "mpg").predict(test)
    second = fit_model(spec, train, "mpg").predict(test)

    np.testing.assert_allclose(first, second)


def test_name_overrides_label():
    spec = ModelSpec("rand_forest", "regression", trees=5, name="small_forest")

    assert spec.label == "small_forest"
    assert ModelSpec("rand_forest", "regression").label == "rand_forest_sklearn"
