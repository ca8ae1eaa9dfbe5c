# tests/test_fitness_calc.py
from __future__ import annotations

import logging
import math
import pytest

from core.fitness_calc import (
    FitnessEstimator,
    FitnessInput,
    FitnessOutput,
    Gender,
    InvalidGender,
    InvalidNumericInput,
    estimate,
)

calc = FitnessEstimator()

MALE_180LB = FitnessInput(
    age=30,
    height_inches=70,
    weight_lbs=180,
    gender="male",
    activity_hours=5,
)


def _with(**changes) -> FitnessInput:
    fields = dict(MALE_180LB.__dict__)
    fields.update(changes)
    return FitnessInput(**fields)


# ── reference scenario ───────────────────────────────────────────────
def test_reference_profile():
    b = calc.breakdown(MALE_180LB)
    assert math.isclose(b.height_cm, 177.8)
    assert math.isclose(b.weight_kg, 81.64656)
    assert math.isclose(b.bmr, 1782.7156, rel_tol=1e-9)
    assert b.activity_factor == 1.375
    assert math.isclose(b.tdee, 2451.23395, rel_tol=1e-9)
    assert b.output == FitnessOutput(calories=2451, protein=131, carbs=298, fats=82)


def test_estimate_shortcut_matches_class():
    assert estimate(MALE_180LB) == calc.estimate(MALE_180LB)
    assert estimate(MALE_180LB).as_dict() == {
        "calories": 2451, "protein": 131, "carbs": 298, "fats": 82,
    }


def test_deterministic():
    first = estimate(MALE_180LB)
    assert all(estimate(MALE_180LB) == first for _ in range(5))


# ── BMR / gender ─────────────────────────────────────────────────────
def test_male_bmr_exceeds_female_by_166():
    male = calc.bmr(MALE_180LB)
    female = calc.bmr(_with(gender="female"))
    assert math.isclose(male - female, 166)


@pytest.mark.parametrize("raw", ["Male", "MALE", "  male ", Gender.male])
def test_gender_case_insensitive(raw):
    assert estimate(_with(gender=raw)) == estimate(MALE_180LB)


@pytest.mark.parametrize("raw", ["other", "", "m", None, 1])
def test_unknown_gender_rejected(raw):
    with pytest.raises(InvalidGender):
        estimate(_with(gender=raw))


# ── activity tiers ───────────────────────────────────────────────────
@pytest.mark.parametrize(
    "hours, factor",
    [
        (0, 1.2),
        (2.0, 1.2),
        (2.0001, 1.375),
        (5, 1.375),
        (5.5, 1.55),
        (8, 1.55),
        (11.0, 1.725),
        (11.0001, 1.9),
        (40, 1.9),
    ],
)
def test_activity_bucket_boundaries(hours, factor):
    assert calc.activity_factor(hours) == factor
    assert calc.breakdown(_with(activity_hours=hours)).activity_factor == factor


def test_activity_level_labels():
    assert calc.activity_level(0) == "sedentary"
    assert calc.activity_level(12) == "very active"


def test_calories_non_decreasing_with_activity():
    kcal = [estimate(_with(activity_hours=h)).calories for h in (0, 2, 3, 5, 6, 8, 9, 11, 12, 30)]
    assert kcal == sorted(kcal)
    assert kcal[0] < kcal[-1]


# ── macro split ──────────────────────────────────────────────────────
@pytest.mark.parametrize(
    "profile",
    [
        MALE_180LB,
        FitnessInput(age=45, height_inches=62.5, weight_lbs=130.4, gender="female", activity_hours=0),
        FitnessInput(age=19, height_inches=75, weight_lbs=240, gender="male", activity_hours=14),
    ],
)
def test_macro_calories_reconcile(profile):
    b = calc.breakdown(profile)
    total = b.protein_calories + b.fat_calories + b.carb_calories
    assert math.isclose(total, b.output.calories, abs_tol=1e-9)


def test_protein_kcal_uses_rounded_grams():
    b = calc.breakdown(MALE_180LB)
    assert b.protein_calories == b.output.protein * 4 == 524


def test_fat_uses_rounded_calories():
    b = calc.breakdown(MALE_180LB)
    assert math.isclose(b.fat_calories, 2451 * 0.3)


def test_negative_carbs_preserved_and_logged(caplog):
    # 100 kcal budget, but 36 g protein alone is 144 kcal
    profile = FitnessInput(age=60, height_inches=20, weight_lbs=50, gender="female", activity_hours=0)
    with caplog.at_level(logging.WARNING, logger="core.fitness_calc"):
        out = estimate(profile)
    assert out.calories == 100
    assert out.protein == 36
    assert out.carbs < 0
    assert "negative carbohydrate" in caplog.text


# ── numeric validation ───────────────────────────────────────────────
@pytest.mark.parametrize(
    "changes",
    [
        {"age": -5},
        {"age": 0},
        {"age": 30.5},
        {"age": "30"},
        {"age": True},
        {"height_inches": 0},
        {"height_inches": float("nan")},
        {"weight_lbs": -180},
        {"weight_lbs": float("inf")},
        {"activity_hours": -1},
        {"activity_hours": None},
    ],
)
def test_invalid_numbers_rejected(changes):
    with pytest.raises(InvalidNumericInput):
        estimate(_with(**changes))


def test_whole_float_age_accepted():
    assert estimate(_with(age=30.0)) == estimate(MALE_180LB)


def test_input_errors_are_value_errors():
    with pytest.raises(ValueError) as exc:
        estimate(_with(age=-5))
    assert exc.value.field == "age"
