"""
core/fitness_calc.py
────────────────────────────────────────────────────────────────────────
Daily calorie + macro targets from five imperial measurements:

1. inches / lbs  →  cm / kg
2. BMR  (Mifflin–St Jeor)
3. Activity factor (weekly exercise hours, five tiers)
4. TDEE → calories
5. Protein 1.6 g/kg · fat 30 % of kcal · carbs = remainder

Pure and synchronous: no I/O, no shared state.
"""

from __future__ import annotations

import logging
import math
import numbers
from dataclasses import dataclass
from enum import Enum

Logger = logging.getLogger(__name__)

CM_PER_INCH = 2.54
KG_PER_LB = 0.453592

PROTEIN_G_PER_KG = 1.6
FAT_SHARE = 0.30
KCAL_PER_G_PROTEIN = 4
KCAL_PER_G_CARBS = 4
KCAL_PER_G_FAT = 9


# ──────────────────────────────────────────────────────────────────────
#  Errors
# ──────────────────────────────────────────────────────────────────────
class FitnessInputError(ValueError):
    """Base class for inputs the estimator refuses to work with."""


class InvalidGender(FitnessInputError):
    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"gender must be 'male' or 'female', got {value!r}")


class InvalidNumericInput(FitnessInputError):
    def __init__(self, field: str, value: object, reason: str) -> None:
        self.field = field
        self.value = value
        super().__init__(f"{field} {reason}, got {value!r}")


# ──────────────────────────────────────────────────────────────────────
#  Records
# ──────────────────────────────────────────────────────────────────────
class Gender(str, Enum):
    male = "male"
    female = "female"

    @classmethod
    def parse(cls, raw: object) -> "Gender":
        """Case-insensitive lookup; anything but male/female raises."""
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, str):
            raise InvalidGender(raw)
        try:
            return cls(raw.strip().lower())
        except ValueError:
            raise InvalidGender(raw) from None


@dataclass(frozen=True)
class FitnessInput:
    age: int
    height_inches: float
    weight_lbs: float
    gender: Gender | str
    activity_hours: float   # exercise hours per week


@dataclass(frozen=True)
class FitnessOutput:
    calories: int   # kcal / day
    protein: int    # g / day
    carbs: int      # g / day, may be negative
    fats: int       # g / day

    def as_dict(self) -> dict[str, int]:
        return {
            "calories": self.calories,
            "protein": self.protein,
            "carbs": self.carbs,
            "fats": self.fats,
        }


@dataclass(frozen=True)
class EstimateBreakdown:
    """Every intermediate value of one calculation, for display and tests."""

    height_cm: float
    weight_kg: float
    bmr: float
    activity_level: str
    activity_factor: float
    tdee: float
    protein_calories: int
    fat_calories: float
    carb_calories: float
    output: FitnessOutput


# ──────────────────────────────────────────────────────────────────────
#  Helpers
# ──────────────────────────────────────────────────────────────────────
def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def _real(field: str, value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise InvalidNumericInput(field, value, "must be a number")
    if not math.isfinite(value):
        raise InvalidNumericInput(field, value, "must be finite")
    return float(value)


def _positive(field: str, value: object) -> float:
    v = _real(field, value)
    if v <= 0:
        raise InvalidNumericInput(field, value, "must be greater than zero")
    return v


def _checked(inp: FitnessInput) -> tuple[int, float, float, Gender, float]:
    age = _positive("age", inp.age)
    if not age.is_integer():
        raise InvalidNumericInput("age", inp.age, "must be a whole number")
    height = _positive("height_inches", inp.height_inches)
    weight = _positive("weight_lbs", inp.weight_lbs)
    hours = _real("activity_hours", inp.activity_hours)
    if hours < 0:
        raise InvalidNumericInput("activity_hours", inp.activity_hours, "must not be negative")
    return int(age), height, weight, Gender.parse(inp.gender), hours


# ──────────────────────────────────────────────────────────────────────
#  Estimator
# ──────────────────────────────────────────────────────────────────────
class FitnessEstimator:
    """Source-of-truth for kcal + macros."""

    # (inclusive upper bound in hours/week, factor, label), ascending
    _TIERS = (
        (2, 1.2, "sedentary"),
        (5, 1.375, "light"),
        (8, 1.55, "moderate"),
        (11, 1.725, "active"),
    )
    _TOP_TIER = (1.9, "very active")

    # --------------- public entrypoint --------------------------------
    def estimate(self, inp: FitnessInput) -> FitnessOutput:
        return self.breakdown(inp).output

    def breakdown(self, inp: FitnessInput) -> EstimateBreakdown:
        age, height_in, weight_lbs, gender, hours = _checked(inp)

        height_cm = height_in * CM_PER_INCH
        weight_kg = weight_lbs * KG_PER_LB
        bmr = self._mifflin(age, height_cm, weight_kg, gender)
        factor, level = self._tier(hours)
        tdee = bmr * factor
        calories = round_half_up(tdee)

        protein = round_half_up(weight_kg * PROTEIN_G_PER_KG)
        protein_kcal = protein * KCAL_PER_G_PROTEIN

        fat_kcal = calories * FAT_SHARE
        fats = round_half_up(fat_kcal / KCAL_PER_G_FAT)

        carb_kcal = calories - (protein_kcal + fat_kcal)
        carbs = round_half_up(carb_kcal / KCAL_PER_G_CARBS)

        Logger.debug(
            "bmr=%.2f factor=%s (%s) tdee=%.2f kcal=%d", bmr, factor, level, tdee, calories
        )
        if carbs < 0:
            # left unclamped: protein + fat already exceed the calorie budget
            Logger.warning(
                "negative carbohydrate target (%d g): protein %d kcal + fat %.1f kcal > %d kcal",
                carbs, protein_kcal, fat_kcal, calories,
            )

        return EstimateBreakdown(
            height_cm=height_cm,
            weight_kg=weight_kg,
            bmr=bmr,
            activity_level=level,
            activity_factor=factor,
            tdee=tdee,
            protein_calories=protein_kcal,
            fat_calories=fat_kcal,
            carb_calories=carb_kcal,
            output=FitnessOutput(calories=calories, protein=protein, carbs=carbs, fats=fats),
        )

    # --------------- BMR / activity / TDEE ----------------------------
    def bmr(self, inp: FitnessInput) -> float:
        age, height_in, weight_lbs, gender, _ = _checked(inp)
        return self._mifflin(age, height_in * CM_PER_INCH, weight_lbs * KG_PER_LB, gender)

    def activity_factor(self, hours: float) -> float:
        return self._tier(hours)[0]

    def activity_level(self, hours: float) -> str:
        return self._tier(hours)[1]

    def tdee(self, inp: FitnessInput) -> float:
        return self.breakdown(inp).tdee

    @staticmethod
    def _mifflin(age: int, height_cm: float, weight_kg: float, gender: Gender) -> float:
        base = 10 * weight_kg + 6.25 * height_cm - 5 * age
        return base + (5 if gender is Gender.male else -161)

    def _tier(self, hours: float) -> tuple[float, str]:
        for upper, factor, label in self._TIERS:
            if hours <= upper:
                return factor, label
        return self._TOP_TIER


_DEFAULT = FitnessEstimator()


def estimate(inp: FitnessInput) -> FitnessOutput:
    """Module-level shortcut for `FitnessEstimator().estimate`."""
    return _DEFAULT.estimate(inp)
