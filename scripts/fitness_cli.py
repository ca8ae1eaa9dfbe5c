"""
scripts/fitness_cli.py
────────────────────────────────────────────────────────────────────────
Terminal front-end for the fitness estimator.

Interactive (asks the five questions, re-asks anything invalid):

    python -m scripts.fitness_cli

One-shot:

    python -m scripts.fitness_cli --age 30 --height 70 --weight 180 \
        --gender male --activity 5 [--json] [--details]

Batch over a CSV (age,height_in,weight_lbs,gender,activity_hours):

    python -m scripts.fitness_cli --csv profiles.csv
"""
from __future__ import annotations

import json
import logging
import sys
from argparse import ArgumentParser, Namespace
from typing import Callable, Dict, List, Sequence

from dotenv import load_dotenv
from pydantic import ValidationError

from config import settings
from core.batch import estimate_frame, load_profiles
from core.fitness_calc import EstimateBreakdown, FitnessEstimator
from core.models.profile import FitnessForm

_LOG = logging.getLogger(__name__)

# field → question, in the order they are asked
PROMPTS: Dict[str, str] = {
    "age": "Enter your age (years): ",
    "height_in": "Enter your height (inches): ",
    "weight_lbs": "Enter your weight (lbs): ",
    "gender": "Enter your gender (male/female): ",
    "activity_hours": "Enter activity hours per week: ",
}

_FLAG_FIELDS = {
    "age": "age",
    "height": "height_in",
    "weight": "weight_lbs",
    "gender": "gender",
    "activity": "activity_hours",
}

calc = FitnessEstimator()


class PromptAbandoned(RuntimeError):
    """User kept giving invalid answers until the attempts ran out."""


# ───────────────────────────────
# Input collection
# ───────────────────────────────
def _failed_fields(exc: ValidationError) -> List[str]:
    bad = {str(err["loc"][0]) for err in exc.errors() if err.get("loc")}
    return [f for f in PROMPTS if f in bad]


def _describe(exc: ValidationError) -> List[str]:
    return [f"  ! {err['loc'][0]}: {err['msg']}" for err in exc.errors() if err.get("loc")]


def collect_form(
    ask: Callable[[str], str] = input,
    attempts: int | None = None,
    out=None,
) -> FitnessForm:
    """Ask every question once, then re-ask only the ones that failed."""
    out = out or sys.stdout
    if attempts is None:
        attempts = settings.max_prompt_attempts
    answers: Dict[str, str] = {}
    pending = list(PROMPTS)

    for attempt in range(1, attempts + 1):
        for field in pending:
            try:
                answers[field] = ask(PROMPTS[field])
            except EOFError:
                raise PromptAbandoned("input closed before all answers were given") from None
        try:
            return FitnessForm.model_validate(answers)
        except ValidationError as e:
            _LOG.debug("attempt %d rejected: %s", attempt, e.errors())
            print("\n".join(_describe(e)), file=out)
            pending = _failed_fields(e)

    raise PromptAbandoned(f"no valid answers after {attempts} attempts")


# ───────────────────────────────
# Output
# ───────────────────────────────
def format_intake(result: EstimateBreakdown, details: bool = False) -> str:
    o = result.output
    lines = ["Your daily recommended intake:"]
    if details:
        lines += [
            f"BMR: {result.bmr:.1f} kcal",
            f"Activity: {result.activity_level} (x{result.activity_factor})",
            f"TDEE: {result.tdee:.1f} kcal",
        ]
    lines += [
        f"Calories: {o.calories} kcal",
        f"Protein: {o.protein} g",
        f"Carbs: {o.carbs} g",
        f"Fats: {o.fats} g",
    ]
    return "\n".join(lines)


def _render(result: EstimateBreakdown, args: Namespace) -> str:
    if args.json:
        payload = result.output.as_dict()
        if args.details:
            payload.update(
                bmr=round(result.bmr, 1),
                activity_level=result.activity_level,
                activity_factor=result.activity_factor,
                tdee=round(result.tdee, 1),
            )
        return json.dumps(payload)
    return format_intake(result, details=args.details)


# ───────────────────────────────
# CLI entrypoint
# ───────────────────────────────
def _parser() -> ArgumentParser:
    ap = ArgumentParser(prog="fitness-calc", description="Daily calorie and macro targets.")
    ap.add_argument("--age", help="age in years")
    ap.add_argument("--height", help="height in inches")
    ap.add_argument("--weight", help="weight in lbs")
    ap.add_argument("--gender", help="male or female")
    ap.add_argument("--activity", help="exercise hours per week")
    ap.add_argument("--csv", metavar="PATH", help="estimate every row of a CSV file")
    ap.add_argument("--json", action="store_true", help="print JSON instead of text")
    ap.add_argument("--details", action="store_true", help="also show BMR, activity and TDEE")
    ap.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return ap


def _run_batch(path: str) -> int:
    df = estimate_frame(load_profiles(path, encoding=settings.csv_encoding), calc)
    print(df.to_string(index=False))
    return 1 if df["error"].notna().any() else 0


def main(argv: Sequence[str] | None = None, ask: Callable[[str], str] = input) -> int:
    load_dotenv()
    args = _parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.csv:
        return _run_batch(args.csv)

    flags = {field: getattr(args, flag) for flag, field in _FLAG_FIELDS.items()}
    if any(v is not None for v in flags.values()):
        if any(v is None for v in flags.values()):
            missing = [f"--{flag}" for flag, field in _FLAG_FIELDS.items() if flags[field] is None]
            print(f"missing {', '.join(missing)}", file=sys.stderr)
            return 2
        try:
            form = FitnessForm.model_validate(flags)
        except ValidationError as e:
            print("\n".join(_describe(e)), file=sys.stderr)
            return 2
    else:
        print("Welcome to the Fitness Calculator!\n")
        try:
            form = collect_form(ask)
        except PromptAbandoned as e:
            print(str(e), file=sys.stderr)
            return 1
        except KeyboardInterrupt:
            print("\ncancelled", file=sys.stderr)
            return 130
        print()

    print(_render(calc.breakdown(form.to_input()), args))
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
