"""
core/batch.py
────────────────────────────────────────────────────────────────────────
Run the estimator over a whole table of profiles.

Expected columns (CSV header or DataFrame):

    age · height_in · weight_lbs · gender · activity_hours

Each row gets `calories · protein_g · carbs_g · fat_g` plus an `error`
column; rows the estimator rejects keep <NA> targets and the reason.
Numeric cells are parsed one by one, so a bad cell only fails its own row.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Tuple

import pandas as pd

from core.fitness_calc import (
    FitnessEstimator,
    FitnessInput,
    FitnessInputError,
    InvalidNumericInput,
)

_LOG = logging.getLogger(__name__)

INPUT_COLUMNS = ["age", "height_in", "weight_lbs", "gender", "activity_hours"]
NUMERIC_COLUMNS = ["age", "height_in", "weight_lbs", "activity_hours"]
TARGET_COLUMNS = ["calories", "protein_g", "carbs_g", "fat_g"]


def load_profiles(path: str | Path, encoding: str = "utf-8") -> pd.DataFrame:
    df = pd.read_csv(path, encoding=encoding, skipinitialspace=True)
    df.columns = [str(c).strip().lower() for c in df.columns]
    missing = [c for c in INPUT_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"{path}: missing column(s) {', '.join(missing)}")
    return df


def _coerce_numeric(df: pd.DataFrame) -> Tuple[pd.DataFrame, Dict[int, Tuple[str, Any]]]:
    """Numeric columns → numbers cell by cell; remember the first bad cell per row."""
    work = df.copy()
    unparsed: Dict[int, Tuple[str, Any]] = {}
    for col in NUMERIC_COLUMNS:
        raw = work[col]
        parsed = pd.to_numeric(raw, errors="coerce")
        bad = (parsed.isna() & raw.notna()).to_numpy()
        for pos in bad.nonzero()[0]:
            unparsed.setdefault(int(pos), (col, raw.iloc[pos]))
        work[col] = parsed
    return work, unparsed


def _row_targets(calc: FitnessEstimator, row: Dict[str, Any]) -> Dict[str, Any]:
    inp = FitnessInput(
        age=row["age"],
        height_inches=row["height_in"],
        weight_lbs=row["weight_lbs"],
        gender=row["gender"],
        activity_hours=row["activity_hours"],
    )
    out = calc.estimate(inp)
    return {
        "calories": out.calories,
        "protein_g": out.protein,
        "carbs_g": out.carbs,
        "fat_g": out.fats,
        "error": None,
    }


def estimate_frame(df: pd.DataFrame, calc: FitnessEstimator | None = None) -> pd.DataFrame:
    """Return a copy of `df` with the four targets (and `error`) appended."""
    calc = calc or FitnessEstimator()
    missing = [c for c in INPUT_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"missing column(s) {', '.join(missing)}")

    work, unparsed = _coerce_numeric(df[INPUT_COLUMNS])

    results: List[Dict[str, Any]] = []
    for pos, (idx, row) in enumerate(zip(df.index, work.to_dict("records"))):
        try:
            if pos in unparsed:
                col, raw = unparsed[pos]
                raise InvalidNumericInput(col, raw, "must be a number")
            results.append(_row_targets(calc, row))
        except FitnessInputError as e:
            _LOG.info("row %s rejected: %s", idx, e)
            results.append({**dict.fromkeys(TARGET_COLUMNS), "error": str(e)})

    targets = pd.DataFrame(results, index=df.index, columns=TARGET_COLUMNS + ["error"])
    for col in TARGET_COLUMNS:
        targets[col] = targets[col].astype("Int64")
    return pd.concat([df.drop(columns=TARGET_COLUMNS + ["error"], errors="ignore"), targets], axis=1)
