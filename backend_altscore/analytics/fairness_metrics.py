"""
Fairness statistics over labeled outcome cohorts.

General-purpose group-fairness measures, independent of any single request:
approval rate, true/false positive rate, demographic parity, equalized odds,
and equal opportunity. A cohort is a sequence of CohortRecord (or mappings
with the same keys); statistics are computed with pandas.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Union

import pandas as pd

from backend_altscore.core.exceptions import FairnessInputError

COHORT_COLUMNS = ["approved", "actual_outcome", "predicted"]
OUTCOME_VALUES = {"good", "bad"}

class Outcome(str, Enum):
    GOOD = "good"
    BAD = "bad"

@dataclass(frozen=True)
class CohortRecord:
    approved: bool
    actual_outcome: Outcome
    predicted: Outcome

CohortInput = Iterable[Union[CohortRecord, Mapping[str, Any]]]

def _validated(df: pd.DataFrame) -> pd.DataFrame:
    if df.empty:
        raise FairnessInputError("Cohort is empty")
    missing = [c for c in COHORT_COLUMNS if c not in df.columns]
    if missing:
        raise FairnessInputError("Cohort records missing columns", detail=", ".join(missing))
    df = df[COHORT_COLUMNS].copy()
    nulls = [c for c in COHORT_COLUMNS if df[c].isna().any()]
    if nulls:
        raise FairnessInputError("Cohort records have missing values", detail=", ".join(nulls))
    approved = df["approved"].infer_objects()
    if not pd.api.types.is_bool_dtype(approved):
        raise FairnessInputError("approved must be a boolean", detail=str(approved.dtype))
    df["approved"] = approved.astype(bool)
    for col in ("actual_outcome", "predicted"):
        df[col] = df[col].map(lambda v: v.value if isinstance(v, Outcome) else str(v).lower())
        unknown = sorted(set(df[col]) - OUTCOME_VALUES)
        if unknown:
            raise FairnessInputError(f"{col} must be good or bad", detail=", ".join(unknown))
    return df

def cohort_frame(records: CohortInput | pd.DataFrame) -> pd.DataFrame:
    """
    Build a validated cohort DataFrame (approved, actual_outcome, predicted).

    approved must hold real booleans; outcome columns are normalized to plain
    strings and must be "good" or "bad" (case-insensitive).

    Raises:
        FairnessInputError: the cohort is empty, a record lacks a column or a
            value, approved is not boolean, or an outcome is unknown.
    """
    if isinstance(records, pd.DataFrame):
        return _validated(records)
    rows = [asdict(r) if isinstance(r, CohortRecord) else dict(r) for r in records]
    return _validated(pd.DataFrame(rows))

def approval_rate(cohort: CohortInput | pd.DataFrame) -> float:
    """Share of approved records. Raises FairnessInputError on an empty cohort."""
    df = cohort_frame(cohort)
    return float(df["approved"].mean())

def _conditional_good_rate(df: pd.DataFrame, actual: Outcome) -> float:
    subset = df[df["actual_outcome"] == actual.value]
    if subset.empty:
        return 0.0
    return float((subset["predicted"] == Outcome.GOOD.value).mean())

def true_positive_rate(cohort: CohortInput | pd.DataFrame) -> float:
    """Predicted good among actually good; 0.0 when no actual positives."""
    return _conditional_good_rate(cohort_frame(cohort), Outcome.GOOD)

def false_positive_rate(cohort: CohortInput | pd.DataFrame) -> float:
    """Predicted good among actually bad; 0.0 when no actual negatives."""
    return _conditional_good_rate(cohort_frame(cohort), Outcome.BAD)

def demographic_parity(group_a: CohortInput | pd.DataFrame, group_b: CohortInput | pd.DataFrame) -> float:
    """|approval_rate(A) - approval_rate(B)|."""
    return abs(approval_rate(group_a) - approval_rate(group_b))

def equal_opportunity(group_a: CohortInput | pd.DataFrame, group_b: CohortInput | pd.DataFrame) -> float:
    """|TPR(A) - TPR(B)|."""
    return abs(true_positive_rate(group_a) - true_positive_rate(group_b))

def equalized_odds(group_a: CohortInput | pd.DataFrame, group_b: CohortInput | pd.DataFrame) -> float:
    """max(|TPR(A) - TPR(B)|, |FPR(A) - FPR(B)|)."""
    a = cohort_frame(group_a)
    b = cohort_frame(group_b)
    tpr_gap = abs(true_positive_rate(a) - true_positive_rate(b))
    fpr_gap = abs(false_positive_rate(a) - false_positive_rate(b))
    return max(tpr_gap, fpr_gap)

def group_fairness_summary(
    group_a: CohortInput | pd.DataFrame,
    group_b: CohortInput | pd.DataFrame,
) -> dict[str, float]:
    """All pairwise statistics for two cohorts, rounded to 4 decimals."""
    a = cohort_frame(group_a)
    b = cohort_frame(group_b)
    return {
        "approval_rate_a": round(approval_rate(a), 4),
        "approval_rate_b": round(approval_rate(b), 4),
        "demographic_parity": round(demographic_parity(a, b), 4),
        "equalized_odds": round(equalized_odds(a, b), 4),
        "equal_opportunity": round(equal_opportunity(a, b), 4),
    }
