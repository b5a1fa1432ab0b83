"""
Applicant feature catalog, input validation, and normalization.

Defines the sixteen alternative-data signals (FeatureName), their documented
input ranges, and the fixed rule that maps each raw value to [0, 1]. No scoring
logic; NormalizedFeatures output feeds the rule-based and neural scorers and
the explainability engine.

Normalization is a pure function. Malformed numeric input that bypassed
validation (NaN, Infinity) is propagated as-is, never raised here.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any

import numpy as np
import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator

from backend_altscore.altscore_logging import get_logger
from backend_altscore.core.exceptions import FieldError, ValidationError

logger = get_logger(__name__)


class FeatureName(str, Enum):
    AGE = "age"
    INCOME = "income"
    EMPLOYMENT_YEARS = "employment_years"
    PHONE_PAYMENT_CONSISTENCY = "phone_payment_consistency"
    MONTHLY_USAGE_GB = "monthly_usage_gb"
    NETWORK_STABILITY = "network_stability"
    ELECTRICITY_PAYMENT_HISTORY = "electricity_payment_history"
    INTERNET_PAYMENT_CONSISTENCY = "internet_payment_consistency"
    MONTHLY_PURCHASES = "monthly_purchases"
    RETURN_RATE = "return_rate"
    AVG_TRANSACTION_AMOUNT = "avg_transaction_amount"
    ADDRESS_STABILITY_YEARS = "address_stability_years"
    WORK_LOCATION_CONSISTENCY = "work_location_consistency"
    SOCIAL_NETWORK_QUALITY = "social_network_quality"
    FINANCIAL_APP_USAGE = "financial_app_usage"
    BUDGETING_BEHAVIOR = "budgeting_behavior"


# Canonical order for vectors, reports, and model metadata
FEATURE_ORDER: tuple[FeatureName, ...] = tuple(FeatureName)


class NormalizationRule(str, Enum):
    LINEAR_RANGE = "linear_range"
    """clamp((x - lo) / (hi - lo), 0, 1)"""
    CAPPED_RATIO = "capped_ratio"
    """min(x / cap, 1)"""
    SCALE_1_10 = "scale_1_10"
    """(x - 1) / 9"""
    INVERTED_PERCENT = "inverted_percent"
    """1 - x / 100; lower raw value normalizes higher"""


@dataclass(frozen=True)
class FeatureSpec:
    """Catalog entry for one applicant signal."""

    name: FeatureName
    label: str
    """Human-readable name used in explanations."""
    description: str
    min_value: float
    max_value: float
    """Documented input domain; enforced by ApplicantFeatures."""
    rule: NormalizationRule
    lo: float = 0.0
    hi: float = 1.0
    """Rule parameters: (lo, hi) for LINEAR_RANGE; hi is the cap for CAPPED_RATIO."""


_SPECS = (
    FeatureSpec(
        FeatureName.AGE, "Age",
        "Age indicates experience and stability in financial decisions",
        18, 100, NormalizationRule.LINEAR_RANGE, lo=18, hi=65,
    ),
    FeatureSpec(
        FeatureName.INCOME, "Monthly Income",
        "Higher income suggests greater ability to repay debts",
        0, 1_000_000, NormalizationRule.CAPPED_RATIO, hi=100_000,
    ),
    FeatureSpec(
        FeatureName.EMPLOYMENT_YEARS, "Employment Stability",
        "Employment stability indicates reliable income source",
        0, 50, NormalizationRule.CAPPED_RATIO, hi=20,
    ),
    FeatureSpec(
        FeatureName.PHONE_PAYMENT_CONSISTENCY, "Mobile Payment History",
        "Consistent mobile bill payments show payment discipline",
        1, 10, NormalizationRule.SCALE_1_10,
    ),
    FeatureSpec(
        FeatureName.MONTHLY_USAGE_GB, "Data Usage Pattern",
        "Data usage patterns indicate digital engagement and lifestyle",
        0, 1000, NormalizationRule.CAPPED_RATIO, hi=50,
    ),
    FeatureSpec(
        FeatureName.NETWORK_STABILITY, "Network Quality",
        "Network quality in area suggests socioeconomic status",
        1, 10, NormalizationRule.SCALE_1_10,
    ),
    FeatureSpec(
        FeatureName.ELECTRICITY_PAYMENT_HISTORY, "Utility Payment History",
        "Utility payment history is a strong predictor of creditworthiness",
        1, 10, NormalizationRule.SCALE_1_10,
    ),
    FeatureSpec(
        FeatureName.INTERNET_PAYMENT_CONSISTENCY, "Internet Bill Payments",
        "Internet bill payments indicate modern lifestyle and payment habits",
        1, 10, NormalizationRule.SCALE_1_10,
    ),
    FeatureSpec(
        FeatureName.MONTHLY_PURCHASES, "Online Shopping Frequency",
        "Online purchasing behavior shows digital commerce engagement",
        0, 1000, NormalizationRule.CAPPED_RATIO, hi=50,
    ),
    FeatureSpec(
        FeatureName.RETURN_RATE, "Return Rate",
        "Lower return rates indicate better purchase decisions",
        0, 100, NormalizationRule.INVERTED_PERCENT,
    ),
    FeatureSpec(
        FeatureName.AVG_TRANSACTION_AMOUNT, "Average Transaction Size",
        "Transaction patterns reveal spending habits and financial behavior",
        0, 10_000, NormalizationRule.CAPPED_RATIO, hi=500,
    ),
    FeatureSpec(
        FeatureName.ADDRESS_STABILITY_YEARS, "Residential Stability",
        "Residential stability indicates life stability and lower risk",
        0, 50, NormalizationRule.CAPPED_RATIO, hi=10,
    ),
    FeatureSpec(
        FeatureName.WORK_LOCATION_CONSISTENCY, "Work Location Stability",
        "Consistent work location suggests employment stability",
        1, 10, NormalizationRule.SCALE_1_10,
    ),
    FeatureSpec(
        FeatureName.SOCIAL_NETWORK_QUALITY, "Social Network Quality",
        "Social connections can indicate support system and stability",
        1, 10, NormalizationRule.SCALE_1_10,
    ),
    FeatureSpec(
        FeatureName.FINANCIAL_APP_USAGE, "Financial App Usage",
        "Financial app usage shows proactive financial management",
        1, 10, NormalizationRule.SCALE_1_10,
    ),
    FeatureSpec(
        FeatureName.BUDGETING_BEHAVIOR, "Budgeting Habits",
        "Good budgeting behavior indicates financial responsibility",
        1, 10, NormalizationRule.SCALE_1_10,
    ),
)

FEATURE_SPECS: Mapping[FeatureName, FeatureSpec] = MappingProxyType({s.name: s for s in _SPECS})

if set(FEATURE_SPECS) != set(FeatureName):
    raise RuntimeError("FEATURE_SPECS must cover every FeatureName")


def get_feature_names() -> list[str]:
    """Return ordered feature names (for model metadata and inspection)."""
    return [f.value for f in FEATURE_ORDER]


# -----------------------------------------------------------------------------
# Input model
# -----------------------------------------------------------------------------


class ApplicantFeatures(BaseModel):
    """
    Raw applicant signals. All fields required and numeric; ranges match FEATURE_SPECS.

    Immutable; construct through validate_applicant() to get domain ValidationError.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", allow_inf_nan=False)

    # Personal
    age: float = Field(..., ge=18, le=100)
    income: float = Field(..., ge=0, le=1_000_000)
    employment_years: float = Field(..., ge=0, le=50)

    # Mobile / telecom
    phone_payment_consistency: float = Field(..., ge=1, le=10)
    monthly_usage_gb: float = Field(..., ge=0, le=1000)
    network_stability: float = Field(..., ge=1, le=10)

    # Utility payments
    electricity_payment_history: float = Field(..., ge=1, le=10)
    internet_payment_consistency: float = Field(..., ge=1, le=10)

    # E-commerce behavior
    monthly_purchases: float = Field(..., ge=0, le=1000)
    return_rate: float = Field(..., ge=0, le=100)
    avg_transaction_amount: float = Field(..., ge=0, le=10_000)

    # Geolocation stability
    address_stability_years: float = Field(..., ge=0, le=50)
    work_location_consistency: float = Field(..., ge=1, le=10)

    # Social / digital footprint
    social_network_quality: float = Field(..., ge=1, le=10)
    financial_app_usage: float = Field(..., ge=1, le=10)
    budgeting_behavior: float = Field(..., ge=1, le=10)

    @field_validator("*", mode="before")
    @classmethod
    def _reject_booleans(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("must be a number")
        return value

    def value(self, name: FeatureName) -> float:
        return getattr(self, name.value)


if set(ApplicantFeatures.model_fields) != {f.value for f in FeatureName}:
    raise RuntimeError("ApplicantFeatures fields must match FeatureName")


def _field_message(err: dict[str, Any]) -> str:
    """Map a pydantic error entry to a short per-field message."""
    etype = err.get("type", "")
    ctx = err.get("ctx") or {}
    if etype == "missing":
        return "is required"
    if etype == "greater_than_equal":
        return f"must be greater than or equal to {ctx.get('ge')}"
    if etype == "less_than_equal":
        return f"must be less than or equal to {ctx.get('le')}"
    if etype in ("float_parsing", "float_type", "finite_number"):
        return "must be a number"
    msg = str(err.get("msg", "is invalid"))
    return msg.removeprefix("Value error, ")


def validate_applicant(raw: Mapping[str, Any] | ApplicantFeatures) -> ApplicantFeatures:
    """
    Validate raw input into ApplicantFeatures.

    Raises ValidationError with one FieldError per failing field; never reaches
    the scoring pipeline with bad input.
    """
    if isinstance(raw, ApplicantFeatures):
        return raw
    if not isinstance(raw, Mapping):
        raise ValidationError([FieldError("body", "must be an object of applicant features")])
    try:
        return ApplicantFeatures.model_validate(dict(raw))
    except pydantic.ValidationError as e:
        errors = [
            FieldError(".".join(str(p) for p in err.get("loc", ())) or "body", _field_message(err))
            for err in e.errors()
        ]
        logger.debug("applicant_validation_failed", fields=[fe.field for fe in errors])
        raise ValidationError(errors) from None


# -----------------------------------------------------------------------------
# Normalization
# -----------------------------------------------------------------------------


class NormalizedFeatures(Mapping):
    """
    Immutable FeatureName -> [0, 1] mapping derived from ApplicantFeatures.

    Accepts FeatureName or its string value as key. Iterates in FEATURE_ORDER.
    """

    __slots__ = ("_values",)

    def __init__(self, values: Mapping[FeatureName, float]) -> None:
        missing = [f.value for f in FEATURE_ORDER if f not in values]
        if missing:
            raise ValueError(f"normalized features missing: {missing}")
        self._values = MappingProxyType({f: float(values[f]) for f in FEATURE_ORDER})

    def __getitem__(self, key: FeatureName | str) -> float:
        return self._values[FeatureName(key)]

    def __contains__(self, key: object) -> bool:
        try:
            return FeatureName(key) in self._values
        except ValueError:
            return False

    def __iter__(self) -> Iterator[FeatureName]:
        return iter(FEATURE_ORDER)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        inner = ", ".join(f"{k.value}={v:.4f}" for k, v in self._values.items())
        return f"NormalizedFeatures({inner})"

    def as_array(self) -> np.ndarray:
        """Return a float64 vector in FEATURE_ORDER."""
        return np.array([self._values[f] for f in FEATURE_ORDER], dtype=np.float64)

    def to_dict(self) -> dict[str, float]:
        return {k.value: v for k, v in self._values.items()}


def normalize_value(spec: FeatureSpec, x: float) -> float:
    """Apply the feature's fixed normalization rule to one raw value."""
    if spec.rule is NormalizationRule.LINEAR_RANGE:
        return min(max((x - spec.lo) / (spec.hi - spec.lo), 0.0), 1.0)
    if spec.rule is NormalizationRule.CAPPED_RATIO:
        return min(x / spec.hi, 1.0)
    if spec.rule is NormalizationRule.SCALE_1_10:
        return (x - 1) / 9
    return 1 - x / 100


def normalize_features(features: ApplicantFeatures) -> NormalizedFeatures:
    """
    Map each of the 16 raw signals to [0, 1] with its fixed rule.

    Pure: the same input always yields an identical mapping.
    """
    return NormalizedFeatures(
        {name: normalize_value(spec, features.value(name)) for name, spec in FEATURE_SPECS.items()}
    )
