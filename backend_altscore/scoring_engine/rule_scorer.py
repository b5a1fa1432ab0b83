"""
Rule-based scorer: fixed, tree-like decision rules over normalized features.

Five additive rules (payment consistency, income/employment stability, age,
e-commerce behavior, location stability). No hidden state; the same
NormalizedFeatures always produce the same points. Output is unbounded
(typically 0–400) and is blended with the neural scorer downstream.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from backend_altscore.scoring_engine.features import FeatureName as F
from backend_altscore.scoring_engine.features import NormalizedFeatures
from backend_altscore.scoring_engine.model_config import (
    DEFAULT_SCORING_CONFIG,
    RuleScorerConfig,
)


@dataclass(frozen=True)
class RuleBreakdown:
    """Points awarded by each rule; total is their sum."""

    payment: float
    stability: float
    age: float
    commerce: float
    location: float

    @property
    def total(self) -> float:
        return self.payment + self.stability + self.age + self.commerce + self.location

    def to_dict(self) -> dict[str, Any]:
        return {
            "payment": round(self.payment, 2),
            "stability": round(self.stability, 2),
            "age": round(self.age, 2),
            "commerce": round(self.commerce, 2),
            "location": round(self.location, 2),
            "total": round(self.total, 2),
        }


def payment_composite(n: NormalizedFeatures, cfg: RuleScorerConfig) -> float:
    return (
        n[F.PHONE_PAYMENT_CONSISTENCY] * cfg.payment_phone_weight
        + n[F.ELECTRICITY_PAYMENT_HISTORY] * cfg.payment_electricity_weight
        + n[F.INTERNET_PAYMENT_CONSISTENCY] * cfg.payment_internet_weight
    )


def _payment_points(n: NormalizedFeatures, cfg: RuleScorerConfig) -> float:
    """Payment consistency is the strongest rule: tiered, with a penalty floor."""
    p = payment_composite(n, cfg)
    for bound, points in cfg.payment_tiers:
        if p > bound:
            return points
    return cfg.payment_floor_points


def _stability_points(n: NormalizedFeatures, cfg: RuleScorerConfig) -> float:
    s = n[F.INCOME] * cfg.stability_income_weight + n[F.EMPLOYMENT_YEARS] * cfg.stability_employment_weight
    return s * cfg.stability_points


def _age_points(n: NormalizedFeatures, cfg: RuleScorerConfig) -> float:
    # Bonuses stack
    return sum(points for bound, points in cfg.age_bonuses if n[F.AGE] > bound)


def _commerce_points(n: NormalizedFeatures, cfg: RuleScorerConfig) -> float:
    c = (
        n[F.RETURN_RATE] * cfg.commerce_return_weight
        + (1 - abs(n[F.MONTHLY_PURCHASES] - cfg.purchases_sweet_spot)) * cfg.commerce_purchases_weight
        + min(n[F.AVG_TRANSACTION_AMOUNT], cfg.avg_amount_cap) * cfg.commerce_amount_weight
    )
    return c * cfg.commerce_points


def _location_points(n: NormalizedFeatures, cfg: RuleScorerConfig) -> float:
    loc = (
        n[F.ADDRESS_STABILITY_YEARS] * cfg.location_address_weight
        + n[F.WORK_LOCATION_CONSISTENCY] * cfg.location_work_weight
    )
    return loc * cfg.location_points


def rule_based_breakdown(
    normalized: NormalizedFeatures,
    config: RuleScorerConfig | None = None,
) -> RuleBreakdown:
    """Evaluate each rule independently and return the per-rule points."""
    cfg = config or DEFAULT_SCORING_CONFIG.rule
    return RuleBreakdown(
        payment=_payment_points(normalized, cfg),
        stability=_stability_points(normalized, cfg),
        age=_age_points(normalized, cfg),
        commerce=_commerce_points(normalized, cfg),
        location=_location_points(normalized, cfg),
    )


def rule_based_score(
    normalized: NormalizedFeatures,
    config: RuleScorerConfig | None = None,
) -> float:
    """Sum of the five rule contributions. Unbounded; typically 0–400."""
    return rule_based_breakdown(normalized, config).total
