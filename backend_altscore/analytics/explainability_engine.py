"""
Explainability engine: per-feature contributions and human-readable explanations.

Recomputes each feature's contribution (explanation weight x normalized value),
ranks factors, and generates a summary sentence, recommendations, risk factors,
and improvement areas. Output is derived only from the applicant features and
the ScoreResult; neither is mutated. Every rule is fixed and explainable.

The explanation weight table sums to 120 percent, not 100. This is preserved
as-is (EXPLANATION_WEIGHT_TOTAL); contributions are therefore on a 0–120 scale.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from backend_altscore.altscore_logging import get_logger
from backend_altscore.core.exceptions import ComputationError
from backend_altscore.scoring_engine.features import (
    FEATURE_SPECS,
    ApplicantFeatures,
    FeatureName,
    normalize_features,
)
from backend_altscore.scoring_engine.model_config import DEFAULT_SCORING_CONFIG, ClassifierConfig
from backend_altscore.scoring_engine.models import ScoreResult

logger = get_logger(__name__)

EXPLANATION_FAILED = "Explanation generation failed"


class ImpactLevel(str, Enum):
    HIGH_POSITIVE = "High Positive"
    MEDIUM_POSITIVE = "Medium Positive"
    LOW_POSITIVE = "Low Positive"
    NEUTRAL = "Neutral"
    LOW_NEGATIVE = "Low Negative"
    MEDIUM_NEGATIVE = "Medium Negative"
    HIGH_NEGATIVE = "High Negative"


class Priority(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


# Explanation weights in percent. Sums to 120: kept deliberately, see module docstring.
EXPLANATION_WEIGHTS: Mapping[FeatureName, int] = MappingProxyType({
    FeatureName.AGE: 8,
    FeatureName.INCOME: 15,
    FeatureName.EMPLOYMENT_YEARS: 12,
    FeatureName.PHONE_PAYMENT_CONSISTENCY: 9,
    FeatureName.MONTHLY_USAGE_GB: 4,
    FeatureName.NETWORK_STABILITY: 6,
    FeatureName.ELECTRICITY_PAYMENT_HISTORY: 10,
    FeatureName.INTERNET_PAYMENT_CONSISTENCY: 8,
    FeatureName.MONTHLY_PURCHASES: 5,
    FeatureName.RETURN_RATE: 7,
    FeatureName.AVG_TRANSACTION_AMOUNT: 4,
    FeatureName.ADDRESS_STABILITY_YEARS: 8,
    FeatureName.WORK_LOCATION_CONSISTENCY: 6,
    FeatureName.SOCIAL_NETWORK_QUALITY: 5,
    FeatureName.FINANCIAL_APP_USAGE: 3,
    FeatureName.BUDGETING_BEHAVIOR: 10,
})
EXPLANATION_WEIGHT_TOTAL = 120

_GENERIC_TIP = "Focus on improving this area for better credit outcomes"

IMPROVEMENT_TIPS: Mapping[FeatureName, str] = MappingProxyType({
    FeatureName.AGE: _GENERIC_TIP,
    FeatureName.INCOME: "Consider increasing income through career advancement or side hustles",
    FeatureName.EMPLOYMENT_YEARS: "Focus on building tenure at your current position",
    FeatureName.PHONE_PAYMENT_CONSISTENCY: "Set up automatic payments to ensure consistent mobile bill payments",
    FeatureName.MONTHLY_USAGE_GB: _GENERIC_TIP,
    FeatureName.NETWORK_STABILITY: _GENERIC_TIP,
    FeatureName.ELECTRICITY_PAYMENT_HISTORY: "Establish automatic utility bill payments",
    FeatureName.INTERNET_PAYMENT_CONSISTENCY: "Set up automatic internet bill payments",
    FeatureName.MONTHLY_PURCHASES: _GENERIC_TIP,
    FeatureName.RETURN_RATE: "Make more thoughtful purchase decisions to reduce returns",
    FeatureName.AVG_TRANSACTION_AMOUNT: _GENERIC_TIP,
    FeatureName.ADDRESS_STABILITY_YEARS: "Maintain your current residence to build stability history",
    FeatureName.WORK_LOCATION_CONSISTENCY: _GENERIC_TIP,
    FeatureName.SOCIAL_NETWORK_QUALITY: "Build professional networks and maintain positive relationships",
    FeatureName.FINANCIAL_APP_USAGE: "Download and actively use financial management applications",
    FeatureName.BUDGETING_BEHAVIOR: "Use budgeting apps and create a monthly budget plan",
})

for _table in (EXPLANATION_WEIGHTS, IMPROVEMENT_TIPS):
    if set(_table) != set(FeatureName):
        raise RuntimeError("explanation tables must cover every FeatureName")


@dataclass(frozen=True)
class ExplanationConfig:
    """Thresholds and caps for explanation output."""

    impact_thresholds: tuple[float, float, float] = (8.0, 5.0, 2.0)
    """High / medium / low bucket edges, applied symmetrically to negatives."""
    top_n_factors: int = 5
    max_recommendations: int = 5
    max_improvement_areas: int = 3
    improvement_min_weight: int = 8
    improvement_max_contribution: float = 5.0


DEFAULT_EXPLANATION_CONFIG = ExplanationConfig()


# -----------------------------------------------------------------------------
# Output models
# -----------------------------------------------------------------------------


@dataclass(frozen=True)
class FeatureImportanceEntry:
    feature: FeatureName
    weight: int
    """Explanation weight in percent."""
    normalized_value: float
    """Normalized value, rounded to 2 decimals for display."""
    contribution: float
    """weight x normalized value, in percent points (1 decimal)."""
    impact: ImpactLevel
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "weight": self.weight,
            "normalized_value": self.normalized_value,
            "contribution": self.contribution,
            "impact": self.impact.value,
            "description": self.description,
        }


@dataclass(frozen=True)
class Factor:
    feature: FeatureName
    label: str
    contribution: float
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "feature": self.feature.value,
            "human_readable": self.label,
            "contribution": self.contribution,
            "description": self.description,
        }


@dataclass(frozen=True)
class Recommendation:
    category: str
    priority: Priority
    action: str
    impact: str
    timeframe: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "priority": self.priority.value,
            "action": self.action,
            "impact": self.impact,
            "timeframe": self.timeframe,
        }


@dataclass(frozen=True)
class RiskFactor:
    factor: str
    severity: Priority
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {"factor": self.factor, "severity": self.severity.value, "description": self.description}


@dataclass(frozen=True)
class ImprovementArea:
    feature: FeatureName
    area: str
    current_value: float
    potential_impact: int
    recommendation: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "feature": self.feature.value,
            "area": self.area,
            "current_value": self.current_value,
            "potential_impact": self.potential_impact,
            "recommendation": self.recommendation,
        }


@dataclass(frozen=True)
class Explanation:
    summary: str
    feature_importance: Mapping[FeatureName, FeatureImportanceEntry]
    top_positive_factors: list[Factor] = field(default_factory=list)
    top_negative_factors: list[Factor] = field(default_factory=list)
    recommendations: list[Recommendation] = field(default_factory=list)
    risk_factors: list[RiskFactor] = field(default_factory=list)
    improvement_areas: list[ImprovementArea] = field(default_factory=list)

    def feature_importance_dict(self) -> dict[str, dict[str, Any]]:
        return {f.value: e.to_dict() for f, e in self.feature_importance.items()}

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary,
            "feature_importance": self.feature_importance_dict(),
            "top_positive_factors": [f.to_dict() for f in self.top_positive_factors],
            "top_negative_factors": [f.to_dict() for f in self.top_negative_factors],
            "recommendations": [r.to_dict() for r in self.recommendations],
            "risk_factors": [r.to_dict() for r in self.risk_factors],
            "improvement_areas": [a.to_dict() for a in self.improvement_areas],
        }


# -----------------------------------------------------------------------------
# Raw-input rules
# -----------------------------------------------------------------------------

_Rule = Callable[[ApplicantFeatures], bool]

RECOMMENDATION_RULES: tuple[tuple[_Rule, Recommendation], ...] = (
    (
        lambda a: a.income < 40_000,
        Recommendation(
            "Income", Priority.HIGH,
            "Focus on increasing income through career development or additional income sources",
            "High positive impact on credit score", "Long-term (6-12 months)",
        ),
    ),
    (
        lambda a: a.phone_payment_consistency < 8 or a.electricity_payment_history < 8,
        Recommendation(
            "Payment History", Priority.HIGH,
            "Set up automatic payments for all bills to ensure 100% on-time payment rate",
            "High positive impact on credit score", "Immediate (within 1 month)",
        ),
    ),
    (
        lambda a: a.employment_years < 2,
        Recommendation(
            "Employment Stability", Priority.MEDIUM,
            "Focus on building tenure at current job or demonstrate consistent employment history",
            "Medium positive impact on credit score", "Long-term (12+ months)",
        ),
    ),
    (
        lambda a: a.financial_app_usage < 5,
        Recommendation(
            "Financial Management", Priority.MEDIUM,
            "Use budgeting and financial tracking apps to demonstrate financial responsibility",
            "Medium positive impact on credit score", "Short-term (1-3 months)",
        ),
    ),
    (
        lambda a: a.budgeting_behavior < 7,
        Recommendation(
            "Budgeting", Priority.HIGH,
            "Implement consistent budgeting practices and track spending patterns",
            "High positive impact on credit score", "Short-term (1-3 months)",
        ),
    ),
    (
        lambda a: a.return_rate > 15,
        Recommendation(
            "Purchase Decisions", Priority.LOW,
            "Make more thoughtful purchase decisions to reduce return rate",
            "Low positive impact on credit score", "Short-term (1-3 months)",
        ),
    ),
    (
        lambda a: a.address_stability_years < 2,
        Recommendation(
            "Stability", Priority.MEDIUM,
            "Maintain current address to build residential stability history",
            "Medium positive impact on credit score", "Long-term (12+ months)",
        ),
    ),
)

RISK_FACTOR_RULES: tuple[tuple[_Rule, RiskFactor], ...] = (
    (
        lambda a: a.income < 25_000,
        RiskFactor("Low Income", Priority.HIGH, "Income below typical lending thresholds may limit access to credit"),
    ),
    (
        lambda a: a.employment_years < 1,
        RiskFactor("Employment Instability", Priority.MEDIUM, "Short employment history may indicate income instability"),
    ),
    (
        lambda a: a.return_rate > 25,
        RiskFactor("High Return Rate", Priority.LOW, "High product return rate may indicate poor decision-making"),
    ),
)


# -----------------------------------------------------------------------------
# Engine
# -----------------------------------------------------------------------------


def get_impact_level(contribution: float, config: ExplanationConfig | None = None) -> ImpactLevel:
    """Bucket a contribution (percent points) into seven impact levels."""
    cfg = config or DEFAULT_EXPLANATION_CONFIG
    high, medium, low = cfg.impact_thresholds
    if contribution >= high:
        return ImpactLevel.HIGH_POSITIVE
    if contribution >= medium:
        return ImpactLevel.MEDIUM_POSITIVE
    if contribution >= low:
        return ImpactLevel.LOW_POSITIVE
    if contribution >= -low:
        return ImpactLevel.NEUTRAL
    if contribution >= -medium:
        return ImpactLevel.LOW_NEGATIVE
    if contribution >= -high:
        return ImpactLevel.MEDIUM_NEGATIVE
    return ImpactLevel.HIGH_NEGATIVE


def calculate_feature_importance(
    features: ApplicantFeatures,
    config: ExplanationConfig | None = None,
) -> dict[FeatureName, FeatureImportanceEntry]:
    """Contribution of every feature, in weight-table order."""
    normalized = normalize_features(features)
    importance: dict[FeatureName, FeatureImportanceEntry] = {}
    for feature, weight in EXPLANATION_WEIGHTS.items():
        value = normalized[feature]
        contribution = round(weight * value, 1)
        importance[feature] = FeatureImportanceEntry(
            feature=feature,
            weight=weight,
            normalized_value=round(value, 2),
            contribution=contribution,
            impact=get_impact_level(contribution, config),
            description=FEATURE_SPECS[feature].description,
        )
    return importance


def _to_factor(entry: FeatureImportanceEntry) -> Factor:
    return Factor(
        feature=entry.feature,
        label=FEATURE_SPECS[entry.feature].label,
        contribution=entry.contribution,
        description=entry.description,
    )


def get_top_factors(
    importance: Mapping[FeatureName, FeatureImportanceEntry],
    top_n: int = 5,
) -> tuple[list[Factor], list[Factor]]:
    """
    Rank by absolute contribution (descending) and split by sign.

    Returns (positive, negative), each at most top_n long. Zero contributions
    appear in neither list.
    """
    ranked = sorted(importance.values(), key=lambda e: abs(e.contribution), reverse=True)
    positive = [_to_factor(e) for e in ranked if e.contribution > 0][:top_n]
    negative = [_to_factor(e) for e in ranked if e.contribution < 0][:top_n]
    return positive, negative


def _encouragement(score: int, classifier: ClassifierConfig | None = None) -> str:
    cfg = classifier or DEFAULT_SCORING_CONFIG.classifier
    if score >= cfg.excellent_min:
        return "Excellent score! You qualify for the best rates and terms."
    if score >= cfg.good_min:
        return "Good score! You should qualify for competitive rates."
    if score >= cfg.fair_min:
        return "Fair score. Focus on improvement areas to access better rates."
    return "There's significant room for improvement. Focus on the recommended areas below."


def generate_summary(
    result: ScoreResult,
    positive: list[Factor],
    negative: list[Factor],
    classifier: ClassifierConfig | None = None,
) -> str:
    """Plain-language summary; the closing line follows the classifier's score bands."""
    summary = f'Your credit score of {result.score} places you in the "{result.risk_category.value}" category. '
    if positive:
        top = positive[0]
        summary += (
            f"Your strongest factor is {top.label}, which positively contributed "
            f"{top.contribution:.1f}% to your score. "
        )
    if negative:
        weakest = negative[0]
        summary += (
            f"The area with the most room for improvement is {weakest.label}, which reduced "
            f"your score by {abs(weakest.contribution):.1f}%. "
        )
    return summary + _encouragement(result.score, classifier)


def generate_recommendations(
    features: ApplicantFeatures,
    config: ExplanationConfig | None = None,
) -> list[Recommendation]:
    cfg = config or DEFAULT_EXPLANATION_CONFIG
    matched = [rec for rule, rec in RECOMMENDATION_RULES if rule(features)]
    return matched[: cfg.max_recommendations]


def identify_risk_factors(features: ApplicantFeatures) -> list[RiskFactor]:
    return [factor for rule, factor in RISK_FACTOR_RULES if rule(features)]


def identify_improvement_areas(
    importance: Mapping[FeatureName, FeatureImportanceEntry],
    config: ExplanationConfig | None = None,
) -> list[ImprovementArea]:
    """High-weight features that contribute little, in weight-table order."""
    cfg = config or DEFAULT_EXPLANATION_CONFIG
    areas = [
        ImprovementArea(
            feature=entry.feature,
            area=FEATURE_SPECS[entry.feature].label,
            current_value=entry.normalized_value,
            potential_impact=entry.weight,
            recommendation=IMPROVEMENT_TIPS[entry.feature],
        )
        for entry in importance.values()
        if entry.weight >= cfg.improvement_min_weight and entry.contribution < cfg.improvement_max_contribution
    ]
    return areas[: cfg.max_improvement_areas]


def explain(
    features: ApplicantFeatures,
    result: ScoreResult,
    config: ExplanationConfig | None = None,
    *,
    classifier: ClassifierConfig | None = None,
) -> Explanation:
    """
    Build the full explanation for one scored applicant.

    classifier sets the score bands used by the summary; pass the config that
    scored the applicant when it differs from the default.

    Raises:
        ComputationError: arithmetic failure while deriving contributions.
    """
    cfg = config or DEFAULT_EXPLANATION_CONFIG
    try:
        importance = calculate_feature_importance(features, cfg)
        positive, negative = get_top_factors(importance, cfg.top_n_factors)
        explanation = Explanation(
            summary=generate_summary(result, positive, negative, classifier),
            feature_importance=MappingProxyType(importance),
            top_positive_factors=positive,
            top_negative_factors=negative,
            recommendations=generate_recommendations(features, cfg),
            risk_factors=identify_risk_factors(features),
            improvement_areas=identify_improvement_areas(importance, cfg),
        )
    except (ArithmeticError, ValueError, TypeError) as e:
        logger.warning("explanation_failed", error=str(e))
        raise ComputationError(EXPLANATION_FAILED, detail=str(e)) from e

    logger.debug(
        "explanation_generated",
        score=result.score,
        top_positive=[f.feature.value for f in positive],
        recommendations=len(explanation.recommendations),
        improvement_areas=len(explanation.improvement_areas),
    )
    return explanation
