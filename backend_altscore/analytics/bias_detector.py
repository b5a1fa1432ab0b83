"""
Bias analyzer: per-request fairness risk flags and audit report.

Responsibilities:
- Flag fairness risk factors from raw applicant input (age, income, digital
  footprint, residential mobility).
- Attach the baseline fairness metrics. These are fixed configuration values
  (FairnessBaseline), not measured per request.
- Turn a BiasReport into an audit report: overall assessment, compliance
  status, and action items.

Computed fairness statistics over labeled cohorts live in fairness_metrics.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from backend_altscore.altscore_logging import get_logger
from backend_altscore.core.exceptions import ComputationError
from backend_altscore.scoring_engine.features import ApplicantFeatures
from backend_altscore.scoring_engine.models import ScoreResult

logger = get_logger(__name__)

BIAS_ANALYSIS_FAILED = "Bias analysis failed"


class BiasSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class BiasRiskType(str, Enum):
    AGE_DISCRIMINATION = "age_discrimination"
    INCOME_BIAS = "income_bias"
    DIGITAL_DIVIDE = "digital_divide"
    MOBILITY_BIAS = "mobility_bias"


class AssessmentLevel(str, Enum):
    LOW_RISK = "Low Risk"
    MEDIUM_RISK = "Medium Risk"
    HIGH_RISK = "High Risk"


@dataclass(frozen=True)
class FairnessBaseline:
    """
    Baseline fairness metrics attached to every BiasReport.

    Placeholders from the model card, NOT computed from request data.
    Use fairness_metrics for statistics over real labeled cohorts.
    """

    overall_fairness_score: float = 0.95
    demographic_parity: float = 0.02
    equalized_odds: float = 0.03
    equal_opportunity: float = 0.025
    calibration: float = 0.98


@dataclass(frozen=True)
class BiasThresholds:
    young_age: float = 25
    low_income: float = 30_000
    low_digital_score: float = 3
    low_address_years: float = 1
    # Report-layer limits
    max_demographic_parity: float = 0.05
    max_equalized_odds: float = 0.05
    low_risk_fairness: float = 0.95
    medium_risk_fairness: float = 0.90
    fcra_min_fairness: float = 0.90


DEFAULT_FAIRNESS_BASELINE = FairnessBaseline()
DEFAULT_BIAS_THRESHOLDS = BiasThresholds()


@dataclass(frozen=True)
class BiasRiskFactor:
    type: BiasRiskType
    severity: BiasSeverity
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "severity": self.severity.value, "description": self.description}


@dataclass(frozen=True)
class BiasRecommendation:
    category: str
    suggestion: str
    priority: BiasSeverity

    def to_dict(self) -> dict[str, Any]:
        return {"category": self.category, "suggestion": self.suggestion, "priority": self.priority.value}


@dataclass(frozen=True)
class BiasReport:
    overall_fairness_score: float
    demographic_parity: float
    equalized_odds: float
    equal_opportunity: float
    calibration: float
    risk_factors: list[BiasRiskFactor] = field(default_factory=list)
    recommendations: list[BiasRecommendation] = field(default_factory=list)

    def metrics_dict(self) -> dict[str, float]:
        return {
            "overall_fairness_score": self.overall_fairness_score,
            "demographic_parity": self.demographic_parity,
            "equalized_odds": self.equalized_odds,
            "equal_opportunity": self.equal_opportunity,
            "calibration": self.calibration,
        }

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = self.metrics_dict()
        out["risk_factors"] = [r.to_dict() for r in self.risk_factors]
        out["recommendations"] = [r.to_dict() for r in self.recommendations]
        return out


@dataclass(frozen=True)
class ActionItem:
    priority: str
    action: str
    timeline: str
    responsible: str

    def to_dict(self) -> dict[str, str]:
        return {
            "priority": self.priority,
            "action": self.action,
            "timeline": self.timeline,
            "responsible": self.responsible,
        }


@dataclass(frozen=True)
class BiasAuditReport:
    timestamp: str
    risk_level: AssessmentLevel
    color: str
    description: str
    fairness_metrics: dict[str, float]
    compliance_status: dict[str, bool]
    action_items: list[ActionItem]
    risk_factors: list[BiasRiskFactor]
    recommendations: list[BiasRecommendation]

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "overall_assessment": {
                "risk_level": self.risk_level.value,
                "color": self.color,
                "description": self.description,
            },
            "fairness_metrics": dict(self.fairness_metrics),
            "compliance_status": dict(self.compliance_status),
            "action_items": [a.to_dict() for a in self.action_items],
            "risk_factors": [r.to_dict() for r in self.risk_factors],
            "recommendations": [r.to_dict() for r in self.recommendations],
        }


# -----------------------------------------------------------------------------
# Risk factor checks (each returns a factor or None)
# -----------------------------------------------------------------------------


def _check_young_applicant(a: ApplicantFeatures, t: BiasThresholds) -> BiasRiskFactor | None:
    if a.age < t.young_age:
        return BiasRiskFactor(
            BiasRiskType.AGE_DISCRIMINATION,
            BiasSeverity.LOW,
            "Young applicant - ensure age is not unfairly penalized",
        )
    return None


def _check_low_income(a: ApplicantFeatures, t: BiasThresholds) -> BiasRiskFactor | None:
    if a.income < t.low_income:
        return BiasRiskFactor(
            BiasRiskType.INCOME_BIAS,
            BiasSeverity.MEDIUM,
            "Low income applicant - verify alternative data sources compensate",
        )
    return None


def _check_digital_footprint(a: ApplicantFeatures, t: BiasThresholds) -> BiasRiskFactor | None:
    if a.financial_app_usage < t.low_digital_score or a.social_network_quality < t.low_digital_score:
        return BiasRiskFactor(
            BiasRiskType.DIGITAL_DIVIDE,
            BiasSeverity.MEDIUM,
            "Limited digital footprint - may disadvantage certain populations",
        )
    return None


def _check_mobility(a: ApplicantFeatures, t: BiasThresholds) -> BiasRiskFactor | None:
    if a.address_stability_years < t.low_address_years:
        return BiasRiskFactor(
            BiasRiskType.MOBILITY_BIAS,
            BiasSeverity.LOW,
            "High mobility may disadvantage certain demographics (students, military, etc.)",
        )
    return None


_RISK_CHECKS: tuple[Callable[[ApplicantFeatures, BiasThresholds], BiasRiskFactor | None], ...] = (
    _check_young_applicant,
    _check_low_income,
    _check_digital_footprint,
    _check_mobility,
)

_ALWAYS_RECOMMENDED = (
    BiasRecommendation(
        "Model Transparency",
        "Provide clear explanation of scoring factors to applicant",
        BiasSeverity.HIGH,
    ),
    BiasRecommendation(
        "Continuous Monitoring",
        "Monitor score distributions across demographic groups",
        BiasSeverity.MEDIUM,
    ),
)


def identify_risk_factors(
    features: ApplicantFeatures,
    thresholds: BiasThresholds | None = None,
) -> list[BiasRiskFactor]:
    t = thresholds or DEFAULT_BIAS_THRESHOLDS
    factors = []
    for check in _RISK_CHECKS:
        factor = check(features, t)
        if factor is not None:
            factors.append(factor)
    return factors


def generate_bias_recommendations(
    features: ApplicantFeatures,
    thresholds: BiasThresholds | None = None,
) -> list[BiasRecommendation]:
    """Threshold-driven suggestions followed by the two standing ones."""
    t = thresholds or DEFAULT_BIAS_THRESHOLDS
    recs: list[BiasRecommendation] = []
    if features.age < t.young_age:
        recs.append(BiasRecommendation(
            "Age Fairness",
            "Consider educational enrollment or internship history as alternative stability indicators",
            BiasSeverity.MEDIUM,
        ))
    if features.income < t.low_income:
        recs.append(BiasRecommendation(
            "Income Equity",
            "Weight alternative data sources more heavily for low-income applicants",
            BiasSeverity.HIGH,
        ))
    if features.financial_app_usage < t.low_digital_score:
        recs.append(BiasRecommendation(
            "Digital Inclusion",
            "Provide alternative verification methods for those with limited digital access",
            BiasSeverity.HIGH,
        ))
    recs.extend(_ALWAYS_RECOMMENDED)
    return recs


def analyze_bias(
    features: ApplicantFeatures,
    result: ScoreResult,
    *,
    baseline: FairnessBaseline | None = None,
    thresholds: BiasThresholds | None = None,
) -> BiasReport:
    """
    Per-request bias report: baseline metrics plus heuristic risk flags.

    result is accepted for contract symmetry with explain(); the heuristics
    key on raw input only.
    """
    b = baseline or DEFAULT_FAIRNESS_BASELINE
    try:
        report = BiasReport(
            overall_fairness_score=b.overall_fairness_score,
            demographic_parity=b.demographic_parity,
            equalized_odds=b.equalized_odds,
            equal_opportunity=b.equal_opportunity,
            calibration=b.calibration,
            risk_factors=identify_risk_factors(features, thresholds),
            recommendations=generate_bias_recommendations(features, thresholds),
        )
    except (TypeError, ValueError) as e:
        logger.warning("bias_analysis_failed", error=str(e))
        raise ComputationError(BIAS_ANALYSIS_FAILED, detail=str(e)) from e

    if report.risk_factors:
        logger.info(
            "bias_risk_flagged",
            score=result.score,
            risk_types=[r.type.value for r in report.risk_factors],
        )
    return report


# -----------------------------------------------------------------------------
# Audit report
# -----------------------------------------------------------------------------


def _overall_assessment(fairness: float, t: BiasThresholds) -> tuple[AssessmentLevel, str, str]:
    if fairness >= t.low_risk_fairness:
        return AssessmentLevel.LOW_RISK, "green", "Model demonstrates strong fairness across demographic groups"
    if fairness >= t.medium_risk_fairness:
        return AssessmentLevel.MEDIUM_RISK, "yellow", "Some fairness concerns identified - monitoring recommended"
    return AssessmentLevel.HIGH_RISK, "red", "Significant bias concerns - immediate review required"


def check_compliance(report: BiasReport, thresholds: BiasThresholds | None = None) -> dict[str, bool]:
    """FCRA and ECOA from the metrics; GDPR and state regulations are attested, not checked."""
    t = thresholds or DEFAULT_BIAS_THRESHOLDS
    status = {
        "fcra": report.overall_fairness_score >= t.fcra_min_fairness,
        "ecoa": report.demographic_parity <= t.max_demographic_parity,
        "gdpr": True,
        "state_regulations": True,
    }
    status["overall_compliant"] = all(status.values())
    return status


def generate_action_items(report: BiasReport, thresholds: BiasThresholds | None = None) -> list[ActionItem]:
    t = thresholds or DEFAULT_BIAS_THRESHOLDS
    items: list[ActionItem] = []
    if report.demographic_parity > t.max_demographic_parity:
        items.append(ActionItem("High", "Investigate demographic parity violation", "Immediate", "Model Risk Team"))
    if report.equalized_odds > t.max_equalized_odds:
        items.append(ActionItem("High", "Review equalized odds metrics", "Within 48 hours", "Data Science Team"))
    if report.risk_factors:
        items.append(ActionItem("Medium", "Address identified risk factors", "Within 1 week", "Product Team"))
    return items


def generate_bias_report(
    report: BiasReport,
    *,
    thresholds: BiasThresholds | None = None,
    now: datetime | None = None,
) -> BiasAuditReport:
    """Audit view of a BiasReport for compliance review."""
    t = thresholds or DEFAULT_BIAS_THRESHOLDS
    level, color, description = _overall_assessment(report.overall_fairness_score, t)
    stamp = (now or datetime.now(timezone.utc)).isoformat()
    return BiasAuditReport(
        timestamp=stamp,
        risk_level=level,
        color=color,
        description=description,
        fairness_metrics=report.metrics_dict(),
        compliance_status=check_compliance(report, t),
        action_items=generate_action_items(report, t),
        risk_factors=list(report.risk_factors),
        recommendations=list(report.recommendations),
    )
