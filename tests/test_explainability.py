"""
Tests for the explainability engine: contributions, factors, summary, and rule outputs.
"""

from __future__ import annotations

import pytest


@pytest.fixture
def weak_payload(applicant_payload):
    """Applicant tripping every recommendation and explanation risk rule."""
    return dict(
        applicant_payload,
        income=20000,
        phone_payment_consistency=5,
        employment_years=0.5,
        financial_app_usage=2,
        budgeting_behavior=4,
        return_rate=30,
        address_stability_years=1,
    )


def _explain(payload):
    from backend_altscore.analytics.explainability_engine import explain
    from backend_altscore.scoring_engine import score, validate_applicant

    features = validate_applicant(payload)
    return explain(features, score(features))


def test_weight_table_sums_to_120():
    """The explanation weights intentionally total 120 percent."""
    from backend_altscore.analytics.explainability_engine import (
        EXPLANATION_WEIGHT_TOTAL,
        EXPLANATION_WEIGHTS,
    )
    from backend_altscore.scoring_engine import FeatureName

    assert set(EXPLANATION_WEIGHTS) == set(FeatureName)
    assert sum(EXPLANATION_WEIGHTS.values()) == EXPLANATION_WEIGHT_TOTAL == 120


def test_max_applicant_contributions_sum_to_weight_total(max_payload):
    """With every normalized value at 1.0, contributions equal weights and sum to 120."""
    from backend_altscore.analytics.explainability_engine import calculate_feature_importance
    from backend_altscore.scoring_engine import validate_applicant

    importance = calculate_feature_importance(validate_applicant(max_payload))
    assert all(e.contribution == e.weight for e in importance.values())
    assert sum(e.contribution for e in importance.values()) == pytest.approx(120)


def test_contribution_is_weight_times_normalized(applicant):
    """contribution = round(weight * normalized, 1); impact bucketed on contribution."""
    from backend_altscore.analytics.explainability_engine import ImpactLevel, calculate_feature_importance
    from backend_altscore.scoring_engine import FeatureName

    importance = calculate_feature_importance(applicant)
    assert importance[FeatureName.ELECTRICITY_PAYMENT_HISTORY].contribution == 8.9
    assert importance[FeatureName.ELECTRICITY_PAYMENT_HISTORY].impact == ImpactLevel.HIGH_POSITIVE
    assert importance[FeatureName.INCOME].contribution == 7.5
    assert importance[FeatureName.INCOME].impact == ImpactLevel.MEDIUM_POSITIVE
    assert importance[FeatureName.EMPLOYMENT_YEARS].contribution == 3.0
    assert importance[FeatureName.EMPLOYMENT_YEARS].impact == ImpactLevel.LOW_POSITIVE
    assert importance[FeatureName.MONTHLY_USAGE_GB].contribution == 0.8
    assert importance[FeatureName.MONTHLY_USAGE_GB].impact == ImpactLevel.NEUTRAL
    assert importance[FeatureName.AGE].normalized_value == 0.26


@pytest.mark.parametrize(
    "contribution,expected",
    [
        (8.0, "High Positive"),
        (5.0, "Medium Positive"),
        (2.0, "Low Positive"),
        (0.0, "Neutral"),
        (-2.0, "Neutral"),
        (-2.1, "Low Negative"),
        (-5.1, "Medium Negative"),
        (-8.1, "High Negative"),
    ],
)
def test_impact_levels(contribution, expected):
    from backend_altscore.analytics.explainability_engine import get_impact_level

    assert get_impact_level(contribution).value == expected


def test_top_factors_sorted_and_disjoint(applicant):
    """Top factors are sorted by |contribution| descending and never overlap."""
    from backend_altscore.analytics.explainability_engine import calculate_feature_importance, get_top_factors
    from backend_altscore.scoring_engine import FeatureName

    positive, negative = get_top_factors(calculate_feature_importance(applicant))
    assert len(positive) == 5
    assert negative == []
    contributions = [abs(f.contribution) for f in positive]
    assert contributions == sorted(contributions, reverse=True)
    assert [f.feature for f in positive[:4]] == [
        FeatureName.ELECTRICITY_PAYMENT_HISTORY,
        FeatureName.PHONE_PAYMENT_CONSISTENCY,
        FeatureName.BUDGETING_BEHAVIOR,
        FeatureName.INCOME,
    ]
    assert not {f.feature for f in positive} & {f.feature for f in negative}


def test_top_factors_split_by_sign():
    """Negative contributions go to the negative list; zeros appear in neither."""
    from backend_altscore.analytics.explainability_engine import (
        FeatureImportanceEntry,
        ImpactLevel,
        get_top_factors,
    )
    from backend_altscore.scoring_engine import FeatureName

    def entry(feature, contribution):
        return FeatureImportanceEntry(feature, 10, 0.5, contribution, ImpactLevel.NEUTRAL, "")

    importance = {
        FeatureName.AGE: entry(FeatureName.AGE, 3.0),
        FeatureName.INCOME: entry(FeatureName.INCOME, -6.0),
        FeatureName.RETURN_RATE: entry(FeatureName.RETURN_RATE, 0.0),
        FeatureName.BUDGETING_BEHAVIOR: entry(FeatureName.BUDGETING_BEHAVIOR, -1.0),
    }
    positive, negative = get_top_factors(importance)
    assert [f.feature for f in positive] == [FeatureName.AGE]
    assert [f.feature for f in negative] == [FeatureName.INCOME, FeatureName.BUDGETING_BEHAVIOR]


def test_summary_reference_applicant(applicant_payload):
    """Summary names score, category, strongest factor and the category encouragement."""
    explanation = _explain(applicant_payload)
    assert explanation.summary == (
        'Your credit score of 745 places you in the "Good" category. '
        "Your strongest factor is Utility Payment History, which positively contributed "
        "8.9% to your score. Good score! You should qualify for competitive rates."
    )


def test_summary_mentions_weakest_factor():
    """A negative factor adds the 'room for improvement' sentence with its absolute value."""
    from backend_altscore.analytics.explainability_engine import Factor, generate_summary
    from backend_altscore.scoring_engine import FeatureName, ModelScores, RiskCategory, ScoreResult

    result = ScoreResult(620, RiskCategory.POOR, 72.3, ModelScores(100, 110))
    summary = generate_summary(
        result,
        [Factor(FeatureName.INCOME, "Monthly Income", 4.0, "")],
        [Factor(FeatureName.RETURN_RATE, "Return Rate", -3.5, "")],
    )
    assert "The area with the most room for improvement is Return Rate, which reduced your score by 3.5%. " in summary
    assert summary.endswith("There's significant room for improvement. Focus on the recommended areas below.")


def test_summary_follows_classifier_bands():
    """The closing sentence uses the classifier thresholds it is given."""
    from backend_altscore.analytics.explainability_engine import generate_summary
    from backend_altscore.scoring_engine import ModelScores, RiskCategory, ScoreResult
    from backend_altscore.scoring_engine.model_config import ClassifierConfig

    result = ScoreResult(745, RiskCategory.GOOD, 7.8, ModelScores(235, 127))
    assert generate_summary(result, [], []).endswith("Good score! You should qualify for competitive rates.")

    strict = ClassifierConfig(excellent_min=800, good_min=760, fair_min=700)
    assert generate_summary(result, [], [], strict).endswith(
        "Fair score. Focus on improvement areas to access better rates."
    )
    lenient = ClassifierConfig(excellent_min=740)
    assert generate_summary(result, [], [], lenient).endswith(
        "Excellent score! You qualify for the best rates and terms."
    )


def test_explain_passes_classifier_to_summary(applicant_payload):
    from backend_altscore.analytics.explainability_engine import explain
    from backend_altscore.scoring_engine import score, validate_applicant
    from backend_altscore.scoring_engine.model_config import ClassifierConfig

    features = validate_applicant(applicant_payload)
    result = score(features)
    explanation = explain(features, result, classifier=ClassifierConfig(excellent_min=900, good_min=800, fair_min=700))
    assert explanation.summary.endswith("Fair score. Focus on improvement areas to access better rates.")


def test_reference_applicant_rule_outputs(applicant_payload):
    """Strong applicant: no recommendations or risk factors; three improvement areas."""
    explanation = _explain(applicant_payload)
    assert explanation.recommendations == []
    assert explanation.risk_factors == []
    areas = [(a.area, a.current_value, a.potential_impact) for a in explanation.improvement_areas]
    assert areas == [
        ("Age", 0.26, 8),
        ("Employment Stability", 0.25, 12),
        ("Residential Stability", 0.4, 8),
    ]
    assert explanation.improvement_areas[1].recommendation == "Focus on building tenure at your current position"


def test_recommendations_capped_in_rule_order(weak_payload):
    """All seven recommendation rules fire; only the first five are kept."""
    explanation = _explain(weak_payload)
    assert [r.category for r in explanation.recommendations] == [
        "Income",
        "Payment History",
        "Employment Stability",
        "Financial Management",
        "Budgeting",
    ]
    assert explanation.recommendations[1].timeframe == "Immediate (within 1 month)"
    assert explanation.recommendations[0].priority.value == "High"


def test_explanation_risk_factors(weak_payload):
    explanation = _explain(weak_payload)
    assert [(r.factor, r.severity.value) for r in explanation.risk_factors] == [
        ("Low Income", "High"),
        ("Employment Instability", "Medium"),
        ("High Return Rate", "Low"),
    ]


def test_improvement_areas_capped_at_three(min_payload):
    """Every weight>=8 feature qualifies for the min applicant; the list stops at 3."""
    from backend_altscore.analytics.explainability_engine import calculate_feature_importance, identify_improvement_areas
    from backend_altscore.scoring_engine import validate_applicant

    importance = calculate_feature_importance(validate_applicant(min_payload))
    assert len(identify_improvement_areas(importance)) == 3


def test_explanation_to_dict(applicant_payload):
    """Serialized explanation uses snake_case keys and all sixteen features."""
    d = _explain(applicant_payload).to_dict()
    assert set(d) == {
        "summary",
        "feature_importance",
        "top_positive_factors",
        "top_negative_factors",
        "recommendations",
        "risk_factors",
        "improvement_areas",
    }
    assert len(d["feature_importance"]) == 16
    assert d["feature_importance"]["income"]["impact"] == "Medium Positive"
    assert d["top_positive_factors"][0]["human_readable"] == "Utility Payment History"


def test_explain_does_not_mutate_inputs(applicant):
    """Explanation is derived without changing features or result."""
    from backend_altscore.analytics.explainability_engine import explain
    from backend_altscore.scoring_engine import score

    result = score(applicant)
    before = (applicant.model_dump(), result.to_dict())
    explain(applicant, result)
    assert (applicant.model_dump(), result.to_dict()) == before


def test_explain_wraps_arithmetic_failure(applicant_payload, applicant):
    """Broken input inside explain surfaces as ComputationError with a stable message."""
    from backend_altscore.analytics.explainability_engine import EXPLANATION_FAILED, explain
    from backend_altscore.core.exceptions import ComputationError
    from backend_altscore.scoring_engine import ApplicantFeatures, score

    result = score(applicant)
    broken = ApplicantFeatures.model_construct(**dict(applicant_payload, income=None))
    with pytest.raises(ComputationError) as exc:
        explain(broken, result)
    assert exc.value.message == EXPLANATION_FAILED
