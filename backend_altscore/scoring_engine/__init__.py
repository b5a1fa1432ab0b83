"""
Scoring engine package: feature normalization and the ensemble credit score.

Validates and normalizes the sixteen applicant signals, runs the rule-based
and neural scorers, blends them into the 300–850 range, and classifies the
result into a risk category and default probability.
"""

from backend_altscore.scoring_engine.classifier import (
    determine_risk_category,
    score_to_default_probability,
)
from backend_altscore.scoring_engine.ensemble import blend_scores
from backend_altscore.scoring_engine.features import (
    FEATURE_ORDER,
    FEATURE_SPECS,
    ApplicantFeatures,
    FeatureName,
    NormalizedFeatures,
    get_feature_names,
    normalize_features,
    validate_applicant,
)
from backend_altscore.scoring_engine.model_config import (
    DEFAULT_SCORING_CONFIG,
    MODEL_VERSION,
    ScoringConfig,
)
from backend_altscore.scoring_engine.models import ModelScores, RiskCategory, ScoreResult
from backend_altscore.scoring_engine.neural_scorer import neural_score
from backend_altscore.scoring_engine.pipeline import score
from backend_altscore.scoring_engine.rule_scorer import rule_based_breakdown, rule_based_score

__all__ = [
    "ApplicantFeatures",
    "FeatureName",
    "FEATURE_ORDER",
    "FEATURE_SPECS",
    "NormalizedFeatures",
    "get_feature_names",
    "normalize_features",
    "validate_applicant",
    "DEFAULT_SCORING_CONFIG",
    "MODEL_VERSION",
    "ScoringConfig",
    "ModelScores",
    "RiskCategory",
    "ScoreResult",
    "rule_based_score",
    "rule_based_breakdown",
    "neural_score",
    "blend_scores",
    "determine_risk_category",
    "score_to_default_probability",
    "score",
]
