"""
Score classifier: risk category and default probability from a final score.

Both are pure functions of the score. Category thresholds are inclusive lower
bounds evaluated top-down; probability follows a logistic curve that strictly
decreases as the score rises.
"""

from __future__ import annotations

import math

from backend_altscore.scoring_engine.model_config import (
    DEFAULT_SCORING_CONFIG,
    ClassifierConfig,
    EnsembleConfig,
)
from backend_altscore.scoring_engine.models import RiskCategory


def determine_risk_category(score: float, config: ClassifierConfig | None = None) -> RiskCategory:
    """>=750 Excellent; >=700 Good; >=650 Fair; >=600 Poor; else Very Poor."""
    cfg = config or DEFAULT_SCORING_CONFIG.classifier
    if score >= cfg.excellent_min:
        return RiskCategory.EXCELLENT
    if score >= cfg.good_min:
        return RiskCategory.GOOD
    if score >= cfg.fair_min:
        return RiskCategory.FAIR
    if score >= cfg.poor_min:
        return RiskCategory.POOR
    return RiskCategory.VERY_POOR


def score_to_default_probability(
    score: float,
    config: ClassifierConfig | None = None,
    ensemble: EnsembleConfig | None = None,
) -> float:
    """
    Default probability in percent, one decimal.

    norm = (score - 300) / 550; p = 1 / (1 + exp(8 * (norm - 0.5))).
    Score 575 maps to 50.0%.
    """
    cfg = config or DEFAULT_SCORING_CONFIG.classifier
    ens = ensemble or DEFAULT_SCORING_CONFIG.ensemble
    span = ens.max_score - ens.min_score
    norm = (score - ens.min_score) / span
    probability = 1.0 / (1.0 + math.exp(cfg.logistic_steepness * (norm - cfg.logistic_midpoint)))
    return round(probability * 100, 1)
