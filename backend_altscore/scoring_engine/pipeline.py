"""
Scoring pipeline: normalize -> {rule-based, neural} -> ensemble -> classify.

Single entrypoint for the analytics layer, API, and tools. Synchronous and
side-effect free apart from logging; safe to call from many threads at once.
"""

from __future__ import annotations

import math

import numpy as np

from backend_altscore.altscore_logging import get_logger
from backend_altscore.core.exceptions import ComputationError
from backend_altscore.scoring_engine.classifier import (
    determine_risk_category,
    score_to_default_probability,
)
from backend_altscore.scoring_engine.ensemble import blend_scores, round_half_up
from backend_altscore.scoring_engine.features import ApplicantFeatures, normalize_features
from backend_altscore.scoring_engine.model_config import DEFAULT_SCORING_CONFIG, ScoringConfig
from backend_altscore.scoring_engine.models import ModelScores, ScoreResult
from backend_altscore.scoring_engine.neural_scorer import neural_score
from backend_altscore.scoring_engine.rule_scorer import rule_based_score

logger = get_logger(__name__)

PREDICTION_FAILED = "Model prediction failed"


def score(
    features: ApplicantFeatures,
    *,
    rng: np.random.Generator | None = None,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
) -> ScoreResult:
    """
    Score one applicant.

    Args:
        features: Validated applicant signals (see validate_applicant).
        rng: Jitter source for the ensemble. None (default) gives a fully
            deterministic score; pass np.random.default_rng(seed) for seeded jitter.
        config: Versioned weights and thresholds.

    Returns:
        ScoreResult with score in [300, 850], category, default probability,
        and the rounded sub-model scores.

    Raises:
        ComputationError: any sub-score is not finite (e.g. NaN input that
            bypassed validation) or arithmetic fails.
    """
    try:
        normalized = normalize_features(features)
        rule_points = rule_based_score(normalized, config.rule)
        neural_points = neural_score(normalized, config.neural)
    except (ArithmeticError, ValueError, TypeError) as e:
        logger.warning("score_computation_failed", error=str(e))
        raise ComputationError(PREDICTION_FAILED, detail=str(e)) from e

    if not (math.isfinite(rule_points) and math.isfinite(neural_points)):
        logger.warning(
            "score_non_finite",
            rule_points=str(rule_points),
            neural_points=str(neural_points),
        )
        raise ComputationError(
            PREDICTION_FAILED,
            detail=f"non-finite sub-score: rule={rule_points}, neural={neural_points}",
        )

    final = blend_scores(rule_points, neural_points, rng=rng, config=config.ensemble)
    result = ScoreResult(
        score=final,
        risk_category=determine_risk_category(final, config.classifier),
        probability=score_to_default_probability(final, config.classifier, config.ensemble),
        model_scores=ModelScores(
            rule_based=round_half_up(rule_points),
            neural=round_half_up(neural_points),
        ),
    )
    logger.debug(
        "score_computed",
        score=result.score,
        risk_category=result.risk_category.value,
        rule_points=round(rule_points, 2),
        neural_points=round(neural_points, 2),
        jitter=rng is not None,
    )
    return result
