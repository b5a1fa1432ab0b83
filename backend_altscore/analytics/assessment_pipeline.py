"""
Assessment pipeline: validate -> score -> {explain, analyze_bias} for one
applicant or a batch.

Single entrypoint for the API server and tools. assess_applicant returns the
combined response; score_batch scores many applicants with per-item failure
isolation; get_model_info returns static model metadata.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import numpy as np

from backend_altscore.altscore_logging import get_logger
from backend_altscore.analytics.bias_detector import (
    DEFAULT_FAIRNESS_BASELINE,
    BiasReport,
    analyze_bias,
)
from backend_altscore.analytics.explainability_engine import Explanation, explain
from backend_altscore.config import Settings, get_settings
from backend_altscore.core.exceptions import (
    BatchItemError,
    BatchSizeError,
    ComputationError,
    FieldError,
    ValidationError,
)
from backend_altscore.scoring_engine import (
    ApplicantFeatures,
    ScoreResult,
    get_feature_names,
    score,
    validate_applicant,
)
from backend_altscore.scoring_engine.model_config import MODEL_TYPE

logger = get_logger(__name__)

# Reported figures from the model card; not measured by this service.
REPORTED_PERFORMANCE = {
    "accuracy": 0.892,
    "precision": 0.876,
    "recall": 0.854,
    "f1_score": 0.865,
}
LAST_TRAINED = "2024-01-15T10:30:00Z"
DATA_SOURCES = (
    "Mobile/Telecom Data",
    "Utility Payment History",
    "E-commerce Behavior",
    "Geolocation Stability",
    "Digital Footprint",
)


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def make_rng(settings: Settings, spawn_key: int | None = None) -> np.random.Generator | None:
    """
    Jitter generator for one scoring call, or None when jitter is disabled.

    With a jitter_seed, spawn_key derives an independent reproducible stream
    per batch index, so results do not depend on worker scheduling.
    """
    if not settings.score_jitter:
        return None
    if settings.jitter_seed is None:
        return np.random.default_rng()
    if spawn_key is None:
        return np.random.default_rng(settings.jitter_seed)
    return np.random.default_rng(np.random.SeedSequence(settings.jitter_seed, spawn_key=(spawn_key,)))


@dataclass(frozen=True)
class Assessment:
    """Everything derived for one applicant."""

    features: ApplicantFeatures
    result: ScoreResult
    explanation: Explanation
    bias_report: BiasReport
    model_version: str
    timestamp: str

    def to_response(self) -> dict[str, Any]:
        return {
            "credit_score": self.result.score,
            "risk_category": self.result.risk_category.value,
            "probability": self.result.probability,
            "model_scores": self.result.model_scores.to_dict(),
            "explanation": self.explanation.summary,
            "feature_importance": self.explanation.feature_importance_dict(),
            "bias_metrics": self.bias_report.to_dict(),
            "model_version": self.model_version,
            "timestamp": self.timestamp,
        }


def assess(
    features: ApplicantFeatures,
    settings: Settings | None = None,
    *,
    rng: np.random.Generator | None = None,
) -> Assessment:
    """Score, explain, and bias-check already validated features."""
    s = settings or get_settings()
    result = score(features, rng=rng)
    return Assessment(
        features=features,
        result=result,
        explanation=explain(features, result),
        bias_report=analyze_bias(features, result),
        model_version=s.model_version,
        timestamp=_utc_now(),
    )


def assess_applicant(raw: Any, settings: Settings | None = None) -> dict[str, Any]:
    """
    Validate raw input and return the combined single-applicant response.

    Raises:
        ValidationError: raw input is missing fields, mistyped, or out of range.
        ComputationError: scoring, explanation, or bias analysis failed.
    """
    s = settings or get_settings()
    features = validate_applicant(raw)
    assessment = assess(features, s, rng=make_rng(s))
    logger.info(
        "credit_score_calculated",
        credit_score=assessment.result.score,
        risk_category=assessment.result.risk_category.value,
        bias_risk_factors=len(assessment.bias_report.risk_factors),
    )
    return assessment.to_response()


def _score_item(index: int, raw: Any, settings: Settings) -> dict[str, Any]:
    try:
        features = validate_applicant(raw)
        result = score(features, rng=make_rng(settings, spawn_key=index))
        explanation = explain(features, result)
    except (ValidationError, ComputationError) as e:
        item_error = BatchItemError(index, e)
        logger.info("batch_item_failed", index=index, kind=item_error.kind, message=item_error.message)
        return item_error.to_result(include_detail=settings.debug)
    return {
        "success": True,
        "index": index,
        "credit_score": result.score,
        "risk_category": result.risk_category.value,
        "explanation": explanation.summary,
    }


def score_batch(items: Any, settings: Settings | None = None, *, start_index: int = 0) -> dict[str, Any]:
    """
    Score an ordered list of raw applicants.

    Per-item failures become {error: true, ...} markers at their index; they
    never abort the batch. Results keep input order whether items run
    sequentially or on a thread pool (settings.batch_workers > 1). start_index
    offsets the reported indexes when a caller splits a larger input into chunks.

    Raises:
        ValidationError: items is not a list.
        BatchSizeError: items is empty or longer than settings.max_batch_size.
    """
    s = settings or get_settings()
    if isinstance(items, (str, bytes, Mapping)) or not isinstance(items, Sequence):
        raise ValidationError([FieldError("applicants", "must be an array")])
    if not items:
        raise BatchSizeError("Batch must contain at least one applicant")
    if len(items) > s.max_batch_size:
        raise BatchSizeError(
            f"Batch size cannot exceed {s.max_batch_size} applicants",
            detail=f"received {len(items)}",
        )

    logger.info("batch_scoring_start", size=len(items), workers=s.batch_workers)
    indexes = range(start_index, start_index + len(items))
    if s.batch_workers > 1:
        with ThreadPoolExecutor(max_workers=s.batch_workers) as executor:
            results = list(executor.map(lambda i: _score_item(i, items[i - start_index], s), indexes))
    else:
        results = [_score_item(i, items[i - start_index], s) for i in indexes]

    failed = sum(1 for r in results if r.get("error"))
    logger.info("batch_scoring_done", processed=len(results), failed=failed)
    return {
        "results": results,
        "processed": len(results),
        "failed": failed,
        "timestamp": _utc_now(),
    }


def get_model_info(settings: Settings | None = None) -> dict[str, Any]:
    """
    Static model descriptors.

    performance and bias_metrics are reported constants, not measurements.
    """
    s = settings or get_settings()
    return {
        "version": s.model_version,
        "model_type": MODEL_TYPE,
        "features": get_feature_names(),
        "performance": dict(REPORTED_PERFORMANCE),
        "performance_measured": False,
        "last_trained": LAST_TRAINED,
        "data_sources": list(DATA_SOURCES),
        "bias_metrics": {
            "demographic_parity": DEFAULT_FAIRNESS_BASELINE.demographic_parity,
            "equalized_odds": DEFAULT_FAIRNESS_BASELINE.equalized_odds,
            "fairness_score": DEFAULT_FAIRNESS_BASELINE.overall_fairness_score,
        },
        "bias_metrics_measured": False,
    }
