"""
Data models for scoring engine output.

Responsibilities:
- Define the risk category enum and the ScoreResult produced by the pipeline.
- Used by the explainability engine, bias detector, API responses, and tools.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class RiskCategory(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    POOR = "Poor"
    VERY_POOR = "Very Poor"


@dataclass(frozen=True)
class ModelScores:
    """Rounded outputs of the two ensemble members, for transparency."""

    rule_based: int
    neural: int

    def to_dict(self) -> dict[str, int]:
        return {"rule_based": self.rule_based, "neural": self.neural}


@dataclass(frozen=True)
class ScoreResult:
    """
    Final credit score for one applicant.

    score is always an int in [300, 850]; risk_category is a pure function of
    score; probability (default probability, percent) decreases as score rises.
    """

    score: int
    risk_category: RiskCategory
    probability: float
    model_scores: ModelScores

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "risk_category": self.risk_category.value,
            "probability": self.probability,
            "model_scores": self.model_scores.to_dict(),
        }
