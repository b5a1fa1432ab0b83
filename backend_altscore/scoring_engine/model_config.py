"""
Versioned, read-only scoring configuration.

Every weight and threshold used by the rule-based scorer, neural scorer,
ensemble blend, and score classifier lives here as a frozen dataclass.
These are fixed constants, not trained parameters; there is no model-update
path. Pass a different ScoringConfig to the scoring functions to experiment.
"""

from __future__ import annotations

from dataclasses import dataclass, field

MODEL_VERSION = "2.1.0"
MODEL_TYPE = "Ensemble (rule-based decision rules + feed-forward network)"


@dataclass(frozen=True)
class RuleScorerConfig:
    """Five additive decision rules over normalized features."""

    # Rule 1: payment consistency composite
    payment_phone_weight: float = 0.4
    payment_electricity_weight: float = 0.35
    payment_internet_weight: float = 0.25
    payment_tiers: tuple[tuple[float, float], ...] = ((0.8, 120.0), (0.6, 80.0), (0.4, 40.0))
    """(strict lower bound, points), evaluated top-down."""
    payment_floor_points: float = -20.0

    # Rule 2: income and employment stability
    stability_income_weight: float = 0.6
    stability_employment_weight: float = 0.4
    stability_points: float = 100.0

    # Rule 3: age bonuses stack (normalized 0.3 ~ age 32, 0.6 ~ age 46)
    age_bonuses: tuple[tuple[float, float], ...] = ((0.3, 40.0), (0.6, 20.0))

    # Rule 4: e-commerce behavior
    commerce_return_weight: float = 0.5
    commerce_purchases_weight: float = 0.3
    commerce_amount_weight: float = 0.2
    purchases_sweet_spot: float = 0.3
    """Moderate purchasing scores best; distance from this point is penalized."""
    avg_amount_cap: float = 0.5
    commerce_points: float = 60.0

    # Rule 5: location stability
    location_address_weight: float = 0.6
    location_work_weight: float = 0.4
    location_points: float = 50.0


@dataclass(frozen=True)
class NeuralScorerConfig:
    """
    Fixed weights for the 3-2-1 feed-forward network (ReLU hidden, sigmoid out).

    Hidden layer 1 weights are (feature name, weight) pairs per unit; unlisted
    features have weight 0.
    """

    hidden1: tuple[tuple[tuple[str, float], ...], ...] = (
        (("income", 0.3), ("employment_years", 0.2), ("phone_payment_consistency", 0.25), ("budgeting_behavior", 0.25)),
        (("electricity_payment_history", 0.4), ("internet_payment_consistency", 0.3), ("address_stability_years", 0.3)),
        (("social_network_quality", 0.3), ("financial_app_usage", 0.3), ("network_stability", 0.4)),
    )
    hidden1_bias: tuple[float, ...] = (-0.2, -0.15, -0.1)
    hidden2: tuple[tuple[float, ...], ...] = ((0.4, 0.6, 0.0), (0.0, 0.3, 0.7))
    hidden2_bias: tuple[float, ...] = (-0.1, -0.05)
    output: tuple[float, ...] = (0.6, 0.4)
    output_bias: float = 0.1
    output_scale: float = 200.0


@dataclass(frozen=True)
class EnsembleConfig:
    rule_weight: float = 0.7
    neural_weight: float = 0.3
    base_score: float = 300.0
    scale: float = 2.2
    jitter_amplitude: float = 5.0
    """Jitter is drawn from [-amplitude, +amplitude] when a generator is supplied."""
    min_score: int = 300
    max_score: int = 850


@dataclass(frozen=True)
class ClassifierConfig:
    # Inclusive lower bounds, evaluated top-down; below the last is Very Poor
    excellent_min: int = 750
    good_min: int = 700
    fair_min: int = 650
    poor_min: int = 600
    logistic_steepness: float = 8.0
    logistic_midpoint: float = 0.5


@dataclass(frozen=True)
class ScoringConfig:
    version: str = MODEL_VERSION
    rule: RuleScorerConfig = field(default_factory=RuleScorerConfig)
    neural: NeuralScorerConfig = field(default_factory=NeuralScorerConfig)
    ensemble: EnsembleConfig = field(default_factory=EnsembleConfig)
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)


DEFAULT_SCORING_CONFIG = ScoringConfig()
