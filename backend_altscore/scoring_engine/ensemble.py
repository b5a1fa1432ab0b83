"""
Ensemble blend: combine rule-based and neural points into the 300–850 range.

ensemble = 0.7 * rule + 0.3 * neural; raw = 300 + 2.2 * ensemble; optional
bounded jitter; clamp; round half up. Jitter comes only from an explicitly supplied
numpy Generator, so callers choose between deterministic and stochastic mode.
"""

from __future__ import annotations

import math

import numpy as np

from backend_altscore.scoring_engine.model_config import (
    DEFAULT_SCORING_CONFIG,
    EnsembleConfig,
)


def ensemble_points(rule_points: float, neural_points: float, config: EnsembleConfig | None = None) -> float:
    cfg = config or DEFAULT_SCORING_CONFIG.ensemble
    return rule_points * cfg.rule_weight + neural_points * cfg.neural_weight


def draw_jitter(rng: np.random.Generator | None, config: EnsembleConfig | None = None) -> float:
    """Uniform draw in [-amplitude, +amplitude]; 0.0 when rng is None."""
    if rng is None:
        return 0.0
    cfg = config or DEFAULT_SCORING_CONFIG.ensemble
    return float(rng.uniform(-cfg.jitter_amplitude, cfg.jitter_amplitude))


def round_half_up(value: float) -> int:
    """Nearest integer, .5 rounds toward +inf (700.5 -> 701, not banker's 700)."""
    return int(math.floor(value + 0.5))


def clamp_score(raw: float, config: EnsembleConfig | None = None) -> int:
    cfg = config or DEFAULT_SCORING_CONFIG.ensemble
    return round_half_up(max(cfg.min_score, min(cfg.max_score, raw)))


def blend_scores(
    rule_points: float,
    neural_points: float,
    *,
    rng: np.random.Generator | None = None,
    config: EnsembleConfig | None = None,
) -> int:
    """
    Blend the two scorer outputs into a final integer score in [min_score, max_score].

    Args:
        rule_points: Output of rule_based_score.
        neural_points: Output of neural_score.
        rng: Jitter source. None disables jitter (fully reproducible).
        config: Ensemble weights and bounds; defaults to DEFAULT_SCORING_CONFIG.

    Returns:
        Integer score, clamped before rounding.
    """
    cfg = config or DEFAULT_SCORING_CONFIG.ensemble
    raw = cfg.base_score + ensemble_points(rule_points, neural_points, cfg) * cfg.scale
    raw += draw_jitter(rng, cfg)
    return clamp_score(raw, cfg)
