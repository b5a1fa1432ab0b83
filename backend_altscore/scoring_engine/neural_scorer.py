"""
Neural-style scorer: small fixed feed-forward network.

Two hidden layers (3 then 2 ReLU units) and a sigmoid output scaled to
[0, 200]. Weights are hand-set constants from NeuralScorerConfig, compiled
once into numpy matrices over the canonical feature order. No training and
no hidden state.
"""

from __future__ import annotations

import functools

import numpy as np

from backend_altscore.scoring_engine.features import FEATURE_ORDER, FeatureName, NormalizedFeatures
from backend_altscore.scoring_engine.model_config import (
    DEFAULT_SCORING_CONFIG,
    NeuralScorerConfig,
)

_FEATURE_INDEX = {f: i for i, f in enumerate(FEATURE_ORDER)}


def relu(x: np.ndarray) -> np.ndarray:
    return np.maximum(0.0, x)


def sigmoid(x: float) -> float:
    return float(1.0 / (1.0 + np.exp(-x)))


@functools.lru_cache(maxsize=8)
def _compile(config: NeuralScorerConfig) -> tuple[np.ndarray, ...]:
    """Build (W1, b1, W2, b2, w_out) arrays from the config; cached per config."""
    w1 = np.zeros((len(config.hidden1), len(FEATURE_ORDER)), dtype=np.float64)
    for unit, pairs in enumerate(config.hidden1):
        for name, weight in pairs:
            w1[unit, _FEATURE_INDEX[FeatureName(name)]] = weight
    b1 = np.asarray(config.hidden1_bias, dtype=np.float64)
    w2 = np.asarray(config.hidden2, dtype=np.float64)
    b2 = np.asarray(config.hidden2_bias, dtype=np.float64)
    w_out = np.asarray(config.output, dtype=np.float64)
    for arr in (w1, b1, w2, b2, w_out):
        arr.setflags(write=False)
    return w1, b1, w2, b2, w_out


def hidden_activations(
    normalized: NormalizedFeatures,
    config: NeuralScorerConfig | None = None,
) -> tuple[np.ndarray, np.ndarray]:
    """Return (layer1, layer2) ReLU activations, for inspection and tests."""
    cfg = config or DEFAULT_SCORING_CONFIG.neural
    w1, b1, w2, b2, _ = _compile(cfg)
    layer1 = relu(w1 @ normalized.as_array() + b1)
    layer2 = relu(w2 @ layer1 + b2)
    return layer1, layer2


def neural_score(
    normalized: NormalizedFeatures,
    config: NeuralScorerConfig | None = None,
) -> float:
    """Network output scaled to [0, output_scale] (default [0, 200])."""
    cfg = config or DEFAULT_SCORING_CONFIG.neural
    _, _, _, _, w_out = _compile(cfg)
    _, layer2 = hidden_activations(normalized, cfg)
    return sigmoid(float(w_out @ layer2) + cfg.output_bias) * cfg.output_scale
