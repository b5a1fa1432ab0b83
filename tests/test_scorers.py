"""
Tests for the rule-based scorer, neural scorer, and ensemble blend.
"""

from __future__ import annotations

import numpy as np
import pytest


def _normalized(payload):
    from backend_altscore.scoring_engine import normalize_features, validate_applicant

    return normalize_features(validate_applicant(payload))


# --- Rule-based scorer ---


def test_rule_breakdown_reference_applicant(applicant_payload):
    """Payment tier 120, stability 40, no age bonus (age 30), commerce and location partial."""
    from backend_altscore.scoring_engine import rule_based_breakdown, rule_based_score

    n = _normalized(applicant_payload)
    b = rule_based_breakdown(n)
    assert b.payment == 120
    assert b.stability == pytest.approx(40.0)
    assert b.age == 0
    assert b.commerce == pytest.approx(47.1)
    assert b.location == pytest.approx(27.5556, abs=1e-3)
    assert rule_based_score(n) == pytest.approx(b.total)
    assert b.to_dict()["total"] == pytest.approx(234.66, abs=0.01)


def test_rule_payment_tiers(applicant_payload):
    """Payment composite tiers: >0.8 120, >0.6 80, >0.4 40, else -20."""
    from backend_altscore.scoring_engine import rule_based_breakdown

    def payment_points(score_1_10):
        payload = dict(
            applicant_payload,
            phone_payment_consistency=score_1_10,
            electricity_payment_history=score_1_10,
            internet_payment_consistency=score_1_10,
        )
        return rule_based_breakdown(_normalized(payload)).payment

    assert payment_points(10) == 120   # p = 1.0
    assert payment_points(7) == 80     # p = 0.667
    assert payment_points(5) == 40     # p = 0.444
    assert payment_points(4) == -20    # p = 0.333
    assert payment_points(1) == -20


def test_rule_age_bonuses_stack(applicant_payload):
    """Age bonus +40 past normalized 0.3, another +20 past 0.6."""
    from backend_altscore.scoring_engine import rule_based_breakdown

    assert rule_based_breakdown(_normalized(dict(applicant_payload, age=25))).age == 0
    assert rule_based_breakdown(_normalized(dict(applicant_payload, age=35))).age == 40
    assert rule_based_breakdown(_normalized(dict(applicant_payload, age=50))).age == 60


def test_rule_scorer_is_deterministic(applicant_payload):
    """Repeated calls on identical input give identical output."""
    from backend_altscore.scoring_engine import rule_based_score

    n = _normalized(applicant_payload)
    assert len({rule_based_score(n) for _ in range(20)}) == 1


# --- Neural scorer ---


def test_neural_reference_applicant(applicant_payload):
    """Hand-computed forward pass for the reference applicant."""
    from backend_altscore.scoring_engine import neural_score
    from backend_altscore.scoring_engine.neural_scorer import hidden_activations

    n = _normalized(applicant_payload)
    layer1, layer2 = hidden_activations(n)
    assert layer1.tolist() == pytest.approx([0.41667, 0.55889, 0.57778], abs=1e-4)
    assert layer2.tolist() == pytest.approx([0.40200, 0.52211], abs=1e-4)
    assert neural_score(n) == pytest.approx(126.83, abs=0.05)


def test_neural_bounds(min_payload, max_payload):
    """Output stays in [0, 200]; all-zero hidden layers give sigmoid(0.1) * 200."""
    from backend_altscore.scoring_engine import neural_score

    low = neural_score(_normalized(min_payload))
    high = neural_score(_normalized(max_payload))
    assert low == pytest.approx(200 / (1 + np.exp(-0.1)))
    assert 0 <= low < high <= 200


def test_neural_scorer_is_deterministic(applicant_payload):
    """No hidden state: repeated calls are identical."""
    from backend_altscore.scoring_engine import neural_score

    n = _normalized(applicant_payload)
    assert len({neural_score(n) for _ in range(20)}) == 1


def test_neural_weights_are_read_only():
    """Compiled weight matrices cannot be modified in place."""
    from backend_altscore.scoring_engine.model_config import DEFAULT_SCORING_CONFIG
    from backend_altscore.scoring_engine.neural_scorer import _compile

    w1, *_ = _compile(DEFAULT_SCORING_CONFIG.neural)
    assert w1.shape == (3, 16)
    with pytest.raises(ValueError):
        w1[0, 0] = 1.0


# --- Ensemble ---


def test_blend_without_jitter():
    """300 + 2.2 * (0.7 * rule + 0.3 * neural), rounded."""
    from backend_altscore.scoring_engine import blend_scores

    assert blend_scores(100, 100) == 520
    assert blend_scores(0, 0) == 300


def test_blend_clamps_to_range():
    """Raw values outside [300, 850] are clamped before rounding."""
    from backend_altscore.scoring_engine import blend_scores

    assert blend_scores(1000, 200) == 850
    assert blend_scores(-500, 0) == 300


def test_halves_round_up():
    """Half-point raw scores round up, not to the nearest even integer."""
    from backend_altscore.scoring_engine.ensemble import clamp_score, round_half_up

    assert clamp_score(700.5) == 701
    assert clamp_score(699.5) == 700
    assert clamp_score(700.49) == 700
    assert round_half_up(234.5) == 235
    assert round_half_up(126.5) == 127


def test_blend_jitter_is_bounded_and_seedable():
    """Seeded generators reproduce jitter; jitter stays within +/-5 points."""
    from backend_altscore.scoring_engine import blend_scores

    base = blend_scores(150, 120)
    a = [blend_scores(150, 120, rng=np.random.default_rng(7)) for _ in range(3)]
    assert len(set(a)) == 1
    rng = np.random.default_rng(123)
    jittered = [blend_scores(150, 120, rng=rng) for _ in range(200)]
    assert all(abs(s - base) <= 6 for s in jittered)
    assert len(set(jittered)) > 1


def test_draw_jitter_none_is_zero():
    from backend_altscore.scoring_engine.ensemble import draw_jitter

    assert draw_jitter(None) == 0.0
