"""
Analytics package: explanations, bias analysis, fairness statistics, and the
assessment pipeline that combines them with the score.
"""

from backend_altscore.analytics.assessment_pipeline import (
    assess,
    assess_applicant,
    get_model_info,
    score_batch,
)
from backend_altscore.analytics.bias_detector import (
    BiasReport,
    analyze_bias,
    generate_bias_report,
)
from backend_altscore.analytics.explainability_engine import (
    EXPLANATION_WEIGHT_TOTAL,
    EXPLANATION_WEIGHTS,
    Explanation,
    explain,
)
from backend_altscore.analytics.fairness_metrics import (
    CohortRecord,
    Outcome,
    demographic_parity,
    equal_opportunity,
    equalized_odds,
)

__all__ = [
    "assess",
    "assess_applicant",
    "score_batch",
    "get_model_info",
    "BiasReport",
    "analyze_bias",
    "generate_bias_report",
    "EXPLANATION_WEIGHTS",
    "EXPLANATION_WEIGHT_TOTAL",
    "Explanation",
    "explain",
    "CohortRecord",
    "Outcome",
    "demographic_parity",
    "equalized_odds",
    "equal_opportunity",
]
