"""
FastAPI server: credit scoring over HTTP.

Exposes POST /api/credit-scoring/calculate (one applicant), POST
/api/credit-scoring/batch (many applicants), GET /api/credit-scoring/model-info
and GET /health. All computation is delegated to the assessment pipeline;
request bodies are validated by the domain validator so field-level messages
are identical across API, tools, and library callers.
"""

from __future__ import annotations

from typing import Any

from fastapi import Body, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from backend_altscore import __version__
from backend_altscore.altscore_logging import get_logger
from backend_altscore.analytics.assessment_pipeline import (
    assess_applicant,
    get_model_info,
    score_batch,
)
from backend_altscore.api_server.middleware import log_requests
from backend_altscore.config import get_settings
from backend_altscore.core.exceptions import (
    BatchSizeError,
    ComputationError,
    FieldError,
    ValidationError,
)

logger = get_logger(__name__)

API_PREFIX = "/api/credit-scoring"


# -----------------------------------------------------------------------------
# Response models
# -----------------------------------------------------------------------------


class ModelScoresResponse(BaseModel):
    rule_based: int
    neural: int


class CreditScoreResponse(BaseModel):
    """POST /calculate response: score, category, explanation summary, bias metrics."""

    credit_score: int = Field(..., ge=300, le=850)
    risk_category: str
    probability: float = Field(..., ge=0, le=100, description="Default probability (%)")
    model_scores: ModelScoresResponse
    explanation: str = Field(..., description="Plain-language summary")
    feature_importance: dict[str, dict[str, Any]]
    bias_metrics: dict[str, Any]
    model_version: str
    timestamp: str


class BatchResponse(BaseModel):
    """POST /batch response. results keep input order; failed items carry error markers."""

    results: list[dict[str, Any]]
    processed: int
    failed: int
    timestamp: str


class ErrorResponse(BaseModel):
    error: str
    details: list[str] | None = None


# -----------------------------------------------------------------------------
# App and routes
# -----------------------------------------------------------------------------

app = FastAPI(
    title="AltScore Credit Scoring API",
    description="Alternative-data credit scores with explanations and bias analysis.",
    version=__version__,
)
app.middleware("http")(log_requests)


@app.exception_handler(ValidationError)
def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """400 with per-field details."""
    logger.info("request_validation_failed", path=request.url.path, fields=[e.field for e in exc.errors])
    return JSONResponse(
        status_code=400,
        content={"error": exc.message, "details": exc.details},
    )


@app.exception_handler(BatchSizeError)
def batch_size_error_handler(request: Request, exc: BatchSizeError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": exc.message})


@app.exception_handler(ComputationError)
def computation_error_handler(request: Request, exc: ComputationError) -> JSONResponse:
    """500 with a stable message; detail only in debug mode."""
    logger.error("computation_failed", path=request.url.path, message=exc.message, detail=exc.detail)
    content: dict[str, Any] = {"error": exc.message}
    if get_settings().debug and exc.detail:
        content["details"] = [exc.detail]
    return JSONResponse(status_code=500, content=content)


@app.get("/health")
def health() -> dict[str, str]:
    """Liveness probe: API is up."""
    return {"status": "ok", "version": get_settings().model_version}


@app.post(
    f"{API_PREFIX}/calculate",
    response_model=CreditScoreResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def calculate(body: Any = Body(...)) -> dict[str, Any]:
    """Score one applicant: credit score, risk category, explanation, bias metrics."""
    return assess_applicant(body, get_settings())


@app.post(
    f"{API_PREFIX}/batch",
    response_model=BatchResponse,
    responses={400: {"model": ErrorResponse}},
)
def batch(body: Any = Body(...)) -> dict[str, Any]:
    """
    Score up to max_batch_size applicants from {"applicants": [...]}.

    Always 200 once the batch itself is accepted; per-item failures are embedded.
    """
    if not isinstance(body, dict) or "applicants" not in body:
        raise ValidationError([FieldError("applicants", "is required")])
    return score_batch(body["applicants"], get_settings())


@app.get(f"{API_PREFIX}/model-info")
def model_info() -> dict[str, Any]:
    """Static model metadata. Performance and bias figures are reported constants."""
    return get_model_info(get_settings())
