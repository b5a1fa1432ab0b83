"""
Application-level exceptions.

Responsibilities:
- Define domain exceptions (invalid applicant input, pipeline computation failure,
  per-item batch failure, oversized batch, empty fairness cohort).
- Provide consistent error codes and messages for API and tool error handling.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class AltScoreError(Exception):
    """Base class for AltScore errors. Carries a stable code and message."""

    code = "altscore_error"

    def __init__(self, message: str, *, detail: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail

    def to_dict(self, include_detail: bool = False) -> dict[str, Any]:
        out: dict[str, Any] = {"code": self.code, "message": self.message}
        if include_detail and self.detail:
            out["detail"] = self.detail
        return out


@dataclass(frozen=True)
class FieldError:
    """One field-level validation problem."""

    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


class ValidationError(AltScoreError):
    """Applicant input missing a field, of the wrong type, or out of range."""

    code = "validation_error"

    def __init__(self, errors: list[FieldError], message: str = "Invalid input data") -> None:
        super().__init__(message)
        self.errors = list(errors)

    @property
    def details(self) -> list[str]:
        """Human-readable per-field messages, e.g. '"age" must be >= 18'."""
        return [f'"{e.field}" {e.message}' for e in self.errors]

    def to_dict(self, include_detail: bool = False) -> dict[str, Any]:
        out = super().to_dict(include_detail)
        out["details"] = self.details
        out["fields"] = [e.to_dict() for e in self.errors]
        return out


class ComputationError(AltScoreError):
    """
    Internal arithmetic failure inside the pipeline (e.g. NaN propagation).

    message is stable and safe to show; detail is only exposed in debug mode.
    """

    code = "computation_error"


class BatchSizeError(AltScoreError):
    """Batch request is empty or larger than the configured maximum."""

    code = "batch_size_error"


class FairnessInputError(AltScoreError):
    """Fairness statistic called with an empty cohort."""

    code = "fairness_input_error"


class BatchItemError(AltScoreError):
    """
    A validation or computation error scoped to one batch element.

    Never propagates to sibling items; converted into a per-item marker
    with to_result().
    """

    code = "batch_item_error"

    def __init__(self, index: int, cause: AltScoreError) -> None:
        super().__init__(cause.message, detail=cause.detail)
        self.index = index
        self.cause = cause

    @property
    def kind(self) -> str:
        return "validation" if isinstance(self.cause, ValidationError) else "computation"

    def to_result(self, include_detail: bool = False) -> dict[str, Any]:
        """Per-item batch marker: {error, index, kind, message, details?}."""
        out: dict[str, Any] = {
            "error": True,
            "index": self.index,
            "kind": self.kind,
            "message": "Validation failed" if self.kind == "validation" else self.message,
        }
        if isinstance(self.cause, ValidationError):
            out["details"] = self.cause.details
        elif include_detail and self.detail:
            out["details"] = [self.detail]
        return out
