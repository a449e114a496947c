"""
errors.py - Error taxonomy for form submissions.

Two kinds reach the caller:
- VALIDATION: the submission is rejected before any document is produced (400)
- DOCUMENT_GENERATION: the renderer failed; no partial output (500, empty body)

Every failure is terminal for the request. Nothing is retried.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    VALIDATION = "VALIDATION"
    DOCUMENT_GENERATION = "DOCUMENT_GENERATION"


class FormErrorCode(str, Enum):
    # VALIDATION (400)
    SCHEMA_INVALID = "FORM_SCHEMA_INVALID"
    MISSING_REQUIRED_FIELD = "FORM_MISSING_REQUIRED_FIELD"
    OCCURRENCE_COUNT_INVALID = "FORM_OCCURRENCE_COUNT_INVALID"
    BASE_AMOUNT_INVALID = "FORM_BASE_AMOUNT_INVALID"
    UNKNOWN_BREACH = "FORM_UNKNOWN_BREACH"
    UNKNOWN_PENALTY = "FORM_UNKNOWN_PENALTY"
    AMBIGUOUS_RESOLUTION = "FORM_AMBIGUOUS_RESOLUTION"
    PENALTY_MISMATCH = "FORM_PENALTY_MISMATCH"

    # DOCUMENT_GENERATION (500)
    DOCUMENT_GENERATION_FAILED = "FORM_DOCUMENT_GENERATION_FAILED"


@dataclass(frozen=True)
class FormError:
    """Immutable error value returned to callers instead of a bare status."""
    error_code: FormErrorCode
    kind: ErrorKind
    message: str
    details: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_code": self.error_code.value,
            "kind": self.kind.value,
            "message": self.message,
            "details": self.details or {},
        }


class FormException(Exception):
    """Base exception carrying a FormError payload."""
    def __init__(self, error: FormError):
        self.error = error
        super().__init__(error.message)


class ValidationError(FormException):
    """A required submission field is missing or malformed."""


class DocumentGenerationError(FormException):
    """The document renderer failed."""


class CatalogError(Exception):
    """A reference catalog file is missing or malformed. Raised at startup only."""


# Pre-defined error factories for consistency
def missing_required_field(field: str, message: str) -> ValidationError:
    return ValidationError(FormError(
        error_code=FormErrorCode.MISSING_REQUIRED_FIELD,
        kind=ErrorKind.VALIDATION,
        message=message,
        details={"field": field},
    ))


def schema_invalid(field: str, message: str) -> ValidationError:
    return ValidationError(FormError(
        error_code=FormErrorCode.SCHEMA_INVALID,
        kind=ErrorKind.VALIDATION,
        message=message,
        details={"field": field},
    ))


def occurrence_count_invalid(received: Any) -> ValidationError:
    """
    Occurrence counts must be positive integers.

    Zero and negative counts are rejected rather than falling into the
    highest escalation tier.
    """
    return ValidationError(FormError(
        error_code=FormErrorCode.OCCURRENCE_COUNT_INVALID,
        kind=ErrorKind.VALIDATION,
        message="Occurrence count must be a positive integer",
        details={"field": "occurrenceCount", "received": repr(received)},
    ))


def base_amount_invalid(received: Any) -> ValidationError:
    return ValidationError(FormError(
        error_code=FormErrorCode.BASE_AMOUNT_INVALID,
        kind=ErrorKind.VALIDATION,
        message="Base amount must be a non-negative number",
        details={"field": "baseAmount", "received": repr(received)},
    ))


def unknown_breach(breach_id: Any) -> ValidationError:
    return ValidationError(FormError(
        error_code=FormErrorCode.UNKNOWN_BREACH,
        kind=ErrorKind.VALIDATION,
        message="Selected breach is not in the catalog",
        details={"field": "selectedBreach", "id": breach_id},
    ))


def unknown_penalty(penalty_id: Any) -> ValidationError:
    return ValidationError(FormError(
        error_code=FormErrorCode.UNKNOWN_PENALTY,
        kind=ErrorKind.VALIDATION,
        message="Selected penalty is not in the catalog",
        details={"field": "selectedPenalty", "id": penalty_id},
    ))


def ambiguous_resolution(field: str) -> ValidationError:
    """The submission names both a penalty tier and occurrence metadata."""
    return ValidationError(FormError(
        error_code=FormErrorCode.AMBIGUOUS_RESOLUTION,
        kind=ErrorKind.VALIDATION,
        message="Submission must resolve the penalty either by tier or by occurrence count, not both",
        details={"field": field},
    ))


def penalty_mismatch(expected: Any, received: Any) -> ValidationError:
    return ValidationError(FormError(
        error_code=FormErrorCode.PENALTY_MISMATCH,
        kind=ErrorKind.VALIDATION,
        message="Calculated penalty does not match the selected penalty tier",
        details={"field": "calculatedPenalty", "expected": str(expected), "received": str(received)},
    ))


def document_generation_failed(reason: str) -> DocumentGenerationError:
    return DocumentGenerationError(FormError(
        error_code=FormErrorCode.DOCUMENT_GENERATION_FAILED,
        kind=ErrorKind.DOCUMENT_GENERATION,
        message="Document generation failed",
        details={"reason": reason},
    ))
