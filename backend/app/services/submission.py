"""
submission.py - Form Submission Handler.

Pipeline for a single submission:
1. Parse   - JSON decode + structural validation (pydantic)
2. Complete - resolve catalog references, derive the final penalty
3. Render  - hand the completed record to the document generator

handle() never raises. It returns a SubmissionOutcome carrying either the
document or a FormError, and the caller decides how to present it.
Unexpected exceptions become DOCUMENT_GENERATION outcomes. No retries,
no partial output.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable

from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from app.catalog.models import PROFILE_OCCURRENCE, Catalog
from app.documents.base import DocumentGenerator, RenderContext
from app.errors import (
    DocumentGenerationError,
    ErrorKind,
    FormError,
    ValidationError,
    ambiguous_resolution,
    document_generation_failed,
    missing_required_field,
    occurrence_count_invalid,
    penalty_mismatch,
    schema_invalid,
    unknown_breach,
    unknown_penalty,
)
from app.penalty import calculate
from app.schemas.penalty_form import (
    REQUIRED_FIELD_MESSAGES,
    OccurrencePenaltyForm,
    TierPenaltyForm,
)

from .records import PenaltyRecord

logger = logging.getLogger(__name__)

# pydantic error types that mean "the reporter left this empty"
MISSING_ERROR_TYPES = {"missing", "string_too_short"}


@dataclass(frozen=True)
class SubmissionOutcome:
    """Explicit result of handle(): a document, or the reason there is none."""

    record: PenaltyRecord | None = None
    document: bytes | None = None
    error: FormError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> ErrorKind | None:
        return self.error.kind if self.error else None


def _wire_name(loc: tuple[Any, ...]) -> str:
    """Render a pydantic error location as the camelCase field path the client sent."""
    parts = []
    for part in loc:
        if isinstance(part, int):
            parts.append(f"[{part}]")
            continue
        name = str(part)
        if "_" in name:
            name = to_camel(name)
        parts.append(f".{name}" if parts else name)
    return "".join(parts) or "body"


def _to_validation_error(exc: PydanticValidationError) -> ValidationError:
    """Report the first failing field, as the reporter would fix them top-down."""
    error = exc.errors()[0]
    loc = tuple(error.get("loc", ()))
    field = _wire_name(loc)
    top_level = field.split(".")[0].split("[")[0]

    is_missing = error["type"] in MISSING_ERROR_TYPES or (
        error.get("input", ...) is None and len(loc) == 1
    )
    if is_missing and len(loc) == 1 and top_level in REQUIRED_FIELD_MESSAGES:
        return missing_required_field(field, REQUIRED_FIELD_MESSAGES[top_level])
    if error["type"] == "json_invalid":
        return schema_invalid("body", "Request body is not valid JSON")
    if field == "occurrenceCount":
        return occurrence_count_invalid(error.get("input"))
    return schema_invalid(field, f"{field}: {error['msg']}")


class SubmissionHandler:
    """
    Validates, completes, and renders penalty form submissions.

    One handler serves all requests; it holds only read-only collaborators.
    """

    def __init__(
        self,
        catalog: Catalog,
        generator: DocumentGenerator,
        date_format: str = "%d/%m/%Y",
        currency: str = "lei",
        today: Callable[[], date] = date.today,
    ) -> None:
        self.catalog = catalog
        self.generator = generator
        self.date_format = date_format
        self.currency = currency
        self._today = today

    @property
    def form_model(self) -> type[OccurrencePenaltyForm] | type[TierPenaltyForm]:
        if self.catalog.profile == PROFILE_OCCURRENCE:
            return OccurrencePenaltyForm
        return TierPenaltyForm

    # --- 1. Parse ---

    def parse(self, raw: bytes | str | dict[str, Any]) -> OccurrencePenaltyForm | TierPenaltyForm:
        """
        Structural validation of a raw submission.

        Raises:
            ValidationError: invalid JSON, a missing/blank required field, or a
                field of the wrong type. details["field"] names the field.
        """
        model = self.form_model
        try:
            if isinstance(raw, dict):
                return model.model_validate(raw)
            if isinstance(raw, (bytes, str)) and not raw.strip():
                raise schema_invalid("body", "Request body is empty")
            payload = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise schema_invalid("body", "Request body is not valid JSON") from None
        except PydanticValidationError as e:
            raise _to_validation_error(e) from None

        if not isinstance(payload, dict):
            raise schema_invalid("body", "Request body must be a JSON object")
        try:
            return model.model_validate(payload)
        except PydanticValidationError as e:
            raise _to_validation_error(e) from None

    # --- 2. Complete ---

    def complete(self, form: OccurrencePenaltyForm | TierPenaltyForm) -> PenaltyRecord:
        """
        Resolve catalog references and derive the final penalty.

        Raises:
            ValidationError: unknown breach/penalty, both resolution paths
                present, invalid occurrence count, or an inconsistent amount
        """
        if isinstance(form, OccurrencePenaltyForm):
            return self._complete_occurrence(form)
        return self._complete_tier(form)

    def _complete_occurrence(self, form: OccurrencePenaltyForm) -> PenaltyRecord:
        if form.selected_penalty is not None:
            raise ambiguous_resolution("selectedPenalty")

        breach = self.catalog.find_breach(form.selected_breach.id)
        if breach is None:
            raise unknown_breach(form.selected_breach.id)

        computed = calculate(breach.base_amount, form.occurrence_count)
        if form.calculated_penalty is None:
            final = computed
        else:
            if form.calculated_penalty < 0:
                raise schema_invalid("calculatedPenalty", "Calculated penalty must be non-negative")
            final = form.calculated_penalty
            if final != computed:
                logger.warning(
                    "Keeping client calculatedPenalty=%s for breach %s (computed %s)",
                    final, breach.code, computed,
                )

        return PenaltyRecord(
            first_name=form.first_name,
            last_name=form.last_name,
            unit=form.unit,
            breach=breach,
            calculated_penalty=final,
            breach_date=form.breach_date,
            occurrence_count=form.occurrence_count,
            context_information=form.context_information,
            evidence_materials=tuple(item for item in form.evidence_materials or () if item),
        )

    def _complete_tier(self, form: TierPenaltyForm) -> PenaltyRecord:
        if form.occurrence_count is not None:
            raise ambiguous_resolution("occurrenceCount")

        breach = self.catalog.find_breach(form.selected_breach.id)
        if breach is None:
            raise unknown_breach(form.selected_breach.id)

        penalty = self.catalog.find_penalty(form.selected_penalty.id)
        if penalty is None:
            raise unknown_penalty(form.selected_penalty.id)

        if form.calculated_penalty is not None and form.calculated_penalty != penalty.amount:
            raise penalty_mismatch(penalty.amount, form.calculated_penalty)

        return PenaltyRecord(
            first_name=form.first_name,
            last_name=form.last_name,
            unit=form.unit or None,
            breach=breach,
            calculated_penalty=penalty.amount,
            breach_date=form.breach_date,
            penalty_tier=penalty,
            context_information=form.context_information or None,
            evidence_materials=tuple(item for item in form.evidence_materials or () if item),
        )

    # --- 3. Render ---

    def render_context(self) -> RenderContext:
        return RenderContext(
            today=self._today().strftime(self.date_format),
            date_format=self.date_format,
            currency=self.currency,
        )

    def render(self, record: PenaltyRecord) -> bytes:
        """
        Hand the completed record to the document generator.

        Raises:
            DocumentGenerationError: the generator raised or returned nothing
        """
        try:
            document = self.generator.generate(record, self.render_context())
        except Exception as e:
            logger.exception("Document generation failed for breach %s", record.breach.code)
            raise document_generation_failed(type(e).__name__) from e

        if not document:
            logger.error("Document generator returned no content for breach %s", record.breach.code)
            raise document_generation_failed("empty document")
        return document

    # --- Pipeline ---

    def handle(self, raw: bytes | str | dict[str, Any]) -> SubmissionOutcome:
        """Run parse -> complete -> render for one submission."""
        record = None
        try:
            form = self.parse(raw)
            record = self.complete(form)
            document = self.render(record)
        except ValidationError as e:
            logger.warning(
                "Submission rejected: %s %s", e.error.error_code.value, e.error.details or {}
            )
            return SubmissionOutcome(error=e.error)
        except DocumentGenerationError as e:
            return SubmissionOutcome(record=record, error=e.error)
        except Exception as e:
            logger.exception("Unexpected error while handling penalty form submission")
            return SubmissionOutcome(record=record, error=document_generation_failed(type(e).__name__).error)

        logger.info(
            "Generated %d-byte document for breach %s (penalty %s)",
            len(document), record.breach.code, record.calculated_penalty,
        )
        return SubmissionOutcome(record=record, document=document)
