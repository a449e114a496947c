"""
test_submission.py - Form Submission Handler.

Tests cover:
1. Required fields are rejected before document generation
2. The penalty is derived before hand-off when absent
3. Catalog references are resolved server-side, client copies ignored
4. Exactly one resolution path per submission
5. Generator failures become DocumentGenerationError outcomes
"""

import json
import logging
from datetime import date
from decimal import Decimal

import pytest

from app.errors import DocumentGenerationError, ErrorKind, FormErrorCode, ValidationError
from app.services.submission import SubmissionHandler

from conftest import FIXED_TODAY, FailingGenerator


class TestParse:
    """Structural validation."""

    @pytest.mark.parametrize(
        "field,message",
        [
            ("firstName", "Name is required"),
            ("lastName", "Surname is required"),
            ("unit", "Unit is required"),
            ("contextInformation", "Context information is required"),
        ],
    )
    def test_blank_required_text_rejected(self, occurrence_handler, occurrence_submission, field, message):
        occurrence_submission[field] = "   "
        with pytest.raises(ValidationError) as exc_info:
            occurrence_handler.parse(occurrence_submission)

        error = exc_info.value.error
        assert error.error_code == FormErrorCode.MISSING_REQUIRED_FIELD
        assert error.details == {"field": field}
        assert error.message == message

    @pytest.mark.parametrize("field", ["firstName", "selectedBreach", "breachDate", "occurrenceCount"])
    def test_absent_required_field_rejected(self, occurrence_handler, occurrence_submission, field):
        del occurrence_submission[field]
        with pytest.raises(ValidationError) as exc_info:
            occurrence_handler.parse(occurrence_submission)
        assert exc_info.value.error.error_code == FormErrorCode.MISSING_REQUIRED_FIELD
        assert exc_info.value.error.details["field"] == field

    def test_null_required_field_rejected(self, occurrence_handler, occurrence_submission):
        occurrence_submission["breachDate"] = None
        with pytest.raises(ValidationError) as exc_info:
            occurrence_handler.parse(occurrence_submission)
        assert exc_info.value.error.error_code == FormErrorCode.MISSING_REQUIRED_FIELD
        assert exc_info.value.error.message == "Breach date is required"

    def test_malformed_field_is_schema_error(self, occurrence_handler, occurrence_submission):
        occurrence_submission["breachDate"] = "yesterday"
        with pytest.raises(ValidationError) as exc_info:
            occurrence_handler.parse(occurrence_submission)
        assert exc_info.value.error.error_code == FormErrorCode.SCHEMA_INVALID
        assert exc_info.value.error.details["field"] == "breachDate"

    def test_breach_without_id(self, occurrence_handler, occurrence_submission):
        occurrence_submission["selectedBreach"] = {"code": "B5.3.1"}
        with pytest.raises(ValidationError) as exc_info:
            occurrence_handler.parse(occurrence_submission)
        assert exc_info.value.error.details["field"] == "selectedBreach.id"

    @pytest.mark.parametrize(
        "body", [b"", b"   ", b"{not json", b"[1, 2]", "\"text\"", b'{"firstName": "\xff\xfe"}']
    )
    def test_body_not_a_json_object(self, occurrence_handler, body):
        with pytest.raises(ValidationError) as exc_info:
            occurrence_handler.parse(body)
        assert exc_info.value.error.error_code == FormErrorCode.SCHEMA_INVALID
        assert exc_info.value.error.details["field"] == "body"

    def test_json_bytes_accepted(self, occurrence_handler, occurrence_submission):
        form = occurrence_handler.parse(json.dumps(occurrence_submission).encode("utf-8"))
        assert form.first_name == "Ion"
        assert form.breach_date == date(2026, 10, 12)
        assert form.occurrence_count == 1


class TestCompleteOccurrence:
    """Penalty derivation in the occurrence profile."""

    def test_breach_8_first_occurrence(self, occurrence_handler, occurrence_submission):
        record = occurrence_handler.complete(occurrence_handler.parse(occurrence_submission))

        assert record.calculated_penalty == Decimal("1000.0")
        assert record.breach.code == "B5.3.1"
        assert record.occurrence_count == 1
        assert record.evidence_materials == ("photo_001.jpg", "camera_scara2_2026-10-12.mp4")

    @pytest.mark.parametrize("count,expected", [(2, "1000"), (3, "1500"), (4, "2000"), (5, "2000")])
    def test_escalated(self, occurrence_handler, occurrence_submission, count, expected):
        occurrence_submission["occurrenceCount"] = count
        record = occurrence_handler.complete(occurrence_handler.parse(occurrence_submission))
        assert record.calculated_penalty == Decimal(expected)

    def test_client_base_amount_never_trusted(self, occurrence_handler, occurrence_submission):
        occurrence_submission["selectedBreach"]["baseAmount"] = 1.0
        occurrence_submission["selectedBreach"]["description"] = "something else"
        record = occurrence_handler.complete(occurrence_handler.parse(occurrence_submission))
        assert record.calculated_penalty == Decimal("1000.0")
        assert record.breach.description == "Aruncarea gunoiului menajer în locuri neamenajate"

    def test_present_penalty_kept(self, occurrence_handler, occurrence_submission):
        occurrence_submission["calculatedPenalty"] = 1000.0
        record = occurrence_handler.complete(occurrence_handler.parse(occurrence_submission))
        assert record.calculated_penalty == Decimal("1000.0")

    def test_conflicting_client_penalty_logged(self, occurrence_handler, occurrence_submission, caplog):
        occurrence_submission["occurrenceCount"] = 4
        occurrence_submission["calculatedPenalty"] = 1
        with caplog.at_level(logging.WARNING, logger="app.services.submission"):
            record = occurrence_handler.complete(occurrence_handler.parse(occurrence_submission))

        assert record.calculated_penalty == Decimal("1")
        assert any(
            r.levelno == logging.WARNING and "computed 2000" in r.getMessage() for r in caplog.records
        )

    @pytest.mark.parametrize("count", [True, False, "3", 2.0])
    def test_count_must_be_an_integer(self, occurrence_handler, occurrence_submission, count):
        occurrence_submission["occurrenceCount"] = count
        with pytest.raises(ValidationError) as exc_info:
            occurrence_handler.parse(occurrence_submission)
        assert exc_info.value.error.error_code == FormErrorCode.OCCURRENCE_COUNT_INVALID
        assert exc_info.value.error.details["field"] == "occurrenceCount"

    def test_negative_penalty_rejected(self, occurrence_handler, occurrence_submission):
        occurrence_submission["calculatedPenalty"] = -10
        with pytest.raises(ValidationError) as exc_info:
            occurrence_handler.complete(occurrence_handler.parse(occurrence_submission))
        assert exc_info.value.error.details["field"] == "calculatedPenalty"

    @pytest.mark.parametrize("count", [0, -2])
    def test_non_positive_count_rejected(self, occurrence_handler, occurrence_submission, count):
        occurrence_submission["occurrenceCount"] = count
        with pytest.raises(ValidationError) as exc_info:
            occurrence_handler.complete(occurrence_handler.parse(occurrence_submission))
        assert exc_info.value.error.error_code == FormErrorCode.OCCURRENCE_COUNT_INVALID

    def test_unknown_breach(self, occurrence_handler, occurrence_submission):
        occurrence_submission["selectedBreach"] = {"id": 404}
        with pytest.raises(ValidationError) as exc_info:
            occurrence_handler.complete(occurrence_handler.parse(occurrence_submission))
        assert exc_info.value.error.error_code == FormErrorCode.UNKNOWN_BREACH

    def test_tier_selection_is_ambiguous(self, occurrence_handler, occurrence_submission):
        occurrence_submission["selectedPenalty"] = {"id": 2}
        with pytest.raises(ValidationError) as exc_info:
            occurrence_handler.complete(occurrence_handler.parse(occurrence_submission))
        assert exc_info.value.error.error_code == FormErrorCode.AMBIGUOUS_RESOLUTION
        assert exc_info.value.error.details["field"] == "selectedPenalty"

    def test_blank_evidence_dropped(self, occurrence_handler, occurrence_submission):
        occurrence_submission["evidenceMaterials"] = ["a.jpg", "  ", ""]
        record = occurrence_handler.complete(occurrence_handler.parse(occurrence_submission))
        assert record.evidence_materials == ("a.jpg",)

    def test_null_evidence(self, occurrence_handler, occurrence_submission):
        occurrence_submission["evidenceMaterials"] = None
        record = occurrence_handler.complete(occurrence_handler.parse(occurrence_submission))
        assert record.evidence_materials == ()


class TestCompleteTier:
    """Fixed penalty tiers."""

    def test_tier_amount_used(self, tier_handler, tier_submission):
        record = tier_handler.complete(tier_handler.parse(tier_submission))
        assert record.calculated_penalty == Decimal("1000.0")
        assert record.penalty_tier.code == "P2"
        assert record.occurrence_count is None
        assert record.unit is None

    def test_matching_client_amount_accepted(self, tier_handler, tier_submission):
        tier_submission["calculatedPenalty"] = 1000
        record = tier_handler.complete(tier_handler.parse(tier_submission))
        assert record.calculated_penalty == Decimal("1000.0")

    def test_conflicting_client_amount_rejected(self, tier_handler, tier_submission):
        tier_submission["calculatedPenalty"] = 50
        with pytest.raises(ValidationError) as exc_info:
            tier_handler.complete(tier_handler.parse(tier_submission))
        assert exc_info.value.error.error_code == FormErrorCode.PENALTY_MISMATCH

    def test_occurrence_count_is_ambiguous(self, tier_handler, tier_submission):
        tier_submission["occurrenceCount"] = 3
        with pytest.raises(ValidationError) as exc_info:
            tier_handler.complete(tier_handler.parse(tier_submission))
        assert exc_info.value.error.error_code == FormErrorCode.AMBIGUOUS_RESOLUTION

    def test_boolean_count_rejected(self, tier_handler, tier_submission):
        tier_submission["occurrenceCount"] = True
        with pytest.raises(ValidationError) as exc_info:
            tier_handler.parse(tier_submission)
        assert exc_info.value.error.error_code == FormErrorCode.OCCURRENCE_COUNT_INVALID

    def test_penalty_required(self, tier_handler, tier_submission):
        del tier_submission["selectedPenalty"]
        with pytest.raises(ValidationError) as exc_info:
            tier_handler.parse(tier_submission)
        assert exc_info.value.error.message == "A penalty must be selected"

    def test_unknown_penalty(self, tier_handler, tier_submission):
        tier_submission["selectedPenalty"] = {"id": 99}
        with pytest.raises(ValidationError) as exc_info:
            tier_handler.complete(tier_handler.parse(tier_submission))
        assert exc_info.value.error.error_code == FormErrorCode.UNKNOWN_PENALTY


class TestHandle:
    """Full pipeline outcomes."""

    def test_completed_record_reaches_generator(self, occurrence_handler, recording_generator, occurrence_submission):
        outcome = occurrence_handler.handle(json.dumps(occurrence_submission))

        assert outcome.ok
        assert outcome.document.startswith(b"%PDF")
        assert len(recording_generator.calls) == 1
        record, context = recording_generator.calls[0]
        assert record.calculated_penalty == Decimal("1000.0")
        assert context.today == "19/10/2026"
        assert context.currency == "lei"

    def test_invalid_submission_never_reaches_generator(self, occurrence_handler, recording_generator, occurrence_submission):
        occurrence_submission["firstName"] = ""
        outcome = occurrence_handler.handle(occurrence_submission)

        assert not outcome.ok
        assert outcome.kind == ErrorKind.VALIDATION
        assert outcome.document is None
        assert recording_generator.calls == []

    def test_generator_failure(self, occurrence_catalog, occurrence_submission):
        handler = SubmissionHandler(occurrence_catalog, FailingGenerator(), today=lambda: FIXED_TODAY)
        outcome = handler.handle(occurrence_submission)

        assert outcome.kind == ErrorKind.DOCUMENT_GENERATION
        assert outcome.error.error_code == FormErrorCode.DOCUMENT_GENERATION_FAILED
        assert outcome.error.details == {"reason": "RuntimeError"}
        assert outcome.document is None
        assert outcome.record is not None

    def test_non_utf8_body_is_validation_outcome(self, occurrence_handler, recording_generator):
        outcome = occurrence_handler.handle(b'{"firstName": "\xff\xfe"}')

        assert outcome.kind == ErrorKind.VALIDATION
        assert outcome.error.details == {"field": "body"}
        assert recording_generator.calls == []

    def test_unexpected_error_becomes_outcome(self, recording_generator, occurrence_submission):
        class BrokenCatalog:
            profile = "occurrence"

            def find_breach(self, breach_id):
                raise KeyError(breach_id)

        handler = SubmissionHandler(BrokenCatalog(), recording_generator, today=lambda: FIXED_TODAY)
        outcome = handler.handle(occurrence_submission)

        assert outcome.kind == ErrorKind.DOCUMENT_GENERATION
        assert outcome.error.details == {"reason": "KeyError"}
        assert outcome.document is None
        assert recording_generator.calls == []

    def test_empty_document_is_failure(self, occurrence_catalog, occurrence_submission):
        class EmptyGenerator(FailingGenerator):
            def generate(self, record, context):
                return b""

        handler = SubmissionHandler(occurrence_catalog, EmptyGenerator())
        with pytest.raises(DocumentGenerationError):
            handler.render(handler.complete(handler.parse(occurrence_submission)))
