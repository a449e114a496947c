"""
penalty_form.py - Pydantic schemas for penalty form submissions.

HARD INVARIANTS:
- A submission resolves its penalty through exactly one path:
  occurrence profile -> computed from the breach base amount
  tier profile       -> the selected fixed penalty tier
- Catalog references (selectedBreach, selectedPenalty) are resolved by id.
  Any other fields the client sends with them are NEVER TRUSTED.
- Blank strings count as missing.
"""

from datetime import date

from pydantic import ConfigDict, Field, StrictInt
from pydantic.alias_generators import to_camel

from .catalog import CamelModel, Money

# Messages shown to the reporter, keyed by wire field name
REQUIRED_FIELD_MESSAGES = {
    "firstName": "Name is required",
    "lastName": "Surname is required",
    "unit": "Unit is required",
    "selectedBreach": "At least one breach must be selected",
    "selectedPenalty": "A penalty must be selected",
    "breachDate": "Breach date is required",
    "occurrenceCount": "Occurrence count is required",
    "contextInformation": "Context information is required",
}


class FormModel(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class BreachRef(FormModel):
    """Client copy of a catalog breach. Only `id` is used."""

    id: int
    code: str | None = None
    description: str | None = None
    base_amount: Money | None = None
    regulation_reference: str | None = None


class PenaltyRef(FormModel):
    """Client copy of a catalog penalty tier. Only `id` is used."""

    id: int
    code: str | None = None
    description: str | None = None
    amount: Money | None = None


class OccurrencePenaltyForm(FormModel):
    """Submission for the occurrence profile."""

    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    unit: str = Field(..., min_length=1, description="Apartment / unit identifier")
    selected_breach: BreachRef
    breach_date: date
    occurrence_count: StrictInt = Field(..., description="Occurrences of this breach within 12 months")
    context_information: str = Field(..., min_length=1)
    evidence_materials: list[str] | None = None
    calculated_penalty: Money | None = Field(None, description="Computed server-side if absent")

    # Belongs to the tier profile; rejected if present
    selected_penalty: PenaltyRef | None = None


class TierPenaltyForm(FormModel):
    """Submission for the tier profile."""

    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    unit: str | None = None
    selected_breach: BreachRef
    selected_penalty: PenaltyRef
    breach_date: date | None = None
    context_information: str | None = None
    evidence_materials: list[str] | None = None
    calculated_penalty: Money | None = Field(None, description="Must equal the tier amount if present")

    # Belongs to the occurrence profile; rejected if present
    occurrence_count: StrictInt | None = None


class EmptyFormView(CamelModel):
    """Initial state of the form page."""

    profile: str
    today: str = Field(..., description="Issue date, dd/MM/yyyy")
    currency: str
    penalty_form: dict = Field(default_factory=dict)
