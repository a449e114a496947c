"""
catalog.py - Pydantic schemas for reference catalog responses.

Field names go over the wire in camelCase (baseAmount, regulationReference).
"""

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

# Amounts are Decimal internally and plain JSON numbers on the wire
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class BreachRead(CamelModel):
    """Breach with its own base fine (occurrence profile)."""

    id: int = Field(..., description="Catalog identity")
    code: str = Field(..., description="Short code, e.g. B5.3.1")
    description: str
    base_amount: Money = Field(..., description="Fine for a first occurrence")
    regulation_reference: str = Field(..., description="Regulation article")


class TierBreachRead(CamelModel):
    """Breach without an amount (tier profile)."""

    id: int
    code: str
    description: str


class PenaltyRead(CamelModel):
    """Fixed penalty tier (tier profile)."""

    id: int
    code: str
    description: str
    amount: Money


class CatalogInfo(CamelModel):
    """Identity of the loaded catalog."""

    profile: str = Field(..., description="occurrence | tier")
    version: str
    catalog_hash: str = Field(..., description="SHA-256 of the canonical catalog content")
    breach_count: int
    penalty_count: int
