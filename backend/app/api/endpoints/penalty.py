"""
penalty.py - Penalty calculation endpoint (occurrence profile).

Invalid counts (zero, negative) are rejected with a ValidationError body
instead of silently falling into the highest escalation tier.
"""

from decimal import Decimal

from fastapi import APIRouter, Query

from app.penalty import calculate

router = APIRouter()


@router.get("/calculate-penalty", response_model=float, summary="Calculate escalated penalty")
@router.get("/calculate", response_model=float, include_in_schema=False)
def calculate_penalty(
    base_amount: Decimal = Query(..., alias="baseAmount", description="Catalog base fine"),
    occurrence_count: int = Query(..., alias="occurrenceCount", description="Occurrences within 12 months"),
) -> float:
    return float(calculate(base_amount, occurrence_count))
