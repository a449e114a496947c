"""
records.py - Completed submission record.

A PenaltyRecord exists only after validation and catalog resolution.
It is the ONLY input type for document generation and is never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from app.catalog.models import Breach, Penalty, TierBreach


@dataclass(frozen=True)
class PenaltyRecord:
    first_name: str
    last_name: str
    unit: str | None
    breach: Breach | TierBreach  # Catalog entry, never the client copy
    calculated_penalty: Decimal
    breach_date: date | None = None
    occurrence_count: int | None = None  # occurrence profile only
    penalty_tier: Penalty | None = None  # tier profile only
    context_information: str | None = None
    evidence_materials: tuple[str, ...] = ()

    @property
    def reporter_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
