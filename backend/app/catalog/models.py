"""
models.py - Immutable reference catalog entries.

These are data transfer objects loaded once at startup, not ORM models.
The two profiles have separate breach shapes on purpose:
- occurrence profile: Breach carries its own base amount and regulation article
- tier profile: TierBreach is paired with a separately selected Penalty
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

PROFILE_OCCURRENCE = "occurrence"
PROFILE_TIER = "tier"
PROFILES = (PROFILE_OCCURRENCE, PROFILE_TIER)


@dataclass(frozen=True)
class Breach:
    """A catalogued infraction with its base fine (occurrence profile)."""

    id: int
    code: str
    description: str
    base_amount: Decimal
    regulation_reference: str


@dataclass(frozen=True)
class TierBreach:
    """A catalogued infraction without an amount (tier profile)."""

    id: int
    code: str
    description: str


@dataclass(frozen=True)
class Penalty:
    """A fixed-amount fine bracket (tier profile)."""

    id: int
    code: str
    description: str
    amount: Decimal


@dataclass(frozen=True)
class Catalog:
    """
    Immutable snapshot of the active reference data.

    Tuples preserve declaration order, which is the display order of the form.
    """

    profile: str
    version: str
    catalog_hash: str  # SHA-256 of the canonical source content
    breaches: tuple[Breach, ...] | tuple[TierBreach, ...]
    penalties: tuple[Penalty, ...] = ()
    occurrences: tuple[int, ...] = ()

    def find_breach(self, breach_id: int) -> Breach | TierBreach | None:
        for breach in self.breaches:
            if breach.id == breach_id:
                return breach
        return None

    def find_penalty(self, penalty_id: int) -> Penalty | None:
        for penalty in self.penalties:
            if penalty.id == penalty_id:
                return penalty
        return None
