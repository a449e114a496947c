"""
base.py - Document generator contract.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from app.services.records import PenaltyRecord


@dataclass(frozen=True)
class RenderContext:
    """Values the document needs beyond the submission itself."""

    today: str  # Issue date, already formatted (dd/MM/yyyy)
    date_format: str = "%d/%m/%Y"
    currency: str = "lei"
    title: str = "Breach Report and Penalty Notice"


class DocumentGenerator(ABC):
    """
    Turns a completed PenaltyRecord into a binary document.

    Implementations may raise any exception; the submission handler converts
    failures into DocumentGenerationError.
    """

    media_type: str = "application/octet-stream"

    @abstractmethod
    def generate(self, record: PenaltyRecord, context: RenderContext) -> bytes:
        ...
