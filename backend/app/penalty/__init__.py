"""Penalty escalation rule."""

from .calculator import calculate, escalation_multiplier, to_amount

__all__ = ["calculate", "escalation_multiplier", "to_amount"]
