"""Reference catalog package."""

from .loader import get_catalog, load_catalog
from .models import PROFILE_OCCURRENCE, PROFILE_TIER, Breach, Catalog, Penalty, TierBreach

__all__ = [
    "get_catalog",
    "load_catalog",
    "PROFILE_OCCURRENCE",
    "PROFILE_TIER",
    "Breach",
    "Catalog",
    "Penalty",
    "TierBreach",
]
