"""
catalog.py - Reference catalog endpoints.

Read-only. The catalog is loaded once at startup and never mutated,
so every call returns the same entries in the same order.
"""

from fastapi import APIRouter, Depends

from app.api.deps import get_active_catalog
from app.catalog.models import Catalog
from app.schemas.catalog import BreachRead, CatalogInfo, PenaltyRead, TierBreachRead

# Mounted for both profiles
router = APIRouter()

# Mounted for the occurrence profile only
occurrence_router = APIRouter()

# Mounted for the tier profile only
tier_router = APIRouter()


@router.get("/catalog", response_model=CatalogInfo, summary="Loaded catalog identity")
def catalog_info(catalog: Catalog = Depends(get_active_catalog)) -> CatalogInfo:
    return CatalogInfo(
        profile=catalog.profile,
        version=catalog.version,
        catalog_hash=catalog.catalog_hash,
        breach_count=len(catalog.breaches),
        penalty_count=len(catalog.penalties),
    )


@occurrence_router.get("/breaches", response_model=list[BreachRead], summary="List all breaches")
def list_breaches(catalog: Catalog = Depends(get_active_catalog)) -> list[BreachRead]:
    return [BreachRead.model_validate(b) for b in catalog.breaches]


@occurrence_router.get("/occurrences", response_model=list[int], summary="List valid occurrence counts")
def list_occurrences(catalog: Catalog = Depends(get_active_catalog)) -> list[int]:
    return list(catalog.occurrences)


@tier_router.get("/breaches", response_model=list[TierBreachRead], summary="List all breaches")
def list_tier_breaches(catalog: Catalog = Depends(get_active_catalog)) -> list[TierBreachRead]:
    return [TierBreachRead.model_validate(b) for b in catalog.breaches]


@tier_router.get("/penalties", response_model=list[PenaltyRead], summary="List all penalty tiers")
def list_penalties(catalog: Catalog = Depends(get_active_catalog)) -> list[PenaltyRead]:
    return [PenaltyRead.model_validate(p) for p in catalog.penalties]
