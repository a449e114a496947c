from fastapi import APIRouter

from app.api.endpoints import catalog, forms, penalty
from app.catalog.models import PROFILE_OCCURRENCE


def build_router(profile: str) -> APIRouter:
    """Assemble the routes available for a catalog profile."""
    router = APIRouter()

    # Form page and document generation
    router.include_router(forms.router, tags=["forms"])

    # Reference data and calculation
    router.include_router(catalog.router, prefix="/api", tags=["catalog"])
    if profile == PROFILE_OCCURRENCE:
        router.include_router(catalog.occurrence_router, prefix="/api", tags=["catalog"])
        router.include_router(penalty.router, prefix="/api", tags=["penalty"])
    else:
        router.include_router(catalog.tier_router, prefix="/api", tags=["catalog"])

    return router
