"""
forms.py - Penalty form endpoints.

POST /generate-pdf contract:
- 200: document bytes, Content-Disposition attachment
- 400: ValidationError body (error_code, kind, message, details.field)
- 500: empty body; the cause is logged server-side only
"""

import logging
from datetime import date

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from app.api.deps import get_active_catalog, get_settings, get_submission_handler
from app.catalog.models import PROFILE_OCCURRENCE, Catalog
from app.config import Settings
from app.errors import ErrorKind
from app.schemas.penalty_form import EmptyFormView
from app.services.submission import SubmissionHandler

logger = logging.getLogger(__name__)

router = APIRouter()

OCCURRENCE_FORM_FIELDS = {
    "firstName": "",
    "lastName": "",
    "unit": "",
    "selectedBreach": None,
    "breachDate": None,
    "occurrenceCount": None,
    "contextInformation": "",
    "evidenceMaterials": [],
    "calculatedPenalty": None,
}

TIER_FORM_FIELDS = {
    "firstName": "",
    "lastName": "",
    "unit": "",
    "selectedBreach": None,
    "selectedPenalty": None,
    "breachDate": None,
    "contextInformation": "",
    "evidenceMaterials": [],
    "calculatedPenalty": None,
}


@router.get("/", response_model=EmptyFormView, summary="Empty penalty form")
def show_form(
    catalog: Catalog = Depends(get_active_catalog),
    settings: Settings = Depends(get_settings),
) -> EmptyFormView:
    fields = OCCURRENCE_FORM_FIELDS if catalog.profile == PROFILE_OCCURRENCE else TIER_FORM_FIELDS
    return EmptyFormView(
        profile=catalog.profile,
        today=date.today().strftime(settings.DATE_FORMAT),
        currency=settings.CURRENCY,
        penalty_form=dict(fields),
    )


@router.post("/generate-pdf", summary="Render a submitted form as PDF")
async def generate_pdf(
    request: Request,
    handler: SubmissionHandler = Depends(get_submission_handler),
    settings: Settings = Depends(get_settings),
) -> Response:
    body = await request.body()

    try:
        # Rendering is CPU-bound; keep it off the event loop
        outcome = await run_in_threadpool(handler.handle, body)
    except Exception:
        logger.exception("Unexpected error while handling penalty form submission")
        return Response(status_code=500)

    if outcome.ok:
        return Response(
            content=outcome.document,
            media_type=handler.generator.media_type,
            headers={
                "Content-Disposition": f'attachment; filename="{settings.PDF_FILENAME}"'
            },
        )

    if outcome.kind == ErrorKind.VALIDATION:
        return JSONResponse(status_code=400, content=outcome.error.to_dict())

    return Response(status_code=500)
