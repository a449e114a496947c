import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from app.api.api import build_router
from app.catalog import get_catalog
from app.config import Settings, settings
from app.documents.base import DocumentGenerator
from app.documents.pdf_form import PdfFormGenerator
from app.errors import (
    ErrorKind,
    FormException,
    ValidationError,
    base_amount_invalid,
    missing_required_field,
    occurrence_count_invalid,
    schema_invalid,
)
from app.logging_config import configure_logging

logger = logging.getLogger(__name__)

# Request parts FastAPI prefixes to error locations
REQUEST_SOURCES = {"query", "path", "header", "cookie", "body"}


def _request_error(exc: RequestValidationError) -> ValidationError:
    """Map FastAPI's parameter validation failure onto the FormError contract."""
    error = exc.errors()[0]
    loc = [str(part) for part in error.get("loc", ()) if part not in REQUEST_SOURCES]
    field = ".".join(loc) or "request"

    if error["type"] == "missing":
        return missing_required_field(field, f"{field} is required")
    if field == "occurrenceCount":
        return occurrence_count_invalid(error.get("input"))
    if field == "baseAmount":
        return base_amount_invalid(error.get("input"))
    return schema_invalid(field, f"{field}: {error['msg']}")


def create_app(
    app_settings: Settings | None = None,
    document_generator: DocumentGenerator | None = None,
) -> FastAPI:
    """
    Build the application for one catalog profile.

    The catalog and document generator are created here, once, and shared
    read-only by every request.
    """
    app_settings = app_settings or settings
    configure_logging(app_settings.LOG_LEVEL)

    catalog = get_catalog(app_settings.CATALOG_PROFILE, app_settings.CATALOG_DIR)

    app = FastAPI(title=app_settings.APP_NAME, version="1.0.0")
    app.state.settings = app_settings
    app.state.catalog = catalog
    app.state.document_generator = document_generator or PdfFormGenerator(app_settings.PDF_FONT_PATH)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(FormException)
    async def form_exception_handler(request: Request, exc: FormException) -> Response:
        if exc.error.kind == ErrorKind.VALIDATION:
            logger.warning("Rejected %s: %s", request.url.path, exc.error.error_code.value)
            return JSONResponse(status_code=400, content=exc.error.to_dict())
        logger.error("Failed %s: %s", request.url.path, exc.error.error_code.value)
        return Response(status_code=500)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> Response:
        error = _request_error(exc).error
        logger.warning("Rejected %s: %s", request.url.path, error.error_code.value)
        return JSONResponse(status_code=400, content=error.to_dict())

    # Health check route
    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    app.include_router(build_router(catalog.profile))

    logger.info("%s started with catalog profile=%s", app_settings.APP_NAME, catalog.profile)
    return app


app = create_app()


def run() -> None:
    """Console entry point: serve with uvicorn."""
    import uvicorn

    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)
