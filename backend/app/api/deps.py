"""
deps.py - FastAPI dependencies.

Everything a request needs is created once in create_app() and kept on
app.state. Tests replace collaborators through app.dependency_overrides.
"""

from fastapi import Depends, Request

from app.catalog.models import Catalog
from app.config import Settings
from app.documents.base import DocumentGenerator
from app.services.submission import SubmissionHandler


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_active_catalog(request: Request) -> Catalog:
    return request.app.state.catalog


def get_document_generator(request: Request) -> DocumentGenerator:
    return request.app.state.document_generator


def get_submission_handler(
    catalog: Catalog = Depends(get_active_catalog),
    generator: DocumentGenerator = Depends(get_document_generator),
    settings: Settings = Depends(get_settings),
) -> SubmissionHandler:
    return SubmissionHandler(
        catalog=catalog,
        generator=generator,
        date_format=settings.DATE_FORMAT,
        currency=settings.CURRENCY,
    )
