"""Test configuration and fixtures."""

import os
import sys
from datetime import date

import pytest

# Add paths
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Settings are read at import time; keep the developer's .env out of tests.
os.environ["CATALOG_PROFILE"] = "occurrence"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ.pop("PDF_FONT_PATH", None)
os.environ.pop("CATALOG_DIR", None)

from fastapi.testclient import TestClient

from app.catalog import PROFILE_OCCURRENCE, PROFILE_TIER, load_catalog
from app.config import Settings
from app.documents.base import DocumentGenerator
from app.documents.pdf_form import PdfFormGenerator
from app.main import create_app
from app.services.submission import SubmissionHandler

FIXED_TODAY = date(2026, 10, 19)


class RecordingGenerator(DocumentGenerator):
    """Captures what reaches document generation instead of rendering it."""

    media_type = "application/pdf"

    def __init__(self):
        self.calls = []

    def generate(self, record, context):
        self.calls.append((record, context))
        return b"%PDF-1.4 test document"


class FailingGenerator(DocumentGenerator):
    media_type = "application/pdf"

    def generate(self, record, context):
        raise RuntimeError("renderer exploded")


@pytest.fixture(scope="session")
def occurrence_catalog():
    return load_catalog(PROFILE_OCCURRENCE)


@pytest.fixture(scope="session")
def tier_catalog():
    return load_catalog(PROFILE_TIER)


@pytest.fixture
def recording_generator():
    return RecordingGenerator()


@pytest.fixture
def occurrence_handler(occurrence_catalog, recording_generator):
    return SubmissionHandler(
        catalog=occurrence_catalog,
        generator=recording_generator,
        today=lambda: FIXED_TODAY,
    )


@pytest.fixture
def tier_handler(tier_catalog, recording_generator):
    return SubmissionHandler(
        catalog=tier_catalog,
        generator=recording_generator,
        today=lambda: FIXED_TODAY,
    )


@pytest.fixture
def occurrence_submission():
    """A well-formed occurrence-profile submission, as the browser sends it."""
    return {
        "firstName": "Ion",
        "lastName": "Popescu",
        "unit": "Ap. 42",
        "selectedBreach": {
            "id": 8,
            "code": "B5.3.1",
            "description": "Aruncarea gunoiului menajer în locuri neamenajate",
            "baseAmount": 1000.0,
            "regulationReference": "5.3.1",
        },
        "breachDate": "2026-10-12",
        "occurrenceCount": 1,
        "contextInformation": "Saci de gunoi lăsați lângă scara 2.",
        "evidenceMaterials": ["photo_001.jpg", "camera_scara2_2026-10-12.mp4"],
    }


@pytest.fixture
def tier_submission():
    return {
        "firstName": "Maria",
        "lastName": "Ionescu",
        "selectedBreach": {"id": 16, "code": "B5.4.1", "description": "Fumatul în zonele interzise"},
        "selectedPenalty": {"id": 3, "code": "P2"},
    }


@pytest.fixture
def client():
    """Occurrence-profile app rendering real PDFs."""
    app = create_app(Settings(CATALOG_PROFILE="occurrence"), document_generator=PdfFormGenerator())
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def tier_client():
    app = create_app(Settings(CATALOG_PROFILE="tier"), document_generator=PdfFormGenerator())
    with TestClient(app) as test_client:
        yield test_client
