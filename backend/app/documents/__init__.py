"""Document generation package."""

from .base import DocumentGenerator, RenderContext
from .pdf_form import PdfFormGenerator

__all__ = ["DocumentGenerator", "RenderContext", "PdfFormGenerator"]
