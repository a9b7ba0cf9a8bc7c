"""
Markdown to PDF conversion with GitHub styling, syntax highlighting, emoji,
and running headers and footers, printed by headless Chromium.
"""

from .converter import ConversionResult, compose_document, convert, convert_many, convert_sync
from .errors import ConfigurationError, ConversionError, RenderError
from .models import ConversionRequest, PageMargins, PdfLayout, RenderableDocument

__version__ = "1.0.0"

__all__ = [
    "ConfigurationError",
    "ConversionError",
    "ConversionRequest",
    "ConversionResult",
    "PageMargins",
    "PdfLayout",
    "RenderError",
    "RenderableDocument",
    "compose_document",
    "convert",
    "convert_many",
    "convert_sync",
]
