"""
Exceptions raised by the markdown to PDF pipeline.

I/O problems are not wrapped: unreadable sources, stylesheets, headers or
footers surface as the built-in OSError subclasses.
"""


class ConversionError(Exception):
    """Base class for conversion failures."""


class ConfigurationError(ConversionError, ValueError):
    """Raised for missing or invalid conversion options, before any I/O happens."""


class RenderError(ConversionError):
    """Raised when the headless browser fails to launch, navigate or print."""
