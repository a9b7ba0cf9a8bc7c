"""
Data types passed between the conversion stages.

Everything here is created fresh for one conversion and thrown away when it
finishes, so the types are frozen dataclasses.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

from .errors import ConfigurationError

DEFAULT_PAGE_FORMAT = "A4"


@dataclass(frozen=True)
class PageMargins:
    """Per-edge page margins as CSS size strings, handed to the browser unchanged."""

    top: str = "1in"
    right: str = "0.75in"
    bottom: str = "1in"
    left: str = "0.75in"

    def as_dict(self) -> dict:
        return {"top": self.top, "right": self.right, "bottom": self.bottom, "left": self.left}


@dataclass(frozen=True)
class PdfLayout:
    page_format: str = DEFAULT_PAGE_FORMAT
    margins: PageMargins = field(default_factory=PageMargins)
    print_background: bool = True


@dataclass(frozen=True)
class ConversionRequest:
    """Everything one ``convert`` call needs.

    ``source_path`` and ``destination_path`` are mandatory. The GitHub and
    default stylesheets are opt-in; the command line tool turns them on.
    """

    source_path: Path
    destination_path: Path
    header_path: Optional[Path] = None
    footer_path: Optional[Path] = None
    stylesheet_path: Optional[Path] = None
    gh_style: bool = False
    default_style: bool = False
    convert_emoji: bool = True
    debug_html_path: Optional[Path] = None
    layout: PdfLayout = field(default_factory=PdfLayout)

    def __post_init__(self):
        if not self.source_path:
            raise ConfigurationError("Source path must be provided")
        if not self.destination_path:
            raise ConfigurationError("Destination path must be provided")
        # Normalize str arguments so the rest of the pipeline only sees Path objects
        for name in ("source_path", "destination_path", "header_path",
                     "footer_path", "stylesheet_path", "debug_html_path"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, Path):
                object.__setattr__(self, name, Path(value))

    @property
    def asset_context(self) -> "AssetContext":
        """Asset lookups for body, header and footer all resolve against the source directory."""
        return AssetContext(Path(os.path.abspath(self.source_path)).parent)

    @classmethod
    def from_options(cls, options: Optional[Mapping[str, Any]]) -> "ConversionRequest":
        """Build a request from a loose option mapping.

        Recognized keys: ``source``, ``destination``, ``header``, ``footer``,
        ``styles``, ``ghStyle``, ``defaultStyle``, ``noEmoji``, ``debug``,
        ``pdf.format`` and ``pdf.border.{top,right,bottom,left}``. Anything
        else is ignored.
        """
        options = options or {}
        if not options.get("source"):
            raise ConfigurationError("Source path must be provided")
        if not options.get("destination"):
            raise ConfigurationError("Destination path must be provided")

        pdf = options.get("pdf") or {}
        border = pdf.get("border") or {}
        defaults = PageMargins()
        margins = PageMargins(
            top=border.get("top") or defaults.top,
            right=border.get("right") or defaults.right,
            bottom=border.get("bottom") or defaults.bottom,
            left=border.get("left") or defaults.left,
        )
        layout = PdfLayout(page_format=pdf.get("format") or DEFAULT_PAGE_FORMAT, margins=margins)

        return cls(
            source_path=options["source"],
            destination_path=options["destination"],
            header_path=options.get("header") or None,
            footer_path=options.get("footer") or None,
            stylesheet_path=options.get("styles") or None,
            gh_style=bool(options.get("ghStyle", False)),
            default_style=bool(options.get("defaultStyle", False)),
            convert_emoji=not options.get("noEmoji", False),
            debug_html_path=options.get("debug") or None,
            layout=layout,
        )


@dataclass(frozen=True)
class AssetContext:
    base_directory: Path


@dataclass(frozen=True)
class RenderableDocument:
    """Self-contained HTML documents ready for the browser."""

    body_html: str
    header_html: Optional[str] = None
    footer_html: Optional[str] = None

    @property
    def has_header_footer(self) -> bool:
        return self.header_html is not None or self.footer_html is not None


@dataclass(frozen=True)
class PdfJob:
    document: RenderableDocument
    destination_path: Path
    layout: PdfLayout = field(default_factory=PdfLayout)
