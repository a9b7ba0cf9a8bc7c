"""
Stylesheet selection and inlining.

Stylesheets are inlined as <style> blocks rather than linked, because the
per-page header and footer templates cannot load <link> resources.
"""

from pathlib import Path
from typing import List

from .models import ConversionRequest

STATIC_DIR = Path(__file__).parent / "static"

GITHUB_STYLESHEET = STATIC_DIR / "github-markdown.css"
HIGHLIGHT_STYLESHEET = STATIC_DIR / "highlight" / "github.css"
DEFAULT_STYLESHEET = STATIC_DIR / "default.css"


def select_stylesheets(request: ConversionRequest) -> List[Path]:
    """Return stylesheet paths in cascade order. The user stylesheet always comes last."""
    stylesheets = []

    # GitHub markdown style
    if request.gh_style:
        stylesheets.append(GITHUB_STYLESHEET)

    # Code highlighting is always styled
    stylesheets.append(HIGHLIGHT_STYLESHEET)

    # Default margins and typography
    if request.default_style:
        stylesheets.append(DEFAULT_STYLESHEET)

    if request.stylesheet_path:
        stylesheets.append(Path(request.stylesheet_path))

    return stylesheets


def read_stylesheets(paths: List[Path]) -> List[str]:
    """Read each stylesheet as text. A missing file raises FileNotFoundError."""
    bundle = []
    for path in paths:
        with open(path, "r", encoding="utf-8") as f:
            bundle.append(f.read())
    return bundle


def styles_to_html(bundle: List[str]) -> str:
    """Wrap each stylesheet verbatim in its own <style> block."""
    return "".join(f"<style>{css}</style>" for css in bundle)


def compose_styles(request: ConversionRequest) -> str:
    return styles_to_html(read_stylesheets(select_stylesheets(request)))
