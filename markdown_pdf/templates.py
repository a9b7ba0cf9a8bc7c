"""
Binds HTML fragments and styles into the bundled page layouts.
"""

import re
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markupsafe import Markup

LAYOUTS_DIR = Path(__file__).parent / "layouts"

BODY_LAYOUT = "doc-body.html"
HEADER_LAYOUT = "header.html"
FOOTER_LAYOUT = "footer.html"

# Shared, read-only: jinja2 caches the compiled layouts
_environment = Environment(
    loader=FileSystemLoader(str(LAYOUTS_DIR)),
    autoescape=select_autoescape(["html"]),
    keep_trailing_newline=True,
)


def compose_body(content: str, css: str, title: str) -> str:
    """Render the full body document. ``content`` and ``css`` are trusted markup; ``title`` is escaped."""
    template = _environment.get_template(BODY_LAYOUT)
    return template.render(body=Markup(content), css=Markup(css), title=title)


def compose_header(content: Optional[str]) -> Optional[str]:
    """Wrap a header fragment in the per-page chrome layout. None when there is no header."""
    if content is None:
        return None
    return _environment.get_template(HEADER_LAYOUT).render(content=Markup(content))


def compose_footer(content: Optional[str]) -> Optional[str]:
    """Wrap a footer fragment in the per-page chrome layout. None when there is no footer."""
    if content is None:
        return None
    return _environment.get_template(FOOTER_LAYOUT).render(content=Markup(content))


def extract_title(source_path: Path, content: str) -> str:
    """Extract the document title from markdown content.

    Preference order:
    1) First ATX H1 heading starting with '# '
    2) Setext H1 style (line followed by '===')
    3) Humanized filename stem
    """
    lines = content.splitlines()

    # 1) ATX H1: lines that start with '# ' but not '## '
    for line in lines:
        stripped = line.strip()
        if stripped.startswith('# '):
            heading_text = stripped[2:].strip().rstrip('#').strip()
            if heading_text:
                return heading_text

    # 2) Setext H1: a non-empty line followed by a line of '='
    for i in range(len(lines) - 1):
        current_line = lines[i].strip()
        if current_line and re.fullmatch(r"=+", lines[i + 1].strip()):
            return current_line

    # 3) Fallback to humanized filename stem
    stem = source_path.stem.replace('_', ' ').replace('-', ' ').strip()
    return stem.title() if stem else source_path.stem
