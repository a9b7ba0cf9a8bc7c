"""
Rewrites <img src> references so the browser can load them without any
further relative path resolution.
"""

import os
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlsplit

from bs4 import BeautifulSoup

from .console import ConsoleLogger, default_logger
from .models import AssetContext

# Already loadable by the browser as they are
PASSTHROUGH_SCHEMES = ("http", "https", "file", "data")


def qualify_src(src: str, context: AssetContext, logger: ConsoleLogger = default_logger) -> str:
    """Return a directly loadable URI for one image reference.

    Anything that is not an ``http``, ``https``, ``file`` or ``data`` URI is
    treated as a path, so ``diagrams:v2.png`` is a file name like any other.
    The query string and fragment are carried over onto the resolved URI.
    """
    try:
        parts = urlsplit(src)
    except ValueError as e:
        # Leave it for the browser to fail on this one image
        logger.log_warning(f"Leaving malformed image reference unchanged: {src!r} ({e})")
        return src

    if parts.scheme in PASSTHROUGH_SCHEMES:
        return src

    # "//host/a.png" or "ftp://host/a.png" name a remote host with no local meaning
    if parts.netloc:
        logger.log_warning(f"Leaving remote image reference unchanged: {src}")
        return src

    # urlsplit lowercases the scheme, so take the path from the raw reference
    # markdown-it percent-encodes link targets, e.g. "my image.png" -> "my%20image.png"
    relative = unquote(src.partition("#")[0].partition("?")[0])
    if not relative:
        return src
    resolved = Path(os.path.normpath(os.path.join(context.base_directory, relative)))

    uri = resolved.as_uri()
    if parts.query:
        uri += f"?{parts.query}"
    if parts.fragment:
        uri += f"#{parts.fragment}"
    return uri


def qualify_image_sources(html: str, context: AssetContext, logger: Optional[ConsoleLogger] = None) -> str:
    """Rewrite every img src in an HTML fragment against ``context.base_directory``.

    Fragments without images are returned unchanged, byte for byte.
    """
    logger = logger or default_logger
    soup = BeautifulSoup(html, "html.parser")
    images = soup.find_all("img")
    if not images:
        return html

    for img in images:
        src = img.get("src")
        if not src:
            continue
        qualified = qualify_src(src, context, logger)
        if qualified != src:
            logger.log_debug(f"Qualified image source: {src} -> {qualified}")
            img["src"] = qualified

    return str(soup)
