"""
Prints a composed HTML document to PDF with headless Chromium (Playwright).

Each call stages its own temporary HTML file next to the destination and
launches its own browser, so concurrent renders never share either.
"""

from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from playwright.async_api import async_playwright, Error as PlaywrightError

from .console import ConsoleLogger, default_logger
from .errors import RenderError
from .models import PdfJob

BROWSER_ARGS = [
    '--disable-dev-shm-usage',  # Use /tmp instead of /dev/shm (prevents OOM crashes)
    '--disable-gpu',             # No GPU in headless mode
    '--no-sandbox',              # Required in some environments
]

# Wait until the page has had no network activity for a short settle window
WAIT_UNTIL = "networkidle"

# Chromium prints its own date/title chrome when a side has no template
EMPTY_TEMPLATE = "<div></div>"


class RenderStage(Enum):
    IDLE = "idle"
    TEMP_FILE_WRITTEN = "temp file written"
    ENGINE_LAUNCHED = "engine launched"
    PAGE_CREATED = "page created"
    PAGE_NAVIGATED = "page navigated"
    PDF_EMITTED = "pdf emitted"
    ENGINE_CLOSED = "engine closed"
    TEMP_FILE_REMOVED = "temp file removed"
    DONE = "done"


def temp_html_path(destination: Path) -> Path:
    """Staging file for the body HTML, named after the destination and placed beside it."""
    destination = Path(destination)
    return destination.parent / f"_{destination.stem}_temp.html"


def build_pdf_options(job: PdfJob) -> Dict[str, Any]:
    """Keyword arguments for ``page.pdf``. Format and margins are passed through verbatim."""
    document = job.document
    layout = job.layout
    options = {
        "path": str(job.destination_path),
        "format": layout.page_format,
        "margin": layout.margins.as_dict(),
        "print_background": layout.print_background,
        "display_header_footer": document.has_header_footer,
    }
    if document.has_header_footer:
        options["header_template"] = document.header_html if document.header_html is not None else EMPTY_TEMPLATE
        options["footer_template"] = document.footer_html if document.footer_html is not None else EMPTY_TEMPLATE
    return options


class PdfRenderer:
    """Drives one render through the stages in RenderStage, releasing everything it acquired."""

    def __init__(self, job: PdfJob, logger: Optional[ConsoleLogger] = None):
        self.job = job
        self.logger = logger or default_logger
        self.stage = RenderStage.IDLE
        self.temp_html = temp_html_path(job.destination_path)

    def _advance(self, stage: RenderStage) -> None:
        self.stage = stage
        self.logger.log_debug(f"Render stage: {stage.value}")

    async def _close_quietly(self, resource, name: str) -> None:
        try:
            await resource.close()
        except Exception as e:
            self.logger.log_warning(f"Failed to close {name}: {e}")

    def _write_temp_file(self) -> None:
        with open(self.temp_html, 'w', encoding='utf-8') as f:
            f.write(self.job.document.body_html)
        self._advance(RenderStage.TEMP_FILE_WRITTEN)

    def _remove_temp_file(self) -> None:
        try:
            self.temp_html.unlink(missing_ok=True)
        except OSError as e:
            self.logger.log_warning(f"Failed to remove temporary file {self.temp_html}: {e}")
            return
        self._advance(RenderStage.TEMP_FILE_REMOVED)

    async def _print(self, options: Dict[str, Any]) -> None:
        async with async_playwright() as playwright:
            browser = await playwright.chromium.launch(headless=True, args=BROWSER_ARGS)
            self._advance(RenderStage.ENGINE_LAUNCHED)
            try:
                page = await browser.new_page()
                self._advance(RenderStage.PAGE_CREATED)
                try:
                    await page.goto(self.temp_html.absolute().as_uri(), wait_until=WAIT_UNTIL)
                    self._advance(RenderStage.PAGE_NAVIGATED)

                    await page.pdf(**options)
                    self._advance(RenderStage.PDF_EMITTED)
                finally:
                    await self._close_quietly(page, "page")
            finally:
                await self._close_quietly(browser, "browser")
                self._advance(RenderStage.ENGINE_CLOSED)

    async def render(self) -> Path:
        destination = Path(self.job.destination_path)
        options = build_pdf_options(self.job)

        try:
            self._write_temp_file()
            await self._print(options)
        except PlaywrightError as e:
            raise RenderError(f"Failed to render {destination.name} at stage '{self.stage.value}': {e}") from e
        finally:
            self._remove_temp_file()

        self._advance(RenderStage.DONE)
        return destination


async def render_pdf(job: PdfJob, logger: Optional[ConsoleLogger] = None) -> Path:
    """Render ``job`` to its destination and return the destination path."""
    return await PdfRenderer(job, logger).render()
