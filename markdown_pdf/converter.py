"""
Markdown to PDF conversion pipeline.

Stages run strictly in order: styles, header, footer, markdown, image
qualification, layout binding, then the headless browser print. The first
failure aborts the remaining stages.

MIT License - Copyright (c) 2025 Markdown to PDF Converter
"""

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Union

from tqdm import tqdm

from .assets import qualify_image_sources
from .console import ConsoleLogger, default_logger
from .errors import ConfigurationError
from .markdown_parser import markdown_to_html
from .models import AssetContext, ConversionRequest, PdfJob, RenderableDocument
from .renderer import render_pdf
from .styles import compose_styles
from .templates import compose_body, compose_footer, compose_header, extract_title

Options = Union[ConversionRequest, Mapping[str, Any], None]

# styles, header, footer, markdown, layout, pdf
PIPELINE_STEPS = 6


@dataclass(frozen=True)
class ConversionResult:
    options: Options
    request: Optional[ConversionRequest] = None
    destination: Optional[Path] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _as_request(options: Options) -> ConversionRequest:
    if isinstance(options, ConversionRequest):
        return options
    return ConversionRequest.from_options(options)


def _read_text(path: Path) -> str:
    with open(path, 'r', encoding='utf-8') as f:
        return f.read()


def _prepare_fragment(path: Optional[Path], context: AssetContext, logger: ConsoleLogger) -> Optional[str]:
    """Read a header or footer fragment and qualify its images. None when no path is given."""
    if path is None:
        return None
    return qualify_image_sources(_read_text(path), context, logger)


def compose_document(request: ConversionRequest, logger: Optional[ConsoleLogger] = None,
                     pbar: Optional[tqdm] = None) -> RenderableDocument:
    """Build the self-contained body, header and footer documents for ``request``."""
    logger = logger or default_logger
    context = request.asset_context

    def step(description: str) -> None:
        if pbar is not None:
            pbar.set_description(f"  {request.source_path.name} - {description}")
            pbar.update(1)

    # Step 1: Inline stylesheets
    css = compose_styles(request)
    step("Styles")

    # Step 2: Header chrome
    header_html = compose_header(_prepare_fragment(request.header_path, context, logger))
    step("Header")

    # Step 3: Footer chrome
    footer_html = compose_footer(_prepare_fragment(request.footer_path, context, logger))
    step("Footer")

    # Step 4: Markdown body with qualified images
    source = _read_text(request.source_path)
    content = markdown_to_html(source, request.convert_emoji)
    content = qualify_image_sources(content, context, logger)
    step("Markdown")

    # Step 5: Bind into the body layout
    body_html = compose_body(content, css, extract_title(request.source_path, source))
    step("HTML")

    return RenderableDocument(body_html=body_html, header_html=header_html, footer_html=footer_html)


async def convert(options: Options, logger: Optional[ConsoleLogger] = None,
                  show_progress: bool = False) -> Path:
    """Convert one Markdown file to PDF and return the destination path.

    ``options`` is a ConversionRequest or an option mapping (see
    ``ConversionRequest.from_options``). Missing source or destination raises
    ConfigurationError before anything is read or written.
    """
    request = _as_request(options)
    logger = logger or default_logger

    logger.log_debug(f"Converting {request.source_path} -> {request.destination_path}")
    with tqdm(total=PIPELINE_STEPS, desc=f"  {request.source_path.name}", unit="step",
              leave=False, disable=not show_progress) as pbar:
        # File reads block, keep them off the event loop
        document = await asyncio.to_thread(compose_document, request, logger, pbar)

        if request.debug_html_path:
            with open(request.debug_html_path, 'w', encoding='utf-8') as f:
                f.write(document.body_html)
            logger.log_debug(f"Saved HTML to {request.debug_html_path}")

        pbar.set_description(f"  {request.source_path.name} - PDF")
        job = PdfJob(document=document, destination_path=request.destination_path, layout=request.layout)
        destination = await render_pdf(job, logger)
        pbar.update(1)

    logger.log_success(f"Converted {request.source_path.name} to {destination.name}")
    return destination


def convert_sync(options: Options, logger: Optional[ConsoleLogger] = None,
                 show_progress: bool = False) -> Path:
    """Blocking wrapper around ``convert`` for callers without an event loop."""
    return asyncio.run(convert(options, logger, show_progress))


async def convert_many(requests: Iterable[Options], max_concurrency: int = 4,
                       logger: Optional[ConsoleLogger] = None,
                       show_progress: bool = False) -> List[ConversionResult]:
    """Run independent conversions concurrently.

    Every conversion gets its own temp file and browser. A failure, including
    invalid options, is recorded in its ConversionResult and does not cancel
    the others.
    """
    logger = logger or default_logger
    semaphore = asyncio.Semaphore(max(1, max_concurrency))

    async def run(options: Options) -> ConversionResult:
        try:
            request = _as_request(options)
        except ConfigurationError as e:
            logger.log_error(f"Invalid conversion options: {e}")
            return ConversionResult(options=options, error=e)

        async with semaphore:
            try:
                destination = await convert(request, logger.child(request.source_path.name), show_progress)
            except Exception as e:
                logger.log_error(f"Error converting {request.source_path.name}: {e}")
                return ConversionResult(options=options, request=request, error=e)
            return ConversionResult(options=options, request=request, destination=destination)

    results = await asyncio.gather(*(run(options) for options in requests))

    failed = sum(1 for result in results if not result.ok)
    logger.log_info(f"Conversion complete: {len(results) - failed} files converted, {failed} files failed "
                    f"({len(results)} total)")
    return list(results)
