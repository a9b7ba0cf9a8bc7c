"""
Command line entry point: ``markdown-pdf SOURCE [SOURCE ...]``.
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from .config import Config
from .console import ConsoleLogger
from .converter import convert, convert_many
from .dependencies import check_dependencies, install_browsers
from .errors import ConversionError
from .models import ConversionRequest, PdfLayout


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="markdown-pdf",
        description="Convert markdown files to PDF with GitHub styling, syntax highlighting, emoji and running headers/footers",
    )
    parser.add_argument("sources", nargs="*", help="Markdown file(s) to convert")
    parser.add_argument("-o", "--output", default=None, help="Destination PDF (single source only, default: SOURCE with .pdf suffix)")
    parser.add_argument("--output-dir", default=None, help="Directory for the PDFs when converting several sources (default: next to each source)")
    parser.add_argument("--header", default=None, help="HTML fragment repeated at the top of every page")
    parser.add_argument("--footer", default=None, help="HTML fragment repeated at the bottom of every page")
    parser.add_argument("--styles", default=None, help="Extra stylesheet, applied after the built-in ones")
    parser.add_argument("--no-gh-style", action="store_true", help="Do not include the GitHub markdown stylesheet")
    parser.add_argument("--no-default-style", action="store_true", help="Do not include the default margins/typography stylesheet")
    parser.add_argument("--no-emoji", action="store_true", help="Leave :shortcode: text alone (use when timestamps like 00:00:00 get mangled)")
    parser.add_argument("--format", default=None, help="Page format, e.g. A4, Letter (default: A4)")
    parser.add_argument("--margins", default=None, help="Page margins in CSS format (default: '1in 0.75in'). Range: 0-3 inches. Use 1, 2, or 4 values. Units: in, cm, mm, pt, px")
    parser.add_argument("--max-workers", type=int, default=None, help="Maximum number of concurrent conversions (default: 4)")
    parser.add_argument("--debug-html", default=None, help="Save the composed body HTML to this path (single source only)")
    parser.add_argument("--config", default=None, help="Config file (default: ./markdown-pdf.toml if present)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging for detailed output")
    parser.add_argument("--install-browsers", action="store_true", help="Install the Playwright Chromium build and exit")
    return parser


def _destination_for(source: Path, output: Optional[str], output_dir: Optional[str]) -> Path:
    if output:
        return Path(output)
    if output_dir:
        return Path(output_dir) / f"{source.stem}.pdf"
    return source.with_suffix(".pdf")


def build_requests(args: argparse.Namespace, config: Config) -> List[ConversionRequest]:
    layout = PdfLayout(page_format=config.get_page_format(), margins=config.get_margins())
    requests = []
    for source in args.sources:
        source_path = Path(source)
        requests.append(ConversionRequest(
            source_path=source_path,
            destination_path=_destination_for(source_path, args.output, args.output_dir),
            header_path=args.header,
            footer_path=args.footer,
            stylesheet_path=config.get_styles(),
            gh_style=config.get_gh_style(),
            default_style=config.get_default_style(),
            convert_emoji=config.get_convert_emoji(),
            debug_html_path=args.debug_html,
            layout=layout,
        ))
    return requests


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.install_browsers:
        return 0 if install_browsers() else 1

    if not args.sources:
        parser.error("at least one markdown source is required")
    if len(args.sources) > 1 and (args.output or args.debug_html):
        parser.error("--output and --debug-html can only be used with a single source")

    logger = ConsoleLogger(debug=args.debug)

    # Build config from CLI args
    cli_config = {
        "format": args.format,
        "margins": args.margins,
        "styles": args.styles,
        "max_workers": args.max_workers,
    }
    if args.no_gh_style:
        cli_config["gh_style"] = False
    if args.no_default_style:
        cli_config["default_style"] = False
    if args.no_emoji:
        cli_config["emoji"] = False

    try:
        config = Config(cli_config, config_path=args.config)
        requests = build_requests(args, config)
        max_workers = config.get_max_workers()
    except ConversionError as e:
        logger.log_error(str(e))
        return 1

    if args.output_dir:
        Path(args.output_dir).mkdir(parents=True, exist_ok=True)

    # Check dependencies
    if not check_dependencies():
        return 1

    if len(requests) == 1:
        try:
            asyncio.run(convert(requests[0], logger, show_progress=True))
        except (ConversionError, OSError) as e:
            logger.log_error(f"Error converting {requests[0].source_path.name}: {e}")
            return 1
        return 0

    logger.log_info(f"Found {len(requests)} markdown files, converting with up to {max_workers} workers")
    results = asyncio.run(convert_many(requests, max_concurrency=max_workers, logger=logger))
    return 0 if all(result.ok for result in results) else 1


if __name__ == "__main__":
    sys.exit(main())
