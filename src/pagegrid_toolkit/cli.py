"""
Module: cli

Purpose:
    Command line entry point.

    pagegrid compose        Template sheet from a template directory or files
    pagegrid compose-multi  Sheet with one source image per page
    pagegrid split          Split a captured sheet into page files
    pagegrid inspect        Print the payload decoded from a sheet

Dependencies:
    - argparse (std)
    - logging (std)

Used By:
    - console script ``pagegrid``
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pagegrid_toolkit import __version__
from pagegrid_toolkit.common.constants import ALLOWED_PAGES_PER_ROW
from pagegrid_toolkit.core.errors import PageGridError

logger = logging.getLogger(__name__)

EXIT_FAILURE = 2


def _add_layout_arguments(parser: argparse.ArgumentParser, require_pages: bool = True) -> None:
    group = parser.add_argument_group("layout")
    if require_pages:
        group.add_argument("--pages", type=int, default=8, help="Total pages (default: 8)")
    group.add_argument(
        "--pages-per-row",
        type=int,
        default=6,
        choices=ALLOWED_PAGES_PER_ROW,
        help="Pages per row (default: 6)",
    )
    group.add_argument("--start-left", action="store_true", help="Start with a left page")
    group.add_argument("--page-spacing", type=int, default=20, help="Gap between page pairs in px (default: 20)")
    group.add_argument("--row-spacing", type=int, default=30, help="Gap between rows in px (default: 30)")
    group.add_argument("--padding-x", type=int, default=0, help="Horizontal padding in px (default: 0)")
    group.add_argument("--padding-y", type=int, default=0, help="Vertical padding in px (default: 0)")


def _add_template_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group("templates")
    group.add_argument("--template-dir", type=Path, help="Directory with template.png or template_left/right.png")
    group.add_argument("--template", type=Path, help="Single template image (page or spread)")
    group.add_argument("--left", type=Path, help="Left page template")
    group.add_argument("--right", type=Path, help="Right page template")


def _add_output_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-o", "--output-dir", type=Path, default=Path("."), help="Output directory")
    parser.add_argument("--output", type=Path, help="Explicit output file path")
    parser.add_argument("--format", default="png", help="Output format: png or jpg (default: png)")


def _settings_from_args(args: argparse.Namespace, total_pages: int):
    from pagegrid_toolkit.layout.config import LayoutSettings
    
    return LayoutSettings(
        total_pages=total_pages,
        pages_per_row=args.pages_per_row,
        start_with_left_page=args.start_left,
        page_spacing=args.page_spacing,
        row_spacing=args.row_spacing,
        padding_x=args.padding_x,
        padding_y=args.padding_y,
    )


def _templates_from_args(args: argparse.Namespace):
    from pagegrid_toolkit.composer.templates import TemplateSet
    
    if args.template_dir is not None:
        return TemplateSet.from_directory(args.template_dir)
    return TemplateSet.from_files(args.template, left=args.left, right=args.right)


def _cmd_compose(args: argparse.Namespace) -> int:
    from pagegrid_toolkit.composer.controller import generate_template_sheet
    
    result = generate_template_sheet(
        _templates_from_args(args),
        _settings_from_args(args, args.pages),
        args.output_dir,
        args.format,
        output_path=args.output,
    )
    canvas = result.sheet.canvas
    print(f"{result.path} ({canvas.width}x{canvas.height}, {canvas.rows} row(s))")
    return 0


def _cmd_compose_multi(args: argparse.Namespace) -> int:
    from pagegrid_toolkit.composer.controller import generate_multi_image_sheet
    from pagegrid_toolkit.composer.sheet import MultiImageOptions
    
    result = generate_multi_image_sheet(
        _templates_from_args(args),
        args.images,
        _settings_from_args(args, len(args.images)),
        args.output_dir,
        args.format,
        MultiImageOptions(scale_percent=args.scale),
        output_path=args.output,
    )
    canvas = result.sheet.canvas
    print(f"{result.path} ({canvas.width}x{canvas.height}, {canvas.rows} row(s))")
    return 0


def _cmd_split(args: argparse.Namespace) -> int:
    from pagegrid_toolkit.extraction.controller import split_sheet
    
    result = split_sheet(args.input, args.output_dir, args.format)
    if result.used_marker_fallback:
        print("Payload recovered after markers-only rectification")
    print(
        f"Wrote {len(result.page_paths)} page(s) to {result.export_dir} "
        f"({result.pages_per_row} per row, {result.rows} row(s))"
    )
    return 0


def _cmd_inspect(args: argparse.Namespace) -> int:
    from pagegrid_toolkit.images.loader import load_image
    from pagegrid_toolkit.registration.resolver import SheetResolver
    
    payload = SheetResolver().try_decode_payload(load_image(args.input))
    if payload is None:
        print(f"No layout payload found in {args.input}")
        return 1
    print(
        f"Pages: {payload.total_pages}  Left start: {payload.start_with_left_page}  "
        f"Page: {payload.page_width}x{payload.page_height}"
    )
    print(
        f"Page spacing: {payload.page_spacing}  Row spacing: {payload.row_spacing}  "
        f"Padding: {payload.padding_x}x{payload.padding_y}"
    )
    if payload.pages_per_row:
        print(f"Pages per row: {payload.pages_per_row}  Rows: {payload.rows}")
    if payload.has_canvas_size:
        print(f"Canvas: {payload.canvas_width}x{payload.canvas_height}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pagegrid",
        description="Compose page-grid sheets with embedded layout codes and split captured sheets back into pages.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)
    
    compose = sub.add_parser("compose", help="Compose a template sheet")
    _add_template_arguments(compose)
    _add_layout_arguments(compose)
    _add_output_arguments(compose)
    compose.set_defaults(func=_cmd_compose)
    
    multi = sub.add_parser("compose-multi", help="Compose a sheet from page images")
    multi.add_argument("images", nargs="+", type=Path, help="Page images in page order")
    multi.add_argument("--scale", type=int, default=100, help="Fit box as %% of page slot, 10-100 (default: 100)")
    _add_template_arguments(multi)
    _add_layout_arguments(multi, require_pages=False)
    _add_output_arguments(multi)
    multi.set_defaults(func=_cmd_compose_multi)
    
    split = sub.add_parser("split", help="Split a captured sheet into pages")
    split.add_argument("input", type=Path, help="Captured sheet image")
    split.add_argument("-o", "--output-dir", type=Path, default=Path("Export"), help="Export directory (cleared first)")
    split.add_argument("--format", default="png", help="Output format: png or jpg (default: png)")
    split.set_defaults(func=_cmd_split)
    
    inspect = sub.add_parser("inspect", help="Show the layout payload of a sheet")
    inspect.add_argument("input", type=Path, help="Sheet image")
    inspect.set_defaults(func=_cmd_inspect)
    
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s" if not args.verbose else "%(levelname)s %(name)s: %(message)s",
    )
    
    try:
        return args.func(args)
    except PageGridError as e:
        logger.error(f"Error: {e}")
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
