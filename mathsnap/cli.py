#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
MathSnap CLI

Usage:
    mathsnap render notes.md --output notes.html --font-size 20
    echo 'Energy: $E=mc^2$' | mathsnap render -
    mathsnap serve --port 3000
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from .errors import InvalidInputError, MathSnapError

logger = logging.getLogger(__name__)


def _collect_options(args) -> dict:
    """Map CLI flags onto request options (only the ones given)"""
    options = {
        "fontFamily": args.font_family,
        "fontSize": args.font_size,
        "color": args.color,
        "background": args.background,
        "padding": args.padding,
        "scale": args.scale,
    }
    return {key: value for key, value in options.items() if value is not None}


def cmd_render(args) -> int:
    """Render a file (or stdin) to HTML"""
    from config.settings import settings
    from .pipeline import build_pipeline

    if args.input == "-":
        text = sys.stdin.read()
    else:
        input_file = Path(args.input)
        if not input_file.exists():
            print(f"❌ Input file not found: {input_file}", file=sys.stderr)
            return 1
        text = input_file.read_text(encoding="utf-8")

    overrides = {}
    if args.profile:
        overrides["style_profile"] = args.profile
    if args.no_sanitize:
        overrides["sanitize_output"] = False

    pipeline = build_pipeline(settings.model_copy(update=overrides), renderer_name=args.renderer)
    try:
        result = asyncio.run(pipeline.render(text, _collect_options(args)))
    except InvalidInputError as e:
        print(f"❌ Invalid input: {e}", file=sys.stderr)
        return 1
    except MathSnapError as e:
        print(f"❌ Render failed: {e}", file=sys.stderr)
        return 2

    if args.output:
        Path(args.output).write_text(result.html, encoding="utf-8")
        print(f"✅ Wrote {args.output} ({len(result.formulas)} formulas)")
    else:
        sys.stdout.write(result.html + "\n")
    return 0


def cmd_serve(args) -> int:
    """Run the HTTP API"""
    import uvicorn
    from config.settings import settings

    host = args.host or settings.host
    port = args.port or settings.port
    logger.info(f"Starting MathSnap API on http://{host}:{port}")
    uvicorn.run("api.main:app", host=host, port=port, log_level=settings.log_level.lower())
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mathsnap",
        description="Render LaTeX embedded in text to HTML with formula images"
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    render_parser = subparsers.add_parser("render", help="Render a file to HTML")
    render_parser.add_argument("input", help="Input text file, or - for stdin")
    render_parser.add_argument("-o", "--output", help="Output HTML file (default: stdout)")
    render_parser.add_argument("--font-family", help='Font stack, e.g. "Comic Sans MS, serif"')
    render_parser.add_argument("--font-size", type=float, help="Font size in px")
    render_parser.add_argument("--color", help="Formula color")
    render_parser.add_argument("--background", help="Background color (default: transparent)")
    render_parser.add_argument("--padding", type=float, help="Padding around formulas in px")
    render_parser.add_argument("--scale", type=float, help="Device pixel ratio")
    render_parser.add_argument("--profile", choices=["default", "document"], help="Style defaults profile")
    render_parser.add_argument("--renderer", choices=["katex", "mathml"], help="Math renderer")
    render_parser.add_argument("--no-sanitize", action="store_true", help="Skip the HTML sanitizer")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", help="Bind address")
    serve_parser.add_argument("--port", type=int, help="Port")

    return parser


def main(argv: Optional[list] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "render":
        return cmd_render(args)
    if args.command == "serve":
        return cmd_serve(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
