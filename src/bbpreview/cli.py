"""Command-line interface for bbpreview.

Usage::

    bbpreview post.bbcode                    # writes post.html
    bbpreview post.bbcode -o preview.html    # explicit output path
    bbpreview post.bbcode --theme system     # use the system-colour theme
    bbpreview post.bbcode --watch --open     # live preview in the browser
    bbpreview --list-themes                  # list available themes
"""

from __future__ import annotations

import argparse
import logging
import sys
import webbrowser
from pathlib import Path

from bbpreview import __version__
from bbpreview.preview import BBCODE_SUFFIXES, PreviewSession, Previewer, is_bbcode_file
from bbpreview.themes import ThemeManager

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bbpreview",
        description="Render BBCode files as sandboxed HTML previews.",
    )
    parser.add_argument(
        "input",
        nargs="?",
        help="Path to the BBCode file to render.",
    )
    parser.add_argument(
        "-o", "--output",
        help="Output HTML file path. Defaults to <input>.html.",
    )
    parser.add_argument(
        "-t", "--theme",
        default=ThemeManager.DEFAULT,
        choices=ThemeManager.PRESETS,
        help="Theme preset (default: %(default)s).",
    )
    parser.add_argument(
        "-e", "--encoding",
        default="utf-8",
        help="Input file encoding (default: %(default)s).",
    )
    parser.add_argument(
        "--fragment",
        action="store_true",
        help="Write only the HTML fragment, without the document shell.",
    )
    parser.add_argument(
        "-w", "--watch",
        action="store_true",
        help="Re-render whenever the input changes, until interrupted.",
    )
    parser.add_argument(
        "--open",
        action="store_true",
        help="Open the rendered preview in the default browser.",
    )
    parser.add_argument(
        "--list-themes",
        action="store_true",
        help="List available theme presets and exit.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Print progress information.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def _check_watchfiles_available() -> None:
    import importlib

    try:
        importlib.import_module("watchfiles")
    except ImportError:
        raise ImportError(
            "watchfiles is required for watch mode. Install it with: pip install bbpreview[watch]"
        ) from None


def main(argv: list[str] | None = None) -> int:
    """Entry point for the CLI."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.list_themes:
        print("Available themes:")
        for preset in ThemeManager.PRESETS:
            print(f"  - {preset}")
        return 0

    if not args.input:
        parser.error("the following argument is required: input")

    input_path = Path(args.input)
    if not is_bbcode_file(input_path):
        suffixes = " or ".join(BBCODE_SUFFIXES)
        print(f"Open a {suffixes} file to preview it.", file=sys.stderr)
        return 1
    if not input_path.is_file():
        print(f"Error: file not found: {input_path}", file=sys.stderr)
        return 1

    output_path = Path(args.output) if args.output else input_path.with_suffix(".html")

    if args.verbose:
        print(f"Input:  {input_path}")
        print(f"Output: {output_path}")
        print(f"Theme:  {args.theme}")

    try:
        previewer = Previewer(theme=args.theme)
        if args.watch:
            _check_watchfiles_available()
            _run_watch(previewer, input_path, output_path, args)
        else:
            previewer.render_file(
                input_path,
                output_path,
                encoding=args.encoding,
                fragment_only=args.fragment,
            )
            if args.open:
                webbrowser.open(output_path.resolve().as_uri())
    except Exception as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.verbose:
        print(f"Done. {output_path.stat().st_size} bytes written.")
    else:
        print(f"Rendered: {output_path}")

    return 0


def _run_watch(
    previewer: Previewer,
    input_path: Path,
    output_path: Path,
    args: argparse.Namespace,
) -> None:
    session = PreviewSession(
        input_path,
        output_path,
        previewer=previewer,
        encoding=args.encoding,
        fragment_only=args.fragment,
    )
    with session:
        if args.open:
            webbrowser.open(output_path.resolve().as_uri())
        print(f"Watching {input_path} (Ctrl+C to stop)")
        try:
            session.watch()
        except KeyboardInterrupt:
            logger.info("Watch interrupted")


if __name__ == "__main__":
    sys.exit(main())
