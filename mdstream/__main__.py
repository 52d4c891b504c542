#!/usr/bin/env python3
"""mdstream command-line front end.

Usage:
    # Render a markdown file and print the HTML
    python -m mdstream render notes.md

    # Write to a file instead
    python -m mdstream render notes.md -o notes.html

    # Replay the file as a stream and show the final open-construct state
    python -m mdstream render reply.md --stream --chunk-size 16 --show-state

    # Stylesheet for highlighted code blocks
    python -m mdstream css --style monokai
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from pygments.util import ClassNotFound
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from mdstream.plugins.code_block_formatter import PygmentsHighlighter
from mdstream.renderer import MarkdownRenderer, StreamingSession
from mdstream.streaming.state import FormatterState


DEFAULT_CHUNK_SIZE = 32


logger = logging.getLogger(__name__)


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _load_config(path: Optional[str]) -> Optional[Dict[str, Any]]:
    """Load a formatter config file given on the command line.

    Raises:
        OSError, ValueError: If the file cannot be read or is not valid JSON.
    """
    if not path:
        return None
    with open(path, encoding="utf-8") as f:
        return json.load(f)


def replay_stream(session: StreamingSession, text: str, chunk_size: int) -> str:
    """Feed text to a session in growing prefixes, as a stream would arrive.

    Returns:
        The HTML of the final frame.
    """
    html = ""
    for end in range(chunk_size, len(text) + chunk_size, chunk_size):
        html = session.render(text[:end])
    return html


def state_table(state: FormatterState) -> Table:
    """Build a rich table describing the open constructs of a stream."""
    table = Table(title="Streaming state")
    table.add_column("Construct", style="cyan")
    table.add_column("Open")
    table.add_column("Detail")
    table.add_column("Content", overflow="fold")

    for construct, record in state.as_dict().items():
        detail = record.get("language") or record.get("kind", "")
        if not record["open"]:
            detail = ""
        table.add_row(
            construct,
            "[green]yes[/green]" if record["open"] else "no",
            escape(detail),
            escape(record["content"]),
        )
    return table


def _cmd_render(args: argparse.Namespace, console: Console) -> int:
    try:
        config = _load_config(args.config)
    except (OSError, ValueError) as exc:
        console.print(f"[red]Error:[/red] could not load config {escape(args.config)}: {escape(str(exc))}")
        return 1

    try:
        text = _read_input(args.file)
    except OSError as exc:
        console.print(f"[red]Error:[/red] could not read {escape(args.file)}: {escape(str(exc))}")
        return 1

    session = None
    if args.stream:
        if args.chunk_size < 1:
            console.print("[red]Error:[/red] --chunk-size must be at least 1")
            return 2
        session = StreamingSession(config=config)
        html = replay_stream(session, text, args.chunk_size)
    else:
        html = MarkdownRenderer(config=config).render(text)

    if args.output:
        Path(args.output).write_text(html, encoding="utf-8")
        logger.info("Wrote %d characters to %s", len(html), args.output)
    else:
        console.print(Syntax(html, "html", word_wrap=True))

    if args.show_state:
        if session is None:
            console.print("[yellow]--show-state only applies with --stream[/yellow]")
        else:
            console.print(state_table(session.state))

    return 0


def _cmd_css(args: argparse.Namespace, console: Console) -> int:
    try:
        css = PygmentsHighlighter().style_defs(args.style)
    except ClassNotFound:
        console.print(f"[red]Error:[/red] unknown Pygments style: {escape(args.style)}")
        return 2
    console.print(css, markup=False, highlight=False)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdstream",
        description="Render markdown-like chat text to HTML",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Render a file
  mdstream render notes.md -o notes.html

  # Replay a file as a stream and inspect the final state
  mdstream render reply.md --stream --show-state

  # Stylesheet for code highlighting
  mdstream css --style monokai
        """,
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to .env file (default: .env)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    render = subparsers.add_parser("render", help="Render a markdown file to HTML")
    render.add_argument("file", help="Input file, or - for stdin")
    render.add_argument("--output", "-o", metavar="PATH", help="Write HTML to PATH")
    render.add_argument(
        "--stream",
        action="store_true",
        help="Render through a streaming session, chunk by chunk",
    )
    render.add_argument(
        "--chunk-size",
        type=int,
        default=DEFAULT_CHUNK_SIZE,
        help=f"Characters added per streamed frame (default: {DEFAULT_CHUNK_SIZE})",
    )
    render.add_argument(
        "--show-state",
        action="store_true",
        help="Print the streaming state after the last frame",
    )
    render.add_argument(
        "--config",
        metavar="PATH",
        help="Formatter configuration JSON file",
    )

    css = subparsers.add_parser("css", help="Print the code highlighting stylesheet")
    css.add_argument(
        "--style",
        default="default",
        help="Pygments style name (default: default)",
    )
    return parser


def main(argv: Optional[List[str]] = None, console: Optional[Console] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.env_file and Path(args.env_file).exists():
        load_dotenv(args.env_file)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    console = console or Console()
    if args.command == "render":
        return _cmd_render(args, console)
    return _cmd_css(args, console)


if __name__ == "__main__":
    sys.exit(main())
