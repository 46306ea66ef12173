"""CLI entry point for chatline.

Reads Matrix room events as JSON Lines and prints one rendered line per event.
"""

import argparse
import json
import logging
import sys
from collections.abc import Iterable, Iterator

from rich.console import Console

import chatline.io.logging_setup
import chatline.settings
from chatline.errors import RenderError
from chatline.event_types import parse_event
from chatline.render import render
from chatline.styling import style_line
from chatline.tui.app import ChatLineApp

logger = logging.getLogger(__name__)


def iter_rendered(
    lines: Iterable[str],
    displaynames: dict[str, str],
    strict: bool = False,
) -> Iterator[str]:
    """Parse and render each JSON line, skipping the ones that fail.

    Displaynames are looked up by sender ID; an unknown sender is shown as
    its ID.

    Raises:
        RenderError: On the first render failure when strict is set
    """
    for lineno, raw_line in enumerate(lines, start=1):
        if not raw_line.strip():
            continue
        try:
            raw = json.loads(raw_line)
        except json.JSONDecodeError as e:
            logger.warning("line %d: invalid JSON: %s", lineno, e)
            continue
        if not isinstance(raw, dict):
            logger.warning("line %d: expected a JSON object", lineno)
            continue
        try:
            event = parse_event(raw)
        except ValueError as e:
            logger.warning("line %d: skipping event: %s", lineno, e)
            continue

        displayname = displaynames.get(event.sender, event.sender)
        try:
            yield render(event, displayname)
        except RenderError as e:
            logger.error("line %d: cannot render %s: %s", lineno, event.event_id or "event", e)
            if strict:
                raise


def render_stream(
    lines: Iterable[str],
    displaynames: dict[str, str],
    strict: bool = False,
) -> list[str]:
    """Render every event in a JSON Lines stream."""
    return list(iter_rendered(lines, displaynames, strict=strict))


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Render Matrix room events as chat lines")
    parser.add_argument(
        "path",
        nargs="?",
        default="-",
        help="JSON Lines file of room events (default: stdin)",
    )
    parser.add_argument(
        "--names",
        type=str,
        default=None,
        help="JSON file mapping user IDs to display names",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        default=False,
        help="Print plain lines even on a terminal",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=False,
        help="Exit with status 1 on the first event that cannot be rendered",
    )
    parser.add_argument(
        "--tui",
        action="store_true",
        default=False,
        help="Open the rendered lines in the terminal viewer",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="stderr log level (default: WARNING). Env: CHATLINE_LOG_LEVEL",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Also append logs to this file. Env: CHATLINE_LOG_FILE",
    )
    return parser


def _read_lines(path: str) -> list[str]:
    if path == "-":
        return sys.stdin.read().splitlines()
    with open(path, encoding="utf-8") as f:
        return f.read().splitlines()


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    # [LAW:single-enforcer] Runtime logger configuration is centralized in io.logging_setup.
    log_runtime = chatline.io.logging_setup.configure(level=args.log_level, log_file=args.log_file)
    logger.debug("log level %s, log file %s", log_runtime.level, log_runtime.file_path)

    if args.tui and args.path == "-":
        # The viewer needs stdin for keyboard input.
        logger.error("--tui needs an input file; it cannot read events from stdin")
        return 2

    displaynames = chatline.settings.load_displaynames()
    if args.names:
        try:
            displaynames.update(chatline.settings.load_displayname_file(args.names))
        except ValueError as e:
            logger.error("%s", e)
            return 2

    try:
        lines = _read_lines(args.path)
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Cannot read %s: %s", args.path, e)
        return 2

    try:
        rendered = render_stream(lines, displaynames, strict=args.strict)
    except RenderError:
        return 1

    if args.tui:
        ChatLineApp(rendered, room_name=args.path).run()
        return 0

    use_color = (
        not args.no_color
        and chatline.settings.load_color_enabled()
        and sys.stdout.isatty()
    )
    if use_color:
        console = Console(highlight=False)
        for line in rendered:
            console.print(style_line(line), soft_wrap=True)
    else:
        for line in rendered:
            sys.stdout.write(line + "\n")
        sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
