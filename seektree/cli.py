"""Command-line front door for seektree.

Validates credentials before anything touches the network, builds the
search service, then dispatches to the interactive browser or dump mode.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from loguru import logger

from .errors import ConfigurationError
from .logging_config import configure_logging
from .runtime import run_browser, run_dump
from .runtime.config import load_credentials, load_last_query, load_theme_name, save_theme_name
from .session import DEFAULT_RECORDING_PATH, ReplaySession, load_recording
from .ui_theme import available_theme_names, resolve_theme


def _positive_float(value: str) -> float:
    """argparse type for positive float values."""
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be > 0")
    return parsed


def _non_negative_float(value: str) -> float:
    """argparse type for non-negative float values."""
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("value must be >= 0")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Browse remote file-search results as a live, speed-sorted tree."
    )
    parser.add_argument("query", nargs="?", default=None, help="Search to run at startup.")
    parser.add_argument(
        "--replay",
        metavar="PATH",
        default=None,
        help=f"Recorded search responses to serve (default: {DEFAULT_RECORDING_PATH}).",
    )
    parser.add_argument(
        "--replay-delay",
        type=_non_negative_float,
        default=0.05,
        help="Seconds between replayed responses.",
    )
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable colors.")
    parser.add_argument("--dump", action="store_true", help="Print result trees to stdout and exit.")
    parser.add_argument(
        "--dump-seconds",
        type=_positive_float,
        default=2.0,
        help="How long --dump collects results.",
    )
    parser.add_argument("--verbose", action="store_true", help="Log debug records.")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and launch the browser or dump mode.

    Missing credentials or an unreadable recording exit non-zero before any
    search starts.
    """
    args = build_parser().parse_args(argv)
    log_path = configure_logging(verbose=args.verbose)

    try:
        credentials = load_credentials()
    except ConfigurationError as exc:
        raise SystemExit(f"seektree: {exc}") from exc

    replay_path = Path(args.replay) if args.replay is not None else DEFAULT_RECORDING_PATH
    try:
        responses = load_recording(replay_path)
    except OSError as exc:
        raise SystemExit(f"seektree: cannot read recorded responses {replay_path}: {exc}") from exc
    except ValueError as exc:
        raise SystemExit(f"seektree: {replay_path} is not valid JSON: {exc}") from exc
    service = ReplaySession(responses, delay_seconds=args.replay_delay)
    logger.info("loaded {} recorded responses from {} (log: {})", len(responses), replay_path, log_path)

    if args.dump:
        if not args.query or not args.query.strip():
            raise SystemExit("seektree: --dump requires a query")
        service.connect(credentials.username, credentials.password)
        run_dump(service, args.query, args.dump_seconds, sys.stdout)
        return

    if args.theme:
        save_theme_name(args.theme)
    theme = resolve_theme(args.theme or load_theme_name(), no_color=args.no_color)
    query = args.query if args.query is not None else (load_last_query() or "")
    run_browser(service, credentials, theme, query, submit_initial=args.query is not None)


if __name__ == "__main__":
    main()
