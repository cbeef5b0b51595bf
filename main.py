# main.py

"""Entry point for the trendbuy application (TUI or headless CLI)."""

import argparse
import asyncio
import logging
import sys

from src.config.logging_config import setup_logging
from src.config.settings import Settings

logger = logging.getLogger("trendbuy.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="trendbuy",
        description=(
            "Find shoppable products from a social-media link or keywords."
        ),
        epilog="Run without arguments to launch the interactive TUI.",
    )
    parser.add_argument(
        "-u",
        "--url",
        default=None,
        help="TikTok, Instagram, YouTube or Amazon link to interpret.",
    )
    parser.add_argument(
        "-k",
        "--keywords",
        default=None,
        help="Free-text product keywords.",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "--recent",
        nargs="?",
        type=int,
        const=Settings.RECENT_SEARCHES_LIMIT,
        default=None,
        metavar="N",
        help="Show the N most recent cached searches.",
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        default=False,
        help="Show result cache statistics.",
    )
    parser.add_argument(
        "--clear-cache",
        action="store_true",
        default=False,
        dest="clear_cache",
        help="Remove every cached search.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Echo INFO logs to stderr.",
    )
    return parser


def _run_tui() -> None:
    """Launch the interactive Textual TUI."""
    from src.ui.app import TrendBuyApp

    try:
        app = TrendBuyApp()
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("trendbuy TUI shutting down")


def _run_cli(args: argparse.Namespace) -> None:
    """Run a headless search and exit."""
    from src.cli.runner import cli_search

    exit_code = asyncio.run(
        cli_search(
            url=args.url,
            keywords=args.keywords,
            output_format=args.output_format,
        )
    )
    sys.exit(exit_code)


def main() -> None:
    """Route to a cache command, a headless search, or the TUI."""
    parser = _build_parser()
    args = parser.parse_args()

    log_file = setup_logging(
        console_level=logging.INFO if args.verbose else logging.WARNING
    )
    logger.info("trendbuy starting, log file: %s", log_file)

    if args.clear_cache:
        from src.cli.runner import run_clear_cache

        sys.exit(run_clear_cache())
    elif args.stats:
        from src.cli.runner import run_stats

        sys.exit(run_stats())
    elif args.recent is not None:
        from src.cli.runner import run_recent

        sys.exit(run_recent(args.recent))
    elif args.url is None and args.keywords is None:
        _run_tui()
    else:
        _run_cli(args)


if __name__ == "__main__":
    main()
