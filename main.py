# main.py

"""Entry point for the promo publisher (scheduled service or one-shot CLI)."""

import argparse
import asyncio
import logging
import sys

from promo_publisher.config.logging_config import setup_logging
from promo_publisher.config.settings import Settings

logger = logging.getLogger("promo_publisher.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    channel_ids = ", ".join(p["id"] for p in Settings.AVAILABLE_PUBLISHERS)

    parser = argparse.ArgumentParser(
        prog="promo_publisher",
        description=(
            "Scheduled deal publisher: fetches partner and marketplace "
            "offers and posts new ones to messaging channels."
        ),
        epilog=f"Channels: {channel_ids} (select with ENABLED_CHANNELS).",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        default=False,
        help="Run the pipeline once and exit.",
    )
    parser.add_argument(
        "--recent",
        action="store_true",
        default=False,
        help="List recently posted products and exit.",
    )
    parser.add_argument(
        "--hours",
        type=float,
        default=24.0,
        help="Window for --recent, in hours (default: 24).",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=50,
        help="Maximum rows for --recent (default: 50).",
    )
    parser.add_argument(
        "--health",
        action="store_true",
        default=False,
        help="Probe sources and report channel configuration.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Echo INFO logs to the console.",
    )
    return parser


def _run_service() -> None:
    """Run the scheduler until interrupted."""
    from promo_publisher.cli.runner import run_service

    try:
        asyncio.run(run_service())
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    except Exception:
        logger.critical("Fatal error in scheduler service", exc_info=True)
        raise
    finally:
        logger.info("promo_publisher service shutting down")


def _run_once() -> None:
    """Run a single pipeline pass."""
    from promo_publisher.cli.runner import run_once

    sys.exit(asyncio.run(run_once()))


def _run_recent(args: argparse.Namespace) -> None:
    """Print the recently posted table."""
    from promo_publisher.cli.runner import show_recent

    sys.exit(show_recent(limit=args.limit, hours_ago=args.hours))


def _run_health_check() -> None:
    """Run the source/channel health check."""
    from promo_publisher.cli.runner import run_health_check

    sys.exit(asyncio.run(run_health_check()))


def main() -> None:
    """Route to the service (no flags) or a one-shot command."""
    args = _build_parser().parse_args()
    log_file = setup_logging(
        console_level=logging.INFO if args.verbose else logging.WARNING
    )
    logger.info("promo_publisher starting, log file: %s", log_file)

    if args.recent:
        _run_recent(args)
    elif args.health:
        _run_health_check()
    elif args.once:
        _run_once()
    else:
        _run_service()


if __name__ == "__main__":
    main()
