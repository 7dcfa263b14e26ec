# main.py

"""Entry point for the feed_search command-line tool."""

import argparse
import logging
import sys

from src.config.logging_config import setup_logging
from src.config.settings import Settings
from src.services.feed_pipeline import clamp_limit

logger = logging.getLogger("feed_search.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="feed_search",
        description="Top-K product search over the Shopee affiliate feed.",
        epilog="The feed URL is read from SHOPEE_FEED_URL (.env supported).",
    )
    parser.add_argument(
        "query",
        nargs="?",
        default=None,
        help="Case-insensitive title substring. Omit to match any title.",
    )
    parser.add_argument(
        "-c",
        "--category",
        default=None,
        help="Exact category name (case-insensitive).",
    )
    parser.add_argument(
        "--max-price",
        type=float,
        default=None,
        dest="max_price",
        help="Maximum price in BRL.",
    )
    parser.add_argument(
        "--min-rating",
        type=float,
        default=None,
        dest="min_rating",
        help="Minimum item rating.",
    )
    parser.add_argument(
        "-n",
        "--limit",
        default=str(Settings.DEFAULT_LIMIT),
        help=(
            f"Results to return, {Settings.MIN_LIMIT}-{Settings.MAX_LIMIT} "
            f"(default: {Settings.DEFAULT_LIMIT})."
        ),
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print parse diagnostics instead of products.",
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
        "--save",
        action="store_true",
        default=False,
        help="Also save results as JSON and CSV.",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        dest="output_dir",
        help="Directory for --save (default: results/).",
    )
    parser.add_argument(
        "--health",
        action="store_true",
        default=False,
        help="Check that the feed source is reachable.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Echo INFO logs (fetch, cache, early stop) to stderr.",
    )
    return parser


def main() -> None:
    """Route to the health check or a single feed search."""
    args = _build_parser().parse_args()

    setup_logging(logging.INFO if args.verbose else logging.WARNING)
    logger.info("feed_search starting: %s", vars(args))

    from src.cli.runner import cli_search, run_health_check

    if args.health:
        sys.exit(run_health_check())

    sys.exit(
        cli_search(
            query=args.query,
            category=args.category,
            max_price=args.max_price,
            min_rating=args.min_rating,
            limit=clamp_limit(args.limit),
            debug=args.debug,
            output_format=args.output_format,
            output_dir=args.output_dir,
            save=args.save,
        )
    )


if __name__ == "__main__":
    main()
