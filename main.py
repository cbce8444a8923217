# main.py

"""Entry point for the catalog browser (TUI or headless CLI)."""

import argparse
import asyncio
import logging
import sys

from catalog_state.config.logging_config import setup_logging
from catalog_state.config.settings import Settings
from catalog_state.models.criteria import SortKey

logger = logging.getLogger("catalog_state.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="catalog_state",
        description="Browse a product catalog with filters, sorting and paging.",
        epilog=f"Categories: {', '.join(Settings.CATEGORIES)}",
    )
    parser.add_argument(
        "--print",
        action="store_true",
        default=False,
        dest="headless",
        help="Print one page and exit instead of launching the TUI.",
    )
    parser.add_argument("--file", default=None, help="Load items from a JSON file.")
    parser.add_argument("--url", default=None, help="Load items from an HTTP endpoint.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for the mock catalog.")
    parser.add_argument("-q", "--search", default=None, help="Search name or description.")
    parser.add_argument("-c", "--category", default=None, choices=Settings.CATEGORIES)
    parser.add_argument("--min-price", type=float, default=None)
    parser.add_argument("--max-price", type=float, default=None)
    parser.add_argument(
        "--price-preset",
        default=None,
        choices=[label for label, _low, _high in Settings.PRICE_PRESETS],
        help="Quick price range; --min-price/--max-price override it.",
    )
    parser.add_argument(
        "-t", "--tags", default=None, help="Comma-separated tags (any match)."
    )
    parser.add_argument(
        "--in-stock",
        action="store_true",
        default=False,
        help="Only show items in stock.",
    )
    parser.add_argument(
        "--sort",
        default=None,
        choices=[k.value for k in SortKey],
        help="Sort order (default: catalog order).",
    )
    parser.add_argument("-p", "--page", type=int, default=1)
    parser.add_argument("--page-size", type=int, default=None)
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "--recommendations",
        action="store_true",
        default=False,
        help="Print the recommendation feed instead of the catalog page.",
    )
    return parser


def _run_tui(args: argparse.Namespace) -> None:
    """Launch the interactive Textual TUI."""
    from catalog_state.cli.runner import resolve_source
    from catalog_state.ui.app import CatalogBrowserApp

    try:
        app = CatalogBrowserApp(resolve_source(args.file, args.url, args.seed))
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("catalog_state TUI shutting down")


def _run_cli(args: argparse.Namespace) -> None:
    """Run a headless browse and exit."""
    from catalog_state.cli.runner import cli_browse, resolve_source

    exit_code = asyncio.run(
        cli_browse(
            resolve_source(args.file, args.url, args.seed),
            category=args.category,
            min_price=args.min_price,
            max_price=args.max_price,
            price_preset=args.price_preset,
            search=args.search,
            tags_csv=args.tags,
            in_stock=args.in_stock,
            sort=args.sort,
            page=args.page,
            page_size=args.page_size,
            output_format=args.output_format,
            recommendations=args.recommendations,
        )
    )
    sys.exit(exit_code)


def main() -> None:
    """Route to the TUI (default) or the headless printer (--print)."""
    log_file = setup_logging()
    logger.info("catalog_state starting, log file: %s", log_file)

    args = _build_parser().parse_args()

    if args.headless:
        _run_cli(args)
    else:
        _run_tui(args)


if __name__ == "__main__":
    main()
