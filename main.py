# main.py

"""Entry point for ml_afiliados (TUI, headless CLI or proxy server)."""

import argparse
import asyncio
import logging
import sys

from src.config.logging_config import setup_logging
from src.config.settings import Settings
from src.models.search_filters import SearchFilters, SortOrder

logger = logging.getLogger("ml_afiliados.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="ml_afiliados",
        description=(
            "Search Mercado Livre and build affiliate links and "
            "WhatsApp messages."
        ),
        epilog=f"Gateway modes: {', '.join(Settings.GATEWAY_MODES)}",
    )
    parser.add_argument(
        "query",
        nargs="?",
        default=None,
        help="Search query. Omit to launch the interactive TUI.",
    )
    parser.add_argument(
        "--sort",
        choices=[s.value for s in SortOrder],
        default=SortOrder.RELEVANCE.value,
    )
    parser.add_argument(
        "--free-shipping",
        action="store_true",
        dest="free_shipping",
        help="Only listings with free shipping.",
    )
    parser.add_argument(
        "--condition",
        choices=["new", "used"],
        default=None,
    )
    parser.add_argument(
        "--discount",
        action="store_true",
        help="Only marked-down listings.",
    )
    parser.add_argument(
        "-l",
        "--limit",
        type=int,
        default=Settings.DEFAULT_LIMIT,
    )
    parser.add_argument(
        "--deals",
        action="store_true",
        help="List current deals instead of searching.",
    )
    parser.add_argument(
        "--category",
        default=None,
        help="Category ID for --deals (e.g. MLB1051).",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table", "messages"],
        default="json",
        dest="output_format",
        help="Output format (default: json).",
    )
    parser.add_argument(
        "-p",
        "--phone",
        default=None,
        help="Target phone number for WhatsApp links.",
    )
    parser.add_argument(
        "-m",
        "--mode",
        choices=Settings.GATEWAY_MODES,
        default=None,
        help=f"Gateway mode (default: {Settings.GATEWAY_MODE}).",
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Run the HTTP search proxy.",
    )
    parser.add_argument("--host", default=None)
    parser.add_argument("--port", type=int, default=None)
    return parser


def _run_tui(mode: str | None) -> None:
    """Launch the interactive Textual TUI."""
    from src.ui.app import AffiliateSearchApp

    try:
        AffiliateSearchApp(mode=mode).run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("ml_afiliados TUI shutting down")


def _run_cli(args: argparse.Namespace) -> None:
    """Run a headless search and exit."""
    from src.cli.runner import cli_search

    filters = SearchFilters(
        sort=SortOrder(args.sort),
        free_shipping=args.free_shipping,
        condition=args.condition,
        discount=args.discount,
        limit=args.limit,
        category=args.category,
    )
    exit_code = asyncio.run(
        cli_search(
            query=args.query,
            filters=filters,
            output_format=args.output_format,
            mode=args.mode,
            phone=args.phone,
            deals=args.deals,
        )
    )
    sys.exit(exit_code)


def _run_server(args: argparse.Namespace) -> None:
    """Serve the HTTP proxy until interrupted."""
    from src.api.proxy_server import run_server

    run_server(args.host, args.port)


def main() -> None:
    """Route to proxy server, headless CLI or TUI."""
    parser = _build_parser()
    args = parser.parse_args()

    tui = not args.serve and not args.deals and args.query is None
    log_file = setup_logging(console=not tui)
    logger.info("ml_afiliados starting; log file: %s", log_file)

    if args.serve:
        _run_server(args)
    elif tui:
        _run_tui(args.mode)
    else:
        _run_cli(args)


if __name__ == "__main__":
    main()
