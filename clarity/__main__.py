"""Command line entry point: run one search and print the result.

Usage:
    python -m clarity "graph neural networks" --category cs.LG
    python -m clarity --category cs.CV            # latest in category
    python -m clarity --discover                  # discovery feed
    python -m clarity --list-categories
"""

import argparse
import asyncio
import sys
from typing import Optional, Sequence

from clarity.integrations.search.arxiv_client import ArxivClient
from clarity.search.models import SearchCriteria, SortField, SortOrder
from clarity.search.query_builder import random_term_picker
from clarity.session.cli_helpers import display_state, format_categories
from clarity.session.state import FetchState, FetchStatus
from clarity.session.state_machine import FetchStateMachine
from clarity.utils.config import get_settings
from clarity.utils.logging_config import get_logger, setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="clarity", description="Browse and search arXiv papers.")
    parser.add_argument("term", nargs="?", default="", help="free-text search term")
    parser.add_argument("-c", "--category", help="arXiv category code, e.g. cs.AI")
    parser.add_argument(
        "--sort",
        choices=[f.value for f in SortField],
        default=SortField.RELEVANCE.value,
        help="sort field (ignored when browsing without a term)",
    )
    parser.add_argument(
        "--order",
        choices=[o.value for o in SortOrder],
        default=SortOrder.DESCENDING.value,
    )
    parser.add_argument("-n", "--max-results", type=int, help="number of papers (1-100)")
    parser.add_argument("--discover", action="store_true", help="show the discovery feed")
    parser.add_argument("--list-categories", action="store_true", help="list known categories")
    parser.add_argument("--json-logs", action="store_true", help="log as JSON")
    return parser


def _size(args: argparse.Namespace, default: int) -> int:
    return args.max_results if args.max_results is not None else default


async def run(args: argparse.Namespace) -> FetchState:
    settings = get_settings()
    machine = FetchStateMachine(
        ArxivClient(settings),
        settings=settings,
        pick_default_term=random_term_picker(settings.DISCOVERY_TERMS),
    )

    if args.discover:
        criteria = SearchCriteria(max_results=_size(args, settings.LATEST_MAX_RESULTS))
    else:
        category = args.category if args.category is not None else settings.DEFAULT_CATEGORY
        default_size = settings.SEARCH_MAX_RESULTS if args.term.strip() else settings.LATEST_MAX_RESULTS
        criteria = SearchCriteria(
            term=args.term,
            category=category,
            sort_field=SortField(args.sort),
            sort_order=SortOrder(args.order),
            max_results=_size(args, default_size),
        )

    return await machine.search(criteria)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.list_categories:
        print(format_categories())
        return 0

    setup_logging(use_json=args.json_logs)
    logger = get_logger(__name__)

    try:
        state = asyncio.run(run(args))
    except KeyboardInterrupt:
        logger.info("Search cancelled")
        return 130

    display_state(state)
    return 1 if state.status == FetchStatus.ERROR else 0


if __name__ == "__main__":
    sys.exit(main())
