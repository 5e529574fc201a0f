"""
Fundi feeds CLI - browse marketplace feeds from the terminal.

Usage:
    fundi-feeds [--demo] [--token T] fundis [--search S] [--location L] ...
    fundi-feeds jobs [--category C] [--min-budget N] [--urgent] ...
    fundi-feeds payments [--status S]
    fundi-feeds metadata
    fundi-feeds recent
"""

import argparse
import asyncio
import sys
from typing import Any, Callable

from fundi_feeds.auth import AuthSession
from fundi_feeds.config import FeedsConfig
from fundi_feeds.lib import logs
from fundi_feeds.models.common import FeedKind
from fundi_feeds.models.query import FilterName
from fundi_feeds.models.records import Fundi, Job, Payment
from fundi_feeds.recent_searches import RecentSearches
from fundi_feeds.services import get_feed_service
from fundi_feeds.state import FeedController, FeedsState

LOG = logs.logger(__file__)

DEMO_TOKEN = "demo-token"


def format_fundi(fundi: Fundi) -> str:
    skills = ", ".join(fundi.skills) or "-"
    return (
        f"{fundi.id:<12} {fundi.name:<24} {fundi.location:<16} "
        f"{fundi.rating:.1f}* {fundi.status_text:<10} {skills}"
    )


def format_job(job: Job) -> str:
    urgent = " [urgent]" if job.is_urgent else ""
    return (
        f"{job.id:<12} {job.title:<32} {job.location:<16} "
        f"{job.formatted_budget:<16} {job.formatted_deadline}{urgent}"
    )


def format_payment(payment: Payment) -> str:
    return (
        f"{payment.id:<12} {payment.payment_type:<16} "
        f"{payment.formatted_amount:<14} {payment.status.value}"
    )


_FORMATTERS: dict[FeedKind, Callable[[Any], str]] = {
    FeedKind.FUNDIS: format_fundi,
    FeedKind.JOBS: format_job,
    FeedKind.PAYMENTS: format_payment,
}


def _filters_from_args(args: argparse.Namespace) -> dict[FilterName, Any]:
    skills = [s.strip() for s in args.skills.split(",")] if args.skills else None
    return {
        FilterName.LOCATION: args.location,
        FilterName.CATEGORY: args.category,
        FilterName.SKILLS: skills,
        FilterName.MIN_RATING: args.min_rating,
        FilterName.MIN_BUDGET: args.min_budget,
        FilterName.MAX_BUDGET: args.max_budget,
        FilterName.IS_URGENT: True if args.urgent else None,
        FilterName.IS_AVAILABLE: True if args.available else None,
        FilterName.IS_VERIFIED: True if args.verified else None,
        FilterName.STATUS: args.status,
    }


async def run_feed(args: argparse.Namespace, state: FeedsState) -> int:
    """Load up to ``args.pages`` pages of one feed and print them."""
    kind = FeedKind(args.command)
    controller: FeedController = {
        FeedKind.FUNDIS: state.fundis,
        FeedKind.JOBS: state.jobs,
        FeedKind.PAYMENTS: state.payments,
    }[kind]

    state.query.update(_filters_from_args(args))
    if args.search:
        state.query.set_search(args.search)
        state.recent_searches.add(args.search)

    await controller.refresh()
    pages = 1
    while controller.error is None and controller.has_more and pages < args.pages:
        await controller.load_more()
        pages += 1

    formatter = _FORMATTERS[kind]
    for record in controller.records:
        print(formatter(record))

    print(
        f"\n{len(controller.records)} {kind.label} "
        f"({pages} page(s), more available: {'yes' if controller.has_more else 'no'})"
    )
    if controller.error:
        print(f"Error: {controller.error}", file=sys.stderr)
        return 1
    return 0


async def run_metadata(args: argparse.Namespace, state: FeedsState) -> int:
    await state.load_metadata()
    print(f"Categories: {', '.join(state.categories) or '-'}")
    print(f"Skills:     {', '.join(state.skills) or '-'}")
    print(f"Locations:  {', '.join(state.locations) or '-'}")
    if state.metadata_error:
        print(f"Error: {state.metadata_error}", file=sys.stderr)
        return 1
    return 0


def cmd_recent(recent: RecentSearches) -> int:
    terms = recent.terms
    if not terms:
        print("No recent searches.")
    for term in terms:
        print(term)
    return 0


async def _run(args: argparse.Namespace, config: FeedsConfig) -> int:
    token = args.token or config.api_token or (DEMO_TOKEN if args.demo else None)
    auth = AuthSession(token)
    kind = "demo" if args.demo else config.service_kind
    options: dict[str, Any] = {
        "auth": auth,
        "base_url": config.base_url,
        "timeout": config.timeout,
    }
    if kind == "demo":
        options = {"virtual_fundis": args.virtual}
    LOG.info("Command %s - service:%s authenticated:%s", args.command, kind, auth.is_authenticated)

    recent = RecentSearches.open(config.cache_dir)
    try:
        async with get_feed_service(kind, **options) as service:
            state = FeedsState(service, auth=auth, config=config, recent_searches=recent)
            try:
                if args.command == "metadata":
                    return await run_metadata(args, state)
                return await run_feed(args, state)
            finally:
                state.dispose()
    finally:
        recent.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fundi-feeds", description="Browse Fundi marketplace feeds"
    )
    parser.add_argument("--demo", action="store_true", help="Use built-in demo data")
    parser.add_argument("--token", help="Bearer token (default: FUNDI_API_TOKEN)")
    parser.add_argument("--log-level", help="Override LOG_LEVEL")

    subparsers = parser.add_subparsers(dest="command", required=True)

    for kind in FeedKind:
        feed = subparsers.add_parser(kind.value, help=f"List {kind.label}")
        feed.add_argument("--search", help="Free-text search")
        feed.add_argument("--location")
        feed.add_argument("--category")
        feed.add_argument("--skills", help="Comma-separated skills")
        feed.add_argument("--min-rating", type=float)
        feed.add_argument("--min-budget", type=float)
        feed.add_argument("--max-budget", type=float)
        feed.add_argument("--urgent", action="store_true")
        feed.add_argument("--available", action="store_true")
        feed.add_argument("--verified", action="store_true")
        feed.add_argument("--status")
        feed.add_argument("--pages", type=int, default=1, help="Pages to load")
        feed.add_argument(
            "--virtual",
            type=int,
            default=0,
            help="Demo only: simulate this many unfiltered fundis",
        )

    subparsers.add_parser("metadata", help="List categories, skills and locations")
    subparsers.add_parser("recent", help="Show recent searches")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.log_level:
        logs.set_level(args.log_level)

    config = FeedsConfig.from_env()
    if args.command == "recent":
        recent = RecentSearches.open(config.cache_dir)
        try:
            return cmd_recent(recent)
        finally:
            recent.close()

    if not hasattr(args, "virtual"):
        args.virtual = 0
    try:
        return asyncio.run(_run(args, config))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
