"""Command line entry point: run a batch, serve HTTP, check health or show statistics."""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

import uvicorn

from articlebot.core.db import create_all, create_engine
from articlebot.core.errors import ConfigurationError
from articlebot.core.logging import get_logger, setup_logging
from articlebot.core.settings import Settings, get_settings
from articlebot.core.store import InMemoryPostStore
from articlebot.publisher.factory import build_pipeline, create_http_client, create_store
from articlebot.publisher.results import BatchResult

logger = get_logger(__name__)


def _print_batch(result: BatchResult) -> None:
    print("\n=== Article Batch Results ===")
    print(f"Requested: {result.stats.requested}")
    print(f"Generated: {result.stats.generated}")
    print(f"Failed: {result.stats.failed}")
    print(f"Average SEO score: {result.stats.average_seo_score}")
    for post in result.posts:
        print(f"  + {post.title} (/blog/{post.slug})")
    for warning in result.warnings:
        print(f"  ! {warning}")
    for error in result.errors:
        print(f"  x {error}")


async def run_batch(settings: Settings, count: int, dry_run: bool = False) -> int:
    async with create_http_client(settings) as client:
        store = InMemoryPostStore() if dry_run else create_store(settings)
        pipeline = build_pipeline(settings, client, store=store)
        try:
            result = await pipeline.generate(count)
        except ConfigurationError as e:
            print(f"Configuration error: {e}")
            return 2
        finally:
            await store.close()
    _print_batch(result)
    return 0 if result.success else 1


async def run_health(settings: Settings) -> int:
    store = create_store(settings)
    try:
        async with create_http_client(settings) as client:
            report = await build_pipeline(settings, client, store=store).health_check()
    finally:
        await store.close()
    print(f"Healthy: {report.healthy}")
    for check in report.checks:
        print(f"  [{check.status.value}] {check.name}: {check.message}")
    return 0 if report.healthy else 1


async def run_stats(settings: Settings) -> int:
    store = create_store(settings)
    try:
        async with create_http_client(settings) as client:
            stats = await build_pipeline(settings, client, store=store).statistics()
    finally:
        await store.close()
    print(f"Published posts: {stats.total_posts}")
    print(f"Published today: {stats.published_today}")
    print(f"Average reading time: {stats.average_reading_time} min")
    return 0


async def run_init_db(settings: Settings) -> int:
    engine = create_engine(settings.db_url, echo=settings.debug)
    try:
        await create_all(engine)
    finally:
        await engine.dispose()
    print("Tables created")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="articlebot", description="Automated article production")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Generate and publish one batch")
    run.add_argument("--count", type=int, default=None, help="Posts to generate (default: POSTS_PER_RUN)")
    run.add_argument("--dry-run", action="store_true", help="Keep posts in memory instead of the database")

    serve = sub.add_parser("serve", help="Start the HTTP service")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)

    sub.add_parser("health", help="Check configuration and store connectivity")
    sub.add_parser("stats", help="Show published post statistics")
    sub.add_parser("init-db", help="Create database tables")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    settings = get_settings()
    setup_logging("articlebot", settings)
    if args.verbose:
        logging.getLogger("articlebot").setLevel(logging.DEBUG)

    if args.command == "serve":
        from articlebot.service.app import create_app
        uvicorn.run(
            create_app("publisher", settings),
            host=args.host or settings.service_host,
            port=args.port or settings.service_port,
            log_level=settings.log_level.lower(),
        )
        return 0
    if args.command == "run":
        count = args.count if args.count is not None else settings.posts_per_run
        return asyncio.run(run_batch(settings, count, dry_run=args.dry_run))
    if args.command == "health":
        return asyncio.run(run_health(settings))
    if args.command == "stats":
        return asyncio.run(run_stats(settings))
    if args.command == "init-db":
        return asyncio.run(run_init_db(settings))
    return 1


if __name__ == "__main__":
    sys.exit(main())
