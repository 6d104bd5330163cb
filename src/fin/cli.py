"""Command line entry point.

Exactly one mode per invocation:

    fin --serve     run the API (rates are bootstrapped on an empty database)
    fin --scrape    refresh the rates of every supported currency once
    fin --migrate   apply database migrations up to head
"""

import argparse
import asyncio
import logging
import logging.config
from collections.abc import Sequence

import uvicorn
from alembic import command
from alembic.config import Config

from fin.core.config import settings
from fin.db.session import AsyncSessionLocal, engine
from fin.services.rate_refresh import refresh_all_rates

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fin", description=settings.APP_NAME)
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument("--serve", action="store_true", help="run the HTTP API")
    mode.add_argument("--scrape", action="store_true", help="refresh exchange rates once")
    mode.add_argument("--migrate", action="store_true", help="apply database migrations")
    return parser


async def _scrape() -> tuple[int, int]:
    try:
        async with AsyncSessionLocal() as db:
            return await refresh_all_rates(db)
    finally:
        await engine.dispose()


def migrate() -> None:
    logger.info(f"Applying migrations from {settings.ALEMBIC_CONFIG}")
    command.upgrade(Config(settings.ALEMBIC_CONFIG), "head")


def scrape() -> int:
    refreshed, failed = asyncio.run(_scrape())
    logger.info(f"Rates refreshed for {refreshed} currencies, {failed} failed")
    return 1 if failed and not refreshed else 0


def serve() -> None:
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT, log_config=None)


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.config.dictConfig(settings.LOGGING_CONFIG)

    if args.migrate:
        migrate()
    elif args.scrape:
        return scrape()
    else:
        serve()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
