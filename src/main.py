"""Ledger HTTP application."""

import logging
import logging.config
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded

import fin.models  # noqa: F401  (registers every table on Base.metadata)
from fin.api.routes import accounts, categories, currencies, health, transactions
from fin.core.config import settings
from fin.core.exceptions import AppException, app_exception_handler
from fin.core.middleware import RequestLoggingMiddleware
from fin.core.rate_limit import limiter, rate_limit_exceeded_handler
from fin.db.base import Base
from fin.db.session import AsyncSessionLocal, engine
from fin.services.rate_refresh import bootstrap_rates

logging.config.dictConfig(settings.LOGGING_CONFIG)
logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

ROUTERS = (
    (currencies.router, "/currencies", "currencies"),
    (categories.router, "/categories", "categories"),
    (accounts.router, "/accounts", "accounts"),
    (transactions.router, "/accounts/{account_id}/transactions", "transactions"),
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info(f"{settings.APP_NAME} starting in {settings.ENVIRONMENT}")

    if settings.ENVIRONMENT == "development":
        # Other environments run ``fin --migrate``
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    if settings.BOOTSTRAP_RATES_ON_SERVE:
        async with AsyncSessionLocal() as db:
            await bootstrap_rates(db)

    yield

    logger.info(f"{settings.APP_NAME} stopping")
    await engine.dispose()


app = FastAPI(title=settings.APP_NAME, version="0.1.0", lifespan=lifespan)
app.state.limiter = limiter

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=settings.CORS_CREDENTIALS,
    allow_methods=settings.CORS_METHODS,
    allow_headers=settings.CORS_HEADERS,
)
# Added last so it wraps CORS and sees every response
app.add_middleware(RequestLoggingMiddleware)

app.add_exception_handler(AppException, app_exception_handler)  # type: ignore[arg-type]
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)  # type: ignore[arg-type]

app.include_router(health.router, tags=["health"])
for router, path, tag in ROUTERS:
    app.include_router(router, prefix=f"{API_PREFIX}{path}", tags=[tag])
