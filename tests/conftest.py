"""Shared fixtures: in-memory ledger database, API client and seed data."""

from collections.abc import AsyncGenerator
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from fin.core.rate_limit import limiter
from fin.db.base import Base
from fin.db.session import enable_sqlite_foreign_keys, get_db
from fin.models.category import Category
from fin.schemas.account import AccountCreate, CurrencyRef
from fin.schemas.category import CategoryCreate
from fin.schemas.currency import CurrencyCreate, RateCreate
from fin.services import category_service, currency_service, ledger
from fin.services.currency_service import CurrencyWithRates
from fin.services.ledger import AccountWithBalance
from main import app

DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Fresh schema per test; FKs on so CASCADE and RESTRICT behave like PostgreSQL."""
    engine = create_async_engine(DATABASE_URL, echo=False)
    enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_db(test_engine) -> AsyncGenerator[AsyncSession]:
    """Session the services and the API share within one test."""
    async_session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session_maker() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(test_db: AsyncSession) -> AsyncGenerator[AsyncClient]:
    """API client bound to ``test_db``."""

    async def override_get_db() -> AsyncGenerator[AsyncSession]:
        yield test_db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def reset_limiter():
    """Start every test with an empty rate limit window."""
    limiter.reset()
    yield
    limiter.reset()


@pytest_asyncio.fixture(scope="function")
async def usd(test_db: AsyncSession) -> CurrencyWithRates:
    """USD with a BRL rate of 3.80."""
    return await currency_service.create_currency(
        test_db,
        CurrencyCreate(
            name="USD",
            symbol="$",
            rates=[RateCreate(name="BRL", symbol="R$", value=Decimal("3.80"))],
        ),
    )


@pytest_asyncio.fixture(scope="function")
async def wallet(test_db: AsyncSession, usd: CurrencyWithRates) -> AccountWithBalance:
    """USD account opened with 100.00."""
    return await ledger.create_account(
        test_db,
        AccountCreate(
            currency=CurrencyRef(name="USD"),
            name="Wallet",
            initial_balance=Decimal("100.00"),
        ),
    )


@pytest_asyncio.fixture(scope="function")
async def groceries(test_db: AsyncSession) -> Category:
    return await category_service.create_category(test_db, CategoryCreate(name="Groceries"))


@pytest_asyncio.fixture(scope="function")
async def salary(test_db: AsyncSession) -> Category:
    return await category_service.create_category(test_db, CategoryCreate(name="Salary"))
