"""Currency repository: currencies and their append-only rate history."""

from collections.abc import Iterable

from sqlalchemy import func, select

from fin.models.currency import Currency, Rate
from fin.repositories.base import BaseRepository


class CurrencyRepository(BaseRepository[Currency]):
    """Repository for Currency rows and the Rate rows they own.

    Rates are only ever inserted. "Latest" is computed at read time, so
    concurrent refreshes never contend on a shared row.

    Example:
        >>> repo = CurrencyRepository(Currency, db)
        >>> rates = await repo.latest_rates("USD")
    """

    async def append_rates(self, currency_name: str, rates: Iterable[Rate]) -> list[Rate]:
        """Insert new rate rows for ``currency_name`` without touching history.

        Args:
            currency_name: Base currency code
            rates: Unsaved Rate instances; their base is overwritten

        Returns:
            The inserted rows, flushed so they carry ids
        """
        added = []
        for rate in rates:
            rate.currency_name = currency_name
            self.db.add(rate)
            added.append(rate)
        await self.db.flush()
        return added

    async def latest_rates(self, currency_name: str) -> list[Rate]:
        """Most recent rate per target currency for one base currency.

        Rows are ranked per target name by ``created_at`` and then by ``id``
        so equal timestamps still yield exactly one current row.

        Returns:
            One Rate per target, ordered by target name
        """
        ranked = (
            select(
                Rate.id.label("rate_id"),
                func.row_number()
                .over(
                    partition_by=Rate.name,
                    order_by=(Rate.created_at.desc(), Rate.id.desc()),
                )
                .label("position"),
            )
            .where(Rate.currency_name == currency_name)
            .subquery()
        )
        result = await self.db.execute(
            select(Rate)
            .join(ranked, Rate.id == ranked.c.rate_id)
            .where(ranked.c.position == 1)
            .order_by(Rate.name)
        )
        return list(result.scalars().all())

    async def count(self) -> int:
        """Number of currencies stored."""
        result = await self.db.execute(select(func.count()).select_from(Currency))
        return result.scalar_one()
