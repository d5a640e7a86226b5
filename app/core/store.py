"""
Persistent store access.

Provides one generic repository per record kind (User, Product, Order,
Coupon) over SQLAlchemy 2.0 async sessions.

Design Notes
------------
- Every repository call opens its own AsyncSession. An AsyncSession must not
  be shared between concurrently running tasks, and the stats composer fans
  out independent queries with asyncio.gather.
- Writes commit before returning, so callers can fire cache invalidation
  right after a call completes.
- SQLAlchemy failures surface as StoreError (IntegrityError as
  ValidationError); they are never retried here.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Generic, Optional, Sequence, Type, TypeVar

from sqlalchemy import func, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.exceptions import NotFoundError, StoreError, ValidationError
from app.models.db.Coupon import Coupon
from app.models.db.Order import Order
from app.models.db.Product import Product
from app.models.db.User import User

logger = logging.getLogger(__name__)

T = TypeVar("T")


@asynccontextmanager
async def guarded(
    sessionmaker: async_sessionmaker[AsyncSession], write: bool = False
) -> AsyncIterator[AsyncSession]:
    """Open a session and translate SQLAlchemy errors into the app taxonomy."""
    try:
        async with sessionmaker() as session:
            if write:
                async with session.begin():
                    yield session
            else:
                yield session
    except IntegrityError as e:
        logger.warning("integrity error: %s", e.orig)
        raise ValidationError("Record conflicts with an existing one") from e
    except SQLAlchemyError as e:
        logger.error("store error: %s", e)
        raise StoreError(str(e)) from e


class Repository(Generic[T]):
    """CRUD, counting and distinct-value queries for one mapped class."""

    def __init__(
        self, model: Type[T], sessionmaker: async_sessionmaker[AsyncSession]
    ) -> None:
        self.model = model
        self.sessionmaker = sessionmaker
        self.name = model.__name__

    async def find(
        self,
        *conditions: Any,
        order_by: Any = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> list[T]:
        stmt = select(self.model).where(*conditions)
        if order_by is not None:
            stmt = stmt.order_by(order_by)
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)

        async with guarded(self.sessionmaker) as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def get(self, id_value: str) -> Optional[T]:
        async with guarded(self.sessionmaker) as session:
            return await session.get(self.model, id_value)

    async def get_or_404(self, id_value: str) -> T:
        instance = await self.get(id_value)
        if instance is None:
            raise NotFoundError(f"{self.name} not found")
        return instance

    async def count(self, *conditions: Any) -> int:
        stmt = select(func.count()).select_from(self.model).where(*conditions)
        async with guarded(self.sessionmaker) as session:
            result = await session.execute(stmt)
            return int(result.scalar_one())

    async def total(self, column: Any, *conditions: Any) -> float:
        """SUM(column) over matching rows, 0 when nothing matches."""
        stmt = select(func.coalesce(func.sum(column), 0)).where(*conditions)
        async with guarded(self.sessionmaker) as session:
            result = await session.execute(stmt)
            return float(result.scalar_one())

    async def distinct(self, column: Any) -> list[Any]:
        stmt = select(column).distinct().order_by(column)
        async with guarded(self.sessionmaker) as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def count_by(self, column: Any, *conditions: Any) -> dict[Any, int]:
        """Row count per distinct value of `column`."""
        stmt = (
            select(column, func.count())
            .select_from(self.model)
            .where(*conditions)
            .group_by(column)
            .order_by(column)
        )
        async with guarded(self.sessionmaker) as session:
            result = await session.execute(stmt)
            return {row[0]: int(row[1]) for row in result.all()}

    async def create(self, **values: Any) -> T:
        instance = self.model(**values)
        async with guarded(self.sessionmaker, write=True) as session:
            session.add(instance)
        logger.debug("created %s %s", self.name, getattr(instance, "id", None))
        return instance

    async def update(self, id_value: str, **values: Any) -> T:
        async with guarded(self.sessionmaker, write=True) as session:
            instance = await session.get(self.model, id_value)
            if instance is None:
                raise NotFoundError(f"{self.name} not found")
            for field_name, value in values.items():
                setattr(instance, field_name, value)
        return instance

    async def delete(self, id_value: str) -> T:
        async with guarded(self.sessionmaker, write=True) as session:
            instance = await session.get(self.model, id_value)
            if instance is None:
                raise NotFoundError(f"{self.name} not found")
            await session.delete(instance)
        logger.debug("deleted %s %s", self.name, id_value)
        return instance


class Store:
    """Entry point to the four repositories, sharing one sessionmaker."""

    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]) -> None:
        self.sessionmaker = sessionmaker
        self.users: Repository[User] = Repository(User, sessionmaker)
        self.products: Repository[Product] = Repository(Product, sessionmaker)
        self.orders: Repository[Order] = Repository(Order, sessionmaker)
        self.coupons: Repository[Coupon] = Repository(Coupon, sessionmaker)

    def transaction(self):
        """Session with an open transaction, committed on clean exit."""
        return guarded(self.sessionmaker, write=True)

    async def ping(self) -> None:
        async with guarded(self.sessionmaker) as session:
            await session.execute(text("SELECT 1"))

    async def find_orders_with_user_names(
        self, *conditions: Any, order_by: Sequence[Any] = ()
    ) -> list[tuple[Order, Optional[str]]]:
        """Orders joined with the ordering user's name (left outer)."""
        stmt = (
            select(Order, User.name)
            .outerjoin(User, Order.user_id == User.id)
            .where(*conditions)
            .order_by(*order_by)
        )
        async with guarded(self.sessionmaker) as session:
            result = await session.execute(stmt)
            return [(row[0], row[1]) for row in result.all()]
