"""
Record Store

Thin create/read/update/delete contract over an AsyncSession, one instance per entity.
The store only flushes; the caller owns the transaction (commit/rollback).

Reads refresh rows already present in the identity map so that projections built
right after a mutation see current values.
"""

from decimal import Decimal
from functools import wraps
from typing import Any, Generic, Iterable, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from clinica.core.errors import NotFoundError, PersistenceError
from clinica.logging import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT")


def _guarded(operation: str):
    """Convert storage failures into PersistenceError, keeping the original as __cause__."""
    def decorator(func_):
        @wraps(func_)
        async def wrapper(self, *args, **kwargs):
            try:
                return await func_(self, *args, **kwargs)
            except SQLAlchemyError as e:
                logger.error(
                    "Record store failure",
                    model=self.model.__name__,
                    operation=operation,
                    error=type(e).__name__,
                )
                raise PersistenceError("Error al acceder a la base de datos", operation) from e
        return wrapper
    return decorator


class RecordStore(Generic[ModelT]):
    """
    CRUD access to one model.

    Usage:
        clients = RecordStore(db, Client)
        client = await clients.find_by_id(3)
        packages = await RecordStore(db, ClientPackage).find_many(
            ClientPackage.client_id == client.id,
            order_by=ClientPackage.start_date.desc(),
        )
    """

    def __init__(self, db: AsyncSession, model: Type[ModelT]):
        self.db = db
        self.model = model

    @property
    def resource(self) -> str:
        return getattr(self.model, "__resource_name__", self.model.__name__)

    @_guarded("create")
    async def create(self, **fields: Any) -> ModelT:
        instance = self.model(**fields)
        self.db.add(instance)
        await self.db.flush()
        return instance

    @_guarded("find_by_id")
    async def find_by_id(
        self,
        record_id: Any,
        options: Iterable = (),
        for_update: bool = False,
    ) -> Optional[ModelT]:
        query = select(self.model).where(self.model.id == record_id).options(*options)
        if for_update:
            query = query.with_for_update()
        result = await self.db.execute(query.execution_options(populate_existing=True))
        return result.scalar_one_or_none()

    async def get(self, record_id: Any, options: Iterable = (), for_update: bool = False) -> ModelT:
        """find_by_id that raises NotFoundError when absent."""
        instance = await self.find_by_id(record_id, options=options, for_update=for_update)
        if instance is None:
            raise NotFoundError(self.resource, record_id)
        return instance

    @_guarded("find_many")
    async def find_many(
        self,
        *criteria: Any,
        order_by: Any = None,
        options: Iterable = (),
        offset: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[ModelT]:
        query = select(self.model).where(*criteria).options(*options)
        if order_by is not None:
            if isinstance(order_by, Sequence):
                query = query.order_by(*order_by)
            else:
                query = query.order_by(order_by)
        if offset:
            query = query.offset(offset)
        if limit:
            query = query.limit(limit)
        result = await self.db.execute(query.execution_options(populate_existing=True))
        return list(result.scalars().all())

    @_guarded("update")
    async def update(self, record_id: Any, **fields: Any) -> ModelT:
        instance = await self.db.get(self.model, record_id)
        if instance is None:
            raise NotFoundError(self.resource, record_id)
        for field, value in fields.items():
            setattr(instance, field, value)
        await self.db.flush()
        return instance

    @_guarded("update_where")
    async def update_where(self, *criteria: Any, **fields: Any) -> int:
        result = await self.db.execute(
            update(self.model).where(*criteria).values(**fields)
        )
        return result.rowcount

    @_guarded("delete")
    async def delete(self, record_id: Any) -> None:
        result = await self.db.execute(delete(self.model).where(self.model.id == record_id))
        if result.rowcount == 0:
            raise NotFoundError(self.resource, record_id)

    @_guarded("delete_where")
    async def delete_where(self, *criteria: Any) -> int:
        result = await self.db.execute(delete(self.model).where(*criteria))
        return result.rowcount

    @_guarded("count")
    async def count(self, *criteria: Any) -> int:
        result = await self.db.execute(
            select(func.count(self.model.id)).where(*criteria)
        )
        return result.scalar() or 0

    @_guarded("sum")
    async def sum(self, column: Any, *criteria: Any) -> Decimal:
        result = await self.db.execute(select(func.sum(column)).where(*criteria))
        total = result.scalar()
        return Decimal(str(total)) if total is not None else Decimal("0")
