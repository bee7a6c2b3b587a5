"""
Clientes API — Cliente Store (Repository)
===========================================

What:  The persistence collaborator for Cliente records.
Why:   ClienteService talks to an interface, not to SQLAlchemy. Tests can
       substitute an in-memory store and the backend can change without
       touching the service.
How:   `ClienteStore` is the abstract contract; `SqlAlchemyClienteStore`
       implements it over an AsyncSession.

Error contract:
    Implementations let data-access exceptions propagate (for SQLAlchemy,
    `SQLAlchemyError` and subclasses). The service decides which
    operation-specific message the client sees.

Transactions:
    save() and delete() commit immediately; each call is its own unit of
    work. A failed commit is rolled back before the exception propagates.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

from sqlalchemy import asc, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.cliente import Cliente

logger = logging.getLogger(__name__)

# JSON field name → mapped column, for the paginated endpoint's `sort` param
SORTABLE_FIELDS: Dict[str, object] = {
    "id": Cliente.id,
    "nombre": Cliente.nombre,
    "apellido": Cliente.apellido,
    "email": Cliente.email,
    "createdAt": Cliente.created_at,
    "imagen": Cliente.imagen,
}


class ClienteStore(ABC):
    """
    Abstract interface for Cliente persistence.

    Contract:
        - find_all() returns every record ordered by id
        - find_page() returns one page plus the total record count
        - find_by_id() returns None for unknown ids (never raises for absence)
        - save() inserts or updates, assigns the id, and persists
        - delete() removes the record
    """

    @abstractmethod
    async def find_all(self) -> List[Cliente]:
        ...

    @abstractmethod
    async def find_page(
        self,
        page: int,
        limit: int,
        sort_field: str,
        descending: bool,
    ) -> Tuple[List[Cliente], int]:
        """
        Args:
            page: Zero-based page index
            limit: Page size (>= 1)
            sort_field: Key of SORTABLE_FIELDS
            descending: Sort direction

        Returns:
            (rows of the requested page, total number of records)
        """
        ...

    @abstractmethod
    async def find_by_id(self, cliente_id: int) -> Optional[Cliente]:
        ...

    @abstractmethod
    async def save(self, cliente: Cliente) -> Cliente:
        ...

    @abstractmethod
    async def delete(self, cliente: Cliente) -> None:
        ...


class SqlAlchemyClienteStore(ClienteStore):
    """ClienteStore backed by a SQLAlchemy AsyncSession (one per request)."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_all(self) -> List[Cliente]:
        result = await self.session.execute(select(Cliente).order_by(asc(Cliente.id)))
        return list(result.scalars().all())

    async def find_page(
        self,
        page: int,
        limit: int,
        sort_field: str,
        descending: bool,
    ) -> Tuple[List[Cliente], int]:
        column = SORTABLE_FIELDS[sort_field]
        order = desc(column) if descending else asc(column)

        query = select(Cliente).order_by(order).offset(page * limit).limit(limit)
        result = await self.session.execute(query)
        rows = list(result.scalars().all())

        count_result = await self.session.execute(select(func.count(Cliente.id)))
        total = count_result.scalar() or 0

        return rows, total

    async def find_by_id(self, cliente_id: int) -> Optional[Cliente]:
        return await self.session.get(Cliente, cliente_id)

    async def save(self, cliente: Cliente) -> Cliente:
        self.session.add(cliente)
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.debug("Saved %r", cliente)
        return cliente

    async def delete(self, cliente: Cliente) -> None:
        await self.session.delete(cliente)
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        logger.debug("Deleted cliente %s", cliente.id)
