"""
Repository abstract base class and generic implementation.
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, Iterable, List, Optional, Type, TypeVar
from loguru import logger
from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql.elements import ColumnElement
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

T = TypeVar("T", bound=SQLModel)

# session.info key holding the entity type names staged since the last commit/rollback
STAGED_TYPES_KEY = "staged_entity_types"


class IRepository(ABC, Generic[T]):
    """Repository interface; reads return lists, writes are staged on the shared session."""

    @abstractmethod
    async def find_all(self, track_changes: bool) -> List[T]:
        """Get all entities."""
        pass

    @abstractmethod
    async def find_by_condition(self, predicate: ColumnElement[bool], track_changes: bool) -> List[T]:
        """Get entities matching a SQL predicate."""
        pass

    @abstractmethod
    async def create(self, entity: T) -> T:
        """Stage an insert."""
        pass

    @abstractmethod
    async def update(self, entity: T) -> T:
        """Stage an update."""
        pass

    @abstractmethod
    async def delete(self, entity: T) -> None:
        """Stage a delete."""
        pass


class BaseRepository(IRepository[T]):
    """
    Generic SQLModel repository bound to one session.

    ``track_changes=False`` detaches the loaded rows from the session, so edits
    made to them are never flushed. Rows the session was already tracking
    before the read are left attached. Nothing here commits: staged writes
    become visible only through ``UnitOfWork.save()``. Failed reads are
    logged with the operation and entity type, then re-raised unchanged.
    """

    def __init__(self, session: AsyncSession, model: Type[T]):
        """Initialize repository with session and model."""
        self.session = session
        self.model = model

    def _mark_staged(self) -> None:
        self.session.info.setdefault(STAGED_TYPES_KEY, set()).add(self.model.__name__)

    async def _fetch(self, operation: str, statement, track_changes: bool) -> List[T]:
        tracked_before = None if track_changes else set(self.session.identity_map.keys())
        try:
            result = await self.session.exec(statement)
        except SQLAlchemyError as e:
            logger.bind(
                operation=operation,
                entity_types=[self.model.__name__],
                error_detail=str(e),
            ).error(f"Read failed for {self.model.__name__}: {type(e).__name__}")
            raise
        entities = list(result.all())
        if not track_changes:
            for entity in entities:
                if inspect(entity).identity_key not in tracked_before:
                    self.session.expunge(entity)
        return entities

    async def find_all(self, track_changes: bool, order_by: Iterable[Any] = ()) -> List[T]:
        """Get all entities, optionally ordered."""
        statement = select(self.model).order_by(*order_by)
        return await self._fetch("find_all", statement, track_changes)

    async def find_by_condition(
        self,
        predicate: ColumnElement[bool],
        track_changes: bool,
        order_by: Iterable[Any] = (),
    ) -> List[T]:
        """Get entities matching predicate, e.g. ``Company.country == "US"``."""
        statement = select(self.model).where(predicate).order_by(*order_by)
        return await self._fetch("find_by_condition", statement, track_changes)

    async def get_by_id(self, id: Any, track_changes: bool = False) -> Optional[T]:
        """Get entity by primary key, or None."""
        entities = await self.find_by_condition(self.model.id == id, track_changes)
        return entities[0] if entities else None

    async def create(self, entity: T) -> T:
        self._mark_staged()
        self.session.add(entity)
        return entity

    async def update(self, entity: T) -> T:
        """Stage an update; re-attaches rows read with track_changes=False."""
        self._mark_staged()
        self.session.add(entity)
        return entity

    async def delete(self, entity: T) -> None:
        self._mark_staged()
        await self.session.delete(entity)
