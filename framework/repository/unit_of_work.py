"""
Unit of Work: manages repositories and transaction boundaries.
"""

from typing import Dict, Type, TypeVar
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel.ext.asyncio.session import AsyncSession
from framework.exceptions.handler import PersistenceError
from framework.repository.base import STAGED_TYPES_KEY

R = TypeVar("R")


class UnitOfWork:
    """
    One session, the repositories built on it, and the single commit point.

    Instances are request-scoped. Repositories are constructed on first
    request through ``get_repository`` and reused for the rest of the
    instance's life.
    """

    def __init__(self, session: AsyncSession):
        if session is None:
            raise ValueError("Session must be provided.")

        self.session = session
        self._repositories: Dict[type, object] = {}

    def get_repository(self, repo_class: Type[R]) -> R:
        """Get or create a repository instance (cached)."""
        repository = self._repositories.get(repo_class)
        if repository is None:
            repository = repo_class(self.session)
            self._repositories[repo_class] = repository
        return repository

    def _staged_entity_types(self) -> tuple:
        # Repositories record what they staged; flushed rows no longer show up in new/dirty/deleted
        names = set(self.session.info.get(STAGED_TYPES_KEY, ()))
        staged = list(self.session.new) + list(self.session.dirty) + list(self.session.deleted)
        names.update(type(entity).__name__ for entity in staged)
        return tuple(sorted(names))

    def _clear_staged(self) -> None:
        self.session.info.pop(STAGED_TYPES_KEY, None)

    async def save(self) -> None:
        """Commit every staged change atomically; raise PersistenceError on failure."""
        entity_types = self._staged_entity_types()
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            error = PersistenceError("save", entity_types, detail=str(e))
            logger.bind(
                operation="save",
                entity_types=list(entity_types),
                error_detail=str(e),
            ).error(f"Commit failed for {', '.join(entity_types) or 'no staged entities'}: {type(e).__name__}")
            await self._rollback_after_failure(entity_types)
            raise error from e
        finally:
            self._clear_staged()

    async def _rollback_after_failure(self, entity_types: tuple) -> None:
        try:
            await self.session.rollback()
        except SQLAlchemyError as rollback_error:
            # The commit failure is the error callers act on
            logger.bind(
                operation="rollback",
                entity_types=list(entity_types),
                error_detail=str(rollback_error),
            ).warning(f"Rollback after failed commit also failed: {type(rollback_error).__name__}")

    async def rollback(self) -> None:
        """Discard all staged changes."""
        try:
            await self.session.rollback()
        finally:
            self._clear_staged()

    async def flush(self) -> None:
        """Flush session (e.g. to get auto-increment IDs)."""
        await self.session.flush()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            await self.rollback()
        else:
            await self.save()
