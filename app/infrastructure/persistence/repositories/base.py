"""Base repository: generic get/create/delete and storage error translation."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.exceptions import StorageFailureException
from app.infrastructure.persistence.database import Base

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """Translate SQLAlchemy errors raised inside the block into StorageFailureException."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("Storage operation %s failed: %s", operation, exc.__class__.__name__)
        raise StorageFailureException(operation, exc.__class__.__name__) from exc


class BaseRepository(Generic[ModelType]):
    """Base repository with get_entity, add, save and delete_entity.

    Subclasses expose DTO-returning methods that implement the application
    ports; ORM instances never leave the repository.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_entity(self, entity_id: str) -> ModelType | None:
        """Return a single record by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def add(self, obj: ModelType) -> ModelType:
        """Persist a new record and load server-generated columns."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def save(self, obj: ModelType) -> ModelType:
        """Flush pending changes on an attached record and reload it."""
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def delete_entity(self, obj: ModelType) -> None:
        await self.db.delete(obj)
        await self.db.flush()
