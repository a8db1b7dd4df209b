"""
Base service classes.

Architecture:
    Router (thin) -> Service (business logic) -> Model

Usage:
    class CategoryService(BaseCRUDService[Category, CategoryOutput]):
        def __init__(self, db: Session):
            super().__init__(db, Category, CategoryOutput, "Category")

        def _validate_create(self, data):
            ...
"""

from __future__ import annotations

from typing import Any, Generic, Sequence, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tableside_api.models import Base
from tableside_shared.config.constants import Limits
from tableside_shared.config.logging import get_logger
from tableside_shared.infrastructure.db import safe_commit
from tableside_shared.utils.exceptions import DatabaseError, NotFoundError

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=Base)
OutputT = TypeVar("OutputT", bound=BaseModel)


class BaseCRUDService(Generic[ModelT, OutputT]):
    """
    Base service for soft-deletable catalog entities.

    Subclasses override the ``_validate_*`` hooks for business rules and
    ``_before_delete`` to cascade to children.
    """

    def __init__(
        self,
        db: Session,
        model: Type[ModelT],
        output_schema: Type[OutputT],
        entity_name: str,
        *,
        not_found_code: str | None = None,
    ):
        self._db = db
        self._model = model
        self._output_schema = output_schema
        self._entity_name = entity_name
        self._not_found_code = not_found_code

    @property
    def db(self) -> Session:
        return self._db

    @property
    def entity_name(self) -> str:
        return self._entity_name

    # =========================================================================
    # Read Operations
    # =========================================================================

    def get_entity(self, entity_id: int) -> ModelT | None:
        """Get an active entity, or None."""
        return self._db.scalar(
            select(self._model).where(
                self._model.id == entity_id,
                self._model.is_active.is_(True),
            )
        )

    def get_or_404(self, entity_id: int) -> ModelT:
        entity = self.get_entity(entity_id)
        if entity is None:
            raise NotFoundError(self._entity_name, entity_id, code=self._not_found_code)
        return entity

    def get_by_id(self, entity_id: int) -> OutputT:
        return self.to_output(self.get_or_404(entity_id))

    def list_all(
        self,
        *,
        filters: Sequence[Any] = (),
        order_by: Sequence[Any] = (),
        limit: int = Limits.DEFAULT_PAGE_SIZE,
        offset: int = 0,
    ) -> list[OutputT]:
        query = select(self._model).where(self._model.is_active.is_(True), *filters)
        query = query.order_by(*order_by, self._model.id).limit(limit).offset(offset)
        return [self.to_output(e) for e in self._db.scalars(query).all()]

    # =========================================================================
    # Write Operations
    # =========================================================================

    def create(
        self,
        data: dict[str, Any],
        user_id: int | None = None,
        user_email: str | None = None,
    ) -> OutputT:
        """
        Create a new entity.

        Raises:
            ValidationError: If data is invalid.
            DatabaseError: If creation fails.
        """
        data = self._validate_create(dict(data))

        entity = self._model(**data)
        entity.set_created_by(user_id, user_email)
        self._db.add(entity)

        self._commit("create", entity_name=self._entity_name)
        self._db.refresh(entity)

        logger.info(f"{self._entity_name} created", entity_id=entity.id, user_id=user_id)
        return self.to_output(entity)

    def update(
        self,
        entity_id: int,
        data: dict[str, Any],
        user_id: int | None = None,
        user_email: str | None = None,
    ) -> OutputT:
        """
        Apply a partial update. Only keys present in ``data`` change.

        Raises:
            NotFoundError: If entity not found.
            ValidationError: If data is invalid.
            DatabaseError: If update fails.
        """
        entity = self.get_or_404(entity_id)
        data = self._validate_update(entity, dict(data))

        for field_name, value in data.items():
            setattr(entity, field_name, value)
        entity.set_updated_by(user_id, user_email)

        self._commit("update", entity_id=entity_id)
        self._db.refresh(entity)

        logger.info(
            f"{self._entity_name} updated",
            entity_id=entity_id,
            fields=sorted(data.keys()),
            user_id=user_id,
        )
        return self.to_output(entity)

    def delete(
        self,
        entity_id: int,
        user_id: int | None = None,
        user_email: str | None = None,
    ) -> None:
        """
        Soft delete an entity and whatever ``_before_delete`` cascades to.

        Raises:
            NotFoundError: If entity not found.
        """
        entity = self.get_or_404(entity_id)
        self._before_delete(entity, user_id, user_email)
        entity.soft_delete(user_id, user_email)

        self._commit("delete", entity_id=entity_id)
        logger.info(f"{self._entity_name} deleted", entity_id=entity_id, user_id=user_id)

    # =========================================================================
    # Transformation
    # =========================================================================

    def to_output(self, entity: ModelT) -> OutputT:
        return self._output_schema.model_validate(entity)

    # =========================================================================
    # Hooks (override in subclasses)
    # =========================================================================

    def _validate_create(self, data: dict[str, Any]) -> dict[str, Any]:
        return data

    def _validate_update(self, entity: ModelT, data: dict[str, Any]) -> dict[str, Any]:
        return data

    def _before_delete(self, entity: ModelT, user_id: int | None, user_email: str | None) -> None:
        pass

    # =========================================================================

    def _commit(self, operation: str, **log_context: Any) -> None:
        try:
            safe_commit(self._db)
        except SQLAlchemyError as e:
            logger.error(
                f"Failed to {operation} {self._entity_name}",
                error=str(e),
                **log_context,
            )
            raise DatabaseError(f"{operation} {self._entity_name.lower()}", e)
