"""
SQLAlchemy implementation of the Base Repository.
"""

from typing import Any, Generic, Optional, Type, TypeVar

from sqlalchemy.orm import Session
from app.domain.repositories.base import BaseRepository
from app.infrastructure.database import Base, begin_snapshot

ModelType = TypeVar("ModelType", bound=Base)


def contains(column, value: str):
    """Substring match that treats % and _ in the value literally."""
    return column.contains(value, autoescape=True)


class SQLAlchemyRepository(BaseRepository[ModelType], Generic[ModelType]):
    """Generic repository implementation for SQLAlchemy models."""

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    def get_by_id(self, id: str) -> Optional[ModelType]:
        return self.db.get(self.model, id)

    def create(self, obj_in: Any, commit: bool = True) -> ModelType:
        # obj_in is a dict or pydantic model
        if hasattr(obj_in, "model_dump"):
            obj_data = obj_in.model_dump(exclude_unset=True)
        else:
            obj_data = obj_in

        db_obj = self.model(**obj_data)
        self.db.add(db_obj)
        self._finish(db_obj, commit)
        return db_obj

    def update(self, db_obj: ModelType, obj_in: Any, commit: bool = True) -> ModelType:
        if hasattr(obj_in, "model_dump"):
            update_data = obj_in.model_dump(exclude_unset=True)
        else:
            update_data = obj_in

        for field, value in update_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        self.db.add(db_obj)
        self._finish(db_obj, commit)
        return db_obj

    def delete(self, id: str, commit: bool = True) -> Optional[ModelType]:
        obj = self.db.get(self.model, id)
        if obj:
            self.db.delete(obj)
            if commit:
                self.db.commit()
            else:
                self.db.flush()
        return obj

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()

    def _finish(self, db_obj: ModelType, commit: bool) -> None:
        if commit:
            self.db.commit()
            self.db.refresh(db_obj)
        else:
            self.db.flush()

    def _begin_snapshot(self) -> None:
        """Pin a fresh transaction to one snapshot so count and page agree.

        Callers commit pending writes first.
        """
        begin_snapshot(self.db)
