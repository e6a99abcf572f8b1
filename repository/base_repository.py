from contextlib import AbstractContextManager
from datetime import datetime
from typing import Any, Callable, Dict, Generic, Optional, Type, TypeVar

from pydantic import BaseModel as PydanticModel
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlmodel import SQLModel

from core.exceptions import ValidationError

ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseRepository(Generic[ModelType]):
    def __init__(self, session_factory: Callable[..., AbstractContextManager[Session]], model: Type[ModelType]) -> None:
        self.session_factory = session_factory
        self.model = model

    def read_by_id(self, id: int) -> Optional[ModelType]:
        with self.session_factory() as session:
            return session.get(self.model, id)

    def create(self, schema: PydanticModel | Dict[str, Any]) -> ModelType:
        values = schema.model_dump(mode="json") if isinstance(schema, PydanticModel) else dict(schema)
        with self.session_factory() as session:
            query = self.model(**values)
            try:
                session.add(query)
                session.commit()
                session.refresh(query)
            except IntegrityError as e:
                raise ValidationError(detail=str(e.orig))
            return query

    def update(self, id: int, fields: PydanticModel | Dict[str, Any]) -> Optional[ModelType]:
        """Apply a partial update; returns None when the row no longer exists."""
        values = fields.model_dump(mode="json", exclude_unset=True) if isinstance(fields, PydanticModel) else dict(fields)
        with self.session_factory() as session:
            row = session.get(self.model, id, with_for_update=True)
            if row is None:
                return None
            for key, value in values.items():
                setattr(row, key, value)
            if hasattr(row, "updated_at"):
                row.updated_at = datetime.utcnow()
            session.add(row)
            session.commit()
            session.refresh(row)
            return row

    def update_attr(self, id: int, column: str, value: Any) -> Optional[ModelType]:
        return self.update(id, {column: value})

    def delete_by_id(self, id: int) -> bool:
        with self.session_factory() as session:
            row = session.get(self.model, id)
            if row is None:
                return False
            session.delete(row)
            session.commit()
            return True

