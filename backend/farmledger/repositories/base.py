"""
Generic repository over one mapped class.

Writes commit by default. Multi-step units of work pass ``commit=False`` and
commit (or roll back) once in the service.
"""
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy.orm import Session

from farmledger.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    def __init__(self, model: Type[ModelType], db: Session):
        self.model = model
        self.db = db

    def get_by_id(self, entity_id: int) -> Optional[ModelType]:
        return self.db.get(self.model, entity_id)

    def get_by_ids(self, ids: List[int]) -> List[ModelType]:
        if not ids:
            return []
        return self.db.query(self.model).filter(self.model.id.in_(ids)).all()

    def get_all(self) -> List[ModelType]:
        return self.db.query(self.model).order_by(self.model.id).all()

    def count(self) -> int:
        return self.db.query(self.model).count()

    def create(self, obj: ModelType, commit: bool = True) -> ModelType:
        self.db.add(obj)
        self._finish(obj, commit)
        return obj

    def update(self, obj: ModelType, data: Dict[str, Any], commit: bool = True) -> ModelType:
        for field, value in data.items():
            setattr(obj, field, value)
        self._finish(obj, commit)
        return obj

    def delete(self, obj: ModelType, commit: bool = True) -> None:
        self.db.delete(obj)
        if commit:
            self.db.commit()
        else:
            self.db.flush()

    def _finish(self, obj: ModelType, commit: bool) -> None:
        if commit:
            self.db.commit()
            self.db.refresh(obj)
        else:
            self.db.flush()
