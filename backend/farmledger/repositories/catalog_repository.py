from typing import List, Optional, Type

from sqlalchemy.orm import Session

from farmledger.models.catalog import Client, ExpenseType, MaterialName, MeasurementUnit, Medicine
from farmledger.repositories.base import BaseRepository, ModelType


class NamedEntityRepository(BaseRepository[ModelType]):
    """Catalog tables are looked up and kept unique by one name column."""

    name_field = "name"

    def __init__(self, model: Type[ModelType], db: Session):
        super().__init__(model, db)

    @property
    def _name_column(self):
        return getattr(self.model, self.name_field)

    def get_by_name(self, name: str) -> Optional[ModelType]:
        return self.db.query(self.model).filter(self._name_column == name).first()

    def list_filtered(self, search: Optional[str] = None, **filters) -> List[ModelType]:
        q = self.db.query(self.model)
        if search:
            q = q.filter(self._name_column.ilike(f"%{search}%"))
        for field, value in filters.items():
            if value is not None:
                q = q.filter(getattr(self.model, field) == value)
        return q.order_by(self._name_column).all()


class MeasurementUnitRepository(NamedEntityRepository[MeasurementUnit]):
    name_field = "unit_name"

    def __init__(self, db: Session):
        super().__init__(MeasurementUnit, db)


class MaterialNameRepository(NamedEntityRepository[MaterialName]):
    name_field = "material_name"

    def __init__(self, db: Session):
        super().__init__(MaterialName, db)


class MedicineRepository(NamedEntityRepository[Medicine]):
    def __init__(self, db: Session):
        super().__init__(Medicine, db)


class ClientRepository(NamedEntityRepository[Client]):
    def __init__(self, db: Session):
        super().__init__(Client, db)


class ExpenseTypeRepository(NamedEntityRepository[ExpenseType]):
    def __init__(self, db: Session):
        super().__init__(ExpenseType, db)
