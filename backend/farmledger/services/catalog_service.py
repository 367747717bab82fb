"""
Catalog Service — units, material names, medicines, clients and expense types.

Every catalog table is a list of uniquely named rows, so one service drives
all of them through ``NamedEntityRepository``.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel
from sqlalchemy.orm import Session

from farmledger.core.exceptions import DuplicateEntityException, EntityNotFoundException
from farmledger.repositories.catalog_repository import (
    ClientRepository,
    ExpenseTypeRepository,
    MaterialNameRepository,
    MeasurementUnitRepository,
    MedicineRepository,
    NamedEntityRepository,
)
from farmledger.services.unit_of_work import unit_of_work

CATALOGS = {
    "units": (MeasurementUnitRepository, "Unit"),
    "material-names": (MaterialNameRepository, "Material name"),
    "medicines": (MedicineRepository, "Medicine"),
    "clients": (ClientRepository, "Client"),
    "expense-types": (ExpenseTypeRepository, "Expense type"),
}


class CatalogService:

    def __init__(self, db: Session, catalog: str):
        if catalog not in CATALOGS:
            raise ValueError(f"Unknown catalog: {catalog}")
        repo_cls, label = CATALOGS[catalog]
        self._db = db
        self._repo: NamedEntityRepository = repo_cls(db)
        self._label = label

    def list(self, search: Optional[str] = None, **filters: Any) -> List[Any]:
        return self._repo.list_filtered(search=search, **filters)

    def get(self, entity_id: int) -> Any:
        entity = self._repo.get_by_id(entity_id)
        if not entity:
            raise EntityNotFoundException(self._label, entity_id)
        return entity

    def create(self, data: BaseModel) -> Any:
        values = data.model_dump()
        self._ensure_unique(values[self._repo.name_field])
        with unit_of_work(self._db, f"create {self._label.lower()}"):
            entity = self._repo.create(self._repo.model(**values), commit=False)
        return entity

    def update(self, entity_id: int, data: BaseModel) -> Any:
        entity = self.get(entity_id)
        updates: Dict[str, Any] = data.model_dump(exclude_unset=True)
        name = updates.get(self._repo.name_field)
        if name is not None:
            self._ensure_unique(name, exclude_id=entity.id)
        with unit_of_work(self._db, f"update {self._label.lower()}"):
            self._repo.update(entity, updates, commit=False)
        return entity

    def delete(self, entity_id: int) -> None:
        entity = self.get(entity_id)
        with unit_of_work(self._db, f"delete {self._label.lower()}"):
            self._repo.delete(entity, commit=False)

    def _ensure_unique(self, name: str, exclude_id: Optional[int] = None) -> None:
        existing = self._repo.get_by_name(name)
        if existing and existing.id != exclude_id:
            raise DuplicateEntityException(f"{self._label} '{name}' already exists")
