"""
Farm Service — farms and their single warehouse.
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from farmledger.core.exceptions import (
    DuplicateEntityException,
    EntityNotFoundException,
    ValidationException,
)
from farmledger.models.farm import Farm, Warehouse
from farmledger.models.user import ROLE_FARMER
from farmledger.repositories.farm_repository import FarmRepository, UserRepository, WarehouseRepository
from farmledger.schemas.farm import FarmCreate, FarmUpdate, WarehouseCreate, WarehouseUpdate
from farmledger.services.unit_of_work import unit_of_work

logger = logging.getLogger(__name__)


class FarmService:

    def __init__(self, db: Session):
        self._db = db
        self._repo = FarmRepository(db)
        self._warehouse_repo = WarehouseRepository(db)
        self._user_repo = UserRepository(db)

    # ── Farms ────────────────────────────────────────────────────────────────

    def list_farms(self, user_id: Optional[int] = None, is_active: Optional[bool] = None) -> List[Farm]:
        return self._repo.list_filtered(user_id=user_id, is_active=is_active)

    def get_farm(self, farm_id: int) -> Farm:
        farm = self._repo.get_by_id(farm_id)
        if not farm:
            raise EntityNotFoundException("Farm", farm_id)
        return farm

    def create_farm(self, data: FarmCreate) -> Farm:
        if self._repo.get_by_name(data.name):
            raise DuplicateEntityException(f"Farm '{data.name}' already exists")
        if data.user_id is not None:
            self._require_farmer(data.user_id)
        with unit_of_work(self._db, "create farm"):
            farm = self._repo.create(Farm(**data.model_dump()), commit=False)
        logger.info("Farm created", extra={"farm_id": farm.id, "user_id": farm.user_id})
        return farm

    def update_farm(self, farm_id: int, data: FarmUpdate) -> Farm:
        farm = self.get_farm(farm_id)
        updates = data.model_dump(exclude_unset=True)
        if updates.get("name"):
            existing = self._repo.get_by_name(updates["name"])
            if existing and existing.id != farm.id:
                raise DuplicateEntityException(f"Farm '{updates['name']}' already exists")
        if updates.get("user_id") is not None:
            self._require_farmer(updates["user_id"])
        with unit_of_work(self._db, "update farm"):
            self._repo.update(farm, updates, commit=False)
        return farm

    def delete_farm(self, farm_id: int) -> None:
        farm = self.get_farm(farm_id)
        with unit_of_work(self._db, "delete farm"):
            self._repo.delete(farm, commit=False)

    def farms_without_warehouse(self) -> List[Farm]:
        return self._repo.list_without_warehouse()

    # ── Warehouses ───────────────────────────────────────────────────────────

    def list_warehouses(self, farm_id: Optional[int] = None, owner_id: Optional[int] = None) -> List[Warehouse]:
        return self._warehouse_repo.list_filtered(farm_id=farm_id, owner_id=owner_id)

    def get_warehouse(self, warehouse_id: int) -> Warehouse:
        warehouse = self._warehouse_repo.get_by_id(warehouse_id)
        if not warehouse:
            raise EntityNotFoundException("Warehouse", warehouse_id)
        return warehouse

    def create_warehouse(self, data: WarehouseCreate) -> Warehouse:
        self.get_farm(data.farm_id)
        if self._warehouse_repo.get_by_farm(data.farm_id):
            raise DuplicateEntityException("This farm already has a warehouse")
        with unit_of_work(self._db, "create warehouse"):
            warehouse = self._warehouse_repo.create(Warehouse(**data.model_dump()), commit=False)
        logger.info("Warehouse created", extra={"warehouse_id": warehouse.id, "farm_id": warehouse.farm_id})
        return warehouse

    def update_warehouse(self, warehouse_id: int, data: WarehouseUpdate) -> Warehouse:
        warehouse = self.get_warehouse(warehouse_id)
        updates = data.model_dump(exclude_unset=True, exclude_none=True)
        farm_id = updates.get("farm_id")
        if farm_id is not None and farm_id != warehouse.farm_id:
            self.get_farm(farm_id)
            if self._warehouse_repo.get_by_farm(farm_id):
                raise DuplicateEntityException("This farm already has a warehouse")
        with unit_of_work(self._db, "update warehouse"):
            self._warehouse_repo.update(warehouse, updates, commit=False)
        return warehouse

    def delete_warehouse(self, warehouse_id: int) -> None:
        warehouse = self.get_warehouse(warehouse_id)
        with unit_of_work(self._db, "delete warehouse"):
            self._warehouse_repo.delete(warehouse, commit=False)

    def _require_farmer(self, user_id: int) -> None:
        user = self._user_repo.get_by_id(user_id)
        if not user:
            raise EntityNotFoundException("User", user_id)
        if user.role != ROLE_FARMER:
            raise ValidationException("Farms can only be assigned to farmer accounts")
