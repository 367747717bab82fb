"""
Material Service — inventory record registration, corrections and lookups.
"""
import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from farmledger.core.access import owned_warehouse_ids
from farmledger.core.exceptions import (
    DuplicateEntityException,
    EntityNotFoundException,
    ValidationException,
)
from farmledger.models.inventory_movement import InventoryMovement
from farmledger.models.material import Material
from farmledger.models.user import User
from farmledger.repositories.catalog_repository import (
    MaterialNameRepository,
    MeasurementUnitRepository,
    MedicineRepository,
)
from farmledger.repositories.farm_repository import WarehouseRepository
from farmledger.repositories.material_repository import InventoryMovementRepository, MaterialRepository
from farmledger.schemas.material import MaterialBalance, MaterialCreate, MaterialUpdate
from farmledger.services.unit_of_work import unit_of_work

logger = logging.getLogger(__name__)

COUNTER_FIELDS = ("opening_balance", "purchases", "sales", "consumption", "manufacturing")


def compute_balance(opening_balance, purchases, sales, consumption, manufacturing) -> Decimal:
    return (
        Decimal(opening_balance)
        + Decimal(purchases)
        + Decimal(manufacturing)
        - Decimal(sales)
        - Decimal(consumption)
    )


class MaterialService:

    def __init__(self, db: Session):
        self._db = db
        self._repo = MaterialRepository(db)
        self._movement_repo = InventoryMovementRepository(db)
        self._warehouse_repo = WarehouseRepository(db)
        self._material_name_repo = MaterialNameRepository(db)
        self._medicine_repo = MedicineRepository(db)
        self._unit_repo = MeasurementUnitRepository(db)

    def list_materials(self, user: User, warehouse_id: Optional[int] = None) -> List[Material]:
        allowed = owned_warehouse_ids(self._db, user)
        materials = self._repo.list_filtered(warehouse_id=warehouse_id)
        if allowed is None:
            return materials
        return [m for m in materials if m.warehouse_id in allowed]

    def get_material(self, material_id: int) -> Material:
        material = self._repo.get_by_id(material_id)
        if not material:
            raise EntityNotFoundException("Material", material_id)
        return material

    def create_material(self, data: MaterialCreate) -> Material:
        if data.opening_balance < 0:
            raise ValidationException("Opening balance cannot be negative")
        if not self._warehouse_repo.get_by_id(data.warehouse_id):
            raise EntityNotFoundException("Warehouse", data.warehouse_id)
        if data.material_name_id is not None and not self._material_name_repo.get_by_id(data.material_name_id):
            raise EntityNotFoundException("Material name", data.material_name_id)
        if data.medicine_id is not None and not self._medicine_repo.get_by_id(data.medicine_id):
            raise EntityNotFoundException("Medicine", data.medicine_id)
        if data.unit_id is not None and not self._unit_repo.get_by_id(data.unit_id):
            raise EntityNotFoundException("Unit", data.unit_id)
        if self._repo.get_for_item(data.warehouse_id, data.material_name_id, data.medicine_id):
            raise DuplicateEntityException("This material already exists in the warehouse")

        with unit_of_work(self._db, "create material"):
            material = self._repo.create(
                Material(
                    warehouse_id=data.warehouse_id,
                    material_name_id=data.material_name_id,
                    medicine_id=data.medicine_id,
                    unit_id=data.unit_id,
                    opening_balance=data.opening_balance,
                    purchases=Decimal("0"),
                    sales=Decimal("0"),
                    consumption=Decimal("0"),
                    manufacturing=Decimal("0"),
                    current_balance=data.opening_balance,
                ),
                commit=False,
            )
        logger.info(
            "Material registered",
            extra={"material_id": material.id, "warehouse_id": material.warehouse_id,
                   "opening_balance": material.opening_balance},
        )
        return material

    def update_material(self, material_id: int, data: MaterialUpdate) -> Material:
        """Manual correction of counters; ``current_balance`` is recomputed."""
        material = self.get_material(material_id)
        updates = data.model_dump(exclude_unset=True, exclude_none=True)
        for field in COUNTER_FIELDS:
            if field in updates and updates[field] < 0:
                raise ValidationException(f"{field} cannot be negative")
        if "unit_id" in updates and not self._unit_repo.get_by_id(updates["unit_id"]):
            raise EntityNotFoundException("Unit", updates["unit_id"])

        merged = {field: updates.get(field, getattr(material, field)) for field in COUNTER_FIELDS}
        balance = compute_balance(**merged)
        if balance < 0:
            raise ValidationException("Current balance cannot be negative")
        updates["current_balance"] = balance

        with unit_of_work(self._db, "update material"):
            self._repo.update(material, updates, commit=False)
        logger.info(
            "Material counters corrected",
            extra={"material_id": material_id, "current_balance": balance},
        )
        return material

    def delete_material(self, material_id: int) -> None:
        material = self.get_material(material_id)
        with unit_of_work(self._db, "delete material"):
            self._repo.delete(material, commit=False)

    def get_balance(
        self,
        warehouse_id: int,
        material_name_id: Optional[int] = None,
        medicine_id: Optional[int] = None,
    ) -> MaterialBalance:
        if material_name_id is None and medicine_id is None:
            raise ValidationException("Either material_name_id or medicine_id is required")
        material = self._repo.get_for_item(warehouse_id, material_name_id, medicine_id)
        if material is None:
            return MaterialBalance(balance=Decimal("0"), unit_name="")
        return MaterialBalance(
            balance=material.current_balance,
            unit_name=material.unit.unit_name if material.unit else "",
            unit_id=material.unit_id,
        )

    def list_movements(self, material_id: int) -> List[InventoryMovement]:
        self.get_material(material_id)
        return self._movement_repo.list_filtered(material_id=material_id)
