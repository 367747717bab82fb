from decimal import Decimal
from typing import List, Optional

from sqlalchemy import Numeric, func, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from farmledger.models.inventory_movement import InventoryMovement
from farmledger.models.material import Material
from farmledger.repositories.base import BaseRepository

# Counters that add to current_balance; the other two subtract from it.
INBOUND_COUNTERS = ("purchases", "manufacturing")
OUTBOUND_COUNTERS = ("sales", "consumption")


def _cents(expr):
    return func.round(expr, 2, type_=Numeric(12, 2))


class MaterialRepository(BaseRepository[Material]):
    def __init__(self, db: Session):
        super().__init__(Material, db)

    def _with_names(self):
        return self.db.query(Material).options(
            joinedload(Material.material_name),
            joinedload(Material.medicine),
            joinedload(Material.unit),
            joinedload(Material.warehouse),
        )

    def list_filtered(
        self,
        warehouse_id: Optional[int] = None,
        material_name_id: Optional[int] = None,
        medicine_id: Optional[int] = None,
    ) -> List[Material]:
        q = self._with_names()
        if warehouse_id is not None:
            q = q.filter(Material.warehouse_id == warehouse_id)
        if material_name_id is not None:
            q = q.filter(Material.material_name_id == material_name_id)
        if medicine_id is not None:
            q = q.filter(Material.medicine_id == medicine_id)
        return q.order_by(Material.current_balance.asc(), Material.id).all()

    def get_for_item(
        self,
        warehouse_id: int,
        material_name_id: Optional[int] = None,
        medicine_id: Optional[int] = None,
    ) -> Optional[Material]:
        q = self._with_names().filter(Material.warehouse_id == warehouse_id)
        if material_name_id is not None:
            q = q.filter(Material.material_name_id == material_name_id)
        else:
            q = q.filter(Material.medicine_id == medicine_id)
        return q.first()

    def get_or_create_for_item(
        self,
        warehouse_id: int,
        material_name_id: Optional[int] = None,
        medicine_id: Optional[int] = None,
        unit_id: Optional[int] = None,
    ) -> Material:
        existing = self.get_for_item(warehouse_id, material_name_id, medicine_id)
        if existing is not None:
            return existing
        record = Material(
            warehouse_id=warehouse_id,
            material_name_id=material_name_id,
            medicine_id=medicine_id,
            unit_id=unit_id,
            opening_balance=Decimal("0"),
            purchases=Decimal("0"),
            sales=Decimal("0"),
            consumption=Decimal("0"),
            manufacturing=Decimal("0"),
            current_balance=Decimal("0"),
        )
        try:
            with self.db.begin_nested():
                self.db.add(record)
        except IntegrityError:
            # Another request registered the same item first.
            existing = self.get_for_item(warehouse_id, material_name_id, medicine_id)
            if existing is None:
                raise
            return existing
        return record

    def adjust_counter(self, material_id: int, counter: str, delta: Decimal) -> Optional[Material]:
        """Atomically add ``delta`` to ``counter`` and move ``current_balance`` with it.

        The UPDATE only matches when neither the counter nor the balance would
        go below zero. Values and guards are rounded to cents inside the
        statement, since SQLite stores quantities as binary floats. Returns the
        refreshed record, or None when no row matched.
        """
        if counter not in INBOUND_COUNTERS + OUTBOUND_COUNTERS:
            raise ValueError(f"Unknown inventory counter: {counter}")
        column = getattr(Material, counter)
        balance_delta = delta if counter in INBOUND_COUNTERS else -delta

        stmt = update(Material).where(Material.id == material_id)
        if delta < 0:
            stmt = stmt.where(_cents(column) >= -delta)
        if balance_delta < 0:
            stmt = stmt.where(_cents(Material.current_balance) >= -balance_delta)
        stmt = stmt.values(
            {
                counter: _cents(column + delta),
                "current_balance": _cents(Material.current_balance + balance_delta),
                "updated_at": func.now(),
            }
        ).execution_options(synchronize_session=False)

        result = self.db.execute(stmt)
        if result.rowcount != 1:
            return None
        return self.db.get(Material, material_id, populate_existing=True)

    def count_warehouses(self) -> int:
        return self.db.query(func.count(func.distinct(Material.warehouse_id))).scalar() or 0


class InventoryMovementRepository(BaseRepository[InventoryMovement]):
    def __init__(self, db: Session):
        super().__init__(InventoryMovement, db)

    def list_filtered(
        self,
        material_id: Optional[int] = None,
        source_type: Optional[str] = None,
        source_id: Optional[int] = None,
    ) -> List[InventoryMovement]:
        q = self.db.query(InventoryMovement)
        if material_id is not None:
            q = q.filter(InventoryMovement.material_id == material_id)
        if source_type is not None:
            q = q.filter(InventoryMovement.source_type == source_type)
        if source_id is not None:
            q = q.filter(InventoryMovement.source_id == source_id)
        return q.order_by(InventoryMovement.id).all()
