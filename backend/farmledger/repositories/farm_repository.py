from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from farmledger.models.farm import Farm, Warehouse
from farmledger.models.user import User
from farmledger.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    def __init__(self, db: Session):
        super().__init__(User, db)

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()


class FarmRepository(BaseRepository[Farm]):
    def __init__(self, db: Session):
        super().__init__(Farm, db)

    def get_by_name(self, name: str) -> Optional[Farm]:
        return self.db.query(Farm).filter(Farm.name == name).first()

    def list_filtered(self, user_id: Optional[int] = None, is_active: Optional[bool] = None) -> List[Farm]:
        q = self.db.query(Farm)
        if user_id is not None:
            q = q.filter(Farm.user_id == user_id)
        if is_active is not None:
            q = q.filter(Farm.is_active == is_active)
        return q.order_by(Farm.created_at.desc(), Farm.id.desc()).all()

    def list_without_warehouse(self) -> List[Farm]:
        return (
            self.db.query(Farm)
            .outerjoin(Warehouse, Warehouse.farm_id == Farm.id)
            .filter(Warehouse.id.is_(None))
            .order_by(Farm.name)
            .all()
        )


class WarehouseRepository(BaseRepository[Warehouse]):
    def __init__(self, db: Session):
        super().__init__(Warehouse, db)

    def get_by_farm(self, farm_id: int) -> Optional[Warehouse]:
        return self.db.query(Warehouse).filter(Warehouse.farm_id == farm_id).first()

    def list_filtered(self, farm_id: Optional[int] = None, owner_id: Optional[int] = None) -> List[Warehouse]:
        q = self.db.query(Warehouse).options(joinedload(Warehouse.farm))
        if farm_id is not None:
            q = q.filter(Warehouse.farm_id == farm_id)
        if owner_id is not None:
            q = q.join(Farm, Farm.id == Warehouse.farm_id).filter(Farm.user_id == owner_id)
        return q.order_by(Warehouse.created_at.desc(), Warehouse.id.desc()).all()

    def owner_id_of(self, warehouse_id: int) -> Optional[int]:
        row = (
            self.db.query(Farm.user_id)
            .join(Warehouse, Warehouse.farm_id == Farm.id)
            .filter(Warehouse.id == warehouse_id)
            .first()
        )
        return row[0] if row else None
