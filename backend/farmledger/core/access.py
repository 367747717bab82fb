"""
Warehouse scope rules shared by the request dependencies and the services.

Admins and sub-admins see every warehouse. A farmer only sees the warehouse
of a farm they own.
"""
from typing import List, Optional

from sqlalchemy.orm import Session

from farmledger.core.exceptions import EntityNotFoundException, PermissionDeniedException
from farmledger.models.user import ROLE_ADMIN, ROLE_FARMER, ROLE_SUB_ADMIN, User
from farmledger.repositories.farm_repository import WarehouseRepository

READ_ROLES = (ROLE_ADMIN, ROLE_SUB_ADMIN)


def is_admin(user: User) -> bool:
    return user.role == ROLE_ADMIN


def owned_warehouse_ids(db: Session, user: User) -> Optional[List[int]]:
    """None means unrestricted."""
    if user.role in READ_ROLES:
        return None
    return [w.id for w in WarehouseRepository(db).list_filtered(owner_id=user.id)]


def ensure_warehouse_access(db: Session, user: User, warehouse_id: int, write: bool = False) -> None:
    repo = WarehouseRepository(db)
    if repo.get_by_id(warehouse_id) is None:
        raise EntityNotFoundException("Warehouse", warehouse_id)
    if user.role == ROLE_ADMIN:
        return
    if user.role == ROLE_SUB_ADMIN:
        if write:
            raise PermissionDeniedException("Unauthorized - Admin access required")
        return
    if user.role == ROLE_FARMER and repo.owner_id_of(warehouse_id) == user.id:
        return
    raise PermissionDeniedException("Invalid warehouse - not assigned to your farm")
