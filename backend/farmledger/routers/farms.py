"""
Farms & Warehouses Router — Thin Controller
"""
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from farmledger.database import get_db
from farmledger.dependencies import get_current_user, require_roles
from farmledger.models.user import ROLE_FARMER, User
from farmledger.schemas.common import ActionResult
from farmledger.schemas.farm import (
    FarmCreate,
    FarmResponse,
    FarmUpdate,
    WarehouseCreate,
    WarehouseResponse,
    WarehouseUpdate,
)
from farmledger.services.farm_service import FarmService

router = APIRouter(prefix="/farms", tags=["Farms"])
warehouse_router = APIRouter(prefix="/warehouses", tags=["Warehouses"])

ADMIN_ONLY = ["admin"]
READ_ROLES = ["admin", "sub_admin"]


def get_farm_service(db: Session = Depends(get_db)) -> FarmService:
    return FarmService(db)


@router.get("", response_model=ActionResult[List[FarmResponse]])
def list_farms(
    user_id: Optional[int] = None,
    is_active: Optional[bool] = None,
    service: FarmService = Depends(get_farm_service),
    _: User = Depends(require_roles(READ_ROLES)),
):
    farms = service.list_farms(user_id=user_id, is_active=is_active)
    return ActionResult.ok([FarmResponse.model_validate(f) for f in farms])


@router.get("/without-warehouse", response_model=ActionResult[List[FarmResponse]])
def farms_without_warehouse(
    service: FarmService = Depends(get_farm_service),
    _: User = Depends(require_roles(ADMIN_ONLY)),
):
    return ActionResult.ok([FarmResponse.model_validate(f) for f in service.farms_without_warehouse()])


@router.get("/{farm_id}", response_model=ActionResult[FarmResponse])
def get_farm(
    farm_id: int,
    service: FarmService = Depends(get_farm_service),
    _: User = Depends(require_roles(READ_ROLES)),
):
    return ActionResult.ok(FarmResponse.model_validate(service.get_farm(farm_id)))


@router.post("", response_model=ActionResult[FarmResponse], status_code=201)
def create_farm(
    data: FarmCreate,
    service: FarmService = Depends(get_farm_service),
    _: User = Depends(require_roles(ADMIN_ONLY)),
):
    return ActionResult.ok(FarmResponse.model_validate(service.create_farm(data)))


@router.put("/{farm_id}", response_model=ActionResult[FarmResponse])
def update_farm(
    farm_id: int,
    data: FarmUpdate,
    service: FarmService = Depends(get_farm_service),
    _: User = Depends(require_roles(ADMIN_ONLY)),
):
    return ActionResult.ok(FarmResponse.model_validate(service.update_farm(farm_id, data)))


@router.delete("/{farm_id}", response_model=ActionResult[None])
def delete_farm(
    farm_id: int,
    service: FarmService = Depends(get_farm_service),
    _: User = Depends(require_roles(ADMIN_ONLY)),
):
    service.delete_farm(farm_id)
    return ActionResult.ok()


# ── Warehouses ────────────────────────────────────────────────────────────────

@warehouse_router.get("", response_model=ActionResult[List[WarehouseResponse]])
def list_warehouses(
    farm_id: Optional[int] = None,
    service: FarmService = Depends(get_farm_service),
    current_user: User = Depends(get_current_user),
):
    owner_id = current_user.id if current_user.role == ROLE_FARMER else None
    warehouses = service.list_warehouses(farm_id=farm_id, owner_id=owner_id)
    return ActionResult.ok([WarehouseResponse.model_validate(w) for w in warehouses])


@warehouse_router.get("/mine", response_model=ActionResult[List[WarehouseResponse]])
def my_warehouses(
    service: FarmService = Depends(get_farm_service),
    current_user: User = Depends(require_roles([ROLE_FARMER])),
):
    warehouses = service.list_warehouses(owner_id=current_user.id)
    return ActionResult.ok([WarehouseResponse.model_validate(w) for w in warehouses])


@warehouse_router.get("/{warehouse_id}", response_model=ActionResult[WarehouseResponse])
def get_warehouse(
    warehouse_id: int,
    service: FarmService = Depends(get_farm_service),
    _: User = Depends(require_roles(READ_ROLES)),
):
    return ActionResult.ok(WarehouseResponse.model_validate(service.get_warehouse(warehouse_id)))


@warehouse_router.post("", response_model=ActionResult[WarehouseResponse], status_code=201)
def create_warehouse(
    data: WarehouseCreate,
    service: FarmService = Depends(get_farm_service),
    _: User = Depends(require_roles(ADMIN_ONLY)),
):
    return ActionResult.ok(WarehouseResponse.model_validate(service.create_warehouse(data)))


@warehouse_router.put("/{warehouse_id}", response_model=ActionResult[WarehouseResponse])
def update_warehouse(
    warehouse_id: int,
    data: WarehouseUpdate,
    service: FarmService = Depends(get_farm_service),
    _: User = Depends(require_roles(ADMIN_ONLY)),
):
    return ActionResult.ok(WarehouseResponse.model_validate(service.update_warehouse(warehouse_id, data)))


@warehouse_router.delete("/{warehouse_id}", response_model=ActionResult[None])
def delete_warehouse(
    warehouse_id: int,
    service: FarmService = Depends(get_farm_service),
    _: User = Depends(require_roles(ADMIN_ONLY)),
):
    service.delete_warehouse(warehouse_id)
    return ActionResult.ok()
