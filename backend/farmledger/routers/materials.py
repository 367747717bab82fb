"""
Materials Router — Thin Controller
"""
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from farmledger.core.access import owned_warehouse_ids
from farmledger.database import get_db
from farmledger.dependencies import get_current_user, require_roles, require_warehouse_access
from farmledger.models.user import User
from farmledger.schemas.common import ActionResult
from farmledger.schemas.material import (
    AggregatedMaterial,
    InventoryMovementResponse,
    InventorySummary,
    MaterialBalance,
    MaterialCreate,
    MaterialResponse,
    MaterialUpdate,
)
from farmledger.services.material_service import MaterialService
from farmledger.services.report_service import ReportService

router = APIRouter(prefix="/materials", tags=["Materials"])

ADMIN_ONLY = ["admin"]
READ_ROLES = ["admin", "sub_admin"]


def get_material_service(db: Session = Depends(get_db)) -> MaterialService:
    return MaterialService(db)


def get_report_service(db: Session = Depends(get_db)) -> ReportService:
    return ReportService(db)


@router.get("", response_model=ActionResult[List[MaterialResponse]])
def list_materials(
    warehouse_id: Optional[int] = None,
    service: MaterialService = Depends(get_material_service),
    current_user: User = Depends(get_current_user),
):
    materials = service.list_materials(current_user, warehouse_id=warehouse_id)
    return ActionResult.ok([MaterialResponse.model_validate(m) for m in materials])


@router.get("/summary", response_model=ActionResult[InventorySummary])
def inventory_summary(
    service: ReportService = Depends(get_report_service),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ActionResult.ok(service.inventory_summary(warehouse_ids=owned_warehouse_ids(db, current_user)))


@router.get("/aggregated", response_model=ActionResult[List[AggregatedMaterial]])
def aggregated_materials(
    service: ReportService = Depends(get_report_service),
    _: User = Depends(require_roles(READ_ROLES)),
):
    return ActionResult.ok(service.aggregated_materials())


@router.get("/balance", response_model=ActionResult[MaterialBalance])
def material_balance(
    warehouse_id: int,
    material_name_id: Optional[int] = None,
    medicine_id: Optional[int] = None,
    service: MaterialService = Depends(get_material_service),
    _: User = Depends(require_warehouse_access()),
):
    return ActionResult.ok(
        service.get_balance(warehouse_id, material_name_id=material_name_id, medicine_id=medicine_id)
    )


@router.get("/{material_id}", response_model=ActionResult[MaterialResponse])
def get_material(
    material_id: int,
    service: MaterialService = Depends(get_material_service),
    _: User = Depends(require_roles(READ_ROLES)),
):
    return ActionResult.ok(MaterialResponse.model_validate(service.get_material(material_id)))


@router.get("/{material_id}/movements", response_model=ActionResult[List[InventoryMovementResponse]])
def material_movements(
    material_id: int,
    service: MaterialService = Depends(get_material_service),
    _: User = Depends(require_roles(READ_ROLES)),
):
    movements = service.list_movements(material_id)
    return ActionResult.ok([InventoryMovementResponse.model_validate(m) for m in movements])


@router.post("", response_model=ActionResult[MaterialResponse], status_code=201)
def create_material(
    data: MaterialCreate,
    service: MaterialService = Depends(get_material_service),
    _: User = Depends(require_roles(ADMIN_ONLY)),
):
    return ActionResult.ok(MaterialResponse.model_validate(service.create_material(data)))


@router.put("/{material_id}", response_model=ActionResult[MaterialResponse])
def update_material(
    material_id: int,
    data: MaterialUpdate,
    service: MaterialService = Depends(get_material_service),
    _: User = Depends(require_roles(ADMIN_ONLY)),
):
    return ActionResult.ok(MaterialResponse.model_validate(service.update_material(material_id, data)))


@router.delete("/{material_id}", response_model=ActionResult[None])
def delete_material(
    material_id: int,
    service: MaterialService = Depends(get_material_service),
    _: User = Depends(require_roles(ADMIN_ONLY)),
):
    service.delete_material(material_id)
    return ActionResult.ok()
