"""
Catalog Router — units, material names, medicines, clients, expense types.

The five catalogs share one set of routes, registered once per catalog.
"""
from typing import List, Optional, Type

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from farmledger.database import get_db
from farmledger.dependencies import get_current_user, require_roles
from farmledger.models.user import User
from farmledger.schemas.catalog import (
    ClientCreate,
    ClientResponse,
    ClientUpdate,
    ExpenseTypeCreate,
    ExpenseTypeResponse,
    MaterialNameCreate,
    MaterialNameResponse,
    MedicineCreate,
    MedicineResponse,
    MedicineUpdate,
    UnitCreate,
    UnitResponse,
)
from farmledger.schemas.common import ActionResult
from farmledger.services.catalog_service import CatalogService

router = APIRouter(tags=["Catalog"])

ADMIN_ONLY = ["admin"]


def _register(
    catalog: str,
    create_schema: Type[BaseModel],
    update_schema: Type[BaseModel],
    response_schema: Type[BaseModel],
) -> None:
    def get_service(db: Session = Depends(get_db)) -> CatalogService:
        return CatalogService(db, catalog)

    @router.get(f"/{catalog}", response_model=ActionResult[List[response_schema]], name=f"list_{catalog}")
    def list_entries(
        search: Optional[str] = None,
        service: CatalogService = Depends(get_service),
        _: User = Depends(get_current_user),
    ):
        return ActionResult.ok([response_schema.model_validate(e) for e in service.list(search=search)])

    @router.get(f"/{catalog}/{{entity_id}}", response_model=ActionResult[response_schema], name=f"get_{catalog}")
    def get_entry(
        entity_id: int,
        service: CatalogService = Depends(get_service),
        _: User = Depends(get_current_user),
    ):
        return ActionResult.ok(response_schema.model_validate(service.get(entity_id)))

    @router.post(
        f"/{catalog}", response_model=ActionResult[response_schema], status_code=201, name=f"create_{catalog}"
    )
    def create_entry(
        data: create_schema,
        service: CatalogService = Depends(get_service),
        _: User = Depends(require_roles(ADMIN_ONLY)),
    ):
        return ActionResult.ok(response_schema.model_validate(service.create(data)))

    @router.put(f"/{catalog}/{{entity_id}}", response_model=ActionResult[response_schema], name=f"update_{catalog}")
    def update_entry(
        entity_id: int,
        data: update_schema,
        service: CatalogService = Depends(get_service),
        _: User = Depends(require_roles(ADMIN_ONLY)),
    ):
        return ActionResult.ok(response_schema.model_validate(service.update(entity_id, data)))

    @router.delete(f"/{catalog}/{{entity_id}}", response_model=ActionResult[None], name=f"delete_{catalog}")
    def delete_entry(
        entity_id: int,
        service: CatalogService = Depends(get_service),
        _: User = Depends(require_roles(ADMIN_ONLY)),
    ):
        service.delete(entity_id)
        return ActionResult.ok()


_register("units", UnitCreate, UnitCreate, UnitResponse)
_register("material-names", MaterialNameCreate, MaterialNameCreate, MaterialNameResponse)
_register("medicines", MedicineCreate, MedicineUpdate, MedicineResponse)
_register("clients", ClientCreate, ClientUpdate, ClientResponse)
_register("expense-types", ExpenseTypeCreate, ExpenseTypeCreate, ExpenseTypeResponse)
