"""
Medicine Consumption Router — Thin Controller
"""
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from farmledger.database import get_db
from farmledger.dependencies import get_current_user, require_roles
from farmledger.models.user import User
from farmledger.schemas.common import ActionResult
from farmledger.schemas.medicine_consumption import (
    MedicineConsumptionCreate,
    MedicineConsumptionDetail,
    MedicineConsumptionExpenseCreate,
    MedicineConsumptionExpenseResponse,
    MedicineConsumptionItemCreate,
    MedicineConsumptionItemResponse,
    MedicineConsumptionResponse,
)
from farmledger.services.medicine_consumption_service import MedicineConsumptionService

router = APIRouter(prefix="/medicine-consumption", tags=["Medicine Consumption"])

PRODUCER_ROLES = ["admin", "farmer"]


def get_consumption_service(db: Session = Depends(get_db)) -> MedicineConsumptionService:
    return MedicineConsumptionService(db)


@router.get("", response_model=ActionResult[List[MedicineConsumptionResponse]])
def list_consumption_invoices(
    service: MedicineConsumptionService = Depends(get_consumption_service),
    current_user: User = Depends(get_current_user),
):
    invoices = service.list_invoices(current_user)
    return ActionResult.ok([MedicineConsumptionResponse.model_validate(i) for i in invoices])


@router.post("", response_model=ActionResult[MedicineConsumptionResponse], status_code=201)
def create_consumption_invoice(
    data: MedicineConsumptionCreate,
    service: MedicineConsumptionService = Depends(get_consumption_service),
    current_user: User = Depends(require_roles(PRODUCER_ROLES)),
):
    invoice = service.create_invoice(data, current_user)
    return ActionResult.ok(MedicineConsumptionResponse.model_validate(invoice))


@router.get("/{invoice_id}", response_model=ActionResult[MedicineConsumptionDetail])
def get_consumption_invoice(
    invoice_id: int,
    service: MedicineConsumptionService = Depends(get_consumption_service),
    current_user: User = Depends(get_current_user),
):
    invoice = service.get_invoice(invoice_id, current_user)
    return ActionResult.ok(MedicineConsumptionDetail.model_validate(invoice))


@router.delete("/{invoice_id}", response_model=ActionResult[None])
def delete_consumption_invoice(
    invoice_id: int,
    service: MedicineConsumptionService = Depends(get_consumption_service),
    current_user: User = Depends(require_roles(PRODUCER_ROLES)),
):
    service.delete_invoice(invoice_id, current_user)
    return ActionResult.ok()


@router.get("/{invoice_id}/items", response_model=ActionResult[List[MedicineConsumptionItemResponse]])
def list_consumption_items(
    invoice_id: int,
    service: MedicineConsumptionService = Depends(get_consumption_service),
    current_user: User = Depends(get_current_user),
):
    items = service.list_items(invoice_id, current_user)
    return ActionResult.ok([MedicineConsumptionItemResponse.model_validate(i) for i in items])


@router.post("/{invoice_id}/items", response_model=ActionResult[MedicineConsumptionItemResponse], status_code=201)
def create_consumption_item(
    invoice_id: int,
    data: MedicineConsumptionItemCreate,
    service: MedicineConsumptionService = Depends(get_consumption_service),
    current_user: User = Depends(require_roles(PRODUCER_ROLES)),
):
    item = service.create_item(invoice_id, data, current_user)
    return ActionResult.ok(MedicineConsumptionItemResponse.model_validate(item))


@router.delete("/items/{item_id}", response_model=ActionResult[None])
def delete_consumption_item(
    item_id: int,
    service: MedicineConsumptionService = Depends(get_consumption_service),
    current_user: User = Depends(require_roles(PRODUCER_ROLES)),
):
    service.delete_item(item_id, current_user)
    return ActionResult.ok()


@router.get("/{invoice_id}/expenses", response_model=ActionResult[List[MedicineConsumptionExpenseResponse]])
def list_consumption_expenses(
    invoice_id: int,
    service: MedicineConsumptionService = Depends(get_consumption_service),
    current_user: User = Depends(get_current_user),
):
    expenses = service.list_expenses(invoice_id, current_user)
    return ActionResult.ok([MedicineConsumptionExpenseResponse.model_validate(e) for e in expenses])


@router.post(
    "/{invoice_id}/expenses", response_model=ActionResult[MedicineConsumptionExpenseResponse], status_code=201
)
def create_consumption_expense(
    invoice_id: int,
    data: MedicineConsumptionExpenseCreate,
    service: MedicineConsumptionService = Depends(get_consumption_service),
    current_user: User = Depends(require_roles(PRODUCER_ROLES)),
):
    expense = service.create_expense(invoice_id, data, current_user)
    return ActionResult.ok(MedicineConsumptionExpenseResponse.model_validate(expense))


@router.delete("/expenses/{expense_id}", response_model=ActionResult[None])
def delete_consumption_expense(
    expense_id: int,
    service: MedicineConsumptionService = Depends(get_consumption_service),
    current_user: User = Depends(require_roles(PRODUCER_ROLES)),
):
    service.delete_expense(expense_id, current_user)
    return ActionResult.ok()
