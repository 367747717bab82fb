"""
Manufacturing Router — Thin Controller
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from farmledger.database import get_db
from farmledger.dependencies import get_current_user, require_roles
from farmledger.models.user import User
from farmledger.schemas.common import ActionResult
from farmledger.schemas.manufacturing import (
    ManufacturingExpenseCreate,
    ManufacturingExpenseResponse,
    ManufacturingInvoiceCreate,
    ManufacturingInvoiceDetail,
    ManufacturingInvoiceResponse,
    ManufacturingItemCreate,
    ManufacturingItemResponse,
    ManufacturingRunCreate,
)
from farmledger.services.manufacturing_service import ManufacturingService

router = APIRouter(prefix="/manufacturing", tags=["Manufacturing"])

ADMIN_ONLY = ["admin"]
PRODUCER_ROLES = ["admin", "farmer"]


def get_manufacturing_service(db: Session = Depends(get_db)) -> ManufacturingService:
    return ManufacturingService(db)


@router.get("", response_model=ActionResult[List[ManufacturingInvoiceResponse]])
def list_manufacturing_invoices(
    warehouse_id: Optional[int] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    service: ManufacturingService = Depends(get_manufacturing_service),
    current_user: User = Depends(get_current_user),
):
    invoices = service.list_invoices(current_user, warehouse_id=warehouse_id, date_from=date_from, date_to=date_to)
    return ActionResult.ok([ManufacturingInvoiceResponse.model_validate(i) for i in invoices])


@router.post("", response_model=ActionResult[ManufacturingInvoiceResponse], status_code=201)
def create_manufacturing_invoice(
    data: ManufacturingInvoiceCreate,
    service: ManufacturingService = Depends(get_manufacturing_service),
    current_user: User = Depends(require_roles(PRODUCER_ROLES)),
):
    invoice = service.create_invoice(data, current_user)
    return ActionResult.ok(ManufacturingInvoiceResponse.model_validate(invoice))


@router.post("/runs", response_model=ActionResult[ManufacturingInvoiceDetail], status_code=201)
def create_manufacturing_run(
    data: ManufacturingRunCreate,
    service: ManufacturingService = Depends(get_manufacturing_service),
    current_user: User = Depends(require_roles(PRODUCER_ROLES)),
):
    invoice, warnings = service.create_manufacturing_run(data, current_user)
    return ActionResult.ok(ManufacturingInvoiceDetail.model_validate(invoice), warnings=warnings)


@router.get("/{invoice_id}", response_model=ActionResult[ManufacturingInvoiceDetail])
def get_manufacturing_invoice(
    invoice_id: int,
    service: ManufacturingService = Depends(get_manufacturing_service),
    current_user: User = Depends(get_current_user),
):
    invoice = service.get_invoice(invoice_id, current_user)
    return ActionResult.ok(ManufacturingInvoiceDetail.model_validate(invoice))


@router.delete("/{invoice_id}", response_model=ActionResult[None])
def delete_manufacturing_invoice(
    invoice_id: int,
    service: ManufacturingService = Depends(get_manufacturing_service),
    current_user: User = Depends(require_roles(ADMIN_ONLY)),
):
    service.delete_invoice(invoice_id, current_user)
    return ActionResult.ok()


@router.post("/{invoice_id}/rollback", response_model=ActionResult[None])
def rollback_manufacturing_invoice(
    invoice_id: int,
    service: ManufacturingService = Depends(get_manufacturing_service),
    _: User = Depends(require_roles(ADMIN_ONLY)),
):
    service.rollback_invoice(invoice_id)
    return ActionResult.ok()


@router.post("/{invoice_id}/output", response_model=ActionResult[ManufacturingInvoiceResponse])
def apply_manufacturing_output(
    invoice_id: int,
    service: ManufacturingService = Depends(get_manufacturing_service),
    current_user: User = Depends(require_roles(PRODUCER_ROLES)),
):
    invoice = service.apply_output(invoice_id, current_user)
    return ActionResult.ok(ManufacturingInvoiceResponse.model_validate(invoice))


# ── Items ─────────────────────────────────────────────────────────────────────

@router.get("/{invoice_id}/items", response_model=ActionResult[List[ManufacturingItemResponse]])
def list_manufacturing_items(
    invoice_id: int,
    service: ManufacturingService = Depends(get_manufacturing_service),
    current_user: User = Depends(get_current_user),
):
    items = service.list_items(invoice_id, current_user)
    return ActionResult.ok([ManufacturingItemResponse.model_validate(i) for i in items])


@router.post("/{invoice_id}/items", response_model=ActionResult[ManufacturingItemResponse], status_code=201)
def create_manufacturing_item(
    invoice_id: int,
    data: ManufacturingItemCreate,
    service: ManufacturingService = Depends(get_manufacturing_service),
    current_user: User = Depends(require_roles(PRODUCER_ROLES)),
):
    item = service.create_item(invoice_id, data, current_user)
    return ActionResult.ok(ManufacturingItemResponse.model_validate(item))


@router.delete("/items/{item_id}", response_model=ActionResult[None])
def delete_manufacturing_item(
    item_id: int,
    service: ManufacturingService = Depends(get_manufacturing_service),
    current_user: User = Depends(require_roles(PRODUCER_ROLES)),
):
    service.delete_item(item_id, current_user)
    return ActionResult.ok()


# ── Expenses ──────────────────────────────────────────────────────────────────

@router.get("/{invoice_id}/expenses", response_model=ActionResult[List[ManufacturingExpenseResponse]])
def list_manufacturing_expenses(
    invoice_id: int,
    service: ManufacturingService = Depends(get_manufacturing_service),
    current_user: User = Depends(get_current_user),
):
    expenses = service.list_expenses(invoice_id, current_user)
    return ActionResult.ok([ManufacturingExpenseResponse.model_validate(e) for e in expenses])


@router.post("/{invoice_id}/expenses", response_model=ActionResult[ManufacturingExpenseResponse], status_code=201)
def create_manufacturing_expense(
    invoice_id: int,
    data: ManufacturingExpenseCreate,
    service: ManufacturingService = Depends(get_manufacturing_service),
    current_user: User = Depends(require_roles(PRODUCER_ROLES)),
):
    expense = service.create_expense(invoice_id, data, current_user)
    return ActionResult.ok(ManufacturingExpenseResponse.model_validate(expense))


@router.delete("/expenses/{expense_id}", response_model=ActionResult[None])
def delete_manufacturing_expense(
    expense_id: int,
    service: ManufacturingService = Depends(get_manufacturing_service),
    current_user: User = Depends(require_roles(PRODUCER_ROLES)),
):
    service.delete_expense(expense_id, current_user)
    return ActionResult.ok()
