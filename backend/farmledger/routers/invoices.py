"""
Invoices Router — Thin Controller
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from farmledger.database import get_db
from farmledger.dependencies import require_roles
from farmledger.models.user import User
from farmledger.schemas.common import ActionResult
from farmledger.schemas.invoice import (
    InvoiceCreate,
    InvoiceDetail,
    InvoiceExpenseCreate,
    InvoiceExpenseResponse,
    InvoiceItemCreate,
    InvoiceItemResponse,
    InvoiceItemUpdate,
    InvoiceResponse,
    InvoiceType,
    InvoiceUpdate,
)
from farmledger.services.invoice_service import InvoiceService

router = APIRouter(prefix="/invoices", tags=["Invoices"])

ADMIN_ONLY = ["admin"]
READ_ROLES = ["admin", "sub_admin"]


def get_invoice_service(db: Session = Depends(get_db)) -> InvoiceService:
    return InvoiceService(db)


@router.get("", response_model=ActionResult[List[InvoiceResponse]])
def list_invoices(
    invoice_type: Optional[InvoiceType] = None,
    warehouse_id: Optional[int] = None,
    client_id: Optional[int] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    service: InvoiceService = Depends(get_invoice_service),
    _: User = Depends(require_roles(READ_ROLES)),
):
    invoices = service.list_invoices(
        invoice_type=invoice_type,
        warehouse_id=warehouse_id,
        client_id=client_id,
        date_from=date_from,
        date_to=date_to,
    )
    return ActionResult.ok([InvoiceResponse.model_validate(i) for i in invoices])


@router.get("/{invoice_id}", response_model=ActionResult[InvoiceDetail])
def get_invoice(
    invoice_id: int,
    service: InvoiceService = Depends(get_invoice_service),
    _: User = Depends(require_roles(READ_ROLES)),
):
    return ActionResult.ok(InvoiceDetail.model_validate(service.get_invoice(invoice_id)))


@router.post("", response_model=ActionResult[InvoiceResponse], status_code=201)
def create_invoice(
    data: InvoiceCreate,
    service: InvoiceService = Depends(get_invoice_service),
    current_user: User = Depends(require_roles(ADMIN_ONLY)),
):
    return ActionResult.ok(InvoiceResponse.model_validate(service.create_invoice(data, current_user)))


@router.put("/{invoice_id}", response_model=ActionResult[InvoiceResponse])
def update_invoice(
    invoice_id: int,
    data: InvoiceUpdate,
    service: InvoiceService = Depends(get_invoice_service),
    _: User = Depends(require_roles(ADMIN_ONLY)),
):
    return ActionResult.ok(InvoiceResponse.model_validate(service.update_invoice(invoice_id, data)))


@router.delete("/{invoice_id}", response_model=ActionResult[None])
def delete_invoice(
    invoice_id: int,
    service: InvoiceService = Depends(get_invoice_service),
    current_user: User = Depends(require_roles(ADMIN_ONLY)),
):
    service.delete_invoice(invoice_id, current_user)
    return ActionResult.ok()


# ── Items ─────────────────────────────────────────────────────────────────────

@router.get("/{invoice_id}/items", response_model=ActionResult[List[InvoiceItemResponse]])
def list_items(
    invoice_id: int,
    service: InvoiceService = Depends(get_invoice_service),
    _: User = Depends(require_roles(READ_ROLES)),
):
    return ActionResult.ok([InvoiceItemResponse.model_validate(i) for i in service.list_items(invoice_id)])


@router.post("/{invoice_id}/items", response_model=ActionResult[InvoiceItemResponse], status_code=201)
def create_item(
    invoice_id: int,
    data: InvoiceItemCreate,
    service: InvoiceService = Depends(get_invoice_service),
    current_user: User = Depends(require_roles(ADMIN_ONLY)),
):
    return ActionResult.ok(InvoiceItemResponse.model_validate(service.create_item(invoice_id, data, current_user)))


@router.put("/items/{item_id}", response_model=ActionResult[InvoiceItemResponse])
def update_item(
    item_id: int,
    data: InvoiceItemUpdate,
    service: InvoiceService = Depends(get_invoice_service),
    current_user: User = Depends(require_roles(ADMIN_ONLY)),
):
    return ActionResult.ok(InvoiceItemResponse.model_validate(service.update_item(item_id, data, current_user)))


@router.delete("/items/{item_id}", response_model=ActionResult[None])
def delete_item(
    item_id: int,
    service: InvoiceService = Depends(get_invoice_service),
    current_user: User = Depends(require_roles(ADMIN_ONLY)),
):
    service.delete_item(item_id, current_user)
    return ActionResult.ok()


# ── Expenses ──────────────────────────────────────────────────────────────────

@router.get("/{invoice_id}/expenses", response_model=ActionResult[List[InvoiceExpenseResponse]])
def list_expenses(
    invoice_id: int,
    service: InvoiceService = Depends(get_invoice_service),
    _: User = Depends(require_roles(READ_ROLES)),
):
    return ActionResult.ok([InvoiceExpenseResponse.model_validate(e) for e in service.list_expenses(invoice_id)])


@router.post("/{invoice_id}/expenses", response_model=ActionResult[InvoiceExpenseResponse], status_code=201)
def create_expense(
    invoice_id: int,
    data: InvoiceExpenseCreate,
    service: InvoiceService = Depends(get_invoice_service),
    _: User = Depends(require_roles(ADMIN_ONLY)),
):
    return ActionResult.ok(InvoiceExpenseResponse.model_validate(service.create_expense(invoice_id, data)))


@router.delete("/expenses/{expense_id}", response_model=ActionResult[None])
def delete_expense(
    expense_id: int,
    service: InvoiceService = Depends(get_invoice_service),
    _: User = Depends(require_roles(ADMIN_ONLY)),
):
    service.delete_expense(expense_id)
    return ActionResult.ok()
