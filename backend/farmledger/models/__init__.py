from farmledger.models.user import User
from farmledger.models.farm import Farm, Warehouse
from farmledger.models.catalog import MeasurementUnit, MaterialName, Medicine, Client, ExpenseType
from farmledger.models.material import Material
from farmledger.models.inventory_movement import InventoryMovement
from farmledger.models.invoice import Invoice, InvoiceItem, InvoiceExpense
from farmledger.models.manufacturing import ManufacturingInvoice, ManufacturingItem, ManufacturingExpense
from farmledger.models.daily_report import DailyReport
from farmledger.models.medicine_consumption import (
    MedicineConsumptionExpense,
    MedicineConsumptionInvoice,
    MedicineConsumptionItem,
)

__all__ = [
    "User",
    "Farm",
    "Warehouse",
    "MeasurementUnit",
    "MaterialName",
    "Medicine",
    "Client",
    "ExpenseType",
    "Material",
    "InventoryMovement",
    "Invoice",
    "InvoiceItem",
    "InvoiceExpense",
    "ManufacturingInvoice",
    "ManufacturingItem",
    "ManufacturingExpense",
    "MedicineConsumptionInvoice",
    "MedicineConsumptionItem",
    "MedicineConsumptionExpense",
    "DailyReport",
]
