# Repository Layer — Data Access
from farmledger.repositories.base import BaseRepository
from farmledger.repositories.catalog_repository import (
    ClientRepository,
    ExpenseTypeRepository,
    MaterialNameRepository,
    MeasurementUnitRepository,
    MedicineRepository,
)
from farmledger.repositories.farm_repository import FarmRepository, UserRepository, WarehouseRepository
from farmledger.repositories.invoice_repository import (
    InvoiceExpenseRepository,
    InvoiceItemRepository,
    InvoiceRepository,
)
from farmledger.repositories.manufacturing_repository import (
    ManufacturingExpenseRepository,
    ManufacturingInvoiceRepository,
    ManufacturingItemRepository,
)
from farmledger.repositories.material_repository import InventoryMovementRepository, MaterialRepository
from farmledger.repositories.medicine_consumption_repository import (
    MedicineConsumptionItemRepository,
    MedicineConsumptionRepository,
)

__all__ = [
    "BaseRepository",
    "ClientRepository",
    "ExpenseTypeRepository",
    "MaterialNameRepository",
    "MeasurementUnitRepository",
    "MedicineRepository",
    "FarmRepository",
    "UserRepository",
    "WarehouseRepository",
    "InvoiceRepository",
    "InvoiceItemRepository",
    "InvoiceExpenseRepository",
    "ManufacturingInvoiceRepository",
    "ManufacturingItemRepository",
    "ManufacturingExpenseRepository",
    "MaterialRepository",
    "InventoryMovementRepository",
    "MedicineConsumptionRepository",
    "MedicineConsumptionItemRepository",
]
