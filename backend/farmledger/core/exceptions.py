"""
Domain Exceptions

Services raise these; the global handler in ``farmledger.main`` turns every one
of them into the failure envelope ``{"success": false, "error": "..."}``.
Routers never catch them.
"""
from decimal import Decimal
from typing import Any, Dict, List, Optional

from fastapi import status


class FarmLedgerException(Exception):
    code = "FARMLEDGER_ERROR"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class UnauthorizedException(FarmLedgerException):
    code = "UNAUTHORIZED"
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class PermissionDeniedException(FarmLedgerException):
    code = "PERMISSION_DENIED"
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Unauthorized - Access denied"):
        super().__init__(message)


class ValidationException(FarmLedgerException):
    code = "VALIDATION_ERROR"
    status_code = status.HTTP_400_BAD_REQUEST


class EntityNotFoundException(FarmLedgerException):
    code = "NOT_FOUND"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str, entity_id: Any = None):
        message = f"{entity} not found" if entity_id is None else f"{entity} {entity_id} not found"
        super().__init__(message, {"entity": entity, "id": entity_id})


class DuplicateEntityException(FarmLedgerException):
    code = "DUPLICATE"
    status_code = status.HTTP_409_CONFLICT


class InsufficientStockException(FarmLedgerException):
    """Requested quantity exceeds ``current_balance``.

    ``shortages`` is the list shown to the operator, one entry per material:
    ``{"material_name": ..., "available": ..., "required": ...}``.
    """

    code = "INSUFFICIENT_STOCK"
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, shortages: List[Dict[str, Any]], message: Optional[str] = None):
        self.shortages = shortages
        if message is None:
            message = "; ".join(
                f"Insufficient stock for {s['material_name']}. "
                f"Available: {_fmt(s['available'])}, Required: {_fmt(s['required'])}"
                for s in shortages
            ) or "Insufficient stock"
        super().__init__(message, {"shortages": shortages})


class PersistenceException(FarmLedgerException):
    code = "PERSISTENCE_ERROR"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def _fmt(value: Any) -> str:
    if isinstance(value, Decimal):
        return format(value.normalize(), "f")
    return str(value)

