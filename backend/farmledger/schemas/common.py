from decimal import Decimal
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class Shortage(BaseModel):
    material_name: str
    available: Decimal
    required: Decimal


class ActionResult(BaseModel, Generic[T]):
    """Envelope returned by every endpoint."""

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    warnings: List[str] = Field(default_factory=list)
    shortages: Optional[List[Shortage]] = None

    @classmethod
    def ok(cls, data: Optional[T] = None, warnings: Optional[List[str]] = None) -> "ActionResult[T]":
        return cls(success=True, data=data, warnings=warnings or [])
