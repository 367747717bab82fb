from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator


def _clean(v: Optional[str], min_length: int = 1) -> str:
    if v is None:
        raise ValueError("Name cannot be null")
    v = v.strip()
    if len(v) < min_length:
        raise ValueError(f"Name must be at least {min_length} characters")
    return v


class UnitCreate(BaseModel):
    unit_name: str = Field(..., max_length=100)

    @field_validator("unit_name")
    @classmethod
    def validate_unit_name(cls, v: str) -> str:
        return _clean(v)


class UnitResponse(BaseModel):
    id: int
    unit_name: str
    created_at: datetime

    class Config:
        from_attributes = True


class MaterialNameCreate(BaseModel):
    material_name: str = Field(..., max_length=200)

    @field_validator("material_name")
    @classmethod
    def validate_material_name(cls, v: str) -> str:
        return _clean(v, min_length=2)


class MaterialNameResponse(BaseModel):
    id: int
    material_name: str
    created_at: datetime

    class Config:
        from_attributes = True


class MedicineCreate(BaseModel):
    name: str = Field(..., max_length=200)
    description: Optional[str] = None
    day_of_age: Optional[str] = Field(None, max_length=50)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _clean(v, min_length=2)


class MedicineUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = None
    day_of_age: Optional[str] = Field(None, max_length=50)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> str:
        return _clean(v, min_length=2)


class MedicineResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    day_of_age: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class ClientCreate(BaseModel):
    name: str = Field(..., max_length=200)
    type: Literal["customer", "supplier"] = "customer"
    phone: Optional[str] = Field(None, max_length=50)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _clean(v, min_length=2)


class ClientUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=200)
    type: Optional[Literal["customer", "supplier"]] = None
    phone: Optional[str] = Field(None, max_length=50)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> str:
        return _clean(v, min_length=2)

    @field_validator("type")
    @classmethod
    def validate_type(cls, v):
        if v is None:
            raise ValueError("Client type cannot be null")
        return v


class ClientResponse(BaseModel):
    id: int
    name: str
    type: str
    phone: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class ExpenseTypeCreate(BaseModel):
    name: str = Field(..., max_length=200)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _clean(v, min_length=2)


class ExpenseTypeResponse(BaseModel):
    id: int
    name: str
    created_at: datetime

    class Config:
        from_attributes = True
