from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


def _clean_name(v: Optional[str]) -> str:
    if v is None:
        raise ValueError("Name cannot be null")
    v = v.strip()
    if len(v) < 2:
        raise ValueError("Name must be at least 2 characters")
    return v


class FarmCreate(BaseModel):
    name: str = Field(..., max_length=200)
    location: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    user_id: Optional[int] = None
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _clean_name(v)


class FarmUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=200)
    location: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    user_id: Optional[int] = None
    is_active: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> str:
        return _clean_name(v)

    @field_validator("is_active")
    @classmethod
    def validate_is_active(cls, v: Optional[bool]) -> bool:
        if v is None:
            raise ValueError("is_active cannot be null")
        return v


class FarmResponse(BaseModel):
    id: int
    name: str
    location: Optional[str] = None
    description: Optional[str] = None
    user_id: Optional[int] = None
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class WarehouseCreate(BaseModel):
    name: str = Field(..., max_length=200)
    farm_id: int

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _clean_name(v)


class WarehouseUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=200)
    farm_id: Optional[int] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> str:
        return _clean_name(v)


class WarehouseResponse(BaseModel):
    id: int
    name: str
    farm_id: Optional[int] = None
    farm_name: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
