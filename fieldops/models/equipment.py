"""Pydantic models for Equipment."""
from typing import Literal, Optional

from pydantic import Field

from fieldops.models.base import ApplicationModel

FuelType = Literal['diesel', 'gasoline']


class EquipmentBase(ApplicationModel):
    """Base model for Equipment."""
    type: str = Field(..., min_length=1, max_length=100, description="Equipment type")
    license_plate: str = Field(..., min_length=1, max_length=20, description="License plate")
    operator_name: Optional[str] = Field(None, max_length=100, description="Operator full name")
    operator_id: Optional[str] = Field(None, max_length=50, description="Operator personal ID")
    daily_salary: float = Field(default=0, ge=0, description="Operator daily salary")
    fuel_type: FuelType = Field(default='diesel', description="Fuel type")
    region_id: Optional[str] = Field(None, description="Region ID")


class EquipmentCreate(EquipmentBase):
    """Model for creating new equipment."""
    pass


class EquipmentUpdate(ApplicationModel):
    """Model for updating existing equipment."""
    type: Optional[str] = Field(None, min_length=1, max_length=100)
    license_plate: Optional[str] = Field(None, min_length=1, max_length=20)
    operator_name: Optional[str] = Field(None, max_length=100)
    operator_id: Optional[str] = Field(None, max_length=50)
    daily_salary: Optional[float] = Field(None, ge=0)
    fuel_type: Optional[FuelType] = None
    region_id: Optional[str] = None
