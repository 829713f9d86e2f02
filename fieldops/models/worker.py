"""Pydantic models for Workers."""
from typing import Optional

from pydantic import Field

from fieldops.models.base import ApplicationModel


class WorkerBase(ApplicationModel):
    """Base model for Worker."""
    full_name: str = Field(..., min_length=2, max_length=100, description="Full name")
    personal_id: str = Field(..., min_length=1, max_length=50, description="Personal ID number")
    daily_salary: float = Field(default=0, ge=0, description="Daily salary")
    region_id: Optional[str] = Field(None, description="Region ID")


class WorkerCreate(WorkerBase):
    """Model for creating a new worker."""
    pass


class WorkerUpdate(ApplicationModel):
    """Model for updating an existing worker."""
    full_name: Optional[str] = Field(None, min_length=2, max_length=100)
    personal_id: Optional[str] = Field(None, min_length=1, max_length=50)
    daily_salary: Optional[float] = Field(None, ge=0)
    region_id: Optional[str] = None
