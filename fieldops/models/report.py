"""Pydantic models for daily work Reports."""
from typing import List, Optional

from pydantic import Field

from fieldops.models.base import ApplicationModel
from fieldops.models.incident import ISO_DATE_PATTERN


class ReportWorkerLink(ApplicationModel):
    """Worker present on a report."""
    worker_id: str = Field(..., description="Worker ID")
    hours_worked: Optional[float] = Field(None, ge=0, le=24)


class ReportEquipmentLink(ApplicationModel):
    """Equipment used on a report with the fuel it consumed."""
    equipment_id: str = Field(..., description="Equipment ID")
    fuel_amount: float = Field(default=0, ge=0, description="Fuel consumed")


class ReportBase(ApplicationModel):
    """Base model for Report."""
    date: str = Field(..., pattern=ISO_DATE_PATTERN, description="Report date (ISO 8601)")
    region_id: Optional[str] = Field(None, description="Region ID")
    engineer_id: Optional[str] = Field(None, description="Engineer ID")
    description: Optional[str] = Field(None, max_length=4000)
    materials_used: Optional[str] = Field(None, max_length=2000)
    materials_received: Optional[str] = Field(None, max_length=2000)


class ReportCreate(ReportBase):
    """Model for creating a report together with its worker and equipment links.

    Totals left empty are computed from the links.
    """
    total_fuel: Optional[float] = Field(None, ge=0)
    total_worker_salary: Optional[float] = Field(None, ge=0)
    workers: List[ReportWorkerLink] = Field(default=[])
    equipment: List[ReportEquipmentLink] = Field(default=[])


class ReportUpdate(ApplicationModel):
    """Model for updating an existing report's own fields."""
    date: Optional[str] = Field(None, pattern=ISO_DATE_PATTERN)
    region_id: Optional[str] = None
    description: Optional[str] = Field(None, max_length=4000)
    materials_used: Optional[str] = Field(None, max_length=2000)
    materials_received: Optional[str] = Field(None, max_length=2000)
    total_fuel: Optional[float] = Field(None, ge=0)
    total_worker_salary: Optional[float] = Field(None, ge=0)
