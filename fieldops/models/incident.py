"""Pydantic models for Incidents."""
from typing import Literal, Optional

from pydantic import Field

from fieldops.models.base import ApplicationModel

IncidentType = Literal['Cut', 'Parallel', 'Damage', 'Node', 'Hydrant', 'Chamber', 'Other']

# Date-only or "T"-separated datetime; stored dates are compared as strings
ISO_DATE_PATTERN = r'^\d{4}-\d{2}-\d{2}(T\d{2}:\d{2}(:\d{2}(\.\d{1,6})?)?)?$'


class IncidentBase(ApplicationModel):
    """Base model for Incident."""
    date: str = Field(..., pattern=ISO_DATE_PATTERN, description="Incident date (ISO 8601)")
    type: IncidentType = Field(default='Other', description="Incident type")
    description: Optional[str] = Field(None, max_length=2000, description="Description")
    region_id: Optional[str] = Field(None, description="Region ID")
    engineer_id: Optional[str] = Field(None, description="Reporting engineer ID")
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    image_url: Optional[str] = Field(None, description="Photo URL")


class IncidentCreate(IncidentBase):
    """Model for creating a new incident."""
    pass


class IncidentUpdate(ApplicationModel):
    """Model for updating an existing incident."""
    date: Optional[str] = Field(None, pattern=ISO_DATE_PATTERN)
    type: Optional[IncidentType] = None
    description: Optional[str] = Field(None, max_length=2000)
    region_id: Optional[str] = None
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    image_url: Optional[str] = None
