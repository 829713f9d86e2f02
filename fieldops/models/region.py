"""Pydantic models for Regions."""
from typing import Optional

from pydantic import Field

from fieldops.models.base import ApplicationModel


class RegionCreate(ApplicationModel):
    """Model for creating a new region."""
    name: str = Field(..., min_length=1, max_length=100, description="Region name")


class RegionUpdate(ApplicationModel):
    """Model for updating an existing region."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
